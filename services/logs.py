from __future__ import annotations
import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from core.settings import LOGGING


LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def ensure_logger(name: str = "planner") -> logging.Logger:
    """Return a ``planner.*`` logger; the rotating file handler lives on the root ``planner`` logger."""
    root = logging.getLogger("planner")
    if not root.handlers:
        path = Path(LOGGING.path)
        path.parent.mkdir(parents=True, exist_ok=True)
        handler = RotatingFileHandler(
            path,
            maxBytes=LOGGING.max_bytes,
            backupCount=LOGGING.backup_count,
            encoding="utf-8",
        )
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)
        root.setLevel(getattr(logging, LOGGING.level, logging.INFO))
    if name == "planner" or name.startswith("planner."):
        return logging.getLogger(name)
    return logging.getLogger(f"planner.{name}")


def read_log_tail(lines: int = 100, path: str | Path | None = None) -> str:
    target = Path(path or LOGGING.path)
    try:
        with open(target, "r", encoding="utf-8") as fh:
            content = fh.readlines()
    except FileNotFoundError:
        return "The log has not been created yet."
    content = [line.rstrip("\n") for line in content[-lines:]]
    return "\n".join(content)


__all__ = ["LOG_FORMAT", "ensure_logger", "read_log_tail"]
