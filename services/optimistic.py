from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Optional

from services.errors import StoreError
from services.logs import ensure_logger


@dataclass
class OptimisticUpdate:
    """Apply a local change, confirm it remotely, compensate on failure.

    ``apply`` and ``revert`` touch in-memory state only; ``attempt`` performs
    the remote call. A :class:`StoreError` from ``attempt`` triggers ``revert``
    and is re-raised, so the caller still surfaces the message.
    """

    apply: Callable[[], None]
    attempt: Callable[[], Any]
    revert: Callable[[], None]
    label: str = "update"
    on_reverted: Optional[Callable[[StoreError], None]] = None

    state: str = "idle"  # idle / pending / applied / reverted

    def run(self) -> Any:
        logger = ensure_logger("planner.optimistic")
        self.apply()
        self.state = "pending"
        try:
            result = self.attempt()
        except StoreError as exc:
            self.revert()
            self.state = "reverted"
            logger.warning("Rolled back optimistic %s: %s", self.label, exc.message)
            if self.on_reverted is not None:
                self.on_reverted(exc)
            raise
        self.state = "applied"
        return result


__all__ = ["OptimisticUpdate"]
