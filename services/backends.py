from __future__ import annotations

from typing import Any, Optional

from core.settings import STORE
from services.logs import ensure_logger
from services.task_table import SqlTaskTable, TaskTable


def create_task_table(backend: Optional[str] = None, *, auth: Any = None) -> TaskTable:
    """Build the task table selected by ``PLANNER_STORE_BACKEND``.

    ``sql`` talks to ``PLANNER_DATABASE_URL``; ``appdata`` and ``json`` keep the
    whole tree as one JSON blob in Google Drive or in a local file.
    """
    logger = ensure_logger("planner.backends")
    kind = (backend or STORE.backend).lower()

    if kind == "appdata":
        from services.appdata import AppDataBlobStore
        from services.google_auth import GoogleAuth
        from services.kv_tasks import KvTaskTable

        auth = auth or GoogleAuth()
        if hasattr(auth, "ensure_credentials"):
            auth.ensure_credentials()
        logger.info("Using Google Drive appData task storage")
        return KvTaskTable(AppDataBlobStore(auth))

    if kind == "json":
        from services.kv_tasks import JsonFileBlobStore, KvTaskTable

        logger.info("Using local JSON task storage at %s", STORE.blob_path)
        return KvTaskTable(JsonFileBlobStore(STORE.blob_path))

    from storage.db import init_db

    init_db()
    logger.info("Using SQL task storage")
    return SqlTaskTable()


__all__ = ["create_task_table"]
