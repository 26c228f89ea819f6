from datetime import datetime, timedelta, timezone
from pathlib import Path
import sys
from typing import Dict, List, Optional

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from models.task import Task
from services.errors import RemoteUnavailable
from services.task_store import TaskStore


BASE_TIME = datetime(2024, 1, 1, 9, 0, tzinfo=timezone.utc)


def _clone(task: Task) -> Task:
    return Task(
        id=task.id,
        title=task.title,
        urgent=task.urgent,
        important=task.important,
        completed=task.completed,
        notes=task.notes,
        parent_id=task.parent_id,
        created_at=task.created_at,
    )


class FakeTable:
    """In-memory stand-in for the remote ``tasks`` table.

    Rows are copied on the way in and out so the store never shares objects
    with the "remote" side. ``fail`` names operations that should raise.
    """

    def __init__(self, rows: Optional[List[Dict]] = None):
        self.rows: Dict[int, Task] = {}
        self.calls: List[tuple] = []
        self.deleted: List[int] = []
        self.fail: set = set()
        for row in rows or []:
            self._put(dict(row))

    def _put(self, fields: Dict) -> Task:
        task_id = fields.pop("id", None) or (max(self.rows, default=0) + 1)
        fields.setdefault("title", f"Task {task_id}")
        fields.setdefault("created_at", BASE_TIME + timedelta(minutes=task_id))
        task = Task(id=task_id, **fields)
        self.rows[task_id] = task
        return task

    def _check(self, op: str):
        self.calls.append((op,))
        if op in self.fail:
            raise RemoteUnavailable(f"{op} failed")

    def select_children(self, parent_id):
        self._check("select_children")
        rows = [t for t in self.rows.values() if t.parent_id == parent_id]
        return [_clone(t) for t in sorted(rows, key=lambda t: (t.created_at, t.id))]

    def select_all(self):
        self._check("select_all")
        return [_clone(t) for t in sorted(self.rows.values(), key=lambda t: (t.created_at, t.id))]

    def insert(self, **fields):
        self._check("insert")
        return _clone(self._put(fields))

    def update(self, task_id, **fields):
        self._check("update")
        task = self.rows[task_id]
        for key, value in fields.items():
            setattr(task, key, value)
        return _clone(task)

    def delete(self, task_id):
        self._check("delete")
        self.deleted.append(task_id)
        self.rows.pop(task_id, None)

    def ops(self, name: str) -> int:
        return sum(1 for call in self.calls if call[0] == name)


@pytest.fixture()
def table():
    return FakeTable(
        [
            {"id": 1, "title": "Launch site", "urgent": True, "important": True},
            {"id": 2, "title": "Write copy", "urgent": True, "important": True, "parent_id": 1},
            {"id": 3, "title": "Proofread", "urgent": False, "important": True, "parent_id": 2},
            {"id": 4, "title": "Pick fonts", "urgent": False, "important": False, "parent_id": 1},
            {"id": 5, "title": "Inbox zero", "urgent": True, "important": False},
        ]
    )


@pytest.fixture()
def store(table):
    s = TaskStore(table)
    s.load()
    return s


@pytest.fixture()
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)

    def factory():
        return Session(engine)

    factory.engine = engine
    return factory
