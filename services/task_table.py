"""Table-shaped persistence for tasks."""
from __future__ import annotations

from contextlib import contextmanager
from typing import Callable, Iterator, List, Optional, Protocol

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from models.task import Task
from services.errors import InconsistentState, RemoteUnavailable
from services.logs import ensure_logger
from storage.db import get_session


TASK_FIELDS = ("title", "urgent", "important", "completed", "notes", "parent_id", "created_at")


class TaskTable(Protocol):
    """The narrow interface the task store consumes."""

    def select_children(self, parent_id: Optional[int]) -> List[Task]:
        ...

    def select_all(self) -> List[Task]:
        ...

    def insert(self, **fields) -> Task:
        ...

    def update(self, task_id: int, **fields) -> Task:
        ...

    def delete(self, task_id: int) -> None:
        ...


class SqlTaskTable:
    """``tasks`` table behind a SQLModel session factory."""

    def __init__(self, session_factory: Callable[[], Session] = get_session):
        self._session_factory = session_factory
        self.logger = ensure_logger("planner.table")

    @contextmanager
    def _remote(self, action: str) -> Iterator[Session]:
        try:
            with self._session_factory() as session:
                yield session
        except SQLAlchemyError as exc:
            self.logger.error("%s failed: %s", action, exc)
            raise RemoteUnavailable(f"Could not {action}. Please try again.", cause=exc) from exc

    def select_children(self, parent_id: Optional[int]) -> List[Task]:
        with self._remote("load tasks") as session:
            stmt = select(Task)
            if parent_id is None:
                stmt = stmt.where(Task.parent_id == None)  # noqa: E711
            else:
                stmt = stmt.where(Task.parent_id == parent_id)
            stmt = stmt.order_by(Task.created_at.asc(), Task.id.asc())
            return list(session.exec(stmt))

    def select_all(self) -> List[Task]:
        with self._remote("load tasks") as session:
            stmt = select(Task).order_by(Task.created_at.asc(), Task.id.asc())
            return list(session.exec(stmt))

    def insert(self, **fields) -> Task:
        values = {key: value for key, value in fields.items() if key in TASK_FIELDS}
        with self._remote("add the task") as session:
            task = Task(**values)
            session.add(task)
            session.commit()
            session.refresh(task)
            return task

    def update(self, task_id: int, **fields) -> Task:
        with self._remote("save the task") as session:
            obj = session.get(Task, task_id)
            if obj is None:
                raise InconsistentState("The task no longer exists.")
            for key, value in fields.items():
                if key in TASK_FIELDS:
                    setattr(obj, key, value)
            session.add(obj)
            session.commit()
            session.refresh(obj)
            return obj

    def delete(self, task_id: int) -> None:
        with self._remote("delete the task") as session:
            obj = session.get(Task, task_id)
            if obj is not None:
                session.delete(obj)
                session.commit()


__all__ = ["SqlTaskTable", "TaskTable", "TASK_FIELDS"]
