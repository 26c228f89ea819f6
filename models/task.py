# planner/models/task.py
from typing import Optional
from datetime import datetime

from sqlmodel import SQLModel, Field

from datetime_utils import utc_now


class Task(SQLModel, table=True):
    __tablename__ = "tasks"

    id: Optional[int] = Field(default=None, primary_key=True)
    title: str
    urgent: bool = False
    important: bool = False
    completed: bool = False
    notes: Optional[str] = None
    parent_id: Optional[int] = Field(default=None, foreign_key="tasks.id", index=True)
    created_at: datetime = Field(default_factory=utc_now, index=True)
