"""ORM models exposed by the Planner application."""
from .task import Task

__all__ = ["Task"]
