"""Single point of truth for reading and mutating tasks.

The store keeps two views of the data:

* ``hierarchy``: the breadcrumb trail of levels the user navigated through;
  the last level is what the matrix shows.
* ``all_tasks``: every task linked into a forest, rebuilt wholesale after
  each mutation for the overview, search and analytics.

Every mutation except :meth:`TaskStore.toggle_completion` is applied locally
only after the table confirms it. Completion toggles are optimistic and are
rolled back when the remote update fails.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Set

from core.quadrants import quadrant_flags, split_by_quadrant
from core.settings import UI
from models.task import Task
from services import task_tree
from services.errors import StoreError, ValidationRejected
from services.logs import ensure_logger
from services.optimistic import OptimisticUpdate
from services.task_table import TaskTable
from services.task_tree import Analytics, SubtaskStats, TaskNode


_CURRENT_LEVEL = object()


@dataclass
class HierarchyLevel:
    id: Optional[int]
    title: str
    tasks: List[Task] = field(default_factory=list)


class TaskStore:
    EVENTS = ("changed", "tree_changed", "celebrate", "error")

    def __init__(
        self,
        table: TaskTable,
        *,
        home_title: str = UI.matrix.home_title,
        max_title_length: int = UI.matrix.title_max_length,
    ):
        self.table = table
        self.home_title = home_title
        self.max_title_length = max_title_length
        self.hierarchy: List[HierarchyLevel] = [HierarchyLevel(None, home_title)]
        self.all_tasks: List[TaskNode] = []
        self.open_task: Optional[Task] = None
        self.loading = False
        self.loaded = False
        self.last_error: Optional[str] = None
        self.logger = ensure_logger("planner.store")
        self._listeners: Dict[str, Set[Callable]] = {event: set() for event in self.EVENTS}

    # ---------- events ----------
    def subscribe(self, event: str, callback: Callable) -> None:
        if event not in self._listeners:
            raise ValueError(f"Unsupported event: {event}")
        self._listeners[event].add(callback)

    def unsubscribe(self, event: str, callback: Callable) -> None:
        if event not in self._listeners:
            return
        self._listeners[event].discard(callback)

    def _emit(self, event: str, *args: Any) -> None:
        for listener in list(self._listeners.get(event, [])):
            try:
                listener(*args)
            except Exception:
                self.logger.exception("Listener for %r failed", event)

    # ---------- remote calls ----------
    def _call(self, action: str, fn: Callable, *args, **kwargs):
        try:
            result = fn(*args, **kwargs)
        except StoreError as exc:
            self.last_error = exc.message
            self.logger.error("%s failed: %s", action, exc.message)
            raise
        self.last_error = None
        return result

    def _check_title(self, title: str) -> None:
        if len(title) > self.max_title_length:
            self.last_error = f"Titles are limited to {self.max_title_length} characters."
            raise ValidationRejected(self.last_error)

    def _refresh_tree(self) -> None:
        try:
            self.fetch_all()
        except StoreError:
            # the mutation itself succeeded; the overview catches up on the next refresh
            self.logger.warning("Tree refresh failed; keeping the previous snapshot")

    # ---------- views ----------
    @property
    def current_level(self) -> HierarchyLevel:
        return self.hierarchy[-1]

    @property
    def current_tasks(self) -> List[Task]:
        return self.current_level.tasks

    def tasks_by_quadrant(self) -> Dict[str, List[Task]]:
        return split_by_quadrant(self.current_tasks)

    def breadcrumbs(self) -> List[tuple[int, str]]:
        return [(index, level.title) for index, level in enumerate(self.hierarchy)]

    def _local_copies(self, task_id: int, extra: Optional[Task] = None) -> List[Task]:
        copies: List[Task] = []
        candidates = [extra, *self.current_tasks, self.open_task]
        for candidate in candidates:
            if candidate is None or candidate.id != task_id:
                continue
            if any(candidate is seen for seen in copies):
                continue
            copies.append(candidate)
        return copies

    # ---------- reads ----------
    def fetch_children(self, parent_id: Optional[int]) -> List[Task]:
        return self._call("Loading tasks", self.table.select_children, parent_id)

    def fetch_all(self) -> List[TaskNode]:
        rows = self._call("Loading the task tree", self.table.select_all)
        self.all_tasks = task_tree.build_forest(rows)
        self._emit("tree_changed", self.all_tasks)
        return self.all_tasks

    def load(self) -> None:
        """Initial load: root tasks for the home level plus the full tree."""
        self.loading = True
        try:
            roots = self.fetch_children(None)
            self.hierarchy = [HierarchyLevel(None, self.home_title, roots)]
            self.fetch_all()
            self.loaded = True
        finally:
            self.loading = False
        self._emit("changed")

    def refresh_current_level(self) -> List[Task]:
        level = self.current_level
        level.tasks = self.fetch_children(level.id)
        self._refresh_tree()
        self._emit("changed")
        return level.tasks

    # ---------- mutations ----------
    def create_task(
        self,
        title: str,
        urgent: bool,
        important: bool,
        parent_id: Any = _CURRENT_LEVEL,
    ) -> Optional[Task]:
        title = (title or "").strip()
        if not title:
            return None
        self._check_title(title)
        if parent_id is _CURRENT_LEVEL:
            parent_id = self.current_level.id
        task = self._call(
            "Creating a task",
            self.table.insert,
            title=title,
            urgent=bool(urgent),
            important=bool(important),
            parent_id=parent_id,
            completed=False,
        )
        self.logger.debug("Created task %s under %s", task.id, parent_id)
        if task.parent_id == self.current_level.id:
            self.current_level.tasks.append(task)
        self._refresh_tree()
        self._emit("changed")
        return task

    def add_task_to_quadrant(self, title: str, quadrant: str) -> Optional[Task]:
        urgent, important = quadrant_flags(quadrant)
        return self.create_task(title, urgent, important)

    def rename_task(self, task_id: int, new_title: str) -> None:
        title = (new_title or "").strip()
        if not title:
            return
        self._check_title(title)
        self._call("Renaming a task", self.table.update, task_id, title=title)
        for task in self._local_copies(task_id):
            task.title = title
        self.logger.debug("Renamed task %s", task_id)
        self._emit("changed")

    def edit_note(self, task_id: int, new_note: Optional[str]) -> None:
        note = new_note if (new_note or "").strip() else None
        self._call("Saving a note", self.table.update, task_id, notes=note)
        for task in self._local_copies(task_id):
            task.notes = note
        self.logger.debug("Updated note of task %s", task_id)
        self._emit("changed")

    def move_task(self, task_id: int, urgent: bool, important: bool) -> None:
        self._call(
            "Moving a task",
            self.table.update,
            task_id,
            urgent=bool(urgent),
            important=bool(important),
        )
        for task in self._local_copies(task_id):
            task.urgent = bool(urgent)
            task.important = bool(important)
        self.logger.debug("Moved task %s to urgent=%s important=%s", task_id, urgent, important)
        self._refresh_tree()
        self._emit("changed")

    def toggle_completion(self, task: Task) -> None:
        copies = self._local_copies(task.id, extra=task)
        previous = bool(task.completed)
        target = not previous

        def apply() -> None:
            for copy in copies:
                copy.completed = target
            if target:
                self._emit("celebrate", task)
            self._emit("changed")

        def revert() -> None:
            for copy in copies:
                copy.completed = previous
            self._emit("changed")

        OptimisticUpdate(
            apply=apply,
            attempt=lambda: self._call(
                "Updating completion", self.table.update, task.id, completed=target
            ),
            revert=revert,
            label=f"completion of task {task.id}",
            on_reverted=lambda exc: self._emit("error", exc.message),
        ).run()
        self.logger.debug("Task %s completed=%s", task.id, target)
        self._refresh_tree()

    def _collect_descendants(self, task_id: int, seen: Optional[Set[int]] = None) -> List[int]:
        """Descendant ids in delete order: every child precedes its parent."""
        seen = {task_id} if seen is None else seen
        ordered: List[int] = []
        for child in self.fetch_children(task_id):
            if child.id in seen:
                continue
            seen.add(child.id)
            ordered.extend(self._collect_descendants(child.id, seen))
            ordered.append(child.id)
        return ordered

    def delete_task_cascade(self, task_id: int) -> None:
        try:
            doomed = self._collect_descendants(task_id)
            for child_id in doomed:
                self._call("Deleting a subtask", self.table.delete, child_id)
            self._call("Deleting a task", self.table.delete, task_id)
        except StoreError:
            # some subtasks may already be gone remotely
            self._refresh_tree()
            raise
        removed = {task_id, *doomed}
        level = self.current_level
        level.tasks = [t for t in level.tasks if t.id not in removed]
        if self.open_task is not None and self.open_task.id in removed:
            self.open_task = None
        self.logger.debug("Deleted task %s with %d descendants", task_id, len(doomed))
        self._refresh_tree()
        self._emit("changed")

    # ---------- navigation ----------
    def navigate_into(self, task: Task) -> None:
        children = self.fetch_children(task.id)
        self.hierarchy.append(HierarchyLevel(task.id, task.title, children))
        self._emit("changed")

    def navigate_back(self) -> None:
        if len(self.hierarchy) > 1:
            self.hierarchy = self.hierarchy[:-1]
            self._emit("changed")

    def navigate_to_breadcrumb(self, index: int) -> None:
        if 0 <= index < len(self.hierarchy):
            self.hierarchy = self.hierarchy[: index + 1]
            self._emit("changed")

    def navigate_home(self) -> None:
        self.hierarchy = self.hierarchy[:1]
        self._emit("changed")

    # ---------- details view ----------
    def open_details(self, task: Task) -> None:
        self.open_task = task
        self._emit("changed")

    def close_details(self) -> None:
        self.open_task = None
        self._emit("changed")

    # ---------- derived data ----------
    def subtask_stats(self, task_id: int) -> SubtaskStats:
        return task_tree.subtask_stats(task_tree.find(self.all_tasks, task_id))

    def search(self, query: str) -> List[Task]:
        return task_tree.search(self.all_tasks, query)

    def analytics(self) -> Analytics:
        return task_tree.analytics(self.all_tasks)


__all__ = ["HierarchyLevel", "TaskStore"]
