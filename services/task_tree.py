"""Client-side task forest built from flat rows linked by ``parent_id``."""
from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Optional

from core.quadrants import QUADRANTS, quadrant_of
from models.task import Task


@dataclass
class TaskNode:
    task: Task
    children: List["TaskNode"] = field(default_factory=list)

    @property
    def id(self) -> Optional[int]:
        return self.task.id


@dataclass
class SubtaskStats:
    """Read-only counts shown as badges next to a task."""

    total: int = 0
    completed: int = 0
    by_quadrant: Dict[str, int] = field(default_factory=lambda: {label: 0 for label in QUADRANTS})

    @property
    def open(self) -> int:
        return self.total - self.completed


@dataclass
class Analytics:
    total: int = 0
    completed: int = 0
    roots: int = 0
    max_depth: int = 0
    per_quadrant: Dict[str, int] = field(default_factory=lambda: {label: 0 for label in QUADRANTS})
    completed_per_quadrant: Dict[str, int] = field(
        default_factory=lambda: {label: 0 for label in QUADRANTS}
    )

    @property
    def completion_rate(self) -> float:
        if not self.total:
            return 0.0
        return self.completed / self.total


def children_index(tasks: Iterable[Task]) -> Dict[Optional[int], List[Task]]:
    """Group tasks by ``parent_id``; orphans are filed under ``None``."""
    rows = list(tasks)
    known = {t.id for t in rows}
    index: Dict[Optional[int], List[Task]] = defaultdict(list)
    for task in rows:
        parent = task.parent_id if task.parent_id in known else None
        index[parent].append(task)
    return index


def build_forest(tasks: Iterable[Task]) -> List[TaskNode]:
    """Link rows into a forest; every row ends up in it exactly once.

    Rows stuck in a ``parent_id`` cycle are unreachable from the roots and
    are promoted to roots in input order.
    """
    rows = list(tasks)
    index = children_index(rows)

    def _link(task: Task, seen: set) -> TaskNode:
        seen.add(task.id)
        node = TaskNode(task)
        for child in index.get(task.id, []):
            if child.id not in seen:
                node.children.append(_link(child, seen))
        return node

    seen: set = set()
    forest = [_link(task, seen) for task in index.get(None, [])]
    for task in rows:
        if task.id not in seen:
            forest.append(_link(task, seen))
    return forest


def walk(forest: Iterable[TaskNode], depth: int = 0) -> Iterator[tuple[TaskNode, int]]:
    """Depth-first pre-order walk yielding ``(node, depth)``."""
    for node in forest:
        yield node, depth
        yield from walk(node.children, depth + 1)


def find(forest: Iterable[TaskNode], task_id: int) -> Optional[TaskNode]:
    for node, _ in walk(forest):
        if node.id == task_id:
            return node
    return None


def flatten(forest: Iterable[TaskNode]) -> List[Task]:
    return [node.task for node, _ in walk(forest)]


def subtask_stats(node: Optional[TaskNode]) -> SubtaskStats:
    stats = SubtaskStats()
    if node is None:
        return stats
    for child, _ in walk(node.children):
        stats.total += 1
        if child.task.completed:
            stats.completed += 1
        stats.by_quadrant[quadrant_of(child.task)] += 1
    return stats


def _matches(task: Task, needle: str) -> bool:
    haystack = f"{task.title or ''}\n{task.notes or ''}".lower()
    return needle in haystack


def search(forest: Iterable[TaskNode], query: str) -> List[Task]:
    needle = (query or "").strip().lower()
    if not needle:
        return []
    return [node.task for node, _ in walk(forest) if _matches(node.task, needle)]


def analytics(forest: List[TaskNode]) -> Analytics:
    result = Analytics(roots=len(forest))
    for node, depth in walk(forest):
        label = quadrant_of(node.task)
        result.total += 1
        result.per_quadrant[label] += 1
        if node.task.completed:
            result.completed += 1
            result.completed_per_quadrant[label] += 1
        result.max_depth = max(result.max_depth, depth + 1)
    return result


__all__ = [
    "Analytics",
    "SubtaskStats",
    "TaskNode",
    "analytics",
    "build_forest",
    "children_index",
    "find",
    "flatten",
    "search",
    "subtask_stats",
    "walk",
]
