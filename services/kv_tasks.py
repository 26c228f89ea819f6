"""Task table over a single serialized task tree (blob key-value storage).

The whole tree is read, modified in memory with the recursive helpers below
and written back on every mutation. Nodes look like::

    {"id": 3, "title": "...", "urgent": true, "important": false,
     "completed": false, "notes": null, "created_at": "2024-05-01T10:00:00Z",
     "subtasks": [...]}

``parent_id`` is never stored; it is implied by the nesting.
"""
from __future__ import annotations

import json
from copy import deepcopy
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Protocol, Tuple

from datetime_utils import parse_rfc3339, to_rfc3339_utc, utc_now
from models.task import Task
from services.errors import InconsistentState, RemoteUnavailable
from services.logs import ensure_logger


Node = Dict[str, Any]

BLOB_VERSION = 1
NODE_FIELDS = ("title", "urgent", "important", "completed", "notes")

DEFAULT_TREE: List[Node] = [
    {"id": 1, "title": "Project A", "urgent": True, "important": True},
    {"id": 2, "title": "Task B", "urgent": True, "important": False},
    {"id": 3, "title": "Goal C", "urgent": False, "important": True},
    {"id": 4, "title": "Item D", "urgent": False, "important": False},
]


class BlobStore(Protocol):
    def get_tasks(self) -> Optional[List[Node]]:
        """Return the stored tree or ``None`` when nothing was saved yet."""
        ...

    def save_tasks(self, tree: List[Node]) -> None:
        ...


# ----- recursive tree helpers -----
def iter_nodes(nodes: List[Node], parent_id: Optional[int] = None) -> Iterator[Tuple[Node, Optional[int]]]:
    for node in nodes:
        yield node, parent_id
        yield from iter_nodes(node.get("subtasks") or [], node.get("id"))


def find_node(nodes: List[Node], task_id: int) -> Optional[Tuple[Node, Optional[int]]]:
    for node, parent_id in iter_nodes(nodes):
        if node.get("id") == task_id:
            return node, parent_id
    return None


def next_id(nodes: List[Node]) -> int:
    ids = [node.get("id") for node, _ in iter_nodes(nodes) if isinstance(node.get("id"), int)]
    return max(ids, default=0) + 1


def add_to_hierarchy(nodes: List[Node], parent_id: Optional[int], new_node: Node) -> List[Node]:
    if parent_id is None:
        return [*nodes, new_node]
    result = []
    for node in nodes:
        children = node.get("subtasks") or []
        if node.get("id") == parent_id:
            node = {**node, "subtasks": [*children, new_node]}
        elif children:
            node = {**node, "subtasks": add_to_hierarchy(children, parent_id, new_node)}
        result.append(node)
    return result


def update_in_hierarchy(nodes: List[Node], task_id: int, changes: Dict[str, Any]) -> List[Node]:
    result = []
    for node in nodes:
        children = node.get("subtasks") or []
        if node.get("id") == task_id:
            node = {**node, **changes}
        elif children:
            node = {**node, "subtasks": update_in_hierarchy(children, task_id, changes)}
        result.append(node)
    return result


def delete_from_hierarchy(nodes: List[Node], task_id: int) -> List[Node]:
    result = []
    for node in nodes:
        if node.get("id") == task_id:
            continue
        children = node.get("subtasks") or []
        if children:
            node = {**node, "subtasks": delete_from_hierarchy(children, task_id)}
        result.append(node)
    return result


def node_to_task(node: Node, parent_id: Optional[int]) -> Task:
    return Task(
        id=node.get("id"),
        title=str(node.get("title") or ""),
        urgent=bool(node.get("urgent")),
        important=bool(node.get("important")),
        completed=bool(node.get("completed")),
        notes=node.get("notes") or None,
        parent_id=parent_id,
        created_at=parse_rfc3339(node.get("created_at")) or utc_now(),
    )


def _sort_key(task: Task):
    return (task.created_at, task.id or 0)


class KvTaskTable:
    """Implements the task table contract by whole-tree read-modify-write."""

    def __init__(self, blob: BlobStore, *, seed_defaults: bool = True):
        self.blob = blob
        self.seed_defaults = seed_defaults
        self.logger = ensure_logger("planner.kv")

    # ----- reads -----
    def _read(self) -> List[Node]:
        tree = self.blob.get_tasks()
        if tree is None:
            if not self.seed_defaults:
                return []
            # seeded once; later reads return the saved samples
            tree = self._default_tree()
            self.blob.save_tasks(tree)
            self.logger.info("Seeded the task tree with %d sample tasks", len(tree))
        if not isinstance(tree, list) or not all(isinstance(node, dict) for node in tree):
            raise InconsistentState("The stored task tree is malformed.")
        return tree

    def _default_tree(self) -> List[Node]:
        created = to_rfc3339_utc(utc_now())
        tree = deepcopy(DEFAULT_TREE)
        for node in tree:
            node.update({"completed": False, "notes": None, "created_at": created, "subtasks": []})
        return tree

    def select_children(self, parent_id: Optional[int]) -> List[Task]:
        tree = self._read()
        if parent_id is None:
            children = tree
        else:
            found = find_node(tree, parent_id)
            children = (found[0].get("subtasks") or []) if found else []
        return sorted((node_to_task(node, parent_id) for node in children), key=_sort_key)

    def select_all(self) -> List[Task]:
        tasks = [node_to_task(node, parent_id) for node, parent_id in iter_nodes(self._read())]
        return sorted(tasks, key=_sort_key)

    # ----- writes -----
    def insert(self, **fields) -> Task:
        tree = self._read()
        parent_id = fields.get("parent_id")
        if parent_id is not None and find_node(tree, parent_id) is None:
            raise InconsistentState("The parent task no longer exists.")
        node: Node = {key: fields.get(key) for key in NODE_FIELDS}
        node.update(
            {
                "id": next_id(tree),
                "title": str(fields.get("title") or ""),
                "urgent": bool(fields.get("urgent")),
                "important": bool(fields.get("important")),
                "completed": bool(fields.get("completed")),
                "created_at": to_rfc3339_utc(fields.get("created_at") or utc_now()),
                "subtasks": [],
            }
        )
        self.blob.save_tasks(add_to_hierarchy(tree, parent_id, node))
        self.logger.debug("Inserted node %s under %s", node["id"], parent_id)
        return node_to_task(node, parent_id)

    def update(self, task_id: int, **fields) -> Task:
        tree = self._read()
        found = find_node(tree, task_id)
        if found is None:
            raise InconsistentState("The task no longer exists.")
        changes = {key: value for key, value in fields.items() if key in NODE_FIELDS}
        updated = update_in_hierarchy(tree, task_id, changes)
        self.blob.save_tasks(updated)
        node, parent_id = find_node(updated, task_id)
        return node_to_task(node, parent_id)

    def delete(self, task_id: int) -> None:
        tree = self._read()
        if find_node(tree, task_id) is None:
            return
        self.blob.save_tasks(delete_from_hierarchy(tree, task_id))


def encode_tree(tree: List[Node]) -> Dict[str, Any]:
    return {"version": BLOB_VERSION, "tasks": tree}


def decode_tree(payload: Any) -> Optional[List[Node]]:
    if not payload:
        return None
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict) and isinstance(payload.get("tasks"), list):
        return payload["tasks"]
    raise InconsistentState("The stored task tree is malformed.")


class JsonFileBlobStore:
    """Keeps the serialized tree in a local JSON file."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def get_tasks(self) -> Optional[List[Node]]:
        if not self.path.exists():
            return None
        try:
            payload = json.loads(self.path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise InconsistentState("The stored task tree is malformed.", cause=exc) from exc
        except OSError as exc:
            raise RemoteUnavailable("Could not read the task file.", cause=exc) from exc
        return decode_tree(payload)

    def save_tasks(self, tree: List[Node]) -> None:
        text = json.dumps(encode_tree(tree), ensure_ascii=False, indent=2, sort_keys=True)
        tmp = self.path.with_suffix(".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(text, encoding="utf-8")
            tmp.replace(self.path)
        except OSError as exc:
            raise RemoteUnavailable("Could not save the task file.", cause=exc) from exc
        finally:
            if tmp.exists():
                try:
                    tmp.unlink()
                except OSError:
                    pass


__all__ = [
    "BlobStore",
    "JsonFileBlobStore",
    "KvTaskTable",
    "add_to_hierarchy",
    "decode_tree",
    "delete_from_hierarchy",
    "encode_tree",
    "find_node",
    "iter_nodes",
    "next_id",
    "update_in_hierarchy",
]
