from datetime import timedelta

from conftest import BASE_TIME
from core.quadrants import NOT_URGENT_IMPORTANT, URGENT_IMPORTANT
from models.task import Task
from services import task_tree


def _task(task_id, parent_id=None, **fields):
    fields.setdefault("title", f"Task {task_id}")
    return Task(
        id=task_id,
        parent_id=parent_id,
        created_at=BASE_TIME + timedelta(minutes=task_id),
        **fields,
    )


ROWS = [
    _task(1, urgent=True, important=True),
    _task(2, 1, urgent=True, important=True, completed=True),
    _task(3, 2, important=True, notes="check the Oxford comma"),
    _task(4, 1),
    _task(5, urgent=True),
]


def test_build_forest_links_children():
    forest = task_tree.build_forest(ROWS)
    assert [node.id for node in forest] == [1, 5]
    assert [node.id for node in forest[0].children] == [2, 4]
    assert [node.id for node in forest[0].children[0].children] == [3]


def test_orphans_become_roots():
    forest = task_tree.build_forest([_task(1), _task(7, parent_id=42)])
    assert [node.id for node in forest] == [1, 7]


def test_rows_in_a_parent_cycle_are_kept():
    rows = [_task(1), _task(2, 3), _task(3, 2)]
    forest = task_tree.build_forest(rows)
    assert [node.id for node in forest] == [1, 2]
    assert [node.id for node in forest[1].children] == [3]
    assert sorted(t.id for t in task_tree.flatten(forest)) == [1, 2, 3]
    assert task_tree.analytics(forest).total == 3


def test_walk_is_depth_first_with_depth():
    forest = task_tree.build_forest(ROWS)
    assert [(node.id, depth) for node, depth in task_tree.walk(forest)] == [
        (1, 0),
        (2, 1),
        (3, 2),
        (4, 1),
        (5, 0),
    ]
    assert [t.id for t in task_tree.flatten(forest)] == [1, 2, 3, 4, 5]


def test_subtask_stats():
    forest = task_tree.build_forest(ROWS)
    stats = task_tree.subtask_stats(task_tree.find(forest, 1))
    assert (stats.total, stats.completed, stats.open) == (3, 1, 2)
    assert stats.by_quadrant[URGENT_IMPORTANT] == 1
    assert stats.by_quadrant[NOT_URGENT_IMPORTANT] == 1
    assert task_tree.subtask_stats(None).total == 0
    assert task_tree.subtask_stats(task_tree.find(forest, 5)).total == 0


def test_search_matches_title_and_notes():
    forest = task_tree.build_forest(ROWS)
    assert [t.id for t in task_tree.search(forest, "oxford")] == [3]
    assert [t.id for t in task_tree.search(forest, " task ")] == [1, 2, 3, 4, 5]
    assert task_tree.search(forest, "") == []


def test_analytics_counts_whole_forest():
    data = task_tree.analytics(task_tree.build_forest(ROWS))
    assert data.total == 5
    assert data.completed == 1
    assert data.roots == 2
    assert data.max_depth == 3
    assert data.per_quadrant[URGENT_IMPORTANT] == 2
    assert data.completed_per_quadrant[URGENT_IMPORTANT] == 1
    assert data.completion_rate == 0.2


def test_analytics_of_empty_forest():
    data = task_tree.analytics([])
    assert data.total == 0
    assert data.completion_rate == 0.0
