from datetime import timedelta

import pytest
from sqlalchemy import create_engine, inspect, text
from sqlalchemy.exc import OperationalError

from conftest import BASE_TIME
from services.errors import InconsistentState, RemoteUnavailable
from services.task_store import TaskStore
from services.task_table import SqlTaskTable
from storage import migrations


@pytest.fixture()
def sql_table(session_factory):
    return SqlTaskTable(session_factory)


def test_insert_and_select_children_in_creation_order(sql_table):
    late = sql_table.insert(title="Second", created_at=BASE_TIME + timedelta(minutes=5))
    early = sql_table.insert(title="First", created_at=BASE_TIME)
    child = sql_table.insert(title="Child", parent_id=early.id, urgent=True)

    assert [t.title for t in sql_table.select_children(None)] == ["First", "Second"]
    assert [t.id for t in sql_table.select_children(early.id)] == [child.id]
    assert sql_table.select_children(late.id) == []
    assert len(sql_table.select_all()) == 3
    assert child.urgent is True
    assert child.completed is False


def test_insert_ignores_unknown_fields(sql_table):
    task = sql_table.insert(title="Plain", colour="blue")
    assert task.title == "Plain"


def test_update_changes_only_given_fields(sql_table):
    task = sql_table.insert(title="Draft", important=True)
    updated = sql_table.update(task.id, completed=True, notes="shipped")

    assert updated.completed is True
    assert updated.notes == "shipped"
    assert updated.important is True
    assert updated.title == "Draft"


def test_update_missing_row_is_inconsistent(sql_table):
    with pytest.raises(InconsistentState):
        sql_table.update(404, title="nobody")


def test_delete_is_idempotent(sql_table):
    task = sql_table.insert(title="Temporary")
    sql_table.delete(task.id)
    sql_table.delete(task.id)
    assert sql_table.select_all() == []


def test_database_errors_become_remote_unavailable():
    def broken_session():
        raise OperationalError("SELECT 1", {}, Exception("database is locked"))

    table = SqlTaskTable(broken_session)
    with pytest.raises(RemoteUnavailable) as exc_info:
        table.select_all()
    assert isinstance(exc_info.value.cause, OperationalError)
    assert "try again" in exc_info.value.message


def test_store_over_sql_table(sql_table):
    root = sql_table.insert(title="Root", created_at=BASE_TIME)
    mid = sql_table.insert(title="Mid", parent_id=root.id, created_at=BASE_TIME)
    sql_table.insert(title="Leaf", parent_id=mid.id, created_at=BASE_TIME)
    sql_table.insert(title="Other", created_at=BASE_TIME + timedelta(minutes=1))

    store = TaskStore(sql_table)
    store.load()
    assert [t.title for t in store.current_tasks] == ["Root", "Other"]

    store.delete_task_cascade(root.id)

    assert [t.title for t in sql_table.select_all()] == ["Other"]
    assert [node.task.title for node in store.all_tasks] == ["Other"]


def test_migrations_add_missing_columns(tmp_path):
    engine = create_engine(f"sqlite:///{(tmp_path / 'legacy.db').as_posix()}")
    with engine.begin() as conn:
        conn.execute(
            text("CREATE TABLE tasks (id INTEGER PRIMARY KEY, title VARCHAR NOT NULL, created_at DATETIME)")
        )

    migrations.run_all(engine)

    columns = {col["name"] for col in inspect(engine).get_columns("tasks")}
    assert {"urgent", "important", "completed", "notes", "parent_id"} <= columns
    indexes = {idx["name"] for idx in inspect(engine).get_indexes("tasks")}
    assert "ix_tasks_parent_id" in indexes


def test_migrations_skip_missing_table(tmp_path):
    engine = create_engine(f"sqlite:///{(tmp_path / 'empty.db').as_posix()}")
    migrations.run_all(engine)
    assert not inspect(engine).has_table("tasks")
