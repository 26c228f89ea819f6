"""Ad-hoc database migrations for Planner."""

from __future__ import annotations

from sqlalchemy import inspect, text


TASK_TABLE = "tasks"


def _column_exists(conn, table: str, column: str) -> bool:
    columns = inspect(conn).get_columns(table)
    return any(col["name"] == column for col in columns)


def ensure_task_columns(conn) -> None:
    """Add columns introduced after the first schema to legacy databases."""

    columns = {
        "urgent": "BOOLEAN NOT NULL DEFAULT FALSE",
        "important": "BOOLEAN NOT NULL DEFAULT FALSE",
        "completed": "BOOLEAN NOT NULL DEFAULT FALSE",
        "notes": "TEXT",
        "parent_id": "INTEGER REFERENCES tasks(id)",
    }
    for name, ddl_type in columns.items():
        if not _column_exists(conn, TASK_TABLE, name):
            conn.execute(text(f"ALTER TABLE {TASK_TABLE} ADD COLUMN {name} {ddl_type}"))


def ensure_task_indexes(conn) -> None:
    conn.execute(
        text(f"CREATE INDEX IF NOT EXISTS ix_tasks_parent_id ON {TASK_TABLE} (parent_id)")
    )
    conn.execute(
        text(f"CREATE INDEX IF NOT EXISTS ix_tasks_created_at ON {TASK_TABLE} (created_at)")
    )


def run_all(engine) -> None:
    with engine.begin() as conn:
        if not inspect(conn).has_table(TASK_TABLE):
            return
        ensure_task_columns(conn)
        ensure_task_indexes(conn)


__all__ = ["run_all"]
