from __future__ import annotations

from dataclasses import dataclass, field

from sqlalchemy import text as sql_text

from backend.db import get_engine


TEXT = "text"
INTEGER = "integer"
BOOLEAN = "boolean"
JSON = "json"

BASE_COLUMNS = {
    "id": TEXT,
    "user_email": TEXT,
    "created_at": TEXT,
    "updated_at": TEXT,
}


@dataclass(frozen=True)
class Table:
    name: str
    columns: dict
    required: tuple = ()
    indexes: tuple = field(default_factory=tuple)

    @property
    def all_columns(self) -> dict:
        return {**BASE_COLUMNS, **self.columns}

    def kind(self, column: str) -> str | None:
        return self.all_columns.get(column)


PEOPLE_TABLE = Table(
    "people",
    {
        "name": TEXT,
        "profession": TEXT,
        "skills": JSON,
        "role": TEXT,
        "tags": JSON,
        "contacts": JSON,
        "notes": TEXT,
    },
    required=("name",),
)

PROJECTS_TABLE = Table(
    "projects",
    {
        "title": TEXT,
        "description": TEXT,
        "category": TEXT,
        "priority": TEXT,
        "status": TEXT,
        "progress": INTEGER,
        "tech_stack": JSON,
        "tags": JSON,
        "team_members": JSON,
        "start_date": TEXT,
        "deadline": TEXT,
        "completed_at": TEXT,
        "github_url": TEXT,
        "demo_url": TEXT,
        "notes": TEXT,
    },
    required=("title",),
)

EVENTS_TABLE = Table(
    "events",
    {
        "name": TEXT,
        "event_type": TEXT,
        "venue": TEXT,
        "is_online": BOOLEAN,
        "meeting_url": TEXT,
        "organizer": TEXT,
        "cost": INTEGER,
        "start_date": TEXT,
        "end_date": TEXT,
        "start_time": TEXT,
        "end_time": TEXT,
        "certificate_url": TEXT,
        "registration_url": TEXT,
        "event_info_url": TEXT,
        "important_insights": JSON,
        "tags": JSON,
        "notes": TEXT,
        "is_featured": BOOLEAN,
    },
    required=("name",),
)

EVENT_PEOPLE_TABLE = Table(
    "event_people",
    {
        "event_id": TEXT,
        "person_id": TEXT,
    },
    required=("event_id", "person_id"),
    indexes=("event_id",),
)

EVENT_MATERIALS_TABLE = Table(
    "event_materials",
    {
        "event_id": TEXT,
        "title": TEXT,
        "url": TEXT,
        "type": TEXT,
    },
    required=("event_id", "title"),
    indexes=("event_id",),
)

DAILY_LOGS_TABLE = Table(
    "daily_logs",
    {
        "title": TEXT,
        "description": TEXT,
        "log_date": TEXT,
        "log_time": TEXT,
        "duration_minutes": INTEGER,
        "mood": TEXT,
        "energy_level": INTEGER,
        "highlights": TEXT,
        "obstacles": TEXT,
        "insights": TEXT,
        "task_id": TEXT,
        "project_id": TEXT,
        "skill_id": TEXT,
        "event_id": TEXT,
        "tags": JSON,
        "attachments": JSON,
        "is_featured": BOOLEAN,
    },
    required=("title", "log_date"),
    indexes=("log_date",),
)

TASKS_TABLE = Table(
    "tasks",
    {
        "title": TEXT,
        "status": TEXT,
        "due_date": TEXT,
        "notes": TEXT,
    },
    required=("title",),
)

SKILLS_TABLE = Table(
    "skills",
    {
        "name": TEXT,
        "level": INTEGER,
        "category": TEXT,
        "notes": TEXT,
    },
    required=("name",),
)

TABLES = {
    table.name: table
    for table in (
        PEOPLE_TABLE,
        PROJECTS_TABLE,
        EVENTS_TABLE,
        EVENT_PEOPLE_TABLE,
        EVENT_MATERIALS_TABLE,
        DAILY_LOGS_TABLE,
        TASKS_TABLE,
        SKILLS_TABLE,
    )
}

# Rows owned by a parent row; removed together with it.
DEPENDENT_TABLES = {
    "events": [("event_people", "event_id"), ("event_materials", "event_id")],
}


def _column_sql(column: str, kind: str, required: bool) -> str:
    sql_type = "INTEGER" if kind in {INTEGER, BOOLEAN} else "TEXT"
    if column == "id":
        return "id TEXT PRIMARY KEY"
    not_null = " NOT NULL" if required or column == "user_email" else ""
    default = " DEFAULT 0" if kind == BOOLEAN else ""
    return f"{column} {sql_type}{not_null}{default}"


def create_table_sql(table: Table) -> str:
    columns = ",\n    ".join(
        _column_sql(column, kind, column in table.required)
        for column, kind in table.all_columns.items()
    )
    return f"CREATE TABLE IF NOT EXISTS {table.name} (\n    {columns}\n)"


async def init_db():
    engine = get_engine()
    async with engine.begin() as conn:
        for table in TABLES.values():
            await conn.execute(sql_text(create_table_sql(table)))
            await conn.execute(
                sql_text(
                    f"CREATE INDEX IF NOT EXISTS idx_{table.name}_user ON {table.name} (user_email)"
                )
            )
            for column in table.indexes:
                await conn.execute(
                    sql_text(
                        f"CREATE INDEX IF NOT EXISTS idx_{table.name}_{column} "
                        f"ON {table.name} (user_email, {column})"
                    )
                )
