from __future__ import annotations

import json
import logging
from datetime import date, datetime, timezone
from uuid import uuid4

from sqlalchemy import text as sql_text

from backend.db import session_scope
from backend.db_init import BOOLEAN, DEPENDENT_TABLES, INTEGER, JSON, TABLES, Table

logger = logging.getLogger(__name__)

FILTER_OPERATORS = {"eq", "cs"}
READ_ONLY_COLUMNS = {"id", "user_email", "created_at", "updated_at"}


class UnknownTable(LookupError):
    pass


def _new_id() -> str:
    return uuid4().hex


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def get_table(name: str) -> Table:
    table = TABLES.get(name)
    if table is None:
        raise UnknownTable(name)
    return table


def _coerce_value(table: Table, column: str, value):
    kind = table.kind(column)
    if kind is None:
        raise ValueError(f"Unknown column '{column}' for table '{table.name}'")
    if value is None:
        return None
    if kind == JSON:
        return json.dumps(value, ensure_ascii=False)
    if kind == BOOLEAN:
        if isinstance(value, str):
            return int(value.strip().lower() in {"1", "true", "yes"})
        return int(bool(value))
    if kind == INTEGER:
        try:
            return int(value)
        except (TypeError, ValueError) as exc:
            raise ValueError(f"Column '{column}' expects an integer") from exc
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return str(value)


def _decode_row(table: Table, row) -> dict:
    payload = dict(row)
    for column, value in list(payload.items()):
        kind = table.kind(column)
        if value is None:
            continue
        if kind == JSON:
            try:
                payload[column] = json.loads(value)
            except (TypeError, ValueError):
                logger.warning("Invalid JSON in %s.%s for row %s", table.name, column, payload.get("id"))
                payload[column] = None
        elif kind == BOOLEAN:
            payload[column] = bool(value)
    return payload


def _writable_payload(table: Table, values: dict) -> dict:
    clean = {}
    for column, value in (values or {}).items():
        if column in READ_ONLY_COLUMNS:
            continue
        clean[column] = _coerce_value(table, column, value)
    return clean


def parse_filter(table: Table, column: str, raw: str) -> tuple[str, str, str]:
    if table.kind(column) is None:
        raise ValueError(f"Unknown column '{column}' for table '{table.name}'")
    operator, sep, value = str(raw).partition(".")
    if not sep or operator not in FILTER_OPERATORS:
        raise ValueError(f"Unsupported filter '{raw}' for column '{column}'")
    if operator == "cs" and table.kind(column) != JSON:
        raise ValueError(f"Column '{column}' is not a list column")
    return column, operator, value


def parse_order(table: Table, raw: str) -> tuple[str, bool]:
    column, _, direction = str(raw).partition(".")
    if table.kind(column) is None:
        raise ValueError(f"Unknown order column '{column}'")
    direction = direction.lower() or "asc"
    if direction not in {"asc", "desc"}:
        raise ValueError(f"Unknown order direction '{direction}'")
    return column, direction == "desc"


def _where_clause(table: Table, filters: list[tuple[str, str, str]]) -> tuple[str, dict, list]:
    clauses = ["user_email = :user_email"]
    params: dict = {}
    contains = []
    for idx, (column, operator, value) in enumerate(filters or []):
        if operator == "cs":
            contains.append((column, value))
            continue
        param = f"p{idx}"
        clauses.append(f"{column} = :{param}")
        params[param] = _coerce_value(table, column, value)
    return " AND ".join(clauses), params, contains


def _matches_contains(row: dict, contains: list) -> bool:
    for column, value in contains:
        items = row.get(column)
        if not isinstance(items, list) or value not in items:
            return False
    return True


async def select_rows(
    user_email: str,
    table_name: str,
    filters: list[tuple[str, str, str]] | None = None,
    order: list[tuple[str, bool]] | None = None,
) -> list[dict]:
    table = get_table(table_name)
    where, params, contains = _where_clause(table, filters or [])
    order_sql = ""
    if order:
        order_sql = " ORDER BY " + ", ".join(
            f"{column} {'DESC' if descending else 'ASC'}" for column, descending in order
        )
    async with session_scope() as session:
        rows = (await session.execute(
            sql_text(f"SELECT * FROM {table.name} WHERE {where}{order_sql}"),
            {"user_email": user_email, **params},
        )).mappings().all()
    decoded = [_decode_row(table, row) for row in rows]
    if contains:
        decoded = [row for row in decoded if _matches_contains(row, contains)]
    return decoded


async def get_row(user_email: str, table_name: str, row_id: str) -> dict | None:
    table = get_table(table_name)
    async with session_scope() as session:
        row = (await session.execute(
            sql_text(f"SELECT * FROM {table.name} WHERE user_email = :user_email AND id = :id"),
            {"user_email": user_email, "id": row_id},
        )).mappings().fetchone()
    return _decode_row(table, row) if row else None


async def insert_rows(user_email: str, table_name: str, rows: list[dict]) -> list[dict]:
    table = get_table(table_name)
    records = []
    for values in rows:
        clean = _writable_payload(table, values)
        missing = [column for column in table.required if clean.get(column) in (None, "")]
        if missing:
            raise ValueError(f"Missing required field(s): {', '.join(missing)}")
        now = _now_iso()
        records.append(
            {
                "id": _new_id(),
                "user_email": user_email,
                **clean,
                "created_at": now,
                "updated_at": now,
            }
        )
    if not records:
        return []
    async with session_scope(commit=True) as session:
        for record in records:
            columns = list(record.keys())
            await session.execute(
                sql_text(
                    f"INSERT INTO {table.name} ({', '.join(columns)}) "
                    f"VALUES ({', '.join(f':{column}' for column in columns)})"
                ),
                record,
            )
    return [_decode_row(table, record) for record in records]


async def update_row(user_email: str, table_name: str, row_id: str, patch: dict) -> dict | None:
    table = get_table(table_name)
    clean = _writable_payload(table, patch)
    for column in table.required:
        if column in clean and clean[column] in (None, ""):
            raise ValueError(f"Field '{column}' cannot be empty")
    existing = await get_row(user_email, table.name, row_id)
    if existing is None:
        return None
    if not clean:
        return existing
    clean["updated_at"] = _now_iso()
    updates = ", ".join(f"{column} = :{column}" for column in clean)
    async with session_scope(commit=True) as session:
        await session.execute(
            sql_text(
                f"UPDATE {table.name} SET {updates} "
                "WHERE user_email = :user_email AND id = :id"
            ),
            {**clean, "user_email": user_email, "id": row_id},
        )
    return await get_row(user_email, table.name, row_id)


async def delete_row(user_email: str, table_name: str, row_id: str) -> bool:
    table = get_table(table_name)
    async with session_scope(commit=True) as session:
        result = await session.execute(
            sql_text(f"DELETE FROM {table.name} WHERE user_email = :user_email AND id = :id"),
            {"user_email": user_email, "id": row_id},
        )
        deleted = (result.rowcount or 0) > 0
        if deleted:
            for dependent, foreign_key in DEPENDENT_TABLES.get(table.name, []):
                await session.execute(
                    sql_text(
                        f"DELETE FROM {dependent} "
                        f"WHERE user_email = :user_email AND {foreign_key} = :id"
                    ),
                    {"user_email": user_email, "id": row_id},
                )
    return deleted


async def delete_rows(user_email: str, table_name: str, filters: list[tuple[str, str, str]]) -> int:
    table = get_table(table_name)
    if not filters:
        raise ValueError("Refusing to delete without a filter")
    if any(operator != "eq" for _, operator, _ in filters):
        raise ValueError("Only 'eq' filters are supported for bulk delete")
    where, params, _ = _where_clause(table, filters)
    async with session_scope(commit=True) as session:
        result = await session.execute(
            sql_text(f"DELETE FROM {table.name} WHERE {where}"),
            {"user_email": user_email, **params},
        )
    return result.rowcount or 0
