from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.encoders import jsonable_encoder

from backend.auth import require_user_email
from backend import repositories
from backend.schemas import DeleteResponse, InsertPayload, RowPatch, RowsResponse

logger = logging.getLogger(__name__)

router = APIRouter()

RESERVED_PARAMS = {"order"}


def _table_or_404(table_name: str):
    try:
        return repositories.get_table(table_name)
    except repositories.UnknownTable:
        raise HTTPException(status_code=404, detail=f"Unknown table '{table_name}'")


def _parse_query(table, request: Request):
    filters = []
    order = []
    try:
        for key, value in request.query_params.multi_items():
            if key == "order":
                order.append(repositories.parse_order(table, value))
            elif key not in RESERVED_PARAMS:
                filters.append(repositories.parse_filter(table, key, value))
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return filters, order


@router.get("/v1/tables/{table_name}", response_model=RowsResponse)
async def select_rows(table_name: str, request: Request, user_email: str = Depends(require_user_email)):
    table = _table_or_404(table_name)
    filters, order = _parse_query(table, request)
    try:
        items = await repositories.select_rows(user_email, table.name, filters, order)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return {"items": jsonable_encoder(items)}


@router.get("/v1/tables/{table_name}/{row_id}")
async def get_row(table_name: str, row_id: str, user_email: str = Depends(require_user_email)):
    table = _table_or_404(table_name)
    record = await repositories.get_row(user_email, table.name, row_id)
    if record is None:
        raise HTTPException(status_code=404, detail="Record not found")
    return jsonable_encoder(record)


@router.post("/v1/tables/{table_name}", response_model=RowsResponse)
async def insert_rows(table_name: str, payload: InsertPayload, user_email: str = Depends(require_user_email)):
    table = _table_or_404(table_name)
    try:
        items = await repositories.insert_rows(user_email, table.name, payload.rows)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    logger.info("Inserted %d row(s) into %s for %s", len(items), table.name, user_email)
    return {"items": jsonable_encoder(items)}


@router.patch("/v1/tables/{table_name}/{row_id}")
async def update_row(
    table_name: str,
    row_id: str,
    payload: RowPatch,
    user_email: str = Depends(require_user_email),
):
    table = _table_or_404(table_name)
    try:
        record = await repositories.update_row(user_email, table.name, row_id, payload.values)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    if record is None:
        raise HTTPException(status_code=404, detail="Record not found")
    return jsonable_encoder(record)


@router.delete("/v1/tables/{table_name}/{row_id}", response_model=DeleteResponse)
async def delete_row(table_name: str, row_id: str, user_email: str = Depends(require_user_email)):
    table = _table_or_404(table_name)
    deleted = await repositories.delete_row(user_email, table.name, row_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Record not found")
    return {"ok": True}


@router.delete("/v1/tables/{table_name}", response_model=DeleteResponse)
async def delete_rows(table_name: str, request: Request, user_email: str = Depends(require_user_email)):
    table = _table_or_404(table_name)
    filters, _ = _parse_query(table, request)
    try:
        count = await repositories.delete_rows(user_email, table.name, filters)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return {"ok": True, "deleted": count}
