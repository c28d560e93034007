from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator


class InsertPayload(BaseModel):
    rows: List[Dict[str, Any]] = Field(default_factory=list)

    @field_validator("rows", mode="before")
    @classmethod
    def _wrap_single_row(cls, value):
        if isinstance(value, dict):
            return [value]
        return value


class RowPatch(BaseModel):
    values: Dict[str, Any] = Field(default_factory=dict)


class RowsResponse(BaseModel):
    items: List[Dict[str, Any]]


class DeleteResponse(BaseModel):
    ok: bool
    deleted: Optional[int] = None
