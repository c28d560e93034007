from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import Response

from backend.auth import require_user_email
from backend import repositories
from backend.services import people_export
from backend.settings import get_settings

logger = logging.getLogger(__name__)

router = APIRouter()

EXPORT_FORMATS = {"csv", "xlsx", "xls"}


@router.get("/v1/people/export")
async def export_people(
    format: str = Query("xlsx"),
    role: str | None = Query(None),
    tag: str | None = Query(None),
    skill: str | None = Query(None),
    user_email: str = Depends(require_user_email),
):
    export_format = (format or "xlsx").lower()
    if export_format not in EXPORT_FORMATS:
        raise HTTPException(status_code=400, detail=f"Unsupported export format '{format}'")

    filters = []
    if role:
        filters.append(("role", "eq", role))
    if tag:
        filters.append(("tags", "cs", tag))
    if skill:
        filters.append(("skills", "cs", skill))
    people = await repositories.select_rows(user_email, "people", filters, [("name", False)])
    if not people:
        raise HTTPException(status_code=404, detail="No data to export")

    try:
        body, media_type, extension = people_export.render_people_export(people, export_format)
    except Exception as exc:
        logger.exception("People export failed: %s", exc)
        raise HTTPException(status_code=500, detail="Export failed")

    filename = people_export.export_filename(get_settings().export_filename_prefix, extension)
    logger.info("Exported %d people as %s for %s", len(people), extension, user_email)
    return Response(
        content=body,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
