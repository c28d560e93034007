from __future__ import annotations

import io
import time
from datetime import datetime

import pandas as pd
from openpyxl.utils import get_column_letter

CONTACT_CHANNELS = [
    "instagram",
    "whatsapp",
    "linkedin",
    "github",
    "discord",
    "email",
    "phone",
    "twitter",
    "telegram",
    "website",
]

EXPORT_COLUMNS = ["name", "profession", "role", "skills", "tags", *CONTACT_CHANNELS, "notes", "created_at"]
COLUMN_WIDTHS = [15, 20, 12, 30, 25, 15, 15, 15, 15, 18, 25, 15, 15, 15, 25, 30, 12]

CSV_MEDIA_TYPE = "text/csv"
XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def _created_date(value) -> str:
    if not value:
        return ""
    try:
        return datetime.fromisoformat(str(value)).date().isoformat()
    except ValueError:
        return str(value)[:10]


def person_to_export_row(person: dict) -> dict:
    contacts = person.get("contacts") or {}
    row = {
        "name": person.get("name") or "",
        "profession": person.get("profession") or "",
        "role": person.get("role") or "",
        "skills": ", ".join(person.get("skills") or []),
        "tags": ", ".join(person.get("tags") or []),
    }
    for channel in CONTACT_CHANNELS:
        row[channel] = contacts.get(channel) or ""
    row["notes"] = person.get("notes") or ""
    row["created_at"] = _created_date(person.get("created_at"))
    return row


def build_export_frame(people: list[dict]) -> pd.DataFrame:
    return pd.DataFrame([person_to_export_row(person) for person in people], columns=EXPORT_COLUMNS)


def render_csv(frame: pd.DataFrame) -> bytes:
    return frame.to_csv(index=False).encode("utf-8")


def render_xlsx(frame: pd.DataFrame) -> bytes:
    output = io.BytesIO()
    with pd.ExcelWriter(output, engine="openpyxl") as writer:
        frame.to_excel(writer, sheet_name="People", index=False)
        sheet = writer.sheets["People"]
        for idx, width in enumerate(COLUMN_WIDTHS, start=1):
            sheet.column_dimensions[get_column_letter(idx)].width = width
    return output.getvalue()


def export_filename(prefix: str, extension: str, now_ms: int | None = None) -> str:
    stamp = now_ms if now_ms is not None else int(time.time() * 1000)
    return f"{prefix}-{stamp}.{extension}"


def render_people_export(people: list[dict], export_format: str) -> tuple[bytes, str, str]:
    """Return (body, media_type, extension) for the requested format.

    ``xls`` is accepted for compatibility and served as an xlsx workbook.
    """
    frame = build_export_frame(people)
    if export_format == "csv":
        return render_csv(frame), CSV_MEDIA_TYPE, "csv"
    return render_xlsx(frame), XLSX_MEDIA_TYPE, "xlsx"
