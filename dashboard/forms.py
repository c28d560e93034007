"""Form normalization and the save chains behind every create/edit form.

Forms hold raw widget values (strings, lists, date/time objects). Before a
write each value is trimmed, empty strings and empty lists become None, and
the record goes out in exactly one insert or update call.
"""
import logging
from datetime import date, time

from dashboard.constants import (
    CONTACT_CHANNEL_KEYS,
    DEFAULT_ENERGY_LEVEL,
    DEFAULT_SKILL_LEVEL,
    EVENTS_TABLE,
    LOGS_TABLE,
    PEOPLE_TABLE,
    PROJECTS_TABLE,
    SKILLS_TABLE,
    TASKS_TABLE,
    EventType,
    MaterialType,
    Mood,
    ProjectPriority,
    ProjectStatus,
    TaskStatus,
)
from dashboard.data import repositories

logger = logging.getLogger(__name__)


class FormError(ValueError):
    pass


def clean_text(value):
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def clean_list(values):
    items = [str(item).strip() for item in values or [] if str(item or "").strip()]
    return items or None


def clean_contacts(contacts):
    cleaned = {}
    for channel in CONTACT_CHANNEL_KEYS:
        value = clean_text((contacts or {}).get(channel))
        if value:
            cleaned[channel] = value
    return cleaned or None


def clean_date(value):
    if value is None or value == "":
        return None
    if isinstance(value, date):
        return value.isoformat()
    return str(value).strip()[:10] or None


def clean_time(value):
    if value is None or value == "":
        return None
    if isinstance(value, time):
        return value.strftime("%H:%M")
    return str(value).strip()[:5] or None


def add_unique(items, value):
    """Append a trimmed value unless it is empty or already present."""
    value = (value or "").strip()
    items = list(items or [])
    if value and value not in items:
        items.append(value)
    return items


def split_list_input(raw):
    items = []
    for part in str(raw or "").replace("\n", ",").split(","):
        items = add_unique(items, part)
    return items


def keep_unlisted(selected, stored, listed_ids):
    """Add back stored ids the picker could not show, so they are not unlinked."""
    kept = [item for item in stored or [] if item not in set(listed_ids)]
    return list(dict.fromkeys(list(selected or []) + kept))


def option_index(options, value, default=None):
    """Index of ``value`` in ``options``, else of ``default``, else 0."""
    for candidate in (value, default):
        if candidate in options:
            return options.index(candidate)
    return 0


def _enum_value(enum_cls, value, default=None):
    if value in (None, ""):
        return default.value if default is not None else None
    try:
        return enum_cls(value).value
    except ValueError as exc:
        raise FormError(f"Invalid {enum_cls.__name__} '{value}'") from exc


def _require(payload, name, label):
    if not payload.get(name):
        raise FormError(f"{label} is required")


def clamp_int(value, low, high, default):
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    return max(low, min(high, number))


def normalize_person(form):
    payload = {
        "name": clean_text(form.get("name")),
        "profession": clean_text(form.get("profession")),
        "skills": clean_list(form.get("skills")),
        "role": clean_text(form.get("role")),
        "tags": clean_list(form.get("tags")),
        "contacts": clean_contacts(form.get("contacts")),
        "notes": clean_text(form.get("notes")),
    }
    _require(payload, "name", "Name")
    return payload


def normalize_project(form):
    payload = {
        "title": clean_text(form.get("title")),
        "description": clean_text(form.get("description")),
        "category": clean_text(form.get("category")),
        "priority": _enum_value(ProjectPriority, form.get("priority"), ProjectPriority.MEDIUM),
        "status": _enum_value(ProjectStatus, form.get("status"), ProjectStatus.IDEA),
        "progress": clamp_int(form.get("progress"), 0, 100, 0),
        "tech_stack": clean_list(form.get("tech_stack")),
        "tags": clean_list(form.get("tags")),
        "team_members": clean_list(form.get("team_members")),
        "start_date": clean_date(form.get("start_date")),
        "deadline": clean_date(form.get("deadline")),
        "completed_at": clean_date(form.get("completed_at")),
        "github_url": clean_text(form.get("github_url")),
        "demo_url": clean_text(form.get("demo_url")),
        "notes": clean_text(form.get("notes")),
    }
    _require(payload, "title", "Title")
    return payload


def normalize_event(form):
    is_online = bool(form.get("is_online"))
    try:
        cost = int(form.get("cost") or 0)
    except (TypeError, ValueError) as exc:
        raise FormError("Cost must be a whole number") from exc
    if cost < 0:
        raise FormError("Cost cannot be negative")
    payload = {
        "name": clean_text(form.get("name")),
        "event_type": _enum_value(EventType, form.get("event_type"), EventType.SEMINAR),
        "is_online": is_online,
        "venue": None if is_online else clean_text(form.get("venue")),
        "meeting_url": clean_text(form.get("meeting_url")) if is_online else None,
        "organizer": clean_text(form.get("organizer")),
        "cost": cost,
        "start_date": clean_date(form.get("start_date")),
        "end_date": clean_date(form.get("end_date")),
        "start_time": clean_time(form.get("start_time")),
        "end_time": clean_time(form.get("end_time")),
        "certificate_url": clean_text(form.get("certificate_url")),
        "registration_url": clean_text(form.get("registration_url")),
        "event_info_url": clean_text(form.get("event_info_url")),
        "important_insights": clean_list(form.get("important_insights")),
        "tags": clean_list(form.get("tags")),
        "notes": clean_text(form.get("notes")),
        "is_featured": bool(form.get("is_featured")),
    }
    _require(payload, "name", "Event name")
    return payload


def normalize_material(material):
    title = clean_text(material.get("title"))
    if not title:
        raise FormError("Material title is required")
    return {
        "title": title,
        "url": clean_text(material.get("url")),
        "type": _enum_value(MaterialType, material.get("type"), MaterialType.LINK),
    }


def normalize_log(form):
    hours = clamp_int(form.get("duration_hours"), 0, 24 * 7, 0)
    minutes = clamp_int(form.get("duration_minutes"), 0, 59, 0)
    payload = {
        "title": clean_text(form.get("title")),
        "description": clean_text(form.get("description")),
        "log_date": clean_date(form.get("log_date")),
        "log_time": clean_time(form.get("log_time")),
        "duration_minutes": hours * 60 + minutes,
        "mood": _enum_value(Mood, form.get("mood")),
        "energy_level": clamp_int(form.get("energy_level"), 1, 5, DEFAULT_ENERGY_LEVEL),
        "highlights": clean_text(form.get("highlights")),
        "obstacles": clean_text(form.get("obstacles")),
        "insights": clean_text(form.get("insights")),
        "task_id": clean_text(form.get("task_id")),
        "project_id": clean_text(form.get("project_id")),
        "skill_id": clean_text(form.get("skill_id")),
        "event_id": clean_text(form.get("event_id")),
        "tags": clean_list(form.get("tags")),
        "attachments": clean_list(form.get("attachments")),
        "is_featured": bool(form.get("is_featured")),
    }
    _require(payload, "title", "Title")
    _require(payload, "log_date", "Date")
    return payload


def normalize_task(form):
    payload = {
        "title": clean_text(form.get("title")),
        "status": _enum_value(TaskStatus, form.get("status"), TaskStatus.TODO),
        "due_date": clean_date(form.get("due_date")),
        "notes": clean_text(form.get("notes")),
    }
    _require(payload, "title", "Title")
    return payload


def normalize_skill(form):
    payload = {
        "name": clean_text(form.get("name")),
        "level": clamp_int(form.get("level"), 1, 5, DEFAULT_SKILL_LEVEL),
        "category": clean_text(form.get("category")),
        "notes": clean_text(form.get("notes")),
    }
    _require(payload, "name", "Skill name")
    return payload


def save_person(form, record_id=None):
    return repositories.save_record(PEOPLE_TABLE, normalize_person(form), record_id)


def save_project(form, record_id=None):
    return repositories.save_record(PROJECTS_TABLE, normalize_project(form), record_id)


def save_log(form, record_id=None):
    return repositories.save_record(LOGS_TABLE, normalize_log(form), record_id)


def save_task(form, record_id=None):
    return repositories.save_record(TASKS_TABLE, normalize_task(form), record_id)


def save_skill(form, record_id=None):
    return repositories.save_record(SKILLS_TABLE, normalize_skill(form), record_id)


def save_event(form, attendee_ids, materials, record_id=None):
    """Save the event row, then bring both relations in line with the form.

    Nothing is written when validation fails. A failure after the event row
    is saved leaves already synced relations in place. Passing None for
    ``attendee_ids`` or ``materials`` leaves that relation untouched.
    """
    payload = normalize_event(form)
    clean_materials = None
    if materials is not None:
        clean_materials = [normalize_material(material) for material in materials]
    record = repositories.save_record(EVENTS_TABLE, payload, record_id)
    event_id = record_id or record.get("id")
    if not event_id:
        raise FormError("Saved event has no id")
    if attendee_ids is not None:
        repositories.sync_event_attendees(event_id, attendee_ids)
    if clean_materials is not None:
        repositories.sync_event_materials(event_id, clean_materials)
    logger.info("Saved event %s", event_id)
    return record
