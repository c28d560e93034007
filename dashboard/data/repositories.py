import logging

from dashboard.constants import (
    EVENT_MATERIALS_TABLE,
    EVENT_PEOPLE_TABLE,
    EVENTS_TABLE,
    LOGS_TABLE,
    PEOPLE_TABLE,
    PROJECTS_TABLE,
    SKILLS_TABLE,
    TASKS_TABLE,
)
from dashboard.data import api_client

logger = logging.getLogger(__name__)

_INVALIDATE_CALLBACK = None

LIST_ORDER = {
    PEOPLE_TABLE: ["created_at.desc"],
    PROJECTS_TABLE: ["created_at.desc"],
    EVENTS_TABLE: ["start_date.desc"],
    LOGS_TABLE: ["log_date.desc", "log_time.desc"],
    TASKS_TABLE: ["title.asc"],
    SKILLS_TABLE: ["name.asc"],
}


def configure(invalidate_callback=None):
    global _INVALIDATE_CALLBACK
    _INVALIDATE_CALLBACK = invalidate_callback


def api_enabled():
    return api_client.is_enabled()


def _invalidate():
    if _INVALIDATE_CALLBACK is None:
        return
    try:
        _INVALIDATE_CALLBACK()
    except Exception:
        logger.exception("Cache invalidation failed")


def list_records(table, order=None, eq=None, contains=None):
    return api_client.select(table, eq=eq, contains=contains, order=order or LIST_ORDER.get(table))


def get_record(table, record_id):
    return api_client.get(table, record_id)


def save_record(table, values, record_id=None):
    """Insert when ``record_id`` is empty, otherwise update that record."""
    if record_id:
        record = api_client.update(table, record_id, values)
    else:
        inserted = api_client.insert(table, values)
        record = inserted[0] if inserted else {}
    _invalidate()
    return record


def delete_record(table, record_id):
    api_client.delete(table, record_id)
    _invalidate()


def list_people(order=None):
    return list_records(PEOPLE_TABLE, order=order)


def list_projects():
    return list_records(PROJECTS_TABLE)


def list_events(order=None):
    return list_records(EVENTS_TABLE, order=order)


def list_logs():
    return list_records(LOGS_TABLE)


def list_tasks():
    return list_records(TASKS_TABLE)


def list_skills():
    return list_records(SKILLS_TABLE)


def list_event_attendee_ids(event_id):
    rows = api_client.select(EVENT_PEOPLE_TABLE, eq={"event_id": event_id})
    return [row["person_id"] for row in rows]


def list_event_materials(event_id):
    return api_client.select(EVENT_MATERIALS_TABLE, eq={"event_id": event_id}, order=["created_at.asc"])


def _material_key(material):
    return (
        (material.get("title") or "").strip(),
        (material.get("url") or None),
        material.get("type") or "link",
    )


def sync_event_attendees(event_id, person_ids):
    """Make the stored attendee links equal ``person_ids``.

    Only stale links are deleted and only missing ones inserted, so saving the
    same set twice issues no writes.
    """
    wanted = list(dict.fromkeys(person_ids or []))
    existing = api_client.select(EVENT_PEOPLE_TABLE, eq={"event_id": event_id})
    existing_ids = {row["person_id"] for row in existing}
    for row in existing:
        if row["person_id"] not in wanted:
            api_client.delete(EVENT_PEOPLE_TABLE, row["id"])
    missing = [person_id for person_id in wanted if person_id not in existing_ids]
    if missing:
        api_client.insert(
            EVENT_PEOPLE_TABLE,
            [{"event_id": event_id, "person_id": person_id} for person_id in missing],
        )
    _invalidate()


def sync_event_materials(event_id, materials):
    wanted = [_material_key(material) for material in materials or []]
    existing = list_event_materials(event_id)
    remaining = list(wanted)
    for row in existing:
        key = _material_key(row)
        if key in remaining:
            remaining.remove(key)
        else:
            api_client.delete(EVENT_MATERIALS_TABLE, row["id"])
    if remaining:
        api_client.insert(
            EVENT_MATERIALS_TABLE,
            [
                {"event_id": event_id, "title": title, "url": url, "type": material_type}
                for title, url, material_type in remaining
            ],
        )
    _invalidate()


def export_people(file_format, role=None, tag=None, skill=None):
    """Download the People export; returns ``(content, filename)``."""
    params = {"format": file_format}
    for name, value in (("role", role), ("tag", tag), ("skill", skill)):
        if value:
            params[name] = value
    return api_client.download("/v1/people/export", params=params)
