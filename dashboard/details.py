"""Detail-page loading: one primary record plus its resolved references."""
import logging

from dashboard.constants import (
    EVENTS_TABLE,
    LOGS_TABLE,
    PEOPLE_TABLE,
    PROJECTS_TABLE,
    SKILLS_TABLE,
    TASKS_TABLE,
)
from dashboard.data import repositories
from dashboard.data.api_client import RecordNotFound

logger = logging.getLogger(__name__)

LOG_REFERENCES = [
    ("task_id", TASKS_TABLE, "task"),
    ("project_id", PROJECTS_TABLE, "project"),
    ("skill_id", SKILLS_TABLE, "skill"),
    ("event_id", EVENTS_TABLE, "event"),
]


class DetailUnavailable(LookupError):
    """The primary record could not be loaded; the page goes back to its list."""


def _load_primary(table, record_id):
    if not record_id:
        raise DetailUnavailable(f"No {table} id given")
    try:
        record = repositories.get_record(table, record_id)
    except RecordNotFound as exc:
        raise DetailUnavailable(f"{table} {record_id} not found") from exc
    except Exception as exc:
        logger.error("Error fetching %s %s: %s", table, record_id, exc)
        raise DetailUnavailable(str(exc)) from exc
    if not record:
        raise DetailUnavailable(f"{table} {record_id} not found")
    return record


def _load_optional(table, record_id):
    try:
        return repositories.get_record(table, record_id) or None
    except Exception as exc:
        logger.info("Related %s %s unavailable: %s", table, record_id, exc)
        return None


def _load_optional_list(loader, *args):
    """Return ``(rows, ok)``; a failed fetch gives ``([], False)``."""
    try:
        return loader(*args), True
    except Exception as exc:
        logger.info("Related rows unavailable: %s", exc)
        return [], False


def load_log_detail(log_id):
    log = _load_primary(LOGS_TABLE, log_id)
    detail = {"log": log}
    for foreign_key, table, name in LOG_REFERENCES:
        if log.get(foreign_key):
            detail[name] = _load_optional(table, log[foreign_key])
        else:
            detail[name] = None
    return detail


def load_project_detail(project_id):
    project = _load_primary(PROJECTS_TABLE, project_id)
    member_ids = project.get("team_members") or []
    team = []
    if member_ids:
        people, _ = _load_optional_list(repositories.list_people, ["name.asc"])
        by_id = {person["id"]: person for person in people}
        team = [by_id[member_id] for member_id in member_ids if member_id in by_id]
    return {"project": project, "team": team}


def load_event_detail(event_id):
    event = _load_primary(EVENTS_TABLE, event_id)
    attendee_ids, attendees_loaded = _load_optional_list(repositories.list_event_attendee_ids, event_id)
    attendees = []
    if attendee_ids:
        people, _ = _load_optional_list(repositories.list_people, ["name.asc"])
        attendees = [person for person in people if person["id"] in set(attendee_ids)]
    materials, materials_loaded = _load_optional_list(repositories.list_event_materials, event_id)
    # The edit form must not sync a relation it could not read.
    return {
        "event": event,
        "attendee_ids": attendee_ids if attendees_loaded else None,
        "attendees": attendees,
        "materials": materials if materials_loaded else None,
    }


def load_person_detail(person_id):
    return {"person": _load_primary(PEOPLE_TABLE, person_id)}


def load_task_detail(task_id):
    return {"task": _load_primary(TASKS_TABLE, task_id)}


def load_skill_detail(skill_id):
    return {"skill": _load_primary(SKILLS_TABLE, skill_id)}
