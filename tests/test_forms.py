from datetime import date, time

import pytest

from dashboard.constants import (
    EVENT_MATERIALS_TABLE,
    EVENT_PEOPLE_TABLE,
    EVENTS_TABLE,
    PEOPLE_TABLE,
    PROJECTS_TABLE,
    SKILLS_TABLE,
    TASKS_TABLE,
)
from dashboard.data.api_client import ApiError
from dashboard.forms import (
    FormError,
    add_unique,
    clamp_int,
    keep_unlisted,
    normalize_event,
    normalize_log,
    normalize_person,
    normalize_project,
    normalize_skill,
    normalize_task,
    option_index,
    save_event,
    save_person,
    save_project,
    save_skill,
    save_task,
    split_list_input,
)


def test_person_empty_values_become_none():
    payload = normalize_person({"name": "  Ana  ", "skills": [], "notes": "", "tags": [" ", ""]})
    assert payload["name"] == "Ana"
    assert payload["skills"] is None
    assert payload["notes"] is None
    assert payload["tags"] is None
    assert payload["contacts"] is None


def test_person_contacts_drop_empty_channels():
    payload = normalize_person({
        "name": "Ana",
        "contacts": {"email": " ana@example.com ", "github": "", "discord": None, "fax": "123"},
    })
    assert payload["contacts"] == {"email": "ana@example.com"}


def test_person_name_is_required():
    with pytest.raises(FormError):
        normalize_person({"name": "   "})


def test_project_defaults_and_clamping():
    payload = normalize_project({"title": "Site", "progress": 140, "start_date": date(2025, 2, 1), "tech_stack": []})
    assert payload["status"] == "idea"
    assert payload["priority"] == "medium"
    assert payload["progress"] == 100
    assert payload["start_date"] == "2025-02-01"
    assert payload["tech_stack"] is None
    with pytest.raises(FormError):
        normalize_project({"title": "Site", "status": "someday"})


def test_online_event_keeps_meeting_url_only():
    online = normalize_event({"name": "Talk", "is_online": True, "venue": "Hall", "meeting_url": "https://meet"})
    assert online["venue"] is None
    assert online["meeting_url"] == "https://meet"
    onsite = normalize_event({"name": "Talk", "is_online": False, "venue": "Hall", "meeting_url": "https://meet"})
    assert onsite["venue"] == "Hall"
    assert onsite["meeting_url"] is None


def test_event_cost_must_be_non_negative_integer():
    assert normalize_event({"name": "Talk", "cost": ""})["cost"] == 0
    with pytest.raises(FormError):
        normalize_event({"name": "Talk", "cost": -5})
    with pytest.raises(FormError):
        normalize_event({"name": "Talk", "cost": "ten"})


def test_event_insights_keep_duplicates_and_order():
    payload = normalize_event({"name": "Talk", "important_insights": ["b", "a", "b"], "start_time": time(9, 5)})
    assert payload["important_insights"] == ["b", "a", "b"]
    assert payload["start_time"] == "09:05"


def test_log_duration_and_energy_default():
    payload = normalize_log({"title": "Deep work", "log_date": date(2025, 1, 8), "duration_hours": 1, "duration_minutes": 30})
    assert payload["duration_minutes"] == 90
    assert payload["energy_level"] == 3
    assert payload["mood"] is None
    assert payload["log_date"] == "2025-01-08"
    assert payload["task_id"] is None


def test_log_requires_title_and_date():
    with pytest.raises(FormError):
        normalize_log({"title": "", "log_date": "2025-01-08"})
    with pytest.raises(FormError):
        normalize_log({"title": "Deep work", "log_date": None})


def test_list_inputs_deduplicate():
    assert split_list_input("python, sql,python,, Go ") == ["python", "sql", "Go"]
    assert add_unique(["a"], " a ") == ["a"]
    assert add_unique(["a"], "b") == ["a", "b"]


def test_save_person_inserts_then_updates(table_store):
    created = save_person({"name": "Ana", "skills": ["Go"]})
    assert table_store.rows(PEOPLE_TABLE)[0]["name"] == "Ana"

    save_person({"name": "Ana Lima", "skills": []}, created["id"])
    stored = table_store.rows(PEOPLE_TABLE)[0]
    assert stored["name"] == "Ana Lima"
    assert stored["skills"] is None
    assert [call[0] for call in table_store.writes()] == ["POST", "PATCH"]


def test_failed_validation_writes_nothing(table_store):
    with pytest.raises(FormError):
        save_event({"name": ""}, ["a"], [])
    assert table_store.calls == []


def test_event_attendees_are_replaced_by_difference(table_store):
    event = save_event({"name": "PyCon"}, ["A", "B"], [])
    event_id = event["id"]
    save_event({"name": "PyCon"}, ["B", "C"], [], event_id)

    links = table_store.rows(EVENT_PEOPLE_TABLE)
    assert {row["person_id"] for row in links} == {"B", "C"}
    assert all(row["event_id"] == event_id for row in links)
    assert len(table_store.rows(EVENTS_TABLE)) == 1


def test_resaving_same_event_only_updates_the_event(table_store):
    materials = [{"title": "Slides", "url": "https://slides", "type": "slides"}]
    event = save_event({"name": "PyCon"}, ["A"], materials)
    table_store.calls.clear()

    save_event({"name": "PyCon"}, ["A"], materials, event["id"])
    assert [(call[0], call[1]) for call in table_store.writes()] == [("PATCH", f"/v1/tables/{EVENTS_TABLE}/{event['id']}")]


def test_event_materials_sync(table_store):
    first = {"title": "Slides", "url": "https://slides", "type": "slides"}
    second = {"title": "Recording", "url": None, "type": "video"}
    third = {"title": "Notes", "url": "", "type": ""}
    event = save_event({"name": "PyCon"}, [], [first, second])
    save_event({"name": "PyCon"}, [], [second, third], event["id"])

    stored = sorted(
        (row["title"], row["url"], row["type"]) for row in table_store.rows(EVENT_MATERIALS_TABLE)
    )
    assert stored == [("Notes", None, "link"), ("Recording", None, "video")]


def test_material_without_title_is_rejected(table_store):
    with pytest.raises(FormError):
        save_event({"name": "PyCon"}, [], [{"title": " ", "url": "https://x"}])
    assert table_store.calls == []


def test_unreadable_attendees_survive_an_edit(table_store, monkeypatch):
    from dashboard.data import repositories
    from dashboard.details import load_event_detail

    event = save_event({"name": "Meetup"}, ["A", "B"], [{"title": "Slides"}])

    def broken(event_id):
        raise ApiError(None, "connection reset")

    with monkeypatch.context() as patch:
        patch.setattr(repositories, "list_event_attendee_ids", broken)
        detail = load_event_detail(event["id"])
    assert detail["attendee_ids"] is None

    save_event({"name": "Meetup v2"}, detail["attendee_ids"], detail["materials"], event["id"])
    assert {row["person_id"] for row in table_store.rows(EVENT_PEOPLE_TABLE)} == {"A", "B"}
    assert [row["title"] for row in table_store.rows(EVENT_MATERIALS_TABLE)] == ["Slides"]
    assert table_store.rows(EVENTS_TABLE)[0]["name"] == "Meetup v2"


def test_none_materials_leave_stored_materials_alone(table_store):
    event = save_event({"name": "Meetup"}, [], [{"title": "Slides"}])
    table_store.calls.clear()
    save_event({"name": "Meetup"}, [], None, event["id"])
    assert [row["title"] for row in table_store.rows(EVENT_MATERIALS_TABLE)] == ["Slides"]
    assert all(call[1].startswith(f"/v1/tables/{EVENTS_TABLE}") or call[0] == "GET" for call in table_store.calls)


def test_keep_unlisted_preserves_ids_the_picker_could_not_show():
    assert keep_unlisted(["B"], ["A", "B", "X"], {"A": "Ana", "B": "Bo"}) == ["B", "X"]
    assert keep_unlisted([], ["A", "X"], {}) == ["A", "X"]
    assert keep_unlisted(["A"], None, {"A": "Ana"}) == ["A"]


def test_project_edit_after_failed_people_load_keeps_team(table_store):
    project = save_project({"title": "Site", "team_members": ["A", "B"]})
    team = keep_unlisted([], project["team_members"], {})
    save_project({"title": "Site", "team_members": team}, project["id"])
    assert table_store.rows(PROJECTS_TABLE)[0]["team_members"] == ["A", "B"]


def test_option_index_falls_back_for_unknown_values():
    options = ["idea", "planning", "completed"]
    assert option_index(options, "planning", "idea") == 1
    assert option_index(options, "someday", "idea") == 0
    assert option_index(options, None, "completed") == 2
    assert option_index(options, "someday") == 0
    assert clamp_int(9, 1, 5, 3) == 5
    assert clamp_int("high", 1, 5, 3) == 3


def test_task_defaults_and_required_title():
    payload = normalize_task({"title": " Write report ", "due_date": date(2025, 3, 1), "notes": ""})
    assert payload == {"title": "Write report", "status": "todo", "due_date": "2025-03-01", "notes": None}
    with pytest.raises(FormError):
        normalize_task({"title": "  "})
    with pytest.raises(FormError):
        normalize_task({"title": "Write", "status": "blocked"})


def test_skill_level_is_clamped_and_name_required():
    assert normalize_skill({"name": "Python", "level": 9})["level"] == 5
    assert normalize_skill({"name": "Python", "level": 0})["level"] == 1
    assert normalize_skill({"name": "Python"})["level"] == 1
    with pytest.raises(FormError):
        normalize_skill({"name": ""})


def test_task_and_skill_saves_insert_then_update(table_store):
    task = save_task({"title": "Draft"})
    save_task({"title": "Draft", "status": "done"}, task["id"])
    skill = save_skill({"name": "SQL", "level": 2})
    assert table_store.rows(TASKS_TABLE)[0]["status"] == "done"
    assert table_store.rows(SKILLS_TABLE)[0]["id"] == skill["id"]
    assert [call[0] for call in table_store.writes()] == ["POST", "PATCH", "POST"]
