import pytest

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
from dashboard.details import (
    DetailUnavailable,
    load_event_detail,
    load_log_detail,
    load_person_detail,
    load_project_detail,
    load_skill_detail,
    load_task_detail,
)


def test_log_detail_resolves_present_references(table_store):
    project = table_store.seed(PROJECTS_TABLE, title="Site")
    log = table_store.seed(LOGS_TABLE, title="Deep work", project_id=project["id"], task_id="gone", skill_id=None)

    detail = load_log_detail(log["id"])
    assert detail["log"]["title"] == "Deep work"
    assert detail["project"]["title"] == "Site"
    assert detail["task"] is None
    assert detail["skill"] is None
    assert detail["event"] is None


def test_log_detail_only_fetches_present_foreign_keys(table_store):
    log = table_store.seed(LOGS_TABLE, title="Reading")
    load_log_detail(log["id"])
    assert [call[1] for call in table_store.calls] == [f"/v1/tables/{LOGS_TABLE}/{log['id']}"]


def test_missing_primary_record_is_unavailable(table_store):
    with pytest.raises(DetailUnavailable):
        load_log_detail("missing")
    with pytest.raises(DetailUnavailable):
        load_person_detail(None)


def test_failed_primary_fetch_is_unavailable(table_store, monkeypatch):
    from dashboard.data import api_client

    def broken(*args, **kwargs):
        raise api_client.ApiError(500, "boom")

    monkeypatch.setattr(api_client, "request", broken)
    with pytest.raises(DetailUnavailable):
        load_project_detail("p1")


def test_project_detail_lists_known_team_members(table_store):
    ana = table_store.seed(PEOPLE_TABLE, name="Ana")
    bo = table_store.seed(PEOPLE_TABLE, name="Bo")
    project = table_store.seed(PROJECTS_TABLE, title="Site", team_members=[bo["id"], "deleted", ana["id"]])

    detail = load_project_detail(project["id"])
    assert [member["name"] for member in detail["team"]] == ["Bo", "Ana"]


def test_event_detail_includes_attendees_and_materials(table_store):
    ana = table_store.seed(PEOPLE_TABLE, name="Ana")
    table_store.seed(PEOPLE_TABLE, name="Bo")
    event = table_store.seed(EVENTS_TABLE, name="PyCon")
    other = table_store.seed(EVENTS_TABLE, name="Meetup")
    table_store.seed(EVENT_PEOPLE_TABLE, event_id=event["id"], person_id=ana["id"])
    table_store.seed(EVENT_PEOPLE_TABLE, event_id=other["id"], person_id="someone")
    table_store.seed(EVENT_MATERIALS_TABLE, event_id=event["id"], title="Slides", url=None, type="slides")

    detail = load_event_detail(event["id"])
    assert detail["attendee_ids"] == [ana["id"]]
    assert [person["name"] for person in detail["attendees"]] == ["Ana"]
    assert [material["title"] for material in detail["materials"]] == ["Slides"]


def test_event_detail_marks_unreadable_materials(table_store, monkeypatch):
    from dashboard.data import repositories

    ana = table_store.seed(PEOPLE_TABLE, name="Ana")
    event = table_store.seed(EVENTS_TABLE, name="PyCon")
    table_store.seed(EVENT_PEOPLE_TABLE, event_id=event["id"], person_id=ana["id"])

    def broken(event_id):
        raise RuntimeError("timeout")

    monkeypatch.setattr(repositories, "list_event_materials", broken)
    detail = load_event_detail(event["id"])
    assert detail["materials"] is None
    assert detail["attendee_ids"] == [ana["id"]]


def test_task_and_skill_details(table_store):
    task = table_store.seed(TASKS_TABLE, title="Draft")
    skill = table_store.seed(SKILLS_TABLE, name="SQL", level=3)
    assert load_task_detail(task["id"])["task"]["title"] == "Draft"
    assert load_skill_detail(skill["id"])["skill"]["name"] == "SQL"
    with pytest.raises(DetailUnavailable):
        load_task_detail("missing")
