from datetime import datetime, timezone

import pytest

from dashboard.filters import (
    FilterCriteria,
    apply_filters,
    distinct_values,
    filter_timeline,
    matches_search,
    parse_record_datetime,
    search_records,
    timeline_range,
)


LOGS = [
    {"id": "1", "title": "Wrote API docs", "description": None, "tags": ["writing"], "mood": "good", "log_date": "2025-01-08"},
    {"id": "2", "title": "Gym", "highlights": "New PR on deadlift", "tags": [], "mood": "excellent", "log_date": "2025-01-03"},
    {"id": "3", "title": "Reading", "insights": "Spaced repetition works", "tags": ["Learning"], "mood": None, "log_date": "not a date"},
]


def test_search_matches_any_designated_field_case_insensitively():
    assert [log["id"] for log in search_records(LOGS, "api", "logs")] == ["1"]
    assert [log["id"] for log in search_records(LOGS, "DEADLIFT", "logs")] == ["2"]
    assert [log["id"] for log in search_records(LOGS, "learn", "logs")] == ["3"]


def test_search_ignores_fields_outside_the_entity_list():
    person = {"name": "Ana", "notes": "met at the python meetup", "skills": ["Go"], "tags": None}
    assert not matches_search(person, "python", ("name", "profession"), ("skills", "tags"))
    assert matches_search(person, "go", ("name", "profession"), ("skills", "tags"))


def test_empty_search_term_keeps_everything():
    assert search_records(LOGS, "", "logs") == LOGS
    assert search_records(LOGS, None, "logs") == LOGS


def test_search_term_whitespace_is_part_of_the_match():
    assert search_records(LOGS, "   ", "logs") == []
    assert [log["id"] for log in search_records(LOGS, " api", "logs")] == ["1"]
    person = {"name": "Ana", "profession": "xfoo"}
    assert not matches_search(person, " foo", ("name", "profession"), ())
    assert FilterCriteria(search=" ").active_count() == 1


def test_today_includes_midnight_and_excludes_previous_evening():
    now = datetime(2025, 1, 8, 15, 30)
    records = [
        {"id": "midnight", "log_date": "2025-01-08T00:00:00"},
        {"id": "late", "log_date": "2025-01-08T23:59:59"},
        {"id": "yesterday", "log_date": "2025-01-07T23:59:59"},
    ]
    kept = [record["id"] for record in filter_timeline(records, "log_date", "today", now)]
    assert kept == ["midnight", "late"]


def test_week_starts_on_sunday():
    start, end = timeline_range("week", datetime(2025, 1, 8, 9, 0))
    assert start == datetime(2025, 1, 5)
    assert end.date() == datetime(2025, 1, 11).date()
    assert end < datetime(2025, 1, 12)

    sunday_start, _ = timeline_range("week", datetime(2025, 1, 5, 12, 0))
    assert sunday_start == datetime(2025, 1, 5)


def test_month_and_year_bounds():
    start, end = timeline_range("month", datetime(2024, 2, 10))
    assert start == datetime(2024, 2, 1)
    assert end == datetime(2024, 2, 29, 23, 59, 59)
    start, end = timeline_range("year", datetime(2024, 6, 1))
    assert (start, end) == (datetime(2024, 1, 1), datetime(2024, 12, 31, 23, 59, 59))


def test_all_mode_has_no_range_and_unknown_mode_raises():
    assert timeline_range("all") is None
    with pytest.raises(ValueError):
        timeline_range("decade")


def test_unparseable_and_missing_dates_fail_active_timeline():
    now = datetime(2025, 1, 8, 12, 0)
    records = LOGS + [{"id": "4", "log_date": None}]
    kept = [record["id"] for record in filter_timeline(records, "log_date", "month", now)]
    assert kept == ["1", "2"]
    assert len(filter_timeline(records, "log_date", "all", now)) == 4


def test_apply_filters_combines_dimensions_with_and():
    now = datetime(2025, 1, 8, 12, 0)
    criteria = FilterCriteria(search="", equals={"mood": "good"}, timeline="week")
    assert [log["id"] for log in apply_filters(LOGS, "logs", criteria, now)] == ["1"]

    criteria = FilterCriteria(search="gym", equals={"mood": "good"})
    assert apply_filters(LOGS, "logs", criteria, now) == []


def test_membership_filter_on_list_field():
    people = [
        {"id": "a", "name": "Ana", "tags": ["python", "mentor"], "role": "Friend"},
        {"id": "b", "name": "Bo", "tags": None, "role": "Client"},
    ]
    criteria = FilterCriteria(contains={"tags": "python"})
    assert [person["id"] for person in apply_filters(people, "people", criteria)] == ["a"]
    criteria = FilterCriteria(equals={"role": ""}, contains={"tags": ""})
    assert len(apply_filters(people, "people", criteria)) == 2


def test_active_count():
    assert FilterCriteria().active_count() == 0
    criteria = FilterCriteria(search="x", equals={"role": "Friend", "mood": ""}, contains={"tags": "a"}, timeline="week")
    assert criteria.active_count() == 4


def test_distinct_values_keeps_first_seen_order():
    people = [
        {"role": "Mentor", "skills": ["Go", "SQL"]},
        {"role": None, "skills": ["SQL", "Rust"]},
        {"role": "Friend", "skills": None},
        {"role": "Mentor"},
    ]
    assert distinct_values(people, "role") == ["Mentor", "Friend"]
    assert distinct_values(people, "skills") == ["Go", "SQL", "Rust"]


def test_offset_timestamps_are_read_as_local_time():
    stored = "2025-01-08T23:30:00+00:00"
    expected = datetime(2025, 1, 8, 23, 30, tzinfo=timezone.utc).astimezone().replace(tzinfo=None)
    assert parse_record_datetime(stored) == expected
    assert parse_record_datetime("2025-01-08T23:30:00") == datetime(2025, 1, 8, 23, 30)
