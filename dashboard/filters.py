"""List-view filtering over already fetched records.

Every function here is pure: it takes the full in-memory list and returns a
new list, so a page can recompute its visible subset on every rerun.
"""
from __future__ import annotations

import calendar as _calendar
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta

SEARCH_FIELDS = {
    "logs": (("title", "description", "highlights", "obstacles", "insights"), ("tags",)),
    "people": (("name", "profession"), ("skills", "tags")),
    "projects": (("title", "description", "category"), ("tech_stack", "tags")),
    "events": (("name", "organizer", "venue"), ("tags", "important_insights")),
}

DATE_FIELDS = {
    "logs": "log_date",
    "events": "start_date",
    "projects": "start_date",
    "people": "created_at",
}

TIMELINE_MODES = ("all", "today", "week", "month", "year")


@dataclass
class FilterCriteria:
    search: str = ""
    equals: dict = field(default_factory=dict)
    contains: dict = field(default_factory=dict)
    timeline: str = "all"

    def active_count(self):
        count = 1 if self.search else 0
        count += sum(1 for value in self.equals.values() if value)
        count += sum(1 for value in self.contains.values() if value)
        count += 1 if self.timeline != "all" else 0
        return count


def _contains_term(value, term):
    return isinstance(value, str) and term in value.lower()


def matches_search(record, term, text_fields, list_fields):
    term = (term or "").lower()
    if not term:
        return True
    for name in text_fields:
        if _contains_term(record.get(name), term):
            return True
    for name in list_fields:
        items = record.get(name) or []
        if any(_contains_term(item, term) for item in items):
            return True
    return False


def search_records(records, term, entity):
    text_fields, list_fields = SEARCH_FIELDS[entity]
    if not term:
        return list(records)
    return [record for record in records if matches_search(record, term, text_fields, list_fields)]


def filter_equals(records, name, value):
    if not value:
        return list(records)
    return [record for record in records if record.get(name) == value]


def filter_contains(records, name, value):
    if not value:
        return list(records)
    return [record for record in records if value in (record.get(name) or [])]


def timeline_range(mode, now=None):
    """Return the inclusive ``(start, end)`` pair for ``mode``, or None for "all"."""
    if mode not in TIMELINE_MODES:
        raise ValueError(f"Unknown timeline filter '{mode}'")
    if mode == "all":
        return None
    now = now or datetime.now()
    today = datetime(now.year, now.month, now.day)
    if mode == "today":
        return today, today + timedelta(days=1) - timedelta(milliseconds=1)
    if mode == "week":
        # Weeks start on Sunday.
        week_start = today - timedelta(days=(today.weekday() + 1) % 7)
        return week_start, week_start + timedelta(days=7) - timedelta(milliseconds=1)
    if mode == "month":
        last_day = _calendar.monthrange(now.year, now.month)[1]
        return datetime(now.year, now.month, 1), datetime(now.year, now.month, last_day, 23, 59, 59)
    return datetime(now.year, 1, 1), datetime(now.year, 12, 31, 23, 59, 59)


def parse_record_datetime(value):
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            return value.astimezone().replace(tzinfo=None)
        return value
    if isinstance(value, date):
        return datetime.combine(value, datetime.min.time())
    try:
        parsed = datetime.fromisoformat(str(value).strip().replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def in_range(value, date_range):
    if date_range is None:
        return True
    moment = parse_record_datetime(value)
    if moment is None:
        return False
    start, end = date_range
    return start <= moment <= end


def filter_timeline(records, date_field, mode, now=None):
    date_range = timeline_range(mode, now)
    if date_range is None:
        return list(records)
    return [record for record in records if in_range(record.get(date_field), date_range)]


def apply_filters(records, entity, criteria, now=None):
    filtered = search_records(records, criteria.search, entity)
    for name, value in criteria.equals.items():
        filtered = filter_equals(filtered, name, value)
    for name, value in criteria.contains.items():
        filtered = filter_contains(filtered, name, value)
    if criteria.timeline != "all":
        filtered = filter_timeline(filtered, DATE_FIELDS[entity], criteria.timeline, now)
    return filtered


def distinct_values(records, name):
    """Distinct non-empty values of a scalar or list field, in first-seen order."""
    seen = {}
    for record in records:
        value = record.get(name)
        items = value if isinstance(value, list) else [value]
        for item in items:
            if item:
                seen.setdefault(item, None)
    return list(seen)
