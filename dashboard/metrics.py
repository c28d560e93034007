from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime

from dashboard.constants import MOOD_SCORES, Mood, ProjectStatus
from dashboard.filters import distinct_values, filter_timeline, parse_record_datetime


@dataclass
class LogStats:
    total: int
    this_week: int
    this_month: int
    total_hours: int
    avg_mood: float


def mood_score(value):
    try:
        return MOOD_SCORES[Mood(value)]
    except ValueError:
        return None


def average_mood(logs):
    """Mean mood score over logs that have a mood; 0 when none do."""
    scores = [mood_score(log.get("mood")) for log in logs if log.get("mood")]
    scores = [score for score in scores if score is not None]
    if not scores:
        return 0
    return sum(scores) / len(scores)


def total_hours(logs):
    minutes = sum(int(log.get("duration_minutes") or 0) for log in logs)
    return minutes // 60


def compute_log_stats(logs, now=None):
    return LogStats(
        total=len(logs),
        this_week=len(filter_timeline(logs, "log_date", "week", now)),
        this_month=len(filter_timeline(logs, "log_date", "month", now)),
        total_hours=total_hours(logs),
        avg_mood=average_mood(logs),
    )


def compute_people_stats(people):
    return {
        "total": len(people),
        "roles": len(distinct_values(people, "role")),
        "tags": len(distinct_values(people, "tags")),
    }


def compute_project_stats(projects):
    by_status = {status.value: 0 for status in ProjectStatus}
    for project in projects:
        status = project.get("status")
        if status in by_status:
            by_status[status] += 1
    progress_values = [int(project["progress"]) for project in projects if project.get("progress") is not None]
    avg_progress = round(sum(progress_values) / len(progress_values), 1) if progress_values else 0
    return {"total": len(projects), "by_status": by_status, "avg_progress": avg_progress}


def is_upcoming_event(event, today=None):
    today = today or date.today()
    start = parse_record_datetime(event.get("start_date"))
    return start is not None and start.date() >= today


def compute_event_stats(events, today=None):
    return {
        "total": len(events),
        "upcoming": sum(1 for event in events if is_upcoming_event(event, today)),
        "free": sum(1 for event in events if not int(event.get("cost") or 0)),
        "featured": sum(1 for event in events if event.get("is_featured")),
    }


def logs_by_day(logs):
    """Map log date -> list of mood scores, for the mood chart."""
    grouped = {}
    for log in logs:
        moment = parse_record_datetime(log.get("log_date"))
        score = mood_score(log.get("mood")) if log.get("mood") else None
        if moment is None or score is None:
            continue
        grouped.setdefault(moment.date(), []).append(score)
    return dict(sorted(grouped.items()))


def recent_activity(people, projects, events, logs, limit=5):
    items = []
    for kind, records, title_key in (
        ("Person", people, "name"),
        ("Project", projects, "title"),
        ("Event", events, "name"),
        ("Log", logs, "title"),
    ):
        for record in records:
            moment = parse_record_datetime(record.get("created_at"))
            if moment is None:
                continue
            items.append({"kind": kind, "title": record.get(title_key) or "Untitled", "at": moment})
    items.sort(key=lambda item: item["at"], reverse=True)
    return items[:limit]


def days_ago_label(moment, now=None):
    now = now or datetime.now()
    delta = now - moment
    if delta.days <= 0:
        return "Today"
    if delta.days == 1:
        return "Yesterday"
    return f"{delta.days} days ago"
