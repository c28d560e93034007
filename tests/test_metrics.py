from datetime import date, datetime

from dashboard.metrics import (
    average_mood,
    compute_event_stats,
    compute_log_stats,
    compute_people_stats,
    compute_project_stats,
    days_ago_label,
    logs_by_day,
    recent_activity,
    total_hours,
)


def test_average_mood_skips_logs_without_mood():
    logs = [{"mood": "good"}, {"mood": "excellent"}, {"mood": None}]
    assert average_mood(logs) == 4.5


def test_average_mood_is_zero_without_moods():
    assert average_mood([{"mood": None}, {}]) == 0
    assert average_mood([]) == 0


def test_total_hours_floors_minutes():
    assert total_hours([{"duration_minutes": 90}, {"duration_minutes": 45}, {"duration_minutes": None}]) == 2


def test_log_stats_counts_week_and_month():
    now = datetime(2025, 1, 8, 12, 0)
    logs = [
        {"log_date": "2025-01-06", "duration_minutes": 60, "mood": "bad"},
        {"log_date": "2025-01-02", "duration_minutes": 30, "mood": "neutral"},
        {"log_date": "2024-12-30", "duration_minutes": 30, "mood": None},
    ]
    stats = compute_log_stats(logs, now)
    assert stats.total == 3
    assert stats.this_week == 1
    assert stats.this_month == 2
    assert stats.total_hours == 2
    assert stats.avg_mood == 2.5


def test_people_stats():
    people = [
        {"role": "Friend", "tags": ["a", "b"]},
        {"role": "Friend", "tags": ["b"]},
        {"role": "Mentor", "tags": None},
    ]
    assert compute_people_stats(people) == {"total": 3, "roles": 2, "tags": 2}


def test_project_stats():
    projects = [
        {"status": "in-progress", "progress": 40},
        {"status": "completed", "progress": 100},
        {"status": "idea", "progress": None},
    ]
    stats = compute_project_stats(projects)
    assert stats["total"] == 3
    assert stats["by_status"]["in-progress"] == 1
    assert stats["by_status"]["cancelled"] == 0
    assert stats["avg_progress"] == 70


def test_event_stats():
    today = date(2025, 3, 1)
    events = [
        {"start_date": "2025-03-01", "cost": 0, "is_featured": True},
        {"start_date": "2025-02-01", "cost": 150, "is_featured": False},
        {"start_date": None, "cost": None},
    ]
    assert compute_event_stats(events, today) == {"total": 3, "upcoming": 1, "free": 2, "featured": 1}


def test_logs_by_day_groups_scores():
    logs = [
        {"log_date": "2025-01-02", "mood": "good"},
        {"log_date": "2025-01-02", "mood": "bad"},
        {"log_date": "2025-01-01", "mood": "excellent"},
        {"log_date": "2025-01-03", "mood": None},
    ]
    assert logs_by_day(logs) == {date(2025, 1, 1): [5], date(2025, 1, 2): [4, 2]}


def test_recent_activity_is_newest_first():
    people = [{"name": "Ana", "created_at": "2025-01-03T10:00:00"}]
    projects = [{"title": "Site", "created_at": "2025-01-05T10:00:00"}]
    logs = [{"title": None, "created_at": "2025-01-04T10:00:00"}, {"title": "No date"}]
    items = recent_activity(people, projects, [], logs, limit=2)
    assert [(item["kind"], item["title"]) for item in items] == [("Project", "Site"), ("Log", "Untitled")]


def test_days_ago_label():
    now = datetime(2025, 1, 10, 12, 0)
    assert days_ago_label(datetime(2025, 1, 10, 8, 0), now) == "Today"
    assert days_ago_label(datetime(2025, 1, 9, 8, 0), now) == "Yesterday"
    assert days_ago_label(datetime(2025, 1, 5, 12, 0), now) == "5 days ago"
