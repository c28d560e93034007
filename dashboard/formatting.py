import re
from datetime import date

from dashboard.constants import ProjectStatus
from dashboard.filters import parse_record_datetime


def format_duration(minutes):
    minutes = int(minutes or 0)
    hours, mins = divmod(minutes, 60)
    if hours > 0 and mins > 0:
        return f"{hours}h {mins}m"
    if hours > 0:
        return f"{hours}h"
    return f"{mins}m"


def split_duration(minutes):
    return divmod(int(minutes or 0), 60)


def format_time_12h(time_string):
    if not time_string:
        return None
    parts = str(time_string).split(":")
    if len(parts) < 2:
        return None
    try:
        hour = int(parts[0])
    except ValueError:
        return None
    suffix = "PM" if hour >= 12 else "AM"
    display_hour = hour % 12 or 12
    return f"{display_hour}:{parts[1][:2]} {suffix}"


def format_date(value):
    moment = parse_record_datetime(value)
    if moment is None:
        return None
    return f"{moment.strftime('%a')}, {moment.strftime('%b')} {moment.day}, {moment.year}"


def contact_link(channel, value):
    """Build the link a contact button opens; None when the channel has no link."""
    clean = (value or "").strip()
    if not clean:
        return None
    if channel in {"instagram", "github", "twitter", "telegram"}:
        handle = clean.replace("@", "", 1)
        base = {
            "instagram": "https://instagram.com/",
            "github": "https://github.com/",
            "twitter": "https://twitter.com/",
            "telegram": "https://t.me/",
        }[channel]
        return f"{base}{handle}"
    if channel == "whatsapp":
        digits = re.sub(r"\D", "", clean)
        return f"https://wa.me/{digits}"
    if channel == "linkedin":
        if clean.startswith("http"):
            return clean
        return f"https://linkedin.com/in/{clean.lstrip('/')}"
    if channel == "email":
        return f"mailto:{clean}"
    if channel == "phone":
        return f"tel:{clean}"
    if channel == "website":
        return clean if clean.startswith("http") else f"https://{clean}"
    if channel == "discord":
        return None
    return clean


def is_project_overdue(project, today=None):
    today = today or date.today()
    deadline = parse_record_datetime(project.get("deadline"))
    if deadline is None:
        return False
    return deadline.date() < today and project.get("status") != ProjectStatus.COMPLETED.value


def is_event_past(event, today=None):
    today = today or date.today()
    moment = parse_record_datetime(event.get("end_date") or event.get("start_date"))
    if moment is None:
        return False
    return moment.date() < today


def event_location(event):
    if event.get("is_online"):
        return "Online"
    return event.get("venue") or None


def format_cost(cost):
    cost = int(cost or 0)
    if cost == 0:
        return "Free"
    return f"{cost:,}"
