import streamlit as st

from dashboard.components import section_title, small_label
from dashboard.data.loaders import load_counts, load_events, load_logs, load_people, load_projects
from dashboard.formatting import format_date
from dashboard.metrics import days_ago_label, is_upcoming_event, recent_activity
from dashboard.navigation import navigate

QUICK_ACTIONS = [
    ("Add person", "people"),
    ("New project", "projects"),
    ("New event", "events"),
    ("Write log", "logs"),
    ("Add skill", "skills"),
]


def render_home_tab(ctx):
    if not ctx.api_enabled:
        st.info("Connect the backend to start tracking people, projects, events and logs.")
        return

    counts = load_counts(ctx.user_email)
    cols = st.columns(4)
    cols[0].metric("People", counts["people"])
    cols[1].metric("Projects", counts["projects"])
    cols[2].metric("Skills", counts["skills"])
    cols[3].metric("Events", counts["events"])

    small_label("Quick actions")
    action_cols = st.columns(len(QUICK_ACTIONS))
    for column, (label, page) in zip(action_cols, QUICK_ACTIONS):
        if column.button(label, key=f"home.quick.{page}", use_container_width=True):
            navigate(page, new=True)

    people = load_people(ctx.user_email)
    projects = load_projects(ctx.user_email)
    events = load_events(ctx.user_email)
    logs = load_logs(ctx.user_email)

    left, right = st.columns(2)
    with left:
        section_title("Recent activity")
        activity = recent_activity(people, projects, events, logs)
        if not activity:
            st.caption("Nothing recorded yet.")
        for item in activity:
            st.markdown(f"**{item['kind']}** · {item['title']}")
            st.caption(days_ago_label(item["at"]))
    with right:
        section_title("Upcoming events")
        upcoming = sorted(
            (event for event in events if is_upcoming_event(event)),
            key=lambda event: event.get("start_date") or "",
        )[:5]
        if not upcoming:
            st.caption("No upcoming events.")
        for event in upcoming:
            if st.button(
                f"{event.get('name')} · {format_date(event.get('start_date'))}",
                key=f"home.event.{event['id']}",
            ):
                navigate("events", record_id=event["id"])
