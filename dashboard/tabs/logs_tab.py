import logging
from datetime import date, time

import streamlit as st

from dashboard.components import (
    delete_button,
    render_badges,
    render_clear_filters,
    render_empty_state,
    render_filter_bar,
    section_title,
    small_label,
)
from dashboard.constants import ENERGY_LEVELS, DEFAULT_ENERGY_LEVEL, LOGS_TABLE, MOOD_META, Mood
from dashboard.data.api_client import ApiError
from dashboard.data.loaders import load_events, load_logs, load_projects, load_skills, load_tasks
from dashboard.details import DetailUnavailable, load_log_detail
from dashboard.filters import apply_filters, parse_record_datetime
from dashboard.formatting import format_date, format_duration, format_time_12h, split_duration
from dashboard.forms import FormError, clamp_int, option_index, save_log, split_list_input
from dashboard.metrics import compute_log_stats
from dashboard.navigation import navigate
from dashboard.state import session_slices
from dashboard.visualizations import hours_by_day_chart, mood_trend_chart

logger = logging.getLogger(__name__)

SLICE = "logs"
REFERENCE_LABELS = {
    "task": ("Task", "title"),
    "project": ("Project", "title"),
    "skill": ("Skill", "name"),
    "event": ("Event", "name"),
}


def render_logs_tab(ctx):
    route = ctx.route
    if route.is_form:
        return _render_form(ctx, route.record_id)
    if route.is_detail:
        return _render_detail(route.record_id)
    return _render_list(ctx)


def _mood_label(value):
    if not value:
        return "No mood"
    try:
        return MOOD_META[Mood(value)]["label"]
    except ValueError:
        return value


def _render_list(ctx):
    logs = load_logs(ctx.user_email)
    title_cols = st.columns([6, 1])
    with title_cols[0]:
        section_title("Daily Logs")
    with title_cols[1]:
        if st.button("New log", key="logs.add"):
            navigate("logs", new=True)

    if not logs:
        render_empty_state("No logs yet. Write down what you worked on today.", "logs", "Write a log")
        return

    stats = compute_log_stats(logs)
    stat_cols = st.columns(5)
    stat_cols[0].metric("Total logs", stats.total)
    stat_cols[1].metric("This week", stats.this_week)
    stat_cols[2].metric("This month", stats.this_month)
    stat_cols[3].metric("Hours logged", stats.total_hours)
    stat_cols[4].metric("Avg mood", f"{stats.avg_mood:.1f}")
    with st.expander("Charts"):
        chart_cols = st.columns(2)
        chart_cols[0].plotly_chart(mood_trend_chart(logs), use_container_width=True)
        chart_cols[1].plotly_chart(hours_by_day_chart(logs), use_container_width=True)

    render_filter_bar(SLICE, selects=(("mood", "Mood", [mood.value for mood in Mood]),))
    criteria = session_slices.get_criteria(SLICE, equals_fields=("mood",))
    render_clear_filters(SLICE, ("mood",), criteria.active_count())
    visible = apply_filters(logs, "logs", criteria)

    small_label(f"Showing {len(visible)} of {len(logs)}")
    if not visible:
        st.caption("No logs match these filters.")
    for log in visible:
        with st.container(border=True):
            cols = st.columns([5, 1, 1])
            with cols[0]:
                star = "⭐ " if log.get("is_featured") else ""
                st.markdown(f"{star}**{log.get('title')}**")
                meta = [
                    format_date(log.get("log_date")),
                    format_time_12h(log.get("log_time")),
                    format_duration(log.get("duration_minutes")),
                    _mood_label(log.get("mood")) if log.get("mood") else None,
                ]
                st.caption(" • ".join(item for item in meta if item))
                render_badges(log.get("tags"))
            if cols[1].button("View", key=f"logs.view.{log['id']}"):
                navigate("logs", record_id=log["id"])
            if cols[2].button("Edit", key=f"logs.edit.{log['id']}"):
                navigate("logs", record_id=log["id"], edit=True)


def _render_detail(log_id):
    try:
        detail = load_log_detail(log_id)
    except DetailUnavailable as exc:
        logger.info("Log detail unavailable: %s", exc)
        navigate("logs")
        return
    log = detail["log"]
    if st.button("← Back to logs", key="logs.back"):
        navigate("logs")
    section_title(log.get("title") or "Untitled log")
    info_cols = st.columns(4)
    info_cols[0].metric("Date", format_date(log.get("log_date")) or "-")
    info_cols[1].metric("Duration", format_duration(log.get("duration_minutes")))
    info_cols[2].metric("Mood", _mood_label(log.get("mood")))
    info_cols[3].metric("Energy", f"{log.get('energy_level') or DEFAULT_ENERGY_LEVEL}/5")
    if log.get("description"):
        st.write(log["description"])
    for field, label in (("highlights", "Highlights"), ("obstacles", "Obstacles"), ("insights", "Insights")):
        if log.get(field):
            small_label(label)
            st.write(log[field])

    references = [(name, detail.get(name)) for name in REFERENCE_LABELS if detail.get(name)]
    if references:
        small_label("Linked to")
        for name, record in references:
            label, title_field = REFERENCE_LABELS[name]
            text = f"{label}: {record.get(title_field) or 'Untitled'}"
            if name in ("project", "event"):
                if st.button(text, key=f"logs.ref.{name}"):
                    navigate(f"{name}s", record_id=record["id"])
            else:
                st.markdown(text)
    if log.get("attachments"):
        small_label("Attachments")
        for url in log["attachments"]:
            st.markdown(f"- [{url}]({url})")
    if log.get("tags"):
        small_label("Tags")
        render_badges(log["tags"])

    cols = st.columns(2)
    with cols[0]:
        if st.button("Edit", key="logs.detail.edit"):
            navigate("logs", record_id=log_id, edit=True)
    with cols[1]:
        delete_button(LOGS_TABLE, log_id, "logs")


def _reference_select(label, records, title_field, current):
    options = [""] + [record["id"] for record in records]
    titles = {record["id"]: record.get(title_field) or "Untitled" for record in records}
    if current and current not in titles:
        options.append(current)
        titles[current] = "(unavailable)"
    return st.selectbox(
        label,
        options,
        index=option_index(options, current, ""),
        format_func=lambda value: titles.get(value, "None"),
    )


def _render_form(ctx, log_id):
    log = {}
    if log_id:
        try:
            log = load_log_detail(log_id)["log"]
        except DetailUnavailable:
            navigate("logs")
            return
    hours, minutes = split_duration(log.get("duration_minutes"))
    log_moment = parse_record_datetime(log.get("log_date"))
    log_time = None
    if log.get("log_time"):
        try:
            hour, minute = str(log["log_time"]).split(":")[:2]
            log_time = time(int(hour), int(minute))
        except ValueError:
            log_time = None
    moods = [""] + [mood.value for mood in Mood]

    section_title("Edit log" if log_id else "New log")
    with st.form(f"logs.form.{log_id or 'new'}"):
        title = st.text_input("Title *", value=log.get("title") or "")
        description = st.text_area("Description", value=log.get("description") or "")
        date_cols = st.columns(4)
        log_date = date_cols[0].date_input("Date *", value=log_moment.date() if log_moment else date.today())
        log_time = date_cols[1].time_input("Time", value=log_time)
        duration_hours = date_cols[2].number_input("Hours", min_value=0, step=1, value=hours)
        duration_minutes = date_cols[3].number_input("Minutes", min_value=0, max_value=59, step=1, value=minutes)
        mood_cols = st.columns(2)
        mood = mood_cols[0].selectbox(
            "Mood",
            moods,
            index=option_index(moods, log.get("mood"), ""),
            format_func=_mood_label,
        )
        energy_level = mood_cols[1].select_slider(
            "Energy level",
            options=ENERGY_LEVELS,
            value=clamp_int(log.get("energy_level"), 1, 5, DEFAULT_ENERGY_LEVEL),
        )
        highlights = st.text_area("Highlights", value=log.get("highlights") or "")
        obstacles = st.text_area("Obstacles", value=log.get("obstacles") or "")
        insights = st.text_area("Insights", value=log.get("insights") or "")
        small_label("Link to")
        ref_cols = st.columns(4)
        with ref_cols[0]:
            task_id = _reference_select("Task", load_tasks(ctx.user_email), "title", log.get("task_id"))
        with ref_cols[1]:
            project_id = _reference_select("Project", load_projects(ctx.user_email), "title", log.get("project_id"))
        with ref_cols[2]:
            skill_id = _reference_select("Skill", load_skills(ctx.user_email), "name", log.get("skill_id"))
        with ref_cols[3]:
            event_id = _reference_select("Event", load_events(ctx.user_email), "name", log.get("event_id"))
        tags = st.text_input("Tags (comma-separated)", value=", ".join(log.get("tags") or []))
        attachments = st.text_area("Attachment URLs (one per line)", value="\n".join(log.get("attachments") or []))
        is_featured = st.checkbox("Featured", value=bool(log.get("is_featured")))
        submitted = st.form_submit_button("Save log")

    if st.button("Cancel", key="logs.form.cancel"):
        navigate("logs", record_id=log_id)
    if not submitted:
        return
    form = {
        "title": title,
        "description": description,
        "log_date": log_date,
        "log_time": log_time,
        "duration_hours": duration_hours,
        "duration_minutes": duration_minutes,
        "mood": mood,
        "energy_level": energy_level,
        "highlights": highlights,
        "obstacles": obstacles,
        "insights": insights,
        "task_id": task_id,
        "project_id": project_id,
        "skill_id": skill_id,
        "event_id": event_id,
        "tags": split_list_input(tags),
        "attachments": split_list_input(attachments),
        "is_featured": is_featured,
    }
    try:
        save_log(form, log_id)
    except FormError as exc:
        st.error(str(exc))
        return
    except (ApiError, RuntimeError) as exc:
        logger.error("Error saving log: %s", exc)
        st.error(f"Could not save: {exc}")
        return
    navigate("logs")
