import logging

import streamlit as st

from dashboard.components import delete_button, render_empty_state, section_title, small_label
from dashboard.constants import TASK_STATUS_META, TASKS_TABLE, TaskStatus
from dashboard.data.api_client import ApiError
from dashboard.data.loaders import load_tasks
from dashboard.details import DetailUnavailable, load_task_detail
from dashboard.filters import parse_record_datetime
from dashboard.formatting import format_date
from dashboard.forms import FormError, option_index, save_task
from dashboard.navigation import navigate

logger = logging.getLogger(__name__)


def render_tasks_tab(ctx):
    route = ctx.route
    # Tasks have no separate card; opening one goes straight to its form.
    if route.is_form or route.is_detail:
        return _render_form(route.record_id)
    return _render_list(ctx)


def _status_label(value):
    try:
        return TASK_STATUS_META[TaskStatus(value)]["label"]
    except ValueError:
        return value


def _render_list(ctx):
    tasks = load_tasks(ctx.user_email)
    title_cols = st.columns([6, 1])
    with title_cols[0]:
        section_title("Tasks")
    with title_cols[1]:
        if st.button("New task", key="tasks.add"):
            navigate("tasks", new=True)

    if not tasks:
        render_empty_state("No tasks yet. Add one to link it from your daily logs.", "tasks", "Add a task")
        return

    for status in TaskStatus:
        group = [task for task in tasks if (task.get("status") or TaskStatus.TODO.value) == status.value]
        if not group:
            continue
        small_label(f"{_status_label(status.value)} ({len(group)})")
        for task in group:
            cols = st.columns([5, 1, 1])
            due = format_date(task.get("due_date"))
            cols[0].markdown(f"**{task.get('title')}**" + (f" · due {due}" if due else ""))
            if cols[1].button("Edit", key=f"tasks.edit.{task['id']}"):
                navigate("tasks", record_id=task["id"], edit=True)
            with cols[2]:
                delete_button(TASKS_TABLE, task["id"], "tasks")


def _render_form(task_id):
    task = {}
    if task_id:
        try:
            task = load_task_detail(task_id)["task"]
        except DetailUnavailable:
            navigate("tasks")
            return
    statuses = [status.value for status in TaskStatus]
    due_moment = parse_record_datetime(task.get("due_date"))

    section_title("Edit task" if task_id else "New task")
    with st.form(f"tasks.form.{task_id or 'new'}"):
        title = st.text_input("Title *", value=task.get("title") or "")
        cols = st.columns(2)
        status = cols[0].selectbox(
            "Status",
            statuses,
            index=option_index(statuses, task.get("status"), TaskStatus.TODO.value),
            format_func=_status_label,
        )
        due_date = cols[1].date_input("Due date", value=due_moment.date() if due_moment else None)
        notes = st.text_area("Notes", value=task.get("notes") or "")
        submitted = st.form_submit_button("Save task")

    if st.button("Cancel", key="tasks.form.cancel"):
        navigate("tasks")
    if not submitted:
        return
    try:
        save_task({"title": title, "status": status, "due_date": due_date, "notes": notes}, task_id)
    except FormError as exc:
        st.error(str(exc))
        return
    except (ApiError, RuntimeError) as exc:
        logger.error("Error saving task: %s", exc)
        st.error(f"Could not save: {exc}")
        return
    navigate("tasks")
