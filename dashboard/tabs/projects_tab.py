import logging

import streamlit as st

from dashboard.components import (
    delete_button,
    link_button,
    render_badges,
    render_clear_filters,
    render_empty_state,
    render_filter_bar,
    section_title,
    small_label,
)
from dashboard.constants import (
    PROJECT_CATEGORIES,
    PROJECT_PRIORITY_META,
    PROJECT_STATUS_META,
    PROJECTS_TABLE,
    ProjectPriority,
    ProjectStatus,
)
from dashboard.data.api_client import ApiError
from dashboard.data.loaders import load_people, load_projects
from dashboard.details import DetailUnavailable, load_project_detail
from dashboard.filters import apply_filters, distinct_values, parse_record_datetime
from dashboard.formatting import format_date, is_project_overdue
from dashboard.forms import FormError, clamp_int, keep_unlisted, option_index, save_project, split_list_input
from dashboard.metrics import compute_project_stats
from dashboard.navigation import navigate
from dashboard.state import session_slices
from dashboard.visualizations import project_status_chart

logger = logging.getLogger(__name__)

SLICE = "projects"


def render_projects_tab(ctx):
    route = ctx.route
    if route.is_form:
        return _render_form(ctx, route.record_id)
    if route.is_detail:
        return _render_detail(route.record_id)
    return _render_list(ctx)


def _status_label(value):
    try:
        return PROJECT_STATUS_META[ProjectStatus(value)]["label"]
    except ValueError:
        return value


def _priority_label(value):
    try:
        return PROJECT_PRIORITY_META[ProjectPriority(value)]["label"]
    except ValueError:
        return value


def _date_value(value):
    moment = parse_record_datetime(value)
    return moment.date() if moment else None


def _render_list(ctx):
    projects = load_projects(ctx.user_email)
    title_cols = st.columns([6, 1])
    with title_cols[0]:
        section_title("Projects")
    with title_cols[1]:
        if st.button("New project", key="projects.add"):
            navigate("projects", new=True)

    if not projects:
        render_empty_state("No projects yet. Start by adding one.", "projects", "Create a project")
        return

    stats = compute_project_stats(projects)
    stat_cols = st.columns(4)
    stat_cols[0].metric("Projects", stats["total"])
    stat_cols[1].metric("In progress", stats["by_status"][ProjectStatus.IN_PROGRESS.value])
    stat_cols[2].metric("Completed", stats["by_status"][ProjectStatus.COMPLETED.value])
    stat_cols[3].metric("Avg progress", f"{stats['avg_progress']}%")
    with st.expander("Status breakdown"):
        st.plotly_chart(project_status_chart(stats["by_status"]), use_container_width=True)

    categories = list(dict.fromkeys(PROJECT_CATEGORIES + distinct_values(projects, "category")))
    render_filter_bar(
        SLICE,
        selects=(
            ("status", "Status", [status.value for status in ProjectStatus]),
            ("category", "Category", categories),
        ),
    )
    criteria = session_slices.get_criteria(SLICE, equals_fields=("status", "category"))
    render_clear_filters(SLICE, ("status", "category"), criteria.active_count())
    visible = apply_filters(projects, "projects", criteria)

    small_label(f"Showing {len(visible)} of {len(projects)}")
    if not visible:
        st.caption("No projects match these filters.")
    for project in visible:
        with st.container(border=True):
            cols = st.columns([5, 1, 1])
            with cols[0]:
                st.markdown(f"**{project.get('title')}**")
                meta = [_status_label(project.get("status")), _priority_label(project.get("priority"))]
                if project.get("category"):
                    meta.append(project["category"])
                if is_project_overdue(project):
                    meta.append("Overdue")
                st.caption(" • ".join(item for item in meta if item))
                st.progress(clamp_int(project.get("progress"), 0, 100, 0))
            if cols[1].button("View", key=f"projects.view.{project['id']}"):
                navigate("projects", record_id=project["id"])
            if cols[2].button("Edit", key=f"projects.edit.{project['id']}"):
                navigate("projects", record_id=project["id"], edit=True)


def _render_detail(project_id):
    try:
        detail = load_project_detail(project_id)
    except DetailUnavailable as exc:
        logger.info("Project detail unavailable: %s", exc)
        navigate("projects")
        return
    project = detail["project"]
    if st.button("← Back to projects", key="projects.back"):
        navigate("projects")
    section_title(project.get("title") or "Untitled project")
    st.caption(" • ".join(
        item
        for item in (_status_label(project.get("status")), _priority_label(project.get("priority")), project.get("category"))
        if item
    ))
    if is_project_overdue(project):
        st.error(f"Overdue since {format_date(project.get('deadline'))}")
    progress = clamp_int(project.get("progress"), 0, 100, 0)
    st.progress(progress, text=f"{progress}% complete")
    if project.get("description"):
        st.write(project["description"])

    date_cols = st.columns(3)
    date_cols[0].metric("Started", format_date(project.get("start_date")) or "-")
    date_cols[1].metric("Deadline", format_date(project.get("deadline")) or "-")
    date_cols[2].metric("Completed", format_date(project.get("completed_at")) or "-")

    if project.get("tech_stack"):
        small_label("Tech stack")
        render_badges(project["tech_stack"])
    if project.get("tags"):
        small_label("Tags")
        render_badges(project["tags"])
    if detail["team"]:
        small_label("Team")
        for member in detail["team"]:
            if st.button(member.get("name") or "Unnamed", key=f"projects.member.{member['id']}"):
                navigate("people", record_id=member["id"])
    link_cols = st.columns(2)
    with link_cols[0]:
        link_button("GitHub", project.get("github_url"))
    with link_cols[1]:
        link_button("Live demo", project.get("demo_url"))
    if project.get("notes"):
        small_label("Notes")
        st.write(project["notes"])

    cols = st.columns(2)
    with cols[0]:
        if st.button("Edit", key="projects.detail.edit"):
            navigate("projects", record_id=project_id, edit=True)
    with cols[1]:
        delete_button(PROJECTS_TABLE, project_id, "projects")


def _render_form(ctx, project_id):
    project = {}
    if project_id:
        try:
            project = load_project_detail(project_id)["project"]
        except DetailUnavailable:
            navigate("projects")
            return
    people = load_people(ctx.user_email)
    people_by_id = {person["id"]: person.get("name") or "Unnamed" for person in people}
    categories = list(dict.fromkeys(PROJECT_CATEGORIES + ([project["category"]] if project.get("category") else [])))
    statuses = [status.value for status in ProjectStatus]
    priorities = [priority.value for priority in ProjectPriority]

    section_title("Edit project" if project_id else "New project")
    with st.form(f"projects.form.{project_id or 'new'}"):
        title = st.text_input("Title *", value=project.get("title") or "")
        description = st.text_area("Description", value=project.get("description") or "")
        cols = st.columns(3)
        category = cols[0].selectbox(
            "Category",
            [""] + categories,
            index=([""] + categories).index(project.get("category") or ""),
            format_func=lambda value: value.title() if value else "Select a category",
        )
        priority = cols[1].selectbox(
            "Priority",
            priorities,
            index=option_index(priorities, project.get("priority"), ProjectPriority.MEDIUM.value),
            format_func=_priority_label,
        )
        status = cols[2].selectbox(
            "Status",
            statuses,
            index=option_index(statuses, project.get("status"), ProjectStatus.IDEA.value),
            format_func=_status_label,
        )
        progress = st.slider("Progress (%)", 0, 100, clamp_int(project.get("progress"), 0, 100, 0))
        tech_stack = st.text_input("Tech stack (comma-separated)", value=", ".join(project.get("tech_stack") or []))
        tags = st.text_input("Tags (comma-separated)", value=", ".join(project.get("tags") or []))
        team_members = st.multiselect(
            "Team members",
            list(people_by_id),
            default=[member for member in project.get("team_members") or [] if member in people_by_id],
            format_func=people_by_id.get,
        )
        date_cols = st.columns(3)
        start_date = date_cols[0].date_input("Start date", value=_date_value(project.get("start_date")))
        deadline = date_cols[1].date_input("Deadline", value=_date_value(project.get("deadline")))
        completed_at = date_cols[2].date_input("Completed on", value=_date_value(project.get("completed_at")))
        github_url = st.text_input("GitHub URL", value=project.get("github_url") or "")
        demo_url = st.text_input("Demo URL", value=project.get("demo_url") or "")
        notes = st.text_area("Notes", value=project.get("notes") or "")
        submitted = st.form_submit_button("Save project")

    if st.button("Cancel", key="projects.form.cancel"):
        navigate("projects", record_id=project_id)
    if not submitted:
        return
    form = {
        "title": title,
        "description": description,
        "category": category,
        "priority": priority,
        "status": status,
        "progress": progress,
        "tech_stack": split_list_input(tech_stack),
        "tags": split_list_input(tags),
        "team_members": keep_unlisted(team_members, project.get("team_members"), people_by_id),
        "start_date": start_date,
        "deadline": deadline,
        "completed_at": completed_at,
        "github_url": github_url,
        "demo_url": demo_url,
        "notes": notes,
    }
    try:
        save_project(form, project_id)
    except FormError as exc:
        st.error(str(exc))
        return
    except (ApiError, RuntimeError) as exc:
        logger.error("Error saving project: %s", exc)
        st.error(f"Could not save: {exc}")
        return
    navigate("projects")
