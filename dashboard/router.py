import streamlit as st

from dashboard.tabs.events_tab import render_events_tab
from dashboard.tabs.home_tab import render_home_tab
from dashboard.tabs.logs_tab import render_logs_tab
from dashboard.tabs.people_tab import render_people_tab
from dashboard.tabs.projects_tab import render_projects_tab
from dashboard.tabs.skills_tab import render_skills_tab
from dashboard.tabs.tasks_tab import render_tasks_tab


PAGE_LABELS = {
    "home": "Dashboard",
    "people": "People",
    "projects": "Projects",
    "events": "Events",
    "logs": "Daily Logs",
    "tasks": "Tasks",
    "skills": "Skills",
}


def _on_page_change():
    page = st.session_state.get("ui.page") or "home"
    st.query_params.clear()
    st.query_params["page"] = page


def render_router(ctx):
    route = ctx.route
    st.session_state["ui.page"] = route.page
    with st.sidebar:
        st.radio(
            "Workspace",
            list(PAGE_LABELS),
            format_func=PAGE_LABELS.get,
            key="ui.page",
            on_change=_on_page_change,
        )

    if route.page == "people":
        return render_people_tab(ctx)
    if route.page == "projects":
        return render_projects_tab(ctx)
    if route.page == "events":
        return render_events_tab(ctx)
    if route.page == "logs":
        return render_logs_tab(ctx)
    if route.page == "tasks":
        return render_tasks_tab(ctx)
    if route.page == "skills":
        return render_skills_tab(ctx)
    return render_home_tab(ctx)
