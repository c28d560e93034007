import logging

import streamlit as st

from dashboard.components import delete_button, render_badges, render_empty_state, section_title
from dashboard.constants import DEFAULT_SKILL_LEVEL, SKILL_LEVELS, SKILLS_TABLE
from dashboard.data.api_client import ApiError
from dashboard.data.loaders import load_skills
from dashboard.details import DetailUnavailable, load_skill_detail
from dashboard.forms import FormError, clamp_int, save_skill
from dashboard.navigation import navigate

logger = logging.getLogger(__name__)


def render_skills_tab(ctx):
    route = ctx.route
    if route.is_form or route.is_detail:
        return _render_form(route.record_id)
    return _render_list(ctx)


def _level_stars(level):
    level = clamp_int(level, 1, 5, DEFAULT_SKILL_LEVEL)
    return "★" * level + "☆" * (5 - level)


def _render_list(ctx):
    skills = load_skills(ctx.user_email)
    title_cols = st.columns([6, 1])
    with title_cols[0]:
        section_title("Skills")
    with title_cols[1]:
        if st.button("New skill", key="skills.add"):
            navigate("skills", new=True)

    if not skills:
        render_empty_state("No skills yet. Track what you are learning and link it from your logs.", "skills", "Add a skill")
        return

    for skill in skills:
        with st.container(border=True):
            cols = st.columns([5, 1, 1])
            with cols[0]:
                st.markdown(f"**{skill.get('name')}** {_level_stars(skill.get('level'))}")
                if skill.get("category"):
                    render_badges([skill["category"]])
            if cols[1].button("Edit", key=f"skills.edit.{skill['id']}"):
                navigate("skills", record_id=skill["id"], edit=True)
            with cols[2]:
                delete_button(SKILLS_TABLE, skill["id"], "skills")


def _render_form(skill_id):
    skill = {}
    if skill_id:
        try:
            skill = load_skill_detail(skill_id)["skill"]
        except DetailUnavailable:
            navigate("skills")
            return

    section_title("Edit skill" if skill_id else "New skill")
    with st.form(f"skills.form.{skill_id or 'new'}"):
        name = st.text_input("Name *", value=skill.get("name") or "")
        cols = st.columns(2)
        level = cols[0].select_slider(
            "Level",
            options=SKILL_LEVELS,
            value=clamp_int(skill.get("level"), 1, 5, DEFAULT_SKILL_LEVEL),
        )
        category = cols[1].text_input("Category", value=skill.get("category") or "")
        notes = st.text_area("Notes", value=skill.get("notes") or "")
        submitted = st.form_submit_button("Save skill")

    if st.button("Cancel", key="skills.form.cancel"):
        navigate("skills")
    if not submitted:
        return
    try:
        save_skill({"name": name, "level": level, "category": category, "notes": notes}, skill_id)
    except FormError as exc:
        st.error(str(exc))
        return
    except (ApiError, RuntimeError) as exc:
        logger.error("Error saving skill: %s", exc)
        st.error(f"Could not save: {exc}")
        return
    navigate("skills")
