import logging

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
from dashboard.constants import CONTACT_CHANNELS, PEOPLE_TABLE, ROLE_OPTIONS
from dashboard.data import repositories
from dashboard.data.api_client import ApiError
from dashboard.data.loaders import load_people
from dashboard.details import DetailUnavailable, load_person_detail
from dashboard.filters import apply_filters, distinct_values
from dashboard.formatting import contact_link, format_date
from dashboard.forms import FormError, save_person, split_list_input
from dashboard.metrics import compute_people_stats
from dashboard.navigation import navigate
from dashboard.state import session_slices

logger = logging.getLogger(__name__)

SLICE = "people"
EXPORT_FORMATS = {"csv": "CSV", "xlsx": "Excel (.xlsx)", "xls": "Excel 97 (.xls)"}


def render_people_tab(ctx):
    route = ctx.route
    if route.is_form:
        return _render_form(ctx, route.record_id)
    if route.is_detail:
        return _render_detail(route.record_id)
    return _render_list(ctx)


def _render_contacts(contacts):
    for key, label in CONTACT_CHANNELS:
        value = (contacts or {}).get(key)
        if not value:
            continue
        url = contact_link(key, value)
        if url:
            st.markdown(f"**{label}:** [{value}]({url})")
        else:
            st.markdown(f"**{label}:** `{value}`")


def _render_export(criteria):
    with st.expander("Export people"):
        file_format = st.selectbox(
            "Format",
            list(EXPORT_FORMATS),
            format_func=EXPORT_FORMATS.get,
            key="people.export.format",
        )
        if st.button("Prepare export", key="people.export.run"):
            try:
                content, filename = repositories.export_people(
                    file_format,
                    role=criteria.equals.get("role"),
                    tag=criteria.contains.get("tags"),
                    skill=criteria.contains.get("skills"),
                )
            except ApiError as exc:
                if exc.status_code == 404:
                    st.info("No data to export.")
                else:
                    st.error(f"Export failed: {exc.detail}")
                return
            except RuntimeError as exc:
                st.error(f"Export failed: {exc}")
                return
            st.download_button(
                "Download",
                data=content,
                file_name=filename or f"people.{file_format}",
                key="people.export.download",
            )


def _render_list(ctx):
    people = load_people(ctx.user_email)
    title_cols = st.columns([6, 1])
    with title_cols[0]:
        section_title("People")
    with title_cols[1]:
        if st.button("Add person", key="people.add"):
            navigate("people", new=True)

    if not people:
        render_empty_state("No people yet. Add the first person you want to keep track of.", "people", "Add a person")
        return

    stats = compute_people_stats(people)
    stat_cols = st.columns(3)
    stat_cols[0].metric("People", stats["total"])
    stat_cols[1].metric("Roles", stats["roles"])
    stat_cols[2].metric("Tags", stats["tags"])

    roles = list(dict.fromkeys(ROLE_OPTIONS + distinct_values(people, "role")))
    render_filter_bar(
        SLICE,
        selects=(
            ("role", "Role", roles),
            ("tags", "Tags", distinct_values(people, "tags")),
            ("skills", "Skills", distinct_values(people, "skills")),
        ),
        show_timeline=False,
    )
    criteria = session_slices.get_criteria(SLICE, equals_fields=("role",), contains_fields=("tags", "skills"))
    render_clear_filters(SLICE, ("role", "tags", "skills"), criteria.active_count())
    visible = apply_filters(people, "people", criteria)
    _render_export(criteria)

    small_label(f"Showing {len(visible)} of {len(people)}")
    if not visible:
        st.caption("No people match these filters.")
    for person in visible:
        with st.container(border=True):
            cols = st.columns([5, 1, 1])
            with cols[0]:
                st.markdown(f"**{person.get('name')}**")
                caption = " • ".join(item for item in (person.get("profession"), person.get("role")) if item)
                if caption:
                    st.caption(caption)
                render_badges(person.get("skills"))
            if cols[1].button("View", key=f"people.view.{person['id']}"):
                navigate("people", record_id=person["id"])
            if cols[2].button("Edit", key=f"people.edit.{person['id']}"):
                navigate("people", record_id=person["id"], edit=True)


def _render_detail(person_id):
    try:
        person = load_person_detail(person_id)["person"]
    except DetailUnavailable as exc:
        logger.info("Person detail unavailable: %s", exc)
        navigate("people")
        return
    if st.button("← Back to people", key="people.back"):
        navigate("people")
    section_title(person.get("name") or "Unnamed")
    caption = " • ".join(item for item in (person.get("profession"), person.get("role")) if item)
    if caption:
        st.caption(caption)
    if person.get("skills"):
        small_label("Skills")
        render_badges(person["skills"])
    if person.get("tags"):
        small_label("Tags")
        render_badges(person["tags"])
    if person.get("contacts"):
        small_label("Contacts")
        _render_contacts(person["contacts"])
    if person.get("notes"):
        small_label("Notes")
        st.write(person["notes"])
    added = format_date(person.get("created_at"))
    if added:
        st.caption(f"Added {added}")
    cols = st.columns(2)
    with cols[0]:
        if st.button("Edit", key="people.detail.edit"):
            navigate("people", record_id=person_id, edit=True)
    with cols[1]:
        delete_button(PEOPLE_TABLE, person_id, "people")


def _render_form(ctx, person_id):
    person = {}
    if person_id:
        try:
            person = load_person_detail(person_id)["person"]
        except DetailUnavailable:
            navigate("people")
            return
    section_title("Edit person" if person_id else "New person")
    contacts = person.get("contacts") or {}
    roles = list(ROLE_OPTIONS)
    if person.get("role") and person["role"] not in roles:
        roles.append(person["role"])
    with st.form(f"people.form.{person_id or 'new'}"):
        name = st.text_input("Name *", value=person.get("name") or "")
        profession = st.text_input("Profession", value=person.get("profession") or "")
        role = st.selectbox(
            "Role",
            [""] + roles,
            index=([""] + roles).index(person.get("role") or ""),
            format_func=lambda value: value or "Select a role",
        )
        skills = st.text_input("Skills (comma-separated)", value=", ".join(person.get("skills") or []))
        tags = st.text_input("Tags (comma-separated)", value=", ".join(person.get("tags") or []))
        small_label("Contacts")
        contact_values = {}
        contact_cols = st.columns(2)
        for index, (key, label) in enumerate(CONTACT_CHANNELS):
            with contact_cols[index % 2]:
                contact_values[key] = st.text_input(label, value=contacts.get(key) or "", key=f"people.form.contact.{key}")
        notes = st.text_area("Notes", value=person.get("notes") or "", height=120)
        submitted = st.form_submit_button("Save person")

    if st.button("Cancel", key="people.form.cancel"):
        navigate("people", record_id=person_id)
    if not submitted:
        return
    form = {
        "name": name,
        "profession": profession,
        "role": role,
        "skills": split_list_input(skills),
        "tags": split_list_input(tags),
        "contacts": contact_values,
        "notes": notes,
    }
    try:
        save_person(form, person_id)
    except FormError as exc:
        st.error(str(exc))
        return
    except (ApiError, RuntimeError) as exc:
        logger.error("Error saving person: %s", exc)
        st.error(f"Could not save: {exc}")
        return
    navigate("people")
