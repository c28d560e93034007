import logging
from datetime import time

import pandas as pd
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
from dashboard.constants import EVENT_TYPE_META, EVENTS_TABLE, MATERIAL_TYPE_LABELS, EventType, MaterialType
from dashboard.data.api_client import ApiError
from dashboard.data.loaders import load_events, load_people
from dashboard.details import DetailUnavailable, load_event_detail
from dashboard.filters import apply_filters, parse_record_datetime
from dashboard.formatting import event_location, format_cost, format_date, format_time_12h, is_event_past
from dashboard.forms import FormError, keep_unlisted, option_index, save_event, split_list_input
from dashboard.metrics import compute_event_stats
from dashboard.navigation import navigate
from dashboard.state import session_slices

logger = logging.getLogger(__name__)

SLICE = "events"
MATERIAL_COLUMNS = ["title", "url", "type"]


def render_events_tab(ctx):
    route = ctx.route
    if route.is_form:
        return _render_form(ctx, route.record_id)
    if route.is_detail:
        return _render_detail(route.record_id)
    return _render_list(ctx)


def _type_label(value):
    try:
        return EVENT_TYPE_META[EventType(value)]["label"]
    except ValueError:
        return value


def _material_label(value):
    try:
        return MATERIAL_TYPE_LABELS[MaterialType(value or MaterialType.LINK.value)]
    except ValueError:
        return value


def _date_value(value):
    moment = parse_record_datetime(value)
    return moment.date() if moment else None


def _time_value(value):
    if not value:
        return None
    try:
        hour, minute = str(value).split(":")[:2]
        return time(int(hour), int(minute))
    except ValueError:
        return None


def _when(event):
    parts = [format_date(event.get("start_date"))]
    start_time = format_time_12h(event.get("start_time"))
    if start_time:
        parts.append(start_time)
    return " ".join(part for part in parts if part) or "Date TBD"


def _render_list(ctx):
    events = load_events(ctx.user_email)
    title_cols = st.columns([6, 1])
    with title_cols[0]:
        section_title("Events")
    with title_cols[1]:
        if st.button("New event", key="events.add"):
            navigate("events", new=True)

    if not events:
        render_empty_state("No events yet. Record the seminars, workshops and meetups you attend.", "events", "Add an event")
        return

    stats = compute_event_stats(events)
    stat_cols = st.columns(4)
    stat_cols[0].metric("Events", stats["total"])
    stat_cols[1].metric("Upcoming", stats["upcoming"])
    stat_cols[2].metric("Free", stats["free"])
    stat_cols[3].metric("Featured", stats["featured"])

    render_filter_bar(SLICE, selects=(("event_type", "Type", [event_type.value for event_type in EventType]),))
    criteria = session_slices.get_criteria(SLICE, equals_fields=("event_type",))
    render_clear_filters(SLICE, ("event_type",), criteria.active_count())
    visible = apply_filters(events, "events", criteria)

    small_label(f"Showing {len(visible)} of {len(events)}")
    if not visible:
        st.caption("No events match these filters.")
    for event in visible:
        with st.container(border=True):
            cols = st.columns([5, 1, 1])
            with cols[0]:
                star = "⭐ " if event.get("is_featured") else ""
                st.markdown(f"{star}**{event.get('name')}**")
                meta = [_type_label(event.get("event_type")), _when(event), event_location(event), format_cost(event.get("cost"))]
                if is_event_past(event):
                    meta.append("Past")
                st.caption(" • ".join(item for item in meta if item))
                render_badges(event.get("tags"))
            if cols[1].button("View", key=f"events.view.{event['id']}"):
                navigate("events", record_id=event["id"])
            if cols[2].button("Edit", key=f"events.edit.{event['id']}"):
                navigate("events", record_id=event["id"], edit=True)


def _render_detail(event_id):
    try:
        detail = load_event_detail(event_id)
    except DetailUnavailable as exc:
        logger.info("Event detail unavailable: %s", exc)
        navigate("events")
        return
    event = detail["event"]
    if st.button("← Back to events", key="events.back"):
        navigate("events")
    section_title(event.get("name") or "Untitled event")
    st.caption(" • ".join(
        item for item in (_type_label(event.get("event_type")), event.get("organizer"), format_cost(event.get("cost"))) if item
    ))

    info_cols = st.columns(3)
    info_cols[0].metric("Starts", _when(event))
    end = format_date(event.get("end_date"))
    end_time = format_time_12h(event.get("end_time"))
    info_cols[1].metric("Ends", " ".join(item for item in (end, end_time) if item) or "-")
    info_cols[2].metric("Where", event_location(event) or "-")

    link_cols = st.columns(4)
    with link_cols[0]:
        link_button("Join meeting", event.get("meeting_url") if event.get("is_online") else None)
    with link_cols[1]:
        link_button("Registration", event.get("registration_url"))
    with link_cols[2]:
        link_button("Event info", event.get("event_info_url"))
    with link_cols[3]:
        link_button("Certificate", event.get("certificate_url"))

    if event.get("important_insights"):
        small_label("Important insights")
        for insight in event["important_insights"]:
            st.markdown(f"- {insight}")
    if detail["attendees"]:
        small_label(f"Attendees ({len(detail['attendees'])})")
        for person in detail["attendees"]:
            if st.button(person.get("name") or "Unnamed", key=f"events.attendee.{person['id']}"):
                navigate("people", record_id=person["id"])
    if detail["materials"]:
        small_label("Materials")
        for material in detail["materials"]:
            label = _material_label(material.get("type"))
            if material.get("url"):
                st.markdown(f"[{material['title']}]({material['url']}) · {label}")
            else:
                st.markdown(f"{material['title']} · {label}")
    if event.get("tags"):
        small_label("Tags")
        render_badges(event["tags"])
    if event.get("notes"):
        small_label("Notes")
        st.write(event["notes"])

    cols = st.columns(2)
    with cols[0]:
        if st.button("Edit", key="events.detail.edit"):
            navigate("events", record_id=event_id, edit=True)
    with cols[1]:
        delete_button(EVENTS_TABLE, event_id, "events")


def _materials_frame(materials):
    rows = [{column: material.get(column) for column in MATERIAL_COLUMNS} for material in materials]
    return pd.DataFrame(rows, columns=MATERIAL_COLUMNS)


def _materials_from_frame(frame):
    materials = []
    for row in frame.to_dict("records"):
        title = row.get("title")
        if title is None or (isinstance(title, float) and pd.isna(title)) or not str(title).strip():
            continue
        url = row.get("url")
        materials.append({
            "title": str(title),
            "url": None if url is None or (isinstance(url, float) and pd.isna(url)) else str(url),
            "type": row.get("type") or MaterialType.LINK.value,
        })
    return materials


def _render_form(ctx, event_id):
    detail = {"event": {}, "attendee_ids": [], "materials": []}
    if event_id:
        try:
            detail = load_event_detail(event_id)
        except DetailUnavailable:
            navigate("events")
            return
    event = detail["event"]
    people = load_people(ctx.user_email)
    people_by_id = {person["id"]: person.get("name") or "Unnamed" for person in people}
    event_types = [event_type.value for event_type in EventType]

    stored_attendees = detail["attendee_ids"]
    stored_materials = detail["materials"]

    section_title("Edit event" if event_id else "New event")
    if stored_attendees is None or stored_materials is None:
        st.warning("Some linked attendees or materials could not be loaded. They will be left unchanged on save.")
    # Outside the form so the location fields follow the toggle immediately.
    is_online = st.toggle("Online event", value=bool(event.get("is_online")), key=f"events.form.online.{event_id or 'new'}")
    with st.form(f"events.form.{event_id or 'new'}"):
        name = st.text_input("Event name *", value=event.get("name") or "")
        cols = st.columns(3)
        event_type = cols[0].selectbox(
            "Type",
            event_types,
            index=option_index(event_types, event.get("event_type"), EventType.SEMINAR.value),
            format_func=_type_label,
        )
        organizer = cols[1].text_input("Organizer", value=event.get("organizer") or "")
        cost = cols[2].number_input("Cost (0 = free)", min_value=0, step=1, value=int(event.get("cost") or 0))
        if is_online:
            meeting_url = st.text_input("Meeting URL", value=event.get("meeting_url") or "")
            venue = ""
        else:
            venue = st.text_input("Venue", value=event.get("venue") or "")
            meeting_url = ""
        date_cols = st.columns(4)
        start_date = date_cols[0].date_input("Start date", value=_date_value(event.get("start_date")))
        start_time = date_cols[1].time_input("Start time", value=_time_value(event.get("start_time")))
        end_date = date_cols[2].date_input("End date", value=_date_value(event.get("end_date")))
        end_time = date_cols[3].time_input("End time", value=_time_value(event.get("end_time")))
        registration_url = st.text_input("Registration URL", value=event.get("registration_url") or "")
        event_info_url = st.text_input("Event info URL", value=event.get("event_info_url") or "")
        certificate_url = st.text_input("Certificate URL", value=event.get("certificate_url") or "")
        attendee_ids = st.multiselect(
            "Attendees",
            list(people_by_id),
            default=[person_id for person_id in stored_attendees or [] if person_id in people_by_id],
            format_func=people_by_id.get,
            disabled=stored_attendees is None,
        )
        small_label("Materials")
        materials_frame = st.data_editor(
            _materials_frame(stored_materials or []),
            num_rows="dynamic",
            disabled=stored_materials is None,
            use_container_width=True,
            column_config={
                "title": st.column_config.TextColumn("Title"),
                "url": st.column_config.TextColumn("URL"),
                "type": st.column_config.SelectboxColumn(
                    "Type",
                    options=[material_type.value for material_type in MaterialType],
                    default=MaterialType.LINK.value,
                ),
            },
        )
        insights = st.text_area(
            "Important insights (one per line)",
            value="\n".join(event.get("important_insights") or []),
        )
        tags = st.text_input("Tags (comma-separated)", value=", ".join(event.get("tags") or []))
        notes = st.text_area("Notes", value=event.get("notes") or "")
        is_featured = st.checkbox("Featured", value=bool(event.get("is_featured")))
        submitted = st.form_submit_button("Save event")

    if st.button("Cancel", key="events.form.cancel"):
        navigate("events", record_id=event_id)
    if not submitted:
        return
    form = {
        "name": name,
        "event_type": event_type,
        "is_online": is_online,
        "venue": venue,
        "meeting_url": meeting_url,
        "organizer": organizer,
        "cost": cost,
        "start_date": start_date,
        "start_time": start_time,
        "end_date": end_date,
        "end_time": end_time,
        "registration_url": registration_url,
        "event_info_url": event_info_url,
        "certificate_url": certificate_url,
        "important_insights": [line for line in insights.splitlines() if line.strip()],
        "tags": split_list_input(tags),
        "notes": notes,
        "is_featured": is_featured,
    }
    try:
        if stored_attendees is not None:
            attendee_ids = keep_unlisted(attendee_ids, stored_attendees, people_by_id)
        else:
            attendee_ids = None
        materials = _materials_from_frame(materials_frame) if stored_materials is not None else None
        save_event(form, attendee_ids, materials, event_id)
    except FormError as exc:
        st.error(str(exc))
        return
    except (ApiError, RuntimeError) as exc:
        logger.error("Error saving event: %s", exc)
        st.error(f"Could not save: {exc}")
        return
    navigate("events")
