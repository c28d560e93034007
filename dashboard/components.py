"""Small Streamlit building blocks shared by the entity pages."""
import html
import logging

import streamlit as st

from dashboard.constants import TIMELINE_OPTIONS
from dashboard.data import repositories
from dashboard.data.api_client import ApiError
from dashboard.navigation import navigate
from dashboard.state import session_slices

logger = logging.getLogger(__name__)

TIMELINE_LABELS = dict(TIMELINE_OPTIONS)


def section_title(text):
    st.markdown(f"<div class='section-title'>{html.escape(text)}</div>", unsafe_allow_html=True)


def small_label(text):
    st.markdown(f"<div class='small-label'>{html.escape(text)}</div>", unsafe_allow_html=True)


def render_badges(items, color=None):
    if not items:
        return
    style = f" style='border-color:{color};color:{color};'" if color else ""
    badges = "".join(f"<span class='badge'{style}>{html.escape(str(item))}</span>" for item in items)
    st.markdown(badges, unsafe_allow_html=True)


def render_empty_state(message, page, action_label):
    st.info(message)
    if st.button(action_label, key=f"{page}.empty_action"):
        navigate(page, new=True)


def render_filter_bar(slice_name, selects=(), show_timeline=True):
    """Search box plus one single-value select per ``(name, label, options)``.

    Returns the number of active filters; the values live in session state
    under the slice's widget keys.
    """
    columns = st.columns(2 + len(selects))
    with columns[0]:
        st.text_input("Search", key=session_slices.widget_key(slice_name, "search"), placeholder="Search…")
    for column, (name, label, options) in zip(columns[1:], selects):
        with column:
            st.selectbox(
                label,
                [""] + list(options),
                key=session_slices.widget_key(slice_name, name),
                format_func=lambda value, label=label: value or f"All {label.lower()}",
            )
    if show_timeline:
        with columns[-1]:
            st.selectbox(
                "Timeline",
                list(TIMELINE_LABELS),
                key=session_slices.widget_key(slice_name, "timeline"),
                format_func=TIMELINE_LABELS.get,
            )


def render_clear_filters(slice_name, names, active_count):
    if not active_count:
        return
    st.caption(f"{active_count} filter(s) active")
    st.button(
        "Clear filters",
        key=f"{slice_name}.clear_filters",
        on_click=session_slices.reset_filters,
        args=(slice_name, names),
    )


def delete_button(table, record_id, page, label="Delete", key=None):
    """Two-step delete; on success returns to ``page``'s list."""
    key = key or f"{table}.delete.{record_id}"
    confirm_key = f"{key}.confirm"
    if not st.session_state.get(confirm_key):
        if st.button(label, key=key):
            st.session_state[confirm_key] = True
            st.rerun()
        return
    st.warning("Delete this record? This cannot be undone.")
    cols = st.columns(2)
    if cols[0].button("Confirm delete", key=f"{key}.yes", type="primary"):
        try:
            repositories.delete_record(table, record_id)
        except (ApiError, RuntimeError) as exc:
            logger.error("Error deleting %s %s: %s", table, record_id, exc)
            st.error(f"Delete failed: {exc}")
            return
        finally:
            st.session_state.pop(confirm_key, None)
        navigate(page)
    if cols[1].button("Cancel", key=f"{key}.no"):
        st.session_state.pop(confirm_key, None)
        st.rerun()


def link_button(label, url):
    if url:
        st.link_button(label, url)
