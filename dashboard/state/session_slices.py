import streamlit as st

from dashboard.filters import FilterCriteria


PREFIX = "slice"


def get_slice(slice_name):
    key = f"{PREFIX}.{slice_name}"
    if key not in st.session_state:
        st.session_state[key] = {}
    return st.session_state[key]


def get_value(slice_name, name, default=None):
    return get_slice(slice_name).get(name, default)


def set_value(slice_name, name, value):
    get_slice(slice_name)[name] = value


def widget_key(slice_name, name):
    return f"{slice_name}.{name}"


def get_criteria(slice_name, equals_fields=(), contains_fields=()):
    """Build FilterCriteria from the filter widgets of one list page."""
    state = st.session_state
    return FilterCriteria(
        search=str(state.get(widget_key(slice_name, "search")) or ""),
        equals={name: state.get(widget_key(slice_name, name)) or "" for name in equals_fields},
        contains={name: state.get(widget_key(slice_name, name)) or "" for name in contains_fields},
        timeline=state.get(widget_key(slice_name, "timeline")) or "all",
    )


def reset_filters(slice_name, names):
    for name in ("search", "timeline", *names):
        key = widget_key(slice_name, name)
        if key in st.session_state:
            del st.session_state[key]


def get_draft(slice_name, record_key, factory):
    """In-progress form state for one record; ``factory`` builds it on first use."""
    drafts = get_slice(slice_name).setdefault("drafts", {})
    if record_key not in drafts:
        drafts[record_key] = factory()
    return drafts[record_key]


def clear_draft(slice_name, record_key):
    get_slice(slice_name).get("drafts", {}).pop(record_key, None)


def clear_slice(slice_name):
    key = f"{PREFIX}.{slice_name}"
    if key in st.session_state:
        del st.session_state[key]
