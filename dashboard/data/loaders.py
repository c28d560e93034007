from __future__ import annotations

import logging

import streamlit as st

from dashboard.constants import (
    EVENTS_TABLE,
    LOGS_TABLE,
    PEOPLE_TABLE,
    PROJECTS_TABLE,
    SKILLS_TABLE,
    TASKS_TABLE,
)
from dashboard.data import repositories

logger = logging.getLogger(__name__)

CACHE_TTL_SECONDS = 120


@st.cache_data(ttl=CACHE_TTL_SECONDS, show_spinner=False)
def _load_table_cached(user_email, table):
    return repositories.list_records(table)


def load_table(user_email, table):
    """Fetch every row of ``table`` for the account; a failed fetch yields []."""
    try:
        return _load_table_cached(user_email, table)
    except Exception as exc:
        logger.error("Error fetching %s: %s", table, exc)
        return []


def load_people(user_email):
    return load_table(user_email, PEOPLE_TABLE)


def load_projects(user_email):
    return load_table(user_email, PROJECTS_TABLE)


def load_events(user_email):
    return load_table(user_email, EVENTS_TABLE)


def load_logs(user_email):
    return load_table(user_email, LOGS_TABLE)


def load_tasks(user_email):
    return load_table(user_email, TASKS_TABLE)


def load_skills(user_email):
    return load_table(user_email, SKILLS_TABLE)


def load_counts(user_email):
    return {
        "people": len(load_people(user_email)),
        "projects": len(load_projects(user_email)),
        "skills": len(load_skills(user_email)),
        "events": len(load_events(user_email)),
    }


def invalidate_runtime_caches():
    _load_table_cached.clear()
