import logging
import os

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s - %(message)s"
QUIET_LOGGERS = ("urllib3", "requests", "watchdog")


def resolve_log_level(secret_getter=None):
    raw = os.getenv("DASHBOARD_LOG_LEVEL")
    if not raw and secret_getter is not None:
        raw = secret_getter(("app", "DASHBOARD_LOG_LEVEL"))
    level = getattr(logging, str(raw or "INFO").strip().upper(), None)
    return level if isinstance(level, int) else logging.INFO


def configure_logging(secret_getter=None):
    """Safe to call on every Streamlit rerun; basicConfig only installs handlers once."""
    logging.basicConfig(level=resolve_log_level(secret_getter), format=LOG_FORMAT)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
