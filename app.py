import streamlit as st

from dashboard.auth import (
    enforce_google_login,
    get_current_user_email,
    get_display_name,
    get_secret,
    load_local_env,
)
from dashboard.context import DashboardContext
from dashboard.data import api_client, repositories
from dashboard.data.loaders import invalidate_runtime_caches
from dashboard.header import render_global_header
from dashboard.logging_config import configure_logging
from dashboard.navigation import current_route
from dashboard.router import render_router
from dashboard.theme import inject_theme_css


st.set_page_config(page_title="NocBook", layout="wide")

load_local_env()
configure_logging(get_secret)
theme_meta = inject_theme_css()

enforce_google_login()

api_client.configure(get_secret, get_current_user_email)
repositories.configure(invalidate_callback=invalidate_runtime_caches)

current_user_email = get_current_user_email()
context = DashboardContext(
    user_email=current_user_email,
    user_name=get_display_name(current_user_email),
    route=current_route(),
    api_enabled=repositories.api_enabled(),
)

render_global_header(context, theme_meta)
render_router(context)
