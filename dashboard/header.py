from datetime import date

import streamlit as st

from dashboard.theme import toggle_theme


def render_global_header(ctx, theme_meta):
    title_cols = st.columns([16, 1])
    with title_cols[0]:
        st.markdown(
            f"<div class='small-label'>NocBook • {date.today().strftime('%A, %B %d, %Y')}</div>",
            unsafe_allow_html=True,
        )
        st.markdown(f"### Welcome back, {ctx.user_name}")
    with title_cols[1]:
        st.button(
            theme_meta["toggle_icon"],
            key="ui.theme_toggle",
            help=theme_meta["toggle_help"],
            on_click=toggle_theme,
        )

    if not ctx.api_enabled:
        st.warning("Backend not configured. Set API_BASE_URL and BACKEND_SESSION_SECRET to load your data.")
