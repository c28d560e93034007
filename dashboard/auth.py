from __future__ import annotations

import os
from urllib.parse import urlparse

import streamlit as st

ENV_PATH = os.path.join(os.path.dirname(__file__), "..", ".env")

ENV_FALLBACK_KEYS = {
    ("auth", "redirect_uri"): "AUTH_REDIRECT_URI",
    ("auth", "cookie_secret"): "AUTH_COOKIE_SECRET",
    ("auth", "google", "client_id"): "GOOGLE_CLIENT_ID",
    ("auth", "google", "client_secret"): "GOOGLE_CLIENT_SECRET",
    ("auth", "google", "server_metadata_url"): "GOOGLE_SERVER_METADATA_URL",
    ("app", "allowed_emails"): "ALLOWED_EMAILS",
    ("app", "API_BASE_URL"): "API_BASE_URL",
    ("app", "BACKEND_SESSION_SECRET"): "BACKEND_SESSION_SECRET",
    ("app", "DASHBOARD_LOG_LEVEL"): "DASHBOARD_LOG_LEVEL",
}
REQUIRED_AUTH_SECRETS = [
    ("auth", "redirect_uri"),
    ("auth", "cookie_secret"),
    ("auth", "google", "client_id"),
    ("auth", "google", "client_secret"),
]
OFFLINE_EMAIL = "local@offline"


def parse_env_line(raw_line):
    """Return ``(key, value)`` for a ``KEY=value`` line, None for blanks and comments."""
    line = raw_line.strip()
    if not line or line.startswith("#") or "=" not in line:
        return None
    key, value = line.split("=", 1)
    key = key.strip()
    if key.startswith("export "):
        key = key[len("export ") :].strip()
    return (key, value.strip().strip('"').strip("'")) if key else None


def load_local_env(path=ENV_PATH):
    if not os.path.exists(path):
        return
    with open(path, "r", encoding="utf-8") as env_file:
        for raw_line in env_file:
            parsed = parse_env_line(raw_line)
            if parsed and parsed[0] not in os.environ:
                os.environ[parsed[0]] = parsed[1]


def get_secret(path, default=None):
    """Environment first, then ``st.secrets``; a missing secrets file is not an error."""
    env_key = ENV_FALLBACK_KEYS.get(tuple(path))
    if env_key and os.getenv(env_key):
        return os.getenv(env_key)
    current = st.secrets
    for key in path:
        try:
            if key not in current:
                return default
            current = current[key]
        except Exception:
            return default
    return current


def allowed_emails():
    raw = get_secret(("app", "allowed_emails")) or ""
    return list(dict.fromkeys(email.strip().lower() for email in str(raw).split(",") if email.strip()))


def auth_configured():
    return all(get_secret(path) for path in REQUIRED_AUTH_SECRETS)


def _render_login_gate():
    st.markdown("<div class='section-title'>Login Required</div>", unsafe_allow_html=True)
    st.markdown("Use your Google account to open your NocBook.")
    if st.button("Login with Google", key="google_login"):
        st.login("google")
    st.stop()


def enforce_google_login():
    """Gate the app behind st.login; without OAuth secrets the app runs as one local account."""
    if not auth_configured():
        return

    redirect_uri = str(get_secret(("auth", "redirect_uri")) or "").strip()
    if urlparse(redirect_uri).path != "/oauth2callback":
        st.error(
            "Invalid auth.redirect_uri. For Streamlit st.login it must end with "
            "/oauth2callback (example: https://nocbook.streamlit.app/oauth2callback)."
        )
        st.stop()

    if not st.user.is_logged_in:
        _render_login_gate()

    allowed = allowed_emails()
    if allowed and get_current_user_email() not in allowed:
        st.error("Access denied for this account.")
        if st.button("Logout", key="logout_denied"):
            st.logout()
        st.stop()

    with st.sidebar:
        st.caption(f"Logged as: {getattr(st.user, 'email', 'unknown')}")
        if st.button("Logout", key="logout_sidebar"):
            st.logout()


def get_current_user_email():
    if auth_configured():
        user_email = str(getattr(st.user, "email", "") or "").strip().lower()
        if user_email:
            return user_email
    allowed = allowed_emails()
    return allowed[0] if allowed else OFFLINE_EMAIL


def get_display_name(user_email):
    if auth_configured():
        user_name = str(getattr(st.user, "name", "") or "").strip()
        if user_name:
            return user_name.split()[0]
    local = (user_email or "").split("@")[0].replace(".", " ").strip()
    return local.title() if local else "User"
