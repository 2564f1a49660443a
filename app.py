import os
from urllib.parse import urlparse

import streamlit as st

from dashboard.data import api_client, repositories
from dashboard.header import render_project_header
from dashboard.logging_config import configure_logging
from dashboard.router import render_router


ENV_PATH = os.path.join(os.path.dirname(__file__), ".env")

ENV_FALLBACK_KEYS = {
    ("auth", "redirect_uri"): "AUTH_REDIRECT_URI",
    ("auth", "cookie_secret"): "AUTH_COOKIE_SECRET",
    ("auth", "google", "client_id"): "GOOGLE_CLIENT_ID",
    ("auth", "google", "client_secret"): "GOOGLE_CLIENT_SECRET",
    ("app", "API_BASE_URL"): "API_BASE_URL",
    ("app", "BACKEND_SESSION_SECRET"): "BACKEND_SESSION_SECRET",
    ("app", "allowed_emails"): "ALLOWED_EMAILS",
    ("app", "dev_user_email"): "DEV_USER_EMAIL",
    ("app", "viewport_width"): "GANTT_VIEWPORT_WIDTH",
    ("app", "mirrored"): "GANTT_MIRRORED",
}

DEFAULT_VIEWPORT_WIDTH = 1200


st.set_page_config(page_title="Gantt Planner", layout="wide")
logger = configure_logging()


def load_local_env():
    if not os.path.exists(ENV_PATH):
        return
    with open(ENV_PATH, "r", encoding="utf-8") as env_file:
        for raw_line in env_file:
            line = raw_line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue
            key, value = line.split("=", 1)
            key = key.strip()
            value = value.strip().strip('"').strip("'")
            if key and key not in os.environ:
                os.environ[key] = value


def get_secret(path, default=None):
    env_key = ENV_FALLBACK_KEYS.get(tuple(path))
    if env_key:
        env_value = os.getenv(env_key)
        if env_value:
            return env_value
    try:
        current = st.secrets
        for key in path:
            if key not in current:
                return default
            current = current[key]
    except (FileNotFoundError, KeyError, TypeError):
        return default
    return current


def auth_configured():
    return bool(
        get_secret(("auth", "redirect_uri"))
        and get_secret(("auth", "cookie_secret"))
        and get_secret(("auth", "google", "client_id"))
        and get_secret(("auth", "google", "client_secret"))
    )


def allowed_emails():
    raw = get_secret(("app", "allowed_emails")) or ""
    return {email.strip().lower() for email in str(raw).split(",") if email.strip()}


def enforce_login():
    if not auth_configured():
        if get_secret(("app", "dev_user_email")):
            return
        st.markdown("<div class='section-title'>Login Setup Required</div>", unsafe_allow_html=True)
        st.markdown("Configure Google OAuth secrets, or set DEV_USER_EMAIL for local use.")
        st.stop()

    redirect_uri = (get_secret(("auth", "redirect_uri")) or "").strip()
    if urlparse(redirect_uri).path != "/oauth2callback":
        st.error("Invalid auth.redirect_uri. For st.login it must end with /oauth2callback.")
        st.stop()

    if not st.user.is_logged_in:
        st.markdown("<div class='section-title'>Login Required</div>", unsafe_allow_html=True)
        if st.button("Login with Google", key="google_login"):
            st.login("google")
        st.stop()

    user_email = str(getattr(st.user, "email", "")).strip().lower()
    allowed = allowed_emails()
    if allowed and user_email not in allowed:
        st.error("Access denied for this account.")
        if st.button("Logout", key="logout_denied"):
            st.logout()
        st.stop()

    with st.sidebar:
        st.caption(f"Logged as: {user_email}")
        if st.button("Logout", key="logout_sidebar"):
            st.logout()


def get_current_user_email():
    user_email = ""
    if auth_configured():
        user_email = str(getattr(st.user, "email", "") or "").strip().lower()
    if user_email:
        return user_email
    return str(get_secret(("app", "dev_user_email")) or "local@offline").strip().lower()


def _as_bool(value, default=True):
    if value is None or value == "":
        return default
    return str(value).strip().lower() not in {"0", "false", "no", "off"}


def _viewport_width():
    try:
        return float(get_secret(("app", "viewport_width")) or DEFAULT_VIEWPORT_WIDTH)
    except (TypeError, ValueError):
        return DEFAULT_VIEWPORT_WIDTH


load_local_env()
enforce_login()

api_client.configure(get_secret, get_current_user_email)
repositories.configure(get_current_user_email)

if not api_client.is_enabled():
    st.error("API_BASE_URL and BACKEND_SESSION_SECRET must be configured.")
    st.stop()

st.title("Gantt Planner")
render_project_header({})

context = {
    "current_user_email": get_current_user_email(),
    "viewport_width": _viewport_width(),
    "mirrored": _as_bool(get_secret(("app", "mirrored"))),
}

render_router(context)
