import logging

import requests
import streamlit as st

from dashboard.data import repositories
from dashboard.data.api_client import ApiNotFound
from dashboard.state import session_slices

logger = logging.getLogger(__name__)


def _open_selected(options):
    label = st.session_state.get("header.project")
    project_id = options.get(label)
    if not project_id or project_id == session_slices.current_project_id():
        return
    try:
        repositories.open_project(project_id)
    except ApiNotFound:
        session_slices.close_project()
        st.session_state["header.error"] = "Project no longer exists."
    except (RuntimeError, requests.RequestException) as exc:
        logger.exception("Failed to open project %s: %s", project_id, exc)
        st.session_state["header.error"] = "Could not open project."


def _create_project():
    name = st.session_state.get("header.new_name", "")
    try:
        repositories.create_project(name)
    except (RuntimeError, requests.RequestException) as exc:
        logger.exception("Failed to create project: %s", exc)
        st.session_state["header.error"] = "Could not create project."
        return
    st.session_state["header.new_name"] = ""
    st.session_state.pop("header.project", None)


def _save_now():
    try:
        repositories.save_now()
    except (RuntimeError, requests.RequestException) as exc:
        logger.exception("Manual save failed: %s", exc)
        st.session_state["header.error"] = f"Save failed: {exc}"
        return
    st.session_state["header.notice"] = "Saved."


def _delete_current():
    project_id = session_slices.current_project_id()
    if not project_id:
        return
    try:
        repositories.delete_project(project_id)
    except (RuntimeError, requests.RequestException) as exc:
        logger.exception("Failed to delete project %s: %s", project_id, exc)
        st.session_state["header.error"] = "Could not delete project."
        return
    st.session_state.pop("header.project", None)


def render_project_header(ctx):
    try:
        projects = repositories.list_projects()
    except (RuntimeError, requests.RequestException) as exc:
        logger.exception("Failed to list projects: %s", exc)
        st.error("Backend unavailable. Check API_BASE_URL and BACKEND_SESSION_SECRET.")
        return

    options = {f"{item['name']} · {item['id'][:6]}": item["id"] for item in projects}
    labels = list(options)
    current_id = session_slices.current_project_id()
    index = None
    for idx, label in enumerate(labels):
        if options[label] == current_id:
            index = idx

    cols = st.columns([4, 3, 1, 1])
    with cols[0]:
        st.selectbox(
            "Project",
            labels,
            index=index,
            placeholder="Choose a project",
            key="header.project",
            on_change=_open_selected,
            args=(options,),
        )
    with cols[1]:
        st.text_input("New project", key="header.new_name", placeholder="Project name")
        st.button("Create", key="header.create", on_click=_create_project)
    with cols[2]:
        st.button("Save", key="header.save", on_click=_save_now, disabled=current_id is None)
    with cols[3]:
        st.button("Delete", key="header.delete", on_click=_delete_current, disabled=current_id is None)

    error = st.session_state.pop("header.error", None)
    if error:
        st.error(error)
    notice = st.session_state.pop("header.notice", None)
    if notice:
        st.caption(notice)
