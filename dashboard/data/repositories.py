import logging

import streamlit as st

from dashboard.data import api_client
from dashboard.data.autosave import AutosaveDebouncer
from dashboard.state import session_slices
from dashboard.state.selection_store import SelectionStore
from timeline.editing import restore_selection
from timeline.model import normalize_project

logger = logging.getLogger(__name__)

AUTOSAVE_KEY = "gantt.autosave"

_CURRENT_USER_GETTER = None
_SELECTION_STORE = None


def configure(current_user_getter, selection_store=None):
    global _CURRENT_USER_GETTER, _SELECTION_STORE
    _CURRENT_USER_GETTER = current_user_getter
    _SELECTION_STORE = selection_store or SelectionStore()


def _current_user():
    if _CURRENT_USER_GETTER is None:
        raise RuntimeError("repositories not configured")
    return _CURRENT_USER_GETTER()


def _selection_store():
    global _SELECTION_STORE
    if _SELECTION_STORE is None:
        _SELECTION_STORE = SelectionStore()
    return _SELECTION_STORE


def _save_snapshot(snapshot):
    user_email, project_id, document = snapshot
    api_client.save_project(project_id, document, user_email=user_email)
    logger.debug("Saved project %s", project_id)


def _autosave():
    debouncer = st.session_state.get(AUTOSAVE_KEY)
    if debouncer is None:
        debouncer = AutosaveDebouncer(_save_snapshot)
        st.session_state[AUTOSAVE_KEY] = debouncer
    return debouncer


def list_projects():
    return api_client.list_projects()


def open_project(project_id):
    _autosave().flush()
    document = api_client.get_project(project_id)
    project = normalize_project(document)
    saved = _selection_store().load(project_id)
    session_slices.open_project(project_id, project, restore_selection(project, saved))
    return project


def create_project(name):
    document = api_client.create_project(name)
    return open_project(document["id"])


def delete_project(project_id):
    if session_slices.current_project_id() == project_id:
        _autosave().cancel()
        session_slices.close_project()
    api_client.delete_project(project_id)
    _selection_store().forget(project_id)


def _snapshot(project):
    return (_current_user(), session_slices.current_project_id(), project.as_document())


def commit(project):
    session_slices.set_project(project)
    _autosave().schedule(_snapshot(project))


def save_now():
    project = session_slices.current_project()
    if project is None:
        return
    _autosave().cancel()
    _save_snapshot(_snapshot(project))


def set_selection(selection):
    session_slices.set_selection(selection)
    project_id = session_slices.current_project_id()
    if project_id:
        _selection_store().save(project_id, selection)
