import streamlit as st

from timeline.coords import DEFAULT_DAY_WIDTH, clamp_day_width


PREFIX = "slice"
PROJECT_SLICE = "project"
VIEW_SLICE = "view"


def get_slice(slice_name):
    key = f"{PREFIX}.{slice_name}"
    if key not in st.session_state:
        st.session_state[key] = {}
    return st.session_state[key]


def get_value(slice_name, name, default=None):
    payload = get_slice(slice_name)
    return payload.get(name, default)


def set_value(slice_name, name, value):
    payload = get_slice(slice_name)
    payload[name] = value


def update_slice(slice_name, values):
    payload = get_slice(slice_name)
    payload.update(values)


def clear_slice(slice_name):
    key = f"{PREFIX}.{slice_name}"
    if key in st.session_state:
        del st.session_state[key]


def current_project_id():
    return get_value(PROJECT_SLICE, "id")


def current_project():
    return get_value(PROJECT_SLICE, "project")


def open_project(project_id, project, selection):
    clear_slice(PROJECT_SLICE)
    update_slice(PROJECT_SLICE, {"id": project_id, "project": project, "selection": set(selection)})


def close_project():
    clear_slice(PROJECT_SLICE)


def set_project(project):
    set_value(PROJECT_SLICE, "project", project)


def get_selection():
    return set(get_value(PROJECT_SLICE, "selection", set()))


def set_selection(selection):
    set_value(PROJECT_SLICE, "selection", set(selection))


def get_day_width():
    return clamp_day_width(get_value(VIEW_SLICE, "day_width", DEFAULT_DAY_WIDTH))


def set_day_width(value):
    set_value(VIEW_SLICE, "day_width", clamp_day_width(value))
