import streamlit as st

from dashboard.tabs.csv_tab import render_csv_tab
from dashboard.tabs.tasks_tab import render_tasks_tab
from dashboard.tabs.timeline_tab import render_timeline_tab
from dashboard.tabs.topics_tab import render_topics_tab


TAB_OPTIONS = [
    "Timeline",
    "Tasks",
    "Topics",
    "CSV",
]


def render_router(ctx):
    active = st.session_state.get("ui.active_tab", TAB_OPTIONS[0])
    active = st.segmented_control(
        "Workspace",
        TAB_OPTIONS,
        key="ui.active_tab",
        default=active,
    )

    if active == "Tasks":
        return _render_tasks(ctx)

    if active == "Topics":
        return _render_topics(ctx)

    if active == "CSV":
        return _render_csv(ctx)

    return _render_timeline(ctx)


@st.fragment
def _render_timeline(ctx):
    render_timeline_tab(ctx)


@st.fragment
def _render_tasks(ctx):
    render_tasks_tab(ctx)


@st.fragment
def _render_topics(ctx):
    render_topics_tab(ctx)


@st.fragment
def _render_csv(ctx):
    render_csv_tab(ctx)
