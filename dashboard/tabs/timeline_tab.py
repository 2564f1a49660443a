import streamlit as st

from dashboard.data import repositories
from dashboard.state import session_slices
from dashboard.visualizations import LABEL_COLUMN_WIDTH, build_timeline_figure
from timeline.coords import zoom
from timeline.editing import default_selection
from timeline.layout import ViewConfig, compute_layout


def _zoom(direction):
    session_slices.set_day_width(zoom(session_slices.get_day_width(), direction))


def _select_all(project):
    repositories.set_selection(default_selection(project))


def _clear_selection():
    repositories.set_selection(set())


def _save_visible(project):
    names = st.session_state.get("timeline.visible", [])
    by_label = {f"{topic.name} ({topic.id})": topic.id for topic in project.topics}
    repositories.set_selection({by_label[name] for name in names if name in by_label})


def _render_visibility(project):
    selection = session_slices.get_selection()
    labels = [f"{topic.name} ({topic.id})" for topic in project.topics]
    current = [f"{topic.name} ({topic.id})" for topic in project.topics if topic.id in selection]
    if set(st.session_state.get("timeline.visible", current)) != set(current):
        st.session_state.pop("timeline.visible", None)
    st.multiselect(
        "Visible topics",
        labels,
        default=current,
        key="timeline.visible",
        on_change=_save_visible,
        args=(project,),
    )
    cols = st.columns(2)
    cols[0].button("Select all", key="timeline.select_all", on_click=_select_all, args=(project,))
    cols[1].button("Clear", key="timeline.clear", on_click=_clear_selection)


def render_timeline_tab(ctx):
    project = session_slices.current_project()
    if project is None:
        st.info("Open or create a project to see its timeline.")
        return

    st.markdown("<div class='section-title'>Timeline</div>", unsafe_allow_html=True)

    zoom_cols = st.columns([1, 1, 1, 6])
    zoom_cols[0].button("−", key="timeline.zoom_out", on_click=_zoom, args=(-1,))
    zoom_cols[1].button("+", key="timeline.zoom_in", on_click=_zoom, args=(1,))
    zoom_cols[2].button("Reset", key="timeline.zoom_reset", on_click=_zoom, args=(0,))
    zoom_cols[3].caption(f"Day width: {session_slices.get_day_width()} px")

    _render_visibility(project)

    view = ViewConfig(
        day_width=session_slices.get_day_width(),
        viewport_width=max(float(ctx.get("viewport_width", 0) or 0) - LABEL_COLUMN_WIDTH, 0),
        mirrored=ctx.get("mirrored", True),
        visible_topic_ids=frozenset(session_slices.get_selection()),
    )
    layout = compute_layout(project, view)
    st.caption(f"{layout.date_range.min} → {layout.date_range.max}")
    st.plotly_chart(
        build_timeline_figure(layout),
        use_container_width=False,
        config={"displayModeBar": False},
    )
