import streamlit as st

from dashboard.data import repositories
from dashboard.state import session_slices
from timeline.editing import add_topic, delete_topic, update_topic
from timeline.errors import NotFoundError, ValidationError
from timeline.model import NEW_TOPIC_COLOR


def _render_add_form(project):
    with st.form("topics.add", clear_on_submit=True):
        name = st.text_input("Topic name")
        color = st.color_picker("Color", value=NEW_TOPIC_COLOR)
        submitted = st.form_submit_button("Add topic")
    if not submitted:
        return
    try:
        updated, topic = add_topic(project, name, color)
    except ValidationError as exc:
        st.error(str(exc))
        return
    repositories.commit(updated)
    repositories.set_selection(session_slices.get_selection() | {topic.id})
    st.rerun()


def _render_topic_row(project, topic):
    with st.expander(topic.name, expanded=False):
        if topic.is_sentinel:
            st.caption("Tasks without a topic land here. This topic cannot be renamed or deleted.")
            return
        with st.form(f"topics.edit.{topic.id}"):
            name = st.text_input("Name", value=topic.name)
            color = st.color_picker("Color", value=topic.color if topic.color.startswith("#") else NEW_TOPIC_COLOR)
            cols = st.columns(2)
            save = cols[0].form_submit_button("Save")
            remove = cols[1].form_submit_button("Delete")
        try:
            if save:
                repositories.commit(update_topic(project, topic.id, name, color))
                st.rerun()
            if remove:
                repositories.commit(delete_topic(project, topic.id))
                repositories.set_selection(session_slices.get_selection() - {topic.id})
                st.rerun()
        except (ValidationError, NotFoundError) as exc:
            st.error(str(exc))


def render_topics_tab(ctx):
    project = session_slices.current_project()
    if project is None:
        st.info("Open or create a project to manage topics.")
        return

    st.markdown("<div class='section-title'>Topics</div>", unsafe_allow_html=True)
    _render_add_form(project)
    for topic in project.topics:
        _render_topic_row(project, topic)
