from datetime import date

import pandas as pd
import streamlit as st

from dashboard.data import repositories
from dashboard.state import session_slices
from timeline import dates
from timeline.editing import add_task, delete_task, task_table_rows, update_task
from timeline.errors import NotFoundError, ValidationError


def _topic_options(project):
    return {topic.id: topic.name for topic in project.topics}


def _render_add_form(project):
    topics = _topic_options(project)
    with st.form("tasks.add", clear_on_submit=True):
        title = st.text_input("Title")
        topic_id = st.selectbox("Topic", list(topics), format_func=topics.get)
        cols = st.columns(3)
        start = cols[0].date_input("Start", value=date.today())
        end = cols[1].date_input("End", value=None)
        duration = cols[2].number_input("Duration (days)", min_value=0, step=1, value=0)
        desc = st.text_area("Description", height=80)
        submitted = st.form_submit_button("Add task")
    if not submitted:
        return
    try:
        updated, _task = add_task(
            project,
            title,
            start,
            end=end,
            duration=duration or None,
            topic_id=topic_id,
            desc=desc,
        )
    except ValidationError as exc:
        st.error(str(exc))
        return
    repositories.commit(updated)
    st.rerun()


def _render_edit_form(project, task):
    topics = _topic_options(project)
    topic_ids = list(topics)
    with st.form(f"tasks.edit.{task.id}"):
        title = st.text_input("Title", value=task.title)
        topic_id = st.selectbox(
            "Topic",
            topic_ids,
            index=topic_ids.index(task.topic_id) if task.topic_id in topic_ids else 0,
            format_func=topics.get,
        )
        cols = st.columns(2)
        start_value = dates.parse_date(task.start) if dates.try_normalize(task.start) else date.today()
        end_value = dates.parse_date(task.end) if dates.try_normalize(task.end) else start_value
        start = cols[0].date_input("Start", value=start_value)
        end = cols[1].date_input("End", value=end_value)
        desc = st.text_area("Description", value=task.desc, height=80)
        action_cols = st.columns(2)
        save = action_cols[0].form_submit_button("Save")
        remove = action_cols[1].form_submit_button("Delete")
    try:
        if save:
            repositories.commit(update_task(project, task.id, title, start, end, topic_id=topic_id, desc=desc))
            st.rerun()
        if remove:
            repositories.commit(delete_task(project, task.id))
            st.rerun()
    except (ValidationError, NotFoundError) as exc:
        st.error(str(exc))


def render_tasks_tab(ctx):
    project = session_slices.current_project()
    if project is None:
        st.info("Open or create a project to manage tasks.")
        return

    st.markdown("<div class='section-title'>Tasks</div>", unsafe_allow_html=True)
    _render_add_form(project)

    rows = task_table_rows(project)
    if not rows:
        st.caption("No tasks yet.")
        return

    frame = pd.DataFrame(rows)
    st.dataframe(
        frame[["topic", "title", "start", "end", "duration_days", "desc"]],
        hide_index=True,
        use_container_width=True,
    )

    for row in rows:
        task = project.task(row["id"])
        if task is None:
            continue
        with st.expander(f"{row['start']} · {task.title}", expanded=False):
            _render_edit_form(project, task)
