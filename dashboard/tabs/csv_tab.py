import streamlit as st

from dashboard.data import repositories
from dashboard.state import session_slices
from timeline.csv_codec import build_csv, import_csv
from timeline.errors import CsvFormatError
from timeline.model import safe_file_name


def _decode_upload(raw: bytes) -> str:
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError:
        return raw.decode("cp1255", errors="replace")


def render_csv_tab(ctx):
    project = session_slices.current_project()
    if project is None:
        st.info("Open or create a project to import or export CSV.")
        return

    st.markdown("<div class='section-title'>CSV</div>", unsafe_allow_html=True)

    st.download_button(
        "Export CSV",
        data=build_csv(project).encode("utf-8"),
        file_name=f"{safe_file_name(project.name)}.csv",
        mime="text/csv",
        key="csv.export",
    )

    upload = st.file_uploader("Import CSV", type=["csv"], key="csv.upload")
    if upload is None:
        return
    if not st.button("Import rows", key="csv.import"):
        return
    try:
        result = import_csv(project, _decode_upload(upload.getvalue()))
    except CsvFormatError as exc:
        st.error(f"Could not read CSV: {exc}")
        return

    repositories.commit(result.project)
    if result.added_topics:
        repositories.set_selection(session_slices.get_selection() | {topic.id for topic in result.added_topics})
    st.success(
        f"Imported {len(result.added_tasks)} tasks, {len(result.added_topics)} new topics"
        + (f", skipped {result.skipped_rows} rows" if result.skipped_rows else "")
    )
