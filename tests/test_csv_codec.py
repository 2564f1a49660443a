import pytest

from timeline.csv_codec import BOM, build_csv, csv_escape, import_csv, parse_csv
from timeline.errors import CsvFormatError
from timeline.model import (
    SENTINEL_TOPIC,
    UNASSIGNED_TOPIC_ID,
    UNASSIGNED_TOPIC_NAME,
    Project,
    Task,
    Topic,
    color_from_name,
)


def test_csv_escape():
    assert csv_escape("plain") == "plain"
    assert csv_escape("a,b") == '"a,b"'
    assert csv_escape('say "hi"') == '"say ""hi"""'
    assert csv_escape("two\nlines") == '"two\nlines"'
    assert csv_escape(None) == ""
    assert csv_escape(3) == "3"


def test_build_csv(sample_project):
    project = Project(
        name="Launch",
        topics=sample_project.topics + (Topic("p1", "Design, Phase 1", "#123456"),),
        tasks=(
            Task("a", "p1", "Wireframes", "2024-01-10", "2024-01-12", 'with "quotes"'),
            Task("b", UNASSIGNED_TOPIC_ID, "Loose", "2024-01-01", "2024-01-01"),
        ),
    )
    text = build_csv(project)
    assert text.startswith(BOM)
    lines = text[len(BOM):].split("\n")
    assert lines[0] == "topic,title,start,end,duration_days,desc"
    assert lines[1] == '"Design, Phase 1",Wireframes,2024-01-10,2024-01-12,3,"with ""quotes"""'
    assert lines[2] == f"{UNASSIGNED_TOPIC_NAME},Loose,2024-01-01,2024-01-01,1,"


def test_import_fills_end_from_duration():
    result = import_csv(Project(), "title,start,duration_days\nKickoff,2024-01-10,3\n")
    assert len(result.added_tasks) == 1
    task = result.added_tasks[0]
    assert (task.start, task.end, task.topic_id) == ("2024-01-10", "2024-01-12", UNASSIGNED_TOPIC_ID)
    assert result.project.tasks == result.added_tasks
    assert result.skipped_rows == 0


def test_import_hebrew_headers_create_topics():
    text = BOM + "נושא,כותרת,תאריך התחלה,תאריך סיום,תיאור\nעיצוב,סקיצות,2024-01-01,2024-01-02,ראשוני\n"
    result = import_csv(Project(), text)
    assert [topic.id for topic in result.added_topics] == ["עיצוב"]
    assert result.added_topics[0].color == color_from_name("עיצוב")
    assert result.added_tasks[0].desc == "ראשוני"
    assert result.project.topic("עיצוב") is not None


def test_english_header_wins_when_both_present():
    rows = parse_csv("title,כותרת,start\nA,B,2024-01-01\n,C,2024-01-02\n")
    assert [row.title for row in rows] == ["A", "C"]


def test_existing_topics_are_matched_by_name(sample_project):
    result = import_csv(sample_project, "topic,title,start,end\nDesign,Review,2024-01-15,2024-01-16\n")
    assert result.added_topics == ()
    assert result.added_tasks[0].topic_id == "design"
    assert len(result.project.tasks) == 3
    assert len(sample_project.tasks) == 2


def test_bad_rows_are_skipped_but_topics_are_kept():
    text = (
        "topic,title,start,end\n"
        "Ops,Broken,bad-date,\n"
        "Ops,Backwards,2024-01-05,2024-01-01\n"
        "Ops,,2024-01-01,2024-01-02\n"
        "Ops,Fine,2024-01-01,2024-01-02\n"
    )
    result = import_csv(Project(), text)
    assert [topic.id for topic in result.added_topics] == ["ops"]
    assert [task.title for task in result.added_tasks] == ["Fine"]
    assert result.skipped_rows == 3


def test_quoted_multiline_fields():
    rows = parse_csv('title,desc\nA,"line one\nline two"\n')
    assert rows[0].desc == "line one\nline two"


@pytest.mark.parametrize("text", ["", BOM, "\n\n", "foo,bar\n1,2\n", 'title\n"a"b\n'])
def test_unreadable_csv_raises(text):
    with pytest.raises(CsvFormatError):
        import_csv(Project(), text)


def test_unparseable_start_with_duration_is_skipped():
    result = import_csv(Project(), "title,start,duration_days\nBroken,bad-date,3\nFine,2024-01-10,3\n")
    assert [(task.title, task.end) for task in result.added_tasks] == [("Fine", "2024-01-12")]
    assert result.skipped_rows == 1


def test_duration_text_uses_leading_integer():
    result = import_csv(Project(), "title,start,duration_days\nA,2024-01-10,3.0\nB,2024-01-10,2 days\n")
    assert [task.end for task in result.added_tasks] == ["2024-01-12", "2024-01-11"]


def _rows(project):
    return sorted(
        (project.topic_for_task(task).name, task.title, task.start, task.end, task.desc)
        for task in project.tasks
    )


def test_export_then_import_restores_tasks(sample_project):
    result = import_csv(Project(), build_csv(sample_project))
    assert _rows(result.project) == _rows(sample_project)
    assert [topic.name for topic in result.added_topics] == ["Design"]


def test_export_then_import_keeps_awkward_text():
    project = Project(
        topics=(SENTINEL_TOPIC, Topic("phase", 'Phase "1", a', "#123456"), Topic("ops", "Ops", "#654321")),
        tasks=(
            Task("a", "phase", "Draft, review", "2024-01-10", "2024-01-12", 'multi\nline, "q"'),
            Task("b", "phase", 'Sign "off"', "2024-01-13", "2024-01-13", "a,b,c"),
            Task("c", "ops", "Deploy", "2024-01-14", "2024-01-20", "line one\r\nline two"),
            Task("d", UNASSIGNED_TOPIC_ID, "Loose", "2024-01-01", "2024-01-01"),
        ),
    )
    result = import_csv(Project(), build_csv(project))
    assert result.skipped_rows == 0
    assert _rows(result.project) == _rows(project)
