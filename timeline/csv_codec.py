from __future__ import annotations

import csv
import io
import logging
from dataclasses import dataclass, replace
from typing import Dict, List, Sequence, Tuple

from timeline import dates
from timeline.editing import task_duration
from timeline.errors import CsvFormatError
from timeline.model import UNASSIGNED_TOPIC_ID, Project, Task, Topic, color_from_name, new_id, slug_id

logger = logging.getLogger(__name__)

BOM = "\ufeff"
CSV_COLUMNS = ["topic", "title", "start", "end", "duration_days", "desc"]
HEADER_ALIASES = {
    "topic": ("topic", "נושא"),
    "title": ("title", "כותרת"),
    "start": ("start", "תאריך התחלה"),
    "end": ("end", "תאריך סיום"),
    "duration_days": ("duration_days", "משך (ימים)"),
    "desc": ("desc", "תיאור"),
}
_NEEDS_QUOTES = (",", '"', "\n", "\r")


@dataclass(frozen=True)
class CsvRow:
    topic: str = ""
    title: str = ""
    start: str = ""
    end: str = ""
    duration_days: str = ""
    desc: str = ""


@dataclass(frozen=True)
class ImportResult:
    project: Project
    added_tasks: Tuple[Task, ...]
    added_topics: Tuple[Topic, ...]
    skipped_rows: int


def csv_escape(value) -> str:
    text = "" if value is None else str(value)
    if any(marker in text for marker in _NEEDS_QUOTES):
        return '"' + text.replace('"', '""') + '"'
    return text


def build_csv(project: Project) -> str:
    lines = [",".join(CSV_COLUMNS)]
    for task in project.tasks:
        topic = project.topic_for_task(task)
        duration = task_duration(task)
        values = [
            topic.name,
            task.title,
            task.start,
            task.end,
            "" if duration is None else duration,
            task.desc or "",
        ]
        lines.append(",".join(csv_escape(value) for value in values))
    return BOM + "\n".join(lines)


def _read_records(text: str) -> List[List[str]]:
    reader = csv.reader(io.StringIO(text, newline=""), strict=True)
    try:
        records = [list(record) for record in reader]
    except csv.Error as exc:
        raise CsvFormatError(f"Malformed CSV: {exc}") from exc
    while records and all(not (value or "").strip() for value in records[-1]):
        records.pop()
    return records


def _header_index(header: Sequence[str]) -> Dict[str, int]:
    return {(name or "").strip(): position for position, name in enumerate(header)}


def parse_csv(text: str) -> List[CsvRow]:
    text = str(text or "")
    if text.startswith(BOM):
        text = text[len(BOM):]
    records = _read_records(text)
    if not records:
        raise CsvFormatError("CSV file is empty")
    index = _header_index(records[0])
    if not any(alias in index for alias in HEADER_ALIASES["title"]):
        raise CsvFormatError("CSV header has no title column")

    def field(record: Sequence[str], column: str) -> str:
        for alias in HEADER_ALIASES[column]:
            position = index.get(alias)
            if position is None or position >= len(record):
                continue
            value = record[position]
            if value:
                return value.strip()
        return ""

    return [CsvRow(**{column: field(record, column) for column in CSV_COLUMNS}) for record in records[1:]]


def _row_dates(row: CsvRow) -> Tuple[str, str] | None:
    start_iso = dates.try_normalize(row.start)
    if start_iso is None:
        return None
    end = row.end or dates.end_from_duration(start_iso, row.duration_days)
    end_iso = dates.try_normalize(end)
    if end_iso is None or end_iso < start_iso:
        return None
    return start_iso, end_iso


def apply_imported_rows(project: Project, rows: Sequence[CsvRow]) -> ImportResult:
    topics = list(project.topics)
    known_ids = {topic.id for topic in topics}
    name_to_id = {topic.name: topic.id for topic in topics}
    added_topics: List[Topic] = []
    added_tasks: List[Task] = []
    skipped = 0

    for row in rows:
        if not row.title:
            skipped += 1
            continue
        topic_id = UNASSIGNED_TOPIC_ID
        if row.topic:
            topic_id = name_to_id.get(row.topic, "")
            if not topic_id:
                topic_id = slug_id(row.topic)
                if topic_id not in known_ids:
                    topic = Topic(id=topic_id, name=row.topic, color=color_from_name(row.topic))
                    topics.append(topic)
                    added_topics.append(topic)
                    known_ids.add(topic_id)
                name_to_id[row.topic] = topic_id

        resolved = _row_dates(row)
        if resolved is None:
            skipped += 1
            continue
        start, end = resolved
        added_tasks.append(
            Task(id=new_id(), topic_id=topic_id, title=row.title, desc=row.desc or "", start=start, end=end)
        )

    logger.info("CSV import: %d tasks, %d new topics, %d rows skipped", len(added_tasks), len(added_topics), skipped)
    updated = replace(project, topics=tuple(topics), tasks=project.tasks + tuple(added_tasks))
    return ImportResult(updated, tuple(added_tasks), tuple(added_topics), skipped)


def import_csv(project: Project, text: str) -> ImportResult:
    return apply_imported_rows(project, parse_csv(text))
