from __future__ import annotations

import re
from datetime import date, datetime, timedelta

LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def parse_date(value) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value or "").strip()
    if not text:
        raise ValueError("Empty date")
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        return datetime.fromisoformat(text).date()


def normalize(value) -> str:
    return parse_date(value).isoformat()


def try_normalize(value) -> str | None:
    try:
        return normalize(value)
    except (TypeError, ValueError):
        return None


def add_days(value, days: int) -> str:
    return (parse_date(value) + timedelta(days=int(days))).isoformat()


def day_difference(start, end) -> int:
    return parse_date(end).toordinal() - parse_date(start).toordinal()


def duration_days(start, end) -> int:
    # Both bounds count.
    return day_difference(start, end) + 1


def parse_day_count(value) -> int | None:
    # Leading integer only, so "3.0" and "3 days" both read as 3.
    match = LEADING_INT.match(str(value if value is not None else ""))
    if match is None:
        return None
    return int(match.group(1))


def end_from_duration(start, duration) -> str | None:
    days = parse_day_count(duration)
    if days is None or days <= 0:
        return None
    start_iso = try_normalize(start)
    if start_iso is None:
        return None
    return add_days(start_iso, days - 1)


def iso_week_number(value) -> int:
    return parse_date(value).isocalendar()[1]


def is_week_start(value) -> bool:
    return parse_date(value).weekday() == 0


def format_day_month(value) -> str:
    day = parse_date(value)
    return f"{day.day:02d}.{day.month:02d}"


def month_label(value) -> str:
    return parse_date(value).strftime("%b %Y")
