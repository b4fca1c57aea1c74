"""Build a validated TermSchedule from raw configuration values."""

from __future__ import annotations

from datetime import date, datetime, time, tzinfo
from typing import Any

from .errors import InvalidDateError, InvalidTimeError, ScheduleOrderError
from .localtime import resolve_local
from .models import TermSchedule


def _parse_string(value: str, field: str) -> date | datetime:
    text = value.strip()
    date_part, sep, time_part = text.replace(" ", "T", 1).partition("T")
    try:
        day = date.fromisoformat(date_part)
    except ValueError as exc:
        raise InvalidDateError(field, f"out-of-range date, invalid month and/or day in {value!r}") from exc
    if not sep:
        return day
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError as exc:
        raise InvalidTimeError(field, f"invalid hour, minute and/or second in {time_part!r}") from exc
    return parsed


def parse_schedule_value(value: Any, field: str) -> date | datetime:
    """Accept a date, a datetime or an ISO-8601 string; raise a ``ScheduleDateError`` naming ``field``."""
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return value
    if isinstance(value, time):
        raise InvalidDateError(field, "missing date")
    if isinstance(value, str):
        return _parse_string(value, field)
    raise InvalidDateError(field, f"expected a date or datetime, got {type(value).__name__}")


def _to_instant(value: date | datetime, tz: tzinfo, field: str) -> datetime:
    if isinstance(value, datetime):
        return resolve_local(value, tz, field)
    return resolve_local(datetime.combine(value, time()), tz, field)


def _day(value: Any, tz: tzinfo, field: str) -> date:
    instant = _to_instant(parse_schedule_value(value, field), tz, field)
    day = instant.astimezone(tz).date()
    # The local midnight of the day must itself resolve.
    resolve_local(datetime.combine(day, time()), tz, field)
    return day


def build_schedule(
    term_start: Any,
    term_last_lecture: Any,
    first_paper: Any,
    last_paper_end_time: Any,
    tz: tzinfo,
) -> TermSchedule:
    """Coerce and validate the four schedule points.

    Values may be ``date``, ``datetime`` (naive values are wall-clock times in
    ``tz``) or ISO-8601 strings. Raises a ``ScheduleDateError`` subclass naming
    the offending field, or ``ScheduleOrderError`` when the points are out of
    order.
    """
    schedule = TermSchedule(
        term_start=_day(term_start, tz, "term_start"),
        term_last_lecture=_day(term_last_lecture, tz, "term_last_lecture"),
        first_paper=_day(first_paper, tz, "first_paper"),
        last_paper_end_time=_to_instant(
            parse_schedule_value(last_paper_end_time, "last_paper_end_time"), tz, "last_paper_end_time"
        ),
        tz=tz,
    )
    validate_order(schedule)
    return schedule


def validate_order(schedule: TermSchedule) -> None:
    points = [
        ("term_start", schedule.term_start),
        ("term_last_lecture", schedule.term_last_lecture),
        ("first_paper", schedule.first_paper),
        ("last_paper_end_time", schedule.last_paper_end_time.astimezone(schedule.tz).date()),
    ]
    for (prev_name, prev), (name, current) in zip(points, points[1:]):
        if current < prev:
            raise ScheduleOrderError(f"{name} ({current.isoformat()}) is before {prev_name} ({prev.isoformat()})")
