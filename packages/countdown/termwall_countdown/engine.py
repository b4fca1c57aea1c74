"""Countdown phase, caption and colour computation for a term schedule."""

from __future__ import annotations

from datetime import date, datetime
from typing import Callable

from .errors import GradientRangeError
from .models import (
    AfterExams,
    BeforeTerm,
    ColourBand,
    CountdownPhase,
    CountdownSnapshot,
    ExaminationDay,
    PreExamCountdown,
    Rgba,
    TermSchedule,
)

GREEN: Rgba = (0, 255, 0, 255)
WHITE: Rgba = (255, 255, 255, 255)
RED: Rgba = (255, 0, 0, 255)
HALF_BLACK: Rgba = (0, 0, 0, 127)


def _today(schedule: TermSchedule, now: datetime) -> date:
    return now.astimezone(schedule.tz).date()


def _days(later: date, earlier: date) -> int:
    return (later - earlier).days


def _ceil_div(numerator: int, denominator: int) -> int:
    return -(-numerator // denominator)


def _channel(value: int, branch: str) -> int:
    if not 0 <= value <= 255:
        raise GradientRangeError(branch, value)
    return value


def countdown_phase(schedule: TermSchedule, now: datetime) -> CountdownPhase:
    today = _today(schedule, now)
    if today < schedule.term_start:
        return BeforeTerm()
    if today < schedule.first_paper:
        return PreExamCountdown(days_remaining=_days(schedule.first_paper, today))
    if now < schedule.last_paper_end_time:
        return ExaminationDay(day_index=_days(today, schedule.first_paper) + 1)
    return AfterExams()


def colour_band(schedule: TermSchedule, now: datetime) -> ColourBand:
    today = _today(schedule, now)
    if today < schedule.term_start:
        return ColourBand.BEFORE_TERM
    if now >= schedule.last_paper_end_time:
        return ColourBand.AFTER_EXAMS
    if today >= schedule.first_paper:
        return ColourBand.EXAMINATIONS
    if today <= schedule.term_last_lecture:
        return ColourBand.TERM_TIME
    return ColourBand.FINAL_SPRINT


def status_caption(schedule: TermSchedule, now: datetime) -> str:
    local = now.astimezone(schedule.tz)
    # Whole seconds, truncated toward zero, then rounded up to hours.
    seconds_left = int((schedule.last_paper_end_time - now).total_seconds())
    hours_left = _ceil_div(seconds_left, 3600)
    return f"Calculated on {local:%a} {local.day} {local:%b} (<{hours_left}h left)"


def fill_colour(schedule: TermSchedule, now: datetime) -> Rgba:
    band = colour_band(schedule, now)
    if band in (ColourBand.BEFORE_TERM, ColourBand.AFTER_EXAMS):
        return GREEN
    if band is ColourBand.EXAMINATIONS:
        return WHITE

    today = _today(schedule, now)
    if band is ColourBand.TERM_TIME:
        # white -> orange -> red
        half_term_length = max(1, _ceil_div(_days(schedule.term_last_lecture, schedule.term_start), 2))
        term_remaining = _days(schedule.term_last_lecture, today)
        if term_remaining > half_term_length:
            blue = (term_remaining - half_term_length) * 255 // half_term_length
            return (255, 255, _channel(blue, "term-time upper half [branch 1]"), 255)
        green = term_remaining * 255 // half_term_length
        return (255, _channel(green, "term-time lower half [branch 2]"), 0, 255)

    # final sprint; red -> black
    final_dash_length = max(1, _days(schedule.first_paper, schedule.term_last_lecture))
    final_dash_remaining = _days(schedule.first_paper, today)
    red = final_dash_remaining * 255 // final_dash_length
    return (_channel(red, "final sprint [branch 3]"), 0, 0, 255)


def stroke_colour(schedule: TermSchedule, now: datetime) -> Rgba:
    band = colour_band(schedule, now)
    if band is ColourBand.EXAMINATIONS:
        return RED
    if band is ColourBand.FINAL_SPRINT:
        return WHITE
    return HALF_BLACK


class CountdownEngine:
    """Evaluates a schedule against an injectable clock."""

    def __init__(self, schedule: TermSchedule, clock: Callable[[], datetime] | None = None) -> None:
        self.schedule = schedule
        self._clock = clock or (lambda: datetime.now(schedule.tz))

    def poll(self, now: datetime | None = None) -> CountdownSnapshot:
        now = now or self._clock()
        phase = countdown_phase(self.schedule, now)
        return CountdownSnapshot(
            phase=phase,
            band=colour_band(self.schedule, now),
            label=phase.label,
            caption=status_caption(self.schedule, now),
            fill=fill_colour(self.schedule, now),
            stroke=stroke_colour(self.schedule, now),
            now=now,
        )
