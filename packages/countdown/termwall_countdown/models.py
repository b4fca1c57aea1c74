"""Typed countdown models."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, tzinfo
from enum import Enum
from typing import Union

Rgba = tuple[int, int, int, int]


@dataclass(frozen=True)
class TermSchedule:
    term_start: date
    term_last_lecture: date
    first_paper: date
    last_paper_end_time: datetime
    tz: tzinfo


@dataclass(frozen=True)
class BeforeTerm:
    @property
    def label(self) -> str:
        return "S"


@dataclass(frozen=True)
class PreExamCountdown:
    days_remaining: int

    @property
    def label(self) -> str:
        return str(self.days_remaining)


@dataclass(frozen=True)
class ExaminationDay:
    day_index: int

    @property
    def label(self) -> str:
        return f"D{self.day_index}"


@dataclass(frozen=True)
class AfterExams:
    @property
    def label(self) -> str:
        return "E"


CountdownPhase = Union[BeforeTerm, PreExamCountdown, ExaminationDay, AfterExams]


class ColourBand(str, Enum):
    BEFORE_TERM = "BeforeTerm"
    TERM_TIME = "TermTime"
    FINAL_SPRINT = "FinalSprint"
    EXAMINATIONS = "Examinations"
    AFTER_EXAMS = "AfterExams"


@dataclass(frozen=True)
class CountdownSnapshot:
    phase: CountdownPhase
    band: ColourBand
    label: str
    caption: str
    fill: Rgba
    stroke: Rgba
    now: datetime
