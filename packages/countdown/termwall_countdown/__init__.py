"""Term countdown state, captions and colours."""

from .engine import CountdownEngine, colour_band, countdown_phase, fill_colour, status_caption, stroke_colour
from .errors import (
    AmbiguousLocalTimeError,
    CountdownError,
    GradientRangeError,
    InvalidDateError,
    InvalidTimeError,
    InvalidTimeZoneError,
    NonexistentLocalTimeError,
    ScheduleDateError,
    ScheduleOrderError,
)
from .localtime import local_zone, resolve_local, zone
from .models import (
    AfterExams,
    BeforeTerm,
    ColourBand,
    CountdownPhase,
    CountdownSnapshot,
    ExaminationDay,
    PreExamCountdown,
    TermSchedule,
)
from .schedule import build_schedule, parse_schedule_value

__all__ = [
    "AfterExams",
    "AmbiguousLocalTimeError",
    "BeforeTerm",
    "ColourBand",
    "CountdownEngine",
    "CountdownError",
    "CountdownPhase",
    "CountdownSnapshot",
    "ExaminationDay",
    "GradientRangeError",
    "InvalidDateError",
    "InvalidTimeError",
    "InvalidTimeZoneError",
    "NonexistentLocalTimeError",
    "PreExamCountdown",
    "ScheduleDateError",
    "ScheduleOrderError",
    "TermSchedule",
    "build_schedule",
    "colour_band",
    "countdown_phase",
    "fill_colour",
    "local_zone",
    "parse_schedule_value",
    "resolve_local",
    "status_caption",
    "stroke_colour",
    "zone",
]
