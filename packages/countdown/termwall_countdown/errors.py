"""Countdown error taxonomy."""

from __future__ import annotations


class CountdownError(Exception):
    """Base class for schedule and countdown failures."""


class ScheduleDateError(CountdownError):
    def __init__(self, field: str, detail: str) -> None:
        super().__init__(f"Failed to parse {field}: {detail}")
        self.field = field
        self.detail = detail


class InvalidDateError(ScheduleDateError):
    pass


class InvalidTimeError(ScheduleDateError):
    pass


class NonexistentLocalTimeError(ScheduleDateError):
    """Wall-clock time skipped by a forward transition."""


class AmbiguousLocalTimeError(ScheduleDateError):
    """Wall-clock time repeated by a backward transition."""


class InvalidTimeZoneError(CountdownError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown time zone {name!r}")
        self.name = name


class ScheduleOrderError(CountdownError):
    pass


class GradientRangeError(CountdownError):
    def __init__(self, branch: str, value: int) -> None:
        super().__init__(f"Number of days left in countdown gives channel {value}, outside 0..255 [{branch}]")
        self.branch = branch
        self.value = value
