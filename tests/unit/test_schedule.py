import os
import sys
import tempfile
import tomllib
import unittest
from datetime import date, datetime, time, timezone
from pathlib import Path
from unittest import mock

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "packages" / "countdown"))

from termwall_countdown import (
    AmbiguousLocalTimeError,
    InvalidDateError,
    InvalidTimeError,
    InvalidTimeZoneError,
    NonexistentLocalTimeError,
    ScheduleOrderError,
    build_schedule,
    countdown_phase,
    resolve_local,
    zone,
)
from termwall_countdown.localtime import local_zone

try:
    from zoneinfo import ZoneInfo

    LONDON = ZoneInfo("Europe/London")
except Exception:  # pragma: no cover - no tz database available
    LONDON = None

UTC = timezone.utc


class BuildScheduleTests(unittest.TestCase):
    def test_accepts_dates_datetimes_and_strings(self):
        schedule = build_schedule(
            term_start=date(2024, 1, 8),
            term_last_lecture="2024-03-08",
            first_paper=datetime(2024, 4, 22, 9, 30),
            last_paper_end_time="2024-05-03T17:00:00",
            tz=UTC,
        )
        self.assertEqual(schedule.term_last_lecture, date(2024, 3, 8))
        self.assertEqual(schedule.first_paper, date(2024, 4, 22))
        self.assertEqual(schedule.last_paper_end_time, datetime(2024, 5, 3, 17, tzinfo=UTC))

    def test_date_only_end_time_is_local_midnight(self):
        schedule = build_schedule(date(2024, 1, 1), date(2024, 1, 2), date(2024, 1, 3), date(2024, 1, 4), UTC)
        self.assertEqual(schedule.last_paper_end_time, datetime(2024, 1, 4, tzinfo=UTC))

    def test_out_of_order_schedule_is_rejected(self):
        with self.assertRaises(ScheduleOrderError) as ctx:
            build_schedule(date(2024, 3, 1), date(2024, 2, 1), date(2024, 4, 1), "2024-04-10T12:00", UTC)
        self.assertIn("term_last_lecture", str(ctx.exception))

    def test_end_time_before_first_paper_is_rejected(self):
        with self.assertRaises(ScheduleOrderError):
            build_schedule(date(2024, 1, 1), date(2024, 2, 1), date(2024, 4, 1), "2024-03-31T12:00", UTC)

    def test_invalid_month_is_a_date_error(self):
        with self.assertRaises(InvalidDateError) as ctx:
            build_schedule("2024-13-01", date(2024, 2, 1), date(2024, 4, 1), date(2024, 4, 2), UTC)
        self.assertEqual(ctx.exception.field, "term_start")

    def test_invalid_time_of_day_is_a_time_error(self):
        with self.assertRaises(InvalidTimeError) as ctx:
            build_schedule(date(2024, 1, 1), date(2024, 2, 1), date(2024, 4, 1), "2024-04-10T25:00:00", UTC)
        self.assertEqual(ctx.exception.field, "last_paper_end_time")

    def test_time_without_date_is_rejected(self):
        with self.assertRaises(InvalidDateError):
            build_schedule(date(2024, 1, 1), date(2024, 2, 1), date(2024, 4, 1), time(17, 0), UTC)

    def test_unknown_zone_name(self):
        with self.assertRaises(InvalidTimeZoneError):
            zone("Mars/Olympus_Mons")


@unittest.skipIf(LONDON is None, "tz database not installed")
class LocalTimeResolutionTests(unittest.TestCase):
    def test_unambiguous_time_resolves(self):
        resolved = resolve_local(datetime(2024, 6, 1, 12, 0), LONDON)
        self.assertEqual(resolved.utcoffset().total_seconds(), 3600)

    def test_spring_forward_gap_is_an_error(self):
        with self.assertRaises(NonexistentLocalTimeError):
            resolve_local(datetime(2024, 3, 31, 1, 30), LONDON, "last_paper_end_time")

    def test_fall_back_overlap_is_an_error(self):
        with self.assertRaises(AmbiguousLocalTimeError):
            resolve_local(datetime(2024, 10, 27, 1, 30), LONDON, "last_paper_end_time")

    def test_schedule_with_gap_end_time_fails_to_build(self):
        with self.assertRaises(NonexistentLocalTimeError) as ctx:
            build_schedule(date(2024, 1, 8), date(2024, 3, 8), date(2024, 3, 25), "2024-03-31T01:30:00", LONDON)
        self.assertEqual(ctx.exception.field, "last_paper_end_time")

    def test_day_counts_ignore_dst_shortened_day(self):
        schedule = build_schedule(date(2024, 1, 8), date(2024, 3, 8), date(2024, 4, 2), "2024-04-12T17:00", LONDON)
        now = datetime(2024, 3, 30, 12, 0, tzinfo=LONDON)
        self.assertEqual(countdown_phase(schedule, now).label, "3")


class LocalZoneTests(unittest.TestCase):
    def test_tz_environment_variable_wins(self):
        if LONDON is None:
            self.skipTest("tz database not installed")
        with mock.patch.dict(os.environ, {"TZ": "Europe/London"}):
            self.assertEqual(str(local_zone()), "Europe/London")

    def test_fixed_offset_fallback_is_logged(self):
        with tempfile.TemporaryDirectory() as tmp:
            with mock.patch.dict(os.environ, {"TZ": ""}), mock.patch(
                "termwall_countdown.localtime._LOCALTIME_FILE", Path(tmp) / "localtime"
            ):
                with self.assertLogs("termwall.countdown", level="WARNING") as logs:
                    tz = local_zone()
        self.assertIsNotNone(datetime(2024, 1, 1, tzinfo=tz).utcoffset())
        self.assertIn("set [general] timezone", logs.output[0])

    def test_windows_installs_pull_in_tz_database(self):
        with (ROOT / "pyproject.toml").open("rb") as fh:
            deps = tomllib.load(fh)["project"]["dependencies"]
        tz_deps = [d for d in deps if d.replace(" ", "").startswith("tzdata")]
        self.assertEqual(len(tz_deps), 1)
        self.assertIn("win32", tz_deps[0])


if __name__ == "__main__":
    unittest.main()
