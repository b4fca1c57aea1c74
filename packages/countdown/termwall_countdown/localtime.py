"""Local wall-clock resolution that refuses to guess across DST transitions."""

from __future__ import annotations

import logging
import os
from datetime import datetime, timezone, tzinfo
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .errors import AmbiguousLocalTimeError, InvalidTimeZoneError, NonexistentLocalTimeError

_LOCALTIME_FILE = Path("/etc/localtime")

logger = logging.getLogger("termwall.countdown")


def local_zone() -> tzinfo:
    key = os.environ.get("TZ", "").lstrip(":")
    if key:
        try:
            return ZoneInfo(key)
        except (ZoneInfoNotFoundError, ValueError):
            pass
    if _LOCALTIME_FILE.exists():
        with _LOCALTIME_FILE.open("rb") as fh:
            return ZoneInfo.from_file(fh, key="localtime")
    # Windows: the zone name is not discoverable, only the current offset is known.
    fixed = datetime.now().astimezone().tzinfo or timezone.utc
    logger.warning(
        f"no IANA time zone found, using fixed offset {fixed}; "
        "DST gaps and overlaps cannot be detected, set [general] timezone",
        extra={"event": "fixed_offset_zone"},
    )
    return fixed


def zone(name: str | None) -> tzinfo:
    if not name:
        return local_zone()
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise InvalidTimeZoneError(name) from exc


def resolve_local(naive: datetime, tz: tzinfo, field: str = "datetime") -> datetime:
    """Attach ``tz`` to a wall-clock time, rejecting gaps and overlaps.

    Zones implementing PEP 495 report different offsets for ``fold=0`` and
    ``fold=1`` exactly when the wall time sits inside a transition. A gap is
    told apart from an overlap by a round trip through UTC: a skipped wall
    time comes back shifted.
    """
    if naive.tzinfo is not None:
        return naive.astimezone(tz)

    earlier = naive.replace(tzinfo=tz, fold=0)
    later = naive.replace(tzinfo=tz, fold=1)
    if earlier.utcoffset() == later.utcoffset():
        return earlier

    round_trip = earlier.astimezone(timezone.utc).astimezone(tz).replace(tzinfo=None)
    if round_trip != naive:
        raise NonexistentLocalTimeError(
            field, f"{naive.isoformat()} does not exist in {tz} (skipped by a forward transition)"
        )
    raise AmbiguousLocalTimeError(
        field,
        f"{naive.isoformat()} occurs twice in {tz}; unable to resolve unambiguously "
        "(negative timezone transition)",
    )
