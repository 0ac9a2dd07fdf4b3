"""ISO 8601 date parsing for TMX ``creationdate``/``changedate`` values.

TMX producers disagree on how to spell the same instant:
``20210131T101500Z``, ``2021-01-31T10:15:00Z``, ``2021-01-31T10:15+01:00``
and so on.  Every value is tried against a fixed, ordered list of
patterns and the first full match wins.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DateFormat:
    """One accepted date spelling."""

    pattern: str  # .NET-style notation, e.g. "yyyy-MM-ddTHH:mmzzz"
    regex: re.Pattern[str]


_DATE = {
    "yyyyMMdd": r"(?P<year>\d{4})(?P<month>\d{2})(?P<day>\d{2})",
    "yyyy-MM-dd": r"(?P<year>\d{4})-(?P<month>\d{2})-(?P<day>\d{2})",
}

# (compact, extended) time spellings per precision
_TIME = (
    ("HHmmss", "HH:mm:ss", r"(?P<hour>\d{2})(?P<minute>\d{2})(?P<second>\d{2})",
     r"(?P<hour>\d{2}):(?P<minute>\d{2}):(?P<second>\d{2})"),
    ("HHmm", "HH:mm", r"(?P<hour>\d{2})(?P<minute>\d{2})",
     r"(?P<hour>\d{2}):(?P<minute>\d{2})"),
    ("HH", "HH", r"(?P<hour>\d{2})", r"(?P<hour>\d{2})"),
)

_OFFSET = (
    ("zzz", r"(?P<sign>[+-])(?P<off_h>\d{2}):(?P<off_m>\d{2})"),
    ("zz", r"(?P<sign>[+-])(?P<off_h>\d{2})"),
    ("Z", r"Z"),
)


def _build_formats() -> tuple[DateFormat, ...]:
    formats = []
    for time_compact, time_extended, re_compact, re_extended in _TIME:
        for date, re_date in _DATE.items():
            compact = date == "yyyyMMdd"
            time = time_compact if compact else time_extended
            re_time = re_compact if compact else re_extended
            for offset, re_offset in _OFFSET:
                formats.append(DateFormat(
                    pattern=f"{date}T{time}{offset}",
                    regex=re.compile(f"{re_date}T{re_time}{re_offset}", re.ASCII),
                ))
    return tuple(formats)


DATE_FORMATS: tuple[DateFormat, ...] = _build_formats()


def _to_datetime(match: re.Match[str]) -> datetime:
    parts = match.groupdict()
    tz = timezone.utc
    if parts.get("sign"):
        delta = timedelta(hours=int(parts["off_h"]), minutes=int(parts.get("off_m") or 0))
        tz = timezone(-delta if parts["sign"] == "-" else delta)
    value = datetime(
        int(parts["year"]), int(parts["month"]), int(parts["day"]),
        int(parts["hour"]), int(parts.get("minute") or 0), int(parts.get("second") or 0),
        tzinfo=tz,
    )
    return value.astimezone(timezone.utc)


def parse_tmx_date(value: str | None) -> datetime | None:
    """Parse a TMX date into an aware UTC datetime.

    Returns ``None`` when *value* is empty or matches none of
    :data:`DATE_FORMATS`.  Never raises.
    """
    if not value or not isinstance(value, str):
        return None
    for fmt in DATE_FORMATS:
        match = fmt.regex.fullmatch(value)
        if match is None:
            continue
        try:
            return _to_datetime(match)
        except (ValueError, OverflowError):
            # Right shape, impossible value (month 13, offset +99:00, year 0)
            logger.debug("Date %r fits %s but is out of range", value, fmt.pattern)
    return None
