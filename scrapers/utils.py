"""Utility helpers for event scrapers."""
from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone

_RFC3339_RE = re.compile(
    r"(?P<year>\d{4})-(?P<month>\d{2})-(?P<day>\d{2})"
    r"[Tt ](?P<hour>\d{2}):(?P<minute>\d{2}):(?P<second>\d{2})"
    r"(?:\.(?P<fraction>\d+))?"
    r"(?P<offset>[Zz]|[+-]\d{2}:\d{2})",
    re.ASCII,
)


def parse_rfc3339(value: str) -> datetime:
    """Parse an RFC 3339 timestamp and return it as an aware UTC datetime.

    Parameters
    ----------
    value:
        Date-time text such as ``2022-06-03T19:00:00+02:00``.  The offset is
        mandatory (``Z`` or ``+HH:MM``); date-only and naive values are
        rejected.  Fractional seconds beyond microseconds are truncated and
        a leap second (``:60``) becomes ``:59.999999``.

    Raises
    ------
    ValueError
        When ``value`` is not a valid RFC 3339 date-time.
    """
    match = _RFC3339_RE.fullmatch(value)
    if match is None:
        raise ValueError(f"not an RFC 3339 date-time: {value!r}")

    offset_text = match.group("offset")
    if offset_text in ("Z", "z"):
        tz = timezone.utc
    else:
        hours, minutes = int(offset_text[1:3]), int(offset_text[4:6])
        if minutes > 59:
            raise ValueError(f"invalid UTC offset: {offset_text!r}")
        delta = timedelta(hours=hours, minutes=minutes)
        # timezone() itself rejects offsets of 24 hours or more
        tz = timezone(-delta if offset_text[0] == "-" else delta)

    second = int(match.group("second"))
    microsecond = int((match.group("fraction") or "0")[:6].ljust(6, "0"))
    if second == 60:
        # leap second: clamp to the last representable instant of the minute
        second, microsecond = 59, 999999
    dt = datetime(
        int(match.group("year")),
        int(match.group("month")),
        int(match.group("day")),
        int(match.group("hour")),
        int(match.group("minute")),
        second,
        microsecond,
        tzinfo=tz,
    )
    return dt.astimezone(timezone.utc)
