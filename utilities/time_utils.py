"""UTC time helpers: compact date parsing, ISO rendering, Julian day and GMST."""

from __future__ import annotations

import math
import re
from datetime import datetime
from typing import Tuple

import pandas as pd

from constants.gnss_constants import SiderealConstants, TimeConstants
from utilities.exceptions import InvalidInstantError


_COMPACT_DATE_RE = re.compile(r"^\d{14}$")
_TWO_PI = 2.0 * math.pi
_DEG_TO_RAD = math.pi / 180.0


def _as_utc(timestamp: pd.Timestamp | datetime | str) -> pd.Timestamp:
    """Return a tz-naive Timestamp expressed in UTC."""
    ts = pd.Timestamp(timestamp)
    if ts.tzinfo is not None:
        ts = ts.tz_convert("UTC").tz_localize(None)
    return ts


def parse_compact_datetime(text: str) -> pd.Timestamp:
    """Parse a ``yyyymmddHHMMSS`` string into a UTC timestamp."""
    if not isinstance(text, str) or not _COMPACT_DATE_RE.match(text.strip()):
        raise InvalidInstantError("Invalid date string", text)
    text = text.strip()
    try:
        return pd.Timestamp(
            year=int(text[0:4]),
            month=int(text[4:6]),
            day=int(text[6:8]),
            hour=int(text[8:10]),
            minute=int(text[10:12]),
            second=int(text[12:14]),
        )
    except ValueError as e:
        raise InvalidInstantError(f"Invalid date string ({e})", text) from e


def parse_compact_interval(text: str) -> Tuple[pd.Timestamp, pd.Timestamp]:
    """Parse a ``yyyymmddHHMMSS-yyyymmddHHMMSS`` interval."""
    parts = text.split("-") if isinstance(text, str) else []
    if len(parts) != 2:
        raise InvalidInstantError("Invalid interval string", text)
    start = parse_compact_datetime(parts[0])
    end = parse_compact_datetime(parts[1])
    if start > end:
        raise InvalidInstantError("Interval start is after its end", text)
    return start, end


def to_iso_string(timestamp: pd.Timestamp | datetime) -> str:
    """Render as ``YYYY-MM-DDTHH:MM:SS.sssZ`` (the viewer's ISO 8601 form)."""
    ts = _as_utc(timestamp)
    return ts.strftime("%Y-%m-%dT%H:%M:%S") + f".{ts.microsecond // 1000:03d}Z"


def iso_interval(start: pd.Timestamp, end: pd.Timestamp) -> str:
    return f"{to_iso_string(start)}/{to_iso_string(end)}"


def parse_iso_interval(text: str) -> Tuple[pd.Timestamp, pd.Timestamp]:
    """Parse a ``start/end`` ISO 8601 interval produced by :func:`iso_interval`."""
    parts = text.split("/") if isinstance(text, str) else []
    if len(parts) != 2:
        raise InvalidInstantError("Invalid ISO interval", text)
    try:
        start, end = (_as_utc(part) for part in parts)
    except ValueError as e:
        raise InvalidInstantError(f"Invalid ISO interval ({e})", text) from e
    if pd.isna(start) or pd.isna(end):
        raise InvalidInstantError("Invalid ISO interval (empty instant)", text)
    if start > end:
        raise InvalidInstantError("Interval start is after its end", text)
    return start, end


def julian_day(timestamp: pd.Timestamp | datetime) -> float:
    """Continuous Julian day of a UTC instant (proleptic Gregorian calendar)."""
    ts = _as_utc(timestamp)
    year, month = ts.year, ts.month
    msec = ts.microsecond / 1000.0
    day_fraction = (
        ((msec / 60000.0 + ts.second / 60.0 + ts.minute) / 60.0 + ts.hour) / 24.0
    )
    return (
        367.0 * year
        - math.floor(7 * (year + math.floor((month + 9) / 12.0)) * 0.25)
        + math.floor(275 * month / 9.0)
        + ts.day
        + TimeConstants.JD_CALENDAR_OFFSET
        + day_fraction
    )


def gmst_rad(timestamp: pd.Timestamp | datetime) -> float:
    """Greenwich mean sidereal time in radians, reduced to [0, 2*pi)."""
    tut1 = (
        julian_day(timestamp) - TimeConstants.J2000_JD
    ) / TimeConstants.DAYS_PER_JULIAN_CENTURY

    theta_sec = (
        SiderealConstants.C3_SEC * tut1**3
        + SiderealConstants.C2_SEC * tut1**2
        + SiderealConstants.C1_SEC * tut1
        + SiderealConstants.C0_SEC
    )
    theta = math.fmod(theta_sec * _DEG_TO_RAD / SiderealConstants.SEC_PER_DEG, _TWO_PI)
    if theta < 0.0:
        theta += _TWO_PI
    return theta


_FORMAT_FIELDS = (
    ("M+", lambda ts: ts.month),
    ("d+", lambda ts: ts.day),
    ("H+", lambda ts: ts.hour),
    ("m+", lambda ts: ts.minute),
    ("s+", lambda ts: ts.second),
    ("q+", lambda ts: (ts.month + 2) // 3),
    ("S", lambda ts: ts.microsecond // 1000),
)


def format_time(time, fmt: str = "yyyy-MM-dd HH:mm:ss") -> str:
    """Format a time with a ``yyyy-MM-dd HH:mm:ss`` style pattern.

    Supported tokens are ``y`` (year, truncated to the token length), ``M``
    (month), ``d`` (day), ``H`` (hour), ``m`` (minute), ``s`` (second), ``q``
    (quarter) and ``S`` (milliseconds). Doubled tokens are zero padded to two
    digits. Numbers are taken as milliseconds since the Unix epoch. Only the
    first occurrence of each token is replaced. Empty input gives ``""``.
    """
    if time is None or (isinstance(time, (str, int, float)) and not time):
        return ""
    if isinstance(time, (int, float)):
        ts = pd.Timestamp(time, unit="ms")
    else:
        ts = _as_utc(time)

    match = re.search(r"(y+)", fmt)
    if match:
        token = match.group(1)
        fmt = fmt.replace(token, str(ts.year)[max(4 - len(token), 0) :], 1)

    for pattern, getter in _FORMAT_FIELDS:
        match = re.search(f"({pattern})", fmt)
        if match:
            token = match.group(1)
            value = str(getter(ts))
            fmt = fmt.replace(
                token, value if len(token) == 1 else f"00{value}"[len(value) :], 1
            )
    return fmt
