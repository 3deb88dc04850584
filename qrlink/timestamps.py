"""Expiration timestamp normalization.

Stored expirations always use one canonical text form, ISO-8601 in UTC with
millisecond precision and a ``Z`` suffix (``2030-01-01T12:00:00.000Z``), so
lexical and chronological order agree and readers never need timezone-aware
parsing.
"""

import warnings
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional, Union

from dateutil import parser as date_parser

from .exceptions import ExpirationInPastError, InvalidExpirationError


UNKNOWN_DATE = "unknown date"

# North American zone abbreviations, as UTC offsets in seconds.
TIMEZONE_ABBREVIATIONS = {
    "EST": -5 * 3600,
    "EDT": -4 * 3600,
    "CST": -6 * 3600,
    "CDT": -5 * 3600,
    "MST": -7 * 3600,
    "MDT": -6 * 3600,
    "PST": -8 * 3600,
    "PDT": -7 * 3600,
}

_FIRST_DEFAULT = datetime(2000, 1, 1)
_SECOND_DEFAULT = datetime(2004, 2, 2)

TimestampInput = Union[str, datetime, int, float, None]


class RepairAction(str, Enum):
    """Outcome of checking one stored expiration value."""

    UNCHANGED = "unchanged"
    NORMALIZE = "normalize"
    CLEAR = "clear"


@dataclass(frozen=True)
class RepairResult:
    action: RepairAction
    value: Optional[str] = None


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(dt: datetime) -> datetime:
    # Naive values carry no zone information; they are taken as UTC.
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    dt = dt.astimezone(timezone.utc)
    return dt.replace(microsecond=(dt.microsecond // 1000) * 1000)


def _parse_text(value: str) -> datetime:
    # dateutil fills absent fields from ``default``; parsing against two
    # defaults that differ in year, month and day exposes a missing date part.
    with warnings.catch_warnings():
        warnings.simplefilter("error", date_parser.UnknownTimezoneWarning)
        first = date_parser.parse(value, default=_FIRST_DEFAULT, tzinfos=TIMEZONE_ABBREVIATIONS)
        second = date_parser.parse(value, default=_SECOND_DEFAULT, tzinfos=TIMEZONE_ABBREVIATIONS)

    if first != second:
        raise ValueError(f"Incomplete date: {value!r}")
    return first


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse a timestamp-like value into an aware UTC datetime.

    Strings are parsed leniently (ISO-8601 as well as forms like
    ``"Jan 5 2030 10:00"``) but must name a full calendar date; a missing
    time of day means midnight. Zone names outside ``TIMEZONE_ABBREVIATIONS``
    (other than UTC/GMT/Z) are rejected rather than guessed. Numbers are
    milliseconds since the Unix epoch. The result is truncated to millisecond
    precision.

    Returns:
        The parsed instant, or None when the value is not a valid timestamp.
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, datetime):
        return _as_utc(value)

    try:
        if isinstance(value, (int, float)):
            return _as_utc(datetime.fromtimestamp(value / 1000, tz=timezone.utc))

        if not isinstance(value, str) or not value.strip():
            return None

        return _as_utc(_parse_text(value.strip()))
    except (ValueError, OverflowError, OSError, date_parser.UnknownTimezoneWarning):
        return None


def to_canonical(dt: datetime) -> str:
    """Render an instant in the canonical stored form."""
    iso = _as_utc(dt).isoformat(timespec="milliseconds")
    return iso.replace("+00:00", "Z")


def normalize_expiration(value: TimestampInput, now: Optional[datetime] = None) -> Optional[str]:
    """Validate a requested expiration and return its canonical form.

    Args:
        value: Expiration supplied by the caller. None or a blank string
            means the link never expires.
        now: Instant the check is evaluated against (defaults to current time)

    Returns:
        Canonical ISO-8601 UTC string, or None for no expiration

    Raises:
        InvalidExpirationError: If the value cannot be parsed
        ExpirationInPastError: If the value is at or before ``now``
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        return None

    parsed = parse_timestamp(value)
    if parsed is None:
        raise InvalidExpirationError("Invalid expiration date format")

    now = _as_utc(now) if now is not None else utc_now()
    if parsed <= now:
        raise ExpirationInPastError("Expiration must be a future date/time")

    return to_canonical(parsed)


def repair_expiration(stored: Optional[str]) -> RepairResult:
    """Decide how a stored expiration value should be repaired.

    Unparseable values are cleared, valid values in any other format are
    rewritten to the canonical form. Canonical values are left alone, so
    running the repair twice changes nothing the second time.
    """
    if stored is None:
        return RepairResult(RepairAction.UNCHANGED)

    parsed = parse_timestamp(stored)
    if parsed is None:
        return RepairResult(RepairAction.CLEAR)

    canonical = to_canonical(parsed)
    if canonical == stored:
        return RepairResult(RepairAction.UNCHANGED, stored)
    return RepairResult(RepairAction.NORMALIZE, canonical)


def is_expired(stored: Optional[str], now: Optional[datetime] = None) -> bool:
    """Check a stored expiration against ``now``.

    A missing expiration never expires. An unparseable one counts as expired.
    """
    if stored is None:
        return False

    parsed = parse_timestamp(stored)
    if parsed is None:
        return True

    now = _as_utc(now) if now is not None else utc_now()
    return parsed <= now


def format_for_display(stored: Optional[str]) -> str:
    """Best-effort human-readable rendering of a stored expiration."""
    parsed = parse_timestamp(stored)
    if parsed is None:
        return UNKNOWN_DATE
    return parsed.strftime("%B %d, %Y at %H:%M:%S UTC")
