"""
Timestamp normalization for upstream date fields.

The upstream API reports timestamps in its local time (UTC+9) without a
timezone marker, e.g. "2025-11-14 12:03:07.0". Some fields or future payloads
may carry an explicit offset ("2025-11-14T12:03:07+09:00") or a UTC marker
("...Z"). Both are converted to one canonical form:

    YYYY-MM-DDTHH:MM:SS.mmmZ   (UTC, exactly three fractional digits)

Key Concepts:
- Explicit offset wins: strings with Z/z or +HH:MM are converted directly
- Otherwise the local offset is assumed and subtracted
- Fractional seconds are padded or truncated to milliseconds (never rounded)
- Deterministic: no dependency on the host timezone or current time
"""

import re
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

# Offset applied to timestamps that carry no timezone designator
LOCAL_UTC_OFFSET = timedelta(hours=9)

_OFFSET_PATTERN = re.compile(
    r"^(\d{4})-(\d{2})-(\d{2})[T ](\d{2}):(\d{2})"
    r"(?::(\d{2})(?:\.(\d+))?)?"
    r"\s*([Zz]|[+-]\d{2}:?\d{2})$"
)

_LOCAL_PATTERN = re.compile(
    r"^(\d{4})-(\d{2})-(\d{2})[T ](\d{2}):(\d{2}):(\d{2})(?:\.(\d+))?$"
)


def _milliseconds(fraction: Optional[str]) -> int:
    """Pad or truncate a fractional-seconds string to exactly 3 digits."""
    if not fraction:
        return 0
    return int(fraction.ljust(3, "0")[:3])


def _parse_offset(designator: str) -> timezone:
    if designator in ("Z", "z"):
        return timezone.utc
    sign = -1 if designator[0] == "-" else 1
    digits = designator[1:].replace(":", "")
    hours, minutes = int(digits[:2]), int(digits[2:])
    if hours > 23 or minutes > 59:
        raise ValueError(f"Invalid UTC offset: {designator}")
    return timezone(sign * timedelta(hours=hours, minutes=minutes))


def _format_utc(moment: datetime) -> str:
    utc = moment.astimezone(timezone.utc)
    return utc.strftime("%Y-%m-%dT%H:%M:%S") + f".{utc.microsecond // 1000:03d}Z"


def _from_explicit_offset(text: str) -> Optional[str]:
    match = _OFFSET_PATTERN.match(text)
    if not match:
        return None

    year, month, day, hour, minute, second, fraction, designator = match.groups()
    try:
        moment = datetime(
            int(year),
            int(month),
            int(day),
            int(hour),
            int(minute),
            int(second or 0),
            _milliseconds(fraction) * 1000,
            tzinfo=_parse_offset(designator),
        )
        return _format_utc(moment)
    except (ValueError, OverflowError):
        return None


def _from_local_time(text: str) -> Optional[str]:
    match = _LOCAL_PATTERN.match(text)
    if not match:
        return None

    year, month, day, hour, minute, second, fraction = match.groups()
    try:
        wall_clock = datetime(
            int(year),
            int(month),
            int(day),
            int(hour),
            int(minute),
            int(second),
            _milliseconds(fraction) * 1000,
            tzinfo=timezone.utc,
        )
        return _format_utc(wall_clock - LOCAL_UTC_OFFSET)
    except (ValueError, OverflowError):
        return None


def normalize_timestamp(value: Any) -> Optional[str]:
    """
    Convert an upstream timestamp to a canonical UTC ISO-8601 string.

    Examples:
        >>> normalize_timestamp("2024-01-15 12:34:56")
        '2024-01-15T03:34:56.000Z'
        >>> normalize_timestamp("2025-11-14T12:03:07.45+09:00")
        '2025-11-14T03:03:07.450Z'
        >>> normalize_timestamp("") is None
        True

    Args:
        value: Raw timestamp; non-strings and blank strings are rejected

    Returns:
        Canonical UTC string, or None when the value cannot be parsed or the
        resulting instant falls outside the representable range
    """
    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None

    normalized = _from_explicit_offset(text)
    if normalized is not None:
        return normalized

    return _from_local_time(text)
