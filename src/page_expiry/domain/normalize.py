"""Normalization of raw spreadsheet cells into canonical values.

Every function here degrades to a default instead of raising: a malformed
cell should never abort a processing run.
"""

import logging
import math
import numbers
import re
from datetime import date, datetime, timedelta, timezone
from urllib.parse import urlsplit

import dateparser

logger = logging.getLogger(__name__)

# Spreadsheet serials count from 1899-12-30, which reproduces the 1900
# leap-year bug: serial v lands on 1900-01-01 + (v - 2) days.
SERIAL_BASE = datetime(1900, 1, 1)
_SCHEME = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.\-]*://")
_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")
_NUMERIC = re.compile(r"^[+-]?\d+(\.\d+)?$")


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc)


def _parse_text(text: str, now: datetime) -> date | None:
    try:
        return _as_utc(datetime.fromisoformat(text)).date()
    except ValueError:
        pass
    parsed = dateparser.parse(
        text,
        settings={
            "RELATIVE_BASE": _as_utc(now).replace(tzinfo=None),
            "PREFER_DAY_OF_MONTH": "first",
            "PREFER_MONTH_OF_YEAR": "first",
        },
    )
    if parsed is None:
        return None
    return _as_utc(parsed).date()


def _from_serial(serial: float) -> str:
    return (SERIAL_BASE + timedelta(days=serial - 2)).date().isoformat()


def parse_date(value: object, now: datetime) -> str:
    """Convert a raw cell into an ISO calendar date.

    Accepts spreadsheet date serials, date/datetime values and date strings.
    A purely numeric string is read as a serial. Missing or unparseable input falls back to the date of ``now``.
    """
    today = _as_utc(now).date().isoformat()

    if value is None or isinstance(value, bool):
        return today

    try:
        if isinstance(value, datetime):
            return _as_utc(value).date().isoformat()
        if isinstance(value, date):
            return value.isoformat()
        if isinstance(value, numbers.Real):
            serial = float(value)
            if not math.isfinite(serial):
                return today
            return _from_serial(serial)
        if isinstance(value, str):
            text = value.strip()
            if not text:
                return today
            # CSV readers hand serials over as text
            if _NUMERIC.match(text):
                return _from_serial(float(text))
            parsed = _parse_text(text, now)
            if parsed is not None:
                return parsed.isoformat()
    except (OverflowError, ValueError) as e:
        logger.debug(f"Unusable date {value!r}: {e}")

    logger.debug(f"Defaulting unparseable date {value!r} to {today}")
    return today


def split_url(raw: str) -> tuple[str, str]:
    """Split a URL or relative reference into (domain, path)."""
    text = raw.strip()
    candidate = text if _SCHEME.match(text) else f"https://{text}"
    try:
        parts = urlsplit(candidate)
        domain = parts.hostname or ""
        parts.port  # raises on a malformed port
    except ValueError:
        # Naive split on the first slash
        head, _, tail = text.partition("/")
        return head or text, "/" + tail
    return domain, parts.path or "/"


def parse_page_views(value: object) -> int:
    """Parse a view count as a non-negative integer, 0 when not numeric."""
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, numbers.Real):
        number = float(value)
        if not math.isfinite(number):
            return 0
        return max(int(number), 0)
    match = _LEADING_INT.match(str(value).replace(",", ""))
    if not match:
        return 0
    return max(int(match.group(1)), 0)
