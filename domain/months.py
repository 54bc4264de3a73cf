"""
Month derivation for free-text spreadsheet timestamps.

Spreadsheet rows carry a hand-entered "Date and Time" column, so the month of an
entry is derived through a chain of progressively looser strategies. Each
strategy is a separate function returning ``""`` when it does not apply.
"""

import logging
import re
from datetime import datetime
from typing import Callable, Optional, Tuple

# Get logger for this module
logger = logging.getLogger(__name__)

MONTH_NAMES: Tuple[str, ...] = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)

# Formats tried after ISO 8601; month-first for the numeric ones. strptime also
# accepts unpadded fields, so "%Y-%m-%d" covers "2025-5-16".
DATE_FORMATS: Tuple[str, ...] = (
    "%m-%d-%Y",
    "%m/%d/%Y",
    "%m/%d/%Y %H:%M",
    "%m/%d/%Y %H:%M:%S",
    "%m/%d/%Y %I:%M %p",
    "%m/%d/%Y %I:%M:%S %p",
    "%m-%d-%Y %H:%M",
    "%m-%d-%Y %H:%M:%S",
    "%Y-%m-%d",
    "%Y-%m-%d %H:%M",
    "%Y-%m-%d %H:%M:%S",
    "%Y/%m/%d",
    "%Y/%m/%d %H:%M",
    "%Y/%m/%d %H:%M:%S",
    "%B %d, %Y",
    "%B %d %Y",
    "%b %d, %Y",
    "%d %B %Y",
    "%d %b %Y",
    "%B %d, %Y %H:%M",
    "%B %d, %Y %I:%M %p",
)

NUMERIC_DATE_PATTERN = re.compile(r"(\d{1,2})[-/](\d{1,2})[-/](\d{4})")


def _to_local(parsed: datetime) -> datetime:
    if parsed.tzinfo is None:
        return parsed
    return parsed.astimezone()


def parse_calendar_date(text: str) -> Optional[datetime]:
    """
    Parse ``text`` as a calendar date.

    Timestamps carrying an offset (the store sends cells as ``...Z``) are
    converted to local time, so the month is the one the viewer sees.

    Returns:
        The parsed datetime, or None if no known format matches.
    """
    candidate = text.strip()
    if not candidate:
        return None

    iso_candidate = candidate[:-1] + "+00:00" if candidate.endswith("Z") else candidate
    try:
        return _to_local(datetime.fromisoformat(iso_candidate))
    except ValueError:
        pass

    for date_format in DATE_FORMATS:
        try:
            return datetime.strptime(candidate, date_format)
        except ValueError:
            continue
    return None


def month_from_calendar_date(text: str) -> str:
    parsed = parse_calendar_date(text)
    if parsed is None:
        return ""
    return MONTH_NAMES[parsed.month - 1]


def month_from_name(text: str) -> str:
    """Return the first month name (in calendar order) mentioned anywhere in ``text``."""
    lowered = text.lower()
    for month_name in MONTH_NAMES:
        if month_name.lower() in lowered:
            return month_name
    return ""


def month_from_numeric_pattern(text: str) -> str:
    """Map the first group of a ``D-M-YYYY``/``M/D/YYYY`` shaped date to a month name."""
    match = NUMERIC_DATE_PATTERN.search(text)
    if not match:
        return ""
    month_number = int(match.group(1))
    if 1 <= month_number <= 12:
        return MONTH_NAMES[month_number - 1]
    return ""


MONTH_STRATEGIES: Tuple[Callable[[str], str], ...] = (
    month_from_calendar_date,
    month_from_name,
    month_from_numeric_pattern,
)


def derive_month(text: str) -> str:
    """
    Derive the long English month name from a free-text date field.

    Args:
        text: Raw value of the row's date/time column

    Returns:
        One of ``MONTH_NAMES``, or ``""`` when no strategy recognises the text
    """
    if not text:
        return ""

    for strategy in MONTH_STRATEGIES:
        month = strategy(text)
        if month:
            logger.debug("Derived month %s from %r via %s", month, text, strategy.__name__)
            return month

    logger.debug("Could not derive a month from %r", text)
    return ""


def canonical_month(month: str) -> str:
    """Return the canonical spelling of ``month`` or ``""`` if it is not a month name."""
    lowered = month.strip().lower()
    for month_name in MONTH_NAMES:
        if month_name.lower() == lowered:
            return month_name
    return ""


def format_date_time(text: str) -> str:
    """Render a raw timestamp for display, e.g. ``May 16, 2025, 10:30 AM``."""
    parsed = parse_calendar_date(text)
    if parsed is None:
        return text
    return f"{MONTH_NAMES[parsed.month - 1]} {parsed.day}, {parsed.year}, {parsed:%I:%M %p}"
