"""
Date parser utility for flexible date parsing.

Handles the timestamp formats seen in UDisc scorecard exports, falling back
to pandas for anything else.
"""

from datetime import datetime, timezone
from typing import Optional, List

import pandas as pd

from .constants import DATE_FORMATS


def parse_date(date_string: str, formats: Optional[List[str]] = None) -> datetime:
    """
    Parse a date string using multiple format attempts.

    Tries each explicit format in order, then pandas' flexible parser.
    Timezone-aware results are converted to naive UTC.

    Args:
        date_string: The date string to parse
        formats: Optional list of format strings to try.
                 Defaults to DATE_FORMATS from constants.

    Returns:
        Parsed datetime object

    Raises:
        ValueError: If the string cannot be parsed

    Examples:
        >>> parse_date("2024-06-01 1432")
        datetime.datetime(2024, 6, 1, 14, 32)
    """
    if formats is None:
        formats = DATE_FORMATS

    date_string = date_string.strip()

    if not date_string:
        raise ValueError("Date string cannot be empty")

    for fmt in formats:
        try:
            return datetime.strptime(date_string, fmt)
        except ValueError:
            continue

    parsed = pd.to_datetime(date_string, errors='coerce')
    if pd.isna(parsed):
        raise ValueError(f"Could not parse date '{date_string}'")

    result = parsed.to_pydatetime()
    if result.tzinfo is not None:
        result = result.astimezone(timezone.utc).replace(tzinfo=None)
    return result


def parse_date_safe(date_string: str, default: Optional[datetime] = None) -> Optional[datetime]:
    """
    Parse a date string, returning default on failure instead of raising.

    Args:
        date_string: The date string to parse
        default: Value to return if parsing fails (default: None)

    Returns:
        Parsed datetime or default value
    """
    try:
        return parse_date(date_string)
    except (ValueError, OverflowError):
        return default
