"""Utility functions for taskcadence.

This module provides the date helpers shared by the schema validators and
the pure projection components. Upstream records arrive from a REST store
and may carry ISO dates, ISO timestamps (often with a trailing ``Z``),
Python ``date``/``datetime`` objects, or garbage. Every helper here is
permissive: a value that cannot be read as a calendar day becomes ``None``
so that it silently fails to match instead of raising.
"""

import re
from datetime import date, datetime
from typing import Any, Optional

from dateutil import parser as date_parser


def to_day(value: Any) -> Optional[date]:
    """Truncate a date-like value to its calendar day.

    Args:
        value: ``date``, ``datetime``, ISO string, or anything else

    Returns:
        The calendar day, or None if the value is empty or malformed
    """
    if value is None:
        return None
    # datetime is a subclass of date, check it first
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    parsed = to_datetime(value)
    return parsed.date() if parsed is not None else None


def to_datetime(value: Any) -> Optional[datetime]:
    """Parse a timestamp-like value permissively.

    Args:
        value: ``datetime``, ``date``, ISO string, or anything else

    Returns:
        A datetime (midnight for plain dates), or None if malformed
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, datetime.min.time())
    if not isinstance(value, str) or not value.strip():
        return None

    try:
        return date_parser.isoparse(value.strip())
    except (ValueError, OverflowError):
        return None


def slugify(text: str) -> str:
    """Convert text to a valid checklist ID.

    Converts text to lowercase, removes special characters,
    replaces spaces with hyphens, and strips leading/trailing hyphens.

    Args:
        text: The text to slugify.

    Returns:
        A valid checklist ID string.
    """
    # Lowercase and replace spaces with hyphens
    slug = text.lower().replace(" ", "-")
    # Remove special characters, keep only alphanumeric and hyphens
    slug = re.sub(r"[^a-z0-9\-]", "", slug)
    # Remove leading/trailing hyphens and multiple consecutive hyphens
    slug = slug.strip("-")
    return re.sub(r"-+", "-", slug)
