"""Time-window and frequency-tab filters used by checklist views."""

from collections.abc import Iterable
from datetime import date, timedelta
from typing import Any, Union

from . import constants
from .schema import ChecklistTemplate, Occurrence
from .types import FrequencyType, TimeFilter
from .utils import to_day

ALL_FREQUENCIES = "All"


def matches_time_filter(day: Any, time_filter: Union[TimeFilter, str], today: date) -> bool:
    """
    Check whether a day falls inside a time window.

    Windows:
        All: every day
        Today: backlog and today (day <= today)
        Next 7 Days: today through a week from today
        Pending Work: overdue only (day < today)

    Args:
        day: Date, datetime or ISO string
        time_filter: Window to apply
        today: Reference day

    Returns:
        True if the day is inside the window; unreadable days never match
    """
    target = to_day(day)
    if target is None:
        return False

    time_filter = TimeFilter(time_filter)
    if time_filter == TimeFilter.PENDING_WORK:
        return target < today
    if time_filter == TimeFilter.TODAY:
        return target <= today
    if time_filter == TimeFilter.NEXT_7_DAYS:
        next_week = today + timedelta(days=constants.NEXT_WEEK_WINDOW_DAYS)
        return today <= target <= next_week
    return True


def filter_occurrences(
    occurrences: Iterable[Occurrence],
    time_filter: Union[TimeFilter, str],
    today: date,
) -> list[Occurrence]:
    """Keep occurrences inside a time window, preserving order."""
    return [o for o in occurrences if matches_time_filter(o.date, time_filter, today)]


def filter_by_frequency(
    templates: Iterable[ChecklistTemplate],
    tab: Union[FrequencyType, str],
) -> list[ChecklistTemplate]:
    """
    Keep templates for one frequency tab.

    Args:
        templates: Checklist templates
        tab: "All" or a frequency label such as "Weekly" or "Half-Yearly"

    Returns:
        Matching templates, preserving order

    Raises:
        ValueError: If tab is neither "All" nor a known frequency
    """
    if tab == ALL_FREQUENCIES:
        return list(templates)

    frequency = FrequencyType(tab)
    return [t for t in templates if t.recurrence.frequency == frequency.value]
