"""Completion ledger lookups over a checklist's history log."""

from collections.abc import Iterable
from datetime import date, datetime
from typing import Any, Optional

from .schema import CompletionEvent
from .utils import to_day


def is_resolved(day: Any, history: Iterable[CompletionEvent]) -> bool:
    """
    Check whether an occurrence has already been marked done.

    Only completion-type events (Completed, Administrative Completion)
    count. Events are matched by calendar day using their occurrence date,
    or their timestamp when no occurrence date was logged.

    Args:
        day: Date or datetime of the occurrence
        history: Checklist history log

    Returns:
        True if a completion event closes out this day
    """
    target = to_day(day)
    if target is None:
        return False

    return any(
        event.is_completion and event.effective_date == target for event in history
    )


def resolved_dates(history: Iterable[CompletionEvent]) -> set[date]:
    """
    Collect every calendar day closed out by a completion event.

    Equivalent to calling ``is_resolved`` per day, but built once so a
    projection walk can test membership in O(1).

    Args:
        history: Checklist history log

    Returns:
        Set of resolved calendar days
    """
    return {
        event.effective_date
        for event in history
        if event.is_completion and event.effective_date is not None
    }


def monthly_completion_count(
    history: Iterable[CompletionEvent],
    year: int,
    month: int,
) -> int:
    """
    Count completion events logged during a calendar month.

    Counts by when the work was logged (timestamp), not by the occurrence
    it closed out, so catching up a backlog shows as this month's work.

    Args:
        history: Checklist history log
        year: Calendar year
        month: Calendar month (1-12)

    Returns:
        Number of completion events logged in that month
    """
    return sum(
        1
        for event in history
        if event.is_completion
        and event.timestamp is not None
        and event.timestamp.year == year
        and event.timestamp.month == month
    )


def last_completed(history: Iterable[CompletionEvent]) -> Optional[datetime]:
    """Most recent completion timestamp, or None if never completed."""
    stamps = [e.timestamp for e in history if e.is_completion and e.timestamp is not None]
    if not stamps:
        return None
    # Mixed naive/aware timestamps cannot be compared directly
    return max(stamps, key=lambda ts: ts.replace(tzinfo=None))
