"""Instance projector: pending checklist occurrences over a calendar walk.

The projector combines the three pure rules:

1. Calendar policy - is the day a working day for the tenant?
2. Frequency rule - does the recurrence authorize the day?
3. Completion ledger - has the day already been marked done?

and walks one calendar day at a time from a start date, yielding every
day that passes (1) and (2) but not (3). The walk is bounded by both a
result count and a scan budget, so it always terminates. Forward
look-ahead and backlog catch-up are two bounded calls to the same walk.
"""

import logging
from collections.abc import Iterable, Iterator
from datetime import date, timedelta
from typing import Any, Optional

from . import constants
from .calendar_policy import is_working_day
from .ledger import resolved_dates
from .recurrence import is_authorized_occurrence
from .schema import (
    CalendarPolicy,
    ChecklistTemplate,
    CompletionEvent,
    Occurrence,
    ProjectionConfig,
    StatusSummary,
)
from .types import Direction
from .utils import to_day

logger = logging.getLogger(__name__)

ONE_DAY = timedelta(days=1)


def _reference_day(today: Any) -> date:
    """Calendar day used for past/today flags (system date if unset or unreadable)."""
    day = to_day(today)
    return day if day is not None else date.today()


def _clamp_bound(value: Any) -> int:
    """Coerce a caller-supplied bound to a non-negative int (0 if unusable)."""
    try:
        return max(0, int(value))
    except (TypeError, ValueError, OverflowError):
        return 0


class OccurrenceProjection:
    """
    Lazy, finite, restartable sequence of pending occurrences.

    Every ``iter()`` restarts the walk from ``start_date``; inputs are never
    mutated, so repeated iteration yields identical results.

    Forward walks yield lazily in increasing date order. Backward walks
    (for backlog enumeration ending at ``start_date``) are bounded the same
    way and yielded in increasing date order as well.

    Args:
        config: Recurrence variant
        policy: Tenant calendar
        history: Completion history log
        start_date: First day examined (inclusive)
        max_count: Maximum occurrences yielded (clamped to >= 0)
        max_days_scanned: Maximum calendar days examined (clamped to >= 0)
        today: Reference day for past/today flags (defaults to date.today())
        direction: Walk direction
    """

    def __init__(
        self,
        config,
        policy: CalendarPolicy,
        history: Iterable[CompletionEvent],
        start_date: date,
        max_count: Any,
        max_days_scanned: Any,
        *,
        today: Optional[date] = None,
        direction: Direction = Direction.FORWARD,
    ):
        self.config = config
        self.policy = policy
        self.history = tuple(history or ())
        self.start_date = to_day(start_date)
        self.max_count = _clamp_bound(max_count)
        self.max_days_scanned = _clamp_bound(max_days_scanned)
        self.today = _reference_day(today)
        self.direction = Direction(direction)

    def __iter__(self) -> Iterator[Occurrence]:
        if self.direction == Direction.BACKWARD:
            # Walk back from start_date, then hand out oldest first
            return iter(list(reversed(list(self._walk(-ONE_DAY)))))
        return self._walk(ONE_DAY)

    def _walk(self, step: timedelta) -> Iterator[Occurrence]:
        if self.max_count == 0 or self.start_date is None:
            return

        done = resolved_dates(self.history)
        found = 0
        current = self.start_date

        for _ in range(self.max_days_scanned):
            if (
                is_working_day(current, self.policy)
                and is_authorized_occurrence(current, self.config)
                and current not in done
            ):
                yield Occurrence(
                    date=current,
                    is_past=current < self.today,
                    is_today=current == self.today,
                )
                found += 1
                if found == self.max_count:
                    return

            try:
                current = current + step
            except OverflowError:
                logger.debug(
                    "Walk from %s hit the end of the calendar at %s with %d of %d occurrences",
                    self.start_date,
                    current,
                    found,
                    self.max_count,
                )
                return

        logger.debug(
            "Scan budget of %d days exhausted from %s with %d of %d occurrences",
            self.max_days_scanned,
            self.start_date,
            found,
            self.max_count,
        )


def project_occurrences(
    config,
    policy: CalendarPolicy,
    history: Iterable[CompletionEvent],
    start_date: date,
    max_count: Any,
    max_days_scanned: Any,
    *,
    today: Optional[date] = None,
    direction: Direction = Direction.FORWARD,
) -> list[Occurrence]:
    """
    Project pending occurrences of a recurring checklist.

    A day is yielded iff it is a working day, the recurrence authorizes it,
    and no completion event resolves it. The walk stops after ``max_count``
    results or ``max_days_scanned`` examined days, whichever comes first;
    an exhausted scan budget returns the partial (possibly empty) result.

    Args:
        config: Recurrence variant
        policy: Tenant calendar
        history: Completion history log
        start_date: First day examined (inclusive)
        max_count: Maximum occurrences returned (clamped to >= 0)
        max_days_scanned: Maximum calendar days examined (clamped to >= 0)
        today: Reference day for past/today flags (defaults to date.today())
        direction: Walk forward or backward from start_date

    Returns:
        Occurrences in strictly increasing date order
    """
    return list(
        OccurrenceProjection(
            config,
            policy,
            history,
            start_date,
            max_count,
            max_days_scanned,
            today=today,
            direction=direction,
        )
    )


def upcoming_occurrences(
    template: ChecklistTemplate,
    policy: CalendarPolicy,
    config: Optional[ProjectionConfig] = None,
    *,
    today: Optional[date] = None,
    start: Optional[date] = None,
    count: Optional[int] = None,
    days: Optional[int] = None,
) -> list[Occurrence]:
    """
    Next pending occurrences from today onwards (forward look-ahead).

    Args:
        template: Checklist template with recurrence and history
        policy: Tenant calendar
        config: Projection bounds (defaults to ProjectionConfig())
        today: Reference day (defaults to date.today())
        start: First day examined (defaults to today)
        count: Overrides ``config.upcoming_count``
        days: Overrides ``config.lookahead_days``

    Returns:
        Up to ``count`` occurrences within ``days`` scanned days
    """
    config = config or ProjectionConfig()
    today = _reference_day(today)

    return project_occurrences(
        template.recurrence,
        policy,
        template.history,
        start if start is not None else today,
        count if count is not None else config.upcoming_count,
        days if days is not None else config.lookahead_days,
        today=today,
    )


def pending_backlog(
    template: ChecklistTemplate,
    policy: CalendarPolicy,
    config: Optional[ProjectionConfig] = None,
    *,
    today: Optional[date] = None,
) -> list[Occurrence]:
    """
    Unresolved occurrences from the template's next due date up to today.

    The walk starts at ``next_due_date`` (or the recurrence anchor when the
    backend has not set one) and never goes past today.

    Args:
        template: Checklist template with recurrence and history
        policy: Tenant calendar
        config: Projection bounds (defaults to ProjectionConfig())
        today: Reference day (defaults to date.today())

    Returns:
        Overdue occurrences followed by today's, if pending
    """
    config = config or ProjectionConfig()
    today = _reference_day(today)

    start = template.next_due_date or template.recurrence.anchor_date or today
    if start > today:
        return []

    days_until_today = (today - start).days + 1
    scan_days = min(config.backlog_scan_days, days_until_today)

    return project_occurrences(
        template.recurrence,
        policy,
        template.history,
        start,
        config.backlog_count,
        scan_days,
        today=today,
    )


def summarize_status(occurrences: Iterable[Occurrence]) -> StatusSummary:
    """
    Overall status badge for a checklist's pending occurrences.

    Args:
        occurrences: Pending occurrences (typically from pending_backlog)

    Returns:
        ALL DONE when nothing is pending, "<n> Over due" when anything is
        past, DUE TODAY when today's occurrence is pending, else UPCOMING
    """
    pending = list(occurrences)
    if not pending:
        return StatusSummary(label=constants.STATUS_ALL_DONE, is_done=True)

    overdue = sum(1 for o in pending if o.is_past)
    due_today = any(o.is_today for o in pending)

    if overdue:
        return StatusSummary(
            label=constants.STATUS_OVERDUE_TEMPLATE.format(count=overdue),
            is_done=False,
            overdue_count=overdue,
            due_today=due_today,
        )
    if due_today:
        return StatusSummary(label=constants.STATUS_DUE_TODAY, is_done=False, due_today=True)
    return StatusSummary(label=constants.STATUS_UPCOMING, is_done=False)
