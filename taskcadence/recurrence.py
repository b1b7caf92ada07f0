"""Frequency rules deciding which calendar days a checklist occurs on."""

import logging
from datetime import date, datetime
from typing import Any

from dateutil.rrule import DAILY, MONTHLY, WEEKLY, rrule

from .schema import (
    AnchoredRecurrence,
    DailyRecurrence,
    MonthlyRecurrence,
    WeeklyRecurrence,
)
from .types import js_weekday
from .utils import to_day

logger = logging.getLogger(__name__)


def _months_between(start: date, end: date) -> int:
    """Whole calendar months from start's month to end's month."""
    return (end.year - start.year) * 12 + (end.month - start.month)


def _weekly_days(config: WeeklyRecurrence) -> frozenset[int]:
    """Selected weekdays, falling back to the anchor's weekday."""
    if config.days_of_week:
        return config.days_of_week
    if config.anchor_date is None:
        return frozenset()
    return frozenset({js_weekday(config.anchor_date)})


def _monthly_days(config: MonthlyRecurrence) -> frozenset[int]:
    """Selected days of month, falling back to the anchor's day."""
    if config.days_of_month:
        return config.days_of_month
    if config.anchor_date is None:
        return frozenset()
    return frozenset({config.anchor_date.day})


def is_authorized_occurrence(day: Any, config) -> bool:
    """
    Check whether the frequency rule authorizes a calendar day.

    Calendar policy (weekends, holidays) is not considered here.

    Args:
        day: Date or datetime (time component is ignored)
        config: Recurrence variant (Daily/Weekly/Monthly/Anchored)

    Returns:
        True if the day is an occurrence of the schedule
    """
    target = to_day(day)
    if target is None:
        return False

    if isinstance(config, DailyRecurrence):
        return True
    if isinstance(config, WeeklyRecurrence):
        return js_weekday(target) in _weekly_days(config)
    if isinstance(config, MonthlyRecurrence):
        # A selected day beyond this month's length simply never equals target.day
        return target.day in _monthly_days(config)
    if isinstance(config, AnchoredRecurrence):
        anchor = config.anchor_date
        if anchor is None or target.day != anchor.day:
            return False
        months = _months_between(anchor, target)
        return months >= 0 and months % config.period_months == 0

    logger.error("Unknown recurrence type: %s", type(config).__name__)
    return False


class RecurrenceEngine:
    """Engine for generating authorized dates from recurrence configs."""

    def generate(self, config, start_date: date, end_date: date) -> list[date]:
        """
        Generate authorized dates for a recurrence within a date range.

        Args:
            config: Recurrence variant
            start_date: Start of date range (inclusive)
            end_date: End of date range (inclusive)

        Returns:
            Sorted list of authorized dates within range
        """
        if start_date > end_date:
            return []

        if isinstance(config, DailyRecurrence):
            return self._expand(rrule(DAILY, **self._bounds(start_date, end_date)))
        if isinstance(config, WeeklyRecurrence):
            return self._generate_weekly(config, start_date, end_date)
        if isinstance(config, MonthlyRecurrence):
            return self._generate_monthly(config, start_date, end_date)
        if isinstance(config, AnchoredRecurrence):
            return self._generate_anchored(config, start_date, end_date)

        logger.error("Unknown recurrence type: %s", type(config).__name__)
        return []

    @staticmethod
    def _bounds(start_date: date, end_date: date) -> dict[str, datetime]:
        return {
            "dtstart": datetime.combine(start_date, datetime.min.time()),
            "until": datetime.combine(end_date, datetime.max.time()),
        }

    @staticmethod
    def _expand(rule: rrule) -> list[date]:
        return [d.date() for d in rule]

    def _generate_weekly(
        self,
        config: WeeklyRecurrence,
        start_date: date,
        end_date: date,
    ) -> list[date]:
        """Generate weekly dates on the selected weekdays."""
        days = _weekly_days(config)
        if not days:
            logger.debug("Weekly recurrence has no weekday and no anchor")
            return []

        # dateutil weekdays: 0=Monday; ours: 0=Sunday
        byweekday = sorted((day - 1) % 7 for day in days)
        return self._expand(
            rrule(WEEKLY, byweekday=byweekday, **self._bounds(start_date, end_date))
        )

    def _generate_monthly(
        self,
        config: MonthlyRecurrence,
        start_date: date,
        end_date: date,
    ) -> list[date]:
        """Generate monthly dates; rrule skips days missing from a month."""
        days = _monthly_days(config)
        if not days:
            logger.debug("Monthly recurrence has no day and no anchor")
            return []

        return self._expand(
            rrule(MONTHLY, bymonthday=sorted(days), **self._bounds(start_date, end_date))
        )

    def _generate_anchored(
        self,
        config: AnchoredRecurrence,
        start_date: date,
        end_date: date,
    ) -> list[date]:
        """
        Generate quarterly, half-yearly or yearly dates from the anchor.

        Periods whose target month lacks the anchor's day (e.g. a quarterly
        anchor on Jan 31 reaching April) are skipped, not clamped.
        """
        anchor = config.anchor_date
        if anchor is None:
            logger.debug("%s recurrence has no anchor date", config.frequency)
            return []

        rule = rrule(
            MONTHLY,
            interval=config.period_months,
            bymonthday=anchor.day,
            **self._bounds(anchor, end_date),
        )
        return [d for d in self._expand(rule) if d >= start_date]
