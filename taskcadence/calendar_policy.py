"""Working-day resolution against a tenant calendar."""

import logging
from typing import Any, Optional

from .schema import CalendarPolicy, Holiday
from .types import js_weekday
from .utils import to_day

logger = logging.getLogger(__name__)


def holiday_for(day: Any, policy: CalendarPolicy) -> Optional[Holiday]:
    """
    Find the holiday falling on a calendar day.

    Args:
        day: Date or datetime (time component is ignored)
        policy: Tenant calendar

    Returns:
        The first matching Holiday, or None
    """
    target = to_day(day)
    if target is None:
        return None

    for holiday in policy.holidays:
        # Holidays with unreadable dates carry None and never match
        if holiday.holiday_date == target:
            return holiday
    return None


def is_working_day(day: Any, policy: CalendarPolicy) -> bool:
    """
    Check whether a calendar day is a working day for the tenant.

    A day is non-working if its weekday is one of the policy's weekend
    days or if it coincides with a holiday. Comparison is by calendar day,
    never by instant.

    Args:
        day: Date or datetime (time component is ignored)
        policy: Tenant calendar

    Returns:
        False for weekends, holidays and unreadable dates, True otherwise
    """
    target = to_day(day)
    if target is None:
        logger.debug("Unreadable date treated as non-working: %r", day)
        return False

    if js_weekday(target) in policy.weekend_days:
        return False

    return holiday_for(target, policy) is None
