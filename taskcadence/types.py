"""Type definitions and enums for taskcadence."""

from datetime import date
from enum import Enum


class FrequencyType(str, Enum):
    """Checklist recurrence frequencies (values match upstream labels)."""

    DAILY = "Daily"
    WEEKLY = "Weekly"
    MONTHLY = "Monthly"
    QUARTERLY = "Quarterly"
    HALF_YEARLY = "Half-Yearly"
    YEARLY = "Yearly"


# Frequencies that authorize exactly one occurrence per period
ANCHORED_FREQUENCIES = (
    FrequencyType.QUARTERLY,
    FrequencyType.HALF_YEARLY,
    FrequencyType.YEARLY,
)


class CompletionAction(str, Enum):
    """History log actions."""

    COMPLETED = "Completed"
    ADMINISTRATIVE_COMPLETION = "Administrative Completion"
    OTHER = "Other"

    @classmethod
    def _missing_(cls, value):
        # Unknown upstream actions (e.g. "Reassigned") are non-completions
        return cls.OTHER


COMPLETION_ACTIONS = frozenset(
    {CompletionAction.COMPLETED, CompletionAction.ADMINISTRATIVE_COMPLETION}
)


class OccurrenceStatus(str, Enum):
    """Display status of a pending occurrence."""

    OVERDUE = "OVERDUE"
    TODAY = "TODAY"
    UPCOMING = "UPCOMING"


class Direction(str, Enum):
    """Walk direction for the projector."""

    FORWARD = "FORWARD"
    BACKWARD = "BACKWARD"


class TimeFilter(str, Enum):
    """Time windows offered by the doer checklist view."""

    ALL = "All"
    TODAY = "Today"  # Backlog + today
    NEXT_7_DAYS = "Next 7 Days"
    PENDING_WORK = "Pending Work"  # Overdue only


# Day-of-week indexes follow the upstream convention: 0=Sunday ... 6=Saturday
WEEKDAY_NAMES = {
    0: "SUN",
    1: "MON",
    2: "TUE",
    3: "WED",
    4: "THU",
    5: "FRI",
    6: "SAT",
}


def js_weekday(d: date) -> int:
    """Return the weekday of ``d`` with 0=Sunday, 6=Saturday."""
    # Python weekday: 0=Monday, 6=Sunday
    return (d.weekday() + 1) % 7
