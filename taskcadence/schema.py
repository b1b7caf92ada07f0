"""Pydantic schema models for checklist and calendar validation."""

from datetime import date, datetime
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    field_validator,
    model_validator,
)

from . import constants
from .types import COMPLETION_ACTIONS, CompletionAction, OccurrenceStatus
from .utils import slugify, to_datetime, to_day

ANCHOR_ALIASES = AliasChoices("anchor_date", "start_date", "startDate")
OCCURRENCE_DATE_KEYS = ("occurrence_date", "instance_date", "instanceDate")


def _lenient_day(v: Any) -> Optional[date]:
    """Coerce a raw value to a calendar day, None when malformed."""
    return to_day(v)


def _collect_days(
    data: dict[str, Any],
    plural_keys: tuple[str, ...],
    scalar_keys: tuple[str, ...],
) -> Optional[list[Any]]:
    """Gather day selections from plural, scalar and ``frequencyConfig`` keys."""
    sources = [data]
    if isinstance(data.get("frequencyConfig"), dict):
        sources.append(data["frequencyConfig"])

    for source in sources:
        for key in plural_keys:
            if source.get(key) is not None:
                return list(source[key])
        for key in scalar_keys:
            if source.get(key) is not None:
                return [source[key]]
    return None


# ============================================================================
# Recurrence variants
# ============================================================================


class _RecurrenceBase(BaseModel):
    """Fields shared by every recurrence variant."""

    model_config = ConfigDict(frozen=True)

    anchor_date: Optional[date] = Field(
        None,
        validation_alias=ANCHOR_ALIASES,
        description="Date the schedule is defined relative to",
    )

    @field_validator("anchor_date", mode="before")
    @classmethod
    def parse_anchor_date(cls, v: Any) -> Optional[date]:
        """Treat an unparseable anchor as missing rather than failing."""
        return _lenient_day(v)


class DailyRecurrence(_RecurrenceBase):
    """Every calendar day (subject to the calendar policy)."""

    frequency: Literal["Daily"] = "Daily"


class WeeklyRecurrence(_RecurrenceBase):
    """Selected weekdays, 0=Sunday ... 6=Saturday."""

    frequency: Literal["Weekly"] = "Weekly"
    days_of_week: frozenset[int] = Field(
        default_factory=frozenset,
        description="Weekdays (0-6); empty falls back to the anchor's weekday",
    )

    @model_validator(mode="before")
    @classmethod
    def gather_days_of_week(cls, data: Any) -> Any:
        """Accept scalar and upstream ``frequencyConfig`` day selections."""
        if isinstance(data, dict):
            days = _collect_days(
                data,
                ("days_of_week", "daysOfWeek"),
                ("day_of_week", "dayOfWeek"),
            )
            data = {k: v for k, v in data.items() if k != "frequencyConfig"}
            data["days_of_week"] = days or []
        return data

    @field_validator("days_of_week")
    @classmethod
    def validate_days_of_week(cls, v: frozenset[int]) -> frozenset[int]:
        """Ensure days_of_week are in valid range."""
        for day in v:
            if day < constants.MIN_DAY_OF_WEEK or day > constants.MAX_DAY_OF_WEEK:
                msg = (
                    f"days_of_week must be between {constants.MIN_DAY_OF_WEEK} "
                    f"and {constants.MAX_DAY_OF_WEEK}"
                )
                raise ValueError(msg)
        return v


class MonthlyRecurrence(_RecurrenceBase):
    """Selected days of the month; days past a month's end are skipped."""

    frequency: Literal["Monthly"] = "Monthly"
    days_of_month: frozenset[int] = Field(
        default_factory=frozenset,
        description="Days of month (1-31); empty falls back to the anchor's day",
    )

    @model_validator(mode="before")
    @classmethod
    def gather_days_of_month(cls, data: Any) -> Any:
        """Accept scalar and upstream ``frequencyConfig`` day selections."""
        if isinstance(data, dict):
            days = _collect_days(
                data,
                ("days_of_month", "daysOfMonth"),
                ("day_of_month", "dayOfMonth"),
            )
            data = {k: v for k, v in data.items() if k != "frequencyConfig"}
            data["days_of_month"] = days or []
        return data

    @field_validator("days_of_month")
    @classmethod
    def validate_days_of_month(cls, v: frozenset[int]) -> frozenset[int]:
        """Ensure days_of_month are in valid range."""
        for day in v:
            if day < constants.MIN_DAY_OF_MONTH or day > constants.MAX_DAY_OF_MONTH:
                msg = (
                    f"days_of_month must be between {constants.MIN_DAY_OF_MONTH} "
                    f"and {constants.MAX_DAY_OF_MONTH}"
                )
                raise ValueError(msg)
        return v


PERIOD_MONTHS = {
    "Quarterly": constants.QUARTERLY_MONTHS,
    "Half-Yearly": constants.HALF_YEARLY_MONTHS,
    "Yearly": constants.YEARLY_MONTHS,
}


class AnchoredRecurrence(_RecurrenceBase):
    """One occurrence per period, on the anchor's month/day cadence."""

    frequency: Literal["Quarterly", "Half-Yearly", "Yearly"]

    @property
    def period_months(self) -> int:
        """Months between consecutive occurrences."""
        return PERIOD_MONTHS[self.frequency]


RecurrenceConfig = Annotated[
    Union[DailyRecurrence, WeeklyRecurrence, MonthlyRecurrence, AnchoredRecurrence],
    Field(discriminator="frequency"),
]

_recurrence_adapter = TypeAdapter(RecurrenceConfig)


def parse_recurrence(data: Any) -> Union[
    DailyRecurrence, WeeklyRecurrence, MonthlyRecurrence, AnchoredRecurrence
]:
    """
    Build the recurrence variant matching ``data["frequency"]``.

    Args:
        data: Mapping with a ``frequency`` key and variant-specific fields

    Returns:
        The validated recurrence variant

    Raises:
        pydantic.ValidationError: If the frequency is unknown or fields are invalid
    """
    return _recurrence_adapter.validate_python(data)


# ============================================================================
# Calendar policy
# ============================================================================


class Holiday(BaseModel):
    """Tenant holiday; a holiday with an unreadable date never matches."""

    model_config = ConfigDict(frozen=True)

    holiday_date: Optional[date] = Field(
        None,
        validation_alias=AliasChoices("holiday_date", "date"),
        description="Non-working calendar day",
    )
    name: str = Field("", description="Holiday label")

    @field_validator("holiday_date", mode="before")
    @classmethod
    def parse_holiday_date(cls, v: Any) -> Optional[date]:
        """Treat malformed holiday dates as non-matching."""
        return _lenient_day(v)

    @field_validator("name", mode="before")
    @classmethod
    def default_name(cls, v: Any) -> str:
        """Allow a null label."""
        return "" if v is None else str(v)


class CalendarPolicy(BaseModel):
    """Tenant-scoped working calendar."""

    model_config = ConfigDict(frozen=True)

    tenant_id: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("tenant_id", "tenantId"),
        description="Tenant this calendar belongs to",
    )
    weekend_days: frozenset[int] = Field(
        default_factory=frozenset,
        validation_alias=AliasChoices("weekend_days", "weekendDays"),
        description="Non-working weekdays (0=Sunday ... 6=Saturday)",
    )
    holidays: tuple[Holiday, ...] = Field(default_factory=tuple, description="Holidays")

    @field_validator("weekend_days")
    @classmethod
    def validate_weekend_days(cls, v: frozenset[int]) -> frozenset[int]:
        """Ensure weekend_days are in valid range."""
        for day in v:
            if day < constants.MIN_DAY_OF_WEEK or day > constants.MAX_DAY_OF_WEEK:
                msg = (
                    f"weekend_days must be between {constants.MIN_DAY_OF_WEEK} "
                    f"and {constants.MAX_DAY_OF_WEEK}"
                )
                raise ValueError(msg)
        return v

    @field_validator("holidays", mode="before")
    @classmethod
    def default_holidays(cls, v: Any) -> Any:
        """Allow a null holiday list."""
        return () if v is None else v


# ============================================================================
# Completion history
# ============================================================================


class CompletionEvent(BaseModel):
    """One entry of a checklist's history log."""

    model_config = ConfigDict(frozen=True)

    action: CompletionAction = Field(CompletionAction.OTHER, description="Logged action")
    occurrence_date: Optional[date] = Field(
        None,
        validation_alias=AliasChoices(*OCCURRENCE_DATE_KEYS),
        description="Calendar day the event closes out",
    )
    occurrence_date_unreadable: bool = Field(
        False,
        exclude=True,
        description="An occurrence date was logged but could not be read",
    )
    timestamp: Optional[datetime] = Field(None, description="When the event was logged")
    remarks: Optional[str] = Field(None, description="Free-text remarks")
    completed_by: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("completed_by", "completedBy"),
        description="User who logged the event",
    )

    @model_validator(mode="before")
    @classmethod
    def flag_unreadable_occurrence_date(cls, data: Any) -> Any:
        """Remember a logged but unreadable occurrence date.

        Only an absent or empty occurrence date falls back to the timestamp.
        """
        if not isinstance(data, dict):
            return data

        raw = next(
            (data[key] for key in OCCURRENCE_DATE_KEYS if data.get(key) not in (None, "")),
            None,
        )
        if raw is not None and to_day(raw) is None:
            data = {**data, "occurrence_date_unreadable": True}
        return data

    @field_validator("action", mode="before")
    @classmethod
    def parse_action(cls, v: Any) -> CompletionAction:
        """Map unknown actions to OTHER."""
        if v is None:
            return CompletionAction.OTHER
        return CompletionAction(v)

    @field_validator("occurrence_date", mode="before")
    @classmethod
    def parse_occurrence_date(cls, v: Any) -> Optional[date]:
        """Truncate timestamps and drop malformed values."""
        return _lenient_day(v)

    @field_validator("timestamp", mode="before")
    @classmethod
    def parse_timestamp(cls, v: Any) -> Optional[datetime]:
        """Drop malformed timestamps."""
        return to_datetime(v)

    @property
    def is_completion(self) -> bool:
        """Whether this event closes out an occurrence."""
        return self.action in COMPLETION_ACTIONS

    @property
    def effective_date(self) -> Optional[date]:
        """Occurrence day, falling back to the timestamp's day when none was logged."""
        if self.occurrence_date_unreadable:
            return None
        if self.occurrence_date is not None:
            return self.occurrence_date
        if self.timestamp is not None:
            return self.timestamp.date()
        return None


# ============================================================================
# Projection output
# ============================================================================


class Occurrence(BaseModel):
    """A pending due date produced by the projector."""

    model_config = ConfigDict(frozen=True)

    date: date
    is_past: bool = False
    is_today: bool = False

    @property
    def status(self) -> OccurrenceStatus:
        """Display status derived from the past/today flags."""
        if self.is_past:
            return OccurrenceStatus.OVERDUE
        if self.is_today:
            return OccurrenceStatus.TODAY
        return OccurrenceStatus.UPCOMING


class StatusSummary(BaseModel):
    """Overall status badge for one checklist."""

    label: str
    is_done: bool
    overdue_count: int = 0
    due_today: bool = False


# ============================================================================
# Checklist templates and files
# ============================================================================


class ChecklistTemplate(BaseModel):
    """Recurring checklist definition with its completion history."""

    id: str = Field(
        ...,
        validation_alias=AliasChoices("id", "_id"),
        description="Unique checklist identifier",
    )
    name: str = Field(
        "",
        validation_alias=AliasChoices("name", "taskName"),
        description="Task name shown to doers",
    )
    enabled: bool = Field(True, description="Whether checklist is active")
    doer: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("doer", "doerId"),
        description="Assigned doer",
    )
    recurrence: RecurrenceConfig = Field(..., description="Recurrence configuration")
    next_due_date: Optional[date] = Field(
        None,
        validation_alias=AliasChoices("next_due_date", "nextDueDate"),
        description="First occurrence not yet rolled over by the backend",
    )
    history: list[CompletionEvent] = Field(default_factory=list, description="History log")

    @model_validator(mode="before")
    @classmethod
    def lift_upstream_recurrence(cls, data: Any) -> Any:
        """Build ``recurrence`` from the upstream flat template layout.

        Upstream templates carry ``frequency``, ``startDate`` and
        ``frequencyConfig`` at the top level.
        """
        if not isinstance(data, dict):
            return data

        data = dict(data)
        if "recurrence" not in data and "frequency" in data:
            recurrence = {"frequency": data.pop("frequency")}
            for key in ("startDate", "start_date", "anchor_date", "frequencyConfig"):
                if key in data:
                    recurrence[key] = data.pop(key)
            data["recurrence"] = recurrence

        has_id = any(data.get(key) for key in ("id", "_id"))
        if not has_id:
            name = data.get("name") or data.get("taskName")
            if name:
                data["id"] = slugify(str(name))

        if data.get("history") is None:
            data["history"] = []
        return data

    @field_validator("id")
    @classmethod
    def validate_id(cls, v: str) -> str:
        """Ensure id is valid."""
        if not v or not v.strip():
            raise ValueError("id cannot be empty")
        return v

    @field_validator("next_due_date", mode="before")
    @classmethod
    def parse_next_due_date(cls, v: Any) -> Optional[date]:
        """Treat a malformed next due date as unset."""
        return _lenient_day(v)


class ProjectionConfig(BaseModel):
    """Scan bounds used by the convenience projections."""

    lookahead_days: int = Field(
        constants.DEFAULT_LOOKAHEAD_DAYS, description="Forward scan budget (days)"
    )
    backlog_scan_days: int = Field(
        constants.DEFAULT_BACKLOG_SCAN_DAYS, description="Backlog scan budget (days)"
    )
    upcoming_count: int = Field(
        constants.DEFAULT_UPCOMING_COUNT, description="Upcoming occurrences to show"
    )
    backlog_count: int = Field(
        constants.DEFAULT_BACKLOG_COUNT, description="Backlog occurrences to show"
    )

    @field_validator("lookahead_days", "backlog_scan_days", "upcoming_count", "backlog_count")
    @classmethod
    def validate_non_negative(cls, v: int) -> int:
        """Ensure bounds are non-negative."""
        if v < 0:
            raise ValueError("projection bounds must be non-negative")
        return v


class ChecklistFile(BaseModel):
    """Root checklist file structure."""

    version: str = Field(constants.CHECKLIST_FILE_VERSION, description="File format version")
    calendar: CalendarPolicy = Field(default_factory=CalendarPolicy, description="Calendar")
    config: ProjectionConfig = Field(default_factory=ProjectionConfig, description="Config")
    checklists: list[ChecklistTemplate] = Field(
        default_factory=list, description="List of checklists"
    )
