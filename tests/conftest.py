"""Pytest configuration and shared fixtures for taskcadence tests."""

from datetime import date

import pytest
import yaml

from taskcadence.schema import (
    AnchoredRecurrence,
    CalendarPolicy,
    ChecklistFile,
    ChecklistTemplate,
    CompletionEvent,
    DailyRecurrence,
    Holiday,
    MonthlyRecurrence,
    ProjectionConfig,
    WeeklyRecurrence,
)
from taskcadence.types import CompletionAction

# ============================================================================
# Recurrence Builders
# ============================================================================


def make_daily(anchor_date: date = date(2024, 1, 1)) -> DailyRecurrence:
    """Create a Daily recurrence."""
    return DailyRecurrence(anchor_date=anchor_date)


def make_weekly(
    days_of_week: set[int] = None,
    anchor_date: date = date(2024, 1, 1),
) -> WeeklyRecurrence:
    """Create a Weekly recurrence (0=Sunday ... 6=Saturday)."""
    return WeeklyRecurrence(anchor_date=anchor_date, days_of_week=days_of_week or set())


def make_monthly(
    days_of_month: set[int] = None,
    anchor_date: date = date(2024, 1, 1),
) -> MonthlyRecurrence:
    """Create a Monthly recurrence."""
    return MonthlyRecurrence(anchor_date=anchor_date, days_of_month=days_of_month or set())


def make_anchored(
    frequency: str = "Quarterly",
    anchor_date: date = date(2024, 1, 15),
) -> AnchoredRecurrence:
    """Create a Quarterly/Half-Yearly/Yearly recurrence."""
    return AnchoredRecurrence(frequency=frequency, anchor_date=anchor_date)


# ============================================================================
# Calendar and History Builders
# ============================================================================


def make_policy(
    weekend_days: set[int] = None,
    holidays: list[tuple[date, str]] = None,
    tenant_id: str = "tenant-1",
) -> CalendarPolicy:
    """Create a CalendarPolicy; no weekends or holidays by default."""
    return CalendarPolicy(
        tenant_id=tenant_id,
        weekend_days=weekend_days or set(),
        holidays=[Holiday(holiday_date=d, name=name) for d, name in (holidays or [])],
    )


def make_event(
    occurrence_date: date = None,
    action: CompletionAction = CompletionAction.COMPLETED,
    timestamp=None,
    **kwargs,
) -> CompletionEvent:
    """Create a history log entry."""
    return CompletionEvent(
        action=action,
        occurrence_date=occurrence_date,
        timestamp=timestamp,
        remarks=kwargs.get("remarks"),
        completed_by=kwargs.get("completed_by"),
    )


def make_template(
    id: str = "test-checklist",
    recurrence=None,
    history: list[CompletionEvent] = None,
    next_due_date: date = None,
    enabled: bool = True,
    name: str = "Test checklist",
) -> ChecklistTemplate:
    """Create a ChecklistTemplate with sensible defaults."""
    return ChecklistTemplate(
        id=id,
        name=name,
        enabled=enabled,
        recurrence=recurrence or make_daily(),
        history=history or [],
        next_due_date=next_due_date,
    )


# ============================================================================
# Pytest Fixtures
# ============================================================================


@pytest.fixture
def open_policy():
    """Fixture providing a calendar with no weekends or holidays."""
    return make_policy()


@pytest.fixture
def factory_policy():
    """Fixture providing a Sat/Sun weekend calendar with one holiday."""
    return make_policy(
        weekend_days={0, 6},
        holidays=[(date(2024, 3, 25), "Holi")],
    )


@pytest.fixture
def projection_config():
    """Fixture providing default ProjectionConfig."""
    return ProjectionConfig()


@pytest.fixture
def sample_checklist_dict():
    """Fixture providing a sample checklist as a dictionary."""
    return {
        "id": "floor-sweep",
        "name": "Sweep shop floor",
        "enabled": True,
        "doer": "emp-7",
        "recurrence": {
            "frequency": "Weekly",
            "anchor_date": "2024-03-04",
            "days_of_week": [1, 3],
        },
        "next_due_date": "2024-03-04",
        "history": [
            {
                "action": "Completed",
                "occurrence_date": "2024-03-04",
                "timestamp": "2024-03-04T17:05:00",
            },
        ],
    }


@pytest.fixture
def checklists_yaml_file(tmp_path, sample_checklist_dict):
    """Fixture providing a single-file checklists.yaml."""
    data = {
        "version": "1.0",
        "calendar": {
            "tenant_id": "tenant-1",
            "weekend_days": [0, 6],
            "holidays": [{"date": "2024-03-25", "name": "Holi"}],
        },
        "config": {"lookahead_days": 30, "upcoming_count": 3},
        "checklists": [
            sample_checklist_dict,
            {
                "id": "boiler-inspection",
                "name": "Boiler inspection",
                "recurrence": {"frequency": "Quarterly", "anchor_date": "2024-01-15"},
            },
            {
                "id": "old-audit",
                "name": "Retired audit",
                "enabled": False,
                "recurrence": {"frequency": "Daily", "anchor_date": "2024-01-01"},
            },
        ],
    }
    path = tmp_path / "checklists.yaml"
    with open(path, "w") as f:
        yaml.dump(data, f)
    return path


@pytest.fixture
def temp_checklist_dir(tmp_path):
    """Fixture providing a checklists directory with calendar and config files."""
    checklists_dir = tmp_path / "checklists"
    checklists_dir.mkdir()

    with open(checklists_dir / "_calendar.yaml", "w") as f:
        yaml.dump({"weekend_days": [0], "holidays": [{"date": "2024-03-25", "name": "Holi"}]}, f)

    with open(checklists_dir / "_config.yaml", "w") as f:
        yaml.dump({"lookahead_days": 14, "backlog_scan_days": 365}, f)

    return checklists_dir


def make_checklist_file(checklists: list[ChecklistTemplate] = None, **kwargs) -> ChecklistFile:
    """Create a ChecklistFile with checklists and defaults."""
    return ChecklistFile(
        checklists=checklists or [],
        calendar=kwargs.get("calendar", make_policy()),
        config=kwargs.get("config", ProjectionConfig()),
    )
