"""Output formatting functions for CLI commands."""

import csv
import json
import sys

import click

from taskcadence import constants
from taskcadence.types import WEEKDAY_NAMES


def describe_recurrence(recurrence) -> str:
    """Short human description of a recurrence variant."""
    days_of_week = getattr(recurrence, "days_of_week", None)
    days_of_month = getattr(recurrence, "days_of_month", None)

    if days_of_week:
        return ",".join(WEEKDAY_NAMES[d] for d in sorted(days_of_week))
    if days_of_month:
        return ",".join(str(d) for d in sorted(days_of_month))
    if recurrence.anchor_date is not None and recurrence.frequency != "Daily":
        return f"from {recurrence.anchor_date}"
    return ""


def print_checklist_table(checklists: list) -> None:
    """
    Print checklists as a formatted ASCII table.

    Displays checklist ID, enabled/disabled status, frequency, the day
    selection, and the task name. Column widths are auto-calculated.

    Args:
        checklists: List of ChecklistTemplate objects to display.
    """
    id_width = max(len("ID"), *(len(c.id) for c in checklists))

    name_width = max(len("Name"), *(len(c.name) for c in checklists))
    name_width = min(name_width, constants.MAX_TABLE_COLUMN_WIDTH)

    click.echo(
        f"{'ID':<{id_width}}  {'Status':<10}  {'Frequency':<12}  {'Days':<16}  "
        f"{'Name':<{name_width}}"
    )
    click.echo("-" * (id_width + 10 + 12 + 16 + name_width + 8))

    for c in checklists:
        status = "✓ enabled" if c.enabled else "  disabled"
        days = describe_recurrence(c.recurrence)[:16]
        name = c.name[:name_width]
        click.echo(
            f"{c.id:<{id_width}}  {status:<10}  {c.recurrence.frequency:<12}  {days:<16}  "
            f"{name:<{name_width}}"
        )

    click.echo(f"\nTotal: {len(checklists)} checklists")


def print_checklist_csv(checklists: list) -> None:
    """
    Print checklists as comma-separated values (CSV) to stdout.

    Args:
        checklists: List of ChecklistTemplate objects to export.
    """
    writer = csv.writer(sys.stdout)
    writer.writerow(["ID", "Enabled", "Frequency", "Days", "Name", "Doer"])

    for c in checklists:
        writer.writerow(
            [
                c.id,
                c.enabled,
                c.recurrence.frequency,
                describe_recurrence(c.recurrence),
                c.name,
                c.doer or "",
            ]
        )


def print_occurrence_list(occurrences: list) -> None:
    """Print occurrences one per line with their status."""
    for occurrence in occurrences:
        click.echo(f"  {occurrence.date}  {occurrence.status.value}")


def occurrences_to_json(occurrences: list) -> list[dict]:
    """Serialize occurrences for JSON output."""
    return [
        {
            "date": o.date.isoformat(),
            "is_past": o.is_past,
            "is_today": o.is_today,
            "status": o.status.value,
        }
        for o in occurrences
    ]


def print_pending_table(rows: list) -> None:
    """
    Print per-checklist backlog as a table.

    Args:
        rows: List of (ChecklistTemplate, list[Occurrence], StatusSummary) tuples.
    """
    id_width = max(len("ID"), *(len(checklist.id) for checklist, _, _ in rows))

    click.echo(f"{'ID':<{id_width}}  {'Frequency':<12}  {'Status':<14}  Pending")
    click.echo("-" * (id_width + 12 + 14 + 6 + 7))

    for checklist, occurrences, summary in rows:
        pending = ", ".join(o.date.isoformat() for o in occurrences[:3])
        if len(occurrences) > 3:
            pending += f" (+{len(occurrences) - 3})"
        click.echo(
            f"{checklist.id:<{id_width}}  {checklist.recurrence.frequency:<12}  "
            f"{summary.label:<14}  {pending}"
        )


def print_pending_json(rows: list) -> None:
    """Print per-checklist backlog as JSON."""
    payload = [
        {
            "id": checklist.id,
            "name": checklist.name,
            "frequency": checklist.recurrence.frequency,
            "status": summary.label,
            "is_done": summary.is_done,
            "pending": occurrences_to_json(occurrences),
        }
        for checklist, occurrences, summary in rows
    ]
    click.echo(json.dumps(payload, indent=2))
