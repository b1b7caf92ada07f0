"""Click CLI commands for taskcadence."""

import json
import logging
import sys
import traceback
from datetime import date
from pathlib import Path
from typing import Optional

import click
import yaml

from taskcadence import __version__, constants
from taskcadence.filters import ALL_FREQUENCIES, filter_by_frequency, filter_occurrences
from taskcadence.loader import get_enabled_checklists, load_checklists_from_path
from taskcadence.projector import (
    pending_backlog,
    summarize_status,
    upcoming_occurrences,
)
from taskcadence.recurrence import RecurrenceEngine
from taskcadence.schema import ChecklistFile
from taskcadence.types import FrequencyType, TimeFilter

from .formatters import (
    occurrences_to_json,
    print_checklist_csv,
    print_checklist_table,
    print_occurrence_list,
    print_pending_json,
    print_pending_table,
)

logger = logging.getLogger(__name__)

DATE_FORMAT = ["%Y-%m-%d"]
FREQUENCY_TABS = [ALL_FREQUENCIES, *(f.value for f in FrequencyType)]


def complete_checklist_id(ctx, _, incomplete):
    """Complete checklist IDs from the checklists path.

    Falls back to the default 'checklists' path if --checklists-path has not
    been parsed yet. Used for shell tab completion on checklist_id arguments.
    """
    checklists_path = ctx.params.get("checklists_path") or constants.DEFAULT_CHECKLISTS_DIR

    try:
        checklist_file = load_checklists_from_path(Path(checklists_path))
        if checklist_file is None:
            return []

        checklist_ids = sorted(c.id for c in checklist_file.checklists)
        return [cid for cid in checklist_ids if cid.startswith(incomplete)]
    except (ValueError, OSError, yaml.YAMLError):
        return []


def _load_or_exit(path: Path) -> ChecklistFile:
    checklist_file = load_checklists_from_path(path)
    if checklist_file is None:
        click.echo(f"Error: Path is neither a file nor a directory: {path}", err=True)
        sys.exit(1)
    return checklist_file


def _fail(e: Exception) -> None:
    click.echo(f"Error: {e}", err=True)
    if logger.isEnabledFor(logging.DEBUG):
        traceback.print_exc()
    sys.exit(1)


def _resolve_today(today) -> date:
    return today.date() if today is not None else date.today()


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.version_option(version=__version__)
def main(verbose: bool):
    """Taskcadence - Recurring checklist instance projection."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")


@main.command()
@click.argument("path", type=click.Path(exists=True))
def validate(path: str):
    """Validate checklist files for syntax and schema compliance.

    PATH can be either a checklists.yaml file or a checklists/ directory.

    Examples:
        taskcadence validate checklists.yaml
        taskcadence validate checklists/
    """
    path_obj = Path(path)

    click.echo(f"Validating checklists from: {path_obj}")

    try:
        checklist_file = _load_or_exit(path_obj)

        num_checklists = len(checklist_file.checklists)
        num_enabled = sum(1 for c in checklist_file.checklists if c.enabled)

        click.echo("✓ Validation successful!")
        click.echo(f"  Total checklists: {num_checklists}")
        click.echo(f"  Enabled: {num_enabled}")
        click.echo(f"  Disabled: {num_checklists - num_enabled}")
        click.echo(f"  Holidays: {len(checklist_file.calendar.holidays)}")

        # Single-file mode does not de-duplicate
        checklist_ids = [c.id for c in checklist_file.checklists]
        duplicates = {cid for cid in checklist_ids if checklist_ids.count(cid) > 1}
        if duplicates:
            click.echo(f"\n⚠ Warning: Duplicate checklist IDs found: {duplicates}", err=True)
            sys.exit(1)

        click.echo("\nAll checklists are valid!")

    # pydantic.ValidationError is a ValueError
    except (yaml.YAMLError, ValueError, OSError) as e:
        click.echo(f"✗ Validation failed: {e}", err=True)
        if logger.isEnabledFor(logging.DEBUG):
            traceback.print_exc()
        sys.exit(1)


@main.command(name="list")
@click.argument("path", type=click.Path(exists=True))
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["table", "json", "csv"]),
    default="table",
    help="Output format (default: table)",
)
@click.option(
    "--frequency",
    type=click.Choice(FREQUENCY_TABS),
    default=ALL_FREQUENCIES,
    help="Show only one frequency tab (default: All)",
)
@click.option("--enabled-only", is_flag=True, help="Show only enabled checklists")
def list_checklists(path: str, output_format: str, frequency: str, enabled_only: bool):
    """List all checklists with details.

    PATH can be either a checklists.yaml file or a checklists/ directory.

    Examples:
        taskcadence list checklists/
        taskcadence list checklists/ --frequency Weekly
        taskcadence list checklists/ --format json
    """
    try:
        checklist_file = _load_or_exit(Path(path))

        checklists = filter_by_frequency(checklist_file.checklists, frequency)
        if enabled_only:
            checklists = [c for c in checklists if c.enabled]

        if not checklists:
            click.echo("No checklists found")
            return

        if output_format == "table":
            print_checklist_table(checklists)
        elif output_format == "json":
            data = [c.model_dump(mode="json") for c in checklists]
            click.echo(json.dumps(data, indent=2))
        elif output_format == "csv":
            print_checklist_csv(checklists)

    except (yaml.YAMLError, ValueError, OSError) as e:
        _fail(e)


@main.command()
@click.argument("checklist_id", shell_complete=complete_checklist_id)
@click.argument("start_date", type=click.DateTime(formats=DATE_FORMAT))
@click.argument("end_date", type=click.DateTime(formats=DATE_FORMAT))
@click.option(
    "--checklists-path",
    type=click.Path(exists=True),
    default=constants.DEFAULT_CHECKLISTS_DIR,
    help="Path to checklists file or directory (default: checklists)",
)
def generate(checklist_id: str, start_date, end_date, checklists_path: str):
    """Generate dates authorized by a checklist's frequency rule.

    Weekends, holidays and completions are not applied; use `upcoming`
    or `pending` for due dates.

    Examples:
        taskcadence generate boiler-inspection 2024-01-01 2024-12-31
    """
    start = start_date.date()
    end = end_date.date()

    if start > end:
        click.echo("Error: Start date must be before or equal to end date", err=True)
        sys.exit(1)

    try:
        checklist_file = _load_or_exit(Path(checklists_path))

        checklist = next((c for c in checklist_file.checklists if c.id == checklist_id), None)
        if checklist is None:
            click.echo(f"Error: Checklist '{checklist_id}' not found", err=True)
            sys.exit(1)

        dates = RecurrenceEngine().generate(checklist.recurrence, start, end)

        click.echo(f"Checklist: {checklist.id}")
        click.echo(f"Frequency: {checklist.recurrence.frequency}")
        click.echo(f"Period: {start} to {end}")
        click.echo(f"\nAuthorized dates ({len(dates)}):")
        for d in dates:
            click.echo(f"  {d}")

    except (yaml.YAMLError, ValueError, OSError) as e:
        _fail(e)


@main.command()
@click.argument("checklist_id", shell_complete=complete_checklist_id)
@click.option(
    "--checklists-path",
    type=click.Path(exists=True),
    default=constants.DEFAULT_CHECKLISTS_DIR,
    help="Path to checklists file or directory (default: checklists)",
)
@click.option(
    "--today",
    type=click.DateTime(formats=DATE_FORMAT),
    default=None,
    help="Reference day (default: system date)",
)
@click.option(
    "--from",
    "start",
    type=click.DateTime(formats=DATE_FORMAT),
    default=None,
    help="First day examined (default: today)",
)
@click.option("--count", type=int, default=None, help="Occurrences to show")
@click.option("--days", type=int, default=None, help="Calendar days to scan")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format (default: text)",
)
def upcoming(
    checklist_id: str,
    checklists_path: str,
    today,
    start,
    count: Optional[int],
    days: Optional[int],
    output_format: str,
):
    """Show the next pending occurrences of a checklist.

    Applies the tenant calendar and skips occurrences already completed.

    Examples:
        taskcadence upcoming daily-floor-sweep --count 5
        taskcadence upcoming boiler-inspection --days 400 --format json
    """
    ref_day = _resolve_today(today)
    start_day = start.date() if start is not None else ref_day

    try:
        checklist_file = _load_or_exit(Path(checklists_path))

        checklist = next((c for c in checklist_file.checklists if c.id == checklist_id), None)
        if checklist is None:
            click.echo(f"Error: Checklist '{checklist_id}' not found", err=True)
            sys.exit(1)

        occurrences = upcoming_occurrences(
            checklist,
            checklist_file.calendar,
            checklist_file.config,
            today=ref_day,
            start=start_day,
            count=count,
            days=days,
        )

        if output_format == "json":
            click.echo(json.dumps(occurrences_to_json(occurrences), indent=2))
            return

        click.echo(f"Checklist: {checklist.id}")
        click.echo(f"Frequency: {checklist.recurrence.frequency}")
        if not occurrences:
            click.echo("\nNo pending occurrences in the scanned window")
            return
        click.echo(f"\nPending occurrences ({len(occurrences)}):")
        print_occurrence_list(occurrences)

    except (yaml.YAMLError, ValueError, OSError) as e:
        _fail(e)


@main.command()
@click.argument("path", type=click.Path(exists=True))
@click.option(
    "--today",
    type=click.DateTime(formats=DATE_FORMAT),
    default=None,
    help="Reference day (default: system date)",
)
@click.option(
    "--filter",
    "time_filter",
    type=click.Choice([f.value for f in TimeFilter]),
    default=TimeFilter.ALL.value,
    help="Time window applied to the backlog (default: All)",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["table", "json"]),
    default="table",
    help="Output format (default: table)",
)
def pending(path: str, today, time_filter: str, output_format: str):
    """Show the backlog of every enabled checklist.

    Walks each checklist from its next due date up to today and lists the
    occurrences that are still not done, with an overall status.

    Examples:
        taskcadence pending checklists/
        taskcadence pending checklists/ --filter "Pending Work" --format json
    """
    ref_day = _resolve_today(today)

    try:
        checklist_file = _load_or_exit(Path(path))

        rows = []
        for checklist in get_enabled_checklists(checklist_file):
            backlog = pending_backlog(
                checklist, checklist_file.calendar, checklist_file.config, today=ref_day
            )
            # Status reflects the whole backlog, the filter only narrows the listing
            summary = summarize_status(backlog)
            rows.append((checklist, filter_occurrences(backlog, time_filter, ref_day), summary))

        if not rows:
            if output_format == "json":
                click.echo("[]")
            else:
                click.echo("No enabled checklists found")
            return

        if output_format == "json":
            print_pending_json(rows)
        else:
            print_pending_table(rows)

    except (yaml.YAMLError, ValueError, OSError) as e:
        _fail(e)
