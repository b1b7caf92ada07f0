"""Taskcadence - Recurring checklist instance projection.

This package turns a recurring checklist template (frequency, configuration
and completion history) plus a tenant calendar (weekend days and holidays)
into the list of dates on which the task is still due.

Main export:
    project_occurrences: Pure projector returning pending occurrences
"""

from .projector import OccurrenceProjection, project_occurrences

__all__ = ["OccurrenceProjection", "project_occurrences"]
__version__ = "1.0.0"
