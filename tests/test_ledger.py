"""Tests for completion ledger lookups."""

from datetime import date, datetime, timezone

from taskcadence.ledger import (
    is_resolved,
    last_completed,
    monthly_completion_count,
    resolved_dates,
)
from taskcadence.schema import CompletionEvent
from taskcadence.types import CompletionAction
from tests.conftest import make_event


class TestIsResolved:
    """Tests for per-day resolution."""

    def test_completed_event_resolves_day(self):
        """A Completed event on the same day resolves it."""
        history = [make_event(date(2024, 3, 1))]
        assert is_resolved(date(2024, 3, 1), history)
        assert not is_resolved(date(2024, 3, 2), history)

    def test_administrative_completion_counts(self):
        """Administrative Completion also resolves the day."""
        history = [make_event(date(2024, 3, 1), CompletionAction.ADMINISTRATIVE_COMPLETION)]
        assert is_resolved(date(2024, 3, 1), history)

    def test_other_actions_ignored(self):
        """Non-completion actions never resolve a day."""
        history = [make_event(date(2024, 3, 1), CompletionAction.OTHER)]
        assert not is_resolved(date(2024, 3, 1), history)

    def test_unknown_upstream_action_is_other(self):
        """Unrecognised upstream actions map to OTHER."""
        event = CompletionEvent.model_validate(
            {"action": "Reassigned", "instanceDate": "2024-03-01"}
        )
        assert event.action == CompletionAction.OTHER
        assert not is_resolved(date(2024, 3, 1), [event])

    def test_falls_back_to_timestamp(self):
        """Without an occurrence date, the timestamp's day is used."""
        history = [make_event(timestamp=datetime(2024, 3, 1, 18, 30))]
        assert is_resolved(date(2024, 3, 1), history)

    def test_occurrence_date_wins_over_timestamp(self):
        """Backlog catch-up logged later resolves the original day."""
        history = [make_event(date(2024, 3, 1), timestamp=datetime(2024, 3, 4, 9, 0))]
        assert is_resolved(date(2024, 3, 1), history)
        assert not is_resolved(date(2024, 3, 4), history)

    def test_datetime_target_is_truncated(self):
        """Comparison is by calendar day, not instant."""
        history = [make_event(date(2024, 3, 1))]
        assert is_resolved(datetime(2024, 3, 1, 23, 0), history)

    def test_upstream_iso_timestamp(self):
        """Upstream instanceDate strings with a Z suffix are truncated."""
        event = CompletionEvent.model_validate(
            {"action": "Completed", "instanceDate": "2024-03-01T00:00:00.000Z"}
        )
        assert is_resolved(date(2024, 3, 1), [event])

    def test_malformed_dates_never_resolve(self):
        """Unreadable dates are kept as None and match nothing."""
        event = CompletionEvent.model_validate(
            {"action": "Completed", "instanceDate": "yesterday-ish", "timestamp": "??"}
        )
        assert event.effective_date is None
        assert not is_resolved(date(2024, 3, 1), [event])

    def test_unreadable_occurrence_date_ignores_timestamp(self):
        """A logged but unreadable occurrence date does not fall back to the timestamp."""
        event = CompletionEvent.model_validate(
            {"action": "Completed", "instanceDate": "garbage", "timestamp": "2024-03-05T10:00:00Z"}
        )
        assert event.effective_date is None
        assert not is_resolved(date(2024, 3, 5), [event])
        assert resolved_dates([event]) == set()

    def test_empty_occurrence_date_uses_timestamp(self):
        """An empty occurrence date counts as not logged."""
        event = CompletionEvent.model_validate(
            {"action": "Completed", "instanceDate": "", "timestamp": "2024-03-05T10:00:00Z"}
        )
        assert is_resolved(date(2024, 3, 5), [event])

    def test_empty_history(self):
        """Nothing is resolved without history."""
        assert not is_resolved(date(2024, 3, 1), [])


class TestResolvedDates:
    """Tests for bulk resolution."""

    def test_matches_is_resolved(self):
        """resolved_dates holds exactly the days is_resolved accepts."""
        history = [
            make_event(date(2024, 3, 1)),
            make_event(date(2024, 3, 2), CompletionAction.OTHER),
            make_event(timestamp=datetime(2024, 3, 3, 8, 0)),
            make_event(date(2024, 3, 1)),
        ]
        assert resolved_dates(history) == {date(2024, 3, 1), date(2024, 3, 3)}


class TestMonthlyStats:
    """Tests for monthly completion counts."""

    def test_counts_by_timestamp_month(self):
        """Counts completions logged in the month, by timestamp."""
        history = [
            make_event(date(2024, 2, 28), timestamp=datetime(2024, 3, 1, 9, 0)),
            make_event(date(2024, 3, 5), timestamp=datetime(2024, 3, 5, 9, 0)),
            make_event(date(2024, 3, 6), CompletionAction.OTHER, datetime(2024, 3, 6, 9, 0)),
            make_event(date(2024, 4, 1), timestamp=datetime(2024, 4, 1, 9, 0)),
            make_event(date(2024, 3, 7)),
        ]
        assert monthly_completion_count(history, 2024, 3) == 2
        assert monthly_completion_count(history, 2024, 4) == 1
        assert monthly_completion_count(history, 2023, 3) == 0


class TestLastCompleted:
    """Tests for the last completion timestamp."""

    def test_latest_completion(self):
        """Returns the newest completion, ignoring other actions."""
        history = [
            make_event(timestamp=datetime(2024, 3, 1, 9, 0)),
            make_event(timestamp=datetime(2024, 3, 5, 9, 0)),
            make_event(action=CompletionAction.OTHER, timestamp=datetime(2024, 3, 9, 9, 0)),
        ]
        assert last_completed(history) == datetime(2024, 3, 5, 9, 0)

    def test_mixed_naive_and_aware(self):
        """Naive and timezone-aware timestamps can be compared."""
        aware = datetime(2024, 3, 6, 9, 0, tzinfo=timezone.utc)
        history = [make_event(timestamp=datetime(2024, 3, 5, 9, 0)), make_event(timestamp=aware)]
        assert last_completed(history) == aware

    def test_never_completed(self):
        """No completions gives None."""
        assert last_completed([]) is None
