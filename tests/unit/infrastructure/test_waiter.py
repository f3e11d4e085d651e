"""Tests for the state-change waiter."""

import pytest

from awsprovider.infrastructure.error import NotFoundError
from awsprovider.infrastructure.resilience import (
    OperationCancelledError,
    StateChangeConf,
    UnexpectedStateError,
    WaiterTimeoutError,
    background,
    timed_out,
)


def sequence_refresh(outcomes):
    """Refresh function replaying ``outcomes``; exceptions are raised, states returned."""
    calls = []
    items = list(outcomes)

    def refresh():
        outcome = items[min(len(calls), len(items) - 1)]
        calls.append(outcome)
        if isinstance(outcome, Exception):
            raise outcome
        if outcome is None:
            return None, ""
        return {"state": outcome}, outcome

    refresh.calls = calls
    return refresh


@pytest.mark.unit
class TestStateChangeConf:
    """Test StateChangeConf configuration checks."""

    def test_overlapping_pending_and_target(self):
        with pytest.raises(ValueError, match="pending and target"):
            StateChangeConf(pending=["a", "b"], target=["b"], refresh=lambda: (None, ""), timeout=1)

    def test_negative_durations(self):
        with pytest.raises(ValueError):
            StateChangeConf(pending=[], target=["a"], refresh=lambda: (None, ""), timeout=-1)
        with pytest.raises(ValueError):
            StateChangeConf(pending=[], target=["a"], refresh=lambda: (None, ""), timeout=1, min_timeout=-1)

    def test_absence_detection(self):
        refresh = lambda: (None, "")  # noqa: E731

        assert StateChangeConf(pending=["exists"], target=[], refresh=refresh, timeout=1).waits_for_absence
        assert StateChangeConf(pending=["deleting"], target=["deleted"], refresh=refresh, timeout=1).waits_for_absence
        assert StateChangeConf(pending=["DELETE_IN_PROGRESS"], target=["DELETE_COMPLETE"],
                               refresh=refresh, timeout=1).waits_for_absence
        assert not StateChangeConf(pending=["pending"], target=["available"],
                                   refresh=refresh, timeout=1).waits_for_absence


@pytest.mark.unit
class TestWaitForState:
    """Test polling until a target state."""

    def test_target_on_first_refresh_returns_immediately(self):
        refresh = sequence_refresh(["available"])
        conf = StateChangeConf(pending=["pending"], target=["available"], refresh=refresh,
                               timeout=10, min_timeout=5)

        assert conf.wait_for_state() == {"state": "available"}
        assert len(refresh.calls) == 1

    def test_pending_then_target(self):
        refresh = sequence_refresh(["pending", "pending", "available"])
        conf = StateChangeConf(pending=["pending"], target=["available"], refresh=refresh,
                               timeout=10, poll_interval=0.01)

        assert conf.wait_for_state() == {"state": "available"}
        assert len(refresh.calls) == 3

    def test_unexpected_state(self):
        refresh = sequence_refresh(["pending", "failed"])
        conf = StateChangeConf(pending=["pending"], target=["available"], refresh=refresh,
                               timeout=10, poll_interval=0.01)

        with pytest.raises(UnexpectedStateError) as exc_info:
            conf.wait_for_state()

        assert exc_info.value.state == "failed"
        assert exc_info.value.expected == ["available"]

    def test_empty_pending_fails_on_any_non_target_state(self):
        refresh = sequence_refresh(["creating"])
        conf = StateChangeConf(pending=[], target=["available"], refresh=refresh, timeout=10)

        with pytest.raises(UnexpectedStateError):
            conf.wait_for_state()

    def test_timeout(self):
        refresh = sequence_refresh(["pending"])
        conf = StateChangeConf(pending=["pending"], target=["available"], refresh=refresh,
                               timeout=0.2, poll_interval=0.05)

        with pytest.raises(WaiterTimeoutError) as exc_info:
            conf.wait_for_state()

        assert exc_info.value.last_state == "pending"
        assert exc_info.value.expected == ["available"]
        assert timed_out(exc_info.value)

    def test_continuous_target_occurence(self):
        refresh = sequence_refresh(["available", "pending", "available", "available"])
        conf = StateChangeConf(pending=["pending"], target=["available"], refresh=refresh,
                               timeout=10, poll_interval=0.01, continuous_target_occurence=2)

        conf.wait_for_state()
        assert len(refresh.calls) == 4

    def test_refresh_errors_propagate(self):
        refresh = sequence_refresh([RuntimeError("access denied")])
        conf = StateChangeConf(pending=["pending"], target=["available"], refresh=refresh, timeout=10)

        with pytest.raises(RuntimeError, match="access denied"):
            conf.wait_for_state()

    def test_cancelled_before_first_refresh(self):
        ctx = background().with_cancel()
        ctx.cancel()
        refresh = sequence_refresh(["pending"])
        conf = StateChangeConf(pending=["pending"], target=["available"], refresh=refresh,
                               timeout=10, poll_interval=0.01)

        with pytest.raises(OperationCancelledError):
            conf.wait_for_state(ctx)
        assert refresh.calls == []

    def test_cancelled_between_refreshes(self):
        ctx = background().with_cancel()
        calls = []

        def refresh():
            calls.append("pending")
            ctx.cancel("stopping")
            return {"state": "pending"}, "pending"

        conf = StateChangeConf(pending=["pending"], target=["available"], refresh=refresh,
                               timeout=10, poll_interval=0.01)

        with pytest.raises(OperationCancelledError, match="stopping"):
            conf.wait_for_state(ctx)
        assert calls == ["pending"]


@pytest.mark.unit
class TestNotFoundHandling:
    """Test NotFound observations during a wait."""

    def test_presence_waiter_surfaces_refresh_not_found(self):
        sentinel = NotFoundError(message="gone")
        refresh = sequence_refresh([sentinel])
        conf = StateChangeConf(pending=["pending"], target=["available"], refresh=refresh, timeout=10)

        with pytest.raises(NotFoundError) as exc_info:
            conf.wait_for_state()
        assert exc_info.value is sentinel

    def test_presence_waiter_nil_object(self):
        refresh = sequence_refresh([None])
        conf = StateChangeConf(pending=["pending"], target=["available"], refresh=refresh, timeout=10)

        with pytest.raises(NotFoundError):
            conf.wait_for_state()

    def test_absence_waiter_with_empty_target(self):
        refresh = sequence_refresh(["exists", "exists", None])
        conf = StateChangeConf(pending=["exists"], target=[], refresh=refresh,
                               timeout=10, poll_interval=0.01)

        assert conf.wait_for_state() is None
        assert len(refresh.calls) == 3

    def test_not_found_checks_require_consecutive_observations(self):
        outcomes = ["deleting", "deleting", NotFoundError(), "deleting"] + [NotFoundError()] * 6
        refresh = sequence_refresh(outcomes)
        conf = StateChangeConf(pending=["deleting"], target=["deleted"], refresh=refresh,
                               timeout=10, poll_interval=0.01, not_found_checks=5)

        assert conf.wait_for_state() is None
        # The "deleting" at observation 4 resets the count, so the waiter
        # needs the five NotFounds at observations 5 through 9 and stops there.
        assert len(refresh.calls) == 9

    def test_not_found_count_resets_target_streak(self):
        refresh = sequence_refresh(["exists", None, "exists", None, None])
        conf = StateChangeConf(pending=["exists"], target=[], refresh=refresh,
                               timeout=10, poll_interval=0.01, not_found_checks=2)

        conf.wait_for_state()
        assert len(refresh.calls) == 5
