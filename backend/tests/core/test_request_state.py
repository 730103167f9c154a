"""Request State — verifies forward-only stage transitions."""

import pytest

from gateway.core.domain_types import RequestStage
from gateway.core.request_state import StageTracker


def test_tracker_starts_received():
    assert StageTracker().stage == RequestStage.RECEIVED


def test_stages_may_be_skipped_forward():
    tracker = StageTracker()
    tracker.advance(RequestStage.ROUTED)
    tracker.advance(RequestStage.HANDLED)
    assert tracker.history == [
        RequestStage.RECEIVED, RequestStage.ROUTED, RequestStage.HANDLED,
    ]


def test_repeating_a_stage_is_a_no_op():
    tracker = StageTracker()
    tracker.advance(RequestStage.ROUTED)
    tracker.advance(RequestStage.ROUTED)
    assert tracker.history.count(RequestStage.ROUTED) == 1


def test_moving_backwards_raises():
    tracker = StageTracker()
    tracker.advance(RequestStage.VALIDATED)
    with pytest.raises(ValueError):
        tracker.advance(RequestStage.ROUTED)


def test_responded_reachable_from_any_stage():
    tracker = StageTracker()
    tracker.advance(RequestStage.ROUTED)
    tracker.advance(RequestStage.RESPONDED)
    assert tracker.stage == RequestStage.RESPONDED
