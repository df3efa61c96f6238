"""
Tests for the in-memory call queue.

Tests cover:
- Simulated clock (tick / advance)
- Filtering and sorting
- Operator actions, emergency callback and SMS deflection
- Dashboard metrics
"""

from datetime import datetime, timedelta, timezone

import numpy as np
import pytest

from callrisk.config import CALLS_ABANDONED, CALLS_ANSWERED, MAX_QUEUE_SIZE
from callrisk.queue import CallQueue
from callrisk.records import CallRecord


def make_call(call_id, wait_time=60, issue_type="Bill Payment Query", charge=0, claim_status="Paid"):
    return CallRecord(
        call_id=call_id,
        customer_name=f"Customer {call_id}",
        phone_number="+15550100000",
        wait_time=wait_time,
        issue_type=issue_type,
        charge=charge,
        claim_status=claim_status,
    )


@pytest.fixture
def rng():
    return np.random.default_rng(7)


@pytest.fixture
def queue():
    return CallQueue([
        make_call("LOW", wait_time=60),                                                  # 0.13
        make_call("MED", wait_time=300, issue_type="Unknown", charge=500, claim_status="Pending"),  # 0.5
        make_call("HIGH", wait_time=600, issue_type="Insurance Claim Denial", claim_status="Denied"),  # 1.0
        make_call("LONG", wait_time=390, issue_type="Coverage Verification"),           # 0.395
    ])


# =============================================================
# TEST: Simulated clock
# =============================================================

class TestClock:

    def test_tick_adds_wait_and_rescores(self, queue):
        before = {c.call_id: (c.wait_time, c.probability) for c in queue}

        queue.tick()

        for c in queue:
            wait, proba = before[c.call_id]
            assert c.wait_time == wait + 15
            assert c.probability >= proba
        # Coverage Verification at 405s crosses 0.4 into Medium
        assert queue.get("LONG").priority == "Medium"

    def test_tick_without_rng_adds_no_calls(self, queue):
        queue.tick()
        assert len(queue) == 4

    def test_tick_never_exceeds_max_size(self, rng):
        q = CallQueue([make_call(f"C{i}") for i in range(MAX_QUEUE_SIZE)])
        for _ in range(50):
            q.tick(rng)
        assert len(q) == MAX_QUEUE_SIZE

    def test_tick_with_rng_adds_at_most_one_call(self, queue, rng):
        for _ in range(10):
            n = len(queue)
            queue.tick(rng)
            assert len(queue) in (n, n + 1)

    def test_advance_applies_elapsed_ticks(self, queue):
        t0 = datetime(2024, 1, 1, tzinfo=timezone.utc)
        queue.last_tick = t0

        applied = queue.advance(t0 + timedelta(seconds=12))

        assert applied == 2
        assert queue.get("LOW").wait_time == 90
        assert queue.last_tick == t0 + timedelta(seconds=10)

    def test_advance_before_interval_is_noop(self, queue):
        t0 = datetime(2024, 1, 1, tzinfo=timezone.utc)
        queue.last_tick = t0
        assert queue.advance(t0 + timedelta(seconds=4)) == 0
        assert queue.get("LOW").wait_time == 60


# =============================================================
# TEST: Views
# =============================================================

class TestViews:

    def test_add_prepends(self, queue):
        queue.add(make_call("NEW"))
        assert queue.calls[0].call_id == "NEW"

    def test_extend_prepends_batch_in_order(self, queue):
        n = queue.extend([make_call("B1"), make_call("B2")])
        assert n == 2
        assert [c.call_id for c in queue.calls[:3]] == ["B1", "B2", "LOW"]

    def test_add_rejects_duplicate_id(self, queue):
        with pytest.raises(ValueError, match="LOW"):
            queue.add(make_call("LOW"))
        assert len(queue) == 4

    def test_extend_rejects_duplicates_without_partial_add(self, queue):
        with pytest.raises(ValueError):
            queue.extend([make_call("B1"), make_call("MED")])
        with pytest.raises(ValueError):
            queue.extend([make_call("B2"), make_call("B2")])
        assert queue.call_ids() == {"LOW", "MED", "HIGH", "LONG"}

    def test_filter_by_priority_is_case_insensitive(self, queue):
        assert [c.call_id for c in queue.filtered("high")] == ["HIGH"]
        assert [c.call_id for c in queue.filtered("Medium")] == ["MED"]
        assert {c.call_id for c in queue.filtered("low")} == {"LOW", "LONG"}

    def test_sort_by_probability(self, queue):
        assert [c.call_id for c in queue.filtered("all")] == ["HIGH", "MED", "LONG", "LOW"]

    def test_sort_by_wait_time(self, queue):
        assert [c.call_id for c in queue.filtered("all", "wait_time")] == ["HIGH", "LONG", "MED", "LOW"]

    def test_unknown_sort_keeps_queue_order(self, queue):
        assert [c.call_id for c in queue.filtered("all", "name")] == ["LOW", "MED", "HIGH", "LONG"]

    def test_get_unknown_call(self, queue):
        with pytest.raises(KeyError):
            queue.get("NOPE")

    def test_to_frame(self, queue):
        df = queue.to_frame()
        assert len(df) == 4
        assert {"call_id", "probability", "priority", "predicted_action", "claim_status"} <= set(df.columns)

    def test_to_frame_empty(self):
        df = CallQueue().to_frame()
        assert df.empty
        assert "probability" in df.columns

    def test_clear(self, queue):
        queue.clear()
        assert len(queue) == 0


# =============================================================
# TEST: Operator actions
# =============================================================

class TestActions:

    def test_priority_assigns_agent(self, queue, rng):
        result = queue.take_action("MED", "priority", rng)

        assert result.status == "In Progress"
        assert result.agent_assigned.startswith("Agent #")
        assert 1 <= int(result.agent_assigned.split("#")[1]) <= 50
        assert result.agent_assigned in result.message

    def test_callback_completes_and_schedules(self, queue, rng):
        now = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)

        result = queue.take_action("LOW", "callback", rng, now=now)

        call = queue.get("LOW")
        assert result.status == "Completed"
        assert call.callback_at == now + timedelta(minutes=15)
        assert "Callback scheduled for Customer LOW" in result.message
        assert queue.pending_callbacks() == [call]

    def test_bot_transfer(self, queue, rng):
        result = queue.take_action("HIGH", "bot", rng)
        assert result.status == "In Progress"
        assert result.agent_assigned is None
        assert "AI assistant" in result.message

    def test_unknown_action(self, queue, rng):
        with pytest.raises(ValueError):
            queue.take_action("LOW", "escalate", rng)

    def test_unknown_call(self, queue, rng):
        with pytest.raises(KeyError):
            queue.take_action("NOPE", "priority", rng)

    def test_only_waiting_calls_accept_actions(self, queue, rng):
        queue.take_action("LOW", "bot", rng)
        with pytest.raises(ValueError):
            queue.take_action("LOW", "priority", rng)

    def test_pending_callbacks_sorted_soonest_first(self, queue, rng):
        t0 = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)
        queue.take_action("MED", "callback", rng, now=t0 + timedelta(minutes=5))
        queue.take_action("LOW", "callback", rng, now=t0)
        assert [c.call_id for c in queue.pending_callbacks()] == ["LOW", "MED"]

    def test_emergency_callback_targets_waiting_high_risk(self, queue, rng):
        affected = queue.emergency_callback(rng)

        assert [c.call_id for c in affected] == ["HIGH"]
        call = queue.get("HIGH")
        assert call.status == "In Progress"
        assert call.agent_assigned.startswith("Emergency Agent #")
        assert 1 <= int(call.agent_assigned.split("#")[1]) <= 5

    def test_emergency_callback_skips_handled_calls(self, queue, rng):
        queue.take_action("HIGH", "bot", rng)
        assert queue.emergency_callback(rng) == []

    def test_sms_deflection_candidates(self, queue, rng):
        ids = {c.call_id for c in queue.sms_deflection_candidates()}
        assert ids == {"MED", "HIGH", "LONG"}

        queue.take_action("MED", "callback", rng)
        ids = {c.call_id for c in queue.sms_deflection_candidates()}
        assert ids == {"HIGH", "LONG"}


# =============================================================
# TEST: Metrics
# =============================================================

class TestMetrics:

    def test_empty_queue(self):
        m = CallQueue().metrics()
        assert m.total_calls == 0
        assert m.avg_wait_time == 0
        assert m.predicted_abandonment_rate == 0.0

    def test_metrics(self):
        q = CallQueue([
            make_call("A", wait_time=100),
            make_call("B", wait_time=200, issue_type="Insurance Claim Denial", charge=1000, claim_status="Denied"),
        ])

        m = q.metrics()

        assert m.total_calls == 2
        assert m.avg_wait_time == 150
        assert m.predicted_abandonment_rate == pytest.approx(50.0)
        assert m.calls_answered == CALLS_ANSWERED
        assert m.calls_abandoned == CALLS_ABANDONED

    def test_avg_wait_rounds_half_up(self):
        q = CallQueue([make_call("A", wait_time=2), make_call("B", wait_time=3)])
        assert q.metrics().avg_wait_time == 3

    def test_success_rate(self):
        m = CallQueue().metrics()
        assert m.success_rate == pytest.approx(100.0 * 156 / 164)
