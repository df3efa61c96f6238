import logging
import math
from dataclasses import dataclass, fields
from datetime import datetime, timedelta, timezone
from typing import Iterable, List, Optional, Set

import numpy as np
import pandas as pd

from callrisk.config import (
    ABANDONMENT_RISK_THRESHOLD,
    ACTIVE_AGENTS,
    AGENT_POOL_SIZE,
    CALLBACK_DELAY_MINUTES,
    CALLS_ABANDONED,
    CALLS_ANSWERED,
    EMERGENCY_AGENT_POOL_SIZE,
    EMERGENCY_RISK_THRESHOLD,
    MAX_QUEUE_SIZE,
    NEW_CALL_PROBABILITY,
    SMS_DEFLECTION_MIN_WAIT,
    STATUS_COMPLETED,
    STATUS_IN_PROGRESS,
    STATUS_WAITING,
    TICK_INTERVAL_SECONDS,
    TICK_WAIT_SECONDS,
)
from callrisk.records import CallRecord
from callrisk.simulator import generate_mock_call

logger = logging.getLogger(__name__)

ACTIONS = ("priority", "callback", "bot")
SORT_KEYS = ("probability", "wait_time")


@dataclass
class ActionResult:
    call_id: str
    action: str
    status: str
    agent_assigned: Optional[str]
    message: str


@dataclass
class DashboardMetrics:
    total_calls: int
    avg_wait_time: int
    predicted_abandonment_rate: float
    active_agents: int = ACTIVE_AGENTS
    calls_answered: int = CALLS_ANSWERED
    calls_abandoned: int = CALLS_ABANDONED

    @property
    def success_rate(self) -> float:
        handled = self.calls_answered + self.calls_abandoned
        return 100.0 * self.calls_answered / handled if handled else 0.0


class CallQueue:
    """
    In-memory call queue for a single dashboard session.

    Newest calls sit at the front. Not safe for concurrent mutation.
    """

    def __init__(self, calls: Iterable[CallRecord] = (), last_tick: Optional[datetime] = None):
        self._calls: List[CallRecord] = list(calls)
        self.last_tick = last_tick or datetime.now(timezone.utc)

    def __len__(self) -> int:
        return len(self._calls)

    def __iter__(self):
        return iter(self._calls)

    @property
    def calls(self) -> List[CallRecord]:
        return list(self._calls)

    def get(self, call_id: str) -> CallRecord:
        for call in self._calls:
            if call.call_id == call_id:
                return call
        raise KeyError(call_id)

    def call_ids(self) -> Set[str]:
        return {c.call_id for c in self._calls}

    def _check_unique(self, new: List[CallRecord]) -> None:
        seen = self.call_ids()
        for call in new:
            if call.call_id in seen:
                raise ValueError(f"Call {call.call_id} is already in the queue.")
            seen.add(call.call_id)

    def add(self, call: CallRecord) -> None:
        self._check_unique([call])
        self._calls.insert(0, call)

    def extend(self, calls: Iterable[CallRecord]) -> int:
        """Prepends a batch. Raises ValueError, adding nothing, if any call id is taken."""
        new = list(calls)
        self._check_unique(new)
        self._calls[:0] = new
        return len(new)

    def clear(self) -> None:
        logger.info("Clearing queue (%d calls)", len(self._calls))
        self._calls.clear()

    # ---- simulated clock ----
    def tick(self, rng: Optional[np.random.Generator] = None) -> None:
        for call in self._calls:
            call.wait_time += TICK_WAIT_SECONDS
            call.rescore()

        if rng is not None and rng.random() < NEW_CALL_PROBABILITY and len(self._calls) < MAX_QUEUE_SIZE:
            self._calls.append(generate_mock_call(rng))

    def advance(self, now: datetime, rng: Optional[np.random.Generator] = None) -> int:
        """Catch up on elapsed ticks since the last sync. Returns the number applied."""
        elapsed = (now - self.last_tick).total_seconds()
        n = int(elapsed // TICK_INTERVAL_SECONDS)
        for _ in range(n):
            self.tick(rng)
        if n > 0:
            self.last_tick += timedelta(seconds=n * TICK_INTERVAL_SECONDS)
        return n

    # ---- views ----
    def filtered(self, priority: str = "all", sort_by: str = "probability") -> List[CallRecord]:
        p = (priority or "all").lower()
        out = [c for c in self._calls if p == "all" or c.priority.lower() == p]
        if sort_by in SORT_KEYS:
            out.sort(key=lambda c: getattr(c, sort_by), reverse=True)
        return out

    def sms_deflection_candidates(self) -> List[CallRecord]:
        return [c for c in self._calls if c.status == STATUS_WAITING and c.wait_time > SMS_DEFLECTION_MIN_WAIT]

    def pending_callbacks(self) -> List[CallRecord]:
        scheduled = [c for c in self._calls if c.status == STATUS_COMPLETED and c.callback_at is not None]
        return sorted(scheduled, key=lambda c: c.callback_at)

    def metrics(self) -> DashboardMetrics:
        total = len(self._calls)
        if total == 0:
            return DashboardMetrics(total_calls=0, avg_wait_time=0, predicted_abandonment_rate=0.0)

        avg_wait = sum(c.wait_time for c in self._calls) / total
        high_risk = sum(1 for c in self._calls if c.probability > ABANDONMENT_RISK_THRESHOLD)
        return DashboardMetrics(
            total_calls=total,
            avg_wait_time=int(math.floor(avg_wait + 0.5)),
            predicted_abandonment_rate=100.0 * high_risk / total,
        )

    def to_frame(self) -> pd.DataFrame:
        columns = [f.name for f in fields(CallRecord)]
        return pd.DataFrame([c.to_dict() for c in self._calls], columns=columns)

    # ---- operator actions ----
    def take_action(
        self,
        call_id: str,
        action: str,
        rng: Optional[np.random.Generator] = None,
        now: Optional[datetime] = None,
    ) -> ActionResult:
        if action not in ACTIONS:
            raise ValueError(f"Unknown action {action!r}; expected one of {ACTIONS}.")

        call = self.get(call_id)
        if call.status != STATUS_WAITING:
            raise ValueError(f"Call {call_id} is {call.status}, not {STATUS_WAITING}.")

        rng = rng or np.random.default_rng()
        now = now or datetime.now(timezone.utc)

        if action == "priority":
            call.status = STATUS_IN_PROGRESS
            call.agent_assigned = f"Agent #{int(rng.integers(1, AGENT_POOL_SIZE + 1))}"
            msg = f"Call {call_id} moved to priority queue and assigned to {call.agent_assigned}"
        elif action == "callback":
            call.status = STATUS_COMPLETED
            call.agent_assigned = None
            call.callback_at = now + timedelta(minutes=CALLBACK_DELAY_MINUTES)
            msg = (
                f"Callback scheduled for {call.customer_name}. "
                f"Customer will be contacted within {CALLBACK_DELAY_MINUTES} minutes"
            )
        else:
            call.status = STATUS_IN_PROGRESS
            call.agent_assigned = None
            msg = f"{call.customer_name} transferred to AI assistant for immediate support"

        logger.info("Action %s on %s -> %s", action, call_id, call.status)
        return ActionResult(
            call_id=call_id,
            action=action,
            status=call.status,
            agent_assigned=call.agent_assigned,
            message=msg,
        )

    def emergency_callback(self, rng: Optional[np.random.Generator] = None) -> List[CallRecord]:
        rng = rng or np.random.default_rng()
        affected = [
            c for c in self._calls
            if c.status == STATUS_WAITING and c.probability > EMERGENCY_RISK_THRESHOLD
        ]
        for call in affected:
            call.status = STATUS_IN_PROGRESS
            call.agent_assigned = f"Emergency Agent #{int(rng.integers(1, EMERGENCY_AGENT_POOL_SIZE + 1))}"

        if affected:
            logger.warning("Emergency protocol: %d high-risk calls moved to callback queue", len(affected))
        return affected
