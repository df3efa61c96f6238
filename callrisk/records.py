from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import Optional

from callrisk.config import STATUS_WAITING
from callrisk.router import classify
from callrisk.scorer import CallFeatures, predict_risk_score


@dataclass
class CallRecord:
    call_id: str
    customer_name: str
    phone_number: str
    wait_time: float
    issue_type: str
    charge: float
    claim_status: str
    probability: float = 0.0
    predicted_action: str = ""
    priority: str = ""
    status: str = STATUS_WAITING
    agent_assigned: Optional[str] = None
    callback_at: Optional[datetime] = None
    timestamp: str = ""

    def __post_init__(self):
        if not self.timestamp:
            self.timestamp = datetime.now(timezone.utc).isoformat()
        self.rescore()

    def features(self) -> CallFeatures:
        return CallFeatures(
            wait_time=self.wait_time,
            issue_type=self.issue_type,
            charge=self.charge,
            status=self.claim_status,
        )

    def rescore(self) -> float:
        # probability, priority and predicted_action always move together
        self.probability = float(predict_risk_score(self.features()))
        self.priority, self.predicted_action = classify(self.probability)
        return self.probability

    def to_dict(self) -> dict:
        return asdict(self)


def build_call(
    call_id: str,
    customer_name: str,
    issue_type: str,
    wait_time: float = 0,
    charge: float = 0,
    claim_status: str = "",
    phone_number: str = "",
) -> CallRecord:
    """Record from operator-entered values. Name and issue type are required."""
    customer_name = (customer_name or "").strip()
    # issue_type is kept verbatim; weight lookup is exact-match
    if not customer_name or not (issue_type or "").strip():
        raise ValueError("customer_name and issue_type are required.")

    return CallRecord(
        call_id=call_id,
        customer_name=customer_name,
        phone_number=(phone_number or "").strip(),
        wait_time=float(wait_time or 0),
        issue_type=issue_type,
        charge=float(charge or 0),
        claim_status=claim_status or "",
    )
