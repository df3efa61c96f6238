from dataclasses import dataclass, field
from typing import Dict, Tuple

import numpy as np
import pandas as pd

from callrisk.config import (
    HIGH_RISK_THRESHOLD,
    MEDIUM_RISK_THRESHOLD,
    PRIORITY_HIGH,
    PRIORITY_LOW,
    PRIORITY_MEDIUM,
    PRIORITY_TO_ACTION,
)
from callrisk.scorer import (
    CallFeatures,
    charge_component,
    issue_component,
    predict_risk_score,
    score_frame,
    status_component,
    wait_component,
)


@dataclass
class RiskAssessment:
    score: float
    priority: str
    predicted_action: str
    reason: str
    components: Dict[str, float] = field(default_factory=dict)


def priority_for(score: float) -> str:
    if score > HIGH_RISK_THRESHOLD:
        return PRIORITY_HIGH
    if score > MEDIUM_RISK_THRESHOLD:
        return PRIORITY_MEDIUM
    return PRIORITY_LOW


def predicted_action_for(score: float) -> str:
    return PRIORITY_TO_ACTION[priority_for(score)]


def classify(score: float) -> Tuple[str, str]:
    return priority_for(score), predicted_action_for(score)


_REASONS = {
    "wait": "Long time in queue is the main risk driver.",
    "issue": "Issue type carries the highest risk weight.",
    "charge": "Large billing amount drives the risk.",
    "status": "Claim status (denied/pending) drives the risk.",
}


def heuristic_reason(components: Dict[str, float]) -> str:
    # Ties resolve in term order: wait, issue, charge, status.
    top = max(components, key=components.get)
    return _REASONS[top]


def assess_call(features: CallFeatures) -> RiskAssessment:
    components = {
        "wait": wait_component(features.wait_time),
        "issue": issue_component(features.issue_type),
        "charge": charge_component(features.charge),
        "status": status_component(features.status),
    }
    score = predict_risk_score(features)
    priority, action = classify(score)

    return RiskAssessment(
        score=float(score),
        priority=priority,
        predicted_action=action,
        reason=heuristic_reason(components),
        components=components,
    )


def classify_frame(df: pd.DataFrame, status_col: str = "status") -> pd.DataFrame:
    """Returns a copy of df with probability, priority and predicted_action columns."""
    out = df.copy()
    proba = score_frame(out, status_col=status_col)
    out["probability"] = proba

    high = proba > HIGH_RISK_THRESHOLD
    medium = proba > MEDIUM_RISK_THRESHOLD
    out["priority"] = np.select([high, medium], [PRIORITY_HIGH, PRIORITY_MEDIUM], default=PRIORITY_LOW)
    out["predicted_action"] = out["priority"].map(PRIORITY_TO_ACTION)
    return out
