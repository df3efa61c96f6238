import logging
from dataclasses import dataclass

import numpy as np
import pandas as pd

from callrisk.config import (
    CHARGE_CEILING,
    CHARGE_WEIGHT,
    DEFAULT_ISSUE_WEIGHT,
    ISSUE_TYPE_WEIGHTS,
    STATUS_BONUS,
    WAIT_TIME_CEILING,
    WAIT_TIME_WEIGHT,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CallFeatures:
    wait_time: float  # seconds in queue
    issue_type: str
    charge: float  # billing amount
    status: str  # claim / billing status


def wait_component(wait_time: float) -> float:
    return min(wait_time / WAIT_TIME_CEILING, 1) * WAIT_TIME_WEIGHT


def issue_component(issue_type: str) -> float:
    if not isinstance(issue_type, str):
        return DEFAULT_ISSUE_WEIGHT
    return ISSUE_TYPE_WEIGHTS.get(issue_type, DEFAULT_ISSUE_WEIGHT)


def charge_component(charge: float) -> float:
    return min(charge / CHARGE_CEILING, 1) * CHARGE_WEIGHT


def status_component(status: str) -> float:
    if not isinstance(status, str):
        return 0.0
    return STATUS_BONUS.get(status, 0.0)


def predict_risk_score(features: CallFeatures) -> float:
    """
    Abandonment risk in [0, 1] for a single call.

    Sum of four additive terms (wait, issue type, charge, claim status),
    clamped from above at 1. There is no lower clamp: negative wait or
    charge values pass straight through.
    """
    score = 0.0
    score += wait_component(features.wait_time)
    score += issue_component(features.issue_type)
    score += charge_component(features.charge)
    score += status_component(features.status)
    return min(score, 1.0)


def score_frame(
    df: pd.DataFrame,
    wait_col: str = "wait_time",
    issue_col: str = "issue_type",
    charge_col: str = "charge",
    status_col: str = "status",
) -> pd.Series:
    """
    Vectorised predict_risk_score over a DataFrame.

    Terms are added in the same order as the scalar path so the two agree
    row by row.
    """
    if df.empty:
        return pd.Series([], index=df.index, dtype="float64", name="probability")

    wait = np.minimum(df[wait_col].to_numpy(dtype="float64") / WAIT_TIME_CEILING, 1.0) * WAIT_TIME_WEIGHT
    issue = df[issue_col].map(dict(ISSUE_TYPE_WEIGHTS)).fillna(DEFAULT_ISSUE_WEIGHT).to_numpy(dtype="float64")
    charge = np.minimum(df[charge_col].to_numpy(dtype="float64") / CHARGE_CEILING, 1.0) * CHARGE_WEIGHT
    status = df[status_col].map(dict(STATUS_BONUS)).fillna(0.0).to_numpy(dtype="float64")

    score = np.zeros(len(df), dtype="float64")
    score += wait
    score += issue
    score += charge
    score += status

    logger.debug("Scored %d calls", len(df))
    return pd.Series(np.minimum(score, 1.0), index=df.index, name="probability")
