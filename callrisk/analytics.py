from typing import Dict, Optional

import numpy as np
import pandas as pd
from sklearn.metrics import accuracy_score, confusion_matrix, precision_score, roc_auc_score

from callrisk.config import HIGH_RISK_THRESHOLD, MEDIUM_RISK_THRESHOLD, PRIORITY_HIGH


def risk_distribution(df: pd.DataFrame) -> Dict[str, int]:
    """Counts per band: High (>0.7), Medium (0.4, 0.7], Low (<=0.4)."""
    if df.empty:
        return {"High": 0, "Medium": 0, "Low": 0}
    p = df["probability"]
    return {
        "High": int((p > HIGH_RISK_THRESHOLD).sum()),
        "Medium": int(((p > MEDIUM_RISK_THRESHOLD) & (p <= HIGH_RISK_THRESHOLD)).sum()),
        "Low": int((p <= MEDIUM_RISK_THRESHOLD).sum()),
    }


def simulate_outcomes(df: pd.DataFrame, rng: np.random.Generator) -> pd.DataFrame:
    """Adds an `abandoned` column drawn as Bernoulli(probability)."""
    out = df.copy()
    p = np.clip(out["probability"].to_numpy(dtype="float64"), 0.0, 1.0)
    out["abandoned"] = rng.random(len(out)) < p
    return out


def performance_metrics(df: pd.DataFrame, label_col: str = "abandoned") -> Dict[str, Optional[float]]:
    """
    How well "priority == High" flags calls that were abandoned.

    Returns accuracy, precision, false_positive_rate, and roc_auc of the raw
    score (None when only one outcome class is present).
    """
    y_true = df[label_col].astype(bool).to_numpy()
    y_pred = (df["priority"] == PRIORITY_HIGH).to_numpy()
    scores = df["probability"].to_numpy(dtype="float64")

    tn, fp, fn, tp = confusion_matrix(y_true, y_pred, labels=[False, True]).ravel()
    fpr = float(fp / (fp + tn)) if (fp + tn) > 0 else 0.0

    auc = None
    if len(np.unique(y_true)) == 2:
        auc = float(roc_auc_score(y_true, scores))

    return {
        "accuracy": float(accuracy_score(y_true, y_pred)),
        "precision": float(precision_score(y_true, y_pred, zero_division=0)),
        "false_positive_rate": fpr,
        "roc_auc": auc,
        "n": int(len(df)),
    }
