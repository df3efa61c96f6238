import os

import numpy as np
import pandas as pd
from sklearn.metrics import classification_report, confusion_matrix

from callrisk.analytics import performance_metrics, risk_distribution, simulate_outcomes
from callrisk.batch import score_calls
from callrisk.config import ARTIFACT_DIR, CLAIM_STATUSES, ISSUE_TYPES, PRIORITY_HIGH, configure_logging

N_CALLS = 5000
SEED = 42


def synthetic_calls(rng: np.random.Generator, n: int) -> pd.DataFrame:
    """Feature rows spread over the scorer's input space, with some unknown labels."""
    issues = ISSUE_TYPES + ["General Inquiry"]
    statuses = CLAIM_STATUSES + ["Unknown"]
    return pd.DataFrame({
        "wait_time": rng.integers(0, 900, size=n).astype("float64"),
        "issue_type": rng.choice(issues, size=n),
        "charge": np.round(rng.uniform(0.0, 1500.0, size=n), 2),
        "status": rng.choice(statuses, size=n),
    })


def save_confusion_matrix_png(cm: np.ndarray, labels: list, out_path: str) -> None:
    # Keep matplotlib optional: only import when needed
    import matplotlib.pyplot as plt

    fig = plt.figure(figsize=(5, 4))
    ax = plt.gca()
    im = ax.imshow(cm, interpolation="nearest")
    plt.colorbar(im)

    ax.set(
        xticks=np.arange(len(labels)),
        yticks=np.arange(len(labels)),
        xticklabels=labels,
        yticklabels=labels,
        ylabel="Simulated outcome",
        xlabel="Flagged High",
        title="High-priority flag vs abandonment",
    )

    thresh = cm.max() / 2.0 if cm.max() > 0 else 0.0
    for i in range(cm.shape[0]):
        for j in range(cm.shape[1]):
            ax.text(
                j,
                i,
                format(cm[i, j], "d"),
                ha="center",
                va="center",
                color="white" if cm[i, j] > thresh else "black",
            )

    fig.tight_layout()
    os.makedirs(os.path.dirname(out_path), exist_ok=True)
    plt.savefig(out_path, dpi=200)
    plt.close(fig)


def main():
    configure_logging()
    rng = np.random.default_rng(SEED)

    scored = score_calls(synthetic_calls(rng, N_CALLS))
    df = simulate_outcomes(scored, rng)

    print(f"Calls: {len(df):,}")
    print("Risk distribution:", risk_distribution(df))
    print(f"Simulated abandonment rate: {df['abandoned'].mean() * 100:.2f}%")

    metrics = performance_metrics(df)
    print("\n" + "=" * 60)
    print("HIGH-PRIORITY FLAG vs SIMULATED ABANDONMENT")
    print("=" * 60)
    print(f"Accuracy:            {metrics['accuracy']:.4f}")
    print(f"Precision:           {metrics['precision']:.4f}")
    print(f"False positive rate: {metrics['false_positive_rate']:.4f}")
    if metrics["roc_auc"] is not None:
        print(f"ROC AUC (score):     {metrics['roc_auc']:.4f}")

    y_true = df["abandoned"].map({True: "Abandoned", False: "Answered"})
    y_pred = (df["priority"] == PRIORITY_HIGH).map({True: "Abandoned", False: "Answered"})
    print("\nClassification report:")
    print(classification_report(y_true, y_pred, digits=4, zero_division=0))

    labels = ["Answered", "Abandoned"]
    cm = confusion_matrix(y_true, y_pred, labels=labels)
    out_png = os.path.join(ARTIFACT_DIR, "confusion_matrix_sim.png")
    save_confusion_matrix_png(cm, labels, out_png)
    print(f"Saved confusion matrix to: {out_png}")


if __name__ == "__main__":
    main()
