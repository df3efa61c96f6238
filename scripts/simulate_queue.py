import os
import sys

import numpy as np
import pandas as pd

from callrisk.analytics import risk_distribution
from callrisk.config import (
    ARTIFACT_DIR,
    DATA_PATH,
    HIGH_RISK_THRESHOLD,
    MEDIUM_RISK_THRESHOLD,
    TICK_INTERVAL_SECONDS,
    configure_logging,
)
from callrisk.queue import CallQueue
from callrisk.simulator import generate_initial_queue

N_TICKS = 60
SEED = 42


def save_risk_histogram(probability: pd.Series, out_path: str, n_bins: int = 20) -> None:
    # Keep matplotlib optional: only import when needed
    import matplotlib.pyplot as plt

    fig = plt.figure(figsize=(7, 5))
    ax = plt.gca()
    ax.hist(probability, bins=np.linspace(0.0, 1.0, n_bins + 1))
    ax.axvline(MEDIUM_RISK_THRESHOLD, linestyle="--")
    ax.axvline(HIGH_RISK_THRESHOLD, linestyle="--")
    ax.set_xlabel("Abandonment risk score")
    ax.set_ylabel("Calls")
    ax.set_title("Risk Distribution (simulated queue)")
    fig.tight_layout()

    os.makedirs(os.path.dirname(out_path), exist_ok=True)
    plt.savefig(out_path, dpi=200)
    plt.close(fig)


def main():
    configure_logging()
    n_ticks = int(sys.argv[1]) if len(sys.argv) > 1 else N_TICKS

    rng = np.random.default_rng(SEED)
    queue = CallQueue(generate_initial_queue(rng))

    for _ in range(n_ticks):
        queue.tick(rng)

    df = queue.to_frame()
    m = queue.metrics()

    print(f"Simulated {n_ticks} ticks ({n_ticks * TICK_INTERVAL_SECONDS}s of wall clock)")
    print(f"Calls in queue:          {m.total_calls}")
    print(f"Avg wait (s):            {m.avg_wait_time}")
    print(f"Predicted abandonment:   {m.predicted_abandonment_rate:.1f}%")
    print("Risk distribution:")
    for band, count in risk_distribution(df).items():
        print(f"  {band:<6} {count}")

    os.makedirs(os.path.dirname(DATA_PATH), exist_ok=True)
    export = df.rename(columns={"claim_status": "status", "status": "queue_status"})
    export.to_csv(DATA_PATH, index=False)
    print(f"Saved {len(export):,} rows to {DATA_PATH}")

    out_png = os.path.join(ARTIFACT_DIR, "risk_distribution.png")
    save_risk_histogram(df["probability"], out_png)
    print(f"Saved risk histogram to: {out_png}")


if __name__ == "__main__":
    main()
