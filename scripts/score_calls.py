import os
import sys

from callrisk.batch import load_calls_csv, score_calls
from callrisk.config import ARTIFACT_DIR, DATA_PATH, configure_logging

OUT_PATH = os.path.join(ARTIFACT_DIR, "scored_calls.csv")


def main():
    configure_logging()
    in_path = sys.argv[1] if len(sys.argv) > 1 else DATA_PATH
    out_path = sys.argv[2] if len(sys.argv) > 2 else OUT_PATH

    if not os.path.exists(in_path):
        raise FileNotFoundError(f"Missing {in_path}. Run: python -m scripts.simulate_queue")

    scored = score_calls(load_calls_csv(in_path))

    os.makedirs(os.path.dirname(out_path) or ".", exist_ok=True)
    scored.to_csv(out_path, index=False)

    print(scored["priority"].value_counts().to_string())
    print(f"Saved {len(scored):,} scored calls to: {out_path}")


if __name__ == "__main__":
    main()
