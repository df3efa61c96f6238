import logging
from typing import Iterable, List

import numpy as np
import pandas as pd

from callrisk.records import CallRecord
from callrisk.router import classify_frame
from callrisk.simulator import new_call_id

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ["wait_time", "issue_type"]
OPTIONAL_DEFAULTS = {
    "charge": 0.0,
    "status": "",
    "customer_name": "",
    "phone_number": "",
    "call_id": "",
}


def load_calls_csv(path_or_buffer) -> pd.DataFrame:
    """
    Reads a call export. Requires wait_time and issue_type columns;
    charge/status/customer_name/phone_number/call_id are filled with defaults
    when absent. Non-numeric wait_time/charge cells become 0.
    """
    df = pd.read_csv(path_or_buffer)
    df.columns = [str(c).strip() for c in df.columns]

    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f"Call file is missing required columns: {', '.join(missing)}")

    for col, default in OPTIONAL_DEFAULTS.items():
        if col not in df.columns:
            df[col] = default

    for col in ("wait_time", "charge"):
        values = pd.to_numeric(df[col], errors="coerce")
        bad = int(values.isna().sum())
        if bad:
            logger.warning("%d rows had a non-numeric %s; using 0", bad, col)
        df[col] = values.fillna(0.0).astype("float64")

    for col in ("issue_type", "status", "customer_name", "phone_number", "call_id"):
        df[col] = df[col].fillna("").astype(str)

    return df


def score_calls(df: pd.DataFrame) -> pd.DataFrame:
    scored = classify_frame(df, status_col="status")
    logger.info("Scored batch of %d calls", len(scored))
    return scored


def records_from_frame(
    df: pd.DataFrame,
    rng: np.random.Generator,
    prefix: str = "BATCH",
    taken: Iterable[str] = (),
) -> List[CallRecord]:
    """
    Queue records for a scored frame. A call_id that is blank, already in
    `taken` or repeated within the file is replaced by a fresh one.
    """
    used = set(taken)
    records = []
    for i, row in enumerate(df.to_dict(orient="records"), start=1):
        call_id = row.get("call_id") or ""
        if not call_id or call_id in used:
            if call_id:
                logger.warning("Duplicate call_id %s in batch; assigning a new id", call_id)
            call_id = new_call_id(rng, prefix)
            while call_id in used:
                call_id = new_call_id(rng, prefix)
        used.add(call_id)
        records.append(
            CallRecord(
                call_id=call_id,
                customer_name=row.get("customer_name") or f"Batch Customer {i}",
                phone_number=row.get("phone_number") or "",
                wait_time=float(row["wait_time"]),
                issue_type=row["issue_type"],
                charge=float(row.get("charge", 0.0)),
                claim_status=row.get("status") or "",
            )
        )
    return records
