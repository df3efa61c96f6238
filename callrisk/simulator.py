import string
from typing import List, Sequence, Tuple

import numpy as np

from callrisk.config import CLAIM_STATUSES, INITIAL_QUEUE_SIZE, ISSUE_TYPES
from callrisk.records import CallRecord

ID_ALPHABET = np.array(list(string.digits + string.ascii_uppercase))

QUEUE_NAMES = ["John Smith", "Sarah Johnson", "Mike Davis", "Emily Chen", "Robert Wilson", "Jessica Brown"]
REFRESH_NAMES = ["Alex Rodriguez", "Maria Garcia", "David Kim", "Lisa Thompson", "James Wilson"]

SAMPLE_CALLERS: List[Tuple[str, str, str]] = [
    ("John Marketing", "Billing Statement Error", "+1-555-0101"),
    ("Sarah Finance", "Payment Plan Setup", "+1-555-0102"),
    ("Mike Operations", "Prior Authorization", "+1-555-0103"),
    ("Emma Support", "Insurance Claim Denial", "+1-555-0104"),
    ("Tom Development", "EOB Explanation", "+1-555-0105"),
    ("Lisa Quality", "Coverage Verification", "+1-555-0106"),
]

MAX_CHARGE = 1500.0


def new_call_id(rng: np.random.Generator, prefix: str = "CALL") -> str:
    return f"{prefix}-{''.join(rng.choice(ID_ALPHABET, size=9))}"


def random_phone(rng: np.random.Generator) -> str:
    return f"+1{int(rng.integers(1_000_000_000, 10_000_000_000))}"


def generate_mock_call(
    rng: np.random.Generator,
    names: Sequence[str] = QUEUE_NAMES,
    wait_range: Tuple[int, int] = (30, 630),
    prefix: str = "CALL",
) -> CallRecord:
    return CallRecord(
        call_id=new_call_id(rng, prefix),
        customer_name=str(rng.choice(names)),
        phone_number=random_phone(rng),
        wait_time=float(rng.integers(*wait_range)),
        issue_type=str(rng.choice(ISSUE_TYPES)),
        charge=round(float(rng.uniform(0.0, MAX_CHARGE)), 2),
        claim_status=str(rng.choice(CLAIM_STATUSES)),
    )


def generate_initial_queue(rng: np.random.Generator, size: int = INITIAL_QUEUE_SIZE) -> List[CallRecord]:
    return [generate_mock_call(rng) for _ in range(size)]


def generate_refresh_batch(rng: np.random.Generator) -> List[CallRecord]:
    n = int(rng.integers(1, 4))
    return [generate_mock_call(rng, names=REFRESH_NAMES, wait_range=(30, 150)) for _ in range(n)]


def generate_sample_calls(rng: np.random.Generator) -> List[CallRecord]:
    calls = []
    for name, issue, phone in SAMPLE_CALLERS:
        calls.append(
            CallRecord(
                call_id=new_call_id(rng, "SAMPLE"),
                customer_name=name,
                phone_number=phone,
                wait_time=float(rng.integers(100, 500)),
                issue_type=issue,
                charge=round(float(rng.uniform(0.0, MAX_CHARGE)), 2),
                claim_status=str(rng.choice(CLAIM_STATUSES)),
            )
        )
    return calls
