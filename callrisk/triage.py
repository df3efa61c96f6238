import logging
import time
from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np

from callrisk.config import TRIAGE_DELAY_SECONDS

logger = logging.getLogger(__name__)


@dataclass
class TriageResult:
    query: str
    response: str
    category: str
    escalated: bool
    elapsed: float


# (category, escalated, response)
CANNED_RESPONSES: List[Tuple[str, bool, str]] = [
    (
        "billing",
        False,
        "This appears to be a billing inquiry. I can help you check your account balance and recent "
        "charges. Your current balance is $45.67 with a payment due on March 15th. I've also found a "
        "$10 credit from last month that can be applied. Would you like me to process the payment or "
        "escalate to billing specialist?",
    ),
    (
        "delivery",
        False,
        "For delivery tracking, I can see your order #12345 is currently in transit and expected to "
        "arrive tomorrow by 3 PM. The package is with FedEx and tracking shows it's 2 stops away. "
        "I've sent you a tracking link via SMS. No escalation needed - issue resolved!",
    ),
    (
        "technical",
        True,
        "This seems like a technical support issue. I've run a quick diagnostic and detected a "
        "connectivity issue with your router model RT-AC66U. I'm sending troubleshooting steps via "
        "email, but this requires escalation to Level 2 technical support due to potential hardware "
        "failure.",
    ),
    (
        "account",
        False,
        "Account verification completed successfully. I can help you reset your password and update "
        "your security settings. For advanced account changes like closing accounts or major profile "
        "updates, I'll connect you with a specialist. Standard changes processed automatically.",
    ),
]


def triage_query(
    query: str,
    rng: Optional[np.random.Generator] = None,
    delay: float = TRIAGE_DELAY_SECONDS,
) -> TriageResult:
    """
    Canned assistant reply. No model is involved: after `delay` seconds one
    of the fixed responses is picked at random.
    """
    if not query or not query.strip():
        raise ValueError("Query must not be empty.")

    rng = rng or np.random.default_rng()
    start = time.monotonic()
    if delay > 0:
        time.sleep(delay)

    category, escalated, response = CANNED_RESPONSES[int(rng.integers(len(CANNED_RESPONSES)))]
    elapsed = time.monotonic() - start
    logger.info("Triage answered as %s (escalated=%s) in %.2fs", category, escalated, elapsed)

    return TriageResult(
        query=query.strip(),
        response=response,
        category=category,
        escalated=escalated,
        elapsed=elapsed,
    )
