import logging
import os
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional


# Issue-type risk weights (exact, case-sensitive keys)
ISSUE_TYPE_WEIGHTS: Mapping[str, float] = MappingProxyType({
    "Insurance Claim Denial": 0.4,
    "Bill Payment Query": 0.1,
    "Coverage Verification": 0.2,
    "Prior Authorization": 0.3,
    "Copay Questions": 0.1,
    "Billing Statement Error": 0.35,
    "Insurance Network Query": 0.25,
    "Prescription Coverage": 0.2,
    "EOB Explanation": 0.15,
    "Payment Plan Setup": 0.1,
})

DEFAULT_ISSUE_WEIGHT = 0.1

ISSUE_TYPES: List[str] = list(ISSUE_TYPE_WEIGHTS)

# Normalisation ceilings
WAIT_TIME_CEILING = 600.0  # seconds
CHARGE_CEILING = 1000.0

WAIT_TIME_WEIGHT = 0.3
CHARGE_WEIGHT = 0.3

STATUS_BONUS: Mapping[str, float] = MappingProxyType({
    "Denied": 0.3,
    "Pending": 0.1,
})

CLAIM_STATUSES: List[str] = ["Pending", "Denied", "Approved", "Paid", "Submitted"]

# Classification thresholds (strict >)
HIGH_RISK_THRESHOLD = 0.7
MEDIUM_RISK_THRESHOLD = 0.4

PRIORITY_HIGH = "High"
PRIORITY_MEDIUM = "Medium"
PRIORITY_LOW = "Low"

ACTION_PRIORITY_ROUTING = "Priority Routing"
ACTION_OFFER_CALLBACK = "Offer Callback"
ACTION_CONTINUE_QUEUE = "Continue Queue"

PRIORITY_TO_ACTION: Dict[str, str] = {
    PRIORITY_HIGH: ACTION_PRIORITY_ROUTING,
    PRIORITY_MEDIUM: ACTION_OFFER_CALLBACK,
    PRIORITY_LOW: ACTION_CONTINUE_QUEUE,
}

# Queue statuses
STATUS_WAITING = "Waiting"
STATUS_IN_PROGRESS = "In Progress"
STATUS_COMPLETED = "Completed"

# Live queue simulation
TICK_INTERVAL_SECONDS = 5
TICK_WAIT_SECONDS = 15
NEW_CALL_PROBABILITY = 0.3
MAX_QUEUE_SIZE = 20
INITIAL_QUEUE_SIZE = 12

# Operator actions
CALLBACK_DELAY_MINUTES = 15
EMERGENCY_RISK_THRESHOLD = 0.8
SMS_DEFLECTION_MIN_WAIT = 180
AGENT_POOL_SIZE = 50
EMERGENCY_AGENT_POOL_SIZE = 5

# Dashboard metrics
ABANDONMENT_RISK_THRESHOLD = 0.6
ACTIVE_AGENTS = 24
CALLS_ANSWERED = 156
CALLS_ABANDONED = 8

# Canned AI triage
TRIAGE_DELAY_SECONDS = 2.0

# Script artifacts
DATA_PATH = "data/calls.csv"
ARTIFACT_DIR = "artifacts"

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: Optional[str] = None) -> None:
    level = level or os.environ.get("CALLRISK_LOG_LEVEL", "INFO")
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
