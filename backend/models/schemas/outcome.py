"""Real-world outcomes recorded against a request fingerprint."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict


class OutcomeType(str, Enum):
    INTERVIEW = "interview"
    OFFER = "offer"
    SALARY = "salary"
    DAYS_TO_HIRE = "days_to_hire"


class OutcomeRecord(BaseModel):
    """Append-only; at most one per (fingerprint, outcome_type)."""
    model_config = ConfigDict(frozen=True)

    fingerprint: str
    outcome_type: OutcomeType
    value: float  # 1.0/0.0 for interview and offer
    recorded_at: datetime
