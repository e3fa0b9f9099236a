"""Retune sweep models."""

from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class SweepState(str, Enum):
    IDLE = "idle"
    SCANNING_BRANDS = "scanning_brands"
    NO_DRIFT = "no_drift"
    DRIFT_FOUND = "drift_found"
    REQUESTING_CORRECTION = "requesting_correction"
    NOTIFYING = "notifying"


class SweepReport(BaseModel):
    """Outcome of one pass over all known brands."""

    brands_scanned: int = 0
    drifted_brands: List[str] = Field(default_factory=list)
    proposals_sent: List[str] = Field(default_factory=list)
    failures: Dict[str, str] = Field(default_factory=dict)
    started_at: datetime
    finished_at: Optional[datetime] = None
