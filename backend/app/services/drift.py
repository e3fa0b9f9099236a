"""Drift detection over a brand's evaluation history."""

from typing import List

from ..models.evaluation import Evaluation
from .evaluation_store import EvaluationStore

DRIFT_ALIGNMENT = "Low"


class DriftDetector:
    """
    Flags evaluations whose tone alignment was judged Low.

    Every call is a fresh pass over the store. A single Low evaluation is
    enough to flag a brand; there is no trend analysis or minimum sample size.
    """

    def __init__(self, evaluations: EvaluationStore):
        self.evaluations = evaluations

    async def find_drifted(self, brand_id: str) -> List[Evaluation]:
        history = await self.evaluations.list_by_brand(brand_id)
        return [e for e in history if e.tone_alignment == DRIFT_ALIGNMENT]
