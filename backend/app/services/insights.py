"""Score statistics and trends over a brand's evaluation history."""

from collections import defaultdict
from typing import Dict, List

from ..models.evaluation import ChartPoint, Evaluation, ScoreStats, TraitInsights
from .evaluation_store import EvaluationStore

DIMENSIONS = ("fluency", "authenticity", "tone_alignment", "readability")


class EvaluationInsights:
    """Read-only aggregations over stored evaluations."""

    def __init__(self, evaluations: EvaluationStore):
        self.evaluations = evaluations

    async def score_stats(self, brand_id: str) -> ScoreStats:
        history = await self.evaluations.list_by_brand(brand_id)
        scores = [e.score for e in history]
        if not scores:
            return ScoreStats(brand_id=brand_id, count=0)
        return ScoreStats(
            brand_id=brand_id,
            count=len(scores),
            average=round(sum(scores) / len(scores), 2),
            minimum=min(scores),
            maximum=max(scores),
            latest=scores[-1],
        )

    async def chart_data(self, brand_id: str) -> List[ChartPoint]:
        history = await self.evaluations.list_by_brand(brand_id)
        return [ChartPoint(created_at=e.created_at, score=e.score) for e in history]

    async def trait_insights(self, brand_id: str) -> TraitInsights:
        """Mean score for every label seen on each qualitative dimension."""
        history = await self.evaluations.list_by_brand(brand_id)
        return TraitInsights(
            brand_id=brand_id,
            **{dimension: _mean_by_label(history, dimension) for dimension in DIMENSIONS},
        )


def _mean_by_label(history: List[Evaluation], dimension: str) -> Dict[str, float]:
    buckets: Dict[str, List[float]] = defaultdict(list)
    for evaluation in history:
        buckets[getattr(evaluation, dimension)].append(evaluation.score)
    return {label: round(sum(s) / len(s), 2) for label, s in buckets.items()}
