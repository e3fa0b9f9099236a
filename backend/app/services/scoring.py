"""Normalization of qualitative evaluations into a numeric score."""

from typing import Dict, Tuple

from ..models.evaluation import AccuracyPoints, QualitativeEvaluation

LEVEL_POINTS = {"High": 3, "Medium": 2, "Low": 1}
READABILITY_POINTS = {"Excellent": 3, "Good": 2, "Poor": 1}

WEIGHTS: Dict[str, float] = {
    "tone_alignment": 2.0,
    "fluency": 1.5,
    "authenticity": 1.0,
    "readability": 1.0,
}
MAX_RAW_SCORE = 3 * sum(WEIGHTS.values())  # 16.5

SUGGESTION_PENALTY = 0.5
MAX_SUGGESTION_PENALTY = 3.0


def canonical_label(label: str) -> str:
    """`" high "` -> `"High"`; empty labels become `"Unknown"`."""
    label = (label or "").strip()
    return label.title() if label else "Unknown"


def _points(label: str, table: Dict[str, int]) -> int:
    """Unknown or missing labels are worth 0 points."""
    return table.get(canonical_label(label), 0)


class ScoreNormalizer:
    """Turns ordinal labels into per-dimension points and a 0-1 score."""

    def canonicalize(self, evaluation: QualitativeEvaluation) -> QualitativeEvaluation:
        return evaluation.model_copy(update={
            "fluency": canonical_label(evaluation.fluency),
            "authenticity": canonical_label(evaluation.authenticity),
            "tone_alignment": canonical_label(evaluation.tone_alignment),
            "readability": canonical_label(evaluation.readability),
        })

    def accuracy_points(self, evaluation: QualitativeEvaluation) -> AccuracyPoints:
        return AccuracyPoints(
            fluency=_points(evaluation.fluency, LEVEL_POINTS),
            authenticity=_points(evaluation.authenticity, LEVEL_POINTS),
            tone_alignment=_points(evaluation.tone_alignment, LEVEL_POINTS),
            readability=_points(evaluation.readability, READABILITY_POINTS),
        )

    def penalty(self, evaluation: QualitativeEvaluation) -> float:
        """Each suggestion costs half a point, capped at three points."""
        return min(SUGGESTION_PENALTY * len(evaluation.suggestions), MAX_SUGGESTION_PENALTY)

    def normalize(self, evaluation: QualitativeEvaluation) -> Tuple[float, AccuracyPoints]:
        points = self.accuracy_points(evaluation)
        raw = sum(getattr(points, dimension) * weight for dimension, weight in WEIGHTS.items())
        score = max(raw - self.penalty(evaluation), 0.0) / MAX_RAW_SCORE
        return round(score, 2), points
