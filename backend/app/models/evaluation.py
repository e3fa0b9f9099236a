"""Evaluation models."""

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class QualitativeEvaluation(BaseModel):
    """Ordinal judgment of a rewrite, before numeric normalization."""

    fluency: str = "Unknown"  # High | Medium | Low
    authenticity: str = "Unknown"  # High | Medium | Low
    tone_alignment: str = "Unknown"  # High | Medium | Low
    readability: str = "Unknown"  # Excellent | Good | Poor
    strengths: List[str] = Field(default_factory=list)
    suggestions: List[str] = Field(default_factory=list)


class AccuracyPoints(BaseModel):
    """Points per dimension, 0-3."""

    fluency: int = 0
    authenticity: int = 0
    tone_alignment: int = 0
    readability: int = 0


class EvaluationCreate(QualitativeEvaluation):
    """An evaluation ready to be appended to a brand's history."""

    brand_id: str
    original_text: str
    rewritten_text: str
    accuracy_points: AccuracyPoints
    score: float
    latency_ms: Optional[int] = None


class Evaluation(EvaluationCreate):
    """Stored evaluation."""

    id: str
    created_at: datetime

    class Config:
        from_attributes = True


class RewriteResult(BaseModel):
    rewritten_text: str
    evaluation: Evaluation


class EvaluationPage(BaseModel):
    items: List[Evaluation]
    total: int
    page: int
    limit: int


class ScoreStats(BaseModel):
    brand_id: str
    count: int
    average: Optional[float] = None
    minimum: Optional[float] = None
    maximum: Optional[float] = None
    latest: Optional[float] = None


class ChartPoint(BaseModel):
    created_at: datetime
    score: float


class TraitInsights(BaseModel):
    """Mean score per label, for each qualitative dimension."""

    brand_id: str
    fluency: Dict[str, float] = Field(default_factory=dict)
    authenticity: Dict[str, float] = Field(default_factory=dict)
    tone_alignment: Dict[str, float] = Field(default_factory=dict)
    readability: Dict[str, float] = Field(default_factory=dict)
