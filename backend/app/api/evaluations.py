"""Evaluation history endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, constr

from ..models.review import FeedbackCreate
from ..services.drift import DriftDetector
from ..services.evaluation_store import EvaluationStore
from ..services.insights import EvaluationInsights
from ..services.review_store import ReviewStore
from ..services.tone import ToneService
from .deps import (
    get_detector,
    get_evaluation_store,
    get_insights,
    get_review_store,
    get_tone_service,
)

router = APIRouter(prefix="/api/evaluations", tags=["evaluations"])


class EvaluateRequest(BaseModel):
    brand_id: str
    original_text: constr(min_length=1)
    rewritten_text: constr(min_length=1)


@router.post("/evaluate", status_code=201)
async def evaluate(
    request: EvaluateRequest,
    tone_service: ToneService = Depends(get_tone_service),
):
    """Evaluate a rewrite against the brand signature and record the result."""
    evaluation = await tone_service.evaluate_tone(
        brand_id=request.brand_id,
        original_text=request.original_text,
        rewritten_text=request.rewritten_text,
    )
    return evaluation.model_dump()


@router.get("/search")
async def search_evaluations(
    brand_id: Optional[str] = None,
    min_score: float = Query(0.0, ge=0.0, le=1.0),
    max_score: float = Query(1.0, ge=0.0, le=1.0),
    start_date: Optional[str] = Query(None, pattern=r"^\d{4}-\d{2}-\d{2}$"),
    end_date: Optional[str] = Query(None, pattern=r"^\d{4}-\d{2}-\d{2}$"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    evaluations: EvaluationStore = Depends(get_evaluation_store),
):
    """Search evaluations with filters and pagination."""
    result = await evaluations.search(
        brand_id=brand_id,
        min_score=min_score,
        max_score=max_score,
        start_date=start_date,
        end_date=end_date,
        page=page,
        limit=limit,
    )
    return result.model_dump()


@router.get("/stats")
async def score_stats(brand_id: str, insights: EvaluationInsights = Depends(get_insights)):
    return (await insights.score_stats(brand_id)).model_dump()


@router.get("/chart")
async def chart_data(brand_id: str, insights: EvaluationInsights = Depends(get_insights)):
    """Evaluation scores over time."""
    points = await insights.chart_data(brand_id)
    return [p.model_dump() for p in points]


@router.get("/insights")
async def trait_insights(brand_id: str, insights: EvaluationInsights = Depends(get_insights)):
    """Which qualitative labels go with the best scores."""
    return (await insights.trait_insights(brand_id)).model_dump()


@router.get("/drift")
async def drift_flags(brand_id: str, detector: DriftDetector = Depends(get_detector)):
    """Current low-alignment evaluations for a brand."""
    drifted = await detector.find_drifted(brand_id)
    return [e.model_dump() for e in drifted]


@router.post("/feedback", status_code=201)
async def submit_feedback(
    request: FeedbackCreate,
    reviews: ReviewStore = Depends(get_review_store),
):
    feedback = await reviews.record_feedback(request)
    return feedback.model_dump()


@router.get("/feedback/{evaluation_id}")
async def feedback_summary(
    evaluation_id: str,
    reviews: ReviewStore = Depends(get_review_store),
):
    return (await reviews.feedback_summary(evaluation_id)).model_dump()


@router.get("/rejections")
async def list_rejections(reviews: ReviewStore = Depends(get_review_store)):
    """All rejected signature corrections."""
    rejections = await reviews.list_rejections()
    return [r.model_dump() for r in rejections]
