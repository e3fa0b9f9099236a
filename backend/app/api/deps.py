"""Dependency providers for the HTTP layer."""

from functools import lru_cache

from fastapi import Depends, Request
from supabase import Client

from ..config import settings
from ..services.drift import DriftDetector
from ..services.evaluation_store import EvaluationStore
from ..services.insights import EvaluationInsights
from ..services.notifier import SlackNotifier
from ..services.oracle import ToneOracle
from ..services.retune import RetuneScheduler, SweepSupervisor
from ..services.review_store import ReviewStore
from ..services.signature_store import SignatureStore
from ..services.supabase import get_supabase_client
from ..services.tone import ToneService


def get_db() -> Client:
    return get_supabase_client()


@lru_cache(maxsize=1)
def get_oracle() -> ToneOracle:
    return ToneOracle()


def get_signature_store(db: Client = Depends(get_db)) -> SignatureStore:
    return SignatureStore(db)


def get_evaluation_store(db: Client = Depends(get_db)) -> EvaluationStore:
    return EvaluationStore(db)


def get_review_store(db: Client = Depends(get_db)) -> ReviewStore:
    return ReviewStore(db)


def get_tone_service(
    signatures: SignatureStore = Depends(get_signature_store),
    evaluations: EvaluationStore = Depends(get_evaluation_store),
    oracle: ToneOracle = Depends(get_oracle),
) -> ToneService:
    return ToneService(signatures, evaluations, oracle)


def get_insights(evaluations: EvaluationStore = Depends(get_evaluation_store)) -> EvaluationInsights:
    return EvaluationInsights(evaluations)


def get_detector(evaluations: EvaluationStore = Depends(get_evaluation_store)) -> DriftDetector:
    return DriftDetector(evaluations)


def get_notifier(
    signatures: SignatureStore = Depends(get_signature_store),
    reviews: ReviewStore = Depends(get_review_store),
) -> SlackNotifier:
    return SlackNotifier(signatures, reviews)


def build_supervisor(
    signatures: SignatureStore,
    evaluations: EvaluationStore,
    tone_service: ToneService,
    notifier: SlackNotifier,
) -> SweepSupervisor:
    scheduler = RetuneScheduler(
        signatures=signatures,
        detector=DriftDetector(evaluations),
        tone_service=tone_service,
        notifier=notifier,
        max_concurrency=settings.retune_max_concurrency,
    )
    return SweepSupervisor(scheduler)


def get_supervisor(
    request: Request,
    signatures: SignatureStore = Depends(get_signature_store),
    evaluations: EvaluationStore = Depends(get_evaluation_store),
    tone_service: ToneService = Depends(get_tone_service),
    notifier: SlackNotifier = Depends(get_notifier),
) -> SweepSupervisor:
    """The app-wide supervisor, shared with the background ticker."""
    supervisor = getattr(request.app.state, "supervisor", None)
    if supervisor is None:
        supervisor = build_supervisor(signatures, evaluations, tone_service, notifier)
        request.app.state.supervisor = supervisor
    return supervisor
