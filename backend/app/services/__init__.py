"""Service layer."""

from .drift import DriftDetector
from .evaluation_store import EvaluationStore
from .insights import EvaluationInsights
from .notifier import SlackNotifier
from .oracle import ToneOracle
from .retune import RetuneScheduler, SweepSupervisor
from .review_store import ReviewStore
from .scoring import ScoreNormalizer
from .signature_store import SignatureStore
from .text_metrics import TextMetricsAnalyzer
from .tone import ToneService
