"""Domain models."""

from .tone_signature import TextMetrics, SignatureTraits, ToneSignature, SignatureAnalysis, BrandMatch
from .evaluation import QualitativeEvaluation, AccuracyPoints, Evaluation, EvaluationCreate, EvaluationPage
from .review import Rejection, Feedback, FeedbackCreate, FeedbackSummary
from .oracle import OracleOk, OracleErr, OracleResult
from .retune import SweepReport, SweepState
