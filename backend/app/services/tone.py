"""Tone signature analysis, rewriting and evaluation."""

import json
import logging
import time
import uuid
from typing import List, Optional

from ..errors import MalformedOracleResponse, MissingSignature, NoSignaturesStored
from ..models.evaluation import Evaluation, EvaluationCreate, QualitativeEvaluation, RewriteResult
from ..models.oracle import OracleErr
from ..models.tone_signature import BrandMatch, SignatureAnalysis, SignatureTraits, ToneSignature
from .evaluation_store import EvaluationStore
from .oracle import ToneOracle
from .scoring import ScoreNormalizer
from .signature_store import SignatureStore
from .text_metrics import TextMetricsAnalyzer

logger = logging.getLogger(__name__)

CLASSIFICATIONS = "Professional, Conversational, Empathetic, Inspirational, Assertive, Playful"

ANALYZE_PROMPT = """You are a branding expert and linguist.
Describe the tone-of-voice signature of the text below: tone, language style,
formality, forms of address and emotional appeal. Also classify the overall
tone as one of: {classifications}.

Measured text metrics:
{metrics}

Text:
\"\"\"{text}\"\"\"
"""

REWRITE_PROMPT = """Rewrite the following text using this tone-of-voice signature:

Tone: {tone}
Language Style: {language_style}
Formality: {formality}
Forms of Address: {forms_of_address}
Emotional Appeal: {emotional_appeal}

Original text:
\"\"\"{text}\"\"\"

Reply with the rewritten version only.
"""

EVALUATE_PROMPT = """You are an expert tone-of-voice evaluator.
Given a brand's tone signature and two versions of a message, judge how well
the rewritten text matches the brand's tone and its overall quality.

Use High, Medium or Low for fluency, authenticity and tone_alignment, and
Excellent, Good or Poor for readability. List strengths and concrete
suggestions for improvement.

Tone Signature:
{signature}

Original Text:
\"\"\"{original}\"\"\"

Rewritten Text:
\"\"\"{rewritten}\"\"\"
"""

DETECT_PROMPT = """Compare the tone-of-voice input with the stored brand profiles
and pick the brand_id that matches best, with a confidence of high, medium or low.

Input:
{signature}

Profiles:
{profiles}
"""

CORRECTION_PROMPT = """You maintain the tone-of-voice signature of brand "{brand_id}".
Recent rewrites produced with the current signature were judged to have LOW
tone alignment. Propose an updated signature that would fix these failures.

Current signature:
{signature}

Failing examples:
{examples}
"""


class ToneService:
    """Signature analysis and rewrite evaluation for brands."""

    def __init__(
        self,
        signatures: SignatureStore,
        evaluations: EvaluationStore,
        oracle: ToneOracle,
        analyzer: Optional[TextMetricsAnalyzer] = None,
        normalizer: Optional[ScoreNormalizer] = None,
    ):
        self.signatures = signatures
        self.evaluations = evaluations
        self.oracle = oracle
        self.analyzer = analyzer or TextMetricsAnalyzer()
        self.normalizer = normalizer or ScoreNormalizer()

    async def require_signature(self, brand_id: str) -> ToneSignature:
        signature = await self.signatures.get(brand_id)
        if signature is None:
            raise MissingSignature(brand_id)
        return signature

    async def analyze_text(self, text: str) -> SignatureAnalysis:
        """Measure the text and ask the oracle for its tone signature."""
        metrics = self.analyzer.analyze(text)
        prompt = ANALYZE_PROMPT.format(
            classifications=CLASSIFICATIONS,
            metrics=json.dumps(metrics.model_dump(), indent=2),
            text=text,
        )
        result = await self.oracle.complete(prompt, schema=SignatureTraits)
        if isinstance(result, OracleErr):
            raise MalformedOracleResponse(f"Could not read tone signature: {result.reason}")
        return SignatureAnalysis(**result.value.model_dump(), metrics=metrics)

    async def analyze_and_save(self, text: str, brand_id: Optional[str] = None) -> ToneSignature:
        analysis = await self.analyze_text(text)
        if not brand_id:
            brand_id = str(uuid.uuid4())
        signature = ToneSignature(brand_id=brand_id, **analysis.model_dump())
        return await self.signatures.upsert(brand_id, signature)

    async def list_brands(self) -> List[str]:
        return await self.signatures.list_brand_ids()

    async def rewrite_text(self, text: str, brand_id: str) -> str:
        signature = await self.require_signature(brand_id)
        prompt = REWRITE_PROMPT.format(text=text, **signature.traits().model_dump())
        result = await self.oracle.complete(prompt)
        if isinstance(result, OracleErr) or not result.value:
            raise MalformedOracleResponse("Oracle returned an empty rewrite")
        return result.value

    async def evaluate_tone(
        self,
        brand_id: str,
        original_text: str,
        rewritten_text: str,
        latency_ms: Optional[int] = None,
    ) -> Evaluation:
        """Judge a rewrite against the brand signature, score it and append it to history."""
        signature = await self.require_signature(brand_id)
        prompt = EVALUATE_PROMPT.format(
            signature=json.dumps(signature.traits().model_dump(), indent=2),
            original=original_text,
            rewritten=rewritten_text,
        )
        result = await self.oracle.complete(prompt, schema=QualitativeEvaluation)
        if isinstance(result, OracleErr):
            raise MalformedOracleResponse(f"Could not read evaluation: {result.reason}")

        qualitative = self.normalizer.canonicalize(result.value)
        score, points = self.normalizer.normalize(qualitative)
        evaluation = EvaluationCreate(
            **qualitative.model_dump(),
            brand_id=brand_id,
            original_text=original_text,
            rewritten_text=rewritten_text,
            accuracy_points=points,
            score=score,
            latency_ms=latency_ms,
        )
        stored = await self.evaluations.append(evaluation)
        logger.info(f"Evaluated rewrite for brand {brand_id}: score={score}")
        return stored

    async def rewrite_with_evaluation(self, text: str, brand_id: str) -> RewriteResult:
        started = time.perf_counter()
        rewritten = await self.rewrite_text(text, brand_id)
        latency_ms = int((time.perf_counter() - started) * 1000)
        evaluation = await self.evaluate_tone(brand_id, text, rewritten, latency_ms=latency_ms)
        return RewriteResult(rewritten_text=rewritten, evaluation=evaluation)

    async def detect_brand(self, text: str) -> BrandMatch:
        stored = await self.signatures.list_all()
        if not stored:
            raise NoSignaturesStored()

        analysis = await self.analyze_text(text)
        profiles = [{"brand_id": s.brand_id, **s.traits().model_dump()} for s in stored]
        prompt = DETECT_PROMPT.format(
            signature=json.dumps(analysis.model_dump(), indent=2),
            profiles=json.dumps(profiles, indent=2),
        )
        result = await self.oracle.complete(prompt, schema=BrandMatch)
        if isinstance(result, OracleErr):
            raise MalformedOracleResponse(f"Could not read brand match: {result.reason}")
        return result.value

    async def suggest_updated_signature(
        self, signature: ToneSignature, drifted: List[Evaluation]
    ) -> SignatureTraits:
        """Ask the oracle for a corrected signature given low-alignment examples."""
        examples = [
            {
                "original": e.original_text,
                "rewritten": e.rewritten_text,
                "suggestions": "; ".join(e.suggestions),
            }
            for e in drifted
        ]
        prompt = CORRECTION_PROMPT.format(
            brand_id=signature.brand_id,
            signature=json.dumps(signature.traits().model_dump(), indent=2),
            examples=json.dumps(examples, indent=2),
        )
        result = await self.oracle.complete(prompt, temperature=0.3, schema=SignatureTraits)
        if isinstance(result, OracleErr):
            raise MalformedOracleResponse(f"Could not read signature correction: {result.reason}")
        return result.value
