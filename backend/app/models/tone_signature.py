"""Tone signature and text metrics models."""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict


class TextMetrics(BaseModel):
    """Quantitative features of a piece of text."""

    model_config = ConfigDict(frozen=True)

    word_count: int = 0
    sentence_count: int = 0
    readability_score: float = 0.0
    sentiment: Literal["Positive", "Neutral", "Negative"] = "Neutral"
    uses_first_person: bool = False
    uses_second_person: bool = False
    uses_passive_voice: bool = False
    has_hashtags: bool = False
    has_mentions: bool = False
    emoji_count: int = 0
    exclamation_count: int = 0
    question_count: int = 0
    emphatic_capital_words: int = 0
    avg_word_length: float = 0.0
    punctuation_density: float = 0.0


class SignatureTraits(BaseModel):
    """Qualitative tone-of-voice traits of a brand."""

    tone: str = "Unknown"
    language_style: str = "Unknown"
    formality: str = "Unknown"
    forms_of_address: str = "Unknown"
    emotional_appeal: str = "Unknown"
    classification: Optional[str] = "Unclassified"


class ToneSignature(SignatureTraits):
    """A brand's stored tone fingerprint."""

    brand_id: str
    metrics: TextMetrics = TextMetrics()
    id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

    def traits(self) -> SignatureTraits:
        return SignatureTraits(**self.model_dump(include=set(SignatureTraits.model_fields)))


class SignatureAnalysis(SignatureTraits):
    """Unsaved analysis result: traits plus the metrics they were derived from."""

    metrics: TextMetrics


class BrandMatch(BaseModel):
    """Best matching stored brand for a piece of text."""

    match: str
    confidence: str = "low"  # high | medium | low
