"""Deterministic text metrics used to ground tone signatures."""

import re
from typing import List, Optional

from vaderSentiment.vaderSentiment import SentimentIntensityAnalyzer

from ..models.tone_signature import TextMetrics

FIRST_PERSON_PRONOUNS = {"i", "we", "me", "us", "my", "our"}
SECOND_PERSON_PRONOUNS = {"you", "your"}

# Polarity cut-offs for the sentiment class
POSITIVE_THRESHOLD = 0.2
NEGATIVE_THRESHOLD = -0.2

SENTENCE_SPLIT_RE = re.compile(r"[.!?]+|\n+")
# Hashtags and mentions are not words
WORD_RE = re.compile(r"(?<![#@\w])[A-Za-z0-9]+(?:['’][A-Za-z0-9]+)*")
EMOJI_RE = re.compile(
    "["
    "\U0001F300-\U0001F5FF"  # symbols & pictographs
    "\U0001F600-\U0001F64F"  # emoticons
    "\U0001F680-\U0001F6FF"  # transport & map
    "\U0001F900-\U0001F9FF"  # supplemental symbols
    "\U0001FA70-\U0001FAFF"  # symbols and pictographs extended-a
    "\U0001F1E6-\U0001F1FF"  # flags
    "\U00002600-\U000026FF"  # misc symbols
    "\U00002700-\U000027BF"  # dingbats
    "]"
)
HASHTAG_RE = re.compile(r"#\w+")
MENTION_RE = re.compile(r"@\w+")
CAPS_WORD_RE = re.compile(r"\b[A-Z]{2,}\b")
PUNCTUATION_RE = re.compile(r"[.,!?;:]")
WHITESPACE_RE = re.compile(r"\s+")

SILENT_SUFFIX_RE = re.compile(r"(?:[^aeiouy]es|ed|[^aeiouy]e)$")
VOWEL_GROUP_RE = re.compile(r"[aeiouy]+")


def count_syllables(word: str) -> int:
    """Heuristic syllable count for a single English word."""
    word = word.lower()
    if len(word) <= 3:
        return 1
    word = SILENT_SUFFIX_RE.sub("", word)
    word = re.sub(r"^y", "", word)
    return max(1, len(VOWEL_GROUP_RE.findall(word)))


class TextMetricsAnalyzer:
    """Extracts quantitative linguistic features from raw text."""

    def __init__(self, sentiment_analyzer: Optional[SentimentIntensityAnalyzer] = None):
        self.sentiment_analyzer = sentiment_analyzer or SentimentIntensityAnalyzer()

    def _sentences(self, text: str) -> List[str]:
        return [s.strip() for s in SENTENCE_SPLIT_RE.split(text) if s.strip()]

    def _words(self, text: str) -> List[str]:
        return WORD_RE.findall(text)

    def _readability(self, words: List[str], sentence_count: int) -> float:
        """Flesch reading ease. Not clamped to 0-100."""
        total_words = max(len(words), 1)
        total_sentences = max(sentence_count, 1)
        syllables = sum(count_syllables(w) for w in words)
        return 206.835 - 1.015 * (len(words) / total_sentences) - 84.6 * (syllables / total_words)

    def _polarity(self, sentences: List[str]) -> float:
        """Mean compound polarity over sentences, 0.0 for no sentences."""
        if not sentences:
            return 0.0
        scores = [self.sentiment_analyzer.polarity_scores(s)["compound"] for s in sentences]
        return sum(scores) / len(scores)

    def _sentiment(self, sentences: List[str]) -> str:
        polarity = self._polarity(sentences)
        if polarity > POSITIVE_THRESHOLD:
            return "Positive"
        if polarity < NEGATIVE_THRESHOLD:
            return "Negative"
        return "Neutral"

    def analyze(self, text: str) -> TextMetrics:
        """
        Compute metrics for a piece of text.

        Total: empty or punctuation-only text yields zero counts and a
        neutral sentiment. Passive voice is not detected and is always False.
        """
        sentences = self._sentences(text)
        words = self._words(text)
        lowered = {w.lower() for w in words}

        non_whitespace = len(WHITESPACE_RE.sub("", text))
        punctuation = len(PUNCTUATION_RE.findall(text))
        density = punctuation / non_whitespace if non_whitespace else 0.0
        avg_word_length = sum(len(w) for w in words) / len(words) if words else 0.0

        return TextMetrics(
            word_count=len(words),
            sentence_count=len(sentences),
            readability_score=round(self._readability(words, len(sentences)), 2),
            sentiment=self._sentiment(sentences),
            uses_first_person=bool(lowered & FIRST_PERSON_PRONOUNS),
            uses_second_person=bool(lowered & SECOND_PERSON_PRONOUNS),
            uses_passive_voice=False,
            has_hashtags=bool(HASHTAG_RE.search(text)),
            has_mentions=bool(MENTION_RE.search(text)),
            emoji_count=len(EMOJI_RE.findall(text)),
            exclamation_count=text.count("!"),
            question_count=text.count("?"),
            emphatic_capital_words=len(CAPS_WORD_RE.findall(text)),
            avg_word_length=round(avg_word_length, 2),
            punctuation_density=round(density, 3),
        )
