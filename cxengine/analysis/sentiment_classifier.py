"""
Sentiment Classifier (Deterministic)
=====================================

Maps one feedback text to a SentimentResult using static keyword weights.
No external service, no model: fast, explainable, reproducible.

Usage:
    result = classify_sentiment("Delivery was late and the box was damaged")
    result.sentiment   # Sentiment.NEGATIVE
    result.key_phrases # ("late", "damaged")
"""

import logging
import math
import re
from typing import Dict, List, Optional

from .analysis_models import Sentiment, SentimentResult
from .lexicon import EMOTIONS, LEXICON, Lexicon

logger = logging.getLogger(__name__)


MAX_KEY_PHRASES = 5
EMOTION_INCREMENT = 0.2

# score > +0.1 -> positive, score < -0.1 -> negative
POSITIVE_THRESHOLD = 0.1
NEGATIVE_THRESHOLD = -0.1

_NON_WORD_OR_SPACE = re.compile(r"[^\w\s]")
_NON_WORD = re.compile(r"[^\w]")


def tokenize(text: str) -> List[str]:
    """Replace punctuation by spaces and split on whitespace."""
    return _NON_WORD_OR_SPACE.sub(" ", text).split()


def clean_word(word: str) -> str:
    """Lowercase and strip every non-word character."""
    return _NON_WORD.sub("", word.lower())


def sentiment_for_score(score: float) -> Sentiment:
    if score > POSITIVE_THRESHOLD:
        return Sentiment.POSITIVE
    if score < NEGATIVE_THRESHOLD:
        return Sentiment.NEGATIVE
    return Sentiment.NEUTRAL


def clamp(value: float, low: float = -1.0, high: float = 1.0) -> float:
    return max(low, min(high, value))


def round_half_up(value: float, digits: int = 0) -> float:
    """
    Round with ties going up (toward +inf): 0.125 -> 0.13, 22.5 -> 23, -0.125 -> -0.12.

    Python's round() sends ties to the even neighbour, which would report
    0.125 as 0.12.
    """
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


class SentimentClassifier:
    """
    Keyword-weighted sentiment and emotion scorer.

    Holds no state besides the (read-only) lexicon, so one instance can be
    shared across threads.
    """

    def __init__(self, lexicon: Optional[Lexicon] = None, max_key_phrases: int = MAX_KEY_PHRASES):
        self.lexicon = lexicon or LEXICON
        self.max_key_phrases = max_key_phrases

    def classify(self, text: Optional[str]) -> SentimentResult:
        """
        Classify one text.

        Score = (sum(positive weights) - sum(|negative weights|)) / non-stop-word count,
        clamped to [-1, 1] and rounded to 2 decimals. Empty input is neutral.
        """
        if not text or not text.strip():
            return SentimentResult(sentiment=Sentiment.NEUTRAL, score=0.0)

        lex = self.lexicon
        words = tokenize(text.lower())

        positive_score = 0.0
        negative_score = 0.0
        key_phrases: List[str] = []
        emotion_scores: Dict[str, float] = {e: 0.0 for e in EMOTIONS}
        total_words = 0

        for word in words:
            clean = clean_word(word)
            if clean in lex.stop_words:
                continue
            total_words += 1
            if len(clean) < 2:
                continue

            weight = lex.positive_keywords.get(clean)
            if weight:
                positive_score += weight
                if len(key_phrases) < self.max_key_phrases:
                    key_phrases.append(word)

            weight = lex.negative_keywords.get(clean)
            if weight:
                negative_score += abs(weight)
                if len(key_phrases) < self.max_key_phrases:
                    key_phrases.append(word)

            for emotion, keywords in lex.emotion_keywords.items():
                if clean in keywords:
                    emotion_scores[emotion] += EMOTION_INCREMENT

        if total_words > 0:
            norm_positive = positive_score / total_words
            norm_negative = negative_score / total_words
        else:
            norm_positive = norm_negative = 0.0

        # Classify on the rounded score so the reported score and label always agree
        score = round_half_up(clamp(norm_positive - norm_negative), 2)

        return SentimentResult(
            sentiment=sentiment_for_score(score),
            score=score,
            key_phrases=tuple(key_phrases),
            emotions=normalize_emotions(emotion_scores),
        )


def normalize_emotions(raw: Dict[str, float]) -> Dict[str, float]:
    """Scale so the dominant emotion reports 1.0. All-zero input yields an empty map."""
    peak = max(raw.values(), default=0.0)
    if peak <= 0:
        return {}
    return {emotion: min(1.0, value / peak) for emotion, value in raw.items()}


_default_classifier = SentimentClassifier()


def classify_sentiment(text: Optional[str], lexicon: Optional[Lexicon] = None) -> SentimentResult:
    """Classify one text with the default lexicon (or the one given)."""
    if lexicon is None:
        return _default_classifier.classify(text)
    return SentimentClassifier(lexicon).classify(text)
