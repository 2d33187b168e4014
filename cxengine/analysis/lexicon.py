"""
Sentiment Lexicon
=================

Static keyword tables used by the sentiment classifier and the root-cause
extractor. Loaded once at import and never mutated.

Tables:
    POSITIVE_KEYWORDS  - word -> weight (positive magnitude)
    NEGATIVE_KEYWORDS  - word -> weight (positive magnitude, sign applied by the classifier)
    EMOTION_KEYWORDS   - one of six emotions -> keywords
    STOP_WORDS         - words ignored by every scan
    CATEGORY_KEYWORDS  - root-cause category -> keywords (checked in order)
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, FrozenSet, Mapping, Tuple


EMOTIONS: Tuple[str, ...] = ("joy", "sadness", "anger", "fear", "surprise", "disgust")


# =============================================================================
# POLARITY WEIGHTS
# =============================================================================
# 1.0 = strongly polar, 0.5 = mild. Weights are magnitudes only.

_POSITIVE: Dict[str, float] = {
    # strong
    "excellent": 1.0, "amazing": 1.0, "outstanding": 1.0, "fantastic": 1.0,
    "perfect": 1.0, "wonderful": 1.0, "superb": 1.0, "exceptional": 1.0,
    "brilliant": 1.0, "awesome": 1.0, "love": 1.0, "loved": 1.0,
    "best": 0.9, "delighted": 0.9, "impressive": 0.9, "impressed": 0.9,
    # moderate
    "great": 0.8, "happy": 0.8, "pleased": 0.8, "satisfied": 0.8,
    "recommend": 0.8, "recommended": 0.8, "friendly": 0.7, "helpful": 0.7,
    "reliable": 0.7, "efficient": 0.7, "quick": 0.6, "fast": 0.6,
    "easy": 0.6, "smooth": 0.6, "professional": 0.7, "courteous": 0.7,
    "responsive": 0.7, "convenient": 0.6, "comfortable": 0.6, "quality": 0.5,
    "affordable": 0.6, "worth": 0.6, "thank": 0.6, "thanks": 0.6,
    "appreciate": 0.7, "enjoyed": 0.8, "enjoy": 0.7, "like": 0.5,
    # mild
    "good": 0.6, "nice": 0.6, "fine": 0.4, "okay": 0.3, "decent": 0.4,
    "solid": 0.5, "clean": 0.5, "fair": 0.4, "resolved": 0.6, "fixed": 0.5,
    "accurate": 0.6, "intuitive": 0.6, "polite": 0.6, "prompt": 0.6,
}

_NEGATIVE: Dict[str, float] = {
    # strong
    "terrible": 1.0, "horrible": 1.0, "awful": 1.0, "worst": 1.0,
    "hate": 1.0, "hated": 1.0, "disgusting": 1.0, "useless": 0.9,
    "unacceptable": 1.0, "pathetic": 1.0, "scam": 1.0, "fraud": 1.0,
    "furious": 1.0, "atrocious": 1.0,
    # moderate
    "bad": 0.8, "poor": 0.8, "broken": 0.8, "defective": 0.8,
    "damaged": 0.8, "disappointed": 0.8, "disappointing": 0.8, "angry": 0.8,
    "rude": 0.8, "unhelpful": 0.8, "faulty": 0.8, "failed": 0.7,
    "fail": 0.7, "failure": 0.7, "wrong": 0.6, "missing": 0.6,
    "late": 0.6, "delayed": 0.6, "delay": 0.6, "slow": 0.6,
    "expensive": 0.5, "overpriced": 0.7, "frustrating": 0.8, "frustrated": 0.8,
    "annoying": 0.7, "annoyed": 0.7, "complaint": 0.6, "problem": 0.5,
    "problems": 0.5, "issue": 0.4, "issues": 0.4, "crash": 0.7,
    "crashes": 0.7, "crashed": 0.7, "bug": 0.5, "buggy": 0.7,
    "freeze": 0.6, "freezes": 0.6, "error": 0.5, "lost": 0.6,
    "refund": 0.5, "cancel": 0.5, "cancelled": 0.5, "never": 0.4,
    "unresponsive": 0.8, "ignored": 0.7, "waste": 0.8, "cheap": 0.4,
    "confusing": 0.6, "difficult": 0.5, "unhappy": 0.8, "upset": 0.7,
    "worse": 0.8, "dirty": 0.7, "incorrect": 0.6, "unreliable": 0.8,
    "misleading": 0.8, "scared": 0.6, "worried": 0.5,
}


# =============================================================================
# EMOTIONS
# =============================================================================

_EMOTIONS: Dict[str, Tuple[str, ...]] = {
    "joy": (
        "happy", "delighted", "love", "loved", "enjoy", "enjoyed", "pleased",
        "glad", "excited", "wonderful", "amazing", "great", "fantastic",
        "thrilled", "satisfied",
    ),
    "sadness": (
        "sad", "disappointed", "disappointing", "unhappy", "sorry", "regret",
        "miss", "lost", "unfortunately", "depressed", "heartbroken",
    ),
    "anger": (
        "angry", "furious", "mad", "annoyed", "annoying", "frustrated",
        "frustrating", "outraged", "hate", "hated", "rude", "unacceptable",
        "ridiculous", "upset",
    ),
    "fear": (
        "afraid", "scared", "worried", "anxious", "nervous", "concerned",
        "unsafe", "risk", "danger", "dangerous", "fear",
    ),
    "surprise": (
        "surprised", "unexpected", "shocked", "astonished", "amazed",
        "wow", "suddenly", "unbelievable", "sudden",
    ),
    "disgust": (
        "disgusting", "gross", "nasty", "dirty", "filthy", "awful",
        "horrible", "terrible", "revolting", "sick",
    ),
}


# =============================================================================
# STOP WORDS
# =============================================================================
# Negations ("not", "no") are kept out of this set so bigrams like
# "not working" survive root-cause mining.

_STOP_WORDS = {
    "a", "an", "the", "and", "or", "but", "if", "then", "else", "so",
    "of", "at", "by", "for", "with", "about", "against", "between", "into",
    "through", "during", "before", "after", "above", "below", "to", "from",
    "up", "down", "in", "out", "on", "off", "over", "under", "again",
    "further", "once", "here", "there", "when", "where", "why", "how",
    "all", "any", "both", "each", "few", "more", "most", "other", "some",
    "such", "only", "own", "same", "than", "too", "very", "can", "will",
    "just", "should", "now", "is", "are", "was", "were", "be", "been",
    "being", "have", "has", "had", "having", "do", "does", "did", "doing",
    "would", "could", "i", "me", "my", "myself", "we", "our", "ours",
    "you", "your", "yours", "he", "him", "his", "she", "her", "hers",
    "it", "its", "they", "them", "their", "what", "which", "who", "whom",
    "this", "that", "these", "those", "am", "as", "until", "while",
    "also", "s", "t", "get", "got", "im", "ive", "dont", "didnt",
}


# =============================================================================
# ROOT-CAUSE CATEGORIES
# =============================================================================
# Order matters: the first category with a matching keyword wins.

_CATEGORIES: Dict[str, Tuple[str, ...]] = {
    "product": (
        "product", "item", "quality", "defective", "broken", "damaged",
        "missing", "wrong", "faulty", "malfunction", "defect", "flaw",
        "imperfection",
    ),
    "service": (
        "service", "staff", "employee", "representative", "personnel", "team",
        "worker", "associate", "agent",
    ),
    "support": (
        "support", "help", "customer service", "assistance", "response",
        "reply", "answer", "resolve", "resolution", "ticket", "query",
    ),
    "pricing": (
        "price", "cost", "expensive", "cheap", "affordable", "value", "money",
        "payment", "fee", "charge", "billing", "invoice", "pricing",
        "overpriced",
    ),
    "delivery": (
        "delivery", "shipping", "arrived", "late", "fast", "slow", "package",
        "order", "shipment", "dispatch", "logistics", "transport", "transit",
    ),
    "website": (
        "website", "site", "web", "online", "page", "browser", "internet",
        "url", "link", "navigation", "interface", "ui", "ux",
    ),
    "app": (
        "app", "application", "mobile", "ios", "android", "download",
        "install", "update", "version", "crash", "freeze", "bug",
    ),
    "communication": (
        "email", "phone", "call", "message", "contact", "reach", "respond",
        "reply", "notification", "alert",
    ),
}


@dataclass(frozen=True)
class Lexicon:
    """Read-only bundle of every keyword table the engine consults."""
    positive_keywords: Mapping[str, float]
    negative_keywords: Mapping[str, float]
    emotion_keywords: Mapping[str, Tuple[str, ...]]
    stop_words: FrozenSet[str]
    category_keywords: Mapping[str, Tuple[str, ...]]

    @classmethod
    def build(
        cls,
        positive: Dict[str, float],
        negative: Dict[str, float],
        emotions: Dict[str, Tuple[str, ...]],
        stop_words,
        categories: Dict[str, Tuple[str, ...]],
    ) -> "Lexicon":
        """Freeze plain dicts into a Lexicon."""
        return cls(
            positive_keywords=MappingProxyType(dict(positive)),
            negative_keywords=MappingProxyType(dict(negative)),
            emotion_keywords=MappingProxyType({e: tuple(emotions.get(e, ())) for e in EMOTIONS}),
            stop_words=frozenset(stop_words),
            category_keywords=MappingProxyType({c: tuple(k) for c, k in categories.items()}),
        )


LEXICON = Lexicon.build(_POSITIVE, _NEGATIVE, _EMOTIONS, _STOP_WORDS, _CATEGORIES)

POSITIVE_KEYWORDS = LEXICON.positive_keywords
NEGATIVE_KEYWORDS = LEXICON.negative_keywords
EMOTION_KEYWORDS = LEXICON.emotion_keywords
STOP_WORDS = LEXICON.stop_words
CATEGORY_KEYWORDS = LEXICON.category_keywords
