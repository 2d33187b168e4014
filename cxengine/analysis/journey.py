"""
Customer Journey & Touchpoint Satisfaction
==========================================

Maps feedback onto customer-journey stages by keyword and folds the
classifier's results into per-stage and per-touchpoint satisfaction.
Inputs are already fetched by the caller; feedback without a sentiment
result still counts towards `feedback_count`.

Usage:
    stage = map_feedback_to_stage("The package arrived broken")   # "delivery"
    stages = analyze_journey([(text, classify_sentiment(text)) for text in texts])
    touchpoints = analyze_touchpoints([("checkout", result), ...], ["website", "checkout"])
"""

import logging
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .aggregation import SentimentLike, unpack_sentiment
from .analysis_models import Sentiment, StageAnalysis, TouchpointSatisfaction
from .sentiment_classifier import round_half_up

logger = logging.getLogger(__name__)


# Order matters: the first stage with a matching keyword wins.
JOURNEY_STAGES: Tuple[str, ...] = (
    "awareness", "consideration", "purchase", "delivery", "usage", "support", "retention",
)

STAGE_KEYWORDS: Dict[str, Tuple[str, ...]] = {
    "awareness": ("discover", "find", "learn", "heard", "advertisement", "ad", "marketing", "aware"),
    "consideration": ("compare", "research", "looking", "considering", "evaluate", "option", "choice"),
    "purchase": ("buy", "purchase", "order", "checkout", "payment", "paid", "transaction", "bought"),
    "delivery": ("delivery", "shipping", "arrived", "received", "package", "deliver", "ship"),
    "usage": ("use", "using", "experience", "product", "service", "app", "software", "platform"),
    "support": (
        "support", "help", "assistance", "service", "customer service", "contact", "issue", "problem",
    ),
    "retention": ("return", "again", "repeat", "loyal", "recommend", "refer", "come back"),
}

POINT_THRESHOLD = 0.5           # |score| above this makes a pain / satisfaction point
MAX_POINTS = 5
SNIPPET_LENGTH = 100

PAIN_POINT_DISSATISFACTION = 0.6
PAIN_POINT_MIN_NEGATIVES = 3


def map_feedback_to_stage(content: str, stages: Sequence[str] = JOURNEY_STAGES) -> Optional[str]:
    """
    First stage whose keywords (or own name) occur in the content, else None.

    Plain substring matching: "ad" also hits "bad", "service" resolves to
    usage before support.
    """
    text = (content or "").lower()
    if not text:
        return None
    for stage in stages:
        name = stage.lower()
        if any(k in text for k in STAGE_KEYWORDS.get(name, ())):
            return stage
        if name in text:
            return stage
    return None


class _SatisfactionTally:
    """Running sums for one stage or touchpoint."""

    def __init__(self):
        self.feedback_count = 0
        self.positive_count = 0
        self.negative_count = 0
        self.neutral_count = 0
        self.positive_total = 0.0
        self.negative_total = 0.0

    def add(self, result: Optional[SentimentLike]) -> Tuple[Optional[str], float]:
        self.feedback_count += 1
        if result is None:
            return None, 0.0

        sentiment, score = unpack_sentiment(result)
        if sentiment == Sentiment.POSITIVE.value:
            self.positive_total += score
            self.positive_count += 1
        elif sentiment == Sentiment.NEGATIVE.value:
            self.negative_total += abs(score)
            self.negative_count += 1
        else:
            self.neutral_count += 1
        return sentiment, score

    @property
    def satisfaction(self) -> float:
        if self.positive_count == 0:
            return 0.0
        return round_half_up(self.positive_total / self.positive_count, 2)

    @property
    def dissatisfaction(self) -> float:
        if self.negative_count == 0:
            return 0.0
        return round_half_up(self.negative_total / self.negative_count, 2)


def analyze_journey(
    feedback: Iterable[Tuple[str, Optional[SentimentLike]]],
    stages: Sequence[str] = JOURNEY_STAGES,
) -> List[StageAnalysis]:
    """
    Per-stage satisfaction over (content, sentiment) pairs.

    Returns one StageAnalysis per stage, in stage order, including stages no
    feedback mapped to. Unmapped feedback is ignored.
    """
    tallies = {stage: _SatisfactionTally() for stage in stages}
    pain_points: Dict[str, List[str]] = {stage: [] for stage in stages}
    satisfaction_points: Dict[str, List[str]] = {stage: [] for stage in stages}
    unmapped = 0

    for content, result in feedback:
        stage = map_feedback_to_stage(content, stages)
        if stage is None:
            unmapped += 1
            continue

        sentiment, score = tallies[stage].add(result)
        snippet = (content or "")[:SNIPPET_LENGTH]
        if sentiment == Sentiment.POSITIVE.value and score > POINT_THRESHOLD:
            satisfaction_points[stage].append(snippet)
        elif sentiment == Sentiment.NEGATIVE.value and score < -POINT_THRESHOLD:
            pain_points[stage].append(snippet)

    logger.debug("Journey analysis: %d stages, %d unmapped feedback", len(stages), unmapped)

    return [
        StageAnalysis(
            stage=stage,
            satisfaction_score=tallies[stage].satisfaction,
            dissatisfaction_score=tallies[stage].dissatisfaction,
            feedback_count=tallies[stage].feedback_count,
            pain_points=tuple(pain_points[stage][:MAX_POINTS]),
            satisfaction_points=tuple(satisfaction_points[stage][:MAX_POINTS]),
        )
        for stage in stages
    ]


def analyze_touchpoints(
    feedback: Iterable[Tuple[str, Optional[SentimentLike]]],
    touchpoints: Sequence[str],
) -> List[TouchpointSatisfaction]:
    """
    Satisfaction per touchpoint over (touchpoint, sentiment) pairs.

    A touchpoint is a pain point when its dissatisfaction exceeds 0.6 with at
    least 3 negative feedback items. Feedback for touchpoints outside
    `touchpoints` is ignored.
    """
    tallies = {touchpoint: _SatisfactionTally() for touchpoint in touchpoints}
    for touchpoint, result in feedback:
        tally = tallies.get(touchpoint)
        if tally is not None:
            tally.add(result)

    results = []
    for touchpoint in touchpoints:
        tally = tallies[touchpoint]
        dissatisfaction = tally.dissatisfaction
        results.append(TouchpointSatisfaction(
            touchpoint=touchpoint,
            satisfaction_score=tally.satisfaction,
            dissatisfaction_score=dissatisfaction,
            feedback_count=tally.feedback_count,
            positive_count=tally.positive_count,
            negative_count=tally.negative_count,
            neutral_count=tally.neutral_count,
            is_pain_point=(
                dissatisfaction > PAIN_POINT_DISSATISFACTION
                and tally.negative_count >= PAIN_POINT_MIN_NEGATIVES
            ),
        ))
    return results
