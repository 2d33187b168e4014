"""
Sentiment & NPS Aggregation
===========================

Folds classifier outputs and survey scores into summary statistics.
Inputs are already fetched and filtered (company, date range) by the caller.

Usage:
    stats = compute_sentiment_stats(results)
    nps = compute_nps([9, 10, 6, 8])
    trend = compute_nps_trend([(date(2024, 3, 4), 9), ...], period="week")
"""

import logging
import math
from datetime import date, datetime, timedelta
from typing import Dict, Iterable, List, Mapping, Tuple, Union

from .analysis_models import NPSStats, NPSTrendPoint, Sentiment, SentimentResult, SentimentStats
from .sentiment_classifier import round_half_up

logger = logging.getLogger(__name__)


PROMOTER_MIN = 9
DETRACTOR_MAX = 6
NPS_MIN_SCORE = 0
NPS_MAX_SCORE = 10

TREND_PERIODS = ("day", "week", "month")


class CXEngineError(Exception):
    """Base exception for invalid engine inputs."""


class InvalidScoreError(CXEngineError, ValueError):
    """NPS score that is not a whole number in 0-10."""

    def __init__(self, score):
        self.score = score
        super().__init__(
            f"NPS score must be a whole number between {NPS_MIN_SCORE} and {NPS_MAX_SCORE}, got: {score}"
        )


class InvalidPeriodError(CXEngineError, ValueError):
    """Unknown trend bucketing period."""

    def __init__(self, period: str):
        self.period = period
        super().__init__(f"Trend period must be one of {', '.join(TREND_PERIODS)}, got: {period}")


def validate_nps_score(score) -> int:
    """
    Return the score as an int if it is a valid 0-10 survey answer, raise otherwise.

    Integral floats (9.0) are accepted; NaN, infinities and fractions are not.
    """
    if isinstance(score, bool) or not isinstance(score, (int, float)):
        raise InvalidScoreError(score)
    if not math.isfinite(score) or score != int(score):
        raise InvalidScoreError(score)
    if score < NPS_MIN_SCORE or score > NPS_MAX_SCORE:
        raise InvalidScoreError(score)
    return int(score)


# =============================================================================
# SENTIMENT STATS
# =============================================================================

SentimentLike = Union[SentimentResult, Mapping]


def unpack_sentiment(result: SentimentLike) -> Tuple[str, float]:
    if isinstance(result, SentimentResult):
        return result.sentiment.value, result.score
    sentiment = result.get("sentiment", Sentiment.NEUTRAL.value)
    if isinstance(sentiment, Sentiment):
        sentiment = sentiment.value
    return sentiment, float(result.get("score", 0.0) or 0.0)


def compute_sentiment_stats(results: Iterable[SentimentLike]) -> SentimentStats:
    """Count results by sentiment and average their scores (0 when empty)."""
    positive = negative = neutral = 0
    total_score = 0.0

    for result in results:
        sentiment, score = unpack_sentiment(result)
        if sentiment == Sentiment.POSITIVE.value:
            positive += 1
        elif sentiment == Sentiment.NEGATIVE.value:
            negative += 1
        else:
            neutral += 1
        total_score += score

    total = positive + negative + neutral
    average = total_score / total if total > 0 else 0.0

    return SentimentStats(
        positive=positive,
        negative=negative,
        neutral=neutral,
        total=total,
        average_score=average,
    )


# =============================================================================
# NPS
# =============================================================================

def nps_score(promoters: int, detractors: int, total: int) -> float:
    """(promoters - detractors) / total * 100, rounded to 2 decimals."""
    if total <= 0:
        return 0.0
    return round_half_up((promoters - detractors) / total * 100, 2)


def compute_nps(scores: Iterable[float]) -> NPSStats:
    """
    Classify 0-10 survey scores and compute the Net Promoter Score.

    >= 9 promoter, <= 6 detractor, 7-8 passive.
    """
    promoters = passives = detractors = 0
    score_sum = 0.0

    for score in scores:
        score_sum += score
        if score >= PROMOTER_MIN:
            promoters += 1
        elif score <= DETRACTOR_MAX:
            detractors += 1
        else:
            passives += 1

    total = promoters + passives + detractors
    average = score_sum / total if total > 0 else 0.0

    return NPSStats(
        promoters=promoters,
        passives=passives,
        detractors=detractors,
        nps_score=nps_score(promoters, detractors, total),
        total=total,
        average_score=round_half_up(average, 2),
    )


def period_key(when: Union[date, datetime], period: str) -> str:
    """
    Bucket key for a survey date.

    week: the Sunday starting the week (date minus its Sunday-based weekday index).
    """
    if isinstance(when, datetime):
        when = when.date()

    if period == "day":
        return when.isoformat()
    if period == "week":
        # date.weekday() is Monday=0; shift to Sunday=0
        sunday_index = (when.weekday() + 1) % 7
        return (when - timedelta(days=sunday_index)).isoformat()
    if period == "month":
        return f"{when.year:04d}-{when.month:02d}"
    raise InvalidPeriodError(period)


def compute_nps_trend(
    surveys: Iterable[Tuple[Union[date, datetime], float]],
    period: str = "month",
) -> List[NPSTrendPoint]:
    """
    Group (date, score) pairs by period and compute NPS per bucket.

    Buckets are returned in chronological order.
    """
    if period not in TREND_PERIODS:
        raise InvalidPeriodError(period)

    grouped: Dict[str, List[float]] = {}
    for when, score in surveys:
        grouped.setdefault(period_key(when, period), []).append(score)

    points = []
    for key in sorted(grouped):
        scores = grouped[key]
        promoters = sum(1 for s in scores if s >= PROMOTER_MIN)
        detractors = sum(1 for s in scores if s <= DETRACTOR_MAX)
        points.append(NPSTrendPoint(
            period=key,
            nps_score=nps_score(promoters, detractors, len(scores)),
            count=len(scores),
        ))

    logger.debug("NPS trend: %d buckets by %s", len(points), period)
    return points
