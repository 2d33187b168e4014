"""
Competitor Gap Analysis
=======================

Compares the company's sentiment, NPS and feedback volume with the average
over its competitors.

Usage:
    company = build_metrics("Acme", acme_sentiments, nps_scores=acme_surveys)
    rivals = [build_metrics(name, results) for name, results in competitor_results.items()]
    for gap in perform_gap_analysis(company, rivals):
        print(gap.metric, gap.status.value)
"""

import logging
from typing import Iterable, List, Optional, Sequence

from .aggregation import SentimentLike, compute_nps, unpack_sentiment
from .analysis_models import CompetitorMetrics, GapAnalysis, GapStatus
from .sentiment_classifier import round_half_up

logger = logging.getLogger(__name__)


# Gaps within +/- band count as equal
SENTIMENT_BAND = 0.1
NPS_BAND = 5.0
VOLUME_BAND = 0.0


def build_metrics(
    name: str,
    sentiments: Iterable[Optional[SentimentLike]],
    nps_scores: Optional[Iterable[int]] = None,
) -> CompetitorMetrics:
    """
    Headline metrics from one party's sentiment results and survey scores.

    `sentiments` holds one entry per feedback item (None when it was never
    analyzed); every entry counts towards feedback_count, only analyzed ones
    towards the mean. Without surveys the NPS is 0.
    """
    feedback_count = 0
    analyzed = 0
    score_total = 0.0
    for result in sentiments:
        feedback_count += 1
        if result is None:
            continue
        _, score = unpack_sentiment(result)
        score_total += score
        analyzed += 1

    mean = score_total / analyzed if analyzed else 0.0
    scores = list(nps_scores or [])

    return CompetitorMetrics(
        name=name,
        sentiment_score=round_half_up(mean, 2),
        nps_score=compute_nps(scores).nps_score if scores else 0.0,
        feedback_count=feedback_count,
    )


def gap_status(gap: float, band: float) -> GapStatus:
    if gap > band:
        return GapStatus.AHEAD
    if gap < -band:
        return GapStatus.BEHIND
    return GapStatus.EQUAL


def _gap(metric: str, company_value: float, competitor_value: float, band: float) -> GapAnalysis:
    gap = company_value - competitor_value
    percentage = round_half_up(gap / competitor_value * 100, 2) if competitor_value != 0 else 0.0
    return GapAnalysis(
        metric=metric,
        company_value=company_value,
        competitor_value=competitor_value,
        gap=round_half_up(gap, 2),
        gap_percentage=percentage,
        status=gap_status(gap, band),
    )


def perform_gap_analysis(
    company: CompetitorMetrics,
    competitors: Sequence[CompetitorMetrics],
) -> List[GapAnalysis]:
    """
    Sentiment, NPS and volume gaps against the competitor average.

    Positive gaps mean the company leads. gap_percentage is relative to the
    competitor average (0 when that average is 0). No competitors, no gaps.
    """
    if not competitors:
        return []

    count = len(competitors)
    avg_sentiment = sum(c.sentiment_score for c in competitors) / count
    avg_nps = sum(c.nps_score for c in competitors) / count
    avg_volume = sum(c.feedback_count for c in competitors) / count

    gaps = [
        _gap("Sentiment Score", company.sentiment_score, avg_sentiment, SENTIMENT_BAND),
        _gap("NPS Score", company.nps_score, avg_nps, NPS_BAND),
        _gap("Feedback Volume", company.feedback_count, avg_volume, VOLUME_BAND),
    ]
    logger.debug(
        "Gap analysis for %s vs %d competitors: %s",
        company.name, count, ", ".join(f"{g.metric}={g.status.value}" for g in gaps),
    )
    return gaps
