"""
Alert Rules
===========

Threshold checks over pre-aggregated metrics. Each rule returns an
AlertSignal when it fires, None otherwise. Storing alerts and skipping rules
that already have an open (unacknowledged) alert is left to the caller.

Usage:
    thresholds = AlertThresholds()
    signals = evaluate_alerts(AlertSnapshot(current_nps=12, previous_nps=30), thresholds)
"""

import logging
from typing import Iterable, List, Optional

from ..config import AlertThresholds
from .analysis_models import AlertSignal, AlertSnapshot, Priority
from .sentiment_classifier import round_half_up

logger = logging.getLogger(__name__)


CRITICAL_SCORE = -0.7          # a single feedback below this is "critical"
CRITICAL_FEEDBACK_COUNT = 5


def _tiered(value: float, critical_at: float, high_at: float) -> Priority:
    if value >= critical_at:
        return Priority.CRITICAL
    if value >= high_at:
        return Priority.HIGH
    return Priority.MEDIUM


def check_sentiment_drop(
    current_avg: float,
    previous_avg: float,
    thresholds: AlertThresholds,
) -> Optional[AlertSignal]:
    """Fires when the average sentiment fell by at least the threshold percentage."""
    if previous_avg <= 0 or current_avg >= previous_avg:
        return None

    drop_pct = (previous_avg - current_avg) / previous_avg * 100
    if drop_pct < thresholds.sentiment_drop_pct:
        return None

    return AlertSignal(
        type="sentiment_drop",
        title="Significant Sentiment Drop Detected",
        message=(
            f"Sentiment dropped by {int(round_half_up(drop_pct))}% compared to previous period. "
            f"Current: {round_half_up(current_avg, 2)}, Previous: {round_half_up(previous_avg, 2)}"
        ),
        priority=_tiered(drop_pct, 40, 30),
    )


def check_nps_decline(
    current_nps: float,
    previous_nps: float,
    thresholds: AlertThresholds,
) -> Optional[AlertSignal]:
    drop = previous_nps - current_nps
    if drop < thresholds.nps_decline:
        return None

    return AlertSignal(
        type="nps_decline",
        title="NPS Score Decline Detected",
        message=(
            f"NPS dropped by {int(round_half_up(drop))} points. "
            f"Current: {int(round_half_up(current_nps))}, Previous: {int(round_half_up(previous_nps))}"
        ),
        priority=_tiered(drop, 20, 15),
    )


def check_complaint_spike(complaint_count: int, thresholds: AlertThresholds) -> Optional[AlertSignal]:
    if complaint_count < thresholds.complaint_spike:
        return None

    return AlertSignal(
        type="complaint_spike",
        title="Complaint Spike Detected",
        message=(
            f"Found {complaint_count} negative feedback items in the last 24 hours "
            f"(threshold: {thresholds.complaint_spike})"
        ),
        priority=_tiered(complaint_count, 20, 15),
    )


def check_competitor_gap(
    company_value: Optional[float],
    competitor_value: Optional[float],
    thresholds: AlertThresholds,
) -> Optional[AlertSignal]:
    """Fires when competitors lead the company's average sentiment by at least the threshold."""
    if company_value is None or competitor_value is None:
        return None

    gap = competitor_value - company_value
    if gap <= 0 or gap < thresholds.competitor_gap:
        return None

    return AlertSignal(
        type="competitor_outperform",
        title="Competitors Outperforming",
        message=(
            f"Competitors are outperforming in sentiment by {gap:.2f} points. "
            f"Company: {company_value}, Competitors: {competitor_value}"
        ),
        priority=Priority.HIGH if gap >= 0.5 else Priority.MEDIUM,
    )


def check_critical_sentiment(scores: Iterable[float]) -> Optional[AlertSignal]:
    critical = sum(1 for s in scores if s < CRITICAL_SCORE)
    if critical < CRITICAL_FEEDBACK_COUNT:
        return None

    return AlertSignal(
        type="critical_sentiment",
        title="Critical Negative Sentiment Detected",
        message=(
            f"Found {critical} highly negative feedback items "
            f"(score < {CRITICAL_SCORE}) in the last 24 hours"
        ),
        priority=Priority.CRITICAL,
    )


def evaluate_alerts(
    snapshot: AlertSnapshot,
    thresholds: Optional[AlertThresholds] = None,
) -> List[AlertSignal]:
    """Run every rule over one snapshot, in a fixed order."""
    thresholds = thresholds or AlertThresholds()

    candidates = [
        check_sentiment_drop(snapshot.current_sentiment_avg, snapshot.previous_sentiment_avg, thresholds),
        check_nps_decline(snapshot.current_nps, snapshot.previous_nps, thresholds),
        check_complaint_spike(snapshot.complaints_last_24h, thresholds),
        check_competitor_gap(snapshot.company_sentiment, snapshot.competitor_sentiment, thresholds),
        check_critical_sentiment(snapshot.recent_scores),
    ]
    signals = [s for s in candidates if s is not None]

    if signals:
        logger.info("Alert rules fired: %s", ", ".join(s.type for s in signals))
    return signals
