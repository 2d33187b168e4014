"""
Tests for rule-based recommendations and alert rules.

Usage:
    pytest tests/test_rules.py -v
"""

import pytest

from cxengine.analysis.alert_rules import (
    check_competitor_gap,
    check_complaint_spike,
    check_critical_sentiment,
    check_nps_decline,
    check_sentiment_drop,
    evaluate_alerts,
)
from cxengine.analysis.analysis_models import (
    AlertSnapshot,
    Priority,
    RootCause,
    RootCauseCategory,
)
from cxengine.analysis.recommendations import (
    DEFAULT_RECOMMENDATION,
    build_context,
    generate_recommendations,
)
from cxengine.config import AlertThresholds


def make_thresholds(**overrides):
    """Thresholds pinned to the documented defaults, independent of the environment."""
    values = dict(sentiment_drop_pct=20.0, nps_decline=10.0, complaint_spike=10, competitor_gap=0.2)
    values.update(overrides)
    return AlertThresholds(**values)


def titles(recommendations):
    return [r.title for r in recommendations]


# =============================================================================
# RECOMMENDATIONS
# =============================================================================

class TestRecommendations:

    def test_empty_context_gets_default(self):
        assert generate_recommendations("") == [DEFAULT_RECOMMENDATION]
        assert generate_recommendations(None) == [DEFAULT_RECOMMENDATION]

    def test_unrelated_context_gets_default(self):
        assert generate_recommendations("hello world") == [DEFAULT_RECOMMENDATION]

    def test_delivery_trigger(self):
        recs = generate_recommendations("Delivery late")
        assert titles(recs) == ["Optimize Delivery Process"]
        assert recs[0].priority == Priority.HIGH

    def test_pricing_is_medium(self):
        recs = generate_recommendations("Too expensive")
        assert titles(recs) == ["Review Pricing Strategy"]
        assert recs[0].priority == Priority.MEDIUM

    def test_rules_fire_in_order(self):
        recs = generate_recommendations("Product quality and support")
        assert titles(recs) == ["Improve Product Quality Control", "Reduce Support Response Time"]

    def test_each_rule_fires_once(self):
        recs = generate_recommendations("defective product, poor quality, defective again")
        assert len(recs) == 1

    def test_from_root_causes(self):
        cause = RootCause(
            title="Slow delivery",
            description="Issue related to slow delivery mentioned 23 time(s) in feedback",
            category=RootCauseCategory.DELIVERY,
            priority=Priority.CRITICAL,
        )
        context = build_context([cause])
        assert context.startswith("[critical] delivery: Slow delivery - ")
        recs = generate_recommendations(context)
        assert titles(recs) == ["Optimize Delivery Process", "Implement Proactive Issue Resolution"]

    def test_to_dict(self):
        payload = DEFAULT_RECOMMENDATION.to_dict()
        assert payload["priority"] == "medium"
        assert set(payload) == {"title", "description", "priority", "category", "impact", "effort"}


# =============================================================================
# ALERT RULES
# =============================================================================

class TestSentimentDrop:

    def setup_method(self):
        self.thresholds = make_thresholds()

    def test_critical_drop(self):
        signal = check_sentiment_drop(0.2, 0.5, self.thresholds)
        assert signal.type == "sentiment_drop"
        assert signal.priority == Priority.CRITICAL
        assert "60%" in signal.message

    def test_high_drop(self):
        signal = check_sentiment_drop(0.65, 1.0, self.thresholds)
        assert signal.priority == Priority.HIGH

    def test_medium_drop(self):
        signal = check_sentiment_drop(0.75, 1.0, self.thresholds)
        assert signal.priority == Priority.MEDIUM

    def test_small_drop_ignored(self):
        assert check_sentiment_drop(0.9, 1.0, self.thresholds) is None

    def test_improvement_ignored(self):
        assert check_sentiment_drop(0.8, 0.5, self.thresholds) is None

    def test_non_positive_previous_ignored(self):
        assert check_sentiment_drop(-0.5, 0.0, self.thresholds) is None
        assert check_sentiment_drop(-0.5, -0.1, self.thresholds) is None


class TestNPSDecline:

    def setup_method(self):
        self.thresholds = make_thresholds()

    @pytest.mark.parametrize("current,previous,expected", [
        (18, 30, Priority.MEDIUM),
        (12, 30, Priority.HIGH),
        (5, 30, Priority.CRITICAL),
    ])
    def test_tiers(self, current, previous, expected):
        assert check_nps_decline(current, previous, self.thresholds).priority == expected

    def test_below_threshold(self):
        assert check_nps_decline(25, 30, self.thresholds) is None

    def test_increase(self):
        assert check_nps_decline(40, 30, self.thresholds) is None

    def test_message_rounds_half_up(self):
        signal = check_nps_decline(7.5, 30, self.thresholds)
        assert signal.message == "NPS dropped by 23 points. Current: 8, Previous: 30"


class TestComplaintSpike:

    def setup_method(self):
        self.thresholds = make_thresholds()

    @pytest.mark.parametrize("count,expected", [
        (10, Priority.MEDIUM),
        (15, Priority.HIGH),
        (25, Priority.CRITICAL),
    ])
    def test_tiers(self, count, expected):
        signal = check_complaint_spike(count, self.thresholds)
        assert signal.priority == expected
        assert f"Found {count}" in signal.message

    def test_below_threshold(self):
        assert check_complaint_spike(9, self.thresholds) is None


class TestCompetitorGap:

    def setup_method(self):
        self.thresholds = make_thresholds()

    def test_medium_gap(self):
        signal = check_competitor_gap(0.3, 0.6, self.thresholds)
        assert signal.type == "competitor_outperform"
        assert signal.priority == Priority.MEDIUM

    def test_high_gap(self):
        assert check_competitor_gap(0.1, 0.7, self.thresholds).priority == Priority.HIGH

    def test_company_ahead(self):
        assert check_competitor_gap(0.6, 0.3, self.thresholds) is None

    def test_missing_values(self):
        assert check_competitor_gap(None, 0.5, self.thresholds) is None
        assert check_competitor_gap(0.5, None, self.thresholds) is None


class TestCriticalSentiment:

    def test_fires_at_five(self):
        signal = check_critical_sentiment([-0.8] * 5)
        assert signal.priority == Priority.CRITICAL

    def test_four_is_not_enough(self):
        assert check_critical_sentiment([-0.8] * 4 + [-0.5, 0.3]) is None

    def test_boundary_is_exclusive(self):
        assert check_critical_sentiment([-0.7] * 10) is None


class TestEvaluateAlerts:

    def test_quiet_snapshot(self):
        assert evaluate_alerts(AlertSnapshot(), make_thresholds()) == []

    def test_rule_order(self):
        snapshot = AlertSnapshot(
            current_sentiment_avg=0.2,
            previous_sentiment_avg=0.5,
            current_nps=5,
            previous_nps=30,
            complaints_last_24h=12,
            recent_scores=[-0.9] * 6,
            company_sentiment=0.1,
            competitor_sentiment=0.7,
        )
        signals = evaluate_alerts(snapshot, make_thresholds())
        assert [s.type for s in signals] == [
            "sentiment_drop",
            "nps_decline",
            "complaint_spike",
            "competitor_outperform",
            "critical_sentiment",
        ]

    def test_custom_thresholds(self):
        snapshot = AlertSnapshot(complaints_last_24h=3)
        assert evaluate_alerts(snapshot, make_thresholds()) == []
        signals = evaluate_alerts(snapshot, make_thresholds(complaint_spike=3))
        assert [s.type for s in signals] == ["complaint_spike"]

    def test_invalid_thresholds_rejected(self):
        with pytest.raises(ValueError):
            make_thresholds(complaint_spike=0)
