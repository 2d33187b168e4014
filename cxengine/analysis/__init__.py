"""
CX Text-Analytics Engine
========================

Deterministic, offline analysis of customer feedback. No ML required.

Modules:
    lexicon              - Static keyword / weight / emotion / stop-word tables
    analysis_models      - Data models (SentimentResult, RootCause, NPSStats, ...)
    sentiment_classifier - Keyword-weighted sentiment and emotion scoring
    root_cause_extractor - Keyword/bigram mining with fuzzy cluster merging
    aggregation          - Sentiment stats, NPS and NPS trends
    recommendations      - Rule-based improvement recommendations
    alert_rules          - Threshold alerts over aggregated metrics
    journey              - Journey-stage mapping, stage and touchpoint satisfaction
    competitor_gap       - Company vs competitor gap analysis
"""

from .analysis_models import (
    AlertSignal,
    AlertSnapshot,
    CompetitorMetrics,
    GapAnalysis,
    GapStatus,
    LinkedRootCause,
    NPSStats,
    NPSTrendPoint,
    Priority,
    Recommendation,
    RootCause,
    RootCauseCategory,
    Sentiment,
    SentimentResult,
    SentimentStats,
    StageAnalysis,
    TouchpointSatisfaction,
)
from .lexicon import LEXICON, Lexicon
from .sentiment_classifier import SentimentClassifier, classify_sentiment
from .root_cause_extractor import RootCauseExtractor, extract_root_causes, link_feedback_ids
from .aggregation import (
    CXEngineError,
    InvalidPeriodError,
    InvalidScoreError,
    compute_nps,
    compute_nps_trend,
    compute_sentiment_stats,
    validate_nps_score,
)
from .recommendations import build_context, generate_recommendations
from .alert_rules import evaluate_alerts
from .journey import JOURNEY_STAGES, analyze_journey, analyze_touchpoints, map_feedback_to_stage
from .competitor_gap import build_metrics, perform_gap_analysis

__all__ = [
    # Models
    "AlertSignal",
    "AlertSnapshot",
    "CompetitorMetrics",
    "GapAnalysis",
    "GapStatus",
    "LinkedRootCause",
    "NPSStats",
    "NPSTrendPoint",
    "Priority",
    "Recommendation",
    "RootCause",
    "RootCauseCategory",
    "Sentiment",
    "SentimentResult",
    "SentimentStats",
    "StageAnalysis",
    "TouchpointSatisfaction",
    # Lexicon
    "LEXICON",
    "Lexicon",
    # Engine
    "SentimentClassifier",
    "classify_sentiment",
    "RootCauseExtractor",
    "extract_root_causes",
    "link_feedback_ids",
    "compute_sentiment_stats",
    "compute_nps",
    "compute_nps_trend",
    "validate_nps_score",
    "CXEngineError",
    "InvalidScoreError",
    "InvalidPeriodError",
    # Rules
    "generate_recommendations",
    "build_context",
    "evaluate_alerts",
    # Journey & competitors
    "JOURNEY_STAGES",
    "map_feedback_to_stage",
    "analyze_journey",
    "analyze_touchpoints",
    "build_metrics",
    "perform_gap_analysis",
]
