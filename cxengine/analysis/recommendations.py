"""
Rule-Based Recommendations
==========================

Turns a free-text context (usually rendered root causes) into improvement
recommendations by keyword triggers. Offline and deterministic.
"""

import logging
from typing import Iterable, List, Tuple

from .analysis_models import Priority, Recommendation, RootCause

logger = logging.getLogger(__name__)


# (trigger keywords, recommendation), evaluated in order; each rule fires at most once.
RECOMMENDATION_RULES: Tuple[Tuple[Tuple[str, ...], Recommendation], ...] = (
    (
        ("product", "quality", "defective"),
        Recommendation(
            title="Improve Product Quality Control",
            description="Implement stricter quality control measures and pre-shipment inspections to reduce defective products",
            priority=Priority.HIGH, category="product", impact="high", effort="medium",
        ),
    ),
    (
        ("service", "staff", "employee"),
        Recommendation(
            title="Enhance Customer Service Training",
            description="Provide comprehensive training to customer service staff on communication and problem-solving",
            priority=Priority.HIGH, category="service", impact="high", effort="medium",
        ),
    ),
    (
        ("support", "response", "reply"),
        Recommendation(
            title="Reduce Support Response Time",
            description="Implement faster response mechanisms and consider 24/7 support availability",
            priority=Priority.HIGH, category="support", impact="high", effort="high",
        ),
    ),
    (
        ("price", "expensive", "cost"),
        Recommendation(
            title="Review Pricing Strategy",
            description="Analyze pricing competitiveness and consider value-based pricing adjustments",
            priority=Priority.MEDIUM, category="pricing", impact="medium", effort="high",
        ),
    ),
    (
        ("delivery", "shipping", "late"),
        Recommendation(
            title="Optimize Delivery Process",
            description="Improve logistics and delivery tracking to ensure timely and accurate deliveries",
            priority=Priority.HIGH, category="delivery", impact="high", effort="medium",
        ),
    ),
    (
        ("negative", "complaint", "issue"),
        Recommendation(
            title="Implement Proactive Issue Resolution",
            description="Create a systematic approach to identify and resolve issues before they escalate",
            priority=Priority.HIGH, category="process", impact="high", effort="medium",
        ),
    ),
)

DEFAULT_RECOMMENDATION = Recommendation(
    title="Enhance Overall Customer Experience",
    description="Conduct comprehensive review of customer touchpoints and implement improvements",
    priority=Priority.MEDIUM, category="process", impact="medium", effort="high",
)


def generate_recommendations(context: str) -> List[Recommendation]:
    """Return every rule triggered by the context, or the default recommendation."""
    text = (context or "").lower()
    recommendations = [
        rec for triggers, rec in RECOMMENDATION_RULES
        if any(t in text for t in triggers)
    ]
    if not recommendations:
        recommendations.append(DEFAULT_RECOMMENDATION)
    logger.debug("Generated %d recommendations", len(recommendations))
    return recommendations


def build_context(root_causes: Iterable[RootCause]) -> str:
    """Render root causes as one context line each: "[priority] category: title - description"."""
    return "\n".join(
        f"[{rc.priority.value}] {rc.category.value}: {rc.title} - {rc.description}"
        for rc in root_causes
    )
