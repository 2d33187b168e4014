"""
Analysis Data Models
====================

Structured outputs of the text-analytics engine. Callers persist or render
them; the engine never mutates a record after returning it.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple


class Sentiment(str, Enum):
    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"


class Priority(str, Enum):
    """Root-cause / alert priority, ordered low -> critical."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        return _PRIORITY_RANK[self]


_PRIORITY_RANK = {
    Priority.LOW: 1,
    Priority.MEDIUM: 2,
    Priority.HIGH: 3,
    Priority.CRITICAL: 4,
}


class RootCauseCategory(str, Enum):
    PRODUCT = "product"
    SERVICE = "service"
    SUPPORT = "support"
    PRICING = "pricing"
    DELIVERY = "delivery"
    WEBSITE = "website"
    APP = "app"
    COMMUNICATION = "communication"
    OTHER = "other"


@dataclass(frozen=True)
class SentimentResult:
    """Classifier output for one feedback text."""
    sentiment: Sentiment
    score: float                        # -1.0 to 1.0
    key_phrases: Tuple[str, ...] = ()   # max 5, in match order
    emotions: Dict[str, float] = field(default_factory=dict)  # 0.0 to 1.0, or empty

    def to_dict(self) -> Dict:
        return {
            "sentiment": self.sentiment.value,
            "score": self.score,
            "keyPhrases": list(self.key_phrases),
            "emotions": dict(self.emotions),
        }


@dataclass
class RootCauseCandidate:
    """Cluster under construction. Title, priority and frequency may be revised while merging."""
    title: str
    description: str
    category: RootCauseCategory
    priority: Priority
    frequency: float

    def freeze(self) -> "RootCause":
        return RootCause(
            title=self.title,
            description=self.description,
            category=self.category,
            priority=self.priority,
        )


@dataclass(frozen=True)
class RootCause:
    """A finalized, ranked root cause."""
    title: str
    description: str
    category: RootCauseCategory
    priority: Priority

    def to_dict(self) -> Dict:
        return {
            "title": self.title,
            "description": self.description,
            "category": self.category.value,
            "priority": self.priority.value,
        }


@dataclass(frozen=True)
class LinkedRootCause:
    """A root cause mapped back to the feedback items mentioning its title."""
    root_cause: RootCause
    feedback_ids: List = field(default_factory=list)


@dataclass(frozen=True)
class SentimentStats:
    positive: int
    negative: int
    neutral: int
    total: int
    average_score: float

    def to_dict(self) -> Dict:
        return {
            "positive": self.positive,
            "negative": self.negative,
            "neutral": self.neutral,
            "total": self.total,
            "averageScore": self.average_score,
        }


@dataclass(frozen=True)
class NPSStats:
    """Net Promoter Score summary over 0-10 survey scores."""
    promoters: int
    passives: int
    detractors: int
    nps_score: float        # -100 to 100
    total: int
    average_score: float

    @property
    def promoter_rate(self) -> float:
        if self.total == 0:
            return 0.0
        return self.promoters / self.total

    def to_dict(self) -> Dict:
        return {
            "promoters": self.promoters,
            "passives": self.passives,
            "detractors": self.detractors,
            "npsScore": self.nps_score,
            "total": self.total,
            "averageScore": self.average_score,
        }


@dataclass(frozen=True)
class NPSTrendPoint:
    period: str             # YYYY-MM-DD or YYYY-MM
    nps_score: float
    count: int

    def to_dict(self) -> Dict:
        return {"period": self.period, "npsScore": self.nps_score, "count": self.count}


@dataclass(frozen=True)
class Recommendation:
    title: str
    description: str
    priority: Priority
    category: str
    impact: str             # low / medium / high
    effort: str             # low / medium / high

    def to_dict(self) -> Dict:
        return {
            "title": self.title,
            "description": self.description,
            "priority": self.priority.value,
            "category": self.category,
            "impact": self.impact,
            "effort": self.effort,
        }


@dataclass(frozen=True)
class AlertSignal:
    """An alert condition that fired. Persisting and de-duplicating it is the caller's job."""
    type: str
    title: str
    message: str
    priority: Priority

    def to_dict(self) -> Dict:
        return {
            "type": self.type,
            "title": self.title,
            "message": self.message,
            "priority": self.priority.value,
        }


@dataclass
class AlertSnapshot:
    """Pre-aggregated metrics for one company over the current and previous window."""
    current_sentiment_avg: float = 0.0
    previous_sentiment_avg: float = 0.0
    current_nps: float = 0.0
    previous_nps: float = 0.0
    complaints_last_24h: int = 0
    recent_scores: List[float] = field(default_factory=list)
    company_sentiment: Optional[float] = None
    competitor_sentiment: Optional[float] = None


@dataclass(frozen=True)
class StageAnalysis:
    """Satisfaction of one customer-journey stage."""
    stage: str
    satisfaction_score: float       # mean score of positive feedback, 0 to 1
    dissatisfaction_score: float    # mean |score| of negative feedback, 0 to 1
    feedback_count: int
    pain_points: Tuple[str, ...] = ()           # max 5 snippets, score < -0.5
    satisfaction_points: Tuple[str, ...] = ()   # max 5 snippets, score > 0.5

    @property
    def satisfaction_index(self) -> float:
        """satisfaction_score mapped from [-1, 1] onto a 0-10 scale."""
        return (self.satisfaction_score + 1) / 2 * 10

    def to_dict(self) -> Dict:
        return {
            "stage": self.stage,
            "satisfactionScore": self.satisfaction_score,
            "dissatisfactionScore": self.dissatisfaction_score,
            "feedbackCount": self.feedback_count,
            "painPoints": list(self.pain_points),
            "satisfactionPoints": list(self.satisfaction_points),
        }


@dataclass(frozen=True)
class TouchpointSatisfaction:
    touchpoint: str
    satisfaction_score: float
    dissatisfaction_score: float
    feedback_count: int
    positive_count: int
    negative_count: int
    neutral_count: int
    is_pain_point: bool

    def to_dict(self) -> Dict:
        return {
            "touchpoint": self.touchpoint,
            "satisfactionScore": self.satisfaction_score,
            "dissatisfactionScore": self.dissatisfaction_score,
            "feedbackCount": self.feedback_count,
            "positiveCount": self.positive_count,
            "negativeCount": self.negative_count,
            "neutralCount": self.neutral_count,
            "isPainPoint": self.is_pain_point,
        }


class GapStatus(str, Enum):
    AHEAD = "ahead"
    BEHIND = "behind"
    EQUAL = "equal"


@dataclass(frozen=True)
class CompetitorMetrics:
    """Headline metrics of the company or of one competitor."""
    name: str
    sentiment_score: float      # mean sentiment score, rounded to 2 decimals
    nps_score: float            # 0 when no surveys are available
    feedback_count: int

    def to_dict(self) -> Dict:
        return {
            "name": self.name,
            "sentimentScore": self.sentiment_score,
            "npsScore": self.nps_score,
            "feedbackCount": self.feedback_count,
        }


@dataclass(frozen=True)
class GapAnalysis:
    """Company value vs the competitor average for one metric."""
    metric: str
    company_value: float
    competitor_value: float
    gap: float
    gap_percentage: float
    status: GapStatus

    def to_dict(self) -> Dict:
        return {
            "metric": self.metric,
            "companyValue": self.company_value,
            "competitorValue": self.competitor_value,
            "gap": self.gap,
            "gapPercentage": self.gap_percentage,
            "status": self.status.value,
        }
