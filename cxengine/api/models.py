"""
CX Engine API Models
====================

Pydantic models for API request/response serialization.
Field names follow the frontend (camelCase).
"""

from datetime import date as date_type
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    status: str
    version: str
    environment: str


# ============================================================================
# SENTIMENT
# ============================================================================

class SentimentRequest(BaseModel):
    text: str = Field("", max_length=20_000)


class SentimentResponse(BaseModel):
    sentiment: str
    score: float
    keyPhrases: List[str]
    emotions: Dict[str, float]


class SentimentStatsModel(BaseModel):
    positive: int
    negative: int
    neutral: int
    total: int
    averageScore: float


# ============================================================================
# ROOT CAUSES
# ============================================================================

class RootCauseRequest(BaseModel):
    texts: List[str] = Field(default_factory=list)


class RootCauseModel(BaseModel):
    title: str
    description: str
    category: str
    priority: str


class RootCauseResponse(BaseModel):
    rootCauses: List[RootCauseModel]
    textsAnalyzed: int


# ============================================================================
# NPS
# ============================================================================

class NPSRequest(BaseModel):
    scores: List[float] = Field(default_factory=list)


class NPSResponse(BaseModel):
    promoters: int
    passives: int
    detractors: int
    npsScore: float
    total: int
    averageScore: float


class SurveyModel(BaseModel):
    date: date_type
    score: float


class NPSTrendRequest(BaseModel):
    surveys: List[SurveyModel] = Field(default_factory=list)
    period: str = "month"


class NPSTrendPointModel(BaseModel):
    period: str
    npsScore: float
    count: int


# ============================================================================
# RECOMMENDATIONS
# ============================================================================

class RecommendationRequest(BaseModel):
    context: str = ""


class RecommendationModel(BaseModel):
    title: str
    description: str
    priority: str
    category: str
    impact: str
    effort: str


# ============================================================================
# BATCH
# ============================================================================

class FeedbackItemModel(BaseModel):
    id: Union[int, str]
    content: str = ""
    nps_score: Optional[float] = None


class BatchRequest(BaseModel):
    items: List[FeedbackItemModel] = Field(default_factory=list)


class LinkedRootCauseModel(RootCauseModel):
    feedbackIds: List[Union[int, str]]


class BatchResponse(BaseModel):
    runId: str
    status: str
    processed: int
    failed: int
    skipped: int
    sentiments: List[Optional[SentimentResponse]]
    rootCauses: List[LinkedRootCauseModel]
    sentimentStats: SentimentStatsModel
    nps: NPSResponse


# ============================================================================
# JOURNEY
# ============================================================================

class JourneyFeedbackModel(BaseModel):
    content: str = ""
    touchpoint: Optional[str] = None


class JourneyRequest(BaseModel):
    feedback: List[JourneyFeedbackModel] = Field(default_factory=list)
    touchpoints: List[str] = Field(default_factory=list)


class StageAnalysisModel(BaseModel):
    stage: str
    satisfactionScore: float
    dissatisfactionScore: float
    feedbackCount: int
    painPoints: List[str]
    satisfactionPoints: List[str]


class TouchpointSatisfactionModel(BaseModel):
    touchpoint: str
    satisfactionScore: float
    dissatisfactionScore: float
    feedbackCount: int
    positiveCount: int
    negativeCount: int
    neutralCount: int
    isPainPoint: bool


class JourneyResponse(BaseModel):
    stages: List[StageAnalysisModel]
    touchpoints: List[TouchpointSatisfactionModel]


# ============================================================================
# COMPETITORS
# ============================================================================

class PartyFeedbackModel(BaseModel):
    name: str
    texts: List[str] = Field(default_factory=list)
    nps_scores: List[float] = Field(default_factory=list)


class CompetitorGapRequest(BaseModel):
    company: PartyFeedbackModel
    competitors: List[PartyFeedbackModel] = Field(default_factory=list)


class GapAnalysisModel(BaseModel):
    metric: str
    companyValue: float
    competitorValue: float
    gap: float
    gapPercentage: float
    status: str
