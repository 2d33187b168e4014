"""
Analysis API Routes
===================

POST /api/analysis/sentiment       - classify one text
POST /api/analysis/root-causes     - extract root causes from a list of texts
POST /api/analysis/nps             - NPS over 0-10 scores
POST /api/analysis/nps/trend       - NPS per day / week / month bucket
POST /api/analysis/recommendations - rule-based recommendations for a context
POST /api/analysis/batch           - full batch analysis of feedback items
POST /api/analysis/journey         - journey-stage and touchpoint satisfaction
POST /api/analysis/competitor-gap  - company vs competitor average gaps

Stateless: nothing is persisted here.
"""

import logging
from typing import List

from fastapi import APIRouter, HTTPException

from ..analysis.aggregation import (
    InvalidPeriodError,
    InvalidScoreError,
    compute_nps,
    compute_nps_trend,
    validate_nps_score,
)
from ..analysis.competitor_gap import build_metrics, perform_gap_analysis
from ..analysis.journey import analyze_journey, analyze_touchpoints
from ..analysis.recommendations import generate_recommendations
from ..analysis.root_cause_extractor import extract_root_causes
from ..analysis.sentiment_classifier import classify_sentiment
from ..config import get_settings
from ..orchestrator.batch_analysis import BatchAnalyzer, FeedbackItem
from .models import (
    BatchRequest,
    BatchResponse,
    CompetitorGapRequest,
    GapAnalysisModel,
    JourneyRequest,
    JourneyResponse,
    NPSRequest,
    NPSResponse,
    NPSTrendPointModel,
    NPSTrendRequest,
    RecommendationModel,
    RecommendationRequest,
    RootCauseRequest,
    RootCauseResponse,
    SentimentRequest,
    SentimentResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/analysis", tags=["Analysis"])


@router.post("/sentiment", response_model=SentimentResponse)
async def analyze_sentiment(request: SentimentRequest):
    """Classify one feedback text."""
    return classify_sentiment(request.text).to_dict()


@router.post("/root-causes", response_model=RootCauseResponse)
async def analyze_root_causes(request: RootCauseRequest):
    """
    Extract root causes from negative feedback texts.

    Only the first CX_ROOT_CAUSE_SAMPLE_LIMIT texts are analyzed.
    """
    limit = get_settings().engine.root_cause_sample_limit
    texts = request.texts[:limit]
    causes = extract_root_causes(texts)
    return {
        "rootCauses": [c.to_dict() for c in causes],
        "textsAnalyzed": len(texts),
    }


@router.post("/nps", response_model=NPSResponse)
async def analyze_nps(request: NPSRequest):
    try:
        scores = [validate_nps_score(s) for s in request.scores]
    except InvalidScoreError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return compute_nps(scores).to_dict()


@router.post("/nps/trend", response_model=List[NPSTrendPointModel])
async def analyze_nps_trend(request: NPSTrendRequest):
    try:
        surveys = [(s.date, validate_nps_score(s.score)) for s in request.surveys]
        points = compute_nps_trend(surveys, period=request.period)
    except InvalidScoreError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except InvalidPeriodError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return [p.to_dict() for p in points]


@router.post("/recommendations", response_model=List[RecommendationModel])
async def analyze_recommendations(request: RecommendationRequest):
    return [r.to_dict() for r in generate_recommendations(request.context)]


@router.post("/batch", response_model=BatchResponse)
async def analyze_batch(request: BatchRequest):
    """Classify, cluster and aggregate a batch of feedback items."""
    items = [
        FeedbackItem(id=i.id, content=i.content, nps_score=i.nps_score)
        for i in request.items
    ]
    try:
        result = BatchAnalyzer(get_settings().engine).run(items)
    except Exception as e:
        logger.error(f"Batch analysis failed: {e}")
        raise HTTPException(status_code=500, detail=str(e))

    return {
        "runId": result.run_id,
        "status": result.status.value,
        "processed": result.processed,
        "failed": result.failed,
        "skipped": result.skipped,
        "sentiments": [s.to_dict() if s else None for s in result.sentiments],
        "rootCauses": [
            {**linked.root_cause.to_dict(), "feedbackIds": list(linked.feedback_ids)}
            for linked in result.root_causes
        ],
        "sentimentStats": result.sentiment_stats.to_dict(),
        "nps": result.nps.to_dict(),
    }


@router.post("/journey", response_model=JourneyResponse)
async def analyze_customer_journey(request: JourneyRequest):
    """
    Classify each feedback text, then report satisfaction per journey stage
    and per requested touchpoint.
    """
    classified = [(item, classify_sentiment(item.content)) for item in request.feedback]
    stages = analyze_journey((item.content, result) for item, result in classified)
    touchpoints = analyze_touchpoints(
        ((item.touchpoint, result) for item, result in classified if item.touchpoint),
        request.touchpoints,
    )
    return {
        "stages": [s.to_dict() for s in stages],
        "touchpoints": [t.to_dict() for t in touchpoints],
    }


@router.post("/competitor-gap", response_model=List[GapAnalysisModel])
async def analyze_competitor_gap(request: CompetitorGapRequest):
    """Sentiment, NPS and volume gaps of the company against its competitors' average."""
    try:
        parties = [
            build_metrics(
                party.name,
                [classify_sentiment(text) for text in party.texts],
                nps_scores=[validate_nps_score(s) for s in party.nps_scores],
            )
            for party in [request.company, *request.competitors]
        ]
    except InvalidScoreError as e:
        raise HTTPException(status_code=422, detail=str(e))

    company, competitors = parties[0], parties[1:]
    return [g.to_dict() for g in perform_gap_analysis(company, competitors)]
