"""
CX Batch Analysis Orchestrator
==============================

Runs the engine over one batch of feedback items:
1. Sentiment classification (one result per item, input order kept)
2. Root-cause extraction over a capped sample of negative items
3. Aggregation (sentiment stats, NPS over items carrying a survey score)

Features:
    - Bounded (batch and sample caps from EngineConfig)
    - Observable (per-stage metrics and timing)
    - Resilient (a failing item is logged and counted, never aborts the batch)

Usage:
    from cxengine.orchestrator.batch_analysis import BatchAnalyzer, FeedbackItem

    result = BatchAnalyzer().run([FeedbackItem(id=1, content="Late again", nps_score=3)])
"""

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence

from ..analysis.aggregation import InvalidScoreError, compute_nps, compute_sentiment_stats, validate_nps_score
from ..analysis.analysis_models import LinkedRootCause, NPSStats, Sentiment, SentimentResult, SentimentStats
from ..analysis.root_cause_extractor import RootCauseExtractor, link_feedback_ids
from ..analysis.sentiment_classifier import SentimentClassifier
from ..config import EngineConfig

logger = logging.getLogger(__name__)


class BatchStage(Enum):
    """Batch execution stages."""
    SENTIMENT = "sentiment"
    ROOT_CAUSES = "root_causes"
    AGGREGATION = "aggregation"


class BatchStatus(Enum):
    RUNNING = "running"
    COMPLETED = "completed"
    PARTIAL_FAILURE = "partial_failure"


@dataclass
class FeedbackItem:
    """One feedback record as handed over by the persistence layer."""
    id: Any
    content: str
    nps_score: Optional[int] = None


@dataclass
class StageResult:
    """Result of a single batch stage."""
    stage: BatchStage
    started_at: datetime
    completed_at: Optional[datetime] = None
    metrics: Dict[str, Any] = field(default_factory=dict)

    @property
    def duration_seconds(self) -> Optional[float]:
        if self.completed_at is None:
            return None
        return (self.completed_at - self.started_at).total_seconds()


@dataclass
class BatchAnalysisResult:
    """Complete batch result. `sentiments[i]` belongs to `items[i]`, None when it failed."""
    run_id: str
    status: BatchStatus
    started_at: datetime
    completed_at: Optional[datetime] = None
    items: List[FeedbackItem] = field(default_factory=list)
    sentiments: List[Optional[SentimentResult]] = field(default_factory=list)
    root_causes: List[LinkedRootCause] = field(default_factory=list)
    sentiment_stats: Optional[SentimentStats] = None
    nps: Optional[NPSStats] = None
    stages: Dict[BatchStage, StageResult] = field(default_factory=dict)
    processed: int = 0
    failed: int = 0
    skipped: int = 0
    errors: List[str] = field(default_factory=list)

    @property
    def duration_seconds(self) -> Optional[float]:
        if self.completed_at is None:
            return None
        return (self.completed_at - self.started_at).total_seconds()

    def get_summary(self) -> Dict[str, Any]:
        """JSON-friendly run summary."""
        return {
            "run_id": self.run_id,
            "status": self.status.value,
            "processed": self.processed,
            "failed": self.failed,
            "skipped": self.skipped,
            "duration_seconds": self.duration_seconds,
            "stages": {
                stage.value: {
                    "duration_seconds": result.duration_seconds,
                    "metrics": result.metrics,
                }
                for stage, result in self.stages.items()
            },
            "sentiment_stats": self.sentiment_stats.to_dict() if self.sentiment_stats else None,
            "nps": self.nps.to_dict() if self.nps else None,
            "root_causes": [
                {**linked.root_cause.to_dict(), "feedbackIds": list(linked.feedback_ids)}
                for linked in self.root_causes
            ],
            "errors": self.errors[-5:],
        }


def _now() -> datetime:
    return datetime.now(timezone.utc)


class BatchAnalyzer:
    """
    Runs classification, root-cause extraction and aggregation over a batch.

    Engine calls are pure, so a single analyzer can serve concurrent batches.
    """

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        classifier: Optional[SentimentClassifier] = None,
        extractor: Optional[RootCauseExtractor] = None,
    ):
        self.config = config or EngineConfig()
        self.classifier = classifier or SentimentClassifier(max_key_phrases=self.config.max_key_phrases)
        self.extractor = extractor or RootCauseExtractor(
            top_units=self.config.root_cause_top_units,
            max_results=self.config.root_cause_max_results,
        )

    def run(self, items: Sequence[FeedbackItem]) -> BatchAnalysisResult:
        """
        Analyze a batch.

        Items beyond `max_batch_items` are skipped (counted in `skipped`).
        """
        run_id = str(uuid.uuid4())
        result = BatchAnalysisResult(run_id=run_id, status=BatchStatus.RUNNING, started_at=_now())

        capped = list(items[: self.config.max_batch_items])
        result.items = capped
        result.skipped = len(items) - len(capped)
        if result.skipped:
            logger.warning(
                "Batch %s capped at %d items, %d skipped",
                run_id, self.config.max_batch_items, result.skipped,
                extra={"run_id": run_id},
            )

        logger.info("Starting batch analysis for %d feedback items", len(capped), extra={"run_id": run_id})

        result.stages[BatchStage.SENTIMENT] = self._run_sentiment_stage(result)
        result.stages[BatchStage.ROOT_CAUSES] = self._run_root_cause_stage(result)
        result.stages[BatchStage.AGGREGATION] = self._run_aggregation_stage(result)

        result.completed_at = _now()
        result.status = BatchStatus.PARTIAL_FAILURE if result.failed else BatchStatus.COMPLETED

        logger.info(
            "Batch %s %s: %d processed, %d failed in %.3fs",
            run_id, result.status.value, result.processed, result.failed,
            result.duration_seconds or 0.0,
            extra={"run_id": run_id, "duration": result.duration_seconds},
        )
        return result

    # =========================================================================
    # STAGES
    # =========================================================================

    def _run_sentiment_stage(self, result: BatchAnalysisResult) -> StageResult:
        stage = StageResult(stage=BatchStage.SENTIMENT, started_at=_now())

        for item in result.items:
            try:
                sentiment = self.classifier.classify(item.content)
            except Exception as e:
                message = f"Failed to analyze feedback {item.id}: {e}"
                logger.error(message, extra={"run_id": result.run_id, "feedback_id": item.id})
                result.errors.append(message)
                result.sentiments.append(None)
                result.failed += 1
                continue
            result.sentiments.append(sentiment)
            result.processed += 1

        stage.completed_at = _now()
        stage.metrics = {"classified": result.processed, "failed": result.failed}
        return stage

    def _negative_items(self, result: BatchAnalysisResult) -> List[FeedbackItem]:
        negatives = [
            item for item, sentiment in zip(result.items, result.sentiments)
            if sentiment is not None and sentiment.sentiment == Sentiment.NEGATIVE
        ]
        return negatives[: self.config.root_cause_sample_limit]

    def _run_root_cause_stage(self, result: BatchAnalysisResult) -> StageResult:
        stage = StageResult(stage=BatchStage.ROOT_CAUSES, started_at=_now())

        negatives = self._negative_items(result)
        if negatives:
            causes = self.extractor.extract([item.content for item in negatives])
            result.root_causes = link_feedback_ids(causes, [(item.id, item.content) for item in negatives])
        else:
            logger.info("No negative feedback to analyze", extra={"run_id": result.run_id})

        stage.completed_at = _now()
        stage.metrics = {"negative_sampled": len(negatives), "root_causes": len(result.root_causes)}
        return stage

    def _run_aggregation_stage(self, result: BatchAnalysisResult) -> StageResult:
        stage = StageResult(stage=BatchStage.AGGREGATION, started_at=_now())

        result.sentiment_stats = compute_sentiment_stats(s for s in result.sentiments if s is not None)

        scores = []
        for item in result.items:
            if item.nps_score is None:
                continue
            try:
                scores.append(validate_nps_score(item.nps_score))
            except InvalidScoreError as e:
                logger.warning("Ignoring survey score of feedback %s: %s", item.id, e)
        result.nps = compute_nps(scores)

        stage.completed_at = _now()
        stage.metrics = {"surveys": len(scores), "nps_score": result.nps.nps_score}
        return stage
