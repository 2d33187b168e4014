"""
CX Engine Orchestrator Module
=============================

Orchestration layer around the analysis engine.

Components:
    - BatchAnalyzer: classify, cluster and aggregate one batch of feedback
    - setup_logging: structured logging configuration
    - CLI: command-line interface

Usage:
    from cxengine.orchestrator import BatchAnalyzer, FeedbackItem

    result = BatchAnalyzer().run(items)
"""

from .batch_analysis import (
    BatchAnalysisResult,
    BatchAnalyzer,
    BatchStage,
    BatchStatus,
    FeedbackItem,
    StageResult,
)
from .logging_config import JSONFormatter, setup_logging

__all__ = [
    "BatchAnalysisResult",
    "BatchAnalyzer",
    "BatchStage",
    "BatchStatus",
    "FeedbackItem",
    "StageResult",
    "JSONFormatter",
    "setup_logging",
]
