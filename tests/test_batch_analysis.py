"""
Tests for the batch analysis orchestrator.

Usage:
    pytest tests/test_batch_analysis.py -v
"""

from cxengine.analysis.analysis_models import Priority, Sentiment
from cxengine.analysis.sentiment_classifier import SentimentClassifier
from cxengine.config import EngineConfig
from cxengine.orchestrator.batch_analysis import (
    BatchAnalyzer,
    BatchStage,
    BatchStatus,
    FeedbackItem,
)


def make_config(**overrides):
    values = dict(
        max_key_phrases=5,
        root_cause_top_units=20,
        root_cause_max_results=10,
        root_cause_sample_limit=50,
        max_batch_items=100,
    )
    values.update(overrides)
    return EngineConfig(**values)


def make_items():
    return [
        FeedbackItem(id=1, content="Slow delivery!", nps_score=2),
        FeedbackItem(id=2, content="Slow delivery!", nps_score=3),
        FeedbackItem(id=3, content="Slow delivery!"),
        FeedbackItem(id=4, content="Excellent friendly staff", nps_score=10),
    ]


class ExplodingClassifier(SentimentClassifier):
    """Fails on any text containing 'boom'."""

    def classify(self, text):
        if text and "boom" in text:
            raise RuntimeError("classifier exploded")
        return super().classify(text)


class TestBatchAnalyzer:

    def setup_method(self):
        self.analyzer = BatchAnalyzer(make_config())

    def test_completed_run(self):
        result = self.analyzer.run(make_items())
        assert result.status == BatchStatus.COMPLETED
        assert result.processed == 4
        assert result.failed == 0
        assert result.skipped == 0
        assert result.run_id
        assert result.duration_seconds is not None

    def test_sentiments_aligned_with_items(self):
        result = self.analyzer.run(make_items())
        assert len(result.sentiments) == len(result.items)
        assert [s.sentiment for s in result.sentiments] == [
            Sentiment.NEGATIVE, Sentiment.NEGATIVE, Sentiment.NEGATIVE, Sentiment.POSITIVE,
        ]

    def test_root_causes_linked_to_negative_items(self):
        result = self.analyzer.run(make_items())
        assert len(result.root_causes) == 1
        linked = result.root_causes[0]
        assert linked.root_cause.title == "Slow delivery"
        assert linked.root_cause.priority == Priority.CRITICAL
        assert linked.feedback_ids == [1, 2, 3]

    def test_aggregates(self):
        result = self.analyzer.run(make_items())
        assert result.sentiment_stats.negative == 3
        assert result.sentiment_stats.positive == 1
        assert result.nps.total == 3
        assert result.nps.detractors == 2
        assert result.nps.promoters == 1
        assert result.nps.nps_score == -33.33

    def test_invalid_survey_score_ignored(self):
        items = [FeedbackItem(id=1, content="fine", nps_score=11), FeedbackItem(id=2, content="fine", nps_score=9)]
        result = self.analyzer.run(items)
        assert result.nps.total == 1
        assert result.status == BatchStatus.COMPLETED

    def test_all_stages_recorded(self):
        result = self.analyzer.run(make_items())
        assert set(result.stages) == set(BatchStage)
        assert result.stages[BatchStage.ROOT_CAUSES].metrics["negative_sampled"] == 3

    def test_empty_batch(self):
        result = self.analyzer.run([])
        assert result.status == BatchStatus.COMPLETED
        assert result.root_causes == []
        assert result.sentiment_stats.total == 0
        assert result.nps.total == 0

    def test_no_negatives_no_root_causes(self):
        result = self.analyzer.run([FeedbackItem(id=1, content="Excellent friendly staff")])
        assert result.root_causes == []


class TestLimits:

    def test_batch_capped(self):
        analyzer = BatchAnalyzer(make_config(max_batch_items=2))
        result = analyzer.run(make_items())
        assert result.processed == 2
        assert result.skipped == 2
        assert len(result.sentiments) == 2

    def test_negative_sample_capped(self):
        analyzer = BatchAnalyzer(make_config(root_cause_sample_limit=1))
        result = analyzer.run(make_items())
        assert result.stages[BatchStage.ROOT_CAUSES].metrics["negative_sampled"] == 1
        assert result.root_causes[0].feedback_ids == [1]


class TestFailures:

    def test_failing_item_does_not_abort(self):
        analyzer = BatchAnalyzer(make_config(), classifier=ExplodingClassifier())
        items = make_items() + [FeedbackItem(id=5, content="boom")]
        result = analyzer.run(items)
        assert result.status == BatchStatus.PARTIAL_FAILURE
        assert result.failed == 1
        assert result.processed == 4
        assert result.sentiments[-1] is None
        assert "feedback 5" in result.errors[0]
        assert result.sentiment_stats.total == 4

    def test_summary_is_json_friendly(self):
        import json

        analyzer = BatchAnalyzer(make_config(), classifier=ExplodingClassifier())
        result = analyzer.run(make_items() + [FeedbackItem(id=5, content="boom")])
        summary = result.get_summary()
        assert summary["status"] == "partial_failure"
        assert summary["root_causes"][0]["feedbackIds"] == [1, 2, 3]
        assert set(summary["stages"]) == {"sentiment", "root_causes", "aggregation"}
        json.dumps(summary)
