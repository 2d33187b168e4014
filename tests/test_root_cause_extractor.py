"""
Tests for root-cause extraction.

- Frequency table: keywords (1.0) and bigrams (1.5)
- Categorization against category keyword lists
- Fuzzy merging (exact, containment, same-category word overlap)
- Priority thresholds and escalation
- Ranking, truncation and deterministic tie-breaks
- Linking causes back to feedback ids

Usage:
    pytest tests/test_root_cause_extractor.py -v
"""

import pytest

from cxengine.analysis.analysis_models import (
    Priority,
    RootCause,
    RootCauseCandidate,
    RootCauseCategory,
)
from cxengine.analysis.root_cause_extractor import (
    RootCauseExtractor,
    extract_root_causes,
    link_feedback_ids,
    priority_for_frequency,
    round_half_up,
)


COMPLAINTS = [
    "Delivery was late again and the package arrived damaged",
    "Late delivery, the box was damaged and the item was missing",
    "Customer support never replied to my emails",
    "Support never answered, terrible customer service",
    "The app crashes every time I open the checkout page",
    "App crashes on login, cannot complete my order",
    "Way too expensive for such poor quality",
    "Overpriced product and poor quality materials",
    "Website is slow and the checkout page keeps freezing",
    "Refund took weeks, support never replied",
    "Delivery late by a week, package damaged",
    "Rude staff at the counter and long wait times",
]


def ranks(causes):
    return [c.priority.rank for c in causes]


class TestFrequencyTable:

    def setup_method(self):
        self.extractor = RootCauseExtractor()

    def test_keywords_and_bigram_weights(self):
        frequency = self.extractor.count_units(["slow delivery"])
        assert frequency == {"slow": 1.0, "delivery": 1.0, "slow delivery": 1.5}

    def test_short_and_stop_words_skipped(self):
        frequency = self.extractor.count_units(["it is ok"])
        assert "it" not in frequency
        assert "is" not in frequency
        assert "ok" not in frequency

    def test_bigram_requires_two_non_stop_words(self):
        frequency = self.extractor.count_units(["slow and late"])
        assert "slow and" not in frequency
        assert "and late" not in frequency
        assert "slow late" not in frequency

    def test_single_token_text_has_no_bigram(self):
        frequency = self.extractor.count_units(["broken"])
        assert frequency == {"broken": 1.0}

    def test_punctuation_stripped(self):
        frequency = self.extractor.count_units(["Slow, delivery!"])
        assert frequency["slow delivery"] == 1.5

    def test_accumulates_across_texts(self):
        frequency = self.extractor.count_units(["slow delivery"] * 4)
        assert frequency["slow delivery"] == 6.0
        assert frequency["slow"] == 4.0


class TestCategorization:

    def setup_method(self):
        self.extractor = RootCauseExtractor()

    @pytest.mark.parametrize("unit,expected", [
        ("slow delivery", RootCauseCategory.DELIVERY),
        ("defective", RootCauseCategory.PRODUCT),
        ("staff", RootCauseCategory.SERVICE),
        ("invoice", RootCauseCategory.PRICING),
        ("checkout page", RootCauseCategory.WEBSITE),
        ("crash", RootCauseCategory.APP),
        ("email", RootCauseCategory.COMMUNICATION),
        ("zebra", RootCauseCategory.OTHER),
    ])
    def test_category(self, unit, expected):
        assert self.extractor.categorize(unit) == expected

    def test_unit_contained_in_keyword(self):
        """'ship' is inside the delivery keyword 'shipping'."""
        assert self.extractor.categorize("ship") == RootCauseCategory.DELIVERY

    def test_known_substring_fuzziness(self):
        """'app' inside 'happy' assigns the app category."""
        assert self.extractor.categorize("happy") == RootCauseCategory.APP


class TestPriority:

    @pytest.mark.parametrize("frequency,expected", [
        (1, Priority.LOW),
        (2.5, Priority.LOW),
        (3, Priority.MEDIUM),
        (4.5, Priority.MEDIUM),
        (5, Priority.HIGH),
        (9.5, Priority.HIGH),
        (10, Priority.CRITICAL),
        (42, Priority.CRITICAL),
    ])
    def test_thresholds(self, frequency, expected):
        assert priority_for_frequency(frequency) == expected

    def test_merge_escalates(self):
        candidate = RootCauseCandidate("Refund", "", RootCauseCategory.OTHER, Priority.LOW, 2.0)
        RootCauseExtractor.merge(candidate, "refund", 1.5)
        assert candidate.frequency == 3.5
        assert candidate.priority == Priority.MEDIUM

    def test_merge_never_downgrades(self):
        """A cluster created critical stays critical."""
        candidate = RootCauseCandidate("Refund", "", RootCauseCategory.OTHER, Priority.CRITICAL, 1.0)
        RootCauseExtractor.merge(candidate, "refund", 1.0)
        assert candidate.priority == Priority.CRITICAL

    def test_merge_frequency_non_decreasing(self):
        candidate = RootCauseCandidate("Late", "", RootCauseCategory.DELIVERY, Priority.LOW, 1.0)
        seen = [candidate.frequency]
        for unit, freq in [("late delivery", 1.5), ("late", 1.0), ("late package", 1.5)]:
            RootCauseExtractor.merge(candidate, unit, freq)
            seen.append(candidate.frequency)
        assert seen == sorted(seen)

    def test_merge_prefers_more_descriptive_title(self):
        candidate = RootCauseCandidate("Late", "", RootCauseCategory.DELIVERY, Priority.LOW, 1.0)
        RootCauseExtractor.merge(candidate, "late delivery", 1.5)
        assert candidate.title == "Late delivery"

    def test_merge_keeps_longer_title(self):
        candidate = RootCauseCandidate("Late delivery", "", RootCauseCategory.DELIVERY, Priority.LOW, 1.5)
        RootCauseExtractor.merge(candidate, "late", 1.0)
        assert candidate.title == "Late delivery"


class TestExtraction:

    def test_empty_batch(self):
        assert extract_root_causes([]) == []

    def test_identical_texts_single_critical_cause(self):
        """15 x 'slow delivery' collapses into one critical cluster."""
        causes = extract_root_causes(["slow delivery"] * 15)
        assert len(causes) == 1
        assert causes[0].priority == Priority.CRITICAL
        assert causes[0].title == "Slow delivery"

    def test_slow_delivery_scenario(self):
        """12 texts sharing only the bigram -> one delivery cause."""
        causes = extract_root_causes(["Slow delivery!"] * 12)
        assert len(causes) == 1
        assert causes[0].category == RootCauseCategory.DELIVERY
        assert causes[0].priority in (Priority.HIGH, Priority.CRITICAL)

    def test_single_text_description(self):
        """Bigram 'broken screen' (1.5) absorbs its two words; description uses the unit's own count."""
        causes = extract_root_causes(["Broken screen"])
        assert len(causes) == 1
        cause = causes[0]
        assert cause.title == "Broken screen"
        assert cause.category == RootCauseCategory.PRODUCT
        assert cause.description == "Issue related to broken screen mentioned 2 time(s) in feedback"
        # 1.5 + 1.0 + 1.0 = 3.5 -> escalated from low to medium
        assert cause.priority == Priority.MEDIUM

    def test_sorted_by_priority_then_frequency(self):
        texts = ["crash"] * 6 + ["invoice"] * 3 + ["refund"] * 4
        causes = extract_root_causes(texts)
        assert [c.title for c in causes] == ["Crash", "Refund", "Invoice"]
        assert [c.priority for c in causes] == [Priority.HIGH, Priority.MEDIUM, Priority.MEDIUM]

    def test_ties_keep_first_seen_order(self):
        assert [c.title for c in extract_root_causes(["alpha"] * 3 + ["bravo"] * 3)] == ["Alpha", "Bravo"]
        assert [c.title for c in extract_root_causes(["bravo"] * 3 + ["alpha"] * 3)] == ["Bravo", "Alpha"]

    def test_at_most_ten_and_sorted(self):
        causes = extract_root_causes(COMPLAINTS)
        assert 0 < len(causes) <= 10
        assert ranks(causes) == sorted(ranks(causes), reverse=True)

    def test_many_distinct_words_truncated(self):
        texts = [f"word{i:02d}" for i in range(40)]
        causes = extract_root_causes(texts)
        assert len(causes) == 10

    def test_returns_frozen_causes_without_frequency(self):
        cause = extract_root_causes(["slow delivery"])[0]
        assert isinstance(cause, RootCause)
        assert not hasattr(cause, "frequency")
        assert set(cause.to_dict()) == {"title", "description", "category", "priority"}

    def test_deterministic(self):
        assert extract_root_causes(COMPLAINTS) == extract_root_causes(COMPLAINTS)

    def test_custom_limits(self):
        extractor = RootCauseExtractor(max_results=2)
        assert len(extractor.extract(COMPLAINTS)) <= 2

    def test_round_half_up(self):
        assert round_half_up(1.5) == 2
        assert round_half_up(22.5) == 23
        assert round_half_up(4.0) == 4


class TestLinkFeedback:

    def test_links_by_title_containment(self):
        causes = extract_root_causes(["slow delivery"] * 3)
        feedback = [(1, "Slow delivery again"), (2, "great"), (3, "SLOW DELIVERY")]
        linked = link_feedback_ids(causes, feedback)
        assert len(linked) == 1
        assert linked[0].root_cause.title == "Slow delivery"
        assert linked[0].feedback_ids == [1, 3]

    def test_unmatched_causes_dropped(self):
        cause = RootCause("Refund delay", "", RootCauseCategory.OTHER, Priority.LOW)
        assert link_feedback_ids([cause], [(1, "late delivery")]) == []
