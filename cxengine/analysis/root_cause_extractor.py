"""
Root-Cause Extractor (Deterministic)
====================================

Discovers recurring complaint themes across a batch of (typically negative)
feedback texts and returns a ranked, de-duplicated list of root causes.

Pipeline:
    1. Frequency table of single keywords (weight 1.0) and bigrams (weight 1.5)
    2. Keep the top 20 units
    3. Categorize each unit against fixed category keyword lists
    4. Fuzzy-merge units into clusters (exact / containment / word overlap)
    5. Rank by priority then frequency, keep the top 10

Usage:
    causes = extract_root_causes(negative_texts)
    linked = link_feedback_ids(causes, [(fb.id, fb.content) for fb in feedback])
"""

import logging
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .analysis_models import (
    LinkedRootCause,
    Priority,
    RootCause,
    RootCauseCandidate,
    RootCauseCategory,
)
from .lexicon import LEXICON, Lexicon
from .sentiment_classifier import clean_word, round_half_up, tokenize

logger = logging.getLogger(__name__)


KEYWORD_WEIGHT = 1.0
BIGRAM_WEIGHT = 1.5            # bigrams are more descriptive than single words
MIN_KEYWORD_LENGTH = 3
MIN_BIGRAM_LENGTH = 6          # "<w1> <w2>" must be longer than 5 chars
TOP_UNITS = 20
MAX_ROOT_CAUSES = 10

# Minimum share of the smaller word set that must be shared to merge
# two same-category units.
WORD_OVERLAP_RATIO = 0.5

# (min frequency, priority), checked top-down
PRIORITY_THRESHOLDS: Tuple[Tuple[float, Priority], ...] = (
    (10, Priority.CRITICAL),
    (5, Priority.HIGH),
    (3, Priority.MEDIUM),
)


def priority_for_frequency(frequency: float) -> Priority:
    for threshold, priority in PRIORITY_THRESHOLDS:
        if frequency >= threshold:
            return priority
    return Priority.LOW


def capitalize_first(text: str) -> str:
    return text[:1].upper() + text[1:]


class RootCauseExtractor:
    """
    Keyword/bigram frequency miner with fuzzy cluster merging.

    Merging does a linear scan over the candidate list, O(n²) overall, which
    is fine because n is capped at TOP_UNITS.
    """

    def __init__(
        self,
        lexicon: Optional[Lexicon] = None,
        top_units: int = TOP_UNITS,
        max_results: int = MAX_ROOT_CAUSES,
    ):
        self.lexicon = lexicon or LEXICON
        self.top_units = top_units
        self.max_results = max_results

    # ------------------------------------------------------------------
    # Frequency table
    # ------------------------------------------------------------------

    def count_units(self, texts: Iterable[str]) -> Dict[str, float]:
        """
        Accumulate keyword and bigram weights across all texts.

        Dict insertion order is first-seen order, which the stable sorts
        downstream rely on for deterministic tie-breaks.
        """
        stop_words = self.lexicon.stop_words
        frequency: Dict[str, float] = {}

        for text in texts:
            if not text:
                continue
            words = tokenize(text.lower())
            cleaned = [clean_word(w) for w in words]

            for clean in cleaned:
                if clean in stop_words or len(clean) < MIN_KEYWORD_LENGTH:
                    continue
                frequency[clean] = frequency.get(clean, 0.0) + KEYWORD_WEIGHT

            for first, second in zip(cleaned, cleaned[1:]):
                if first in stop_words or second in stop_words:
                    continue
                bigram = f"{first} {second}"
                if len(bigram) < MIN_BIGRAM_LENGTH:
                    continue
                frequency[bigram] = frequency.get(bigram, 0.0) + BIGRAM_WEIGHT

        return frequency

    def top_units_by_frequency(self, frequency: Dict[str, float]) -> List[Tuple[str, float]]:
        ranked = sorted(frequency.items(), key=lambda kv: kv[1], reverse=True)
        return ranked[: self.top_units]

    # ------------------------------------------------------------------
    # Categorization and merging
    # ------------------------------------------------------------------

    def categorize(self, unit: str) -> RootCauseCategory:
        """
        First category with a keyword contained in the unit (or containing it).

        Bidirectional containment is loose: "app" also matches
        "happy", and "reply" is listed under both support and communication.
        """
        for category, keywords in self.lexicon.category_keywords.items():
            if any(k in unit or unit in k for k in keywords):
                return RootCauseCategory(category)
        return RootCauseCategory.OTHER

    @staticmethod
    def _matches(candidate: RootCauseCandidate, unit: str, category: RootCauseCategory) -> bool:
        title = candidate.title.lower()
        unit = unit.lower()

        if title == unit:
            return True
        if unit in title or title in unit:
            return True

        if candidate.category == category:
            title_words = title.split()
            unit_words = unit.split()
            common = [w for w in title_words if w in unit_words]
            if common and len(common) >= min(len(title_words), len(unit_words)) * WORD_OVERLAP_RATIO:
                return True

        return False

    def find_merge_target(
        self,
        candidates: List[RootCauseCandidate],
        unit: str,
        category: RootCauseCategory,
    ) -> Optional[RootCauseCandidate]:
        for candidate in candidates:
            if self._matches(candidate, unit, category):
                return candidate
        return None

    @staticmethod
    def merge(candidate: RootCauseCandidate, unit: str, frequency: float) -> None:
        """Fold a unit into an existing cluster. Priority only ever goes up."""
        candidate.frequency += frequency

        if len(unit.split()) > len(candidate.title.split()) or len(unit) > len(candidate.title):
            candidate.title = capitalize_first(unit)

        escalated = priority_for_frequency(candidate.frequency)
        if escalated.rank > candidate.priority.rank:
            candidate.priority = escalated

    # ------------------------------------------------------------------
    # Entry point
    # ------------------------------------------------------------------

    def extract(self, texts: Sequence[str]) -> List[RootCause]:
        """
        Extract up to max_results root causes.

        Args:
            texts: Feedback texts. Order is irrelevant, duplicates count.

        Returns:
            RootCause list sorted by priority (critical first) then frequency.
        """
        if not texts:
            return []

        frequency = self.count_units(texts)
        units = self.top_units_by_frequency(frequency)

        candidates: List[RootCauseCandidate] = []
        for unit, unit_frequency in units:
            category = self.categorize(unit)
            target = self.find_merge_target(candidates, unit, category)
            if target is not None:
                self.merge(target, unit, unit_frequency)
                continue

            candidates.append(RootCauseCandidate(
                title=capitalize_first(unit),
                description=(
                    f"Issue related to {unit} mentioned "
                    f"{int(round_half_up(unit_frequency))} time(s) in feedback"
                ),
                category=category,
                priority=priority_for_frequency(unit_frequency),
                frequency=unit_frequency,
            ))

        candidates.sort(key=lambda c: (c.priority.rank, c.frequency), reverse=True)

        logger.debug(
            "Root-cause extraction: %d texts, %d units, %d clusters",
            len(texts), len(frequency), len(candidates),
        )
        return [c.freeze() for c in candidates[: self.max_results]]


def link_feedback_ids(
    causes: Iterable[RootCause],
    feedback: Iterable[Tuple[object, str]],
) -> List[LinkedRootCause]:
    """
    Map each cause to the ids of feedback whose content contains its title.

    Causes no feedback mentions verbatim are dropped.
    """
    feedback = [(fid, (content or "").lower()) for fid, content in feedback]
    linked = []
    for cause in causes:
        needle = cause.title.lower()
        ids = [fid for fid, content in feedback if needle in content]
        if ids:
            linked.append(LinkedRootCause(root_cause=cause, feedback_ids=ids))
    return linked


_default_extractor = RootCauseExtractor()


def extract_root_causes(texts: Sequence[str], lexicon: Optional[Lexicon] = None) -> List[RootCause]:
    """Extract ranked root causes with the default lexicon (or the one given)."""
    if lexicon is None:
        return _default_extractor.extract(texts)
    return RootCauseExtractor(lexicon).extract(texts)
