"""
Scoring sub-package

Provides key normalization, judgment-table construction, equivalence-class
resolution, response matching, and metric computation.
"""

from sf_scorer.scoring.normalizer import normalize_key, key_for_record, key_for_response
from sf_scorer.scoring.equivalence import EquivalenceClassResolver
from sf_scorer.scoring.judgment_table import JudgmentTable
from sf_scorer.scoring.matcher import ResponseMatcher, responses_to_score
from sf_scorer.scoring.engine import (
    ScoreAccumulator,
    ScoringEngine,
    diagnostic_scores,
    harmonic_mean,
    official_scores,
    required_answers,
    safe_ratio,
    slot_confidence_table,
    slot_type,
)

__all__ = [
    # normalizer
    "normalize_key",
    "key_for_record",
    "key_for_response",
    # equivalence classes
    "EquivalenceClassResolver",
    # judgment table
    "JudgmentTable",
    # matcher
    "ResponseMatcher",
    "responses_to_score",
    # engine
    "ScoreAccumulator",
    "ScoringEngine",
    "diagnostic_scores",
    "harmonic_mean",
    "official_scores",
    "required_answers",
    "safe_ratio",
    "slot_confidence_table",
    "slot_type",
]
