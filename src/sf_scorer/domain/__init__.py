"""
Domain Layer

Defines constants, entities, and value objects that form the core of the scoring logic.
Has no dependencies on external libraries.
"""

from sf_scorer.domain.constants import (
    EQUIVALENCE_CLASS_BASE,
    LIST_VALUED_SLOTS,
    NIL,
    SINGLE_VALUED_SLOTS,
    WILDCARD,
)
from sf_scorer.domain.entities import (
    JudgedRecord,
    JudgmentEntry,
    QueryAnswerSets,
    ResponseJudgment,
    ScoreCounts,
    ScoreReport,
    SlotConfidence,
    SubmittedResponse,
)
from sf_scorer.domain.value_objects import (
    InvalidJudgmentError,
    Judgment,
    MetricPair,
    Outcome,
    ResponseKey,
    slot_name_of,
)

__all__ = [
    # constants
    "EQUIVALENCE_CLASS_BASE",
    "LIST_VALUED_SLOTS",
    "NIL",
    "SINGLE_VALUED_SLOTS",
    "WILDCARD",
    # entities
    "JudgedRecord",
    "JudgmentEntry",
    "QueryAnswerSets",
    "ResponseJudgment",
    "ScoreCounts",
    "ScoreReport",
    "SlotConfidence",
    "SubmittedResponse",
    # value objects
    "InvalidJudgmentError",
    "Judgment",
    "MetricPair",
    "Outcome",
    "ResponseKey",
    "slot_name_of",
]
