"""
Domain Value Objects

Defines immutable values such as judgment codes, scoring outcomes,
normalized response keys, and recall/precision/F1 triples.
"""

from dataclasses import dataclass
from enum import Enum


class InvalidJudgmentError(ValueError):
    """Raised when an overall filler judgment code is not one of C/R/I/X/W"""
    pass


class Judgment(str, Enum):
    """Overall filler judgment (key column 11), declared strongest first"""

    CORRECT = "C"
    REDUNDANT = "R"
    IGNORE = "I"
    INEXACT = "X"
    WRONG = "W"

    @property
    def rank(self) -> int:
        """Precedence rank; 0 is the strongest judgment"""
        return _PRECEDENCE.index(self)

    def outranks(self, other: "Judgment") -> bool:
        return self.rank < other.rank

    @classmethod
    def from_code(cls, code: str) -> "Judgment":
        try:
            return cls(code)
        except ValueError:
            raise InvalidJudgmentError(f"Invalid judgement code: {code!r}") from None


_PRECEDENCE = list(Judgment)


class Outcome(str, Enum):
    """Classification of one submitted response; the value is its trace symbol"""

    CORRECT = "C"
    REDUNDANT_WITH_KB = "R"
    REDUNDANT_WITH_RESPONSE = "r"
    INEXACT = "X"
    WRONG = "W"
    MISSING = "M"              # NIL, but the key has correct fillers
    MISSING_KB_FILLER = "m"    # NIL, but the key has fillers already in the reference KB
    CORRECTLY_EMPTY = "c"      # NIL, and the key has no known filler

    @property
    def is_nil(self) -> bool:
        return self in (Outcome.MISSING, Outcome.MISSING_KB_FILLER, Outcome.CORRECTLY_EMPTY)


@dataclass(frozen=True)
class ResponseKey:
    """
    Lookup key shared by judged records and submitted responses

    Document id and offset fields hold WILDCARD when the active policy
    ignores them, so records that differ only there collide on purpose.
    """
    query_id: str
    doc_id: str
    predicate_offsets: str
    entity_offsets: str
    filler_offsets: str
    filler: str

    @property
    def slot_name(self) -> str:
        return slot_name_of(self.query_id)

    @property
    def response_string(self) -> str:
        """Provenance and filler as matched: doc:predicate:entity:filler offsets:filler"""
        return ":".join([self.doc_id, self.predicate_offsets, self.entity_offsets, self.filler_offsets, self.filler])


@dataclass(frozen=True)
class MetricPair:
    """Recall / precision pair with its harmonic mean"""
    recall: float
    precision: float
    f1: float


def slot_name_of(query_id: str) -> str:
    """Return the slot name of an ``entity:slot`` query id ("" when there is none)"""
    parts = query_id.split(":", 1)
    return parts[1] if len(parts) == 2 else ""
