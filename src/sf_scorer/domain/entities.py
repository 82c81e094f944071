"""
Domain Entities

Defines the records read from the key and response streams, the judgment
table entries built from them, and the structures a scoring run reports.
"""

from dataclasses import dataclass, field

from sf_scorer.domain.constants import NIL
from sf_scorer.domain.value_objects import Judgment, MetricPair, Outcome, ResponseKey, slot_name_of


@dataclass(frozen=True)
class JudgedRecord:
    """One assessed response from the judgment key"""
    response_id: str
    query_id: str
    doc_id: str
    filler: str
    filler_offsets: str
    entity_offsets: str
    predicate_offsets: str
    filler_offset_judgment: str
    entity_offset_judgment: str
    predicate_offset_judgment: str
    judgment: Judgment
    equivalence_class: int  # 0: assign a fresh id

    @property
    def slot_name(self) -> str:
        return slot_name_of(self.query_id)


@dataclass(frozen=True)
class SubmittedResponse:
    """One line of a system's response file"""
    query_id: str
    run_id: str
    doc_id: str
    filler: str = ""
    filler_offsets: str = ""
    entity_offsets: str = ""
    predicate_offsets: str = ""
    confidence: float | None = None

    @property
    def is_nil(self) -> bool:
        return self.doc_id == NIL

    @property
    def provenance(self) -> str:
        if self.is_nil:
            return self.doc_id
        return ":".join([self.doc_id, self.predicate_offsets, self.entity_offsets, self.filler_offsets])


@dataclass
class JudgmentEntry:
    """Live judgment stored for one response key"""
    judgment: Judgment
    equivalence_class: int
    filler_offset_judgment: str
    entity_offset_judgment: str
    predicate_offset_judgment: str


@dataclass
class ResponseJudgment:
    """How one submitted response was classified"""
    query_id: str
    response: SubmittedResponse
    outcome: Outcome
    judgment: Judgment | None = None
    equivalence_class: int | None = None
    key: ResponseKey | None = None  # lookup key; None for NIL responses

    @property
    def symbol(self) -> str:
        # Ignored responses count as wrong but keep their own trace symbol
        if self.outcome is Outcome.WRONG and self.judgment is Judgment.IGNORE:
            return Judgment.IGNORE.value
        return self.outcome.value

    def trace_line(self) -> str:
        """Symbol, query, and the response as it was matched (wildcards and case folding applied)"""
        if self.key is not None:
            text = self.key.response_string
        else:
            text = self.response.provenance
            if not self.response.is_nil:
                text += ":" + self.response.filler
        return f"{self.symbol} {self.query_id} {text}"


@dataclass
class ScoreCounts:
    """Global response and answer counts of one scoring run"""
    num_responses: int = 0      # non-NIL responses, including KB-redundant ones
    num_correct: int = 0        # correct, not in the reference KB
    num_redundant: int = 0      # redundant with another returned response
    num_kb_redundant: int = 0   # redundant with the reference KB
    num_inexact: int = 0
    num_wrong: int = 0          # spurious and incorrect
    num_answers: int = 0        # required answers not in the reference KB
    num_kb_answers: int = 0     # required answers already in the reference KB


@dataclass(frozen=True)
class SlotConfidence:
    """Per-slot-type statistics used to weigh systems against each other"""
    slot_name: str
    correct: int
    returned: int   # answers the key requires for the scored queries of this type
    judged: int     # distinct judgment-table keys of this type
    precision: float
    recall: float
    f1: float


@dataclass
class ScoreReport:
    """Result of scoring one response file against the key"""
    counts: ScoreCounts
    diagnostic: MetricPair
    official: MetricPair
    slot_confidence: dict[str, SlotConfidence] = field(default_factory=dict)
    responses: list[ResponseJudgment] = field(default_factory=list)
    slots_from_file: bool = False
    num_single_valued_slots: int = 0
    num_list_valued_slots: int = 0

    def summary_dict(self) -> dict:
        """Flatten counts and both metric pairs into one row"""
        row = {
            "num_responses": self.counts.num_responses,
            "num_correct": self.counts.num_correct,
            "num_redundant": self.counts.num_redundant,
            "num_kb_redundant": self.counts.num_kb_redundant,
            "num_inexact": self.counts.num_inexact,
            "num_wrong": self.counts.num_wrong,
            "num_answers": self.counts.num_answers,
            "num_kb_answers": self.counts.num_kb_answers,
        }
        for prefix, pair in (("diagnostic", self.diagnostic), ("official", self.official)):
            row[f"{prefix}_recall"] = pair.recall
            row[f"{prefix}_precision"] = pair.precision
            row[f"{prefix}_f1"] = pair.f1
        return row


@dataclass
class QueryAnswerSets:
    """
    Equivalence classes the key holds per query

    correct: classes judged CORRECT (fillers not in the reference KB)
    redundant: classes judged REDUNDANT (fillers already in the reference KB)
    """
    correct: dict[str, set[int]] = field(default_factory=dict)
    redundant: dict[str, set[int]] = field(default_factory=dict)

    def _sets_for(self, judgment: Judgment) -> dict[str, set[int]] | None:
        if judgment is Judgment.CORRECT:
            return self.correct
        if judgment is Judgment.REDUNDANT:
            return self.redundant
        return None

    def add(self, judgment: Judgment, query_id: str, equivalence_class: int) -> None:
        """Record a class under the set matching its judgment; other judgments are ignored"""
        sets = self._sets_for(judgment)
        if sets is not None:
            sets.setdefault(query_id, set()).add(equivalence_class)

    def discard(self, judgment: Judgment, query_id: str, equivalence_class: int) -> None:
        sets = self._sets_for(judgment)
        if sets is not None and query_id in sets:
            sets[query_id].discard(equivalence_class)

    def correct_for(self, query_id: str) -> set[int]:
        return self.correct.get(query_id, set())

    def redundant_for(self, query_id: str) -> set[int]:
        return self.redundant.get(query_id, set())
