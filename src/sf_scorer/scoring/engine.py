"""
Scoring Engine

Aggregates response outcomes into counts and derives the diagnostic and
official recall/precision/F1 pairs plus per-slot-type confidence numbers.

Ratios with a zero denominator are NaN rather than errors.
"""

from __future__ import annotations

import logging
import math
from collections import Counter
from dataclasses import dataclass, field
from typing import Iterable

from sf_scorer.domain.constants import LIST, LIST_VALUED_SLOTS, SINGLE, SINGLE_VALUED_SLOTS
from sf_scorer.domain.entities import (
    ResponseJudgment,
    ScoreCounts,
    ScoreReport,
    SlotConfidence,
    SubmittedResponse,
)
from sf_scorer.domain.value_objects import MetricPair, Outcome, slot_name_of
from sf_scorer.scoring.judgment_table import JudgmentTable
from sf_scorer.scoring.matcher import ResponseMatcher, responses_to_score

logger = logging.getLogger(__name__)


def slot_type(query_id: str) -> str | None:
    """Classify an entity:slot query as SINGLE or LIST valued; None if the slot is unknown"""
    slot_name = slot_name_of(query_id)
    if slot_name in SINGLE_VALUED_SLOTS:
        return SINGLE
    if slot_name in LIST_VALUED_SLOTS:
        return LIST
    return None


def required_answers(classes: set[int], query_slot_type: str) -> int:
    """Answers a query requires: one per class for list slots, at most one for single slots"""
    if query_slot_type == LIST:
        return len(classes)
    return 1 if classes else 0


def safe_ratio(numerator: float, denominator: float) -> float:
    if denominator == 0:
        return math.nan
    return numerator / denominator


def harmonic_mean(precision: float, recall: float) -> float:
    """F1 of a precision/recall pair; NaN when undefined"""
    if math.isnan(precision) or math.isnan(recall) or precision + recall == 0:
        return math.nan
    return 2 * precision * recall / (precision + recall)


def _metric_pair(recall: float, precision: float) -> MetricPair:
    return MetricPair(recall=recall, precision=precision, f1=harmonic_mean(precision, recall))


def diagnostic_scores(counts: ScoreCounts) -> MetricPair:
    """
    Scores ignoring fillers that are already in the reference KB

    Recall = correct / answers
    Precision = correct / (responses - kb_redundant)
    """
    return _metric_pair(
        recall=safe_ratio(counts.num_correct, counts.num_answers),
        precision=safe_ratio(counts.num_correct, counts.num_responses - counts.num_kb_redundant),
    )


def official_scores(counts: ScoreCounts) -> MetricPair:
    """
    Scores requiring systems to also return reference-KB fillers

    Recall = (correct + kb_redundant) / (answers + kb_answers)
    Precision = (correct + kb_redundant) / responses
    """
    found = counts.num_correct + counts.num_kb_redundant
    return _metric_pair(
        recall=safe_ratio(found, counts.num_answers + counts.num_kb_answers),
        precision=safe_ratio(found, counts.num_responses),
    )


def slot_confidence_table(
    correct: Counter[str],
    returned: Counter[str],
    judged: Counter[str],
) -> dict[str, SlotConfidence]:
    """
    Per-slot-type precision/recall/F1

    precision = correct / returned, recall = correct / judged
    """
    table = {}
    for slot_name in sorted(set(correct) | set(returned)):
        precision = safe_ratio(correct[slot_name], returned[slot_name])
        recall = safe_ratio(correct[slot_name], judged[slot_name])
        table[slot_name] = SlotConfidence(
            slot_name=slot_name,
            correct=correct[slot_name],
            returned=returned[slot_name],
            judged=judged[slot_name],
            precision=precision,
            recall=recall,
            f1=harmonic_mean(precision, recall),
        )
    return table


_COUNTERS = {
    Outcome.CORRECT: "num_correct",
    Outcome.REDUNDANT_WITH_KB: "num_kb_redundant",
    Outcome.REDUNDANT_WITH_RESPONSE: "num_redundant",
    Outcome.INEXACT: "num_inexact",
    Outcome.WRONG: "num_wrong",
}


@dataclass
class ScoreAccumulator:
    """Counters of one scoring run"""
    counts: ScoreCounts = field(default_factory=ScoreCounts)
    correct_by_slot: Counter[str] = field(default_factory=Counter)
    returned_by_slot: Counter[str] = field(default_factory=Counter)

    def add_required(self, query_id: str, answers: int, kb_answers: int) -> None:
        self.counts.num_answers += answers
        self.counts.num_kb_answers += kb_answers
        self.returned_by_slot[slot_name_of(query_id)] += answers + kb_answers

    def record(self, result: ResponseJudgment) -> None:
        if result.outcome.is_nil:
            return
        self.counts.num_responses += 1
        counter = _COUNTERS[result.outcome]
        setattr(self.counts, counter, getattr(self.counts, counter) + 1)
        if result.outcome is Outcome.CORRECT:
            self.correct_by_slot[slot_name_of(result.query_id)] += 1


class ScoringEngine:
    """Scores grouped responses against a normalized judgment table"""

    def __init__(self, table: JudgmentTable) -> None:
        self.table = table
        self.matcher = ResponseMatcher(table)

    def score(
        self,
        queries: Iterable[str],
        responses_by_query: dict[str, list[SubmittedResponse]],
        *,
        slots_from_file: bool = False,
    ) -> ScoreReport:
        """
        Score every query in ``queries``

        Args:
            queries: entity:slot query ids to score, in scoring order
            responses_by_query: Submitted responses grouped by query id
            slots_from_file: Whether ``queries`` came from a slot list file

        Returns:
            ScoreReport
        """
        if not self.table.normalized:
            raise RuntimeError("Judgement table must be normalized before scoring")

        acc = ScoreAccumulator()
        results: list[ResponseJudgment] = []
        num_single = num_list = 0

        for query_id in queries:
            query_slot_type = slot_type(query_id)
            if query_slot_type is None:
                logger.warning("Unrecognizable slot type %s; query not scored", query_id)
                continue
            if query_slot_type == SINGLE:
                num_single += 1
            else:
                num_list += 1

            acc.add_required(
                query_id,
                required_answers(self.table.answer_sets.correct_for(query_id), query_slot_type),
                required_answers(self.table.answer_sets.redundant_for(query_id), query_slot_type),
            )

            responses = responses_by_query.get(query_id)
            if not responses:
                logger.warning("No system response for slot %s", query_id)
                continue

            for result in self.matcher.match_query(
                query_id, responses_to_score(query_id, query_slot_type, responses)
            ):
                acc.record(result)
                results.append(result)

        return ScoreReport(
            counts=acc.counts,
            diagnostic=diagnostic_scores(acc.counts),
            official=official_scores(acc.counts),
            slot_confidence=slot_confidence_table(
                acc.correct_by_slot, acc.returned_by_slot, self.table.judged_by_slot
            ),
            responses=results,
            slots_from_file=slots_from_file,
            num_single_valued_slots=num_single,
            num_list_valued_slots=num_list,
        )
