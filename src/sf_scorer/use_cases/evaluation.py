"""
Scoring Execution

Runs the build phase over the key and the score phase over a response file,
and exports the results as DataFrames for downstream system-selection tools.
"""

import itertools
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

import pandas as pd

from sf_scorer.domain.constants import EQUIVALENCE_CLASS_BASE
from sf_scorer.domain.entities import JudgedRecord, ScoreReport, SubmittedResponse
from sf_scorer.key_loader import read_key_records, read_responses, read_slot_list
from sf_scorer.scorer_config import ScoringPolicy
from sf_scorer.scoring.equivalence import EquivalenceClassResolver
from sf_scorer.scoring.judgment_table import JudgmentTable
from sf_scorer.scoring.engine import ScoringEngine

logger = logging.getLogger(__name__)


@dataclass
class ScoringContext:
    """
    State owned by one scoring run

    Holds the class id generator and the union-find so that separate runs
    never share judgments or equivalence classes.
    """
    policy: ScoringPolicy = field(default_factory=ScoringPolicy)
    class_ids: Iterable[int] = field(default_factory=lambda: itertools.count(EQUIVALENCE_CLASS_BASE))
    resolver: EquivalenceClassResolver = field(default_factory=EquivalenceClassResolver)
    table: JudgmentTable | None = None

    def __post_init__(self):
        if self.table is None:
            self.table = JudgmentTable(self.policy, class_ids=iter(self.class_ids), resolver=self.resolver)


def build_judgment_table(records: Iterable[JudgedRecord], context: ScoringContext) -> JudgmentTable:
    """
    Ingest the key and normalize equivalence classes

    Args:
        records: Judged records in file order
        context: Run context whose table is filled

    Returns:
        The normalized JudgmentTable
    """
    table = context.table
    table.add_all(records)
    logger.info("Read %d judgements.", len(table))
    table.normalize()
    return table


def group_responses(responses: Iterable[SubmittedResponse]) -> dict[str, list[SubmittedResponse]]:
    """Group responses by query id, keeping file order within each query"""
    grouped: dict[str, list[SubmittedResponse]] = {}
    for response in responses:
        grouped.setdefault(response.query_id, []).append(response)
    logger.info("Read responses for %d slots.", len(grouped))
    return grouped


def select_queries(
    responses_by_query: dict[str, list[SubmittedResponse]],
    slots_path: str | None = None,
) -> list[str]:
    """Queries to score: the slot file when given, otherwise every query with a response"""
    if slots_path is not None:
        return sorted(set(read_slot_list(slots_path)))
    return sorted(responses_by_query)


def run_scoring(
    response_path: str | Path,
    key_path: str | Path,
    policy: ScoringPolicy | None = None,
) -> ScoreReport:
    """
    Score a response file against a key file

    The key is fully ingested and normalized before any response is read.

    Args:
        response_path: System response file
        key_path: Assessment key file
        policy: Scoring policy (default: strict matching)

    Returns:
        ScoreReport

    Raises:
        FileNotFoundError: If the key, response, or slot file is missing
    """
    if policy is None:
        policy = ScoringPolicy()

    # Fail on any missing input before doing work
    key_records = read_key_records(key_path)
    response_records = read_responses(response_path)
    if policy.slots_path is not None and not Path(policy.slots_path).is_file():
        raise FileNotFoundError(f"Unable to open slot file {policy.slots_path}")

    context = ScoringContext(policy=policy)
    table = build_judgment_table(key_records, context)

    responses_by_query = group_responses(response_records)
    queries = select_queries(responses_by_query, policy.slots_path)

    return ScoringEngine(table).score(
        queries,
        responses_by_query,
        slots_from_file=policy.slots_path is not None,
    )


def slot_confidence_frame(report: ScoreReport) -> pd.DataFrame:
    """Per-slot-type confidence table, one row per slot name"""
    columns = ["slot_name", "correct", "returned", "judged", "precision", "recall", "f1"]
    rows = [
        {col: getattr(conf, col) for col in columns}
        for conf in report.slot_confidence.values()
    ]
    return pd.DataFrame(rows, columns=columns)


def responses_frame(report: ScoreReport) -> pd.DataFrame:
    """Per-response assessments (symbol, query, provenance, filler, judgment)"""
    columns = [
        "symbol", "outcome", "query_id", "run_id", "provenance",
        "filler", "judgment", "equivalence_class", "confidence",
    ]
    rows = [
        {
            "symbol": r.symbol,
            "outcome": r.outcome.name,
            "query_id": r.query_id,
            "run_id": r.response.run_id,
            "provenance": r.response.provenance,
            "filler": r.response.filler,
            "judgment": r.judgment.value if r.judgment is not None else None,
            "equivalence_class": r.equivalence_class,
            "confidence": r.response.confidence,
        }
        for r in report.responses
    ]
    return pd.DataFrame(rows, columns=columns)


def summary_frame(report: ScoreReport) -> pd.DataFrame:
    """Counts and both metric pairs as a single-row DataFrame"""
    return pd.DataFrame([report.summary_dict()])


def format_summary(report: ScoreReport, slots_path: str | None = None) -> list[str]:
    """Human-readable summary statistics"""
    c = report.counts
    d = report.diagnostic
    o = report.official
    lines = ["", "======== Summary Statistics ==========="]
    if report.slots_from_file:
        lines.append(f"Slot lists taken from file {slots_path}")
    else:
        lines.append("Slot lists taken from system responses")
    lines += [
        f"Slot lists include {report.num_single_valued_slots} single valued slots",
        f"               and {report.num_list_valued_slots} list-valued slots",
        "",
        f"Number of filled slots in key that are not in reference KB: {c.num_answers}",
        f"Number of filled slots in key that are in reference KB: {c.num_kb_answers}",
        "",
        f"Number of filled slots in responses: {c.num_responses}",
        f"\tNumber Correct (not in reference KB): {c.num_correct}",
        f"\tNumber Redundant with reference KB: {c.num_kb_redundant}",
        f"\tNumber redundant with another response: {c.num_redundant}",
        f"\tNumber inexact: {c.num_inexact}",
        f"\tNumber incorrect / spurious: {c.num_wrong}",
        "",
        "Diagnostic scores (ignoring slot fillers in key and responses that are already in reference KB):",
        f"\tDiagnostic Recall: {c.num_correct} / {c.num_answers} = {d.recall:.4f}",
        f"\tDiagnostic Precision: {c.num_correct} / ({c.num_responses}-{c.num_kb_redundant}) = {d.precision:.4f}",
        f"\tDiagnostic F1: {d.f1:.4f}",
        "",
        "Official Scores (requiring slot fillers that are already in reference KB):",
        f"\tRecall: ({c.num_correct}+{c.num_kb_redundant}) / ({c.num_answers}+{c.num_kb_answers}) = {o.recall:.4f}",
        f"\tPrecision: ({c.num_correct}+{c.num_kb_redundant}) / {c.num_responses} = {o.precision:.4f}",
        f"\tF1: {o.f1:.4f}",
    ]
    if report.slot_confidence:
        lines += ["", f"  {'Slot':<40} {'correct':>8} {'returned':>9} {'judged':>7} {'P':>7} {'R':>7} {'F1':>7}"]
        lines.append(f"  {'-'*40} {'-'*8} {'-'*9} {'-'*7} {'-'*7} {'-'*7} {'-'*7}")
        for conf in report.slot_confidence.values():
            lines.append(
                f"  {conf.slot_name:<40} {conf.correct:>8} {conf.returned:>9} {conf.judged:>7} "
                f"{conf.precision:>7.3f} {conf.recall:>7.3f} {conf.f1:>7.3f}"
            )
    return lines
