"""
Use Cases Layer

Aggregates the scoring pipeline and provides use cases called from the runner.
"""

from sf_scorer.use_cases.evaluation import (
    ScoringContext,
    build_judgment_table,
    group_responses,
    select_queries,
    run_scoring,
    slot_confidence_frame,
    responses_frame,
    summary_frame,
    format_summary,
)

__all__ = [
    "ScoringContext",
    "build_judgment_table",
    "group_responses",
    "select_queries",
    "run_scoring",
    "slot_confidence_frame",
    "responses_frame",
    "summary_frame",
    "format_summary",
]
