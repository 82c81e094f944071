"""
Key Normalizer

Builds the lookup key of a judged record or submitted response under the
active leniency policy.
"""

from sf_scorer.domain.constants import WILDCARD
from sf_scorer.domain.entities import JudgedRecord, SubmittedResponse
from sf_scorer.domain.value_objects import ResponseKey
from sf_scorer.scorer_config import ScoringPolicy


def normalize_key(
    query_id: str,
    doc_id: str,
    predicate_offsets: str,
    entity_offsets: str,
    filler_offsets: str,
    filler: str,
    policy: ScoringPolicy,
) -> ResponseKey:
    """
    Apply document, offset, and case folding to raw provenance fields

    Args:
        query_id: entity:slot query id
        doc_id: Supporting document id
        predicate_offsets: Justification offsets
        entity_offsets: Query entity mention offsets
        filler_offsets: Filler mention offsets
        filler: Filler string
        policy: Active scoring policy

    Returns:
        ResponseKey
    """
    if policy.any_doc:
        doc_id = WILDCARD
    if policy.any_doc or policy.ignore_offsets:
        predicate_offsets = entity_offsets = filler_offsets = WILDCARD
    if policy.no_case:
        filler = filler.lower()
    return ResponseKey(
        query_id=query_id,
        doc_id=doc_id,
        predicate_offsets=predicate_offsets,
        entity_offsets=entity_offsets,
        filler_offsets=filler_offsets,
        filler=filler,
    )


def key_for_record(record: JudgedRecord, policy: ScoringPolicy) -> ResponseKey:
    return normalize_key(
        record.query_id,
        record.doc_id,
        record.predicate_offsets,
        record.entity_offsets,
        record.filler_offsets,
        record.filler,
        policy,
    )


def key_for_response(response: SubmittedResponse, policy: ScoringPolicy) -> ResponseKey:
    """Key of a non-NIL response; NIL responses assert no filler and have none"""
    if response.is_nil:
        raise ValueError(f"NIL response for {response.query_id} has no response key")
    return normalize_key(
        response.query_id,
        response.doc_id,
        response.predicate_offsets,
        response.entity_offsets,
        response.filler_offsets,
        response.filler,
        policy,
    )
