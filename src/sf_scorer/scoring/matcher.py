"""
Response Matcher

Classifies each submitted response of a query against the judgment table.
"""

from __future__ import annotations

import logging

from sf_scorer.domain.constants import SINGLE
from sf_scorer.domain.entities import ResponseJudgment, SubmittedResponse
from sf_scorer.domain.value_objects import InvalidJudgmentError, Judgment, Outcome
from sf_scorer.scoring.judgment_table import JudgmentTable
from sf_scorer.scoring.normalizer import key_for_response

logger = logging.getLogger(__name__)


def responses_to_score(
    query_id: str,
    slot_type: str,
    responses: list[SubmittedResponse],
) -> list[SubmittedResponse]:
    """
    Responses of a query that take part in scoring

    A single-valued slot accepts one response. When a system returns
    several, none of them is scored.
    """
    if slot_type == SINGLE and len(responses) > 1:
        logger.warning(
            "Ignoring all %d responses to single-valued slot %s (multiple responses)",
            len(responses), query_id,
        )
        return []
    return responses


class ResponseMatcher:
    """Looks up responses in a normalized judgment table"""

    def __init__(self, table: JudgmentTable) -> None:
        self.table = table

    def _nil_outcome(self, query_id: str) -> Outcome:
        if self.table.answer_sets.correct_for(query_id):
            return Outcome.MISSING
        if self.table.answer_sets.redundant_for(query_id):
            return Outcome.MISSING_KB_FILLER
        return Outcome.CORRECTLY_EMPTY

    def match_query(
        self,
        query_id: str,
        responses: list[SubmittedResponse],
    ) -> list[ResponseJudgment]:
        """
        Classify the responses of one query in order

        Each equivalence class counts once per query; later responses in a
        class already seen are redundant with another response.

        Args:
            query_id: entity:slot query id
            responses: The query's responses, already filtered by responses_to_score

        Returns:
            One ResponseJudgment per response

        Raises:
            InvalidJudgmentError: If the table holds a value outside the judgment codes
        """
        seen: set[int] = set()
        warn_nil = len(responses) > 1
        results = []

        for response in responses:
            if response.is_nil:
                if warn_nil:
                    logger.warning("More than one response, including NIL, for %s", query_id)
                    warn_nil = False
                results.append(ResponseJudgment(query_id, response, self._nil_outcome(query_id)))
                continue

            key = key_for_response(response, self.table.policy)
            entry = self.table.get(key)
            if entry is None:
                logger.warning("No judgement for %s; scoring it as wrong", key)
                results.append(ResponseJudgment(query_id, response, Outcome.WRONG, key=key))
                continue

            judgment = entry.judgment
            eclass = entry.equivalence_class
            if judgment in (Judgment.IGNORE, Judgment.WRONG):
                outcome = Outcome.WRONG
            elif judgment is Judgment.INEXACT:
                outcome = Outcome.INEXACT
            elif judgment in (Judgment.CORRECT, Judgment.REDUNDANT):
                if eclass in seen:
                    outcome = Outcome.REDUNDANT_WITH_RESPONSE
                else:
                    seen.add(eclass)
                    outcome = Outcome.CORRECT if judgment is Judgment.CORRECT else Outcome.REDUNDANT_WITH_KB
            else:
                raise InvalidJudgmentError(f"Invalid judgement {judgment!r} for {key}")

            results.append(ResponseJudgment(query_id, response, outcome, judgment, eclass, key))

        return results
