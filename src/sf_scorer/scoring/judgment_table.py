"""
Judgment Table Builder

Collects the assessed key into a table keyed by normalized response keys.

Under lenient matching several key records can map to the same response
key. The table then keeps the strongest judgment, in the order CORRECT,
REDUNDANT, IGNORE, INEXACT, WRONG, and declares the equivalence classes of
all colliding records interchangeable. As a side effect the scorer no
longer distinguishes fillers such as "President of Harvard" and
"President of Yale" once offsets are ignored.
"""

from __future__ import annotations

import itertools
import logging
from collections import Counter
from typing import Iterable, Iterator

from sf_scorer.domain.constants import EQUIVALENCE_CLASS_BASE
from sf_scorer.domain.entities import JudgedRecord, JudgmentEntry, QueryAnswerSets
from sf_scorer.domain.value_objects import ResponseKey
from sf_scorer.scorer_config import ScoringPolicy
from sf_scorer.scoring.equivalence import EquivalenceClassResolver
from sf_scorer.scoring.normalizer import key_for_record

logger = logging.getLogger(__name__)


class JudgmentTable:
    """
    Judgments of the key, built incrementally and then normalized once

    Records may only be added before ``normalize()``; lookups are only
    allowed after it, so scoring always sees resolved equivalence classes.
    """

    def __init__(
        self,
        policy: ScoringPolicy,
        *,
        class_ids: Iterator[int] | None = None,
        resolver: EquivalenceClassResolver | None = None,
    ) -> None:
        self.policy = policy
        self.answer_sets = QueryAnswerSets()
        self.resolver = resolver if resolver is not None else EquivalenceClassResolver()
        # Number of distinct keys per slot name
        self.judged_by_slot: Counter[str] = Counter()
        self._class_ids = class_ids if class_ids is not None else itertools.count(EQUIVALENCE_CLASS_BASE)
        self._entries: dict[ResponseKey, JudgmentEntry] = {}
        self._normalized = False

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def normalized(self) -> bool:
        return self._normalized

    def add(self, record: JudgedRecord) -> ResponseKey:
        """
        Add one judged record

        Args:
            record: Parsed key record

        Returns:
            The response key the record was stored under

        Raises:
            RuntimeError: If the table has already been normalized
        """
        if self._normalized:
            raise RuntimeError("Cannot add judgements after equivalence classes were normalized")

        key = key_for_record(record, self.policy)
        equivalence_class = record.equivalence_class or next(self._class_ids)
        query_id = record.query_id

        entry = self._entries.get(key)
        if entry is None:
            self._entries[key] = JudgmentEntry(
                judgment=record.judgment,
                equivalence_class=equivalence_class,
                filler_offset_judgment=record.filler_offset_judgment,
                entity_offset_judgment=record.entity_offset_judgment,
                predicate_offset_judgment=record.predicate_offset_judgment,
            )
            self.judged_by_slot[record.slot_name] += 1
            self.answer_sets.add(record.judgment, query_id, equivalence_class)
            return key

        # Only reachable under lenient matching
        if record.judgment.outranks(entry.judgment):
            logger.debug(
                "Conflicting judgements for %s: %s replaces %s",
                key, record.judgment.value, entry.judgment.value,
            )
            # The stored class moves to the answer set of the stronger judgment;
            # it is merged with the new class below.
            self.answer_sets.discard(entry.judgment, query_id, entry.equivalence_class)
            self.answer_sets.add(record.judgment, query_id, entry.equivalence_class)
            entry.judgment = record.judgment
            entry.filler_offset_judgment = record.filler_offset_judgment
            entry.entity_offset_judgment = record.entity_offset_judgment
            entry.predicate_offset_judgment = record.predicate_offset_judgment

        self.resolver.union(query_id, entry.equivalence_class, equivalence_class)
        return key

    def add_all(self, records: Iterable[JudgedRecord]) -> int:
        """Add records in order; returns the number of records read"""
        count = 0
        for record in records:
            self.add(record)
            count += 1
        return count

    def normalize(self) -> None:
        """Collapse merged equivalence classes; must run before any lookup"""
        self.resolver.normalize(self._entries, self.answer_sets)
        self._normalized = True

    def get(self, key: ResponseKey) -> JudgmentEntry | None:
        """
        Look up the judgment stored for a key

        Raises:
            RuntimeError: If called before ``normalize()``
        """
        if not self._normalized:
            raise RuntimeError("Judgement table must be normalized before it is consulted")
        return self._entries.get(key)
