"""
Tests for the judgment table builder (judgment_table.py)
"""

import itertools

import pytest

from sf_scorer.domain.entities import JudgedRecord
from sf_scorer.domain.value_objects import Judgment, ResponseKey
from sf_scorer.scorer_config import ScoringPolicy
from sf_scorer.scoring.judgment_table import JudgmentTable

Q = "SF1:per:title"


def _record(
    judgment=Judgment.CORRECT,
    eclass=5,
    doc="D1",
    filler="president",
    offsets=("10-18", "0-5", "0-40"),
    query=Q,
    offset_judgment="C",
):
    return JudgedRecord(
        response_id="1",
        query_id=query,
        doc_id=doc,
        filler=filler,
        filler_offsets=offsets[0],
        entity_offsets=offsets[1],
        predicate_offsets=offsets[2],
        filler_offset_judgment=offset_judgment,
        entity_offset_judgment=offset_judgment,
        predicate_offset_judgment=offset_judgment,
        judgment=judgment,
        equivalence_class=eclass,
    )


def _lookup(table, filler="president", query=Q):
    return table.get(ResponseKey(query, "*", "*", "*", "*", filler))


class TestNewKeys:
    def test_correct_record(self):
        table = JudgmentTable(ScoringPolicy())
        key = table.add(_record())
        table.normalize()
        entry = table.get(key)
        assert entry.judgment is Judgment.CORRECT
        assert entry.equivalence_class == 5
        assert entry.filler_offset_judgment == "C"
        assert table.answer_sets.correct_for(Q) == {5}
        assert table.answer_sets.redundant_for(Q) == set()

    def test_redundant_record(self):
        table = JudgmentTable(ScoringPolicy())
        table.add(_record(Judgment.REDUNDANT, eclass=8))
        assert table.answer_sets.redundant_for(Q) == {8}
        assert table.answer_sets.correct_for(Q) == set()

    def test_wrong_record_joins_no_answer_set(self):
        table = JudgmentTable(ScoringPolicy())
        table.add(_record(Judgment.WRONG, eclass=0))
        assert table.answer_sets.correct == {}
        assert table.answer_sets.redundant == {}

    def test_fresh_ids_for_class_zero(self):
        table = JudgmentTable(ScoringPolicy())
        first = table.add(_record(Judgment.CORRECT, eclass=0, filler="a"))
        second = table.add(_record(Judgment.CORRECT, eclass=0, filler="b"))
        table.normalize()
        assert table.get(first).equivalence_class == 1_000_000
        assert table.get(second).equivalence_class == 1_000_001

    def test_injected_id_generator(self):
        table = JudgmentTable(ScoringPolicy(), class_ids=itertools.count(50))
        key = table.add(_record(eclass=0))
        table.normalize()
        assert table.get(key).equivalence_class == 50

    def test_strict_policy_keeps_documents_apart(self):
        table = JudgmentTable(ScoringPolicy())
        table.add(_record(doc="D1"))
        table.add(_record(doc="D2", eclass=6))
        assert len(table) == 2

    def test_judged_counts_distinct_keys_per_slot(self):
        table = JudgmentTable(ScoringPolicy(any_doc=True))
        table.add(_record(doc="D1"))
        table.add(_record(doc="D2"))
        table.add(_record(filler="chairman", eclass=6))
        table.add(_record(query="SF2:per:age", filler="52", eclass=1))
        assert table.judged_by_slot["per:title"] == 2
        assert table.judged_by_slot["per:age"] == 1


class TestConflictResolution:
    def test_correct_beats_wrong_under_any_doc(self):
        table = JudgmentTable(ScoringPolicy(any_doc=True))
        table.add(_record(Judgment.WRONG, eclass=0, doc="D1"))
        table.add(_record(Judgment.CORRECT, eclass=5, doc="D2"))
        table.normalize()
        assert _lookup(table).judgment is Judgment.CORRECT

    def test_weaker_judgment_does_not_replace(self):
        table = JudgmentTable(ScoringPolicy(any_doc=True))
        table.add(_record(Judgment.CORRECT, eclass=5, doc="D1", offset_judgment="C"))
        table.add(_record(Judgment.INEXACT, eclass=0, doc="D2", offset_judgment="W"))
        table.normalize()
        entry = _lookup(table)
        assert entry.judgment is Judgment.CORRECT
        assert entry.filler_offset_judgment == "C"

    def test_winner_brings_its_offset_judgments(self):
        table = JudgmentTable(ScoringPolicy(any_doc=True))
        table.add(_record(Judgment.WRONG, eclass=0, doc="D1", offset_judgment="W"))
        table.add(_record(Judgment.CORRECT, eclass=5, doc="D2", offset_judgment="C"))
        table.normalize()
        assert _lookup(table).predicate_offset_judgment == "C"

    @pytest.mark.parametrize("order", list(itertools.permutations(list(Judgment))))
    def test_strongest_judgment_survives_any_order(self, order):
        table = JudgmentTable(ScoringPolicy(any_doc=True))
        for i, judgment in enumerate(order):
            table.add(_record(judgment, eclass=0, doc=f"D{i}"))
        table.normalize()
        assert len(table) == 1
        assert _lookup(table).judgment is Judgment.CORRECT

    def test_redundant_class_moves_to_correct(self):
        table = JudgmentTable(ScoringPolicy(any_doc=True))
        table.add(_record(Judgment.REDUNDANT, eclass=7, doc="D1"))
        table.add(_record(Judgment.CORRECT, eclass=8, doc="D2"))
        assert table.answer_sets.redundant_for(Q) == set()
        assert table.answer_sets.correct_for(Q) == {7}
        table.normalize()
        assert _lookup(table).equivalence_class == 7

    def test_classes_of_colliding_records_merge(self):
        table = JudgmentTable(ScoringPolicy(ignore_offsets=True))
        table.add(_record(eclass=9, filler="president of Harvard", offsets=("1-2", "3-4", "5-6")))
        table.add(_record(eclass=5, filler="Harvard president"))
        table.add(_record(eclass=12, filler="Yale president"))
        table.add(_record(eclass=5, filler="president of Harvard", offsets=("7-8", "9-10", "11-12")))
        assert table.answer_sets.correct_for(Q) == {5, 9, 12}

        table.normalize()

        assert table.answer_sets.correct_for(Q) == {5, 12}
        key = ResponseKey(Q, "D1", "*", "*", "*", "president of Harvard")
        assert table.get(key).equivalence_class == 5


class TestBuildScoreBarrier:
    def test_lookup_before_normalize_raises(self):
        table = JudgmentTable(ScoringPolicy())
        key = table.add(_record())
        with pytest.raises(RuntimeError, match="normalized"):
            table.get(key)

    def test_add_after_normalize_raises(self):
        table = JudgmentTable(ScoringPolicy())
        table.normalize()
        with pytest.raises(RuntimeError, match="Cannot add"):
            table.add(_record())

    def test_add_all_counts_records(self):
        table = JudgmentTable(ScoringPolicy(any_doc=True))
        assert table.add_all([_record(doc="D1"), _record(doc="D2")]) == 2
        assert len(table) == 1
