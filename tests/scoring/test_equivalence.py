"""
Tests for the equivalence-class resolver (equivalence.py)
"""

from sf_scorer.domain.entities import JudgmentEntry, QueryAnswerSets
from sf_scorer.domain.value_objects import Judgment, ResponseKey
from sf_scorer.scoring.equivalence import EquivalenceClassResolver

Q = "SF1:per:title"


def _entry(eclass, judgment=Judgment.CORRECT):
    return JudgmentEntry(judgment, eclass, "C", "C", "C")


def _key(filler, query=Q):
    return ResponseKey(query, "*", "*", "*", "*", filler)


class TestUnionFind:
    def test_unknown_class_is_its_own_representative(self):
        assert EquivalenceClassResolver().find(Q, 42) == 42

    def test_smallest_id_wins(self):
        resolver = EquivalenceClassResolver()
        assert resolver.union(Q, 9, 5) == 5
        assert resolver.find(Q, 9) == 5
        assert resolver.find(Q, 5) == 5

    def test_union_is_transitive(self):
        resolver = EquivalenceClassResolver()
        resolver.union(Q, 13, 9)
        resolver.union(Q, 9, 5)
        assert resolver.find(Q, 13) == 5

    def test_transitivity_is_order_independent(self):
        forward = EquivalenceClassResolver()
        forward.union(Q, 5, 9)
        forward.union(Q, 9, 13)
        backward = EquivalenceClassResolver()
        backward.union(Q, 9, 13)
        backward.union(Q, 5, 9)
        assert forward.find(Q, 13) == backward.find(Q, 13) == 5

    def test_self_union(self):
        resolver = EquivalenceClassResolver()
        assert resolver.union(Q, 7, 7) == 7
        assert len(resolver) == 1

    def test_classes_are_scoped_per_query(self):
        resolver = EquivalenceClassResolver()
        resolver.union(Q, 5, 9)
        assert resolver.find("SF2:per:title", 9) == 9


class TestNormalize:
    def _setup(self):
        resolver = EquivalenceClassResolver()
        resolver.union(Q, 9, 5)
        entries = {_key("harvard"): _entry(9), _key("yale"): _entry(12)}
        sets = QueryAnswerSets()
        for eclass in (5, 9, 12):
            sets.add(Judgment.CORRECT, Q, eclass)
        return resolver, entries, sets

    def test_merged_classes_collapse_to_smallest(self):
        resolver, entries, sets = self._setup()
        resolver.normalize(entries, sets)
        assert sets.correct_for(Q) == {5, 12}
        assert entries[_key("harvard")].equivalence_class == 5
        assert entries[_key("yale")].equivalence_class == 12

    def test_idempotent(self):
        resolver, entries, sets = self._setup()
        resolver.normalize(entries, sets)
        snapshot = ({k: e.equivalence_class for k, e in entries.items()}, {q: set(s) for q, s in sets.correct.items()})
        resolver.normalize(entries, sets)
        assert ({k: e.equivalence_class for k, e in entries.items()}, sets.correct) == snapshot

    def test_set_sizes_never_grow(self):
        resolver, entries, sets = self._setup()
        sets.add(Judgment.REDUNDANT, Q, 9)
        before = len(sets.correct_for(Q)) + len(sets.redundant_for(Q))
        resolver.normalize(entries, sets)
        after = len(sets.correct_for(Q)) + len(sets.redundant_for(Q))
        assert after <= before
        assert sets.redundant_for(Q) == {5}

    def test_other_queries_untouched(self):
        resolver, entries, sets = self._setup()
        sets.add(Judgment.CORRECT, "SF2:per:title", 9)
        resolver.normalize(entries, sets)
        assert sets.correct_for("SF2:per:title") == {9}
