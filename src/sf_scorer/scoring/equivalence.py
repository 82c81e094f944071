"""
Equivalence-Class Resolver

Lenient matching can make two key records indistinguishable even though
assessors put their fillers in different equivalence classes. Every such
collision declares the two classes interchangeable; this module keeps those
declarations as a union-find and rewrites the judgment table and the
per-query answer sets so that each merged group is represented by its
numerically smallest class id.

Class ids are only meaningful within one query, so nodes are
(query id, class id) pairs.
"""

from __future__ import annotations

import logging

from sf_scorer.domain.entities import JudgmentEntry, QueryAnswerSets
from sf_scorer.domain.value_objects import ResponseKey

logger = logging.getLogger(__name__)

_Node = tuple[str, int]


class EquivalenceClassResolver:
    """Union-find over equivalence classes, smallest id wins"""

    def __init__(self) -> None:
        self._parent: dict[_Node, _Node] = {}

    def __len__(self) -> int:
        return len(self._parent)

    def _find_node(self, node: _Node) -> _Node:
        root = node
        while self._parent.get(root, root) != root:
            root = self._parent[root]
        # path compression
        while node != root:
            next_node = self._parent[node]
            self._parent[node] = root
            node = next_node
        return root

    def find(self, query_id: str, equivalence_class: int) -> int:
        """Representative class of ``equivalence_class`` (itself when never merged)"""
        return self._find_node((query_id, equivalence_class))[1]

    def union(self, query_id: str, first: int, second: int) -> int:
        """
        Declare two classes of a query equivalent

        Returns:
            The representative of the merged group
        """
        root_a = self._find_node((query_id, first))
        root_b = self._find_node((query_id, second))
        self._parent.setdefault(root_a, root_a)
        self._parent.setdefault(root_b, root_b)
        if root_a == root_b:
            return root_a[1]
        keep, merge = (root_a, root_b) if root_a[1] < root_b[1] else (root_b, root_a)
        self._parent[merge] = keep
        return keep[1]

    def normalize(
        self,
        entries: dict[ResponseKey, JudgmentEntry],
        answer_sets: QueryAnswerSets,
    ) -> None:
        """
        Rewrite stored classes and answer sets to their representatives

        Merging only shrinks the answer sets. Running this again on
        normalized data changes nothing.
        """
        if not self._parent:
            return
        for key, entry in entries.items():
            entry.equivalence_class = self.find(key.query_id, entry.equivalence_class)
        for sets in (answer_sets.correct, answer_sets.redundant):
            for query_id, classes in sets.items():
                normalized = {self.find(query_id, c) for c in classes}
                if normalized != classes:
                    logger.debug("Collapsed classes of %s: %s -> %s", query_id, sorted(classes), sorted(normalized))
                    sets[query_id] = normalized
