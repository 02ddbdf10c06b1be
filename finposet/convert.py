"""Conversions between the encodings of a finite order.

Matrix -> covering is transitive reduction, covering -> matrix is
reflexive-transitive closure. The round trip is lossless in both directions:
``covering_to_matrix(matrix_to_covering(R)) == R`` and
``matrix_to_covering(covering_to_matrix(C)) == C``.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import networkx as nx

from .representations import ComparabilityGraph, Covering, RelationMatrix

if TYPE_CHECKING:
    from .poset import Poset

logger = logging.getLogger(__name__)


def matrix_to_covering(relation: RelationMatrix) -> Covering:
    covering = Covering.from_matrix(relation)
    logger.debug("reduced %d x %d relation to %d covering edges",
                 relation.size(), relation.size(), len(covering.edges()))
    return covering


def covering_to_matrix(covering: Covering) -> RelationMatrix:
    return RelationMatrix.from_covering(covering)


def matrix_to_comparability(relation: RelationMatrix) -> ComparabilityGraph:
    return ComparabilityGraph.from_matrix(relation)


def comparability_to_matrix(graph: ComparabilityGraph) -> RelationMatrix:
    return graph.to_matrix()


def covering_to_comparability(covering: Covering) -> ComparabilityGraph:
    # the strict order is exactly the set of non-trivial reachable pairs
    pairs = nx.transitive_closure_dag(covering.graph).edges()
    return ComparabilityGraph(covering.size(), pairs)


def comparability_to_covering(graph: ComparabilityGraph) -> Covering:
    reduced = nx.transitive_reduction(graph.graph)
    return Covering(graph.size(), reduced.edges(), validate=False)


def to_relation_matrix(poset: "Poset") -> RelationMatrix:
    return poset.relation


def to_covering_representation(poset: "Poset") -> Covering:
    return poset.covering


def to_comparability_graph(poset: "Poset") -> ComparabilityGraph:
    return ComparabilityGraph.from_matrix(poset.relation)
