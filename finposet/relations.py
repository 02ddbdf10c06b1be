"""Closure, reduction and validation of order relations.

Everything here works on raw data: a boolean ``numpy`` matrix ``R`` with
``R[i, j]`` meaning ``i <= j``, or a list of directed edges ``(i, j)`` over the
index set ``0..n-1``. The representation classes and the :class:`Poset` value
type are built on top of these functions.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Tuple

import networkx as nx
import numpy as np

from .errors import DimensionMismatch, IndexOutOfRange, InvalidRelation

logger = logging.getLogger(__name__)

Edge = Tuple[int, int]


def as_bool_matrix(matrix) -> np.ndarray:
    """Copy ``matrix`` into a square boolean array."""
    try:
        m = np.array(matrix, dtype=bool)
    except ValueError as exc:
        raise DimensionMismatch(f"relation matrix rows have unequal lengths: {exc}") from exc
    if m.ndim == 1 and m.size == 0:
        # a bare [] is the empty relation
        return np.zeros((0, 0), dtype=bool)
    if m.ndim != 2 or m.shape[0] != m.shape[1]:
        raise DimensionMismatch(f"relation matrix must be square, got shape {m.shape}")
    return m


def edges_to_adjacency(n: int, edges: Iterable[Edge]) -> np.ndarray:
    adj = np.zeros((n, n), dtype=bool)
    for (i, j) in edges:
        i, j = int(i), int(j)
        for x in (i, j):
            if not 0 <= x < n:
                raise IndexOutOfRange(x, n)
        adj[i, j] = True
    return adj


def close_matrix(adj: np.ndarray) -> np.ndarray:
    """Transitive closure of a boolean adjacency matrix (Warshall, one row sweep per pivot)."""
    R = adj.copy()
    for k in range(R.shape[0]):
        # every row that reaches k also reaches whatever k reaches
        R[R[:, k]] |= R[k]
    return R


def transitive_closure(n: int, edges: Iterable[Edge]) -> np.ndarray:
    """Reflexive-transitive closure of an edge set over ``0..n-1``.

    O(n^3) in the worst case. The diagonal is set explicitly, so an empty edge
    set yields the antichain relation.
    """
    adj = edges_to_adjacency(int(n), edges)
    np.fill_diagonal(adj, True)
    return close_matrix(adj)


def strict_part(matrix: np.ndarray) -> np.ndarray:
    S = np.array(matrix, dtype=bool)
    np.fill_diagonal(S, False)
    return S


def transitive_reduction(matrix) -> List[Edge]:
    """Covering edges of a (valid) order relation, sorted.

    An edge ``i -> j`` is kept iff ``i < j`` and there is no ``k`` with
    ``i < k < j``. The result is unique for a given relation.
    """
    R = as_bool_matrix(matrix)
    S = strict_part(R)
    Si = S.astype(np.int64)
    two_step = (Si @ Si) > 0
    H = S & ~two_step
    return [(int(i), int(j)) for i, j in np.argwhere(H)]


def validate_relation(matrix) -> np.ndarray:
    """Check the partial-order axioms and return the matrix as a boolean array.

    Raises
    ------
    DimensionMismatch
        If the matrix is not square.
    InvalidRelation
        On the first reflexivity, antisymmetry or transitivity violation
        (in that order), naming the offending element, pair or triple.
    """
    R = as_bool_matrix(matrix)
    n = R.shape[0]

    diag = np.diagonal(R)
    if not diag.all():
        i = int(np.argmin(diag))
        raise InvalidRelation(f"not reflexive: {i} <= {i} does not hold")

    sym = strict_part(R & R.T)
    if sym.any():
        i, j = (int(x) for x in np.argwhere(sym)[0])
        raise InvalidRelation(f"not antisymmetric: {i} <= {j} and {j} <= {i} with {i} != {j}")

    Ri = R.astype(np.int64)
    missing = ((Ri @ Ri) > 0) & ~R
    if missing.any():
        i, k = (int(x) for x in np.argwhere(missing)[0])
        j = int(np.argmax(R[i] & R[:, k]))
        raise InvalidRelation(f"not transitive: {i} <= {j} and {j} <= {k} but not {i} <= {k}")

    logger.debug("validated relation on %d elements (%d strict pairs)", n, int(R.sum()) - n)
    return R


def validate_covering(n: int, edges: Iterable[Edge]) -> List[Edge]:
    """Check that ``edges`` is the Hasse diagram of some partial order on ``0..n-1``.

    The edge set must be loop-free, duplicate-free, acyclic and irredundant
    (no edge implied by a longer path). Returns the edges sorted.
    """
    n = int(n)
    if n < 0:
        raise ValueError(f"size must be non-negative, got {n}")

    edge_list: List[Edge] = []
    seen = set()
    for (i, j) in edges:
        i, j = int(i), int(j)
        for x in (i, j):
            if not 0 <= x < n:
                raise IndexOutOfRange(x, n)
        if i == j:
            raise InvalidRelation(f"covering edge {i} -> {j} is a loop")
        if (i, j) in seen:
            raise InvalidRelation(f"covering edge {i} -> {j} listed twice")
        seen.add((i, j))
        edge_list.append((i, j))

    G = nx.DiGraph()
    G.add_nodes_from(range(n))
    G.add_edges_from(edge_list)
    if not nx.is_directed_acyclic_graph(G):
        cycle = [u for (u, _v) in nx.find_cycle(G)]
        raise InvalidRelation(f"covering edges contain a cycle through {cycle}")

    R = transitive_closure(n, edge_list)
    kept = set(transitive_reduction(R))
    for (i, j) in sorted(edge_list):
        if (i, j) not in kept:
            raise InvalidRelation(f"covering edge {i} -> {j} is implied by transitivity")

    logger.debug("validated covering on %d elements with %d edges", n, len(edge_list))
    return sorted(edge_list)
