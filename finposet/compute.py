"""Invariants of finite posets.

Each query reads whichever view of the poset is cheaper: degree and path
questions go to the covering DAG, comparability questions to the relation
matrix. Inputs are trusted to be valid posets; nothing here re-validates.

Conventions for degenerate inputs:
- the empty poset has height 0 and width 0, is not connected and is not a lattice;
- ``mobius(p, x, y)`` is 0 whenever x is not <= y.
"""

from __future__ import annotations

from collections import deque
from typing import List, Optional, Set

import networkx as nx
import numpy as np
from scipy import sparse
from scipy.sparse.csgraph import maximum_bipartite_matching

from .graphs import longest_path_depth, random_topological_order
from .partitions import Partition
from .poset import Poset


# ----------------------------
# Extremal elements
# ----------------------------

def minimal_elements(p: Poset) -> Set[int]:
    g = p.covering.graph
    return {int(v) for v in g.nodes() if g.in_degree(v) == 0}


def maximal_elements(p: Poset) -> Set[int]:
    g = p.covering.graph
    return {int(v) for v in g.nodes() if g.out_degree(v) == 0}


def bottom_element(p: Poset) -> Optional[int]:
    """The least element, if any (a finite poset with one minimal element has one)."""
    mins = minimal_elements(p)
    return next(iter(mins)) if len(mins) == 1 else None


def top_element(p: Poset) -> Optional[int]:
    maxs = maximal_elements(p)
    return next(iter(maxs)) if len(maxs) == 1 else None


# ----------------------------
# Chains and antichains
# ----------------------------

def comparable_pairs(p: Poset) -> int:
    """Number of pairs (i, j) with i < j."""
    return int(p.matrix.sum()) - len(p)


def height(p: Poset) -> int:
    """Number of edges in a longest chain: longest path in the covering DAG."""
    if len(p) == 0:
        return 0
    depth = longest_path_depth(p.covering.graph)
    return int(max(depth.values()))


def _matching(p: Poset) -> np.ndarray:
    """Maximum matching of the strict-order bipartite graph.

    Left and right copies of every element; left i joins right j when i < j.
    Entry i of the result is the right vertex matched to left i, or -1.
    """
    S = sparse.csr_matrix(p.strict_matrix().astype(np.int8))
    return np.asarray(maximum_bipartite_matching(S, perm_type="column"))


def width(p: Poset) -> int:
    """Size of a largest antichain.

    By Dilworth's theorem this is the minimum number of chains covering p,
    which is n minus a maximum matching in the strict-order bipartite graph.
    """
    n = len(p)
    if n == 0:
        return 0
    return n - int(np.count_nonzero(_matching(p) >= 0))


def chain_decomposition(p: Poset) -> List[List[int]]:
    """A minimum partition of p into chains (``width(p)`` of them), each listed bottom-up.

    Every matched pair i < j of the maximum matching links i to j in one
    chain; chains start at elements nobody is matched to.
    """
    n = len(p)
    if n == 0:
        return []
    nxt = _matching(p)
    has_pred = np.zeros(n, dtype=bool)
    has_pred[nxt[nxt >= 0]] = True
    chains: List[List[int]] = []
    for start in range(n):
        if has_pred[start]:
            continue
        chain = [start]
        while nxt[chain[-1]] >= 0:
            chain.append(int(nxt[chain[-1]]))
        chains.append(chain)
    return chains


def maximum_antichain(p: Poset) -> List[int]:
    """A largest antichain, sorted.

    König's construction on the same bipartite graph: walk alternating paths
    from the unmatched left vertices; x is in the antichain iff its left copy
    is reached and its right copy is not.
    """
    n = len(p)
    if n == 0:
        return []
    S = p.strict_matrix()
    match_left = _matching(p)
    match_right = np.full(n, -1, dtype=np.int64)
    for i in range(n):
        if match_left[i] >= 0:
            match_right[match_left[i]] = i

    reached_left = np.zeros(n, dtype=bool)
    reached_right = np.zeros(n, dtype=bool)
    queue = deque(i for i in range(n) if match_left[i] < 0)
    for i in queue:
        reached_left[i] = True
    while queue:
        i = queue.popleft()
        for j in np.flatnonzero(S[i]):
            if reached_right[j]:
                continue
            reached_right[j] = True
            k = int(match_right[j])
            if k >= 0 and not reached_left[k]:
                reached_left[k] = True
                queue.append(k)
    return [int(x) for x in np.flatnonzero(reached_left & ~reached_right)]


def linear_extension(p: Poset) -> List[int]:
    """Lexicographically smallest linear extension (topological order of the covering DAG)."""
    return [int(v) for v in nx.lexicographical_topological_sort(p.covering.graph)]


def random_linear_extension(p: Poset, seed: Optional[int] = None) -> List[int]:
    rng = np.random.default_rng(seed)
    return [int(v) for v in random_topological_order(p.covering.graph, rng)]


# ----------------------------
# Connectivity
# ----------------------------

def is_connected(p: Poset) -> bool:
    """Connectivity of the covering graph with edge directions ignored."""
    if len(p) == 0:
        return False
    UG = nx.Graph()
    UG.add_nodes_from(p.elements())
    UG.add_edges_from(p.cover_edges())
    return nx.is_connected(UG)


def connected_components(p: Poset) -> List[List[int]]:
    """Components of the covering graph, each sorted, ordered by smallest element."""
    return Partition.from_pairs(len(p), p.cover_edges()).blocks()


# ----------------------------
# Möbius function
# ----------------------------

def _extension_order(m: np.ndarray) -> np.ndarray:
    # strictly smaller elements have strictly smaller down-sets
    return np.argsort(m.sum(axis=0), kind="stable")


def _mobius_row(m: np.ndarray, S: np.ndarray, order: np.ndarray, x: int) -> np.ndarray:
    """mu(x, .) by dynamic programming over a linear extension.

    Entries for elements not above x stay 0, so summing mu(x, z) over all
    z < y sums exactly over the half-open interval [x, y).
    """
    mu = np.zeros(m.shape[0], dtype=np.int64)
    mu[x] = 1
    up = m[x]
    for y in order:
        if y == x or not up[y]:
            continue
        mu[y] = -mu[S[:, y]].sum()
    return mu


def mobius(p: Poset, x: int, y: int) -> int:
    """Möbius function mu(x, y); 0 for incomparable pairs and for y < x."""
    x, y = p.check_index(x), p.check_index(y)
    if not p.leq(x, y):
        return 0
    m = p.matrix
    # only the interval [x, y] matters
    interval = np.flatnonzero(m[x] & m[:, y])
    sub = m[np.ix_(interval, interval)]
    S = sub.copy()
    np.fill_diagonal(S, False)
    row = _mobius_row(sub, S, _extension_order(sub), int(np.flatnonzero(interval == x)[0]))
    return int(row[np.flatnonzero(interval == y)[0]])


def mobius_matrix(p: Poset) -> np.ndarray:
    """Table of mu(x, y) for all pairs as an int64 array. O(n^3)."""
    m = p.matrix
    S = p.strict_matrix()
    order = _extension_order(m)
    n = len(p)
    mu = np.zeros((n, n), dtype=np.int64)
    for x in range(n):
        mu[x] = _mobius_row(m, S, order, x)
    return mu


# ----------------------------
# Lattice queries
# ----------------------------

def join(p: Poset, x: int, y: int) -> Optional[int]:
    """Least upper bound of x and y, or None."""
    m = p.matrix
    upper = m[p.check_index(x)] & m[p.check_index(y)]
    for z in np.flatnonzero(upper):
        if not (upper & ~m[z]).any():
            return int(z)
    return None


def meet(p: Poset, x: int, y: int) -> Optional[int]:
    """Greatest lower bound of x and y, or None."""
    m = p.matrix
    lower = m[:, p.check_index(x)] & m[:, p.check_index(y)]
    for z in np.flatnonzero(lower):
        if not (lower & ~m[:, z]).any():
            return int(z)
    return None


def is_lattice(p: Poset) -> bool:
    """Every pair has a join and a meet.

    A finite poset with a top in which every pair has a meet is a lattice, so
    only meets of incomparable pairs are checked.
    """
    n = len(p)
    if n == 0 or top_element(p) is None:
        return False
    m = p.matrix
    for x in range(n):
        for y in range(x + 1, n):
            if m[x, y] or m[y, x]:
                continue
            if meet(p, x, y) is None:
                return False
    return True
