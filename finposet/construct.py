"""Building posets from scratch and from other posets.

Parametric families (chains, antichains, corollas, fences, boolean lattices,
random orders), user-supplied definitions (relation pairs, matrices, covering
edges) and combinators (product, coproduct, ordinal sum, dual, lattice of
down-sets). User input is validated here; combinators assemble their result
from already-valid operands and skip re-validation.

Indexing conventions
--------------------
- ``product(P, Q)``: the pair ``(p, q)`` is element ``p * len(Q) + q``.
- ``coproduct(P, Q)`` / ``ordinal_sum(P, Q)``: ``P`` keeps its indices and
  ``Q`` is shifted up by ``len(P)``.
- ``boolean_lattice(n)``: element ``i`` is the subset with bitmask ``i``.
"""

from __future__ import annotations

import logging
from typing import Callable, FrozenSet, Iterable, List, Optional, Tuple

import numpy as np
from scipy.linalg import block_diag

from .config import PosetConfig
from .errors import DimensionMismatch, SizeLimitExceeded
from .graphs import layered_order_dag, random_order_dag
from .poset import Poset
from .relations import Edge, edges_to_adjacency, transitive_closure
from .representations import Covering, RelationMatrix

logger = logging.getLogger(__name__)

PosetFactory = Callable[[int], Poset]


def _check_size(n: int) -> int:
    n = int(n)
    if n < 0:
        raise ValueError(f"size must be non-negative, got {n}")
    return n


def _trusted(matrix: np.ndarray, edges: Optional[Iterable[Edge]] = None) -> Poset:
    """Wrap a matrix (and optionally its covering edges) known to be a valid order."""
    relation = RelationMatrix(matrix, validate=False)
    if edges is None:
        return Poset(relation)
    return Poset._from_views(relation, Covering(relation.size(), edges, validate=False))


# ----------------------------
# Families
# ----------------------------

def chain(n: int) -> Poset:
    """Total order 0 < 1 < ... < n-1."""
    n = _check_size(n)
    idx = np.arange(n)
    return _trusted(idx[:, None] <= idx[None, :], [(i, i + 1) for i in range(n - 1)])


def antichain(n: int) -> Poset:
    """n pairwise incomparable elements."""
    n = _check_size(n)
    return _trusted(np.eye(n, dtype=bool), [])


def corolla(n: int) -> Poset:
    """n incomparable leaves 0..n-1 over a common root n."""
    n = _check_size(n)
    m = np.eye(n + 1, dtype=bool)
    m[n, :] = True
    return _trusted(m, [(n, i) for i in range(n)])


def fence(n: int) -> Poset:
    """Zigzag 0 < 1 > 2 < 3 > ...: every odd element covers its even neighbours."""
    n = _check_size(n)
    edges: List[Edge] = []
    for i in range(1, n, 2):
        edges.append((i - 1, i))
        if i + 1 < n:
            edges.append((i + 1, i))
    m = np.eye(n, dtype=bool)
    for (i, j) in edges:
        m[i, j] = True
    return _trusted(m, edges)


def boolean_lattice(n: int) -> Poset:
    """Subsets of an n-set ordered by inclusion; element i is the subset with bitmask i.

    Has 2**n elements and a 4**n matrix, so keep n small.
    """
    n = _check_size(n)
    a = np.arange(1 << n)
    m = (a[:, None] & ~a[None, :]) == 0
    edges = [(i, i | (1 << b)) for i in range(1 << n) for b in range(n) if not (i >> b) & 1]
    return _trusted(m, edges)


def random_poset(n: int, p: float, seed: Optional[int] = None) -> Poset:
    """Order generated by a random DAG on 0..n-1 (edge u -> v, u < v, with probability p).

    The identity 0..n-1 is always a linear extension of the result.
    """
    n = _check_size(n)
    dag = random_order_dag(n, p, seed=seed)
    return _trusted(transitive_closure(n, dag.edges()))


def random_layered_poset(
    n_layers: int,
    layer_size: int,
    p_forward: float,
    p_skip: float = 0.0,
    seed: Optional[int] = None,
) -> Poset:
    """Order generated by a layered random DAG (element id = layer*layer_size + i)."""
    dag = layered_order_dag(n_layers, layer_size, p_forward, p_skip=p_skip, seed=seed)
    return _trusted(transitive_closure(dag.number_of_nodes(), dag.edges()))


# ----------------------------
# User-supplied definitions
# ----------------------------

def from_relation(n: int, pairs: Iterable[Edge], reflexive_closure: bool = False) -> Poset:
    """Poset from the pairs (i, j) with i <= j.

    The pairs must already form a partial order: nothing is closed under
    transitivity. With ``reflexive_closure=True`` the pairs (i, i) may be left
    out; antisymmetry and transitivity are still checked.
    """
    n = _check_size(n)
    m = edges_to_adjacency(n, pairs)
    if reflexive_closure:
        np.fill_diagonal(m, True)
    relation = RelationMatrix(m)
    logger.debug("built poset on %d elements from relation pairs", n)
    return Poset(relation)


def from_matrix(matrix) -> Poset:
    """Poset from an n x n boolean matrix with matrix[i][j] iff i <= j."""
    return Poset(RelationMatrix(matrix))


def from_covering_edges(n: int, edges: Iterable[Edge]) -> Poset:
    """Poset from its Hasse diagram; edges (i, j) mean j covers i."""
    covering = Covering(n, edges)
    logger.debug("built poset on %d elements from %d covering edges", covering.size(), len(covering.edges()))
    return Poset.from_covering(covering)


# ----------------------------
# Combinators
# ----------------------------

def _check_operand(p: Poset) -> int:
    m = p.matrix
    n = p.covering.size()
    if m.ndim != 2 or m.shape != (n, n):
        raise DimensionMismatch(f"malformed poset operand: matrix {m.shape}, covering on {n} elements")
    return n


def product(p: Poset, q: Poset) -> Poset:
    """Cartesian product with the componentwise order; (a, b) is element a*len(q) + b."""
    n_p, n_q = _check_operand(p), _check_operand(q)
    m = np.kron(p.matrix, q.matrix).astype(bool)
    # (a, b) is covered by (a', b) for a covered by a', and by (a, b') for b covered by b'
    edges = [(a * n_q + b, a2 * n_q + b) for (a, a2) in p.cover_edges() for b in range(n_q)]
    edges += [(a * n_q + b, a * n_q + b2) for a in range(n_p) for (b, b2) in q.cover_edges()]
    logger.debug("product of posets of size %d and %d", n_p, n_q)
    return _trusted(m, edges)


def _disjoint(p: Poset, q: Poset) -> Tuple[np.ndarray, List[Edge]]:
    n_p, n_q = _check_operand(p), _check_operand(q)
    if n_p == 0 or n_q == 0:
        m = (q if n_p == 0 else p).matrix
    else:
        m = block_diag(p.matrix, q.matrix).astype(bool)
    edges = list(p.cover_edges()) + [(i + n_p, j + n_p) for (i, j) in q.cover_edges()]
    return np.array(m, dtype=bool), edges


def coproduct(p: Poset, q: Poset) -> Poset:
    """Disjoint union with no relations between the two parts."""
    m, edges = _disjoint(p, q)
    return _trusted(m, edges)


disjoint_sum = coproduct


def ordinal_sum(p: Poset, q: Poset) -> Poset:
    """Disjoint union with every element of p placed below every element of q."""
    n_p = len(p)
    m, edges = _disjoint(p, q)
    m[:n_p, n_p:] = True
    tops = [i for i in p.elements() if not p.covering.covered_by(i)]
    bottoms = [j + n_p for j in q.elements() if not q.covering.covers(j)]
    edges += [(i, j) for i in tops for j in bottoms]
    return _trusted(m, edges)


def dual(p: Poset) -> Poset:
    """Same elements, reversed order."""
    _check_operand(p)
    return _trusted(p.matrix.T, [(j, i) for (i, j) in p.cover_edges()])


# ----------------------------
# Lattices of down-sets
# ----------------------------

def _popcount(x: int) -> int:
    return bin(x).count("1")


def _members(mask: int) -> Tuple[int, ...]:
    return tuple(i for i in range(mask.bit_length()) if (mask >> i) & 1)


def down_sets(p: Poset, cfg: Optional[PosetConfig] = None) -> List[FrozenSet[int]]:
    """All down-sets (order ideals) of p, sorted by size and then by members.

    Grows every ideal by one element whose strict down-set it already
    contains, so the search visits each ideal once. The number of ideals can be
    exponential in len(p); more than ``cfg.max_ideals`` raises
    :class:`SizeLimitExceeded`.
    """
    if cfg is None:
        cfg = PosetConfig()
    n = len(p)
    m = p.matrix
    below = [sum(1 << int(k) for k in np.flatnonzero(m[:, x]) if k != x) for x in range(n)]

    seen = {0}
    frontier = [0]
    while frontier:
        ideal = frontier.pop()
        for x in range(n):
            if (ideal >> x) & 1 or below[x] & ~ideal:
                continue
            grown = ideal | (1 << x)
            if grown in seen:
                continue
            seen.add(grown)
            if len(seen) > cfg.max_ideals:
                logger.warning("down-set enumeration stopped after %d ideals", cfg.max_ideals)
                raise SizeLimitExceeded(f"poset has more than {cfg.max_ideals} down-sets")
            frontier.append(grown)

    masks = sorted(seen, key=lambda s: (_popcount(s), _members(s)))
    return [frozenset(_members(s)) for s in masks]


def ideal_lattice(p: Poset, cfg: Optional[PosetConfig] = None) -> Poset:
    """Distributive lattice J(p) of down-sets of p ordered by inclusion.

    Element k is the k-th entry of :func:`down_sets`. By Birkhoff's theorem
    every finite distributive lattice arises this way.
    """
    ideals = down_sets(p, cfg)
    n = len(p)
    k = len(ideals)
    A = np.zeros((k, n), dtype=np.int64)
    for a, ideal in enumerate(ideals):
        A[a, list(ideal)] = 1
    # I <= J iff I has no element outside J
    m = (A @ (1 - A).T) == 0
    index = {ideal: a for a, ideal in enumerate(ideals)}
    # in a distributive lattice of down-sets, covers add exactly one element
    edges = [
        (a, index[ideal | {x}])
        for a, ideal in enumerate(ideals)
        for x in range(n)
        if x not in ideal and (ideal | {x}) in index
    ]
    logger.debug("ideal lattice of a %d-element poset has %d elements", n, k)
    return _trusted(m, edges)


def free_distributive_lattice(n: int, cfg: Optional[PosetConfig] = None) -> Poset:
    """Free distributive lattice on n generators, with bottom and top adjoined.

    Built as the lattice of down-sets of the boolean lattice 2**n, so it has
    Dedekind-number many elements: 2, 3, 6, 20, 168, 7581, ... for n = 0..5.
    The growth is doubly exponential and no performance contract holds beyond
    small n; ``n > cfg.max_free_generators`` raises :class:`SizeLimitExceeded`.
    """
    if cfg is None:
        cfg = PosetConfig()
    n = _check_size(n)
    if n > cfg.max_free_generators:
        logger.warning("refusing free distributive lattice on %d generators (limit %d)", n, cfg.max_free_generators)
        raise SizeLimitExceeded(
            f"free distributive lattice on {n} generators exceeds limit {cfg.max_free_generators}"
        )
    return ideal_lattice(boolean_lattice(n), cfg)


# ----------------------------
# Named families
# ----------------------------

def make_family(name: str, *, p: float = 0.5, seed: Optional[int] = None) -> PosetFactory:
    """Factory producing the member of a named parametric family for a given n.

    Parameters
    ----------
    name:
        'chain', 'antichain', 'corolla', 'fence', 'boolean', 'free_distributive', 'random'
    p, seed:
        Edge probability and seed, used by 'random' only.
    """
    family = str(name).lower().strip()
    simple = {
        "chain": chain,
        "antichain": antichain,
        "corolla": corolla,
        "fence": fence,
        "boolean": boolean_lattice,
        "free_distributive": free_distributive_lattice,
    }
    if family in simple:
        return simple[family]

    if family == "random":
        def factory(n: int) -> Poset:
            return random_poset(n, p, seed=seed)
        return factory

    raise ValueError(f"Unknown family: {name}")
