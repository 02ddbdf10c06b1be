from __future__ import annotations

from typing import Iterable, List

import numpy as np

from .construct import dual
from .errors import IndexOutOfRange, InvalidRelation, MissingBound
from .poset import Poset
from .relations import Edge
from .representations import Covering, RelationMatrix

__all__ = [
    "subposet",
    "adjoin_bottom",
    "adjoin_top",
    "adjoin_both",
    "remove_bottom",
    "remove_top",
    "dual",
]


def subposet(p: Poset, indices: Iterable[int]) -> Poset:
    """Induced order on ``indices``, re-indexed densely in the order given.

    Sets are taken in ascending order. The result's ``origin`` maps each new
    index to its index in the root poset, through any earlier subposet.
    """
    if isinstance(indices, (set, frozenset)):
        indices = sorted(indices)
    n = len(p)
    idx: List[int] = []
    seen = set()
    for i in indices:
        i = int(i)
        if not 0 <= i < n:
            raise IndexOutOfRange(i, n)
        if i in seen:
            # a repeated element would be <= its own copy in both directions
            raise InvalidRelation(f"index {i} selected more than once")
        seen.add(i)
        idx.append(i)

    sel = np.asarray(idx, dtype=np.intp)
    m = p.matrix[np.ix_(sel, sel)]
    origin = idx if p.origin is None else [p.origin[i] for i in idx]
    return Poset(RelationMatrix(m, validate=False), origin=origin)


def _with_new_element(p: Poset, below_all: bool) -> Poset:
    n = len(p)
    m = np.zeros((n + 1, n + 1), dtype=bool)
    m[:n, :n] = p.matrix
    m[n, n] = True
    edges: List[Edge] = list(p.cover_edges())
    if below_all:
        m[n, :] = True
        edges += [(n, x) for x in p.elements() if not p.covering.covers(x)]
    else:
        m[:, n] = True
        edges += [(x, n) for x in p.elements() if not p.covering.covered_by(x)]
    return Poset._from_views(RelationMatrix(m, validate=False), Covering(n + 1, edges, validate=False))


def adjoin_bottom(p: Poset) -> Poset:
    """New element n below every element of p."""
    return _with_new_element(p, below_all=True)


def adjoin_top(p: Poset) -> Poset:
    """New element n above every element of p."""
    return _with_new_element(p, below_all=False)


def adjoin_both(p: Poset) -> Poset:
    """New bottom n and new top n+1."""
    return adjoin_top(adjoin_bottom(p))


def remove_bottom(p: Poset) -> Poset:
    """Subposet without the bottom element; raises MissingBound if p has none."""
    m = p.matrix
    rows = np.flatnonzero(m.all(axis=1))
    if len(rows) == 0:
        raise MissingBound("poset has no bottom element")
    b = int(rows[0])
    return subposet(p, [i for i in p.elements() if i != b])


def remove_top(p: Poset) -> Poset:
    """Subposet without the top element; raises MissingBound if p has none."""
    m = p.matrix
    cols = np.flatnonzero(m.all(axis=0))
    if len(cols) == 0:
        raise MissingBound("poset has no top element")
    t = int(cols[0])
    return subposet(p, [i for i in p.elements() if i != t])
