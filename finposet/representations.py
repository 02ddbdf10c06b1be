from __future__ import annotations

from typing import Iterable, List, Protocol, Set, Tuple, runtime_checkable

import networkx as nx
import numpy as np

from .relations import (
    Edge,
    as_bool_matrix,
    strict_part,
    transitive_closure,
    transitive_reduction,
    validate_covering,
    validate_relation,
)


@runtime_checkable
class OrderRepresentation(Protocol):
    """Queries every encoding of a finite order answers.

    Elements are the dense indices ``0..size()-1``. ``covered_by(i)`` is the set
    of upper covers of ``i`` and ``covers(i)`` the set of lower covers.
    """

    def size(self) -> int: ...

    def elements(self) -> range: ...

    def leq(self, i: int, j: int) -> bool: ...

    def covered_by(self, i: int) -> Set[int]: ...

    def covers(self, i: int) -> Set[int]: ...


class RelationMatrix:
    """Full reflexive-transitive relation as an n x n boolean table.

    ``leq`` is O(1); covers are recovered from one row or column in O(n^2).
    The backing array is read-only.
    """

    __slots__ = ("_m",)

    def __init__(self, matrix, validate: bool = True):
        m = validate_relation(matrix) if validate else as_bool_matrix(matrix)
        m.flags.writeable = False
        self._m = m

    @classmethod
    def from_covering(cls, covering: "Covering") -> "RelationMatrix":
        return cls(transitive_closure(covering.size(), covering.edges()), validate=False)

    @property
    def matrix(self) -> np.ndarray:
        return self._m

    def size(self) -> int:
        return int(self._m.shape[0])

    def elements(self) -> range:
        return range(self.size())

    def leq(self, i: int, j: int) -> bool:
        return bool(self._m[i, j])

    def strict(self) -> np.ndarray:
        return strict_part(self._m)

    def covered_by(self, i: int) -> Set[int]:
        up = self._m[i].copy()
        up[i] = False
        idx = np.flatnonzero(up)
        # j is an upper cover iff no other strict upper bound of i lies below j
        between = strict_part(self._m[np.ix_(idx, idx)])
        return {int(j) for j in idx[~between.any(axis=0)]}

    def covers(self, i: int) -> Set[int]:
        down = self._m[:, i].copy()
        down[i] = False
        idx = np.flatnonzero(down)
        between = strict_part(self._m[np.ix_(idx, idx)])
        return {int(j) for j in idx[~between.any(axis=1)]}

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RelationMatrix):
            return NotImplemented
        return self._m.shape == other._m.shape and bool(np.array_equal(self._m, other._m))

    def __hash__(self) -> int:
        return hash((self.size(), np.packbits(self._m).tobytes()))

    def __repr__(self) -> str:
        return f"RelationMatrix(n={self.size()})"


class Covering:
    """Hasse diagram: an edge ``i -> j`` for every covering pair ``i < j``.

    Cover queries are adjacency lookups; ``leq`` needs a reachability search,
    so callers asking many comparability questions should use
    :class:`RelationMatrix` instead.
    """

    __slots__ = ("_g",)

    def __init__(self, n: int, edges: Iterable[Edge], validate: bool = True):
        if validate:
            edge_list = validate_covering(n, edges)
        else:
            edge_list = sorted((int(i), int(j)) for (i, j) in edges)
        g = nx.DiGraph()
        g.add_nodes_from(range(int(n)))
        g.add_edges_from(edge_list)
        self._g = nx.freeze(g)

    @classmethod
    def from_matrix(cls, relation: RelationMatrix) -> "Covering":
        return cls(relation.size(), transitive_reduction(relation.matrix), validate=False)

    @property
    def graph(self) -> nx.DiGraph:
        return self._g

    def size(self) -> int:
        return int(self._g.number_of_nodes())

    def elements(self) -> range:
        return range(self.size())

    def leq(self, i: int, j: int) -> bool:
        if i == j:
            return True
        return bool(nx.has_path(self._g, i, j))

    def covered_by(self, i: int) -> Set[int]:
        return set(self._g.successors(i))

    def covers(self, i: int) -> Set[int]:
        return set(self._g.predecessors(i))

    def edges(self) -> List[Edge]:
        return sorted((int(u), int(v)) for (u, v) in self._g.edges())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Covering):
            return NotImplemented
        return self.size() == other.size() and self.edges() == other.edges()

    def __hash__(self) -> int:
        return hash((self.size(), tuple(self.edges())))

    def __repr__(self) -> str:
        return f"Covering(n={self.size()}, edges={self.edges()})"


class ComparabilityGraph:
    """Strict order as a DAG: an edge ``i -> j`` for every pair ``i < j``.

    Sits between the other two encodings: ``leq`` is an O(1) edge lookup like
    the matrix, but storage is proportional to the number of comparable pairs.
    """

    __slots__ = ("_g",)

    def __init__(self, n: int, pairs: Iterable[Edge]):
        g = nx.DiGraph()
        g.add_nodes_from(range(int(n)))
        g.add_edges_from((int(i), int(j)) for (i, j) in pairs)
        self._g = nx.freeze(g)

    @classmethod
    def from_matrix(cls, relation: RelationMatrix) -> "ComparabilityGraph":
        pairs = [(int(i), int(j)) for i, j in np.argwhere(relation.strict())]
        return cls(relation.size(), pairs)

    def to_matrix(self) -> RelationMatrix:
        n = self.size()
        m = np.eye(n, dtype=bool)
        for (i, j) in self._g.edges():
            m[i, j] = True
        return RelationMatrix(m, validate=False)

    @property
    def graph(self) -> nx.DiGraph:
        return self._g

    def size(self) -> int:
        return int(self._g.number_of_nodes())

    def elements(self) -> range:
        return range(self.size())

    def leq(self, i: int, j: int) -> bool:
        return i == j or bool(self._g.has_edge(i, j))

    def covered_by(self, i: int) -> Set[int]:
        up = set(self._g.successors(i))
        return {j for j in up if not any(self._g.has_edge(k, j) for k in up if k != j)}

    def covers(self, i: int) -> Set[int]:
        down = set(self._g.predecessors(i))
        return {j for j in down if not any(self._g.has_edge(j, k) for k in down if k != j)}

    def pairs(self) -> List[Tuple[int, int]]:
        return sorted((int(u), int(v)) for (u, v) in self._g.edges())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ComparabilityGraph):
            return NotImplemented
        return self.size() == other.size() and self.pairs() == other.pairs()

    def __hash__(self) -> int:
        return hash((self.size(), tuple(self.pairs())))

    def __repr__(self) -> str:
        return f"ComparabilityGraph(n={self.size()}, pairs={len(self.pairs())})"
