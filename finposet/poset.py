from __future__ import annotations

from typing import Any, Optional, Sequence, Set, Tuple

import numpy as np

from .errors import DimensionMismatch, IndexOutOfRange, InvalidRelation
from .relations import transitive_reduction
from .representations import Covering, RelationMatrix


class Poset:
    """Immutable finite poset on the elements 0..n-1.

    A poset carries both a :class:`RelationMatrix` (O(1) comparability) and a
    :class:`Covering` (Hasse diagram) view of the same order; whichever one is
    not supplied is derived once at construction. Equality and hashing depend
    on the relation only. ``origin`` is auxiliary metadata: for a subposet it
    maps each new index to the index it had in the poset it was cut from.

    Instances never change after ``__init__``, so one poset can be shared by
    any number of threads without locking.
    """

    __slots__ = ("_rel", "_cov", "_origin")

    def __init__(
        self,
        relation: RelationMatrix,
        covering: Optional[Covering] = None,
        origin: Optional[Sequence[int]] = None,
    ):
        if covering is None:
            covering = Covering.from_matrix(relation)
        else:
            if covering.size() != relation.size():
                raise DimensionMismatch(
                    f"covering has {covering.size()} elements but relation has {relation.size()}"
                )
            expected = transitive_reduction(relation.matrix)
            if covering.edges() != expected:
                raise InvalidRelation(
                    f"covering edges {covering.edges()} do not reduce the relation (expected {expected})"
                )
        self._assign(relation, covering, origin)

    @classmethod
    def _from_views(
        cls,
        relation: RelationMatrix,
        covering: Covering,
        origin: Optional[Sequence[int]] = None,
    ) -> "Poset":
        """Pair two views already known to describe the same order."""
        if covering.size() != relation.size():
            raise DimensionMismatch(
                f"covering has {covering.size()} elements but relation has {relation.size()}"
            )
        self = cls.__new__(cls)
        self._assign(relation, covering, origin)
        return self

    def _assign(self, relation, covering, origin) -> None:
        if origin is not None:
            origin = tuple(int(x) for x in origin)
            if len(origin) != relation.size():
                raise DimensionMismatch(f"origin has {len(origin)} entries for {relation.size()} elements")
        object.__setattr__(self, "_rel", relation)
        object.__setattr__(self, "_cov", covering)
        object.__setattr__(self, "_origin", origin)

    @classmethod
    def from_covering(cls, covering: Covering) -> "Poset":
        return cls._from_views(RelationMatrix.from_covering(covering), covering)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("Poset is immutable")

    def __delattr__(self, name: str) -> None:
        raise AttributeError("Poset is immutable")

    def __reduce__(self):
        return (_restore, (self._rel, self._cov, self._origin))

    # views

    @property
    def relation(self) -> RelationMatrix:
        return self._rel

    @property
    def covering(self) -> Covering:
        return self._cov

    @property
    def matrix(self) -> np.ndarray:
        """Read-only boolean array, ``matrix[i, j]`` iff ``i <= j``."""
        return self._rel.matrix

    @property
    def origin(self) -> Optional[Tuple[int, ...]]:
        return self._origin

    # representation queries

    def size(self) -> int:
        return self._rel.size()

    def __len__(self) -> int:
        return self._rel.size()

    def elements(self) -> range:
        return range(self.size())

    def check_index(self, i: int) -> int:
        i = int(i)
        if not 0 <= i < self.size():
            raise IndexOutOfRange(i, self.size())
        return i

    def leq(self, i: int, j: int) -> bool:
        return self._rel.leq(self.check_index(i), self.check_index(j))

    def lt(self, i: int, j: int) -> bool:
        return i != j and self.leq(i, j)

    def comparable(self, i: int, j: int) -> bool:
        return self.leq(i, j) or self.leq(j, i)

    def covered_by(self, i: int) -> Set[int]:
        return self._cov.covered_by(self.check_index(i))

    def covers(self, i: int) -> Set[int]:
        return self._cov.covers(self.check_index(i))

    def strict_matrix(self) -> np.ndarray:
        return self._rel.strict()

    def cover_edges(self):
        return self._cov.edges()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Poset):
            return NotImplemented
        return self._rel == other._rel

    def __hash__(self) -> int:
        return hash(self._rel)

    def __repr__(self) -> str:
        return f"Poset(n={self.size()}, covers={self._cov.edges()})"


def _restore(relation, covering, origin):
    return Poset._from_views(relation, covering, origin)
