from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Tuple


@dataclass
class Partition:
    """Union-Find partition of the element set {0,1,...,n-1}.

    Used to group poset elements into connected components of the covering graph.
    """

    n: int
    parent: List[int]
    rank: List[int]

    @classmethod
    def discrete(cls, n: int) -> "Partition":
        return cls(n=n, parent=list(range(n)), rank=[0] * n)

    @classmethod
    def from_pairs(cls, n: int, pairs: Iterable[Tuple[int, int]]) -> "Partition":
        part = cls.discrete(n)
        for a, b in pairs:
            part.union(a, b)
        return part

    def find(self, a: int) -> int:
        # path halving; iterative so long chains stay within the recursion limit
        while self.parent[a] != a:
            self.parent[a] = self.parent[self.parent[a]]
            a = self.parent[a]
        return a

    def union(self, a: int, b: int) -> None:
        ra, rb = self.find(a), self.find(b)
        if ra == rb:
            return
        if self.rank[ra] < self.rank[rb]:
            self.parent[ra] = rb
        elif self.rank[ra] > self.rank[rb]:
            self.parent[rb] = ra
        else:
            self.parent[rb] = ra
            self.rank[ra] += 1

    def blocks(self) -> List[List[int]]:
        """Blocks with sorted members, ordered by their minimum element.

        Roots depend on union order, so blocks are never keyed by root id.
        """
        d: Dict[int, List[int]] = {}
        for a in range(self.n):
            d.setdefault(self.find(a), []).append(a)
        return sorted(d.values(), key=lambda block: block[0])

    def num_blocks(self) -> int:
        return len({self.find(a) for a in range(self.n)})

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Partition) or self.n != other.n:
            return False
        return self.blocks() == other.blocks()
