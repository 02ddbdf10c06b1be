"""finposet: finite partially ordered sets.

This package implements:
- Two interchangeable encodings of a finite order (relation matrix, covering/Hasse
  diagram) plus the strict comparability graph, behind one query protocol
- Lossless conversion between them (transitive closure and reduction)
- Construction of posets from families (chains, antichains, boolean and free
  distributive lattices, random orders) and combinators (product, coproduct,
  ordinal sum, dual)
- Manipulation (induced subposets, adjoining and removing bounds)
- Invariants (extremal elements, height, width via Dilworth, connectivity,
  Möbius function, lattice queries) and bounded brute-force isomorphism

Posets are immutable values over the dense index set 0..n-1.
"""

__all__ = [
    "errors",
    "config",
    "relations",
    "representations",
    "convert",
    "partitions",
    "graphs",
    "poset",
    "construct",
    "manipulate",
    "compute",
    "isomorphism",
]
