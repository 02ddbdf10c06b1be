from __future__ import annotations

from dataclasses import dataclass


@dataclass
class PosetConfig:
    # brute-force isomorphism search
    max_isomorphism_size: int = 9

    # FD(n) has Dedekind-number many elements: 2, 3, 6, 20, 168, 7581, ...
    max_free_generators: int = 4

    # down-set enumeration for ideal lattices
    max_ideals: int = 200_000
