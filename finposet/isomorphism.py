"""Brute-force order isomorphism for small posets.

No polynomial algorithm is known, so this is a backtracking search over
bijections, pruned by (down-set size, up-set size) signatures. Posets larger
than ``PosetConfig.max_isomorphism_size`` are refused.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Tuple

import numpy as np

from .config import PosetConfig
from .errors import SizeLimitExceeded
from .poset import Poset

logger = logging.getLogger(__name__)


def _signatures(m: np.ndarray) -> List[Tuple[int, int]]:
    down = m.sum(axis=0)
    up = m.sum(axis=1)
    return [(int(d), int(u)) for d, u in zip(down, up)]


def find_isomorphism(p: Poset, q: Poset, cfg: Optional[PosetConfig] = None) -> Optional[List[int]]:
    """Return phi with ``p.leq(i, j) == q.leq(phi[i], phi[j])`` for all i, j, or None."""
    if cfg is None:
        cfg = PosetConfig()
    n = len(p)
    if n != len(q):
        return None
    if n > cfg.max_isomorphism_size:
        logger.warning("isomorphism search refused for %d elements (limit %d)", n, cfg.max_isomorphism_size)
        raise SizeLimitExceeded(f"isomorphism search limited to {cfg.max_isomorphism_size} elements, got {n}")

    mp, mq = p.matrix, q.matrix
    sig_p, sig_q = _signatures(mp), _signatures(mq)
    if sorted(sig_p) != sorted(sig_q):
        return None

    candidates = [[j for j in range(n) if sig_q[j] == sig_p[i]] for i in range(n)]
    # most constrained elements first
    order = sorted(range(n), key=lambda i: (len(candidates[i]), i))
    phi = [-1] * n
    used = [False] * n

    def extend(depth: int) -> bool:
        if depth == n:
            return True
        i = order[depth]
        for j in candidates[i]:
            if used[j]:
                continue
            if any(
                mp[i, k] != mq[j, phi[k]] or mp[k, i] != mq[phi[k], j]
                for k in order[:depth]
            ):
                continue
            phi[i] = j
            used[j] = True
            if extend(depth + 1):
                return True
            phi[i] = -1
            used[j] = False
        return False

    return phi if extend(0) else None


def is_isomorphic(p: Poset, q: Poset, cfg: Optional[PosetConfig] = None) -> bool:
    return find_isomorphism(p, q, cfg) is not None
