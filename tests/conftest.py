import functools
import itertools
import logging

import numpy as np
import pytest

from finposet.construct import chain, from_covering_edges, product


def pytest_configure(config):
    """Set up test environment before tests run."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def _natural_posets(n):
    """Every poset on 0..n-1 for which 0 < 1 < ... < n-1 is a linear extension."""
    pairs = [(i, j) for i in range(n) for j in range(i + 1, n)]
    for bits in itertools.product((False, True), repeat=len(pairs)):
        m = np.eye(n, dtype=bool)
        for (i, j), on in zip(pairs, bits):
            m[i, j] = on
        mi = m.astype(np.int64)
        if (((mi @ mi) > 0) & ~m).any():
            continue
        yield m


@pytest.fixture
def natural_posets():
    return _natural_posets


def _popcount(x):
    return bin(x).count("1")


def _refined_colours(below, above, n):
    """Colour refinement on (down-set size, up-set size), stable under isomorphism."""
    colour = [(_popcount(below[i]), _popcount(above[i])) for i in range(n)]
    while True:
        keyed = [
            (
                colour[i],
                tuple(sorted(colour[j] for j in range(n) if j != i and below[i] >> j & 1)),
                tuple(sorted(colour[j] for j in range(n) if j != i and above[i] >> j & 1)),
            )
            for i in range(n)
        ]
        ranks = {k: r for r, k in enumerate(sorted(set(keyed)))}
        refined = [ranks[k] for k in keyed]
        if len(ranks) == len(set(colour)):
            return refined
        colour = refined


def _arrangements(labels):
    """Distinct orderings of a multiset of labels."""
    if not labels:
        yield ()
        return
    for first in sorted(set(labels)):
        rest = list(labels)
        rest.remove(first)
        for tail in _arrangements(rest):
            yield (first,) + tail


def _class_orders(members, below, above):
    # twins (same strict down- and up-set) can be swapped by an automorphism,
    # so only the positions of each twin group matter
    groups = {}
    for i in members:
        key = (below[i] & ~(1 << i), above[i] & ~(1 << i))
        groups.setdefault(key, []).append(i)
    groups = list(groups.values())
    labels = [g for g, group in enumerate(groups) for _ in group]
    for arrangement in _arrangements(labels):
        taken = [0] * len(groups)
        order = []
        for g in arrangement:
            order.append(groups[g][taken[g]])
            taken[g] += 1
        yield order


def _canonical(below, n):
    """Smallest relabelled down-set encoding over colour-preserving orderings."""
    above = [sum(1 << j for j in range(n) if below[j] >> i & 1) for i in range(n)]
    colour = _refined_colours(below, above, n)
    classes = [[i for i in range(n) if colour[i] == c] for c in sorted(set(colour))]
    best = None
    for parts in itertools.product(*(list(_class_orders(c, below, above)) for c in classes)):
        order = [i for part in parts for i in part]
        pos = {v: k for k, v in enumerate(order)}
        key = tuple(
            sum(1 << pos[j] for j in range(n) if below[v] >> j & 1) for v in order
        )
        if best is None or key < best:
            best = key
    return best


def _down_set_masks(below, n):
    for mask in range(1 << n):
        if all(below[i] & ~mask == 0 for i in range(n) if mask >> i & 1):
            yield mask


@functools.lru_cache(maxsize=None)
def _unlabelled_down_sets(n):
    """One down-set encoding per isomorphism class of n-element posets.

    Every poset arises from a smaller one by adding a maximal element above
    one of its down-sets, so the classes of size n come from those of n - 1.
    """
    if n == 0:
        return ((),)
    seen = set()
    for below in _unlabelled_down_sets(n - 1):
        for d in _down_set_masks(below, n - 1):
            seen.add(_canonical(below + (d | 1 << (n - 1),), n))
    return tuple(sorted(seen))


def _unlabelled_posets(n):
    """Relation matrices of every n-element poset, one per isomorphism class."""
    out = []
    for below in _unlabelled_down_sets(n):
        m = np.zeros((n, n), dtype=bool)
        for j, mask in enumerate(below):
            for i in range(n):
                m[i, j] = bool(mask >> i & 1)
        out.append(m)
    return out


@pytest.fixture
def unlabelled_posets():
    return _unlabelled_posets


@pytest.fixture
def vee():
    # 0 below both 1 and 2
    return from_covering_edges(3, [(0, 1), (0, 2)])


@pytest.fixture
def diamond():
    # 0 < 1, 2 < 3
    return from_covering_edges(4, [(0, 1), (0, 2), (1, 3), (2, 3)])


@pytest.fixture
def pentagon():
    # N5: 0 < 1 < 2 < 4 and 0 < 3 < 4
    return from_covering_edges(5, [(0, 1), (1, 2), (2, 4), (0, 3), (3, 4)])


@pytest.fixture
def square():
    return product(chain(2), chain(2))
