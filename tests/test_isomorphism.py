import numpy as np
import pytest

from finposet.config import PosetConfig
from finposet.construct import (
    antichain,
    boolean_lattice,
    chain,
    coproduct,
    dual,
    fence,
    from_covering_edges,
    from_matrix,
    random_poset,
)
from finposet.errors import SizeLimitExceeded
from finposet.isomorphism import find_isomorphism, is_isomorphic


def test_relabelled_poset_is_isomorphic():
    for seed in range(10):
        p = random_poset(8, 0.3, seed=seed)
        perm = np.random.default_rng(seed).permutation(8)
        q = from_matrix(p.matrix[np.ix_(perm, perm)])
        phi = find_isomorphism(p, q)
        assert phi is not None
        for i in range(8):
            for j in range(8):
                assert p.leq(i, j) == q.leq(phi[i], phi[j])


def test_non_isomorphic_posets(vee, pentagon, diamond):
    assert not is_isomorphic(vee, dual(vee))
    assert not is_isomorphic(chain(3), antichain(3))
    assert not is_isomorphic(pentagon, diamond)
    assert not is_isomorphic(chain(2), chain(3))


def test_self_dual_posets(diamond):
    assert is_isomorphic(diamond, dual(diamond))
    assert is_isomorphic(boolean_lattice(3), dual(boolean_lattice(3)))
    assert is_isomorphic(fence(4), dual(fence(4)))


def test_same_signatures_different_order():
    # every minimal element has two upper covers and vice versa in both,
    # but only the crown is connected
    bowtie = from_covering_edges(4, [(0, 2), (0, 3), (1, 2), (1, 3)])
    two_bowties = coproduct(bowtie, bowtie)
    crown = from_covering_edges(
        8, [(0, 4), (0, 5), (1, 5), (1, 6), (2, 6), (2, 7), (3, 7), (3, 4)]
    )
    assert not is_isomorphic(two_bowties, crown)
    assert is_isomorphic(two_bowties, coproduct(bowtie, dual(bowtie)))


def test_empty_posets_are_isomorphic():
    assert find_isomorphism(antichain(0), antichain(0)) == []


def test_size_limit():
    with pytest.raises(SizeLimitExceeded):
        is_isomorphic(chain(5), chain(5), PosetConfig(max_isomorphism_size=4))
