import numpy as np
import pytest

from finposet.compute import comparable_pairs, height, is_connected, is_lattice, width
from finposet.config import PosetConfig
from finposet.construct import (
    antichain,
    boolean_lattice,
    chain,
    coproduct,
    corolla,
    disjoint_sum,
    down_sets,
    dual,
    fence,
    free_distributive_lattice,
    from_covering_edges,
    from_matrix,
    from_relation,
    ideal_lattice,
    make_family,
    ordinal_sum,
    product,
    random_layered_poset,
    random_poset,
)
from finposet.errors import DimensionMismatch, IndexOutOfRange, InvalidRelation, SizeLimitExceeded
from finposet.isomorphism import is_isomorphic


@pytest.mark.parametrize("n", range(0, 7))
def test_chain_invariants(n):
    c = chain(n)
    assert len(c) == n
    assert comparable_pairs(c) == n * (n - 1) // 2
    if n > 0:
        assert width(c) == 1
        assert height(c) == n - 1


@pytest.mark.parametrize("n", range(0, 7))
def test_antichain_invariants(n):
    a = antichain(n)
    assert comparable_pairs(a) == 0
    assert width(a) == n
    assert height(a) == 0


def test_negative_size_rejected():
    with pytest.raises(ValueError):
        chain(-1)


def test_chain_covering_is_path():
    assert chain(4).cover_edges() == [(0, 1), (1, 2), (2, 3)]


def test_from_relation_strict_by_default():
    with pytest.raises(InvalidRelation, match="reflexive"):
        from_relation(2, [(0, 1)])


def test_from_relation_with_reflexive_closure():
    p = from_relation(3, [(0, 1), (1, 2), (0, 2)], reflexive_closure=True)
    assert p == chain(3)


def test_from_relation_rejects_missing_transitive_pair():
    with pytest.raises(InvalidRelation, match="transitive"):
        from_relation(3, [(0, 0), (1, 1), (2, 2), (0, 1), (1, 2)])


def test_from_relation_closure_does_not_repair_transitivity():
    with pytest.raises(InvalidRelation, match="not transitive: 0 <= 1 and 1 <= 2 but not 0 <= 2"):
        from_relation(3, [(0, 1), (1, 2)], reflexive_closure=True)


def test_from_relation_rejects_out_of_range():
    with pytest.raises(IndexOutOfRange):
        from_relation(2, [(0, 5)], reflexive_closure=True)


def test_from_matrix_matches_covering_definition(vee):
    m = [[1, 1, 1], [0, 1, 0], [0, 0, 1]]
    assert from_matrix(m) == vee


def test_from_matrix_rejects_non_square():
    with pytest.raises(DimensionMismatch):
        from_matrix(np.zeros((3, 0)))
    with pytest.raises(DimensionMismatch):
        from_matrix([[1, 0], [1]])
    assert len(from_matrix([])) == 0


def test_from_covering_edges_rejects_cycle():
    with pytest.raises(InvalidRelation):
        from_covering_edges(2, [(0, 1), (1, 0)])


def test_product_of_two_chains(square):
    assert len(square) == 4
    assert height(square) == 2
    assert width(square) == 2
    # (0,1) and (1,0) are the incomparable cross elements
    assert not square.comparable(1, 2)
    assert square.cover_edges() == [(0, 1), (0, 2), (1, 3), (2, 3)]


def test_product_is_componentwise(vee):
    c = chain(3)
    p = product(vee, c)
    nq = len(c)
    for a in range(3):
        for b in range(3):
            for a2 in range(3):
                for b2 in range(3):
                    assert p.leq(a * nq + b, a2 * nq + b2) == (vee.leq(a, a2) and c.leq(b, b2))


def test_product_covering_matches_reduction(vee, pentagon):
    p = product(vee, pentagon)
    assert from_matrix(p.matrix).cover_edges() == p.cover_edges()


def test_coproduct_layout(vee):
    s = coproduct(vee, chain(2))
    assert len(s) == 5
    assert s.cover_edges() == [(0, 1), (0, 2), (3, 4)]
    assert not s.comparable(0, 3)
    assert disjoint_sum is coproduct


def test_coproduct_never_connected_for_nonempty_parts(vee, diamond):
    assert not is_connected(coproduct(vee, diamond))
    assert not is_connected(coproduct(chain(1), chain(1)))


def test_coproduct_with_empty_part_keeps_connectivity(diamond):
    assert is_connected(coproduct(diamond, antichain(0)))
    assert is_connected(coproduct(antichain(0), diamond))
    assert not is_connected(coproduct(antichain(0), antichain(0)))


def test_ordinal_sum(vee):
    s = ordinal_sum(antichain(2), vee)
    assert len(s) == 5
    for i in range(2):
        for j in range(2, 5):
            assert s.leq(i, j)
    assert s.cover_edges() == [(0, 2), (1, 2), (2, 3), (2, 4)]
    assert from_matrix(s.matrix).cover_edges() == s.cover_edges()


def test_ordinal_sum_of_chains_is_chain():
    assert ordinal_sum(chain(2), chain(3)) == chain(5)


def test_dual_reverses_order(vee):
    d = dual(vee)
    assert d.leq(1, 0) and d.leq(2, 0)
    assert not d.leq(0, 1)
    assert d.cover_edges() == [(1, 0), (2, 0)]


def test_double_dual_is_identical(pentagon):
    for p in (pentagon, random_poset(10, 0.3, seed=3), antichain(0)):
        assert np.array_equal(dual(dual(p)).matrix, p.matrix)


def test_corolla():
    c = corolla(3)
    assert len(c) == 4
    assert c.covered_by(3) == {0, 1, 2}
    assert width(c) == 3


def test_fence():
    f = fence(5)
    assert f.cover_edges() == [(0, 1), (2, 1), (2, 3), (4, 3)]
    assert height(f) == 1
    assert width(f) == 3
    assert is_connected(f)


def test_boolean_lattice():
    b = boolean_lattice(3)
    assert len(b) == 8
    assert height(b) == 3
    assert width(b) == 3
    assert b.leq(0b001, 0b011)
    assert not b.leq(0b001, 0b110)
    assert is_isomorphic(boolean_lattice(2), product(chain(2), chain(2)))


def test_down_sets_of_vee(vee):
    ideals = down_sets(vee)
    assert ideals == [frozenset(), frozenset({0}), frozenset({0, 1}), frozenset({0, 2}), frozenset({0, 1, 2})]


def test_ideal_lattice_of_chain_is_chain():
    assert ideal_lattice(chain(3)) == chain(4)


def test_ideal_lattice_of_antichain_is_boolean():
    j = ideal_lattice(antichain(3))
    assert is_isomorphic(j, boolean_lattice(3))
    assert is_lattice(j)


def test_down_sets_respect_limit():
    with pytest.raises(SizeLimitExceeded):
        down_sets(antichain(6), PosetConfig(max_ideals=10))


@pytest.mark.parametrize("n, size", [(0, 2), (1, 3), (2, 6), (3, 20)])
def test_free_distributive_lattice_sizes(n, size):
    fd = free_distributive_lattice(n)
    assert len(fd) == size
    assert is_lattice(fd)


def test_free_distributive_lattice_bound():
    with pytest.raises(SizeLimitExceeded):
        free_distributive_lattice(3, PosetConfig(max_free_generators=2))


def test_random_poset_is_reproducible():
    a = random_poset(12, 0.2, seed=7)
    b = random_poset(12, 0.2, seed=7)
    assert a == b
    # natural order is a linear extension
    assert not np.tril(a.matrix, k=-1).any()


def test_random_layered_poset():
    p = random_layered_poset(3, 2, 1.0, seed=0)
    assert len(p) == 6
    assert height(p) == 2
    assert width(p) == 2


def test_make_family():
    assert make_family("chain")(3) == chain(3)
    assert make_family(" Boolean ")(2) == boolean_lattice(2)
    assert make_family("random", p=0.5, seed=1)(6) == random_poset(6, 0.5, seed=1)
    with pytest.raises(ValueError, match="Unknown family"):
        make_family("lattice")
