import random

import pytest

from PHE import GElement, GTElement, TypeA1Group


@pytest.fixture(scope="module")
def group_and_factors():
    return TypeA1Group.generate(24, random.Random(17))


def test_parameters(group_and_factors):
    group, p, q = group_and_factors
    assert group.order == p * q
    assert p != q
    assert p.bit_length() == q.bit_length() == 24


def test_random_generator_is_in_g(group_and_factors, rng):
    group, _, _ = group_and_factors
    g = group.random_generator(rng)
    assert isinstance(g, GElement)
    assert group.is_element(g)
    assert g != group.identity()
    assert group.pow(g, group.n) == group.identity()


def test_group_law(group_and_factors, rng):
    group, _, _ = group_and_factors
    g = group.random_generator(rng)
    a, b = 1234, 98765
    assert group.mul(group.pow(g, a), group.pow(g, b)) == group.pow(g, a + b)
    assert group.mul(g, group.pow(g, -1)) == group.identity()
    assert group.pow(g, 0) == group.identity()
    assert group.mul(g, group.identity()) == g


def test_bilinearity(group_and_factors, rng):
    group, _, _ = group_and_factors
    g = group.random_generator(rng)
    e = group.pairing(g, g)
    for a, b in [(2, 3), (17, 1000), (group.n - 1, 5)]:
        left = group.pairing(group.pow(g, a), group.pow(g, b))
        assert left == group.target_pow(e, a * b)


def test_pairing_is_symmetric(group_and_factors, rng):
    group, _, _ = group_and_factors
    u = group.random_generator(rng)
    v = group.random_generator(rng)
    assert group.pairing(u, v) == group.pairing(v, u)


def test_non_degenerate(group_and_factors, rng):
    group, p, q = group_and_factors
    g = group.random_generator(rng)
    e = group.pairing(g, g)
    assert group.is_target_element(e)
    assert e != group.target_identity()
    # e(g, g) has order n whenever g does
    if group.pow(g, p) != group.identity() and group.pow(g, q) != group.identity():
        assert group.target_pow(e, p) != group.target_identity()
        assert group.target_pow(e, q) != group.target_identity()


def test_pairing_with_identity(group_and_factors, rng):
    group, _, _ = group_and_factors
    g = group.random_generator(rng)
    assert group.pairing(group.identity(), g) == group.target_identity()


def test_membership_checks(group_and_factors, rng):
    group, _, _ = group_and_factors
    g = group.random_generator(rng)
    e = group.pairing(g, g)
    assert not group.is_element(e)
    assert not group.is_target_element(g)
    assert not group.is_element(5)
    assert not group.is_target_element(None)


def test_elements_of_other_groups_are_foreign(group_and_factors, rng):
    group, _, _ = group_and_factors
    other, _, _ = TypeA1Group.generate(16, random.Random(18))
    g = other.random_generator(rng)
    assert not group.is_element(g)
    assert not group.is_target_element(other.pairing(g, g))
    assert g != group.identity()


def test_element_kinds_never_compare_equal(group_and_factors):
    group, _, _ = group_and_factors
    assert group.identity() != group.target_identity()
    assert isinstance(group.target_identity(), GTElement)


def test_rejects_bad_order():
    with pytest.raises(ValueError):
        TypeA1Group(4)
