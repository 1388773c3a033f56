"""Properties every scheme shares, exercised through HomomorphicScheme."""

import random

import pytest

from PHE import HomomorphicScheme, KeyPair, Result
from PHE.aggregation import aggregate, weighted_aggregate


@pytest.fixture(params=["paillier", "benaloh", "bgn"])
def keyed_scheme(request):
    return request.getfixturevalue(f"{request.param}_keys")


def small_plaintexts(scheme, pk, rng, count):
    # keep sums and weighted sums inside every scheme's decodable range
    upper = min(scheme.max_plaintext(pk), 30)
    return [rng.randrange(1, upper // 3) for _ in range(count)]


def test_is_homomorphic_scheme(keyed_scheme):
    scheme, keys = keyed_scheme
    assert isinstance(scheme, HomomorphicScheme)
    assert isinstance(keys, KeyPair)


@pytest.mark.parametrize("seed", range(5))
def test_round_trip(keyed_scheme, seed):
    scheme, (pk, sk) = keyed_scheme
    rng = random.Random(seed)
    for m in small_plaintexts(scheme, pk, rng, 4):
        result = scheme.encrypt(m, pk, rng)
        assert isinstance(result, Result) and result.ok
        assert scheme.decrypt(result.value, pk, sk).unwrap() == m


@pytest.mark.parametrize("seed", range(5))
def test_additive_homomorphism(keyed_scheme, seed):
    scheme, (pk, sk) = keyed_scheme
    rng = random.Random(seed)
    m1, m2 = small_plaintexts(scheme, pk, rng, 2)
    c = scheme.add(scheme.encrypt(m1, pk, rng).unwrap(), scheme.encrypt(m2, pk, rng).unwrap(), pk)
    expected = m1 + m2
    modulus = scheme.plaintext_modulus(pk)
    if modulus is not None:
        expected %= modulus
    assert scheme.decrypt(c, pk, sk).unwrap() == expected


def test_scalar_multiplication(keyed_scheme):
    scheme, (pk, sk) = keyed_scheme
    c = scheme.encrypt(4, pk).unwrap()
    assert scheme.decrypt(scheme.scalar_multiply(c, 5, pk), pk, sk).unwrap() == 20


def test_rerandomize_keeps_plaintext(keyed_scheme, rng):
    scheme, (pk, sk) = keyed_scheme
    c = scheme.encrypt(3, pk).unwrap()
    again = scheme.rerandomize(c, pk, rng)
    assert again != c
    assert scheme.decrypt(again, pk, sk).unwrap() == 3


def test_rejects_plaintext_above_range(keyed_scheme):
    scheme, (pk, _) = keyed_scheme
    result = scheme.encrypt(scheme.max_plaintext(pk) + 1, pk)
    assert not result.ok
    assert not result


def test_aggregate(keyed_scheme, rng):
    scheme, (pk, sk) = keyed_scheme
    values = small_plaintexts(scheme, pk, rng, 3)
    cts = [scheme.encrypt(m, pk, rng).unwrap() for m in values]
    assert scheme.decrypt(aggregate(scheme, cts, pk), pk, sk).unwrap() == sum(values)


def test_weighted_aggregate(keyed_scheme, rng):
    scheme, (pk, sk) = keyed_scheme
    values = [1, 2, 3]
    weights = [4, 5, 6]
    cts = [scheme.encrypt(m, pk, rng).unwrap() for m in values]
    total = weighted_aggregate(scheme, cts, weights, pk)
    assert scheme.decrypt(total, pk, sk).unwrap() == 32


def test_aggregate_rejects_empty_list(keyed_scheme):
    scheme, (pk, _) = keyed_scheme
    with pytest.raises(ValueError):
        aggregate(scheme, [], pk)
