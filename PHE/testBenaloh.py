import math
import random

import pytest
import sympy

from PHE import Benaloh, ErrorKind, NonInvertibleElementError, SchemeConfig


def test_key_structure(benaloh_keys):
    scheme, (pk, sk) = benaloh_keys
    R = scheme.r
    assert pk.r == R == 199
    assert sk.x == pow(pk.y, sk.phi // R, pk.n)
    assert sk.x != 1
    # x has order exactly R
    assert pow(sk.x, R, pk.n) == 1


def factors_of(pk, sk):
    # p + q = n - phi + 1, so p and q are the roots of z^2 - (p+q)z + n
    s = pk.n - sk.phi + 1
    d = math.isqrt(s * s - 4 * pk.n)
    return (s + d) // 2, (s - d) // 2


def test_prime_constraints():
    scheme = Benaloh()
    rng = random.Random(11)
    pk, sk = scheme.key_generation(48, rng)
    p, q = factors_of(pk, sk)
    assert p * q == pk.n
    assert sympy.isprime(p) and sympy.isprime(q)
    R = scheme.r
    # exactly one factor carries the block size
    carriers = [f for f in (p, q) if (f - 1) % R == 0]
    assert len(carriers) == 1
    p = carriers[0]
    q = pk.n // p
    assert math.gcd((p - 1) // R, R) == 1
    assert math.gcd(q - 1, R) == 1
    assert sk.phi == (p - 1) * (q - 1)


@pytest.mark.parametrize("seed", range(8))
def test_round_trip_over_seeds(benaloh_keys, seed):
    scheme, (pk, sk) = benaloh_keys
    rng = random.Random(seed)
    for m in rng.sample(range(pk.r), 10):
        c = scheme.encrypt(m, pk, rng).unwrap()
        assert scheme.decrypt(c, pk, sk).unwrap() == m


def test_edges_of_plaintext_space(benaloh_keys):
    scheme, (pk, sk) = benaloh_keys
    for m in (0, 1, pk.r - 1):
        assert scheme.decrypt(scheme.encrypt(m, pk).unwrap(), pk, sk).unwrap() == m


def test_add_and_sub(benaloh_keys):
    scheme, (pk, sk) = benaloh_keys
    c10 = scheme.encrypt(10, pk).unwrap()
    c20 = scheme.encrypt(20, pk).unwrap()
    assert scheme.decrypt(scheme.add(c10, c20, pk), pk, sk).unwrap() == 30
    assert scheme.decrypt(scheme.sub(c20, c10, pk).unwrap(), pk, sk).unwrap() == 10
    # differences wrap modulo R
    assert scheme.decrypt(scheme.sub(c10, c20, pk).unwrap(), pk, sk).unwrap() == (10 - 20) % 199


def test_addition_wraps_modulo_r(benaloh_keys):
    scheme, (pk, sk) = benaloh_keys
    c1 = scheme.encrypt(150, pk).unwrap()
    c2 = scheme.encrypt(100, pk).unwrap()
    assert scheme.decrypt(scheme.add(c1, c2, pk), pk, sk).unwrap() == 250 % 199


def test_sub_rejects_non_invertible(benaloh_keys):
    scheme, (pk, sk) = benaloh_keys
    c = scheme.encrypt(5, pk).unwrap()
    p, _ = factors_of(pk, sk)
    result = scheme.sub(c, p, pk)
    assert result.error is ErrorKind.NON_INVERTIBLE_ELEMENT
    with pytest.raises(NonInvertibleElementError):
        result.unwrap()


def test_scalar_multiply(benaloh_keys):
    scheme, (pk, sk) = benaloh_keys
    c = scheme.encrypt(7, pk).unwrap()
    assert scheme.decrypt(scheme.scalar_multiply(c, 6, pk), pk, sk).unwrap() == 42
    assert scheme.decrypt(scheme.scalar_multiply(c, 30, pk), pk, sk).unwrap() == 210 % 199


def test_self_blind_is_invisible(benaloh_keys, rng):
    scheme, (pk, sk) = benaloh_keys
    c = scheme.encrypt(123, pk).unwrap()
    b1 = scheme.rerandomize(c, pk, rng)
    b2 = scheme.rerandomize(c, pk, rng)
    assert len({c, b1, b2}) == 3
    assert scheme.decrypt(b1, pk, sk).unwrap() == 123
    assert scheme.decrypt(b2, pk, sk).unwrap() == 123


@pytest.mark.parametrize("m", [199, 200, -1])
def test_rejects_plaintext_outside_block(benaloh_keys, m):
    scheme, (pk, _) = benaloh_keys
    assert scheme.encrypt(m, pk).error is ErrorKind.INVALID_PLAINTEXT


def test_rejects_ciphertext_outside_zstar(benaloh_keys):
    scheme, (pk, sk) = benaloh_keys
    for c in (0, pk.n, -3):
        assert scheme.decrypt(c, pk, sk).error is ErrorKind.INVALID_CIPHERTEXT


def test_mismatched_private_key_exhausts_search():
    scheme = Benaloh(SchemeConfig(benaloh_r=3))
    pk, sk = scheme.key_generation(32, random.Random(4))
    c = scheme.encrypt(1, pk).unwrap()
    forged_sk = type(sk)(phi=sk.phi, x=1)
    result = scheme.decrypt(c, pk, forged_sk)
    assert result.error is ErrorKind.DECRYPTION_EXHAUSTED


def test_small_block_size_config():
    scheme = Benaloh(SchemeConfig(benaloh_r=5))
    pk, sk = scheme.key_generation(24, random.Random(9))
    assert pk.r == 5
    for m in range(5):
        assert scheme.decrypt(scheme.encrypt(m, pk).unwrap(), pk, sk).unwrap() == m


def test_rejects_composite_block_size():
    with pytest.raises(ValueError):
        Benaloh(SchemeConfig(benaloh_r=9))
