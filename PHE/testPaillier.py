import math
import random

import pytest
import sympy

from PHE import ErrorKind, InvalidPlaintextError, Paillier
from PHE.numbertheory import lcm


def test_full_dec_workflow(paillier_keys):
    """End to end: key generation, encryption, decryption."""
    scheme, (pk, sk) = paillier_keys
    test_x = 1234
    c = scheme.encrypt(test_x, pk).unwrap()
    assert scheme.decrypt(c, pk, sk).unwrap() == test_x


def test_key_structure(paillier_keys):
    _, (pk, sk) = paillier_keys
    assert pk.n == sk.p * sk.q
    assert pk.g == pk.n + 1
    for prime in (sk.p, sk.q):
        assert sympy.isprime(prime)
        assert sympy.isprime((prime - 1) // 2)
    assert sk.lam == lcm(sk.p - 1, sk.q - 1)
    assert (sk.mu * ((pow(pk.g, sk.lam, pk.nsquare) - 1) // pk.n)) % pk.n == 1


@pytest.mark.parametrize("seed", range(10))
def test_round_trip_over_seeds(paillier_keys, seed):
    scheme, (pk, sk) = paillier_keys
    rng = random.Random(seed)
    for _ in range(5):
        m = rng.randrange(1, pk.n)
        if math.gcd(m, pk.n) != 1:
            continue
        c = scheme.encrypt(m, pk, rng).unwrap()
        assert scheme.decrypt(c, pk, sk).unwrap() == m


def test_homomorphic_addition(paillier_keys):
    scheme, (pk, sk) = paillier_keys
    c1 = scheme.encrypt(12345, pk).unwrap()
    c2 = scheme.encrypt(56789, pk).unwrap()
    assert scheme.decrypt(scheme.add(c1, c2, pk), pk, sk).unwrap() == 69134


def test_addition_wraps_modulo_n(paillier_keys):
    scheme, (pk, sk) = paillier_keys
    c1 = scheme.encrypt(pk.n - 1, pk).unwrap()
    c2 = scheme.encrypt(2, pk).unwrap()
    assert scheme.decrypt(scheme.add(c1, c2, pk), pk, sk).unwrap() == 1


def test_scalar_multiply(paillier_keys):
    scheme, (pk, sk) = paillier_keys
    c = scheme.encrypt(12345, pk).unwrap()
    product = scheme.scalar_multiply(c, 56789, pk)
    assert scheme.decrypt(product, pk, sk).unwrap() == 12345 * 56789


def test_add_plain_and_sub(paillier_keys):
    scheme, (pk, sk) = paillier_keys
    c20 = scheme.encrypt(20, pk).unwrap()
    c7 = scheme.encrypt(7, pk).unwrap()
    assert scheme.decrypt(scheme.add_plain(c20, 5, pk), pk, sk).unwrap() == 25
    assert scheme.decrypt(scheme.sub(c20, c7, pk).unwrap(), pk, sk).unwrap() == 13
    assert scheme.decrypt(scheme.sub(c7, c20, pk).unwrap(), pk, sk).unwrap() == pk.n - 13


def test_sub_rejects_non_invertible(paillier_keys):
    scheme, (pk, sk) = paillier_keys
    c = scheme.encrypt(3, pk).unwrap()
    result = scheme.sub(c, sk.p, pk)
    assert not result.ok
    assert result.error is ErrorKind.NON_INVERTIBLE_ELEMENT


def test_self_blind_is_invisible(paillier_keys, rng):
    scheme, (pk, sk) = paillier_keys
    c = scheme.encrypt(4242, pk).unwrap()
    blinded = [scheme.rerandomize(c, pk, rng) for _ in range(3)]
    assert len(set(blinded + [c])) == 4
    for b in blinded:
        assert scheme.decrypt(b, pk, sk).unwrap() == 4242
    explicit = scheme.self_blind(c, 17, pk).unwrap()
    assert scheme.decrypt(explicit, pk, sk).unwrap() == 4242


def test_self_blind_rejects_factor_outside_zstar(paillier_keys):
    scheme, (pk, sk) = paillier_keys
    c = scheme.encrypt(1, pk).unwrap()
    assert scheme.self_blind(c, sk.q, pk).error is ErrorKind.NON_INVERTIBLE_ELEMENT
    assert scheme.self_blind(c, 0, pk).error is ErrorKind.NON_INVERTIBLE_ELEMENT


def test_encryption_is_probabilistic(paillier_keys):
    scheme, (pk, _) = paillier_keys
    assert scheme.encrypt(99, pk).unwrap() != scheme.encrypt(99, pk).unwrap()


@pytest.mark.parametrize("which", ["p", "q", "n", "negative", "zero"])
def test_rejects_plaintext_outside_zstar(paillier_keys, which):
    scheme, (pk, sk) = paillier_keys
    m = {"p": sk.p, "q": sk.q, "n": pk.n, "negative": -1, "zero": 0}[which]
    result = scheme.encrypt(m, pk)
    assert not result.ok
    assert result.error is ErrorKind.INVALID_PLAINTEXT
    with pytest.raises(InvalidPlaintextError):
        result.unwrap()


def test_rejects_ciphertext_outside_zstar_nsquare(paillier_keys):
    scheme, (pk, sk) = paillier_keys
    for c in (0, pk.nsquare, pk.nsquare + 1, sk.p):
        assert scheme.decrypt(c, pk, sk).error is ErrorKind.INVALID_CIPHERTEXT


def test_encrypt_residue_accepts_zero(paillier_keys):
    scheme, (pk, sk) = paillier_keys
    c = scheme.encrypt_residue(0, pk)
    assert scheme.decrypt(c, pk, sk).unwrap() == 0
    with pytest.raises(ValueError):
        scheme.encrypt_residue(pk.n, pk)


def test_seeded_key_generation_is_reproducible():
    scheme = Paillier()
    a = scheme.key_generation(32, random.Random(5))
    b = scheme.key_generation(32, random.Random(5))
    assert a == b


def test_interoperates_with_phe(paillier_keys):
    scheme, (pk, sk) = paillier_keys
    phe_pk = pk.to_phe()
    phe_sk = sk.to_phe(pk)
    assert phe_pk.n == pk.n and phe_pk.g == pk.g
    # python-paillier ciphertext, decrypted here
    c = phe_pk.raw_encrypt(31337)
    assert scheme.decrypt(c, pk, sk).unwrap() == 31337
    # ciphertext from here, decrypted by python-paillier
    c = scheme.encrypt(271828, pk).unwrap()
    assert phe_sk.raw_decrypt(c) == 271828


@pytest.mark.slow
def test_1024_bit_modulus_scenario():
    scheme = Paillier()
    pk, sk = scheme.key_generation(512)
    assert pk.n.bit_length() >= 1024
    c1 = scheme.encrypt(12345, pk).unwrap()
    c2 = scheme.encrypt(56789, pk).unwrap()
    assert scheme.decrypt(scheme.add(c1, c2, pk), pk, sk).unwrap() == 69134
    product = scheme.scalar_multiply(c1, 56789, pk)
    assert scheme.decrypt(product, pk, sk).unwrap() == 701060205
