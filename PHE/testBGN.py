import random

import pytest

from PHE import (BGN, ErrorKind, GTElement, InvalidCiphertextError,
                 PlaintextOutOfRangeError, SchemeConfig, TypeA1Group)


def test_key_structure(bgn_keys):
    scheme, (pk, sk) = bgn_keys
    group = pk.group
    assert group.order == pk.n
    assert pk.n % sk.p == 0
    q = pk.n // sk.p
    assert group.pow(pk.g, q) == pk.h
    # h generates the order-p subgroup
    assert group.pow(pk.h, sk.p) == group.identity()
    assert pk.h != group.identity()


@pytest.mark.parametrize("seed", range(4))
def test_round_trip_over_seeds(bgn_keys, seed):
    scheme, (pk, sk) = bgn_keys
    rng = random.Random(seed)
    for m in [0, scheme.t] + rng.sample(range(1, scheme.t), 3):
        c = scheme.encrypt(m, pk, rng).unwrap()
        assert scheme.decrypt(c, pk, sk).unwrap() == m


def test_homomorphic_addition(bgn_keys):
    scheme, (pk, sk) = bgn_keys
    c5 = scheme.encrypt(5, pk).unwrap()
    c6 = scheme.encrypt(6, pk).unwrap()
    assert scheme.decrypt(scheme.add(c5, c6, pk), pk, sk).unwrap() == 11


def test_addition_at_the_bound(bgn_keys):
    scheme, (pk, sk) = bgn_keys
    c60 = scheme.encrypt(60, pk).unwrap()
    c40 = scheme.encrypt(40, pk).unwrap()
    c41 = scheme.encrypt(41, pk).unwrap()
    assert scheme.decrypt(scheme.add(c60, c40, pk), pk, sk).unwrap() == 100
    over = scheme.decrypt(scheme.add(c60, c41, pk), pk, sk)
    assert over.error is ErrorKind.DECRYPTION_EXHAUSTED


def test_scalar_multiply(bgn_keys):
    scheme, (pk, sk) = bgn_keys
    c5 = scheme.encrypt(5, pk).unwrap()
    assert scheme.decrypt(scheme.scalar_multiply(c5, 6, pk), pk, sk).unwrap() == 30


def test_pairing_multiply(bgn_keys):
    scheme, (pk, sk) = bgn_keys
    c5 = scheme.encrypt(5, pk).unwrap()
    c6 = scheme.encrypt(6, pk).unwrap()
    product = scheme.pairing_multiply(c5, c6, pk).unwrap()
    assert isinstance(product, GTElement)
    assert scheme.decrypt_after_pairing_multiply(product, pk, sk).unwrap() == 30


def test_pairing_products_can_be_added(bgn_keys):
    scheme, (pk, sk) = bgn_keys
    enc = lambda m: scheme.encrypt(m, pk).unwrap()
    ab = scheme.pairing_multiply(enc(3), enc(4), pk).unwrap()
    cd = scheme.pairing_multiply(enc(5), enc(7), pk).unwrap()
    total = scheme.add(ab, cd, pk)
    assert scheme.decrypt_after_pairing_multiply(total, pk, sk).unwrap() == 47


def test_pairing_is_one_level(bgn_keys):
    scheme, (pk, _) = bgn_keys
    c2 = scheme.encrypt(2, pk).unwrap()
    product = scheme.pairing_multiply(c2, c2, pk).unwrap()
    result = scheme.pairing_multiply(product, c2, pk)
    assert result.error is ErrorKind.INVALID_CIPHERTEXT


def test_add_rejects_mixed_groups(bgn_keys):
    scheme, (pk, _) = bgn_keys
    c = scheme.encrypt(3, pk).unwrap()
    product = scheme.pairing_multiply(c, c, pk).unwrap()
    with pytest.raises(InvalidCiphertextError):
        scheme.add(product, c, pk)
    with pytest.raises(InvalidCiphertextError):
        scheme.add(c, product, pk)


def test_operators_reject_foreign_ciphertexts(bgn_keys):
    scheme, (pk, _) = bgn_keys
    other_pk, _ = BGN().key_generation(16, random.Random(11))
    c = scheme.encrypt(3, pk).unwrap()
    foreign = scheme.encrypt(3, other_pk).unwrap()
    with pytest.raises(InvalidCiphertextError):
        scheme.add(c, foreign, pk)
    with pytest.raises(InvalidCiphertextError):
        scheme.add(c, 12345, pk)
    with pytest.raises(InvalidCiphertextError):
        scheme.scalar_multiply(foreign, 2, pk)
    with pytest.raises(InvalidCiphertextError):
        scheme.scalar_multiply(12345, 2, pk)


def test_scalar_multiply_rejects_negative_scalars(bgn_keys):
    scheme, (pk, sk) = bgn_keys
    c = scheme.encrypt(3, pk).unwrap()
    with pytest.raises(ValueError):
        scheme.scalar_multiply(c, -1, pk)
    product = scheme.pairing_multiply(c, c, pk).unwrap()
    with pytest.raises(ValueError):
        scheme.scalar_multiply(product, -2, pk)
    scaled = scheme.scalar_multiply(product, 2, pk)
    assert scheme.decrypt_after_pairing_multiply(scaled, pk, sk).unwrap() == 18


def test_decrypt_variants_reject_the_other_group(bgn_keys):
    scheme, (pk, sk) = bgn_keys
    c = scheme.encrypt(1, pk).unwrap()
    product = scheme.pairing_multiply(c, c, pk).unwrap()
    assert scheme.decrypt(product, pk, sk).error is ErrorKind.INVALID_CIPHERTEXT
    assert scheme.decrypt_after_pairing_multiply(c, pk, sk).error is ErrorKind.INVALID_CIPHERTEXT


def test_self_blind_is_invisible(bgn_keys, rng):
    scheme, (pk, sk) = bgn_keys
    c = scheme.encrypt(9, pk).unwrap()
    b1 = scheme.rerandomize(c, pk, rng)
    b2 = scheme.self_blind(c, 123456789, pk).unwrap()
    assert b1 != c and b2 != c and b1 != b2
    assert scheme.decrypt(b1, pk, sk).unwrap() == 9
    assert scheme.decrypt(b2, pk, sk).unwrap() == 9


@pytest.mark.parametrize("m", [101, -1])
def test_rejects_plaintext_out_of_range(bgn_keys, m):
    scheme, (pk, _) = bgn_keys
    result = scheme.encrypt(m, pk)
    assert result.error is ErrorKind.INVALID_PLAINTEXT
    with pytest.raises(PlaintextOutOfRangeError):
        result.unwrap()


def test_larger_bound_from_config():
    scheme = BGN(SchemeConfig(bgn_t=400))
    pk, sk = scheme.key_generation(24, random.Random(8))
    c = scheme.encrypt(20, pk).unwrap()
    product = scheme.pairing_multiply(c, c, pk).unwrap()
    assert scheme.decrypt_after_pairing_multiply(product, pk, sk).unwrap() == 400


def test_injected_group_factory():
    calls = []

    def factory(bits, rng, certainty, max_attempts):
        calls.append(bits)
        return TypeA1Group.generate(bits, rng, certainty, max_attempts)

    scheme = BGN(group_factory=factory)
    pk, sk = scheme.key_generation(20, random.Random(6))
    assert calls == [20]
    assert scheme.decrypt(scheme.encrypt(7, pk).unwrap(), pk, sk).unwrap() == 7
