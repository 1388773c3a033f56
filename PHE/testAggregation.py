import numpy as np
import pytest

from PHE.aggregation import (Appr, decode_vector, decrypt_vector, encode_vector,
                             encrypt_vector, weighted_aggregate)


def test_appr():
    assert Appr(0.123456) == 12346
    assert Appr(-1.5, deg=10) == -15


def test_encode_decode_signed_vector():
    n = 10 ** 12 + 39
    vec = np.array([0.5, -0.25, 0.0, 1.0])
    encoded = encode_vector(vec, n)
    assert encoded[1] == n - 25000
    assert encoded[2] == 0
    np.testing.assert_allclose(decode_vector(encoded, n), vec)


def test_encrypted_vector_sum(paillier_keys, rng):
    scheme, (pk, sk) = paillier_keys
    ga = np.array([0.1, -0.2, 0.3, 0.0])
    gb = np.array([-0.4, 0.25, 0.05, 0.0])
    ea = encrypt_vector(scheme, ga, pk, rng=rng)
    eb = encrypt_vector(scheme, gb, pk, rng=rng)
    summed = [scheme.add(x, y, pk) for x, y in zip(ea, eb)]
    np.testing.assert_allclose(decrypt_vector(scheme, summed, pk, sk), ga + gb, atol=1e-9)


def test_weighted_vector_aggregation(paillier_keys, rng):
    # sum_i ratio_i * g_i, the weighted update of federated averaging
    scheme, (pk, sk) = paillier_keys
    grads = [np.array([0.2, -0.1]), np.array([-0.3, 0.4]), np.array([0.05, 0.05])]
    ratios = [2, 1, 3]
    encrypted = [encrypt_vector(scheme, g, pk, rng=rng) for g in grads]
    columns = list(zip(*encrypted))
    agg = [weighted_aggregate(scheme, list(col), ratios, pk) for col in columns]
    expected = sum(r * g for r, g in zip(ratios, grads))
    np.testing.assert_allclose(decrypt_vector(scheme, agg, pk, sk), expected, atol=1e-9)


def test_weighted_aggregate_needs_matching_weights(paillier_keys):
    scheme, (pk, _) = paillier_keys
    c = scheme.encrypt(1, pk).unwrap()
    with pytest.raises(ValueError):
        weighted_aggregate(scheme, [c, c], [1], pk)
