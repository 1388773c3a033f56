import logging

import numpy as np

from .config import FIXED_POINT_DEG

logger = logging.getLogger(__name__)


def Appr(x, deg=FIXED_POINT_DEG):
    """Float to fixed point integer: x' = round(x * deg)."""
    return round(x * deg)


def aggregate(scheme, ciphertexts, public_key):
    """
    Homomorphic sum of several ciphertexts [[a + b + ...]].
    :param scheme: any HomomorphicScheme
    :param ciphertexts: non-empty list [[a], [b], ...]
    :param public_key: key the ciphertexts were produced under
    :return: ciphertext of the sum
    """
    if not ciphertexts:
        raise ValueError("ciphertext list must not be empty")
    result = ciphertexts[0]
    for c in ciphertexts[1:]:
        result = scheme.add(result, c, public_key)
    return result


def weighted_aggregate(scheme, ciphertexts, weights, public_key):
    """
    prod c_i^{w_i}, the ciphertext of sum w_i * m_i.
    :param weights: known plaintext weights, one per ciphertext
    """
    if len(ciphertexts) != len(weights):
        raise ValueError("need exactly one weight per ciphertext")
    if not hasattr(scheme, "scalar_multiply"):
        raise TypeError(f"{scheme.name} has no scalar multiplication")
    scaled = [scheme.scalar_multiply(c, int(w), public_key) for c, w in zip(ciphertexts, weights)]
    return aggregate(scheme, scaled, public_key)


def encode_vector(vec, n, deg=FIXED_POINT_DEG):
    """
    Fixed point encoding of a real vector into Z_n; negative entries become
    n - |x'|.
    :param vec: array-like of floats
    :param n: plaintext modulus
    :return: list of ints in [0, n)
    """
    return [Appr(float(x), deg) % n for x in np.asarray(vec, dtype=float).ravel()]


def decode_vector(values, n, deg=FIXED_POINT_DEG):
    """
    Inverse of encode_vector: residues above n/2 are read as negative.
    :return: numpy float array
    """
    signed = [v - n if v > n // 2 else v for v in values]
    return np.array(signed, dtype=float) / deg


def encrypt_vector(scheme, vec, public_key, deg=FIXED_POINT_DEG, rng=None):
    """
    Encrypt every entry of a real vector under a Paillier style scheme.
    The scheme needs encrypt_residue (any element of Z_n, zero included).
    """
    n = scheme.plaintext_modulus(public_key)
    return [scheme.encrypt_residue(m, public_key, rng) for m in encode_vector(vec, n, deg)]


def decrypt_vector(scheme, ciphertexts, public_key, private_key, deg=FIXED_POINT_DEG):
    n = scheme.plaintext_modulus(public_key)
    values = [scheme.decrypt(c, public_key, private_key).unwrap() for c in ciphertexts]
    logger.debug("decrypted vector of %d entries", len(values))
    return decode_vector(values, n, deg)
