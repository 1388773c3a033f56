"""
Big integer helpers shared by the Paillier, Benaloh and BGN schemes.

Python ints are arbitrary precision, so the arithmetic itself is the builtin
pow / * / %; this module adds the pieces that need care: sampling from a
secure random source, probabilistic primality with a caller-chosen certainty,
modular inverses that report non-invertible operands, and the bounded retry
loop used by every key generation.
"""

import logging
import math
import random

import sympy
from sympy.ntheory.primetest import mr

from .errors import KeyGenerationError, NonInvertibleElementError

logger = logging.getLogger(__name__)

# Process-wide secure source. Never seeded; callers that need reproducible
# draws (tests) pass their own handle.
_SYSTEM_RANDOM = random.SystemRandom()

_SMALL_PRIMES = list(sympy.primerange(3, 1000))


def default_rng(rng=None):
    """
    :param rng: a random.Random compatible handle or None
    :return: rng itself, or the OS backed SystemRandom when rng is None
    """
    return _SYSTEM_RANDOM if rng is None else rng


def sample_uniform(bits, rng=None):
    """Uniform integer in [0, 2^bits)."""
    if bits < 1:
        raise ValueError(f"bits must be positive, got {bits}")
    return default_rng(rng).getrandbits(bits)


def sample_below(upper, rng=None):
    """Uniform integer in [0, upper)."""
    if upper < 1:
        raise ValueError(f"upper bound must be positive, got {upper}")
    return default_rng(rng).randrange(upper)


def sample_zstar(n, rng=None):
    """
    Draw a uniform element of Z_n*, i.e. 1 <= r < n with gcd(r, n) == 1.
    :param n: modulus (n > 2)
    :param rng: random handle, SystemRandom by default
    :return: r in Z_n*
    """
    rng = default_rng(rng)
    while True:
        r = rng.randrange(1, n)
        if math.gcd(r, n) == 1:
            return r


def is_probable_prime(n, certainty=64, rng=None):
    """
    Miller-Rabin test with ceil(certainty / 2) random bases, so a composite
    passes with probability at most 2^-certainty.
    :param n: candidate
    :param certainty: confidence parameter, as in BigInteger.isProbablePrime
    :param rng: source of the witnesses
    :return: True if n is prime with the requested confidence
    """
    if n < 2:
        return False
    if n == 2:
        return True
    if n % 2 == 0:
        return False
    for p in _SMALL_PRIMES:
        if n == p:
            return True
        if n % p == 0:
            return False
    rng = default_rng(rng)
    rounds = max(1, (certainty + 1) // 2)
    bases = [rng.randrange(2, n - 1) for _ in range(rounds)]
    return mr(n, bases)


def sample_prime(bits, certainty=64, rng=None):
    """
    Generate a probable prime with exactly `bits` bits (top bit set).
    :param bits: bit length, at least 2
    :param certainty: see is_probable_prime
    :param rng: random handle
    :return: prime p with p.bit_length() == bits
    """
    if bits < 2:
        raise ValueError(f"a prime needs at least 2 bits, got {bits}")
    rng = default_rng(rng)
    while True:
        candidate = sample_uniform(bits, rng) | (1 << (bits - 1)) | 1
        if is_probable_prime(candidate, certainty, rng):
            return candidate


def mod_pow(base, exponent, modulus):
    return pow(base, exponent, modulus)


def mod_inverse(a, m):
    """
    Inverse of a modulo m.
    :raises NonInvertibleElementError: gcd(a, m) != 1
    """
    try:
        return int(sympy.mod_inverse(a, m))
    except ValueError:
        raise NonInvertibleElementError(f"{a} has no inverse modulo {m}") from None


def gcd(a, b):
    return math.gcd(a, b)


def lcm(a, b):
    return a * b // math.gcd(a, b)


def L(x, n):
    """
    Paillier's L function, L(x) = (x - 1) / n, as an exact integer division.
    :raises ValueError: x - 1 is not divisible by n
    """
    if (x - 1) % n != 0:
        raise ValueError("(x - 1) is not divisible by n")
    return (x - 1) // n


def bounded_retry(max_attempts, what):
    """
    Iterate attempt numbers 1..max_attempts for a rejection-sampling loop.
    The caller breaks out on success; running off the end raises.
    :param max_attempts: attempt ceiling
    :param what: name of the loop, for the log line and the error
    :raises KeyGenerationError: the ceiling was reached
    """
    for attempt in range(1, max_attempts + 1):
        yield attempt
    logger.error("gave up on %s after %d attempts", what, max_attempts)
    raise KeyGenerationError(f"{what}: no acceptable candidate after {max_attempts} attempts")
