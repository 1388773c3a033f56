import random

import pytest
import sympy

from PHE import KeyGenerationError, NonInvertibleElementError, SchemeConfig
from PHE.Paillier import Paillier
from PHE.numbertheory import (L, bounded_retry, gcd, is_probable_prime, lcm,
                              mod_inverse, mod_pow, sample_below, sample_prime,
                              sample_uniform, sample_zstar)


def test_is_probable_prime_agrees_with_sympy(rng):
    for n in list(range(-2, 3000)) + [2 ** 61 - 1, 2 ** 61 + 1, 561, 1105, 41041]:
        assert is_probable_prime(n, 32, rng) == sympy.isprime(n), n


@pytest.mark.parametrize("bits", [2, 8, 33, 128])
def test_sample_prime_bit_length(bits, rng):
    p = sample_prime(bits, 64, rng)
    assert p.bit_length() == bits
    assert sympy.isprime(p)


def test_sample_prime_rejects_tiny_sizes():
    with pytest.raises(ValueError):
        sample_prime(1)


def test_sampling_ranges(rng):
    for _ in range(200):
        assert 0 <= sample_uniform(10, rng) < 1024
        assert 0 <= sample_below(7, rng) < 7
        r = sample_zstar(15, rng)
        assert 0 < r < 15 and r % 3 and r % 5
    with pytest.raises(ValueError):
        sample_below(0, rng)


def test_default_source_is_not_seeded():
    assert sample_uniform(128) != sample_uniform(128)


def test_mod_inverse():
    assert mod_inverse(3, 11) == 4
    with pytest.raises(NonInvertibleElementError):
        mod_inverse(6, 9)


def test_l_function():
    n = 35
    assert L(1 + 4 * n, n) == 4
    with pytest.raises(ValueError):
        L(5, n)


def test_lcm():
    assert lcm(4, 6) == 12


def test_mod_pow_and_gcd():
    assert mod_pow(3, 4, 5) == 1
    assert mod_pow(2, 10, 1000) == 24
    assert gcd(12, 18) == 6
    assert gcd(7, 9) == 1


def test_sample_prime_draws_through_sample_uniform():
    # a source that only yields the top bit gives 2^(bits-1) + 1 = 17
    class TopBitRandom(random.Random):
        def getrandbits(self, k):
            return 1 << (k - 1)

    assert sample_prime(5, 64, TopBitRandom(0)) == 17


def test_bounded_retry_gives_up():
    with pytest.raises(KeyGenerationError):
        for _ in bounded_retry(3, "never satisfied"):
            pass
    attempts = []
    for attempt in bounded_retry(3, "satisfied at once"):
        attempts.append(attempt)
        break
    assert attempts == [1]


def test_key_generation_ceiling_is_fatal():
    # every candidate comes out as 5, so q' can never differ from p'
    class StuckRandom(random.Random):
        def getrandbits(self, k):
            return 0

    scheme = Paillier(SchemeConfig(max_keygen_attempts=5))
    with pytest.raises(KeyGenerationError):
        scheme.key_generation(3, StuckRandom(0))
