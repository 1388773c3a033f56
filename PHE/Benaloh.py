import logging
from dataclasses import dataclass

from .errors import ErrorKind
from .numbertheory import (bounded_retry, default_rng, gcd, mod_inverse, mod_pow,
                           sample_prime, sample_zstar)
from .scheme import HomomorphicScheme, KeyPair, Result

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BenalohPublicKey:
    n: int
    y: int
    r: int   # plaintext modulus R


@dataclass(frozen=True)
class BenalohPrivateKey:
    phi: int
    x: int   # y^(phi/R) mod n


class Benaloh(HomomorphicScheme):
    """
    Benaloh's dense probabilistic encryption with a fixed prime block size R.
    Plaintexts live in Z_R, decryption searches the R powers of x.
    """

    name = "benaloh"

    @property
    def r(self):
        return self.config.benaloh_r

    def key_generation(self, k=None, rng=None):
        """
        :param k: bit length of p and q
        :param rng: random handle, SystemRandom by default
        :return: KeyPair(BenalohPublicKey(n, y, R), BenalohPrivateKey(phi, x))
        """
        k = self._security_bits(k)
        rng = default_rng(rng)
        cfg = self.config
        R = self.r
        if R.bit_length() >= k:
            raise ValueError(f"primes of {k} bits cannot carry the block size R={R}")

        # R | p-1 and gcd((p-1)/R, R) == 1
        for attempts_p in bounded_retry(cfg.max_keygen_attempts, "Benaloh p"):
            p = sample_prime(k, cfg.certainty, rng)
            if (p - 1) % R == 0 and gcd((p - 1) // R, R) == 1:
                break

        # only gcd(q-1, R) == 1 is required of q
        for attempts_q in bounded_retry(cfg.max_keygen_attempts, "Benaloh q"):
            q = sample_prime(k, cfg.certainty, rng)
            if q != p and gcd(q - 1, R) == 1:
                break

        n = p * q
        phi = (p - 1) * (q - 1)
        e = phi // R

        # y in Z_n* whose R-th residue class is nontrivial
        for _ in bounded_retry(cfg.max_keygen_attempts, "Benaloh y"):
            y = sample_zstar(n, rng)
            x = mod_pow(y, e, n)
            if x != 1:
                break

        logger.info("Benaloh key generated: R=%d, n has %d bits (%d + %d candidate primes)",
                    R, n.bit_length(), attempts_p, attempts_q)
        return KeyPair(BenalohPublicKey(n, y, R), BenalohPrivateKey(phi, x))

    def encrypt(self, m, public_key, rng=None):
        """
        c = y^m * u^R mod n, u fresh in Z_n*
        :param m: plaintext in [0, R)
        :return: Result holding the ciphertext
        """
        n, R = public_key.n, public_key.r
        if not (0 <= m < R):
            logger.debug("rejecting plaintext outside [0, R)")
            return Result.failure(ErrorKind.INVALID_PLAINTEXT, f"plaintext m is not in [0, {R})")
        u = sample_zstar(n, rng)
        return Result.success((mod_pow(public_key.y, m, n) * mod_pow(u, R, n)) % n)

    def decrypt(self, c, public_key, private_key):
        """
        a = c^(phi/R) mod n, then the unique i < R with x^i = a.
        :return: Result holding i, DECRYPTION_EXHAUSTED if no power matches
        """
        n, R = public_key.n, public_key.r
        if not (0 < c < n) or gcd(c, n) != 1:
            logger.debug("rejecting ciphertext outside Z_n*")
            return Result.failure(ErrorKind.INVALID_CIPHERTEXT, "ciphertext c is not in Z*_n")
        a = mod_pow(c, private_key.phi // R, n)
        xi = 1
        for i in range(R):
            if xi == a:
                return Result.success(i)
            xi = (xi * private_key.x) % n
        return Result.failure(ErrorKind.DECRYPTION_EXHAUSTED,
                              f"no exponent in [0, {R}) matches, ciphertext is not under this key")

    def add(self, c1, c2, public_key):
        return (c1 * c2) % public_key.n

    def sub(self, c1, c2, public_key):
        """
        c1 * c2^-1 mod n, decrypts to m1 - m2 mod R.
        :return: Result, NON_INVERTIBLE_ELEMENT when c2 has no inverse mod n
        """
        n = public_key.n
        if gcd(c2, n) != 1:
            return Result.failure(ErrorKind.NON_INVERTIBLE_ELEMENT, "c2 is not invertible mod n")
        return Result.success((c1 * mod_inverse(c2, n)) % n)

    def scalar_multiply(self, c, k, public_key):
        return mod_pow(c, k % public_key.r, public_key.n)

    def self_blind(self, c, u, public_key):
        """c * u^R mod n for u in Z_n*."""
        n = public_key.n
        if not (0 < u < n) or gcd(u, n) != 1:
            return Result.failure(ErrorKind.NON_INVERTIBLE_ELEMENT, "blinding factor u is not in Z*_n")
        return Result.success((c * mod_pow(u, public_key.r, n)) % n)

    def rerandomize(self, c, public_key, rng=None):
        return self.self_blind(c, sample_zstar(public_key.n, rng), public_key).unwrap()

    def plaintext_modulus(self, public_key):
        return public_key.r

    def max_plaintext(self, public_key):
        return public_key.r - 1
