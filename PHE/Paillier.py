import logging
from dataclasses import dataclass

from phe import paillier

from .errors import ErrorKind
from .numbertheory import (L, bounded_retry, default_rng, gcd, is_probable_prime,
                           mod_inverse, mod_pow, sample_prime, sample_zstar)
from .scheme import HomomorphicScheme, KeyPair, Result

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PaillierPublicKey:
    n: int
    g: int

    @property
    def nsquare(self):
        return self.n * self.n

    def to_phe(self):
        """python-paillier public key over the same n (it also uses g = n + 1)."""
        return paillier.PaillierPublicKey(n=self.n)


@dataclass(frozen=True)
class PaillierPrivateKey:
    lam: int
    mu: int
    p: int
    q: int

    def to_phe(self, public_key):
        return paillier.PaillierPrivateKey(public_key.to_phe(), self.p, self.q)


class Paillier(HomomorphicScheme):
    """
    Paillier PKE with g = n + 1 and safe-prime style factors.
    Plaintexts are residues of Z_n, additions wrap modulo n.
    """

    name = "paillier"

    def key_generation(self, k=None, rng=None):
        """
        KeyGen(k) -> (pk, sk)
        :param k: bit length of p' and q' (p = 2p'+1, q = 2q'+1)
        :param rng: random handle, SystemRandom by default
        :return: KeyPair(PaillierPublicKey(n, g), PaillierPrivateKey(lam, mu, p, q))
        """
        k = self._security_bits(k)
        rng = default_rng(rng)
        cfg = self.config

        # 1. p' prime with p = 2p'+1 prime
        for attempts_p in bounded_retry(cfg.max_keygen_attempts, "Paillier p"):
            p_prime = sample_prime(k, cfg.certainty, rng)
            p = 2 * p_prime + 1
            if is_probable_prime(p, cfg.certainty, rng):
                break

        # 2. same for q, with q' != p'
        for attempts_q in bounded_retry(cfg.max_keygen_attempts, "Paillier q"):
            q_prime = sample_prime(k, cfg.certainty, rng)
            if q_prime == p_prime:
                continue
            q = 2 * q_prime + 1
            if is_probable_prime(q, cfg.certainty, rng):
                break

        # 3. n = pq, g = 1+n, lambda = lcm(p-1, q-1) = 2p'q'
        n = p * q
        nsquare = n * n
        g = n + 1
        lam = 2 * p_prime * q_prime
        # 4. mu = L(g^lambda mod n^2)^-1 mod n
        mu = mod_inverse(L(mod_pow(g, lam, nsquare), n), n)

        logger.info("Paillier key generated: n has %d bits (%d + %d candidate rounds)",
                    n.bit_length(), attempts_p, attempts_q)
        return KeyPair(PaillierPublicKey(n, g), PaillierPrivateKey(lam, mu, p, q))

    def encrypt(self, m, public_key, rng=None):
        """
        Enc_pk(m) = g^m * r^n mod n^2 with a fresh r in Z_n*.
        :param m: plaintext, 0 <= m < n and gcd(m, n) == 1
        :return: Result holding the ciphertext
        """
        n = public_key.n
        if not (0 <= m < n) or gcd(m, n) != 1:
            logger.debug("rejecting plaintext outside Z_n*")
            return Result.failure(ErrorKind.INVALID_PLAINTEXT, "plaintext m is not in Z*_n")
        return Result.success(self.encrypt_residue(m, public_key, rng))

    def encrypt_residue(self, m, public_key, rng=None):
        """
        Encrypt any residue of Z_n, 0 and multiples of p or q included, as
        python-paillier does. Used for fixed-point vectors where 0 is common.
        :raises ValueError: m outside [0, n)
        """
        n = public_key.n
        nsquare = public_key.nsquare
        if not (0 <= m < n):
            raise ValueError("plaintext m is not in Z_n")
        r = sample_zstar(n, rng)
        term1 = mod_pow(public_key.g, m, nsquare)
        term2 = mod_pow(r, n, nsquare)
        return (term1 * term2) % nsquare

    def decrypt(self, c, public_key, private_key):
        """
        m = L(c^lambda mod n^2) * mu mod n
        :param c: ciphertext in Z*_(n^2)
        :return: Result holding m
        """
        n = public_key.n
        nsquare = public_key.nsquare
        if not (0 < c < nsquare) or gcd(c, n) != 1:
            logger.debug("rejecting ciphertext outside Z*_(n^2)")
            return Result.failure(ErrorKind.INVALID_CIPHERTEXT, "ciphertext c is not in Z*_(n^2)")
        u = mod_pow(c, private_key.lam, nsquare)
        return Result.success((L(u, n) * private_key.mu) % n)

    def add(self, c1, c2, public_key):
        return (c1 * c2) % public_key.nsquare

    def add_plain(self, c, m, public_key):
        """Add a known plaintext: c * g^m mod n^2."""
        nsquare = public_key.nsquare
        return (c * mod_pow(public_key.g, m % public_key.n, nsquare)) % nsquare

    def scalar_multiply(self, c, m, public_key):
        """c^m mod n^2 decrypts to m1 * m mod n."""
        return mod_pow(c, m % public_key.n, public_key.nsquare)

    def negate(self, c, public_key):
        return mod_inverse(c, public_key.nsquare)

    def sub(self, c1, c2, public_key):
        """
        c1 * c2^-1 mod n^2, decrypts to m1 - m2 mod n.
        :return: Result, NON_INVERTIBLE_ELEMENT if c2 shares a factor with n
        """
        if gcd(c2, public_key.n) != 1:
            return Result.failure(ErrorKind.NON_INVERTIBLE_ELEMENT, "c2 is not invertible mod n^2")
        return Result.success((c1 * self.negate(c2, public_key)) % public_key.nsquare)

    def self_blind(self, c, r, public_key):
        """
        c * r^n mod n^2, same plaintext, fresh looking ciphertext.
        :param r: blinding factor in Z_n*
        """
        n = public_key.n
        if not (0 < r < n) or gcd(r, n) != 1:
            return Result.failure(ErrorKind.NON_INVERTIBLE_ELEMENT, "blinding factor r is not in Z*_n")
        nsquare = public_key.nsquare
        return Result.success((c * mod_pow(r, n, nsquare)) % nsquare)

    def rerandomize(self, c, public_key, rng=None):
        return self.self_blind(c, sample_zstar(public_key.n, rng), public_key).unwrap()

    def plaintext_modulus(self, public_key):
        return public_key.n

    def max_plaintext(self, public_key):
        return public_key.n - 1
