import logging
from dataclasses import dataclass

from .errors import ErrorKind, InvalidCiphertextError, PlaintextOutOfRangeError
from .numbertheory import bounded_retry, default_rng, sample_below
from .pairing import BilinearGroup, TypeA1Group
from .scheme import HomomorphicScheme, KeyPair, Result

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BGNPublicKey:
    n: int
    group: BilinearGroup
    g: object
    h: object   # g^q, generator of the order-p subgroup


@dataclass(frozen=True)
class BGNPrivateKey:
    p: int


class BGN(HomomorphicScheme):
    """
    Boneh-Goh-Nissim encryption over a composite-order bilinear group.

    Ciphertexts of the source group G can be added and scaled any number of
    times; pairing two of them yields a target group ciphertext of the
    product, which only decrypt_after_pairing_multiply understands.

    :param config: SchemeConfig, its bgn_t bounds the plaintexts
    :param group_factory: callable(bits, rng, certainty, max_attempts) ->
        (BilinearGroup, p, q); TypeA1Group.generate by default
    """

    name = "bgn"

    def __init__(self, config=None, group_factory=None):
        super().__init__(config)
        self.group_factory = group_factory or TypeA1Group.generate

    @property
    def t(self):
        return self.config.bgn_t

    def key_generation(self, k=None, rng=None):
        """
        :param k: bit length of the hidden primes p and q
        :return: KeyPair(BGNPublicKey(n, group, g, h), BGNPrivateKey(p))
        """
        k = self._security_bits(k)
        rng = default_rng(rng)
        cfg = self.config
        group, p, q = self.group_factory(k, rng, cfg.certainty, cfg.max_keygen_attempts)
        n = group.order

        # g must have order exactly n, so neither g^p nor g^q may vanish
        identity = group.identity()
        for attempts in bounded_retry(cfg.max_keygen_attempts, "BGN generator"):
            g = group.random_generator(rng)
            h = group.pow(g, q)
            if h != identity and group.pow(g, p) != identity:
                break

        logger.info("BGN key generated: n has %d bits, T=%d (%d generator draws)",
                    n.bit_length(), self.t, attempts)
        return KeyPair(BGNPublicKey(n, group, g, h), BGNPrivateKey(p))

    def encrypt(self, m, public_key, rng=None):
        """
        c = g^m * h^r, r uniform in Z_n
        :param m: plaintext in [0, T]
        :return: Result holding a source group ciphertext
        """
        if not (0 <= m <= self.t):
            logger.debug("rejecting plaintext outside [0, T]")
            return Result.failure(ErrorKind.INVALID_PLAINTEXT,
                                  f"plaintext m is not in [0, {self.t}]",
                                  PlaintextOutOfRangeError)
        group = public_key.group
        r = sample_below(public_key.n, rng)
        return Result.success(group.mul(group.pow(public_key.g, m), group.pow(public_key.h, r)))

    def decrypt(self, c, public_key, private_key):
        """
        Search i in [0, T] with (g^p)^i = c^p.
        :param c: source group ciphertext
        """
        group = public_key.group
        if not group.is_element(c):
            return Result.failure(ErrorKind.INVALID_CIPHERTEXT, "ciphertext is not an element of G")
        p = private_key.p
        cp = group.pow(c, p)
        gp = group.pow(public_key.g, p)
        return self._search(cp, gp, group.identity(), group.mul)

    def decrypt_after_pairing_multiply(self, c, public_key, private_key):
        """
        Search i in [0, T] with (e(g, g)^p)^i = c^p.
        :param c: target group ciphertext produced by pairing_multiply
        """
        group = public_key.group
        if not group.is_target_element(c):
            return Result.failure(ErrorKind.INVALID_CIPHERTEXT, "ciphertext is not an element of GT")
        p = private_key.p
        cp = group.target_pow(c, p)
        egg = group.target_pow(group.pairing(public_key.g, public_key.g), p)
        return self._search(cp, egg, group.target_identity(), group.target_mul)

    def _search(self, target, base, identity, mul):
        acc = identity
        for i in range(self.t + 1):
            if acc == target:
                return Result.success(i)
            acc = mul(acc, base)
        return Result.failure(ErrorKind.DECRYPTION_EXHAUSTED,
                              f"plaintext is not in [0, {self.t}]")

    def add(self, c1, c2, public_key):
        """
        c1 * c2 in G, or in GT when both operands come from pairing_multiply.
        :raises InvalidCiphertextError: operands from different groups, or
            not produced under this key
        """
        group = public_key.group
        if group.is_element(c1) and group.is_element(c2):
            return group.mul(c1, c2)
        if group.is_target_element(c1) and group.is_target_element(c2):
            return group.target_mul(c1, c2)
        logger.debug("rejecting add of mismatched ciphertexts")
        raise InvalidCiphertextError("add takes two G or two GT ciphertexts of this key")

    def scalar_multiply(self, c, m, public_key):
        """
        c^m, the ciphertext of m1 * m.
        :param m: non-negative integer
        :raises InvalidCiphertextError: c is not a ciphertext of this key
        """
        if m < 0:
            raise ValueError(f"scalar must be non-negative, got {m}")
        group = public_key.group
        if group.is_element(c):
            return group.pow(c, m)
        if group.is_target_element(c):
            return group.target_pow(c, m)
        logger.debug("rejecting scalar multiply of a foreign ciphertext")
        raise InvalidCiphertextError("scalar_multiply takes a G or GT ciphertext of this key")

    def pairing_multiply(self, c1, c2, public_key):
        """
        e(c1, c2), a GT ciphertext of m1 * m2. One level only: GT elements
        cannot be paired again.
        :return: Result, INVALID_CIPHERTEXT unless both operands are in G
        """
        group = public_key.group
        if not (group.is_element(c1) and group.is_element(c2)):
            return Result.failure(ErrorKind.INVALID_CIPHERTEXT,
                                  "pairing_multiply takes two source group ciphertexts")
        return Result.success(group.pairing(c1, c2))

    def self_blind(self, c, r, public_key):
        """c * h^r for any integer r."""
        group = public_key.group
        if not group.is_element(c):
            return Result.failure(ErrorKind.INVALID_CIPHERTEXT, "self_blind works in G only")
        return Result.success(group.mul(c, group.pow(public_key.h, r)))

    def rerandomize(self, c, public_key, rng=None):
        return self.self_blind(c, sample_below(public_key.n, rng), public_key).unwrap()

    def plaintext_modulus(self, public_key):
        return None

    def max_plaintext(self, public_key):
        return self.t
