"""
Composite-order bilinear groups for BGN.

BilinearGroup is the narrow interface the BGN scheme talks to. TypeA1Group
implements it on PBC's type A1 pairings through pypbc: for a composite order
n, Parameters(n=n) finds the supersingular curve y^2 = x^3 + x over F_P with
P = l*n - 1, G1 = G2 is its order-n subgroup and GT the order-n subgroup of
F_{P^2}*. The pairing is symmetric, so e(g, g) generates GT whenever g
generates G.
"""

import abc
import logging
from dataclasses import dataclass, field

from pypbc import G1, GT, Element, Pairing, Parameters, Zr

from .numbertheory import bounded_retry, default_rng, sample_prime

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class GroupElement:
    """A pypbc element tagged with the group that produced it."""
    element: object
    group: "TypeA1Group" = field(repr=False)

    def __eq__(self, other):
        if type(other) is not type(self) or other.group is not self.group:
            return NotImplemented
        return self.element == other.element

    def __hash__(self):
        return hash((type(self).__name__, str(self.element)))


class GElement(GroupElement):
    """Member of the source group G."""


class GTElement(GroupElement):
    """Member of the target group GT."""


class BilinearGroup(abc.ABC):
    """
    Cyclic group G of order n with a bilinear map e: G x G -> GT.
    Group laws are written multiplicatively, as the BGN paper does.
    """

    @property
    @abc.abstractmethod
    def order(self) -> int:
        """n, the order of G and GT."""

    @abc.abstractmethod
    def random_generator(self, rng=None):
        """Random non-identity element of G."""

    @abc.abstractmethod
    def identity(self):
        pass

    @abc.abstractmethod
    def pow(self, element, exponent):
        pass

    @abc.abstractmethod
    def mul(self, a, b):
        pass

    @abc.abstractmethod
    def pairing(self, a, b):
        """e(a, b) in GT."""

    @abc.abstractmethod
    def target_identity(self):
        pass

    @abc.abstractmethod
    def target_pow(self, element, exponent):
        pass

    @abc.abstractmethod
    def target_mul(self, a, b):
        pass

    @abc.abstractmethod
    def is_element(self, value) -> bool:
        """True for members of G."""

    @abc.abstractmethod
    def is_target_element(self, value) -> bool:
        """True for members of GT."""


class TypeA1Group(BilinearGroup):
    """
    :param n: group order, the product of the two hidden primes
    """

    def __init__(self, n):
        if n < 6:
            raise ValueError(f"group order must be a product of two primes, got {n}")
        self.n = n
        self.params = Parameters(n=n)
        self._pairing = Pairing(self.params)

    @classmethod
    def generate(cls, bits, rng=None, certainty=64, max_attempts=1_000_000):
        """
        Sample two distinct `bits`-bit primes p, q and build the type A1
        group of order n = pq; PBC picks the curve cofactor.
        :return: (group, p, q); only key generation should keep p and q
        """
        rng = default_rng(rng)
        p = sample_prime(bits, certainty, rng)
        for _ in bounded_retry(max_attempts, "type A1 prime q"):
            q = sample_prime(bits, certainty, rng)
            if q != p:
                break
        group = cls(p * q)
        logger.debug("type A1 parameters: n has %d bits", group.n.bit_length())
        return group, p, q

    @property
    def order(self):
        return self.n

    def _exponent(self, exponent):
        # G and GT have order n, so exponents live in Zr = Z_n
        return Element(self._pairing, Zr, value=exponent % self.n)

    def is_element(self, value):
        return isinstance(value, GElement) and value.group is self

    def is_target_element(self, value):
        return isinstance(value, GTElement) and value.group is self

    def identity(self):
        return GElement(Element.one(self._pairing, G1), self)

    def random_generator(self, rng=None):
        """
        Uniform non-identity element of G. PBC draws the point from its own
        entropy source, so rng does not make the result reproducible.
        """
        identity = self.identity()
        while True:
            g = GElement(Element.random(self._pairing, G1), self)
            if g != identity:
                return g

    def pow(self, element, exponent):
        return GElement(element.element ** self._exponent(exponent), self)

    def mul(self, a, b):
        return GElement(a.element * b.element, self)

    def pairing(self, a, b):
        return GTElement(self._pairing.apply(a.element, b.element), self)

    def target_identity(self):
        return GTElement(Element.one(self._pairing, GT), self)

    def target_pow(self, element, exponent):
        return GTElement(element.element ** self._exponent(exponent), self)

    def target_mul(self, a, b):
        return GTElement(a.element * b.element, self)
