"""
Shared shape of the three schemes.

Every scheme offers key_generation / encrypt / decrypt / add. Operations that
can fail on bad input return a Result instead of raising, so a caller checks
`result.ok` (or calls `unwrap()` to get the value or the matching exception).
"""

import abc
from dataclasses import dataclass, field
from typing import Any, Generic, Optional, TypeVar

from .config import DEFAULT_CONFIG, SchemeConfig
from .errors import ErrorKind, error_for

T = TypeVar("T")


@dataclass(frozen=True)
class Result(Generic[T]):
    value: Optional[T] = None
    error: Optional[ErrorKind] = None
    message: str = ""
    error_class: Any = field(default=None, repr=False, compare=False)

    @classmethod
    def success(cls, value: T) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, kind: ErrorKind, message: str, error_class=None) -> "Result[T]":
        return cls(error=kind, message=message, error_class=error_class)

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        """Return the value, or raise the PHEError subclass for the error kind."""
        if self.ok:
            return self.value
        error_class = self.error_class or error_for(self.error)
        raise error_class(self.message)

    def __bool__(self):
        return self.ok


@dataclass(frozen=True)
class KeyPair:
    public_key: Any
    private_key: Any

    def __iter__(self):
        # allows `pk, sk = scheme.key_generation(k)`
        return iter((self.public_key, self.private_key))


class HomomorphicScheme(abc.ABC):
    """
    Capability common to Paillier, Benaloh and BGN.
    :param config: SchemeConfig, DEFAULT_CONFIG when omitted
    """

    name = "abstract"

    def __init__(self, config: SchemeConfig = None):
        self.config = (config or DEFAULT_CONFIG).validate()

    @abc.abstractmethod
    def key_generation(self, k: int = None, rng=None) -> KeyPair:
        """Return a fresh KeyPair whose primes are k bits long."""

    @abc.abstractmethod
    def encrypt(self, m: int, public_key, rng=None) -> Result:
        """Probabilistic encryption of m."""

    @abc.abstractmethod
    def decrypt(self, c, public_key, private_key) -> Result:
        """Recover the plaintext of c."""

    @abc.abstractmethod
    def add(self, c1, c2, public_key):
        """Ciphertext of the sum of the two plaintexts."""

    @abc.abstractmethod
    def plaintext_modulus(self, public_key) -> Optional[int]:
        """
        Modulus of the plaintext arithmetic (n for Paillier, R for Benaloh).
        None for BGN, whose sums are bounded by T rather than reduced.
        """

    @abc.abstractmethod
    def max_plaintext(self, public_key) -> int:
        """Largest plaintext encrypt() accepts."""

    def _security_bits(self, k):
        k = self.config.security_bits if k is None else k
        if k < 2:
            raise ValueError(f"security parameter must be at least 2 bits, got {k}")
        return k
