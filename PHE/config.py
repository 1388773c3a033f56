"""
Default parameters of the PHE schemes.

Module level constants are the defaults; SchemeConfig bundles them so a
scheme instance can be built with different bounds (a smaller Benaloh R or a
larger BGN T) without touching the module.
"""

from dataclasses import dataclass, fields, replace
from typing import Any, Dict

import sympy

DEFAULT_SECURITY_BITS = 512   # bit length of each hidden prime
CERTAINTY = 64                # primality error probability <= 2^-CERTAINTY
BENALOH_R = 199               # Benaloh plaintext modulus, must be prime
BGN_T = 100                   # BGN plaintexts live in [0, T]
MAX_KEYGEN_ATTEMPTS = 1_000_000
FIXED_POINT_DEG = 10 ** 5     # real x is encoded as round(x * deg)


@dataclass(frozen=True)
class SchemeConfig:
    security_bits: int = DEFAULT_SECURITY_BITS
    certainty: int = CERTAINTY
    benaloh_r: int = BENALOH_R
    bgn_t: int = BGN_T
    max_keygen_attempts: int = MAX_KEYGEN_ATTEMPTS
    fixed_point_deg: int = FIXED_POINT_DEG

    def validate(self) -> "SchemeConfig":
        """Raise ValueError on the first bad parameter, return self otherwise."""
        if self.security_bits < 8:
            raise ValueError(f"security_bits too small: {self.security_bits}")
        if self.certainty < 1:
            raise ValueError(f"certainty must be positive: {self.certainty}")
        if not sympy.isprime(self.benaloh_r):
            raise ValueError(f"benaloh_r must be prime: {self.benaloh_r}")
        if self.bgn_t < 1:
            raise ValueError(f"bgn_t must be positive: {self.bgn_t}")
        if self.max_keygen_attempts < 1:
            raise ValueError(f"max_keygen_attempts must be positive: {self.max_keygen_attempts}")
        if self.fixed_point_deg < 1:
            raise ValueError(f"fixed_point_deg must be positive: {self.fixed_point_deg}")
        return self

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> "SchemeConfig":
        """Build a validated config; keys not listed above are rejected."""
        known = {f.name for f in fields(cls)}
        unknown = set(config_dict) - known
        if unknown:
            raise ValueError(f"unknown config keys: {sorted(unknown)}")
        return replace(cls(), **config_dict).validate()


DEFAULT_CONFIG = SchemeConfig()
