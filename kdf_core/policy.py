# MIT License © 2025 Motohiro Suzuki
"""
kdf_core/policy.py

Caller-side KDF defaults. The core (pbkdf2.derive) never reads these.

Environment overrides:
- PBKDF2_PRF         : digest name (default: sha256)
- PBKDF2_ITERATIONS  : work factor (default: 600000)
- PBKDF2_KEY_LENGTH  : derived key bytes (default: 32)
- PBKDF2_SALT_LENGTH : salt bytes (default: 16)
- PBKDF2_WORKERS     : block worker threads (default: 1)
- PBKDF2_MAX_ITERATIONS : largest work factor accepted from a stored credential
                          (default: 10000000)
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from kdf_core.pbkdf2 import PBKDF2
from kdf_core.prf import canonical_digest, get_prf

MIN_SALT_LENGTH = 8
MAX_ITERATIONS = 10_000_000


def _read_int_env(name: str, default: int) -> int:
    v = os.environ.get(name, "").strip()
    if not v:
        return default
    try:
        return int(v, 10)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got {v!r}") from e


@dataclass(frozen=True)
class KDFPolicy:
    prf_name: str = "sha256"
    iterations: int = 600_000
    key_length: int = 32
    salt_length: int = 16
    workers: int = 1
    max_iterations: int = MAX_ITERATIONS

    def __post_init__(self) -> None:
        object.__setattr__(self, "prf_name", canonical_digest(self.prf_name))
        if self.salt_length < MIN_SALT_LENGTH:
            raise ValueError(f"salt_length must be >= {MIN_SALT_LENGTH}, got {self.salt_length}")
        if self.workers < 1:
            raise ValueError(f"workers must be >= 1, got {self.workers}")
        if self.iterations > self.max_iterations:
            raise ValueError(f"iterations {self.iterations} exceeds max_iterations {self.max_iterations}")

    @staticmethod
    def from_env() -> "KDFPolicy":
        d = KDFPolicy()
        return KDFPolicy(
            prf_name=os.environ.get("PBKDF2_PRF", "").strip() or d.prf_name,
            iterations=_read_int_env("PBKDF2_ITERATIONS", d.iterations),
            key_length=_read_int_env("PBKDF2_KEY_LENGTH", d.key_length),
            salt_length=_read_int_env("PBKDF2_SALT_LENGTH", d.salt_length),
            workers=_read_int_env("PBKDF2_WORKERS", d.workers),
            max_iterations=_read_int_env("PBKDF2_MAX_ITERATIONS", d.max_iterations),
        )

    def to_driver(self) -> PBKDF2:
        return PBKDF2(
            iterations=self.iterations,
            key_length=self.key_length,
            prf=get_prf(self.prf_name),
            workers=self.workers,
        )
