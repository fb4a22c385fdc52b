# MIT License © 2025 Motohiro Suzuki
"""
kdf_core/validator.py

Precondition checks for PBKDF2 (RFC 8018 5.2).

Runs before any PRF call so an invalid request never computes anything.
"""

from __future__ import annotations

from typing import Any, Tuple

from kdf_core.errors import DerivedKeyTooLong, InvalidIterationCount, InvalidKeyLength
from kdf_core.prf import PRF, prf_name, resolve_prf_with_size

MAX_BLOCKS = 0xFFFFFFFF  # 2^32 - 1, block index is a u32


def _is_int(v: Any) -> bool:
    return isinstance(v, int) and not isinstance(v, bool)


def max_key_length(h_len: int) -> int:
    return MAX_BLOCKS * int(h_len)


def check_params(iterations: Any, key_length: Any, prf: Any) -> Tuple[PRF, int]:
    """
    Check (c, dkLen, prf) and return the resolved PRF with its hLen.

    hLen is queried once here; callers pass it down instead of re-reading
    `prf.digest_size`.

    Raises:
        InvalidPRF: prf missing, not callable, or digest_size <= 0
        InvalidIterationCount: c < 1
        InvalidKeyLength: dkLen <= 0
        DerivedKeyTooLong: dkLen > (2^32 - 1) * hLen
    """
    p, h_len = resolve_prf_with_size(prf)

    if not _is_int(iterations):
        raise InvalidIterationCount(f"iterations must be int, got {type(iterations).__name__}")
    if iterations < 1:
        raise InvalidIterationCount(f"iterations must be >= 1, got {iterations}")

    if not _is_int(key_length):
        raise InvalidKeyLength(f"key_length must be int, got {type(key_length).__name__}")
    if key_length <= 0:
        raise InvalidKeyLength(f"key_length must be > 0, got {key_length}")

    limit = max_key_length(h_len)
    if key_length > limit:
        raise DerivedKeyTooLong(f"derived key too long: {key_length} > {limit} ({prf_name(p)})")

    return p, h_len


def validate_params(iterations: Any, key_length: Any, prf: Any) -> PRF:
    return check_params(iterations, key_length, prf)[0]
