# MIT License © 2025 Motohiro Suzuki
"""
kdf_core/block.py

PBKDF2 block function F (RFC 8018 5.2, step 3):

    U_1 = PRF(P, S || INT(i))
    U_j = PRF(P, U_{j-1})          j = 2..c
    T_i = U_1 ^ U_2 ^ ... ^ U_c

Every U_j is folded into T_i, not only the last one.
"""

from __future__ import annotations

from typing import Callable

from kdf_core.errors import InvalidPRF
from kdf_core.prf import PRF, prf_name

MAX_BLOCK_INDEX = 0xFFFFFFFF


def int_be32(i: int) -> bytes:
    if i < 1 or i > MAX_BLOCK_INDEX:
        raise ValueError(f"block index out of range: {i}")
    return int(i).to_bytes(4, "big", signed=False)


def _bind(prf: PRF, password: bytes) -> Callable[[bytes], bytes]:
    keyed = getattr(prf, "keyed", None)
    if callable(keyed):
        return keyed(password)
    return lambda message: prf(password, message)


def derive_block(password: bytes, salt: bytes, iterations: int, index: int, prf: PRF, h_len: int) -> bytes:
    """
    Compute T_index. Inputs are assumed validated (see validator.check_params),
    `h_len` is the hLen read once by the validator.
    """
    block = int_be32(index)
    f = _bind(prf, password)

    u = f(salt + block)
    if len(u) != h_len:
        raise InvalidPRF(f"{prf_name(prf)} returned {len(u)} bytes, expected {h_len}")

    acc = int.from_bytes(u, "big")
    for _ in range(iterations - 1):
        u = f(u)
        if len(u) != h_len:
            raise InvalidPRF(f"{prf_name(prf)} returned {len(u)} bytes, expected {h_len}")
        acc ^= int.from_bytes(u, "big")

    return acc.to_bytes(h_len, "big")
