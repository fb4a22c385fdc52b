# MIT License © 2025 Motohiro Suzuki
"""
kdf_core/pbkdf2.py

PBKDF2 driver (RFC 8018 5.2).

- l = ceil(dkLen / hLen) blocks, r = dkLen - (l - 1) * hLen bytes from the last one
- DK = T_1 || ... || T_{l-1} || T_l[:r]
- blocks are independent; with workers > 1 (or an executor) they run as one batch
  on a pool and are joined in index order

The core has no defaults: c, dkLen and the PRF are always explicit.
See kdf_core/policy.py for caller-side defaults.
"""

from __future__ import annotations

import logging
from concurrent.futures import Executor, ThreadPoolExecutor
from dataclasses import dataclass, field
from functools import partial
from typing import Any, List, Optional

from kdf_core.block import derive_block
from kdf_core.prf import PRF, prf_name
from kdf_core.validator import check_params

log = logging.getLogger(__name__)


def _as_bytes(label: str, v: Any) -> bytes:
    # opaque bytes only; text encoding belongs to the caller
    if isinstance(v, (bytes, bytearray, memoryview)):
        return bytes(v)
    raise TypeError(f"{label} must be bytes-like, got {type(v).__name__}")


def block_count(key_length: int, digest_size: int) -> int:
    return (key_length + digest_size - 1) // digest_size


def tail_length(key_length: int, digest_size: int) -> int:
    return key_length - (block_count(key_length, digest_size) - 1) * digest_size


def derive(
    password: Any,
    salt: Any,
    iterations: int,
    key_length: int,
    prf: Any,
    *,
    workers: int = 1,
    executor: Optional[Executor] = None,
) -> bytes:
    """
    Derive `key_length` bytes from (password, salt) with `iterations` rounds of `prf`.

    Args:
        password: bytes-like
        salt: bytes-like
        iterations: c >= 1
        key_length: 0 < dkLen <= (2^32 - 1) * hLen
        prf: PRF object or digest name ("sha256", "hmac-sha512", ...)
        workers: >1 computes blocks on a thread pool of that size
        executor: caller-owned pool; takes precedence over `workers`

    Raises:
        InvalidPRF / InvalidIterationCount / InvalidKeyLength / DerivedKeyTooLong
        before any PRF call.
    """
    p, h_len = check_params(iterations, key_length, prf)
    return _run(password, salt, iterations, key_length, p, h_len, workers=workers, executor=executor)


def _run(
    password: Any,
    salt: Any,
    iterations: int,
    key_length: int,
    p: PRF,
    h_len: int,
    *,
    workers: int,
    executor: Optional[Executor],
) -> bytes:
    # parameters already passed check_params; h_len is not re-read from p
    if isinstance(workers, bool) or not isinstance(workers, int) or workers < 1:
        raise ValueError(f"workers must be int >= 1, got {workers!r}")

    pw = _as_bytes("password", password)
    s = _as_bytes("salt", salt)

    n_blocks = block_count(key_length, h_len)
    r = tail_length(key_length, h_len)

    log.debug(
        "pbkdf2 derive prf=%s c=%d dkLen=%d blocks=%d workers=%s",
        prf_name(p), iterations, key_length, n_blocks,
        "executor" if executor is not None else workers,
    )

    blocks = _compute_blocks(pw, s, iterations, n_blocks, p, h_len, workers=workers, executor=executor)

    out = bytearray()
    for t in blocks[:-1]:
        out.extend(t)
    out.extend(blocks[-1][:r])
    return bytes(out)


def _compute_blocks(
    password: bytes,
    salt: bytes,
    iterations: int,
    n_blocks: int,
    prf: PRF,
    h_len: int,
    *,
    workers: int,
    executor: Optional[Executor],
) -> List[bytes]:
    task = partial(derive_block, password, salt, iterations, prf=prf, h_len=h_len)
    indices = range(1, n_blocks + 1)

    if executor is not None:
        return list(executor.map(task, indices))

    if workers > 1 and n_blocks > 1:
        with ThreadPoolExecutor(max_workers=min(workers, n_blocks)) as pool:
            return list(pool.map(task, indices))

    return [task(i) for i in indices]


def pbkdf2_hex(password: Any, salt: Any, iterations: int, key_length: int, prf: Any) -> str:
    return derive(password, salt, iterations, key_length, prf).hex()


@dataclass(frozen=True)
class PBKDF2:
    """
    Validated driver configuration: {iterations, key_length, prf}.
    Construction fails with the same errors as derive().
    """
    iterations: int
    key_length: int
    prf: Any
    workers: int = 1
    h_len: int = field(init=False, repr=False)

    def __post_init__(self) -> None:
        p, h_len = check_params(self.iterations, self.key_length, self.prf)
        object.__setattr__(self, "prf", p)
        object.__setattr__(self, "h_len", h_len)

    @property
    def digest_size(self) -> int:
        return self.h_len

    @property
    def blocks(self) -> int:
        return block_count(self.key_length, self.digest_size)

    def derive(self, password: Any, salt: Any) -> bytes:
        return _run(
            password, salt, self.iterations, self.key_length, self.prf, self.h_len,
            workers=self.workers, executor=None,
        )
