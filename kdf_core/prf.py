# MIT License © 2025 Motohiro Suzuki
"""
kdf_core/prf.py

PRF adapters for PBKDF2.

A PRF is any callable `prf(key, message) -> bytes` that also exposes
`digest_size` (hLen) and `name`. The derivation code only talks to this
interface, so digests can be swapped without touching F or the driver.

Backends:
- hashlib       : stdlib hmac + hashlib
- cryptography  : cryptography.hazmat HMAC (OpenSSL)
- FunctionPRF   : wrap an injected function value
"""

from __future__ import annotations

import hashlib
import hmac
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Protocol, Tuple, runtime_checkable

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives import hmac as crypto_hmac

from kdf_core.errors import InvalidPRF, UnsupportedDigestError


@runtime_checkable
class PRF(Protocol):
    name: str
    digest_size: int

    def __call__(self, key: bytes, message: bytes) -> bytes: ...


# canonical digest name -> hashlib name
_HASHLIB_DIGESTS: Dict[str, str] = {
    "sha1": "sha1",
    "sha224": "sha224",
    "sha256": "sha256",
    "sha384": "sha384",
    "sha512": "sha512",
    "sha3-256": "sha3_256",
    "sha3-512": "sha3_512",
}

# canonical digest name -> cryptography hash class
_CRYPTO_DIGESTS: Dict[str, Callable[[], hashes.HashAlgorithm]] = {
    "sha1": hashes.SHA1,
    "sha224": hashes.SHA224,
    "sha256": hashes.SHA256,
    "sha384": hashes.SHA384,
    "sha512": hashes.SHA512,
    "sha3-256": hashes.SHA3_256,
    "sha3-512": hashes.SHA3_512,
}


def canonical_digest(name: str) -> str:
    """
    Normalize a digest name:
      "HMAC-SHA256", "hmac_sha256", "SHA-256", "sha256" -> "sha256"
      "sha3_256" -> "sha3-256"
    """
    if not isinstance(name, str) or not name.strip():
        raise UnsupportedDigestError("digest name must be non-empty str")
    n = name.strip().lower().replace("_", "-")
    if n.startswith("hmac-"):
        n = n[len("hmac-"):]
    if n.startswith("sha-"):
        n = "sha" + n[len("sha-"):]
    return n


def available_digests() -> List[str]:
    return sorted(_HASHLIB_DIGESTS)


class HmacPRF:
    """HMAC over a hashlib digest."""

    def __init__(self, digest: str) -> None:
        d = canonical_digest(digest)
        if d not in _HASHLIB_DIGESTS:
            raise UnsupportedDigestError(f"unsupported digest: {digest!r}")

        self.digest = d
        self.name = f"hmac-{d}"
        self._digestmod = _HASHLIB_DIGESTS[d]
        try:
            self.digest_size = hashlib.new(self._digestmod).digest_size
        except ValueError as e:
            # e.g. sha1 disabled by a FIPS build of OpenSSL
            raise UnsupportedDigestError(f"digest not available in hashlib: {d}") from e

    def __call__(self, key: bytes, message: bytes) -> bytes:
        return hmac.new(bytes(key), bytes(message), self._digestmod).digest()

    def keyed(self, key: bytes) -> Callable[[bytes], bytes]:
        # HMAC state after absorbing the key; copied for every message
        base = hmac.new(bytes(key), None, self._digestmod)

        def _prf(message: bytes) -> bytes:
            h = base.copy()
            h.update(message)
            return h.digest()

        return _prf

    def __repr__(self) -> str:
        return f"HmacPRF({self.digest!r})"


class CryptographyHmacPRF:
    """HMAC over a cryptography hash algorithm."""

    def __init__(self, digest: str) -> None:
        d = canonical_digest(digest)
        if d not in _CRYPTO_DIGESTS:
            raise UnsupportedDigestError(f"unsupported digest: {digest!r}")

        self.digest = d
        self.name = f"hmac-{d}"
        self._algorithm = _CRYPTO_DIGESTS[d]()
        self.digest_size = int(self._algorithm.digest_size)

    def __call__(self, key: bytes, message: bytes) -> bytes:
        h = crypto_hmac.HMAC(bytes(key), self._algorithm)
        h.update(bytes(message))
        return h.finalize()

    def keyed(self, key: bytes) -> Callable[[bytes], bytes]:
        base = crypto_hmac.HMAC(bytes(key), self._algorithm)

        def _prf(message: bytes) -> bytes:
            h = base.copy()
            h.update(message)
            return h.finalize()

        return _prf

    def __repr__(self) -> str:
        return f"CryptographyHmacPRF({self.digest!r})"


@dataclass(frozen=True)
class FunctionPRF:
    """
    Wrap a plain function `fn(key, message) -> bytes`.
    `digest_size` must be declared by the caller since a bare function cannot report it.
    """
    fn: Callable[[bytes, bytes], bytes]
    digest_size: int
    name: str = "custom"

    def __call__(self, key: bytes, message: bytes) -> bytes:
        return self.fn(key, message)


_BACKENDS: Dict[str, Callable[[str], Any]] = {
    "hashlib": HmacPRF,
    "cryptography": CryptographyHmacPRF,
}


def get_prf(name: str, backend: str = "hashlib") -> PRF:
    if not isinstance(backend, str):
        raise TypeError(f"backend must be str, got {type(backend).__name__}")
    b = backend.strip().lower()
    factory = _BACKENDS.get(b)
    if factory is None:
        raise InvalidPRF(f"unknown PRF backend: {backend!r} (expected one of {sorted(_BACKENDS)})")
    return factory(name)


def prf_name(prf: Any) -> str:
    return str(getattr(prf, "name", type(prf).__name__))


def resolve_prf_with_size(prf: Any) -> Tuple[PRF, int]:
    """
    Accept a PRF object or a digest name; return (prf, hLen).
    `digest_size` is read exactly once here and never again during a derivation.
    Never invokes the PRF.
    """
    if prf is None:
        raise InvalidPRF("prf is required")
    if isinstance(prf, str):
        prf = get_prf(prf)
    if not callable(prf):
        raise InvalidPRF(f"prf must be callable, got {type(prf).__name__}")

    size = getattr(prf, "digest_size", None)
    if isinstance(size, bool) or not isinstance(size, int):
        raise InvalidPRF(f"prf must expose an integer digest_size, got {size!r}")
    if size <= 0:
        raise InvalidPRF(f"prf digest_size must be positive, got {size}")
    return prf, size


def resolve_prf(prf: Any) -> PRF:
    return resolve_prf_with_size(prf)[0]
