# MIT License © 2025 Motohiro Suzuki
"""
kdf_core/credential.py

Stored-credential codec on top of the PBKDF2 core.

Format (modular crypt style):
    $pbkdf2-<digest>$<iterations>$<salt_b64>$<hash_b64>

- base64 is the standard alphabet with '=' padding stripped
- the derived key length is len(hash)
- comparison uses hmac.compare_digest
"""

from __future__ import annotations

import base64
import binascii
import hmac
import logging
from dataclasses import dataclass
from typing import Any, Optional

from kdf_core.errors import CredentialFormatError
from kdf_core.pbkdf2 import derive
from kdf_core.policy import MAX_ITERATIONS, KDFPolicy
from kdf_core.prf import canonical_digest, get_prf
from kdf_core.salt import new_salt

log = logging.getLogger(__name__)

_PREFIX = "pbkdf2-"


def _b64e(raw: bytes) -> str:
    return base64.b64encode(raw).decode("ascii").rstrip("=")


def _b64d(label: str, text: str) -> bytes:
    pad = "=" * (-len(text) % 4)
    try:
        return base64.b64decode(text + pad, validate=True)
    except (binascii.Error, ValueError) as e:
        raise CredentialFormatError(f"{label} is not valid base64") from e


@dataclass(frozen=True)
class Credential:
    digest: str
    iterations: int
    salt: bytes
    key: bytes

    def __post_init__(self) -> None:
        object.__setattr__(self, "digest", canonical_digest(self.digest))
        # unknown digest -> UnsupportedDigestError
        get_prf(self.digest)
        if not isinstance(self.salt, (bytes, bytearray)):
            raise TypeError("salt must be bytes")
        if not isinstance(self.key, (bytes, bytearray)) or len(self.key) == 0:
            raise CredentialFormatError("key must be non-empty bytes")
        if isinstance(self.iterations, bool) or not isinstance(self.iterations, int) or self.iterations < 1:
            raise CredentialFormatError(f"iterations must be int >= 1, got {self.iterations!r}")
        object.__setattr__(self, "salt", bytes(self.salt))
        object.__setattr__(self, "key", bytes(self.key))


def _password_bytes(password: Any) -> bytes:
    if isinstance(password, str):
        return password.encode("utf-8")
    if isinstance(password, (bytes, bytearray, memoryview)):
        return bytes(password)
    raise TypeError(f"password must be str or bytes-like, got {type(password).__name__}")


def encode_credential(cred: Credential) -> str:
    return f"${_PREFIX}{cred.digest}${cred.iterations}${_b64e(cred.salt)}${_b64e(cred.key)}"


def decode_credential(text: str, *, max_iterations: int = MAX_ITERATIONS) -> Credential:
    """
    Parse a stored credential. Iteration counts above `max_iterations`
    are rejected so a tampered store cannot demand unbounded work.
    """
    if not isinstance(text, str):
        raise CredentialFormatError(f"credential must be str, got {type(text).__name__}")

    parts = text.split("$")
    # leading '$' gives an empty first field
    if len(parts) != 5 or parts[0] != "":
        raise CredentialFormatError("credential must look like $pbkdf2-<digest>$<iterations>$<salt>$<hash>")

    _, ident, iters_s, salt_s, key_s = parts
    if not ident.startswith(_PREFIX) or len(ident) == len(_PREFIX):
        raise CredentialFormatError(f"unknown credential scheme: {ident!r}")
    if not (iters_s.isascii() and iters_s.isdigit()):
        raise CredentialFormatError(f"iterations must be decimal digits, got {iters_s!r}")

    iterations = int(iters_s)
    if iterations > max_iterations:
        raise CredentialFormatError(f"iterations {iterations} exceeds limit {max_iterations}")

    return Credential(
        digest=ident[len(_PREFIX):],
        iterations=iterations,
        salt=_b64d("salt", salt_s),
        key=_b64d("hash", key_s),
    )


def hash_password(password: Any, *, policy: Optional[KDFPolicy] = None, salt: Optional[bytes] = None) -> str:
    """`password` may be str (encoded as UTF-8) or bytes."""
    pol = policy or KDFPolicy.from_env()
    driver = pol.to_driver()
    s = new_salt(pol.salt_length) if salt is None else bytes(salt)

    key = driver.derive(_password_bytes(password), s)
    log.debug("hashed credential prf=%s c=%d dkLen=%d", pol.prf_name, pol.iterations, pol.key_length)
    return encode_credential(Credential(digest=pol.prf_name, iterations=pol.iterations, salt=s, key=key))


def verify_password(password: Any, stored: str, *, policy: Optional[KDFPolicy] = None) -> bool:
    """
    Recompute with the stored parameters and compare in constant time.
    Malformed `stored` raises CredentialFormatError rather than returning False.
    """
    limit = policy.max_iterations if policy is not None else MAX_ITERATIONS
    cred = decode_credential(stored, max_iterations=limit)
    got = derive(_password_bytes(password), cred.salt, cred.iterations, len(cred.key), get_prf(cred.digest))
    return hmac.compare_digest(got, cred.key)


def needs_rehash(stored: str, policy: KDFPolicy) -> bool:
    cred = decode_credential(stored, max_iterations=policy.max_iterations)
    return (
        cred.digest != policy.prf_name
        or cred.iterations != policy.iterations
        or len(cred.key) < policy.key_length
    )
