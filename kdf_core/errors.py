# MIT License © 2025 Motohiro Suzuki
"""
kdf_core/errors.py

PBKDF2 failure kinds.

All of them are terminal: the same inputs fail the same way on every retry.
"""

from __future__ import annotations


class PBKDF2Error(ValueError):
    pass


class InvalidIterationCount(PBKDF2Error):
    pass


class InvalidKeyLength(PBKDF2Error):
    pass


class DerivedKeyTooLong(PBKDF2Error):
    pass


class InvalidPRF(PBKDF2Error):
    pass


class UnsupportedDigestError(InvalidPRF):
    pass


class CredentialFormatError(PBKDF2Error):
    pass
