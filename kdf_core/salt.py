# MIT License © 2025 Motohiro Suzuki
from __future__ import annotations

import secrets


def new_salt(n: int = 16) -> bytes:
    if not isinstance(n, int) or n <= 0:
        raise ValueError("salt length must be positive int")
    return secrets.token_bytes(n)
