# MIT License © 2025 Motohiro Suzuki
"""
diagnostics/fuzz_tester.py

Lightweight fuzz (ALWAYS prints results)

Goals:
- decode_credential() on random / mutated text only ever raises PBKDF2Error
- validate_params() on random parameter tuples either accepts or raises PBKDF2Error
- Print summary so tee output is never empty

Run:
  python3 -m diagnostics.fuzz_tester
  python3 -m diagnostics.fuzz_tester 2>&1 | tee fuzz_pbkdf2.txt
"""

from __future__ import annotations

import random
import string
import traceback
from dataclasses import dataclass, field
from typing import Any, List

from kdf_core.credential import Credential, decode_credential, encode_credential
from kdf_core.errors import PBKDF2Error
from kdf_core.prf import FunctionPRF
from kdf_core.validator import validate_params

_ALPHABET = string.ascii_letters + string.digits + "$+/=-_ \x00é²"


@dataclass
class FuzzStats:
    iters: int = 0
    accepted: int = 0
    rejected: int = 0
    unexpected: int = 0
    samples: List[str] = field(default_factory=list)


def _rand_text(rng: random.Random, n: int) -> str:
    return "".join(rng.choice(_ALPHABET) for _ in range(n))


def _mutate(rng: random.Random, text: str) -> str:
    chars = list(text)
    for _ in range(rng.randint(1, 4)):
        op = rng.randrange(3)
        pos = rng.randrange(len(chars) + 1)
        if op == 0 and chars:
            del chars[min(pos, len(chars) - 1)]
        elif op == 1:
            chars.insert(pos, rng.choice(_ALPHABET))
        elif chars:
            chars[min(pos, len(chars) - 1)] = rng.choice(_ALPHABET)
    return "".join(chars)


def _record_unexpected(stats: FuzzStats, what: Any, e: Exception) -> None:
    stats.unexpected += 1
    if len(stats.samples) < 5:
        stats.samples.append(f"{what!r}: {e!r}")


def fuzz_credential(stats: FuzzStats, rng: random.Random, iters: int = 2000) -> None:
    seed = encode_credential(Credential(digest="sha256", iterations=1000, salt=b"\x01" * 16, key=b"\x02" * 32))
    for k in range(iters):
        stats.iters += 1
        text = _mutate(rng, seed) if k % 2 == 0 else _rand_text(rng, rng.randint(0, 96))
        try:
            decode_credential(text)
            stats.accepted += 1
        except PBKDF2Error:
            stats.rejected += 1
        except Exception as e:
            _record_unexpected(stats, text, e)


def fuzz_validator(stats: FuzzStats, rng: random.Random, iters: int = 2000) -> None:
    pool: List[Any] = [None, "sha256", "sha1", "md5", "", FunctionPRF(lambda k, m: b"", digest_size=0), 42]
    for _ in range(iters):
        stats.iters += 1
        c = rng.choice([rng.randint(-5, 5), rng.randint(0, 1 << 40), True, 1.5, "3", None])
        dk = rng.choice([rng.randint(-5, 64), rng.randint(0, 1 << 40), 0, False, 2.0])
        prf = rng.choice(pool)
        try:
            validate_params(c, dk, prf)
            stats.accepted += 1
        except PBKDF2Error:
            stats.rejected += 1
        except Exception as e:
            _record_unexpected(stats, (c, dk, prf), e)


def _report(label: str, stats: FuzzStats) -> None:
    print(f"[{label}] fuzz done")
    print(f"  iters={stats.iters}")
    print(f"  accepted={stats.accepted}")
    print(f"  rejected(PBKDF2Error)={stats.rejected}")
    print(f"  unexpected={stats.unexpected}")
    for s in stats.samples:
        print(f"    {s}")


def main() -> None:
    rng = random.Random(8018)

    print("=== PBKDF2 Fuzz Tester ===")
    print("")

    for label, fn in (("CREDENTIAL", fuzz_credential), ("VALIDATOR", fuzz_validator)):
        stats = FuzzStats()
        try:
            fn(stats, rng)
            _report(label, stats)
        except Exception as e:
            print(f"[{label}] fuzz failed: {e!r}")
            print(traceback.format_exc())
        print("")

    print("=== DONE ===")


if __name__ == "__main__":
    main()
