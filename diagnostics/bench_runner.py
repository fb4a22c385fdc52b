# MIT License © 2025 Motohiro Suzuki
"""
diagnostics/bench_runner.py

PBKDF2 benchmark runner (ALWAYS prints results)

What it measures:
- raw PRF throughput per backend (hashlib / cryptography), calls/sec
- derive() wall time, sequential vs block worker pool

Run:
  python3 -m diagnostics.bench_runner
  python3 -m diagnostics.bench_runner --iterations 100000 --length 128 --workers 4
"""

from __future__ import annotations

import argparse
import os
import time
from dataclasses import dataclass
from typing import Callable, List

from kdf_core.pbkdf2 import block_count, derive
from kdf_core.prf import PRF, get_prf


@dataclass(frozen=True)
class BenchResult:
    name: str
    ops: int
    seconds: float
    prf_calls: int

    @property
    def ops_per_sec(self) -> float:
        return self.ops / self.seconds if self.seconds > 0 else 0.0

    @property
    def prf_calls_per_sec(self) -> float:
        return self.prf_calls / self.seconds if self.seconds > 0 else 0.0


def _now() -> float:
    return time.perf_counter()


def _bench_loop(name: str, ops: int, prf_calls_per_op: int, fn: Callable[[], None]) -> BenchResult:
    t0 = _now()
    for _ in range(ops):
        fn()
    t1 = _now()
    return BenchResult(name=name, ops=ops, seconds=(t1 - t0), prf_calls=ops * prf_calls_per_op)


def bench_prf(prf: PRF, ops: int = 50_000) -> BenchResult:
    key = os.urandom(16)
    msg = os.urandom(prf.digest_size)

    def _call() -> None:
        _ = prf(key, msg)

    return _bench_loop(f"{type(prf).__name__}({prf.name})", ops=ops, prf_calls_per_op=1, fn=_call)


def bench_derive(prf: PRF, *, iterations: int, length: int, workers: int, ops: int = 1) -> BenchResult:
    password = b"bench-password"
    salt = os.urandom(16)
    calls = iterations * block_count(length, prf.digest_size)

    def _derive() -> None:
        _ = derive(password, salt, iterations, length, prf, workers=workers)

    label = f"derive {prf.name} c={iterations} dkLen={length} workers={workers}"
    return _bench_loop(label, ops=ops, prf_calls_per_op=calls, fn=_derive)


def _print(r: BenchResult) -> None:
    print(
        f"  {r.name}: ops={r.ops} time={r.seconds:.4f}s "
        f"ops/s={r.ops_per_sec:,.2f} prf/s={r.prf_calls_per_sec:,.0f}"
    )


def main(argv: List[str] | None = None) -> None:
    ap = argparse.ArgumentParser()
    ap.add_argument("--prf", default="sha256")
    ap.add_argument("--iterations", type=int, default=20_000)
    ap.add_argument("--length", type=int, default=128, help="derived key bytes (several blocks)")
    ap.add_argument("--workers", type=int, default=4)
    ap.add_argument("--prf-ops", type=int, default=50_000)
    args = ap.parse_args(argv)

    if args.iterations <= 0:
        raise SystemExit("--iterations must be > 0")
    if args.length <= 0:
        raise SystemExit("--length must be > 0")
    if args.workers <= 0:
        raise SystemExit("--workers must be > 0")

    print("=== PBKDF2 Bench Runner ===")
    print("")

    print("[PRF]")
    for backend in ("hashlib", "cryptography"):
        try:
            _print(bench_prf(get_prf(args.prf, backend=backend), ops=args.prf_ops))
        except Exception as e:
            print(f"  {backend}: bench failed: {e!r}")

    print("")

    print("[DERIVE]")
    for backend in ("hashlib", "cryptography"):
        try:
            prf = get_prf(args.prf, backend=backend)
            _print(bench_derive(prf, iterations=args.iterations, length=args.length, workers=1))
            _print(bench_derive(prf, iterations=args.iterations, length=args.length, workers=args.workers))
        except Exception as e:
            print(f"  {backend}: bench failed: {e!r}")

    print("")
    print("=== DONE ===")


if __name__ == "__main__":
    main()
