# MIT License © 2025 Motohiro Suzuki
from __future__ import annotations

import random

import pytest

from diagnostics import bench_runner, fuzz_tester
from kdf_core.prf import get_prf


def test_fuzz_credential_only_raises_pbkdf2_errors() -> None:
    stats = fuzz_tester.FuzzStats()
    fuzz_tester.fuzz_credential(stats, random.Random(1), iters=300)
    assert stats.iters == 300
    assert stats.unexpected == 0, stats.samples


def test_fuzz_validator_only_raises_pbkdf2_errors() -> None:
    stats = fuzz_tester.FuzzStats()
    fuzz_tester.fuzz_validator(stats, random.Random(2), iters=300)
    assert stats.unexpected == 0, stats.samples
    assert stats.rejected > 0


def test_bench_derive_counts_prf_calls() -> None:
    r = bench_runner.bench_derive(get_prf("sha1"), iterations=10, length=41, workers=2)
    assert r.ops == 1
    assert r.prf_calls == 10 * 3


def test_bench_main_prints(capsys: pytest.CaptureFixture[str]) -> None:
    bench_runner.main(["--iterations", "5", "--length", "40", "--workers", "2", "--prf-ops", "10"])
    out = capsys.readouterr().out
    assert "[PRF]" in out
    assert "[DERIVE]" in out
    assert "bench failed" not in out
