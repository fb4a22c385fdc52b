# MIT License © 2025 Motohiro Suzuki
from __future__ import annotations

import base64

import pytest

import run_pbkdf2
from kdf_core.pbkdf2 import derive


@pytest.fixture(autouse=True)
def _fast_policy(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PBKDF2_ITERATIONS", "1000")
    monkeypatch.delenv("PBKDF2_PRF", raising=False)
    monkeypatch.delenv("PBKDF2_KEY_LENGTH", raising=False)
    monkeypatch.delenv("PBKDF2_MAX_ITERATIONS", raising=False)


def _derive_args(*extra: str) -> list[str]:
    return [
        "derive", "--password", "password", "--salt", "73616c74",
        "--iterations", "2", "--length", "20", "--prf", "sha1", *extra,
    ]


def test_derive_hex(capsys: pytest.CaptureFixture[str]) -> None:
    assert run_pbkdf2.main(_derive_args()) == 0
    assert capsys.readouterr().out.strip() == "ea6c014dc72d6f8ccd1ed92ace1d41f0d8de8957"


def test_derive_base64_cryptography_backend(capsys: pytest.CaptureFixture[str]) -> None:
    assert run_pbkdf2.main(_derive_args("--encoding", "base64", "--backend", "cryptography")) == 0
    out = capsys.readouterr().out.strip()
    assert base64.b64decode(out).hex() == "ea6c014dc72d6f8ccd1ed92ace1d41f0d8de8957"


def test_derive_rejects_zero_iterations(capsys: pytest.CaptureFixture[str]) -> None:
    args = _derive_args()
    args[args.index("--iterations") + 1] = "0"
    assert run_pbkdf2.main(args) == 2
    assert "iterations" in capsys.readouterr().err


def test_derive_rejects_bad_salt(capsys: pytest.CaptureFixture[str]) -> None:
    args = _derive_args()
    args[args.index("--salt") + 1] = "zz"
    assert run_pbkdf2.main(args) == 2
    assert "--salt" in capsys.readouterr().err


def test_hash_then_verify(capsys: pytest.CaptureFixture[str]) -> None:
    assert run_pbkdf2.main(["hash", "--password", "hunter2"]) == 0
    stored = capsys.readouterr().out.strip()
    assert stored.startswith("$pbkdf2-sha256$1000$")

    assert run_pbkdf2.main(["verify", stored, "--password", "hunter2"]) == 0
    assert capsys.readouterr().out.strip() == "OK"

    assert run_pbkdf2.main(["verify", stored, "--password", "wrong"]) == 1
    assert capsys.readouterr().out.strip() == "MISMATCH"


def test_verify_malformed(capsys: pytest.CaptureFixture[str]) -> None:
    assert run_pbkdf2.main(["verify", "$nope", "--password", "x"]) == 2
    assert capsys.readouterr().err.startswith("Error:")


def test_password_prompt(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    monkeypatch.setattr(run_pbkdf2, "getpass", lambda prompt="": "password")
    args = ["derive", "--salt", "73616c74", "--iterations", "2", "--length", "20", "--prf", "sha1"]
    assert run_pbkdf2.main(args) == 0
    assert capsys.readouterr().out.strip() == "ea6c014dc72d6f8ccd1ed92ace1d41f0d8de8957"


def test_derive_encodes_password_as_utf8(capsys: pytest.CaptureFixture[str]) -> None:
    args = _derive_args()
    args[args.index("--password") + 1] = "pässwörd"
    assert run_pbkdf2.main(args) == 0
    want = derive("pässwörd".encode("utf-8"), b"salt", 2, 20, "sha1").hex()
    assert capsys.readouterr().out.strip() == want


def test_verify_honours_max_iterations_env(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    assert run_pbkdf2.main(["hash", "--password", "hunter2"]) == 0
    stored = capsys.readouterr().out.strip()

    monkeypatch.setenv("PBKDF2_ITERATIONS", "100")
    monkeypatch.setenv("PBKDF2_MAX_ITERATIONS", "500")
    assert run_pbkdf2.main(["verify", stored, "--password", "hunter2"]) == 2
    assert "exceeds limit" in capsys.readouterr().err
