# MIT License © 2025 Motohiro Suzuki
"""
PBKDF2 command line runner

Usage:
  python3 run_pbkdf2.py derive --salt 73616c74 --iterations 4096 --length 20 --prf sha1
  python3 run_pbkdf2.py hash
  python3 run_pbkdf2.py verify '$pbkdf2-sha256$600000$...$...'

Password is read with getpass unless --password is given.
Exit codes: 0 ok, 1 verify mismatch, 2 invalid input.
"""

from __future__ import annotations

import argparse
import base64
import logging
import sys
from getpass import getpass
from typing import List, Optional

from diagnostics.logging_config import setup_logging
from kdf_core.credential import hash_password, verify_password
from kdf_core.errors import PBKDF2Error
from kdf_core.pbkdf2 import derive
from kdf_core.policy import KDFPolicy
from kdf_core.prf import available_digests, get_prf

log = logging.getLogger("run_pbkdf2")


def _read_password(args: argparse.Namespace, *, confirm: bool = False) -> str:
    """Password text as typed; encoding to bytes happens at the call site."""
    if args.password is not None:
        return args.password
    pw = getpass("Password: ")
    if confirm and getpass("Confirm password: ") != pw:
        raise ValueError("passwords do not match")
    return pw


def encode_output(dk: bytes, encoding: str) -> str:
    if encoding == "hex":
        return dk.hex()
    if encoding == "base64":
        return base64.b64encode(dk).decode("ascii")
    raise ValueError(f"unknown encoding: {encoding}")


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="pbkdf2",
        description="PBKDF2 (RFC 8018) key derivation with pluggable HMAC PRFs.",
    )
    ap.add_argument("--log-level", default=None, help="DEBUG/INFO/WARNING (default: PBKDF2_LOG_LEVEL or INFO)")
    sub = ap.add_subparsers(dest="cmd", required=True)

    d = sub.add_parser("derive", help="Derive raw key bytes")
    d.add_argument("--password", default=None)
    d.add_argument("--salt", required=True, help="salt as hex")
    d.add_argument("--iterations", type=int, required=True)
    d.add_argument("--length", type=int, required=True, help="derived key length in bytes")
    d.add_argument("--prf", required=True, help=f"one of {available_digests()}")
    d.add_argument("--backend", default="hashlib", choices=["hashlib", "cryptography"])
    d.add_argument("--workers", type=int, default=1)
    d.add_argument("--encoding", default="hex", choices=["hex", "base64", "raw"])

    h = sub.add_parser("hash", help="Produce a stored credential ($pbkdf2-...)")
    h.add_argument("--password", default=None)
    h.add_argument("--prf", default=None, help="override PBKDF2_PRF")
    h.add_argument("--iterations", type=int, default=None, help="override PBKDF2_ITERATIONS")
    h.add_argument("--length", type=int, default=None, help="override PBKDF2_KEY_LENGTH")

    v = sub.add_parser("verify", help="Check a password against a stored credential")
    v.add_argument("stored")
    v.add_argument("--password", default=None)
    return ap


def _policy_from_args(args: argparse.Namespace) -> KDFPolicy:
    base = KDFPolicy.from_env()
    return KDFPolicy(
        prf_name=args.prf or base.prf_name,
        iterations=args.iterations if args.iterations is not None else base.iterations,
        key_length=args.length if args.length is not None else base.key_length,
        salt_length=base.salt_length,
        workers=base.workers,
    )


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)

    try:
        if args.cmd == "derive":
            try:
                salt = bytes.fromhex(args.salt)
            except ValueError as e:
                raise ValueError("--salt must be hex") from e
            prf = get_prf(args.prf, backend=args.backend)
            dk = derive(_read_password(args).encode("utf-8"), salt, args.iterations, args.length, prf, workers=args.workers)
            if args.encoding == "raw":
                sys.stdout.buffer.write(dk)
                sys.stdout.buffer.flush()
            else:
                print(encode_output(dk, args.encoding))
            return 0

        if args.cmd == "hash":
            policy = _policy_from_args(args)
            print(hash_password(_read_password(args, confirm=True), policy=policy))
            return 0

        ok = verify_password(_read_password(args), args.stored, policy=KDFPolicy.from_env())
        print("OK" if ok else "MISMATCH")
        return 0 if ok else 1

    except (PBKDF2Error, ValueError) as e:
        log.debug("rejected: %r", e)
        print(f"Error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
