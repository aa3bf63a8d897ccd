# src/bearer_auth/cli.py

from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import datetime, timedelta
from typing import Any, Sequence

from .adapters.clock import FixedClock, SystemClock
from .adapters.passwords import Argon2PasswordEncoder
from .adapters.tokens.jwt_codec import JWTTokenCodec
from .config.env import settings_from_env
from .domain.ports import Clock
from .domain.results import Valid


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="bearer-auth",
        description="Hash passwords, issue and verify bearer tokens",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        help="Logging level (default: WARNING).",
    )
    parser.add_argument(
        "--now",
        type=datetime.fromisoformat,
        help="Evaluate against this ISO-8601 time instead of the system clock.",
    )

    commands = parser.add_subparsers(dest="command", required=True)

    hash_cmd = commands.add_parser("hash-password", help="Print an argon2 hash of a password.")
    hash_cmd.add_argument("password")

    issue_cmd = commands.add_parser(
        "issue",
        help="Issue a token for a subject, using AUTH_* settings from the environment.",
    )
    issue_cmd.add_argument("subject")
    issue_cmd.add_argument(
        "--ttl",
        type=float,
        help="Token lifetime in seconds (default: AUTH_TOKEN_TTL_SECONDS).",
    )

    verify_cmd = commands.add_parser(
        "verify",
        help="Verify a token, using AUTH_* settings from the environment.",
    )
    verify_cmd.add_argument("token")

    return parser.parse_args(args=argv)


def _clock(args: argparse.Namespace) -> Clock:
    return FixedClock(args.now) if args.now is not None else SystemClock()


def _codec_from_env() -> tuple[JWTTokenCodec, timedelta]:
    settings = settings_from_env()
    codec = JWTTokenCodec(
        signing_key=settings.build_signing_key(),
        allowed_clock_skew=settings.allowed_clock_skew,
    )
    return codec, settings.token_ttl


def _run(args: argparse.Namespace) -> dict[str, Any]:
    if args.command == "hash-password":
        return {"hash": Argon2PasswordEncoder().encode(args.password)}

    codec, default_ttl = _codec_from_env()
    now = _clock(args).now()

    if args.command == "issue":
        ttl = timedelta(seconds=args.ttl) if args.ttl is not None else default_ttl
        return {"token": codec.issue(args.subject, now, ttl)}

    result = codec.verify(args.token, now)
    summary: dict[str, Any] = {"status": result.status.value}
    if isinstance(result, Valid):
        summary["subject"] = result.subject
        summary["expires_at"] = result.expires_at.isoformat()
    return summary


def main(argv: Sequence[str] | None = None) -> None:
    args = _parse_args(argv)
    logging.basicConfig(level=str(args.log_level).upper())

    try:
        summary = _run(args)
        json.dump({"ok": True, **summary}, sys.stdout, indent=2)
        sys.stdout.write("\n")
    except Exception as exc:  # noqa: BLE001
        json.dump({"ok": False, "error": str(exc)}, sys.stdout, indent=2)
        sys.stdout.write("\n")
        raise SystemExit(1) from exc


if __name__ == "__main__":
    main()
