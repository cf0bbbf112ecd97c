"""Pre-flight checks for the cursus sync job's environment.

Run this before wiring the job into cron:

1. ``check`` loads the ``.env`` file and instantiates ``AppSettings`` so
   missing credentials or a users URL template without ``{page}`` are caught
   up front.
2. ``record`` / ``verify`` store and compare a SHA256 checksum of the file so
   drift between scheduled runs is noticed.
3. ``probe-token`` additionally requests a token from the 42 OAuth endpoint
   to prove the client credentials are accepted.

Example usages::

    python -m scripts.check_env record --env-file /opt/cursus-sync/.env \
        --hash-file /opt/cursus-sync/.env.sha256

    # From cron, ahead of the sync itself.
    python -m scripts.check_env verify --env-file /opt/cursus-sync/.env \
        --hash-file /opt/cursus-sync/.env.sha256
"""

from __future__ import annotations

import argparse
import asyncio
import hashlib
import sys
from pathlib import Path
from typing import Callable

from pydantic import ValidationError

from cursus_sync.clients.ft_auth import AuthError
from cursus_sync.core.config import AppSettings, _load_env_file
from cursus_sync.dependencies import build_http_client, get_token_provider

EXIT_OK = 0
EXIT_VALIDATION_ERROR = 2
EXIT_CHECKSUM_ERROR = 3
EXIT_AUTH_ERROR = 4
EXIT_RUNTIME_ERROR = 5


def _checksum(env_file: Path) -> str:
    return hashlib.sha256(env_file.read_bytes()).hexdigest()


def _load_settings(env_file: Path) -> AppSettings:
    """Export ``env_file`` into the environment and build the settings from it."""
    if not env_file.exists():
        raise FileNotFoundError(f"Environment file {env_file} does not exist.")
    _load_env_file(str(env_file))
    return AppSettings()  # type: ignore[call-arg]


def _record(env_file: Path, hash_file: Path) -> int:
    checksum = _checksum(env_file)
    hash_file.write_text(f"{checksum}\n", encoding="utf-8")
    print(f"Recorded checksum to {hash_file} ({checksum})")
    return EXIT_OK


def _verify(env_file: Path, hash_file: Path) -> int:
    if not hash_file.exists():
        print(
            f"No baseline at {hash_file}; run the 'record' command first.",
            file=sys.stderr,
        )
        return EXIT_RUNTIME_ERROR

    expected = hash_file.read_text(encoding="utf-8").strip()
    actual = _checksum(env_file)
    if expected != actual:
        print(
            "Environment checksum mismatch!\n"
            f"  expected: {expected}\n"
            f"  actual:   {actual}",
            file=sys.stderr,
        )
        return EXIT_CHECKSUM_ERROR
    print("Environment checksum OK.")
    return EXIT_OK


async def _request_token(settings: AppSettings) -> None:
    async with build_http_client(settings) as http_client:
        await get_token_provider(http_client, settings).get()


def _probe_token(settings: AppSettings) -> int:
    try:
        asyncio.run(_request_token(settings))
    except AuthError as exc:
        print(f"Token request failed: {exc}", file=sys.stderr)
        return EXIT_AUTH_ERROR
    print("Token request OK.")
    return EXIT_OK


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Validate cursus sync settings and detect .env drift."
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    for name, help_text, needs_hash in (
        ("check", "Validate settings only.", False),
        ("record", "Validate settings and store the checksum baseline.", True),
        ("verify", "Validate settings and compare with the checksum baseline.", True),
        ("probe-token", "Validate settings and request a token from 42.", False),
    ):
        subparser = subparsers.add_parser(name, help=help_text)
        subparser.add_argument(
            "--env-file",
            default=".env",
            type=Path,
            help="Path to the environment file (default: .env).",
        )
        if needs_hash:
            subparser.add_argument("--hash-file", required=True, type=Path)

    return parser


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    env_file: Path = args.env_file

    try:
        settings = _load_settings(env_file)
    except FileNotFoundError as exc:
        print(str(exc), file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except ValidationError as exc:
        print(
            "Settings validation failed. Missing or invalid values detected:\n"
            f"{exc.json(indent=2)}",
            file=sys.stderr,
        )
        return EXIT_VALIDATION_ERROR

    handlers: dict[str, Callable[[], int]] = {
        "check": lambda: EXIT_OK,
        "record": lambda: _record(env_file, args.hash_file),
        "verify": lambda: _verify(env_file, args.hash_file),
        "probe-token": lambda: _probe_token(settings),
    }
    return handlers[args.command]()


if __name__ == "__main__":  # pragma: no cover - script entry point
    sys.exit(main())
