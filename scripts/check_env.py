"""Verify the environment a catalog deployment needs before it starts.

Three checks are available:

* ``check`` loads the env file, lists any required variable that is missing
  and makes sure ``AppSettings`` and the Google service-account key load.
* ``record`` runs the same check and stores a SHA256 baseline of the file.
* ``verify`` runs the check and compares the file against that baseline.

Example usages::

    python -m scripts.check_env check --env-file /srv/game-catalog/.env

    python -m scripts.check_env record --env-file /srv/game-catalog/.env \
        --hash-file /srv/game-catalog/.env.sha256

    python -m scripts.check_env verify --env-file /srv/game-catalog/.env \
        --hash-file /srv/game-catalog/.env.sha256
"""

from __future__ import annotations

import argparse
import hashlib
import sys
from pathlib import Path
from typing import Any, Callable

from pydantic import ValidationError
from pydantic_settings import BaseSettings

from game_catalog.clients.google_sheets import load_service_account_credentials
from game_catalog.core.config import AppSettings, CacheSettings, IGDBSettings, SheetsSettings
from game_catalog.core.errors import AuthError

EXIT_OK = 0
EXIT_VALIDATION_ERROR = 2
EXIT_CHECKSUM_ERROR = 3
EXIT_RUNTIME_ERROR = 5

REQUIRED_VARIABLES: tuple[str, ...] = (
    "SPREADSHEET_ID",
    "GOOGLE_CREDENTIALS_JSON",
    "TWITCH_CLIENT_ID",
    "TWITCH_CLIENT_SECRET",
)

_SETTINGS_GROUPS: tuple[tuple[str, type[BaseSettings]], ...] = (
    ("sheets", SheetsSettings),
    ("igdb", IGDBSettings),
    ("cache", CacheSettings),
)
_MISSING_TYPES = {"missing", "string_too_short"}


class SettingsCheckError(Exception):
    """Collects the validation errors of every settings group."""

    def __init__(self, errors: list[dict[str, Any]]) -> None:
        super().__init__(f"{len(errors)} settings error(s)")
        self.errors = errors


def _compute_hash(env_file: Path) -> str:
    return hashlib.sha256(env_file.read_bytes()).hexdigest()


def missing_variables(errors: list[dict[str, Any]]) -> list[str]:
    """Return required variables that are unset or blank, in declaration order."""
    reported = {
        str(error["loc"][0])
        for error in errors
        if error["loc"] and error["type"] in _MISSING_TYPES
    }
    return [name for name in REQUIRED_VARIABLES if name in reported]


def _validate_settings(env_file: Path) -> AppSettings:
    groups: dict[str, BaseSettings] = {}
    errors: list[dict[str, Any]] = []
    for name, model in _SETTINGS_GROUPS:
        try:
            groups[name] = model(_env_file=env_file)  # type: ignore[call-arg]
        except ValidationError as exc:
            errors.extend(exc.errors())
    if errors:
        raise SettingsCheckError(errors)
    return AppSettings(_env_file=env_file, **groups)  # type: ignore[arg-type]


def _report_missing(missing: list[str]) -> int:
    print(
        "Required environment variables are missing: " + ", ".join(missing),
        file=sys.stderr,
    )
    return EXIT_VALIDATION_ERROR


def _record_checksum(env_file: Path, hash_file: Path) -> int:
    checksum = _compute_hash(env_file)
    hash_file.write_text(f"{checksum}\n", encoding="utf-8")
    print(f"Recorded checksum to {hash_file} ({checksum})")
    return EXIT_OK


def _verify_checksum(env_file: Path, hash_file: Path) -> int:
    if not hash_file.exists():
        print(
            f"No checksum baseline at {hash_file}; run 'record' first.",
            file=sys.stderr,
        )
        return EXIT_RUNTIME_ERROR

    expected = hash_file.read_text(encoding="utf-8").strip()
    actual = _compute_hash(env_file)
    if expected == actual:
        print("Environment checksum OK.")
        return EXIT_OK

    print(
        f"Environment checksum mismatch (expected {expected}, got {actual}).",
        file=sys.stderr,
    )
    return EXIT_CHECKSUM_ERROR


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Validate catalog settings and detect .env drift."
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    for name, help_text in (
        ("check", "Validate settings only."),
        ("record", "Validate settings and store the checksum baseline."),
        ("verify", "Validate settings and compare against the baseline."),
    ):
        subparser = subparsers.add_parser(name, help=help_text)
        subparser.add_argument("--env-file", default=".env", type=Path)
        if name != "check":
            subparser.add_argument("--hash-file", required=True, type=Path)

    return parser


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    env_file: Path = args.env_file

    if not env_file.exists():
        print(f"Environment file {env_file} does not exist.", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    try:
        settings = _validate_settings(env_file)
    except SettingsCheckError as exc:
        missing = missing_variables(exc.errors)
        if missing:
            return _report_missing(missing)
        lines = [
            f"  {'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
            for error in exc.errors
        ]
        print("Settings validation failed:\n" + "\n".join(lines), file=sys.stderr)
        return EXIT_VALIDATION_ERROR
    except ValidationError as exc:
        print(f"Settings validation failed:\n{exc}", file=sys.stderr)
        return EXIT_VALIDATION_ERROR

    try:
        load_service_account_credentials(settings.sheets.credentials_json)
    except AuthError as exc:
        print(str(exc), file=sys.stderr)
        return EXIT_VALIDATION_ERROR

    handlers: dict[str, Callable[[], int]] = {
        "check": lambda: EXIT_OK,
        "record": lambda: _record_checksum(env_file, args.hash_file),
        "verify": lambda: _verify_checksum(env_file, args.hash_file),
    }
    return handlers[args.command]()


if __name__ == "__main__":  # pragma: no cover - script entry point
    sys.exit(main())
