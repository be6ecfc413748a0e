"""
Command line interface: check a ``.env`` file and the environment against a YAML record schema.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import List

from .decoder import DecodeOptions, FieldOutcome, FieldState, decode_fields
from .env import load_env_file
from .errors import ErrorCollection
from .schema import SchemaError, load_schema
from .store import default_store

ENV_FILE_VARIABLE = "DOTCONFIG_ENV_FILE"
MASK = "********"


def _parse_args(argv: List[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="dotconfig", description="Decode a .env file into a typed configuration record"
    )
    parser.add_argument("--schema", required=True, help="Path to the YAML record schema")
    parser.add_argument(
        "--env-file",
        default=os.getenv(ENV_FILE_VARIABLE, ".env"),
        help=f"Env file to load before decoding (default: ${ENV_FILE_VARIABLE} or .env)",
    )
    parser.add_argument(
        "--enforce-declared-keys",
        action="store_true",
        help="Report fields that have no env key declared",
    )
    parser.add_argument(
        "--preserve-whitespace",
        action="store_true",
        help="Do not trim surrounding whitespace from values",
    )
    parser.add_argument(
        "--propagate-file-errors",
        action="store_true",
        help="Fail when the env file cannot be opened",
    )
    parser.add_argument("--show-values", action="store_true", help="Print decoded values instead of masking them")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def _render(outcome: FieldOutcome, show_values: bool) -> str:
    spec = outcome.spec
    key = spec.key or "-"
    line = f"{spec.name:24} | {key:24} | {outcome.state.value:9}"
    if outcome.assigned:
        line += f" | {outcome.value!r}" if show_values else f" | {MASK}"
    return line


def main(argv: List[str] | None = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    options = DecodeOptions(
        enforce_declared_keys=args.enforce_declared_keys,
        preserve_whitespace=args.preserve_whitespace,
        propagate_file_errors=args.propagate_file_errors,
    )
    try:
        config_type = load_schema(args.schema)
    except SchemaError as exc:
        sys.stderr.write(f"error: {exc}\n")
        return 2

    store = default_store()
    try:
        load_env_file(args.env_file, store, propagate_file_errors=options.propagate_file_errors)
    except OSError as exc:
        sys.stderr.write(f"error: cannot read {args.env_file}: {exc}\n")
        return 2

    outcomes = decode_fields(config_type, store, options)
    errors = ErrorCollection(outcome.error for outcome in outcomes)

    print(f"\n{config_type.__name__}\n" + "-" * len(config_type.__name__))
    for outcome in outcomes:
        print(_render(outcome, args.show_values))

    if errors:
        sys.stderr.write(f"{errors}\n")
        return 1
    resolved = sum(1 for outcome in outcomes if outcome.state is FieldState.RESOLVED)
    print(f"\nOK: {resolved} resolved, {len(outcomes) - resolved} from defaults or skipped")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
