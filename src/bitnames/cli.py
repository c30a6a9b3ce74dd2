"""BitNames CLI — inspect and validate resolved web records.

Usage:
    python -m bitnames.cli commitment --record record.json
    python -m bitnames.cli canonicalize --record record.json
    python -m bitnames.cli validate --record record.json --descriptor info.json
    python -m bitnames.cli validate --record record.json --commitment <hex>
    python -m bitnames.cli resolve --descriptor info.json
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from bitnames.config import Settings, load_settings
from bitnames.errors import BitnamesError
from bitnames.models.descriptor import RecordDescriptor, decode_commitment
from bitnames.models.record import WebRecord


logger = logging.getLogger(__name__)


def _load_record(path: Path) -> WebRecord:
    return WebRecord.from_json(path.read_bytes())


def _load_descriptor(path: Path) -> RecordDescriptor:
    return RecordDescriptor.from_json(path.read_bytes())


def cmd_commitment(args: argparse.Namespace, settings: Settings) -> int:
    record = _load_record(args.record)
    print(record.commitment_hex())
    return 0


def cmd_canonicalize(args: argparse.Namespace, settings: Settings) -> int:
    record = _load_record(args.record)
    sys.stdout.buffer.write(record.canonical_bytes())
    sys.stdout.flush()
    return 0


def cmd_validate(args: argparse.Namespace, settings: Settings) -> int:
    """Validate a record, pinning it to the first commitment available.

    Precedence: --commitment, then the descriptor, then the environment.
    """
    record = _load_record(args.record)
    descriptor = _load_descriptor(args.descriptor) if args.descriptor else None

    if args.commitment:
        expected = decode_commitment(args.commitment)
    elif descriptor is not None and descriptor.commitment is not None:
        expected = descriptor.commitment
    else:
        expected = settings.expected_commitment

    if expected is None:
        logger.info("no expected commitment; checking version only")
    record.validate(expected)

    address = descriptor.resolved_address() if descriptor is not None else None
    fee = record.introduction_fee()
    summary = {
        "valid": True,
        "version": record.get("version"),
        "commitment": record.commitment_hex(),
        "commitment_pinned": expected is not None,
        "address": str(address) if address is not None else None,
        "telegram": record.handle(),
        "introduction_fee": str(fee) if fee is not None else None,
    }
    print(json.dumps(summary, indent=2))
    return 0


def cmd_resolve(args: argparse.Namespace, settings: Settings) -> int:
    descriptor = _load_descriptor(args.descriptor)
    address = descriptor.resolved_address()
    if address is None:
        print("Failed: descriptor has no address", file=sys.stderr)
        return 1
    print(address)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bitnames",
        description="BitNames web record validation",
    )
    parser.add_argument(
        "--env-file",
        type=Path,
        default=None,
        help="Path to a .env file (default: ./.env)",
    )
    sub = parser.add_subparsers(dest="command")

    # commitment
    p_com = sub.add_parser("commitment", help="Print a record's commitment (hex)")
    p_com.add_argument("--record", type=Path, required=True, help="Record JSON file")

    # canonicalize
    p_can = sub.add_parser("canonicalize", help="Write a record's canonical JSON bytes")
    p_can.add_argument("--record", type=Path, required=True, help="Record JSON file")

    # validate
    p_val = sub.add_parser("validate", help="Validate a record")
    p_val.add_argument("--record", type=Path, required=True, help="Record JSON file")
    p_val.add_argument("--descriptor", type=Path, help="Descriptor JSON file")
    p_val.add_argument("--commitment", help="Expected commitment (64 hex chars)")

    # resolve
    p_res = sub.add_parser("resolve", help="Print a descriptor's preferred address")
    p_res.add_argument("--descriptor", type=Path, required=True, help="Descriptor JSON file")

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    commands = {
        "commitment": cmd_commitment,
        "canonicalize": cmd_canonicalize,
        "validate": cmd_validate,
        "resolve": cmd_resolve,
    }

    handler = commands.get(args.command)
    if handler is None:
        print(f"Unknown command: {args.command}", file=sys.stderr)
        return 1

    try:
        settings = load_settings(args.env_file)
        logging.basicConfig(level=settings.log_level_value)
        return handler(args, settings)
    except (BitnamesError, OSError) as e:
        print(f"Failed: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
