# ruff: noqa: T201

from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import UTC, datetime
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv
from sqlalchemy.exc import SQLAlchemyError

from claimwise.adapters.jsonl import read_record_file
from claimwise.app import (
    active_record,
    claim_ownership,
    ingest_record,
    ingest_records,
    resolve_records,
)
from claimwise.config import ConfigurationError, configure_logging
from claimwise.domain.errors import ClaimwiseError, InvalidInputError
from claimwise.domain.model import RecordStatus
from claimwise.domain.ownership import Rejected

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_STORAGE_FAILURE = 1
EXIT_INVALID_INPUT = 2
EXIT_REJECTED = 3
EXIT_NOT_FOUND = 4


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Claim ownership and resolve event records")
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log at DEBUG level",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    claim = subparsers.add_parser("claim", help="Claim a primary key for a secondary key")
    claim.add_argument("primary_key", help="Identifier being claimed")
    claim.add_argument("secondary_key", help="Identifier that wants to own it")

    ingest = subparsers.add_parser("ingest", help="Append event records")
    source = ingest.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "--entity",
        type=str,
        help="Entity key of a single record",
    )
    source.add_argument(
        "--file",
        type=Path,
        help="JSON Lines file with one record per line",
    )
    ingest.add_argument(
        "--observed-at",
        type=str,
        help="ISO-8601 timestamp (UTC if no offset) at which the state was observed",
    )
    ingest.add_argument(
        "--payload",
        type=str,
        help="JSON object stored with the record",
    )
    ingest.add_argument(
        "--processed",
        action="store_true",
        help="Mark the record as already processed downstream",
    )

    resolve = subparsers.add_parser("resolve", help="Run the batch resolver")
    resolve.add_argument(
        "--entity",
        dest="entities",
        action="append",
        help="Restrict resolution to this entity key (repeatable)",
    )

    active = subparsers.add_parser("active", help="Show the authoritative record")
    active.add_argument("entity_key", help="Entity key to look up")

    return parser.parse_args(list(argv))


def _parse_iso_datetime(value: str) -> datetime:
    try:
        normalized = value.strip()
        if normalized.endswith("Z"):
            normalized = normalized[:-1] + "+00:00"
        dt = datetime.fromisoformat(normalized)
    except ValueError as exc:
        raise InvalidInputError(f"Invalid ISO timestamp: {value}") from exc
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def _parse_payload(value: str | None) -> dict[str, object] | None:
    if value is None:
        return None
    try:
        payload = json.loads(value)
    except json.JSONDecodeError as exc:
        raise InvalidInputError(f"Invalid JSON payload: {exc}") from exc
    if not isinstance(payload, dict):
        raise InvalidInputError("Payload must be a JSON object")
    return payload


def _run_claim(args: argparse.Namespace) -> int:
    decision = claim_ownership(args.primary_key, args.secondary_key)
    if isinstance(decision, Rejected):
        print(f"rejected (owned by {decision.owned_secondary_key})")
        return EXIT_REJECTED
    print("accepted")
    return EXIT_OK


def _run_ingest(args: argparse.Namespace) -> int:
    if args.file is not None:
        record_ids = ingest_records(read_record_file(args.file))
        print(json.dumps(list(record_ids)))
        return EXIT_OK

    if args.observed_at is None:
        raise InvalidInputError("--observed-at is required with --entity")
    record_id = ingest_record(
        args.entity,
        _parse_payload(args.payload),
        _parse_iso_datetime(args.observed_at),
        status=RecordStatus.PROCESSED if args.processed else RecordStatus.UNRESOLVED,
    )
    print(record_id)
    return EXIT_OK


def _run_resolve(args: argparse.Namespace) -> int:
    report = resolve_records(args.entities)
    log.info(
        "Resolution finished: ignored=%s, activated=%s, entities=%s",
        report.ignored_count,
        report.activated_count,
        len(report.active_by_entity),
    )
    return EXIT_OK


def _run_active(args: argparse.Namespace) -> int:
    record = active_record(args.entity_key)
    if record is None:
        print(f"No authoritative record for {args.entity_key}", file=sys.stderr)
        return EXIT_NOT_FOUND
    print(json.dumps(record.as_dict(), sort_keys=True))
    return EXIT_OK


_COMMANDS = {
    "claim": _run_claim,
    "ingest": _run_ingest,
    "resolve": _run_resolve,
    "active": _run_active,
}


def main(argv: Sequence[str] | None = None) -> int:
    """Main application entry point; returns the process exit code."""
    parsed_args = _parse_args(list(argv) if argv is not None else sys.argv[1:])
    try:
        configure_logging(level=logging.DEBUG if parsed_args.verbose else None)
        return _COMMANDS[parsed_args.command](parsed_args)
    except (InvalidInputError, ConfigurationError) as exc:
        log.error("Invalid input: %s", exc)  # noqa: TRY400
        return EXIT_INVALID_INPUT
    except (SQLAlchemyError, ClaimwiseError):
        log.exception("Storage failure")
        return EXIT_STORAGE_FAILURE


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    sys.exit(main())


if __name__ == "__main__":
    run()
