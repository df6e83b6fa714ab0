"""Synchronous input checks shared by the engine services."""

from __future__ import annotations

import json
from collections.abc import Mapping
from datetime import UTC, datetime
from typing import TYPE_CHECKING, cast

from claimwise.domain.errors import InvalidInputError
from claimwise.domain.model import INGESTIBLE_STATUSES, RecordStatus

if TYPE_CHECKING:
    from collections.abc import Collection

    from claimwise.domain.model import Payload


def require_key(name: str, value: object) -> str:
    """Return ``value`` if it is a non-blank string, else raise."""

    if not isinstance(value, str):
        raise InvalidInputError(f"{name} must be a string, got {type(value).__name__}")
    if not value.strip():
        raise InvalidInputError(f"{name} must not be empty")
    return value


def require_payload(value: object) -> Payload:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise InvalidInputError(f"payload must be a mapping, got {type(value).__name__}")
    mapping = cast(Mapping[object, object], value)
    payload: Payload = {}
    for key, item in mapping.items():
        if not isinstance(key, str):
            raise InvalidInputError(f"payload keys must be strings, got {key!r}")
        payload[key] = item
    try:
        json.dumps(payload, allow_nan=False)
    except (TypeError, ValueError) as exc:
        raise InvalidInputError(f"payload must be JSON-serialisable: {exc}") from exc
    return payload


def require_timestamp(name: str, value: object) -> datetime:
    """Return ``value`` as an aware UTC datetime; naive values are taken as UTC."""

    if not isinstance(value, datetime):
        raise InvalidInputError(f"{name} must be a datetime, got {type(value).__name__}")
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def require_ingestible_status(value: object) -> RecordStatus:
    try:
        status = RecordStatus(value)
    except ValueError as exc:
        raise InvalidInputError(f"Unknown record status: {value!r}") from exc
    if status not in INGESTIBLE_STATUSES:
        allowed = ", ".join(item.value for item in INGESTIBLE_STATUSES)
        raise InvalidInputError(f"Cannot ingest a record as {status.value!r} (allowed: {allowed})")
    return status


def require_entity_keys(entity_keys: Collection[str] | None) -> frozenset[str] | None:
    """Validate an optional entity-key scope. ``None`` means every entity."""

    if entity_keys is None:
        return None
    if isinstance(entity_keys, str):
        raise InvalidInputError("entity_keys must be a collection of keys, not a single string")
    return frozenset(require_key("entity_key", key) for key in entity_keys)
