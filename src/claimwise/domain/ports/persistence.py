"""Ports for persisting ownership claims and event records."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from claimwise.domain.model import EventRecord, OwnershipClaim

if TYPE_CHECKING:
    from collections.abc import Collection, Sequence
    from datetime import datetime


@runtime_checkable
class Repository[TEntity](Protocol):
    """Minimal repository contract for a persistent aggregate store."""

    def add(self, entity: TEntity) -> None: ...


@runtime_checkable
class OwnershipClaimRepository(Protocol):
    """Persistence contract for ownership claims.

    ``claim`` must be a single atomic conditional write: insert the binding if
    the primary key is free, otherwise leave the stored row alone, and in both
    cases return the durable secondary key. Implementations must never read,
    check, then insert.
    """

    def claim(self, primary_key: str, secondary_key: str, *, claimed_at: datetime) -> str: ...

    def get(self, primary_key: str) -> OwnershipClaim | None: ...


@runtime_checkable
class EventRecordRepository(Repository[EventRecord], Protocol):
    """Persistence contract for event records.

    ``add``/``add_many`` assign ``EventRecord.id`` before returning. The three
    mutating operations are bulk, set-based statements over every record of the
    scoped entities (``None`` scopes to all entities) and return the number of
    rows they changed.
    """

    def add_many(self, entities: Sequence[EventRecord]) -> None: ...

    def ignore_dominated_by_processed(self, entity_keys: Collection[str] | None) -> int: ...

    def ignore_superseded(self, entity_keys: Collection[str] | None) -> int: ...

    def activate_survivors(self, entity_keys: Collection[str] | None) -> int: ...

    def authoritative_by_entity(self, entity_keys: Collection[str] | None) -> dict[str, int]: ...

    def authoritative(self, entity_key: str) -> EventRecord | None: ...

    def history(self, entity_key: str) -> tuple[EventRecord, ...]: ...
