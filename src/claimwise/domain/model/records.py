"""Versioned event records grouped by entity."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime

from .enums import AUTHORITATIVE_STATUSES, RecordStatus

type Payload = dict[str, object]


@dataclass(eq=False, kw_only=True)
class EventRecord:
    """One observed state of an entity.

    Records are append-only: ingestion creates them, the batch resolver is the
    only writer of ``status`` afterwards, and nothing deletes them.
    ``id`` is assigned by the store on insert and orders records totally.
    """

    entity_key: str
    observed_at: datetime
    payload: Payload = field(default_factory=dict)
    status: RecordStatus = RecordStatus.UNRESOLVED
    ingested_at: datetime = field(default_factory=lambda: datetime.now(tz=UTC))
    id: int | None = None

    @property
    def is_authoritative(self) -> bool:
        return self.status in AUTHORITATIVE_STATUSES

    def as_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            "entity_key": self.entity_key,
            "status": self.status.value,
            "observed_at": self.observed_at.isoformat(),
            "ingested_at": self.ingested_at.isoformat(),
            "payload": dict(self.payload),
        }
