"""Append-only ingestion of event records."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import UTC, datetime
from logging import getLogger
from typing import TYPE_CHECKING

from claimwise.domain.model import EventRecord, RecordStatus
from claimwise.domain.validation import (
    require_ingestible_status,
    require_key,
    require_payload,
    require_timestamp,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from claimwise.domain.ports import EngineUnitOfWork

log = getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass(slots=True, kw_only=True)
class RecordDraft:
    """Caller-side description of a record to append."""

    entity_key: str
    observed_at: datetime
    payload: Mapping[str, object] | None = None
    status: RecordStatus = RecordStatus.UNRESOLVED


class RecordIngestor:
    """Append new records without consulting resolution state.

    Duplicates are expected here; the batch resolver collapses them later.
    """

    def __init__(
        self,
        unit_of_work_factory: Callable[[], EngineUnitOfWork],
        *,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._unit_of_work_factory = unit_of_work_factory
        self._clock = clock

    def ingest(
        self,
        entity_key: str,
        payload: Mapping[str, object] | None,
        observed_at: datetime,
        *,
        status: RecordStatus = RecordStatus.UNRESOLVED,
    ) -> int:
        """Append one record and return its store-assigned id."""

        draft = RecordDraft(
            entity_key=entity_key,
            payload=payload,
            observed_at=observed_at,
            status=status,
        )
        (record_id,) = self.ingest_many((draft,))
        return record_id

    def ingest_many(self, drafts: Iterable[RecordDraft]) -> tuple[int, ...]:
        """Append a batch in one unit of work; ids follow input order."""

        records = [self._build(draft) for draft in drafts]
        if not records:
            return ()

        with self._unit_of_work_factory() as uow:
            uow.repositories.records.add_many(records)
            uow.commit()

        ids = tuple(_assigned_id(record) for record in records)
        log.debug("Ingested %s record(s): %s", len(ids), ids)
        return ids

    def _build(self, draft: RecordDraft) -> EventRecord:
        return EventRecord(
            entity_key=require_key("entity_key", draft.entity_key),
            payload=require_payload(draft.payload),
            observed_at=require_timestamp("observed_at", draft.observed_at),
            status=require_ingestible_status(draft.status),
            ingested_at=self._clock(),
        )


def _assigned_id(record: EventRecord) -> int:
    if record.id is None:
        raise RuntimeError("Repository did not assign an id to the appended record")
    return record.id
