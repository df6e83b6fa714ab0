"""Read-side view of the authoritative record per entity."""

from __future__ import annotations

from typing import TYPE_CHECKING

from claimwise.domain.validation import require_key

if TYPE_CHECKING:
    from collections.abc import Callable

    from claimwise.domain.model import EventRecord
    from claimwise.domain.ports import EngineUnitOfWork


class StatusProjector:
    def __init__(self, unit_of_work_factory: Callable[[], EngineUnitOfWork]) -> None:
        self._unit_of_work_factory = unit_of_work_factory

    def active_record(self, entity_key: str) -> EventRecord | None:
        """Return the ``ACTIVE``/``PROCESSED`` record, or None if unresolved or unknown."""

        key = require_key("entity_key", entity_key)
        with self._unit_of_work_factory() as uow:
            return uow.repositories.records.authoritative(key)

    def history(self, entity_key: str) -> tuple[EventRecord, ...]:
        """Return every record of the entity, oldest observation first."""

        key = require_key("entity_key", entity_key)
        with self._unit_of_work_factory() as uow:
            return uow.repositories.records.history(key)
