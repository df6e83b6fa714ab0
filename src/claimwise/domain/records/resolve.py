"""Set-based collapse of competing records to one authoritative record per entity.

Resolution runs two ordered passes, each a bulk statement over every scoped
entity at once:

1. processed dominance: an entity holding a ``PROCESSED`` record keeps only its
   most recent processed record; every other record of the entity becomes
   ``IGNORED`` whatever its timestamp.
2. recency: among the remaining ``UNRESOLVED``/``ACTIVE`` candidates, every
   record with a newer peer (greater ``observed_at``, ties broken by greater
   ``id``) becomes ``IGNORED``; the single survivor per entity is then promoted
   to ``ACTIVE``.

Both passes only ever move records towards ``IGNORED``/``ACTIVE`` and the
survivor of each pass is never itself a target, so a second run over the same
data changes nothing. A run that fails half-way is rolled back with its unit
of work and simply repeated.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from claimwise.domain.validation import require_entity_keys

if TYPE_CHECKING:
    from collections.abc import Callable, Collection

    from claimwise.domain.ports import EngineUnitOfWork

log = getLogger(__name__)


@dataclass(slots=True, kw_only=True)
class ResolutionReport:
    """Outcome of one resolver invocation."""

    ignored_count: int = 0
    activated_count: int = 0
    active_by_entity: dict[str, int] = field(default_factory=dict)

    @property
    def mutations(self) -> int:
        return self.ignored_count + self.activated_count


class BatchResolver:
    """Run both resolution passes inside a single unit of work."""

    def __init__(self, unit_of_work_factory: Callable[[], EngineUnitOfWork]) -> None:
        self._unit_of_work_factory = unit_of_work_factory

    def resolve(self, entity_keys: Collection[str] | None = None) -> ResolutionReport:
        """Resolve the given entities, or every entity when ``entity_keys`` is None."""

        scope = require_entity_keys(entity_keys)
        if scope is not None and not scope:
            return ResolutionReport()

        with self._unit_of_work_factory() as uow:
            records = uow.repositories.records
            dominated = records.ignore_dominated_by_processed(scope)
            superseded = records.ignore_superseded(scope)
            activated = records.activate_survivors(scope)
            active_by_entity = records.authoritative_by_entity(scope)
            uow.commit()

        report = ResolutionReport(
            ignored_count=dominated + superseded,
            activated_count=activated,
            active_by_entity=active_by_entity,
        )
        log.info(
            "Resolved %s entit%s: ignored=%s (processed=%s, superseded=%s), activated=%s",
            len(active_by_entity),
            "y" if len(active_by_entity) == 1 else "ies",
            report.ignored_count,
            dominated,
            superseded,
            activated,
        )
        return report
