"""Application orchestration entry points."""

from __future__ import annotations

from collections.abc import Callable
from functools import partial
from logging import getLogger
from threading import Lock
from typing import TYPE_CHECKING

from claimwise.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyUnitOfWork,
    configured_engine,
    is_started,
    startup,
)
from claimwise.config import get_backend_profile
from claimwise.domain.model import RecordStatus
from claimwise.domain.ownership import ConflictDetector, OwnershipRegistrar
from claimwise.domain.ports import EngineUnitOfWork
from claimwise.domain.records import (
    BatchResolver,
    RecordDraft,
    RecordIngestor,
    ResolutionReport,
    StatusProjector,
)

if TYPE_CHECKING:
    from collections.abc import Collection, Iterable, Mapping
    from datetime import datetime

    from claimwise.domain.model import EventRecord
    from claimwise.domain.ownership import ClaimDecision

UnitOfWorkFactory = Callable[[], EngineUnitOfWork]


log = getLogger(__name__)

_startup_lock = Lock()


def _ensure_started() -> None:
    # Double-checked so startup() runs once however many first calls race.
    if is_started():
        return
    with _startup_lock:
        if not is_started():
            startup()


def _default_unit_of_work_factory() -> UnitOfWorkFactory:
    _ensure_started()
    return SqlAlchemyUnitOfWork


def resolution_unit_of_work_factory() -> UnitOfWorkFactory:
    """Unit-of-work factory carrying the backend's resolution isolation level."""

    _ensure_started()
    engine = configured_engine()
    if engine is None:
        raise RuntimeError("SQLAlchemy engine missing after startup")
    profile = get_backend_profile(engine.dialect.name)
    if not profile.snapshot_is_stable:
        log.warning(
            "Backend %s may show phantom rows under %s; late records are left "
            "for the next resolve run",
            profile.dialect,
            profile.resolve_isolation_level or "its default isolation",
        )
    return partial(SqlAlchemyUnitOfWork, isolation_level=profile.resolve_isolation_level)


def claim_ownership(
    primary_key: str,
    secondary_key: str,
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> ClaimDecision:
    """Claim ``primary_key`` for ``secondary_key``; first writer wins."""

    effective_uow = unit_of_work_factory or _default_unit_of_work_factory()
    detector = ConflictDetector(OwnershipRegistrar(effective_uow))
    decision = detector.accept(primary_key, secondary_key)
    log.info("Claim %s for %s: %s", primary_key, secondary_key, decision.outcome)
    return decision


def ingest_record(
    entity_key: str,
    payload: Mapping[str, object] | None,
    observed_at: datetime,
    *,
    status: RecordStatus = RecordStatus.UNRESOLVED,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> int:
    effective_uow = unit_of_work_factory or _default_unit_of_work_factory()
    record_id = RecordIngestor(effective_uow).ingest(
        entity_key,
        payload,
        observed_at,
        status=status,
    )
    log.info("Ingested record %s for %s (%s)", record_id, entity_key, status)
    return record_id


def ingest_records(
    drafts: Iterable[RecordDraft],
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> tuple[int, ...]:
    effective_uow = unit_of_work_factory or _default_unit_of_work_factory()
    record_ids = RecordIngestor(effective_uow).ingest_many(drafts)
    log.info("Ingested %s record(s)", len(record_ids))
    return record_ids


def resolve_records(
    entity_keys: Collection[str] | None = None,
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> ResolutionReport:
    """Run the batch resolver over ``entity_keys`` (all entities when None)."""

    effective_uow = unit_of_work_factory or resolution_unit_of_work_factory()
    return BatchResolver(effective_uow).resolve(entity_keys)


def active_record(
    entity_key: str,
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> EventRecord | None:
    effective_uow = unit_of_work_factory or _default_unit_of_work_factory()
    return StatusProjector(effective_uow).active_record(entity_key)


def record_history(
    entity_key: str,
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> tuple[EventRecord, ...]:
    effective_uow = unit_of_work_factory or _default_unit_of_work_factory()
    return StatusProjector(effective_uow).history(entity_key)
