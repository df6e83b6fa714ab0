"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from typing import TYPE_CHECKING, Final, cast

from sqlalchemy import and_, case, or_, select, update
from sqlalchemy.dialects import postgresql, sqlite

from claimwise.adapters.sqlalchemy.mappings import event_record_table, ownership_claim_table
from claimwise.domain.errors import UnsupportedBackendError
from claimwise.domain.model import (
    AUTHORITATIVE_STATUSES,
    CANDIDATE_STATUSES,
    EventRecord,
    OwnershipClaim,
    RecordStatus,
)

if TYPE_CHECKING:
    from collections.abc import Collection, Sequence
    from datetime import datetime

    from sqlalchemy import ColumnElement, CursorResult, Table, Update
    from sqlalchemy.orm import Session
    from sqlalchemy.sql.expression import FromClause

# Dialect inserts that support ON CONFLICT ... DO UPDATE ... RETURNING.
_UPSERT_INSERTS: Final = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class SqlAlchemyOwnershipClaimRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def claim(self, primary_key: str, secondary_key: str, *, claimed_at: datetime) -> str:
        # The conflict branch rewrites secondary_key with its own stored value:
        # a no-op update whose only purpose is to make RETURNING yield the
        # durable row, so insert-or-fetch happens in one atomic statement.
        dialect = self.session.get_bind().dialect.name
        insert_factory = _UPSERT_INSERTS.get(dialect)
        if insert_factory is None:
            raise UnsupportedBackendError(dialect, "atomic insert-or-return-existing")

        table = ownership_claim_table
        stmt = insert_factory(table).values(
            primary_key=primary_key,
            secondary_key=secondary_key,
            claimed_at=claimed_at,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[table.c.primary_key],
            set_={"secondary_key": table.c.secondary_key},
        ).returning(table.c.secondary_key)
        return self.session.execute(stmt).scalar_one()

    def get(self, primary_key: str) -> OwnershipClaim | None:
        return self.session.get(OwnershipClaim, primary_key, populate_existing=True)


class SqlAlchemyEventRecordRepository:
    """Event-record store whose resolution passes are single bulk UPDATEs.

    Every pass correlates ``event_record`` with an alias of itself through
    ``EXISTS``; no rows are loaded into Python to decide their fate.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: EventRecord) -> None:
        self.session.add(entity)
        self.session.flush()

    def add_many(self, entities: Sequence[EventRecord]) -> None:
        self.session.add_all(entities)
        self.session.flush()

    def ignore_dominated_by_processed(self, entity_keys: Collection[str] | None) -> int:
        target = event_record_table
        processed = event_record_table.alias("processed")
        dominated = (
            select(processed.c.id)
            .where(processed.c.entity_key == target.c.entity_key)
            .where(processed.c.status == RecordStatus.PROCESSED)
            .where(
                or_(
                    target.c.status != RecordStatus.PROCESSED,
                    _newer_than(processed, target),
                )
            )
            .correlate(target)
            .exists()
        )
        stmt = (
            update(target)
            .where(target.c.status != RecordStatus.IGNORED)
            .where(dominated)
            .values(status=RecordStatus.IGNORED)
        )
        return self._execute_bulk(stmt, entity_keys)

    def ignore_superseded(self, entity_keys: Collection[str] | None) -> int:
        target = event_record_table
        stmt = (
            update(target)
            .where(target.c.status.in_(CANDIDATE_STATUSES))
            .where(_has_newer_candidate(target))
            .values(status=RecordStatus.IGNORED)
        )
        return self._execute_bulk(stmt, entity_keys)

    def activate_survivors(self, entity_keys: Collection[str] | None) -> int:
        # Re-checks both passes' predicates so a row that slipped in after the
        # ignore statements can never be promoted next to a newer one.
        target = event_record_table
        processed = event_record_table.alias("processed")
        has_processed = (
            select(processed.c.id)
            .where(processed.c.entity_key == target.c.entity_key)
            .where(processed.c.status == RecordStatus.PROCESSED)
            .correlate(target)
            .exists()
        )
        stmt = (
            update(target)
            .where(target.c.status == RecordStatus.UNRESOLVED)
            .where(~has_processed)
            .where(~_has_newer_candidate(target))
            .values(status=RecordStatus.ACTIVE)
        )
        return self._execute_bulk(stmt, entity_keys)

    def authoritative_by_entity(self, entity_keys: Collection[str] | None) -> dict[str, int]:
        table = event_record_table
        stmt = (
            select(table.c.entity_key, table.c.id)
            .where(table.c.status.in_(AUTHORITATIVE_STATUSES))
            .order_by(
                table.c.entity_key,
                _processed_first(table).desc(),
                table.c.observed_at.desc(),
                table.c.id.desc(),
            )
        )
        if entity_keys is not None:
            stmt = stmt.where(table.c.entity_key.in_(sorted(entity_keys)))

        result: dict[str, int] = {}
        for entity_key, record_id in self.session.execute(stmt).all():
            result.setdefault(entity_key, record_id)
        return result

    def authoritative(self, entity_key: str) -> EventRecord | None:
        table = event_record_table
        stmt = (
            select(EventRecord)
            .where(table.c.entity_key == entity_key)
            .where(table.c.status.in_(AUTHORITATIVE_STATUSES))
            .order_by(
                _processed_first(table).desc(),
                table.c.observed_at.desc(),
                table.c.id.desc(),
            )
            .limit(1)
            .execution_options(populate_existing=True)
        )
        return self.session.execute(stmt).scalars().first()

    def history(self, entity_key: str) -> tuple[EventRecord, ...]:
        table = event_record_table
        stmt = (
            select(EventRecord)
            .where(table.c.entity_key == entity_key)
            .order_by(table.c.observed_at, table.c.id)
            .execution_options(populate_existing=True)
        )
        return tuple(self.session.execute(stmt).scalars().all())

    def _execute_bulk(self, stmt: Update, entity_keys: Collection[str] | None) -> int:
        if entity_keys is not None:
            stmt = stmt.where(event_record_table.c.entity_key.in_(sorted(entity_keys)))
        result = cast("CursorResult[tuple[()]]", self.session.execute(stmt))
        return result.rowcount


def _newer_than(peer: FromClause, target: FromClause) -> ColumnElement[bool]:
    """``peer`` sorts after ``target`` by (observed_at, id)."""

    return or_(
        peer.c.observed_at > target.c.observed_at,
        and_(peer.c.observed_at == target.c.observed_at, peer.c.id > target.c.id),
    )


def _has_newer_candidate(target: Table) -> ColumnElement[bool]:
    peer = target.alias("peer")
    return (
        select(peer.c.id)
        .where(peer.c.entity_key == target.c.entity_key)
        .where(peer.c.status.in_(CANDIDATE_STATUSES))
        .where(_newer_than(peer, target))
        .correlate(target)
        .exists()
    )


def _processed_first(table: FromClause) -> ColumnElement[int]:
    return case((table.c.status == RecordStatus.PROCESSED, 1), else_=0)


if TYPE_CHECKING:
    from claimwise.domain.ports.persistence import (
        EventRecordRepository,
        OwnershipClaimRepository,
    )

    _session_stub = cast("Session", object())
    _claims_check: OwnershipClaimRepository = SqlAlchemyOwnershipClaimRepository(_session_stub)
    _records_check: EventRecordRepository = SqlAlchemyEventRecordRepository(_session_stub)
