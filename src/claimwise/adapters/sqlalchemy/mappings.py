"""SQLAlchemy mapping metadata for the claimwise domain model."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from functools import cache

from sqlalchemy import (
    JSON,
    Column,
    DateTime,
    Dialect,
    Enum,
    Index,
    Integer,
    String,
    Table,
    TypeDecorator,
    orm,
)
from sqlalchemy.orm import configure_mappers

from claimwise.domain.model import EventRecord, OwnershipClaim, RecordStatus

log = logging.getLogger(__name__)


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_label)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

ownership_claim_table = Table(
    "ownership_claim",
    mapper_registry.metadata,
    Column("primary_key", String, primary_key=True),
    Column("secondary_key", String, nullable=False),
    Column("claimed_at", UTCDateTime(), nullable=False),
)

event_record_table = Table(
    "event_record",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("entity_key", String, nullable=False),
    Column("payload", JSON, nullable=False),
    Column("status", Enum(RecordStatus, native_enum=False), nullable=False),
    Column("observed_at", UTCDateTime(), nullable=False),
    Column("ingested_at", UTCDateTime(), nullable=False),
    Index("ix_event_record_entity_status", "entity_key", "status"),
    Index("ix_event_record_entity_recency", "entity_key", "observed_at", "id"),
    sqlite_autoincrement=True,
)


@cache
def start_mappers() -> orm.registry:
    """Configure SQLAlchemy mappers for the domain model."""

    log.info("Starting SQLAlchemy mappers")

    mapper_registry.map_imperatively(OwnershipClaim, ownership_claim_table)
    mapper_registry.map_imperatively(EventRecord, event_record_table)

    configure_mappers()
    return mapper_registry

