"""SQLAlchemy adapter package for claimwise."""

from __future__ import annotations

from .mappings import (
    event_record_table,
    mapper_registry,
    ownership_claim_table,
    start_mappers,
)
from .repositories import SqlAlchemyEventRecordRepository, SqlAlchemyOwnershipClaimRepository

__all__ = [
    "SqlAlchemyEventRecordRepository",
    "SqlAlchemyOwnershipClaimRepository",
    "event_record_table",
    "mapper_registry",
    "ownership_claim_table",
    "start_mappers",
]
