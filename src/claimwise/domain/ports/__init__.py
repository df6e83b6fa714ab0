"""Storage ports consumed by the engine services."""

from __future__ import annotations

from claimwise.domain.ports.persistence import (
    EventRecordRepository,
    OwnershipClaimRepository,
    Repository,
)
from claimwise.domain.ports.unit_of_work import (
    EngineRepositories,
    EngineUnitOfWork,
    RepositoryCollection,
    UnitOfWork,
)

__all__ = [
    "EngineRepositories",
    "EngineUnitOfWork",
    "EventRecordRepository",
    "OwnershipClaimRepository",
    "Repository",
    "RepositoryCollection",
    "UnitOfWork",
]
