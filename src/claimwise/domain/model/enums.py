"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum
from typing import Final


class RecordStatus(StrEnum):
    UNRESOLVED = "unresolved"
    PROCESSED = "processed"
    IGNORED = "ignored"
    ACTIVE = "active"


# Statuses an entity's authoritative record may carry after resolution.
AUTHORITATIVE_STATUSES: Final[tuple[RecordStatus, ...]] = (
    RecordStatus.PROCESSED,
    RecordStatus.ACTIVE,
)

# Statuses still competing in the recency pass.
CANDIDATE_STATUSES: Final[tuple[RecordStatus, ...]] = (
    RecordStatus.UNRESOLVED,
    RecordStatus.ACTIVE,
)

# Statuses callers may ingest with; the rest are owned by the resolver.
INGESTIBLE_STATUSES: Final[tuple[RecordStatus, ...]] = (
    RecordStatus.UNRESOLVED,
    RecordStatus.PROCESSED,
)
