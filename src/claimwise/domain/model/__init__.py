"""Public domain model surface."""

from __future__ import annotations

from claimwise.domain.model.enums import (
    AUTHORITATIVE_STATUSES,
    CANDIDATE_STATUSES,
    INGESTIBLE_STATUSES,
    RecordStatus,
)
from claimwise.domain.model.ownership import OwnershipClaim
from claimwise.domain.model.records import EventRecord, Payload

__all__ = [
    "AUTHORITATIVE_STATUSES",
    "CANDIDATE_STATUSES",
    "INGESTIBLE_STATUSES",
    "EventRecord",
    "OwnershipClaim",
    "Payload",
    "RecordStatus",
]
