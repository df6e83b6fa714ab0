"""Ownership claims binding a primary identifier to a secondary identifier."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime


@dataclass(eq=False, kw_only=True)
class OwnershipClaim:
    """Immutable-once-set binding. Written only through the registrar."""

    primary_key: str
    secondary_key: str
    claimed_at: datetime = field(default_factory=lambda: datetime.now(tz=UTC))

    def is_owned_by(self, secondary_key: str) -> bool:
        return self.secondary_key == secondary_key
