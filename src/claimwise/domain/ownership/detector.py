"""Accept or reject writes against the durable ownership binding."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from claimwise.domain.ownership.registrar import OwnershipRegistrar

log = getLogger(__name__)


class ClaimOutcome(StrEnum):
    ACCEPTED = "accepted"
    REJECTED = "rejected"


@dataclass(frozen=True, slots=True, kw_only=True)
class Accepted:
    """The caller's secondary key is (now) the owner of the primary key."""

    primary_key: str
    secondary_key: str
    outcome: Literal[ClaimOutcome.ACCEPTED] = ClaimOutcome.ACCEPTED


@dataclass(frozen=True, slots=True, kw_only=True)
class Rejected:
    """Another secondary key already owns the primary key.

    The caller must not alter the owning association. Whether to log, alert or
    drop the attempt is up to the caller.
    """

    primary_key: str
    attempted_secondary_key: str
    owned_secondary_key: str
    outcome: Literal[ClaimOutcome.REJECTED] = ClaimOutcome.REJECTED


type ClaimDecision = Accepted | Rejected


class ConflictDetector:
    """Turn the registrar's bound value into an accept/reject decision."""

    def __init__(self, registrar: OwnershipRegistrar) -> None:
        self._registrar = registrar

    def accept(self, primary_key: str, secondary_key: str) -> ClaimDecision:
        bound = self._registrar.claim(primary_key, secondary_key)
        if bound == secondary_key:
            return Accepted(primary_key=primary_key, secondary_key=secondary_key)

        log.warning(
            "Ownership conflict: %s is owned by %s, rejected %s",
            primary_key,
            bound,
            secondary_key,
        )
        return Rejected(
            primary_key=primary_key,
            attempted_secondary_key=secondary_key,
            owned_secondary_key=bound,
        )
