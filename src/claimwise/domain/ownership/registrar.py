"""First-writer-wins ownership claims."""

from __future__ import annotations

from datetime import UTC, datetime
from logging import getLogger
from typing import TYPE_CHECKING

from claimwise.domain.validation import require_key

if TYPE_CHECKING:
    from collections.abc import Callable

    from claimwise.domain.model import OwnershipClaim
    from claimwise.domain.ports import EngineUnitOfWork

log = getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


class OwnershipRegistrar:
    """Bind a primary key to a secondary key exactly once.

    ``claim`` is safe to call concurrently for the same primary key: the
    repository performs one atomic insert-or-return-existing statement, so
    exactly one caller's secondary key becomes durable and every caller gets
    that durable value back. There is no retry loop because there is no race
    window to retry around.
    """

    def __init__(
        self,
        unit_of_work_factory: Callable[[], EngineUnitOfWork],
        *,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._unit_of_work_factory = unit_of_work_factory
        self._clock = clock

    def claim(self, primary_key: str, secondary_key: str) -> str:
        """Return the secondary key bound to ``primary_key`` after this call."""

        primary = require_key("primary_key", primary_key)
        secondary = require_key("secondary_key", secondary_key)

        with self._unit_of_work_factory() as uow:
            bound = uow.repositories.claims.claim(primary, secondary, claimed_at=self._clock())
            uow.commit()

        log.debug("Claim %s -> %s (bound: %s)", primary, secondary, bound)
        return bound

    def lookup(self, primary_key: str) -> OwnershipClaim | None:
        primary = require_key("primary_key", primary_key)
        with self._unit_of_work_factory() as uow:
            return uow.repositories.claims.get(primary)
