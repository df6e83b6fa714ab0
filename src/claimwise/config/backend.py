"""Per-dialect facts the resolver relies on.

Whether a repeatable-read snapshot can still observe phantom rows differs
between engines, so it is configured here as a property of the backend rather
than promised by the engine. Resolution converges either way; the profile only
decides which isolation level the resolver's unit of work requests and whether
a caveat is logged.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import StrEnum
from typing import Final

from .env import optional_env_var
from .errors import ConfigurationError

RESOLVE_ISOLATION_ENV: Final[str] = "CLAIMWISE_RESOLVE_ISOLATION"
PHANTOM_READS_ENV: Final[str] = "CLAIMWISE_PHANTOM_READS"


class PhantomReads(StrEnum):
    POSSIBLE = "possible"
    PREVENTED = "prevented"


@dataclass(frozen=True, slots=True)
class BackendProfile:
    dialect: str
    resolve_isolation_level: str | None
    phantom_reads: PhantomReads

    @property
    def snapshot_is_stable(self) -> bool:
        return self.phantom_reads is PhantomReads.PREVENTED


# Dialects the SQLAlchemy repositories support. Any other dialect gets a
# conservative profile, but its claim and resolve statements are not supported.
_DEFAULT_PROFILES: Final[dict[str, BackendProfile]] = {
    "postgresql": BackendProfile("postgresql", "REPEATABLE READ", PhantomReads.PREVENTED),
    # SQLite serialises writers at database level; no per-transaction override.
    "sqlite": BackendProfile("sqlite", None, PhantomReads.PREVENTED),
}


def get_backend_profile(dialect: str) -> BackendProfile:
    """Return the profile for ``dialect`` with environment overrides applied."""

    profile = _DEFAULT_PROFILES.get(
        dialect,
        BackendProfile(dialect, None, PhantomReads.POSSIBLE),
    )

    isolation = optional_env_var(RESOLVE_ISOLATION_ENV)
    if isolation is not None:
        level = " ".join(isolation.upper().replace("_", " ").split())
        if level == "SERIALIZABLE":
            raise ConfigurationError(
                f"{RESOLVE_ISOLATION_ENV}=SERIALIZABLE is not supported; "
                "resolution is designed to run without serializable isolation"
            )
        profile = replace(profile, resolve_isolation_level=level)

    phantoms = optional_env_var(PHANTOM_READS_ENV)
    if phantoms is not None:
        try:
            profile = replace(profile, phantom_reads=PhantomReads(phantoms.lower()))
        except ValueError as exc:
            allowed = ", ".join(item.value for item in PhantomReads)
            raise ConfigurationError(
                f"Invalid {PHANTOM_READS_ENV}={phantoms!r} (expected one of: {allowed})"
            ) from exc

    return profile
