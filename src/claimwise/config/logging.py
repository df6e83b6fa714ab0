"""Root logger setup for the claimwise CLI."""

from __future__ import annotations

import logging
from typing import Final

from .env import optional_env_var
from .errors import ConfigurationError

LOG_LEVEL_ENV: Final[str] = "CLAIMWISE_LOG_LEVEL"


def _level_from_env(default: int) -> int:
    name = optional_env_var(LOG_LEVEL_ENV)
    if name is None:
        return default
    level = logging.getLevelNamesMapping().get(name.upper())
    if level is None:
        raise ConfigurationError(f"Invalid {LOG_LEVEL_ENV}={name!r}")
    return level


def configure_logging(*, level: int | None = None, force: bool = False) -> None:
    """Configure the root logger for CLI output.

    An explicit ``level`` wins over ``CLAIMWISE_LOG_LEVEL``, which wins over INFO.
    """

    logging.basicConfig(
        level=level if level is not None else _level_from_env(logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
        force=force,
    )
