from __future__ import annotations

import logging

import pytest

from claimwise.config import ConfigurationError, configure_logging


@pytest.fixture
def captured_basic_config(monkeypatch: pytest.MonkeyPatch) -> dict[str, object]:
    captured: dict[str, object] = {}
    monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: captured.update(kwargs))
    monkeypatch.delenv("CLAIMWISE_LOG_LEVEL", raising=False)
    return captured


def test_defaults_to_info(captured_basic_config: dict[str, object]) -> None:
    configure_logging()

    assert captured_basic_config["level"] == logging.INFO
    assert captured_basic_config["force"] is False


def test_level_comes_from_environment(
    captured_basic_config: dict[str, object],
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setenv("CLAIMWISE_LOG_LEVEL", "warning")

    configure_logging()

    assert captured_basic_config["level"] == logging.WARNING


def test_explicit_level_wins_over_environment(
    captured_basic_config: dict[str, object],
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setenv("CLAIMWISE_LOG_LEVEL", "ERROR")

    configure_logging(level=logging.DEBUG, force=True)

    assert captured_basic_config["level"] == logging.DEBUG
    assert captured_basic_config["force"] is True


@pytest.mark.usefixtures("captured_basic_config")
def test_unknown_level_is_a_configuration_error(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CLAIMWISE_LOG_LEVEL", "chatty")

    with pytest.raises(ConfigurationError, match="chatty"):
        configure_logging()
