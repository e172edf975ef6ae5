from __future__ import annotations

import logging

import pytest

from scenarist.utils.logging import configure_root


@pytest.fixture(autouse=True)
def _restore_root_level():
    root = logging.getLogger()
    previous = root.level
    yield
    root.setLevel(previous)


def test_configure_root_uses_default_level(monkeypatch) -> None:
    monkeypatch.delenv("SCENARIST_LOG_LEVEL", raising=False)
    monkeypatch.delenv("SCENARIST_DEBUG", raising=False)

    assert configure_root("warning") == logging.WARNING
    assert logging.getLogger().level == logging.WARNING


def test_explicit_env_level_wins(monkeypatch) -> None:
    monkeypatch.setenv("SCENARIST_LOG_LEVEL", "error")
    monkeypatch.setenv("SCENARIST_DEBUG", "1")

    assert configure_root(logging.INFO) == logging.ERROR


def test_debug_flag_forces_debug(monkeypatch) -> None:
    monkeypatch.delenv("SCENARIST_LOG_LEVEL", raising=False)
    monkeypatch.setenv("SCENARIST_DEBUG", "yes")

    assert configure_root(logging.INFO) == logging.DEBUG


def test_unknown_env_level_falls_back_to_info(monkeypatch) -> None:
    monkeypatch.setenv("SCENARIST_LOG_LEVEL", "chatty")

    assert configure_root(logging.WARNING) == logging.INFO
