import logging
from pathlib import Path

import pytest

from radarcard.shared.logging_setup import setup_logging


@pytest.fixture
def restore_logging():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    logging.getLogger("radarcard").setLevel(logging.NOTSET)


def test_yaml_logging_section_is_applied(tmp_path: Path, restore_logging, monkeypatch) -> None:
    monkeypatch.delenv("RADAR_CARD_LOG_CFG", raising=False)
    cfg = tmp_path / "logging.yaml"
    cfg.write_text(
        "logging:\n"
        "  version: 1\n"
        "  disable_existing_loggers: false\n"
        "  loggers:\n"
        "    radarcard:\n"
        "      level: ERROR\n",
        encoding="utf-8",
    )
    setup_logging(default_path=str(cfg))
    assert logging.getLogger("radarcard").level == logging.ERROR


def test_env_var_overrides_default_path(tmp_path: Path, restore_logging, monkeypatch) -> None:
    cfg = tmp_path / "env.yaml"
    cfg.write_text(
        "logging:\n"
        "  version: 1\n"
        "  disable_existing_loggers: false\n"
        "  loggers:\n"
        "    radarcard:\n"
        "      level: DEBUG\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("RADAR_CARD_LOG_CFG", str(cfg))
    setup_logging(default_path=str(tmp_path / "missing.yaml"))
    assert logging.getLogger("radarcard").level == logging.DEBUG


def test_invalid_yaml_falls_back_with_warning(tmp_path: Path, restore_logging, monkeypatch, caplog) -> None:
    monkeypatch.delenv("RADAR_CARD_LOG_CFG", raising=False)
    cfg = tmp_path / "broken.yaml"
    cfg.write_text("logging: [unclosed\n", encoding="utf-8")
    with caplog.at_level(logging.WARNING, logger="radarcard"):
        setup_logging(default_path=str(cfg))
    assert "Error in logging configuration" in caplog.text
