"""Tests for the loguru setup."""

import json

import pytest
from loguru import logger

from mediblood.config import get_settings
from mediblood.utils import setup_logging


@pytest.fixture(autouse=True)
def _drop_sinks():
    yield
    logger.remove()


def test_json_records_on_stderr(monkeypatch, capsys):
    monkeypatch.setenv("MEDIBLOOD_LOG_FORMAT", "json")
    get_settings.cache_clear()

    setup_logging()
    logger.info("Saved order MB-1-LAAAAAA locally")

    lines = [line for line in capsys.readouterr().err.splitlines() if line.strip()]
    record = json.loads(lines[-1])
    assert record["record"]["message"] == "Saved order MB-1-LAAAAAA locally"
    assert record["record"]["level"]["name"] == "INFO"


def test_file_sink_outside_debug_mode(monkeypatch, tmp_path):
    monkeypatch.setenv("MEDIBLOOD_DEBUG_MODE", "false")
    get_settings.cache_clear()

    setup_logging("debug")
    logger.debug("Remote order store is offline")
    logger.remove()

    assert "Remote order store is offline" in (tmp_path / "mediblood.log").read_text()


def test_no_file_sink_in_debug_mode(tmp_path):
    setup_logging()
    logger.warning("Health probe failed")
    logger.remove()

    assert not (tmp_path / "mediblood.log").exists()
