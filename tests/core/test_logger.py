import json
from pathlib import Path

import pytest
from loguru import logger

from app.config.settings import Settings
from app.core.logger import configure_from_settings


def test_serialized_log_file_from_settings(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    log_file = tmp_path / "logs" / "workload.log"
    monkeypatch.setenv("WORKLOAD_LOG_FILE", str(log_file))
    monkeypatch.setenv("WORKLOAD_LOG_SERIALIZE", "true")

    configure_from_settings(Settings())
    logger.info("grid saved")
    logger.remove()

    lines = log_file.read_text(encoding="utf-8").splitlines()
    messages = [json.loads(line)["record"]["message"] for line in lines]
    assert "grid saved" in messages


def test_plain_log_file_by_default(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    log_file = tmp_path / "workload.log"
    monkeypatch.setenv("WORKLOAD_LOG_FILE", str(log_file))
    monkeypatch.delenv("WORKLOAD_LOG_SERIALIZE", raising=False)

    configure_from_settings(Settings())
    logger.info("grid saved")
    logger.remove()

    assert "| INFO     |" in log_file.read_text(encoding="utf-8")
