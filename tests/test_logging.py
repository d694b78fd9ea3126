"""Tests for loguru sink configuration."""

import json

import pytest
from loguru import logger

from dental_clinic_records.core.config import ClinicSettings
from dental_clinic_records.observability import configure_from_settings, configure_logging
from dental_clinic_records.repository import JsonFileRecordStore
from dental_clinic_records.core.models import Doctor


@pytest.fixture(autouse=True)
def restore_handlers():
    yield
    logger.remove()


def read_json_lines(path):
    return [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines() if line]


def test_file_sink_serializes_json_with_collection(tmp_path):
    log_file = tmp_path / "logs" / "clinic.jsonl"
    handler_ids = configure_logging("WARNING", log_file=log_file, serialize=True)

    store = JsonFileRecordStore(Doctor, tmp_path / "doctores.json", "doctors")
    store.append(Doctor(name="Dra. Vega"))
    for handler_id in handler_ids:
        logger.remove(handler_id)

    records = [entry["record"] for entry in read_json_lines(log_file)]
    appended = [r for r in records if r["message"].startswith("Appended record")]
    assert len(appended) == 1
    assert appended[0]["extra"]["collection"] == "doctors"
    assert appended[0]["level"]["name"] == "INFO"


def test_console_only_configuration_returns_one_handler():
    assert len(configure_logging("debug")) == 1


def test_configure_from_settings(tmp_path):
    settings = ClinicSettings(data_dir=tmp_path, log_file=tmp_path / "clinic.log", log_level="ERROR")
    handler_ids = configure_from_settings(settings)
    logger.info("plain text entry")
    for handler_id in handler_ids:
        logger.remove(handler_id)

    assert "plain text entry" in (tmp_path / "clinic.log").read_text(encoding="utf-8")
