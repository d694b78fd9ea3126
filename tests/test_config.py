"""Tests for ClinicSettings."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from dental_clinic_records.core.config import ClinicSettings
from dental_clinic_records.core.enums import Collection, IdStrategy, PrescriptionIdMode
from dental_clinic_records.core.exceptions import ConfigurationError


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)


def test_defaults():
    settings = ClinicSettings()

    assert settings.data_dir == Path("data")
    assert settings.id_strategy is IdStrategy.MAX
    assert settings.prescription_id_mode is PrescriptionIdMode.LITERAL
    assert settings.validate_references is False
    assert settings.enforce_unique_email_on_edit is False
    assert settings.log_level == "INFO"
    assert settings.path_for(Collection.USERS) == Path("data") / "usuarios.json"
    assert settings.path_for(Collection.PRODUCTS_SERVICES) == Path("data") / "productos_servicios.json"


def test_every_collection_has_a_file():
    settings = ClinicSettings(data_dir="/srv/clinic")
    names = {settings.file_name_for(c) for c in Collection}
    assert len(names) == len(Collection)


@pytest.mark.parametrize("name", ["", "   ", "sub/usuarios.json", "..\\usuarios.json"])
def test_invalid_file_names_rejected(name):
    with pytest.raises(ValidationError):
        ClinicSettings(users_file=name)


def test_log_level_is_normalized_and_checked():
    assert ClinicSettings(log_level="debug").log_level == "DEBUG"
    with pytest.raises(ValidationError):
        ClinicSettings(log_level="verbose")


def test_from_environment_reads_prefixed_variables(tmp_path, monkeypatch):
    monkeypatch.setenv("DENTAL_DATA_DIR", str(tmp_path / "clinic"))
    monkeypatch.setenv("DENTAL_ID_STRATEGY", "last")
    monkeypatch.setenv("DENTAL_PRESCRIPTION_ID_MODE", "sequential")
    monkeypatch.setenv("DENTAL_USERS_FILE", "staff.json")

    settings = ClinicSettings.from_environment()

    assert settings.data_dir == tmp_path / "clinic"
    assert settings.id_strategy is IdStrategy.LAST
    assert settings.prescription_id_mode is PrescriptionIdMode.SEQUENTIAL
    assert settings.path_for(Collection.USERS) == tmp_path / "clinic" / "staff.json"


def test_from_environment_loads_env_file(tmp_path, monkeypatch):
    monkeypatch.setenv("DENTAL_VALIDATE_REFERENCES", "false")
    env_file = tmp_path / "clinic.env"
    env_file.write_text("DENTAL_VALIDATE_REFERENCES=true\n", encoding="utf-8")

    settings = ClinicSettings.from_environment(str(env_file))

    assert settings.validate_references is True


def test_from_environment_overrides_take_precedence(monkeypatch):
    monkeypatch.setenv("DENTAL_VALIDATE_REFERENCES", "true")
    settings = ClinicSettings.from_environment(validate_references=False)
    assert settings.validate_references is False


def test_from_environment_missing_env_file():
    with pytest.raises(ConfigurationError):
        ClinicSettings.from_environment("does-not-exist.env")


def test_from_environment_invalid_value(monkeypatch):
    monkeypatch.setenv("DENTAL_ID_STRATEGY", "random")
    with pytest.raises(ConfigurationError) as exc_info:
        ClinicSettings.from_environment()
    assert "id_strategy" in str(exc_info.value)


def test_to_dict_is_serializable():
    summary = ClinicSettings(data_dir="/srv/clinic").to_dict()
    assert summary["data_dir"] == "/srv/clinic"
    assert summary["files"]["histories"] == "historial.json"
    assert summary["log_file"] is None
