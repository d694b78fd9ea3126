"""Shared fixtures: every store and clinic lives under pytest's tmp_path."""

import pytest
from loguru import logger

from dental_clinic_records import ClinicRecords, ClinicSettings, JsonFileRecordStore, SessionManager
from dental_clinic_records.core.models import User


@pytest.fixture
def settings(tmp_path):
    return ClinicSettings(data_dir=tmp_path / "data")


@pytest.fixture
def clinic(settings):
    return ClinicRecords(settings)


@pytest.fixture
def user_store(tmp_path):
    return JsonFileRecordStore(User, tmp_path / "usuarios.json", collection="users")


@pytest.fixture
def session(user_store):
    return SessionManager(user_store)


@pytest.fixture
def ana(session):
    """A registered, enabled user."""
    return session.register("Ana", 1001, "ana@clinic.com", "secret", role="admin")


@pytest.fixture
def warnings_logged():
    """Messages loguru emits at WARNING or above while the test runs."""
    messages = []
    handler_id = logger.add(lambda m: messages.append(m.record["message"]), level="WARNING")
    yield messages
    logger.remove(handler_id)
