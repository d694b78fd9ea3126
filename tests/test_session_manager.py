"""Tests for the authentication state machine and account operations."""

import pytest

from dental_clinic_records.core.enums import EditableField, SessionState
from dental_clinic_records.core.exceptions import (
    AccountDisabledError,
    AlreadyAuthenticatedError,
    DuplicateEmailError,
    InvalidCredentialsError,
    InvalidFieldValueError,
    NoActiveSessionError,
    UnsupportedFieldError,
)
from dental_clinic_records.session import Credentials, SessionManager


def yes(_record):
    return True


def no(_record):
    return False


# =============================================================================
# Registration
# =============================================================================


def test_register_assigns_id_and_enables_user(session, user_store):
    user = session.register("Ana", 1001, "ana@clinic.com", "secret", role="admin")

    assert user.id == 1
    assert user.enabled is True
    assert user_store.load_all() == [user]


def test_register_duplicate_email_is_rejected_without_writing(session, user_store, ana):
    before = user_store.count()

    with pytest.raises(DuplicateEmailError):
        session.register("Otra Ana", 2002, "ana@clinic.com", "other")

    assert user_store.count() == before


def test_email_match_is_case_sensitive(session, ana):
    other = session.register("Ana Upper", 1002, "ANA@clinic.com", "secret")
    assert other.id == 2


# =============================================================================
# Login / logout
# =============================================================================


def test_new_session_starts_logged_out(session):
    assert session.state is SessionState.LOGGED_OUT
    assert session.current_user is None
    assert not session.is_authenticated


def test_login_logout_cycle(session, ana):
    user = session.login("ana@clinic.com", "secret")
    assert user == ana
    assert session.state is SessionState.LOGGED_IN
    assert session.current_user == ana

    with pytest.raises(AlreadyAuthenticatedError):
        session.login("ana@clinic.com", "secret")
    assert session.current_user == ana

    assert session.logout() == ana
    assert session.state is SessionState.LOGGED_OUT

    session.login("ana@clinic.com", "secret")
    assert session.is_authenticated


def test_login_rejects_other_user_while_logged_in(session, ana):
    session.register("Beto", 1002, "beto@clinic.com", "pw")
    session.login("ana@clinic.com", "secret")

    with pytest.raises(AlreadyAuthenticatedError):
        session.login("beto@clinic.com", "pw")


@pytest.mark.parametrize(
    "email, password",
    [
        ("ana@clinic.com", "wrong"),
        ("nobody@clinic.com", "secret"),
        ("Ana@clinic.com", "secret"),
        ("ana@clinic.com", "Secret"),
    ],
)
def test_login_with_bad_credentials_stays_logged_out(session, ana, email, password):
    with pytest.raises(InvalidCredentialsError):
        session.login(email, password)
    assert session.state is SessionState.LOGGED_OUT


def test_credential_errors_do_not_leak_password(session, ana):
    with pytest.raises(InvalidCredentialsError) as exc_info:
        session.login("ana@clinic.com", "hunter2")
    assert "hunter2" not in str(exc_info.value)


def test_logout_without_session_is_reported(session):
    with pytest.raises(NoActiveSessionError):
        session.logout()


# =============================================================================
# Disabled accounts
# =============================================================================


def test_login_disabled_user_declining_reenable(session, user_store, ana):
    session.disable("ana@clinic.com", "secret", yes)

    with pytest.raises(AccountDisabledError) as exc_info:
        session.login("ana@clinic.com", "secret", reenable=lambda user: None)

    assert isinstance(exc_info.value, InvalidCredentialsError)
    assert session.state is SessionState.LOGGED_OUT
    assert user_store.get(ana.id).enabled is False


def test_login_disabled_user_without_callback_is_refused(session, user_store, ana):
    session.disable("ana@clinic.com", "secret", yes)

    with pytest.raises(AccountDisabledError):
        session.login("ana@clinic.com", "secret")

    assert user_store.get(ana.id).enabled is False


def test_login_disabled_user_accepting_reenable(session, user_store, ana):
    session.disable("ana@clinic.com", "secret", yes)
    offered = []

    def reenable(user):
        offered.append(user.id)
        return Credentials("ana@clinic.com", "secret")

    user = session.login("ana@clinic.com", "secret", reenable=reenable)

    assert offered == [ana.id]
    assert user.enabled is True
    assert session.state is SessionState.LOGGED_IN
    assert user_store.get(ana.id).enabled is True


def test_reenable_with_mismatched_credentials_fails(session, user_store, ana):
    session.disable("ana@clinic.com", "secret", yes)

    with pytest.raises(InvalidCredentialsError) as exc_info:
        session.login(
            "ana@clinic.com", "secret", reenable=lambda u: Credentials("ana@clinic.com", "typo")
        )

    assert not isinstance(exc_info.value, AccountDisabledError)
    assert session.state is SessionState.LOGGED_OUT
    assert user_store.get(ana.id).enabled is False


def test_disable_requires_confirmation(session, user_store, ana):
    assert session.disable("ana@clinic.com", "secret", no) is None
    assert user_store.get(ana.id).enabled is True

    disabled = session.disable("ana@clinic.com", "secret", yes)
    assert disabled.enabled is False
    assert user_store.get(ana.id).enabled is False


def test_disable_requires_valid_credentials(session, ana):
    with pytest.raises(InvalidCredentialsError):
        session.disable("ana@clinic.com", "wrong", yes)


def test_disabling_logged_in_user_keeps_session(session, ana):
    session.login("ana@clinic.com", "secret")

    session.disable("ana@clinic.com", "secret", yes)

    assert session.state is SessionState.LOGGED_IN
    assert session.current_user.id == ana.id
    assert session.current_user.enabled is False


# =============================================================================
# Editing
# =============================================================================


def test_edit_name_after_confirmation(session, user_store, ana):
    seen = []

    def confirm(preview):
        seen.append(preview.name)
        return True

    updated = session.edit("ana@clinic.com", "secret", EditableField.NAME, "Ana María", confirm)

    assert seen == ["Ana María"]
    assert updated.name == "Ana María"
    assert user_store.get(ana.id).name == "Ana María"


def test_edit_declined_writes_nothing(session, user_store, ana):
    before = user_store.path.read_bytes()

    assert session.edit("ana@clinic.com", "secret", "name", "Nope", no) is None

    assert user_store.path.read_bytes() == before


def test_edit_badge_number_parses_integers(session, user_store, ana):
    updated = session.edit("ana@clinic.com", "secret", "badge_number", "2040", yes)
    assert updated.badge_number == 2040

    with pytest.raises(InvalidFieldValueError):
        session.edit("ana@clinic.com", "secret", "badge_number", "abc", yes)
    assert user_store.get(ana.id).badge_number == 2040


def test_edit_password_changes_login_credentials(session, ana):
    session.edit("ana@clinic.com", "secret", EditableField.PASSWORD, "new-secret", yes)

    with pytest.raises(InvalidCredentialsError):
        session.login("ana@clinic.com", "secret")
    assert session.login("ana@clinic.com", "new-secret").id == ana.id


def test_edit_rejects_non_editable_field(session, ana):
    with pytest.raises(UnsupportedFieldError):
        session.edit("ana@clinic.com", "secret", "role", "root", yes)
    with pytest.raises(UnsupportedFieldError):
        session.edit("ana@clinic.com", "secret", "enabled", False, yes)


def test_edit_requires_valid_credentials(session, ana):
    with pytest.raises(InvalidCredentialsError):
        session.edit("ana@clinic.com", "bad", "name", "X", yes)


def test_edit_email_collision_allowed_by_default(session, user_store, ana):
    session.register("Beto", 1002, "beto@clinic.com", "pw")

    session.edit("beto@clinic.com", "pw", "email", "ana@clinic.com", yes)

    emails = [u.email for u in user_store.load_all()]
    assert emails == ["ana@clinic.com", "ana@clinic.com"]


def test_edit_email_collision_rejected_when_enforced(user_store):
    strict = SessionManager(user_store, enforce_unique_email_on_edit=True)
    strict.register("Ana", 1001, "ana@clinic.com", "secret")
    strict.register("Beto", 1002, "beto@clinic.com", "pw")

    with pytest.raises(DuplicateEmailError):
        strict.edit("beto@clinic.com", "pw", "email", "ana@clinic.com", yes)

    assert strict.find_by_email("beto@clinic.com") is not None


def test_edit_refreshes_logged_in_snapshot(session, ana):
    session.login("ana@clinic.com", "secret")

    session.edit("ana@clinic.com", "secret", "name", "Ana María", yes)

    assert session.current_user.name == "Ana María"
