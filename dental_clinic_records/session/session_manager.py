"""
Session Manager - Authentication State Machine

This module owns the clinic's single authenticated-user slot and the
account operations that depend on credentials: registration, login,
logout, disabling and editing.

State Machine:
    LOGGED_OUT ──login──▶ LOGGED_IN(user)
        ▲                     │
        └────────logout───────┘

    login while LOGGED_IN   → AlreadyAuthenticatedError
    logout while LOGGED_OUT → NoActiveSessionError

A SessionManager is constructed explicitly and handed to whoever needs
it; there is one session per instance. Interactive steps (re-entering
credentials, yes/no confirmations) are callbacks supplied by the caller,
so this module never prompts.

Credentials are compared exactly and case-sensitively against plaintext
passwords in the users collection. Passwords are never logged.

Usage:
    session = SessionManager(users_store)
    session.register("Ana", 1001, "ana@clinic.com", "secret")
    session.login("ana@clinic.com", "secret")
    session.logout()

Date: October 2026
"""

from typing import Any, Callable, NamedTuple, Optional, Union

from loguru import logger
from pydantic import ValidationError

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
from dental_clinic_records.core.models import User
from dental_clinic_records.repository.record_store import RecordStore


class Credentials(NamedTuple):
    """An email/password pair re-entered by the caller."""

    email: str
    password: str


ReenablePrompt = Callable[[User], Optional[Credentials]]
"""Asked when a disabled user logs in; return None to decline re-enabling."""

Confirm = Callable[[User], bool]
"""Asked before a disable or edit is persisted; receives the affected record."""


# =============================================================================
# STAGE 1: SESSION MANAGER
# =============================================================================


class SessionManager:
    """
    Single-slot authentication state machine over the users collection.

    What it does:
        Tracks at most one logged-in user, and performs the account
        operations that re-validate credentials before writing.

    Open behaviour, kept as observed in the clinic's application:
        - Disabling the logged-in user does not log them out; the session
          keeps pointing at the now-disabled record.
        - Editing a user's email does not check for collisions unless
          `enforce_unique_email_on_edit` is set.

    Example:
        >>> session = SessionManager(users)
        >>> session.state
        <SessionState.LOGGED_OUT: 'LOGGED_OUT'>
    """

    def __init__(self, users: RecordStore[User], enforce_unique_email_on_edit: bool = False):
        self._users = users
        self._current_user: Optional[User] = None
        self.enforce_unique_email_on_edit = enforce_unique_email_on_edit

    # =========================================================================
    # STAGE 2: STATE
    # =========================================================================

    @property
    def state(self) -> SessionState:
        if self._current_user is None:
            return SessionState.LOGGED_OUT
        return SessionState.LOGGED_IN

    @property
    def current_user(self) -> Optional[User]:
        """Snapshot of the logged-in user, or None."""
        return self._current_user

    @property
    def is_authenticated(self) -> bool:
        return self._current_user is not None

    # =========================================================================
    # STAGE 3: REGISTRATION AND LOOKUP
    # =========================================================================

    def register(
        self,
        name: str,
        badge_number: Optional[int],
        email: str,
        password: str,
        role: str = "",
    ) -> User:
        """
        Create a new enabled user.

        Raises:
            DuplicateEmailError: If the email is taken (nothing is written)
            WriteFailedError: If the users collection cannot be saved
        """
        if self.find_by_email(email) is not None:
            logger.info(f"Registration rejected: email already registered ({email})")
            raise DuplicateEmailError(email)

        user = self._users.append(
            User(name=name, badge_number=badge_number, email=email, password=password, role=role)
        )
        logger.info(f"Registered user id={user.id} ({user.email})")
        return user

    def find_by_email(self, email: str) -> Optional[User]:
        return self._users.find_one(lambda u: u.email == email)

    def authenticate(self, email: str, password: str) -> User:
        """
        Find the user whose email and password both match exactly.

        Disabled users are returned too; callers decide what that means.

        Raises:
            InvalidCredentialsError: If no user matches
        """
        user = self._users.find_one(lambda u: u.email == email and u.password == password)
        if user is None:
            raise InvalidCredentialsError(email)
        return user

    # =========================================================================
    # STAGE 4: LOGIN / LOGOUT
    # =========================================================================

    def login(self, email: str, password: str, reenable: Optional[ReenablePrompt] = None) -> User:
        """
        Log in, re-enabling a disabled account if the caller agrees.

        STAGE 4.1: Reject if a session is already active
        STAGE 4.2: Authenticate
        STAGE 4.3: Disabled account → ask `reenable` for the credentials again
        STAGE 4.4: Transition to LOGGED_IN

        Args:
            email: Login email
            password: Login password
            reenable: Callback for disabled accounts; returns the re-entered
                credentials, or None to decline

        Returns:
            The logged-in user

        Raises:
            AlreadyAuthenticatedError: If a user is already logged in
            InvalidCredentialsError: On no match, or a mismatched re-entry
            AccountDisabledError: If the account is disabled and re-enabling
                was declined or not offered
        """
        # 4.1: Single active session
        if self._current_user is not None:
            raise AlreadyAuthenticatedError(self._current_user.email)

        # 4.2: Authenticate
        user = self.authenticate(email, password)

        # 4.3: Re-enable sub-flow
        if not user.enabled:
            user = self._reenable(user, reenable)

        # 4.4: Transition
        self._current_user = user
        logger.info(f"User id={user.id} logged in")
        return user

    def _reenable(self, user: User, reenable: Optional[ReenablePrompt]) -> User:
        entered = reenable(user) if reenable is not None else None
        if entered is None:
            logger.info(f"Login refused: user id={user.id} is disabled")
            raise AccountDisabledError(user.email)

        if entered.email != user.email or entered.password != user.password:
            logger.info(f"Re-enable refused for user id={user.id}: credentials did not match")
            raise InvalidCredentialsError(user.email)

        def _enable(u: User) -> None:
            u.enabled = True

        enabled = self._users.update(user.id, _enable)
        logger.info(f"User id={user.id} re-enabled")
        return enabled

    def logout(self) -> User:
        """
        End the active session.

        Returns:
            The user who was logged out

        Raises:
            NoActiveSessionError: If nobody is logged in
        """
        if self._current_user is None:
            raise NoActiveSessionError()
        user, self._current_user = self._current_user, None
        logger.info(f"User id={user.id} logged out")
        return user

    # =========================================================================
    # STAGE 5: ACCOUNT CHANGES
    # =========================================================================

    def disable(self, email: str, password: str, confirm: Confirm) -> Optional[User]:
        """
        Disable an account after re-validating credentials and confirming.

        Works in any session state, including on the logged-in user.

        Returns:
            The disabled user, or None if `confirm` declined

        Raises:
            InvalidCredentialsError: If the credentials match no user
        """
        user = self.authenticate(email, password)
        if not confirm(user):
            logger.info(f"Disable of user id={user.id} cancelled")
            return None

        def _disable(u: User) -> None:
            u.enabled = False

        disabled = self._users.update(user.id, _disable)
        self._refresh_session(disabled)
        logger.info(f"User id={user.id} disabled")
        return disabled

    def edit(
        self,
        email: str,
        password: str,
        field: Union[EditableField, str],
        new_value: Any,
        confirm: Confirm,
    ) -> Optional[User]:
        """
        Change one field of an account after re-validating credentials.

        STAGE 5.1: Resolve the field (name, badge_number, email, password)
        STAGE 5.2: Authenticate
        STAGE 5.3: Build and validate the edited record
        STAGE 5.4: Optional email collision check
        STAGE 5.5: Confirm, then persist

        Returns:
            The updated user, or None if `confirm` declined

        Raises:
            UnsupportedFieldError: If `field` is not editable
            InvalidCredentialsError: If the credentials match no user
            InvalidFieldValueError: If the value does not validate
            DuplicateEmailError: On email collision, when enforcement is on
        """
        # 5.1: Resolve field
        try:
            editable = EditableField(field)
        except ValueError:
            raise UnsupportedFieldError(str(field), allowed=[f.value for f in EditableField])

        # 5.2: Authenticate
        user = self.authenticate(email, password)

        # 5.3: Validate the edited record
        try:
            preview = User.model_validate({**user.model_dump(), editable.value: new_value})
        except ValidationError as e:
            raise InvalidFieldValueError(editable.value, new_value, e.errors()[0]["msg"]) from e

        # 5.4: Email collision
        if (
            editable is EditableField.EMAIL
            and self.enforce_unique_email_on_edit
            and preview.email != user.email
            and self.find_by_email(preview.email) is not None
        ):
            raise DuplicateEmailError(preview.email)

        # 5.5: Confirm and persist
        if not confirm(preview):
            logger.info(f"Edit of user id={user.id} cancelled")
            return None

        updated = self._users.update(user.id, lambda _: preview)
        self._refresh_session(updated)
        logger.info(f"User id={user.id} edited field '{editable.value}'")
        return updated

    def _refresh_session(self, user: User) -> None:
        """Keep the session snapshot in step with a changed record."""
        if self._current_user is not None and self._current_user.id == user.id:
            self._current_user = user

    def __repr__(self) -> str:
        return f"SessionManager(state={self.state.value}, user={self._current_user!r})"
