"""
Domain Exceptions for Dental Clinic Records

This module defines the custom exceptions used across the record store,
the session manager and the relational lookups. Every condition is
non-fatal to the process: callers decide whether to retry, report or exit.

Exception Hierarchy:
    ClinicRecordsError (base)
    ├── ConfigurationError          → Invalid settings
    ├── StoreError                  → Persistence failures
    │   ├── ReadFailedError         → Recorded on load, never raised by load_all
    │   ├── WriteFailedError
    │   ├── RecordNotFoundError
    │   └── DuplicateIdError
    ├── RegistrationError
    │   └── DuplicateEmailError
    ├── RecordEditError
    │   ├── UnsupportedFieldError
    │   └── InvalidFieldValueError
    └── AuthError
        ├── InvalidCredentialsError
        │   └── AccountDisabledError
        ├── AlreadyAuthenticatedError
        └── NoActiveSessionError

Usage:
    from dental_clinic_records.core.exceptions import RecordNotFoundError

    try:
        store.update(42, mutator)
    except RecordNotFoundError as e:
        logger.warning(f"No record with id {e.value}")

Date: October 2026
"""

from typing import Any, Optional

from dental_clinic_records.core.enums import LoadFailureReason


# =============================================================================
# STAGE 1: BASE EXCEPTION
# =============================================================================


class ClinicRecordsError(Exception):
    """
    Base exception for all dental clinic record errors.

    Attributes:
        message: Human-readable error description
        context: Dictionary of additional context for debugging
    """

    def __init__(self, message: str, context: Optional[dict] = None):
        self.message = message
        self.context = context or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format message with context for display."""
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} [{context_str}]"
        return self.message


class ConfigurationError(ClinicRecordsError):
    """Settings are invalid or inconsistent."""

    pass


# =============================================================================
# STAGE 2: STORE ERRORS
# =============================================================================


class StoreError(ClinicRecordsError):
    """
    Base exception for record store failures.

    Attributes:
        collection: Name of the collection involved
    """

    def __init__(self, message: str, collection: str, context: Optional[dict] = None):
        self.collection = collection
        super().__init__(message, context={"collection": collection, **(context or {})})


class ReadFailedError(StoreError):
    """
    A collection could not be loaded.

    What it does:
        Describes why a load degraded to an empty collection. Stores keep
        the most recent one on `last_load_error` instead of raising it, so
        callers and tests can tell a missing file from a corrupt one.

    Attributes:
        path: Path of the backing file
        reason: LoadFailureReason (MISSING, UNREADABLE, CORRUPT)
        detail: Underlying error text
    """

    def __init__(self, collection: str, path: str, reason: LoadFailureReason, detail: str = ""):
        self.path = path
        self.reason = reason
        self.detail = detail
        super().__init__(
            f"Failed to load {collection} from {path}: {reason.value}",
            collection=collection,
            context={"path": path, "reason": reason.value, "detail": detail or None},
        )


class WriteFailedError(StoreError):
    """
    A collection could not be written.

    The caller's in-memory view is not rolled back; a failed save leaves
    the persisted file as it was before the attempt (or truncated, if the
    operating system failed mid-write).
    """

    def __init__(self, collection: str, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(
            f"Failed to save {collection} to {path}: {reason}",
            collection=collection,
            context={"path": path},
        )


class RecordNotFoundError(StoreError):
    """
    No record matched a lookup by key.

    Attributes:
        key: Name of the field searched (e.g. "id", "email")
        value: The value that was not found
    """

    def __init__(self, collection: str, value: Any, key: str = "id"):
        self.key = key
        self.value = value
        super().__init__(
            f"No {collection} record with {key}={value}",
            collection=collection,
            context={"key": key, "value": value},
        )


class DuplicateIdError(StoreError):
    """
    A record was appended with an identity the collection already holds.

    Attributes:
        key: Name of the identity field (e.g. "id", "patient_id")
        value: The colliding identity
    """

    def __init__(self, collection: str, value: Any, key: str = "id"):
        self.key = key
        self.value = value
        super().__init__(
            f"A {collection} record with {key}={value} already exists",
            collection=collection,
            context={"key": key, "value": value},
        )


# =============================================================================
# STAGE 3: REGISTRATION AND EDIT ERRORS
# =============================================================================


class RegistrationError(ClinicRecordsError):
    """A new record was rejected before being written."""

    pass


class DuplicateEmailError(RegistrationError):
    """A user with this email already exists."""

    def __init__(self, email: str):
        self.email = email
        super().__init__(f"A user with email {email} already exists", context={"email": email})


class RecordEditError(ClinicRecordsError):
    """An edit request could not be applied."""

    pass


class UnsupportedFieldError(RecordEditError):
    """The requested field is not editable."""

    def __init__(self, field: str, allowed: Optional[list] = None):
        self.field = field
        super().__init__(
            f"Field '{field}' cannot be edited",
            context={"field": field, "allowed": allowed},
        )


class InvalidFieldValueError(RecordEditError):
    """The new value does not validate for the field."""

    def __init__(self, field: str, value: Any, reason: str):
        self.field = field
        self.value = value
        super().__init__(
            f"Invalid value for '{field}': {reason}",
            context={"field": field, "value": value},
        )


# =============================================================================
# STAGE 4: AUTHENTICATION ERRORS
# =============================================================================


class AuthError(ClinicRecordsError):
    """Base exception for session and credential errors."""

    pass


class InvalidCredentialsError(AuthError):
    """
    Email and password matched no user.

    The password is never included in the message or context.
    """

    def __init__(self, email: str, message: Optional[str] = None):
        self.email = email
        super().__init__(message or "Incorrect email or password", context={"email": email})


class AccountDisabledError(InvalidCredentialsError):
    """Credentials matched a disabled user and re-enabling was declined."""

    def __init__(self, email: str):
        super().__init__(email, message="Account is disabled and was not re-enabled")


class AlreadyAuthenticatedError(AuthError):
    """A login was attempted while a session is active."""

    def __init__(self, email: str):
        self.email = email
        super().__init__(
            "A session is already active; log out first",
            context={"active_user": email},
        )


class NoActiveSessionError(AuthError):
    """A logout was attempted with no active session."""

    def __init__(self):
        super().__init__("No active session")
