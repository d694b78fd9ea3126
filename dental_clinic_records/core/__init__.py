"""
Core Layer - Record Models, Enums, Settings and Exceptions

This layer contains the pure building blocks of the clinic's record
keeping. It performs no file I/O of its own.

Submodules:
    models.py     → Record types (User, Patient, ..., Invoice)
    enums.py      → Enumerations (Collection, ProductKind, SessionState, ...)
    config.py     → ClinicSettings
    exceptions.py → Domain-specific exceptions

Dependency Rule:
    This layer depends on NOTHING else in the package.
    All other layers may depend on this layer.

Date: October 2026
"""

from dental_clinic_records.core.models import (
    Record,
    User,
    Patient,
    Doctor,
    Schedule,
    Appointment,
    Prescription,
    History,
    ProductOrService,
    Invoice,
)
from dental_clinic_records.core.enums import (
    Collection,
    ProductKind,
    SessionState,
    EditableField,
    IdStrategy,
    PrescriptionIdMode,
    LoadFailureReason,
)
from dental_clinic_records.core.config import ClinicSettings
from dental_clinic_records.core.exceptions import (
    ClinicRecordsError,
    ConfigurationError,
    StoreError,
    ReadFailedError,
    WriteFailedError,
    RecordNotFoundError,
    DuplicateIdError,
    RegistrationError,
    DuplicateEmailError,
    RecordEditError,
    UnsupportedFieldError,
    InvalidFieldValueError,
    AuthError,
    InvalidCredentialsError,
    AccountDisabledError,
    AlreadyAuthenticatedError,
    NoActiveSessionError,
)

__all__ = [
    # Models
    "Record",
    "User",
    "Patient",
    "Doctor",
    "Schedule",
    "Appointment",
    "Prescription",
    "History",
    "ProductOrService",
    "Invoice",
    # Enums
    "Collection",
    "ProductKind",
    "SessionState",
    "EditableField",
    "IdStrategy",
    "PrescriptionIdMode",
    "LoadFailureReason",
    # Settings
    "ClinicSettings",
    # Exceptions
    "ClinicRecordsError",
    "ConfigurationError",
    "StoreError",
    "ReadFailedError",
    "WriteFailedError",
    "RecordNotFoundError",
    "DuplicateIdError",
    "RegistrationError",
    "DuplicateEmailError",
    "RecordEditError",
    "UnsupportedFieldError",
    "InvalidFieldValueError",
    "AuthError",
    "InvalidCredentialsError",
    "AccountDisabledError",
    "AlreadyAuthenticatedError",
    "NoActiveSessionError",
]
