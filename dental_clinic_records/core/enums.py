"""
Enumerations for Dental Clinic Records

This module defines the enumeration types shared by every layer of the
record-keeping core. Enums provide:
    1. Type safety for categorical values
    2. Stable string values for the persisted JSON files
    3. Clear domain semantics

Enumeration Categories:
    Collection          → Named record collections (one file each)
    ProductKind         → Whether a billable item is a product or a service
    SessionState        → States of the authentication state machine
    EditableField       → User fields that may be edited after registration
    IdStrategy          → How the next surrogate id is computed
    PrescriptionIdMode  → How prescription ids are numbered
    LoadFailureReason   → Why a collection could not be loaded

Date: October 2026
"""

from enum import Enum


# =============================================================================
# STAGE 1: COLLECTION ENUMERATION
# =============================================================================
# Every collection is persisted independently as a single JSON array.


class Collection(str, Enum):
    """
    Named record collections managed by the clinic.

    What it does:
        Identifies each homogeneous collection so that stores, settings
        and error messages refer to collections by one canonical name.
    """

    USERS = "users"
    PATIENTS = "patients"
    DOCTORS = "doctors"
    SCHEDULES = "schedules"
    APPOINTMENTS = "appointments"
    PRODUCTS_SERVICES = "products_services"
    HISTORIES = "histories"
    INVOICES = "invoices"


# =============================================================================
# STAGE 2: PRODUCT KIND ENUMERATION
# =============================================================================
# Values match the clinic's existing data files.


class ProductKind(str, Enum):
    """
    Kind of a billable catalogue entry.

    Invoice totals resolve prices by exact (name, kind) match, so a
    product and a service may share a name without colliding.
    """

    PRODUCT = "producto"
    SERVICE = "servicio"

    @classmethod
    def from_string(cls, value: str) -> "ProductKind":
        """
        Convert a string to ProductKind, accepting member names or values.

        Raises:
            ValueError: If the string matches no kind
        """
        normalized = value.strip().lower()
        for kind in cls:
            if kind.value == normalized or kind.name.lower() == normalized:
                return kind
        raise ValueError(
            f"Unknown product kind: '{value}'. Valid kinds: {[k.value for k in cls]}"
        )


# =============================================================================
# STAGE 3: SESSION STATE ENUMERATION
# =============================================================================


class SessionState(str, Enum):
    """States of the single-slot authentication state machine."""

    LOGGED_OUT = "LOGGED_OUT"
    LOGGED_IN = "LOGGED_IN"


# =============================================================================
# STAGE 4: EDITABLE FIELD ENUMERATION
# =============================================================================
# Values are the User model attribute names.


class EditableField(str, Enum):
    """User attributes that can be changed through the edit flow."""

    NAME = "name"
    BADGE_NUMBER = "badge_number"
    EMAIL = "email"
    PASSWORD = "password"


# =============================================================================
# STAGE 5: IDENTITY STRATEGY ENUMERATION
# =============================================================================


class IdStrategy(str, Enum):
    """
    Strategies for computing the next surrogate id of a collection.

    MAX:
        1 + the maximum existing id. Safe regardless of record order.

    LAST:
        1 + the id of the last record. Only correct when ids were assigned
        in increasing order and the collection was never reordered.
    """

    MAX = "max"
    LAST = "last"


# =============================================================================
# STAGE 6: PRESCRIPTION ID MODE ENUMERATION
# =============================================================================


class PrescriptionIdMode(str, Enum):
    """
    Numbering rule for prescriptions appended to a patient's History.

    LITERAL:
        Patient id of the last History record + 1 (1 when no History
        exists). Conflates the grouping key with the prescription id, kept
        so existing data files continue to number the same way.

    SEQUENTIAL:
        1 + the maximum prescription id across every History.
    """

    LITERAL = "literal"
    SEQUENTIAL = "sequential"


# =============================================================================
# STAGE 7: LOAD FAILURE REASON ENUMERATION
# =============================================================================


class LoadFailureReason(str, Enum):
    """Why a collection load degraded to an empty list."""

    MISSING = "missing"
    """The backing file does not exist."""

    UNREADABLE = "unreadable"
    """The file exists but could not be read (permissions, I/O error)."""

    CORRUPT = "corrupt"
    """The file was read but is not a valid array of records."""
