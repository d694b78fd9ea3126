"""
Dental Clinic Records

Record keeping for a dental clinic: staff accounts and sessions, patients,
doctors, schedules, appointments, prescription histories, a priced
catalogue and invoices, each collection persisted as one JSON file.

Architecture Overview:
    dental_clinic_records/
    ├── core/           → Record models, enums, settings, exceptions (Layer 0)
    ├── observability/  → loguru configuration (Layer 1)
    ├── repository/     → Record store + identity assignment (Layer 1)
    ├── session/        → Authentication state machine (Layer 2)
    ├── lookup/         → Cross-collection reads and pricing (Layer 2)
    └── clinic.py       → ClinicRecords facade (Layer 3 - Public API)

Quick Start:
    from dental_clinic_records import ClinicRecords

    clinic = ClinicRecords.from_environment()
    clinic.session.register("Ana", 1001, "ana@clinic.com", "secret")
    clinic.session.login("ana@clinic.com", "secret")

Date: October 2026
"""

__version__ = "1.0.0"

# =============================================================================
# PUBLIC API EXPORTS
# =============================================================================

# Main Entry Point
from dental_clinic_records.clinic import ClinicRecords

# Building Blocks
from dental_clinic_records.repository import IdentityAssigner, JsonFileRecordStore, next_id
from dental_clinic_records.session import Credentials, SessionManager
from dental_clinic_records.lookup import RelationalLookup

# Models
from dental_clinic_records.core.models import (
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

# Enums
from dental_clinic_records.core.enums import (
    ProductKind,
    SessionState,
    EditableField,
    IdStrategy,
    PrescriptionIdMode,
    LoadFailureReason,
)

# Settings
from dental_clinic_records.core.config import ClinicSettings

__all__ = [
    # Main Entry Point
    "ClinicRecords",
    # Building Blocks
    "IdentityAssigner",
    "JsonFileRecordStore",
    "next_id",
    "Credentials",
    "SessionManager",
    "RelationalLookup",
    # Models
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
    "ProductKind",
    "SessionState",
    "EditableField",
    "IdStrategy",
    "PrescriptionIdMode",
    "LoadFailureReason",
    # Settings
    "ClinicSettings",
]
