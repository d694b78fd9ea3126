"""
Dental Clinic Records - Main Facade

This is the PUBLIC API entry point of the record-keeping core. It builds
one record store per collection from the settings, wires the session
manager and the relational lookups, and exposes the clinic's register,
query and invoicing flows as plain method calls.

Architecture Diagram:
    ┌─────────────────────────────────────────────────────────────────┐
    │                          ClinicRecords                          │
    ├─────────────────────────────────────────────────────────────────┤
    │   ┌──────────────┐   ┌──────────────────┐   ┌───────────────┐   │
    │   │SessionManager│   │ RelationalLookup │   │ register/query│   │
    │   └──────┬───────┘   └────────┬─────────┘   └───────┬───────┘   │
    │          └────────────────────┼─────────────────────┘           │
    │                   JsonFileRecordStore × 8                       │
    └─────────────────────────────────────────────────────────────────┘

Collections are independent files. A flow that writes more than one of
them has no transaction: a failure between two writes leaves the first
one in place.

Usage:
    from dental_clinic_records import ClinicRecords

    clinic = ClinicRecords.from_environment()
    clinic.session.login("ana@clinic.com", "secret")
    patient = clinic.register_patient("Luis", birth_date="1990-04-02")
    appointment = clinic.register_appointment(patient.id, 1, "2026-10-20", "09:00", "Limpieza")
    invoice = clinic.generate_invoice(appointment.id, product_names=["Hilo dental"])

Date: October 2026
"""

from decimal import Decimal
from typing import Iterable, List, Optional, Sequence, Type, Union

from loguru import logger

from dental_clinic_records.core.config import ClinicSettings
from dental_clinic_records.core.enums import Collection, PrescriptionIdMode, ProductKind
from dental_clinic_records.core.models import (
    Appointment,
    Doctor,
    History,
    Invoice,
    Patient,
    Prescription,
    ProductOrService,
    Record,
    Schedule,
    User,
)
from dental_clinic_records.lookup.relational_lookup import RelationalLookup
from dental_clinic_records.observability.logger import configure_from_settings
from dental_clinic_records.repository.identity import IdentityAssigner, next_id
from dental_clinic_records.repository.record_store import JsonFileRecordStore
from dental_clinic_records.session.session_manager import SessionManager


# =============================================================================
# STAGE 1: FACADE CLASS
# =============================================================================


class ClinicRecords:
    """
    Entry point for the dental clinic's record keeping.

    What it does:
        Owns the eight collection stores, one SessionManager and one
        RelationalLookup, and implements the register/query/invoice flows
        on top of them.

    Reference validation:
        Foreign keys are accepted as given unless validation is requested,
        per call (`validate_references=True`) or through
        `settings.validate_references`.

    Example:
        >>> clinic = ClinicRecords(ClinicSettings(data_dir="/tmp/clinic"))
        >>> clinic.register_doctor("Dra. Vega", "Endodoncia").id
        1
    """

    def __init__(self, settings: Optional[ClinicSettings] = None):
        """
        STAGE 1.1: Keep settings
        STAGE 1.2: Build one store per collection
        STAGE 1.3: Wire session manager and lookups
        """
        # 1.1: Settings
        self._settings = settings or ClinicSettings()
        identity = IdentityAssigner(self._settings.id_strategy)

        # 1.2: Stores
        def _store(model: Type[Record], collection: Collection) -> JsonFileRecordStore:
            return JsonFileRecordStore(
                model, self._settings.path_for(collection), collection.value, identity
            )

        self._users = _store(User, Collection.USERS)
        self._patients = _store(Patient, Collection.PATIENTS)
        self._doctors = _store(Doctor, Collection.DOCTORS)
        self._schedules = _store(Schedule, Collection.SCHEDULES)
        self._appointments = _store(Appointment, Collection.APPOINTMENTS)
        self._products_services = _store(ProductOrService, Collection.PRODUCTS_SERVICES)
        self._histories = _store(History, Collection.HISTORIES)
        self._invoices = _store(Invoice, Collection.INVOICES)

        # 1.3: Session and lookups
        self._session = SessionManager(
            self._users,
            enforce_unique_email_on_edit=self._settings.enforce_unique_email_on_edit,
        )
        self._lookup = RelationalLookup(
            self._patients,
            self._doctors,
            self._appointments,
            self._products_services,
            self._schedules,
        )

        logger.info(f"ClinicRecords initialized | data_dir={self._settings.data_dir}")

    @classmethod
    def from_environment(
        cls, env_file: Optional[str] = None, setup_logging: bool = False
    ) -> "ClinicRecords":
        """
        Build from DENTAL_* environment variables (and an optional .env).

        Args:
            env_file: Path to .env file (auto-detected if not provided)
            setup_logging: Also install the console/file log sinks from settings
        """
        settings = ClinicSettings.from_environment(env_file)
        if setup_logging:
            configure_from_settings(settings)
        return cls(settings)

    def _should_validate(self, validate_references: Optional[bool]) -> bool:
        if validate_references is None:
            return self._settings.validate_references
        return validate_references

    # =========================================================================
    # STAGE 2: REGISTRATION FLOWS
    # =========================================================================

    def register_patient(
        self,
        name: str,
        birth_date: str = "",
        address: str = "",
        phone: str = "",
        allergies: Sequence[str] = (),
        medications: Sequence[str] = (),
        conditions: Sequence[str] = (),
    ) -> Patient:
        patient = Patient(
            name=name,
            birth_date=birth_date,
            address=address,
            phone=phone,
            allergies=list(allergies),
            medications=list(medications),
            conditions=list(conditions),
        )
        return self._patients.append(patient)

    def register_doctor(self, name: str, specialty: str = "") -> Doctor:
        return self._doctors.append(Doctor(name=name, specialty=specialty))

    def register_schedule(
        self,
        doctor_id: int,
        day: str,
        start_time: str,
        end_time: str,
        validate_references: Optional[bool] = None,
    ) -> Schedule:
        """
        Add a weekly slot for a doctor.

        Raises:
            RecordNotFoundError: If validating and the doctor does not exist
        """
        if self._should_validate(validate_references):
            self._lookup.validate_schedule_reference(doctor_id)
        return self._schedules.append(
            Schedule(doctor_id=doctor_id, day=day, start_time=start_time, end_time=end_time)
        )

    def register_appointment(
        self,
        patient_id: int,
        doctor_id: int,
        date: str,
        time: str,
        service: str,
        validate_references: Optional[bool] = None,
    ) -> Appointment:
        """
        Book an appointment.

        Raises:
            RecordNotFoundError: If validating and the patient or doctor is missing
        """
        if self._should_validate(validate_references):
            self._lookup.validate_appointment_references(patient_id, doctor_id)
        return self._appointments.append(
            Appointment(
                patient_id=patient_id, doctor_id=doctor_id, date=date, time=time, service=service
            )
        )

    def register_product_or_service(
        self, name: str, kind: Union[ProductKind, str], price: Union[Decimal, int, float, str]
    ) -> ProductOrService:
        if isinstance(kind, str) and not isinstance(kind, ProductKind):
            kind = ProductKind.from_string(kind)
        return self._products_services.append(
            ProductOrService(name=name, kind=kind, price=Decimal(str(price)))
        )

    # =========================================================================
    # STAGE 3: PRESCRIPTIONS AND HISTORY
    # =========================================================================

    def issue_prescription(
        self,
        patient_id: int,
        doctor_id: int,
        medication: str,
        dosage: str = "",
        frequency: str = "",
        duration: str = "",
        issue_date: str = "",
        validate_references: Optional[bool] = None,
    ) -> Prescription:
        """
        Append a prescription to the patient's History, creating it if needed.

        STAGE 3.1: Optional reference validation
        STAGE 3.2: Number the prescription (settings.prescription_id_mode)
        STAGE 3.3: Append to the patient's History and save all histories

        Raises:
            RecordNotFoundError: If validating and the patient or doctor is missing
        """
        # 3.1: Validation
        if self._should_validate(validate_references):
            self._lookup.validate_appointment_references(patient_id, doctor_id)

        # 3.2: Numbering
        histories = self._histories.load_for_update()
        prescription = Prescription(
            id=self._next_prescription_id(histories),
            patient_id=patient_id,
            doctor_id=doctor_id,
            medication=medication,
            dosage=dosage,
            frequency=frequency,
            duration=duration,
            issue_date=issue_date,
        )

        # 3.3: Append
        history = next((h for h in histories if h.patient_id == patient_id), None)
        if history is None:
            history = History(patient_id=patient_id)
            histories.append(history)
            logger.info(f"Created prescription history for patient {patient_id}")
        history.prescriptions.append(prescription)

        self._histories.save_all(histories)
        logger.info(f"Issued prescription id={prescription.id} for patient {patient_id}")
        return prescription

    def _next_prescription_id(self, histories: List[History]) -> int:
        if self._settings.prescription_id_mode is PrescriptionIdMode.SEQUENTIAL:
            return next_id(p.id for h in histories for p in h.prescriptions if p.id is not None)
        # Reproduces the clinic's numbering: last history's patient id + 1
        return histories[-1].patient_id + 1 if histories else 1

    def history_for_patient(self, patient_id: int) -> Optional[History]:
        return self._histories.get(patient_id)

    # =========================================================================
    # STAGE 4: QUERIES
    # =========================================================================

    def appointments_for_patient(self, patient_id: int) -> List[Appointment]:
        return self._appointments.find_all(lambda a: a.patient_id == patient_id)

    def appointments_for_doctor(self, doctor_id: int) -> List[Appointment]:
        return self._appointments.find_all(lambda a: a.doctor_id == doctor_id)

    def schedules_for_doctor(self, doctor_id: int) -> List[Schedule]:
        return self._lookup.schedules_for_doctor(doctor_id)

    def invoices_for_appointment(self, appointment_id: int) -> List[Invoice]:
        return self._invoices.find_all(lambda i: i.appointment_id == appointment_id)

    # =========================================================================
    # STAGE 5: INVOICING
    # =========================================================================

    def generate_invoice(
        self,
        appointment_id: int,
        product_names: Union[str, Iterable[str]] = (),
        service_names: Optional[Union[str, Iterable[str]]] = None,
    ) -> Invoice:
        """
        Bill an appointment.

        The appointment's own service is billed unless `service_names` is
        given. Names missing from the catalogue are priced at zero.
        A single name may be passed as a plain string.

        Raises:
            RecordNotFoundError: If the appointment does not exist
        """
        appointment = self._lookup.require_appointment(appointment_id)
        services = _names(service_names) if service_names is not None else [appointment.service]
        products = _names(product_names)

        total = self._lookup.invoice_total(services, products)
        invoice = self._invoices.append(
            Invoice(appointment_id=appointment_id, services=services, products=products, total=total)
        )
        logger.info(f"Generated invoice id={invoice.id} for appointment {appointment_id} | total={total}")
        return invoice

    # =========================================================================
    # STAGE 6: ACCESSORS
    # =========================================================================

    @property
    def settings(self) -> ClinicSettings:
        return self._settings

    @property
    def session(self) -> SessionManager:
        return self._session

    @property
    def lookup(self) -> RelationalLookup:
        return self._lookup

    @property
    def users(self) -> JsonFileRecordStore:
        return self._users

    @property
    def patients(self) -> JsonFileRecordStore:
        return self._patients

    @property
    def doctors(self) -> JsonFileRecordStore:
        return self._doctors

    @property
    def schedules(self) -> JsonFileRecordStore:
        return self._schedules

    @property
    def appointments(self) -> JsonFileRecordStore:
        return self._appointments

    @property
    def products_services(self) -> JsonFileRecordStore:
        return self._products_services

    @property
    def histories(self) -> JsonFileRecordStore:
        return self._histories

    @property
    def invoices(self) -> JsonFileRecordStore:
        return self._invoices


def _names(names: Union[str, Iterable[str]]) -> List[str]:
    """A bare string is one item name, not a sequence of characters."""
    if isinstance(names, str):
        return [names]
    return list(names)
