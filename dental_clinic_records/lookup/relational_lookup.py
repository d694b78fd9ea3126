"""
Relational Lookup - Cross-Collection Reads

Foreign keys in the clinic's collections are plain integers that nothing
enforces. This module composes reads across collections so callers can
resolve those references, validate them before a write when they opt in,
and price the items consumed by an invoice.

Every call reloads its source collections. There is no caching and no
batching.

Pricing:
    Item names are matched exactly against the catalogue by (name, kind).
    A name with no match is priced at zero and only logged. Invoices that
    mention an unknown name therefore total less than expected without any
    error being raised.

Usage:
    lookup = RelationalLookup(patients, doctors, appointments, products)
    details = lookup.appointment_details(3)
    total = lookup.invoice_total(["Limpieza"], ["Hilo dental"])

Date: October 2026
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, List, Optional

from loguru import logger

from dental_clinic_records.core.enums import ProductKind
from dental_clinic_records.core.exceptions import RecordNotFoundError
from dental_clinic_records.core.models import (
    Appointment,
    Doctor,
    Patient,
    ProductOrService,
    Schedule,
)
from dental_clinic_records.repository.record_store import RecordStore


# =============================================================================
# STAGE 1: RESULT TYPES
# =============================================================================


@dataclass(frozen=True)
class AppointmentDetails:
    """
    An appointment with its referenced patient and doctor.

    `patient` or `doctor` is None when the appointment points at an id
    that does not exist.
    """

    appointment: Appointment
    patient: Optional[Patient]
    doctor: Optional[Doctor]

    @property
    def is_complete(self) -> bool:
        return self.patient is not None and self.doctor is not None


@dataclass(frozen=True)
class PricedItem:
    """A consumed item name with its resolved catalogue price."""

    name: str
    kind: ProductKind
    price: Decimal
    matched: bool


# =============================================================================
# STAGE 2: LOOKUP HELPERS
# =============================================================================


class RelationalLookup:
    """
    Read-side joins over the clinic's collections.

    What it does:
        Resolves appointment → patient/doctor, checks that referenced ids
        exist, and prices invoice items against the catalogue.
    """

    def __init__(
        self,
        patients: RecordStore[Patient],
        doctors: RecordStore[Doctor],
        appointments: RecordStore[Appointment],
        products: RecordStore[ProductOrService],
        schedules: Optional[RecordStore[Schedule]] = None,
    ):
        self._patients = patients
        self._doctors = doctors
        self._appointments = appointments
        self._products = products
        self._schedules = schedules

    # =========================================================================
    # STAGE 3: REFERENCE RESOLUTION
    # =========================================================================

    def require_patient(self, patient_id: int) -> Patient:
        patient = self._patients.get(patient_id)
        if patient is None:
            raise RecordNotFoundError(self._patients.collection, patient_id)
        return patient

    def require_doctor(self, doctor_id: int) -> Doctor:
        doctor = self._doctors.get(doctor_id)
        if doctor is None:
            raise RecordNotFoundError(self._doctors.collection, doctor_id)
        return doctor

    def require_appointment(self, appointment_id: int) -> Appointment:
        appointment = self._appointments.get(appointment_id)
        if appointment is None:
            raise RecordNotFoundError(self._appointments.collection, appointment_id)
        return appointment

    def appointment_details(self, appointment_id: int) -> AppointmentDetails:
        """
        Fetch an appointment together with its patient and doctor.

        Raises:
            RecordNotFoundError: If the appointment does not exist
        """
        appointment = self.require_appointment(appointment_id)
        patient = self._patients.get(appointment.patient_id)
        doctor = self._doctors.get(appointment.doctor_id)

        if patient is None:
            logger.warning(
                f"Appointment {appointment_id} references missing patient {appointment.patient_id}"
            )
        if doctor is None:
            logger.warning(
                f"Appointment {appointment_id} references missing doctor {appointment.doctor_id}"
            )
        return AppointmentDetails(appointment=appointment, patient=patient, doctor=doctor)

    def validate_appointment_references(self, patient_id: int, doctor_id: int) -> None:
        """
        Raises:
            RecordNotFoundError: If the patient or the doctor does not exist
        """
        self.require_patient(patient_id)
        self.require_doctor(doctor_id)

    def validate_schedule_reference(self, doctor_id: int) -> None:
        self.require_doctor(doctor_id)

    def schedules_for_doctor(self, doctor_id: int) -> List[Schedule]:
        if self._schedules is None:
            return []
        return self._schedules.find_all(lambda s: s.doctor_id == doctor_id)

    # =========================================================================
    # STAGE 4: PRICING
    # =========================================================================

    def find_catalogue_entry(self, name: str, kind: ProductKind) -> Optional[ProductOrService]:
        kind = ProductKind(kind)
        return self._products.find_one(lambda p: p.name == name and p.kind == kind)

    def resolve_price(self, name: str, kind: ProductKind) -> Decimal:
        """Catalogue price of `name`, or zero when nothing matches."""
        entry = self.find_catalogue_entry(name, kind)
        if entry is None:
            logger.warning(f"No {ProductKind(kind).value} named '{name}' in catalogue; priced at 0")
            return Decimal(0)
        return entry.price

    def price_items(
        self, service_names: Iterable[str], product_names: Iterable[str]
    ) -> List[PricedItem]:
        """
        Price every consumed item, services first, in the order given.

        The catalogue is loaded once for the whole batch.
        """
        catalogue = self._products.load_all()

        def _price(name: str, kind: ProductKind) -> PricedItem:
            entry = next((p for p in catalogue if p.name == name and p.kind == kind), None)
            if entry is None:
                logger.warning(f"No {kind.value} named '{name}' in catalogue; priced at 0")
                return PricedItem(name=name, kind=kind, price=Decimal(0), matched=False)
            return PricedItem(name=name, kind=kind, price=entry.price, matched=True)

        items = [_price(n, ProductKind.SERVICE) for n in service_names]
        items.extend(_price(n, ProductKind.PRODUCT) for n in product_names)
        return items

    def invoice_total(self, service_names: Iterable[str], product_names: Iterable[str]) -> Decimal:
        """Sum of catalogue prices; unmatched names contribute zero."""
        return sum(
            (item.price for item in self.price_items(service_names, product_names)), Decimal(0)
        )
