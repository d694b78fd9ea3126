"""
Record Models for Dental Clinic Records

This module defines the record types persisted by the clinic. Every model
is a pydantic BaseModel so that loading a JSON file validates each record
and saving produces the same field order every time.

Attribute names are English; JSON keys are the clinic's existing data-file
keys, declared as aliases. Models accept either form on input and always
serialize by alias.

Model Overview:
    User              → Staff account (email is the natural key)
    Patient           → Patient demographics and clinical lists
    Doctor            → Doctor and specialty
    Schedule          → Weekly availability slot for a doctor
    Appointment       → Patient/doctor visit for a service
    Prescription      → Medication order, nested inside a History
    History           → Per-patient prescription history (keyed by patient)
    ProductOrService  → Priced catalogue entry used for invoicing
    Invoice           → Billed appointment with consumed items and total

Usage:
    from dental_clinic_records.core.models import User

    user = User(name="Ana", badge_number=1001, email="ana@clinic.com", password="pw")
    user.model_dump(mode="json", by_alias=True)

Date: October 2026
"""

from decimal import Decimal
from typing import Any, ClassVar, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from dental_clinic_records.core.enums import ProductKind


# =============================================================================
# STAGE 1: BASE RECORD
# =============================================================================


class Record(BaseModel):
    """
    Common base for all persisted records.

    What it does:
        Enables population by attribute name or alias and declares which
        attribute holds the record's identity. Stores read `id_field`
        instead of assuming every model has an `id` attribute.
    """

    model_config = ConfigDict(populate_by_name=True, validate_assignment=True)

    id_field: ClassVar[str] = "id"

    @property
    def identity(self) -> Optional[int]:
        """Value of this record's identity field."""
        return getattr(self, self.id_field)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the persisted JSON representation."""
        return self.model_dump(mode="json", by_alias=True)


def _unique_in_order(values: List[str]) -> List[str]:
    """Drop repeated strings, keeping first-seen order."""
    seen = set()
    result = []
    for value in values:
        if value not in seen:
            seen.add(value)
            result.append(value)
    return result


def _decimal_to_json(value: Decimal) -> Union[int, float, str]:
    """
    Render a Decimal for JSON without losing digits.

    Integral values become ints and values a float holds exactly become
    floats. Anything finer is written as its decimal string, which loads
    back to the same Decimal.
    """
    if value == value.to_integral_value():
        return int(value)
    as_float = float(value)
    if Decimal(repr(as_float)) == value:
        return as_float
    return str(value)


# =============================================================================
# STAGE 2: ACCOUNTS
# =============================================================================


class User(Record):
    """
    A staff account able to log in.

    Attributes:
        id: Surrogate id, assigned on registration
        name: Display name
        badge_number: Staff badge ("carnet"); null in legacy files where
            the number failed to parse
        email: Natural key used for login
        password: Stored in plaintext, as in the clinic's data files
        enabled: False once the account has been disabled
        role: Free-text role (e.g. "admin", "recepcion")
    """

    id: Optional[int] = Field(default=None, alias="id_usuario")
    name: str = Field(alias="nombre")
    badge_number: Optional[int] = Field(default=None, alias="carnet")
    email: str = Field(alias="correo")
    password: str = Field(alias="clave")
    enabled: bool = Field(default=True, alias="habilitado")
    role: str = Field(default="", alias="rol")

    def __repr__(self) -> str:
        return f"User(id={self.id}, email={self.email!r}, enabled={self.enabled})"

    __str__ = __repr__


# =============================================================================
# STAGE 3: CLINICAL RECORDS
# =============================================================================


class Patient(Record):
    """A registered patient. Has no foreign keys."""

    id: Optional[int] = Field(default=None, alias="id_paciente")
    name: str = Field(alias="nombre")
    birth_date: str = Field(default="", alias="fecha_nacimiento")
    address: str = Field(default="", alias="direccion")
    phone: str = Field(default="", alias="telefono")
    allergies: List[str] = Field(default_factory=list, alias="alergias")
    medications: List[str] = Field(default_factory=list, alias="medicamentos")
    conditions: List[str] = Field(default_factory=list, alias="condiciones")

    @field_validator("allergies", "medications", "conditions")
    @classmethod
    def _dedupe(cls, v: List[str]) -> List[str]:
        return _unique_in_order(v)


class Doctor(Record):
    id: Optional[int] = Field(default=None, alias="id_doctor")
    name: str = Field(alias="nombre")
    specialty: str = Field(default="", alias="especialidad")


class Schedule(Record):
    """
    A weekly availability slot.

    `doctor_id` is not checked against the doctors collection unless the
    caller opts into reference validation.
    """

    id: Optional[int] = Field(default=None, alias="id_horario")
    doctor_id: int = Field(alias="id_doctor")
    day: str = Field(alias="dia")
    start_time: str = Field(alias="hora_inicio")
    end_time: str = Field(alias="hora_fin")


class Appointment(Record):
    id: Optional[int] = Field(default=None, alias="id_cita")
    patient_id: int = Field(alias="id_paciente")
    doctor_id: int = Field(alias="id_doctor")
    date: str = Field(alias="fecha")
    time: str = Field(alias="hora")
    service: str = Field(alias="servicio")


class Prescription(Record):
    id: Optional[int] = Field(default=None, alias="id_receta")
    patient_id: int = Field(alias="id_paciente")
    doctor_id: int = Field(alias="id_doctor")
    medication: str = Field(alias="medicamento")
    dosage: str = Field(default="", alias="dosis")
    frequency: str = Field(default="", alias="frecuencia")
    duration: str = Field(default="", alias="duracion")
    issue_date: str = Field(default="", alias="fecha_emision")


class History(Record):
    """
    Prescription history of one patient.

    Identity is the patient id; one History exists per patient and is
    created on the first prescription.
    """

    id_field: ClassVar[str] = "patient_id"

    patient_id: int = Field(alias="id_paciente")
    prescriptions: List[Prescription] = Field(default_factory=list, alias="recetas")


# =============================================================================
# STAGE 4: BILLING RECORDS
# =============================================================================


class ProductOrService(Record):
    id: Optional[int] = Field(default=None, alias="id_producto")
    name: str = Field(alias="nombre")
    kind: ProductKind = Field(alias="tipo")
    price: Decimal = Field(alias="precio", ge=0)

    @field_serializer("price", when_used="json")
    def _serialize_price(self, value: Decimal) -> Union[int, float, str]:
        return _decimal_to_json(value)


class Invoice(Record):
    """
    A billed appointment.

    `total` is the sum of the matched catalogue prices; names with no
    catalogue match contribute zero.
    """

    id: Optional[int] = Field(default=None, alias="id_factura")
    appointment_id: int = Field(alias="id_cita")
    services: List[str] = Field(default_factory=list, alias="servicios")
    products: List[str] = Field(default_factory=list, alias="productos")
    total: Decimal = Field(default=Decimal(0))

    @field_serializer("total", when_used="json")
    def _serialize_total(self, value: Decimal) -> Union[int, float, str]:
        return _decimal_to_json(value)
