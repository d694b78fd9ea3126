"""
Settings for Dental Clinic Records

This module defines the settings object used to build the record stores,
the session manager and logging. Settings are:
    1. Loaded from environment variables prefixed with DENTAL_ (with .env support)
    2. Validated at startup to fail fast on misconfiguration
    3. Passed explicitly to the components that need them

Settings Groups:
    ClinicSettings
    ├── Storage (data directory, one file name per collection)
    ├── Identity (id strategy, prescription numbering)
    ├── Integrity (opt-in reference validation, email uniqueness on edit)
    └── Logging (level, optional file sink, JSON output)

Usage:
    from dental_clinic_records.core.config import ClinicSettings

    # Load from environment
    settings = ClinicSettings.from_environment()

    # Or configure programmatically
    settings = ClinicSettings(data_dir="tmp/data", validate_references=True)

Date: October 2026
"""

import os
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv
from loguru import logger
from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from dental_clinic_records.core.enums import Collection, IdStrategy, PrescriptionIdMode
from dental_clinic_records.core.exceptions import ConfigurationError


# =============================================================================
# STAGE 1: DEFAULT VALUES
# =============================================================================


class SettingsDefaults:
    """Default settings values."""

    # -------------------------------------------------------------------------
    # 1.1 Storage Defaults
    # -------------------------------------------------------------------------
    DATA_DIR = "data"
    FILE_NAMES = {
        Collection.USERS: "usuarios.json",
        Collection.PATIENTS: "pacientes.json",
        Collection.DOCTORS: "doctores.json",
        Collection.SCHEDULES: "horarios.json",
        Collection.APPOINTMENTS: "citas.json",
        Collection.PRODUCTS_SERVICES: "productos_servicios.json",
        Collection.HISTORIES: "historial.json",
        Collection.INVOICES: "facturas.json",
    }

    # -------------------------------------------------------------------------
    # 1.2 Logging Defaults
    # -------------------------------------------------------------------------
    LOG_LEVEL = "INFO"
    LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")


# =============================================================================
# STAGE 2: SETTINGS CLASS
# =============================================================================


class ClinicSettings(BaseSettings):
    """
    Settings for the dental clinic record-keeping core.

    What it does:
        Holds every tunable parameter: where collections live, how ids
        are assigned, which optional integrity checks are on, and how
        logging is configured.

    Why it exists:
        1. Single source of truth for file locations and behaviour switches
        2. Validated at construction to fail fast
        3. Overridable from the environment without code changes

    Example:
        >>> settings = ClinicSettings(data_dir="/tmp/clinic")
        >>> settings.path_for(Collection.USERS)
        PosixPath('/tmp/clinic/usuarios.json')
    """

    model_config = SettingsConfigDict(
        env_prefix="DENTAL_",
        case_sensitive=False,
        extra="ignore",
    )

    # -------------------------------------------------------------------------
    # 2.1 Storage
    # -------------------------------------------------------------------------
    data_dir: Path = Field(
        default=Path(SettingsDefaults.DATA_DIR),
        description="Directory holding one JSON file per collection",
    )
    users_file: str = SettingsDefaults.FILE_NAMES[Collection.USERS]
    patients_file: str = SettingsDefaults.FILE_NAMES[Collection.PATIENTS]
    doctors_file: str = SettingsDefaults.FILE_NAMES[Collection.DOCTORS]
    schedules_file: str = SettingsDefaults.FILE_NAMES[Collection.SCHEDULES]
    appointments_file: str = SettingsDefaults.FILE_NAMES[Collection.APPOINTMENTS]
    products_services_file: str = SettingsDefaults.FILE_NAMES[Collection.PRODUCTS_SERVICES]
    histories_file: str = SettingsDefaults.FILE_NAMES[Collection.HISTORIES]
    invoices_file: str = SettingsDefaults.FILE_NAMES[Collection.INVOICES]

    # -------------------------------------------------------------------------
    # 2.2 Identity
    # -------------------------------------------------------------------------
    id_strategy: IdStrategy = Field(
        default=IdStrategy.MAX,
        description="How the next surrogate id of a collection is computed",
    )
    prescription_id_mode: PrescriptionIdMode = Field(
        default=PrescriptionIdMode.LITERAL,
        description="Numbering rule for prescriptions inside a History",
    )

    # -------------------------------------------------------------------------
    # 2.3 Integrity
    # -------------------------------------------------------------------------
    validate_references: bool = Field(
        default=False,
        description="Check foreign keys exist before registering dependent records",
    )
    enforce_unique_email_on_edit: bool = Field(
        default=False,
        description="Reject email edits that collide with another user",
    )

    # -------------------------------------------------------------------------
    # 2.4 Logging
    # -------------------------------------------------------------------------
    log_level: str = SettingsDefaults.LOG_LEVEL
    log_file: Optional[Path] = None
    json_logs: bool = Field(
        default=False,
        description="Serialize file log records as JSON lines",
    )

    # -------------------------------------------------------------------------
    # 2.5 Validators
    # -------------------------------------------------------------------------

    @field_validator(
        "users_file",
        "patients_file",
        "doctors_file",
        "schedules_file",
        "appointments_file",
        "products_services_file",
        "histories_file",
        "invoices_file",
    )
    @classmethod
    def validate_file_name(cls, v: str) -> str:
        """File names are plain names inside data_dir."""
        if not v or not v.strip():
            raise ValueError("collection file name cannot be empty")
        if "/" in v or "\\" in v:
            raise ValueError(f"collection file name must not contain a path separator: {v}")
        return v.strip()

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in SettingsDefaults.LOG_LEVELS:
            raise ValueError(f"log_level must be one of {SettingsDefaults.LOG_LEVELS}, got {v}")
        return level

    # -------------------------------------------------------------------------
    # 2.6 Helpers
    # -------------------------------------------------------------------------

    def file_name_for(self, collection: Collection) -> str:
        return getattr(self, f"{Collection(collection).value}_file")

    def path_for(self, collection: Collection) -> Path:
        """Resolve the backing file of a collection."""
        return self.data_dir / self.file_name_for(collection)

    def to_dict(self) -> Dict[str, Any]:
        """Convert settings to a dictionary (for logging/debugging)."""
        return {
            "data_dir": str(self.data_dir),
            "files": {c.value: self.file_name_for(c) for c in Collection},
            "id_strategy": self.id_strategy.value,
            "prescription_id_mode": self.prescription_id_mode.value,
            "validate_references": self.validate_references,
            "enforce_unique_email_on_edit": self.enforce_unique_email_on_edit,
            "log_level": self.log_level,
            "log_file": str(self.log_file) if self.log_file else None,
            "json_logs": self.json_logs,
        }

    # -------------------------------------------------------------------------
    # 2.7 Factory Methods
    # -------------------------------------------------------------------------

    @classmethod
    def from_environment(cls, env_file: Optional[str] = None, **overrides: Any) -> "ClinicSettings":
        """
        Load settings from environment variables.

        STAGE 1: Load .env file (if specified or found)
        STAGE 2: Build and validate settings from DENTAL_* variables
        STAGE 3: Wrap validation failures in ConfigurationError

        Args:
            env_file: Path to .env file (optional, auto-detected if not provided)
            **overrides: Explicit values taking precedence over the environment

        Returns:
            Validated ClinicSettings instance

        Raises:
            ConfigurationError: If the .env file is missing or a value is invalid
        """
        # STAGE 1: Load .env file
        if env_file:
            if not Path(env_file).exists():
                raise ConfigurationError(
                    f".env file not found: {env_file}", context={"env_file": env_file}
                )
            load_dotenv(env_file, override=True)
            logger.debug(f"Loaded environment from {env_file}")
        else:
            possible_locations = [
                Path.cwd() / ".env",
                Path.cwd() / "dental_clinic_records" / ".env",
            ]
            for location in possible_locations:
                if location.exists():
                    load_dotenv(location)
                    logger.debug(f"Loaded environment from {location}")
                    break

        # STAGE 2-3: Build settings
        try:
            return cls(**overrides)
        except ValidationError as e:
            invalid = [".".join(str(p) for p in err["loc"]) for err in e.errors()]
            raise ConfigurationError(
                "Invalid clinic settings",
                context={"fields": invalid, "prefix": "DENTAL_", "cwd": os.getcwd()},
            ) from e
