from dental_clinic_records.observability.logger import configure_logging, configure_from_settings

__all__ = ["configure_logging", "configure_from_settings"]
