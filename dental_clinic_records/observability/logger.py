"""
Logging Setup for Dental Clinic Records

WHAT THIS MODULE DOES:
Configures loguru sinks for the record-keeping core. Library modules only
ever call `from loguru import logger`; the host application calls
`configure_logging` once at startup.

HOW IT WORKS:
1. Remove loguru's default stderr handler
2. Add a compact human-readable stderr sink
3. Optionally add a file sink, serialized as JSON lines when requested

Stores bind a `collection` field on every record they emit, so a JSON log
can be filtered per collection.
"""

import sys
from pathlib import Path
from typing import List, Optional, Union

from loguru import logger

from dental_clinic_records.core.config import ClinicSettings


CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "{extra[collection]: <17} | <level>{message}</level>"
)


def configure_logging(
    level: str = "INFO",
    log_file: Optional[Union[str, Path]] = None,
    serialize: bool = False,
) -> List[int]:
    """
    Replace loguru's handlers with the clinic's console and file sinks.

    Args:
        level: Minimum level for the console sink
        log_file: Optional path of a file sink (always DEBUG and above)
        serialize: Write the file sink as JSON lines

    Returns:
        Handler ids, usable with `logger.remove(handler_id)`
    """
    logger.remove()
    logger.configure(extra={"collection": "-"})

    handler_ids = [logger.add(sys.stderr, level=level.upper(), format=CONSOLE_FORMAT)]

    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        handler_ids.append(
            logger.add(path, level="DEBUG", serialize=serialize, encoding="utf-8")
        )

    logger.debug(f"Logging configured | level={level.upper()} | file={log_file}")
    return handler_ids


def configure_from_settings(settings: ClinicSettings) -> List[int]:
    """Configure logging from a ClinicSettings instance."""
    return configure_logging(settings.log_level, settings.log_file, settings.json_logs)
