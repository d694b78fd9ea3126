"""
Record Store - Collection Persistence Abstraction

This module provides the one persistence abstraction every entity type
builds on: a homogeneous collection of records kept as a single JSON array
in a single file.

Architecture:
    RecordStore (Protocol)
    └── JsonFileRecordStore  → One JSON file per collection

Behaviour:
    1. Every operation reloads the whole file; there is no cache and no index
    2. Every mutation rewrites the whole file
    3. Loading never raises: a missing or corrupt file is an empty
       collection, and the reason is kept on `last_load_error`
    4. Saving raises WriteFailedError; the caller decides whether to retry

Concurrency:
    Mutations are unprotected read-modify-write cycles. Two writers sharing
    a file can lose each other's records or assign the same id. Callers that
    introduce concurrent writers must serialize access per collection.

Pipeline Position:
    Settings → [RecordStore] → SessionManager / RelationalLookup → ClinicRecords
               ^^^^^^^^^^^^^
               You are here

Usage:
    from dental_clinic_records.core.models import Doctor
    from dental_clinic_records.repository import JsonFileRecordStore

    doctors = JsonFileRecordStore(Doctor, "data/doctores.json", collection="doctors")
    doctor = doctors.append(Doctor(name="Dr. Ruiz", specialty="Ortodoncia"))
    doctors.find_one(lambda d: d.specialty == "Ortodoncia")

Date: October 2026
"""

import json
from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path
from typing import (
    Callable,
    Generic,
    List,
    Optional,
    Protocol,
    Sequence,
    Type,
    TypeVar,
    Union,
    runtime_checkable,
)

from loguru import logger
from pydantic import ValidationError

from dental_clinic_records.core.enums import LoadFailureReason
from dental_clinic_records.core.exceptions import (
    DuplicateIdError,
    ReadFailedError,
    RecordNotFoundError,
    WriteFailedError,
)
from dental_clinic_records.core.models import Record
from dental_clinic_records.repository.identity import IdentityAssigner


RecordT = TypeVar("RecordT", bound=Record)

Predicate = Callable[[RecordT], bool]
Mutator = Callable[[RecordT], Optional[RecordT]]


# =============================================================================
# STAGE 1: LOAD RESULT
# =============================================================================


@dataclass
class LoadResult(Generic[RecordT]):
    """
    Records from a load together with the reason it degraded, if it did.

    Attributes:
        records: Loaded records (empty when `error` is set)
        error: ReadFailedError describing a missing/unreadable/corrupt file
    """

    records: List[RecordT]
    error: Optional[ReadFailedError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


# =============================================================================
# STAGE 2: STORE PROTOCOL (INTERFACE)
# =============================================================================


@runtime_checkable
class RecordStore(Protocol[RecordT]):
    """
    Protocol defining the interface of a single-collection record store.

    Required Methods:
        load_all()              → Every record, in insertion order
        save_all(records)       → Overwrite the collection
        append(record)          → Assign identity and add one record
        find_one(predicate)     → First match or None (O(n))
        find_all(predicate)     → All matches in insertion order (O(n))
        get(record_id)          → Lookup by identity (O(n))
        update(record_id, fn)   → Mutate one record by identity
    """

    collection: str

    def load_all(self) -> List[RecordT]:
        ...

    def save_all(self, records: Sequence[RecordT]) -> None:
        ...

    def append(self, record: RecordT) -> RecordT:
        ...

    def find_one(self, predicate: Predicate) -> Optional[RecordT]:
        ...

    def find_all(self, predicate: Predicate) -> List[RecordT]:
        ...

    def get(self, record_id: int) -> Optional[RecordT]:
        ...

    def update(self, record_id: int, mutator: Mutator) -> RecordT:
        ...


# =============================================================================
# STAGE 3: JSON FILE STORE IMPLEMENTATION
# =============================================================================


class JsonFileRecordStore(Generic[RecordT]):
    """
    Record store backed by one JSON file holding an array of records.

    What it does:
        Loads, validates and rewrites a whole collection on every call,
        assigning surrogate ids through an IdentityAssigner.

    Performance:
        - Every operation: O(n) file read + parse
        - Every mutation: O(n) serialize + write
        - Adequate for a single clinic's records; there is no index

    Example:
        >>> store = JsonFileRecordStore(Patient, "data/pacientes.json", "patients")
        >>> p = store.append(Patient(name="Luis"))
        >>> p.id
        1
    """

    def __init__(
        self,
        model: Type[RecordT],
        path: Union[str, Path],
        collection: Optional[str] = None,
        identity: Optional[IdentityAssigner] = None,
    ):
        """
        Args:
            model: Record class of this collection
            path: Backing JSON file (created on first save)
            collection: Name used in logs and errors (defaults to file stem)
            identity: Id assigner (defaults to IdStrategy.MAX)
        """
        self.model = model
        self.path = Path(path)
        self.collection = collection or self.path.stem
        self.identity = identity or IdentityAssigner()
        self.last_load_error: Optional[ReadFailedError] = None
        self._log = logger.bind(collection=self.collection)

    @property
    def id_field(self) -> str:
        return self.model.id_field

    # =========================================================================
    # STAGE 4: LOADING
    # =========================================================================

    def load_all_with_status(self) -> LoadResult[RecordT]:
        """
        Load the collection, returning the failure reason inline.

        STAGE 4.1: Missing file → MISSING
        STAGE 4.2: OS error on read → UNREADABLE
        STAGE 4.3: Invalid JSON, non-array, or invalid record → CORRUPT
        """
        # 4.1: Missing file
        if not self.path.exists():
            return self._load_failed(LoadFailureReason.MISSING, "file does not exist")

        # 4.2: Read
        try:
            raw_text = self.path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            return self._load_failed(LoadFailureReason.UNREADABLE, str(e))

        # 4.3: Parse and validate
        try:
            raw_data = json.loads(raw_text, parse_float=Decimal)
        except json.JSONDecodeError as e:
            return self._load_failed(LoadFailureReason.CORRUPT, f"invalid JSON: {e}")

        if not isinstance(raw_data, list):
            return self._load_failed(
                LoadFailureReason.CORRUPT,
                f"expected a JSON array, got {type(raw_data).__name__}",
            )

        try:
            records = [self.model.model_validate(item) for item in raw_data]
        except ValidationError as e:
            return self._load_failed(
                LoadFailureReason.CORRUPT, f"{e.error_count()} invalid field(s): {e.errors()[0]['msg']}"
            )

        self.last_load_error = None
        self._log.debug(f"Loaded {len(records)} records from {self.path}")
        return LoadResult(records=records)

    def load_all(self) -> List[RecordT]:
        """Every record in insertion order; empty if the file cannot be loaded."""
        return self.load_all_with_status().records

    def _load_failed(self, reason: LoadFailureReason, detail: str) -> LoadResult[RecordT]:
        error = ReadFailedError(self.collection, str(self.path), reason, detail)
        self.last_load_error = error
        if reason is LoadFailureReason.MISSING:
            self._log.debug(f"No file at {self.path}; treating collection as empty")
        else:
            self._log.warning(f"{error}; treating collection as empty")
        return LoadResult(records=[], error=error)

    # =========================================================================
    # STAGE 5: SAVING
    # =========================================================================

    def save_all(self, records: Sequence[RecordT]) -> None:
        """
        Overwrite the collection with `records`.

        Serialization happens before the file is opened, so a record that
        cannot be serialized leaves the existing file untouched.

        Raises:
            WriteFailedError: If serialization or the write fails
        """
        try:
            payload = json.dumps(
                [record.to_dict() for record in records], indent=2, ensure_ascii=False
            )
        except (TypeError, ValueError) as e:
            raise WriteFailedError(self.collection, str(self.path), f"serialization failed: {e}") from e

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(payload + "\n", encoding="utf-8")
        except OSError as e:
            self._log.error(f"Could not write {self.path}: {e}")
            raise WriteFailedError(self.collection, str(self.path), str(e)) from e

        self._log.debug(f"Saved {len(records)} records to {self.path}")

    # =========================================================================
    # STAGE 6: MUTATIONS
    # =========================================================================

    def append(self, record: RecordT) -> RecordT:
        """
        Assign an id (when unset), add the record and save the collection.

        An explicit id is kept only if no stored record already has it.

        Returns:
            The stored copy of the record, with its id assigned

        Raises:
            DuplicateIdError: If the explicit id is already taken (nothing is written)
            WriteFailedError: If the collection cannot be saved
        """
        records = self.load_for_update()

        stored = record.model_copy(deep=True)
        if stored.identity is None:
            setattr(stored, self.id_field, self.identity.next_for(records, self.id_field))
        elif any(r.identity == stored.identity for r in records):
            raise DuplicateIdError(self.collection, stored.identity, key=self.id_field)

        records.append(stored)
        self.save_all(records)
        self._log.info(f"Appended record {self.id_field}={stored.identity}")
        return stored

    def update(self, record_id: int, mutator: Mutator) -> RecordT:
        """
        Apply `mutator` to the record with `record_id` and save.

        The mutator receives a copy and may either modify it in place
        (returning None) or return a replacement record.

        Raises:
            RecordNotFoundError: If no record has this id (nothing is written)
            WriteFailedError: If the collection cannot be saved
        """
        records = self.load_for_update()

        for index, current in enumerate(records):
            if current.identity == record_id:
                break
        else:
            raise RecordNotFoundError(self.collection, record_id, key=self.id_field)

        candidate = current.model_copy(deep=True)
        replacement = mutator(candidate)
        updated = replacement if replacement is not None else candidate
        updated = self.model.model_validate(updated.model_dump())

        records[index] = updated
        self.save_all(records)
        self._log.info(f"Updated record {self.id_field}={record_id}")
        return updated

    def load_for_update(self) -> List[RecordT]:
        """
        Load the collection ahead of a rewrite.

        Same as load_all, but warns when a file that exists could not be
        loaded, since saving the result replaces its contents.
        """
        result = self.load_all_with_status()
        if result.error is not None and result.error.reason is not LoadFailureReason.MISSING:
            self._log.warning(
                f"Overwriting {self.path} after a failed load ({result.error.reason.value}); "
                f"previous contents will be lost"
            )
        return result.records

    # =========================================================================
    # STAGE 7: QUERIES
    # =========================================================================

    def find_one(self, predicate: Predicate) -> Optional[RecordT]:
        """First record matching `predicate` in insertion order (O(n) scan)."""
        return next((r for r in self.load_all() if predicate(r)), None)

    def find_all(self, predicate: Predicate) -> List[RecordT]:
        """All records matching `predicate` in insertion order (O(n) scan)."""
        return [r for r in self.load_all() if predicate(r)]

    def get(self, record_id: int) -> Optional[RecordT]:
        return self.find_one(lambda r: r.identity == record_id)

    def get_or_raise(self, record_id: int) -> RecordT:
        record = self.get(record_id)
        if record is None:
            raise RecordNotFoundError(self.collection, record_id, key=self.id_field)
        return record

    def count(self) -> int:
        return len(self.load_all())

    def exists(self) -> bool:
        """Whether the backing file exists."""
        return self.path.exists()

    def __repr__(self) -> str:
        return (
            f"JsonFileRecordStore(model={self.model.__name__}, "
            f"path={str(self.path)!r}, collection={self.collection!r})"
        )
