"""
Repository Layer - Collection Persistence

This layer provides the record-store abstraction every entity type is
stored through, and the identity assigner that numbers new records.

Submodules:
    identity.py      → next_id + IdentityAssigner
    record_store.py  → RecordStore protocol + JSON file implementation

Dependency Rule:
    This layer depends on: core (models, enums, exceptions)
    This layer is used by: session, lookup, clinic

Date: October 2026
"""

from dental_clinic_records.repository.identity import IdentityAssigner, next_id
from dental_clinic_records.repository.record_store import (
    JsonFileRecordStore,
    LoadResult,
    RecordStore,
)

__all__ = [
    "IdentityAssigner",
    "next_id",
    "JsonFileRecordStore",
    "LoadResult",
    "RecordStore",
]
