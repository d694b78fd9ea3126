"""
Lookup Layer - Cross-Collection Reads

Submodules:
    relational_lookup.py → RelationalLookup + result types

Dependency Rule:
    This layer depends on: core, repository
    This layer is used by: clinic

Date: October 2026
"""

from dental_clinic_records.lookup.relational_lookup import (
    AppointmentDetails,
    PricedItem,
    RelationalLookup,
)

__all__ = ["AppointmentDetails", "PricedItem", "RelationalLookup"]
