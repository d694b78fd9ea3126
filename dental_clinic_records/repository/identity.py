"""
Identity Assignment

Computes the next surrogate id for a collection. Ids are never reused and
never reassigned, but nothing here is safe against two writers computing an
id from the same snapshot.

Usage:
    from dental_clinic_records.repository.identity import next_id

    next_id([])         # 1
    next_id([1, 2, 5])  # 6

Date: October 2026
"""

from typing import Iterable, Sequence

from pydantic import BaseModel

from dental_clinic_records.core.enums import IdStrategy


def next_id(ids: Iterable[int]) -> int:
    """Return 1 for an empty collection, otherwise 1 + the largest id."""
    return max(ids, default=0) + 1


class IdentityAssigner:
    """
    Computes the next id of a collection under a configured strategy.

    IdStrategy.MAX is O(n) and correct for any ordering. IdStrategy.LAST is
    O(1) and reproduces the clinic's legacy numbering; its precondition is
    that ids were assigned in increasing order and the collection has never
    been reordered.
    """

    def __init__(self, strategy: IdStrategy = IdStrategy.MAX):
        self.strategy = IdStrategy(strategy)

    def next_id(self, ids: Sequence[int]) -> int:
        if self.strategy is IdStrategy.LAST:
            return ids[-1] + 1 if ids else 1
        return next_id(ids)

    def next_for(self, records: Sequence[BaseModel], id_field: str = "id") -> int:
        """Next id given records whose identity lives in `id_field`."""
        ids = [
            value for value in (getattr(r, id_field, None) for r in records) if value is not None
        ]
        return self.next_id(ids)

    def __repr__(self) -> str:
        return f"IdentityAssigner(strategy={self.strategy.value})"
