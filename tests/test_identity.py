"""Tests for surrogate id assignment."""

import pytest

from dental_clinic_records.core.enums import IdStrategy
from dental_clinic_records.core.models import Doctor, History
from dental_clinic_records.repository.identity import IdentityAssigner, next_id


def test_empty_collection_starts_at_one():
    assert next_id([]) == 1
    assert IdentityAssigner().next_id([]) == 1
    assert IdentityAssigner(IdStrategy.LAST).next_id([]) == 1


@pytest.mark.parametrize("ids", [[1], [1, 2, 3], [1, 2, 7]])
def test_sorted_ids_continue_after_max(ids):
    assert next_id(ids) == max(ids) + 1


def test_max_strategy_ignores_order():
    assert IdentityAssigner(IdStrategy.MAX).next_id([3, 9, 2]) == 10


def test_last_strategy_trusts_final_record():
    # Precondition violated: collection out of id order
    assert IdentityAssigner(IdStrategy.LAST).next_id([3, 9, 2]) == 3


def test_next_for_reads_identity_field_and_skips_unset_ids():
    assigner = IdentityAssigner()
    doctors = [Doctor(id=4, name="A"), Doctor(name="B"), Doctor(id=2, name="C")]
    assert assigner.next_for(doctors) == 5

    histories = [History(patient_id=8), History(patient_id=3)]
    assert assigner.next_for(histories, id_field="patient_id") == 9


def test_strategy_accepts_string_value():
    assert IdentityAssigner("last").strategy is IdStrategy.LAST
