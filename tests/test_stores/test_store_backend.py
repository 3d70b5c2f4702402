"""Tests for the adapter protocol the stores are typed against."""

from maintenance_tracker.stores.base import Backend


def test_records_covariant_payloads_contravariant() -> None:
    record, create, update = Backend.__parameters__
    assert record.__covariant__
    assert create.__contravariant__
    assert update.__contravariant__
