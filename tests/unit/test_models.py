"""Tests for core domain models."""

import dataclasses

import pytest

from lambdascope.core.models import KIND_METRIC, KIND_UNKNOWN, TelemetryRecord


class TestTelemetryRecord:
    """Tests for TelemetryRecord."""

    @pytest.mark.core
    def test_defaults(self) -> None:
        """A bare record is an empty unknown document."""
        record = TelemetryRecord()
        assert record.document == {}
        assert record.kind == KIND_UNKNOWN

    @pytest.mark.core
    def test_is_frozen(self) -> None:
        """Records cannot be reassigned."""
        record = TelemetryRecord({"message": "hi"})
        with pytest.raises(dataclasses.FrozenInstanceError):
            record.kind = KIND_METRIC  # type: ignore[misc]

    @pytest.mark.core
    def test_is_not_hashable(self) -> None:
        """Records hold a mutable document and cannot be hashed."""
        record = TelemetryRecord({"message": "hi"})
        with pytest.raises(TypeError):
            hash(record)
        with pytest.raises(TypeError):
            {record}

    @pytest.mark.core
    def test_equal_records_compare_equal(self) -> None:
        """Equality still compares document and kind."""
        assert TelemetryRecord({"a": 1}) == TelemetryRecord({"a": 1})
        assert TelemetryRecord({"a": 1}) != TelemetryRecord({"a": 1}, kind=KIND_METRIC)

    @pytest.mark.core
    def test_service_name_only_for_strings(self) -> None:
        """A non-string service.name is not reported."""
        assert TelemetryRecord({"service": {"name": "Api"}}).service_name == "Api"
        assert TelemetryRecord({"service": {"name": 3}}).service_name is None

    @pytest.mark.core
    def test_with_field_returns_new_record(self) -> None:
        """with_field copies the record and keeps its kind."""
        record = TelemetryRecord({"message": "hi"}, kind=KIND_METRIC)
        updated = record.with_field("service.name", "Api")
        assert updated is not record
        assert updated.kind == KIND_METRIC
        assert updated.service_name == "Api"
        assert not record.has("service.name")
