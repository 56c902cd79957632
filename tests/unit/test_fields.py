"""Tests for dotted-path field helpers."""

import pytest

from lambdascope.core.errors import FieldMismatchError
from lambdascope.core.fields import get_field, has_field, set_field


class TestGetField:
    """Tests for get_field() and has_field()."""

    @pytest.mark.core
    def test_walks_nested_mappings(self) -> None:
        """Dotted paths resolve through nested objects."""
        doc = {"aws": {"dimensions": {"FunctionName": "OrderService"}}}
        assert get_field(doc, "aws.dimensions.FunctionName") == "OrderService"

    @pytest.mark.core
    def test_honours_literal_dotted_keys(self) -> None:
        """A flat key containing dots is found as well."""
        doc = {"awscloudwatch.log_group": "/aws/lambda/Flat"}
        assert get_field(doc, "awscloudwatch.log_group") == "/aws/lambda/Flat"
        assert has_field(doc, "awscloudwatch.log_group")

    @pytest.mark.core
    def test_missing_returns_default(self) -> None:
        """Absent paths return the default."""
        assert get_field({"aws": {}}, "aws.dimensions.FunctionName") is None
        assert get_field({}, "a.b", default="x") == "x"

    @pytest.mark.core
    def test_none_counts_as_absent(self) -> None:
        """A null value is treated as a missing field."""
        assert not has_field({"service": {"name": None}}, "service.name")

    @pytest.mark.core
    def test_scalar_intermediate_is_absent(self) -> None:
        """A path through a scalar does not resolve."""
        assert not has_field({"aws": "flat"}, "aws.dimensions")


class TestSetField:
    """Tests for set_field()."""

    @pytest.mark.core
    def test_creates_intermediate_objects(self) -> None:
        """Missing parents are created."""
        assert set_field({}, "service.name", "svc") == {"service": {"name": "svc"}}

    @pytest.mark.core
    def test_does_not_mutate_input(self) -> None:
        """The input document is left untouched."""
        doc = {"service": {"version": "1"}}
        result = set_field(doc, "service.name", "svc")
        assert doc == {"service": {"version": "1"}}
        assert result == {"service": {"version": "1", "name": "svc"}}

    @pytest.mark.core
    def test_scalar_intermediate_raises(self) -> None:
        """Setting through a non-object raises FieldMismatchError."""
        with pytest.raises(FieldMismatchError, match="non-object"):
            set_field({"service": "flat"}, "service.name", "svc")
