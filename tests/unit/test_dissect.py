"""Tests for the dissect pattern compiler."""

import pytest

from lambdascope.core.dissect import compile_pattern
from lambdascope.core.errors import FieldMismatchError


class TestCompilePattern:
    """Tests for compile_pattern()."""

    @pytest.mark.core
    def test_prefix_and_single_key(self) -> None:
        """A literal prefix followed by one key compiles."""
        pattern = compile_pattern("/aws/lambda/%{service.name}")
        assert pattern.prefix == "/aws/lambda/"
        assert pattern.field_names == ["service.name"]

    @pytest.mark.core
    @pytest.mark.parametrize(
        "source",
        [
            "no keys here",
            "%{a}%{b}",
            "/aws/%{unterminated",
        ],
    )
    def test_invalid_patterns_raise(self, source: str) -> None:
        """Patterns without keys, adjacent keys or unterminated keys are rejected."""
        with pytest.raises(ValueError):
            compile_pattern(source)

    @pytest.mark.core
    @pytest.mark.parametrize(
        "source",
        ["%{+a} %{b}", "%{*a} %{&a}", "%{a->} %{b}", "/aws/lambda/%{ +service.name}"],
    )
    def test_unsupported_modifiers_raise(self, source: str) -> None:
        """Append, reference and padding modifiers are rejected, not stored as keys."""
        with pytest.raises(ValueError, match="unsupported modifier"):
            compile_pattern(source)

    @pytest.mark.core
    def test_skip_keys_are_not_targets(self) -> None:
        """Empty and ?-prefixed keys capture nothing."""
        pattern = compile_pattern("%{}/%{?region}/%{name}")
        assert pattern.field_names == ["name"]


class TestDissectMatch:
    """Tests for DissectPattern.match()."""

    @pytest.mark.core
    def test_last_key_takes_rest_including_slashes(self) -> None:
        """The final key captures to end of string, slashes included."""
        pattern = compile_pattern("/aws/lambda/%{service.name}")
        assert pattern.match("/aws/lambda/team/OrderService") == {
            "service.name": "team/OrderService"
        }

    @pytest.mark.core
    def test_prefix_is_case_sensitive(self) -> None:
        """The literal prefix must match exactly."""
        pattern = compile_pattern("/aws/lambda/%{service.name}")
        with pytest.raises(FieldMismatchError):
            pattern.match("/AWS/Lambda/OrderService")

    @pytest.mark.core
    def test_empty_capture_is_a_mismatch(self) -> None:
        """A named key with nothing to capture fails."""
        pattern = compile_pattern("/aws/lambda/%{service.name}")
        with pytest.raises(FieldMismatchError, match="empty"):
            pattern.match("/aws/lambda/")

    @pytest.mark.core
    def test_keys_split_on_first_delimiter(self) -> None:
        """Middle keys stop at the first occurrence of their delimiter."""
        pattern = compile_pattern("%{date} %{level} %{message}")
        assert pattern.match("2024-05-02 INFO started in 3 ms") == {
            "date": "2024-05-02",
            "level": "INFO",
            "message": "started in 3 ms",
        }

    @pytest.mark.core
    def test_trailing_literal_required(self) -> None:
        """A pattern ending with a literal needs the value to end with it."""
        pattern = compile_pattern("[%{level}]")
        assert pattern.match("[WARN]") == {"level": "WARN"}
        with pytest.raises(FieldMismatchError):
            pattern.match("[WARN")

    @pytest.mark.core
    def test_missing_delimiter_is_a_mismatch(self) -> None:
        """A value lacking a middle delimiter fails."""
        pattern = compile_pattern("%{a}:%{b}")
        with pytest.raises(FieldMismatchError, match="not found"):
            pattern.match("no-colon")
