"""Ingest processors that derive fields from telemetry documents.

Processors mirror their Elasticsearch counterparts closely enough that a
definition can be exported and installed on an ingest node unchanged. They
hold only immutable configuration and are safe to share between workers.
"""

import dataclasses
import logging
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

from lambdascope.core.dissect import DissectPattern, compile_pattern
from lambdascope.core.errors import (
    FieldMismatchError,
    FieldMissingError,
    ProcessorError,
)
from lambdascope.core.models import TelemetryRecord

logger = logging.getLogger(__name__)


def _null_check(path: str) -> str:
    """Painless null-safe test for a dotted path, e.g. ``ctx.service?.name == null``."""
    return "ctx." + "?.".join(path.split(".")) + " == null"


@runtime_checkable
class Processor(Protocol):
    """A single step of an ingest pipeline."""

    tag: str | None

    def execute(self, record: TelemetryRecord) -> TelemetryRecord:
        """Return the processed record. Must not mutate the input."""
        ...

    def to_definition(self) -> dict[str, Any]:
        """Return the Elasticsearch JSON form of this processor."""
        ...


@dataclass(frozen=True)
class _BaseProcessor:
    """Shared failure handling for processors.

    Subclasses implement ``_apply``, raising FieldMissingError when their
    source field is absent and FieldMismatchError when it has the wrong shape.
    """

    ignore_missing: bool = False
    ignore_failure: bool = False
    override: bool = False
    tag: str | None = None

    type_name = ""

    def execute(self, record: TelemetryRecord) -> TelemetryRecord:
        try:
            return self._apply(record)
        except FieldMissingError as e:
            if self.ignore_missing or self.ignore_failure:
                logger.debug("%s skipped: %s", self.type_name, e)
                return record
            raise
        except ProcessorError as e:
            if self.ignore_failure:
                logger.debug("%s failed, ignoring: %s", self.type_name, e)
                return record
            raise
        except Exception:
            if self.ignore_failure:
                logger.debug("%s raised, ignoring", self.type_name, exc_info=True)
                return record
            raise

    def _apply(self, record: TelemetryRecord) -> TelemetryRecord:
        raise NotImplementedError

    def _options(self) -> dict[str, Any]:
        options: dict[str, Any] = {}
        if self.ignore_missing:
            options["ignore_missing"] = True
        if self.ignore_failure:
            options["ignore_failure"] = True
        if self.tag:
            options["tag"] = self.tag
        return options


@dataclass(frozen=True)
class DissectProcessor(_BaseProcessor):
    """Split a string field into target fields with a dissect pattern.

    Example:
        ```python
        DissectProcessor(
            field="awscloudwatch.log_group",
            pattern="/aws/lambda/%{service.name}",
            ignore_missing=True,
            ignore_failure=True,
        )
        ```

    Targets that already hold a value are left alone unless ``override`` is
    set. If the value does not match, nothing is written.
    """

    field: str = ""
    pattern: str = ""
    _compiled: DissectPattern = dataclasses.field(
        init=False, repr=False, compare=False
    )

    type_name = "dissect"

    def __post_init__(self) -> None:
        if not self.field:
            raise ValueError("dissect processor requires a field")
        object.__setattr__(self, "_compiled", compile_pattern(self.pattern))

    def _apply(self, record: TelemetryRecord) -> TelemetryRecord:
        if not record.has(self.field):
            raise FieldMissingError(self.field)
        value = record.get(self.field)
        if not isinstance(value, str):
            raise FieldMismatchError(
                self.field, f"expected a string, got {type(value).__name__}"
            )
        captures = self._compiled.match(value)
        result = record
        for target, captured in captures.items():
            if not self.override and record.has(target):
                continue
            result = result.with_field(target, captured)
        return result

    @property
    def condition(self) -> str | None:
        """Painless ``if`` that skips the processor once its targets are set.

        None when ``override`` is set. Elasticsearch dissect always
        overwrites its targets, so the guard carries ``override=False``
        onto an ingest node.
        """
        if self.override:
            return None
        return " && ".join(
            _null_check(name) for name in self._compiled.field_names
        )

    def to_definition(self) -> dict[str, Any]:
        body: dict[str, Any] = {"field": self.field, "pattern": self.pattern}
        condition = self.condition
        if condition:
            body["if"] = condition
        body.update(self._options())
        return {"dissect": body}


@dataclass(frozen=True)
class SetProcessor(_BaseProcessor):
    """Set a field to a constant or copy it from another field.

    With ``copy_from`` the source value is copied verbatim. An absent or
    empty source leaves the record untouched when ``ignore_empty_value`` is
    set (the default), matching the Elasticsearch option of the same name.
    """

    field: str = ""
    copy_from: str | None = None
    value: Any = None
    ignore_empty_value: bool = True

    type_name = "set"

    def __post_init__(self) -> None:
        if not self.field:
            raise ValueError("set processor requires a field")
        if (self.copy_from is None) == (self.value is None):
            raise ValueError("set processor requires exactly one of copy_from or value")

    def _apply(self, record: TelemetryRecord) -> TelemetryRecord:
        if not self.override and record.has(self.field):
            return record
        if self.copy_from is None:
            return record.with_field(self.field, self.value)
        if not record.has(self.copy_from):
            if self.ignore_empty_value:
                return record
            raise FieldMissingError(self.copy_from)
        source = record.get(self.copy_from)
        if source == "" and self.ignore_empty_value:
            return record
        return record.with_field(self.field, source)

    def to_definition(self) -> dict[str, Any]:
        body: dict[str, Any] = {"field": self.field}
        if self.copy_from is not None:
            body["copy_from"] = self.copy_from
        else:
            body["value"] = self.value
        if not self.override:
            body["override"] = False
        if self.ignore_empty_value:
            body["ignore_empty_value"] = True
        body.update(self._options())
        return {"set": body}
