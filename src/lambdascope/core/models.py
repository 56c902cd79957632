"""Core domain models for telemetry documents."""

from dataclasses import dataclass, field, replace
from typing import Any

from lambdascope.core.fields import get_field, has_field, set_field

# Record kinds used by the built-in routing table
KIND_LOG = "log"
KIND_METRIC = "metric"
KIND_UNKNOWN = "unknown"

# Well-known document fields
LOG_GROUP_FIELD = "awscloudwatch.log_group"
FUNCTION_NAME_FIELD = "aws.dimensions.FunctionName"
SERVICE_NAME_FIELD = "service.name"


@dataclass(frozen=True)
class TelemetryRecord:
    """One log or metric document on its way to the index.

    Records are never mutated in place. ``with_field`` returns a new record
    carrying a copied document, so a record can be shared across workers.
    Records are not hashable because their document is a dict.

    Attributes:
        document: The nested document as it will be indexed.
        kind: Record kind assigned by the router (e.g., "log", "metric").
    """

    document: dict[str, Any] = field(default_factory=dict)
    kind: str = KIND_UNKNOWN

    __hash__ = None  # type: ignore[assignment]

    @property
    def service_name(self) -> str | None:
        """Normalized service name, or None until an extractor sets it."""
        value = get_field(self.document, SERVICE_NAME_FIELD)
        return value if isinstance(value, str) else None

    def get(self, path: str, default: Any = None) -> Any:
        """Return the value at a dotted path."""
        return get_field(self.document, path, default)

    def has(self, path: str) -> bool:
        """Return True if the dotted path holds a value."""
        return has_field(self.document, path)

    def with_field(self, path: str, value: Any) -> "TelemetryRecord":
        """Return a copy of this record with the field set. Kind is kept."""
        return replace(self, document=set_field(self.document, path, value))
