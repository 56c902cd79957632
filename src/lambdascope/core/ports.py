"""Port interfaces for record sinks.

The core writes enriched records through this protocol only. Adapters
decide where records end up (memory, SQLite, an Elasticsearch index).
"""

from collections.abc import AsyncIterable
from typing import Protocol, runtime_checkable

from lambdascope.core.models import TelemetryRecord


@runtime_checkable
class RecordSinkPort(Protocol):
    """Port for enriched record storage.

    Examples: InMemoryRecordSink, SQLiteRecordSink.
    """

    async def write(self, record: TelemetryRecord) -> None:
        """Write an enriched record."""
        ...

    def read(
        self, service_name: str | None = None, kind: str | None = None
    ) -> AsyncIterable[TelemetryRecord]:
        """Read records in write order, optionally filtered.

        Args:
            service_name: Only records whose ``service.name`` equals this value.
            kind: Only records of this kind.
        """
        ...
