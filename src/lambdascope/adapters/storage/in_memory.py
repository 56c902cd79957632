"""In-memory record sink."""

from collections.abc import AsyncIterable

from lambdascope.core.models import TelemetryRecord


class InMemoryRecordSink:
    """In-memory implementation of RecordSinkPort.

    Stores records in a list. Suitable for testing and
    low-volume use where persistence is not required.
    """

    def __init__(self) -> None:
        self._records: list[TelemetryRecord] = []

    async def write(self, record: TelemetryRecord) -> None:
        """Write a record to the sink."""
        self._records.append(record)

    async def read(
        self, service_name: str | None = None, kind: str | None = None
    ) -> AsyncIterable[TelemetryRecord]:
        """Read records in write order, optionally filtered."""
        for record in list(self._records):
            if service_name is not None and record.service_name != service_name:
                continue
            if kind is not None and record.kind != kind:
                continue
            yield record

    async def count(self) -> int:
        """Return the number of stored records."""
        return len(self._records)

    async def clear(self) -> None:
        """Remove all records."""
        self._records.clear()
