"""Batch ingestion: route documents and hand them to a sink."""

from collections import Counter
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from lambdascope.core.fields import has_field
from lambdascope.core.models import SERVICE_NAME_FIELD
from lambdascope.core.ports import RecordSinkPort
from lambdascope.core.router import PipelineRouter


@dataclass
class IngestSummary:
    """Outcome of one ingest batch.

    Attributes:
        total: Documents received.
        enriched: Documents that gained a ``service.name`` during routing.
        kinds: Number of documents per record kind.
    """

    total: int = 0
    enriched: int = 0
    kinds: Counter[str] = field(default_factory=Counter)

    def to_dict(self) -> dict[str, Any]:
        return {
            "total": self.total,
            "enriched": self.enriched,
            "kinds": dict(self.kinds),
        }


class IngestService:
    """Routes documents through a PipelineRouter and writes them to a sink."""

    def __init__(self, router: PipelineRouter, sink: RecordSinkPort) -> None:
        self.router = router
        self.sink = sink

    async def ingest(self, documents: Iterable[Mapping[str, Any]]) -> IngestSummary:
        """Route and store every document.

        Args:
            documents: Raw telemetry documents.

        Returns:
            Counts for the batch.
        """
        summary = IngestSummary()
        for document in documents:
            already_named = has_field(document, SERVICE_NAME_FIELD)
            record = self.router.route(document)
            summary.total += 1
            summary.kinds[record.kind] += 1
            if not already_named and record.has(SERVICE_NAME_FIELD):
                summary.enriched += 1
            await self.sink.write(record)
        return summary
