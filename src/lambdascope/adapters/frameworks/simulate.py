"""Request and response bodies of the Elasticsearch ``_simulate`` API.

Shared by the ASGI and FastAPI adapters so both accept the same payloads
an operator would send to an ingest node.
"""

from collections.abc import Iterable
from typing import Any

from lambdascope.core.models import TelemetryRecord


def parse_simulate_body(payload: Any) -> list[dict[str, Any]]:
    """Extract source documents from ``{"docs": [{"_source": {...}}]}``.

    Raises:
        ValueError: If the payload does not have that shape.
    """
    if not isinstance(payload, dict):
        raise ValueError("request body must be a JSON object")
    docs = payload.get("docs")
    if not isinstance(docs, list) or not docs:
        raise ValueError("'docs' must be a non-empty list")
    sources: list[dict[str, Any]] = []
    for index, doc in enumerate(docs):
        source = doc.get("_source") if isinstance(doc, dict) else None
        if not isinstance(source, dict):
            raise ValueError(f"docs[{index}] must have an object '_source'")
        sources.append(source)
    return sources


def simulate_response(records: Iterable[TelemetryRecord]) -> dict[str, Any]:
    """Build the ``_simulate`` response body for processed records."""
    return {"docs": [{"doc": {"_source": record.document}} for record in records]}
