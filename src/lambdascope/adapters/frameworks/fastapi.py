"""FastAPI adapter for the ingest endpoints."""

from typing import Any

from fastapi import APIRouter, Body, HTTPException, Query, Request, Response

from lambdascope.adapters.frameworks.simulate import (
    parse_simulate_body,
    simulate_response,
)
from lambdascope.core.encoding.ndjson import decode_documents, encode_records
from lambdascope.core.ingest import IngestService
from lambdascope.core.ports import RecordSinkPort
from lambdascope.core.router import PipelineRouter


def create_ingest_router(router: PipelineRouter, sink: RecordSinkPort) -> APIRouter:
    """Create a FastAPI router with the ingest endpoints.

    Args:
        router: Router holding the pipelines and routing table.
        sink: Storage adapter implementing RecordSinkPort.

    Returns:
        APIRouter with the same endpoints as the ASGI adapter.
    """
    api = APIRouter()
    ingest_service = IngestService(router, sink)

    @api.get("/_ingest/pipeline/{pipeline_id}")
    async def get_pipeline(pipeline_id: str) -> dict[str, Any]:
        """Return the Elasticsearch definition of a pipeline."""
        pipeline = router.pipeline(pipeline_id)
        if pipeline is None:
            raise HTTPException(status_code=404, detail="pipeline not found")
        return {pipeline_id: pipeline.to_definition()}

    @api.post("/_ingest/pipeline/{pipeline_id}/_simulate")
    async def simulate(
        pipeline_id: str, payload: Any = Body(default=None)
    ) -> dict[str, Any]:
        """Run one pipeline over the submitted documents."""
        if router.pipeline(pipeline_id) is None:
            raise HTTPException(status_code=404, detail="pipeline not found")
        try:
            sources = parse_simulate_body(payload)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e)) from e
        return simulate_response(router.simulate(pipeline_id, sources))

    @api.post("/ingest")
    async def ingest(request: Request) -> dict[str, Any]:
        """Route an NDJSON batch into the sink."""
        try:
            documents = list(decode_documents((await request.body()).decode("utf-8")))
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e)) from e
        summary = await ingest_service.ingest(documents)
        return summary.to_dict()

    @api.get("/records")
    async def get_records(
        service: str | None = Query(default=None),
        kind: str | None = Query(default=None),
    ) -> Response:
        """Return stored records in NDJSON format."""
        records = [
            r
            async for r in sink.read(
                service_name=service or None,
                kind=kind.lower() if kind else None,
            )
        ]
        return Response(
            content=encode_records(records),
            media_type="application/x-ndjson",
        )

    return api
