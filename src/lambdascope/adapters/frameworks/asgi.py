"""ASGI generic adapter for the ingest endpoints.

This adapter provides a framework-agnostic ASGI application that can be used
with any ASGI server (uvicorn, hypercorn, daphne) without requiring FastAPI
as a dependency.
"""

import json
import logging
from collections.abc import Callable, Coroutine
from typing import Any
from urllib.parse import parse_qs, unquote

from lambdascope.adapters.frameworks.query_params import (
    _parse_kind_param,
    _parse_service_param,
)
from lambdascope.adapters.frameworks.simulate import (
    parse_simulate_body,
    simulate_response,
)
from lambdascope.core.encoding.ndjson import decode_documents, encode_records
from lambdascope.core.ingest import IngestService
from lambdascope.core.ports import RecordSinkPort
from lambdascope.core.router import PipelineRouter

logger = logging.getLogger(__name__)

# ASGI type aliases
Scope = dict[str, Any]
Receive = Callable[[], Coroutine[Any, Any, dict[str, Any]]]
Send = Callable[[dict[str, Any]], Coroutine[Any, Any, None]]
ASGIApp = Callable[[Scope, Receive, Send], Coroutine[Any, Any, None]]

_PIPELINE_PREFIX = "/_ingest/pipeline/"
_SIMULATE_SUFFIX = "/_simulate"


def _parse_query_params(scope: Scope) -> dict[str, list[str]]:
    """Parse query string from ASGI scope into parameter dictionary.

    Returns empty dict if query_string is missing or empty.
    """
    query_string = scope.get("query_string", b"").decode(errors="replace")
    return parse_qs(query_string)


async def _read_body(receive: Receive) -> bytes:
    """Collect the full request body from ``http.request`` messages."""
    chunks: list[bytes] = []
    while True:
        message = await receive()
        if message["type"] != "http.request":
            break
        chunks.append(message.get("body", b""))
        if not message.get("more_body", False):
            break
    return b"".join(chunks)


async def _send_response(send: Send, status: int, content_type: str, body: str) -> None:
    """Send an HTTP response with headers and body.

    Args:
        send: ASGI send callable for writing response.
        status: HTTP status code.
        content_type: Content-Type header value.
        body: Response body as string (will be encoded to bytes).
    """
    headers = [(b"content-type", content_type.encode())]
    await send({"type": "http.response.start", "status": status, "headers": headers})
    await send({"type": "http.response.body", "body": body.encode()})


async def _send_json(send: Send, status: int, payload: Any) -> None:
    await _send_response(send, status, "application/json", json.dumps(payload))


async def _send_error(send: Send, status: int, message: str) -> None:
    await _send_json(send, status, {"error": message})


def create_asgi_app(router: PipelineRouter, sink: RecordSinkPort) -> ASGIApp:
    """Create an ASGI app exposing the ingest endpoints.

    Endpoints:
        GET  /_ingest/pipeline/{id}            pipeline definition
        POST /_ingest/pipeline/{id}/_simulate  run one pipeline over docs
        POST /ingest                           route NDJSON into the sink
        GET  /records                          NDJSON of stored records

    Args:
        router: Router holding the pipelines and routing table.
        sink: Storage adapter implementing RecordSinkPort.

    Returns:
        ASGI application callable.
    """
    service = IngestService(router, sink)

    async def handle_pipeline(
        path: str, method: str, receive: Receive, send: Send
    ) -> None:
        rest = unquote(path[len(_PIPELINE_PREFIX) :])
        simulate = rest.endswith(_SIMULATE_SUFFIX)
        pipeline_id = rest[: -len(_SIMULATE_SUFFIX)] if simulate else rest
        pipeline = router.pipeline(pipeline_id)
        if pipeline is None:
            await _send_error(send, 404, f"pipeline {pipeline_id!r} not found")
            return
        if not simulate:
            if method != "GET":
                await _send_error(send, 405, "Method Not Allowed")
                return
            await _send_json(send, 200, {pipeline_id: pipeline.to_definition()})
            return
        if method != "POST":
            await _send_error(send, 405, "Method Not Allowed")
            return
        try:
            payload = json.loads(await _read_body(receive) or b"null")
            sources = parse_simulate_body(payload)
        except ValueError as e:
            await _send_error(send, 400, str(e))
            return
        records = router.simulate(pipeline_id, sources)
        await _send_json(send, 200, simulate_response(records))

    async def handle_ingest(receive: Receive, send: Send) -> None:
        try:
            text = (await _read_body(receive)).decode("utf-8")
            documents = list(decode_documents(text))
        except ValueError as e:
            await _send_error(send, 400, str(e))
            return
        summary = await service.ingest(documents)
        await _send_json(send, 200, summary.to_dict())

    async def handle_records(scope: Scope, send: Send) -> None:
        params = _parse_query_params(scope)
        records = [
            r
            async for r in sink.read(
                service_name=_parse_service_param(params),
                kind=_parse_kind_param(params),
            )
        ]
        await _send_response(send, 200, "application/x-ndjson", encode_records(records))

    async def app(scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            return

        path = scope["path"]
        method = scope.get("method", "GET")
        try:
            if path.startswith(_PIPELINE_PREFIX):
                await handle_pipeline(path, method, receive, send)
            elif path == "/ingest":
                if method != "POST":
                    await _send_error(send, 405, "Method Not Allowed")
                    return
                await handle_ingest(receive, send)
            elif path == "/records":
                await handle_records(scope, send)
            else:
                await _send_response(send, 404, "text/plain", "Not Found")
        except Exception:
            logger.exception("Error handling %s %s", method, path)
            await _send_error(send, 500, "Internal Server Error")

    return app
