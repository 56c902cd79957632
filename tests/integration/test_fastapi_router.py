"""Integration tests for the FastAPI ingest router."""

import pytest
from fastapi import FastAPI

from lambdascope.adapters.frameworks.fastapi import create_ingest_router
from lambdascope.core.rules import LOG_PIPELINE_ID, METRIC_PIPELINE_ID


@pytest.fixture
def app(router, sink) -> FastAPI:
    app = FastAPI()
    app.include_router(create_ingest_router(router, sink))
    return app


class TestFastAPIIngestRouter:
    """Tests for create_ingest_router()."""

    @pytest.mark.asgi
    async def test_get_pipeline_definition(self, app, asgi_test_client) -> None:
        async with asgi_test_client(app) as client:
            response = await client.get(f"/_ingest/pipeline/{METRIC_PIPELINE_ID}")
        assert response.status_code == 200
        definition = response.json()[METRIC_PIPELINE_ID]
        assert definition["processors"][0]["set"]["override"] is False

    @pytest.mark.asgi
    async def test_unknown_pipeline_is_404(self, app, asgi_test_client) -> None:
        async with asgi_test_client(app) as client:
            response = await client.get("/_ingest/pipeline/nope")
        assert response.status_code == 404

    @pytest.mark.asgi
    async def test_simulate(self, app, asgi_test_client) -> None:
        body = {
            "docs": [
                {"_source": {"awscloudwatch": {"log_group": "/aws/lambda/Api"}}},
                {"_source": {"awscloudwatch": {"log_group": "/aws/ecs/Api"}}},
            ]
        }
        async with asgi_test_client(app) as client:
            response = await client.post(
                f"/_ingest/pipeline/{LOG_PIPELINE_ID}/_simulate", json=body
            )
        assert response.status_code == 200
        first, second = response.json()["docs"]
        assert first["doc"]["_source"]["service"]["name"] == "Api"
        assert "service" not in second["doc"]["_source"]

    @pytest.mark.asgi
    async def test_simulate_bad_body_is_400(self, app, asgi_test_client) -> None:
        async with asgi_test_client(app) as client:
            response = await client.post(
                f"/_ingest/pipeline/{LOG_PIPELINE_ID}/_simulate", json={"docs": []}
            )
        assert response.status_code == 400
        assert response.json() == {"detail": "'docs' must be a non-empty list"}

    @pytest.mark.asgi
    async def test_ingest_then_read(self, app, sink, asgi_test_client) -> None:
        ndjson = '{"aws": {"dimensions": {"FunctionName": "Api"}}}\n'
        async with asgi_test_client(app) as client:
            ingested = await client.post("/ingest", content=ndjson)
            records = await client.get("/records", params={"kind": "metric"})
        assert ingested.json()["enriched"] == 1
        assert records.headers["content-type"] == "application/x-ndjson"
        assert '"service": {"name": "Api"}' in records.text

    @pytest.mark.asgi
    async def test_ingest_bad_body_is_400(self, app, asgi_test_client) -> None:
        async with asgi_test_client(app) as client:
            response = await client.post("/ingest", content="[1]\n")
        assert response.status_code == 400
