"""Example FastAPI application exposing the ingest endpoints.

Run with:
    uvicorn examples.fastapi_example:app --reload

Endpoints:
    /_ingest/pipeline/<id>            - pipeline definition (GET)
    /_ingest/pipeline/<id>/_simulate  - Elasticsearch-style simulate (POST)
    /ingest                           - route an NDJSON batch into the sink (POST)
    /records                          - NDJSON of stored records
    /records?service=<name>           - records for one service
    /records?kind=<log|metric>        - records of one kind

Try:
    curl -s localhost:8000/_ingest/pipeline/logs-aws.cloudwatch_logs@custom/_simulate \\
        -H 'content-type: application/json' \\
        -d '{"docs": [{"_source": {"awscloudwatch": {"log_group": "/aws/lambda/OrderService"}}}]}'
"""

from fastapi import FastAPI

from lambdascope.adapters.frameworks.fastapi import create_ingest_router
from lambdascope.adapters.storage.sqlite import SQLiteRecordSink
from lambdascope.config import build_router, configure_logging, load_settings

settings = load_settings()
configure_logging(settings.log_level)

# Create the sink and the router from LAMBDASCOPE_* settings
sink = SQLiteRecordSink(settings.db_path)
router = build_router(settings)

app = FastAPI(title="lambdascope ingest example")
app.include_router(create_ingest_router(router, sink))


@app.get("/")
async def root() -> dict[str, list[str]]:
    """List the installed pipelines."""
    return {"pipelines": router.pipeline_ids()}
