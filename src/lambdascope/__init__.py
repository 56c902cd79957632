"""lambdascope: normalize AWS Lambda telemetry for Elastic Observability."""

from lambdascope.adapters.logging import LambdaLogHandler
from lambdascope.adapters.storage.in_memory import InMemoryRecordSink
from lambdascope.adapters.storage.sqlite import SQLiteRecordSink
from lambdascope.core.errors import (
    FieldMismatchError,
    FieldMissingError,
    PipelineError,
    ProcessorError,
)
from lambdascope.core.ingest import IngestService, IngestSummary
from lambdascope.core.models import (
    FUNCTION_NAME_FIELD,
    KIND_LOG,
    KIND_METRIC,
    KIND_UNKNOWN,
    LOG_GROUP_FIELD,
    SERVICE_NAME_FIELD,
    TelemetryRecord,
)
from lambdascope.core.pipeline import IngestPipeline, pipeline_from_definition
from lambdascope.core.processors import DissectProcessor, SetProcessor
from lambdascope.core.router import PipelineRouter, RoutingRule
from lambdascope.core.rules import (
    LOG_PIPELINE_ID,
    METRIC_PIPELINE_ID,
    default_router,
)

__all__ = [
    "FUNCTION_NAME_FIELD",
    "KIND_LOG",
    "KIND_METRIC",
    "KIND_UNKNOWN",
    "LOG_GROUP_FIELD",
    "LOG_PIPELINE_ID",
    "METRIC_PIPELINE_ID",
    "SERVICE_NAME_FIELD",
    "DissectProcessor",
    "FieldMismatchError",
    "FieldMissingError",
    "InMemoryRecordSink",
    "IngestPipeline",
    "IngestService",
    "IngestSummary",
    "LambdaLogHandler",
    "PipelineError",
    "PipelineRouter",
    "ProcessorError",
    "RoutingRule",
    "SQLiteRecordSink",
    "SetProcessor",
    "TelemetryRecord",
    "default_router",
    "pipeline_from_definition",
]
