"""Built-in pipelines for AWS Lambda telemetry.

These are the two custom pipelines installed alongside the Elastic AWS
integration so Lambda logs and metrics carry the same ``service.name`` as
the traces the ADOT layer exports.
"""

from typing import Any

from lambdascope.core.models import (
    FUNCTION_NAME_FIELD,
    KIND_LOG,
    KIND_METRIC,
    LOG_GROUP_FIELD,
    SERVICE_NAME_FIELD,
)
from lambdascope.core.pipeline import pipeline_from_definition
from lambdascope.core.router import PipelineRouter, RoutingRule

LOG_PIPELINE_ID = "logs-aws.cloudwatch_logs@custom"
METRIC_PIPELINE_ID = "metrics-aws.lambda@custom"

LAMBDA_LOG_GROUP_PREFIX = "/aws/lambda/"

DEFAULT_PIPELINE_DEFINITIONS: dict[str, dict[str, Any]] = {
    LOG_PIPELINE_ID: {
        "description": "Derive service.name from the Lambda log group",
        "processors": [
            {
                "dissect": {
                    "field": LOG_GROUP_FIELD,
                    "pattern": LAMBDA_LOG_GROUP_PREFIX + "%{" + SERVICE_NAME_FIELD + "}",
                    "if": "ctx.service?.name == null",
                    "ignore_missing": True,
                    "ignore_failure": True,
                }
            }
        ],
    },
    METRIC_PIPELINE_ID: {
        "description": "Copy the Lambda function name into service.name",
        "processors": [
            {
                "set": {
                    "field": SERVICE_NAME_FIELD,
                    "copy_from": FUNCTION_NAME_FIELD,
                    "override": False,
                    "ignore_empty_value": True,
                    "ignore_failure": True,
                }
            }
        ],
    },
}

# Order is precedence: a document carrying both fields is a log
DEFAULT_ROUTES: tuple[RoutingRule, ...] = (
    RoutingRule(kind=KIND_LOG, field=LOG_GROUP_FIELD, pipeline_id=LOG_PIPELINE_ID),
    RoutingRule(
        kind=KIND_METRIC, field=FUNCTION_NAME_FIELD, pipeline_id=METRIC_PIPELINE_ID
    ),
)


def default_router() -> PipelineRouter:
    """Build a router with the built-in AWS Lambda pipelines."""
    pipelines = [
        pipeline_from_definition(pipeline_id, body)
        for pipeline_id, body in DEFAULT_PIPELINE_DEFINITIONS.items()
    ]
    return PipelineRouter(rules=DEFAULT_ROUTES, pipelines=pipelines)
