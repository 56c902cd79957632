"""Python logging handler that emits enriched CloudWatch-shaped documents.

Inside a Lambda function this lets application logs reach a sink already
carrying ``service.name``, shaped the way the Elastic AWS integration
indexes CloudWatch log events.
"""

import asyncio
import logging
import os
import traceback
from collections.abc import Mapping
from typing import Any

from lambdascope.core.ports import RecordSinkPort
from lambdascope.core.router import PipelineRouter
from lambdascope.core.rules import LAMBDA_LOG_GROUP_PREFIX

# Standard LogRecord attributes that should not be treated as extra fields
_STANDARD_LOGRECORD_ATTRS = frozenset(
    {
        "args",
        "asctime",
        "created",
        "exc_info",
        "exc_text",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "message",
        "module",
        "msecs",
        "msg",
        "name",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "stack_info",
        "taskName",
        "thread",
        "threadName",
    }
)


def default_log_group(environ: Mapping[str, str] | None = None) -> str | None:
    """Return the function's log group from the Lambda runtime environment.

    Uses ``AWS_LAMBDA_LOG_GROUP_NAME`` when set, otherwise derives
    ``/aws/lambda/<AWS_LAMBDA_FUNCTION_NAME>``.
    """
    env = os.environ if environ is None else environ
    log_group = env.get("AWS_LAMBDA_LOG_GROUP_NAME")
    if log_group:
        return log_group
    function_name = env.get("AWS_LAMBDA_FUNCTION_NAME")
    if function_name:
        return LAMBDA_LOG_GROUP_PREFIX + function_name
    return None


class LambdaLogHandler(logging.Handler):
    """Logging handler that routes log records into a RecordSinkPort.

    Example:
        ```python
        from lambdascope import InMemoryRecordSink, LambdaLogHandler, default_router

        sink = InMemoryRecordSink()
        handler = LambdaLogHandler(sink, default_router())
        logging.getLogger().addHandler(handler)
        ```
    """

    def __init__(
        self,
        sink: RecordSinkPort,
        router: PipelineRouter,
        log_group: str | None = None,
        log_stream: str | None = None,
    ) -> None:
        """Initialize the handler.

        Args:
            sink: Storage adapter implementing RecordSinkPort.
            router: Router used to enrich each document.
            log_group: CloudWatch log group. Defaults to the Lambda runtime's.
            log_stream: CloudWatch log stream. Defaults to
                ``AWS_LAMBDA_LOG_STREAM_NAME`` when set.
        """
        super().__init__()
        self._sink = sink
        self._router = router
        self._log_group = log_group or default_log_group()
        self._log_stream = log_stream or os.environ.get("AWS_LAMBDA_LOG_STREAM_NAME")

    def to_document(self, record: logging.LogRecord) -> dict[str, Any]:
        """Build the CloudWatch-shaped document for a log record."""
        document: dict[str, Any] = {
            "@timestamp": record.created,
            "message": record.getMessage(),
            "log": {
                "level": record.levelname,
                "logger": record.name,
                "origin": {
                    "function": record.funcName or "",
                    "file": {"name": record.pathname, "line": record.lineno},
                },
            },
        }
        cloudwatch: dict[str, Any] = {}
        if self._log_group:
            cloudwatch["log_group"] = self._log_group
        if self._log_stream:
            cloudwatch["log_stream"] = self._log_stream
        if cloudwatch:
            document["awscloudwatch"] = cloudwatch

        # Add any extra attributes passed via logging call
        labels = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _STANDARD_LOGRECORD_ATTRS
            and isinstance(value, (str, int, float, bool))
        }
        if labels:
            document["labels"] = labels

        if record.exc_info:
            exc_type, exc_value, exc_tb = record.exc_info
            if exc_type is not None:
                document["error"] = {
                    "type": exc_type.__name__,
                    "message": str(exc_value) if exc_value is not None else "",
                    "stack_trace": "".join(
                        traceback.format_exception(exc_type, exc_value, exc_tb)
                    ),
                }
        return document

    def emit(self, record: logging.LogRecord) -> None:
        """Route the log record and write it to the sink."""
        try:
            enriched = self._router.route(self.to_document(record))
            asyncio.run(self._sink.write(enriched))
        except Exception:
            self.handleError(record)
