"""Errors raised while enriching telemetry records.

Both field errors are non-fatal by policy: processors swallow them according
to their ``ignore_missing`` / ``ignore_failure`` options and the router
absorbs whatever is left, so a document is never rejected because it could
not be enriched.
"""


class ProcessorError(Exception):
    """Base class for failures raised by an ingest processor."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(f"{field}: {message}")
        self.field = field


class FieldMissingError(ProcessorError):
    """The source field of a processor is absent from the document."""

    def __init__(self, field: str) -> None:
        super().__init__(field, "field is missing")


class FieldMismatchError(ProcessorError):
    """The source field is present but has an unexpected shape or value."""


class PipelineError(Exception):
    """A processor error escaped a pipeline.

    Attributes:
        pipeline_id: Id of the pipeline that was running.
        tag: Tag of the failing processor, if it has one.
    """

    def __init__(self, pipeline_id: str, tag: str | None, cause: Exception) -> None:
        where = f"{pipeline_id}[{tag}]" if tag else pipeline_id
        super().__init__(f"pipeline {where} failed: {cause}")
        self.pipeline_id = pipeline_id
        self.tag = tag
