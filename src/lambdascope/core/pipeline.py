"""Named ingest pipelines and their JSON definitions."""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from lambdascope.core.errors import PipelineError
from lambdascope.core.models import TelemetryRecord
from lambdascope.core.processors import DissectProcessor, Processor, SetProcessor

# Processor type name -> (class, accepted options)
_PROCESSOR_TYPES: dict[str, tuple[type, frozenset[str]]] = {
    "dissect": (
        DissectProcessor,
        frozenset(
            {"field", "pattern", "if", "ignore_missing", "ignore_failure", "tag"}
        ),
    ),
    "set": (
        SetProcessor,
        frozenset(
            {
                "field",
                "copy_from",
                "value",
                "override",
                "ignore_empty_value",
                "ignore_missing",
                "ignore_failure",
                "tag",
            }
        ),
    ),
}


@dataclass(frozen=True)
class IngestPipeline:
    """An ordered sequence of processors applied to each record.

    Attributes:
        pipeline_id: Name the pipeline is installed under.
        processors: Processors applied in order.
        description: Free-form description exported with the definition.
    """

    pipeline_id: str
    processors: tuple[Processor, ...]
    description: str = ""

    def execute(self, record: TelemetryRecord) -> TelemetryRecord:
        """Run every processor over the record.

        Raises:
            PipelineError: If a processor not configured to ignore failures
                raises.
        """
        for processor in self.processors:
            try:
                record = processor.execute(record)
            except Exception as e:
                raise PipelineError(self.pipeline_id, processor.tag, e) from e
        return record

    def to_definition(self) -> dict[str, Any]:
        """Return the body for ``PUT _ingest/pipeline/<pipeline_id>``."""
        body: dict[str, Any] = {}
        if self.description:
            body["description"] = self.description
        body["processors"] = [p.to_definition() for p in self.processors]
        return body


def _build_processor(entry: Mapping[str, Any]) -> Processor:
    """Build one processor from its ``{"type": {options}}`` form."""
    if not isinstance(entry, Mapping) or len(entry) != 1:
        raise ValueError("each processor must be an object with exactly one key")
    ((type_name, options),) = entry.items()
    if type_name not in _PROCESSOR_TYPES:
        raise ValueError(f"unsupported processor type {type_name!r}")
    if not isinstance(options, Mapping):
        raise ValueError(f"options for {type_name!r} must be an object")
    processor_class, accepted = _PROCESSOR_TYPES[type_name]
    unknown = sorted(set(options) - accepted)
    if unknown:
        raise ValueError(f"unsupported {type_name} options: {', '.join(unknown)}")
    kwargs = dict(options)
    # Elasticsearch defaults override to true for set; keep it explicit
    if type_name == "set":
        kwargs.setdefault("override", True)
        kwargs.setdefault("ignore_empty_value", False)
    condition = kwargs.pop("if", None)
    if type_name == "dissect":
        # Dissect overwrites unless guarded by the null check on its targets
        kwargs["override"] = condition is None
    processor: Processor = processor_class(**kwargs)
    if condition is not None and getattr(processor, "condition", None) != condition:
        raise ValueError(f"unsupported {type_name} condition {condition!r}")
    return processor


def pipeline_from_definition(
    pipeline_id: str, body: Mapping[str, Any]
) -> IngestPipeline:
    """Build a pipeline from an Elasticsearch ingest pipeline definition.

    Args:
        pipeline_id: Name of the pipeline.
        body: Definition with a ``processors`` list and optional ``description``.

    Returns:
        The compiled IngestPipeline.

    Raises:
        ValueError: If the definition is malformed or uses unsupported processors.
    """
    if not isinstance(body, Mapping):
        raise ValueError(f"pipeline {pipeline_id!r} definition must be an object")
    processors = body.get("processors")
    if not isinstance(processors, Sequence) or isinstance(processors, str):
        raise ValueError(f"pipeline {pipeline_id!r} needs a processors list")
    try:
        built = tuple(_build_processor(entry) for entry in processors)
    except TypeError as e:
        raise ValueError(f"pipeline {pipeline_id!r}: {e}") from e
    return IngestPipeline(
        pipeline_id=pipeline_id,
        processors=built,
        description=str(body.get("description", "")),
    )
