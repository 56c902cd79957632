"""Routing of telemetry documents to the pipeline for their kind."""

import copy
import logging
from collections.abc import Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from lambdascope.core.errors import PipelineError
from lambdascope.core.fields import get_field
from lambdascope.core.models import KIND_UNKNOWN, TelemetryRecord
from lambdascope.core.pipeline import IngestPipeline

logger = logging.getLogger(__name__)


def _detached(document: Mapping[str, Any], kind: str) -> TelemetryRecord:
    """Wrap a deep copy of a caller's document in a new record."""
    return TelemetryRecord(document=copy.deepcopy(dict(document)), kind=kind)


@dataclass(frozen=True)
class RoutingRule:
    """One entry of the routing table.

    Attributes:
        kind: Record kind assigned when the rule matches.
        field: Dotted path that must hold a non-empty string.
        pipeline_id: Pipeline run for records of this kind.
    """

    kind: str
    field: str
    pipeline_id: str

    def matches(self, document: Mapping[str, Any]) -> bool:
        """Return True if the rule's field holds a non-empty string."""
        value = get_field(document, self.field)
        return isinstance(value, str) and value != ""


class PipelineRouter:
    """Dispatches documents to pipelines through an ordered rule table.

    The first matching rule wins. Documents no rule matches are classified as
    "unknown" and forwarded untouched. The router holds no per-record state
    and can be shared between workers once built.

    Example:
        ```python
        from lambdascope import default_router

        router = default_router()
        record = router.route(
            {"awscloudwatch": {"log_group": "/aws/lambda/OrderService"}}
        )
        assert record.service_name == "OrderService"
        ```
    """

    def __init__(
        self,
        rules: Sequence[RoutingRule] = (),
        pipelines: Iterable[IngestPipeline] = (),
    ) -> None:
        self._rules: list[RoutingRule] = []
        self._pipelines: dict[str, IngestPipeline] = {}
        for pipeline in pipelines:
            self.add_pipeline(pipeline)
        for rule in rules:
            self.add_rule(rule)

    def add_pipeline(self, pipeline: IngestPipeline) -> None:
        """Register a pipeline so rules and simulate can refer to it."""
        existing = self._pipelines.get(pipeline.pipeline_id)
        if existing is not None and existing != pipeline:
            raise ValueError(
                f"pipeline {pipeline.pipeline_id!r} already registered"
                " with a different definition"
            )
        self._pipelines[pipeline.pipeline_id] = pipeline

    def add_rule(self, rule: RoutingRule) -> None:
        """Append a rule routing to an already registered pipeline."""
        if rule.kind == KIND_UNKNOWN:
            raise ValueError(f"kind {KIND_UNKNOWN!r} is reserved")
        if any(r.kind == rule.kind for r in self._rules):
            raise ValueError(f"kind {rule.kind!r} already registered")
        if rule.pipeline_id not in self._pipelines:
            raise ValueError(f"unknown pipeline {rule.pipeline_id!r}")
        self._rules.append(rule)

    def register(self, rule: RoutingRule, pipeline: IngestPipeline) -> None:
        """Append a rule and the pipeline it routes to.

        Raises:
            ValueError: If the kind is already routed, or a different pipeline
                is registered under the same id.
        """
        if rule.pipeline_id != pipeline.pipeline_id:
            raise ValueError(
                f"rule routes to {rule.pipeline_id!r},"
                f" pipeline is {pipeline.pipeline_id!r}"
            )
        if any(r.kind == rule.kind for r in self._rules):
            raise ValueError(f"kind {rule.kind!r} already registered")
        self.add_pipeline(pipeline)
        self.add_rule(rule)

    @property
    def rules(self) -> tuple[RoutingRule, ...]:
        return tuple(self._rules)

    def pipeline_ids(self) -> list[str]:
        """Return registered pipeline ids in registration order."""
        return list(self._pipelines)

    def pipeline(self, pipeline_id: str) -> IngestPipeline | None:
        """Return the pipeline registered under an id, or None."""
        return self._pipelines.get(pipeline_id)

    def classify(self, document: Mapping[str, Any]) -> str:
        """Return the kind of a document."""
        for rule in self._rules:
            if rule.matches(document):
                return rule.kind
        return KIND_UNKNOWN

    def route(self, document: Mapping[str, Any]) -> TelemetryRecord:
        """Classify a document and run the pipeline for its kind.

        Never raises for document content: a pipeline failure is logged and
        the classified record is returned without enrichment.
        """
        for rule in self._rules:
            if rule.matches(document):
                record = _detached(document, rule.kind)
                return self._run(self._pipelines[rule.pipeline_id], record)
        return _detached(document, KIND_UNKNOWN)

    def route_many(
        self, documents: Iterable[Mapping[str, Any]]
    ) -> Iterator[TelemetryRecord]:
        """Route documents lazily, one at a time."""
        for document in documents:
            yield self.route(document)

    def simulate(
        self, pipeline_id: str, documents: Iterable[Mapping[str, Any]]
    ) -> list[TelemetryRecord]:
        """Run one pipeline over documents, bypassing classification.

        Raises:
            KeyError: If no pipeline is registered under the id.
        """
        pipeline = self._pipelines.get(pipeline_id)
        if pipeline is None:
            raise KeyError(pipeline_id)
        kind = self._kind_for(pipeline_id)
        return [self._run(pipeline, _detached(doc, kind)) for doc in documents]

    def _kind_for(self, pipeline_id: str) -> str:
        for rule in self._rules:
            if rule.pipeline_id == pipeline_id:
                return rule.kind
        return KIND_UNKNOWN

    @staticmethod
    def _run(pipeline: IngestPipeline, record: TelemetryRecord) -> TelemetryRecord:
        try:
            return pipeline.execute(record)
        except PipelineError as e:
            logger.warning("Forwarding record without enrichment: %s", e)
            return record
