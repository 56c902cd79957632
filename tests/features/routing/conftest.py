"""BDD step definitions for routing features."""

import copy
from dataclasses import dataclass, field
from typing import Any

import pytest
from pytest_bdd import given, parsers, then, when

from lambdascope.core.fields import set_field
from lambdascope.core.models import (
    FUNCTION_NAME_FIELD,
    LOG_GROUP_FIELD,
    SERVICE_NAME_FIELD,
    TelemetryRecord,
)
from lambdascope.core.router import PipelineRouter
from lambdascope.core.rules import default_router


@dataclass
class RoutingScenarioContext:
    """State shared between the steps of one scenario."""

    router: PipelineRouter | None = None
    document: dict[str, Any] = field(default_factory=dict)
    original: dict[str, Any] = field(default_factory=dict)
    records: list[TelemetryRecord] = field(default_factory=list)


@pytest.fixture
def ctx() -> RoutingScenarioContext:
    """Fresh scenario context for each test."""
    return RoutingScenarioContext()


def _add(ctx: RoutingScenarioContext, path: str, value: Any) -> None:
    ctx.document = set_field(ctx.document, path, value)
    ctx.original = copy.deepcopy(ctx.document)


# --- Given ---


@given("the built-in Lambda pipelines")
def builtin_pipelines(ctx: RoutingScenarioContext) -> None:
    ctx.router = default_router()


@given(parsers.parse('a document with log group "{log_group}"'))
def document_with_log_group(ctx: RoutingScenarioContext, log_group: str) -> None:
    _add(ctx, LOG_GROUP_FIELD, log_group)


@given(parsers.parse('a document with function name "{name}"'))
@given(parsers.parse('the document has function name "{name}"'))
def document_with_function_name(ctx: RoutingScenarioContext, name: str) -> None:
    _add(ctx, FUNCTION_NAME_FIELD, name)


@given(parsers.parse('a document with message "{message}"'))
def document_with_message(ctx: RoutingScenarioContext, message: str) -> None:
    _add(ctx, "message", message)


@given(parsers.parse('the document already has service.name "{name}"'))
def document_with_service_name(ctx: RoutingScenarioContext, name: str) -> None:
    _add(ctx, SERVICE_NAME_FIELD, name)


# --- When ---


@when("the document is routed")
def route_document(ctx: RoutingScenarioContext) -> None:
    assert ctx.router is not None
    ctx.records.append(ctx.router.route(ctx.document))


@when("the document is routed twice")
def route_document_twice(ctx: RoutingScenarioContext) -> None:
    assert ctx.router is not None
    first = ctx.router.route(ctx.document)
    ctx.records.extend([first, ctx.router.route(first.document)])


# --- Then ---


@then(parsers.parse('the record kind is "{kind}"'))
def record_kind_is(ctx: RoutingScenarioContext, kind: str) -> None:
    assert ctx.records[-1].kind == kind


@then(parsers.parse('service.name is "{name}"'))
def service_name_is(ctx: RoutingScenarioContext, name: str) -> None:
    assert ctx.records[-1].service_name == name


@then("the document is unchanged")
def document_unchanged(ctx: RoutingScenarioContext) -> None:
    assert ctx.records[-1].document == ctx.original


@then("both passes produce the same record")
def passes_identical(ctx: RoutingScenarioContext) -> None:
    first, second = ctx.records
    assert first == second
