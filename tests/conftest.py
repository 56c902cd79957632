"""Shared test fixtures for all test modules."""

from collections.abc import Callable
from pathlib import Path
from typing import Any

import httpx
import pytest
from lambdascope.adapters.storage.in_memory import InMemoryRecordSink
from lambdascope.core.router import PipelineRouter
from lambdascope.core.rules import default_router


@pytest.fixture
def router() -> PipelineRouter:
    """Router with the built-in AWS Lambda pipelines."""
    return default_router()


@pytest.fixture
def sink() -> InMemoryRecordSink:
    """Empty in-memory record sink."""
    return InMemoryRecordSink()


@pytest.fixture
def records_db_path(tmp_path: Path) -> str:
    """Provide a temporary database path for sink tests."""
    return str(tmp_path / "records.db")


@pytest.fixture
def log_document() -> Callable[[str], dict[str, Any]]:
    """Factory for CloudWatch log documents with a given log group."""

    def _document(log_group: str) -> dict[str, Any]:
        return {
            "message": "START RequestId: 8f5e Version: $LATEST",
            "awscloudwatch": {
                "log_group": log_group,
                "log_stream": "2024/05/02/[$LATEST]0123456789abcdef",
            },
        }

    return _document


@pytest.fixture
def metric_document() -> Callable[[str], dict[str, Any]]:
    """Factory for Lambda metric documents with a given function name."""

    def _document(function_name: str) -> dict[str, Any]:
        return {
            "aws": {
                "dimensions": {"FunctionName": function_name},
                "lambda": {"metrics": {"Invocations": {"sum": 3}}},
            },
        }

    return _document


@pytest.fixture
def asgi_test_client():
    """Factory fixture that creates an httpx.AsyncClient for ASGI testing.

    Usage:
        async def test_something(asgi_test_client):
            app = create_asgi_app(router, sink)
            async with asgi_test_client(app) as client:
                response = await client.get("/records")
    """
    if httpx is None:
        pytest.skip("httpx not installed")

    def _get_client(app):
        """Return an AsyncClient context manager for the given app."""
        return httpx.AsyncClient(
            transport=httpx.ASGITransport(app=app), base_url="http://test"
        )

    return _get_client
