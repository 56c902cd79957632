"""Environment contract of an instrumented Lambda function.

The ADOT layer wraps the handler and reads its collector configuration and
OTLP destination from these variables. Missing or malformed values mean the
function runs but exports nothing.
"""

from collections.abc import Mapping
from urllib.parse import unquote, urlparse

EXEC_WRAPPER = "AWS_LAMBDA_EXEC_WRAPPER"
COLLECTOR_CONFIG_FILE = "OPENTELEMETRY_COLLECTOR_CONFIG_FILE"
OTLP_ENDPOINT = "OTEL_EXPORTER_OTLP_ENDPOINT"
OTLP_HEADERS = "OTEL_EXPORTER_OTLP_HEADERS"

LAMBDA_ENVIRONMENT_CONTRACT: dict[str, str] = {
    EXEC_WRAPPER: "/opt/otel-instrument",
    COLLECTOR_CONFIG_FILE: "/var/task/collector.yaml",
    OTLP_ENDPOINT: "https://<apm-server-host>:443",
    OTLP_HEADERS: "Authorization=Bearer <secret-token>",
}


def _parse_headers(raw: str) -> dict[str, str]:
    """Parse ``key=value,key=value`` OTLP header lists (values may be %-encoded)."""
    headers: dict[str, str] = {}
    for item in raw.split(","):
        key, sep, value = item.partition("=")
        if sep:
            headers[key.strip().lower()] = unquote(value.strip())
    return headers


def check_lambda_environment(env: Mapping[str, str]) -> list[str]:
    """Return problems with a Lambda function's telemetry environment.

    Args:
        env: The function's environment variables.

    Returns:
        Human-readable problems, empty if the contract is satisfied.
    """
    problems = [
        f"{name} is not set (expected e.g. {example!r})"
        for name, example in LAMBDA_ENVIRONMENT_CONTRACT.items()
        if not env.get(name, "").strip()
    ]

    endpoint = env.get(OTLP_ENDPOINT, "").strip()
    if endpoint:
        parsed = urlparse(endpoint)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            problems.append(f"{OTLP_ENDPOINT} must be an http(s) URL, got {endpoint!r}")

    raw_headers = env.get(OTLP_HEADERS, "").strip()
    if raw_headers:
        authorization = _parse_headers(raw_headers).get("authorization", "")
        if not authorization.lower().startswith("bearer "):
            problems.append(
                f"{OTLP_HEADERS} must carry 'Authorization=Bearer <token>'"
            )
    return problems
