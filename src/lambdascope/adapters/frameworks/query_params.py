"""Shared query parameter parsing utilities for framework adapters."""


def _parse_text_param(params: dict[str, list[str]], name: str) -> str | None:
    """Return the first non-blank value of a query parameter, or None.

    Args:
        params: Parsed query string parameters (as returned by urllib.parse.parse_qs).
        name: Parameter name.
    """
    values = params.get(name, [])
    value = values[0] if values else ""
    return value if value.strip() else None


def _parse_service_param(params: dict[str, list[str]]) -> str | None:
    """Parse the 'service' filter. Matched exactly, no case folding."""
    return _parse_text_param(params, "service")


def _parse_kind_param(params: dict[str, list[str]]) -> str | None:
    """Parse the 'kind' filter, lowercased."""
    kind = _parse_text_param(params, "kind")
    return kind.strip().lower() if kind else None
