"""Runtime configuration loaded from environment variables."""

import json
import logging
import os
import sys
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from lambdascope.core.pipeline import pipeline_from_definition
from lambdascope.core.router import PipelineRouter, RoutingRule
from lambdascope.core.rules import default_router

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


@dataclass(frozen=True)
class Settings:
    """Settings for the CLI and HTTP adapters.

    Attributes:
        db_path: SQLite sink path (``LAMBDASCOPE_DB_PATH``).
        pipelines_file: Optional JSON file with extra pipelines and routes
            (``LAMBDASCOPE_PIPELINES_FILE``).
        log_level: Root log level (``LAMBDASCOPE_LOG_LEVEL``).
    """

    db_path: str = ":memory:"
    pipelines_file: Path | None = None
    log_level: str = "WARNING"


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Read settings from the environment, with defaults for local use.

    Raises:
        ValueError: If the log level is not a standard level name.
    """
    env = os.environ if environ is None else environ
    log_level = env.get("LAMBDASCOPE_LOG_LEVEL", "WARNING").strip().upper()
    if log_level not in _LOG_LEVELS:
        raise ValueError(f"LAMBDASCOPE_LOG_LEVEL must be one of {sorted(_LOG_LEVELS)}")
    pipelines_file = env.get("LAMBDASCOPE_PIPELINES_FILE", "").strip()
    return Settings(
        db_path=env.get("LAMBDASCOPE_DB_PATH", "").strip() or ":memory:",
        pipelines_file=Path(pipelines_file) if pipelines_file else None,
        log_level=log_level,
    )


def configure_logging(level: str) -> None:
    """Send lambdascope logs to stderr at the given level."""
    logger = logging.getLogger("lambdascope")
    logger.setLevel(level)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
        logger.addHandler(handler)


def _extend_router(router: PipelineRouter, extra: Mapping[str, Any]) -> None:
    """Register the pipelines and routes of a pipelines file."""
    definitions = extra.get("pipelines", {})
    if not isinstance(definitions, Mapping):
        raise ValueError("'pipelines' must be an object of id -> definition")
    for pipeline_id, body in definitions.items():
        router.add_pipeline(pipeline_from_definition(pipeline_id, body))
    routes = extra.get("routes", [])
    if not isinstance(routes, list):
        raise ValueError("'routes' must be a list")
    for entry in routes:
        try:
            rule = RoutingRule(
                kind=entry["kind"], field=entry["field"], pipeline_id=entry["pipeline"]
            )
        except (KeyError, TypeError) as e:
            raise ValueError(f"route entries need kind, field and pipeline: {e}") from e
        router.add_rule(rule)


def build_router(settings: Settings) -> PipelineRouter:
    """Return the built-in router extended with the configured pipelines file.

    Raises:
        ValueError: If the pipelines file is unreadable or malformed.
    """
    router = default_router()
    if settings.pipelines_file is None:
        return router
    try:
        extra = json.loads(settings.pipelines_file.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ValueError(f"cannot load {settings.pipelines_file}: {e}") from e
    if not isinstance(extra, Mapping):
        raise ValueError(f"{settings.pipelines_file} must contain a JSON object")
    _extend_router(router, extra)
    return router
