"""Command line interface: enrich, simulate and export pipelines.

Provides:
- lambdascope enrich - Route NDJSON documents through the pipelines
- lambdascope simulate - Run one named pipeline over NDJSON documents
- lambdascope pipelines - List pipelines and the kinds routed to them
- lambdascope export - Print a pipeline's Elasticsearch definition
- lambdascope check-env - Validate the Lambda telemetry environment
"""

import json
import logging
import os
import sys
from pathlib import Path
from typing import Optional

import typer

from lambdascope.config import build_router, configure_logging, load_settings
from lambdascope.core.encoding.ndjson import decode_documents, encode_records
from lambdascope.core.environment import check_lambda_environment
from lambdascope.core.router import PipelineRouter

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="lambdascope",
    help="Normalize AWS Lambda telemetry for Elastic Observability",
    no_args_is_help=True,
)


def _router() -> PipelineRouter:
    """Load settings, configure logging and build the router."""
    try:
        settings = load_settings()
        configure_logging(settings.log_level)
        return build_router(settings)
    except ValueError as e:
        typer.echo(f"❌ {e}", err=True)
        raise typer.Exit(code=2) from e


def _read_input(path: Optional[Path]) -> str:
    from_stdin = path is None or str(path) == "-"
    try:
        if from_stdin:
            return sys.stdin.read()
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        source = "stdin" if from_stdin else path
        typer.echo(f"❌ cannot read {source}: {e}", err=True)
        raise typer.Exit(code=1) from e


def _documents(text: str) -> list[dict]:
    try:
        return list(decode_documents(text))
    except ValueError as e:
        typer.echo(f"❌ {e}", err=True)
        raise typer.Exit(code=1) from e


@app.command()
def enrich(
    input_path: Optional[Path] = typer.Argument(
        None, help="NDJSON file of documents ('-' or omitted for stdin)"
    ),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Write enriched NDJSON here instead of stdout"
    ),
) -> None:
    """Route documents through the pipeline for their kind."""
    router = _router()
    documents = _documents(_read_input(input_path))
    body = encode_records(router.route_many(documents))
    if output is None:
        typer.echo(body, nl=False)
    else:
        output.write_text(body, encoding="utf-8")
        logger.info("Wrote %d records to %s", len(documents), output)


@app.command()
def simulate(
    pipeline_id: str = typer.Argument(..., help="Pipeline to run"),
    input_path: Optional[Path] = typer.Argument(
        None, help="NDJSON file of documents ('-' or omitted for stdin)"
    ),
) -> None:
    """Run one pipeline over documents regardless of their kind."""
    router = _router()
    if router.pipeline(pipeline_id) is None:
        typer.echo(f"❌ unknown pipeline {pipeline_id!r}", err=True)
        raise typer.Exit(code=1)
    documents = _documents(_read_input(input_path))
    typer.echo(encode_records(router.simulate(pipeline_id, documents)), nl=False)


@app.command()
def pipelines() -> None:
    """List pipelines and the record kinds routed to them."""
    router = _router()
    kinds: dict[str, list[str]] = {}
    for rule in router.rules:
        kinds.setdefault(rule.pipeline_id, []).append(f"{rule.kind} ({rule.field})")
    for pipeline_id in router.pipeline_ids():
        routed = ", ".join(kinds.get(pipeline_id, [])) or "not routed"
        typer.echo(f"{pipeline_id}\t{routed}")


@app.command()
def export(
    pipeline_id: str = typer.Argument(..., help="Pipeline to export"),
) -> None:
    """Print the body for PUT _ingest/pipeline/<pipeline_id>."""
    router = _router()
    pipeline = router.pipeline(pipeline_id)
    if pipeline is None:
        typer.echo(f"❌ unknown pipeline {pipeline_id!r}", err=True)
        raise typer.Exit(code=1)
    typer.echo(json.dumps(pipeline.to_definition(), indent=2))


@app.command("check-env")
def check_env() -> None:
    """Check this process's environment against the ADOT Lambda contract."""
    problems = check_lambda_environment(os.environ)
    if not problems:
        typer.echo("✅ Lambda telemetry environment looks complete")
        return
    for problem in problems:
        typer.echo(f"❌ {problem}", err=True)
    raise typer.Exit(code=1)


def main() -> None:
    """Console script entry point."""
    app()


if __name__ == "__main__":
    main()
