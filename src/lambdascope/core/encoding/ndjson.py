"""NDJSON encoding for telemetry documents."""

import json
from collections.abc import Iterable, Iterator
from typing import Any

from lambdascope.core.models import TelemetryRecord


def encode_records(records: Iterable[TelemetryRecord]) -> str:
    """Encode records to newline-delimited JSON.

    Args:
        records: An iterable of TelemetryRecord objects.

    Returns:
        NDJSON string with one document per line.
        Empty string if no records.
    """
    lines = [json.dumps(record.document, ensure_ascii=False) for record in records]
    if not lines:
        return ""
    return "\n".join(lines) + "\n"


def decode_documents(text: str) -> Iterator[dict[str, Any]]:
    """Decode newline-delimited JSON into documents.

    Blank lines are skipped.

    Raises:
        ValueError: If a line is not a JSON object. The message names the
            1-based line number.
    """
    for lineno, line in enumerate(text.splitlines(), start=1):
        if not line.strip():
            continue
        try:
            document = json.loads(line)
        except json.JSONDecodeError as e:
            raise ValueError(f"line {lineno}: invalid JSON ({e.msg})") from e
        if not isinstance(document, dict):
            raise ValueError(f"line {lineno}: expected a JSON object")
        yield document
