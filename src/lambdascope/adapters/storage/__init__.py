"""Record sinks implementing core ports."""

from lambdascope.adapters.storage.in_memory import InMemoryRecordSink
from lambdascope.adapters.storage.sqlite import SQLiteRecordSink

__all__ = [
    "InMemoryRecordSink",
    "SQLiteRecordSink",
]
