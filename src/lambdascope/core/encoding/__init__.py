"""Wire encodings for telemetry documents."""

from lambdascope.core.encoding.ndjson import decode_documents, encode_records

__all__ = ["decode_documents", "encode_records"]
