"""HTTP framework adapters for the ingest endpoints."""
