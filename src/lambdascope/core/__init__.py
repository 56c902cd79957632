"""Core domain: records, processors, pipelines and routing."""
