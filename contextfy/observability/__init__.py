"""Structured tracing for ingestion and retrieval."""
