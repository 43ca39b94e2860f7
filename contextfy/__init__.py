"""Markdown section ingestion with an atomic JSON record store."""

from .core.retriever import Brief, Details, Retriever
from .ingestion.errors import (
    DocumentNotFoundError,
    IngestionError,
    RecordSerializationError,
    RollbackError,
    StoreIoError,
)
from .ingestion.models import Document, Section
from .ingestion.stages.parsing import extract_summary, parse_markdown, slice_by_headers
from .ingestion.stages.storage import KnowledgeStore, Record, open_store

__all__ = [
    "Document",
    "Section",
    "Record",
    "parse_markdown",
    "slice_by_headers",
    "extract_summary",
    "KnowledgeStore",
    "open_store",
    "Retriever",
    "Brief",
    "Details",
    "IngestionError",
    "DocumentNotFoundError",
    "RecordSerializationError",
    "StoreIoError",
    "RollbackError",
]
