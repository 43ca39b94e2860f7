"""Ingestion pipeline and stages."""
from .pipeline import IngestionPipeline, StageSpec, DEFAULT_STAGE_ORDER
from .models import Document, IngestResult, Section, StageContext
from .errors import (
    DocumentNotFoundError,
    IngestionError,
    RecordSerializationError,
    RollbackError,
    StageExecutionError,
    StoreIoError,
)

__all__ = [
    "IngestionPipeline",
    "StageSpec",
    "DEFAULT_STAGE_ORDER",
    "Document",
    "Section",
    "IngestResult",
    "StageContext",
    "IngestionError",
    "StageExecutionError",
    "DocumentNotFoundError",
    "RecordSerializationError",
    "StoreIoError",
    "RollbackError",
]
