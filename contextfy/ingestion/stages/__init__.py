"""Ingestion stages."""

from ..pipeline import DEFAULT_STAGE_ORDER, StageSpec
from .parsing import MarkdownHeadingsSectioner, MarkdownLoader, extract_summary, parse_markdown, slice_by_headers
from .storage import KnowledgeStore, Record, StagedCommit

__all__ = [
    "StageSpec",
    "DEFAULT_STAGE_ORDER",
    "MarkdownLoader",
    "MarkdownHeadingsSectioner",
    "parse_markdown",
    "slice_by_headers",
    "extract_summary",
    "KnowledgeStore",
    "Record",
    "StagedCommit",
]
