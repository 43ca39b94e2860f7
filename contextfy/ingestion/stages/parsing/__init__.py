"""Markdown parsing: title, summary and H2 sections."""

from .loader import MarkdownLoader, extract_title, parse_markdown
from .sectioner import MarkdownHeadingsSectioner, slice_by_headers, synthesize_title
from .summary import extract_summary, truncate_at_sentence

__all__ = [
    "MarkdownLoader",
    "parse_markdown",
    "extract_title",
    "MarkdownHeadingsSectioner",
    "slice_by_headers",
    "synthesize_title",
    "extract_summary",
    "truncate_at_sentence",
]
