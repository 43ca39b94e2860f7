from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from ...errors import DocumentNotFoundError
from ...models import Document
from .sectioner import MarkdownHeadingsSectioner, heading_text, new_parser, normalize_newlines
from .summary import extract_summary


FALLBACK_TITLE = "Untitled"


@dataclass
class MarkdownLoader:
    """Read one Markdown file into a `Document` with its H2 sections."""

    sectioner: MarkdownHeadingsSectioner | None = None

    def load(self, input_path: str | Path) -> Document:
        p = Path(input_path)
        if not p.is_file():
            raise DocumentNotFoundError(stage="loader", message=f"file not found: {p}", path=str(p))
        try:
            raw = p.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise DocumentNotFoundError(stage="loader", message=f"unreadable: {p}: {e}", path=str(p)) from e

        title = extract_title(raw) or p.stem or FALLBACK_TITLE
        content = raw.strip()
        sectioner = self.sectioner or MarkdownHeadingsSectioner(level=2)

        return Document(
            path=str(input_path),
            title=title,
            content=content,
            summary=extract_summary(content),
            sections=sectioner.section(content, title),
        )


def extract_title(md: str) -> str:
    """Text of the first level-1 heading, or "" if there is none."""
    tokens = new_parser().parse(normalize_newlines(md))
    for idx, tok in enumerate(tokens):
        if tok.type == "heading_open" and tok.tag == "h1":
            title = heading_text(tokens[idx + 1] if idx + 1 < len(tokens) else None)
            if title:
                return title
    return ""


def parse_markdown(file_path: str | Path) -> Document:
    return MarkdownLoader().load(file_path)
