from __future__ import annotations

from dataclasses import dataclass

from markdown_it import MarkdownIt
from markdown_it.token import Token

from ...models import Section
from .summary import ELLIPSIS, SENTENCE_TERMINATORS, extract_summary


MAX_TITLE_LEN = 30
CODE_TITLE_PREFIX = "Code: "
FALLBACK_CODE_TITLE = "Code block"
FALLBACK_SECTION_TITLE = "Untitled section"

_FENCE_MARKERS = ("```", "~~~")


def new_parser() -> MarkdownIt:
    return MarkdownIt("commonmark")


def normalize_newlines(text: str) -> str:
    return text.replace("\r\n", "\n").replace("\r", "\n")


def heading_text(inline: Token | None) -> str:
    """Plain text of a heading's inline token; line breaks become one space."""
    if inline is None or not inline.children:
        return ""
    parts: list[str] = []
    for child in inline.children:
        if child.type in {"text", "code_inline"}:
            parts.append(child.content)
        elif child.type in {"softbreak", "hardbreak"}:
            parts.append(" ")
    return "".join(parts).strip()


@dataclass(frozen=True)
class _Heading:
    start: int
    markup_end: int
    title: str


class _LineIndex:
    def __init__(self, text: str) -> None:
        self.size = len(text)
        self.starts = [0]
        pos = text.find("\n")
        while pos != -1:
            self.starts.append(pos + 1)
            pos = text.find("\n", pos + 1)

    def offset(self, line: int) -> int:
        if line < len(self.starts):
            return self.starts[line]
        return self.size


@dataclass
class MarkdownHeadingsSectioner:
    """Split Markdown into sections at headings of one level.

    Boundaries come from the CommonMark token stream, so heading-like lines
    inside fenced code never open a section. A heading nested in a block quote
    or list item is still a boundary.
    """

    level: int = 2

    def section(self, content: str, parent_title: str) -> list[Section]:
        text = normalize_newlines(content)
        headings = self._collect_headings(text)

        sections: list[Section] = []
        for i, h in enumerate(headings):
            end = headings[i + 1].start if i + 1 < len(headings) else len(text)
            body = text[h.markup_end : end].strip()
            if not body:
                continue
            sections.append(
                Section(
                    title=h.title or synthesize_title(body),
                    content=body,
                    parent_title=parent_title,
                    summary=extract_summary(body),
                )
            )
        return sections

    def _collect_headings(self, text: str) -> list[_Heading]:
        tag = f"h{self.level}"
        lines = _LineIndex(text)
        tokens = new_parser().parse(text)

        headings: list[_Heading] = []
        for idx, tok in enumerate(tokens):
            if tok.type != "heading_open" or tok.tag != tag or not tok.map:
                continue
            inline = tokens[idx + 1] if idx + 1 < len(tokens) else None
            headings.append(
                _Heading(
                    start=lines.offset(tok.map[0]),
                    markup_end=lines.offset(tok.map[1]),
                    title=heading_text(inline),
                )
            )
        return headings


def slice_by_headers(content: str, parent_title: str) -> list[Section]:
    return MarkdownHeadingsSectioner(level=2).section(content, parent_title)


def synthesize_title(content: str) -> str:
    """Title for a section whose heading has no text, from its first line."""
    first_line = content.strip().split("\n", 1)[0].strip()

    if first_line.startswith(_FENCE_MARKERS):
        info = first_line.lstrip(first_line[0]).strip()
        title = CODE_TITLE_PREFIX + info if info else FALLBACK_CODE_TITLE
    else:
        title = first_line
        if len(title) > MAX_TITLE_LEN:
            cut = max(title.rfind(t, 0, MAX_TITLE_LEN) for t in SENTENCE_TERMINATORS)
            title = title[: cut + 1] if cut > 0 else title[: MAX_TITLE_LEN - len(ELLIPSIS)] + ELLIPSIS

    title = " ".join(title.split())
    if len(title) > MAX_TITLE_LEN:
        title = title[: MAX_TITLE_LEN - len(ELLIPSIS)] + ELLIPSIS
    return title or FALLBACK_SECTION_TITLE
