from __future__ import annotations


HARD_LIMIT = 1000
SOFT_LIMIT = 200
ELLIPSIS = "..."
FENCE_CHAR = "`"
SENTENCE_TERMINATORS = frozenset(".!?。！？")


def extract_summary(content: str) -> str:
    """Return a bounded excerpt of `content` for search-result listings.

    A leading fenced code block is kept whole; otherwise the excerpt is the
    first paragraph. Excerpts over 1000 characters, or over 200 characters
    when the content has no paragraph break, are cut at a sentence boundary.
    """
    text = content.strip()
    if not text:
        return ""

    if text.startswith(FENCE_CHAR * 3):
        excerpt = _leading_fence_block(text)
        bounded = True
    else:
        brk = text.find("\n\n")
        bounded = brk != -1
        excerpt = text[:brk] if bounded else text

    if len(excerpt) > HARD_LIMIT:
        excerpt = truncate_at_sentence(excerpt, HARD_LIMIT)
    if not bounded and len(excerpt) > SOFT_LIMIT:
        excerpt = truncate_at_sentence(excerpt, SOFT_LIMIT)

    return excerpt.strip()


def _leading_fence_block(text: str) -> str:
    open_len = _run_length(text, 0)
    pos = open_len
    while pos < len(text):
        if text[pos] != FENCE_CHAR:
            pos += 1
            continue
        run = _run_length(text, pos)
        if run >= open_len:
            return text[: pos + run]
        pos += run
    return text


def _run_length(text: str, start: int) -> int:
    end = start
    while end < len(text) and text[end] == FENCE_CHAR:
        end += 1
    return end - start


def truncate_at_sentence(text: str, limit: int) -> str:
    """Cut `text` to at most `limit` characters, preferring a sentence end.

    Without a terminator inside the limit the cut is hard and `...` is
    appended.
    """
    if len(text) <= limit:
        return text

    for i in range(limit - 1, -1, -1):
        if text[i] not in SENTENCE_TERMINATORS:
            continue
        if i == limit - 1 or text[i + 1].isspace():
            return text[: i + 1]

    return text[:limit] + ELLIPSIS
