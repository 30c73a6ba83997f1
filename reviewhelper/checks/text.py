from __future__ import annotations

import re

from markdown_it import MarkdownIt

_BLOCK_CLOSE = {"paragraph_close", "heading_close", "list_item_close", "blockquote_close"}


def word_count(text: str) -> int:
    return len(text.split())


def double_space(text: str) -> str:
    """Puts a blank line between every non-empty line."""

    lines = [line for line in text.splitlines() if line.strip()]
    return "\n\n".join(lines)


def markdown_to_text(markdown: str) -> str:
    """Strips markdown formatting, keeping text and code contents."""

    parts: list[str] = []
    for token in MarkdownIt().parse(markdown):
        if token.type == "inline":
            parts.append("".join(_inline_text(child) for child in token.children or []))
        elif token.type in {"fence", "code_block"}:
            parts.append(token.content.rstrip("\n"))
            parts.append("\n")
        elif token.type in _BLOCK_CLOSE:
            parts.append("\n")
    text = "".join(parts)
    return re.sub(r"\n{3,}", "\n\n", text).strip()


def _inline_text(token) -> str:
    if token.type in {"text", "code_inline"}:
        return token.content
    if token.type in {"softbreak", "hardbreak"}:
        return "\n"
    return ""
