"""Markdown projection for descriptions shown alongside an exchange.

Rendering to display markup belongs to the display layer; anything matching
``MarkdownRenderer`` can be passed in its place.
"""

from typing import Callable

MarkdownRenderer = Callable[[str | None], str | None]


def from_markdown(text: str | None) -> str | None:
    """Normalise a markdown source string, returning None when there is nothing to show."""
    if not text:
        return None
    text = text.strip()
    return text or None


def join_markdown(*parts: str | None) -> str:
    """Concatenate description fragments as markdown paragraphs, skipping empty ones."""
    return "\n\n".join(p for p in parts if p)
