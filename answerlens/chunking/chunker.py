"""Boundary-aware text chunking for model context limits.

Text is packed greedily by paragraph; a paragraph that does not fit on its
own is packed by sentence, and a sentence that does not fit is sliced. The
preference order paragraph > sentence > slice is fixed so identical input
always yields identical chunks.
"""

import re
from collections.abc import Callable

PARAGRAPH_SEPARATOR = "\n\n"
SENTENCE_SEPARATOR = " "

_PARAGRAPH_SPLIT = re.compile(r"\n\s*\n")
_SENTENCE_SPLIT = re.compile(r"(?<=[.!?])\s+")


def split_paragraphs(text: str) -> list[str]:
    return [p.strip() for p in _PARAGRAPH_SPLIT.split(text) if p.strip()]


def split_sentences(paragraph: str) -> list[str]:
    return [s.strip() for s in _SENTENCE_SPLIT.split(paragraph) if s.strip()]


def slice_text(text: str, max_length: int) -> list[str]:
    """Force-split text into max_length pieces. Last resort for atomic overflow."""
    return [text[i:i + max_length] for i in range(0, len(text), max_length)]


def chunk_text(text: str, max_length: int) -> list[str]:
    """Split text into non-empty chunks of at most max_length characters."""
    if max_length <= 0:
        raise ValueError("max_length must be positive")
    if not text.strip():
        return []
    if len(text) <= max_length:
        return [text]
    return _pack(split_paragraphs(text), PARAGRAPH_SEPARATOR, max_length, _chunk_paragraph)


def _chunk_paragraph(paragraph: str, max_length: int) -> list[str]:
    return _pack(split_sentences(paragraph), SENTENCE_SEPARATOR, max_length, slice_text)


def _pack(
    units: list[str],
    separator: str,
    max_length: int,
    split_oversized: Callable[[str, int], list[str]],
) -> list[str]:
    chunks: list[str] = []
    current = ""
    for unit in units:
        if len(unit) > max_length:
            if current:
                chunks.append(current)
                current = ""
            chunks.extend(split_oversized(unit, max_length))
            continue
        candidate = f"{current}{separator}{unit}" if current else unit
        if len(candidate) <= max_length:
            current = candidate
        else:
            chunks.append(current)
            current = unit
    if current:
        chunks.append(current)
    return chunks


class TextChunker:
    """Chunker bound to a configured maximum chunk length."""

    def __init__(self, max_length: int = 8000) -> None:
        if max_length <= 0:
            raise ValueError("max_length must be positive")
        self._max_length = max_length

    @property
    def max_length(self) -> int:
        return self._max_length

    def chunk(self, text: str) -> list[str]:
        return chunk_text(text, self._max_length)
