"""Post-OCR text cleanup.

Cleanup keeps paragraph breaks intact because the chunker splits on them.
"""

import re
from collections.abc import Iterable

DEFAULT_WATERMARKS = ("CONFIDENTIAL", "DO NOT COPY", "DRAFT")

_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b-\x1f\x7f]")
_HORIZONTAL_WS = re.compile(r"[ \t\f\v\u00a0]+")
_SPACE_AROUND_NEWLINE = re.compile(r" *\n *")
_EXCESS_NEWLINES = re.compile(r"\n{3,}")

_BOILERPLATE_LINES = (
    re.compile(r"^page\s+\d+(\s+of\s+\d+)?$", re.IGNORECASE),
    re.compile(r"^-\s*\d+\s*-$"),
    re.compile(r"^\d+$"),
    re.compile(r"^[-=_]{3,}$"),
)

# Look-alike digits mapped to (lowercase, uppercase) letters.
_CONFUSIONS = {"0": ("o", "O"), "1": ("l", "I"), "5": ("s", "S")}
_FLANKED_DIGIT = re.compile(r"(?<=[A-Za-z])[015](?=[A-Za-z])")


class TextCleaner:
    """Normalizes raw OCR output before it is stored and analyzed."""

    def __init__(
        self,
        *,
        fix_char_confusions: bool = True,
        watermarks: Iterable[str] = DEFAULT_WATERMARKS,
    ) -> None:
        self._fix_char_confusions = fix_char_confusions
        marks = sorted(watermarks, key=len, reverse=True)
        self._watermark_pattern = (
            re.compile(r"\b(?:" + "|".join(re.escape(m) for m in marks) + r")\b")
            if marks
            else None
        )

    def clean(self, text: str) -> str:
        if not text:
            return ""
        cleaned = _CONTROL_CHARS.sub("", text.replace("\r\n", "\n").replace("\r", "\n"))
        cleaned = self._collapse_whitespace(cleaned)
        cleaned = self._remove_boilerplate_lines(cleaned)
        cleaned = self._remove_watermarks(cleaned)
        if self._fix_char_confusions:
            cleaned = fix_char_confusions(cleaned)
        return self._collapse_whitespace(cleaned)

    @staticmethod
    def _collapse_whitespace(text: str) -> str:
        text = _HORIZONTAL_WS.sub(" ", text)
        text = _SPACE_AROUND_NEWLINE.sub("\n", text)
        text = _EXCESS_NEWLINES.sub("\n\n", text)
        return text.strip()

    def _remove_watermarks(self, text: str) -> str:
        if self._watermark_pattern is None:
            return text
        return self._watermark_pattern.sub("", text)

    @staticmethod
    def _remove_boilerplate_lines(text: str) -> str:
        kept: list[str] = []
        for line in text.split("\n"):
            stripped = line.strip()
            if not stripped:
                kept.append("")
                continue
            if any(pattern.match(stripped) for pattern in _BOILERPLATE_LINES):
                continue
            if len(stripped) <= 2 and not stripped.endswith((".", "!", "?")):
                continue
            kept.append(stripped)
        return "\n".join(kept)


def fix_char_confusions(text: str) -> str:
    """Replace look-alike digits that sit between two letters.

    Only digits with a letter on both sides are touched, so numbers,
    including digits at the edge of a numeric run, are never changed.
    """

    def _replace(match: re.Match[str]) -> str:
        start = match.start()
        before, after = text[start - 1], text[start + 1]
        lower, upper = _CONFUSIONS[match.group()]
        return upper if before.isupper() and after.isupper() else lower

    return _FLANKED_DIGIT.sub(_replace, text)
