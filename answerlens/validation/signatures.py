"""Magic-number signatures for the supported upload types."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Signature:
    """A byte pattern expected at a fixed offset."""

    magic: bytes
    offset: int = 0

    def matches(self, data: bytes) -> bool:
        end = self.offset + len(self.magic)
        return data[self.offset:end] == self.magic


# Each MIME type maps to alternatives; an alternative matches only if all of
# its signatures match.
SIGNATURES: dict[str, list[tuple[Signature, ...]]] = {
    "image/jpeg": [(Signature(b"\xff\xd8\xff"),)],
    "image/jpg": [(Signature(b"\xff\xd8\xff"),)],
    "image/png": [(Signature(b"\x89PNG"),)],
    "image/bmp": [(Signature(b"BM"),)],
    "image/tiff": [
        (Signature(b"II*\x00"),),
        (Signature(b"MM\x00*"),),
    ],
    "image/webp": [(Signature(b"RIFF"), Signature(b"WEBP", offset=8))],
    "application/pdf": [(Signature(b"%PDF"),)],
}


def has_signature(mime_type: str) -> bool:
    return mime_type in SIGNATURES


def matches_signature(data: bytes, mime_type: str) -> bool:
    """Return True if the leading bytes of data match the declared MIME type."""
    alternatives = SIGNATURES.get(mime_type, [])
    return any(
        all(signature.matches(data) for signature in alternative)
        for alternative in alternatives
    )


def detect_mime_type(data: bytes) -> str | None:
    """Best-effort MIME detection from content, used for error messages."""
    for mime_type, alternatives in SIGNATURES.items():
        if mime_type == "image/jpg":
            continue
        if any(all(s.matches(data) for s in alternative) for alternative in alternatives):
            return mime_type
    return None
