import hashlib
import mimetypes
from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True)
class UploadedFile:
    """Raw upload as delivered by the transport. Never persisted."""

    content: bytes
    filename: str
    mime_type: str
    size: int

    @classmethod
    def from_path(cls, path: Path, mime_type: str | None = None) -> "UploadedFile":
        """Read a local file, guessing the MIME type from its extension when not given."""
        content = path.read_bytes()
        if mime_type is None:
            mime_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
        return cls(content=content, filename=path.name, mime_type=mime_type, size=len(content))

    def sha256(self) -> str:
        return hashlib.sha256(self.content).hexdigest()


@dataclass(frozen=True)
class FileInfo:
    """File metadata derived during validation."""

    filename: str
    size: int
    mime_type: str
    extension: str


@dataclass
class ValidationResult:
    """Outcome of FileValidator.validate."""

    file_info: FileInfo
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors
