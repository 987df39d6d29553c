import os
import re
from collections.abc import Iterable

from answerlens.validation.models import FileInfo, UploadedFile, ValidationResult
from answerlens.validation.signatures import detect_mime_type, has_signature, matches_signature

DEFAULT_MAX_FILE_SIZE = 20 * 1024 * 1024

DEFAULT_ALLOWED_EXTENSIONS = frozenset(
    {".jpg", ".jpeg", ".png", ".bmp", ".tiff", ".tif", ".webp", ".pdf"}
)
DEFAULT_ALLOWED_MIME_TYPES = frozenset(
    {
        "image/jpeg",
        "image/jpg",
        "image/png",
        "image/bmp",
        "image/tiff",
        "image/webp",
        "application/pdf",
    }
)
DANGEROUS_EXTENSIONS = frozenset(
    {".exe", ".bat", ".cmd", ".com", ".scr", ".sh", ".js", ".php", ".asp"}
)

SMALL_FILE_BYTES = 1024
LARGE_FILE_BYTES = 10 * 1024 * 1024

_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")


def format_file_size(size: int) -> str:
    """Format a byte count as a short human readable string (e.g. '1.5 MB')."""
    if size <= 0:
        return "0 B"
    value = float(size)
    for unit in ("B", "KB", "MB"):
        if value < 1024:
            return f"{value:.2f}".rstrip("0").rstrip(".") + f" {unit}"
        value /= 1024
    return f"{value:.2f}".rstrip("0").rstrip(".") + " GB"


class FileValidator:
    """Checks an upload against size, type, signature and naming constraints.

    All checks run on every call; errors accumulate instead of short-circuiting.
    The validator never raises on bad input, the caller decides what to do
    with an invalid result.
    """

    def __init__(
        self,
        max_file_size: int = DEFAULT_MAX_FILE_SIZE,
        allowed_extensions: Iterable[str] = DEFAULT_ALLOWED_EXTENSIONS,
        allowed_mime_types: Iterable[str] = DEFAULT_ALLOWED_MIME_TYPES,
    ) -> None:
        self._max_file_size = max_file_size
        self._allowed_extensions = frozenset(e.lower() for e in allowed_extensions)
        self._allowed_mime_types = frozenset(m.lower() for m in allowed_mime_types)

    def validate(self, file: UploadedFile) -> ValidationResult:
        extension = os.path.splitext(file.filename)[1].lower()
        mime_type = file.mime_type.lower()
        result = ValidationResult(
            file_info=FileInfo(
                filename=file.filename,
                size=file.size,
                mime_type=mime_type,
                extension=extension,
            )
        )

        self._check_size(file, result)
        self._check_extension(extension, result)
        self._check_mime_type(mime_type, result)
        self._check_signature(file.content, mime_type, result)
        self._check_filename(file.filename, result)
        self._add_warnings(file, result)
        return result

    def _check_size(self, file: UploadedFile, result: ValidationResult) -> None:
        if file.size > self._max_file_size:
            result.errors.append(
                f"File size ({format_file_size(file.size)}) exceeds maximum allowed "
                f"size ({format_file_size(self._max_file_size)})"
            )
        if file.size <= 0 or not file.content:
            result.errors.append("File is empty")

    def _check_extension(self, extension: str, result: ValidationResult) -> None:
        if extension not in self._allowed_extensions:
            allowed = ", ".join(sorted(self._allowed_extensions))
            result.errors.append(
                f"File extension '{extension}' is not allowed. Allowed extensions: {allowed}"
            )

    def _check_mime_type(self, mime_type: str, result: ValidationResult) -> None:
        if mime_type not in self._allowed_mime_types:
            allowed = ", ".join(sorted(self._allowed_mime_types))
            result.errors.append(
                f"File type '{mime_type}' is not allowed. Allowed types: {allowed}"
            )

    def _check_signature(self, content: bytes, mime_type: str, result: ValidationResult) -> None:
        if not has_signature(mime_type):
            result.warnings.append("Could not validate file signature")
            return
        if not matches_signature(content, mime_type):
            detected = detect_mime_type(content)
            detail = f" (content looks like '{detected}')" if detected else ""
            result.errors.append(
                f"File signature does not match the declared file type '{mime_type}'{detail}"
            )

    def _check_filename(self, filename: str, result: ValidationResult) -> None:
        if is_suspicious_filename(filename):
            result.errors.append("File name contains suspicious characters")

    def _add_warnings(self, file: UploadedFile, result: ValidationResult) -> None:
        if 0 < file.size < SMALL_FILE_BYTES:
            result.warnings.append("File is very small, which may indicate poor quality")
        if file.size > LARGE_FILE_BYTES:
            result.warnings.append("Large file may take longer to process")
        if file.content and file.size != len(file.content):
            result.warnings.append(
                f"Declared size ({file.size} bytes) differs from received "
                f"content ({len(file.content)} bytes)"
            )


def is_suspicious_filename(filename: str) -> bool:
    """Detect path traversal, control characters and executable extensions."""
    if not filename.strip():
        return True
    if ".." in filename or "/" in filename or "\\" in filename:
        return True
    if _CONTROL_CHARS.search(filename):
        return True
    suffixes = ["." + part.lower() for part in filename.split(".")[1:]]
    return any(suffix in DANGEROUS_EXTENSIONS for suffix in suffixes)
