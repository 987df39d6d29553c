from dataclasses import dataclass, field


@dataclass(frozen=True)
class BoundingBox:
    """Token box in image pixels."""

    left: int
    top: int
    width: int
    height: int


@dataclass(frozen=True)
class RecognizedToken:
    """One token as reported by a recognition engine."""

    text: str
    confidence: float | None = None
    bbox: BoundingBox | None = None


@dataclass(frozen=True)
class Recognition:
    """Raw engine output for one image."""

    text: str
    tokens: list[RecognizedToken] = field(default_factory=list)


@dataclass(frozen=True)
class TokenBox:
    """Token kept in the OCR result for callers that need layout."""

    text: str
    confidence: float
    bbox: BoundingBox


@dataclass(frozen=True)
class PageResult:
    """Per-page outcome of a multi-page extraction."""

    index: int
    success: bool
    confidence: float = 0.0
    processing_time_ms: int = 0
    error: str | None = None


@dataclass
class OCRResult:
    """Output of the OCR stage."""

    extracted_text: str
    confidence: float
    language: str
    processing_time_ms: int
    raw_text: str = ""
    bounding_boxes: list[TokenBox] = field(default_factory=list)
    page_count: int = 1
    pages_failed: int = 0
    page_results: list[PageResult] = field(default_factory=list)
