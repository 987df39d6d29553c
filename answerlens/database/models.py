import uuid
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from answerlens.analysis.models import (
    AnalysisOptions,
    AnalysisResult,
    ModelMetadata,
    Suggestion,
    SuggestionCategory,
    SuggestionPriority,
)
from answerlens.ocr.models import BoundingBox, OCRResult, PageResult, TokenBox


class AnalysisStatus(str, Enum):
    PENDING = "pending"
    PROCESSING_OCR = "processing_ocr"
    PROCESSING_AI = "processing_ai"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATUSES


TERMINAL_STATUSES = frozenset(
    {AnalysisStatus.COMPLETED, AnalysisStatus.FAILED, AnalysisStatus.CANCELLED}
)


@dataclass(frozen=True)
class RecordError:
    """Failure details stored on a failed record."""

    message: str
    stage: str
    code: str


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class AnalysisRecord:
    """Represents one analysis request as stored in the analyses table."""

    filename: str
    mime_type: str
    file_size: int
    file_hash: str
    options: AnalysisOptions = field(default_factory=AnalysisOptions)
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    status: AnalysisStatus = AnalysisStatus.PENDING
    ocr: OCRResult | None = None
    ai: AnalysisResult | None = None
    error: RecordError | None = None
    warnings: list[str] = field(default_factory=list)
    processing_time_ms: int | None = None
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)
    completed_at: datetime | None = None

    def to_document(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dict (whole-document storage)."""
        document = asdict(self)
        document["status"] = self.status.value
        document["created_at"] = self.created_at.isoformat()
        document["updated_at"] = self.updated_at.isoformat()
        document["completed_at"] = self.completed_at.isoformat() if self.completed_at else None
        if self.ai is not None:
            document["ai"]["suggestions"] = [
                {**asdict(s), "category": s.category.value, "priority": s.priority.value}
                for s in self.ai.suggestions
            ]
        return document

    @classmethod
    def from_document(cls, document: dict[str, Any]) -> "AnalysisRecord":
        return cls(
            id=document["id"],
            filename=document["filename"],
            mime_type=document["mime_type"],
            file_size=document["file_size"],
            file_hash=document["file_hash"],
            options=AnalysisOptions(**document.get("options") or {}),
            status=AnalysisStatus(document["status"]),
            ocr=_ocr_from_dict(document.get("ocr")),
            ai=_ai_from_dict(document.get("ai")),
            error=RecordError(**document["error"]) if document.get("error") else None,
            warnings=list(document.get("warnings") or []),
            processing_time_ms=document.get("processing_time_ms"),
            created_at=datetime.fromisoformat(document["created_at"]),
            updated_at=datetime.fromisoformat(document["updated_at"]),
            completed_at=(
                datetime.fromisoformat(document["completed_at"])
                if document.get("completed_at")
                else None
            ),
        )


def _ocr_from_dict(data: dict[str, Any] | None) -> OCRResult | None:
    if data is None:
        return None
    return OCRResult(
        extracted_text=data["extracted_text"],
        confidence=data["confidence"],
        language=data["language"],
        processing_time_ms=data["processing_time_ms"],
        raw_text=data.get("raw_text", ""),
        bounding_boxes=[
            TokenBox(text=b["text"], confidence=b["confidence"], bbox=BoundingBox(**b["bbox"]))
            for b in data.get("bounding_boxes", [])
        ],
        page_count=data.get("page_count", 1),
        pages_failed=data.get("pages_failed", 0),
        page_results=[PageResult(**p) for p in data.get("page_results", [])],
    )


def _ai_from_dict(data: dict[str, Any] | None) -> AnalysisResult | None:
    if data is None:
        return None
    return AnalysisResult(
        summary=data["summary"],
        suggestions=[
            Suggestion(
                category=SuggestionCategory.coerce(s.get("category")),
                priority=SuggestionPriority.coerce(s.get("priority")),
                content=s["content"],
                location=s.get("location"),
            )
            for s in data.get("suggestions", [])
        ],
        insights=list(data.get("insights", [])),
        study_tips=list(data.get("study_tips", [])),
        related_concepts=list(data.get("related_concepts", [])),
        metadata=ModelMetadata(**data.get("metadata", {})),
    )
