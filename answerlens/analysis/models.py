from dataclasses import dataclass, field
from enum import Enum


class SuggestionCategory(str, Enum):
    GRAMMAR = "grammar"
    CLARITY = "clarity"
    STRUCTURE = "structure"
    CONTENT = "content"
    FORMATTING = "formatting"
    CONCEPT = "concept"
    METHOD = "method"
    GENERAL = "general"

    @classmethod
    def coerce(cls, value: object) -> "SuggestionCategory":
        """Map model output onto the enum, defaulting to GENERAL."""
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        return cls.GENERAL


class SuggestionPriority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @classmethod
    def coerce(cls, value: object) -> "SuggestionPriority":
        """Map model output onto the enum, defaulting to MEDIUM."""
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        return cls.MEDIUM


@dataclass(frozen=True)
class Suggestion:
    """A single piece of feedback on the document."""

    category: SuggestionCategory
    priority: SuggestionPriority
    content: str
    location: str | None = None


@dataclass(frozen=True)
class Completion:
    """Text returned by a language-model call, with token usage when known."""

    text: str
    model: str = ""
    tokens_in: int = 0
    tokens_out: int = 0


@dataclass
class ModelMetadata:
    """How an analysis was produced."""

    model: str = ""
    tokens_in: int = 0
    tokens_out: int = 0
    processing_time_ms: int = 0
    chunk_count: int = 1
    failed_chunks: int = 0
    parse_mode: str = "json"


@dataclass
class AnalysisResult:
    """Output of the AI analysis stage."""

    summary: str
    suggestions: list[Suggestion] = field(default_factory=list)
    insights: list[str] = field(default_factory=list)
    study_tips: list[str] = field(default_factory=list)
    related_concepts: list[str] = field(default_factory=list)
    metadata: ModelMetadata = field(default_factory=ModelMetadata)


@dataclass(frozen=True)
class AnalysisOptions:
    """Caller-provided hints for OCR and analysis."""

    subject: str = ""
    difficulty: str = ""
    language: str = ""
    analysis_language: str = "English"
