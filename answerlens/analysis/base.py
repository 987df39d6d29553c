from abc import ABC, abstractmethod
from collections.abc import Sequence

from answerlens.analysis.models import AnalysisOptions, AnalysisResult


class BaseAnalyzer(ABC):
    """Contract for all analysis adapters."""

    @abstractmethod
    async def analyze(
        self,
        text_or_chunks: str | Sequence[str],
        options: AnalysisOptions | None = None,
    ) -> AnalysisResult:
        """Produce structured feedback for OCR-extracted text.

        Args:
            text_or_chunks: A single text or the ordered chunks of one text.
            options: Subject, difficulty and feedback language hints.

        Returns:
            AnalysisResult; synthesized when more than one chunk is given.

        Raises:
            AnalysisFailure: when the model call fails after retries, or
                every chunk of a multi-chunk analysis fails.
        """
