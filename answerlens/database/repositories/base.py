from abc import ABC, abstractmethod

from answerlens.database.models import AnalysisRecord


class BaseAnalysisRepository(ABC):
    """Contract for analysis record stores.

    Writes are whole-document replacements keyed by the record id; no
    partial field updates.
    """

    @abstractmethod
    def save(self, record: AnalysisRecord) -> None:
        """Insert or replace the record."""

    @abstractmethod
    def find_by_id(self, analysis_id: str) -> AnalysisRecord | None:
        """Return the record, or None if it does not exist."""

    @abstractmethod
    def find_completed_by_hash(self, file_hash: str) -> list[AnalysisRecord]:
        """Return completed records for the given content hash, newest first."""
