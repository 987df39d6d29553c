import threading

from answerlens.database.models import AnalysisRecord, AnalysisStatus
from answerlens.database.repositories.base import BaseAnalysisRepository


class InMemoryAnalysisRepository(BaseAnalysisRepository):
    """Process-local record store for development and tests.

    Records are stored as serialized documents so callers never share
    mutable state with the store.
    """

    def __init__(self) -> None:
        self._documents: dict[str, dict[str, object]] = {}
        self._lock = threading.Lock()

    def save(self, record: AnalysisRecord) -> None:
        document = record.to_document()
        with self._lock:
            self._documents[record.id] = document

    def find_by_id(self, analysis_id: str) -> AnalysisRecord | None:
        with self._lock:
            document = self._documents.get(analysis_id)
        return AnalysisRecord.from_document(document) if document is not None else None

    def find_completed_by_hash(self, file_hash: str) -> list[AnalysisRecord]:
        with self._lock:
            documents = [
                d
                for d in self._documents.values()
                if d["file_hash"] == file_hash and d["status"] == AnalysisStatus.COMPLETED.value
            ]
        records = [AnalysisRecord.from_document(d) for d in documents]
        return sorted(records, key=lambda r: r.created_at, reverse=True)
