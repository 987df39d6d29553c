"""Integration tests for AnalysisRepository against a real PostgreSQL database."""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Any

import psycopg
import pytest

from answerlens.analysis.models import AnalysisOptions, AnalysisResult, ModelMetadata
from answerlens.database.models import AnalysisRecord, AnalysisStatus
from answerlens.database.repositories.analysis_repository import AnalysisRepository
from answerlens.ocr.models import OCRResult
from answerlens.processor.state_machine import transition

pytestmark = pytest.mark.integration


def _make_record(file_hash: str, **overrides: Any) -> AnalysisRecord:
    fields: dict[str, Any] = {
        "filename": "scan.jpg",
        "mime_type": "image/jpeg",
        "file_size": 5120,
        "file_hash": file_hash,
        "options": AnalysisOptions(subject="physics", language="eng"),
    }
    fields.update(overrides)
    return AnalysisRecord(**fields)


@pytest.fixture
def file_hash() -> str:
    return uuid.uuid4().hex


class TestAnalysisRepositoryIntegration:
    def test_save_and_find_by_id(
        self, integration_cleanup: list[str], file_hash: str
    ) -> None:
        repo = AnalysisRepository()
        record = _make_record(file_hash)
        integration_cleanup.append(record.id)

        repo.save(record)
        loaded = repo.find_by_id(record.id)

        assert loaded == record

    def test_save_replaces_document(
        self, integration_cleanup: list[str], file_hash: str, db_conn: psycopg.Connection[Any]
    ) -> None:
        repo = AnalysisRepository()
        record = _make_record(file_hash)
        integration_cleanup.append(record.id)
        repo.save(record)

        transition(record, AnalysisStatus.PROCESSING_OCR)
        record.ocr = OCRResult(
            extracted_text="F = m * a", confidence=0.88, language="eng", processing_time_ms=40
        )
        repo.save(record)

        loaded = repo.find_by_id(record.id)
        assert loaded is not None
        assert loaded.status == AnalysisStatus.PROCESSING_OCR
        assert loaded.ocr == record.ocr
        with db_conn.cursor() as cur:
            cur.execute("SELECT status FROM analyses WHERE id = %s", (record.id,))
            row = cur.fetchone()
        assert row is not None
        assert row[0] == "processing_ocr"

    def test_find_by_id_missing(self, integration_pool: None) -> None:
        assert AnalysisRepository().find_by_id(str(uuid.uuid4())) is None

    def test_find_by_id_malformed(self, integration_pool: None) -> None:
        assert AnalysisRepository().find_by_id("not-a-uuid") is None

    def test_find_completed_by_hash(
        self, integration_cleanup: list[str], file_hash: str
    ) -> None:
        repo = AnalysisRepository()
        now = datetime.now(timezone.utc)
        older = _make_record(
            file_hash,
            status=AnalysisStatus.COMPLETED,
            created_at=now - timedelta(minutes=5),
            ai=AnalysisResult(summary="older", metadata=ModelMetadata(model="m")),
        )
        newer = _make_record(file_hash, status=AnalysisStatus.COMPLETED, created_at=now)
        pending = _make_record(file_hash)
        for record in (older, newer, pending):
            integration_cleanup.append(record.id)
            repo.save(record)

        results = repo.find_completed_by_hash(file_hash)

        assert [r.id for r in results] == [newer.id, older.id]
        assert results[1].ai == older.ai
