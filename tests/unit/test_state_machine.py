import pytest

from answerlens.database.models import AnalysisRecord, AnalysisStatus, RecordError
from answerlens.processor.exceptions import InvalidTransitionError
from answerlens.processor.state_machine import can_transition, transition

S = AnalysisStatus


def _record(status: AnalysisStatus = S.PENDING) -> AnalysisRecord:
    return AnalysisRecord(
        filename="a.jpg", mime_type="image/jpeg", file_size=1, file_hash="h", status=status
    )


class TestCanTransition:
    @pytest.mark.parametrize(
        ("current", "target"),
        [
            (S.PENDING, S.PROCESSING_OCR),
            (S.PENDING, S.CANCELLED),
            (S.PROCESSING_OCR, S.PROCESSING_AI),
            (S.PROCESSING_OCR, S.FAILED),
            (S.PROCESSING_AI, S.COMPLETED),
            (S.PROCESSING_AI, S.FAILED),
            (S.PROCESSING_AI, S.CANCELLED),
        ],
    )
    def test_allowed(self, current: AnalysisStatus, target: AnalysisStatus) -> None:
        assert can_transition(current, target)

    @pytest.mark.parametrize(
        ("current", "target"),
        [
            (S.PENDING, S.COMPLETED),
            (S.PENDING, S.FAILED),
            (S.PROCESSING_OCR, S.COMPLETED),
            (S.PROCESSING_AI, S.PROCESSING_OCR),
            (S.COMPLETED, S.FAILED),
            (S.FAILED, S.PROCESSING_OCR),
            (S.CANCELLED, S.COMPLETED),
        ],
    )
    def test_forbidden(self, current: AnalysisStatus, target: AnalysisStatus) -> None:
        assert not can_transition(current, target)


class TestTransition:
    def test_updates_status_and_timestamp(self) -> None:
        record = _record()
        before = record.updated_at

        transition(record, S.PROCESSING_OCR)

        assert record.status == S.PROCESSING_OCR
        assert record.updated_at >= before
        assert record.completed_at is None

    def test_terminal_sets_completed_at(self) -> None:
        record = _record(S.PROCESSING_AI)

        transition(record, S.COMPLETED)

        assert record.completed_at is not None

    def test_failed_records_error(self) -> None:
        record = _record(S.PROCESSING_OCR)
        error = RecordError(message="boom", stage="ocr", code="ocr_failed")

        transition(record, S.FAILED, error=error)

        assert record.error == error
        assert record.completed_at is not None

    def test_invalid_transition_raises(self) -> None:
        record = _record(S.COMPLETED)

        with pytest.raises(InvalidTransitionError, match="from completed to processing_ocr"):
            transition(record, S.PROCESSING_OCR)

        assert record.status == S.COMPLETED
