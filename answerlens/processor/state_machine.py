"""Allowed status transitions for an analysis record."""

from datetime import datetime, timezone

from answerlens.database.models import AnalysisRecord, AnalysisStatus, RecordError
from answerlens.processor.exceptions import InvalidTransitionError

ALLOWED_TRANSITIONS: dict[AnalysisStatus, frozenset[AnalysisStatus]] = {
    AnalysisStatus.PENDING: frozenset(
        {AnalysisStatus.PROCESSING_OCR, AnalysisStatus.CANCELLED}
    ),
    AnalysisStatus.PROCESSING_OCR: frozenset(
        {AnalysisStatus.PROCESSING_AI, AnalysisStatus.FAILED, AnalysisStatus.CANCELLED}
    ),
    AnalysisStatus.PROCESSING_AI: frozenset(
        {AnalysisStatus.COMPLETED, AnalysisStatus.FAILED, AnalysisStatus.CANCELLED}
    ),
    AnalysisStatus.COMPLETED: frozenset(),
    AnalysisStatus.FAILED: frozenset(),
    AnalysisStatus.CANCELLED: frozenset(),
}


def can_transition(current: AnalysisStatus, target: AnalysisStatus) -> bool:
    return target in ALLOWED_TRANSITIONS[current]


def transition(
    record: AnalysisRecord,
    target: AnalysisStatus,
    *,
    error: RecordError | None = None,
) -> AnalysisRecord:
    """Move the record to target, stamping timestamps.

    Raises:
        InvalidTransitionError: if the edge is not allowed, which includes
            any move out of a terminal status.
    """
    if not can_transition(record.status, target):
        raise InvalidTransitionError(
            f"Cannot move analysis {record.id} from {record.status.value} to {target.value}"
        )
    now = datetime.now(timezone.utc)
    record.status = target
    record.updated_at = now
    if target == AnalysisStatus.FAILED:
        record.error = error
    if target.is_terminal:
        record.completed_at = now
    return record
