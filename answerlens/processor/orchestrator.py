import asyncio
import time
from collections.abc import Sequence

from answerlens.database.models import AnalysisRecord, AnalysisStatus, RecordError
from answerlens.database.repositories.base import BaseAnalysisRepository
from answerlens.logging.logger import Log
from answerlens.processor.exceptions import InternalError, PipelineError
from answerlens.processor.pipeline import PipelineContext, PipelineStep
from answerlens.processor.state_machine import transition
from answerlens.validation.models import UploadedFile


class AnalysisOrchestrator:
    """Runs one analysis record through the OCR and AI stages.

    Lifecycle: pending -> processing_ocr -> processing_ai -> completed, with
    failed reachable from both processing states and cancelled from any
    non-terminal one. Every transition is persisted before the next stage
    starts. Stage failures end up in the record; nothing escapes run().
    """

    def __init__(
        self,
        repository: BaseAnalysisRepository,
        ocr_steps: Sequence[PipelineStep],
        ai_steps: Sequence[PipelineStep],
    ) -> None:
        self._repository = repository
        self._ocr_steps = list(ocr_steps)
        self._ai_steps = list(ai_steps)

    async def run(
        self,
        record: AnalysisRecord,
        file: UploadedFile,
        cancel_event: asyncio.Event | None = None,
    ) -> AnalysisRecord:
        start = time.monotonic()
        context = PipelineContext(record=record, file=file)
        Log.info(f"Processing analysis {record.id} ({record.filename})")
        try:
            if await self._cancelled(record, cancel_event):
                return record
            await self._advance(record, AnalysisStatus.PROCESSING_OCR)
            context = await self._run_steps(self._ocr_steps, context)

            if await self._cancelled(record, cancel_event):
                return record
            await self._advance(record, AnalysisStatus.PROCESSING_AI)
            context = await self._run_steps(self._ai_steps, context)

            if await self._cancelled(record, cancel_event):
                return record
            record.processing_time_ms = int((time.monotonic() - start) * 1000)
            await self._advance(record, AnalysisStatus.COMPLETED)
            Log.info(f"Analysis {record.id} completed in {record.processing_time_ms}ms")
        except PipelineError as exc:
            await self._fail(record, exc)
        except Exception as exc:
            Log.exception(f"Unexpected error in analysis {record.id}: {exc}")
            await self._fail(record, InternalError(f"Processing failed due to server error: {exc}"))
        return record

    @staticmethod
    async def _run_steps(
        steps: Sequence[PipelineStep], context: PipelineContext
    ) -> PipelineContext:
        for step in steps:
            context = await step.run(context)
        return context

    async def _advance(self, record: AnalysisRecord, target: AnalysisStatus) -> None:
        transition(record, target)
        await self._persist(record)
        Log.info(f"Analysis {record.id} moved to {target.value}")

    async def _cancelled(
        self, record: AnalysisRecord, cancel_event: asyncio.Event | None
    ) -> bool:
        if cancel_event is None or not cancel_event.is_set():
            return False
        await self._advance(record, AnalysisStatus.CANCELLED)
        return True

    async def _fail(self, record: AnalysisRecord, exc: PipelineError) -> None:
        Log.error(f"Analysis {record.id} failed at stage {exc.stage}: {exc.message}")
        if record.status.is_terminal:
            return
        error = RecordError(message=exc.message, stage=exc.stage, code=exc.code)
        try:
            transition(record, AnalysisStatus.FAILED, error=error)
            await self._persist(record)
        except Exception:
            Log.exception(f"Failed to persist failure of analysis {record.id}")

    async def _persist(self, record: AnalysisRecord) -> None:
        await asyncio.to_thread(self._repository.save, record)
