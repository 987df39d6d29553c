import asyncio

from answerlens.analysis.client_base import BaseLanguageModelClient
from answerlens.analysis.factory import AnalyzerFactory
from answerlens.analysis.models import AnalysisOptions
from answerlens.chunking.chunker import TextChunker
from answerlens.config.settings import Settings
from answerlens.database.models import AnalysisRecord, AnalysisStatus
from answerlens.database.repositories.base import BaseAnalysisRepository
from answerlens.database.repositories.factory import RepositoryFactory
from answerlens.logging.logger import Log
from answerlens.ocr.base import BaseRecognitionEngine
from answerlens.ocr.factory import OCREngineFactory
from answerlens.pdf.factory import PdfRasterizerFactory
from answerlens.processor.exceptions import AnalysisNotFoundError
from answerlens.processor.orchestrator import AnalysisOrchestrator
from answerlens.processor.state_machine import transition
from answerlens.processor.steps import AnalyzeStep, ChunkTextStep, ExtractTextStep, RenderPagesStep
from answerlens.validation.exceptions import ValidationError
from answerlens.validation.models import UploadedFile
from answerlens.validation.validator import FileValidator


class AnalysisService:
    """Accepts uploads and runs them through the pipeline in the background."""

    def __init__(
        self,
        validator: FileValidator,
        orchestrator: AnalysisOrchestrator,
        repository: BaseAnalysisRepository,
        *,
        default_language: str = "eng",
        reuse_completed_analyses: bool = False,
    ) -> None:
        self._validator = validator
        self._orchestrator = orchestrator
        self._repository = repository
        self._default_language = default_language
        self._reuse_completed_analyses = reuse_completed_analyses
        self._tasks: dict[str, asyncio.Task[AnalysisRecord]] = {}
        self._cancel_events: dict[str, asyncio.Event] = {}

    async def submit(self, file: UploadedFile, options: AnalysisOptions | None = None) -> str:
        """Validate the upload and schedule its analysis.

        Returns:
            The id of the accepted analysis record.

        Raises:
            ValidationError: if the upload is rejected. No record is created.
        """
        Log.info(f"Upload received: {file.filename} ({file.size} bytes)")
        validation = self._validator.validate(file)
        if not validation.is_valid:
            Log.warning(f"Upload rejected: {file.filename}: {'; '.join(validation.errors)}")
            raise ValidationError(validation.errors, warnings=validation.warnings)

        options = options or AnalysisOptions()
        if not options.language:
            options = AnalysisOptions(
                subject=options.subject,
                difficulty=options.difficulty,
                language=self._default_language,
                analysis_language=options.analysis_language,
            )
        file_hash = file.sha256()

        if self._reuse_completed_analyses:
            existing = await self._find_reusable(file_hash, options)
            if existing is not None:
                Log.info(f"Reusing completed analysis {existing.id} for {file.filename}")
                return existing.id

        record = AnalysisRecord(
            filename=file.filename,
            mime_type=validation.file_info.mime_type,
            file_size=file.size,
            file_hash=file_hash,
            options=options,
            warnings=list(validation.warnings),
        )
        await asyncio.to_thread(self._repository.save, record)
        Log.info(f"Analysis record created: {record.id}")

        cancel_event = asyncio.Event()
        self._cancel_events[record.id] = cancel_event
        task = asyncio.create_task(self._orchestrator.run(record, file, cancel_event))
        self._tasks[record.id] = task
        task.add_done_callback(lambda _: self._forget(record.id))
        return record.id

    async def get_status(self, analysis_id: str) -> AnalysisRecord:
        """Return the persisted record.

        Raises:
            AnalysisNotFoundError: if no record with this id exists.
        """
        record = await asyncio.to_thread(self._repository.find_by_id, analysis_id)
        if record is None:
            raise AnalysisNotFoundError(f"Analysis {analysis_id} not found")
        return record

    async def cancel(self, analysis_id: str) -> bool:
        """Request cancellation. Returns False if the record is already terminal."""
        event = self._cancel_events.get(analysis_id)
        if event is not None:
            event.set()
            Log.info(f"Cancellation requested for analysis {analysis_id}")
            return True
        record = await self.get_status(analysis_id)
        if record.status.is_terminal:
            return False
        # Not owned by a run in this process; cancel the stored record directly.
        transition(record, AnalysisStatus.CANCELLED)
        await asyncio.to_thread(self._repository.save, record)
        return True

    async def wait(self, analysis_id: str) -> AnalysisRecord:
        """Wait for the background run to finish and return the final record."""
        task = self._tasks.get(analysis_id)
        if task is not None:
            await task
        return await self.get_status(analysis_id)

    def _forget(self, analysis_id: str) -> None:
        self._cancel_events.pop(analysis_id, None)
        self._tasks.pop(analysis_id, None)

    async def _find_reusable(
        self, file_hash: str, options: AnalysisOptions
    ) -> AnalysisRecord | None:
        candidates = await asyncio.to_thread(self._repository.find_completed_by_hash, file_hash)
        return next((c for c in candidates if c.options == options), None)


def build_service(
    settings: Settings,
    repository: BaseAnalysisRepository | None = None,
    *,
    recognition_engine: BaseRecognitionEngine | None = None,
    language_model_client: BaseLanguageModelClient | None = None,
) -> AnalysisService:
    """Build an AnalysisService with all required adapters."""
    if repository is None:
        repository = RepositoryFactory.create(settings)
    orchestrator = AnalysisOrchestrator(
        repository,
        ocr_steps=[
            RenderPagesStep(
                PdfRasterizerFactory.create(settings),
                dpi=settings.pdf_render_dpi,
                max_pages=settings.pdf_max_pages,
            ),
            ExtractTextStep(
                OCREngineFactory.create(settings, engine=recognition_engine),
                min_text_length=settings.min_text_length,
            ),
        ],
        ai_steps=[
            ChunkTextStep(TextChunker(settings.chunk_max_length)),
            AnalyzeStep(AnalyzerFactory.create(settings, client=language_model_client)),
        ],
    )
    return AnalysisService(
        FileValidator(max_file_size=settings.max_file_size_bytes),
        orchestrator,
        repository,
        default_language=settings.ocr_language,
        reuse_completed_analyses=settings.reuse_completed_analyses,
    )
