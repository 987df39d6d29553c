from collections.abc import Callable

from answerlens.config.settings import Settings
from answerlens.ocr.base import BaseRecognitionEngine
from answerlens.ocr.engine import OCREngine
from answerlens.ocr.tesseract_adapter import TesseractEngine
from answerlens.ocr.text_cleaner import TextCleaner


class OCREngineFactory:
    """Creates the OCR stage with the configured recognition engine."""

    ENGINES: dict[str, Callable[[Settings], BaseRecognitionEngine]] = {
        "tesseract": lambda settings: TesseractEngine(psm=settings.ocr_tesseract_psm),
    }

    @classmethod
    def create(
        cls,
        settings: Settings,
        engine: BaseRecognitionEngine | None = None,
    ) -> OCREngine:
        """Create an OCREngine from settings; an explicit engine overrides ocr_engine."""
        if engine is None:
            engine = cls._create_engine(settings)
        return OCREngine(
            engine,
            TextCleaner(fix_char_confusions=settings.ocr_fix_char_confusions),
            language=settings.ocr_language,
            max_retries=settings.ocr_max_retries,
            backoff_base_seconds=settings.ocr_backoff_base_seconds,
            timeout_seconds=settings.ocr_timeout_seconds,
            max_concurrency=settings.ocr_max_concurrency,
        )

    @classmethod
    def _create_engine(cls, settings: Settings) -> BaseRecognitionEngine:
        name = settings.ocr_engine.lower()
        build = cls.ENGINES.get(name)
        if build is None:
            raise ValueError(f"Unknown OCR engine '{name}'. Choose from: {list(cls.ENGINES)}")
        return build(settings)
