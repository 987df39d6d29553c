"""OCR stage: retrying recognition, confidence scoring and text cleanup."""

import asyncio
import math
import time
from collections.abc import Awaitable, Callable, Sequence

from answerlens.logging.logger import Log
from answerlens.ocr.base import BaseRecognitionEngine
from answerlens.ocr.exceptions import OCRFailure
from answerlens.ocr.models import OCRResult, PageResult, Recognition, RecognizedToken, TokenBox
from answerlens.ocr.text_cleaner import TextCleaner

Sleep = Callable[[float], Awaitable[None]]


def mean_confidence(tokens: Sequence[RecognizedToken]) -> float:
    """Mean of the present, finite, non-zero token confidences, clamped to [0, 1]."""
    valid = [
        t.confidence
        for t in tokens
        if t.confidence is not None and math.isfinite(t.confidence) and t.confidence > 0
    ]
    if not valid:
        return 0.0
    return max(0.0, min(1.0, sum(valid) / len(valid)))


class OCREngine:
    """Wraps a recognition engine with retries, timeouts and cleanup.

    The engine call is blocking, so every attempt runs in a worker thread
    under a per-call timeout. A timeout counts as a transient failure.
    """

    def __init__(
        self,
        engine: BaseRecognitionEngine,
        cleaner: TextCleaner,
        *,
        language: str = "eng",
        max_retries: int = 3,
        backoff_base_seconds: float = 1.0,
        timeout_seconds: float = 60.0,
        max_concurrency: int = 3,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self._engine = engine
        self._cleaner = cleaner
        self._language = language
        self._max_retries = max(1, max_retries)
        self._backoff_base_seconds = backoff_base_seconds
        self._timeout_seconds = timeout_seconds
        self._max_concurrency = max(1, max_concurrency)
        self._sleep = sleep

    async def extract(
        self,
        image_bytes: bytes,
        language: str | None = None,
        max_retries: int | None = None,
    ) -> OCRResult:
        """Recognize one image.

        Raises:
            OCRFailure: when every attempt failed.
        """
        language = language or self._language
        attempts = max(1, max_retries) if max_retries is not None else self._max_retries
        start = time.monotonic()

        recognition = await self._recognize_with_retry(image_bytes, language, attempts)
        result = self._build_result(recognition, language, _elapsed_ms(start))
        Log.info(
            f"OCR completed in {result.processing_time_ms}ms "
            f"with confidence {result.confidence:.2f}"
        )
        return result

    async def extract_pages(
        self,
        images: Sequence[bytes],
        language: str | None = None,
    ) -> OCRResult:
        """Recognize several page images with bounded concurrency.

        Failed pages are recorded and skipped. Raises OCRFailure only when no
        page could be recognized.
        """
        if not images:
            raise OCRFailure("No page images to recognize")
        if len(images) == 1:
            result = await self.extract(images[0], language)
            result.page_results = [
                PageResult(
                    index=0,
                    success=True,
                    confidence=result.confidence,
                    processing_time_ms=result.processing_time_ms,
                )
            ]
            return result

        language = language or self._language
        start = time.monotonic()
        semaphore = asyncio.Semaphore(self._max_concurrency)
        Log.info(f"Processing {len(images)} pages with OCR")

        async def _run(index: int, image: bytes) -> tuple[PageResult, OCRResult | None]:
            async with semaphore:
                Log.info(f"Processing page {index + 1}/{len(images)}")
                try:
                    page = await self.extract(image, language)
                except OCRFailure as exc:
                    Log.error(f"OCR failed for page {index + 1}: {exc.message}")
                    return PageResult(index=index, success=False, error=exc.message), None
                return (
                    PageResult(
                        index=index,
                        success=True,
                        confidence=page.confidence,
                        processing_time_ms=page.processing_time_ms,
                    ),
                    page,
                )

        outcomes = await asyncio.gather(*(_run(i, img) for i, img in enumerate(images)))
        succeeded = [page for _, page in outcomes if page is not None]
        page_results = [page_result for page_result, _ in outcomes]
        if not succeeded:
            raise OCRFailure(f"OCR failed for all {len(images)} pages")

        result = OCRResult(
            extracted_text="\n\n".join(p.extracted_text for p in succeeded if p.extracted_text),
            confidence=sum(p.confidence for p in succeeded) / len(succeeded),
            language=language,
            processing_time_ms=_elapsed_ms(start),
            raw_text="\n\n".join(p.raw_text for p in succeeded if p.raw_text),
            bounding_boxes=[box for p in succeeded for box in p.bounding_boxes],
            page_count=len(images),
            pages_failed=len(images) - len(succeeded),
            page_results=page_results,
        )
        if result.pages_failed:
            Log.warning(f"OCR degraded: {result.pages_failed}/{len(images)} pages failed")
        return result

    async def _recognize_with_retry(
        self, image_bytes: bytes, language: str, attempts: int
    ) -> Recognition:
        last_error: BaseException | None = None
        for attempt in range(attempts):
            Log.info(f"OCR attempt {attempt + 1}/{attempts}")
            try:
                return await asyncio.wait_for(
                    asyncio.to_thread(self._engine.recognize, image_bytes, language),
                    timeout=self._timeout_seconds,
                )
            except asyncio.TimeoutError as exc:
                last_error = exc
                Log.error(f"OCR attempt {attempt + 1} timed out after {self._timeout_seconds}s")
            except Exception as exc:
                last_error = exc
                Log.error(f"OCR attempt {attempt + 1} failed: {exc}")
            if attempt + 1 < attempts:
                await self._sleep(self._backoff_base_seconds * 2**attempt)
        raise OCRFailure(
            f"OCR failed after {attempts} attempts: {last_error or 'unknown error'}"
        ) from last_error

    def _build_result(
        self, recognition: Recognition, language: str, processing_time_ms: int
    ) -> OCRResult:
        confidence = mean_confidence(recognition.tokens)
        if confidence == 0.0:
            return OCRResult(
                extracted_text="",
                confidence=0.0,
                language=language,
                processing_time_ms=processing_time_ms,
                raw_text=recognition.text,
            )
        boxes = [
            TokenBox(text=t.text, confidence=t.confidence, bbox=t.bbox)
            for t in recognition.tokens
            if t.bbox is not None and t.confidence is not None
        ]
        return OCRResult(
            extracted_text=self._cleaner.clean(recognition.text),
            confidence=confidence,
            language=language,
            processing_time_ms=processing_time_ms,
            raw_text=recognition.text,
            bounding_boxes=boxes,
        )


def _elapsed_ms(start: float) -> int:
    return int((time.monotonic() - start) * 1000)
