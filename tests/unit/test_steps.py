import asyncio
from unittest.mock import MagicMock

import pytest

from answerlens.analysis.base import BaseAnalyzer
from answerlens.analysis.models import AnalysisOptions, AnalysisResult
from answerlens.chunking.chunker import TextChunker
from answerlens.database.models import AnalysisRecord
from answerlens.ocr.engine import OCREngine
from answerlens.ocr.exceptions import OCRFailure
from answerlens.ocr.models import OCRResult
from answerlens.pdf.base import BasePdfRasterizer
from answerlens.processor.pipeline import PipelineContext
from answerlens.processor.steps import AnalyzeStep, ChunkTextStep, ExtractTextStep, RenderPagesStep
from answerlens.validation.models import UploadedFile


def _context(
    mime_type: str = "image/jpeg", content: bytes = b"\xff\xd8\xffimage"
) -> PipelineContext:
    record = AnalysisRecord(
        filename="scan.jpg",
        mime_type=mime_type,
        file_size=len(content),
        file_hash="h",
        options=AnalysisOptions(language="eng", subject="biology"),
    )
    upload = UploadedFile(
        content=content, filename="scan.jpg", mime_type=mime_type, size=len(content)
    )
    return PipelineContext(record=record, file=upload)


def _ocr_result(text: str) -> OCRResult:
    return OCRResult(extracted_text=text, confidence=0.9, language="eng", processing_time_ms=5)


class TestRenderPagesStep:
    def test_image_passes_through(self) -> None:
        rasterizer = MagicMock(spec=BasePdfRasterizer)
        ctx = _context()

        result = asyncio.run(RenderPagesStep(rasterizer, dpi=200, max_pages=5).run(ctx))

        assert result.page_images == [ctx.file.content]
        rasterizer.render_pages.assert_not_called()

    def test_pdf_is_rendered(self) -> None:
        rasterizer = MagicMock(spec=BasePdfRasterizer)
        rasterizer.render_pages.return_value = [b"p1", b"p2"]
        ctx = _context("application/pdf", b"%PDF-1.4")

        result = asyncio.run(RenderPagesStep(rasterizer, dpi=150, max_pages=5).run(ctx))

        assert result.page_images == [b"p1", b"p2"]
        rasterizer.render_pages.assert_called_once_with(b"%PDF-1.4", dpi=150, max_pages=5)


class TestExtractTextStep:
    def test_stores_ocr_result(self) -> None:
        engine = MagicMock(spec=OCREngine)
        engine.extract_pages.return_value = _ocr_result("x" * 60)
        ctx = _context()
        ctx.page_images = [b"img"]

        asyncio.run(ExtractTextStep(engine, min_text_length=50).run(ctx))

        assert ctx.record.ocr is not None
        assert ctx.record.ocr.extracted_text == "x" * 60
        engine.extract_pages.assert_awaited_once_with([b"img"], language="eng")

    def test_short_text_fails(self) -> None:
        engine = MagicMock(spec=OCREngine)
        engine.extract_pages.return_value = _ocr_result("too short")
        ctx = _context()
        ctx.page_images = [b"img"]

        with pytest.raises(OCRFailure) as exc:
            asyncio.run(ExtractTextStep(engine, min_text_length=50).run(ctx))

        assert exc.value.code == "insufficient_text"
        assert exc.value.stage == "ocr"
        assert ctx.record.ocr is not None

    def test_requires_page_images(self) -> None:
        step = ExtractTextStep(MagicMock(spec=OCREngine), min_text_length=1)

        with pytest.raises(ValueError):
            asyncio.run(step.run(_context()))


class TestChunkTextStep:
    def test_chunks_extracted_text(self) -> None:
        ctx = _context()
        ctx.record.ocr = _ocr_result("aaaa\n\nbbbb\n\ncccc")

        asyncio.run(ChunkTextStep(TextChunker(max_length=10)).run(ctx))

        assert ctx.chunks == ["aaaa\n\nbbbb", "cccc"]

    def test_requires_ocr_result(self) -> None:
        with pytest.raises(ValueError):
            asyncio.run(ChunkTextStep(TextChunker()).run(_context()))


class TestAnalyzeStep:
    def test_stores_analysis(self) -> None:
        analyzer = MagicMock(spec=BaseAnalyzer)
        analyzer.analyze.return_value = AnalysisResult(summary="Nice.")
        ctx = _context()
        ctx.chunks = ["chunk one"]

        asyncio.run(AnalyzeStep(analyzer).run(ctx))

        assert ctx.record.ai is not None
        assert ctx.record.ai.summary == "Nice."
        analyzer.analyze.assert_awaited_once_with(["chunk one"], ctx.record.options)
