import asyncio

from answerlens.analysis.base import BaseAnalyzer
from answerlens.chunking.chunker import TextChunker
from answerlens.logging.logger import Log
from answerlens.ocr.engine import OCREngine
from answerlens.ocr.exceptions import OCRFailure
from answerlens.pdf.base import BasePdfRasterizer
from answerlens.processor.pipeline import PipelineContext, PipelineStep

PDF_MIME_TYPE = "application/pdf"


class RenderPagesStep(PipelineStep):
    def __init__(self, rasterizer: BasePdfRasterizer, *, dpi: int, max_pages: int) -> None:
        self._rasterizer = rasterizer
        self._dpi = dpi
        self._max_pages = max_pages

    async def run(self, context: PipelineContext) -> PipelineContext:
        if context.file.mime_type.lower() != PDF_MIME_TYPE:
            context.page_images = [context.file.content]
            return context
        context.page_images = await asyncio.to_thread(
            self._rasterizer.render_pages,
            context.file.content,
            dpi=self._dpi,
            max_pages=self._max_pages,
        )
        Log.info(
            f"Rendered {len(context.page_images)} PDF pages for analysis {context.record.id}"
        )
        return context


class ExtractTextStep(PipelineStep):
    def __init__(self, ocr_engine: OCREngine, *, min_text_length: int) -> None:
        self._ocr_engine = ocr_engine
        self._min_text_length = min_text_length

    async def run(self, context: PipelineContext) -> PipelineContext:
        if not context.page_images:
            raise ValueError("PipelineContext.page_images must be set before text extraction")
        result = await self._ocr_engine.extract_pages(
            context.page_images,
            language=context.record.options.language or None,
        )
        context.record.ocr = result
        Log.info(
            f"Extracted {len(result.extracted_text)} chars from analysis {context.record.id} "
            f"(confidence {result.confidence:.2f})"
        )
        if len(result.extracted_text.strip()) < self._min_text_length:
            raise OCRFailure(
                f"Extracted text is too short ({len(result.extracted_text.strip())} chars, "
                f"minimum {self._min_text_length}). The image quality may be too poor "
                "or the text may not be readable.",
                code="insufficient_text",
            )
        return context


class ChunkTextStep(PipelineStep):
    def __init__(self, chunker: TextChunker) -> None:
        self._chunker = chunker

    async def run(self, context: PipelineContext) -> PipelineContext:
        if context.record.ocr is None:
            raise ValueError("AnalysisRecord.ocr must be set before chunking")
        context.chunks = self._chunker.chunk(context.record.ocr.extracted_text)
        Log.info(f"Text split into {len(context.chunks)} chunks for analysis")
        return context


class AnalyzeStep(PipelineStep):
    def __init__(self, analyzer: BaseAnalyzer) -> None:
        self._analyzer = analyzer

    async def run(self, context: PipelineContext) -> PipelineContext:
        if not context.chunks:
            raise ValueError("PipelineContext.chunks must be set before analysis")
        context.record.ai = await self._analyzer.analyze(
            context.chunks, context.record.options
        )
        return context
