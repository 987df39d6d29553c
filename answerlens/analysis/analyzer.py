"""AI-powered document analyzer."""

import asyncio
import time
from collections.abc import Awaitable, Callable, Sequence
from pathlib import Path

from answerlens.analysis.base import BaseAnalyzer
from answerlens.analysis.client_base import BaseLanguageModelClient
from answerlens.analysis.exceptions import AnalysisFailure
from answerlens.analysis.models import AnalysisOptions, AnalysisResult, Completion
from answerlens.analysis.prompt_loader import (
    load_json_schema,
    load_prompt_template,
    load_system_prompt,
)
from answerlens.analysis.response_parser import parse_analysis_response
from answerlens.analysis.synthesis import synthesize
from answerlens.logging.logger import Log

Sleep = Callable[[float], Awaitable[None]]


class AIAnalyzer(BaseAnalyzer):
    """Analyzes document text with a language model, chunk by chunk."""

    def __init__(
        self,
        *,
        client: BaseLanguageModelClient,
        max_retries: int = 2,
        backoff_base_seconds: float = 1.0,
        timeout_seconds: float = 60.0,
        max_concurrency: int = 3,
        dedup_prefix_length: int = 50,
        prompt_template_path: Path | None = None,
        system_prompt_path: Path | None = None,
        json_schema_path: Path | None = None,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self._client = client
        self._max_retries = max(1, max_retries)
        self._backoff_base_seconds = backoff_base_seconds
        self._timeout_seconds = timeout_seconds
        self._max_concurrency = max(1, max_concurrency)
        self._dedup_prefix_length = dedup_prefix_length
        self._prompt_template = load_prompt_template(prompt_template_path)
        self._system_prompt = load_system_prompt(system_prompt_path)
        self._json_schema = load_json_schema(json_schema_path)
        self._sleep = sleep

    async def analyze(
        self,
        text_or_chunks: str | Sequence[str],
        options: AnalysisOptions | None = None,
    ) -> AnalysisResult:
        options = options or AnalysisOptions()
        chunks = [text_or_chunks] if isinstance(text_or_chunks, str) else list(text_or_chunks)
        chunks = [c for c in chunks if c.strip()]
        if not chunks:
            raise AnalysisFailure("No text to analyze", code="empty_input")

        start = time.monotonic()
        Log.info(f"Starting AI analysis of {len(chunks)} chunk(s)")
        if len(chunks) == 1:
            result = await self._analyze_chunk(chunks[0], options)
        else:
            result = await self._analyze_chunks(chunks, options)
        result.metadata.processing_time_ms = int((time.monotonic() - start) * 1000)
        Log.info(
            f"AI analysis completed in {result.metadata.processing_time_ms}ms: "
            f"{len(result.suggestions)} suggestions"
        )
        return result

    async def _analyze_chunks(
        self, chunks: list[str], options: AnalysisOptions
    ) -> AnalysisResult:
        semaphore = asyncio.Semaphore(self._max_concurrency)

        async def _run(index: int, chunk: str) -> AnalysisResult | None:
            async with semaphore:
                Log.info(f"Analyzing chunk {index + 1}/{len(chunks)}")
                try:
                    return await self._analyze_chunk(chunk, options)
                except AnalysisFailure as exc:
                    Log.error(f"Failed to analyze chunk {index + 1}: {exc.message}")
                    return None

        # gather keeps input order regardless of completion order
        results = await asyncio.gather(*(_run(i, c) for i, c in enumerate(chunks)))
        succeeded = [(i, r) for i, r in enumerate(results) if r is not None]
        if not succeeded:
            raise AnalysisFailure(f"Analysis failed for all {len(chunks)} chunks")

        combined = synthesize(succeeded, prefix_length=self._dedup_prefix_length)
        combined.metadata.chunk_count = len(chunks)
        combined.metadata.failed_chunks = len(chunks) - len(succeeded)
        if combined.metadata.failed_chunks:
            Log.warning(
                f"AI analysis degraded: {combined.metadata.failed_chunks}/{len(chunks)} "
                "chunks failed"
            )
        return combined

    async def _analyze_chunk(self, chunk: str, options: AnalysisOptions) -> AnalysisResult:
        prompt = self._build_prompt(chunk, options)
        Log.debug(f"Analysis prompt:\n{prompt}")

        completion = await self._complete_with_retry(prompt)
        Log.debug(f"AI raw response:\n{completion.text}")

        result = parse_analysis_response(completion.text)
        result.metadata.model = completion.model
        result.metadata.tokens_in = completion.tokens_in
        result.metadata.tokens_out = completion.tokens_out
        return result

    def _build_prompt(self, chunk: str, options: AnalysisOptions) -> str:
        return self._prompt_template.format(
            document_text=chunk,
            subject=options.subject or "not specified",
            difficulty=options.difficulty or "not specified",
            analysis_language=options.analysis_language or "English",
            json_schema=self._json_schema,
        )

    async def _complete_with_retry(self, prompt: str) -> Completion:
        last_error: BaseException | None = None
        for attempt in range(self._max_retries):
            try:
                return await asyncio.wait_for(
                    self._client.complete(system_prompt=self._system_prompt, user_prompt=prompt),
                    timeout=self._timeout_seconds,
                )
            except asyncio.TimeoutError as exc:
                last_error = exc
                Log.error(f"AI call attempt {attempt + 1} timed out after {self._timeout_seconds}s")
            except Exception as exc:
                last_error = exc
                Log.error(f"AI call attempt {attempt + 1} failed: {exc}")
            if attempt + 1 < self._max_retries:
                await self._sleep(self._backoff_base_seconds * 2**attempt)
        raise AnalysisFailure(
            f"AI analysis failed after {self._max_retries} attempts: "
            f"{last_error or 'unknown error'}"
        ) from last_error
