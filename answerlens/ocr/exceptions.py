from answerlens.processor.exceptions import PipelineError


class OCRError(Exception):
    """Raised by recognition engine adapters on a (possibly transient) failure."""


class OCRFailure(PipelineError):
    """Raised when recognition fails after all retries are exhausted."""

    stage = "ocr"
    code = "ocr_failed"
