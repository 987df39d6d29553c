from answerlens.processor.exceptions import PipelineError


class PdfRenderError(PipelineError):
    """Raised when PDF pages cannot be rendered to images."""

    stage = "ocr"
    code = "pdf_render_failed"
