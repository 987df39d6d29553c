from answerlens.processor.exceptions import PipelineError


class ValidationError(PipelineError):
    """Raised when an upload is rejected before any record is created."""

    stage = "upload"
    code = "validation_failed"

    def __init__(self, errors: list[str], *, warnings: list[str] | None = None) -> None:
        super().__init__(f"File validation failed: {', '.join(errors)}")
        self.errors = list(errors)
        self.warnings = list(warnings or [])
