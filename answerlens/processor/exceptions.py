class PipelineError(Exception):
    """Base exception for all pipeline errors.

    Every pipeline error knows the stage it belongs to and a short
    machine-readable code, so the orchestrator can write it into the
    record's ``error`` field unchanged.
    """

    stage: str = "unknown"
    code: str = "pipeline_error"

    def __init__(self, message: str, *, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code


class InternalError(PipelineError):
    """Raised for unexpected failures that belong to no pipeline stage."""

    code = "internal_error"


class AnalysisNotFoundError(PipelineError):
    """Raised when an analysis record cannot be found in the store."""

    code = "not_found"


class InvalidTransitionError(PipelineError):
    """Raised when a record is moved along an edge the state machine forbids."""

    code = "invalid_transition"
