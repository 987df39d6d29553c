from answerlens.processor.exceptions import PipelineError


class AnalysisError(Exception):
    """Raised when a language-model call returns nothing usable."""


class AnalysisNetworkError(AnalysisError):
    """Raised when the AI provider call fails due to network/infrastructure issues."""


class AnalysisFailure(PipelineError):
    """Raised when the analysis stage cannot produce a result."""

    stage = "ai_analysis"
    code = "analysis_failed"
