from abc import ABC, abstractmethod

from answerlens.analysis.models import Completion


class BaseLanguageModelClient(ABC):
    """Contract for provider-specific language-model clients."""

    @abstractmethod
    async def complete(self, *, system_prompt: str, user_prompt: str) -> Completion:
        """Return the provider response text with model name and token usage.

        The text is not guaranteed to be valid JSON.

        Raises:
            AnalysisNetworkError: on network or provider API failures.
            AnalysisError: when the provider returns no content.
        """
