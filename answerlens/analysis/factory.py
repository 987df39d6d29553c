from typing import ClassVar

from answerlens.analysis.analyzer import AIAnalyzer
from answerlens.analysis.client_base import BaseLanguageModelClient
from answerlens.analysis.example_client_adapter import ExampleClientAdapter
from answerlens.analysis.openai_client_adapter import OpenAIClientAdapter
from answerlens.config.settings import Settings


class AnalyzerFactory:
    """Creates the configured analyzer and its language-model client."""

    OPENAI_COMPATIBLE_BASE_URLS: ClassVar[dict[str, str]] = {
        "openrouter": "https://openrouter.ai/api/v1",
        "groq": "https://api.groq.com/openai/v1",
        "together": "https://api.together.xyz/v1",
        "deepseek": "https://api.deepseek.com/v1",
        "ollama": "http://localhost:11434/v1",
    }

    @classmethod
    def create(
        cls,
        settings: Settings,
        client: BaseLanguageModelClient | None = None,
    ) -> AIAnalyzer:
        """Create an analyzer from settings; an explicit client overrides the provider."""
        if client is None:
            client = cls.create_client(settings)
        return AIAnalyzer(
            client=client,
            max_retries=settings.analysis_max_retries,
            backoff_base_seconds=settings.analysis_backoff_base_seconds,
            timeout_seconds=settings.analysis_timeout_seconds,
            max_concurrency=settings.analysis_max_concurrency,
            dedup_prefix_length=settings.analysis_dedup_prefix_length,
        )

    @classmethod
    def create_client(cls, settings: Settings) -> BaseLanguageModelClient:
        provider = settings.analysis_provider.lower()
        if provider == "example":
            return ExampleClientAdapter()
        return OpenAIClientAdapter(
            api_key=settings.analysis_api_key,
            model=settings.analysis_model_name,
            timeout_seconds=settings.analysis_timeout_seconds,
            temperature=settings.analysis_temperature,
            base_url=cls._resolve_base_url(provider, settings),
        )

    @classmethod
    def _resolve_base_url(cls, provider: str, settings: Settings) -> str | None:
        override = settings.analysis_base_url.strip()
        if provider == "openai":
            return override or None
        if provider == "openai_compatible":
            if not override:
                raise ValueError(
                    "analysis_base_url is required for analysis_provider=openai_compatible"
                )
            return override
        default_base_url = cls.OPENAI_COMPATIBLE_BASE_URLS.get(provider)
        if default_base_url is not None:
            return override or default_base_url
        supported = [
            "example",
            "openai",
            "openai_compatible",
            *sorted(cls.OPENAI_COMPATIBLE_BASE_URLS),
        ]
        raise ValueError(f"Unknown analysis provider '{provider}'. Choose from: {supported}")
