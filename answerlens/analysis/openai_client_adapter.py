import httpx
import openai

from answerlens.analysis.client_base import BaseLanguageModelClient
from answerlens.analysis.exceptions import AnalysisError, AnalysisNetworkError
from answerlens.analysis.models import Completion


class OpenAIClientAdapter(BaseLanguageModelClient):
    """Language-model client built on the OpenAI-compatible chat API."""

    def __init__(
        self,
        *,
        api_key: str,
        model: str,
        timeout_seconds: int,
        temperature: float = 0.3,
        base_url: str | None = None,
    ) -> None:
        self._model = model
        self._temperature = max(0.0, min(1.0, temperature))
        self._client = openai.AsyncOpenAI(
            api_key=api_key,
            timeout=timeout_seconds,
            base_url=base_url,
            max_retries=0,
        )

    async def complete(self, *, system_prompt: str, user_prompt: str) -> Completion:
        try:
            response = await self._client.chat.completions.create(
                model=self._model,
                temperature=self._temperature,
                response_format={"type": "json_object"},
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
            )
        except (openai.APIConnectionError, httpx.ConnectError, httpx.TimeoutException) as exc:
            raise AnalysisNetworkError(f"AI provider network error: {exc}") from exc
        except openai.APIError as exc:
            raise AnalysisNetworkError(f"AI provider API error: {exc}") from exc

        if not response.choices:
            raise AnalysisError("AI returned no choices")
        content = response.choices[0].message.content
        if content is None:
            raise AnalysisError("AI returned empty response")
        usage = response.usage
        return Completion(
            text=content,
            model=response.model or self._model,
            tokens_in=usage.prompt_tokens if usage else 0,
            tokens_out=usage.completion_tokens if usage else 0,
        )
