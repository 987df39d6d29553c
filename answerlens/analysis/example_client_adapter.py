"""Example language-model client adapter.

Use this module as a reference when implementing new provider adapters.
Implement BaseLanguageModelClient and register the provider in AnalyzerFactory.
"""

import json
from typing import ClassVar

from answerlens.analysis.client_base import BaseLanguageModelClient
from answerlens.analysis.models import Completion


class ExampleClientAdapter(BaseLanguageModelClient):
    """Example adapter that returns a fixed valid analysis JSON.

    No network calls. Useful for local development and as a template for
    building real provider adapters.
    """

    DEFAULT_RESPONSE: ClassVar[dict[str, object]] = {
        "summary": "The document was received and read successfully.",
        "suggestions": [
            {
                "category": "general",
                "priority": "low",
                "content": "Configure a real analysis provider for detailed feedback.",
            }
        ],
        "insights": [],
        "study_tips": [],
        "related_concepts": [],
    }

    async def complete(self, *, system_prompt: str, user_prompt: str) -> Completion:
        _ = system_prompt
        return Completion(
            text=json.dumps(self.DEFAULT_RESPONSE),
            model="example",
            tokens_in=len(user_prompt.split()),
            tokens_out=0,
        )
