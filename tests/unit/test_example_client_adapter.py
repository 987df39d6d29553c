"""Tests for ExampleClientAdapter (template/reference adapter)."""

import asyncio
import json

from answerlens.analysis.client_base import BaseLanguageModelClient
from answerlens.analysis.example_client_adapter import ExampleClientAdapter
from answerlens.analysis.response_parser import PARSE_JSON, parse_analysis_response


class TestExampleClientAdapter:
    def test_implements_base_contract(self) -> None:
        adapter = ExampleClientAdapter()
        assert isinstance(adapter, BaseLanguageModelClient)

        completion = asyncio.run(adapter.complete(system_prompt="sys", user_prompt="some words"))

        parsed = json.loads(completion.text)
        assert "summary" in parsed
        assert "suggestions" in parsed
        assert completion.model == "example"
        assert completion.tokens_in == 2

    def test_response_parses_as_json(self) -> None:
        completion = asyncio.run(
            ExampleClientAdapter().complete(system_prompt="", user_prompt="")
        )

        result = parse_analysis_response(completion.text)

        assert result.metadata.parse_mode == PARSE_JSON
        assert len(result.suggestions) == 1
