"""Tests for blogforge.research search() with mocked provider SDKs."""
import os
import sys
from unittest.mock import MagicMock

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))


@pytest.fixture(autouse=True)
def _reset_env(monkeypatch):
    monkeypatch.delenv("LLM_PROVIDER", raising=False)


def test_search_openai_uses_web_search_tool(monkeypatch):
    import openai
    from blogforge import research

    client = MagicMock()
    client.responses.create.return_value = MagicMock(output_text="Popular pages: https://example.com/blog")
    monkeypatch.setattr(openai, "OpenAI", lambda **kwargs: client)
    assert research.search("popular pages on example.com") == "Popular pages: https://example.com/blog"
    kwargs = client.responses.create.call_args.kwargs
    assert kwargs["tools"] == [{"type": "web_search_preview"}]
    assert kwargs["input"] == "popular pages on example.com"


def test_search_anthropic_joins_text_blocks(monkeypatch):
    monkeypatch.setenv("LLM_PROVIDER", "anthropic")
    import anthropic
    from blogforge import research

    client = MagicMock()
    client.messages.create.return_value = MagicMock(content=[
        MagicMock(type="server_tool_use"),
        MagicMock(type="text", text="First. "),
        MagicMock(type="web_search_tool_result"),
        MagicMock(type="text", text="Second."),
    ])
    monkeypatch.setattr(anthropic, "Anthropic", lambda **kwargs: client)
    assert research.search("trends") == "First. Second."
    tools = client.messages.create.call_args.kwargs["tools"]
    assert tools[0]["type"] == "web_search_20250305"


def test_search_failure_becomes_generation_error(monkeypatch):
    from blogforge import research
    from blogforge.errors import GenerationError

    def boom(query):
        raise TimeoutError("slow")

    monkeypatch.setattr(research, "_web_search_openai", boom)
    with pytest.raises(GenerationError):
        research.search("anything")
