"""Web research through the LLM's own native web-search tool.

The single public entry point, search(), dispatches to a provider-specific
implementation based on the LLM_PROVIDER environment variable. No third-party
search service is used.

Provider implementations
------------------------
OpenAI   : Responses API with the web_search_preview tool.
Anthropic: Messages API with the web_search_20250305 tool.

Environment variables
---------------------
LLM_PROVIDER          : "openai" (default) or "anthropic".
OPENAI_MODEL          : Model for OpenAI web search (default: gpt-4o-mini).
ANTHROPIC_MODEL       : Model for Anthropic web search (default: claude-sonnet-4-6).
MAX_TOKENS            : Max tokens for Anthropic responses (default: 4096).
STAGE_TIMEOUT_SECONDS : Client timeout for one search (default: 300).
"""
import os

from dotenv import load_dotenv

from blogforge import config
from blogforge.errors import GenerationError
from blogforge.logs import get_blogforge_logger

load_dotenv()

logger = get_blogforge_logger(__name__)

RESEARCH_INSTRUCTIONS = (
    "You are a helpful research assistant. Provide accurate and up-to-date information. "
    "Prefer concrete page URLs, numbered lists and short factual sentences."
)


def search(query: str) -> str:
    """Answer a research query with live web results.

    Args:
        query: The natural-language research question.

    Returns:
        The provider's answer text. May be empty if the provider returned no
        text blocks.

    Raises:
        GenerationError: The provider call failed or timed out.
    """
    provider = config.llm_provider()
    try:
        if provider == "anthropic":
            return _web_search_anthropic(query)
        return _web_search_openai(query)
    except Exception as error:
        logger.error("[Research] Web search failed", provider=provider, error=str(error))
        raise GenerationError(f"{provider} web search failed: {error}", cause=error) from error


def _web_search_openai(query: str) -> str:
    """Perform a web search using the OpenAI Responses API with web_search_preview.

    Preconditions:
        - OPENAI_API_KEY must be set in the environment.
        - OPENAI_MODEL must reference a model that supports the web_search_preview
          tool (default: gpt-4o-mini).
    """
    from openai import OpenAI

    return OpenAI(timeout=config.stage_timeout_seconds(), max_retries=0).responses.create(
        model=os.environ.get("OPENAI_MODEL", "gpt-4o-mini"),
        tools=[{"type": "web_search_preview"}],
        instructions=RESEARCH_INSTRUCTIONS,
        input=query,
    ).output_text


def _web_search_anthropic(query: str) -> str:
    """Perform a web search using the Anthropic Messages API with web_search_20250305.

    All text blocks of the reply are joined, since Anthropic interleaves text
    with search result blocks.
    """
    from anthropic import Anthropic

    response = Anthropic(timeout=config.stage_timeout_seconds(), max_retries=0).messages.create(
        model=os.environ.get("ANTHROPIC_MODEL", "claude-sonnet-4-6"),
        max_tokens=int(os.environ.get("MAX_TOKENS", "4096")),
        system=RESEARCH_INSTRUCTIONS,
        tools=[{"type": "web_search_20250305", "name": "web_search"}],
        messages=[{"role": "user", "content": query}],
    )
    return "".join(b.text for b in response.content if getattr(b, "type", None) == "text")
