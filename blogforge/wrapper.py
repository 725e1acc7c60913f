"""LLM wrapper: unified chat interface over OpenAI (default) or Anthropic.

Every call is bounded by STAGE_TIMEOUT_SECONDS and performs no SDK-level retries;
retrying is the orchestrator's decision. Provider failures surface as
GenerationError.
"""
import os

from dotenv import load_dotenv

from blogforge import config
from blogforge.errors import GenerationError
from blogforge.logs import get_blogforge_logger

load_dotenv()

logger = get_blogforge_logger(__name__)


def complete(messages: list[dict]) -> str:
    provider = config.llm_provider()
    try:
        if provider == "anthropic":
            text = _complete_anthropic(messages)
        else:
            text = _complete_openai(messages)
    except GenerationError:
        raise
    except Exception as error:
        logger.error("[Generate] Provider call failed", provider=provider, error=str(error))
        raise GenerationError(f"{provider} completion failed: {error}", cause=error) from error
    if text is None:
        raise GenerationError(f"{provider} returned an empty completion")
    return text


def generate(prompt: str, system: str | None = None) -> str:
    """Send a single prompt (plus optional system message) and return the reply text."""
    messages = [{"role": "user", "content": prompt}]
    if system:
        messages.insert(0, {"role": "system", "content": system})
    return complete(messages)


def _complete_openai(messages: list[dict]) -> str:
    from openai import OpenAI

    msg = OpenAI(timeout=config.stage_timeout_seconds(), max_retries=0).chat.completions.create(
        model=os.environ.get("OPENAI_MODEL", "gpt-4o-mini"),
        messages=[{"role": m["role"], "content": m["content"]} for m in messages],
    ).choices[0].message
    if getattr(msg, "refusal", None):
        raise GenerationError(f"Model refused: {msg.refusal}")
    return msg.content


def _complete_anthropic(messages: list[dict]) -> str:
    from anthropic import Anthropic

    response = Anthropic(timeout=config.stage_timeout_seconds(), max_retries=0).messages.create(
        model=os.environ.get("ANTHROPIC_MODEL", "claude-3-5-sonnet-20241022"),
        max_tokens=int(os.environ.get("MAX_TOKENS", "4096")),
        system="\n".join(m["content"] for m in messages if m.get("role") == "system") or None,
        messages=[{"role": m["role"], "content": m["content"]} for m in messages if m.get("role") in ("user", "assistant")],
    )
    return "".join(getattr(b, "text", "") for b in response.content if getattr(b, "type", None) == "text")
