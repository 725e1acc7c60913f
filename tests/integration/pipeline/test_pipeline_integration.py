"""Integration tests for the blog pipeline with live generation and research.
Fetch and publish are stubbed so no site is scraped and nothing is written to Sanity. Skip when no API key."""
import os

import pytest

from blogforge.pipeline import OutputShape, PipelineOrchestrator, PipelineInput, RetryPolicy, extract
from blogforge.research import search
from blogforge.services import Services
from blogforge.wrapper import generate

pytestmark = [
    pytest.mark.integration,
    pytest.mark.pipeline,
    pytest.mark.skipif(
        not os.environ.get("OPENAI_API_KEY") and not os.environ.get("ANTHROPIC_API_KEY"),
        reason="Set OPENAI_API_KEY or ANTHROPIC_API_KEY to run pipeline integration tests",
    ),
]

PAGE = {
    "url": "https://www.python.org",
    "title": "Welcome to Python.org",
    "description": "The official home of the Python Programming Language",
    "headings": ["Get Started", "Download", "Docs", "Jobs", "Latest News"],
    "text": "Python is a programming language that lets you work quickly and integrate systems more effectively.",
}


def _publish(document):
    assert document["title"]
    assert document["body"]
    return {"id": "integration-doc", "url": "https://example.sanity.studio/desk/post;integration-doc", "preview_url": ""}


def test_extract_live_keyword_list():
    """A live keyword reply decodes to a non-empty list, strictly or through the fallback."""
    reply = generate("List 5 SEO keywords about learning Python. Reply with a JSON array of strings only.")
    result = extract(reply, OutputShape.ARRAY_OF_STRINGS)
    assert isinstance(result.value, list)
    assert 0 < len(result.value) <= 30


def test_full_pipeline_live():
    """All ten stages complete against a real model and produce publishable content."""
    services = Services(generate=generate, research=search, fetch=lambda url: dict(PAGE), publish=_publish)
    run = PipelineOrchestrator(services=services, retry=RetryPolicy(max_attempts=2, backoff_seconds=1)).run(
        PipelineInput(url="https://www.python.org")
    )
    assert run.succeeded, run.report.error_message
    assert len(run.report.steps_completed) == 10
    assert run.report.selected_topic
    final = run.results["final-edit"]
    assert final["metadata"]["title"]
    assert final["metadata"]["word_count"] > 100
    assert run.results["publish"]["details"]["document_id"] == "integration-doc"
