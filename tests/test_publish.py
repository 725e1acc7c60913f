"""Tests for blogforge.publish: Sanity document building and the mutation request."""
import os
import sys
from unittest.mock import MagicMock

import pytest
import requests

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

DOCUMENT = {
    "title": "The Runner's Guide",
    "slug": "the-runners-guide",
    "body": "# The Runner's Guide\n\nIntro paragraph.\n\n## Shoes\n\nPick well.",
    "metadata": {
        "meta_description": "Everything a runner needs.",
        "keywords": ["running"],
        "categories": ["Guides"],
        "tags": ["Tips"],
        "word_count": 450,
        "publish_date": "2026-01-01T00:00:00+00:00",
        "author": "AI Blog Writer",
    },
}


@pytest.fixture
def sanity_env(monkeypatch):
    monkeypatch.setenv("SANITY_PROJECT_ID", "proj")
    monkeypatch.setenv("SANITY_API_TOKEN", "secret")
    monkeypatch.setenv("SANITY_DATASET", "production")
    monkeypatch.setenv("SANITY_API_VERSION", "2024-01-01")
    monkeypatch.setenv("SITE_BASE_URL", "https://blog.example.com/")


def test_markdown_to_blocks_maps_headings_and_paragraphs():
    from blogforge.publish import markdown_to_blocks

    blocks = markdown_to_blocks("# Title\n\nFirst para.\n\n##### Deep\n\n\n\nLast")
    assert [b["style"] for b in blocks] == ["h1", "normal", "h4", "normal"]
    assert blocks[0]["_key"] == "header_0"
    assert blocks[0]["children"][0]["text"] == "Title"
    assert blocks[1]["_key"] == "paragraph_1"
    assert blocks[-1]["children"][0]["text"] == "Last"


def test_excerpt_strips_markdown_and_cuts_on_word_boundary():
    from blogforge.publish import excerpt

    assert excerpt("## Hello **bold** [link](http://x)") == "Hello bold link"
    long_text = " ".join(["word"] * 100)
    cut = excerpt(long_text)
    assert cut.endswith("...")
    assert len(cut) <= 153


def test_reading_time():
    from blogforge.publish import reading_time

    assert reading_time(None) == "5 min read"
    assert reading_time(200) == "1 min read"
    assert reading_time(201) == "2 min read"


def test_build_post_fields():
    from blogforge.publish import build_post

    post = build_post(DOCUMENT)
    assert post["_type"] == "post"
    assert post["slug"] == {"_type": "slug", "current": "the-runners-guide"}
    assert post["subtitle"] == "Everything a runner needs."
    assert post["readingTime"] == "3 min read"
    assert post["wordCount"] == 450
    assert post["content"][0]["style"] == "h1"


def test_publish_requires_credentials(monkeypatch):
    from blogforge import publish
    from blogforge.errors import PublishError

    monkeypatch.delenv("SANITY_PROJECT_ID", raising=False)
    monkeypatch.delenv("SANITY_API_TOKEN", raising=False)
    post = MagicMock()
    monkeypatch.setattr(publish.requests, "post", post)
    with pytest.raises(PublishError):
        publish.publish_document(DOCUMENT)
    post.assert_not_called()


def test_publish_posts_create_mutation_and_returns_urls(monkeypatch, sanity_env):
    from blogforge import publish

    response = MagicMock()
    response.json.return_value = {"results": [{"id": "abc123", "operation": "create"}]}
    post = MagicMock(return_value=response)
    monkeypatch.setattr(publish.requests, "post", post)

    result = publish.publish_document(DOCUMENT)
    assert result == {
        "id": "abc123",
        "url": "https://proj.sanity.studio/desk/post;abc123",
        "preview_url": "https://blog.example.com/blog/the-runners-guide",
    }
    args, kwargs = post.call_args
    assert args[0] == "https://proj.api.sanity.io/v2024-01-01/data/mutate/production"
    assert kwargs["headers"]["Authorization"] == "Bearer secret"
    assert kwargs["json"]["mutations"][0]["create"]["title"] == "The Runner's Guide"


def test_publish_http_failure_raises_publish_error(monkeypatch, sanity_env):
    from blogforge import publish
    from blogforge.errors import PublishError

    response = MagicMock()
    response.raise_for_status.side_effect = requests.exceptions.HTTPError("401 Unauthorized")
    monkeypatch.setattr(publish.requests, "post", MagicMock(return_value=response))
    with pytest.raises(PublishError) as exc_info:
        publish.publish_document(DOCUMENT)
    assert "401" in str(exc_info.value)


def test_publish_without_document_id_raises_publish_error(monkeypatch, sanity_env):
    from blogforge import publish
    from blogforge.errors import PublishError

    response = MagicMock()
    response.json.return_value = {"results": []}
    monkeypatch.setattr(publish.requests, "post", MagicMock(return_value=response))
    with pytest.raises(PublishError):
        publish.publish_document(DOCUMENT)
