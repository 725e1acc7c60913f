"""Publish a finished post to Sanity through its HTTP mutation API.

Environment variables
---------------------
SANITY_PROJECT_ID  : Required. Sanity project id.
SANITY_DATASET     : Dataset name (default: production).
SANITY_API_TOKEN   : Required. Token with write access to the dataset.
SANITY_API_VERSION : API version date (default: 2024-01-01).
SITE_BASE_URL      : Optional. Public site root used to build the preview URL.
"""
import re

import requests

from blogforge import config
from blogforge.errors import PublishError
from blogforge.logs import get_blogforge_logger

logger = get_blogforge_logger(__name__)

PUBLISH_TIMEOUT_SECONDS = 30
WORDS_PER_MINUTE = 200


def publish_document(document: dict) -> dict:
    """Create a post document in Sanity.

    Args:
        document: {"title", "slug", "body", "metadata"} where body is markdown.

    Returns:
        {"id", "url", "preview_url"}: the new document id, its Studio URL and
        the public preview URL (empty when SITE_BASE_URL is unset).

    Raises:
        PublishError: configuration is missing, or the request failed.
    """
    settings = config.sanity_settings()
    if not settings["project_id"] or not settings["token"]:
        raise PublishError("SANITY_PROJECT_ID and SANITY_API_TOKEN must be set to publish")

    doc = build_post(document)
    endpoint = (
        f"https://{settings['project_id']}.api.sanity.io/v{settings['api_version']}"
        f"/data/mutate/{settings['dataset']}"
    )
    try:
        response = requests.post(
            endpoint,
            params={"returnIds": "true"},
            headers={
                "Authorization": f"Bearer {settings['token']}",
                "Content-Type": "application/json",
            },
            json={"mutations": [{"create": doc}]},
            timeout=PUBLISH_TIMEOUT_SECONDS,
        )
        response.raise_for_status()
        results = response.json().get("results") or []
    except requests.exceptions.RequestException as error:
        logger.error("[Publish] Sanity mutation failed", title=doc["title"], error=str(error))
        raise PublishError(f"Sanity mutation failed: {error}", cause=error) from error
    except ValueError as error:
        raise PublishError(f"Sanity returned a non-JSON response: {error}", cause=error) from error

    if not results or not results[0].get("id"):
        raise PublishError("Sanity response did not include a document id")

    document_id = results[0]["id"]
    slug = doc["slug"]["current"]
    logger.info("[Publish] Document created", document_id=document_id, slug=slug)
    return {
        "id": document_id,
        "url": f"https://{settings['project_id']}.sanity.studio/desk/post;{document_id}",
        "preview_url": f"{settings['site_base_url']}/blog/{slug}" if settings["site_base_url"] else "",
    }


def build_post(document: dict) -> dict:
    metadata = document.get("metadata") or {}
    body = document.get("body") or ""
    word_count = metadata.get("word_count") or len(body.split())
    return {
        "_type": "post",
        "title": document.get("title") or metadata.get("title") or "Untitled",
        "slug": {"_type": "slug", "current": document.get("slug") or metadata.get("slug") or ""},
        "subtitle": metadata.get("meta_description") or excerpt(body),
        "content": markdown_to_blocks(body),
        "readingTime": reading_time(word_count),
        "keywords": list(metadata.get("keywords") or []),
        "categories": list(metadata.get("categories") or []),
        "tags": list(metadata.get("tags") or []),
        "publishDate": metadata.get("publish_date"),
        "author": metadata.get("author") or "AI Blog Writer",
        "wordCount": word_count,
    }


def markdown_to_blocks(markdown: str) -> list[dict]:
    """Convert markdown paragraphs to Portable Text blocks.

    Paragraphs are split on blank lines; a leading run of '#' becomes an h1-h4
    style. Inline markdown is kept as plain span text.
    """
    blocks = []
    for index, paragraph in enumerate(markdown.split("\n\n")):
        paragraph = paragraph.strip()
        if not paragraph:
            continue
        heading = re.match(r"^(#+)\s*", paragraph)
        if heading:
            level = min(len(heading.group(1)), 4)
            blocks.append({
                "_type": "block",
                "_key": f"header_{index}",
                "style": f"h{level}",
                "children": [{"_type": "span", "text": paragraph[heading.end():]}],
            })
        else:
            blocks.append({
                "_type": "block",
                "_key": f"paragraph_{index}",
                "style": "normal",
                "children": [{"_type": "span", "text": paragraph}],
            })
    return blocks


def excerpt(markdown: str, length: int = 150) -> str:
    text = re.sub(r"```[\s\S]*?```", "", markdown)
    text = re.sub(r"#{1,6}\s+", "", text)
    text = re.sub(r"\*\*(.*?)\*\*", r"\1", text)
    text = re.sub(r"\*(.*?)\*", r"\1", text)
    text = re.sub(r"\[(.*?)\]\(.*?\)", r"\1", text)
    text = re.sub(r"`(.*?)`", r"\1", text)
    text = re.sub(r"\n+", " ", text).strip()
    if len(text) <= length:
        return text
    cut = text[:length]
    last_space = cut.rfind(" ")
    if last_space > 100:
        return cut[:last_space] + "..."
    return cut + "..."


def reading_time(word_count: int | None) -> str:
    if not word_count:
        return "5 min read"
    minutes = -(-word_count // WORDS_PER_MINUTE)
    return f"{minutes} min read"
