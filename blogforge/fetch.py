"""Fetch a web page and reduce it to the fields the analysis stage needs."""
import requests
from bs4 import BeautifulSoup

from blogforge import config
from blogforge.errors import FetchError
from blogforge.logs import get_blogforge_logger

logger = get_blogforge_logger(__name__)

USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"
MAX_TEXT_CHARS = 2000


def fetch_page(url: str) -> dict:
    """Return {url, title, description, headings, text} for url.

    Scripts and styles are dropped; body text is whitespace-collapsed and cut
    to MAX_TEXT_CHARS. Raises FetchError on any transport or HTTP failure.
    """
    try:
        response = requests.get(
            url,
            headers={"User-Agent": USER_AGENT},
            timeout=config.fetch_timeout_seconds(),
        )
        response.raise_for_status()
    except requests.exceptions.RequestException as error:
        logger.error("[Fetch Page] Could not fetch page", url=url, error=str(error))
        raise FetchError(f"Failed to fetch {url}: {error}", cause=error) from error

    page = parse_page(response.text)
    page["url"] = url
    logger.info("[Fetch Page] Page fetched", url=url, headings=len(page["headings"]))
    return page


def parse_page(html: str) -> dict:
    soup = BeautifulSoup(html, "html.parser")
    for tag in soup(["script", "style"]):
        tag.decompose()

    title = soup.title.get_text(strip=True) if soup.title else ""
    meta = soup.find("meta", attrs={"name": "description"})
    description = (meta.get("content") or "").strip() if meta else ""
    headings = [" ".join(h.get_text(" ").split()) for h in soup.find_all(["h1", "h2", "h3"])]
    body = soup.body or soup
    text = " ".join(body.get_text(" ").split())[:MAX_TEXT_CHARS]

    return {
        "title": title,
        "description": description,
        "headings": [h for h in headings if h],
        "text": text,
    }
