"""Mine research prose for URLs, content gaps, opportunities and trends.

Research replies are free text with no format at all, so these functions are the
only structure the research stages get. Each returns a deduplicated list in
encounter order, capped.
"""
import re

from blogforge.pipeline.extractor import line_candidates

URL_PATTERN = re.compile(
    r"https?://(?:www\.)?[-a-zA-Z0-9@:%._+~#=]{1,256}\.[a-zA-Z0-9()]{1,6}\b[-a-zA-Z0-9()@:%_+.~#?&/=]*"
)
CONTENT_TYPE_VOCABULARY = ("blog", "product", "category", "guide", "review", "comparison", "tutorial", "news", "feature")
OPPORTUNITY_TRIGGERS = ("opportunity", "should write", "could create", "missing", "trending", "popular")
TREND_TRIGGERS = ("trending", "popular", "hot topic", "emerging", "growing", "demand")
CURRENT_CONTENT_PATTERNS = (
    re.compile(r"publish(?:es|ing)?\s+([^.\n]+)", re.IGNORECASE),
    re.compile(r"content\s+about\s+([^.\n]+)", re.IGNORECASE),
    re.compile(r"cover(?:s|ing)?\s+([^.\n]+)", re.IGNORECASE),
    re.compile(r"focus(?:es)?\s+on\s+([^.\n]+)", re.IGNORECASE),
)
_SENTENCE_SPLIT = re.compile(r"[.!?]+")
_MARKDOWN_LINK_TAIL = ")],>*"


def _unique(items, limit: int) -> list:
    out = []
    for item in items:
        if item not in out:
            out.append(item)
        if len(out) >= limit:
            break
    return out


def mine_urls(text: str, limit: int = 10) -> list[str]:
    return _unique((u.rstrip(_MARKDOWN_LINK_TAIL + ".") for u in URL_PATTERN.findall(text or "")), limit)


def mine_content_types(text: str) -> list[str]:
    lowered = (text or "").lower()
    return [word for word in CONTENT_TYPE_VOCABULARY if word in lowered]


def mine_categories(text: str, known: list, limit: int = 10) -> list[str]:
    """Known categories (e.g. from the site analysis) that the text mentions."""
    lowered = (text or "").lower()
    hits = [c for c in known or [] if isinstance(c, str) and c and c.lower() in lowered]
    return _unique(hits, limit)


def mine_current_content(text: str, limit: int = 10) -> list[str]:
    found = []
    for pattern in CURRENT_CONTENT_PATTERNS:
        for match in pattern.finditer(text or ""):
            phrase = match.group(1).strip()
            if 3 < len(phrase) < 50:
                found.append(phrase)
    return _unique(found, limit)


def mine_content_gaps(text: str, limit: int = 10) -> list[str]:
    """Numbered or bulleted lines, read as one content-gap idea each."""
    gaps = []
    for line in (text or "").splitlines():
        stripped = line.strip()
        if not stripped or not (stripped[0].isdigit() or stripped[0] in "-*•"):
            continue
        for candidate in line_candidates(stripped):
            if 10 < len(candidate) < 100:
                gaps.append(candidate)
    return _unique(gaps, limit)


def _sentences_with(text: str, triggers, min_length: int, max_length: int, limit: int) -> list[str]:
    picked = []
    for sentence in _SENTENCE_SPLIT.split(text or ""):
        lowered = sentence.lower()
        if any(trigger in lowered for trigger in triggers):
            sentence = " ".join(sentence.split())
            if min_length < len(sentence) < max_length:
                picked.append(sentence)
    return _unique(picked, limit)


def mine_opportunities(text: str, limit: int = 8) -> list[str]:
    return _sentences_with(text, OPPORTUNITY_TRIGGERS, 20, 150, limit)


def mine_trending_topics(*texts: str, limit: int = 5) -> list[str]:
    return _sentences_with(" ".join(t or "" for t in texts), TREND_TRIGGERS, 15, 100, limit)
