"""Pure SEO helpers used by the stage catalogue: defaults, categorisation, metadata."""
import math
import re
from urllib.parse import urlparse

KEYWORD_CATEGORIES = ("primary", "long_tail", "question", "comparison", "local", "trend")
COMMON_TAGS = ("SEO", "Marketing", "Business", "Tips", "Guide")


def domain_of(url: str) -> str:
    host = urlparse(url).hostname or url
    return host[4:] if host.startswith("www.") else host


def slugify(text: str) -> str:
    slug = re.sub(r"[^a-z0-9\s-]", "", (text or "").lower())
    slug = re.sub(r"[\s-]+", "-", slug)
    return slug.strip("-")


def word_count(text: str) -> int:
    return len((text or "").split())


def keyword_text(keyword) -> str:
    if isinstance(keyword, dict):
        return str(keyword.get("keyword") or keyword.get("text") or "")
    return str(keyword or "")


def keyword_item(text: str) -> dict:
    """Keyword record for a phrase recovered from a non-JSON reply."""
    return {
        "keyword": text,
        "category": "extracted",
        "search_volume": "medium",
        "competition": "medium",
        "difficulty": "medium",
        "reason": "Extracted from AI response",
    }


def categorize_keywords(keywords: list) -> dict:
    """Bucket keywords by their declared category, or by shape when it is unknown."""
    categories = {name: [] for name in KEYWORD_CATEGORIES}
    for kw in keywords:
        text = keyword_text(kw)
        if not text:
            continue
        declared = kw.get("category") if isinstance(kw, dict) else None
        declared = (declared or "").replace("-", "_").lower()
        if declared == "longtail":
            declared = "long_tail"
        if declared in categories:
            categories[declared].append(text)
            continue
        words = text.lower().split()
        if {"what", "how", "why", "when"} & set(words):
            categories["question"].append(text)
        elif {"vs", "best", "top", "alternative"} & set(words):
            categories["comparison"].append(text)
        elif len(words) > 3:
            categories["long_tail"].append(text)
        else:
            categories["primary"].append(text)
    return categories


def simple_clusters(keywords: list[str], count: int = 6) -> dict:
    """Split keywords into `count` evenly sized, numbered topic clusters."""
    if not keywords:
        return {"clusters": []}
    size = math.ceil(len(keywords) / count)
    clusters = []
    for number, start in enumerate(range(0, len(keywords), size), start=1):
        clusters.append({
            "name": f"Topic {number}",
            "keywords": keywords[start:start + size],
            "content_type": "blog post",
            "traffic_potential": "medium",
            "priority": number,
        })
    return {"clusters": clusters}


def basic_gap_analysis(content_gaps: list[str]) -> dict:
    gaps = []
    for index, gap in enumerate(content_gaps[:8]):
        topic = gap.replace("**", "").strip()
        gaps.append({
            "topic": topic,
            "description": "Content opportunity identified through competitor analysis",
            "traffic_potential": "high" if index < 3 else "medium",
            "competition": "low" if index < 4 else "medium",
            "difficulty": "easy" if index < 5 else "medium",
            "business_relevance": "high",
            "suggested_content": f"Complete guide to {topic}",
            "target_keywords": [],
            "priority": index + 1,
        })
    return {
        "content_gaps": gaps,
        "opportunities": {
            "quick_wins": [g["topic"] for g in gaps[:3]],
            "long_term_projects": [g["topic"] for g in gaps[3:6]],
            "seasonal_content": [g["topic"] for g in gaps[6:8]],
        },
    }


def _priority(gap: dict) -> float:
    try:
        return float(gap.get("priority"))
    except (TypeError, ValueError):
        return math.inf


def recommendations(gap_analysis: dict) -> list[str]:
    gaps = [g for g in gap_analysis.get("content_gaps") or [] if isinstance(g, dict)]
    advice = []
    high_priority = [g for g in gaps if _priority(g) <= 3]
    if high_priority:
        advice.append(
            "Start with high-priority content gaps: " + ", ".join(str(g.get("topic", "")) for g in high_priority)
        )
    if any(g.get("difficulty") == "easy" and g.get("traffic_potential") == "high" for g in gaps):
        advice.append("Focus on quick wins for immediate traffic gains")
    if any(g.get("competition") == "low" for g in gaps):
        advice.append("Target low-competition topics for easier ranking")
    return advice


def priority_matrix(content_gaps: list) -> dict:
    gaps = [g for g in content_gaps or [] if isinstance(g, dict)]
    return {
        "high_priority_high_impact": [g for g in gaps if _priority(g) <= 3 and g.get("traffic_potential") == "high"],
        "quick_wins": [g for g in gaps if g.get("difficulty") == "easy" and g.get("competition") == "low"],
        "long_term_value": [
            g for g in gaps if g.get("business_relevance") == "high" and g.get("traffic_potential") == "high"
        ],
        "low_hanging_fruit": [g for g in gaps if g.get("difficulty") == "easy" and _priority(g) <= 5],
    }


def basic_outline(topic: str, keywords: list[str]) -> dict:
    keywords = list(keywords) or [topic]
    title = f"The Complete Guide to {topic}"

    def section(heading, words, points, notes):
        return {"heading": heading, "type": "h2", "word_count": words, "key_points": points, "seo_notes": notes}

    return {
        "title": title,
        "meta_description": f"Learn everything about {topic}. Comprehensive guide with tips, strategies, and actionable insights.",
        "slug": slugify(topic),
        "target_keywords": keywords,
        "estimated_word_count": 2000,
        "sections": [
            {"heading": title, "type": "h1", "word_count": 0, "key_points": []},
            section("Introduction", 200, ["Hook readers", "Preview main points", "Include primary keyword"],
                    "Include primary keyword in first 100 words"),
            section(f"What is {topic}?", 300, ["Define the topic", "Explain importance", "Provide context"],
                    "Use secondary keywords naturally"),
            section(f"Benefits of {topic}", 400, ["List key benefits", "Include examples", "Use bullet points"],
                    "Include long-tail keywords"),
            section("How to Get Started", 500, ["Step-by-step guide", "Actionable tips", "Common mistakes to avoid"],
                    'Optimize for "how to" queries'),
            section("Best Practices", 400, ["Expert recommendations", "Industry standards", "Pro tips"],
                    "Use related keywords"),
            section("Conclusion", 200, ["Summarize key points", "Next steps", "Call to action"],
                    "Reinforce primary keyword"),
        ],
        "seo_strategy": {
            "primary_keyword": keywords[0],
            "secondary_keywords": keywords[1:],
            "internal_linking_opportunities": [],
            "featured_snippet_opportunity": "Yes - definition and list format",
        },
        "call_to_action": "Contact us to learn more about our services",
    }


def body_sections(sections: list) -> list[dict]:
    """Outline sections that make up the main body (no h1, introduction or conclusion)."""
    body = []
    for s in sections or []:
        if not isinstance(s, dict):
            continue
        heading = str(s.get("heading", "")).lower()
        if "intro" in heading or "conclusion" in heading or s.get("type") == "h1":
            continue
        body.append(s)
    return body


def meta_info(content: str, outline: dict) -> dict:
    """Title, meta description and slug, preferring what the edited post itself declares."""
    title = outline.get("title") or ""
    meta_description = outline.get("meta_description") or ""
    h1 = re.search(r"^#\s+(.+)$", content or "", re.MULTILINE)
    if h1:
        title = h1.group(1).strip()
    declared = re.search(r"Meta Description:\**\s*(.+)$", content or "", re.MULTILINE | re.IGNORECASE)
    if declared:
        meta_description = declared.group(1).strip()
    return {"title": title, "meta_description": meta_description, "slug": slugify(title)}


def categories_for(outline: dict, content_brief: dict) -> list[str]:
    title = str(outline.get("title") or "").lower()
    categories = []
    if "guide" in str(content_brief.get("purpose") or "").lower():
        categories.append("Guides")
    if "how to" in title:
        categories.append("How-to")
    if "best" in title:
        categories.append("Reviews")
    if "tips" in title:
        categories.append("Tips")
    return categories or ["Blog"]


def tags_for(content: str, keywords: list) -> list[str]:
    lowered = (content or "").lower()
    tags = [k for k in keywords or [] if isinstance(k, str) and k and k.lower() in lowered]
    for tag in COMMON_TAGS:
        if tag.lower() in lowered and tag not in tags:
            tags.append(tag)
    return tags[:8]
