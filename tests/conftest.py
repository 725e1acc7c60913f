"""Shared fakes for unit tests: deterministic capabilities that answer by prompt type."""
import json
import os
import sys

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

PAGE = {
    "url": "https://www.example.com",
    "title": "Example Running Co",
    "description": "Running shoes and gear for every runner",
    "headings": ["Running shoes", "Trail gear"],
    "text": "We sell running shoes, trail gear and training plans.",
}

ANALYSIS = {
    "business_type": "E-commerce",
    "main_products": ["running shoes", "trail gear"],
    "target_audience": "Recreational runners",
    "content_categories": ["Running", "Training"],
    "industry": "Sporting goods",
    "communication_style": "Friendly",
    "summary": "Online running store.",
}

KEYWORDS = [
    {"keyword": "best running shoes", "category": "primary", "search_volume": "high",
     "competition": "high", "difficulty": "hard", "reason": "Core product"},
    {"keyword": "how to choose trail shoes", "category": "question", "search_volume": "medium",
     "competition": "low", "difficulty": "easy", "reason": "Buyer intent"},
    {"keyword": "marathon training plan", "category": "long_tail", "search_volume": "medium",
     "competition": "medium", "difficulty": "medium", "reason": "Audience interest"},
]

GAPS = {
    "content_gaps": [
        {"topic": "Topic A", "description": "Uncovered", "traffic_potential": "high", "competition": "low",
         "difficulty": "easy", "business_relevance": "high", "suggested_content": "Guide to Topic A",
         "target_keywords": ["topic a keyword"], "priority": 1},
        {"topic": "Topic C", "description": "Uncovered", "traffic_potential": "medium", "competition": "medium",
         "difficulty": "medium", "business_relevance": "high", "suggested_content": "Guide to Topic C",
         "target_keywords": [], "priority": 4},
    ],
    "opportunities": {"quick_wins": ["Topic A"], "long_term_projects": [], "seasonal_content": []},
}

OUTLINE = {
    "title": "The Runner's Guide",
    "meta_description": "Everything a runner needs to know.",
    "slug": "the-runners-guide",
    "target_keywords": ["best running shoes"],
    "estimated_word_count": 1500,
    "sections": [
        {"heading": "The Runner's Guide", "type": "h1", "word_count": 0, "key_points": []},
        {"heading": "Introduction", "type": "h2", "word_count": 150, "key_points": ["hook"]},
        {"heading": "Choosing Shoes", "type": "h2", "word_count": 400, "key_points": ["fit", "cushioning"]},
        {"heading": "Training Basics", "type": "h2", "word_count": 400, "key_points": ["pace"]},
        {"heading": "Conclusion", "type": "h2", "word_count": 150, "key_points": ["cta"]},
    ],
    "seo_strategy": {
        "primary_keyword": "best running shoes",
        "secondary_keywords": ["trail shoes"],
        "internal_linking_opportunities": ["/shoes"],
        "featured_snippet_opportunity": "List of tips",
    },
    "call_to_action": "Shop our running shoes",
}

BODY = "## Choosing Shoes\n\nFit matters most for running shoes.\n\n## Training Basics\n\nStart slow."
FINAL = (
    "# The Runner's Guide\n\nEvery runner needs the best running shoes.\n\n"
    "## Choosing Shoes\n\nFit matters most.\n\n## Training Basics\n\nStart slow.\n\n"
    "## Conclusion\n\nShop our running shoes."
)

REPLIES = (
    ("Analyze this website", json.dumps(ANALYSIS)),
    ("Generate 30 SEO keywords", "```json\n" + json.dumps(KEYWORDS) + "\n```"),
    ("Give up to 15 search variations", json.dumps(["running shoes for beginners", "cheap running shoes"])),
    ("Give up to 15 keywords", json.dumps(["trail running tips", "shoe rotation"])),
    ("Group these keywords", json.dumps({"clusters": [{"name": "Shoes", "keywords": ["best running shoes"],
                                                      "content_type": "guide", "traffic_potential": "high",
                                                      "priority": 1}]})),
    ("Run a content gap analysis", json.dumps(GAPS)),
    ("Suggest up to 8 specific blog post titles", json.dumps(["Topic B", "Topic D"])),
    ("Create a detailed SEO blog post outline", json.dumps(OUTLINE)),
    ("Suggest 3 alternative", json.dumps(["Run Better", "Shoe Guide", "Runner 101"])),
    ("Write the main body", BODY),
    ("Suggest improvements", "Add a sizing chart."),
    ("Edit this blog post", FINAL),
    ("Score the SEO quality", json.dumps({"overall_score": 86, "recommendations": ["Add alt text"]})),
)

POPULAR_PAGES = (
    "The most visited pages are https://www.example.com/shoes and https://www.example.com/blog/training. "
    "The blog has popular guide and review content about Running."
)
STRATEGY = (
    "Example.com publishes gear reviews and training tips. "
    "Trail running is a growing trend among recreational runners."
)
GAP_RESEARCH = (
    "1. Sustainable running shoe guides\n"
    "2. Injury prevention for new runners\n"
    "- Comparison of carbon plate shoes\n"
)


def reply_for(prompt: str) -> str:
    """Canned generator reply keyed on the first line of the prompt."""
    first = prompt.splitlines()[0]
    for prefix, reply in REPLIES:
        if first.startswith(prefix):
            return reply
    raise AssertionError(f"Unexpected prompt: {first}")


def research_for(query: str) -> str:
    if "most popular" in query:
        return POPULAR_PAGES
    if "missing" in query:
        return GAP_RESEARCH
    return STRATEGY


class FakeCapabilities:
    """Records every capability call as (capability, first line of the request)."""

    def __init__(self):
        self.log = []
        self.published = []

    def generate(self, prompt):
        self.log.append(("generate", prompt.splitlines()[0]))
        return reply_for(prompt)

    def research(self, query):
        self.log.append(("research", query))
        return research_for(query)

    def fetch(self, url):
        self.log.append(("fetch", url))
        return dict(PAGE, url=url)

    def publish(self, document):
        self.log.append(("publish", document.get("title")))
        self.published.append(document)
        return {"id": "doc-123", "url": "https://proj.sanity.studio/desk/post;doc-123", "preview_url": ""}

    def services(self, **overrides):
        from blogforge.services import Services

        callables = {
            "generate": self.generate,
            "research": self.research,
            "fetch": self.fetch,
            "publish": self.publish,
        }
        callables.update(overrides)
        return Services(**callables)


@pytest.fixture
def fakes():
    return FakeCapabilities()


@pytest.fixture(autouse=True)
def _fast_defaults(monkeypatch):
    monkeypatch.delenv("GENERATION_MAX_ATTEMPTS", raising=False)
    monkeypatch.delenv("GENERATION_BACKOFF_SECONDS", raising=False)
    monkeypatch.delenv("STAGE_TIMEOUT_SECONDS", raising=False)
