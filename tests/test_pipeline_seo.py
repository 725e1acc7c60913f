"""Tests for blogforge.pipeline.seo helpers."""
import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))


def test_domain_and_slug():
    from blogforge.pipeline.seo import domain_of, slugify

    assert domain_of("https://www.example.com/path?q=1") == "example.com"
    assert domain_of("http://shop.example.org") == "shop.example.org"
    assert slugify("The Runner's Guide: 2026 Edition!") == "the-runners-guide-2026-edition"
    assert slugify("  -- spaced   out --  ") == "spaced-out"


def test_categorize_keywords_by_declared_category_then_shape():
    from blogforge.pipeline.seo import categorize_keywords

    categories = categorize_keywords([
        {"keyword": "running shoes", "category": "Primary"},
        {"keyword": "shoes near me", "category": "long-tail"},
        "how to lace shoes",
        "nike vs adidas",
        "lightweight trail running shoes for women",
        "trainers",
        {"keyword": ""},
    ])
    assert categories["primary"] == ["running shoes", "trainers"]
    assert categories["long_tail"] == ["shoes near me", "lightweight trail running shoes for women"]
    assert categories["question"] == ["how to lace shoes"]
    assert categories["comparison"] == ["nike vs adidas"]


def test_simple_clusters_splits_evenly():
    from blogforge.pipeline.seo import simple_clusters

    clusters = simple_clusters([f"k{i}" for i in range(12)])["clusters"]
    assert len(clusters) == 6
    assert clusters[0] == {"name": "Topic 1", "keywords": ["k0", "k1"], "content_type": "blog post",
                           "traffic_potential": "medium", "priority": 1}
    assert simple_clusters([]) == {"clusters": []}
    assert len(simple_clusters(["a", "b", "c"])["clusters"]) == 3


def test_basic_gap_analysis_and_recommendations():
    from blogforge.pipeline.seo import basic_gap_analysis, priority_matrix, recommendations

    analysis = basic_gap_analysis([f"**Gap {i}**" for i in range(10)])
    gaps = analysis["content_gaps"]
    assert len(gaps) == 8
    assert gaps[0]["topic"] == "Gap 0"
    assert gaps[0]["priority"] == 1
    assert analysis["opportunities"]["quick_wins"] == ["Gap 0", "Gap 1", "Gap 2"]

    advice = recommendations(analysis)
    assert advice[0] == "Start with high-priority content gaps: Gap 0, Gap 1, Gap 2"
    assert "Focus on quick wins for immediate traffic gains" in advice
    assert "Target low-competition topics for easier ranking" in advice

    matrix = priority_matrix(gaps)
    assert [g["topic"] for g in matrix["high_priority_high_impact"]] == ["Gap 0", "Gap 1", "Gap 2"]
    assert len(matrix["quick_wins"]) == 4


def test_basic_outline_and_body_sections():
    from blogforge.pipeline.seo import basic_outline, body_sections

    outline = basic_outline("Trail Running", ["trail running", "trail shoes"])
    assert outline["slug"] == "trail-running"
    assert outline["seo_strategy"]["primary_keyword"] == "trail running"
    headings = [s["heading"] for s in body_sections(outline["sections"])]
    assert headings == ["What is Trail Running?", "Benefits of Trail Running", "How to Get Started", "Best Practices"]
    assert basic_outline("Topic", [])["target_keywords"] == ["Topic"]


def test_meta_info_prefers_content_heading_and_declared_description():
    from blogforge.pipeline.seo import meta_info

    outline = {"title": "Outline Title", "meta_description": "Outline description"}
    content = "# Edited Title\n\n**Meta Description:** Edited description\n\nBody"
    assert meta_info(content, outline) == {
        "title": "Edited Title",
        "meta_description": "Edited description",
        "slug": "edited-title",
    }
    assert meta_info("no heading", outline)["title"] == "Outline Title"


def test_categories_and_tags():
    from blogforge.pipeline.seo import categories_for, tags_for

    assert categories_for({"title": "How to pick the best shoes"}, {"purpose": "Guide"}) == [
        "Guides", "How-to", "Reviews",
    ]
    assert categories_for({"title": "Shoes"}, {}) == ["Blog"]
    assert tags_for("Running shoes tips for marketing", ["running shoes", "absent"]) == [
        "running shoes", "Marketing", "Tips",
    ]
