"""The ten-stage blog pipeline: prompts, fallbacks and the record each stage leaves in the context.

Builders and finalizers only read the StageScope; every capability call goes through the orchestrator.
"""
import json
from datetime import datetime, timezone

from blogforge.pipeline import insights, seo
from blogforge.pipeline.extractor import OutputShape
from blogforge.pipeline.stage import Call, Capability, StageScope, StageSpec
from blogforge.pipeline.topic import DEFAULT_TOPIC

ANALYZE_SITE = "analyze-site"
RESEARCH_POPULAR_PAGES = "research-popular-pages"
RESEARCH_CONTENT_STRATEGY = "research-content-strategy"
GENERATE_KEYWORDS = "generate-keywords"
CLUSTER_KEYWORDS = "cluster-keywords"
GAP_ANALYSIS = "gap-analysis"
CREATE_OUTLINE = "create-outline"
WRITE_CONTENT = "write-content"
FINAL_EDIT = "final-edit"
PUBLISH = "publish"

STAGE_NAMES = (
    ANALYZE_SITE,
    RESEARCH_POPULAR_PAGES,
    RESEARCH_CONTENT_STRATEGY,
    GENERATE_KEYWORDS,
    CLUSTER_KEYWORDS,
    GAP_ANALYSIS,
    CREATE_OUTLINE,
    WRITE_CONTENT,
    FINAL_EDIT,
    PUBLISH,
)

AUTHOR = "AI Blog Writer"
PUBLISH_READY_SCORE = 70
JSON_ONLY = "Reply with ONLY the JSON, using snake_case keys. No markdown, no explanation."


def _dict(value) -> dict:
    return value if isinstance(value, dict) else {}


def _list(value) -> list:
    return value if isinstance(value, list) else []


def _text(value) -> str:
    return value if isinstance(value, str) else ""


def _dumps(value) -> str:
    return json.dumps(value, indent=2, ensure_ascii=False)


def _domain(scope: StageScope) -> str:
    return seo.domain_of(scope.input.url)


def _analysis(scope: StageScope) -> dict:
    return _dict(_dict(scope.value(ANALYZE_SITE)).get("analysis"))


def _keyword_texts(scope: StageScope) -> list[str]:
    record = _dict(scope.value(GENERATE_KEYWORDS))
    texts = [seo.keyword_text(k) for k in _list(record.get("primary_keywords"))]
    texts += [v for v in _list(record.get("variations")) + _list(record.get("gap_keywords")) if isinstance(v, str)]
    return [t for t in dict.fromkeys(texts) if t]


# analyze-site

def _gather_page(scope: StageScope, services) -> dict:
    return {"page": services.fetch(scope.input.url)}


def _analyze_site_prompt(scope: StageScope) -> str:
    page = scope.gathered.get("page") or {}
    return "\n".join([
        "Analyze this website and describe the business behind it.",
        f"URL: {scope.input.url}",
        f"Title: {page.get('title', '')}",
        f"Meta description: {page.get('description', '')}",
        f"Headings: {', '.join(page.get('headings') or [])}",
        f"Content: {page.get('text', '')}",
        "Reply with a JSON object with keys: business_type, main_products (array of strings), "
        "target_audience, content_categories (array of strings), industry, communication_style, summary.",
        JSON_ONLY,
    ])


def _analyze_site_default(scope: StageScope, raw: str) -> dict:
    return {
        "business_type": "Unknown",
        "main_products": [],
        "target_audience": "General consumers",
        "content_categories": [],
        "industry": "General",
        "communication_style": "Professional",
        "summary": raw.strip(),
    }


def _analyze_site_record(scope: StageScope) -> dict:
    return {
        "url": scope.input.url,
        "website_data": scope.gathered.get("page") or {},
        "analysis": scope.part(),
    }


# research-popular-pages

def _popular_pages_query(scope: StageScope) -> str:
    analysis = _analysis(scope)
    return (
        f"What are the most popular and most visited pages on {_domain(scope)}? "
        f"The site is a {analysis.get('business_type', 'business')} in the {analysis.get('industry', 'general')} "
        "industry. List the page URLs and the type of content on each page."
    )


def _popular_pages_record(scope: StageScope) -> dict:
    text = scope.part() or ""
    return {
        "url": scope.input.url,
        "domain": _domain(scope),
        "search_query": _popular_pages_query(scope),
        "search_results": text,
        "search_type": "popular_pages",
        "insights": {
            "popular_pages": insights.mine_urls(text),
            "content_types": insights.mine_content_types(text),
            "categories": insights.mine_categories(text, _list(_analysis(scope).get("content_categories"))),
        },
    }


# research-content-strategy

def _strategy_query(scope: StageScope) -> str:
    analysis = _analysis(scope)
    return (
        f"What blog content does {_domain(scope)} currently publish? Describe its content strategy, "
        f"the topics it covers, and what is trending for {analysis.get('target_audience', 'its audience')} "
        f"in the {analysis.get('industry', 'general')} industry."
    )


def _strategy_gaps_query(scope: StageScope) -> str:
    analysis = _analysis(scope)
    return (
        f"Which blog topics are competitors of {_domain(scope)} covering that it is missing? "
        f"Focus on {analysis.get('industry', 'general')} content opportunities. "
        "Give a numbered list of content gaps, one topic per line."
    )


def _strategy_record(scope: StageScope) -> dict:
    strategy = scope.part() or ""
    gaps = scope.part("gaps") or ""
    return {
        "url": scope.input.url,
        "domain": _domain(scope),
        "content_strategy": strategy,
        "gap_research": gaps,
        "insights": {
            "current_content_types": insights.mine_current_content(strategy),
            "content_gaps": insights.mine_content_gaps(gaps),
            "opportunities": insights.mine_opportunities(strategy + "\n" + gaps),
            "trending_topics": insights.mine_trending_topics(strategy, gaps),
        },
    }


# generate-keywords

def _keywords_prompt(scope: StageScope) -> str:
    analysis = _analysis(scope)
    popular = _dict(_dict(scope.value(RESEARCH_POPULAR_PAGES)).get("insights"))
    strategy = _dict(_dict(scope.value(RESEARCH_CONTENT_STRATEGY)).get("insights"))
    return "\n".join([
        f"Generate 30 SEO keywords for the blog of {_domain(scope)}.",
        f"Business analysis: {_dumps(analysis)}",
        f"Popular content types: {', '.join(popular.get('content_types') or [])}",
        f"Content gaps: {'; '.join(strategy.get('content_gaps') or [])}",
        f"Trending topics: {'; '.join(strategy.get('trending_topics') or [])}",
        "Mix categories: primary, long_tail, question, comparison, local, trend.",
        "Reply with a JSON array of objects with keys: keyword, category, search_volume, competition, "
        "difficulty, reason.",
        JSON_ONLY,
    ])


def _variations_prompt(scope: StageScope) -> str:
    seeds = [seo.keyword_text(k) for k in _list(scope.part())[:5]]
    return (
        f"Give up to 15 search variations (synonyms, long-tail and question forms) of these keywords: "
        f"{', '.join(s for s in seeds if s) or _domain(scope)}. "
        f"Reply with a JSON array of strings. {JSON_ONLY}"
    )


def _gap_keywords_prompt(scope: StageScope) -> str:
    gaps = _dict(_dict(scope.value(RESEARCH_CONTENT_STRATEGY)).get("insights")).get("content_gaps") or []
    return (
        f"Give up to 15 keywords {_domain(scope)} could rank for by covering these content gaps: "
        f"{'; '.join(gaps) or 'topics its competitors cover'}. "
        f"Reply with a JSON array of strings. {JSON_ONLY}"
    )


def _keywords_record(scope: StageScope) -> dict:
    keywords = [k for k in _list(scope.part()) if seo.keyword_text(k)]
    variations = [v for v in _list(scope.part("variations")) if isinstance(v, str)]
    gap_keywords = [v for v in _list(scope.part("gap_keywords")) if isinstance(v, str)]
    return {
        "url": scope.input.url,
        "domain": _domain(scope),
        "total_keywords": len(keywords) + len(variations) + len(gap_keywords),
        "primary_keywords": keywords,
        "variations": variations,
        "gap_keywords": gap_keywords,
        "keyword_categories": seo.categorize_keywords(keywords),
        "metadata": {
            "generated_at": datetime.now(timezone.utc).isoformat(),
            "industry": _analysis(scope).get("industry"),
        },
    }


# cluster-keywords

def _cluster_prompt(scope: StageScope) -> str:
    return "\n".join([
        f"Group these keywords for {_domain(scope)} ({_analysis(scope).get('industry', 'general')} industry) "
        "into 4 to 8 topic clusters, each one a potential blog post.",
        f"Keywords: {', '.join(_keyword_texts(scope))}",
        'Reply with a JSON object {"clusters": [{"name", "keywords" (array), "content_type", '
        '"traffic_potential", "priority" (number)}]}.',
        JSON_ONLY,
    ])


def _cluster_default(scope: StageScope, raw: str) -> dict:
    return seo.simple_clusters(_keyword_texts(scope))


def _cluster_record(scope: StageScope) -> dict:
    clusters = _dict(scope.part()).get("clusters")
    if not isinstance(clusters, list):
        clusters = seo.simple_clusters(_keyword_texts(scope))["clusters"]
    return {
        "url": scope.input.url,
        "total_keywords": len(_keyword_texts(scope)),
        "clusters": clusters,
    }


# gap-analysis

def _research_gaps(scope: StageScope) -> list[str]:
    return _dict(_dict(scope.value(RESEARCH_CONTENT_STRATEGY)).get("insights")).get("content_gaps") or []


def _gap_prompt(scope: StageScope) -> str:
    strategy = _dict(scope.value(RESEARCH_CONTENT_STRATEGY))
    clusters = _dict(scope.value(CLUSTER_KEYWORDS)).get("clusters") or []
    return "\n".join([
        f"Run a content gap analysis for {_domain(scope)}.",
        f"Business analysis: {_dumps(_analysis(scope))}",
        f"Current content strategy: {strategy.get('content_strategy', '')}",
        f"Competitor gaps found by research: {'; '.join(_research_gaps(scope))}",
        f"Keyword clusters: {_dumps(clusters)}",
        'Reply with a JSON object {"content_gaps": [{"topic", "description", "traffic_potential", "competition", '
        '"difficulty", "business_relevance", "suggested_content", "target_keywords" (array), "priority" (number)}], '
        '"opportunities": {"quick_wins", "long_term_projects", "seasonal_content"}}.',
        JSON_ONLY,
    ])


def _gap_default(scope: StageScope, raw: str) -> dict:
    return seo.basic_gap_analysis(_research_gaps(scope))


def _suggestions_prompt(scope: StageScope) -> str:
    gaps = _list(_dict(scope.part()).get("content_gaps"))
    topics = [str(g.get("topic")) for g in gaps if isinstance(g, dict) and g.get("topic")]
    return (
        f"Suggest up to 8 specific blog post titles for {_domain(scope)}, most valuable first. "
        f"Content gaps to cover: {'; '.join(topics) or 'general industry topics'}. "
        f"Reply with a JSON array of strings. {JSON_ONLY}"
    )


def _gap_record(scope: StageScope) -> dict:
    gap_analysis = _dict(scope.part())
    if not isinstance(gap_analysis.get("content_gaps"), list):
        gap_analysis = {**seo.basic_gap_analysis(_research_gaps(scope)), **{
            k: v for k, v in gap_analysis.items() if k != "content_gaps"
        }}
    analysis = _analysis(scope)
    return {
        "domain": _domain(scope),
        "industry": analysis.get("industry"),
        "business_type": analysis.get("business_type"),
        "gap_analysis": gap_analysis,
        "blog_suggestions": [s for s in _list(scope.part("blog_suggestions")) if isinstance(s, str)],
        "recommendations": seo.recommendations(gap_analysis),
        "priority_matrix": seo.priority_matrix(gap_analysis["content_gaps"]),
    }


# create-outline

def _topic(scope: StageScope) -> str:
    return scope.context.selected_topic or scope.input.selected_topic or DEFAULT_TOPIC


def _matching_gap(scope: StageScope, topic: str) -> dict:
    gaps = _dict(_dict(scope.value(GAP_ANALYSIS)).get("gap_analysis")).get("content_gaps") or []
    for gap in gaps:
        if isinstance(gap, dict) and str(gap.get("topic", "")).strip().lower() == topic.lower():
            return gap
    return {}


def _target_keywords(scope: StageScope) -> list[str]:
    if scope.input.target_keywords:
        return list(scope.input.target_keywords)
    gap_keywords = [k for k in _list(_matching_gap(scope, _topic(scope)).get("target_keywords")) if isinstance(k, str)]
    if gap_keywords:
        return gap_keywords
    record = _dict(scope.value(GENERATE_KEYWORDS))
    texts = [seo.keyword_text(k) for k in _list(record.get("primary_keywords"))]
    return [t for t in texts if t][:3]


def _outline_prompt(scope: StageScope) -> str:
    topic = _topic(scope)
    analysis = _analysis(scope)
    return "\n".join([
        f'Create a detailed SEO blog post outline about "{topic}" for {_domain(scope)}.',
        f"Target keywords: {', '.join(_target_keywords(scope))}",
        f"Audience: {analysis.get('target_audience', 'general readers')}; "
        f"tone: {analysis.get('communication_style', 'professional')}.",
        f"Gap details: {_dumps(_matching_gap(scope, topic))}",
        'Reply with a JSON object with keys: title, meta_description, slug, target_keywords (array), '
        'estimated_word_count (number), sections (array of {"heading", "type" ("h1"/"h2"/"h3"), "word_count", '
        '"key_points" (array), "seo_notes"}), seo_strategy {"primary_keyword", "secondary_keywords", '
        '"internal_linking_opportunities", "featured_snippet_opportunity"}, call_to_action.',
        JSON_ONLY,
    ])


def _outline_default(scope: StageScope, raw: str) -> dict:
    return seo.basic_outline(_topic(scope), _target_keywords(scope))


def _titles_prompt(scope: StageScope) -> str:
    return (
        f'Suggest 3 alternative click-worthy titles for a blog post about "{_topic(scope)}". '
        f"Reply with a JSON array of strings. {JSON_ONLY}"
    )


def _titles_default(scope: StageScope, raw: str) -> list[str]:
    topic = _topic(scope)
    return [f"Complete Guide to {topic}", f"Ultimate {topic} Guide"]


def _outline_record(scope: StageScope) -> dict:
    topic = _topic(scope)
    keywords = _target_keywords(scope)
    outline = _dict(scope.part())
    sections = outline.get("sections")
    if not isinstance(sections, list):
        sections = outline.get("outline")
    if not isinstance(sections, list) or not sections:
        basic = seo.basic_outline(topic, keywords)
        sections = basic["sections"]
        outline = {**basic, **outline}
    outline["sections"] = sections
    outline.setdefault("title", f"The Complete Guide to {topic}")
    outline.setdefault("slug", seo.slugify(outline["title"]))
    outline.setdefault("target_keywords", keywords)
    strategy = _dict(outline.get("seo_strategy"))
    analysis = _analysis(scope)
    return {
        "selected_topic": topic,
        "target_keywords": keywords,
        "outline": outline,
        "seo_enhancements": {
            "alternative_titles": [t for t in _list(scope.part("alternative_titles")) if isinstance(t, str)],
            "related_keywords": _list(strategy.get("secondary_keywords")),
            "featured_snippet_tips": strategy.get("featured_snippet_opportunity"),
            "linking_strategy": _list(strategy.get("internal_linking_opportunities")),
        },
        "content_brief": {
            "topic": topic,
            "purpose": f"Comprehensive guide to {topic}",
            "audience": analysis.get("target_audience"),
            "tone": analysis.get("communication_style"),
            "primary_keyword": keywords[0] if keywords else topic,
            "target_word_count": outline.get("estimated_word_count", 2000),
        },
        "writing_guidelines": [
            "Include the primary keyword in the first 100 words",
            "Use one H2 per outline section",
            "Keep paragraphs short and scannable",
            "End with a clear call to action",
        ],
    }


# write-content

def _outline(scope: StageScope) -> dict:
    return _dict(_dict(scope.value(CREATE_OUTLINE)).get("outline"))


def _write_prompt(scope: StageScope) -> str:
    record = _dict(scope.value(CREATE_OUTLINE))
    outline = _outline(scope)
    brief = _dict(record.get("content_brief"))
    sections = []
    for s in seo.body_sections(outline.get("sections")):
        points = "; ".join(str(p) for p in _list(s.get("key_points")))
        sections.append(f"## {s.get('heading', '')} (~{s.get('word_count', 300)} words): {points}")
    return "\n".join([
        f'Write the main body of a blog post titled "{outline.get("title", "")}".',
        f"Target keywords: {', '.join(record.get('target_keywords') or [])}",
        f"Audience: {brief.get('audience') or 'general readers'}; tone: {brief.get('tone') or 'professional'}.",
        "Write each of these sections in markdown, using the headings as given:",
        *sections,
        "Reply with the markdown only.",
    ])


def _enhancements_prompt(scope: StageScope) -> str:
    draft = _text(scope.part())[:500]
    return (
        "Suggest improvements for this blog draft: stronger examples, statistics to cite, "
        f"internal linking ideas and readability fixes.\n\n{draft}"
    )


def _write_record(scope: StageScope) -> dict:
    outline = _outline(scope)
    content = _text(scope.part())
    return {
        "section": "main-content",
        "content": content,
        "word_count": seo.word_count(content),
        "target_word_count": outline.get("estimated_word_count", 2000),
        "enhancements": _text(scope.part("enhancements")),
        "sections_written": [s.get("heading") for s in seo.body_sections(outline.get("sections"))],
        "metadata": {
            "title": outline.get("title"),
            "written_at": datetime.now(timezone.utc).isoformat(),
        },
    }


# final-edit

def _draft(scope: StageScope) -> str:
    outline = _outline(scope)
    body = _text(_dict(scope.value(WRITE_CONTENT)).get("content"))
    return f"# {outline.get('title', '')}\n\n{body}".strip()


def _edit_prompt(scope: StageScope) -> str:
    record = _dict(scope.value(CREATE_OUTLINE))
    outline = _outline(scope)
    return "\n".join([
        "Edit this blog post into its final, publish-ready form.",
        "Add an engaging introduction and a conclusion with this call to action: "
        f"{outline.get('call_to_action', 'Contact us to learn more')}.",
        f"Work these keywords in naturally: {', '.join(record.get('target_keywords') or [])}.",
        "Fix grammar, tighten the prose and keep the markdown headings.",
        "Reply with the final markdown only.",
        "",
        _draft(scope),
    ])


def _edit_default(scope: StageScope, raw: str) -> str:
    return _draft(scope)


def _seo_prompt(scope: StageScope) -> str:
    content = _text(scope.part())
    keywords = _dict(scope.value(CREATE_OUTLINE)).get("target_keywords") or []
    return "\n".join([
        f"Score the SEO quality of this blog post (0-100) for the keywords: {', '.join(keywords)}.",
        'Reply with a JSON object {"overall_score" (number), "keyword_density", "readability", '
        '"recommendations" (array of strings)}.',
        JSON_ONLY,
        "",
        content[:4000],
    ])


def _seo_default(scope: StageScope, raw: str) -> dict:
    return {"overall_score": 80, "recommendations": ["Manual SEO review recommended"]}


def _score(seo_analysis: dict) -> float:
    try:
        return float(seo_analysis.get("overall_score"))
    except (TypeError, ValueError):
        return 0.0


def _final_record(scope: StageScope) -> dict:
    record = _dict(scope.value(CREATE_OUTLINE))
    outline = _outline(scope)
    content = _text(scope.part()) or _draft(scope)
    meta = seo.meta_info(content, outline)
    keywords = record.get("target_keywords") or []
    words = seo.word_count(content)
    seo_analysis = _dict(scope.part("seo_analysis")) or _seo_default(scope, "")
    return {
        "final_content": content,
        "metadata": {
            **meta,
            "keywords": keywords,
            "word_count": words,
            "estimated_reading_time": max(1, round(words / 200)),
            "publish_date": datetime.now(timezone.utc).isoformat(),
            "author": AUTHOR,
            "categories": seo.categories_for(outline, _dict(record.get("content_brief"))),
            "tags": seo.tags_for(content, keywords),
        },
        "seo_analysis": seo_analysis,
        "publish_ready": _score(seo_analysis) >= PUBLISH_READY_SCORE,
    }


# publish

def _publish_document(scope: StageScope) -> dict:
    final = _dict(scope.value(FINAL_EDIT))
    metadata = _dict(final.get("metadata"))
    return {
        "title": metadata.get("title"),
        "slug": metadata.get("slug"),
        "body": final.get("final_content", ""),
        "metadata": metadata,
    }


def _publish_record(scope: StageScope) -> dict:
    final = _dict(scope.value(FINAL_EDIT))
    metadata = _dict(final.get("metadata"))
    response = _dict(scope.part())
    score = _dict(final.get("seo_analysis")).get("overall_score")
    return {
        "published": True,
        "blog_data": {
            "id": response.get("id"),
            "title": metadata.get("title"),
            "slug": metadata.get("slug"),
            "url": response.get("url"),
            "publish_date": metadata.get("publish_date"),
            "word_count": metadata.get("word_count"),
            "seo_score": score,
        },
        "details": {
            "document_id": response.get("id"),
            "url": response.get("url"),
            "preview_url": response.get("preview_url"),
            "status": "published",
        },
        "metrics": {
            "word_count": metadata.get("word_count"),
            "reading_time": metadata.get("estimated_reading_time"),
            "seo_score": score,
            "publish_ready": final.get("publish_ready"),
        },
    }


def default_stages() -> list[StageSpec]:
    """The blog pipeline in execution order. Returns a new list on every call."""
    return [
        StageSpec(
            name=ANALYZE_SITE,
            requires=(),
            gather=_gather_page,
            build_prompt=_analyze_site_prompt,
            output_shape=OutputShape.OBJECT,
            fallback=_analyze_site_default,
            finalize=_analyze_site_record,
        ),
        StageSpec(
            name=RESEARCH_POPULAR_PAGES,
            requires=(ANALYZE_SITE,),
            capability=Capability.RESEARCH,
            build_prompt=_popular_pages_query,
            output_shape=OutputShape.TEXT,
            finalize=_popular_pages_record,
        ),
        StageSpec(
            name=RESEARCH_CONTENT_STRATEGY,
            requires=(ANALYZE_SITE, RESEARCH_POPULAR_PAGES),
            capability=Capability.RESEARCH,
            build_prompt=_strategy_query,
            output_shape=OutputShape.TEXT,
            followups=(
                Call("gaps", _strategy_gaps_query, OutputShape.TEXT, capability=Capability.RESEARCH),
            ),
            finalize=_strategy_record,
        ),
        StageSpec(
            name=GENERATE_KEYWORDS,
            requires=(ANALYZE_SITE, RESEARCH_POPULAR_PAGES, RESEARCH_CONTENT_STRATEGY),
            build_prompt=_keywords_prompt,
            output_shape=OutputShape.ARRAY_OF_OBJECTS,
            limit=30,
            item=seo.keyword_item,
            followups=(
                Call("variations", _variations_prompt, OutputShape.ARRAY_OF_STRINGS, limit=15),
                Call("gap_keywords", _gap_keywords_prompt, OutputShape.ARRAY_OF_STRINGS, limit=15),
            ),
            finalize=_keywords_record,
        ),
        StageSpec(
            name=CLUSTER_KEYWORDS,
            requires=(GENERATE_KEYWORDS, ANALYZE_SITE),
            build_prompt=_cluster_prompt,
            output_shape=OutputShape.OBJECT,
            fallback=_cluster_default,
            finalize=_cluster_record,
        ),
        StageSpec(
            name=GAP_ANALYSIS,
            requires=(
                ANALYZE_SITE,
                RESEARCH_POPULAR_PAGES,
                RESEARCH_CONTENT_STRATEGY,
                GENERATE_KEYWORDS,
                CLUSTER_KEYWORDS,
            ),
            build_prompt=_gap_prompt,
            output_shape=OutputShape.OBJECT,
            fallback=_gap_default,
            followups=(
                Call("blog_suggestions", _suggestions_prompt, OutputShape.ARRAY_OF_STRINGS, limit=8),
            ),
            finalize=_gap_record,
        ),
        StageSpec(
            name=CREATE_OUTLINE,
            requires=(GAP_ANALYSIS, GENERATE_KEYWORDS, ANALYZE_SITE),
            build_prompt=_outline_prompt,
            output_shape=OutputShape.OBJECT,
            fallback=_outline_default,
            followups=(
                Call(
                    "alternative_titles",
                    _titles_prompt,
                    OutputShape.ARRAY_OF_STRINGS,
                    limit=3,
                    fallback=_titles_default,
                ),
            ),
            finalize=_outline_record,
        ),
        StageSpec(
            name=WRITE_CONTENT,
            requires=(CREATE_OUTLINE,),
            build_prompt=_write_prompt,
            output_shape=OutputShape.TEXT,
            followups=(Call("enhancements", _enhancements_prompt, OutputShape.TEXT),),
            finalize=_write_record,
        ),
        StageSpec(
            name=FINAL_EDIT,
            requires=(CREATE_OUTLINE, WRITE_CONTENT),
            build_prompt=_edit_prompt,
            output_shape=OutputShape.TEXT,
            fallback=_edit_default,
            followups=(Call("seo_analysis", _seo_prompt, OutputShape.OBJECT, fallback=_seo_default),),
            finalize=_final_record,
        ),
        StageSpec(
            name=PUBLISH,
            requires=(FINAL_EDIT,),
            capability=Capability.PUBLISH,
            build_prompt=_publish_document,
            output_shape=OutputShape.OBJECT,
            finalize=_publish_record,
        ),
    ]
