"""Pick the post topic once gap analysis has run. Pure: reads the context only."""
from blogforge.pipeline.context import PipelineContext

TOPIC_DECISION_STAGE = "gap-analysis"
DEFAULT_TOPIC = "Industry Guide"


def select_topic(context: PipelineContext, default: str = DEFAULT_TOPIC) -> str:
    """Caller's topic, else first blog suggestion, else first content gap topic, else default."""
    if context.input.selected_topic:
        return context.input.selected_topic
    gap = context.value(TOPIC_DECISION_STAGE, {})
    if not isinstance(gap, dict):
        return default
    suggestions = gap.get("blog_suggestions")
    if isinstance(suggestions, list) and suggestions and isinstance(suggestions[0], str) and suggestions[0].strip():
        return suggestions[0].strip()
    analysis = gap.get("gap_analysis")
    content_gaps = analysis.get("content_gaps") if isinstance(analysis, dict) else None
    if not isinstance(content_gaps, list):
        content_gaps = []
    if content_gaps and isinstance(content_gaps[0], dict):
        topic = content_gaps[0].get("topic")
        if isinstance(topic, str) and topic.strip():
            return topic.strip()
    return default
