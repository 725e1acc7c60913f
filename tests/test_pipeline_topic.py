"""Tests for blogforge.pipeline.topic select_topic()."""
import os
import sys

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))


def _context(selected_topic=None, gap_record=None):
    from blogforge.pipeline.context import PipelineContext, PipelineInput, StageResult
    from blogforge.pipeline.extractor import ExtractionMode

    context = PipelineContext(PipelineInput(url="https://example.com", selected_topic=selected_topic))
    if gap_record is not None:
        context.add(StageResult(name="gap-analysis", raw_text="", structured=gap_record,
                                extraction_mode=ExtractionMode.STRICT, duration_ms=0.0))
    return context


@pytest.mark.parametrize(
    "selected, record, expected",
    [
        ("Caller Topic", {"blog_suggestions": ["Topic B"]}, "Caller Topic"),
        (None, {"blog_suggestions": ["Topic B"], "gap_analysis": {"content_gaps": [{"topic": "Topic A"}]}},
         "Topic B"),
        (None, {"blog_suggestions": [], "gap_analysis": {"content_gaps": [{"topic": "Topic A"}]}}, "Topic A"),
        (None, {"blog_suggestions": ["  "], "gap_analysis": {"content_gaps": [{"topic": " Topic A "}]}}, "Topic A"),
        (None, {"blog_suggestions": [], "gap_analysis": {"content_gaps": []}}, "Industry Guide"),
        (None, None, "Industry Guide"),
        (None, "plain prose from the model", "Industry Guide"),
        (None, {"blog_suggestions": "Topic B", "gap_analysis": ["Topic A"]}, "Industry Guide"),
    ],
)
def test_select_topic_precedence(selected, record, expected):
    from blogforge.pipeline.topic import select_topic

    assert select_topic(_context(selected, record)) == expected
