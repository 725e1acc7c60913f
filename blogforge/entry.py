"""Caller-facing entry point: validate a payload, run the pipeline, shape the response."""
from datetime import datetime, timezone

from blogforge.errors import ValidationError
from blogforge.logs import get_blogforge_logger
from blogforge.pipeline.context import PipelineInput
from blogforge.pipeline.orchestrator import PipelineOrchestrator
from blogforge.pipeline.report import minutes

logger = get_blogforge_logger(__name__)

USAGE = {
    "required": {"url": "Website URL to analyze (http:// or https://)"},
    "optional": {
        "selected_topic": "Topic to write about; chosen after gap analysis when omitted",
        "target_keywords": "List of keywords the post must target",
    },
    "example": {"url": "https://example.com", "selected_topic": "Beginner's Guide", "target_keywords": ["guide"]},
}


def create_blog(payload: dict | None, services=None, stages=None, cancel=None) -> tuple[int, dict]:
    """Run the whole pipeline for payload and return (status, body).

    400 when the payload is invalid (no stage runs), 500 when a stage fails,
    200 with the summary, report and every stage record on success.
    """
    try:
        pipeline_input = PipelineInput.from_payload(payload)
    except ValidationError as error:
        logger.warning("[Entry] Rejected request", error=str(error))
        return 400, {"error": str(error), "usage": USAGE}

    run = PipelineOrchestrator(services=services).run(pipeline_input, stages=stages, cancel=cancel)
    report = run.report
    if not run.succeeded:
        return 500, {
            "success": False,
            "error": "Blog creation pipeline failed",
            "failed_stage": report.failed_stage,
            "failed_at_index": report.failed_at_index,
            "details": report.error_message,
            "error_type": report.error_type,
            "steps_completed": list(report.steps_completed),
            "processing_time_ms": report.total_duration_ms,
            "processing_time_minutes": minutes(report.total_duration_ms),
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    summary = run.summary()
    return 200, {
        "success": True,
        "summary": summary,
        "report": report.to_dict(),
        "full_results": run.results,
        "message": f"Blog post \"{summary['blog_created']['title']}\" created and published",
    }
