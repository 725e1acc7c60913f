"""Run report and the human-readable summary of a finished run."""
from dataclasses import dataclass, field
from datetime import datetime, timezone

from blogforge.pipeline.context import PipelineContext


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class RunReport:
    """Terminal record of one run. Finalized exactly once, as success or failure."""

    total_stages: int
    start_time: datetime = field(default_factory=_now)
    end_time: datetime | None = None
    total_duration_ms: float | None = None
    steps_completed: list[str] = field(default_factory=list)
    stage_durations_ms: dict[str, float] = field(default_factory=dict)
    selected_topic: str | None = None
    failed_stage: str | None = None
    failed_at_index: int | None = None
    error_message: str | None = None
    error_type: str | None = None

    @property
    def finalized(self) -> bool:
        return self.end_time is not None

    @property
    def succeeded(self) -> bool:
        return self.finalized and self.failed_stage is None

    def record_stage(self, name: str, duration_ms: float) -> None:
        self._check_open()
        self.steps_completed.append(name)
        self.stage_durations_ms[name] = duration_ms

    def finalize_success(self, total_duration_ms: float) -> None:
        self._close(total_duration_ms)

    def finalize_failure(self, index: int, stage: str, error: BaseException, total_duration_ms: float) -> None:
        self._check_open()
        self.failed_stage = stage
        self.failed_at_index = index
        self.error_message = f"Stage {index + 1} ({stage}) failed: {error}"
        self.error_type = type(error).__name__
        self._close(total_duration_ms)

    def _check_open(self) -> None:
        if self.finalized:
            raise RuntimeError("run report is already finalized")

    def _close(self, total_duration_ms: float) -> None:
        self._check_open()
        self.end_time = _now()
        self.total_duration_ms = total_duration_ms

    def to_dict(self) -> dict:
        data = {
            "success": self.succeeded,
            "total_steps": self.total_stages,
            "steps_completed": list(self.steps_completed),
            "stage_durations_ms": dict(self.stage_durations_ms),
            "selected_topic": self.selected_topic,
            "start_time": self.start_time.isoformat(),
            "end_time": self.end_time.isoformat() if self.end_time else None,
            "total_duration_ms": self.total_duration_ms,
            "total_duration_minutes": minutes(self.total_duration_ms),
        }
        if self.failed_stage is not None:
            data.update(
                failed_stage=self.failed_stage,
                failed_at_index=self.failed_at_index,
                error_message=self.error_message,
                error_type=self.error_type,
            )
        return data


def minutes(duration_ms: float | None) -> float | None:
    if duration_ms is None:
        return None
    return round(duration_ms / 60000, 2)


def summarize(report: RunReport, context: PipelineContext) -> dict:
    """Summary of a run: input, the post created, pipeline timing and analytics.

    Works on partial runs too; values from stages that did not run are None/0.
    """
    keywords = context.value("generate-keywords", {})
    clusters = context.value("cluster-keywords", {})
    gaps = context.value("gap-analysis", {})
    outline = context.value("create-outline", {})
    final = context.value("final-edit", {})
    published = context.value("publish", {})
    metadata = final.get("metadata") or {}
    details = published.get("details") or {}
    pipeline_input = context.input

    return {
        "success": report.succeeded,
        "input": {
            "url": pipeline_input.url,
            "selected_topic": pipeline_input.selected_topic,
            "target_keywords": list(pipeline_input.target_keywords or []),
        },
        "blog_created": {
            "title": metadata.get("title"),
            "slug": metadata.get("slug"),
            "word_count": metadata.get("word_count"),
            "seo_score": (final.get("seo_analysis") or {}).get("overall_score"),
            "document_id": details.get("document_id"),
            "sanity_url": details.get("url"),
            "preview_url": details.get("preview_url"),
        },
        "pipeline": report.to_dict(),
        "analytics": {
            "keywords_generated": keywords.get("total_keywords", 0),
            "clusters_created": len(clusters.get("clusters") or []),
            "gaps_identified": len((gaps.get("gap_analysis") or {}).get("content_gaps") or []),
            "sections_written": len((outline.get("outline") or {}).get("sections") or []),
            "final_word_count": metadata.get("word_count", 0),
            "degraded_stages": [name for name, r in context.results.items() if r.degraded],
        },
    }


def format_summary(summary: dict) -> str:
    """Console banner for a summary produced by summarize()."""
    pipeline = summary["pipeline"]
    if not summary["success"]:
        return "\n".join([
            "PIPELINE EXECUTION FAILED",
            f"Failed stage: {pipeline.get('failed_stage')} (index {pipeline.get('failed_at_index')})",
            f"Error: {pipeline.get('error_message')}",
            f"Failed after: {pipeline.get('total_duration_minutes')} minutes",
            f"Completed: {', '.join(pipeline['steps_completed']) or 'none'}",
        ])
    blog = summary["blog_created"]
    lines = [
        "BLOG CREATION PIPELINE COMPLETED",
        f"Blog Title: {blog['title']}",
        f"Word Count: {blog['word_count']} words",
        f"SEO Score: {blog['seo_score']}/100",
        f"Total Time: {pipeline['total_duration_minutes']} minutes",
        f"Sanity URL: {blog['sanity_url']}",
        f"Document ID: {blog['document_id']}",
    ]
    degraded = summary["analytics"]["degraded_stages"]
    if degraded:
        lines.append(f"Fallback extraction used in: {', '.join(degraded)}")
    return "\n".join(lines)
