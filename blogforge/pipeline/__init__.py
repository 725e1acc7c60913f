"""Staged blog pipeline: resilient extractor, stage catalogue, context, report and orchestrator."""
from .context import PipelineContext, PipelineInput, StageResult
from .extractor import ExtractionMode, OutputShape, extract
from .orchestrator import PipelineOrchestrator, PipelineRun, RetryPolicy, run
from .report import RunReport, format_summary, summarize
from .stage import Call, Capability, StageSpec, validate_order
from .stages import STAGE_NAMES, default_stages
from .topic import DEFAULT_TOPIC, select_topic

__all__ = [
    "extract",
    "run",
    "summarize",
    "format_summary",
    "select_topic",
    "default_stages",
    "validate_order",
    "OutputShape",
    "ExtractionMode",
    "StageSpec",
    "Call",
    "Capability",
    "PipelineContext",
    "PipelineInput",
    "StageResult",
    "RunReport",
    "PipelineOrchestrator",
    "PipelineRun",
    "RetryPolicy",
    "STAGE_NAMES",
    "DEFAULT_TOPIC",
]
