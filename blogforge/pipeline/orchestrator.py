"""Orchestrates the blog pipeline: stages run one at a time, in order, halting on first failure.

Each capability call runs on its own worker thread so the orchestrator can enforce
a deadline and observe a caller's cancellation event; an abandoned call's result is
discarded. Retrying is governed by RetryPolicy and is off by default.
"""
import json
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FuturesTimeout
from dataclasses import dataclass, field
from typing import Any, Callable

from tenacity import Retrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from blogforge import config
from blogforge.errors import (
    CapabilityError,
    DependencyError,
    FetchError,
    GenerationError,
    PipelineError,
    PublishError,
    RunCancelled,
)
from blogforge.logs import get_blogforge_logger
from blogforge.pipeline.context import PipelineContext, PipelineInput, StageResult
from blogforge.pipeline.extractor import ExtractionMode, extract
from blogforge.pipeline.report import RunReport, summarize
from blogforge.pipeline.stage import Call, Capability, StageScope, StageSpec
from blogforge.pipeline.stages import default_stages
from blogforge.pipeline.topic import TOPIC_DECISION_STAGE, select_topic
from blogforge.services import Services

logger = get_blogforge_logger(__name__)

POLL_SECONDS = 0.05

_ERRORS = {
    Capability.GENERATE: GenerationError,
    Capability.RESEARCH: GenerationError,
    Capability.PUBLISH: PublishError,
}


@dataclass(frozen=True)
class RetryPolicy:
    max_attempts: int = 1
    backoff_seconds: float = 2.0
    max_backoff_seconds: float = 30.0

    @classmethod
    def from_env(cls) -> "RetryPolicy":
        return cls(max_attempts=config.max_attempts(), backoff_seconds=config.backoff_seconds())

    def retrying(self) -> Retrying:
        return Retrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential(multiplier=self.backoff_seconds, max=self.max_backoff_seconds),
            retry=retry_if_exception_type(CapabilityError),
            before_sleep=_log_retry,
            reraise=True,
        )


def _log_retry(retry_state) -> None:
    logger.warning(
        "[Pipeline] Capability call failed, retrying",
        attempt=retry_state.attempt_number,
        error=str(retry_state.outcome.exception()),
    )


@dataclass
class PipelineRun:
    report: RunReport
    context: PipelineContext
    results: dict = field(init=False)

    def __post_init__(self):
        self.results = self.context.as_dict()

    @property
    def succeeded(self) -> bool:
        return self.report.succeeded

    def summary(self) -> dict:
        return summarize(self.report, self.context)


class PipelineOrchestrator:
    def __init__(
        self,
        services: Services | None = None,
        timeout_seconds: float | None = None,
        retry: RetryPolicy | None = None,
        topic_after: str = TOPIC_DECISION_STAGE,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.services = services or Services.default()
        self.timeout_seconds = timeout_seconds if timeout_seconds is not None else config.stage_timeout_seconds()
        self.retry = retry or RetryPolicy.from_env()
        self.topic_after = topic_after
        self._clock = clock

    def run(
        self,
        pipeline_input: PipelineInput,
        stages: list[StageSpec] | None = None,
        cancel: threading.Event | None = None,
    ) -> PipelineRun:
        """Run stages in order against a fresh context. Never raises for stage failures.

        Returns the finalized report and the context holding every completed stage.
        """
        stages = list(stages) if stages is not None else default_stages()
        context = PipelineContext(pipeline_input)
        report = RunReport(total_stages=len(stages))
        started = self._clock()
        logger.info(
            "[Pipeline] Run started",
            url=pipeline_input.url,
            stages=len(stages),
            selected_topic=pipeline_input.selected_topic or "auto-detect",
        )

        for index, stage in enumerate(stages):
            logger.info("[Pipeline] Stage started", stage=stage.name, step=f"{index + 1}/{len(stages)}")
            topic = None
            try:
                result = self._run_stage(stage, context, cancel)
                context.add(result)
                if stage.name == self.topic_after:
                    topic = select_topic(context)
                    context.set_selected_topic(topic)
            except Exception as error:
                report.finalize_failure(index, stage.name, error, self._elapsed_ms(started))
                log = logger.error if isinstance(error, PipelineError) else logger.exception
                log(
                    "[Pipeline] Run failed",
                    stage=stage.name,
                    index=index,
                    error=str(error),
                    error_type=type(error).__name__,
                    elapsed_ms=report.total_duration_ms,
                )
                return PipelineRun(report, context)

            report.record_stage(stage.name, result.duration_ms)
            logger.info(
                "[Pipeline] Stage completed",
                stage=stage.name,
                duration_ms=round(result.duration_ms, 1),
                extraction_mode=result.extraction_mode.value,
            )
            if topic is not None:
                report.selected_topic = topic
                logger.info("[Pipeline] Topic selected", topic=topic)

        report.finalize_success(self._elapsed_ms(started))
        logger.info(
            "[Pipeline] Run completed",
            steps=len(report.steps_completed),
            total_duration_ms=round(report.total_duration_ms, 1),
        )
        return PipelineRun(report, context)

    def _run_stage(self, stage: StageSpec, context: PipelineContext, cancel) -> StageResult:
        if stage.name in context:
            raise DependencyError(stage.name, [], f"Stage '{stage.name}' already ran in this pipeline")
        missing = context.missing(stage.requires)
        if missing:
            raise DependencyError(stage.name, missing)
        self._check_cancel(cancel)

        started = self._clock()
        scope = StageScope(context)
        if stage.gather is not None:
            scope.gathered = self._guarded(stage.gather, (scope, self.services), FetchError, cancel)
        for call in stage.calls:
            request = call.build(scope)
            response = self._guarded(self._capability(call.capability), (request,), _ERRORS[call.capability], cancel)
            scope.calls[call.key] = self._extract(call, scope, response)

        structured = stage.finalize(scope) if stage.finalize is not None else scope.part()
        degraded = any(e.degraded for e in scope.calls.values())
        primary = scope.calls[stage.primary.key]
        return StageResult(
            name=stage.name,
            raw_text=primary.raw_text,
            structured=structured,
            extraction_mode=ExtractionMode.FALLBACK if degraded else ExtractionMode.STRICT,
            duration_ms=self._elapsed_ms(started),
            calls=dict(scope.calls),
        )

    def _capability(self, capability: Capability) -> Callable[[Any], Any]:
        return {
            Capability.GENERATE: self.services.generate,
            Capability.RESEARCH: self.services.research,
            Capability.PUBLISH: self.services.publish,
        }[capability]

    @staticmethod
    def _extract(call: Call, scope: StageScope, response: Any):
        default = (lambda raw: call.fallback(scope, raw)) if call.fallback is not None else None
        if isinstance(response, (dict, list)):
            # structured capability responses (publish) are re-encoded so raw_text stays a string
            return extract(json.dumps(response), call.shape, limit=call.limit, item=call.item, default=default)
        return extract(response, call.shape, limit=call.limit, item=call.item, default=default)

    def _guarded(self, fn: Callable, args: tuple, error_cls: type[CapabilityError], cancel) -> Any:
        """Call fn(*args) under the deadline, cancellation and retry policy."""

        def attempt():
            executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="blogforge-call")
            try:
                return self._await(executor.submit(fn, *args), error_cls, cancel)
            finally:
                executor.shutdown(wait=False, cancel_futures=True)

        return self.retry.retrying()(attempt)

    def _await(self, future, error_cls: type[CapabilityError], cancel) -> Any:
        deadline = self._clock() + self.timeout_seconds
        while True:
            self._check_cancel(cancel)
            remaining = deadline - self._clock()
            if remaining <= 0:
                raise error_cls(f"timed out after {self.timeout_seconds:g}s")
            try:
                return future.result(timeout=min(remaining, POLL_SECONDS))
            except FuturesTimeout:
                if not future.done():
                    continue
                error = future.exception()
            except PipelineError:
                raise
            except Exception as exc:
                error = exc
            raise error_cls(str(error) or type(error).__name__, cause=error) from error

    @staticmethod
    def _check_cancel(cancel) -> None:
        if cancel is not None and cancel.is_set():
            raise RunCancelled("run cancelled by caller")

    def _elapsed_ms(self, started: float) -> float:
        return (self._clock() - started) * 1000.0


def run(
    url: str,
    selected_topic: str | None = None,
    target_keywords: list[str] | None = None,
    stages: list[StageSpec] | None = None,
    services: Services | None = None,
    cancel: threading.Event | None = None,
) -> PipelineRun:
    """Run the full pipeline for url.

    selected_topic: topic to write about; when None it is chosen after gap analysis.
    target_keywords: keywords the outline must target; when None they come from keyword generation.
    Returns: PipelineRun with the finalized RunReport and every completed stage's record.
    """
    pipeline_input = PipelineInput.from_payload(
        {"url": url, "selected_topic": selected_topic, "target_keywords": target_keywords}
    )
    return PipelineOrchestrator(services=services).run(pipeline_input, stages=stages, cancel=cancel)
