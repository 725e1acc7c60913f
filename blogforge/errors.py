"""Error taxonomy for the blog pipeline.

ValidationError and DependencyError are raised before any capability call is
made. CapabilityError subclasses wrap failures of the external collaborators
(generation, fetch, publish) and abort a run. Extraction never raises: a
degraded extraction is reported as ExtractionMode.FALLBACK on the stage result.
"""


class PipelineError(Exception):
    """Base class for every error raised by blogforge."""


class ValidationError(PipelineError, ValueError):
    """Required caller input is missing or malformed."""


class DependencyError(PipelineError):
    """A stage declares an input that no earlier stage produced."""

    def __init__(self, stage: str, missing: list[str], message: str | None = None):
        self.stage = stage
        self.missing = list(missing)
        super().__init__(message or f"Stage '{stage}' is missing dependencies: {', '.join(self.missing)}")


class CapabilityError(PipelineError):
    """An external capability call failed (timeout, transport, non-success)."""

    capability = "capability"

    def __init__(self, message: str, cause: BaseException | None = None):
        self.cause = cause
        super().__init__(message)


class GenerationError(CapabilityError):
    capability = "generation"


class FetchError(CapabilityError):
    capability = "fetch"


class PublishError(CapabilityError):
    capability = "publish"


class RunCancelled(PipelineError):
    """The caller cancelled the run while a stage was in flight."""
