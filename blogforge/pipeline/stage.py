"""Static description of pipeline stages and the view their builders receive."""
import enum
from dataclasses import dataclass, field
from typing import Any, Callable

from blogforge.errors import DependencyError
from blogforge.pipeline.context import PipelineContext
from blogforge.pipeline.extractor import DEFAULT_LIMIT, Extraction, OutputShape

PRIMARY = "primary"


class Capability(str, enum.Enum):
    GENERATE = "generate"
    RESEARCH = "research"
    PUBLISH = "publish"


@dataclass
class StageScope:
    """What a stage's builders may read: the context, side inputs, earlier calls of this stage."""

    context: PipelineContext
    gathered: dict = field(default_factory=dict)
    calls: dict[str, Extraction] = field(default_factory=dict)

    @property
    def input(self):
        return self.context.input

    def value(self, stage: str, default: Any = None) -> Any:
        return self.context.value(stage, default)

    def part(self, key: str = PRIMARY, default: Any = None) -> Any:
        extraction = self.calls.get(key)
        return default if extraction is None else extraction.value


@dataclass(frozen=True)
class Call:
    """One capability invocation inside a stage."""

    key: str
    build: Callable[[StageScope], Any]
    shape: OutputShape
    capability: Capability = Capability.GENERATE
    limit: int | None = DEFAULT_LIMIT
    item: Callable[[str], dict] | None = None
    fallback: Callable[[StageScope, str], Any] | None = None


@dataclass(frozen=True)
class StageSpec:
    name: str
    requires: tuple[str, ...]
    build_prompt: Callable[[StageScope], Any]
    output_shape: OutputShape
    required: bool = True
    capability: Capability = Capability.GENERATE
    limit: int | None = DEFAULT_LIMIT
    item: Callable[[str], dict] | None = None
    fallback: Callable[[StageScope, str], Any] | None = None
    followups: tuple[Call, ...] = ()
    gather: Callable[[StageScope, Any], dict] | None = None
    finalize: Callable[[StageScope], Any] | None = None

    @property
    def primary(self) -> Call:
        return Call(
            key=PRIMARY,
            build=self.build_prompt,
            shape=self.output_shape,
            capability=self.capability,
            limit=self.limit,
            item=self.item,
            fallback=self.fallback,
        )

    @property
    def calls(self) -> tuple[Call, ...]:
        return (self.primary,) + tuple(self.followups)


def validate_order(stages) -> None:
    """Raise DependencyError if names repeat or a stage requires a later/unknown stage."""
    seen = set()
    for stage in stages:
        if stage.name in seen:
            raise DependencyError(stage.name, [], f"Duplicate stage name '{stage.name}'")
        missing = [r for r in stage.requires if r not in seen]
        if missing:
            raise DependencyError(stage.name, missing)
        seen.add(stage.name)
