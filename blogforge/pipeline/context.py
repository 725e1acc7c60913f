"""Run input, per-stage results and the append-only context that carries them."""
import copy
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping

from blogforge.errors import DependencyError, ValidationError
from blogforge.pipeline.extractor import Extraction, ExtractionMode


@dataclass(frozen=True)
class PipelineInput:
    url: str
    selected_topic: str | None = None
    target_keywords: tuple[str, ...] | None = None

    @classmethod
    def from_payload(cls, payload: Mapping | None) -> "PipelineInput":
        """Validate a caller payload ({url, selected_topic?, target_keywords?}).

        camelCase keys (selectedTopic, targetKeywords) are accepted as well.
        """
        payload = payload or {}
        url = payload.get("url")
        if not isinstance(url, str) or not url.strip():
            raise ValidationError("Website URL is required")
        url = url.strip()
        if not url.startswith(("http://", "https://")):
            raise ValidationError(f"Website URL must start with http:// or https://: {url}")
        topic = payload.get("selected_topic", payload.get("selectedTopic"))
        if topic is not None and not isinstance(topic, str):
            raise ValidationError("selected_topic must be a string")
        keywords = payload.get("target_keywords", payload.get("targetKeywords"))
        if keywords is not None:
            if isinstance(keywords, str) or not all(isinstance(k, str) for k in keywords):
                raise ValidationError("target_keywords must be a list of strings")
            keywords = tuple(k.strip() for k in keywords if k.strip()) or None
        return cls(url=url, selected_topic=(topic or "").strip() or None, target_keywords=keywords)


@dataclass(frozen=True)
class StageResult:
    name: str
    raw_text: str
    structured: Any
    extraction_mode: ExtractionMode
    duration_ms: float
    calls: Mapping[str, Extraction] = field(default_factory=dict)

    @property
    def degraded(self) -> bool:
        return self.extraction_mode is ExtractionMode.FALLBACK

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "structured": self.structured,
            "extraction_mode": self.extraction_mode.value,
            "duration_ms": self.duration_ms,
            "calls": {key: e.mode.value for key, e in self.calls.items()},
        }


class PipelineContext:
    """Append-only mapping of stage name -> StageResult.

    Results are copied in and copied out, so a stage can read any earlier record
    but cannot change it. The selected topic is written at most once.
    """

    def __init__(self, pipeline_input: PipelineInput):
        self.input = pipeline_input
        self._results: dict[str, StageResult] = {}
        self._selected_topic: str | None = None

    def __contains__(self, name: object) -> bool:
        return name in self._results

    def __len__(self) -> int:
        return len(self._results)

    def names(self) -> list[str]:
        return list(self._results)

    @property
    def results(self) -> Mapping[str, StageResult]:
        return MappingProxyType(self._results)

    def add(self, result: StageResult) -> None:
        if result.name in self._results:
            raise DependencyError(result.name, [], f"Stage '{result.name}' already has a result")
        self._results[result.name] = StageResult(
            name=result.name,
            raw_text=result.raw_text,
            structured=copy.deepcopy(result.structured),
            extraction_mode=result.extraction_mode,
            duration_ms=result.duration_ms,
            calls=MappingProxyType(dict(result.calls)),
        )

    def result(self, name: str) -> StageResult:
        return self._results[name]

    def value(self, name: str, default: Any = None) -> Any:
        """Copy of a stage's structured record, or default when the stage has not run."""
        if name not in self._results:
            return default
        return copy.deepcopy(self._results[name].structured)

    def missing(self, names) -> list[str]:
        return [n for n in names if n not in self._results]

    @property
    def selected_topic(self) -> str | None:
        return self._selected_topic

    def set_selected_topic(self, topic: str) -> None:
        if self._selected_topic is not None:
            raise RuntimeError("selected topic is already set")
        self._selected_topic = topic

    def as_dict(self) -> dict:
        return {name: copy.deepcopy(r.structured) for name, r in self._results.items()}
