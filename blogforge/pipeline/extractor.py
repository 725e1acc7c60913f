"""Turn free-form LLM replies into structured values.

extract() first tries a strict JSON decode of the cleaned reply. When that fails
it falls back to line heuristics (numbered lines, bullets, quoted phrases) and,
failing those, to a default value for the requested shape. It never raises: the
mode on the returned Extraction says which path produced the value.
"""
import enum
import json
import re
from dataclasses import dataclass
from typing import Any, Callable

from blogforge.logs import get_blogforge_logger

logger = get_blogforge_logger(__name__)

DEFAULT_LIMIT = 30
MIN_CANDIDATE_LENGTH = 3
MAX_CANDIDATE_LENGTH = 100

_FENCE = re.compile(r"```(?:json|JSON)?[ \t]*")
_NUMBERED = re.compile(r"^\s*\d+[.)]\s*")
_BULLET = re.compile(r"^\s*[-*•]\s*")
_QUOTED = re.compile(r"\"([^\"]+)\"|“([^”]+)”|(?<!\w)'([^']+)'(?!\w)")
_EMPHASIS = re.compile(r"\*\*|__")
_EDGE_PUNCTUATION = " \t,;:"


class OutputShape(str, enum.Enum):
    OBJECT = "object"
    ARRAY_OF_OBJECTS = "arrayOfObjects"
    ARRAY_OF_STRINGS = "arrayOfStrings"
    TEXT = "text"


class ExtractionMode(str, enum.Enum):
    STRICT = "strict"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class Extraction:
    value: Any
    mode: ExtractionMode
    raw_text: str

    @property
    def degraded(self) -> bool:
        return self.mode is ExtractionMode.FALLBACK


@dataclass(frozen=True)
class _Attempt:
    ok: bool
    value: Any = None
    reason: str = ""


def clean_json_text(text: str) -> str:
    """Drop code fences and anything outside the outermost JSON brackets."""
    cleaned = _FENCE.sub("", text)
    starts = [i for i in (cleaned.find("{"), cleaned.find("[")) if i != -1]
    if starts:
        cleaned = cleaned[min(starts):]
    end = max(cleaned.rfind("}"), cleaned.rfind("]"))
    if end != -1:
        cleaned = cleaned[: end + 1]
    return cleaned.strip()


def _strict(text: str, shape: OutputShape) -> _Attempt:
    if shape is OutputShape.TEXT:
        stripped = text.strip()
        return _Attempt(True, stripped) if stripped else _Attempt(False, reason="empty reply")
    try:
        value = json.loads(clean_json_text(text))
    except (json.JSONDecodeError, TypeError) as error:
        return _Attempt(False, reason=str(error))
    if shape is OutputShape.OBJECT:
        if isinstance(value, dict):
            return _Attempt(True, value)
        return _Attempt(False, reason=f"expected object, got {type(value).__name__}")
    if not isinstance(value, list):
        return _Attempt(False, reason=f"expected array, got {type(value).__name__}")
    kind = dict if shape is OutputShape.ARRAY_OF_OBJECTS else str
    if all(isinstance(v, kind) for v in value):
        return _Attempt(True, value)
    return _Attempt(False, reason=f"array items are not all {kind.__name__}")


def _tidy(fragment: str) -> str:
    fragment = _EMPHASIS.sub("", fragment).strip(_EDGE_PUNCTUATION)
    if len(fragment) >= 2 and fragment[0] == fragment[-1] and fragment[0] in "\"'":
        fragment = fragment[1:-1]
    return fragment.strip(_EDGE_PUNCTUATION)


def line_candidates(line: str) -> list[str]:
    """Candidate phrases on one line: quoted segments, else the text after a list marker."""
    quoted = [a or b or c for a, b, c in _QUOTED.findall(line)]
    if quoted:
        return [_tidy(q) for q in quoted]
    marker = _NUMBERED.match(line) or _BULLET.match(line)
    if marker:
        return [_tidy(line[marker.end():])]
    return []


def list_candidates(
    text: str,
    limit: int | None = DEFAULT_LIMIT,
    min_length: int = MIN_CANDIDATE_LENGTH,
    max_length: int = MAX_CANDIDATE_LENGTH,
) -> list[str]:
    """Deduplicated candidate phrases in encounter order, capped at limit."""
    seen = []
    for line in text.splitlines():
        for candidate in line_candidates(line):
            if not min_length <= len(candidate) <= max_length:
                continue
            if candidate not in seen:
                seen.append(candidate)
            if limit is not None and len(seen) >= limit:
                return seen
    return seen


def _minimal(shape: OutputShape, raw_text: str) -> Any:
    if shape is OutputShape.OBJECT:
        return {"summary": raw_text}
    if shape is OutputShape.TEXT:
        return ""
    return []


def extract(
    raw_text: str,
    shape: OutputShape,
    limit: int | None = DEFAULT_LIMIT,
    item: Callable[[str], dict] | None = None,
    default: Callable[[str], Any] | None = None,
) -> Extraction:
    """Best-effort structured value for raw_text. Never raises.

    raw_text: the generator's reply, kept unmodified on the result.
    shape: expected kind of value.
    limit: cap on fallback list length (strict values are returned as decoded).
    item: turns a fallback candidate into an object for ARRAY_OF_OBJECTS.
    default: value factory used when no candidates are recovered, or for
        OBJECT/TEXT fallbacks; receives raw_text.
    """
    text = raw_text if isinstance(raw_text, str) else ("" if raw_text is None else str(raw_text))
    attempt = _strict(text, shape)
    if attempt.ok:
        return Extraction(attempt.value, ExtractionMode.STRICT, text)

    value = None
    if shape in (OutputShape.ARRAY_OF_STRINGS, OutputShape.ARRAY_OF_OBJECTS):
        candidates = list_candidates(text, limit)
        if candidates:
            if shape is OutputShape.ARRAY_OF_OBJECTS:
                make = item or (lambda c: {"text": c})
                value = [make(c) for c in candidates]
            else:
                value = candidates
    if value is None and default is not None:
        try:
            value = default(text)
        except Exception as error:
            logger.error("[Extractor] Default value factory failed", shape=shape.value, error=str(error))
    if value is None:
        value = _minimal(shape, text)

    logger.warning(
        "[Extractor] Strict decode failed, using fallback",
        shape=shape.value,
        reason=attempt.reason,
        recovered=len(value) if isinstance(value, (list, dict)) else bool(value),
    )
    return Extraction(value, ExtractionMode.FALLBACK, text)
