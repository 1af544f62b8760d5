"""Public types for the ACMM assessor: levels, statuses, results and fix plans.

These types back the JSON output of an assessment and the fix-apply
pipeline. ``to_dict`` renders any of them into a JSON-compatible dict
using the published field names.
"""

from __future__ import annotations

import base64
import dataclasses
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Any


class Level(IntEnum):
    """ACMM maturity level (1-5). Level 1 is the implicit floor."""

    ASSISTED = 1
    INSTRUCTED = 2
    MEASURED = 3
    ADAPTIVE = 4
    SELF_SUSTAINING = 5


_LEVEL_NAMES = {
    Level.ASSISTED: "Assisted",
    Level.INSTRUCTED: "Instructed",
    Level.MEASURED: "Measured",
    Level.ADAPTIVE: "Adaptive",
    Level.SELF_SUSTAINING: "Self-Sustaining",
}


def level_name(level: int) -> str:
    """Return the human-readable name of a level, or "Unknown"."""
    try:
        return _LEVEL_NAMES[Level(level)]
    except ValueError:
        return "Unknown"


class Status(str, Enum):
    """Qualitative result of running one signal against a repository."""

    FOUND = "found"
    PARTIAL = "partial"
    MISSING = "missing"
    NA = "na"

    def __str__(self) -> str:
        return self.value


# Scores of the four-step partial-credit rubric.
SCORE_MISSING = 0.0
SCORE_STUBBED = 0.33
SCORE_INCOMPLETE = 0.67
SCORE_FOUND = 1.0


def status_from_score(score: float) -> Status:
    """Map a rubric score onto a Status; off-rubric scores count as partial."""
    if score == SCORE_MISSING:
        return Status.MISSING
    if score == SCORE_FOUND:
        return Status.FOUND
    return Status.PARTIAL


class Confidence(str, Enum):
    """How trustworthy a verdict is, independent of its score."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    def __str__(self) -> str:
        return self.value

    def at_least(self, minimum: "Confidence") -> bool:
        """Report whether this confidence is at or above ``minimum``."""
        return _CONFIDENCE_RANK[self] >= _CONFIDENCE_RANK[Confidence(minimum)]


_CONFIDENCE_RANK = {Confidence.LOW: 0, Confidence.MEDIUM: 1, Confidence.HIGH: 2}


class Method(str, Enum):
    """How a signal arrived at its result."""

    FILENAME_MATCH = "filename"
    CONTENT_REGEX = "content-regex"
    AST = "ast"
    CROSS_FILE = "cross-file"

    def __str__(self) -> str:
        return self.value


def _omitempty() -> dict[str, bool]:
    return {"omitempty": True}


@dataclass
class LineSpan:
    """A line range within a file."""

    start: int
    end: int


@dataclass
class Evidence:
    """A citation produced by a signal: path, optional span and excerpt."""

    path: str
    span: LineSpan | None = field(default=None, metadata=_omitempty())
    excerpt: str = field(default="", metadata=_omitempty())


@dataclass
class DiagEntry:
    """One line of detection diagnostics."""

    path: str
    action: str
    hit: bool = False
    detail: str = field(default="", metadata=_omitempty())


@dataclass
class Result:
    """What a signal returns after running against a repository."""

    status: Status = Status.MISSING
    score: float = SCORE_MISSING
    confidence: Confidence = Confidence.LOW
    method: Method = Method.FILENAME_MATCH
    evidence: list[Evidence] = field(default_factory=list, metadata=_omitempty())
    notes: list[str] = field(default_factory=list, metadata=_omitempty())
    fix_hint: str = field(default="", metadata=_omitempty())
    diag: list[DiagEntry] = field(default_factory=list, metadata=_omitempty())


@dataclass
class SignalResult:
    """One signal's entry within a verdict."""

    id: str
    level: Level = Level.ASSISTED
    family: str = ""
    title: str = field(default="", metadata=_omitempty())
    status: Status = Status.MISSING
    score: float = SCORE_MISSING
    confidence: Confidence = Confidence.LOW
    method: Method = Method.FILENAME_MATCH
    evidence: list[Evidence] = field(default_factory=list, metadata=_omitempty())
    notes: list[str] = field(default_factory=list, metadata=_omitempty())
    fix_hint: str = field(default="", metadata=_omitempty())
    diag: list[DiagEntry] = field(default_factory=list, metadata=_omitempty())


@dataclass
class Verdict:
    """Top-level result of an assessment run."""

    level: Level = Level.ASSISTED
    name: str = ""
    level_scores: dict[Level, float] = field(default_factory=dict)
    next_gap: list[str] = field(default_factory=list)
    min_confidence_applied: Confidence = Confidence.LOW


@dataclass
class Report:
    """The top-level document emitted by an assessment."""

    schema: str = ""
    tool_version: str = ""
    signal_set_version: str = ""
    ci_system: str = ""
    repo: str = ""
    scanned_at: str = ""
    verdict: Verdict = field(default_factory=Verdict)
    signals: list[SignalResult] = field(default_factory=list)


class FixOpKind(str, Enum):
    """Operations a fix plan may request."""

    CREATE_FILE = "create-file"
    APPEND_FILE = "append-file"

    def __str__(self) -> str:
        return self.value


@dataclass
class FixOp:
    """One operation in a fix plan; ``path`` is relative to the repo root."""

    kind: FixOpKind
    path: str
    body: bytes = b""


class FixInputKind(str, Enum):
    """Widget hint for a user-supplied fix value."""

    TEXT = "text"
    MULTILINE = "multiline"

    def __str__(self) -> str:
        return self.value


@dataclass
class FixInput:
    """One user-supplied value a fix needs."""

    key: str
    label: str
    help: str = field(default="", metadata=_omitempty())
    kind: FixInputKind = FixInputKind.TEXT
    default: str = field(default="", metadata=_omitempty())
    required: bool = False


@dataclass
class FixPlan:
    """The set of operations a fixer proposes for one signal."""

    signal_id: str = ""
    summary: str = ""
    ops: list[FixOp] = field(default_factory=list)


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, Enum):
        return value.value in ("", 0)
    if isinstance(value, (str, bytes, list, tuple, dict)):
        return len(value) == 0
    if isinstance(value, bool):
        return not value
    if isinstance(value, (int, float)):
        return value == 0
    return False


def _dict_key(key: Any) -> str:
    if isinstance(key, Enum):
        key = key.value
    return str(key)


def to_dict(obj: Any) -> Any:
    """Render a value of these types into JSON-compatible data.

    Fields marked as optional are left out when empty; enums become their
    values, bytes become base64 text and mapping keys become strings.
    """
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        out: dict[str, Any] = {}
        for f in dataclasses.fields(obj):
            value = getattr(obj, f.name)
            if f.metadata.get("omitempty") and _is_empty(value):
                continue
            out[f.name] = to_dict(value)
        return out
    if isinstance(obj, IntEnum):
        return int(obj)
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, (bytes, bytearray)):
        return base64.b64encode(bytes(obj)).decode("ascii")
    if isinstance(obj, dict):
        return {_dict_key(k): to_dict(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [to_dict(item) for item in obj]
    return obj