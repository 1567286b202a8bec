"""
Conversation Models - Messages, context entries and turn results

WHAT: Data records shared by the history store, window builder and turn engine
WHERE: colloquy/runtime/conversation/models.py - data layer
WHO: Conversations, actors and callers inspecting turn output
TIME: Construction/validation <1ms

Messages are plain slotted dataclasses compared by identity: the history
store locates them with ``is`` so two messages with equal text remain
distinct members. Context entries are frozen pydantic models; replacing an
entry means building a new one.

Cost Notes:
- ``tokens`` and ``embeddings`` carry exact lengths when the caller has them
- Without them, the length estimator falls back to a word heuristic
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

if TYPE_CHECKING:
    from .actor import Actor


@dataclass(slots=True)
class Feedback:
    """Up/down counters attached to a message. Counters only ever grow."""

    up: int = 0
    down: int = 0

    def as_tuple(self) -> tuple[int, int]:
        return (self.up, self.down)


@dataclass(frozen=True, slots=True, eq=False)
class Message:
    """A single utterance in the conversation history."""

    actor: str
    text: str
    feedback: Feedback = field(default_factory=Feedback)
    tokens: Optional[List[int]] = None
    embeddings: Optional[List[float]] = None
    ephemeral: bool = False

    @classmethod
    def create(
        cls,
        *,
        actor: str,
        text: str,
        feedback: tuple[int, int] | Feedback | None = None,
        tokens: List[int] | None = None,
        embeddings: List[float] | None = None,
        ephemeral: bool = False,
    ) -> "Message":
        if feedback is None:
            counters = Feedback()
        elif isinstance(feedback, Feedback):
            counters = feedback
        else:
            up, down = feedback
            counters = Feedback(up=int(up), down=int(down))
        if counters.up < 0 or counters.down < 0:
            raise ValueError("feedback counters must be non-negative")
        return cls(
            actor=actor,
            text=text,
            feedback=counters,
            tokens=list(tokens) if tokens is not None else None,
            embeddings=list(embeddings) if embeddings is not None else None,
            ephemeral=ephemeral,
        )

    def to_dict(self) -> Dict[str, Any]:
        doc: Dict[str, Any] = {
            "actor": self.actor,
            "text": self.text,
            "feedback": list(self.feedback.as_tuple()),
        }
        if self.tokens is not None:
            doc["tokens"] = list(self.tokens)
        if self.embeddings is not None:
            doc["embeddings"] = list(self.embeddings)
        if self.ephemeral:
            doc["ephemeral"] = True
        return doc


class ContextEntry(BaseModel):
    """
    A structured fact rendered into an actor's prompt.

    Entries live in buckets keyed by ``type`` within a section (context,
    persona, knowledge or memory). ``priority`` orders eviction when the
    window is tight; ``keep`` entries are considered before everything else
    but still have to fit the budget.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    value: Any
    description: str = ""
    type: str = "general"
    priority: int = 0
    tokens: Optional[List[int]] = None
    embeddings: Optional[List[float]] = None
    keep: bool = False

    @field_validator("type", mode="before")
    @classmethod
    def _enum_to_value(cls, value: Any) -> Any:
        if isinstance(value, Enum):
            return value.value
        return value

    @property
    def text(self) -> str:
        """Text used for heuristic cost estimation."""
        return " ".join(part for part in (self.name, self.description, str(self.value)) if part)

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)


@dataclass(slots=True)
class HistoryStats:
    """Per-speaker aggregate over the message history."""

    count: int = 0
    text_count: int = 0
    percentage: float = 0.0
    text_percentage: float = 0.0


@dataclass(slots=True)
class GenerateTextResult:
    """Normalized output of a text-generation callback."""

    text: str
    tokens: Optional[List[int]] = None
    embeddings: Optional[List[float]] = None

    @classmethod
    def coerce(cls, raw: Any) -> "GenerateTextResult":
        """Accept a result object, a mapping with a ``text`` key, or a bare string."""

        if isinstance(raw, GenerateTextResult):
            return raw
        if isinstance(raw, str):
            return cls(text=raw)
        if isinstance(raw, Mapping):
            if "text" not in raw:
                raise TypeError("generate_text result mapping is missing 'text'")
            return cls(
                text=str(raw["text"]),
                tokens=raw.get("tokens"),
                embeddings=raw.get("embeddings"),
            )
        text = getattr(raw, "text", None)
        if text is None:
            raise TypeError(f"Unsupported generate_text result: {type(raw).__name__}")
        return cls(
            text=str(text),
            tokens=getattr(raw, "tokens", None),
            embeddings=getattr(raw, "embeddings", None),
        )


@dataclass(slots=True)
class TurnResult:
    """Outcome of a single turn or query."""

    speaker: str
    text: str
    prompt: str
    actor: Optional["Actor"] = None
    tokens: Optional[List[int]] = None
    embeddings: Optional[List[float]] = None

    def to_dict(self) -> Dict[str, Any]:
        doc: Dict[str, Any] = {
            "speaker": self.speaker,
            "text": self.text,
            "prompt": self.prompt,
        }
        if self.tokens is not None:
            doc["tokens"] = list(self.tokens)
        if self.embeddings is not None:
            doc["embeddings"] = list(self.embeddings)
        return doc


__all__ = [
    "ContextEntry",
    "Feedback",
    "GenerateTextResult",
    "HistoryStats",
    "Message",
    "TurnResult",
]
