"""
Module: colloquy/runtime/conversation/config.py
Summary: Window budgets and conversation defaults, with environment resolution.
Inputs: COLLOQUY_WINDOW_MAX, COLLOQUY_HISTORY_WINDOW, COLLOQUY_INJECT_SPEAKER
Outputs: ContextWindow, ConversationConfig
Related: colloquy/runtime/conversation/window.py, conversation.py
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .errors import ValidationError

ENV_WINDOW_MAX = "COLLOQUY_WINDOW_MAX"
ENV_HISTORY_WINDOW = "COLLOQUY_HISTORY_WINDOW"
ENV_INJECT_SPEAKER = "COLLOQUY_INJECT_SPEAKER"


@dataclass(slots=True)
class ContextWindow:
    """Prompt budget. ``max`` bounds structured entries; ``history`` bounds messages.

    When ``history`` is unset the message history shares the ``max`` ceiling.
    """

    max: int
    history: Optional[int] = None

    def __post_init__(self) -> None:
        if self.max < 0:
            raise ValidationError(f"window max must be non-negative, got {self.max}")
        if self.history is not None and self.history < 0:
            raise ValidationError(f"history window must be non-negative, got {self.history}")

    @property
    def history_budget(self) -> int:
        return self.max if self.history is None else self.history

    @classmethod
    def coerce(cls, value: "int | ContextWindow | None") -> Optional["ContextWindow"]:
        if value is None or isinstance(value, ContextWindow):
            return value
        return cls(max=int(value))

    def to_dict(self) -> dict[str, int]:
        doc = {"max": self.max}
        if self.history is not None:
            doc["history"] = self.history
        return doc


@dataclass(slots=True)
class ConversationConfig:
    window: Optional[ContextWindow] = None
    inject_speaker: str = "system"


def _int_from_env(env: Mapping[str, str], key: str) -> Optional[int]:
    raw = env.get(key, "").strip()
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError as exc:
        raise ValidationError(f"{key} must be an integer, got {raw!r}") from exc


def resolve_conversation_config(env: Mapping[str, str] | None = None) -> ConversationConfig:
    """Build a ConversationConfig from environment variables."""

    source = os.environ if env is None else env
    window_max = _int_from_env(source, ENV_WINDOW_MAX)
    history = _int_from_env(source, ENV_HISTORY_WINDOW)
    window = None
    if window_max is not None:
        window = ContextWindow(max=window_max, history=history)
    elif history is not None:
        raise ValidationError(f"{ENV_HISTORY_WINDOW} requires {ENV_WINDOW_MAX}")
    return ConversationConfig(
        window=window,
        inject_speaker=source.get(ENV_INJECT_SPEAKER, "").strip() or "system",
    )


__all__ = [
    "ContextWindow",
    "ConversationConfig",
    "resolve_conversation_config",
]
