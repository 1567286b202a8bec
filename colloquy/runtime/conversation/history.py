"""
Conversation History - Ordered message store

WHAT: Append-only message history with feedback, ephemeral pruning and stats
WHERE: colloquy/runtime/conversation/history.py - state layer
WHO: Conversation turn engine and callers inspecting the transcript
TIME: push/first/last O(1); stats, clean_ephemeral and feedback lookups O(n)

Messages are never reordered. The only removals are ephemeral pruning and an
explicit clear(). Feedback lookups are by identity so that two messages with
the same text are still distinct members of the history.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, Iterator, List, Optional

from .errors import NotFoundError
from .models import HistoryStats, Message

logger = logging.getLogger(__name__)


class ConversationHistory:
    """Holds the conversation transcript in chronological order."""

    def __init__(self, messages: Iterable[Message] | None = None) -> None:
        self._messages: List[Message] = list(messages or ())

    @property
    def messages(self) -> List[Message]:
        """The live message list. Mutate it through the history methods only."""
        return self._messages

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[Message]:
        return iter(self._messages)

    def push(self, message: Message) -> Message:
        self._messages.append(message)
        return message

    def push_text(
        self,
        actor: str,
        text: str,
        *,
        tokens: List[int] | None = None,
        embeddings: List[float] | None = None,
        ephemeral: bool = False,
    ) -> Message:
        """Build a message with zeroed feedback and append it."""

        return self.push(
            Message.create(
                actor=actor,
                text=text,
                tokens=tokens,
                embeddings=embeddings,
                ephemeral=ephemeral,
            )
        )

    def messages_for(self, actor: str) -> Dict[int, Message]:
        """Messages attributed to ``actor`` keyed by their index in the history."""

        return {index: message for index, message in enumerate(self._messages) if message.actor == actor}

    def stats(self) -> Dict[str, HistoryStats]:
        """Per-speaker counts and shares. Empty history yields an empty dict."""

        stats: Dict[str, HistoryStats] = {}
        total = 0
        text_total = 0
        for message in self._messages:
            entry = stats.setdefault(message.actor, HistoryStats())
            entry.count += 1
            entry.text_count += len(message.text)
            total += 1
            text_total += len(message.text)

        for entry in stats.values():
            entry.percentage = entry.count / total
            entry.text_percentage = entry.text_count / text_total if text_total else 0.0
        return stats

    def clean_ephemeral(self) -> int:
        """Drop every ephemeral message in place; returns how many were removed."""

        before = len(self._messages)
        self._messages[:] = [m for m in self._messages if not m.ephemeral]
        removed = before - len(self._messages)
        if removed:
            logger.debug("Removed %d ephemeral message(s) from history", removed)
        return removed

    def _ensure_member(self, message: Message) -> None:
        if not any(m is message for m in self._messages):
            raise NotFoundError("Message not found in history")

    def up(self, message: Message) -> None:
        self._ensure_member(message)
        message.feedback.up += 1

    def down(self, message: Message) -> None:
        self._ensure_member(message)
        message.feedback.down += 1

    def first(self) -> Optional[Message]:
        return self._messages[0] if self._messages else None

    def last(self) -> Optional[Message]:
        return self._messages[-1] if self._messages else None

    def clear(self) -> None:
        self._messages.clear()

    def to_dict(self) -> dict[str, Any]:
        return {"messages": [m.to_dict() for m in self._messages]}


__all__ = ["ConversationHistory"]
