"""
Scheduler - Turn-order policies

WHAT: Decides which participant speaks next when no speaker is given
WHERE: colloquy/runtime/conversation/scheduler.py - consulted by the turn engine
WHO: Conversation.turn() and Conversation.loop()
TIME: O(1) per call

A scheduler is bound to exactly one conversation when it is constructed and
reads the participant list from it. Alternative strategies subclass
Scheduler and implement get_next_speaker().
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Dict, Optional

from .errors import BindingError, ConfigurationError

if TYPE_CHECKING:
    from .actor import Actor
    from .conversation import Conversation
    from .models import TurnResult


class Scheduler(ABC):
    """Base class for turn-order policies."""

    def __init__(self, conversation: "Conversation") -> None:
        self.conversation = conversation

    def ensure_bound(self, conversation: "Conversation") -> None:
        if self.conversation is not conversation:
            raise BindingError(
                f"Scheduler {type(self).__name__} is bound to conversation "
                f"{self.conversation.id!r}, not {conversation.id!r}"
            )

    @abstractmethod
    def get_next_speaker(self, last_turn: Optional["TurnResult"] = None) -> "Actor":
        """Return the participant who should speak next."""

    @abstractmethod
    def to_dict(self) -> Dict[str, Any]:
        """Minimal state needed to resume this policy."""


class RoundRobinScheduler(Scheduler):
    """Cycles through participants in construction order."""

    def __init__(self, conversation: "Conversation", *, cursor: int = 0) -> None:
        super().__init__(conversation)
        self._cursor = cursor

    @property
    def cursor(self) -> int:
        return self._cursor

    def get_next_speaker(self, last_turn: Optional["TurnResult"] = None) -> "Actor":
        actors = self.conversation.actors
        if not actors:
            raise ConfigurationError("Conversation has no participants to schedule")
        speaker = actors[self._cursor % len(actors)]
        self._cursor += 1
        return speaker

    def to_dict(self) -> Dict[str, Any]:
        return {"type": "round_robin", "cursor": self._cursor}


__all__ = ["Scheduler", "RoundRobinScheduler"]
