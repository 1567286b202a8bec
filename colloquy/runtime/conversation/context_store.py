"""
Context Store - Conversation-wide shared context

WHAT: Single owner of context entries shared by every participant
WHERE: colloquy/runtime/conversation/context_store.py - state layer
WHO: Callers setting scene facts (topic, location, date) on a conversation
TIME: set/get/delete O(1); views O(entries)

Entries are stored once on the conversation. Participants see them through
Actor.labeled_entries(), so actors joining later see the same context as
everyone else.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from .models import ContextEntry
from .similarity import rank_by_similarity


class ContextStore:
    """Ordered name -> entry map. Re-setting a name moves it to the end."""

    def __init__(self) -> None:
        self._entries: Dict[str, ContextEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def set(
        self,
        name: str,
        description: str,
        value: Any,
        *,
        priority: int = 0,
        tokens: List[int] | None = None,
        embeddings: List[float] | None = None,
        keep: bool = False,
        type: str = "general",
    ) -> ContextEntry:
        entry = ContextEntry(
            name=name,
            description=description,
            value=value,
            priority=priority,
            tokens=tokens,
            embeddings=embeddings,
            keep=keep,
            type=type,
        )
        self._entries.pop(name, None)
        self._entries[name] = entry
        return entry

    def get(self, name: str) -> Any:
        """Value of the named entry, or None."""
        entry = self._entries.get(name)
        return entry.value if entry is not None else None

    def entry(self, name: str) -> Optional[ContextEntry]:
        return self._entries.get(name)

    def delete(self, name: str) -> bool:
        return self._entries.pop(name, None) is not None

    def entries(self) -> List[ContextEntry]:
        return list(self._entries.values())

    def similar(self, embedding: Sequence[float], limit: int = 5) -> List[ContextEntry]:
        """Entries with embeddings, most similar to ``embedding`` first."""

        candidates = [e for e in self._entries.values() if e.embeddings]
        order = rank_by_similarity(embedding, [e.embeddings or [] for e in candidates])
        return [candidates[i] for i in order[:limit]]

    def clear(self) -> None:
        self._entries.clear()

    def to_dict(self) -> Dict[str, Any]:
        return {name: entry.to_dict() for name, entry in self._entries.items()}


__all__ = ["ContextStore"]
