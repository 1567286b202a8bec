"""
Actor - Conversation participant and its structured context

WHAT: Participant identity plus persona, knowledge, memory and private context
WHERE: colloquy/runtime/conversation/actor.py - participant layer
WHO: Conversations scheduling turns and rendering prompts per participant
TIME: Entry lookups O(1); labeled views O(entries)

Each actor owns three typed sections (persona, knowledge, memory) whose
buckets are keyed by the enums below, plus a private context keyed by entry
name. Shared conversation context is not copied into actors; it is overlaid
when the labeled view is built.
"""

from __future__ import annotations

import uuid
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Mapping, Sequence, Union

from .models import ContextEntry
from .prompting import DEFAULT_ACTOR_TEMPLATE, render_prompt
from .window import LabeledEntries


class Section(str, Enum):
    CONTEXT = "context"
    PERSONA = "persona"
    KNOWLEDGE = "knowledge"
    MEMORY = "memory"


class PersonaType(str, Enum):
    """Kinds of persona entries."""

    HABIT = "habit"
    TRAIT = "trait"
    INTEREST = "interest"
    GOAL = "goal"
    FEAR = "fear"
    DESIRE = "desire"
    NEED = "need"
    VALUE = "value"
    BELIEF = "belief"
    IDENTITY = "identity"
    ROLE = "role"
    RELATIONSHIP = "relationship"


class KnowledgeType(str, Enum):
    """Kinds of knowledge entries."""

    FACT = "fact"
    SKILL = "skill"
    EXPERIENCE = "experience"
    OPINION = "opinion"
    BELIEF = "belief"


class MemoryType(str, Enum):
    """Kinds of memory entries."""

    EVENT = "event"
    EXPERIENCE = "experience"
    CONVERSATION = "conversation"
    RELATIONSHIP = "relationship"


EntryLike = Union[ContextEntry, Mapping[str, Any]]


def _as_entry(data: EntryLike, *, type_: str | None = None) -> ContextEntry:
    if isinstance(data, ContextEntry):
        if type_ is not None and data.type != type_:
            return data.model_copy(update={"type": type_})
        return data
    payload = dict(data)
    if type_ is not None:
        payload["type"] = type_
    return ContextEntry(**payload)


def _bucket_key(value: str | Enum) -> str:
    return value.value if isinstance(value, Enum) else str(value)


class Actor:
    """A named participant with its own prompt template and typed entries."""

    def __init__(
        self,
        name: str,
        template: str = DEFAULT_ACTOR_TEMPLATE,
        *,
        context: Mapping[str, EntryLike] | None = None,
        persona: Mapping[str | PersonaType, Sequence[EntryLike]] | None = None,
        knowledge: Mapping[str | KnowledgeType, Sequence[EntryLike]] | None = None,
        memory: Mapping[str | MemoryType, Sequence[EntryLike]] | None = None,
        id_factory: Callable[[], str] | None = None,
    ) -> None:
        self.id = (id_factory or (lambda: str(uuid.uuid4())))()
        self.name = name
        self.template = template
        self.context: Dict[str, ContextEntry] = {}
        self.persona: Dict[str, List[ContextEntry]] = {}
        self.knowledge: Dict[str, List[ContextEntry]] = {}
        self.memory: Dict[str, List[ContextEntry]] = {}

        for entry_name, data in (context or {}).items():
            entry = _as_entry(data)
            if entry.name != entry_name:
                entry = entry.model_copy(update={"name": entry_name})
            self.context[entry_name] = entry
        for section, source in (
            (Section.PERSONA, persona),
            (Section.KNOWLEDGE, knowledge),
            (Section.MEMORY, memory),
        ):
            for type_, items in (source or {}).items():
                for item in items:
                    self.add(section, item, type_=type_)

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"Actor(name={self.name!r}, id={self.id!r})"

    def _section(self, section: Section | str) -> Dict[str, List[ContextEntry]]:
        key = Section(section)
        if key is Section.PERSONA:
            return self.persona
        if key is Section.KNOWLEDGE:
            return self.knowledge
        if key is Section.MEMORY:
            return self.memory
        raise ValueError("private context is keyed by name; use set_context()")

    def add(self, section: Section | str, entry: EntryLike, *, type_: str | Enum | None = None) -> ContextEntry:
        """Append an entry to a typed section. The bucket is the entry's type."""

        bucket_type = _bucket_key(type_) if type_ is not None else None
        built = _as_entry(entry, type_=bucket_type)
        self._section(section).setdefault(built.type, []).append(built)
        return built

    def set_context(self, entry: EntryLike) -> ContextEntry:
        """Insert or replace a private context entry; replacements move to the end."""

        built = _as_entry(entry)
        self.context.pop(built.name, None)
        self.context[built.name] = built
        return built

    def delete_context(self, name: str) -> bool:
        return self.context.pop(name, None) is not None

    def labeled_entries(self, shared_context: Iterable[ContextEntry] = ()) -> LabeledEntries:
        """Build the section -> type -> entries view used for rendering.

        Shared entries shadow private ones with the same name and follow them
        in order.
        """

        shared = list(shared_context)
        shadowed = {entry.name for entry in shared}
        context: Dict[str, List[ContextEntry]] = {}
        for entry in [e for e in self.context.values() if e.name not in shadowed] + shared:
            context.setdefault(entry.type, []).append(entry)

        return {
            Section.CONTEXT.value: context,
            Section.PERSONA.value: {k: list(v) for k, v in self.persona.items()},
            Section.KNOWLEDGE.value: {k: list(v) for k, v in self.knowledge.items()},
            Section.MEMORY.value: {k: list(v) for k, v in self.memory.items()},
        }

    def render(self, variables: Mapping[str, Any]) -> str:
        return render_prompt(self.template, variables)

    def to_dict(self) -> Dict[str, Any]:
        def dump(section: Dict[str, List[ContextEntry]]) -> Dict[str, List[Dict[str, Any]]]:
            return {k: [e.to_dict() for e in v] for k, v in section.items()}

        return {
            "id": self.id,
            "name": self.name,
            "context": {name: entry.to_dict() for name, entry in self.context.items()},
            "persona": dump(self.persona),
            "knowledge": dump(self.knowledge),
            "memory": dump(self.memory),
        }


__all__ = [
    "Actor",
    "KnowledgeType",
    "MemoryType",
    "PersonaType",
    "Section",
]
