"""
Context Window - Budgeted selection of entries and messages

WHAT: Picks the structured entries and history messages that fit a prompt budget
WHERE: colloquy/runtime/conversation/window.py - called on every rendered turn
WHO: Conversation.render() before handing data to the template renderer
TIME: O(n log n) for entries (one sort), O(n) for messages

Both selections are greedy prefixes: candidates are walked in preference
order and the walk stops at the first candidate that would overflow the
budget. Nothing after that point is considered, even if it is cheaper.

Entry preference: keep first, then higher priority, then the most recently
added entry within its bucket. Message preference: newest first.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Mapping, Sequence, Tuple

from .errors import ValidationError
from .estimator import LengthEstimator, cost_of
from .models import ContextEntry, Message

logger = logging.getLogger(__name__)

# section -> type -> ordered entries
LabeledEntries = Dict[str, Dict[str, List[ContextEntry]]]


@dataclass(slots=True)
class _Candidate:
    section: str
    type: str
    index: int
    entry: ContextEntry


def _check_budget(budget: int) -> None:
    if budget < 0:
        raise ValidationError(f"window budget must be non-negative, got {budget}")


def build_window(
    entries: Mapping[str, Mapping[str, Sequence[ContextEntry]]],
    budget: int,
    estimator: LengthEstimator | None = None,
) -> LabeledEntries:
    """Return the subset of ``entries`` that fits ``budget``.

    Buckets keep their original relative order. Sections and types left with
    no entries are omitted from the result.
    """

    _check_budget(budget)
    if budget == 0:
        return {}

    candidates: List[_Candidate] = [
        _Candidate(section, type_, index, entry)
        for section, buckets in entries.items()
        for type_, bucket in buckets.items()
        for index, entry in enumerate(bucket)
    ]
    candidates.sort(key=lambda c: (c.entry.keep, c.entry.priority, c.index), reverse=True)

    accepted: List[_Candidate] = []
    total = 0
    for candidate in candidates:
        cost = cost_of(candidate.entry, candidate.entry.text, estimator)
        if total + cost > budget:
            break
        accepted.append(candidate)
        total += cost

    if len(accepted) < len(candidates):
        logger.debug(
            "Context window kept %d/%d entries (cost %d, budget %d)",
            len(accepted),
            len(candidates),
            total,
            budget,
        )

    kept: Dict[Tuple[str, str], List[_Candidate]] = {}
    for candidate in accepted:
        kept.setdefault((candidate.section, candidate.type), []).append(candidate)

    # Walk the input again so sections and types come out in their original order.
    result: LabeledEntries = {}
    for section, buckets in entries.items():
        for type_ in buckets:
            bucket = kept.get((section, type_))
            if bucket:
                bucket.sort(key=lambda c: c.index)
                result.setdefault(section, {})[type_] = [c.entry for c in bucket]
    return result


def mask_messages(
    messages: Sequence[Message],
    budget: int,
    estimator: LengthEstimator | None = None,
) -> List[Message]:
    """Keep the newest messages that fit ``budget``, in chronological order."""

    _check_budget(budget)

    unmasked: List[Message] = []
    total = 0
    for message in reversed(messages):
        cost = cost_of(message, message.text, estimator)
        if total + cost > budget:
            break
        unmasked.append(message)
        total += cost

    unmasked.reverse()
    return unmasked


__all__ = ["LabeledEntries", "build_window", "mask_messages"]
