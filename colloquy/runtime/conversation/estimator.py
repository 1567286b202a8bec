"""
Length Estimator - Approximate prompt cost for budgeting

WHAT: Maps text, messages and context entries to an approximate token cost
WHERE: colloquy/runtime/conversation/estimator.py - leaf utility
WHO: Window builder and history masking
TIME: O(words) per call

Exact tokenization needs a model-specific tokenizer, which lives outside this
package. The default heuristic follows the usual rule of thumb that 1k tokens
is roughly 750 words. Callers that have real token lists or embeddings attach
them to the message/entry and that length wins.
"""

from __future__ import annotations

import math
from typing import List, Optional, Protocol, runtime_checkable

DEFAULT_WORD_RATIO = 0.75


@runtime_checkable
class LengthEstimator(Protocol):
    """Anything that can price a piece of text."""

    def estimate(self, text: str) -> int:
        ...


class WordHeuristicEstimator:
    """``ceil(words * ratio)`` where words are split on single spaces."""

    def __init__(self, ratio: float = DEFAULT_WORD_RATIO) -> None:
        if ratio <= 0:
            raise ValueError("ratio must be positive")
        self.ratio = ratio

    def estimate(self, text: str) -> int:
        return math.ceil(len(text.split(" ")) * self.ratio)


DEFAULT_ESTIMATOR = WordHeuristicEstimator()


class _Costed(Protocol):
    tokens: Optional[List[int]]
    embeddings: Optional[List[float]]


def exact_length(item: _Costed) -> int | None:
    """Return the authoritative length of ``item`` if it carries one."""

    if item.tokens is not None:
        return len(item.tokens)
    if item.embeddings is not None:
        return len(item.embeddings)
    return None


def cost_of(item: _Costed, text: str, estimator: LengthEstimator | None = None) -> int:
    exact = exact_length(item)
    if exact is not None:
        return exact
    return (estimator or DEFAULT_ESTIMATOR).estimate(text)


__all__ = [
    "DEFAULT_ESTIMATOR",
    "DEFAULT_WORD_RATIO",
    "LengthEstimator",
    "WordHeuristicEstimator",
    "cost_of",
    "exact_length",
]
