"""
Conversation Runtime - History, context windows and turn orchestration

WHAT: Local library for building bounded prompts and running actor turns
WHERE: colloquy/runtime/conversation/ - runtime orchestration subsystem
WHO: Applications staging debates, interviews and other multi-actor dialogues
TIME: Window construction O(n log n) per rendered turn

Components (leaf-first):
- estimator: heuristic/exact cost of messages and entries
- history: ordered message store with feedback, stats and ephemeral pruning
- window: priority/keep-aware entry selection and newest-first history masking
- scheduler: turn-order policies (round robin by default)
- conversation: turn(), query(), loop() and inject()

External collaborators (caller supplied):
- generate_text(prompt) -> {text, tokens?, embeddings?}
- generate_tokens(text) / generate_embeddings(text), optional
- render(template_context) -> str, defaulting to each actor's Jinja2 template
"""

from .actor import Actor, KnowledgeType, MemoryType, PersonaType, Section  # noqa: F401
from .config import ContextWindow, ConversationConfig, resolve_conversation_config  # noqa: F401
from .context_store import ContextStore  # noqa: F401
from .conversation import CancellationSignal, Conversation  # noqa: F401
from .errors import (  # noqa: F401
    BindingError,
    ConfigurationError,
    ConversationError,
    NotFoundError,
    ValidationError,
)
from .estimator import LengthEstimator, WordHeuristicEstimator  # noqa: F401
from .history import ConversationHistory  # noqa: F401
from .models import (  # noqa: F401
    ContextEntry,
    Feedback,
    GenerateTextResult,
    HistoryStats,
    Message,
    TurnResult,
)
from .scheduler import RoundRobinScheduler, Scheduler  # noqa: F401
from .similarity import cosine_similarity, dot_product  # noqa: F401
from .telemetry import (  # noqa: F401
    LoggingTelemetryClient,
    NoOpTelemetryClient,
    RecordingTelemetryClient,
    SpanRecord,
    TelemetryClient,
    TelemetrySpan,
)
from .window import build_window, mask_messages  # noqa: F401

__all__ = [
    "Actor",
    "BindingError",
    "CancellationSignal",
    "ConfigurationError",
    "ContextEntry",
    "ContextStore",
    "ContextWindow",
    "Conversation",
    "ConversationConfig",
    "ConversationError",
    "ConversationHistory",
    "Feedback",
    "GenerateTextResult",
    "HistoryStats",
    "KnowledgeType",
    "LengthEstimator",
    "LoggingTelemetryClient",
    "MemoryType",
    "Message",
    "NoOpTelemetryClient",
    "RecordingTelemetryClient",
    "NotFoundError",
    "PersonaType",
    "RoundRobinScheduler",
    "Scheduler",
    "Section",
    "SpanRecord",
    "TelemetryClient",
    "TelemetrySpan",
    "TurnResult",
    "ValidationError",
    "WordHeuristicEstimator",
    "build_window",
    "cosine_similarity",
    "dot_product",
    "mask_messages",
    "resolve_conversation_config",
]
