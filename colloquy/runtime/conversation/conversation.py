"""
Conversation - Turn engine for multi-party dialogues

WHAT: Drives single turns, one-off queries and cancellable turn loops
WHERE: colloquy/runtime/conversation/conversation.py - top of the runtime stack
WHO: Entry point for applications running actors against a text generator
TIME: Dominated by the generate_text callback; bookkeeping is O(history)

Each turn renders the speaker's prompt from the windowed structured context
and the masked message history, awaits the text-generation callback, commits
the reply and prunes ephemeral messages. Queries push their question as an
ephemeral message so the answerer sees it, and always prune it afterwards,
even when generation fails.

Concurrency Notes:
- One in-process mutator per conversation; no locking
- Suspension points are the generate_text/tokens/embeddings callbacks only
- loop() polls its cancellation signal between turns, never mid-turn
"""

from __future__ import annotations

import logging
import uuid
from contextlib import contextmanager
from typing import (
    Any,
    AsyncIterator,
    Awaitable,
    Callable,
    Dict,
    Iterator,
    List,
    Mapping,
    Optional,
    Protocol,
    Sequence,
    Tuple,
)

from .actor import Actor, Section
from .config import ContextWindow, ConversationConfig
from .context_store import ContextStore
from .errors import ConfigurationError, NotFoundError
from .estimator import LengthEstimator, cost_of
from .history import ConversationHistory
from .models import GenerateTextResult, Message, TurnResult
from .scheduler import RoundRobinScheduler, Scheduler
from .telemetry import NoOpTelemetryClient, TelemetryClient
from .window import build_window, mask_messages

logger = logging.getLogger(__name__)

GenerateText = Callable[[str], Awaitable[Any]]
GenerateTokens = Callable[[str], Awaitable[List[int]]]
GenerateEmbeddings = Callable[[str], Awaitable[List[float]]]
Renderer = Callable[[Mapping[str, Any]], str]
SchedulerFactory = Callable[["Conversation"], Scheduler]


class CancellationSignal(Protocol):
    """Satisfied by asyncio.Event and threading.Event."""

    def is_set(self) -> bool:
        ...


def _new_id() -> str:
    return str(uuid.uuid4())


class Conversation:
    """Participants, shared context, history and the scheduler that orders them."""

    def __init__(
        self,
        name: str,
        actors: Sequence[Actor],
        *,
        scheduler: SchedulerFactory | None = None,
        config: ConversationConfig | None = None,
        window: int | ContextWindow | None = None,
        generate_text: GenerateText | None = None,
        generate_tokens: GenerateTokens | None = None,
        generate_embeddings: GenerateEmbeddings | None = None,
        render: Renderer | None = None,
        estimator: LengthEstimator | None = None,
        telemetry: TelemetryClient | None = None,
        history: ConversationHistory | None = None,
        id_factory: Callable[[], str] | None = None,
    ) -> None:
        cfg = config or ConversationConfig()
        self.id = (id_factory or _new_id)()
        self.name = name
        self._actors: Tuple[Actor, ...] = tuple(actors)
        self.history = history if history is not None else ConversationHistory()
        self.context = ContextStore()
        self.window: Optional[ContextWindow] = ContextWindow.coerce(window) if window is not None else cfg.window
        self.generate_text = generate_text
        self.generate_tokens = generate_tokens
        self.generate_embeddings = generate_embeddings
        self._inject_speaker = cfg.inject_speaker
        self._render = render
        self._estimator = estimator
        self._telemetry = telemetry or NoOpTelemetryClient()
        self._last_turn: Optional[TurnResult] = None
        self.scheduler: Scheduler = (scheduler or RoundRobinScheduler)(self)

    @property
    def actors(self) -> Tuple[Actor, ...]:
        return self._actors

    @property
    def telemetry(self) -> TelemetryClient:
        return self._telemetry

    @property
    def last_turn(self) -> Optional[TurnResult]:
        return self._last_turn

    def actor(self, name: str) -> Actor:
        for actor in self._actors:
            if actor.name == name:
                return actor
        raise NotFoundError(f"No participant named {name!r} in conversation {self.name!r}")

    # ---------------------- rendering ----------------------
    def template_context(self, actor: Actor, pending: Message | None = None) -> Dict[str, Any]:
        """Windowed data handed to the renderer for ``actor``.

        ``pending`` is a message the renderer must always see, such as a
        query awaiting its answer. It is placed last and its cost is taken
        out of the history budget before older messages are masked.
        """

        labeled = actor.labeled_entries(self.context.entries())
        messages: List[Message] = [m for m in self.history.messages if m is not pending]
        if self.window is not None:
            labeled = build_window(labeled, self.window.max, self._estimator)
            budget = self.window.history_budget
            if pending is not None:
                pending_cost = cost_of(pending, pending.text, self._estimator)
                if pending_cost > budget:
                    logger.warning(
                        "Pending message from %s costs %d, over the history budget of %d; "
                        "rendering it without earlier history",
                        pending.actor,
                        pending_cost,
                        budget,
                    )
                budget = max(budget - pending_cost, 0)
            messages = mask_messages(messages, budget, self._estimator)
        if pending is not None:
            messages.append(pending)
        return {
            "actor": actor.name,
            "participants": [a.name for a in self._actors],
            **{section.value: labeled.get(section.value, {}) for section in Section},
            "messages": messages,
        }

    def render(self, actor: Actor, pending: Message | None = None) -> str:
        variables = self.template_context(actor, pending)
        if self._render is not None:
            return self._render(variables)
        return actor.render(variables)

    # ---------------------- helpers ----------------------
    def _resolve_generate_text(self, generate_text: GenerateText | None) -> GenerateText:
        fn = generate_text or self.generate_text
        if fn is None:
            raise ConfigurationError(
                "No generate_text function: pass one to this call or to the Conversation"
            )
        return fn

    def _resolve_actor(self, speaker: Actor | str) -> Actor:
        if isinstance(speaker, Actor):
            if not any(a is speaker for a in self._actors):
                raise NotFoundError(f"{speaker.name!r} is not a participant in conversation {self.name!r}")
            return speaker
        return self.actor(speaker)

    async def _generate(self, actor: Actor, prompt: str, generate_text: GenerateText) -> GenerateTextResult:
        with self._telemetry.open_span(
            "conversation.generate",
            conversation_id=self.id,
            speaker=actor.name,
            prompt_chars=len(prompt),
            history_count=len(self.history),
            window_max=self.window.max if self.window is not None else None,
        ) as span:
            result = GenerateTextResult.coerce(await generate_text(prompt))
            span.annotate(response_chars=len(result.text))
        return result

    async def _annotate(
        self,
        text: str,
        tokens: List[int] | None,
        embeddings: List[float] | None,
    ) -> Tuple[List[int] | None, List[float] | None]:
        if tokens is None and self.generate_tokens is not None:
            tokens = list(await self.generate_tokens(text))
        if embeddings is None and self.generate_embeddings is not None:
            embeddings = list(await self.generate_embeddings(text))
        return tokens, embeddings

    @contextmanager
    def _ephemeral(self, actor: str, text: str) -> Iterator[Message]:
        """Push ``text`` as an ephemeral message and prune ephemerals on exit."""

        message = self.history.push_text(actor, text, ephemeral=True)
        try:
            yield message
        finally:
            self.history.clean_ephemeral()

    # ---------------------- messaging ----------------------
    async def inject(
        self,
        text: str,
        *,
        speaker: str | None = None,
        ephemeral: bool = False,
        tokens: List[int] | None = None,
        embeddings: List[float] | None = None,
    ) -> Message:
        """Add a message that no participant generated, e.g. a moderator prompt.

        Ephemeral injections are visible to the next turn only.
        """

        tokens, embeddings = await self._annotate(text, tokens, embeddings)
        return self.history.push_text(
            speaker or self._inject_speaker,
            text,
            tokens=tokens,
            embeddings=embeddings,
            ephemeral=ephemeral,
        )

    async def turn(
        self,
        speaker: Actor | str | None = None,
        generate_text: GenerateText | None = None,
    ) -> TurnResult:
        """Let one participant speak and commit the reply to history."""

        generate = self._resolve_generate_text(generate_text)
        if speaker is None:
            actor = self.scheduler.get_next_speaker(self._last_turn)
        else:
            actor = self._resolve_actor(speaker)

        prompt = self.render(actor)
        result = await self._generate(actor, prompt, generate)
        tokens, embeddings = await self._annotate(result.text, result.tokens, result.embeddings)

        self.history.push_text(actor.name, result.text, tokens=tokens, embeddings=embeddings)
        self.history.clean_ephemeral()
        logger.debug("Committed turn for %s (%d chars)", actor.name, len(result.text))

        turn = TurnResult(
            speaker=actor.name,
            actor=actor,
            text=result.text,
            prompt=prompt,
            tokens=tokens,
            embeddings=embeddings,
        )
        self._last_turn = turn
        return turn

    async def query(
        self,
        speaker: Actor | str,
        answerer: Actor | str,
        query: str,
        *,
        store: bool = False,
        generate_text: GenerateText | None = None,
    ) -> TurnResult:
        """Ask ``answerer`` a one-off question on behalf of ``speaker``.

        The asker does not have to be a participant. With ``store=True`` both
        the question and the answer are kept in history afterwards.
        """

        generate = self._resolve_generate_text(generate_text)
        asker = speaker.name if isinstance(speaker, Actor) else speaker
        responder = self._resolve_actor(answerer)

        with self._ephemeral(asker, query) as pending:
            prompt = self.render(responder, pending)
            result = await self._generate(responder, prompt, generate)

        tokens, embeddings = result.tokens, result.embeddings
        if store:
            query_tokens, query_embeddings = await self._annotate(query, None, None)
            tokens, embeddings = await self._annotate(result.text, tokens, embeddings)
            self.history.push_text(asker, query, tokens=query_tokens, embeddings=query_embeddings)
            self.history.push_text(responder.name, result.text, tokens=tokens, embeddings=embeddings)

        return TurnResult(
            speaker=responder.name,
            actor=responder,
            text=result.text,
            prompt=prompt,
            tokens=tokens,
            embeddings=embeddings,
        )

    def loop(
        self,
        signal: CancellationSignal,
        *,
        generate_text: GenerateText | None = None,
        scheduler: Scheduler | None = None,
    ) -> AsyncIterator[TurnResult]:
        """Run turns until ``signal`` is set.

        Scheduler binding and generate_text availability are checked here,
        before any turn runs.
        """

        active = scheduler or self.scheduler
        active.ensure_bound(self)
        generate = self._resolve_generate_text(generate_text)
        return self._run_loop(signal, generate, active)

    async def _run_loop(
        self,
        signal: CancellationSignal,
        generate_text: GenerateText,
        scheduler: Scheduler,
    ) -> AsyncIterator[TurnResult]:
        while not signal.is_set():
            speaker = scheduler.get_next_speaker(self._last_turn)
            yield await self.turn(speaker, generate_text)

    # ---------------------- serialization ----------------------
    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "actors": [a.to_dict() for a in self._actors],
            "context": self.context.to_dict(),
            "history": self.history.to_dict(),
            "scheduler": self.scheduler.to_dict(),
            "window": self.window.to_dict() if self.window is not None else None,
        }


__all__ = [
    "CancellationSignal",
    "Conversation",
    "GenerateEmbeddings",
    "GenerateText",
    "GenerateTokens",
    "Renderer",
]
