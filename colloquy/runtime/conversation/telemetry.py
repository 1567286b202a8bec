"""
Telemetry - Generation spans for conversation turns

WHAT: Times each text-generation call and hands a SpanRecord to a sink
WHERE: colloquy/runtime/conversation/telemetry.py - observability layer
WHO: Conversation turn engine; callers plugging in their own sinks
TIME: Zero overhead with the no-op client, <0.1ms otherwise

A span is opened around every generate_text call with the conversation id,
speaker and prompt size; the engine annotates it with the response size once
the reply arrives. On exit the span becomes a SpanRecord, failed or not, and
is passed to ``TelemetryClient.record``.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class SpanRecord:
    """A finished span."""

    name: str
    success: bool
    duration_ms: float
    attributes: Dict[str, Any] = field(default_factory=dict)
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        doc = dict(self.attributes)
        doc.update(name=self.name, success=self.success, duration_ms=self.duration_ms)
        if self.error is not None:
            doc["error"] = self.error
        return doc


class TelemetrySpan:
    """Open span; use as a context manager and ``annotate`` while it runs."""

    def __init__(self, client: "TelemetryClient", name: str, attributes: Dict[str, Any]) -> None:
        self._client = client
        self.name = name
        self.attributes = attributes
        self._started = 0.0

    def annotate(self, **attributes: Any) -> None:
        self.attributes.update(attributes)

    def __enter__(self) -> "TelemetrySpan":
        self._started = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc, exc_tb) -> None:
        self._client.record(
            SpanRecord(
                name=self.name,
                success=exc is None,
                duration_ms=(time.perf_counter() - self._started) * 1000.0,
                attributes=self.attributes,
                error=type(exc).__name__ if exc is not None else None,
            )
        )


class TelemetryClient:
    """Span sink. Subclasses implement ``record``."""

    def open_span(self, name: str, **attributes: Any) -> TelemetrySpan:
        return TelemetrySpan(self, name, attributes)

    def record(self, span: SpanRecord) -> None:
        raise NotImplementedError


class NoOpTelemetryClient(TelemetryClient):
    """Default sink."""

    def record(self, span: SpanRecord) -> None:
        return None


class LoggingTelemetryClient(TelemetryClient):
    """Logs each span at INFO, or WARNING when generation failed."""

    def __init__(self, log: logging.Logger | None = None) -> None:
        self._log = log or logger

    def record(self, span: SpanRecord) -> None:
        level = logging.INFO if span.success else logging.WARNING
        self._log.log(level, "%s %.1fms %s", span.name, span.duration_ms, span.to_dict())


class RecordingTelemetryClient(TelemetryClient):
    """Keeps every span in memory, newest last."""

    def __init__(self) -> None:
        self.records: List[SpanRecord] = []

    def record(self, span: SpanRecord) -> None:
        self.records.append(span)

    def last(self) -> Optional[SpanRecord]:
        return self.records[-1] if self.records else None


__all__ = [
    "LoggingTelemetryClient",
    "NoOpTelemetryClient",
    "RecordingTelemetryClient",
    "SpanRecord",
    "TelemetryClient",
    "TelemetrySpan",
]
