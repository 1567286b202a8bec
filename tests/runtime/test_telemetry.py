import logging

import pytest

from colloquy.runtime.conversation.telemetry import LoggingTelemetryClient, RecordingTelemetryClient


def test_logging_client_writes_span(caplog):
    client = LoggingTelemetryClient(logging.getLogger("colloquy.test.telemetry"))

    with caplog.at_level(logging.INFO, logger="colloquy.test.telemetry"):
        with client.open_span("conversation.generate", speaker="Bob") as span:
            span.annotate(response_chars=3)

    record = caplog.records[-1]
    assert record.levelno == logging.INFO
    assert "conversation.generate" in record.getMessage()
    assert "'speaker': 'Bob'" in record.getMessage()
    assert "'response_chars': 3" in record.getMessage()


def test_logging_client_warns_on_failure(caplog):
    client = LoggingTelemetryClient(logging.getLogger("colloquy.test.telemetry"))

    with caplog.at_level(logging.INFO, logger="colloquy.test.telemetry"):
        with pytest.raises(TimeoutError):
            with client.open_span("conversation.generate"):
                raise TimeoutError("model offline")

    assert caplog.records[-1].levelno == logging.WARNING
    assert "TimeoutError" in caplog.records[-1].getMessage()


def test_recording_client_marks_failure_and_reraises():
    client = RecordingTelemetryClient()
    assert client.last() is None

    with pytest.raises(KeyError):
        with client.open_span("conversation.generate", speaker="Ann"):
            raise KeyError("boom")

    span = client.last()
    assert span.success is False
    assert span.error == "KeyError"
    assert span.duration_ms >= 0
    assert span.to_dict()["speaker"] == "Ann"
