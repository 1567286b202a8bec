def test_import_conversation_package():
    from colloquy.runtime.conversation import (  # noqa: F401
        Actor,
        ContextStore,
        Conversation,
        ConversationHistory,
        RoundRobinScheduler,
        build_window,
        mask_messages,
    )


def test_import_config_and_telemetry():
    from colloquy.runtime.conversation.config import resolve_conversation_config  # noqa: F401
    from colloquy.runtime.conversation.telemetry import (  # noqa: F401
        LoggingTelemetryClient,
        NoOpTelemetryClient,
    )
