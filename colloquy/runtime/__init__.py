"""
Runtime Module

WHAT: Runtime subsystem for multi-party conversations driven by a text generator
WHERE: colloquy/runtime/ - orchestration layer above the caller's model client
WHO: Applications running actors through turns, queries and turn loops
TIME: Bookkeeping is in-process and synchronous; the only waits are model calls

Conversation state lives in process memory only. Nothing here talks to a
model directly: text generation, tokenization and embeddings are async
callables supplied by the caller.
"""

__all__ = ["conversation"]
