"""Exception types raised by the conversation runtime."""

from __future__ import annotations


class ConversationError(RuntimeError):
    """Base class for conversation runtime failures."""


class ConfigurationError(ConversationError):
    """Raised when a turn cannot run because a required collaborator is missing."""


class BindingError(ConversationError):
    """Raised when a scheduler is used with a conversation it is not bound to."""


class NotFoundError(ConversationError, LookupError):
    """Raised when a message or participant is not a member of the conversation."""


class ValidationError(ConversationError, ValueError):
    """Raised when a window budget or other numeric setting is out of range."""


__all__ = [
    "ConversationError",
    "ConfigurationError",
    "BindingError",
    "NotFoundError",
    "ValidationError",
]
