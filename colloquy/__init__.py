"""colloquy: turn-based multi-party conversations for text-generation models."""

__all__ = ["runtime"]
