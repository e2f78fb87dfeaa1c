"""Core types and helpers for an AI assistant working on markdown notebooks."""

__version__ = "0.1.0"
__all__ = ["api", "retry", "blocks", "stream", "cli"]