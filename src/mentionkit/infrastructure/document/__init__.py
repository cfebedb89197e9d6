"""Document model implementations."""

from .memory import InMemoryDocument

__all__ = ["InMemoryDocument"]
