"""Protocols for the collaborators the engine depends on."""

from .document import DocumentListener, MentionDocument
from .search import SearchFunction

__all__ = ["DocumentListener", "MentionDocument", "SearchFunction"]
