"""Error taxonomy for the mention engine.

All errors derive from ``Exception`` rather than ``ValueError`` so they pass
through pydantic validators unchanged instead of being folded into a
``ValidationError``.
"""

from __future__ import annotations


class MentionError(Exception):
    """Base class for every error raised by mentionkit."""


class ConfigurationError(MentionError):
    """Invalid engine configuration detected at construction time."""


class ConfigurationConflict(ConfigurationError):
    """Mutually exclusive options were supplied together.

    Raised when menu-mode and combobox-mode options are mixed, or when both
    (or neither) of static items and a search function are given.
    """


class InvalidBoundaryConfiguration(ConfigurationError):
    """Triggers, punctuation or enclosure cannot produce unambiguous boundaries."""


class InvalidMentionItem(MentionError):
    """A raw item could not be normalized into a ``MentionItem``."""


class ModeMismatchError(MentionError):
    """An operation was invoked that only exists in the other presentation mode."""


class SearchFailure(MentionError):
    """A search lookup failed.

    Never raised out of the engine; carried on the ``SearchFailed`` event.
    """

    def __init__(self, trigger: str, query: str | None, cause: BaseException):
        super().__init__(f"Search for {trigger!r} with query {query!r} failed: {cause}")
        self.trigger = trigger
        self.query = query
        self.cause = cause
