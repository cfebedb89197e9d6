"""
mentionkit - trigger-based mention detection, suggestion and insertion.
"""

from mentionkit.application import MentionEngine
from mentionkit.core.config import MentionsConfig
from mentionkit.core.errors import (
    ConfigurationConflict,
    ConfigurationError,
    InvalidBoundaryConfiguration,
    InvalidMentionItem,
    MentionError,
    ModeMismatchError,
    SearchFailure,
)
from mentionkit.domain.events import EventBus
from mentionkit.infrastructure.document import InMemoryDocument

__version__ = "0.1.0"

__all__ = [
    "ConfigurationConflict",
    "ConfigurationError",
    "EventBus",
    "InMemoryDocument",
    "InvalidBoundaryConfiguration",
    "InvalidMentionItem",
    "MentionEngine",
    "MentionError",
    "MentionsConfig",
    "ModeMismatchError",
    "SearchFailure",
]
