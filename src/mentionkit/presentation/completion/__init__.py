"""
Completion strategy utilities for the mention autocomplete widget.
"""

from .mention_completion import CompletionRequest, MentionCompletionStrategy
from .applier import ApplyResult, CompletionApplier, compute_search_string, should_show_dropdown

__all__ = [
    "ApplyResult",
    "CompletionApplier",
    "CompletionRequest",
    "MentionCompletionStrategy",
    "compute_search_string",
    "should_show_dropdown",
]
