"""Widgets for the mention demo TUI."""

from .autocomplete import MentionAutoComplete

__all__ = ["MentionAutoComplete"]
