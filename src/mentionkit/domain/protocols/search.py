"""Search collaborator signature."""

from typing import Awaitable, Callable, Optional, Sequence

from mentionkit.domain.types import RawItem

__all__ = ["SearchFunction"]

SearchFunction = Callable[[str, Optional[str]], Awaitable[Sequence[RawItem]]]
"""Asynchronous lookup ``(trigger, query) -> items``."""
