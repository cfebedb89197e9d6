"""Document change notifications emitted by document models."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .items import MentionToken


class ChangeKind(Enum):
    """Kind of document mutation."""

    INSERT = "insert"
    DELETE = "delete"
    CARET = "caret"


@dataclass(frozen=True)
class DocumentChange:
    """A single mutation reported by a document model.

    Attributes:
        kind: What happened
        removed_mention: Mention token removed by a deletion, if any
    """

    kind: ChangeKind
    removed_mention: Optional[MentionToken] = None
