"""
Application layer: item sources, dispatching, assembly, presentation and insertion.
"""

from .assembler import Candidate, CandidateAssembler
from .dispatcher import DispatchResult, QueryDispatcher
from .engine import EngineSnapshot, MentionEngine
from .insertion import InsertionCoordinator
from .presentation import PresentationSnapshot, PresentationStateMachine
from .sources import ItemSource, SearchItemSource, StaticItemSource, create_item_source

__all__ = [
    "Candidate",
    "CandidateAssembler",
    "DispatchResult",
    "EngineSnapshot",
    "InsertionCoordinator",
    "ItemSource",
    "MentionEngine",
    "PresentationSnapshot",
    "PresentationStateMachine",
    "QueryDispatcher",
    "SearchItemSource",
    "StaticItemSource",
    "create_item_source",
]
