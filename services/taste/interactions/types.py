"""
Passive interaction types.

An Interaction keeps a snapshot of the content vector as it was mapped at the
moment of the interaction. Replays always use that snapshot; content is never
re-mapped, so a change to the mapping rules cannot rewrite history.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from services.taste.vector.model import TasteVector


class InteractionAction(str, Enum):
    THUMBS_UP = "thumbs_up"
    THUMBS_DOWN = "thumbs_down"
    WATCHLIST_ADD = "watchlist_add"
    WATCHED = "watched"
    REMOVED = "removed"


NEGATIVE_ACTIONS: frozenset[InteractionAction] = frozenset({
    InteractionAction.THUMBS_DOWN,
    InteractionAction.REMOVED,
})


@dataclass(frozen=True)
class Interaction:
    content_id: int
    """TMDb id of the title."""
    content_type: str
    """'movie' or 'tv'."""
    action: InteractionAction
    timestamp: datetime
    content_vector: TasteVector

    @property
    def is_negative(self) -> bool:
        return self.action in NEGATIVE_ACTIONS
