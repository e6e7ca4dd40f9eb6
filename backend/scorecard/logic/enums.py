"""
String enum definitions for score card concepts.
"""

from enum import Enum


class GameType(str, Enum):
    """Kinds of score card a block can hold."""

    DARTS = "darts"
    WIZARD = "wizard"
    PHASE10 = "phase10"
    POOL = "pool"


class GameStatus(str, Enum):
    """Lifecycle status of a persisted game record."""

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
