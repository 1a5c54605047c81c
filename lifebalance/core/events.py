"""
Entity model: life events and friends.

Entities are immutable records. They are created only through the
LifeBalance container, which assigns ids and timestamps.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Tuple

MIN_MAGNITUDE = 1
MAX_MAGNITUDE = 20
MIN_COEFFICIENT = 0.1
MAX_COEFFICIENT = 1.0


class Polarity(str, Enum):
    """
    Event polarity.

    Values are the domain letters used in storage:
        M: misfortune (negative)
        G: good fortune (positive)
    """
    NEGATIVE = "M"
    POSITIVE = "G"

    @property
    def label(self) -> str:
        return "misfortune" if self is Polarity.NEGATIVE else "good fortune"


@dataclass(frozen=True)
class Event:
    """
    Immutable life event.

    Fields:
        id: Opaque unique identifier (assigned by the container)
        polarity: NEGATIVE or POSITIVE
        magnitude: Impact on a 1-20 scale
        description: Non-empty user text
        created_at: Epoch milliseconds, display only
        shared_with: Friend ids; always empty for NEGATIVE events
    """
    id: str
    polarity: Polarity
    magnitude: int
    description: str
    created_at: int
    shared_with: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def is_positive(self) -> bool:
        return self.polarity is Polarity.POSITIVE

    @property
    def signed_magnitude(self) -> int:
        """Magnitude with sign applied (negative events subtract)."""
        return self.magnitude if self.is_positive else -self.magnitude


@dataclass(frozen=True)
class Friend:
    """
    Immutable friend record.

    Fields:
        id: Opaque unique identifier (assigned by the container)
        name: Display name
        coefficient: Relationship strength rho in [0.1, 1.0]
    """
    id: str
    name: str
    coefficient: float
