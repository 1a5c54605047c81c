from abc import ABC, abstractmethod
from typing import Optional

from ..core.events import Polarity
from .models import RatingSuggestion


class RatingOracle(ABC):
    @abstractmethod
    def suggest(self, description: str, polarity: Polarity) -> Optional[RatingSuggestion]:
        """Return a suggested magnitude, or None when no suggestion is available."""
        ...

    def is_ready(self) -> bool:
        return True
