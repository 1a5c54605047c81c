"""
Rating oracle: suggests a 1-20 magnitude for a described event.

A suggestion only ever pre-fills the magnitude; the caller may accept or
override it, and must cope with None.
"""

from .base import RatingOracle
from .models import RatingSuggestion
from .openai_compat import OpenAICompatRatingOracle

__all__ = ["RatingOracle", "RatingSuggestion", "OpenAICompatRatingOracle"]
