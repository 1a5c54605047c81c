from pydantic import BaseModel, Field

from ..core.events import MAX_MAGNITUDE, MIN_MAGNITUDE


class RatingSuggestion(BaseModel):
    rating: int = Field(ge=MIN_MAGNITUDE, le=MAX_MAGNITUDE)
    reasoning: str = ""
