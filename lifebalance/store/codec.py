"""
Record codec for stored collections.

Each slot holds a JSON array of records in log/registry order. Field names
match the original stored format:

    event:  {"id", "type", "value", "description", "timestamp", "sharedWith"}
    friend: {"id", "name", "relationshipCoefficient"}

Decoding validates shape and entity bounds with pydantic and rejects
duplicate ids; anything that does not match raises CodecError so the caller
can fall back to an empty collection.
"""

import json
from typing import List, Sequence, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError as PydanticValidationError

from ..core.canonical import canonical_json_str
from ..core.errors import CodecError
from ..core.events import (
    MAX_COEFFICIENT,
    MAX_MAGNITUDE,
    MIN_COEFFICIENT,
    MIN_MAGNITUDE,
    Event,
    Friend,
    Polarity,
)


class EventRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(min_length=1)
    type: Polarity
    value: int = Field(ge=MIN_MAGNITUDE, le=MAX_MAGNITUDE)
    description: str = Field(min_length=1)
    timestamp: int
    shared_with: List[str] = Field(default_factory=list, alias="sharedWith")


class FriendRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    relationship_coefficient: float = Field(
        alias="relationshipCoefficient",
        ge=MIN_COEFFICIENT,
        le=MAX_COEFFICIENT,
        allow_inf_nan=False,
    )


def _event_to_record(event: Event) -> dict:
    return {
        "id": event.id,
        "type": event.polarity.value,
        "value": event.magnitude,
        "description": event.description,
        "timestamp": event.created_at,
        "sharedWith": list(event.shared_with),
    }


def _friend_to_record(friend: Friend) -> dict:
    return {
        "id": friend.id,
        "name": friend.name,
        "relationshipCoefficient": friend.coefficient,
    }


def _load_array(raw: str) -> list:
    try:
        data = json.loads(raw)
    except (TypeError, json.JSONDecodeError) as e:
        raise CodecError(f"stored data is not valid JSON: {e}") from e
    if not isinstance(data, list):
        raise CodecError(f"stored data must be a JSON array, got {type(data).__name__}")
    return data


def _check_unique_ids(records: Sequence[BaseModel], kind: str) -> None:
    seen = set()
    for r in records:
        if r.id in seen:
            raise CodecError(f"duplicate {kind} id: {r.id!r}")
        seen.add(r.id)


def encode_events(events: Sequence[Event]) -> str:
    """Serialize the event log (order preserved)."""
    return canonical_json_str([_event_to_record(e) for e in events])


def encode_friends(friends: Sequence[Friend]) -> str:
    """Serialize the friend registry (order preserved)."""
    return canonical_json_str([_friend_to_record(f) for f in friends])


def decode_events(raw: str) -> Tuple[Event, ...]:
    """
    Deserialize an event log.

    Raises:
        CodecError: If the payload is not an array of valid event records
            with unique ids
    """
    try:
        records = [EventRecord.model_validate(item) for item in _load_array(raw)]
    except PydanticValidationError as e:
        raise CodecError(f"malformed event record: {e}") from e
    _check_unique_ids(records, "event")

    return tuple(
        Event(
            id=r.id,
            polarity=r.type,
            magnitude=r.value,
            description=r.description,
            created_at=r.timestamp,
            shared_with=tuple(r.shared_with),
        )
        for r in records
    )


def decode_friends(raw: str) -> Tuple[Friend, ...]:
    """
    Deserialize a friend registry.

    Raises:
        CodecError: If the payload is not an array of valid friend records
            with unique ids
    """
    try:
        records = [FriendRecord.model_validate(item) for item in _load_array(raw)]
    except PydanticValidationError as e:
        raise CodecError(f"malformed friend record: {e}") from e
    _check_unique_ids(records, "friend")

    return tuple(
        Friend(id=r.id, name=r.name, coefficient=r.relationship_coefficient)
        for r in records
    )
