"""
Immutable (events, friends) snapshot.

The container hands out a new Snapshot after every mutation; derivations
run against it and never see partial updates.
"""

import hashlib
from dataclasses import dataclass, field
from typing import Any, Dict, Tuple

from .canonical import canonical_json_bytes
from .events import Event, Friend


@dataclass(frozen=True)
class Snapshot:
    events: Tuple[Event, ...] = field(default_factory=tuple)
    friends: Tuple[Friend, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "events": [
                {
                    "id": e.id,
                    "polarity": e.polarity.value,
                    "magnitude": e.magnitude,
                    "description": e.description,
                    "created_at": e.created_at,
                    "shared_with": list(e.shared_with),
                }
                for e in self.events
            ],
            "friends": [
                {"id": f.id, "name": f.name, "coefficient": f.coefficient}
                for f in self.friends
            ],
        }

    def digest(self) -> str:
        """
        SHA-256 of the canonical snapshot.

        Equal snapshots produce equal digests; suitable as a cache key for
        derived results.
        """
        return hashlib.sha256(canonical_json_bytes(self.to_dict())).hexdigest()
