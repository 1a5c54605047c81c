"""
LifeBalance: the state container.

Owns the authoritative event log and friend registry, applies mutations,
and writes every change through to a KeyValueStore. Derived figures are
recomputed from the current snapshot on every query; nothing is cached.

Usage:
    with LifeBalance(FileKeyValueStore("~/.lifebalance")) as book:
        book.add_event(Polarity.NEGATIVE, 8, "Missed the train")
        print(book.debt().prediction)
"""

import math
import numbers
from typing import Iterable, Optional, Set, Tuple, Union

from .core.clock import Clock, SystemClock
from .core.derive import (
    compute_balance_timeline,
    compute_debt,
    compute_direct_balance,
    compute_network_effect,
    compute_network_multiplier,
    compute_ratio_status,
    compute_summary,
)
from .core.errors import CodecError, StoreError, ValidationError
from .core.events import (
    MAX_COEFFICIENT,
    MAX_MAGNITUDE,
    MIN_COEFFICIENT,
    MIN_MAGNITUDE,
    Event,
    Friend,
    Polarity,
)
from .core.ids import new_id
from .core.results import (
    BalancePoint,
    DebtState,
    DebtStatus,
    NetworkEffect,
    RatioStatus,
    StateSummary,
)
from .core.snapshot import Snapshot
from .logging_config import get_logger
from .metrics import track_mutation, track_persistence_failure
from .store.codec import decode_events, decode_friends, encode_events, encode_friends
from .store.store import KeyValueStore

EVENTS_KEY = "lifebalance_events"
FRIENDS_KEY = "lifebalance_friends"


def _validate_polarity(polarity: Union[Polarity, str]) -> Polarity:
    try:
        return Polarity(polarity)
    except ValueError:
        raise ValidationError(
            f"polarity must be one of {[p.value for p in Polarity]}, got {polarity!r}",
            field="polarity",
        ) from None


def _validate_magnitude(magnitude: int) -> int:
    if isinstance(magnitude, bool) or not isinstance(magnitude, numbers.Integral):
        raise ValidationError(
            f"magnitude must be an integer, got {type(magnitude).__name__}", field="magnitude"
        )
    if not MIN_MAGNITUDE <= magnitude <= MAX_MAGNITUDE:
        raise ValidationError(
            f"magnitude must be in [{MIN_MAGNITUDE}, {MAX_MAGNITUDE}], got {magnitude}",
            field="magnitude",
        )
    return int(magnitude)


def _validate_coefficient(coefficient: float) -> float:
    if isinstance(coefficient, bool) or not isinstance(coefficient, numbers.Real):
        raise ValidationError(
            f"coefficient must be a number, got {type(coefficient).__name__}", field="coefficient"
        )
    if math.isnan(coefficient) or not MIN_COEFFICIENT <= coefficient <= MAX_COEFFICIENT:
        raise ValidationError(
            f"coefficient must be in [{MIN_COEFFICIENT}, {MAX_COEFFICIENT}], got {coefficient}",
            field="coefficient",
        )
    return float(coefficient)


def _validate_text(value: str, field: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field} must be non-empty text", field=field)
    return value.strip()


def _validate_shared_with(shared_with: Optional[Iterable[str]]) -> Tuple[str, ...]:
    if shared_with is None:
        return ()
    if isinstance(shared_with, str):
        raise ValidationError("shared_with must be a collection of friend ids", field="shared_with")
    ids = []
    for fid in shared_with:
        if not isinstance(fid, str) or not fid:
            raise ValidationError(
                f"shared_with entries must be non-empty friend ids, got {fid!r}",
                field="shared_with",
            )
        if fid not in ids:
            ids.append(fid)
    return tuple(ids)


class LifeBalance:
    """
    State container for one user's event log and friend registry.

    Guarantees:
    - Read-after-write: every query after a mutation reflects it
    - In-memory state is authoritative; persistence is best-effort and a
      failed write is logged, never raised
    - A missing or corrupt stored collection loads as empty
    - Event/friend ids are never reused within this container
    """

    def __init__(
        self,
        store: KeyValueStore,
        clock: Optional[Clock] = None,
        events_key: str = EVENTS_KEY,
        friends_key: str = FRIENDS_KEY,
        trace_id: Optional[str] = None,
    ) -> None:
        """
        Initialize container. Nothing is read until first use.

        Args:
            store: Persistence collaborator
            clock: Time source with now_ms() (default: SystemClock)
            events_key: Storage slot for the event log
            friends_key: Storage slot for the friend registry
            trace_id: Correlation id for log records
        """
        self.store = store
        self.clock = clock or SystemClock()
        self.events_key = events_key
        self.friends_key = friends_key
        self.log = get_logger(__name__, trace_id=trace_id)

        self._events: Tuple[Event, ...] = ()
        self._friends: Tuple[Friend, ...] = ()
        self._seen_ids: Set[str] = set()
        self._last_ts = 0
        self._loaded = False

    # ----- lifecycle -----

    def load(self) -> None:
        """
        Load both collections from the store (idempotent).

        Each slot is loaded independently; a failure on one leaves that
        collection empty and does not affect the other.
        """
        if self._loaded:
            return
        self._loaded = True
        self._events = self._load_slot(self.events_key, decode_events, "load_events")
        self._friends = self._load_slot(self.friends_key, decode_friends, "load_friends")
        self._seen_ids.update(e.id for e in self._events)
        self._seen_ids.update(f.id for f in self._friends)
        self._last_ts = max((e.created_at for e in self._events), default=0)
        self.log.info(
            f"Loaded {len(self._events)} events and {len(self._friends)} friends"
        )

    def _load_slot(self, key: str, decode, operation: str) -> tuple:
        try:
            raw = self.store.get(key)
        except StoreError as e:
            self.log.error(f"Failed to read '{key}', starting empty: {e}")
            track_persistence_failure(operation)
            return ()
        if raw is None:
            return ()
        try:
            return decode(raw)
        except CodecError as e:
            self.log.error(f"Stored '{key}' is malformed, starting empty: {e}")
            track_persistence_failure(operation)
            return ()

    def close(self) -> None:
        """Flush both collections to the store."""
        if not self._loaded:
            return
        self._save_events()
        self._save_friends()

    def __enter__(self) -> "LifeBalance":
        self.load()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # ----- persistence -----

    def _save(self, key: str, value: str, operation: str) -> bool:
        try:
            self.store.set(key, value)
            return True
        except StoreError as e:
            self.log.error(f"Failed to persist '{key}', keeping in-memory state: {e}")
            track_persistence_failure(operation)
            return False

    def _save_events(self) -> bool:
        return self._save(self.events_key, encode_events(self._events), "save_events")

    def _save_friends(self) -> bool:
        return self._save(self.friends_key, encode_friends(self._friends), "save_friends")

    def _next_ts(self) -> int:
        self._last_ts = max(self.clock.now_ms(), self._last_ts)
        return self._last_ts

    def _claim_id(self, prefix: str, ts: int) -> str:
        new = new_id(prefix, ts, taken=self._seen_ids)
        self._seen_ids.add(new)
        return new

    # ----- mutations -----

    def add_event(
        self,
        polarity: Union[Polarity, str],
        magnitude: int,
        description: str,
        shared_with: Optional[Iterable[str]] = None,
    ) -> Event:
        """
        Append a new event to the log.

        Sharing applies to positive events only; shared_with is dropped for
        negative events. Duplicate friend ids collapse.

        Raises:
            ValidationError: If any input violates its constraint
        """
        self.load()
        polarity = _validate_polarity(polarity)
        magnitude = _validate_magnitude(magnitude)
        description = _validate_text(description, "description")
        shared = _validate_shared_with(shared_with) if polarity is Polarity.POSITIVE else ()

        debt = compute_debt(self._events)
        if debt.status is DebtStatus.NEED_POSITIVE and polarity is Polarity.NEGATIVE:
            self.log.warning(
                f"Adding a misfortune while good fortune is predicted (net debt +{debt.net_debt})"
            )
        elif debt.status is DebtStatus.NEED_NEGATIVE and polarity is Polarity.POSITIVE:
            self.log.warning(
                f"Adding a good fortune while misfortune is predicted (net debt {debt.net_debt})"
            )

        ts = self._next_ts()
        event = Event(
            id=self._claim_id("event", ts),
            polarity=polarity,
            magnitude=magnitude,
            description=description,
            created_at=ts,
            shared_with=shared,
        )
        self._events = self._events + (event,)
        track_mutation("add_event")
        self._save_events()
        return event

    def add_friend(self, name: str, coefficient: float) -> Friend:
        """
        Append a new friend to the registry.

        Raises:
            ValidationError: If name is empty or coefficient is out of range
        """
        self.load()
        name = _validate_text(name, "name")
        coefficient = _validate_coefficient(coefficient)

        friend = Friend(
            id=self._claim_id("friend", self._next_ts()),
            name=name,
            coefficient=coefficient,
        )
        self._friends = self._friends + (friend,)
        track_mutation("add_friend")
        self._save_friends()
        return friend

    def remove_event(self, event_id: str) -> bool:
        """
        Remove an event by id.

        Returns:
            True if an event was removed, False if the id was absent
        """
        self.load()
        remaining = tuple(e for e in self._events if e.id != event_id)
        if len(remaining) == len(self._events):
            return False
        self._events = remaining
        track_mutation("remove_event")
        self._save_events()
        return True

    def remove_friend(self, friend_id: str) -> bool:
        """
        Remove a friend by id.

        Past events keep the id in shared_with; derivations ignore it.

        Returns:
            True if a friend was removed, False if the id was absent
        """
        self.load()
        remaining = tuple(f for f in self._friends if f.id != friend_id)
        if len(remaining) == len(self._friends):
            return False
        self._friends = remaining
        track_mutation("remove_friend")
        self._save_friends()
        return True

    def clear_all(self) -> None:
        """
        Empty both collections and erase both storage slots.

        Confirmation is the caller's responsibility.
        """
        self.load()
        self._events = ()
        self._friends = ()
        track_mutation("clear_all")
        for key in (self.events_key, self.friends_key):
            try:
                self.store.delete(key)
            except StoreError as e:
                self.log.error(f"Failed to erase '{key}': {e}")
                track_persistence_failure("clear_all")
        self.log.info("Cleared all events and friends")

    # ----- reads -----

    @property
    def events(self) -> Tuple[Event, ...]:
        self.load()
        return self._events

    @property
    def friends(self) -> Tuple[Friend, ...]:
        self.load()
        return self._friends

    def get_event(self, event_id: str) -> Optional[Event]:
        return next((e for e in self.events if e.id == event_id), None)

    def get_friend(self, friend_id: str) -> Optional[Friend]:
        return next((f for f in self.friends if f.id == friend_id), None)

    def snapshot(self) -> Snapshot:
        self.load()
        return Snapshot(events=self._events, friends=self._friends)

    # ----- derived figures (recomputed per call) -----

    def debt(self) -> DebtState:
        return compute_debt(self.events)

    def direct_balance(self) -> int:
        return compute_direct_balance(self.events)

    def network_effect(self) -> NetworkEffect:
        snap = self.snapshot()
        return compute_network_effect(snap.events, snap.friends)

    def network_multiplier(self) -> float:
        return compute_network_multiplier(self.friends)

    def ratio_status(self) -> RatioStatus:
        return compute_ratio_status(self.events)

    def summary(self) -> StateSummary:
        snap = self.snapshot()
        return compute_summary(snap.events, snap.friends)

    def timeline(self) -> Tuple[BalancePoint, ...]:
        snap = self.snapshot()
        return compute_balance_timeline(snap.events, snap.friends)
