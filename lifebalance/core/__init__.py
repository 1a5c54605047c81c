"""
Core life balance primitives.

This module provides the foundational abstractions:
- Event / Friend: Immutable entity records
- Snapshot: Immutable (events, friends) pair
- Derive: Pure derivation functions over a snapshot
- Canonical: Deterministic serialization
- Clock: Injectable time source
- IDs: Identifier generation
"""

from .events import Event, Friend, Polarity
from .results import (
    THEORETICAL_RATIO,
    BalancePoint,
    DebtState,
    DebtStatus,
    FriendContribution,
    NetworkEffect,
    RatioStatus,
    StateSummary,
)
from .derive import (
    compute_balance_timeline,
    compute_debt,
    compute_direct_balance,
    compute_network_effect,
    compute_network_multiplier,
    compute_ratio_status,
    compute_summary,
    format_ratio,
    format_time_ago,
)
from .snapshot import Snapshot
from .canonical import canonicalize, canonical_json_bytes, canonical_json_str
from .clock import Clock, ManualClock, SystemClock
from .ids import new_id
from .errors import CodecError, LifeBalanceError, OracleError, StoreError, ValidationError

__all__ = [
    "Event",
    "Friend",
    "Polarity",
    "THEORETICAL_RATIO",
    "BalancePoint",
    "DebtState",
    "DebtStatus",
    "FriendContribution",
    "NetworkEffect",
    "RatioStatus",
    "StateSummary",
    "compute_balance_timeline",
    "compute_debt",
    "compute_direct_balance",
    "compute_network_effect",
    "compute_network_multiplier",
    "compute_ratio_status",
    "compute_summary",
    "format_ratio",
    "format_time_ago",
    "Snapshot",
    "canonicalize",
    "canonical_json_bytes",
    "canonical_json_str",
    "Clock",
    "ManualClock",
    "SystemClock",
    "new_id",
    "CodecError",
    "LifeBalanceError",
    "OracleError",
    "StoreError",
    "ValidationError",
]
