"""
Derived result shapes.

All of these are recomputed from an (events, friends) snapshot and are
never persisted.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from .events import Polarity

THEORETICAL_RATIO = 2.0


class DebtStatus(str, Enum):
    BALANCED = "BALANCED"
    NEED_POSITIVE = "NEED_POSITIVE"
    NEED_NEGATIVE = "NEED_NEGATIVE"


@dataclass(frozen=True)
class DebtState:
    """
    Debt forecast from the 2-for-1 exchange rule.

    Fields:
        neg_debt: floor(negative count / 2)
        pos_debt: floor(positive count / 2)
        net_debt: neg_debt - pos_debt
        status: Classification of net_debt
        prediction: Human-readable forecast
    """
    neg_debt: int
    pos_debt: int
    net_debt: int
    status: DebtStatus
    prediction: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "neg_debt": self.neg_debt,
            "pos_debt": self.pos_debt,
            "net_debt": self.net_debt,
            "status": self.status.value,
            "prediction": self.prediction,
        }


@dataclass(frozen=True)
class FriendContribution:
    friend_id: str
    friend_name: str
    contribution: float
    event_ids: Tuple[str, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "friend_id": self.friend_id,
            "friend_name": self.friend_name,
            "contribution": self.contribution,
            "event_ids": list(self.event_ids),
        }


@dataclass(frozen=True)
class NetworkEffect:
    """
    Network amplification from shared positive events.

    breakdown follows friend registry order.
    """
    total: float
    breakdown: Tuple[FriendContribution, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total": self.total,
            "breakdown": [c.to_dict() for c in self.breakdown],
        }


@dataclass(frozen=True)
class RatioStatus:
    """
    Negative:positive ratio health.

    ratio may be math.inf when there are misfortunes and no good fortune.
    """
    ratio: float
    theoretical_ratio: float
    is_healthy: bool
    warning: Optional[str]

    def to_dict(self) -> Dict[str, Any]:
        # JSON has no infinity literal
        return {
            "ratio": self.ratio if self.ratio != float("inf") else None,
            "ratio_is_infinite": self.ratio == float("inf"),
            "theoretical_ratio": self.theoretical_ratio,
            "is_healthy": self.is_healthy,
            "warning": self.warning,
        }


@dataclass(frozen=True)
class StateSummary:
    direct_balance: int
    network_effect: float
    total_balance: float
    network_multiplier: float
    debt: DebtState
    ratio: RatioStatus

    def to_dict(self) -> Dict[str, Any]:
        return {
            "direct_balance": self.direct_balance,
            "network_effect": self.network_effect,
            "total_balance": self.total_balance,
            "network_multiplier": self.network_multiplier,
            "debt": self.debt.to_dict(),
            "ratio": self.ratio.to_dict(),
        }


@dataclass(frozen=True)
class BalancePoint:
    """
    One point of the running balance series.

    Fields:
        index: 0 for the origin, then 1-based event position
        direct: Cumulative direct balance
        network: Cumulative direct balance plus network boost
        polarity: Polarity of the event at this point (None at origin)
    """
    index: int
    direct: int
    network: float
    polarity: Optional[Polarity]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "index": self.index,
            "direct": self.direct,
            "network": self.network,
            "polarity": self.polarity.value if self.polarity else None,
        }
