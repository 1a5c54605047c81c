"""
Derivations: pure functions over an (events, friends) snapshot.

Every function here must be:
- Pure (never mutates its inputs, no I/O)
- Deterministic (same snapshot -> identical result)
- Total (never raises for well-typed input, including empty collections)
"""

import math
from typing import Dict, List, Optional, Sequence, Tuple

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

NO_GOOD_FORTUNE_WARNING = "You have many misfortunes without any good fortune yet!"
TOO_LUCKY_WARNING = "Too lucky! A misfortune is overdue."
TOO_UNLUCKY_WARNING = "Too unlucky. Sorry to hear that."
SOMETHING_GOOD_WARNING = "Something good might happen! Hang in there."
ENJOY_LUCK_WARNING = "Enjoy your luck while it lasts."


def _counts(events: Sequence[Event]) -> Tuple[int, int]:
    """Return (negative count, positive count)."""
    neg = sum(1 for e in events if e.polarity is Polarity.NEGATIVE)
    return neg, len(events) - neg


def _plural(n: int, singular: str, plural: str) -> str:
    return f"{n} {singular if n == 1 else plural}"


def compute_debt(events: Sequence[Event]) -> DebtState:
    """
    Compute the debt forecast from the 2-for-1 exchange rule.

    Every two misfortunes owe one good fortune, every two good fortunes
    owe one misfortune. Floor division means debt moves only on every
    second event of a polarity.

    Examples:
        [M, M]       -> net_debt=+1, NEED_POSITIVE
        [G, G]       -> net_debt=-1, NEED_NEGATIVE
        [M, M, G, G] -> net_debt=0,  BALANCED
    """
    neg_count, pos_count = _counts(events)
    neg_debt = neg_count // 2
    pos_debt = pos_count // 2
    net_debt = neg_debt - pos_debt

    if net_debt > 0:
        status = DebtStatus.NEED_POSITIVE
        prediction = _plural(net_debt, "good fortune", "good fortunes") + " predicted"
    elif net_debt < 0:
        status = DebtStatus.NEED_NEGATIVE
        prediction = _plural(-net_debt, "misfortune", "misfortunes") + " predicted (too lucky)"
    else:
        status = DebtStatus.BALANCED
        prediction = "Life is balanced"

    return DebtState(
        neg_debt=neg_debt,
        pos_debt=pos_debt,
        net_debt=net_debt,
        status=status,
        prediction=prediction,
    )


def compute_direct_balance(events: Sequence[Event]) -> int:
    """Sum of positive magnitudes minus sum of negative magnitudes."""
    return sum(e.signed_magnitude for e in events)


def compute_network_effect(events: Sequence[Event], friends: Sequence[Friend]) -> NetworkEffect:
    """
    Compute per-friend contribution: rho * sum(shared positive magnitudes).

    Breakdown follows friend registry order; event_ids follow log order.
    Negative events never contribute, whatever their shared_with holds.
    Ids of friends no longer registered are simply never looked up.
    """
    breakdown: List[FriendContribution] = []

    for friend in friends:
        shared = [e for e in events if e.is_positive and friend.id in e.shared_with]
        total_shared = sum(e.magnitude for e in shared)
        breakdown.append(
            FriendContribution(
                friend_id=friend.id,
                friend_name=friend.name,
                contribution=friend.coefficient * total_shared,
                event_ids=tuple(e.id for e in shared),
            )
        )

    total = sum(c.contribution for c in breakdown)
    return NetworkEffect(total=total, breakdown=tuple(breakdown))


def compute_network_multiplier(friends: Sequence[Friend]) -> float:
    """
    Theoretical maximum amplification: 1 + sum(rho).

    Example: rho = 0.2, 0.3, 0.5 -> 2.0
    """
    return 1 + sum(f.coefficient for f in friends)


def compute_ratio_status(events: Sequence[Event]) -> RatioStatus:
    """
    Assess the negative:positive ratio against the 2:1 target.

    Bands (first match wins):
        < 1.0  unhealthy, too lucky
        > 3.0  unhealthy, too unlucky
        > 2.5  healthy, something good might happen
        < 1.5  healthy, enjoy your luck
        else   healthy, no warning
    """
    if not events:
        return RatioStatus(
            ratio=0.0,
            theoretical_ratio=THEORETICAL_RATIO,
            is_healthy=True,
            warning=None,
        )

    neg_count, pos_count = _counts(events)

    if pos_count == 0:
        return RatioStatus(
            ratio=math.inf if neg_count > 0 else 0.0,
            theoretical_ratio=THEORETICAL_RATIO,
            is_healthy=neg_count <= 2,
            warning=NO_GOOD_FORTUNE_WARNING if neg_count > 2 else None,
        )

    ratio = neg_count / pos_count
    is_healthy = True
    warning: Optional[str] = None

    if ratio < 1.0:
        is_healthy, warning = False, TOO_LUCKY_WARNING
    elif ratio > 3.0:
        is_healthy, warning = False, TOO_UNLUCKY_WARNING
    elif ratio > 2.5:
        warning = SOMETHING_GOOD_WARNING
    elif ratio < 1.5:
        warning = ENJOY_LUCK_WARNING

    return RatioStatus(
        ratio=ratio,
        theoretical_ratio=THEORETICAL_RATIO,
        is_healthy=is_healthy,
        warning=warning,
    )


def compute_summary(events: Sequence[Event], friends: Sequence[Friend]) -> StateSummary:
    """Bundle every headline figure for one snapshot."""
    direct = compute_direct_balance(events)
    network = compute_network_effect(events, friends).total
    return StateSummary(
        direct_balance=direct,
        network_effect=network,
        total_balance=direct + network,
        network_multiplier=compute_network_multiplier(friends),
        debt=compute_debt(events),
        ratio=compute_ratio_status(events),
    )


def compute_balance_timeline(
    events: Sequence[Event], friends: Sequence[Friend]
) -> Tuple[BalancePoint, ...]:
    """
    Running balance after each event, in log order.

    The series starts at an origin point (index 0). The network line adds,
    for every positive event, rho * magnitude for each friend it is shared
    with who is still registered.
    """
    coefficients: Dict[str, float] = {f.id: f.coefficient for f in friends}
    direct = 0
    boost = 0.0
    points = [BalancePoint(index=0, direct=0, network=0.0, polarity=None)]

    for idx, event in enumerate(events, start=1):
        direct += event.signed_magnitude
        if event.is_positive:
            boost += sum(
                coefficients[fid] * event.magnitude
                for fid in event.shared_with
                if fid in coefficients
            )
        points.append(
            BalancePoint(index=idx, direct=direct, network=direct + boost, polarity=event.polarity)
        )

    return tuple(points)


def format_ratio(ratio: float) -> str:
    """Render a ratio; infinity is shown as a symbol, never as a number."""
    if math.isinf(ratio):
        return "∞"
    return f"{ratio:.2f}"


def format_time_ago(created_at_ms: int, now_ms: int) -> str:
    """
    Render an event timestamp relative to now.

    Examples:
        30s  -> "Just now"
        5min -> "5 min ago"
        1h   -> "1 hour ago"
        3d   -> "3 days ago"
    """
    diff = max(0, now_ms - created_at_ms)
    minutes = diff // 60_000
    hours = diff // 3_600_000
    days = diff // 86_400_000

    if minutes < 1:
        return "Just now"
    if minutes < 60:
        return f"{minutes} min ago"
    if hours < 24:
        return _plural(hours, "hour", "hours") + " ago"
    return _plural(days, "day", "days") + " ago"
