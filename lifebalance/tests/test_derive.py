"""
Tests for derivations.

Critical: derived figures must depend only on the (events, friends)
snapshot and never mutate it.
"""

import itertools
import math

from lifebalance.core.derive import (
    ENJOY_LUCK_WARNING,
    NO_GOOD_FORTUNE_WARNING,
    SOMETHING_GOOD_WARNING,
    TOO_LUCKY_WARNING,
    TOO_UNLUCKY_WARNING,
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
from lifebalance.core.events import Event, Friend, Polarity
from lifebalance.core.results import DebtStatus

M = Polarity.NEGATIVE
G = Polarity.POSITIVE


def _events(*items):
    """Build events from (polarity, magnitude[, shared_with]) tuples."""
    out = []
    for idx, item in enumerate(items):
        polarity, magnitude = item[0], item[1]
        shared = tuple(item[2]) if len(item) > 2 else ()
        out.append(
            Event(
                id=f"event_{idx}",
                polarity=polarity,
                magnitude=magnitude,
                description=f"e{idx}",
                created_at=idx,
                shared_with=shared,
            )
        )
    return tuple(out)


def _debt_of(*polarities):
    return compute_debt(_events(*[(p, 1) for p in polarities]))


def test_debt_empty_is_balanced():
    debt = compute_debt(())

    assert debt.neg_debt == 0
    assert debt.pos_debt == 0
    assert debt.net_debt == 0
    assert debt.status is DebtStatus.BALANCED
    assert debt.prediction == "Life is balanced"


def test_debt_single_event_does_not_move():
    """Floor division: one event of a polarity owes nothing yet."""
    assert _debt_of(M).status is DebtStatus.BALANCED
    assert _debt_of(G).status is DebtStatus.BALANCED


def test_debt_two_misfortunes_owe_one_good_fortune():
    debt = _debt_of(M, M)

    assert debt.net_debt == 1
    assert debt.status is DebtStatus.NEED_POSITIVE
    assert debt.prediction == "1 good fortune predicted"


def test_debt_two_good_fortunes_owe_one_misfortune():
    debt = _debt_of(G, G)

    assert debt.net_debt == -1
    assert debt.status is DebtStatus.NEED_NEGATIVE
    assert debt.prediction == "1 misfortune predicted (too lucky)"


def test_debt_plural_predictions():
    assert _debt_of(M, M, M, M, M).prediction == "2 good fortunes predicted"
    assert _debt_of(G, G, G, G).prediction == "2 misfortunes predicted (too lucky)"


def test_debt_pairs_cancel():
    debt = _debt_of(M, M, G, G)

    assert debt.neg_debt == 1
    assert debt.pos_debt == 1
    assert debt.status is DebtStatus.BALANCED


def test_debt_ignores_magnitude():
    light = compute_debt(_events((M, 1), (M, 1)))
    heavy = compute_debt(_events((M, 20), (M, 20)))

    assert light == heavy


def test_direct_balance():
    events = _events((M, 5), (G, 12), (M, 3))

    assert compute_direct_balance(events) == 4
    assert compute_direct_balance(()) == 0


def test_network_effect_counts_shared_positive_only():
    """Negative events never contribute, even with ids in shared_with."""
    friends = (Friend(id="f1", name="Aussy", coefficient=0.5),)
    misfortune = Event(
        id="event_x", polarity=M, magnitude=10, description="x", created_at=0, shared_with=("f1",)
    )
    events = _events((G, 10, ["f1"]), (G, 4)) + (misfortune,)

    effect = compute_network_effect(events, friends)

    assert effect.total == 5.0
    assert len(effect.breakdown) == 1
    assert effect.breakdown[0].friend_name == "Aussy"
    assert effect.breakdown[0].event_ids == ("event_0",)


def test_network_effect_breakdown_follows_registry_order():
    friends = (
        Friend(id="f2", name="Bea", coefficient=0.2),
        Friend(id="f1", name="Aussy", coefficient=1.0),
        Friend(id="f3", name="Cid", coefficient=0.3),
    )
    events = _events((G, 10, ["f1", "f2"]), (G, 6, ["f1"]))

    effect = compute_network_effect(events, friends)

    assert [c.friend_id for c in effect.breakdown] == ["f2", "f1", "f3"]
    assert math.isclose(effect.breakdown[0].contribution, 2.0)
    assert math.isclose(effect.breakdown[1].contribution, 16.0)
    assert effect.breakdown[2].contribution == 0
    assert effect.breakdown[2].event_ids == ()
    assert math.isclose(effect.total, 18.0)


def test_network_effect_ignores_removed_friend_ids():
    events = _events((G, 10, ["gone", "f1"]))
    friends = (Friend(id="f1", name="Aussy", coefficient=0.5),)

    effect = compute_network_effect(events, friends)

    assert effect.total == 5.0


def test_network_effect_empty():
    effect = compute_network_effect((), ())

    assert effect.total == 0
    assert effect.breakdown == ()


def test_network_multiplier():
    friends = (
        Friend(id="a", name="A", coefficient=0.2),
        Friend(id="b", name="B", coefficient=0.3),
        Friend(id="c", name="C", coefficient=0.5),
    )

    assert math.isclose(compute_network_multiplier(friends), 2.0)
    assert compute_network_multiplier(()) == 1


def test_ratio_empty_is_healthy_zero():
    status = compute_ratio_status(())

    assert status.ratio == 0.0
    assert status.theoretical_ratio == 2.0
    assert status.is_healthy
    assert status.warning is None


def test_ratio_no_good_fortune_up_to_two_misfortunes_is_healthy():
    status = compute_ratio_status(_events((M, 3), (M, 4)))

    assert math.isinf(status.ratio)
    assert status.is_healthy
    assert status.warning is None


def test_ratio_no_good_fortune_many_misfortunes_warns():
    status = compute_ratio_status(_events((M, 3), (M, 4), (M, 5)))

    assert math.isinf(status.ratio)
    assert not status.is_healthy
    assert status.warning == NO_GOOD_FORTUNE_WARNING


def test_ratio_bands():
    """Each band boundary maps to its health flag and warning."""
    cases = [
        # (negatives, positives, healthy, warning)
        (0, 1, False, TOO_LUCKY_WARNING),
        (1, 2, False, TOO_LUCKY_WARNING),
        (1, 1, True, ENJOY_LUCK_WARNING),
        (3, 2, True, None),
        (2, 1, True, None),
        (5, 2, True, None),
        (8, 3, True, SOMETHING_GOOD_WARNING),
        (3, 1, True, SOMETHING_GOOD_WARNING),
        (7, 2, False, TOO_UNLUCKY_WARNING),
    ]
    for neg, pos, healthy, warning in cases:
        events = _events(*([(M, 1)] * neg + [(G, 1)] * pos))
        status = compute_ratio_status(events)

        assert math.isclose(status.ratio, neg / pos), (neg, pos)
        assert status.is_healthy is healthy, (neg, pos)
        assert status.warning == warning, (neg, pos)


def test_ratio_to_dict_has_no_infinity():
    data = compute_ratio_status(_events((M, 1))).to_dict()

    assert data["ratio"] is None
    assert data["ratio_is_infinite"] is True


def test_order_independence():
    """Every derivation except the timeline ignores log order."""
    events = _events((M, 5), (G, 8, ["f1"]), (M, 2), (G, 3, ["f1", "f2"]))
    friends = (
        Friend(id="f1", name="A", coefficient=0.4),
        Friend(id="f2", name="B", coefficient=0.9),
    )
    expected = compute_summary(events, friends)

    for perm in itertools.permutations(events):
        summary = compute_summary(perm, friends)
        assert summary.debt == expected.debt
        assert summary.direct_balance == expected.direct_balance
        assert math.isclose(summary.network_effect, expected.network_effect)
        assert summary.ratio == expected.ratio


def test_derivations_do_not_mutate_inputs():
    events = list(_events((M, 5), (G, 8, ["f1"])))
    friends = [Friend(id="f1", name="A", coefficient=0.4)]
    events_before, friends_before = list(events), list(friends)

    compute_summary(events, friends)
    compute_balance_timeline(events, friends)

    assert events == events_before
    assert friends == friends_before


def test_summary_total_is_direct_plus_network():
    events = _events((M, 5), (G, 10, ["f1"]))
    friends = (Friend(id="f1", name="A", coefficient=0.5),)

    summary = compute_summary(events, friends)

    assert summary.direct_balance == 5
    assert summary.network_effect == 5.0
    assert summary.total_balance == 10.0
    assert summary.network_multiplier == 1.5


def test_timeline_running_balance():
    events = _events((M, 5), (G, 10, ["f1"]), (M, 2))
    friends = (Friend(id="f1", name="A", coefficient=0.5),)

    points = compute_balance_timeline(events, friends)

    assert [p.index for p in points] == [0, 1, 2, 3]
    assert [p.direct for p in points] == [0, -5, 5, 3]
    assert [p.network for p in points] == [0.0, -5.0, 10.0, 8.0]
    assert points[0].polarity is None
    assert points[2].polarity is G


def test_timeline_empty_has_origin_only():
    points = compute_balance_timeline((), ())

    assert len(points) == 1
    assert points[0].direct == 0


def test_format_ratio():
    assert format_ratio(math.inf) == "∞"
    assert format_ratio(2.0) == "2.00"
    assert format_ratio(1 / 3) == "0.33"


def test_format_time_ago():
    now = 10 * 86_400_000

    assert format_time_ago(now - 30_000, now) == "Just now"
    assert format_time_ago(now + 5_000, now) == "Just now"
    assert format_time_ago(now - 5 * 60_000, now) == "5 min ago"
    assert format_time_ago(now - 3_600_000, now) == "1 hour ago"
    assert format_time_ago(now - 5 * 3_600_000, now) == "5 hours ago"
    assert format_time_ago(now - 86_400_000, now) == "1 day ago"
    assert format_time_ago(now - 3 * 86_400_000, now) == "3 days ago"
