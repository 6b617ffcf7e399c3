"""Tests for flip7advisor/decision_engine.py — HIT/STAY recommendation."""

from __future__ import annotations

import pytest

from flip7advisor.decision_engine import (
    DecisionEngine,
    Recommendation,
    StrategyResult,
    calculate_strategy,
)
from flip7advisor.deck_engine import STANDARD_DECK, unknown_pool
from flip7advisor.state import RoundState
from tests.conftest import revealed


class TestEmptyHand:
    def test_always_hit(self):
        out = calculate_strategy((), {})
        assert out.recommendation is Recommendation.HIT
        assert out.ev_stay == 0
        assert out.ev_hit == 79 / 13
        assert out.confidence == 1.0
        assert out.flip7_potential == 0.0
        assert out.danger_cards == ()

    def test_hit_even_with_reveals(self):
        out = calculate_strategy((), revealed(12, 12, 11))
        assert out.recommendation is Recommendation.HIT
        assert out.ev_stay == 0

    def test_x2(self):
        out = calculate_strategy((), {}, has_x2=True)
        assert out.ev_hit == 79 / 13 * 2

    def test_pool_reported(self):
        out = calculate_strategy((), revealed(4))
        assert out.unknown_pool == unknown_pool(revealed(4))


class TestSevenCards:
    HAND = (1, 2, 3, 4, 5, 6, 7)

    def test_stay_with_bonus(self):
        out = calculate_strategy(self.HAND, revealed(*self.HAND))
        assert out.recommendation is Recommendation.STAY
        assert out.ev_hit == 43
        assert out.ev_stay == 43
        assert out.flip7_potential == 1.0
        assert out.danger_cards == ()
        assert out.bust_probability == 0.0

    def test_x2_doubles_points_not_bonus(self):
        out = calculate_strategy(self.HAND, revealed(*self.HAND), has_x2=True)
        assert out.ev_stay == 56 + 15


class TestMiddleRegime:
    def test_single_five(self):
        out = calculate_strategy((5,), revealed(5))
        assert out.bust_probability == 4 / 78
        assert out.effective_bust_probability == out.bust_probability
        assert out.ev_stay == 5
        assert out.unknown_pool[5] == 4
        assert out.unknown_pool.total == 78
        assert out.recommendation is Recommendation.HIT
        assert out.danger_cards == (5,)

    def test_ev_hit_formula(self):
        hand = (12, 11, 10)
        counts = revealed(*hand)
        pool = unknown_pool(counts)
        out = calculate_strategy(hand, counts)
        p_bust = (11 + 10 + 9) / pool.total
        safe = [v for v in range(10)]
        draw = sum(v * STANDARD_DECK.counts[v] for v in safe) / sum(STANDARD_DECK.counts[v] for v in safe)
        # three cards held: Flip 7 is out of reach
        assert out.flip7_potential == 0.0
        assert out.ev_hit == (1 - p_bust) * (33 + draw + 0.0)
        assert out.ev_stay == 33

    def test_high_hand_says_stay(self):
        hand = (12, 11, 10, 9)
        out = calculate_strategy(hand, revealed(*hand))
        assert out.recommendation is Recommendation.STAY
        assert out.ev_hit < out.ev_stay
        assert 0.0 < out.confidence <= 1.0

    def test_second_chance_lowers_bust(self):
        hand = (12, 11, 10, 9)
        counts = revealed(*hand)
        plain = calculate_strategy(hand, counts)
        sc = calculate_strategy(hand, counts, has_second_chance=True)
        assert sc.bust_probability == plain.bust_probability
        assert sc.effective_bust_probability == plain.bust_probability * plain.bust_probability * 0.8
        assert sc.ev_hit > plain.ev_hit

    def test_danger_cards_only_with_copies_left(self):
        # 0 and 1 have a single copy each, so holding them is safe
        hand = (0, 1, 8)
        out = calculate_strategy(hand, revealed(*hand))
        assert out.danger_cards == (8,)

    def test_no_cards_left_is_safe(self):
        hand = (3,)
        out = calculate_strategy(hand, dict(enumerate(STANDARD_DECK.counts)))
        assert out.unknown_pool.total == 0
        assert out.bust_probability == 0.0
        assert out.ev_hit == 3.0
        assert out.recommendation is Recommendation.TOSS_UP
        assert out.confidence == 0.0

    def test_zero_only_hand_confidence(self):
        # stay worth nothing, hit worth something
        out = calculate_strategy((0,), revealed(0))
        assert out.ev_stay == 0
        assert out.ev_hit > 0
        assert out.confidence == 1.0
        assert out.recommendation is Recommendation.HIT

    def test_zero_only_hand_empty_pool(self):
        out = calculate_strategy((0,), dict(enumerate(STANDARD_DECK.counts)))
        assert out.ev_hit == 0.0
        assert out.ev_stay == 0.0
        assert out.recommendation is Recommendation.TOSS_UP
        assert out.confidence == 0.0

    def test_confidence_formula(self):
        hand = (6, 7)
        out = calculate_strategy(hand, revealed(*hand))
        assert out.confidence == min(1.0, abs(out.ev_hit - out.ev_stay) / out.ev_stay)


class TestX2:
    def test_scales_points_and_draw_value(self):
        hand = (4, 9)
        counts = revealed(*hand)
        plain = calculate_strategy(hand, counts)
        doubled = calculate_strategy(hand, counts, has_x2=True)
        assert doubled.ev_stay == 2 * plain.ev_stay
        assert doubled.bust_probability == plain.bust_probability

    def test_same_side_when_no_bonus_in_play(self):
        # three cards held: no bonus share, so doubling scales both EVs
        hand = (12, 11, 10)
        counts = revealed(*hand)
        plain = calculate_strategy(hand, counts)
        doubled = calculate_strategy(hand, counts, has_x2=True)
        assert doubled.ev_hit == pytest.approx(2 * plain.ev_hit)
        assert doubled.recommendation is plain.recommendation

    def test_doubling_crosses_the_boundary(self):
        # bonus share is not doubled, so x2 can flip HIT to STAY
        hand = (2, 3, 4, 5, 6, 7)
        counts = revealed(*hand)
        counts[12] = 12
        plain = calculate_strategy(hand, counts)
        doubled = calculate_strategy(hand, counts, has_x2=True)
        assert plain.recommendation is Recommendation.HIT
        assert doubled.recommendation is Recommendation.STAY


class TestDeterminism:
    def test_same_snapshot_same_result(self):
        hand = (2, 6, 11)
        counts = revealed(2, 6, 11, 11, 4, 4, 4)
        a = calculate_strategy(hand, counts, True, True)
        b = calculate_strategy(hand, counts, True, True)
        assert a == b

    def test_inputs_not_mutated(self):
        hand = [3, 7]
        counts = revealed(3, 7)
        calculate_strategy(hand, counts)
        assert hand == [3, 7]
        assert counts == {3: 1, 7: 1}


class TestDecisionEngine:
    def test_compute_from_state(self, engine):
        state = RoundState().toggle_card(5)
        assert engine.compute(state) == calculate_strategy((5,), {5: 1})

    def test_custom_damping(self):
        hand = (12, 11)
        counts = revealed(*hand)
        eng = DecisionEngine(second_chance_damping=1.0)
        out = eng.evaluate(hand, counts, has_second_chance=True)
        assert out.effective_bust_probability == out.bust_probability * out.bust_probability

    def test_custom_decay(self):
        hand = (2, 3, 4, 5, 6)
        counts = revealed(*hand)
        default = DecisionEngine().evaluate(hand, counts)
        no_decay = DecisionEngine(flip7_decay=1.0).evaluate(hand, counts)
        assert no_decay.flip7_potential > default.flip7_potential

    def test_result_is_frozen(self, engine):
        out = engine.evaluate((5,), {5: 1})
        assert isinstance(out, StrategyResult)
        with pytest.raises(AttributeError):
            out.ev_hit = 0.0  # type: ignore[misc]

    def test_recommendation_values(self):
        assert Recommendation.TOSS_UP.value == "TOSS-UP"
        assert Recommendation.HIT == "HIT"


class TestOutOfRangeInput:
    @pytest.mark.parametrize("face", [13, -1])
    def test_hand_face_rejected(self, face):
        with pytest.raises(ValueError, match="not a number card"):
            calculate_strategy((face,), {})

    def test_revealed_face_rejected(self):
        with pytest.raises(ValueError, match="not a number card"):
            calculate_strategy((5,), {5: 1, 13: 1})

    def test_empty_hand_still_checks_reveals(self):
        with pytest.raises(ValueError):
            calculate_strategy((), {20: 1})
