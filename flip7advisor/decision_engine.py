from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Sequence, Tuple

from flip7advisor.deck_engine import FLIP_7_BONUS, DeckComposition, UnknownPool
from flip7advisor.probability import (
    FLIP_7_DECAY,
    FLIP_7_LOOKAHEAD,
    FLIP_7_TARGET,
    SECOND_CHANCE_DAMPING,
    bust_probability,
    current_points,
    effective_bust_probability,
    expected_draw_value,
    flip7_potential,
)
from flip7advisor.state import RoundState


class Recommendation(str, Enum):
    HIT = "HIT"
    STAY = "STAY"
    TOSS_UP = "TOSS-UP"


@dataclass(frozen=True)
class StrategyResult:
    recommendation: Recommendation
    bust_probability: float
    effective_bust_probability: float
    ev_hit: float
    ev_stay: float
    confidence: float
    flip7_potential: float
    danger_cards: Tuple[int, ...]
    unknown_pool: UnknownPool


class DecisionEngine:
    """
    HIT/STAY advice from the cards seen so far in the round.

    Outputs (see StrategyResult):
      - bust_probability: chance the next draw duplicates a held number
      - ev_hit: expected bank after one more draw, including a share of
        the Flip 7 bonus
      - ev_stay: bank if you stop now

    Notes:
      - Only number cards are modelled; action/modifier cards never bust.
      - Second Chance: bust needs two duplicates, approximated as
        p * p * second_chance_damping.
      - Hands of seven or more cards already hold the bonus and always STAY.
    """

    def __init__(
        self,
        composition: DeckComposition | None = None,
        second_chance_damping: float = SECOND_CHANCE_DAMPING,
        flip7_decay: float = FLIP_7_DECAY,
        flip7_lookahead: int = FLIP_7_LOOKAHEAD,
    ) -> None:
        self.base = composition or DeckComposition.standard()
        self.second_chance_damping = second_chance_damping
        self.flip7_decay = flip7_decay
        self.flip7_lookahead = flip7_lookahead

    def compute(self, state: RoundState) -> StrategyResult:
        return self.evaluate(
            state.hand,
            state.revealed_counts(),
            has_second_chance=state.has_second_chance,
            has_x2=state.has_x2,
        )

    def evaluate(
        self,
        hand: Sequence[int],
        revealed_counts: Mapping[int, int],
        has_second_chance: bool = False,
        has_x2: bool = False,
    ) -> StrategyResult:
        hand = tuple(hand)
        for v in hand:
            if not 0 <= v < len(self.base.counts):
                raise ValueError(f"Card {v} is not a number card (0-{len(self.base.counts) - 1})")

        pool = self.base.unknown_pool(revealed_counts)
        multiplier = 2 if has_x2 else 1

        if not hand:
            return StrategyResult(
                recommendation=Recommendation.HIT,
                bust_probability=0.0,
                effective_bust_probability=0.0,
                ev_hit=self.base.total_cards() / len(self.base.counts) * multiplier,
                ev_stay=0.0,
                confidence=1.0,
                flip7_potential=0.0,
                danger_cards=(),
                unknown_pool=pool,
            )

        if len(hand) >= FLIP_7_TARGET:
            banked = float(current_points(hand, has_x2) + FLIP_7_BONUS)
            return StrategyResult(
                recommendation=Recommendation.STAY,
                bust_probability=0.0,
                effective_bust_probability=0.0,
                ev_hit=banked,
                ev_stay=banked,
                confidence=1.0,
                flip7_potential=1.0,
                danger_cards=(),
                unknown_pool=pool,
            )

        points = current_points(hand, has_x2)
        p_bust = bust_probability(hand, pool)
        if has_second_chance:
            effective = effective_bust_probability(p_bust, self.second_chance_damping)
        else:
            effective = p_bust

        draw_value = expected_draw_value(hand, pool, has_x2)
        potential = flip7_potential(hand, pool, self.flip7_decay, self.flip7_lookahead)
        bonus_share = potential * FLIP_7_BONUS

        p_not_bust = 1 - effective
        ev_hit = p_not_bust * (points + draw_value + bonus_share)
        ev_stay = float(points)

        # exact comparison, no tolerance
        if ev_hit > ev_stay:
            rec = Recommendation.HIT
        elif ev_hit < ev_stay:
            rec = Recommendation.STAY
        else:
            rec = Recommendation.TOSS_UP

        if ev_stay > 0:
            confidence = min(1.0, abs(ev_hit - ev_stay) / ev_stay)
        else:
            confidence = 1.0 if ev_hit > 0 else 0.0

        danger = tuple(v for v in hand if pool[v] > 0)

        return StrategyResult(
            recommendation=rec,
            bust_probability=p_bust,
            effective_bust_probability=effective,
            ev_hit=ev_hit,
            ev_stay=ev_stay,
            confidence=confidence,
            flip7_potential=potential,
            danger_cards=danger,
            unknown_pool=pool,
        )


_DEFAULT_ENGINE = DecisionEngine()


def calculate_strategy(
    hand: Sequence[int],
    revealed_counts: Mapping[int, int],
    has_second_chance: bool = False,
    has_x2: bool = False,
) -> StrategyResult:
    return _DEFAULT_ENGINE.evaluate(hand, revealed_counts, has_second_chance, has_x2)
