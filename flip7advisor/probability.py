"""
Closed-form estimates used by the decision engine.

These are deliberate first-order approximations, not an exact multi-draw
model. All functions are pure and read their arguments only.
"""
from __future__ import annotations

from typing import Sequence

from flip7advisor.deck_engine import FACE_VALUES, UnknownPool

SECOND_CHANCE_DAMPING = 0.8
FLIP_7_DECAY = 0.7
FLIP_7_LOOKAHEAD = 3
FLIP_7_TARGET = 7


def current_points(hand: Sequence[int], has_x2: bool = False) -> int:
    total = sum(hand)
    return total * 2 if has_x2 else total


def bust_probability(hand: Sequence[int], pool: UnknownPool) -> float:
    """
    Chance that the next single draw duplicates a held face.

    Every unseen copy of a held value is a bust card. An empty pool means
    nothing can be drawn, which is treated as safe (0.0).
    """
    return pool.probability_of(hand)


def effective_bust_probability(p_bust: float, damping: float = SECOND_CHANCE_DAMPING) -> float:
    # Second Chance absorbs one duplicate, so a bust needs two.
    return p_bust * p_bust * damping


def expected_draw_value(hand: Sequence[int], pool: UnknownPool, has_x2: bool = False) -> float:
    """
    Mean face value of the next card given that it does not bust.

    Held faces are excluded from the averaging population entirely, so this
    is conditioned on survival rather than weighted by it.
    """
    if pool.total == 0:
        return 0.0

    held = set(hand)
    weighted_sum = 0
    safe_count = 0
    for v in FACE_VALUES:
        if v in held:
            continue
        cnt = pool[v]
        if cnt > 0:
            weighted_sum += v * cnt
            safe_count += cnt

    if safe_count == 0:
        return 0.0

    ev = weighted_sum / safe_count
    return ev * 2 if has_x2 else ev


def flip7_potential(
    hand: Sequence[int],
    pool: UnknownPool,
    decay: float = FLIP_7_DECAY,
    lookahead: int = FLIP_7_LOOKAHEAD,
) -> float:
    """
    Rough 0..1 factor for reaching seven unique faces.

    Returns 1.0 once nothing more is needed and 0.0 when more than
    `lookahead` cards are missing or too few distinct faces are left.
    Otherwise the share of safe cards in the pool is shrunk by
    `decay ** needed`.
    """
    needed = FLIP_7_TARGET - len(hand)
    if needed <= 0:
        return 1.0
    if needed > lookahead:
        return 0.0

    held = set(hand)
    distinct_safe = 0
    total_safe = 0
    for v in FACE_VALUES:
        if v not in held and pool[v] > 0:
            distinct_safe += 1
            total_safe += pool[v]

    if distinct_safe < needed:
        return 0.0

    base = total_safe / pool.total
    return base * (decay ** needed)
