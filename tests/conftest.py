"""
Shared pytest fixtures for Flip 7 advisor tests.

Provides helpers for building revealed-count mappings from plain card lists.
"""

from __future__ import annotations

from collections import Counter

import pytest

from flip7advisor.decision_engine import DecisionEngine
from flip7advisor.deck_engine import DeckComposition


def revealed(*cards: int) -> dict:
    """Build a revealed-count mapping from the faces seen so far.

    Examples:
        >>> revealed(5, 5, 7)
        {5: 2, 7: 1}
    """
    return dict(Counter(cards))


@pytest.fixture
def deck() -> DeckComposition:
    """Return the standard 79 number-card deck."""
    return DeckComposition.standard()


@pytest.fixture
def engine() -> DecisionEngine:
    return DecisionEngine()
