"""
Utility functions for ELO rating calculations.

This module provides pure mathematical functions for calculating and updating ELO ratings.
These functions are separated from database operations for easier testing and reuse.
"""

import math
from enum import Enum
from typing import Tuple

from ggbench.constants import WINNER

K_FACTOR = 32.0


class Outcome(Enum):
    """Possible outcomes of a comparison, valued as the score of side A."""

    A_WINS = 1.0
    B_WINS = 0.0
    TIE = 0.5

    @property
    def score_a(self) -> float:
        return self.value

    @property
    def score_b(self) -> float:
        return 1.0 - self.value

    @classmethod
    def from_winner(cls, winner: WINNER) -> "Outcome":
        return {
            WINNER.A: cls.A_WINS,
            WINNER.B: cls.B_WINS,
            WINNER.TIE: cls.TIE,
        }[winner]


def expected_score(rating_a: float, rating_b: float) -> float:
    """
    Calculate expected score (winning probability) for player A when facing player B.

    Args:
        rating_a: ELO rating of player A
        rating_b: ELO rating of player B

    Returns:
        Expected probability of player A winning against player B
    """
    return 1.0 / (1.0 + math.pow(10, (rating_b - rating_a) / 400.0))


def calculate_new_rating(
    rating: float, expected: float, actual: float, k_factor: float
) -> float:
    """
    Calculate new ELO rating based on expected and actual outcome.

    Args:
        rating: Current ELO rating
        expected: Expected score (probability of winning)
        actual: Actual outcome (1.0 for win, 0.0 for loss, 0.5 for tie)
        k_factor: K-factor determining the maximum possible adjustment

    Returns:
        New ELO rating
    """
    return rating + k_factor * (actual - expected)


def round_rating(rating: float) -> int:
    """Round half up, so 1016.5 becomes 1017 and -0.5 becomes 0."""
    return int(math.floor(rating + 0.5))


def calculate_pairwise_ratings(
    rating_a: float,
    rating_b: float,
    outcome: Outcome,
    k_factor: float = K_FACTOR,
) -> Tuple[float, float]:
    """
    Calculate unrounded ratings for both sides of a single comparison.

    Args:
        rating_a: Current ELO rating of side A
        rating_b: Current ELO rating of side B
        outcome: Result of the comparison
        k_factor: K-factor determining the maximum possible adjustment

    Returns:
        Tuple of (new_rating_a, new_rating_b)
    """
    expected_a = expected_score(rating_a, rating_b)
    expected_b = expected_score(rating_b, rating_a)

    return (
        calculate_new_rating(rating_a, expected_a, outcome.score_a, k_factor),
        calculate_new_rating(rating_b, expected_b, outcome.score_b, k_factor),
    )


def apply_result(
    rating_a: float,
    rating_b: float,
    outcome: Outcome,
    k_factor: float = K_FACTOR,
) -> Tuple[int, int]:
    """Calculate the stored (rounded) ratings after a comparison."""
    new_rating_a, new_rating_b = calculate_pairwise_ratings(
        rating_a, rating_b, outcome, k_factor
    )
    return round_rating(new_rating_a), round_rating(new_rating_b)
