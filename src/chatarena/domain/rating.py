"""ELO-style rating updates.

Each side of a battle is updated independently with its own K-factor, so the
two deltas of one battle are not required to cancel out.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from chatarena.domain.rules_config import DEFAULT_RULES, RatingRules


@dataclass(frozen=True, slots=True)
class RatingChange:
    """Rating deltas for both sides of one battle."""

    attacker_delta: int
    defender_delta: int


def k_factor(games_played: int, rules: RatingRules = DEFAULT_RULES.rating) -> int:
    """Return the sensitivity factor for a combatant with ``games_played`` results."""
    if games_played < rules.new_player_game_threshold:
        return rules.k_factor_new
    return rules.k_factor_experienced


def expected_score(
    self_rating: int, opponent_rating: int, rules: RatingRules = DEFAULT_RULES.rating
) -> float:
    """Probability of winning implied by the two ratings.

    E = 1 / (1 + 10^((opponent - self) / 400))
    """
    exponent = (opponent_rating - self_rating) / rules.rating_scale
    return 1.0 / (1.0 + 10**exponent)


def rating_delta(
    self_rating: int,
    opponent_rating: int,
    won: bool,
    self_games_played: int,
    rules: RatingRules = DEFAULT_RULES.rating,
) -> int:
    """Signed rating change for one side of a battle.

    Args:
        self_rating: This side's pre-battle rating
        opponent_rating: The opponent's pre-battle rating
        won: Whether this side won
        self_games_played: This side's wins + losses before the battle
        rules: ELO constants

    Returns:
        round(K * (actual - expected)), halves rounded up
    """
    k = k_factor(self_games_played, rules)
    expected = expected_score(self_rating, opponent_rating, rules)
    actual = 1.0 if won else 0.0
    return math.floor(k * (actual - expected) + 0.5)


def calculate_rating_change(
    attacker_rating: int,
    defender_rating: int,
    attacker_won: bool,
    attacker_games_played: int,
    defender_games_played: int,
    rules: RatingRules = DEFAULT_RULES.rating,
) -> RatingChange:
    """Compute both sides' deltas from their pre-battle ratings.

    A heavy favourite can round to a zero delta; battle deltas are pushed to at
    least ``min_battle_change`` in the right direction so the winner always
    gains and the loser always loses.
    """
    attacker_delta = rating_delta(
        attacker_rating, defender_rating, attacker_won, attacker_games_played, rules
    )
    defender_delta = rating_delta(
        defender_rating, attacker_rating, not attacker_won, defender_games_played, rules
    )
    return RatingChange(
        attacker_delta=_enforce_direction(attacker_delta, attacker_won, rules),
        defender_delta=_enforce_direction(defender_delta, not attacker_won, rules),
    )


def _enforce_direction(delta: int, won: bool, rules: RatingRules) -> int:
    if won:
        return max(delta, rules.min_battle_change)
    return min(delta, -rules.min_battle_change)
