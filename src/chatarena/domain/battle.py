"""Battle resolution rules.

Blends the text score of each side with the rating gap, a little noise and an
excellence bonus into a final score, then picks the winner, the rating deltas
and the narrative. Nothing here touches storage; the service layer applies the
outcome.
"""

from __future__ import annotations

import random
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from chatarena.domain.enums import Side
from chatarena.domain.models import CombatantSnapshot
from chatarena.domain.narrative import Narrative, build_narrative, detail_level_for
from chatarena.domain.rating import RatingChange, calculate_rating_change
from chatarena.domain.rules_config import DEFAULT_RULES, BattleRules, RulesConfig
from chatarena.domain.scoring import ScoreVector, score_text
from chatarena.utils.rng import system_rng, uniform_noise

Scorer = Callable[[str], ScoreVector]


@dataclass(slots=True)
class SideScore:
    """How one side's final score was assembled."""

    vector: ScoreVector
    base: float
    rating_adjustment: float
    noise: float
    excellence_bonus: float
    final: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "vector": self.vector.to_dict(),
            "base": round(self.base, 2),
            "rating_adjustment": round(self.rating_adjustment, 2),
            "noise": round(self.noise, 2),
            "excellence_bonus": self.excellence_bonus,
            "final": self.final,
        }


@dataclass(slots=True)
class BattleOutcome:
    """Everything decided about a battle before it is persisted."""

    winner: Side
    attacker: SideScore
    defender: SideScore
    rating_change: RatingChange
    narrative: Narrative

    @property
    def attacker_won(self) -> bool:
        return self.winner is Side.ATTACKER


def rating_adjustment(
    attacker_rating: int, defender_rating: int, rules: BattleRules = DEFAULT_RULES.battle
) -> float:
    """Points added to the attacker's score (and removed from the defender's)."""
    elo_modifier = (attacker_rating - defender_rating) * rules.elo_difference_factor
    return elo_modifier * rules.elo_modifier_weight


def _side_score(
    vector: ScoreVector,
    adjustment: float,
    rng: random.Random,
    rules: BattleRules,
) -> SideScore:
    base = vector.total * rules.text_score_multiplier
    noise = uniform_noise(rng, rules.noise_max)
    bonus = rules.excellence_bonus * vector.excellent_count(rules.excellence_threshold)
    final = round(max(rules.score_floor, base + adjustment + noise + bonus), 2)
    return SideScore(
        vector=vector,
        base=base,
        rating_adjustment=adjustment,
        noise=noise,
        excellence_bonus=bonus,
        final=final,
    )


def decide_winner(attacker_score: float, defender_score: float) -> Side:
    """Strictly higher score wins; an exact tie goes to the attacker."""
    if defender_score > attacker_score:
        return Side.DEFENDER
    return Side.ATTACKER


def resolve_outcome(
    attacker: CombatantSnapshot,
    defender: CombatantSnapshot,
    *,
    rng: random.Random | None = None,
    scorer: Scorer = score_text,
    rules: RulesConfig = DEFAULT_RULES,
) -> BattleOutcome:
    """Resolve a battle between two combatant snapshots.

    Args:
        attacker: Active side, pre-battle state
        defender: Passive side, pre-battle state
        rng: Noise source; OS entropy when omitted
        scorer: Text scoring function
        rules: Rule configuration

    Returns:
        BattleOutcome holding both side scores, the winner, rating deltas and
        the narrative
    """
    rng = rng or system_rng()
    battle_rules = rules.battle

    attacker_vector = scorer(attacker.battle_text)
    defender_vector = scorer(defender.battle_text)

    adjustment = rating_adjustment(attacker.rating, defender.rating, battle_rules)
    attacker_side = _side_score(attacker_vector, adjustment, rng, battle_rules)
    defender_side = _side_score(defender_vector, -adjustment, rng, battle_rules)

    winner = decide_winner(attacker_side.final, defender_side.final)
    rating_change = calculate_rating_change(
        attacker.rating,
        defender.rating,
        winner is Side.ATTACKER,
        attacker.games_played,
        defender.games_played,
        rules.rating,
    )

    narrative = build_narrative(
        attacker_name=attacker.name,
        defender_name=defender.name,
        attacker_vector=attacker_vector,
        defender_vector=defender_vector,
        attacker_score=attacker_side.final,
        defender_score=defender_side.final,
        winner=winner,
        detail_level=detail_level_for(attacker.total_battles + 1, battle_rules),
        rules=battle_rules,
    )

    return BattleOutcome(
        winner=winner,
        attacker=attacker_side,
        defender=defender_side,
        rating_change=rating_change,
        narrative=narrative,
    )
