"""Human-readable battle rationale.

Every battle gets a one-line summary. On top of that the detail policy decides
between a full two-sided breakdown (every Nth battle of the attacker) and a
brief explanation with a single coaching tip.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from chatarena.domain.enums import DetailLevel, Dimension, Side, VictoryMargin
from chatarena.domain.rules_config import DEFAULT_RULES, BattleRules
from chatarena.domain.scoring import ScoreVector, dimension_gaps
from chatarena.domain.scoring_data import COACHING_TIPS, DIMENSION_LABELS

MARGIN_REMARKS = {
    VictoryMargin.CLOSE: "It could have gone either way!",
    VictoryMargin.CLEAR: "A clear difference showed.",
    VictoryMargin.DECISIVE: "An overwhelming performance!",
}


@dataclass(frozen=True, slots=True)
class Narrative:
    """Rationale attached to a battle record."""

    summary: str
    detail_level: DetailLevel
    margin: VictoryMargin
    strengths: tuple[Dimension, ...]
    explanation: str | None = None
    tip: str | None = None
    breakdown: dict[str, dict[str, float]] | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "summary": self.summary,
            "detail_level": str(self.detail_level),
            "margin": str(self.margin),
            "strengths": [str(dimension) for dimension in self.strengths],
            "explanation": self.explanation,
            "tip": self.tip,
            "breakdown": self.breakdown,
        }


def detail_level_for(
    total_battles_after: int, rules: BattleRules = DEFAULT_RULES.battle
) -> DetailLevel:
    """Decide how much analysis a battle reveals.

    Args:
        total_battles_after: The attacker's battle count including this battle
        rules: Battle rules holding the deep analysis interval

    Returns:
        FULL on every ``deep_analysis_interval``-th battle, BRIEF otherwise
    """
    interval = rules.deep_analysis_interval
    if interval > 0 and total_battles_after > 0 and total_battles_after % interval == 0:
        return DetailLevel.FULL
    return DetailLevel.BRIEF


def victory_margin(
    winner_score: float, loser_score: float, rules: BattleRules = DEFAULT_RULES.battle
) -> VictoryMargin:
    gap = abs(winner_score - loser_score)
    if gap < rules.close_margin:
        return VictoryMargin.CLOSE
    if gap < rules.clear_margin:
        return VictoryMargin.CLEAR
    return VictoryMargin.DECISIVE


def top_strengths(
    winner: ScoreVector, loser: ScoreVector, limit: int
) -> tuple[Dimension, ...]:
    """Dimensions where the winner outscored the loser, largest gap first."""
    gaps = dimension_gaps(winner, loser)
    ahead = [dimension for dimension, gap in gaps.items() if gap > 0]
    ahead.sort(key=lambda dimension: gaps[dimension], reverse=True)
    return tuple(ahead[:limit])


def coaching_dimension(winner: ScoreVector, loser: ScoreVector) -> Dimension:
    """The dimension with the largest winner-minus-loser gap (first one on ties)."""
    gaps = dimension_gaps(winner, loser)
    return max(gaps, key=lambda dimension: gaps[dimension])


def _describe_strengths(
    strengths: tuple[Dimension, ...], winner: ScoreVector, loser: ScoreVector
) -> str:
    parts = [
        f"{DIMENSION_LABELS[dimension]} ({winner.get(dimension):.1f} vs {loser.get(dimension):.1f})"
        for dimension in strengths
    ]
    return ", ".join(parts)


def build_narrative(
    *,
    attacker_name: str,
    defender_name: str,
    attacker_vector: ScoreVector,
    defender_vector: ScoreVector,
    attacker_score: float,
    defender_score: float,
    winner: Side,
    detail_level: DetailLevel,
    rules: BattleRules = DEFAULT_RULES.battle,
) -> Narrative:
    """Assemble the summary and the detail section for one battle."""
    if winner is Side.ATTACKER:
        winner_name, loser_name = attacker_name, defender_name
        winner_vector, loser_vector = attacker_vector, defender_vector
        winner_score, loser_score = attacker_score, defender_score
    else:
        winner_name, loser_name = defender_name, attacker_name
        winner_vector, loser_vector = defender_vector, attacker_vector
        winner_score, loser_score = defender_score, attacker_score

    margin = victory_margin(winner_score, loser_score, rules)
    strengths = top_strengths(winner_vector, loser_vector, rules.top_strengths)

    summary = (
        f"{winner_name} defeated {loser_name} with a {margin} victory "
        f"({winner_score:.1f} to {loser_score:.1f})."
    )
    if strengths:
        summary += f" Stood out in {_describe_strengths(strengths, winner_vector, loser_vector)}."
    else:
        summary += " The battle text was matched; rating and momentum decided it."

    if detail_level is DetailLevel.FULL:
        return Narrative(
            summary=summary,
            detail_level=detail_level,
            margin=margin,
            strengths=strengths,
            breakdown={
                str(Side.ATTACKER): attacker_vector.to_dict(),
                str(Side.DEFENDER): defender_vector.to_dict(),
            },
        )

    explanation = (
        f"{winner_name}'s text scored {winner_vector.total:.1f}/10 against "
        f"{loser_vector.total:.1f}/10. {MARGIN_REMARKS[margin]}"
    )
    tip_dimension = coaching_dimension(winner_vector, loser_vector)
    return Narrative(
        summary=summary,
        detail_level=detail_level,
        margin=margin,
        strengths=strengths,
        explanation=explanation,
        tip=f"Tip for {loser_name}: {COACHING_TIPS[tip_dimension]}",
    )
