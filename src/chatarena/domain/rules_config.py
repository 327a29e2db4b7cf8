"""Declarative rule configuration for the battle engine."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ScoringRules:
    """Text scoring base values and dimension weights."""

    dimension_base: float = 5.0
    dimension_min: float = 0.0
    dimension_max: float = 10.0
    creativity_weight: float = 0.15
    impact_weight: float = 0.15
    focus_weight: float = 0.15
    linguistic_power_weight: float = 0.15
    strategy_weight: float = 0.15
    emotion_momentum_weight: float = 0.15
    length_weight: float = 0.10
    focus_min_words: int = 5
    focus_max_words: int = 20
    diversity_min_chars: int = 10  # shorter text is trivially "diverse"


@dataclass(frozen=True, slots=True)
class RatingRules:
    """ELO constants."""

    default_rating: int = 1000
    new_player_game_threshold: int = 30
    k_factor_new: int = 32
    k_factor_experienced: int = 16
    rating_scale: float = 400.0
    min_battle_change: int = 1  # keeps winner strictly up, loser strictly down


@dataclass(frozen=True, slots=True)
class BattleRules:
    """Score blending, winner and narrative parameters."""

    text_score_multiplier: float = 70.0
    elo_difference_factor: float = 0.05
    elo_modifier_weight: float = 20.0
    noise_max: float = 10.0
    excellence_threshold: float = 8.0
    excellence_bonus: float = 5.0
    score_floor: float = 10.0
    close_margin: float = 20.0
    clear_margin: float = 50.0
    top_strengths: int = 3
    deep_analysis_interval: int = 7


@dataclass(frozen=True, slots=True)
class RestrictionRules:
    """Per-account battle throttling."""

    cooldown_seconds: float = 10.0
    daily_limit: int = 20
    exempt_system_defenders: bool = True
    check_defender_restrictions: bool = False
    timezone: str = "UTC"


@dataclass(frozen=True, slots=True)
class RulesConfig:
    """Top-level configuration container for all subsystems."""

    scoring: ScoringRules = ScoringRules()
    rating: RatingRules = RatingRules()
    battle: BattleRules = BattleRules()
    restrictions: RestrictionRules = RestrictionRules()


DEFAULT_RULES = RulesConfig()
