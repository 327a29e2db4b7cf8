"""Enumerations shared by the battle engine."""

from __future__ import annotations

from enum import StrEnum


class Dimension(StrEnum):
    """The seven sub-scores produced by the text scoring engine."""

    CREATIVITY = "creativity"
    IMPACT = "impact"
    FOCUS = "focus"
    LINGUISTIC_POWER = "linguistic_power"
    STRATEGY = "strategy"
    EMOTION_MOMENTUM = "emotion_momentum"
    LENGTH = "length"


class Theme(StrEnum):
    """Fixed theme word-sets used by the focus dimension."""

    ELEMENTAL = "elemental"
    MELEE = "melee"
    DARK = "dark"
    LIGHT = "light"
    NATURE = "nature"


class Side(StrEnum):
    """Which side of a battle a combatant fought on."""

    ATTACKER = "attacker"
    DEFENDER = "defender"


class VictoryMargin(StrEnum):
    """Margin-of-victory tiers used in battle summaries."""

    CLOSE = "close"
    CLEAR = "clear"
    DECISIVE = "decisive"


class DetailLevel(StrEnum):
    """How much of the scoring breakdown a battle narrative reveals."""

    BRIEF = "brief"
    FULL = "full"


class RestrictionReason(StrEnum):
    """Why the restriction guard refused a battle."""

    COOLDOWN = "cooldown"
    DAILY_LIMIT = "daily_limit"
