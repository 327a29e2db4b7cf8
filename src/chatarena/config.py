"""Application configuration for the battle arena."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from chatarena.domain.rules_config import (
    BattleRules,
    RatingRules,
    RestrictionRules,
    RulesConfig,
    ScoringRules,
)


class Settings(BaseSettings):
    """Application settings, read from the environment and ``.env``."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # Database
    DATABASE_URL: str = Field(default="sqlite:///chatarena.db", description="SQLAlchemy URL")
    DATABASE_ECHO: bool = Field(default=False, description="Echo SQL statements")
    DATABASE_POOL_SIZE: int = Field(default=5, ge=1)
    DATABASE_MAX_OVERFLOW: int = Field(default=10, ge=0)
    DATABASE_POOL_RECYCLE: int = Field(default=3600, description="Seconds before reconnect")
    DATABASE_POOL_TIMEOUT: int = Field(default=30, ge=1)

    # Service
    log_level: str = Field(default="INFO", description="Root logging level")
    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:3000", "http://127.0.0.1:3000"],
        description="Origins allowed to call the HTTP API",
    )

    # Restriction guard
    battle_cooldown_seconds: float = Field(
        default=10.0,
        description="Minimum seconds between two battles started by the same account",
        ge=0.0,
    )
    daily_battle_limit: int = Field(
        default=20, description="Battles an account may start per calendar day", ge=1
    )
    exempt_system_defenders: bool = Field(
        default=True, description="Skip restriction checks for system-controlled defenders"
    )
    check_defender_restrictions: bool = Field(
        default=False,
        description="Also check and count battles against a player-owned defender's account",
    )
    restriction_timezone: str = Field(
        default="UTC", description="Timezone whose midnight resets the daily count"
    )
    restriction_reset_interval_seconds: float = Field(
        default=3600.0,
        description="How often stale daily counts are cleared in the background (0 disables)",
        ge=0.0,
    )

    # Ratings
    default_rating: int = Field(default=1000, description="Starting rating of new combatants")
    new_player_game_threshold: int = Field(
        default=30, description="Games below which the new-player K-factor applies", ge=0
    )
    k_factor_new: int = Field(default=32, gt=0)
    k_factor_experienced: int = Field(default=16, gt=0)

    # Narrative
    deep_analysis_interval: int = Field(
        default=7, description="Every Nth attacker battle reveals the full breakdown", ge=1
    )

    # Input limits applied at the API boundary
    max_battle_text_length: int = Field(default=100, ge=1)
    max_name_length: int = Field(default=10, ge=1)


def rules_from_settings(settings: Settings) -> RulesConfig:
    """Build the rule configuration consumed by the domain layer."""

    return RulesConfig(
        scoring=ScoringRules(),
        rating=RatingRules(
            default_rating=settings.default_rating,
            new_player_game_threshold=settings.new_player_game_threshold,
            k_factor_new=settings.k_factor_new,
            k_factor_experienced=settings.k_factor_experienced,
        ),
        battle=BattleRules(deep_analysis_interval=settings.deep_analysis_interval),
        restrictions=RestrictionRules(
            cooldown_seconds=settings.battle_cooldown_seconds,
            daily_limit=settings.daily_battle_limit,
            exempt_system_defenders=settings.exempt_system_defenders,
            check_defender_restrictions=settings.check_defender_restrictions,
            timezone=settings.restriction_timezone,
        ),
    )


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings instance."""

    return Settings()
