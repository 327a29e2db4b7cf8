"""Persistence adapters for the battle arena."""

from chatarena.repository.sql_store import (
    SqlBattleHistoryStore,
    SqlCombatantStore,
    SqlRestrictionStore,
)

__all__ = ["SqlBattleHistoryStore", "SqlCombatantStore", "SqlRestrictionStore"]
