"""Protocol-based interfaces for the battle arena.

This module exports the service and storage protocols, providing a clear
contract for implementations and enabling dependency injection and testing.
"""

from chatarena.interfaces.battle import IBattleService, IRestrictionGuard
from chatarena.interfaces.stores import (
    Clock,
    IBattleHistoryStore,
    ICombatantStore,
    IRestrictionStore,
)

__all__ = [
    "Clock",
    "IBattleHistoryStore",
    "IBattleService",
    "ICombatantStore",
    "IRestrictionGuard",
    "IRestrictionStore",
]
