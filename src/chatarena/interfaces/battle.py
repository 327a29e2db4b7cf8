"""Battle Service Protocol Interface.

This module defines the protocols for battle resolution and battle throttling
in the arena.
"""

from collections.abc import Sequence
from typing import Any, Protocol

from chatarena.domain.models import AccountID, CombatantSnapshot
from chatarena.domain.restrictions import RestrictionDecision
from chatarena.models import Battle


class IRestrictionGuard(Protocol):
    """Protocol for the cooldown and daily-cap gate in front of the resolver."""

    def check(self, account_id: AccountID) -> RestrictionDecision:
        """Decide whether the account may start a battle now."""
        ...

    def ensure_allowed(self, account_id: AccountID) -> RestrictionDecision:
        """Like check, but raise RateLimitedError when refused."""
        ...

    def record(self, account_id: AccountID) -> None:
        """Count one battle for the account."""
        ...

    def status(self, account_id: AccountID) -> dict[str, Any]:
        """Summarize the account's quota and cooldown."""
        ...

    def applies_to_defender(self, defender: CombatantSnapshot) -> bool:
        """Whether the defender's account is checked and counted too."""
        ...


class IBattleService(Protocol):
    """Protocol defining the interface for battle resolution operations.

    Implementations validate the pairing, consult the restriction guard,
    resolve the battle and persist the outcome atomically.
    """

    def resolve_battle(self, attacker_id: int, defender_id: int) -> Battle:
        """Resolve a battle between two stored combatants.

        Args:
            attacker_id: Combatant taking the active side
            defender_id: Combatant taking the passive side

        Returns:
            The persisted battle record

        Raises:
            CombatantNotFoundError: If either id does not resolve
            InvalidBattleError: If the pairing is not allowed
            RateLimitedError: If the restriction guard refuses the battle
        """
        ...

    def get_restriction_status(self, account_id: AccountID) -> dict[str, Any]:
        """Return quota and cooldown information for the account."""
        ...

    def get_battle(self, battle_id: int) -> Battle:
        """Return a stored battle or raise BattleError subclasses."""
        ...

    def recent_battles(
        self, combatant_id: int, *, limit: int = 20, offset: int = 0
    ) -> Sequence[dict[str, Any]]:
        """Return the combatant's recent battles from its own point of view."""
        ...
