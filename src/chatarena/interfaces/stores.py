"""Storage Protocol Interfaces.

This module defines the collaborator protocols the battle engine persists
through. Implementations stage changes on a shared unit of work; the caller
that owns the transaction commits or rolls back.
"""

from collections.abc import Sequence
from datetime import datetime
from typing import Protocol

from chatarena.domain.models import AccountID, RestrictionState
from chatarena.models import Battle, Combatant


class ICombatantStore(Protocol):
    """Protocol for loading and saving combatants."""

    def get(self, combatant_id: int) -> Combatant | None:
        """Return the combatant, or None if it does not exist."""
        ...

    def refresh(self, combatant: Combatant) -> Combatant:
        """Reload the combatant's stored state, discarding stale attributes."""
        ...

    def save(self, combatant: Combatant) -> Combatant:
        """Stage a new or modified combatant."""
        ...

    def list_by_owner(self, account_id: AccountID) -> Sequence[Combatant]:
        """Return every combatant owned by the account."""
        ...


class IBattleHistoryStore(Protocol):
    """Protocol for the append-only battle log."""

    def append(self, battle: Battle) -> Battle:
        """Stage a new battle record and assign its identifier."""
        ...

    def get(self, battle_id: int) -> Battle | None:
        """Return one battle record, or None."""
        ...

    def list_for_combatant(
        self, combatant_id: int, *, limit: int = 20, offset: int = 0
    ) -> Sequence[Battle]:
        """Return battles the combatant took part in, newest first."""
        ...


class IRestrictionStore(Protocol):
    """Protocol for per-account throttling state."""

    def get(self, account_id: AccountID) -> RestrictionState | None:
        """Return the account's state, or None before its first battle."""
        ...

    def save(self, state: RestrictionState) -> None:
        """Stage the account's state."""
        ...

    def list_all(self) -> Sequence[RestrictionState]:
        """Return the state of every account seen so far."""
        ...


class Clock(Protocol):
    """Source of the current time."""

    def now(self) -> datetime:
        """Return the current timezone-aware time."""
        ...
