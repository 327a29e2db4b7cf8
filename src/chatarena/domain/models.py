"""In-memory views of the entities the battle engine reasons about.

The ORM layer (:mod:`chatarena.models`) owns persistence. The rules in this
package only see these small dataclasses so they can run and be tested
without a database.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import NewType

# --- Strongly typed identifiers -------------------------------------------------

CombatantID = NewType("CombatantID", int)
BattleID = NewType("BattleID", int)
AccountID = NewType("AccountID", str)

SYSTEM_ACCOUNT_ID = AccountID("NPC")


@dataclass(frozen=True, slots=True)
class CombatantSnapshot:
    """Pre-battle state of one combatant."""

    id: CombatantID
    name: str
    owner_account_id: AccountID
    rating: int
    wins: int
    losses: int
    total_battles: int
    battle_text: str
    is_system_controlled: bool = False

    @property
    def games_played(self) -> int:
        """Decided results so far; drives the K-factor tier."""
        return self.wins + self.losses


@dataclass(slots=True)
class RestrictionState:
    """Per-account throttling bookkeeping."""

    account_id: AccountID
    last_battle_at: datetime | None = None
    daily_count: int = 0
    daily_count_date: date | None = None
