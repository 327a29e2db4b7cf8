"""SQLAlchemy-backed stores for the battle arena.

Every store wraps the caller's session and only stages or flushes changes;
committing is left to whoever owns the unit of work.
"""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from chatarena.domain.models import AccountID, RestrictionState
from chatarena.models import Battle, BattleRestriction, Combatant


class SqlCombatantStore:
    """Load and save combatants through a session."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, combatant_id: int) -> Combatant | None:
        return self.session.get(Combatant, combatant_id)

    def refresh(self, combatant: Combatant) -> Combatant:
        """Re-read the row so counters reflect battles committed elsewhere."""

        self.session.refresh(combatant)
        return combatant

    def save(self, combatant: Combatant) -> Combatant:
        self.session.add(combatant)
        self.session.flush()
        return combatant

    def list_by_owner(self, account_id: AccountID) -> Sequence[Combatant]:
        stmt = (
            select(Combatant)
            .where(Combatant.owner_account_id == account_id)
            .order_by(Combatant.id)
        )
        return self.session.scalars(stmt).all()


class SqlBattleHistoryStore:
    """Append-only access to the battles table."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def append(self, battle: Battle) -> Battle:
        self.session.add(battle)
        self.session.flush()
        return battle

    def get(self, battle_id: int) -> Battle | None:
        return self.session.get(Battle, battle_id)

    def list_for_combatant(
        self, combatant_id: int, *, limit: int = 20, offset: int = 0
    ) -> Sequence[Battle]:
        stmt = (
            select(Battle)
            .where(or_(Battle.attacker_id == combatant_id, Battle.defender_id == combatant_id))
            .order_by(Battle.created_at.desc(), Battle.id.desc())
            .limit(limit)
            .offset(offset)
        )
        return self.session.scalars(stmt).all()


class SqlRestrictionStore:
    """Persist restriction state in the battle_restrictions table."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, account_id: AccountID) -> RestrictionState | None:
        row = self.session.get(BattleRestriction, account_id, populate_existing=True)
        return row.to_state() if row is not None else None

    def save(self, state: RestrictionState) -> None:
        row = self.session.get(BattleRestriction, state.account_id)
        if row is None:
            row = BattleRestriction(account_id=state.account_id)
            self.session.add(row)
        row.apply_state(state)
        self.session.flush()

    def list_all(self) -> Sequence[RestrictionState]:
        stmt = select(BattleRestriction).order_by(BattleRestriction.account_id)
        rows = self.session.scalars(stmt)
        return [row.to_state() for row in rows]
