"""Battle Resolution Service for the battle arena.

This module validates a requested pairing, consults the restriction guard,
resolves the battle with the pure rules in :mod:`chatarena.domain.battle`
and persists the record, both combatants and the restriction state in a
single transaction.
"""

import logging
import random
from collections.abc import Sequence
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from chatarena.domain.battle import BattleOutcome, Scorer, resolve_outcome
from chatarena.domain.errors import (
    BattleNotFoundError,
    CombatantNotFoundError,
    InvalidBattleError,
)
from chatarena.domain.models import AccountID
from chatarena.domain.rules_config import DEFAULT_RULES, RulesConfig
from chatarena.domain.scoring import score_text
from chatarena.interfaces import IBattleHistoryStore, ICombatantStore, IRestrictionGuard
from chatarena.models import Battle, Combatant
from chatarena.repository import SqlBattleHistoryStore, SqlCombatantStore
from chatarena.utils.locks import KeyedLocks, account_key, combatant_key
from chatarena.utils.rng import system_rng

logger = logging.getLogger(__name__)


class BattleService:
    """Service for handling battle resolution in the arena."""

    def __init__(
        self,
        session: Session,
        guard: IRestrictionGuard,
        *,
        locks: KeyedLocks | None = None,
        combatants: ICombatantStore | None = None,
        history: IBattleHistoryStore | None = None,
        rng: random.Random | None = None,
        scorer: Scorer = score_text,
        rules: RulesConfig = DEFAULT_RULES,
    ):
        self.session = session
        self.guard = guard
        self.locks = locks if locks is not None else KeyedLocks()
        self.combatants = combatants or SqlCombatantStore(session)
        self.history = history or SqlBattleHistoryStore(session)
        self.rng = rng or system_rng()
        self.scorer = scorer
        self.rules = rules

    def resolve_battle(self, attacker_id: int, defender_id: int) -> Battle:
        """Resolve a battle between two stored combatants.

        Args:
            attacker_id: Combatant taking the active side
            defender_id: Combatant taking the passive side

        Returns:
            The committed Battle record

        Raises:
            InvalidBattleError: If the ids are identical or both combatants
                belong to the same player account
            CombatantNotFoundError: If either id does not resolve
            RateLimitedError: If the attacker's account (or, when enabled, the
                defender's) is cooling down or out of daily battles
            SQLAlchemyError: If persisting fails; nothing is committed
        """
        if attacker_id == defender_id:
            raise InvalidBattleError("A combatant cannot battle itself")

        attacker = self._load_combatant(attacker_id)
        defender = self._load_combatant(defender_id)
        if (
            attacker.owner_account_id == defender.owner_account_id
            and not attacker.is_system_controlled
        ):
            raise InvalidBattleError("Cannot battle a combatant owned by the same account")

        accounts = [AccountID(attacker.owner_account_id)]
        if self.guard.applies_to_defender(defender.to_snapshot()):
            accounts.append(AccountID(defender.owner_account_id))

        keys = [account_key(account) for account in accounts]
        keys += [combatant_key(attacker_id), combatant_key(defender_id)]

        # Account locks stay held from the check until the count is committed.
        with self.locks.hold(*keys):
            for account in accounts:
                self.guard.ensure_allowed(account)

            self.combatants.refresh(attacker)
            self.combatants.refresh(defender)
            outcome = resolve_outcome(
                attacker.to_snapshot(),
                defender.to_snapshot(),
                rng=self.rng,
                scorer=self.scorer,
                rules=self.rules,
            )

            try:
                battle = self._persist_outcome(attacker, defender, outcome)
                for account in accounts:
                    self.guard.record(account)
                self.session.commit()
            except SQLAlchemyError:
                self.session.rollback()
                logger.exception(
                    "failed to persist battle %s vs %s; rolled back", attacker_id, defender_id
                )
                raise

        logger.info(
            "battle %s: %s (%.2f) vs %s (%.2f), winner %s, rating %+d/%+d",
            battle.id,
            attacker.name,
            outcome.attacker.final,
            defender.name,
            outcome.defender.final,
            outcome.winner,
            outcome.rating_change.attacker_delta,
            outcome.rating_change.defender_delta,
        )
        return battle

    def _load_combatant(self, combatant_id: int) -> Combatant:
        combatant = self.combatants.get(combatant_id)
        if combatant is None:
            logger.warning("combatant %s not found", combatant_id)
            raise CombatantNotFoundError(combatant_id)
        return combatant

    def _persist_outcome(
        self, attacker: Combatant, defender: Combatant, outcome: BattleOutcome
    ) -> Battle:
        """Apply the outcome to both combatants and append the record."""
        change = outcome.rating_change
        winner, loser = (attacker, defender) if outcome.attacker_won else (defender, attacker)

        attacker.total_battles += 1
        defender.total_battles += 1
        winner.wins += 1
        loser.losses += 1
        attacker.rating += change.attacker_delta
        defender.rating += change.defender_delta
        self.combatants.save(attacker)
        self.combatants.save(defender)

        battle = Battle(
            attacker_id=attacker.id,
            defender_id=defender.id,
            winner_id=winner.id,
            attacker_score=outcome.attacker.final,
            defender_score=outcome.defender.final,
            attacker_rating_delta=change.attacker_delta,
            defender_rating_delta=change.defender_delta,
            attacker_analysis=outcome.attacker.to_dict(),
            defender_analysis=outcome.defender.to_dict(),
            narrative=outcome.narrative.to_dict(),
        )
        return self.history.append(battle)

    def get_restriction_status(self, account_id: AccountID) -> dict[str, Any]:
        """Return quota and cooldown information for the account."""
        return self.guard.status(account_id)

    def get_battle(self, battle_id: int) -> Battle:
        battle = self.history.get(battle_id)
        if battle is None:
            raise BattleNotFoundError(battle_id)
        return battle

    def recent_battles(
        self, combatant_id: int, *, limit: int = 20, offset: int = 0
    ) -> Sequence[dict[str, Any]]:
        """Return the combatant's battles from its own point of view, newest first."""
        self._load_combatant(combatant_id)
        entries = []
        for battle in self.history.list_for_combatant(combatant_id, limit=limit, offset=offset):
            was_attacker = battle.attacker_id == combatant_id
            opponent = battle.defender if was_attacker else battle.attacker
            entries.append(
                {
                    "battle_id": battle.id,
                    "opponent_id": opponent.id,
                    "opponent_name": opponent.name,
                    "was_attacker": was_attacker,
                    "did_win": battle.winner_id == combatant_id,
                    "score": battle.attacker_score if was_attacker else battle.defender_score,
                    "opponent_score": (
                        battle.defender_score if was_attacker else battle.attacker_score
                    ),
                    "rating_change": (
                        battle.attacker_rating_delta
                        if was_attacker
                        else battle.defender_rating_delta
                    ),
                    "created_at": battle.created_at,
                }
            )
        return entries
