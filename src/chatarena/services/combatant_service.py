"""Combatant Service for the battle arena.

Creates combatants, edits their battle text and previews how a text would
score. Ratings and result counters are never written here; only the battle
service changes them.
"""

import logging
from collections.abc import Sequence

from sqlalchemy.orm import Session

from chatarena.domain.battle import Scorer
from chatarena.domain.errors import CombatantNotFoundError
from chatarena.domain.models import SYSTEM_ACCOUNT_ID, AccountID
from chatarena.domain.rules_config import DEFAULT_RULES, RulesConfig
from chatarena.domain.scoring import ScoreVector, score_text
from chatarena.interfaces import ICombatantStore
from chatarena.models import Combatant
from chatarena.repository import SqlCombatantStore
from chatarena.utils.locks import KeyedLocks, combatant_key

logger = logging.getLogger(__name__)

DEFAULT_MAX_NAME_LENGTH = 10
DEFAULT_MAX_BATTLE_TEXT_LENGTH = 100


class CombatantService:
    """Service for combatant lifecycle operations."""

    def __init__(
        self,
        session: Session,
        *,
        locks: KeyedLocks | None = None,
        store: ICombatantStore | None = None,
        scorer: Scorer = score_text,
        rules: RulesConfig = DEFAULT_RULES,
        max_name_length: int = DEFAULT_MAX_NAME_LENGTH,
        max_battle_text_length: int = DEFAULT_MAX_BATTLE_TEXT_LENGTH,
    ):
        self.session = session
        self.locks = locks if locks is not None else KeyedLocks()
        self.store = store or SqlCombatantStore(session)
        self.scorer = scorer
        self.rules = rules
        self.max_name_length = max_name_length
        self.max_battle_text_length = max_battle_text_length

    def create(self, name: str, owner_account_id: AccountID, battle_text: str) -> Combatant:
        """Create a player combatant at the default rating.

        Raises:
            ValueError: If the name or battle text is empty or too long, or the
                owner is the reserved system account
        """
        if owner_account_id == SYSTEM_ACCOUNT_ID:
            raise ValueError(f"Account id '{SYSTEM_ACCOUNT_ID}' is reserved")
        combatant = Combatant(
            name=self._clean_name(name),
            owner_account_id=owner_account_id,
            rating=self.rules.rating.default_rating,
            wins=0,
            losses=0,
            total_battles=0,
            battle_text=self._clean_text(battle_text),
            is_system_controlled=False,
        )
        self.store.save(combatant)
        self.session.commit()
        logger.info(
            "created combatant %s (%s) for %s", combatant.id, combatant.name, owner_account_id
        )
        return combatant

    def get(self, combatant_id: int) -> Combatant:
        combatant = self.store.get(combatant_id)
        if combatant is None:
            raise CombatantNotFoundError(combatant_id)
        return combatant

    def list_for_owner(self, owner_account_id: AccountID) -> Sequence[Combatant]:
        return self.store.list_by_owner(owner_account_id)

    def update_battle_text(self, combatant_id: int, battle_text: str) -> Combatant:
        """Replace the combatant's battle text; it takes effect from the next battle."""
        text = self._clean_text(battle_text)
        with self.locks.hold(combatant_key(combatant_id)):
            combatant = self.get(combatant_id)
            self.store.refresh(combatant)
            combatant.battle_text = text
            self.store.save(combatant)
            self.session.commit()
        return combatant

    def preview_score(self, battle_text: str) -> ScoreVector:
        """Score a text without storing anything."""
        return self.scorer(self._clean_text(battle_text))

    def _clean_name(self, name: str) -> str:
        cleaned = name.strip()
        if not cleaned:
            raise ValueError("Name must not be empty")
        if len(cleaned) > self.max_name_length:
            raise ValueError(f"Name must be at most {self.max_name_length} characters")
        return cleaned

    def _clean_text(self, battle_text: str) -> str:
        cleaned = battle_text.strip()
        if not cleaned:
            raise ValueError("Battle text must not be empty")
        if len(cleaned) > self.max_battle_text_length:
            raise ValueError(
                f"Battle text must be at most {self.max_battle_text_length} characters"
            )
        return cleaned
