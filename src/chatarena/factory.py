"""Service Factory for the battle arena.

This module provides factory functions for creating service instances with
proper dependency wiring. Use these functions in production code to ensure
all service dependencies are correctly initialized.

For testing, inject protocol-based fakes instead of using these factories.

Example:
    # Production usage
    from chatarena.factory import create_battle_service
    battles = create_battle_service(session, locks=shared_locks)

    # Testing usage
    from chatarena.services.battle_service import BattleService

    class FakeGuard:
        def ensure_allowed(self, account_id): ...
        def record(self, account_id): ...
        def applies_to_defender(self, defender):
            return False

    battles = BattleService(session, FakeGuard())
"""

import random

from sqlalchemy.orm import Session

from chatarena.config import Settings
from chatarena.domain.rules_config import DEFAULT_RULES, RulesConfig
from chatarena.interfaces import Clock
from chatarena.services.battle_service import BattleService
from chatarena.services.combatant_service import (
    DEFAULT_MAX_BATTLE_TEXT_LENGTH,
    DEFAULT_MAX_NAME_LENGTH,
    CombatantService,
)
from chatarena.services.restriction_service import RestrictionGuard
from chatarena.utils.locks import KeyedLocks


def create_restriction_guard(
    session: Session,
    *,
    rules: RulesConfig = DEFAULT_RULES,
    clock: Clock | None = None,
    locks: KeyedLocks | None = None,
) -> RestrictionGuard:
    """Create a RestrictionGuard backed by the SQL restriction store.

    Args:
        session: Database session
        rules: Rule configuration
        clock: Time source; the system clock when omitted
        locks: Lock registry shared with the other services of the process

    Returns:
        Fully initialized RestrictionGuard
    """
    return RestrictionGuard(session, rules=rules.restrictions, clock=clock, locks=locks)


def create_battle_service(
    session: Session,
    *,
    rules: RulesConfig = DEFAULT_RULES,
    clock: Clock | None = None,
    locks: KeyedLocks | None = None,
    rng: random.Random | None = None,
) -> BattleService:
    """Create a BattleService with all dependencies.

    Args:
        session: Database session
        rules: Rule configuration
        clock: Time source for the restriction guard
        locks: Lock registry; must be shared across requests for the
            per-account and per-combatant guarantees to hold
        rng: Noise source; OS entropy when omitted

    Returns:
        Fully initialized BattleService with a RestrictionGuard dependency
    """
    locks = locks if locks is not None else KeyedLocks()
    guard = create_restriction_guard(session, rules=rules, clock=clock, locks=locks)
    return BattleService(session, guard, locks=locks, rng=rng, rules=rules)


def create_combatant_service(
    session: Session,
    *,
    rules: RulesConfig = DEFAULT_RULES,
    locks: KeyedLocks | None = None,
    settings: Settings | None = None,
) -> CombatantService:
    """Create a CombatantService with all dependencies.

    Args:
        session: Database session
        rules: Rule configuration
        locks: Lock registry shared with the battle service
        settings: Source of the name and battle text length limits

    Returns:
        Fully initialized CombatantService
    """
    return CombatantService(
        session,
        locks=locks,
        rules=rules,
        max_name_length=settings.max_name_length if settings else DEFAULT_MAX_NAME_LENGTH,
        max_battle_text_length=(
            settings.max_battle_text_length if settings else DEFAULT_MAX_BATTLE_TEXT_LENGTH
        ),
    )

