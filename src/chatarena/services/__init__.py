"""Service layer for the battle arena.

Services wrap a database session and depend on protocol interfaces from
:mod:`chatarena.interfaces`:

- Use factory.py for production dependency wiring
- Inject protocol-based fakes for testing (avoid complex mocking)

Architecture:
    - BattleService: Pairing validation, battle resolution, battle history
    - CombatantService: Combatant creation, battle text edits, score previews
    - RestrictionGuard: Per-account cooldown and daily battle cap

Production Usage:
    from chatarena.factory import create_battle_service
    battles = create_battle_service(session, locks=locks)
    record = battles.resolve_battle(attacker_id, defender_id)

Testing Usage:
    from chatarena.services.battle_service import BattleService

    class AlwaysAllow:
        def ensure_allowed(self, account_id): ...
        def record(self, account_id): ...
        def applies_to_defender(self, defender):
            return False

    service = BattleService(session, AlwaysAllow(), rng=seeded_rng("test"))
"""

from chatarena.services.battle_service import BattleService
from chatarena.services.combatant_service import CombatantService
from chatarena.services.restriction_service import RestrictionGuard

__all__ = [
    "BattleService",
    "CombatantService",
    "RestrictionGuard",
]
