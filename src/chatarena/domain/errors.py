"""Error taxonomy surfaced by the battle engine.

All three errors are terminal for the request that raised them; the engine
never retries internally.
"""

from __future__ import annotations

from chatarena.domain.enums import RestrictionReason


class BattleError(Exception):
    """Base class for every failure the engine reports to callers."""


class CombatantNotFoundError(BattleError):
    """A combatant id did not resolve to a stored combatant."""

    def __init__(self, combatant_id: int) -> None:
        super().__init__(f"Combatant {combatant_id} not found")
        self.combatant_id = combatant_id


class BattleNotFoundError(BattleError):
    """A battle id did not resolve to a stored battle record."""

    def __init__(self, battle_id: int) -> None:
        super().__init__(f"Battle {battle_id} not found")
        self.battle_id = battle_id


class InvalidBattleError(BattleError):
    """The requested pairing can never be resolved (e.g. self-battle)."""


class RateLimitedError(BattleError):
    """The restriction guard refused the battle.

    Attributes:
        account_id: Account that hit the limit
        reason: Cooldown or daily cap
        retry_after_ms: Milliseconds until a retry could succeed
        daily_remaining: Battles left today (0 when the cap was hit)
    """

    def __init__(
        self,
        account_id: str,
        reason: RestrictionReason,
        *,
        retry_after_ms: int,
        daily_remaining: int,
    ) -> None:
        if reason is RestrictionReason.COOLDOWN:
            seconds = max(1, -(-retry_after_ms // 1000))
            message = f"Please wait {seconds} seconds before battling again"
        else:
            message = "Daily battle limit reached. Try again tomorrow!"
        super().__init__(message)
        self.account_id = account_id
        self.reason = reason
        self.retry_after_ms = retry_after_ms
        self.daily_remaining = daily_remaining
