"""Restriction Guard for the battle arena.

Throttles how often an account may start battles: a short cooldown between
two battles and a cap on battles per calendar day. The rule arithmetic lives
in :mod:`chatarena.domain.restrictions`; this service adds storage, the clock
and per-account locking.
"""

import logging
from typing import Any

from sqlalchemy.orm import Session

from chatarena.domain import restrictions
from chatarena.domain.errors import RateLimitedError
from chatarena.domain.models import AccountID, CombatantSnapshot
from chatarena.domain.restrictions import RestrictionDecision
from chatarena.domain.rules_config import DEFAULT_RULES, RestrictionRules
from chatarena.interfaces import Clock, IRestrictionStore
from chatarena.repository import SqlRestrictionStore
from chatarena.utils.clock import SystemClock
from chatarena.utils.locks import KeyedLocks, account_key

logger = logging.getLogger(__name__)


class RestrictionGuard:
    """Cooldown and daily-cap gate consulted before every battle.

    ``check`` never mutates state. ``record`` only stages the new state on the
    session; the battle service commits it together with the battle record.
    The reset operations commit on their own.
    """

    def __init__(
        self,
        session: Session,
        *,
        rules: RestrictionRules = DEFAULT_RULES.restrictions,
        clock: Clock | None = None,
        locks: KeyedLocks | None = None,
        store: IRestrictionStore | None = None,
    ):
        self.session = session
        self.rules = rules
        self.clock = clock or SystemClock()
        self.locks = locks if locks is not None else KeyedLocks()
        self.store = store or SqlRestrictionStore(session)

    def check(self, account_id: AccountID) -> RestrictionDecision:
        """Decide whether the account may start a battle now."""
        with self.locks.hold(account_key(account_id)):
            state = self.store.get(account_id)
            return restrictions.evaluate(state, self.clock.now(), self.rules)

    def ensure_allowed(self, account_id: AccountID) -> RestrictionDecision:
        """Check the account and raise if it may not battle now.

        Raises:
            RateLimitedError: With the reason, retry delay and remaining quota
        """
        decision = self.check(account_id)
        if not decision.allowed and decision.reason is not None:
            logger.warning(
                "account %s rate limited (%s), retry in %d ms",
                account_id,
                decision.reason,
                decision.retry_after_ms,
            )
            raise RateLimitedError(
                account_id,
                decision.reason,
                retry_after_ms=decision.retry_after_ms,
                daily_remaining=decision.daily_remaining,
            )
        return decision

    def record(self, account_id: AccountID) -> None:
        """Count one battle for the account and start its cooldown."""
        with self.locks.hold(account_key(account_id)):
            state = self.store.get(account_id)
            state = restrictions.record_battle(state, account_id, self.clock.now(), self.rules)
            self.store.save(state)

    def status(self, account_id: AccountID) -> dict[str, Any]:
        """Return the account's quota and cooldown as plain values."""
        decision = self.check(account_id)
        return {
            "account_id": account_id,
            "daily_used": decision.daily_used,
            "daily_remaining": decision.daily_remaining,
            "daily_limit": self.rules.daily_limit,
            "can_battle_now": decision.allowed,
            "cooldown_remaining_ms": decision.cooldown_remaining_ms,
        }

    def applies_to_defender(self, defender: CombatantSnapshot) -> bool:
        """Whether the defender's account is checked and counted too."""
        if defender.is_system_controlled and self.rules.exempt_system_defenders:
            return False
        return self.rules.check_defender_restrictions

    def reset_account(self, account_id: AccountID) -> bool:
        """Zero today's battle count for one account.

        Returns:
            False if the account has never battled, True otherwise
        """
        with self.locks.hold(account_key(account_id)):
            state = self.store.get(account_id)
            if state is None:
                return False
            restrictions.reset_daily(state, self.clock.now(), self.rules)
            self.store.save(state)
            self.session.commit()
        logger.info("daily battle count reset for account %s", account_id)
        return True

    def reset_stale_counts(self) -> int:
        """Zero every count left over from an earlier day.

        Returns:
            Number of accounts reset
        """
        now = self.clock.now()
        today = restrictions.calendar_day(now, self.rules)
        reset = 0
        for snapshot in self.store.list_all():
            if snapshot.daily_count_date is None or snapshot.daily_count_date >= today:
                continue
            with self.locks.hold(account_key(snapshot.account_id)):
                state = self.store.get(snapshot.account_id)
                # Another thread may have recorded a battle since the listing.
                if state is None or state.daily_count_date is None:
                    continue
                if state.daily_count_date >= today:
                    continue
                restrictions.reset_daily(state, now, self.rules)
                self.store.save(state)
                reset += 1
        self.session.commit()
        if reset:
            logger.info("reset stale daily battle counts for %d accounts", reset)
        return reset
