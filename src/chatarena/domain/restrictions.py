"""Cooldown and daily-cap rules for battle throttling.

The calendar day is evaluated in the configured timezone. A stored count from
an earlier day is treated as zero when checking; the actual reset happens when
the next battle is recorded.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, date, datetime, timedelta
from functools import cache
from zoneinfo import ZoneInfo

from chatarena.domain.enums import RestrictionReason
from chatarena.domain.models import AccountID, RestrictionState
from chatarena.domain.rules_config import DEFAULT_RULES, RestrictionRules


@dataclass(frozen=True, slots=True)
class RestrictionDecision:
    """Result of checking an account against the restriction rules."""

    allowed: bool
    reason: RestrictionReason | None
    retry_after_ms: int
    daily_used: int
    daily_remaining: int
    cooldown_remaining_ms: int


@cache
def _zone(name: str) -> ZoneInfo:
    return ZoneInfo(name)


def _aware(moment: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything is stored in UTC.
    if moment.tzinfo is None:
        return moment.replace(tzinfo=UTC)
    return moment


def calendar_day(moment: datetime, rules: RestrictionRules = DEFAULT_RULES.restrictions) -> date:
    """Calendar date of ``moment`` in the restriction timezone."""
    return _aware(moment).astimezone(_zone(rules.timezone)).date()


def daily_used(
    state: RestrictionState | None,
    now: datetime,
    rules: RestrictionRules = DEFAULT_RULES.restrictions,
) -> int:
    """Battles already counted for today."""
    if state is None or state.daily_count_date != calendar_day(now, rules):
        return 0
    return state.daily_count


def cooldown_remaining_ms(
    state: RestrictionState | None,
    now: datetime,
    rules: RestrictionRules = DEFAULT_RULES.restrictions,
) -> int:
    """Milliseconds left before the account may battle again (0 when ready)."""
    if state is None or state.last_battle_at is None:
        return 0
    elapsed = _aware(now) - _aware(state.last_battle_at)
    remaining = timedelta(seconds=rules.cooldown_seconds) - elapsed
    if remaining <= timedelta(0):
        return 0
    return max(1, int(remaining.total_seconds() * 1000))


def ms_until_next_day(now: datetime, rules: RestrictionRules = DEFAULT_RULES.restrictions) -> int:
    """Milliseconds until midnight of the next calendar day."""
    zone = _zone(rules.timezone)
    local = _aware(now).astimezone(zone)
    midnight = datetime.combine(local.date() + timedelta(days=1), datetime.min.time(), zone)
    return max(1, int((midnight - local).total_seconds() * 1000))


def evaluate(
    state: RestrictionState | None,
    now: datetime,
    rules: RestrictionRules = DEFAULT_RULES.restrictions,
) -> RestrictionDecision:
    """Check whether an account may start a battle at ``now``.

    The daily cap is checked before the cooldown so an exhausted account is
    told to come back tomorrow rather than in a few seconds.
    """
    used = daily_used(state, now, rules)
    remaining = max(0, rules.daily_limit - used)
    cooldown = cooldown_remaining_ms(state, now, rules)

    if used >= rules.daily_limit:
        return RestrictionDecision(
            allowed=False,
            reason=RestrictionReason.DAILY_LIMIT,
            retry_after_ms=ms_until_next_day(now, rules),
            daily_used=used,
            daily_remaining=0,
            cooldown_remaining_ms=cooldown,
        )
    if cooldown > 0:
        return RestrictionDecision(
            allowed=False,
            reason=RestrictionReason.COOLDOWN,
            retry_after_ms=cooldown,
            daily_used=used,
            daily_remaining=remaining,
            cooldown_remaining_ms=cooldown,
        )
    return RestrictionDecision(
        allowed=True,
        reason=None,
        retry_after_ms=0,
        daily_used=used,
        daily_remaining=remaining,
        cooldown_remaining_ms=0,
    )


def record_battle(
    state: RestrictionState | None,
    account_id: AccountID,
    now: datetime,
    rules: RestrictionRules = DEFAULT_RULES.restrictions,
) -> RestrictionState:
    """Count one battle for the account, creating the state on first use."""
    if state is None:
        state = RestrictionState(account_id=account_id)
    today = calendar_day(now, rules)
    if state.daily_count_date != today:
        state.daily_count = 1
        state.daily_count_date = today
    else:
        state.daily_count += 1
    state.last_battle_at = now
    return state


def reset_daily(
    state: RestrictionState, now: datetime, rules: RestrictionRules = DEFAULT_RULES.restrictions
) -> RestrictionState:
    """Zero the daily count as of today (cooldown is left untouched)."""
    state.daily_count = 0
    state.daily_count_date = calendar_day(now, rules)
    return state
