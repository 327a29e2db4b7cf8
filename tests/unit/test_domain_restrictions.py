"""Unit tests for cooldown and daily-cap rules."""

from __future__ import annotations

from datetime import UTC, date, datetime, timedelta

import pytest

from chatarena.domain import restrictions
from chatarena.domain.enums import RestrictionReason
from chatarena.domain.models import AccountID, RestrictionState
from chatarena.domain.rules_config import RestrictionRules

ACCOUNT = AccountID("player-1")
NOON = datetime(2025, 3, 14, 12, 0, tzinfo=UTC)


def _state(*, count: int, day: date | None = None, last: datetime | None = None):
    return RestrictionState(
        account_id=ACCOUNT,
        last_battle_at=last,
        daily_count=count,
        daily_count_date=day,
    )


class TestEvaluate:
    def test_unknown_account_is_allowed(self):
        decision = restrictions.evaluate(None, NOON)
        assert decision.allowed
        assert decision.daily_remaining == 20
        assert decision.reason is None

    def test_cooldown_rejects_with_remaining_ms(self):
        state = _state(count=1, day=NOON.date(), last=NOON - timedelta(seconds=4))
        decision = restrictions.evaluate(state, NOON)
        assert not decision.allowed
        assert decision.reason is RestrictionReason.COOLDOWN
        assert decision.retry_after_ms == 6000
        assert decision.daily_remaining == 19

    def test_cooldown_expires(self):
        state = _state(count=1, day=NOON.date(), last=NOON - timedelta(seconds=10))
        assert restrictions.evaluate(state, NOON).allowed

    def test_daily_cap_rejects_until_midnight(self):
        state = _state(count=20, day=NOON.date(), last=NOON - timedelta(hours=1))
        decision = restrictions.evaluate(state, NOON)
        assert not decision.allowed
        assert decision.reason is RestrictionReason.DAILY_LIMIT
        assert decision.daily_remaining == 0
        assert decision.retry_after_ms == 12 * 60 * 60 * 1000

    def test_daily_cap_is_checked_before_cooldown(self):
        state = _state(count=20, day=NOON.date(), last=NOON - timedelta(seconds=1))
        decision = restrictions.evaluate(state, NOON)
        assert decision.reason is RestrictionReason.DAILY_LIMIT
        assert decision.cooldown_remaining_ms == 9000

    def test_count_from_earlier_day_is_ignored(self):
        yesterday = NOON - timedelta(days=1)
        state = _state(count=20, day=yesterday.date(), last=yesterday)
        decision = restrictions.evaluate(state, NOON)
        assert decision.allowed
        assert decision.daily_used == 0
        assert decision.daily_remaining == 20

    def test_naive_timestamps_are_utc(self):
        naive = (NOON - timedelta(seconds=5)).replace(tzinfo=None)
        state = _state(count=1, day=NOON.date(), last=naive)
        assert restrictions.cooldown_remaining_ms(state, NOON) == 5000

    def test_custom_limits(self):
        rules = RestrictionRules(cooldown_seconds=0.0, daily_limit=2)
        state = _state(count=2, day=NOON.date(), last=NOON)
        assert restrictions.evaluate(state, NOON, rules).reason is RestrictionReason.DAILY_LIMIT
        state.daily_count = 1
        assert restrictions.evaluate(state, NOON, rules).allowed


class TestRecordBattle:
    def test_first_battle_creates_state(self):
        state = restrictions.record_battle(None, ACCOUNT, NOON)
        assert state.account_id == ACCOUNT
        assert state.daily_count == 1
        assert state.daily_count_date == NOON.date()
        assert state.last_battle_at == NOON

    def test_same_day_increments(self):
        state = _state(count=3, day=NOON.date(), last=NOON - timedelta(minutes=5))
        restrictions.record_battle(state, ACCOUNT, NOON)
        assert state.daily_count == 4

    def test_new_day_restarts_at_one(self):
        state = _state(count=20, day=NOON.date() - timedelta(days=1))
        restrictions.record_battle(state, ACCOUNT, NOON)
        assert state.daily_count == 1
        assert state.daily_count_date == NOON.date()

    def test_record_then_evaluate_hits_cooldown(self):
        state = restrictions.record_battle(None, ACCOUNT, NOON)
        decision = restrictions.evaluate(state, NOON + timedelta(seconds=1))
        assert decision.reason is RestrictionReason.COOLDOWN


class TestCalendarDay:
    def test_timezone_moves_the_day_boundary(self):
        rules = RestrictionRules(timezone="Asia/Seoul")
        late_utc = datetime(2025, 3, 14, 16, 0, tzinfo=UTC)
        assert restrictions.calendar_day(late_utc) == date(2025, 3, 14)
        assert restrictions.calendar_day(late_utc, rules) == date(2025, 3, 15)

    def test_ms_until_next_day_in_zone(self):
        rules = RestrictionRules(timezone="Asia/Seoul")
        # 12:00 UTC is 21:00 in Seoul
        assert restrictions.ms_until_next_day(NOON, rules) == 3 * 60 * 60 * 1000

    def test_reset_daily_keeps_cooldown(self):
        state = _state(count=20, day=NOON.date(), last=NOON)
        restrictions.reset_daily(state, NOON)
        assert state.daily_count == 0
        assert state.last_battle_at == NOON

    @pytest.mark.parametrize("count", [0, 5, 19])
    def test_remaining_quota(self, count):
        state = _state(count=count, day=NOON.date())
        assert restrictions.evaluate(state, NOON).daily_remaining == 20 - count
