"""Tests for the BattleService.

The restriction guard is used for real against the in-memory database with a
frozen clock; text scoring is replaced by a fixed scorer where the outcome
must be predictable.
"""

from datetime import UTC, datetime
from unittest.mock import patch

import pytest
from sqlalchemy import select
from sqlalchemy.exc import OperationalError

from chatarena.domain.enums import Dimension, RestrictionReason
from chatarena.domain.errors import (
    BattleNotFoundError,
    CombatantNotFoundError,
    InvalidBattleError,
    RateLimitedError,
)
from chatarena.domain.models import SYSTEM_ACCOUNT_ID, AccountID
from chatarena.domain.rules_config import RestrictionRules
from chatarena.domain.scoring import ScoreVector
from chatarena.models import Battle, BattleRestriction, Combatant
from chatarena.services.battle_service import BattleService
from chatarena.services.restriction_service import RestrictionGuard
from chatarena.utils.clock import FrozenClock
from chatarena.utils.locks import KeyedLocks
from chatarena.utils.rng import seeded_rng

STRONG = "strong text"
WEAK = "weak text"


def fixed_scorer(text: str) -> ScoreVector:
    total = 8.0 if text == STRONG else 4.0
    values = {dimension.value: 5.0 for dimension in Dimension}
    return ScoreVector(**values, total=total)


@pytest.fixture
def clock():
    return FrozenClock(datetime(2025, 3, 14, 9, 0, tzinfo=UTC))


@pytest.fixture
def locks():
    return KeyedLocks()


def _service(session, clock, locks, *, rules: RestrictionRules | None = None) -> BattleService:
    guard = RestrictionGuard(
        session, clock=clock, locks=locks, rules=rules or RestrictionRules()
    )
    return BattleService(session, guard, locks=locks, rng=seeded_rng("tests"), scorer=fixed_scorer)


def _add(session, name: str, owner: str, text: str, **kwargs) -> Combatant:
    combatant = Combatant(name=name, owner_account_id=owner, battle_text=text, **kwargs)
    session.add(combatant)
    session.commit()
    return combatant


@pytest.fixture
def pair(session):
    attacker = _add(session, "Ari", "user-1", STRONG)
    defender = _add(session, "Bora", "user-2", WEAK)
    return attacker, defender


class TestResolveBattle:
    def test_records_battle_and_updates_both_combatants(self, session, clock, locks, pair):
        attacker, defender = pair
        battle = _service(session, clock, locks).resolve_battle(attacker.id, defender.id)

        assert battle.id is not None
        assert battle.winner_id == attacker.id
        assert battle.attacker_rating_delta == 16
        assert battle.defender_rating_delta == -16
        assert battle.attacker_score >= 10.0
        assert battle.defender_score >= 10.0
        assert battle.narrative["detail_level"] == "brief"
        assert battle.attacker_analysis["vector"]["total"] == 8.0

        session.expire_all()
        attacker = session.get(Combatant, attacker.id)
        defender = session.get(Combatant, defender.id)
        assert (attacker.rating, attacker.wins, attacker.losses, attacker.total_battles) == (
            1016,
            1,
            0,
            1,
        )
        assert (defender.rating, defender.wins, defender.losses, defender.total_battles) == (
            984,
            0,
            1,
            1,
        )

    def test_defender_can_win(self, session, clock, locks):
        attacker = _add(session, "Ari", "user-1", WEAK)
        defender = _add(session, "Bora", "user-2", STRONG)
        battle = _service(session, clock, locks).resolve_battle(attacker.id, defender.id)
        assert battle.winner_id == defender.id
        session.expire_all()
        assert session.get(Combatant, defender.id).wins == 1

    def test_attacker_account_is_recorded(self, session, clock, locks, pair):
        attacker, defender = pair
        _service(session, clock, locks).resolve_battle(attacker.id, defender.id)
        row = session.get(BattleRestriction, "user-1")
        assert row is not None and row.daily_count == 1
        assert session.get(BattleRestriction, "user-2") is None

    def test_every_seventh_battle_is_full(self, session, clock, locks):
        attacker = _add(session, "Ari", "user-1", STRONG, total_battles=6)
        defender = _add(session, "Bora", "user-2", WEAK)
        battle = _service(session, clock, locks).resolve_battle(attacker.id, defender.id)
        assert battle.narrative["detail_level"] == "full"
        assert battle.narrative["breakdown"]["attacker"]["total"] == 8.0

    def test_self_battle_is_invalid(self, session, clock, locks, pair):
        attacker, _ = pair
        with pytest.raises(InvalidBattleError):
            _service(session, clock, locks).resolve_battle(attacker.id, attacker.id)

    def test_same_owner_is_invalid(self, session, clock, locks):
        first = _add(session, "Ari", "user-1", STRONG)
        second = _add(session, "Alt", "user-1", WEAK)
        with pytest.raises(InvalidBattleError):
            _service(session, clock, locks).resolve_battle(first.id, second.id)

    def test_system_combatants_may_fight_each_other(self, session, clock, locks):
        first = _add(session, "npc1", SYSTEM_ACCOUNT_ID, STRONG, is_system_controlled=True)
        second = _add(session, "npc2", SYSTEM_ACCOUNT_ID, WEAK, is_system_controlled=True)
        battle = _service(session, clock, locks).resolve_battle(first.id, second.id)
        assert battle.winner_id == first.id

    @pytest.mark.parametrize("missing", ["attacker", "defender"])
    def test_missing_combatant(self, session, clock, locks, pair, missing):
        attacker, defender = pair
        ids = (999, defender.id) if missing == "attacker" else (attacker.id, 999)
        with pytest.raises(CombatantNotFoundError) as exc_info:
            _service(session, clock, locks).resolve_battle(*ids)
        assert exc_info.value.combatant_id == 999

    def test_second_battle_within_cooldown_is_rate_limited(self, session, clock, locks, pair):
        attacker, defender = pair
        service = _service(session, clock, locks)
        service.resolve_battle(attacker.id, defender.id)
        clock.advance(seconds=1)

        with pytest.raises(RateLimitedError) as exc_info:
            service.resolve_battle(attacker.id, defender.id)
        assert exc_info.value.reason is RestrictionReason.COOLDOWN
        assert exc_info.value.retry_after_ms == 9000
        assert len(session.scalars(select(Battle)).all()) == 1

    def test_daily_cap_stops_the_twenty_first_battle(self, session, clock, locks, pair):
        attacker, defender = pair
        service = _service(session, clock, locks)
        for _ in range(20):
            service.resolve_battle(attacker.id, defender.id)
            clock.advance(seconds=11)

        with pytest.raises(RateLimitedError) as exc_info:
            service.resolve_battle(attacker.id, defender.id)
        assert exc_info.value.reason is RestrictionReason.DAILY_LIMIT

        session.expire_all()
        assert session.get(Combatant, attacker.id).total_battles == 20
        assert session.get(Combatant, defender.id).total_battles == 20

    def test_defender_restrictions_when_enabled(self, session, clock, locks):
        rules = RestrictionRules(check_defender_restrictions=True)
        attacker = _add(session, "Ari", "user-1", STRONG)
        defender = _add(session, "Bora", "user-2", WEAK)
        other = _add(session, "Cyan", "user-3", STRONG)
        service = _service(session, clock, locks, rules=rules)
        service.resolve_battle(attacker.id, defender.id)
        clock.advance(seconds=2)

        with pytest.raises(RateLimitedError) as exc_info:
            service.resolve_battle(other.id, defender.id)
        assert exc_info.value.account_id == "user-2"

    def test_system_defender_is_never_counted(self, session, clock, locks):
        rules = RestrictionRules(check_defender_restrictions=True)
        attacker = _add(session, "Ari", "user-1", STRONG)
        npc = _add(session, "npc", SYSTEM_ACCOUNT_ID, WEAK, is_system_controlled=True)
        _service(session, clock, locks, rules=rules).resolve_battle(attacker.id, npc.id)
        assert session.get(BattleRestriction, SYSTEM_ACCOUNT_ID) is None

    def test_store_failure_rolls_back_everything(self, session, clock, locks, pair):
        attacker, defender = pair
        service = _service(session, clock, locks)
        with (
            patch.object(
                service.history, "append", side_effect=OperationalError("INSERT", {}, Exception())
            ),
            pytest.raises(OperationalError),
        ):
            service.resolve_battle(attacker.id, defender.id)

        session.expire_all()
        assert session.get(Combatant, attacker.id).total_battles == 0
        assert session.get(Combatant, attacker.id).rating == 1000
        assert session.get(BattleRestriction, "user-1") is None
        assert session.scalars(select(Battle)).all() == []


class TestQueries:
    def test_get_battle(self, session, clock, locks, pair):
        attacker, defender = pair
        service = _service(session, clock, locks)
        battle = service.resolve_battle(attacker.id, defender.id)
        assert service.get_battle(battle.id).id == battle.id

    def test_get_missing_battle(self, session, clock, locks):
        with pytest.raises(BattleNotFoundError):
            _service(session, clock, locks).get_battle(42)

    def test_recent_battles_from_each_side(self, session, clock, locks, pair):
        attacker, defender = pair
        service = _service(session, clock, locks)
        service.resolve_battle(attacker.id, defender.id)

        [mine] = service.recent_battles(attacker.id)
        assert mine["opponent_name"] == "Bora"
        assert mine["did_win"] is True
        assert mine["was_attacker"] is True
        assert mine["rating_change"] == 16

        [theirs] = service.recent_battles(defender.id)
        assert theirs["opponent_name"] == "Ari"
        assert theirs["did_win"] is False
        assert theirs["rating_change"] == -16

    def test_recent_battles_for_missing_combatant(self, session, clock, locks):
        with pytest.raises(CombatantNotFoundError):
            _service(session, clock, locks).recent_battles(404)

    def test_restriction_status(self, session, clock, locks, pair):
        attacker, defender = pair
        service = _service(session, clock, locks)
        service.resolve_battle(attacker.id, defender.id)
        status = service.get_restriction_status(AccountID("user-1"))
        assert status["daily_used"] == 1
        assert status["can_battle_now"] is False
        assert status["cooldown_remaining_ms"] == 10000
