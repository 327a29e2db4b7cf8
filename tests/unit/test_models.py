"""Unit tests for SQLAlchemy models.

These tests verify that all models can be instantiated, relationships work,
constraints are enforced, and seed data loads correctly.
"""

from datetime import UTC, date, datetime

import pytest
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from chatarena.domain.models import SYSTEM_ACCOUNT_ID, RestrictionState
from chatarena.models import (
    NPC_ROSTER,
    Battle,
    BattleRestriction,
    Combatant,
    seed_npc_combatants,
)


def _combatant(session, name: str = "Ari", owner: str = "user-1", **kwargs) -> Combatant:
    combatant = Combatant(name=name, owner_account_id=owner, battle_text="검을 휘두른다!", **kwargs)
    session.add(combatant)
    session.commit()
    return combatant


def _battle(attacker: Combatant, defender: Combatant, **overrides) -> Battle:
    values = {
        "attacker_id": attacker.id,
        "defender_id": defender.id,
        "winner_id": attacker.id,
        "attacker_score": 420.0,
        "defender_score": 300.5,
        "attacker_rating_delta": 16,
        "defender_rating_delta": -16,
        "attacker_analysis": {"final": 420.0},
        "defender_analysis": {"final": 300.5},
        "narrative": {"summary": "Ari defeated Bora"},
    }
    values.update(overrides)
    return Battle(**values)


class TestCombatant:
    def test_defaults(self, session):
        combatant = _combatant(session)
        assert combatant.id is not None
        assert combatant.rating == 1000
        assert combatant.wins == combatant.losses == combatant.total_battles == 0
        assert combatant.is_system_controlled is False
        assert combatant.created_at is not None

    def test_to_snapshot(self, session):
        combatant = _combatant(session, wins=3, losses=2, total_battles=5)
        snapshot = combatant.to_snapshot()
        assert snapshot.id == combatant.id
        assert snapshot.games_played == 5
        assert snapshot.battle_text == "검을 휘두른다!"

    def test_negative_wins_rejected(self, session):
        session.add(Combatant(name="Bad", owner_account_id="u", battle_text="x", wins=-1))
        with pytest.raises(IntegrityError):
            session.commit()
        session.rollback()

    def test_repr(self, session):
        assert "Ari" in repr(_combatant(session))


class TestBattle:
    def test_relationships(self, session):
        attacker = _combatant(session, "Ari", "user-1")
        defender = _combatant(session, "Bora", "user-2")
        battle = _battle(attacker, defender)
        session.add(battle)
        session.commit()

        stored = session.scalars(select(Battle)).one()
        assert stored.attacker.name == "Ari"
        assert stored.defender.name == "Bora"
        assert stored.narrative["summary"] == "Ari defeated Bora"

    def test_winner_must_be_a_participant(self, session):
        attacker = _combatant(session, "Ari", "user-1")
        defender = _combatant(session, "Bora", "user-2")
        third = _combatant(session, "Cyan", "user-3")
        session.add(_battle(attacker, defender, winner_id=third.id))
        with pytest.raises(IntegrityError):
            session.commit()
        session.rollback()

    def test_scores_below_floor_rejected(self, session):
        attacker = _combatant(session, "Ari", "user-1")
        defender = _combatant(session, "Bora", "user-2")
        session.add(_battle(attacker, defender, defender_score=9.5))
        with pytest.raises(IntegrityError):
            session.commit()
        session.rollback()

    def test_self_battle_rejected(self, session):
        attacker = _combatant(session)
        session.add(_battle(attacker, attacker))
        with pytest.raises(IntegrityError):
            session.commit()
        session.rollback()


class TestBattleRestriction:
    def test_state_round_trip(self, session):
        row = BattleRestriction(account_id="user-1")
        row.apply_state(
            RestrictionState(
                account_id="user-1",
                last_battle_at=datetime(2025, 3, 14, 12, 0, tzinfo=UTC),
                daily_count=4,
                daily_count_date=date(2025, 3, 14),
            )
        )
        session.add(row)
        session.commit()

        state = session.get(BattleRestriction, "user-1").to_state()
        assert state.daily_count == 4
        assert state.daily_count_date == date(2025, 3, 14)
        assert state.last_battle_at is not None

    def test_negative_count_rejected(self, session):
        session.add(BattleRestriction(account_id="user-1", daily_count=-1))
        with pytest.raises(IntegrityError):
            session.commit()
        session.rollback()


class TestSeedData:
    def test_seeds_full_roster(self, session):
        created = seed_npc_combatants(session)
        assert created == len(NPC_ROSTER) == 20

        npcs = session.scalars(select(Combatant)).all()
        assert all(npc.is_system_controlled for npc in npcs)
        assert {npc.owner_account_id for npc in npcs} == {SYSTEM_ACCOUNT_ID}
        ratings = sorted(npc.rating for npc in npcs)
        assert ratings[0] == 500
        assert ratings[-1] == 1250

    def test_seeding_is_idempotent(self, session):
        seed_npc_combatants(session)
        assert seed_npc_combatants(session) == 0
        assert len(session.scalars(select(Combatant)).all()) == 20
