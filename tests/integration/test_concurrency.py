"""Concurrent battle resolution against a file-backed SQLite database.

Each test runs many battles on worker threads through the same
``ArenaService`` the HTTP layer uses, then checks that the daily cap and the
per-combatant aggregates survived the interleaving.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

import pytest
from sqlalchemy import func, select

from chatarena.api.runtime import ArenaService
from chatarena.config import Settings, rules_from_settings
from chatarena.database import build_session_factory, create_db_engine, init_db
from chatarena.domain.errors import RateLimitedError
from chatarena.models import Battle, BattleRestriction, Combatant
from chatarena.utils.clock import SystemClock
from chatarena.utils.locks import KeyedLocks
from chatarena.utils.rng import seeded_rng

pytestmark = pytest.mark.integration


@pytest.fixture
def arena(tmp_path):
    settings = Settings(
        _env_file=None,
        DATABASE_URL=f"sqlite:///{tmp_path / 'arena.db'}",
        battle_cooldown_seconds=0,
        daily_battle_limit=5,
    )
    engine = create_db_engine(settings)
    init_db(engine)
    session_factory = build_session_factory(engine)
    service = ArenaService(
        session_factory,
        settings=settings,
        rules=rules_from_settings(settings),
        clock=SystemClock(),
        locks=KeyedLocks(),
        rng=seeded_rng("concurrency"),
    )
    try:
        yield service, session_factory
    finally:
        engine.dispose()


def _attempt(service: ArenaService, attacker_id: int, defender_id: int) -> str:
    try:
        service.resolve_battle(attacker_id, defender_id)
    except RateLimitedError:
        return "limited"
    return "ok"


def test_daily_cap_holds_under_parallel_requests(arena):
    service, session_factory = arena
    attacker = service.create_combatant("Ari", "user-1", "불꽃의 검")
    defenders = [
        service.create_combatant(f"Def{index}", f"user-{index + 2}", "얼음의 방패")
        for index in range(12)
    ]

    with ThreadPoolExecutor(max_workers=12) as pool:
        results = list(
            pool.map(lambda defender: _attempt(service, attacker["id"], defender["id"]), defenders)
        )

    assert results.count("ok") == 5
    assert results.count("limited") == 7

    with session_factory() as session:
        assert session.scalar(select(func.count()).select_from(Battle)) == 5
        assert session.get(BattleRestriction, "user-1").daily_count == 5
        stored_attacker = session.get(Combatant, attacker["id"])
        assert stored_attacker.total_battles == 5
        assert stored_attacker.wins + stored_attacker.losses == 5
        defender_battles = session.scalar(
            select(func.sum(Combatant.total_battles)).where(Combatant.id != attacker["id"])
        )
        assert defender_battles == 5


def test_shared_defender_aggregates_are_consistent(arena):
    service, session_factory = arena
    defender = service.create_combatant("Wall", "owner", "대지의 방패")
    attackers = [
        service.create_combatant(f"Atk{index}", f"user-{index}", "번개의 창")
        for index in range(8)
    ]

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(
            pool.map(lambda attacker: _attempt(service, attacker["id"], defender["id"]), attackers)
        )

    assert results == ["ok"] * 8

    with session_factory() as session:
        battles = session.scalars(select(Battle)).all()
        stored_defender = session.get(Combatant, defender["id"])
        assert stored_defender.total_battles == 8
        assert stored_defender.wins + stored_defender.losses == 8
        rating_total = 1000 + sum(battle.defender_rating_delta for battle in battles)
        assert stored_defender.rating == rating_total
