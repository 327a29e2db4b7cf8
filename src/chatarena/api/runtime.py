"""Runtime primitives backing the battle arena HTTP API."""

from __future__ import annotations

import asyncio
import logging
import random
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from chatarena.config import Settings, get_settings, rules_from_settings
from chatarena.database import build_session_factory, create_db_engine, init_db
from chatarena.domain.models import AccountID
from chatarena.domain.rules_config import RulesConfig
from chatarena.factory import (
    create_battle_service,
    create_combatant_service,
    create_restriction_guard,
)
from chatarena.interfaces import Clock, IBattleService
from chatarena.models import Battle, Combatant, seed_npc_combatants
from chatarena.services import RestrictionGuard
from chatarena.utils.clock import SystemClock
from chatarena.utils.locks import KeyedLocks

logger = logging.getLogger(__name__)


class ArenaService:
    """Session-scoped operations exposed over HTTP.

    Every call opens its own session, so the methods are safe to run on
    worker threads in parallel. Results are returned as plain dictionaries.
    """

    def __init__(
        self,
        session_factory: sessionmaker[Session],
        *,
        settings: Settings,
        rules: RulesConfig,
        clock: Clock,
        locks: KeyedLocks,
        rng: random.Random | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._settings = settings
        self._rules = rules
        self._clock = clock
        self._locks = locks
        self._rng = rng

    @contextmanager
    def _session(self) -> Iterator[Session]:
        session = self._session_factory()
        try:
            yield session
        finally:
            session.close()

    def create_combatant(
        self, name: str, owner_account_id: str, battle_text: str
    ) -> dict[str, object]:
        with self._session() as session:
            combatants = create_combatant_service(
                session, rules=self._rules, locks=self._locks, settings=self._settings
            )
            combatant = combatants.create(name, AccountID(owner_account_id), battle_text)
            return self.to_combatant_dict(combatant)

    def get_combatant(self, combatant_id: int) -> dict[str, object]:
        with self._session() as session:
            combatants = create_combatant_service(session, rules=self._rules, locks=self._locks)
            return self.to_combatant_dict(combatants.get(combatant_id))

    def update_battle_text(self, combatant_id: int, battle_text: str) -> dict[str, object]:
        with self._session() as session:
            combatants = create_combatant_service(
                session, rules=self._rules, locks=self._locks, settings=self._settings
            )
            return self.to_combatant_dict(combatants.update_battle_text(combatant_id, battle_text))

    def preview_score(self, battle_text: str) -> dict[str, float]:
        with self._session() as session:
            combatants = create_combatant_service(
                session, rules=self._rules, locks=self._locks, settings=self._settings
            )
            return combatants.preview_score(battle_text).to_dict()

    def resolve_battle(self, attacker_id: int, defender_id: int) -> dict[str, object]:
        with self._session() as session:
            battles = self._battle_service(session)
            return self.to_battle_dict(battles.resolve_battle(attacker_id, defender_id))

    def get_battle(self, battle_id: int) -> dict[str, object]:
        with self._session() as session:
            return self.to_battle_dict(self._battle_service(session).get_battle(battle_id))

    def recent_battles(
        self, combatant_id: int, *, limit: int, offset: int
    ) -> list[dict[str, object]]:
        with self._session() as session:
            battles = self._battle_service(session)
            return list(battles.recent_battles(combatant_id, limit=limit, offset=offset))

    def restriction_status(self, account_id: str) -> dict[str, Any]:
        with self._session() as session:
            return self._battle_service(session).get_restriction_status(AccountID(account_id))

    def reset_restriction(self, account_id: str) -> dict[str, Any]:
        with self._session() as session:
            guard = self._guard(session)
            guard.reset_account(AccountID(account_id))
            return guard.status(AccountID(account_id))

    def reset_stale_counts(self) -> int:
        with self._session() as session:
            return self._guard(session).reset_stale_counts()

    def seed_npcs(self) -> int:
        with self._session() as session:
            created = seed_npc_combatants(session)
        if created:
            logger.info("seeded %d system combatants", created)
        return created

    def _guard(self, session: Session) -> RestrictionGuard:
        return create_restriction_guard(
            session, rules=self._rules, clock=self._clock, locks=self._locks
        )

    def _battle_service(self, session: Session) -> IBattleService:
        return create_battle_service(
            session, rules=self._rules, clock=self._clock, locks=self._locks, rng=self._rng
        )

    @staticmethod
    def to_combatant_dict(combatant: Combatant) -> dict[str, object]:
        return {
            "id": combatant.id,
            "name": combatant.name,
            "owner_account_id": combatant.owner_account_id,
            "rating": combatant.rating,
            "wins": combatant.wins,
            "losses": combatant.losses,
            "total_battles": combatant.total_battles,
            "battle_text": combatant.battle_text,
            "is_system_controlled": combatant.is_system_controlled,
        }

    @staticmethod
    def to_battle_dict(battle: Battle) -> dict[str, object]:
        return {
            "id": battle.id,
            "attacker_id": battle.attacker_id,
            "defender_id": battle.defender_id,
            "winner_id": battle.winner_id,
            "attacker_score": battle.attacker_score,
            "defender_score": battle.defender_score,
            "attacker_rating_delta": battle.attacker_rating_delta,
            "defender_rating_delta": battle.defender_rating_delta,
            "attacker_analysis": battle.attacker_analysis,
            "defender_analysis": battle.defender_analysis,
            "narrative": battle.narrative,
            "created_at": battle.created_at,
        }


class RestrictionResetScheduler:
    """Background loop that clears daily counts left over from earlier days."""

    MIN_INTERVAL_SECONDS = 1.0

    def __init__(self, arena: ArenaService, *, interval_seconds: float) -> None:
        self._arena = arena
        self._interval = max(interval_seconds, self.MIN_INTERVAL_SECONDS)
        self._task: asyncio.Task[None] | None = None
        self._stop_event = asyncio.Event()

    @property
    def interval_seconds(self) -> float:
        return self._interval

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._stop_event = asyncio.Event()
        loop = asyncio.get_running_loop()
        self._task = loop.create_task(self._run_loop(), name="chatarena-restriction-reset")

    async def stop(self) -> None:
        task = self._task
        if task is None:
            return
        self._stop_event.set()
        await task
        self._task = None

    async def run_once(self) -> int:
        return await asyncio.to_thread(self._arena.reset_stale_counts)

    async def _run_loop(self) -> None:
        try:
            while not self._stop_event.is_set():
                try:
                    await asyncio.wait_for(self._stop_event.wait(), timeout=self._interval)
                    break
                except TimeoutError:
                    pass
                try:
                    await self.run_once()
                except SQLAlchemyError:
                    logger.exception("stale restriction reset failed; retrying next interval")
        finally:
            self._task = None


class ApiState:
    """Aggregated services shared by the FastAPI layer."""

    def __init__(
        self,
        *,
        settings: Settings | None = None,
        rules: RulesConfig | None = None,
        engine: Engine | None = None,
        clock: Clock | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.rules = rules or rules_from_settings(self.settings)
        self.engine = engine or create_db_engine(self.settings)
        self.session_factory = build_session_factory(self.engine)
        self.locks = KeyedLocks()
        self.clock = clock or SystemClock()
        self.arena = ArenaService(
            self.session_factory,
            settings=self.settings,
            rules=self.rules,
            clock=self.clock,
            locks=self.locks,
            rng=rng,
        )
        self.resets = RestrictionResetScheduler(
            self.arena, interval_seconds=self.settings.restriction_reset_interval_seconds
        )

    async def startup(self) -> None:
        init_db(self.engine)
        if self.settings.restriction_reset_interval_seconds > 0:
            self.resets.start()

    async def shutdown(self) -> None:
        await self.resets.stop()


def build_state() -> ApiState:
    """Factory used by the API to initialize state."""

    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    return ApiState(settings=settings)
