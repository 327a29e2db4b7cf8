"""HTTP routes for the battle arena API."""

from __future__ import annotations

import asyncio
import math
from datetime import datetime
from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from pydantic import BaseModel, Field

from chatarena.api.runtime import ApiState
from chatarena.database import check_database_health
from chatarena.domain.errors import (
    BattleNotFoundError,
    CombatantNotFoundError,
    InvalidBattleError,
    RateLimitedError,
)

router = APIRouter()


def get_state(request: Request) -> ApiState:
    state = getattr(request.app.state, "api_state", None)
    if state is None:  # pragma: no cover - FastAPI should always initialise state
        raise RuntimeError("API state not initialised")
    return state


ApiStateDep = Annotated[ApiState, Depends(get_state)]


class CreateCombatantRequest(BaseModel):
    name: str = Field(min_length=1)
    owner_account_id: str = Field(min_length=1, max_length=64)
    battle_text: str = Field(min_length=1)


class UpdateBattleTextRequest(BaseModel):
    battle_text: str = Field(min_length=1)


class CombatantResponse(BaseModel):
    id: int
    name: str
    owner_account_id: str
    rating: int
    wins: int
    losses: int
    total_battles: int
    battle_text: str
    is_system_controlled: bool


class CreateBattleRequest(BaseModel):
    attacker_id: int
    defender_id: int


class BattleResponse(BaseModel):
    id: int
    attacker_id: int
    defender_id: int
    winner_id: int
    attacker_score: float
    defender_score: float
    attacker_rating_delta: int
    defender_rating_delta: int
    attacker_analysis: dict[str, Any]
    defender_analysis: dict[str, Any]
    narrative: dict[str, Any]
    created_at: datetime


class BattleHistoryEntry(BaseModel):
    battle_id: int
    opponent_id: int
    opponent_name: str
    was_attacker: bool
    did_win: bool
    score: float
    opponent_score: float
    rating_change: int
    created_at: datetime


class RestrictionStatusResponse(BaseModel):
    account_id: str
    daily_used: int
    daily_remaining: int
    daily_limit: int
    can_battle_now: bool
    cooldown_remaining_ms: int


class ScorePreviewRequest(BaseModel):
    battle_text: str = Field(min_length=1)


class ScorePreviewResponse(BaseModel):
    creativity: float
    impact: float
    focus: float
    linguistic_power: float
    strategy: float
    emotion_momentum: float
    length: float
    total: float


class SeedResponse(BaseModel):
    created: int


class ResetStaleResponse(BaseModel):
    reset: int


def _not_found(exc: Exception) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))


def _bad_request(exc: Exception) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))


def _rate_limited(exc: RateLimitedError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        detail={
            "message": str(exc),
            "reason": str(exc.reason),
            "retry_after_ms": exc.retry_after_ms,
            "daily_remaining": exc.daily_remaining,
        },
        headers={"Retry-After": str(max(1, math.ceil(exc.retry_after_ms / 1000)))},
    )


@router.get("/health")
async def health(state: ApiStateDep) -> dict[str, object]:
    database_ok = await asyncio.to_thread(check_database_health, state.engine)
    return {
        "status": "ok" if database_ok else "degraded",
        "database": database_ok,
        "restriction_reset_running": state.resets.running,
    }


@router.post(
    "/combatants",
    response_model=CombatantResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_combatant(
    request: CreateCombatantRequest, state: ApiStateDep
) -> CombatantResponse:
    try:
        combatant = await asyncio.to_thread(
            state.arena.create_combatant,
            request.name,
            request.owner_account_id,
            request.battle_text,
        )
    except ValueError as exc:
        raise _bad_request(exc) from exc
    return CombatantResponse.model_validate(combatant)


@router.get("/combatants/{combatant_id}", response_model=CombatantResponse)
async def get_combatant(combatant_id: int, state: ApiStateDep) -> CombatantResponse:
    try:
        combatant = await asyncio.to_thread(state.arena.get_combatant, combatant_id)
    except CombatantNotFoundError as exc:
        raise _not_found(exc) from exc
    return CombatantResponse.model_validate(combatant)


@router.put("/combatants/{combatant_id}/battle-text", response_model=CombatantResponse)
async def update_battle_text(
    combatant_id: int, request: UpdateBattleTextRequest, state: ApiStateDep
) -> CombatantResponse:
    try:
        combatant = await asyncio.to_thread(
            state.arena.update_battle_text, combatant_id, request.battle_text
        )
    except ValueError as exc:
        raise _bad_request(exc) from exc
    except CombatantNotFoundError as exc:
        raise _not_found(exc) from exc
    return CombatantResponse.model_validate(combatant)


@router.get("/combatants/{combatant_id}/battles", response_model=list[BattleHistoryEntry])
async def list_combatant_battles(
    combatant_id: int,
    state: ApiStateDep,
    limit: Annotated[int, Query(ge=1, le=100)] = 20,
    offset: Annotated[int, Query(ge=0)] = 0,
) -> list[BattleHistoryEntry]:
    try:
        entries = await asyncio.to_thread(
            state.arena.recent_battles, combatant_id, limit=limit, offset=offset
        )
    except CombatantNotFoundError as exc:
        raise _not_found(exc) from exc
    return [BattleHistoryEntry.model_validate(entry) for entry in entries]


@router.post("/battles", response_model=BattleResponse, status_code=status.HTTP_201_CREATED)
async def create_battle(request: CreateBattleRequest, state: ApiStateDep) -> BattleResponse:
    try:
        battle = await asyncio.to_thread(
            state.arena.resolve_battle, request.attacker_id, request.defender_id
        )
    except CombatantNotFoundError as exc:
        raise _not_found(exc) from exc
    except InvalidBattleError as exc:
        raise _bad_request(exc) from exc
    except RateLimitedError as exc:
        raise _rate_limited(exc) from exc
    return BattleResponse.model_validate(battle)


@router.get("/battles/{battle_id}", response_model=BattleResponse)
async def get_battle(battle_id: int, state: ApiStateDep) -> BattleResponse:
    try:
        battle = await asyncio.to_thread(state.arena.get_battle, battle_id)
    except BattleNotFoundError as exc:
        raise _not_found(exc) from exc
    return BattleResponse.model_validate(battle)


@router.get("/accounts/{account_id}/restriction", response_model=RestrictionStatusResponse)
async def get_restriction(account_id: str, state: ApiStateDep) -> RestrictionStatusResponse:
    summary = await asyncio.to_thread(state.arena.restriction_status, account_id)
    return RestrictionStatusResponse.model_validate(summary)


@router.post(
    "/accounts/{account_id}/restriction/reset", response_model=RestrictionStatusResponse
)
async def reset_restriction(account_id: str, state: ApiStateDep) -> RestrictionStatusResponse:
    summary = await asyncio.to_thread(state.arena.reset_restriction, account_id)
    return RestrictionStatusResponse.model_validate(summary)


@router.post("/scoring/preview", response_model=ScorePreviewResponse)
async def preview_score(request: ScorePreviewRequest, state: ApiStateDep) -> ScorePreviewResponse:
    try:
        vector = await asyncio.to_thread(state.arena.preview_score, request.battle_text)
    except ValueError as exc:
        raise _bad_request(exc) from exc
    return ScorePreviewResponse.model_validate(vector)


@router.post("/admin/npcs/seed", response_model=SeedResponse)
async def seed_npcs(state: ApiStateDep) -> SeedResponse:
    created = await asyncio.to_thread(state.arena.seed_npcs)
    return SeedResponse(created=created)


@router.post("/admin/restrictions/reset-stale", response_model=ResetStaleResponse)
async def reset_stale_restrictions(state: ApiStateDep) -> ResetStaleResponse:
    reset = await state.resets.run_once()
    return ResetStaleResponse(reset=reset)
