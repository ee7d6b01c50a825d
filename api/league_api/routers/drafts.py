"""HTTP endpoints for the live draft.

Every mutating endpoint answers with a ``DraftActionResponse`` body, on
failure too; the status code follows the error kind.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import JSONResponse

from ..dependencies import get_actor, get_draft_store, verify_api_key
from ..schemas.draft import (
    AvailablePlayer,
    DraftActionResponse,
    DraftStatePayload,
    DraftSummary,
    LastPickPayload,
    MakePickRequest,
    OrderEntry,
    PickEntry,
    StartDraftRequest,
    TeamInfo,
)
from ..services.draft import (
    ActorContext,
    DraftActionResult,
    DraftBroadcaster,
    DraftErrorKind,
    DraftNotFoundError,
    DraftSideEffects,
    DraftStore,
    activate_draft,
    apply_pick,
    assign_order,
    complete_draft_rosters,
    get_available_players,
    get_broadcaster,
    get_current_draft,
    get_draft_order,
    get_draft_picks,
    get_draft_teams_with_captains,
    get_eligible_players,
    get_last_pick,
    get_side_effects,
    load_draft_state,
    start_draft_cycle,
)

router = APIRouter(prefix="/api", tags=["drafts"], dependencies=[Depends(verify_api_key)])

ERROR_STATUS = {
    DraftErrorKind.authorization: status.HTTP_403_FORBIDDEN,
    DraftErrorKind.not_found: status.HTTP_404_NOT_FOUND,
    DraftErrorKind.state: status.HTTP_409_CONFLICT,
    DraftErrorKind.conflict: status.HTTP_409_CONFLICT,
}


def _respond(result: DraftActionResult, data: Any = None) -> JSONResponse:
    body = DraftActionResponse.from_result(result, data)
    if result.success:
        status_code = status.HTTP_200_OK
    else:
        status_code = ERROR_STATUS.get(result.error_kind, status.HTTP_400_BAD_REQUEST)
    return JSONResponse(body.model_dump(mode="json", by_alias=True), status_code=status_code)


@router.post("/seasons/{season_id}/drafts", response_model=DraftActionResponse)
async def start_draft(
    season_id: int,
    payload: StartDraftRequest,
    actor: ActorContext = Depends(get_actor),
    store: DraftStore = Depends(get_draft_store),
    side_effects: DraftSideEffects = Depends(get_side_effects),
) -> JSONResponse:
    """Start (or resume) the season's draft cycle."""
    result = await start_draft_cycle(store, actor, season_id, payload.cycle_number, side_effects)
    data = DraftSummary.from_model(result.value).model_dump(mode="json", by_alias=True) if result.success else None
    return _respond(result, data)


@router.get("/seasons/{season_id}/eligible-players", response_model=list[AvailablePlayer])
async def list_eligible_players(
    season_id: int,
    store: DraftStore = Depends(get_draft_store),
) -> list[AvailablePlayer]:
    players = await get_eligible_players(store, season_id)
    return [AvailablePlayer.from_player(player) for player in players]


@router.get("/drafts/current", response_model=DraftSummary | None)
async def current_draft(
    season_id: int | None = Query(None, alias="seasonId"),
    draft_link: str | None = Query(None, alias="draftLink"),
    store: DraftStore = Depends(get_draft_store),
) -> DraftSummary | None:
    """Open draft for a season or behind a shareable link; null when there is none."""
    if season_id is None and not draft_link:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="seasonId or draftLink is required",
        )
    draft = await get_current_draft(store, season_id=season_id, draft_link=draft_link)
    return DraftSummary.from_model(draft) if draft else None


@router.get("/draft-teams", response_model=list[TeamInfo])
async def draft_teams(store: DraftStore = Depends(get_draft_store)) -> list[TeamInfo]:
    teams = await get_draft_teams_with_captains(store)
    return [TeamInfo.from_ref(team) for team in teams]


@router.get("/drafts/{draft_id}/order", response_model=list[OrderEntry])
async def draft_order(
    draft_id: int,
    store: DraftStore = Depends(get_draft_store),
) -> list[OrderEntry]:
    order = await get_draft_order(store, draft_id)
    return [OrderEntry.from_slot(slot) for slot in order]


@router.post("/drafts/{draft_id}/order", response_model=DraftActionResponse)
async def assign_draft_order(
    draft_id: int,
    actor: ActorContext = Depends(get_actor),
    store: DraftStore = Depends(get_draft_store),
    broadcaster: DraftBroadcaster = Depends(get_broadcaster),
) -> JSONResponse:
    """Randomize the draft order. Allowed once per draft."""
    result = await assign_order(store, actor, draft_id, broadcaster=broadcaster)
    data = None
    if result.success:
        data = [OrderEntry.from_slot(slot).model_dump(mode="json", by_alias=True) for slot in result.value]
    return _respond(result, data)


@router.post("/drafts/{draft_id}/activate", response_model=DraftActionResponse)
async def activate(
    draft_id: int,
    actor: ActorContext = Depends(get_actor),
    store: DraftStore = Depends(get_draft_store),
    broadcaster: DraftBroadcaster = Depends(get_broadcaster),
) -> JSONResponse:
    result = await activate_draft(store, actor, draft_id, broadcaster=broadcaster)
    data = DraftSummary.from_model(result.value).model_dump(mode="json", by_alias=True) if result.success else None
    return _respond(result, data)


@router.get("/drafts/{draft_id}/picks", response_model=list[PickEntry])
async def draft_picks(
    draft_id: int,
    store: DraftStore = Depends(get_draft_store),
) -> list[PickEntry]:
    picks = await get_draft_picks(store, draft_id)
    return [PickEntry.from_view(pick) for pick in picks]


@router.post("/drafts/{draft_id}/picks", response_model=DraftActionResponse)
async def make_pick(
    draft_id: int,
    payload: MakePickRequest,
    actor: ActorContext = Depends(get_actor),
    store: DraftStore = Depends(get_draft_store),
    broadcaster: DraftBroadcaster = Depends(get_broadcaster),
) -> JSONResponse:
    """Submit a pick for ``teamId``. Conflicts mean someone else acted first."""
    result = await apply_pick(
        store,
        actor,
        draft_id,
        payload.team_id,
        payload.player_id,
        broadcaster=broadcaster,
    )
    data = PickEntry.from_view(result.value).model_dump(mode="json", by_alias=True) if result.success else None
    return _respond(result, data)


@router.get("/drafts/{draft_id}/available-players", response_model=list[AvailablePlayer])
async def available_players(
    draft_id: int,
    store: DraftStore = Depends(get_draft_store),
) -> list[AvailablePlayer]:
    try:
        players = await get_available_players(store, draft_id)
    except DraftNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=exc.message) from exc
    return [AvailablePlayer.from_player(player) for player in players]


@router.get("/drafts/{draft_id}/state", response_model=DraftStatePayload)
async def draft_state(
    draft_id: int,
    store: DraftStore = Depends(get_draft_store),
) -> DraftStatePayload:
    """Full authoritative snapshot; the polling fallback for the live board."""
    try:
        state = await load_draft_state(store, draft_id)
    except DraftNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=exc.message) from exc
    return DraftStatePayload.from_state(state)


@router.get("/drafts/{draft_id}/last-pick", response_model=LastPickPayload | None)
async def last_pick(
    draft_id: int,
    store: DraftStore = Depends(get_draft_store),
) -> LastPickPayload | None:
    summary = await get_last_pick(store, draft_id)
    return LastPickPayload.from_summary(summary) if summary else None


@router.post("/drafts/{draft_id}/rosters", response_model=DraftActionResponse)
async def create_rosters(
    draft_id: int,
    actor: ActorContext = Depends(get_actor),
    store: DraftStore = Depends(get_draft_store),
) -> JSONResponse:
    """Write team rosters from a completed draft and reopen the season."""
    result = await complete_draft_rosters(store, actor, draft_id)
    data = {"rosterCount": len(result.value)} if result.success else None
    return _respond(result, data)
