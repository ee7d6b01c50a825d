"""Pydantic schemas for draft endpoints and live draft messages."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from ..services.draft.errors import DraftActionResult
from ..services.draft.models import (
    DraftStateView,
    LastPickSummary,
    OrderSlot,
    PickView,
    RatedPlayer,
    TeamRef,
)
from ..services.draft.snake import TurnInfo
from ..utils.datetime_utils import now_utc


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


# -- requests ------------------------------------------------------------------


class StartDraftRequest(_CamelModel):
    cycle_number: int = Field(1, ge=1, alias="cycleNumber")


class MakePickRequest(_CamelModel):
    team_id: int = Field(..., alias="teamId")
    player_id: str = Field(..., min_length=1, alias="playerId")


# -- read models ---------------------------------------------------------------


class DraftSummary(_CamelModel):
    id: int
    season_id: int = Field(..., alias="seasonId")
    cycle_number: int = Field(..., alias="cycleNumber")
    status: str
    current_pick: int = Field(..., alias="currentPick")
    rounds_per_draft: int = Field(..., alias="roundsPerDraft")
    draft_order_assigned: bool = Field(..., alias="draftOrderAssigned")
    draft_link: str | None = Field(None, alias="draftLink")
    created_at: datetime | None = Field(None, alias="createdAt")
    completed_at: datetime | None = Field(None, alias="completedAt")

    @classmethod
    def from_model(cls, draft: Any) -> "DraftSummary":
        return cls(
            id=draft.id,
            seasonId=draft.season_id,
            cycleNumber=draft.cycle_number,
            status=draft.status,
            currentPick=draft.current_pick,
            roundsPerDraft=draft.rounds_per_draft,
            draftOrderAssigned=draft.draft_order_assigned,
            draftLink=draft.draft_link,
            createdAt=draft.created_at,
            completedAt=draft.completed_at,
        )


class TeamInfo(_CamelModel):
    id: int
    name: str
    short_name: str = Field(..., alias="shortName")
    primary_color: str = Field(..., alias="primaryColor")
    captain_id: str | None = Field(None, alias="captainId")
    captain_name: str | None = Field(None, alias="captainName")

    @classmethod
    def from_ref(cls, team: TeamRef) -> "TeamInfo":
        return cls(
            id=team.team_id,
            name=team.name,
            shortName=team.short_name,
            primaryColor=team.primary_color,
            captainId=team.captain_id,
            captainName=team.captain_name,
        )


class OrderEntry(_CamelModel):
    team_id: int = Field(..., alias="teamId")
    pick_position: int = Field(..., alias="pickPosition")
    team: TeamInfo | None = None

    @classmethod
    def from_slot(cls, slot: OrderSlot) -> "OrderEntry":
        return cls(
            teamId=slot.team_id,
            pickPosition=slot.pick_position,
            team=TeamInfo.from_ref(slot.team) if slot.team else None,
        )


class PickEntry(_CamelModel):
    pick_number: int = Field(..., alias="pickNumber")
    round: int
    team_id: int = Field(..., alias="teamId")
    team_name: str | None = Field(None, alias="teamName")
    player_id: str = Field(..., alias="playerId")
    player_name: str | None = Field(None, alias="playerName")
    jersey_number: int | None = Field(None, alias="jerseyNumber")
    position: str | None = None
    picked_by: str | None = Field(None, alias="pickedBy")
    created_at: datetime | None = Field(None, alias="createdAt")

    @classmethod
    def from_view(cls, pick: PickView) -> "PickEntry":
        return cls(
            pickNumber=pick.pick_number,
            round=pick.round,
            teamId=pick.team_id,
            teamName=pick.team_name,
            playerId=pick.player_id,
            playerName=pick.player_name,
            jerseyNumber=pick.jersey_number,
            position=pick.position,
            pickedBy=pick.picked_by,
            createdAt=pick.created_at,
        )


class TurnEntry(_CamelModel):
    pick_number: int = Field(..., alias="pickNumber")
    round: int
    position_in_round: int = Field(..., alias="positionInRound")
    expected_position: int = Field(..., alias="expectedPosition")
    team_id: int | None = Field(None, alias="teamId")

    @classmethod
    def from_turn(cls, turn: TurnInfo) -> "TurnEntry":
        return cls(
            pickNumber=turn.pick_number,
            round=turn.round,
            positionInRound=turn.position_in_round,
            expectedPosition=turn.expected_position,
            teamId=turn.team_id,
        )


class AvailablePlayer(_CamelModel):
    player_id: str = Field(..., alias="playerId")
    full_name: str | None = Field(None, alias="fullName")
    jersey_number: int | None = Field(None, alias="jerseyNumber")
    position: str | None = None
    avatar_url: str | None = Field(None, alias="avatarUrl")
    rating: str
    games_played: int = Field(..., alias="gamesPlayed")
    attendance_rate: float = Field(..., alias="attendanceRate")
    points_per_game: float = Field(..., alias="pointsPerGame")
    goals_per_game: float = Field(..., alias="goalsPerGame")
    assists_per_game: float = Field(..., alias="assistsPerGame")
    is_rated: bool = Field(..., alias="isRated")

    @classmethod
    def from_player(cls, player: RatedPlayer) -> "AvailablePlayer":
        return cls(
            playerId=player.player_id,
            fullName=player.full_name,
            jerseyNumber=player.jersey_number,
            position=player.position,
            avatarUrl=player.avatar_url,
            rating=player.rating,
            gamesPlayed=player.games_played,
            attendanceRate=player.attendance_rate,
            pointsPerGame=player.points_per_game,
            goalsPerGame=player.goals_per_game,
            assistsPerGame=player.assists_per_game,
            isRated=player.is_rated,
        )


class DraftStatePayload(_CamelModel):
    draft: DraftSummary
    order: list[OrderEntry]
    picks: list[PickEntry]
    on_the_clock: TurnEntry | None = Field(None, alias="onTheClock")
    total_picks: int = Field(..., alias="totalPicks")

    @classmethod
    def from_state(cls, state: DraftStateView) -> "DraftStatePayload":
        return cls(
            draft=DraftSummary.from_model(state.draft),
            order=[OrderEntry.from_slot(slot) for slot in state.order],
            picks=[PickEntry.from_view(pick) for pick in state.picks],
            onTheClock=TurnEntry.from_turn(state.on_the_clock) if state.on_the_clock else None,
            totalPicks=state.total_picks,
        )


class LastPickPayload(_CamelModel):
    pick: PickEntry
    games_played: int | None = Field(None, alias="gamesPlayed")
    goals: int | None = None
    assists: int | None = None
    points: int | None = None
    attendance_rate: float | None = Field(None, alias="attendanceRate")

    @classmethod
    def from_summary(cls, summary: LastPickSummary) -> "LastPickPayload":
        return cls(
            pick=PickEntry.from_view(summary.pick),
            gamesPlayed=summary.games_played,
            goals=summary.goals,
            assists=summary.assists,
            points=summary.points,
            attendanceRate=summary.attendance_rate,
        )


# -- action envelope -----------------------------------------------------------


class DraftActionResponse(_CamelModel):
    """Structured result for every draft action. ``data`` carries the payload."""

    success: bool
    error: str | None = None
    error_kind: str | None = Field(None, alias="errorKind")
    data: Any = None

    @classmethod
    def from_result(cls, result: DraftActionResult, data: Any = None) -> "DraftActionResponse":
        return cls(
            success=result.success,
            error=result.error,
            errorKind=result.error_kind.value if result.error_kind else None,
            data=data,
        )


# -- live messages -------------------------------------------------------------


class DraftMessageType(str, Enum):
    # Server -> Client
    STATE_SYNC = "state_sync"
    ERROR = "error"

    # Client -> Server
    REQUEST_SYNC = "request_sync"


class DraftWSMessage(BaseModel):
    """WebSocket message wrapper."""

    type: DraftMessageType
    timestamp: datetime = Field(default_factory=now_utc)
    payload: Any = None

    @classmethod
    def state_sync(cls, state: DraftStateView) -> "DraftWSMessage":
        return cls(
            type=DraftMessageType.STATE_SYNC,
            payload=DraftStatePayload.from_state(state).model_dump(mode="json", by_alias=True),
        )

    @classmethod
    def create_error(cls, message: str, code: str) -> "DraftWSMessage":
        return cls(type=DraftMessageType.ERROR, payload={"message": message, "code": code})
