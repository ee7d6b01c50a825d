"""Pick Application Engine.

Validation runs in a fixed order, each step with its own failure:

1. the actor captains ``team_id`` or is the owner
2. the draft exists and is in progress
3. the draft has an order and ``team_id`` is in it
4. ``team_id`` is on the clock (skipped for the owner)
5. the player exists and is still available

Step 5 here is only a fast path. The authoritative guards live in the
store's commit: the conditional advance of current_pick, the unique
(draft_id, player_id) constraint and the foreign keys on the pick row.
"""

from __future__ import annotations

import logging

from ...db.draft import DraftStatus
from .broadcast import DraftBroadcaster
from .errors import (
    DraftActionResult,
    DraftAuthorizationError,
    DraftError,
    DraftNotFoundError,
    DraftStateError,
    PlayerAlreadyDraftedError,
    TurnOrderError,
)
from .models import ActorContext, LastPickSummary, PickView
from .snake import round_for_pick, total_picks
from .state import publish_draft_state, turn_for
from .store import DraftStore

logger = logging.getLogger(__name__)

# Share of total points attributed to goals when only points are recorded.
GOAL_SHARE = 0.4


async def _authorize_pick(store: DraftStore, actor: ActorContext, team_id: int) -> None:
    if actor.is_owner:
        return
    team = await store.get_team(team_id)
    if team is None or team.captain_id != actor.user_id:
        raise DraftAuthorizationError("Not authorized - you are not the captain of this team")


async def apply_pick(
    store: DraftStore,
    actor: ActorContext,
    draft_id: int,
    team_id: int,
    player_id: str,
    broadcaster: DraftBroadcaster | None = None,
) -> DraftActionResult[PickView]:
    """Validate and atomically commit one pick, then fan out the new state."""
    try:
        await _authorize_pick(store, actor, team_id)

        draft = await store.get_draft(draft_id)
        if draft is None:
            raise DraftNotFoundError("Draft not found")
        if draft.status != DraftStatus.in_progress.value:
            raise DraftStateError("Draft is not active")

        order = await store.get_order(draft_id)
        if not order:
            raise DraftStateError("Draft order not assigned")
        if team_id not in {slot.team_id for slot in order}:
            raise DraftNotFoundError(f"Team {team_id} is not part of this draft")

        turn = turn_for(draft, order)
        if not actor.is_owner and (turn is None or turn.team_id != team_id):
            raise TurnOrderError("It's not your turn to pick")

        if await store.get_profile(player_id) is None:
            raise DraftNotFoundError(f"Player {player_id} not found")
        drafted = await store.drafted_player_ids(draft_id)
        if player_id in drafted:
            raise PlayerAlreadyDraftedError("Player has already been drafted")

        expected_pick = draft.current_pick
        planned = total_picks(len(order), draft.rounds_per_draft)
        pick = await store.commit_pick(
            draft_id=draft_id,
            expected_pick=expected_pick,
            team_id=team_id,
            player_id=player_id,
            round_number=round_for_pick(expected_pick, len(order)),
            picked_by=actor.user_id,
            completes_draft=expected_pick >= planned,
        )
    except DraftError as exc:
        logger.info(
            "draft_pick_rejected",
            extra={
                "draft_id": draft_id,
                "team_id": team_id,
                "player_id": player_id,
                "reason": exc.message,
                "kind": exc.kind.value,
            },
        )
        return DraftActionResult.failed(exc)

    if expected_pick >= planned:
        logger.info(
            "draft_completed",
            extra={"draft_id": draft_id, "total_picks": planned},
        )
    await publish_draft_state(store, broadcaster, draft_id)
    return DraftActionResult.ok(pick)


async def get_draft_picks(store: DraftStore, draft_id: int) -> list[PickView]:
    return await store.list_picks(draft_id)


async def get_last_pick(store: DraftStore, draft_id: int) -> LastPickSummary | None:
    """Most recent pick, with the player's stats line when a rating snapshot exists."""
    pick = await store.last_pick(draft_id)
    if pick is None:
        return None
    draft = await store.get_draft(draft_id)
    if draft is None:
        return LastPickSummary(pick=pick)

    snapshots = await store.rating_snapshots(draft.season_id, [pick.player_id])
    snapshot = snapshots.get(pick.player_id)
    if snapshot is None:
        return LastPickSummary(pick=pick)

    points = round(snapshot.points_per_game * snapshot.games_played)
    goals = round(points * GOAL_SHARE)
    return LastPickSummary(
        pick=pick,
        games_played=snapshot.games_played,
        goals=goals,
        assists=points - goals,
        points=points,
        attendance_rate=snapshot.attendance_rate,
    )
