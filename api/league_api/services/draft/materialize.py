"""Post-draft materialization: turn a completed draft's picks into rosters."""

from __future__ import annotations

import logging

from ...db.draft import DraftStatus
from .errors import DraftActionResult, DraftError, DraftNotFoundError, DraftStateError
from .lifecycle import require_owner
from .models import ActorContext, RosterEntry, is_goalie_position
from .store import DraftStore

logger = logging.getLogger(__name__)


async def complete_draft_rosters(
    store: DraftStore,
    actor: ActorContext,
    draft_id: int,
) -> DraftActionResult[list[RosterEntry]]:
    """Rebuild the season's rosters from the draft picks and reopen the season.

    Replaces every roster row for the season, so running it again yields the
    same roster set.
    """
    try:
        require_owner(actor)
        draft = await store.get_draft(draft_id)
        if draft is None:
            raise DraftNotFoundError("Draft not found")
        if draft.status != DraftStatus.completed.value:
            raise DraftStateError("Draft must be completed before rosters can be created")

        picks = await store.list_picks(draft_id)
        if not picks:
            raise DraftStateError("No draft picks found")

        positions = await store.player_positions(pick.player_id for pick in picks)
        entries = [
            RosterEntry(
                team_id=pick.team_id,
                player_id=pick.player_id,
                season_id=draft.season_id,
                is_goalie=is_goalie_position(positions.get(pick.player_id)),
            )
            for pick in picks
        ]
        await store.materialize_rosters(draft.season_id, entries)
    except DraftError as exc:
        logger.info(
            "roster_materialization_rejected",
            extra={"draft_id": draft_id, "reason": exc.message},
        )
        return DraftActionResult.failed(exc)

    logger.info(
        "rosters_materialized",
        extra={
            "draft_id": draft_id,
            "season_id": draft.season_id,
            "roster_count": len(entries),
        },
    )
    return DraftActionResult.ok(entries)
