"""Authoritative draft snapshots and their fan-out."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ...db.draft import DraftStatus
from .errors import DraftNotFoundError
from .models import DraftStateView, OrderSlot
from .snake import TurnInfo, compute_turn, total_picks
from .store import DraftStore

if TYPE_CHECKING:
    from ...db.draft import Draft
    from .broadcast import DraftBroadcaster

logger = logging.getLogger(__name__)


def turn_for(draft: "Draft", order: list[OrderSlot]) -> TurnInfo | None:
    """Team on the clock, or None when the draft is not accepting picks."""
    if draft.status != DraftStatus.in_progress.value or not order:
        return None
    return compute_turn(draft.current_pick, [(slot.team_id, slot.pick_position) for slot in order])


async def load_draft_state(store: DraftStore, draft_id: int) -> DraftStateView:
    draft = await store.get_draft(draft_id)
    if draft is None:
        raise DraftNotFoundError("Draft not found")
    order = await store.get_order(draft_id)
    picks = await store.list_picks(draft_id)
    return DraftStateView(
        draft=draft,
        order=order,
        picks=picks,
        on_the_clock=turn_for(draft, order),
        total_picks=total_picks(len(order), draft.rounds_per_draft) if order else 0,
    )


async def publish_draft_state(
    store: DraftStore,
    broadcaster: "DraftBroadcaster | None",
    draft_id: int,
) -> None:
    """Push a fresh snapshot to every viewer of ``draft_id``.

    Runs after the triggering write has committed. A failure here never
    undoes the write; viewers recover on their next sync.
    """
    if broadcaster is None or broadcaster.subscriber_count(draft_id) == 0:
        return
    # Local import: schemas depend on this package's value types.
    from ...schemas.draft import DraftWSMessage

    try:
        state = await load_draft_state(store, draft_id)
    except DraftNotFoundError:
        logger.warning("draft_publish_missing_draft", extra={"draft_id": draft_id})
        return
    message = DraftWSMessage.state_sync(state).model_dump(mode="json")
    delivered = broadcaster.publish(draft_id, message)
    logger.debug("draft_state_published", extra={"draft_id": draft_id, "subscribers": delivered})
