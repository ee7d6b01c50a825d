"""Draft order assignment.

The shuffle happens once, here, server-side. Any client animation of the
shuffle is cosmetic; the persisted order is the only source of truth.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Sequence
from typing import TypeVar

from ...db.draft import DraftStatus
from .broadcast import DraftBroadcaster
from .errors import (
    DraftActionResult,
    DraftError,
    DraftNotFoundError,
    DraftOrderAlreadyAssignedError,
    DraftStateError,
)
from .lifecycle import require_owner
from .models import ActorContext, OrderSlot, TeamRef
from .state import publish_draft_state
from .store import DraftStore

logger = logging.getLogger(__name__)

T = TypeVar("T")

_rng = random.SystemRandom()


def fisher_yates(items: Sequence[T], rng: random.Random | None = None) -> list[T]:
    """Uniformly random permutation of ``items`` (input left untouched)."""
    rng = rng or _rng
    shuffled = list(items)
    for i in range(len(shuffled) - 1, 0, -1):
        j = rng.randint(0, i)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


async def get_draft_teams_with_captains(store: DraftStore) -> list[TeamRef]:
    return await store.list_teams_with_captains()


async def get_draft_order(store: DraftStore, draft_id: int) -> list[OrderSlot]:
    return await store.get_order(draft_id)


async def assign_order(
    store: DraftStore,
    actor: ActorContext,
    draft_id: int,
    broadcaster: DraftBroadcaster | None = None,
    rng: random.Random | None = None,
) -> DraftActionResult[list[OrderSlot]]:
    """Shuffle the captained teams into pick positions 1..N, exactly once per draft."""
    try:
        require_owner(actor)
        draft = await store.get_draft(draft_id)
        if draft is None:
            raise DraftNotFoundError("Draft not found")
        if draft.draft_order_assigned:
            raise DraftOrderAlreadyAssignedError("Draft order has already been assigned")
        if draft.status != DraftStatus.pending.value:
            raise DraftStateError(f"Draft order can only be assigned while pending (draft is {draft.status})")

        teams = await store.list_teams_with_captains()
        if not teams:
            raise DraftStateError("No teams with captains found")

        shuffled = fisher_yates([team.team_id for team in teams], rng)
        order = await store.assign_order(draft_id, shuffled)
    except DraftError as exc:
        logger.info(
            "draft_order_rejected",
            extra={"draft_id": draft_id, "reason": exc.message, "kind": exc.kind.value},
        )
        return DraftActionResult.failed(exc)

    logger.info(
        "draft_order_assigned",
        extra={
            "draft_id": draft_id,
            "order": [slot.team_id for slot in order],
        },
    )
    await publish_draft_state(store, broadcaster, draft_id)
    return DraftActionResult.ok(order)
