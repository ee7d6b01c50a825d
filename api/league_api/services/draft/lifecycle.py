"""Draft state machine: starting a cycle, activation and lookup.

    pending ──(order assigned, owner activates)──▶ in_progress ──(last pick)──▶ completed

Only the operations here, the order assigner and the pick engine write a
draft's status, current_pick or draft_order_assigned.
"""

from __future__ import annotations

import logging
import secrets
import string

from ...config import settings
from ...db.draft import Draft, DraftStatus
from ...db.league import DRAFT_ELIGIBLE_SEASON_STATUSES
from ...utils.datetime_utils import epoch_millis
from .broadcast import DraftBroadcaster
from .errors import (
    DraftActionResult,
    DraftAuthorizationError,
    DraftError,
    DraftNotFoundError,
    DraftStateError,
    DuplicateDraftError,
)
from .models import ActorContext
from .side_effects import DraftSideEffects
from .state import publish_draft_state
from .store import DraftStore

logger = logging.getLogger(__name__)

_LINK_ALPHABET = string.digits + string.ascii_lowercase


def require_owner(actor: ActorContext) -> None:
    if not actor.is_owner:
        raise DraftAuthorizationError("Not authorized - owner access required")


def generate_draft_link(season_id: int | str) -> str:
    """Shareable token: draft-<season prefix>-<epoch ms>-<7 base36 chars>."""
    suffix = "".join(secrets.choice(_LINK_ALPHABET) for _ in range(7))
    return f"draft-{str(season_id)[:8]}-{epoch_millis()}-{suffix}"


async def _resolve_cycle_number(store: DraftStore, season_id: int, requested: int) -> int:
    existing = await store.find_draft_by_cycle(season_id, requested)
    if existing is None or existing.status != DraftStatus.completed.value:
        return requested
    highest = await store.max_cycle_number(season_id)
    return (highest or requested) + 1


async def _open_or_create_draft(
    store: DraftStore,
    season_id: int,
    cycle_number: int,
    rounds_per_draft: int,
) -> tuple[Draft, bool]:
    """Return (draft, created). Reuses the season's open draft when there is one."""
    active = await store.find_open_draft(season_id)
    if active is not None:
        if not active.draft_link:
            active = await store.set_draft_link(active.id, generate_draft_link(season_id))
        logger.info(
            "draft_reused",
            extra={"draft_id": active.id, "season_id": season_id},
        )
        return active, False

    actual_cycle = await _resolve_cycle_number(store, season_id, cycle_number)
    try:
        draft = await store.create_draft(
            season_id=season_id,
            cycle_number=actual_cycle,
            rounds_per_draft=rounds_per_draft,
            draft_link=generate_draft_link(season_id),
        )
    except DuplicateDraftError:
        # Lost a creation race; continue with whichever draft won.
        existing = await store.find_draft_by_cycle(season_id, actual_cycle)
        if existing is None:
            existing = await store.find_open_draft(season_id)
        if existing is None:
            raise
        logger.info(
            "draft_reused_after_duplicate",
            extra={"draft_id": existing.id, "season_id": season_id},
        )
        return existing, False

    logger.info(
        "draft_created",
        extra={
            "draft_id": draft.id,
            "season_id": season_id,
            "cycle_number": actual_cycle,
            "rounds_per_draft": rounds_per_draft,
        },
    )
    return draft, True


async def start_draft_cycle(
    store: DraftStore,
    actor: ActorContext,
    season_id: int,
    cycle_number: int,
    side_effects: DraftSideEffects,
    rounds_per_draft: int | None = None,
) -> DraftActionResult[Draft]:
    """Open (or resume) the season's draft and put the season into its draft phase.

    Rating recompute and captain notification are best-effort: their failures
    are logged and never fail or roll back the draft.
    """
    try:
        require_owner(actor)
        season = await store.get_season(season_id)
        if season is None:
            raise DraftNotFoundError("Season not found")
        if season.status not in DRAFT_ELIGIBLE_SEASON_STATUSES:
            raise DraftStateError(
                f"Season must be active, in playoffs or drafting to start a draft (is {season.status})"
            )

        try:
            side_effects.request_player_ratings(season_id)
        except Exception:
            logger.warning(
                "player_ratings_request_failed",
                extra={"season_id": season_id},
                exc_info=True,
            )

        teams = await store.list_teams_with_captains()
        if not teams:
            raise DraftStateError("No teams with captains found. Assign captains before starting a draft.")

        draft, created = await _open_or_create_draft(
            store,
            season_id,
            cycle_number,
            rounds_per_draft or settings.draft_rounds,
        )
        await store.enter_draft_phase(season_id)
    except DraftError as exc:
        logger.info(
            "draft_start_rejected",
            extra={"season_id": season_id, "reason": exc.message, "kind": exc.kind.value},
        )
        return DraftActionResult.failed(exc)

    if created:
        try:
            side_effects.notify_captains(draft.id, season.name, draft.draft_link)
        except Exception:
            logger.error(
                "draft_notification_dispatch_failed",
                extra={"draft_id": draft.id},
                exc_info=True,
            )

    return DraftActionResult.ok(draft)


async def activate_draft(
    store: DraftStore,
    actor: ActorContext,
    draft_id: int,
    broadcaster: DraftBroadcaster | None = None,
) -> DraftActionResult[Draft]:
    try:
        require_owner(actor)
        draft = await store.get_draft(draft_id)
        if draft is None:
            raise DraftNotFoundError("Draft not found")
        if not draft.draft_order_assigned:
            raise DraftStateError("Draft order must be assigned before activating the draft")
        if draft.status != DraftStatus.pending.value:
            raise DraftStateError(f"Only a pending draft can be activated (draft is {draft.status})")
        draft = await store.activate(draft_id)
    except DraftError as exc:
        logger.info(
            "draft_activation_rejected",
            extra={"draft_id": draft_id, "reason": exc.message},
        )
        return DraftActionResult.failed(exc)

    logger.info("draft_activated", extra={"draft_id": draft_id})
    await publish_draft_state(store, broadcaster, draft_id)
    return DraftActionResult.ok(draft)


async def get_current_draft(
    store: DraftStore,
    season_id: int | None = None,
    draft_link: str | None = None,
) -> Draft | None:
    """The open draft for a season, or the open draft behind a shareable link."""
    if draft_link:
        return await store.find_open_draft_by_link(draft_link)
    if season_id is None:
        return None
    return await store.find_open_draft(season_id)
