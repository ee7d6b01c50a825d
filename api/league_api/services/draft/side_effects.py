"""Best-effort side effects triggered when a draft cycle starts.

Neither may block or fail draft creation. Callers wrap them and log.
"""

from __future__ import annotations

import logging
from typing import Protocol

from ...celery_client import DRAFT_NOTIFICATION_TASK, RATINGS_TASK, get_celery_app

logger = logging.getLogger(__name__)


class DraftSideEffects(Protocol):
    def request_player_ratings(self, season_id: int) -> None: ...

    def notify_captains(self, draft_id: int, season_name: str, draft_link: str | None) -> None: ...


class CeleryDraftSideEffects:
    """Dispatches side effects as Celery tasks (fire-and-forget)."""

    def request_player_ratings(self, season_id: int) -> None:
        result = get_celery_app().send_task(RATINGS_TASK, args=[season_id])
        logger.info(
            "player_ratings_requested",
            extra={"season_id": season_id, "task_id": result.id},
        )

    def notify_captains(self, draft_id: int, season_name: str, draft_link: str | None) -> None:
        result = get_celery_app().send_task(
            DRAFT_NOTIFICATION_TASK, args=[draft_id, season_name, draft_link]
        )
        logger.info(
            "draft_notifications_enqueued",
            extra={"draft_id": draft_id, "task_id": result.id},
        )


def get_side_effects() -> DraftSideEffects:
    """FastAPI dependency; overridden in tests."""
    return CeleryDraftSideEffects()
