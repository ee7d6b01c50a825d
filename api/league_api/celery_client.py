"""Celery client for dispatching draft side-effect tasks."""

from __future__ import annotations

from functools import lru_cache

from celery import Celery

from .config import settings

RATINGS_TASK = "compute_player_ratings"
DRAFT_NOTIFICATION_TASK = "send_draft_notifications"


@lru_cache(maxsize=1)
def get_celery_app() -> Celery:
    app = Celery(
        "league-api",
        broker=settings.celery_broker,
        backend=settings.celery_backend,
    )
    app.conf.task_default_queue = settings.celery_default_queue
    app.conf.task_routes = {
        RATINGS_TASK: {
            "queue": settings.ratings_task_queue,
            "routing_key": settings.ratings_task_queue,
        },
        DRAFT_NOTIFICATION_TASK: {
            "queue": settings.celery_default_queue,
            "routing_key": settings.celery_default_queue,
        },
    }
    app.conf.task_always_eager = False
    app.conf.task_eager_propagates = True
    return app
