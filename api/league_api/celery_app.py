"""Celery application for the API's own background tasks."""

import os
from celery import Celery

# Redis connection from environment
# CELERY_BROKER_URL takes precedence if set (for separate broker database)
REDIS_URL = os.getenv("REDIS_URL", "redis://localhost:6379/0")
CELERY_BROKER_URL = os.getenv("CELERY_BROKER_URL", REDIS_URL)

celery_app = Celery(
    "league_api",
    broker=CELERY_BROKER_URL,
    backend=REDIS_URL,
    include=["league_api.tasks.draft_notifications"],
)

celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    task_track_started=True,
    task_time_limit=600,
    task_soft_time_limit=540,
    result_expires=86400,  # Keep results for 24 hours
    task_default_queue=os.getenv("CELERY_DEFAULT_QUEUE", "league-api"),
)
