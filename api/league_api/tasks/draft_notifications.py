"""Background task: tell every captain that a draft has begun."""

from __future__ import annotations

import asyncio
import logging
import smtplib
from dataclasses import dataclass
from email.message import EmailMessage
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from ..celery_app import celery_app
from ..celery_client import DRAFT_NOTIFICATION_TASK
from ..config import settings
from ..services.draft.models import TeamRef
from ..services.draft.store import SqlDraftStore

logger = logging.getLogger(__name__)

DRAFT_RULES = (
    "Draft order: teams pick in snake format (round 1 runs 1 to N, round 2 runs N to 1, and so on).",
    "Pick time: the draft board shows whose turn it is and updates live.",
    "Player grades: players are rated A+ through D- from attendance and scoring "
    "(goals against and save percentage for goalies).",
    "Completion: the draft runs until every team has filled its rounds.",
)


@dataclass(frozen=True)
class DraftNotification:
    to: str
    team_name: str
    subject: str
    body: str


def captain_draft_url(draft_link: str | None, site_url: str | None = None) -> str:
    base = (site_url or settings.site_url).rstrip("/")
    if draft_link:
        return f"{base}/captain/draft?draft={draft_link}"
    return f"{base}/captain/draft"


def build_notifications(
    teams: list[TeamRef],
    season_name: str,
    draft_link: str | None,
    site_url: str | None = None,
) -> list[DraftNotification]:
    """One message per team whose captain has an email address."""
    url = captain_draft_url(draft_link, site_url)
    rules = "\n".join(f"  - {rule}" for rule in DRAFT_RULES)
    notifications = []
    for team in teams:
        if not team.captain_email:
            continue
        greeting = f"Hello {team.captain_name}," if team.captain_name else "Hello Captain,"
        body = (
            f"{greeting}\n\n"
            f"The draft for {season_name} has started. Time to build {team.name}.\n\n"
            f"Draft rules:\n{rules}\n\n"
            f"Your draft board: {url}\n"
        )
        notifications.append(
            DraftNotification(
                to=team.captain_email,
                team_name=team.name,
                subject=f"Draft has begun - {season_name}",
                body=body,
            )
        )
    return notifications


def _send(notification: DraftNotification) -> None:
    if not settings.smtp_host:
        logger.info(
            "draft_notification_prepared",
            extra={"to": notification.to, "team": notification.team_name},
        )
        return
    message = EmailMessage()
    message["From"] = settings.smtp_from
    message["To"] = notification.to
    message["Subject"] = notification.subject
    message.set_content(notification.body)
    with smtplib.SMTP(settings.smtp_host, settings.smtp_port) as smtp:
        smtp.send_message(message)


async def _load_captains() -> list[TeamRef]:
    # Fresh engine per run: asyncio.run gives each task its own event loop.
    engine = create_async_engine(settings.database_url, echo=False)
    try:
        session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
        async with session_factory() as session:
            return await SqlDraftStore(session).list_teams_with_captains()
    finally:
        await engine.dispose()


@celery_app.task(name=DRAFT_NOTIFICATION_TASK)
def send_draft_notifications(
    draft_id: int,
    season_name: str,
    draft_link: str | None = None,
) -> dict[str, Any]:
    """Send (or log, without SMTP) the draft-started message to each captain."""
    teams = asyncio.run(_load_captains())
    notifications = build_notifications(teams, season_name, draft_link)

    sent = 0
    failed = 0
    for notification in notifications:
        try:
            _send(notification)
            sent += 1
        except (smtplib.SMTPException, OSError):
            failed += 1
            logger.exception(
                "draft_notification_failed",
                extra={"draft_id": draft_id, "to": notification.to},
            )

    logger.info(
        "draft_notifications_done",
        extra={"draft_id": draft_id, "sent": sent, "failed": failed},
    )
    return {"draft_id": draft_id, "sent": sent, "failed": failed}
