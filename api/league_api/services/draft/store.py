"""Persistence for the draft core.

``DraftStore`` is the seam between the draft services and the database.
``SqlDraftStore`` implements it on an ``AsyncSession``. Every mutating
method is one transaction: it commits on success and rolls back before
raising, so callers never observe partial writes.

The draft row is the serialization point. Picks advance ``current_pick``
with a conditional UPDATE keyed on the value read by the caller; the
unique constraints on draft_picks and draft_order are the final guard.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from typing import Protocol

from sqlalchemy import delete, func, insert, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import selectinload

from ...db import AsyncSession
from ...db.draft import OPEN_DRAFT_STATUSES, Draft, DraftOrder, DraftPick, DraftStatus
from ...db.league import (
    OptInType,
    PlayerRating,
    Profile,
    Season,
    SeasonOptIn,
    SeasonStatus,
    Team,
    TeamRoster,
)
from ...utils.datetime_utils import now_utc
from .errors import (
    DraftError,
    DraftNotFoundError,
    DraftOrderAlreadyAssignedError,
    DraftStateError,
    DuplicateDraftError,
    PlayerAlreadyDraftedError,
    TurnMovedOnError,
)
from .models import OrderSlot, PickView, PlayerRef, RatingSnapshot, RosterEntry, TeamRef

logger = logging.getLogger(__name__)


class DraftStore(Protocol):
    async def get_profile(self, user_id: str) -> Profile | None: ...

    async def get_season(self, season_id: int) -> Season | None: ...

    async def get_team(self, team_id: int) -> Team | None: ...

    async def list_teams_with_captains(self) -> list[TeamRef]: ...

    async def get_draft(self, draft_id: int) -> Draft | None: ...

    async def find_open_draft(self, season_id: int) -> Draft | None: ...

    async def find_open_draft_by_link(self, draft_link: str) -> Draft | None: ...

    async def find_draft_by_cycle(self, season_id: int, cycle_number: int) -> Draft | None: ...

    async def max_cycle_number(self, season_id: int) -> int | None: ...

    async def get_order(self, draft_id: int) -> list[OrderSlot]: ...

    async def list_picks(self, draft_id: int) -> list[PickView]: ...

    async def last_pick(self, draft_id: int) -> PickView | None: ...

    async def drafted_player_ids(self, draft_id: int) -> set[str]: ...

    async def eligible_players(self, season_id: int) -> list[PlayerRef]: ...

    async def rating_snapshots(
        self, season_id: int, player_ids: Iterable[str]
    ) -> dict[str, RatingSnapshot]: ...

    async def player_positions(self, player_ids: Iterable[str]) -> dict[str, str | None]: ...

    async def create_draft(
        self, season_id: int, cycle_number: int, rounds_per_draft: int, draft_link: str
    ) -> Draft: ...

    async def set_draft_link(self, draft_id: int, draft_link: str) -> Draft: ...

    async def enter_draft_phase(self, season_id: int) -> None: ...

    async def assign_order(self, draft_id: int, team_ids: Sequence[int]) -> list[OrderSlot]: ...

    async def activate(self, draft_id: int) -> Draft: ...

    async def commit_pick(
        self,
        draft_id: int,
        expected_pick: int,
        team_id: int,
        player_id: str,
        round_number: int,
        picked_by: str,
        completes_draft: bool,
    ) -> PickView: ...

    async def materialize_rosters(self, season_id: int, entries: Sequence[RosterEntry]) -> None: ...


def _pick_integrity_error(exc: IntegrityError, team_id: int, player_id: str) -> DraftError | None:
    """Map a constraint violation on draft_picks to a draft error, or None if unrecognized."""
    message = str(exc.orig)
    if "uq_draft_picks_draft_player" in message:
        return PlayerAlreadyDraftedError("Player has already been drafted")
    if "uq_draft_picks_draft_pick_number" in message:
        return TurnMovedOnError("The draft has moved on to another pick. Refresh and try again.")
    if "draft_picks_player_id_fkey" in message:
        return DraftNotFoundError(f"Player {player_id} not found")
    if "draft_picks_team_id_fkey" in message:
        return DraftNotFoundError(f"Team {team_id} not found")
    return None


def _team_ref(team: Team) -> TeamRef:
    captain = team.captain
    return TeamRef(
        team_id=team.id,
        name=team.name,
        short_name=team.short_name,
        primary_color=team.primary_color,
        captain_id=team.captain_id,
        captain_name=captain.full_name if captain else None,
        captain_email=captain.email if captain else None,
    )


def _pick_view(pick: DraftPick) -> PickView:
    return PickView(
        pick_number=pick.pick_number,
        round=pick.round,
        team_id=pick.team_id,
        player_id=pick.player_id,
        picked_by=pick.picked_by,
        team_name=pick.team.name if pick.team else None,
        player_name=pick.player.full_name if pick.player else None,
        jersey_number=pick.player.jersey_number if pick.player else None,
        position=pick.player.position if pick.player else None,
        created_at=pick.created_at,
    )


class SqlDraftStore:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    # -- reads ---------------------------------------------------------------

    async def get_profile(self, user_id: str) -> Profile | None:
        return await self._session.get(Profile, user_id)

    async def get_season(self, season_id: int) -> Season | None:
        return await self._session.get(Season, season_id)

    async def get_team(self, team_id: int) -> Team | None:
        return await self._session.get(Team, team_id)

    async def list_teams_with_captains(self) -> list[TeamRef]:
        result = await self._session.execute(
            select(Team)
            .where(Team.captain_id.is_not(None))
            .options(selectinload(Team.captain))
            .order_by(Team.name)
        )
        return [_team_ref(team) for team in result.scalars().all()]

    async def get_draft(self, draft_id: int) -> Draft | None:
        return await self._session.get(Draft, draft_id, populate_existing=True)

    async def find_open_draft(self, season_id: int) -> Draft | None:
        result = await self._session.execute(
            select(Draft)
            .where(Draft.season_id == season_id, Draft.status.in_(OPEN_DRAFT_STATUSES))
            .order_by(Draft.created_at.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def find_open_draft_by_link(self, draft_link: str) -> Draft | None:
        result = await self._session.execute(
            select(Draft)
            .where(Draft.draft_link == draft_link, Draft.status.in_(OPEN_DRAFT_STATUSES))
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def find_draft_by_cycle(self, season_id: int, cycle_number: int) -> Draft | None:
        result = await self._session.execute(
            select(Draft).where(
                Draft.season_id == season_id, Draft.cycle_number == cycle_number
            )
        )
        return result.scalar_one_or_none()

    async def max_cycle_number(self, season_id: int) -> int | None:
        result = await self._session.execute(
            select(func.max(Draft.cycle_number)).where(Draft.season_id == season_id)
        )
        return result.scalar()

    async def get_order(self, draft_id: int) -> list[OrderSlot]:
        result = await self._session.execute(
            select(DraftOrder)
            .where(DraftOrder.draft_id == draft_id)
            .options(selectinload(DraftOrder.team).selectinload(Team.captain))
            .order_by(DraftOrder.pick_position)
        )
        return [
            OrderSlot(
                team_id=entry.team_id,
                pick_position=entry.pick_position,
                team=_team_ref(entry.team) if entry.team else None,
            )
            for entry in result.scalars().all()
        ]

    async def list_picks(self, draft_id: int) -> list[PickView]:
        result = await self._session.execute(
            select(DraftPick)
            .where(DraftPick.draft_id == draft_id)
            .options(selectinload(DraftPick.team), selectinload(DraftPick.player))
            .order_by(DraftPick.pick_number)
        )
        return [_pick_view(pick) for pick in result.scalars().all()]

    async def last_pick(self, draft_id: int) -> PickView | None:
        result = await self._session.execute(
            select(DraftPick)
            .where(DraftPick.draft_id == draft_id)
            .options(selectinload(DraftPick.team), selectinload(DraftPick.player))
            .order_by(DraftPick.pick_number.desc())
            .limit(1)
        )
        pick = result.scalar_one_or_none()
        return _pick_view(pick) if pick else None

    async def drafted_player_ids(self, draft_id: int) -> set[str]:
        result = await self._session.execute(
            select(DraftPick.player_id).where(DraftPick.draft_id == draft_id)
        )
        return set(result.scalars().all())

    async def eligible_players(self, season_id: int) -> list[PlayerRef]:
        result = await self._session.execute(
            select(Profile)
            .join(SeasonOptIn, SeasonOptIn.player_id == Profile.id)
            .where(
                SeasonOptIn.season_id == season_id,
                SeasonOptIn.opt_in_type == OptInType.full_time.value,
            )
        )
        return [
            PlayerRef(
                player_id=profile.id,
                full_name=profile.full_name,
                jersey_number=profile.jersey_number,
                position=profile.position,
                avatar_url=profile.avatar_url,
            )
            for profile in result.scalars().all()
        ]

    async def rating_snapshots(
        self, season_id: int, player_ids: Iterable[str]
    ) -> dict[str, RatingSnapshot]:
        ids = list(player_ids)
        if not ids:
            return {}
        result = await self._session.execute(
            select(PlayerRating).where(
                PlayerRating.season_id == season_id, PlayerRating.player_id.in_(ids)
            )
        )
        return {
            row.player_id: RatingSnapshot(
                player_id=row.player_id,
                rating=row.rating,
                games_played=row.games_played,
                attendance_rate=row.attendance_rate,
                points_per_game=row.points_per_game,
                goals_per_game=row.goals_per_game,
                assists_per_game=row.assists_per_game,
            )
            for row in result.scalars().all()
        }

    async def player_positions(self, player_ids: Iterable[str]) -> dict[str, str | None]:
        ids = list(player_ids)
        if not ids:
            return {}
        result = await self._session.execute(
            select(Profile.id, Profile.position).where(Profile.id.in_(ids))
        )
        return {row.id: row.position for row in result.all()}

    # -- writes --------------------------------------------------------------

    async def create_draft(
        self, season_id: int, cycle_number: int, rounds_per_draft: int, draft_link: str
    ) -> Draft:
        draft = Draft(
            season_id=season_id,
            cycle_number=cycle_number,
            status=DraftStatus.pending.value,
            current_pick=1,
            rounds_per_draft=rounds_per_draft,
            draft_link=draft_link,
            draft_order_assigned=False,
        )
        self._session.add(draft)
        try:
            await self._session.flush()
            await self._session.commit()
        except IntegrityError as exc:
            await self._session.rollback()
            raise DuplicateDraftError(
                f"A draft already exists for this season (cycle {cycle_number})."
            ) from exc
        return draft

    async def set_draft_link(self, draft_id: int, draft_link: str) -> Draft:
        await self._session.execute(
            update(Draft).where(Draft.id == draft_id).values(draft_link=draft_link)
        )
        await self._session.commit()
        draft = await self.get_draft(draft_id)
        assert draft is not None
        return draft

    async def enter_draft_phase(self, season_id: int) -> None:
        # Only one season drafts at a time; anything left in draft is finished.
        await self._session.execute(
            update(Season)
            .where(Season.status == SeasonStatus.draft.value, Season.id != season_id)
            .values(status=SeasonStatus.completed.value)
        )
        await self._session.execute(
            update(Season)
            .where(Season.id == season_id)
            .values(status=SeasonStatus.draft.value)
        )
        await self._session.commit()

    async def assign_order(self, draft_id: int, team_ids: Sequence[int]) -> list[OrderSlot]:
        try:
            claimed = await self._session.execute(
                update(Draft)
                .where(
                    Draft.id == draft_id,
                    Draft.status == DraftStatus.pending.value,
                    Draft.draft_order_assigned.is_(False),
                )
                .values(draft_order_assigned=True)
            )
            if claimed.rowcount != 1:
                raise DraftOrderAlreadyAssignedError("Draft order has already been assigned")
            await self._session.execute(
                insert(DraftOrder),
                [
                    {"draft_id": draft_id, "team_id": team_id, "pick_position": index + 1}
                    for index, team_id in enumerate(team_ids)
                ],
            )
            await self._session.commit()
        except IntegrityError as exc:
            await self._session.rollback()
            raise DraftOrderAlreadyAssignedError(
                "Draft order has already been assigned"
            ) from exc
        except DraftOrderAlreadyAssignedError:
            await self._session.rollback()
            raise
        return await self.get_order(draft_id)

    async def activate(self, draft_id: int) -> Draft:
        result = await self._session.execute(
            update(Draft)
            .where(
                Draft.id == draft_id,
                Draft.status == DraftStatus.pending.value,
                Draft.draft_order_assigned.is_(True),
            )
            .values(status=DraftStatus.in_progress.value)
        )
        if result.rowcount != 1:
            await self._session.rollback()
            raise DraftStateError("Draft can only be activated from pending with an assigned order")
        await self._session.commit()
        draft = await self.get_draft(draft_id)
        assert draft is not None
        return draft

    async def commit_pick(
        self,
        draft_id: int,
        expected_pick: int,
        team_id: int,
        player_id: str,
        round_number: int,
        picked_by: str,
        completes_draft: bool,
    ) -> PickView:
        if completes_draft:
            advance = {"status": DraftStatus.completed.value, "completed_at": now_utc()}
        else:
            advance = {"current_pick": expected_pick + 1}

        try:
            # The UPDATE takes the draft row lock; a concurrent picker waits here
            # and then matches zero rows once current_pick has moved.
            moved = await self._session.execute(
                update(Draft)
                .where(
                    Draft.id == draft_id,
                    Draft.current_pick == expected_pick,
                    Draft.status == DraftStatus.in_progress.value,
                )
                .values(**advance)
            )
            if moved.rowcount != 1:
                raise TurnMovedOnError("The draft has moved on to another pick. Refresh and try again.")

            pick = DraftPick(
                draft_id=draft_id,
                team_id=team_id,
                player_id=player_id,
                pick_number=expected_pick,
                round=round_number,
                picked_by=picked_by,
            )
            self._session.add(pick)
            await self._session.flush()
            await self._session.commit()
        except IntegrityError as exc:
            await self._session.rollback()
            error = _pick_integrity_error(exc, team_id, player_id)
            if error is None:
                raise
            raise error from exc
        except TurnMovedOnError:
            await self._session.rollback()
            raise

        logger.info(
            "draft_pick_committed",
            extra={
                "draft_id": draft_id,
                "pick_number": expected_pick,
                "team_id": team_id,
                "player_id": player_id,
                "completes_draft": completes_draft,
            },
        )
        result = await self._session.execute(
            select(DraftPick)
            .where(DraftPick.id == pick.id)
            .options(selectinload(DraftPick.team), selectinload(DraftPick.player))
        )
        return _pick_view(result.scalar_one())

    async def materialize_rosters(self, season_id: int, entries: Sequence[RosterEntry]) -> None:
        try:
            await self._session.execute(
                delete(TeamRoster).where(TeamRoster.season_id == season_id)
            )
            if entries:
                await self._session.execute(
                    insert(TeamRoster),
                    [
                        {
                            "team_id": entry.team_id,
                            "player_id": entry.player_id,
                            "season_id": entry.season_id,
                            "is_goalie": entry.is_goalie,
                        }
                        for entry in entries
                    ],
                )
            # One active season at a time.
            await self._session.execute(
                update(Season)
                .where(
                    Season.status.in_(
                        [SeasonStatus.active.value, SeasonStatus.playoffs.value]
                    ),
                    Season.id != season_id,
                )
                .values(status=SeasonStatus.completed.value)
            )
            await self._session.execute(
                update(Season)
                .where(Season.id == season_id)
                .values(status=SeasonStatus.active.value, current_game_count=0)
            )
            await self._session.commit()
        except Exception:
            await self._session.rollback()
            raise
