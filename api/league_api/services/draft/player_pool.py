"""Eligible and available player pools for a draft.

The available pool is derived on every call (eligible minus drafted); it is
never stored, so it cannot drift from the draft_picks table.
"""

from __future__ import annotations

from ...config import settings
from .errors import DraftNotFoundError
from .models import PlayerRef, RatedPlayer, RatingSnapshot, tier_rank
from .store import DraftStore


def rate_player(
    player: PlayerRef,
    snapshot: RatingSnapshot | None,
    default_rating: str,
) -> RatedPlayer:
    if snapshot is None:
        return RatedPlayer(
            player_id=player.player_id,
            full_name=player.full_name,
            jersey_number=player.jersey_number,
            position=player.position,
            avatar_url=player.avatar_url,
            rating=default_rating,
        )
    return RatedPlayer(
        player_id=player.player_id,
        full_name=player.full_name,
        jersey_number=player.jersey_number,
        position=player.position,
        avatar_url=player.avatar_url,
        rating=snapshot.rating,
        games_played=snapshot.games_played,
        attendance_rate=snapshot.attendance_rate,
        points_per_game=snapshot.points_per_game,
        goals_per_game=snapshot.goals_per_game,
        assists_per_game=snapshot.assists_per_game,
        is_rated=True,
    )


def sort_by_tier(players: list[RatedPlayer]) -> list[RatedPlayer]:
    """Best tier first, then by name."""
    return sorted(players, key=lambda p: (tier_rank(p.rating), (p.full_name or "").lower()))


async def get_eligible_players(
    store: DraftStore,
    season_id: int,
    default_rating: str | None = None,
) -> list[RatedPlayer]:
    """Full-time opt-ins for the season with their rating snapshot."""
    players = await store.eligible_players(season_id)
    snapshots = await store.rating_snapshots(season_id, [p.player_id for p in players])
    baseline = default_rating or settings.draft_default_rating
    return sort_by_tier(
        [rate_player(player, snapshots.get(player.player_id), baseline) for player in players]
    )


async def get_available_players(store: DraftStore, draft_id: int) -> list[RatedPlayer]:
    draft = await store.get_draft(draft_id)
    if draft is None:
        raise DraftNotFoundError("Draft not found")
    drafted = await store.drafted_player_ids(draft_id)
    eligible = await get_eligible_players(store, draft.season_id)
    return [player for player in eligible if player.player_id not in drafted]
