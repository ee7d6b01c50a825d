"""Value types passed between the draft store, the core services and the API."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING

from ...db.league import UserRole
from .snake import TurnInfo

if TYPE_CHECKING:
    from ...db.draft import Draft


# Ordered best to worst; index doubles as sort key.
RATING_TIERS: tuple[str, ...] = (
    "A+", "A", "A-",
    "B+", "B", "B-",
    "C+", "C", "C-",
    "D+", "D", "D-",
)
_TIER_RANK = {tier: index for index, tier in enumerate(RATING_TIERS)}


def tier_rank(rating: str) -> int:
    """Sort key for a rating tier; unknown tiers sort last."""
    return _TIER_RANK.get(rating, len(RATING_TIERS))


def is_goalie_position(position: str | None) -> bool:
    return (position or "").strip().upper() == "G"


@dataclass(frozen=True)
class ActorContext:
    """Identity and role resolved once per request at the API boundary."""

    user_id: str
    role: str

    @property
    def is_owner(self) -> bool:
        return self.role == UserRole.owner.value


@dataclass(frozen=True)
class TeamRef:
    team_id: int
    name: str
    short_name: str
    primary_color: str = "#000000"
    captain_id: str | None = None
    captain_name: str | None = None
    captain_email: str | None = None


@dataclass(frozen=True)
class OrderSlot:
    team_id: int
    pick_position: int
    team: TeamRef | None = None


@dataclass(frozen=True)
class PickView:
    pick_number: int
    round: int
    team_id: int
    player_id: str
    picked_by: str | None = None
    team_name: str | None = None
    player_name: str | None = None
    jersey_number: int | None = None
    position: str | None = None
    created_at: datetime | None = None


@dataclass(frozen=True)
class RatedPlayer:
    """An eligible player with a rating snapshot.

    Every field is always present; unrated players carry the baseline tier
    and zeroed stats with ``is_rated`` False.
    """

    player_id: str
    full_name: str | None
    jersey_number: int | None
    position: str | None
    avatar_url: str | None
    rating: str
    games_played: int = 0
    attendance_rate: float = 0.0
    points_per_game: float = 0.0
    goals_per_game: float = 0.0
    assists_per_game: float = 0.0
    is_rated: bool = False


@dataclass(frozen=True)
class RatingSnapshot:
    player_id: str
    rating: str
    games_played: int
    attendance_rate: float
    points_per_game: float
    goals_per_game: float
    assists_per_game: float


@dataclass(frozen=True)
class PlayerRef:
    player_id: str
    full_name: str | None
    jersey_number: int | None
    position: str | None
    avatar_url: str | None = None


@dataclass(frozen=True)
class LastPickSummary:
    pick: PickView
    games_played: int | None = None
    goals: int | None = None
    assists: int | None = None
    points: int | None = None
    attendance_rate: float | None = None


@dataclass(frozen=True)
class RosterEntry:
    team_id: int
    player_id: str
    season_id: int
    is_goalie: bool


@dataclass
class DraftStateView:
    """Authoritative snapshot pushed to every viewer and served for polling."""

    draft: "Draft"
    order: list[OrderSlot] = field(default_factory=list)
    picks: list[PickView] = field(default_factory=list)
    on_the_clock: TurnInfo | None = None
    total_picks: int = 0
