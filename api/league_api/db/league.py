"""League models: profiles, seasons, teams, rosters, opt-ins and rating snapshots.

These tables belong to the wider league application. The draft core reads
them and, on completion, rewrites team_rosters and the season status; it
never owns their lifecycle.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING

from sqlalchemy import (
    Boolean,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base

if TYPE_CHECKING:
    from .draft import Draft


class UserRole(str, Enum):
    owner = "owner"
    captain = "captain"
    player = "player"


class SeasonStatus(str, Enum):
    """Season lifecycle.

    ``draft`` gates other season operations while a draft cycle is running.
    """

    active = "active"
    playoffs = "playoffs"
    completed = "completed"
    draft = "draft"


# Seasons that may start (or resume) a draft cycle.
DRAFT_ELIGIBLE_SEASON_STATUSES = frozenset(
    {SeasonStatus.active.value, SeasonStatus.playoffs.value, SeasonStatus.draft.value}
)


class OptInType(str, Enum):
    full_time = "full_time"
    spare = "spare"


class Profile(Base):
    """A league member. ``id`` is the subject issued by the auth provider."""

    __tablename__ = "profiles"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    email: Mapped[str] = mapped_column(String(320), nullable=False, unique=True)
    full_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    jersey_number: Mapped[int | None] = mapped_column(Integer, nullable=True)
    position: Mapped[str | None] = mapped_column(String(10), nullable=True)
    role: Mapped[str] = mapped_column(
        String(20), nullable=False, default=UserRole.player.value, index=True
    )
    avatar_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )


class Season(Base):
    __tablename__ = "seasons"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=SeasonStatus.active.value, index=True
    )
    current_game_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    games_per_cycle: Mapped[int] = mapped_column(Integer, nullable=False, default=13)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    drafts: Mapped[list["Draft"]] = relationship("Draft", back_populates="season")


class Team(Base):
    __tablename__ = "teams"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False, unique=True)
    short_name: Mapped[str] = mapped_column(String(20), nullable=False)
    primary_color: Mapped[str] = mapped_column(String(7), nullable=False, default="#000000")
    secondary_color: Mapped[str] = mapped_column(String(7), nullable=False, default="#FFFFFF")
    logo_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    captain_id: Mapped[str | None] = mapped_column(
        String(64),
        ForeignKey("profiles.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    captain: Mapped[Profile | None] = relationship("Profile")


class TeamRoster(Base):
    """One player on one team for one season."""

    __tablename__ = "team_rosters"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    team_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("teams.id", ondelete="CASCADE"), nullable=False, index=True
    )
    player_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False
    )
    season_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("seasons.id", ondelete="CASCADE"), nullable=False, index=True
    )
    is_goalie: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    joined_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    __table_args__ = (
        UniqueConstraint("season_id", "player_id", name="uq_team_rosters_season_player"),
    )


class SeasonOptIn(Base):
    """A player's declared availability for a season."""

    __tablename__ = "season_opt_ins"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    season_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("seasons.id", ondelete="CASCADE"), nullable=False
    )
    player_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False
    )
    opt_in_type: Mapped[str] = mapped_column(
        String(20), nullable=False, default=OptInType.full_time.value
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    __table_args__ = (
        UniqueConstraint("season_id", "player_id", name="uq_season_opt_ins_season_player"),
        Index("idx_season_opt_ins_season_type", "season_id", "opt_in_type"),
    )


class PlayerRating(Base):
    """Per-season rating snapshot written by the stats subsystem."""

    __tablename__ = "player_ratings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    player_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False
    )
    season_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("seasons.id", ondelete="CASCADE"), nullable=False
    )
    rating: Mapped[str] = mapped_column(String(2), nullable=False)
    games_played: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    attendance_rate: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    points_per_game: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    goals_per_game: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    assists_per_game: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    calculated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    __table_args__ = (
        UniqueConstraint("player_id", "season_id", name="uq_player_ratings_player_season"),
    )
