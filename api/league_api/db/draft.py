"""Draft models: the draft aggregate, its fixed order and its append-only picks.

Key Rules:
1. At most one pending/in_progress draft per season (partial unique index)
2. draft_order is written once, before activation, and never mutated
3. draft_picks is append-only; (draft_id, player_id) and
   (draft_id, pick_number) are unique
4. current_pick only moves forward, one step per committed pick
5. Status lifecycle: pending -> in_progress -> completed
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import text

from .base import Base
from .league import Profile, Season, Team


class DraftStatus(str, Enum):
    """Draft lifecycle. No transition skips a state; completed is terminal."""

    pending = "pending"
    in_progress = "in_progress"
    completed = "completed"


OPEN_DRAFT_STATUSES = (DraftStatus.pending.value, DraftStatus.in_progress.value)


class Draft(Base):
    __tablename__ = "drafts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    season_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("seasons.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    cycle_number: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=DraftStatus.pending.value
    )
    current_pick: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    rounds_per_draft: Mapped[int] = mapped_column(Integer, nullable=False, default=10)
    draft_order_assigned: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False
    )
    draft_link: Mapped[str | None] = mapped_column(String(100), nullable=True, unique=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    completed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    season: Mapped[Season] = relationship("Season", back_populates="drafts")
    order_entries: Mapped[list["DraftOrder"]] = relationship(
        "DraftOrder",
        back_populates="draft",
        cascade="all, delete-orphan",
        order_by="DraftOrder.pick_position",
    )
    picks: Mapped[list["DraftPick"]] = relationship(
        "DraftPick",
        back_populates="draft",
        cascade="all, delete-orphan",
        order_by="DraftPick.pick_number",
    )

    __table_args__ = (
        UniqueConstraint("season_id", "cycle_number", name="uq_drafts_season_cycle"),
        CheckConstraint("current_pick >= 1", name="ck_drafts_current_pick_positive"),
        CheckConstraint(
            "status IN ('pending', 'in_progress', 'completed')", name="ck_drafts_status"
        ),
        Index(
            "uq_drafts_one_open_per_season",
            "season_id",
            unique=True,
            postgresql_where=text("status IN ('pending', 'in_progress')"),
        ),
    )


class DraftOrder(Base):
    """A team's fixed slot (1..N) in a draft's randomized order."""

    __tablename__ = "draft_order"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    draft_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("drafts.id", ondelete="CASCADE"), nullable=False, index=True
    )
    team_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("teams.id", ondelete="CASCADE"), nullable=False
    )
    pick_position: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    draft: Mapped[Draft] = relationship("Draft", back_populates="order_entries")
    team: Mapped[Team] = relationship("Team")

    __table_args__ = (
        UniqueConstraint("draft_id", "team_id", name="uq_draft_order_draft_team"),
        UniqueConstraint("draft_id", "pick_position", name="uq_draft_order_draft_position"),
    )


class DraftPick(Base):
    """An immutable pick record. ``picked_by`` is the actor who submitted it."""

    __tablename__ = "draft_picks"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    draft_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("drafts.id", ondelete="CASCADE"), nullable=False, index=True
    )
    team_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("teams.id", ondelete="CASCADE"), nullable=False
    )
    player_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False
    )
    pick_number: Mapped[int] = mapped_column(Integer, nullable=False)
    round: Mapped[int] = mapped_column(Integer, nullable=False)
    picked_by: Mapped[str | None] = mapped_column(String(64), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    draft: Mapped[Draft] = relationship("Draft", back_populates="picks")
    team: Mapped[Team] = relationship("Team")
    player: Mapped[Profile] = relationship("Profile")

    __table_args__ = (
        UniqueConstraint("draft_id", "player_id", name="uq_draft_picks_draft_player"),
        UniqueConstraint("draft_id", "pick_number", name="uq_draft_picks_draft_pick_number"),
    )
