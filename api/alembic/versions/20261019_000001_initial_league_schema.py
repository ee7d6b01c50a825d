"""Initial league and draft schema.

Revision ID: 20261019_000001
Revises:
Create Date: 2026-10-19
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = "20261019_000001"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "profiles",
        sa.Column("id", sa.String(length=64), primary_key=True),
        sa.Column("email", sa.String(length=320), nullable=False, unique=True),
        sa.Column("full_name", sa.String(length=200), nullable=True),
        sa.Column("jersey_number", sa.Integer(), nullable=True),
        sa.Column("position", sa.String(length=10), nullable=True),
        sa.Column("role", sa.String(length=20), nullable=False, server_default="player"),
        sa.Column("avatar_url", sa.String(length=500), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_profiles_role", "profiles", ["role"])

    op.create_table(
        "seasons",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="active"),
        sa.Column("current_game_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("games_per_cycle", sa.Integer(), nullable=False, server_default="13"),
        *_timestamps(),
    )
    op.create_index("ix_seasons_status", "seasons", ["status"])

    op.create_table(
        "teams",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=200), nullable=False, unique=True),
        sa.Column("short_name", sa.String(length=20), nullable=False),
        sa.Column("primary_color", sa.String(length=7), nullable=False, server_default="#000000"),
        sa.Column("secondary_color", sa.String(length=7), nullable=False, server_default="#FFFFFF"),
        sa.Column("logo_url", sa.String(length=500), nullable=True),
        sa.Column(
            "captain_id",
            sa.String(length=64),
            sa.ForeignKey("profiles.id", ondelete="SET NULL"),
            nullable=True,
        ),
        *_timestamps(),
    )
    op.create_index("ix_teams_captain_id", "teams", ["captain_id"])

    op.create_table(
        "team_rosters",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("team_id", sa.Integer(), sa.ForeignKey("teams.id", ondelete="CASCADE"), nullable=False),
        sa.Column("player_id", sa.String(length=64), sa.ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False),
        sa.Column("season_id", sa.Integer(), sa.ForeignKey("seasons.id", ondelete="CASCADE"), nullable=False),
        sa.Column("is_goalie", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("joined_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.UniqueConstraint("season_id", "player_id", name="uq_team_rosters_season_player"),
    )
    op.create_index("ix_team_rosters_team_id", "team_rosters", ["team_id"])
    op.create_index("ix_team_rosters_season_id", "team_rosters", ["season_id"])

    op.create_table(
        "season_opt_ins",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("season_id", sa.Integer(), sa.ForeignKey("seasons.id", ondelete="CASCADE"), nullable=False),
        sa.Column("player_id", sa.String(length=64), sa.ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False),
        sa.Column("opt_in_type", sa.String(length=20), nullable=False, server_default="full_time"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.UniqueConstraint("season_id", "player_id", name="uq_season_opt_ins_season_player"),
    )
    op.create_index("idx_season_opt_ins_season_type", "season_opt_ins", ["season_id", "opt_in_type"])

    op.create_table(
        "player_ratings",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("player_id", sa.String(length=64), sa.ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False),
        sa.Column("season_id", sa.Integer(), sa.ForeignKey("seasons.id", ondelete="CASCADE"), nullable=False),
        sa.Column("rating", sa.String(length=2), nullable=False),
        sa.Column("games_played", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("attendance_rate", sa.Float(), nullable=False, server_default="0"),
        sa.Column("points_per_game", sa.Float(), nullable=False, server_default="0"),
        sa.Column("goals_per_game", sa.Float(), nullable=False, server_default="0"),
        sa.Column("assists_per_game", sa.Float(), nullable=False, server_default="0"),
        sa.Column("calculated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.UniqueConstraint("player_id", "season_id", name="uq_player_ratings_player_season"),
    )

    op.create_table(
        "drafts",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("season_id", sa.Integer(), sa.ForeignKey("seasons.id", ondelete="CASCADE"), nullable=False),
        sa.Column("cycle_number", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="pending"),
        sa.Column("current_pick", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("rounds_per_draft", sa.Integer(), nullable=False, server_default="10"),
        sa.Column("draft_order_assigned", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("draft_link", sa.String(length=100), nullable=True, unique=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint("season_id", "cycle_number", name="uq_drafts_season_cycle"),
        sa.CheckConstraint("current_pick >= 1", name="ck_drafts_current_pick_positive"),
        sa.CheckConstraint(
            "status IN ('pending', 'in_progress', 'completed')", name="ck_drafts_status"
        ),
    )
    op.create_index("ix_drafts_season_id", "drafts", ["season_id"])
    op.create_index(
        "uq_drafts_one_open_per_season",
        "drafts",
        ["season_id"],
        unique=True,
        postgresql_where=sa.text("status IN ('pending', 'in_progress')"),
    )

    op.create_table(
        "draft_order",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("draft_id", sa.Integer(), sa.ForeignKey("drafts.id", ondelete="CASCADE"), nullable=False),
        sa.Column("team_id", sa.Integer(), sa.ForeignKey("teams.id", ondelete="CASCADE"), nullable=False),
        sa.Column("pick_position", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.UniqueConstraint("draft_id", "team_id", name="uq_draft_order_draft_team"),
        sa.UniqueConstraint("draft_id", "pick_position", name="uq_draft_order_draft_position"),
    )
    op.create_index("ix_draft_order_draft_id", "draft_order", ["draft_id"])

    op.create_table(
        "draft_picks",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("draft_id", sa.Integer(), sa.ForeignKey("drafts.id", ondelete="CASCADE"), nullable=False),
        sa.Column("team_id", sa.Integer(), sa.ForeignKey("teams.id", ondelete="CASCADE"), nullable=False),
        sa.Column("player_id", sa.String(length=64), sa.ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False),
        sa.Column("pick_number", sa.Integer(), nullable=False),
        sa.Column("round", sa.Integer(), nullable=False),
        sa.Column("picked_by", sa.String(length=64), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.UniqueConstraint("draft_id", "player_id", name="uq_draft_picks_draft_player"),
        sa.UniqueConstraint("draft_id", "pick_number", name="uq_draft_picks_draft_pick_number"),
    )
    op.create_index("ix_draft_picks_draft_id", "draft_picks", ["draft_id"])


def downgrade() -> None:
    op.drop_index("ix_draft_picks_draft_id", table_name="draft_picks")
    op.drop_table("draft_picks")
    op.drop_index("ix_draft_order_draft_id", table_name="draft_order")
    op.drop_table("draft_order")
    op.drop_index("uq_drafts_one_open_per_season", table_name="drafts")
    op.drop_index("ix_drafts_season_id", table_name="drafts")
    op.drop_table("drafts")
    op.drop_table("player_ratings")
    op.drop_index("idx_season_opt_ins_season_type", table_name="season_opt_ins")
    op.drop_table("season_opt_ins")
    op.drop_index("ix_team_rosters_season_id", table_name="team_rosters")
    op.drop_index("ix_team_rosters_team_id", table_name="team_rosters")
    op.drop_table("team_rosters")
    op.drop_index("ix_teams_captain_id", table_name="teams")
    op.drop_table("teams")
    op.drop_index("ix_seasons_status", table_name="seasons")
    op.drop_table("seasons")
    op.drop_index("ix_profiles_role", table_name="profiles")
    op.drop_table("profiles")
