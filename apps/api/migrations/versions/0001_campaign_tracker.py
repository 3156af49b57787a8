"""campaign tracker schema (campaigns/warbands/warriors/matches/events/news) + append-only ledger

Revision ID: 0001_campaign_tracker
Revises:
Create Date: 2026-10-19
"""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "0001_campaign_tracker"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps():
    return [
        sa.Column("created_at", sa.Text(), nullable=False),
        sa.Column("updated_at", sa.Text(), nullable=False),
    ]


def upgrade() -> None:
    # ---- tables ----
    op.create_table(
        "campaigns",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("start_date", sa.Text(), nullable=False),
        sa.Column("end_date", sa.Text(), nullable=False),
        *_timestamps(),
    )

    op.create_table(
        "warbands",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("campaign_id", sa.Integer(), sa.ForeignKey("campaigns.id"), nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("faction", sa.Text(), nullable=False),
        sa.Column("color", sa.Text(), nullable=True),
        sa.Column("icon", sa.Text(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("treasury", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("experience", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("rating", sa.Integer(), nullable=False, server_default="0"),
        *_timestamps(),
    )
    op.create_index("ix_warbands_campaign_id", "warbands", ["campaign_id"], unique=False)

    op.create_table(
        "warriors",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("campaign_id", sa.Integer(), sa.ForeignKey("campaigns.id"), nullable=False),
        sa.Column("warband_id", sa.Integer(), sa.ForeignKey("warbands.id"), nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("type", sa.Text(), nullable=False),
        sa.Column("warrior_class", sa.Text(), nullable=True),
        sa.Column("is_leader", sa.Boolean(), nullable=False, server_default=sa.text("0")),
        sa.Column("experience", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("kills", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("injuries_caused", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("injuries_received", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("games_played", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("is_alive", sa.Boolean(), nullable=False, server_default=sa.text("1")),
        sa.Column("death_date", sa.Text(), nullable=True),
        sa.Column("death_description", sa.Text(), nullable=True),
        sa.Column("equipment_json", sa.Text(), nullable=False, server_default="[]"),
        sa.Column("skills_json", sa.Text(), nullable=False, server_default="[]"),
        *_timestamps(),
    )
    op.create_index("ix_warriors_campaign_id", "warriors", ["campaign_id"], unique=False)
    op.create_index("ix_warriors_warband_id", "warriors", ["warband_id"], unique=False)

    op.create_table(
        "matches",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("campaign_id", sa.Integer(), sa.ForeignKey("campaigns.id"), nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("date", sa.Text(), nullable=False),
        sa.Column("match_type", sa.Text(), nullable=False),
        sa.Column("status", sa.Text(), nullable=False),
        sa.Column("scenario_id", sa.Integer(), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_matches_campaign_id", "matches", ["campaign_id"], unique=False)
    op.create_index("ix_matches_status", "matches", ["status"], unique=False)

    for table in ("match_participants", "match_winners"):
        op.create_table(
            table,
            sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
            sa.Column("match_id", sa.Integer(), sa.ForeignKey("matches.id"), nullable=False),
            sa.Column("warband_id", sa.Integer(), sa.ForeignKey("warbands.id"), nullable=False),
        )
        op.create_index(f"ix_{table}_match_id", table, ["match_id"], unique=False)
        op.create_index(f"ix_{table}_warband_id", table, ["warband_id"], unique=False)

    op.create_table(
        "teams",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("match_id", sa.Integer(), sa.ForeignKey("matches.id"), nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
    )
    op.create_index("ix_teams_match_id", "teams", ["match_id"], unique=False)

    op.create_table(
        "team_members",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("team_id", sa.Integer(), sa.ForeignKey("teams.id"), nullable=False),
        sa.Column("warband_id", sa.Integer(), sa.ForeignKey("warbands.id"), nullable=False),
    )
    op.create_index("ix_team_members_team_id", "team_members", ["team_id"], unique=False)
    op.create_index("ix_team_members_warband_id", "team_members", ["warband_id"], unique=False)

    op.create_table(
        "placements",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("match_id", sa.Integer(), sa.ForeignKey("matches.id"), nullable=False),
        sa.Column("warband_id", sa.Integer(), sa.ForeignKey("warbands.id"), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False),
    )
    op.create_index("ix_placements_match_id", "placements", ["match_id"], unique=False)
    op.create_index("ix_placements_warband_id", "placements", ["warband_id"], unique=False)

    op.create_table(
        "casualties",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("match_id", sa.Integer(), sa.ForeignKey("matches.id"), nullable=False),
        sa.Column("type", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("timestamp", sa.Text(), nullable=False),
        sa.Column("victim_warrior_id", sa.Integer(), sa.ForeignKey("warriors.id"), nullable=True),
        sa.Column("victim_warband_id", sa.Integer(), sa.ForeignKey("warbands.id"), nullable=True),
        sa.Column("killer_warrior_id", sa.Integer(), sa.ForeignKey("warriors.id"), nullable=True),
        sa.Column("killer_warband_id", sa.Integer(), sa.ForeignKey("warbands.id"), nullable=True),
    )
    op.create_index("ix_casualties_match_id", "casualties", ["match_id"], unique=False)

    op.create_table(
        "events",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("campaign_id", sa.Integer(), sa.ForeignKey("campaigns.id"), nullable=False),
        sa.Column("match_id", sa.Integer(), sa.ForeignKey("matches.id"), nullable=False),
        sa.Column("type", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("timestamp", sa.Text(), nullable=False),
        sa.Column("warrior_id", sa.Integer(), sa.ForeignKey("warriors.id"), nullable=False),
        sa.Column("defender_id", sa.Integer(), sa.ForeignKey("warriors.id"), nullable=True),
        sa.Column("resolved", sa.Boolean(), nullable=False, server_default=sa.text("0")),
        sa.Column("injury_type", sa.Text(), nullable=True),
        sa.Column("outcome", sa.Text(), nullable=True),
        sa.Column("death", sa.Boolean(), nullable=False, server_default=sa.text("0")),
        sa.Column("injury", sa.Boolean(), nullable=False, server_default=sa.text("0")),
        sa.Column("resolved_at", sa.Text(), nullable=True),
        sa.Column("killed_defender", sa.Boolean(), nullable=False, server_default=sa.text("0")),
        *_timestamps(),
    )
    op.create_index("ix_events_campaign_id", "events", ["campaign_id"], unique=False)
    op.create_index("ix_events_match_id", "events", ["match_id"], unique=False)
    op.create_index("ix_events_warrior_id", "events", ["warrior_id"], unique=False)
    op.create_index("ix_events_defender_id", "events", ["defender_id"], unique=False)

    op.create_table(
        "custom_news_items",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("campaign_id", sa.Integer(), sa.ForeignKey("campaigns.id"), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_custom_news_items_campaign_id", "custom_news_items", ["campaign_id"], unique=False)

    op.create_table(
        "warband_state_changes",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("warband_id", sa.Integer(), sa.ForeignKey("warbands.id"), nullable=False),
        sa.Column("match_id", sa.Integer(), sa.ForeignKey("matches.id"), nullable=True),
        sa.Column("treasury_delta", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("experience_delta", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("rating_delta", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("treasury_after", sa.Integer(), nullable=False),
        sa.Column("experience_after", sa.Integer(), nullable=False),
        sa.Column("rating_after", sa.Integer(), nullable=False),
        sa.Column("change_type", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("timestamp", sa.Text(), nullable=False),
    )
    op.create_index("ix_warband_state_changes_warband_id", "warband_state_changes", ["warband_id"], unique=False)
    op.create_index("ix_warband_state_changes_match_id", "warband_state_changes", ["match_id"], unique=False)
    op.create_index("ix_warband_state_changes_timestamp", "warband_state_changes", ["timestamp"], unique=False)

    # ---- append-only ledger ----
    op.execute("""
    CREATE TRIGGER IF NOT EXISTS trg_warband_state_changes_no_update
    BEFORE UPDATE ON warband_state_changes
    BEGIN
      SELECT RAISE(ABORT, 'append-only: warband_state_changes cannot be updated');
    END;
    """)
    op.execute("""
    CREATE TRIGGER IF NOT EXISTS trg_warband_state_changes_no_delete
    BEFORE DELETE ON warband_state_changes
    BEGIN
      SELECT RAISE(ABORT, 'append-only: warband_state_changes cannot be deleted');
    END;
    """)


def downgrade() -> None:
    # drop triggers first
    op.execute("DROP TRIGGER IF EXISTS trg_warband_state_changes_no_delete;")
    op.execute("DROP TRIGGER IF EXISTS trg_warband_state_changes_no_update;")

    for table in (
        "warband_state_changes",
        "custom_news_items",
        "events",
        "casualties",
        "placements",
        "team_members",
        "teams",
        "match_winners",
        "match_participants",
        "matches",
        "warriors",
        "warbands",
        "campaigns",
    ):
        op.drop_table(table)
