"""Initial schema: profiles, moods, goals, journal, physical health,
articles, relaxation suggestions

Revision ID: 3f1c2a7d9b10
Revises:
Create Date: 2026-10-18 09:00:00.000000+00:00

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "3f1c2a7d9b10"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps(updated_nullable: bool = True) -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=updated_nullable,
        ),
    ]


def _owner() -> sa.Column:
    return sa.Column(
        "user_id",
        postgresql.UUID(as_uuid=True),
        sa.ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )


def upgrade() -> None:
    """Upgrade database schema."""

    op.create_table(
        "users",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("username", sa.String(100), nullable=True),
        sa.Column("full_name", sa.String(255), nullable=True),
        sa.Column("phone_number", sa.String(50), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_users_email", "users", ["email"])

    op.create_table(
        "moods",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        _owner(),
        sa.Column("mood_rating", sa.SmallInteger(), nullable=False),
        sa.Column("mood_at", sa.DateTime(timezone=True), nullable=False),
        *_timestamps(),
        sa.CheckConstraint("mood_rating BETWEEN 1 AND 5", name="ck_moods_rating_range"),
    )
    op.create_index("ix_moods_user_mood_at", "moods", ["user_id", "mood_at"])

    op.create_table(
        "goal",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        _owner(),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("target", sa.String(100), nullable=False),
        sa.Column("progress", sa.String(20), nullable=False, server_default="Not Started"),
        *_timestamps(),
    )
    op.create_index("ix_goal_user_id", "goal", ["user_id"])

    op.create_table(
        "journal",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        _owner(),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("content", sa.Text(), nullable=True),
        sa.Column("date_created", sa.Date(), nullable=False),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
    )
    op.create_index("ix_journal_user_id", "journal", ["user_id"])

    op.create_table(
        "physical_health",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        _owner(),
        sa.Column("complaints", sa.Text(), nullable=True),
        sa.Column("health_id", sa.String(64), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_physical_health_user_id", "physical_health", ["user_id"])

    op.create_table(
        "articles",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("content", sa.Text(), nullable=True),
        sa.Column("url", sa.Text(), nullable=True),
        sa.Column("date_published", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_articles_date_published", "articles", ["date_published"])

    op.create_table(
        "relaxation_suggestions",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        _owner(),
        sa.Column(
            "mood_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("moods.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("activity_suggestion", sa.Text(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
    )
    op.create_index("ix_relaxation_suggestions_user_id", "relaxation_suggestions", ["user_id"])


def downgrade() -> None:
    """Downgrade database schema."""
    op.drop_table("relaxation_suggestions")
    op.drop_table("articles")
    op.drop_table("physical_health")
    op.drop_table("journal")
    op.drop_table("goal")
    op.drop_table("moods")
    op.drop_table("users")
