"""Users, soups, comments and the two star join tables.

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-19 09:00:00.000000
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision: str = "0001_initial_schema"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


# ---------------------------------------------------------------------------
# UPGRADE
# ---------------------------------------------------------------------------


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("email", sa.Text(), nullable=False),
        sa.Column("name", sa.Text(), nullable=True),
        sa.Column("password_hash", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "soups",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
    )
    op.create_index("ix_soups_user_id", "soups", ["user_id"])
    op.create_index("idx_soups_created_at", "soups", ["created_at"])

    # comment_type_id has no FK: comments may target any commentable kind
    op.create_table(
        "comments",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("comment_type", sa.Text(), nullable=False),
        sa.Column("comment_type_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
    )
    op.create_index("idx_comments_target", "comments", ["comment_type", "comment_type_id"])
    op.create_index("ix_comments_user_id", "comments", ["user_id"])

    op.create_table(
        "user_soup_star",
        sa.Column("user_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("soup_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("soups.id", ondelete="CASCADE"), primary_key=True),
    )
    op.create_index("ix_user_soup_star_soup_id", "user_soup_star", ["soup_id"])

    op.create_table(
        "user_comment_star",
        sa.Column("user_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("comment_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("comments.id", ondelete="CASCADE"), primary_key=True),
    )
    op.create_index("ix_user_comment_star_comment_id", "user_comment_star", ["comment_id"])


# ---------------------------------------------------------------------------
# DOWNGRADE
# ---------------------------------------------------------------------------


def downgrade() -> None:
    op.drop_table("user_comment_star")
    op.drop_table("user_soup_star")
    op.drop_index("ix_comments_user_id", table_name="comments")
    op.drop_index("idx_comments_target", table_name="comments")
    op.drop_table("comments")
    op.drop_index("idx_soups_created_at", table_name="soups")
    op.drop_index("ix_soups_user_id", table_name="soups")
    op.drop_table("soups")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
