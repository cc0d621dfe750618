"""Initial schema: users, categories, jobs, applications, comments, likes

Learn: The two unique constraints the auth layer depends on are created
explicitly here — users.external_id (one local user per Clerk id) and
likes (user_id, job_id) (one like per user per job). Without them,
concurrent first-sight logins and concurrent like toggles can duplicate rows.

Revision ID: 0001
Revises:
Create Date: 2026-10-19 09:00:00.000000
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamp(name: str) -> sa.Column:
    return sa.Column(
        name, sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True
    )


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("external_id", sa.String(255), nullable=False),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("profile_image", sa.Text(), nullable=True),
        sa.Column("role", sa.String(20), nullable=False),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        sa.UniqueConstraint("external_id", name="uq_users_external_id"),
    )

    op.create_table(
        "categories",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("icon", sa.String(100), nullable=True),
        _timestamp("created_at"),
        sa.UniqueConstraint("name", name="uq_categories_name"),
    )

    op.create_table(
        "jobs",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("company", sa.String(200), nullable=False),
        sa.Column("location", sa.String(200), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("salary", sa.String(100), nullable=True),
        sa.Column("job_type", sa.String(30), nullable=False),
        sa.Column("is_urgent", sa.Boolean(), nullable=False),
        sa.Column("apply_url", sa.Text(), nullable=True),
        sa.Column(
            "category_id",
            sa.Uuid(),
            sa.ForeignKey("categories.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("posted_by", sa.Uuid(), sa.ForeignKey("users.id"), nullable=True),
        _timestamp("created_at"),
        _timestamp("updated_at"),
    )
    op.create_index("idx_jobs_category_created", "jobs", ["category_id", "created_at"])
    op.create_index("idx_jobs_urgent", "jobs", ["is_urgent"])

    op.create_table(
        "applications",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("user_id", sa.Uuid(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column(
            "job_id", sa.Uuid(), sa.ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False
        ),
        sa.Column("cover_letter", sa.Text(), nullable=True),
        sa.Column("resume_url", sa.Text(), nullable=True),
        sa.Column("status", sa.String(20), nullable=False),
        _timestamp("created_at"),
        sa.UniqueConstraint("user_id", "job_id", name="uq_applications_user_job"),
    )

    op.create_table(
        "comments",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("content", sa.String(500), nullable=False),
        sa.Column("author_id", sa.Uuid(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column(
            "job_id", sa.Uuid(), sa.ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False
        ),
        sa.Column("author_name", sa.String(200), nullable=False),
        sa.Column("author_avatar", sa.Text(), nullable=True),
        _timestamp("created_at"),
    )
    op.create_index("idx_comments_job_created", "comments", ["job_id", "created_at"])

    op.create_table(
        "likes",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("user_id", sa.Uuid(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column(
            "job_id", sa.Uuid(), sa.ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False
        ),
        _timestamp("created_at"),
        sa.UniqueConstraint("user_id", "job_id", name="uq_likes_user_job"),
    )
    op.create_index("idx_likes_job", "likes", ["job_id"])


def downgrade() -> None:
    op.drop_index("idx_likes_job", table_name="likes")
    op.drop_table("likes")
    op.drop_index("idx_comments_job_created", table_name="comments")
    op.drop_table("comments")
    op.drop_table("applications")
    op.drop_index("idx_jobs_urgent", table_name="jobs")
    op.drop_index("idx_jobs_category_created", table_name="jobs")
    op.drop_table("jobs")
    op.drop_table("categories")
    op.drop_table("users")
