"""SQLAlchemy ORM models — single source of truth for the database schema.

Learn: Declarative ORM mapping with SQLAlchemy 2.0 style (Mapped[] + mapped_column).
Each class = one table. Relationships, constraints, and indexes defined here.
Alembic auto-generates migrations by comparing these models to the actual DB.

Key concepts:
- UUID primary keys via the portable Uuid type (native on PostgreSQL,
  CHAR(32) on SQLite for tests)
- Uniqueness that the auth layer relies on is declared here, not assumed:
  users.external_id and likes (user_id, job_id)
- Timestamps get a Python-side default so they're populated right after
  flush, plus a server_default for raw SQL inserts
"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    String,
    Text,
    UniqueConstraint,
    Uuid,
    func,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_uuid() -> uuid.UUID:
    return uuid.uuid4()


ROLE_USER = "user"
ROLE_ADMIN = "admin"

APPLICATION_STATUSES = ("pending", "reviewed", "accepted", "rejected")


# ══════════════════════════════════════════════════════════════
# Identity
# ══════════════════════════════════════════════════════════════


class User(Base):
    """Local mirror of an identity-provider user.

    Learn: external_id is the Clerk user id (the JWT `sub`). It's the
    stable key — set once by the resolver on first sight and never
    changed. The only field touched afterwards is `role`, and only
    upwards (user → admin) by the authorization gate.
    """

    __tablename__ = "users"
    __table_args__ = (
        UniqueConstraint("external_id", name="uq_users_external_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=new_uuid
    )
    external_id: Mapped[str] = mapped_column(String(255), nullable=False)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    profile_image: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    role: Mapped[str] = mapped_column(
        String(20), nullable=False, default=ROLE_USER
    )  # user, admin
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        onupdate=utcnow,
    )

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN


# ══════════════════════════════════════════════════════════════
# Job board
# ══════════════════════════════════════════════════════════════


class Category(Base):
    """A job category (Engineering, Design, ...)."""

    __tablename__ = "categories"
    __table_args__ = (
        UniqueConstraint("name", name="uq_categories_name"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=new_uuid
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    icon: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now()
    )

    jobs: Mapped[list["Job"]] = relationship(back_populates="category", passive_deletes=True)


class Job(Base):
    """A job posting. Created and edited by admins only."""

    __tablename__ = "jobs"
    __table_args__ = (
        Index("idx_jobs_category_created", "category_id", "created_at"),
        Index("idx_jobs_urgent", "is_urgent"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=new_uuid
    )
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    company: Mapped[str] = mapped_column(String(200), nullable=False)
    location: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    salary: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    job_type: Mapped[str] = mapped_column(
        String(30), nullable=False, default="full-time"
    )  # full-time, part-time, contract, internship, remote
    is_urgent: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    apply_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    category_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid, ForeignKey("categories.id", ondelete="SET NULL"), nullable=True
    )
    posted_by: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid, ForeignKey("users.id"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        onupdate=utcnow,
    )

    category: Mapped[Optional["Category"]] = relationship(back_populates="jobs")


class Application(Base):
    """A user's application to a job — one per (user, job)."""

    __tablename__ = "applications"
    __table_args__ = (
        UniqueConstraint("user_id", "job_id", name="uq_applications_user_job"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=new_uuid
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id"), nullable=False
    )
    job_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False
    )
    cover_letter: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    resume_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="pending"
    )  # pending, reviewed, accepted, rejected
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now()
    )

    job: Mapped["Job"] = relationship()
    user: Mapped["User"] = relationship()


# ══════════════════════════════════════════════════════════════
# Social: comments + likes
# ══════════════════════════════════════════════════════════════


class Comment(Base):
    """A comment on a job.

    Learn: author_name/author_avatar are copied from the user at creation
    time. Comments keep displaying what the author looked like when they
    wrote them, without a join per read.
    """

    __tablename__ = "comments"
    __table_args__ = (
        Index("idx_comments_job_created", "job_id", "created_at"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=new_uuid
    )
    content: Mapped[str] = mapped_column(String(500), nullable=False)
    author_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id"), nullable=False
    )
    job_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False
    )
    author_name: Mapped[str] = mapped_column(String(200), nullable=False)
    author_avatar: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now()
    )


class Like(Base):
    """A user's like on a job.

    Learn: The (user_id, job_id) unique constraint is what makes the like
    toggle safe under concurrency — two racing inserts can't both land.
    """

    __tablename__ = "likes"
    __table_args__ = (
        UniqueConstraint("user_id", "job_id", name="uq_likes_user_job"),
        Index("idx_likes_job", "job_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=new_uuid
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id"), nullable=False
    )
    job_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now()
    )

    user: Mapped["User"] = relationship()
