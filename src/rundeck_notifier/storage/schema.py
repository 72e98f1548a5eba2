"""SQLAlchemy ORM schema for the notifier store.

Defines all database tables: rundeck_config, execution_badges,
_notifier_meta.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Float, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all notifier ORM models."""

    pass


class RundeckConfigRow(Base):
    """The process-wide Rundeck connection settings. Single row, id=1."""

    __tablename__ = "rundeck_config"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    url: Mapped[str] = mapped_column(Text, nullable=False, default="")
    login: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    password: Mapped[str] = mapped_column(Text, nullable=False, default="")
    timeout: Mapped[float] = mapped_column(Float, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)


class ExecutionBadgeRow(Base):
    """Execution url recorded for a build. At most one per build."""

    __tablename__ = "execution_badges"
    __table_args__ = (
        UniqueConstraint("project", "build_number", name="uq_badge_build"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    project: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    build_number: Mapped[int] = mapped_column(Integer, nullable=False)
    execution_url: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)


class NotifierMetaRow(Base):
    """Key-value metadata for the store itself (e.g., schema version)."""

    __tablename__ = "_notifier_meta"

    key: Mapped[str] = mapped_column(String(255), primary_key=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)
