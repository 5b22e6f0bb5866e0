"""SQLAlchemy ORM models for the durable team store."""

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, CheckConstraint, Index, String, Text, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.types import Boolean, DateTime, Integer


class Base(DeclarativeBase):
    pass


class TeamRow(Base):
    """One team. ``document`` holds the full record in wire shape; the other
    columns are copies kept for lookup, ordering and constraints."""

    __tablename__ = "teams"
    __table_args__ = (
        Index("idx_teams_finished", "finished", "finished_at"),
        CheckConstraint(
            "current_phase BETWEEN 1 AND 7", name="ck_team_current_phase"
        ),
    )

    team_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    team_name: Mapped[str] = mapped_column(Text, unique=True, nullable=False)
    current_phase: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    finished: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    finished_at: Mapped[str | None] = mapped_column(Text)
    # bumped on every write; saves compare-and-set against it
    revision: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    document: Mapped[dict[str, Any]] = mapped_column(
        JSON().with_variant(JSONB(), "postgresql"), nullable=False
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
