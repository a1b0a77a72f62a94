"""Database tables / schema"""

from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from src.core.shared_types import Status


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class DBGame(Base):
    """
    One row per game session.

    `status` and `winner` are spelled out (rather than a bare game-over flag), so finished games can be queried directly.
    """

    __tablename__ = "games"
    id: Mapped[UUID] = mapped_column(primary_key=True)
    position: Mapped[str]
    current_turn: Mapped[str]
    status: Mapped[Status] = mapped_column(default=Status.IN_PROGRESS, index=True)
    winner: Mapped[Optional[str]]
    opponent_color: Mapped[Optional[str]]
    created_at: Mapped[datetime] = mapped_column(default=utc_now)
    updated_at: Mapped[datetime] = mapped_column(default=utc_now, onupdate=utc_now)
