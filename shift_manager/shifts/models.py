"""Shift ORM model."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shift_manager.database import Base


class Shift(Base):
    __tablename__ = "shifts"

    id: Mapped[int] = mapped_column(sa.Integer, primary_key=True, autoincrement=True)
    workplace_id: Mapped[int] = mapped_column(
        sa.Integer,
        sa.ForeignKey("workplaces.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[Optional[int]] = mapped_column(
        sa.Integer, sa.ForeignKey("users.id", ondelete="SET NULL"), index=True
    )
    date: Mapped[Optional[datetime]] = mapped_column(sa.DateTime, index=True)
    start_time: Mapped[Optional[datetime]] = mapped_column(sa.DateTime)
    end_time: Mapped[Optional[datetime]] = mapped_column(sa.DateTime)
    hours: Mapped[Optional[int]] = mapped_column(sa.Integer)
    notes: Mapped[Optional[str]] = mapped_column(sa.Text)

    # Relationships
    workplace: Mapped["Workplace"] = relationship()
    user: Mapped[Optional["User"]] = relationship()

    def __repr__(self) -> str:
        return f"<Shift {self.id} workplace={self.workplace_id} user={self.user_id}>"
