"""Shift exchange request ORM model."""

from __future__ import annotations

from typing import Optional

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shift_manager.common.constants import ExchangeStatus
from shift_manager.database import Base


class ExchangeRequest(Base):
    __tablename__ = "exchange_requests"

    id: Mapped[int] = mapped_column(sa.Integer, primary_key=True, autoincrement=True)
    requester_id: Mapped[int] = mapped_column(
        sa.Integer, sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    requestee_id: Mapped[Optional[int]] = mapped_column(
        sa.Integer, sa.ForeignKey("users.id", ondelete="SET NULL"), index=True
    )
    request_shift_id: Mapped[int] = mapped_column(
        sa.Integer, sa.ForeignKey("shifts.id", ondelete="CASCADE"), nullable=False
    )
    offered_shift_id: Mapped[int] = mapped_column(
        sa.Integer, sa.ForeignKey("shifts.id", ondelete="CASCADE"), nullable=False
    )
    status: Mapped[str] = mapped_column(
        sa.String(20), nullable=False, default=ExchangeStatus.pending.value, index=True
    )
    notes: Mapped[Optional[str]] = mapped_column(sa.Text)

    # Relationships
    requester: Mapped["User"] = relationship(
        foreign_keys=[requester_id]
    )
    requestee: Mapped[Optional["User"]] = relationship(
        foreign_keys=[requestee_id]
    )
    request_shift: Mapped["Shift"] = relationship(
        foreign_keys=[request_shift_id]
    )
    offered_shift: Mapped["Shift"] = relationship(
        foreign_keys=[offered_shift_id]
    )

    def __repr__(self) -> str:
        return f"<ExchangeRequest {self.id} {self.status}>"
