"""Workplace ORM model."""

from __future__ import annotations

from typing import Optional

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column

from shift_manager.database import Base


class Workplace(Base):
    __tablename__ = "workplaces"

    id: Mapped[int] = mapped_column(sa.Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(sa.String(255), nullable=False)
    type: Mapped[str] = mapped_column(sa.String(20), nullable=False)
    address: Mapped[Optional[str]] = mapped_column(sa.String(500))
    notes: Mapped[Optional[str]] = mapped_column(sa.Text)
    manager_id: Mapped[Optional[int]] = mapped_column(
        sa.Integer, sa.ForeignKey("users.id", ondelete="SET NULL"), index=True
    )
    owner_id: Mapped[Optional[int]] = mapped_column(
        sa.Integer, sa.ForeignKey("users.id", ondelete="SET NULL"), index=True
    )

    # Client company details
    company_name: Mapped[Optional[str]] = mapped_column(sa.String(255))
    company_id: Mapped[Optional[str]] = mapped_column(sa.String(20))
    company_vat_id: Mapped[Optional[str]] = mapped_column(sa.String(20))
    company_address: Mapped[Optional[str]] = mapped_column(sa.String(500))

    def is_controlled_by(self, user_id: int) -> bool:
        """True when *user_id* owns or manages this workplace."""
        return self.owner_id == user_id or self.manager_id == user_id

    def __repr__(self) -> str:
        return f"<Workplace {self.id} {self.name}>"
