from __future__ import annotations

from datetime import date

from sqlalchemy import Date, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from roster.models.base import Base, TimestampMixin


class Visit(Base, TimestampMixin):
    __tablename__ = "visits"
    __table_args__ = (Index("ix_visits_hospitalization_date", "hospitalization_id", "date_serviced"),)

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    hospitalization_id: Mapped[int] = mapped_column(ForeignKey("hospitalizations.id"), nullable=False)
    date_serviced: Mapped[date] = mapped_column(Date, nullable=False)
    room: Mapped[str | None] = mapped_column(String(20), nullable=True)
    bed: Mapped[str | None] = mapped_column(String(5), nullable=True)

    hospitalization = relationship("Hospitalization", back_populates="visits")
