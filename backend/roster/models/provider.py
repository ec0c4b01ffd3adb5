from __future__ import annotations

import enum

from sqlalchemy import Enum, String
from sqlalchemy.orm import Mapped, mapped_column

from roster.models.base import Base, TimestampMixin


class ProviderType(str, enum.Enum):
    physician = "PHYSICIAN"
    nurse_practitioner = "NURSE_PRACTITIONER"


class Provider(Base, TimestampMixin):
    __tablename__ = "providers"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    title: Mapped[str | None] = mapped_column(String(50), nullable=True)
    type: Mapped[ProviderType] = mapped_column(
        Enum(ProviderType, name="provider_type"),
        nullable=False,
    )
