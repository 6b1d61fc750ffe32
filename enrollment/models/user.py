"""User account ORM model."""
from __future__ import annotations

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from enrollment.models.base import Base, TimestampMixin


class User(TimestampMixin, Base):
    """Login account record; unrelated to shareholder applications."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(150), nullable=False, unique=True)
    password: Mapped[str] = mapped_column(String(255), nullable=False)


__all__ = ["User"]
