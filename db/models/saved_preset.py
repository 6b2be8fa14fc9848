import uuid
from datetime import date

from sqlalchemy import Date, JSON, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base, CreatedAtMixin


class SavedPreset(Base, CreatedAtMixin):
    """SQLAlchemy model for a saved business + keyword preset."""

    __tablename__ = "saved_presets"
    repr_attrs = ("id", "name", "website")

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255), default="", nullable=False)
    location: Mapped[str] = mapped_column(String(255), default="", nullable=False)
    website: Mapped[str] = mapped_column(String(1024), default="", nullable=False)
    keywords: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    start_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    end_date: Mapped[date | None] = mapped_column(Date, nullable=True)
