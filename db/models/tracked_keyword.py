import uuid
from datetime import datetime

from sqlalchemy import Boolean, DateTime, String, Uuid, false, func
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base, utcnow


class TrackedKeyword(Base):
    """SQLAlchemy model for a keyword checked against an expected result."""

    __tablename__ = "tracked_keywords"
    repr_attrs = ("id", "keyword", "is_found")

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4)
    keyword: Mapped[str] = mapped_column(String(512), nullable=False)
    expected_result: Mapped[str] = mapped_column(String(1024), nullable=False)
    last_checked: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        index=True,
        nullable=False,
    )
    is_found: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default=false(), nullable=False)
