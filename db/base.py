"""
SQLAlchemy declarative base for the keyword tracker tables.
"""

from datetime import datetime, timezone
from typing import ClassVar

from sqlalchemy import MetaData, DateTime, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


# Constraint/index names used by the Alembic migrations
convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "pk": "pk_%(table_name)s",
}

metadata = MetaData(naming_convention=convention)


def utcnow() -> datetime:
    """Timezone-aware current time for Python-side column defaults."""
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """
    Base class for all keyword tracker models.

    Subclasses list the columns worth showing in ``__repr__`` via
    ``repr_attrs``.
    """

    metadata = metadata

    repr_attrs: ClassVar[tuple[str, ...]] = ("id",)

    def __repr__(self) -> str:
        attrs = ", ".join(f"{name}={getattr(self, name, None)!r}" for name in self.repr_attrs)
        return f"<{self.__class__.__name__}({attrs})>"


class CreatedAtMixin:
    """Indexed creation timestamp, set by Python and by the database."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        index=True,
        nullable=False,
    )
