from datetime import datetime
from typing import Any

from sqlalchemy import DateTime, Integer, JSON, func
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base, utcnow


class NotificationSettings(Base):
    """SQLAlchemy model for notification settings.

    Single-row table: the dashboard has one set of agency recipients and
    one e-mail template.
    """

    __tablename__ = "notification_settings"
    repr_attrs = ("id", "agency_emails")

    id: Mapped[int] = mapped_column(Integer, primary_key=True, default=1)
    agency_emails: Mapped[list[str]] = mapped_column(
        JSON, default=list, nullable=False)
    # {"subject": str, "message": str} with {{placeholder}} tokens
    email_template: Mapped[dict[str, Any]] = mapped_column(
        JSON, default=dict, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
        server_default=func.now(),
        nullable=False,
    )
