"""
Keyword store backed by SQLAlchemy.

Provides CRUD access to:
- Tracked keywords
- Notification settings
- Saved presets
"""

import logging
from copy import deepcopy
from datetime import date
from typing import Any, Optional
from uuid import UUID

from sqlalchemy import desc
from sqlalchemy.orm import Session

from db.models.notification_settings import NotificationSettings
from db.models.saved_preset import SavedPreset
from db.models.tracked_keyword import TrackedKeyword

logger = logging.getLogger(__name__)

SETTINGS_ROW_ID = 1

DEFAULT_EMAIL_TEMPLATE = {
    "subject": "Keyword Match Found - {{platform}}",
    "message": (
        "Hello,\n\n"
        "We found a target result in {{platform}}'s search suggestions!\n\n"
        "Company: {{companyName}}\n"
        "Base Keyword: {{baseKeyword}}\n"
        "Target Result: {{targetResult}}\n"
        "First Found: {{foundDate}}\n\n"
        "Best regards,\n"
        "Keyword Verification System"
    ),
}


class KeywordStore:
    """
    Persistent store for tracked keywords, settings and presets.

    Operates on a caller-owned session (the FastAPI ``get_db`` dependency).
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def _commit(self, action: str) -> None:
        try:
            self.session.commit()
        except Exception as e:
            self.session.rollback()
            logger.error(f"Error {action}: {e}")
            raise

    # -------------------------------------------------------------------------
    # KEYWORDS
    # -------------------------------------------------------------------------

    def list_keywords(self) -> list[TrackedKeyword]:
        """Return all tracked keywords, oldest first."""
        return (
            self.session.query(TrackedKeyword)
            .order_by(TrackedKeyword.last_checked)
            .all()
        )

    def add_keyword(self, keyword: str, expected_result: str) -> TrackedKeyword:
        """
        Track a new keyword.

        Raises:
            ValueError: If keyword or expected_result is empty.
        """
        if not keyword or not expected_result:
            raise ValueError("Keyword and expected result are required")

        record = TrackedKeyword(
            keyword=keyword,
            expected_result=expected_result,
            is_found=False,
        )
        self.session.add(record)
        self._commit("adding keyword")
        self.session.refresh(record)
        logger.info(f"Keyword added: {record.id}")
        return record

    def delete_keyword(self, keyword_id: UUID) -> bool:
        """
        Stop tracking a keyword.

        Returns:
            True if a record was removed; deleting an unknown id is a no-op.
        """
        deleted = (
            self.session.query(TrackedKeyword)
            .filter(TrackedKeyword.id == keyword_id)
            .delete()
        )
        self._commit("deleting keyword")
        logger.info(f"Keyword delete: id={keyword_id}, removed={deleted}")
        return deleted > 0

    # -------------------------------------------------------------------------
    # SETTINGS
    # -------------------------------------------------------------------------

    def get_settings(self) -> NotificationSettings:
        """Return notification settings, creating the defaults on first read."""
        settings = self.session.get(NotificationSettings, SETTINGS_ROW_ID)
        if settings is None:
            logger.info("No existing settings, creating defaults")
            settings = NotificationSettings(
                id=SETTINGS_ROW_ID,
                agency_emails=[],
                email_template=deepcopy(DEFAULT_EMAIL_TEMPLATE),
            )
            self.session.add(settings)
            self._commit("creating default settings")
            self.session.refresh(settings)
        return settings

    def save_settings(
        self,
        agency_emails: list[str],
        email_template: dict[str, Any]
    ) -> NotificationSettings:
        """Replace the notification settings."""
        settings = self.get_settings()
        settings.agency_emails = list(agency_emails)
        settings.email_template = dict(email_template)
        self._commit("saving settings")
        self.session.refresh(settings)
        logger.info("Settings saved successfully")
        return settings

    # -------------------------------------------------------------------------
    # PRESETS
    # -------------------------------------------------------------------------

    def list_presets(self) -> list[SavedPreset]:
        """Return saved presets, newest first."""
        return (
            self.session.query(SavedPreset)
            .order_by(desc(SavedPreset.created_at))
            .all()
        )

    def save_preset(
        self,
        name: str,
        location: str,
        website: str,
        keywords: list[str],
        start_date: Optional[date] = None,
        end_date: Optional[date] = None
    ) -> SavedPreset:
        """Persist a business + keyword preset."""
        preset = SavedPreset(
            name=name,
            location=location,
            website=website,
            keywords=list(keywords),
            start_date=start_date,
            end_date=end_date,
        )
        self.session.add(preset)
        self._commit("saving preset")
        self.session.refresh(preset)
        logger.info(f"Preset saved: {preset.id} ({len(keywords)} keywords)")
        return preset

    def delete_preset(self, preset_id: UUID) -> bool:
        """Delete a saved preset; unknown ids are a no-op."""
        deleted = (
            self.session.query(SavedPreset)
            .filter(SavedPreset.id == preset_id)
            .delete()
        )
        self._commit("deleting preset")
        return deleted > 0
