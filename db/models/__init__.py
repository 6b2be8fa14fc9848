"""
SQLAlchemy models for the keyword tracker.

Models:
- TrackedKeyword: Keywords monitored for an expected search result
- NotificationSettings: Agency e-mail recipients and the match e-mail template
- SavedPreset: Named business + keyword sets with a date range
"""

from db.models.tracked_keyword import TrackedKeyword
from db.models.notification_settings import NotificationSettings
from db.models.saved_preset import SavedPreset

__all__ = [
    "TrackedKeyword",
    "NotificationSettings",
    "SavedPreset",
]
