"""
Pydantic schemas for the keyword tracker API.

Defines all request/response models. JSON field names are camelCase to
match the dashboard; Python attributes stay snake_case.
"""

from datetime import date, datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from analytics.models import DateRange
from analytics.normalizer import clean_keywords
from config import config

PERIOD_DAYS = {"7d": 7, "30d": 30, "90d": 90}


class ApiModel(BaseModel):
    """Base model accepting both camelCase aliases and field names."""

    model_config = ConfigDict(populate_by_name=True, from_attributes=True)


# =============================================================================
# System Schemas
# =============================================================================

class HealthResponse(BaseModel):
    """Response schema for health check endpoint."""

    status: str = Field(..., description="Server health status")
    version: str = Field(..., description="API version")


class AuthStatusResponse(BaseModel):
    """Whether a live Google token is stored."""

    authenticated: bool


# =============================================================================
# Search Analytics Schemas
# =============================================================================

class SearchAnalyticsRequest(ApiModel):
    """
    Request schema for /api/search-analytics.

    Either give explicit dates or a period ("7d", "30d", "90d"); with
    neither, the default period from config applies.
    """

    website: str = Field(..., min_length=1, examples=["example.com"])
    keywords: list[str] = Field(
        ..., min_length=1, examples=[["plumber near me", "emergency plumber"]])
    start_date: Optional[date] = Field(default=None, alias="startDate")
    end_date: Optional[date] = Field(default=None, alias="endDate")
    period: Optional[str] = Field(default=None, pattern=r"^(7d|30d|90d)$")

    @field_validator("keywords")
    @classmethod
    def strip_keywords(cls, value: list[str]) -> list[str]:
        return clean_keywords(value)

    @model_validator(mode="after")
    def check_dates(self) -> "SearchAnalyticsRequest":
        if (self.start_date is None) != (self.end_date is None):
            raise ValueError("startDate and endDate must be given together")
        if self.start_date and self.end_date and self.start_date > self.end_date:
            raise ValueError("startDate must not be after endDate")
        return self

    def date_range(self, today: Optional[date] = None) -> DateRange:
        """Resolve the requested inclusive date range."""
        if self.start_date and self.end_date:
            return DateRange(self.start_date, self.end_date)
        days = PERIOD_DAYS.get(self.period or "", config.analytics.default_period_days)
        return DateRange.last_n_days(days, today=today)


class DailyMetricResponse(ApiModel):
    date: str
    clicks: int
    impressions: int
    position: float


class KeywordResultResponse(ApiModel):
    """Aggregate metrics for one keyword with its daily trend."""

    keyword: str
    clicks: int
    impressions: int
    avg_position: float = Field(..., alias="avgPosition")
    daily_data: list[DailyMetricResponse] = Field(
        default_factory=list, alias="dailyData")


# =============================================================================
# Keyword Store Schemas
# =============================================================================

class KeywordCreateRequest(ApiModel):
    """Request schema for POST /api/keywords."""

    keyword: str = ""
    expected_result: str = Field(default="", alias="expectedResult")


class KeywordResponse(ApiModel):
    id: UUID
    keyword: str
    expected_result: str = Field(..., alias="expectedResult")
    last_checked: datetime = Field(..., alias="lastChecked")
    is_found: bool = Field(..., alias="isFound")


class EmailTemplate(ApiModel):
    subject: str = ""
    message: str = ""


class SettingsPayload(ApiModel):
    """Notification settings, used for both GET and POST /api/settings."""

    agency_emails: list[str] = Field(default_factory=list, alias="agencyEmails")
    email_template: EmailTemplate = Field(
        default_factory=EmailTemplate, alias="emailTemplate")


class SuccessResponse(BaseModel):
    success: bool = True


# =============================================================================
# Preset Schemas
# =============================================================================

class PresetPayload(ApiModel):
    """Business details plus ordered keywords."""

    name: str = ""
    location: str = ""
    website: str = ""
    keywords: list[str] = Field(default_factory=list)


class PresetUrlRequest(PresetPayload):
    base_url: Optional[str] = Field(default=None, alias="baseUrl")


class PresetUrlResponse(BaseModel):
    url: str
    query: str


class SavedPresetRequest(PresetPayload):
    start_date: Optional[date] = Field(default=None, alias="startDate")
    end_date: Optional[date] = Field(default=None, alias="endDate")


class SavedPresetResponse(SavedPresetRequest):
    id: UUID
    created_at: datetime = Field(..., alias="createdAt")
