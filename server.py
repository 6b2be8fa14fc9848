"""
Keyword Tracker - FastAPI Application

Backend for the keyword performance dashboard.

Business logic lives in the auth, analytics and services packages - this
file only handles:
- API routing
- Request/response handling
- Error mapping
- Middleware configuration
- Health checks
"""

import logging
from contextlib import asynccontextmanager
from dataclasses import asdict
from typing import AsyncGenerator, Optional
from uuid import UUID

import httpx
from fastapi import Depends, FastAPI, HTTPException, Request, Response, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session

from analytics.keyword_fetcher import KeywordAnalyticsFetcher
from analytics.normalizer import sort_daily_data
from auth.credentials import CredentialHolder
from auth.exceptions import AuthDenied, AuthUnavailable, Unauthenticated
from auth.token_store import RedisTokenStore
from clients.search_console import AnalyticsQueryFailed
from config import config
from db.session import get_db
from schemas import (
    AuthStatusResponse,
    HealthResponse,
    KeywordCreateRequest,
    KeywordResponse,
    KeywordResultResponse,
    PresetPayload,
    PresetUrlRequest,
    PresetUrlResponse,
    SavedPresetRequest,
    SavedPresetResponse,
    SearchAnalyticsRequest,
    SettingsPayload,
    SuccessResponse,
)
from services.keyword_store import KeywordStore
from services.presets import Business, build_preset_url, decode_preset, encode_preset


# Configure logging
logging.basicConfig(
    level=getattr(logging, config.server.log_level.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

API_VERSION = "1.0.0"

token_store = RedisTokenStore()
credential_holder = CredentialHolder(token_store)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan handler for startup/shutdown events.

    Validates configuration on startup and closes the token store on
    shutdown.
    """
    logger.info("Starting Keyword Tracker API...")

    warnings = config.validate()
    for warning in warnings:
        logger.warning(f"Config warning: {warning}")

    logger.info(f"Debug mode: {config.server.debug}")

    yield

    logger.info("Shutting down Keyword Tracker API...")
    await token_store.close()


# Initialize FastAPI application
app = FastAPI(
    title="Keyword Tracker API",
    description="Keyword performance tracking backed by Google Search Console",
    version=API_VERSION,
    lifespan=lifespan,
    docs_url="/docs" if config.server.debug else None,
    redoc_url="/redoc" if config.server.debug else None,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.server.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "DELETE"],
    allow_headers=["*"],
)


# =============================================================================
# Dependencies
# =============================================================================

def get_credential_holder() -> CredentialHolder:
    """Process-wide credential holder."""
    return credential_holder


def get_fetcher(
    credentials: CredentialHolder = Depends(get_credential_holder),
) -> KeywordAnalyticsFetcher:
    return KeywordAnalyticsFetcher(credentials)


def get_keyword_store(db: Session = Depends(get_db)) -> KeywordStore:
    return KeywordStore(db)


# =============================================================================
# System Endpoints
# =============================================================================

@app.get("/health", response_model=HealthResponse, tags=["System"])
async def health_check() -> HealthResponse:
    """
    Health check endpoint for container orchestration.

    Returns:
        HealthResponse with server status
    """
    return HealthResponse(status="healthy", version=API_VERSION)


@app.get("/", tags=["System"])
async def root() -> dict[str, str]:
    """Root endpoint with API information."""
    return {
        "service": "Keyword Tracker API",
        "version": API_VERSION,
        "docs": "/docs" if config.server.debug else "Disabled in production"
    }


# =============================================================================
# Google Authentication Endpoints
# =============================================================================

@app.get("/api/auth/status", response_model=AuthStatusResponse, tags=["Auth"])
async def auth_status(
    credentials: CredentialHolder = Depends(get_credential_holder),
) -> AuthStatusResponse:
    """Report whether a live Google token is stored."""
    return AuthStatusResponse(authenticated=await credentials.has_valid_token())


@app.get("/api/auth/login", tags=["Auth"])
async def auth_login(
    credentials: CredentialHolder = Depends(get_credential_holder),
) -> RedirectResponse:
    """Send the user to the Google consent screen."""
    url, _ = credentials.begin_consent()
    return RedirectResponse(url, status_code=status.HTTP_307_TEMPORARY_REDIRECT)


@app.get("/api/auth/callback", tags=["Auth"])
async def auth_callback(
    state: Optional[str] = None,
    code: Optional[str] = None,
    error: Optional[str] = None,
    credentials: CredentialHolder = Depends(get_credential_holder),
) -> RedirectResponse:
    """
    Complete the consent flow from Google's redirect.

    Redirects back to the dashboard on success.

    Raises:
        HTTPException: 403 when consent was declined, 503 when Google
            could not be reached
    """
    try:
        await credentials.complete_consent(state, code=code, error=error)
    except AuthDenied as e:
        logger.warning(f"Google consent denied: {e}")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Google sign-in was denied: {e}"
        )
    except AuthUnavailable as e:
        logger.error(f"Google sign-in unavailable: {e}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Failed to connect to Google. Please try again."
        )

    return RedirectResponse(config.server.public_url, status_code=status.HTTP_303_SEE_OTHER)


@app.post("/api/auth/logout", status_code=status.HTTP_204_NO_CONTENT, tags=["Auth"])
async def auth_logout(
    credentials: CredentialHolder = Depends(get_credential_holder),
) -> Response:
    """Forget the stored Google token."""
    await credentials.clear_token()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# =============================================================================
# Search Analytics Endpoint
# =============================================================================

@app.post(
    "/api/search-analytics",
    response_model=list[KeywordResultResponse],
    tags=["Analytics"],
)
async def search_analytics(
    request: SearchAnalyticsRequest,
    fetcher: KeywordAnalyticsFetcher = Depends(get_fetcher),
    credentials: CredentialHolder = Depends(get_credential_holder),
) -> list[KeywordResultResponse]:
    """
    Fetch clicks, impressions and position per keyword.

    Keywords without Search Console data are absent from the response.
    Daily data is returned in chronological order.

    Raises:
        HTTPException: 401 without a valid token, 502 when Search Console
            fails, 400 on invalid input
    """
    date_range = request.date_range()
    logger.info(
        f"Search analytics request: website={request.website}, "
        f"keywords={len(request.keywords)}, "
        f"range={date_range.start_iso}..{date_range.end_iso}"
    )

    try:
        results = await fetcher.fetch_keyword_results(
            date_range, request.website, request.keywords
        )
    except Unauthenticated as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e)
        )
    except AnalyticsQueryFailed as e:
        if e.status == status.HTTP_401_UNAUTHORIZED:
            logger.warning("Search Console rejected the token, clearing it")
            await credentials.clear_token()
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Google access token is no longer valid. Please log in again."
            )
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail={"status": e.status, "body": e.body}
        )
    except httpx.HTTPError as e:
        logger.error(f"Search Console unreachable: {e}")
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Search Console could not be reached"
        )
    except ValueError as e:
        logger.warning(f"Validation error: {e}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )
    except Exception as e:
        logger.exception(f"Search analytics error: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error during search analytics"
        )

    return [
        KeywordResultResponse.model_validate(asdict(result))
        for result in sort_daily_data(results)
    ]


# =============================================================================
# Keyword Endpoints
# =============================================================================

@app.get("/api/keywords", response_model=list[KeywordResponse], tags=["Keywords"])
def list_keywords(store: KeywordStore = Depends(get_keyword_store)) -> list[KeywordResponse]:
    """Return all tracked keywords."""
    return [KeywordResponse.model_validate(k) for k in store.list_keywords()]


@app.post(
    "/api/keywords",
    response_model=KeywordResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["Keywords"],
)
def add_keyword(
    request: KeywordCreateRequest,
    store: KeywordStore = Depends(get_keyword_store),
) -> KeywordResponse:
    """Track a new keyword with the result it is expected to surface."""
    try:
        record = store.add_keyword(request.keyword, request.expected_result)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )
    return KeywordResponse.model_validate(record)


@app.delete(
    "/api/keywords/{keyword_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    tags=["Keywords"],
)
def delete_keyword(
    keyword_id: UUID,
    store: KeywordStore = Depends(get_keyword_store),
) -> Response:
    store.delete_keyword(keyword_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# =============================================================================
# Settings Endpoints
# =============================================================================

@app.get("/api/settings", response_model=SettingsPayload, tags=["Settings"])
def get_settings(store: KeywordStore = Depends(get_keyword_store)) -> SettingsPayload:
    """Return notification settings (defaults are created on first read)."""
    return SettingsPayload.model_validate(store.get_settings())


@app.post("/api/settings", response_model=SuccessResponse, tags=["Settings"])
def save_settings(
    request: SettingsPayload,
    store: KeywordStore = Depends(get_keyword_store),
) -> SuccessResponse:
    store.save_settings(
        request.agency_emails,
        request.email_template.model_dump(),
    )
    return SuccessResponse(success=True)


# =============================================================================
# Preset Endpoints
# =============================================================================

@app.post("/api/presets/url", response_model=PresetUrlResponse, tags=["Presets"])
async def create_preset_url(request: PresetUrlRequest) -> PresetUrlResponse:
    """Build a shareable dashboard URL for a business and its keywords."""
    business = Business(
        name=request.name,
        location=request.location,
        website=request.website,
    )
    base_url = request.base_url or config.server.public_url
    return PresetUrlResponse(
        url=build_preset_url(base_url, business, request.keywords),
        query=encode_preset(business, request.keywords),
    )


@app.get("/api/presets/decode", response_model=PresetPayload, tags=["Presets"])
async def decode_preset_query(request: Request) -> PresetPayload:
    """Decode preset parameters passed on this request's own query string."""
    preset = decode_preset(request.url.query)
    return PresetPayload(
        name=preset.business.name,
        location=preset.business.location,
        website=preset.business.website,
        keywords=preset.keywords,
    )


@app.get("/api/presets", response_model=list[SavedPresetResponse], tags=["Presets"])
def list_presets(store: KeywordStore = Depends(get_keyword_store)) -> list[SavedPresetResponse]:
    return [SavedPresetResponse.model_validate(p) for p in store.list_presets()]


@app.post(
    "/api/presets",
    response_model=SavedPresetResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["Presets"],
)
def save_preset(
    request: SavedPresetRequest,
    store: KeywordStore = Depends(get_keyword_store),
) -> SavedPresetResponse:
    """Save a preset for the preset list."""
    if request.start_date and request.end_date and request.start_date > request.end_date:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="startDate must not be after endDate"
        )
    preset = store.save_preset(
        name=request.name,
        location=request.location,
        website=request.website,
        keywords=request.keywords,
        start_date=request.start_date,
        end_date=request.end_date,
    )
    return SavedPresetResponse.model_validate(preset)


@app.delete(
    "/api/presets/{preset_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    tags=["Presets"],
)
def delete_preset(
    preset_id: UUID,
    store: KeywordStore = Depends(get_keyword_store),
) -> Response:
    store.delete_preset(preset_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "server:app",
        host=config.server.host,
        port=config.server.port,
        reload=config.server.debug,
        log_level=config.server.log_level.lower()
    )
