"""FastAPI web server for Mood Ring."""
from __future__ import annotations

import logging
from dataclasses import asdict
from pathlib import Path

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates
from pydantic import BaseModel, Field

from mood_ring.catalog_client import CatalogClient
from mood_ring.config import Settings
from mood_ring.errors import (
    ArtistNotFoundError,
    CatalogError,
    EmptyFeatureSetError,
    EmptySearchError,
    StartupTokenError,
)
from mood_ring.session import MoodRingSession, lookup_mood
from mood_ring.surface import SEARCH_INPUT, STORED_TOKEN, PresentationSurface

logger = logging.getLogger(__name__)

CATALOG_FAILURE_MESSAGE = "Spotify could not be reached right now. Please try again."
NO_FEATURES_MESSAGE = "Spotify has no audio features for that artist's top tracks."
EMPTY_SEARCH_MESSAGE = "Please enter an artist name."

app = FastAPI(title="Mood Ring")
templates = Jinja2Templates(directory=str(Path(__file__).parent / "templates"))

# Enable CORS for frontends calling /api/mood
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)


class MoodRequest(BaseModel):
    """Request to summarize one artist's mood."""
    artist_name: str = Field(min_length=1, max_length=200)
    token: str | None = None


class ReportRowInfo(BaseModel):
    region: str
    label: str
    percent: int
    weight: float
    text: str


class MoodResponse(BaseModel):
    """Mood ring for the matched artist, plus the token to reuse on the next call."""
    artist_name: str
    title: str
    rows: list[ReportRowInfo]
    summary: dict[str, float]
    token: str


def get_settings() -> Settings:
    return Settings.from_env()


def get_catalog_client(settings: Settings) -> CatalogClient:
    return CatalogClient(market=settings.market, requests_timeout=settings.requests_timeout)


def open_session(surface: PresentationSurface) -> MoodRingSession:
    """Wire a session for one request; raises ValueError when credentials are missing."""
    settings = get_settings()
    return MoodRingSession(get_catalog_client(settings), surface, settings.credentials())


def _page(request: Request, surface: PresentationSurface, status_code: int = 200) -> HTMLResponse:
    return templates.TemplateResponse(request, "index.html", surface.page_context(), status_code=status_code)


@app.get("/", response_class=HTMLResponse)
def serve_index(request: Request) -> HTMLResponse:
    """Page load: fetch a token and hand it to the page's hidden field."""
    surface = PresentationSurface()
    try:
        session = open_session(surface)
        session.start()
    except ValueError as e:
        logger.error("Mood Ring is not configured: %s", e)
        surface.show_error(str(e))
        return _page(request, surface, 500)
    except StartupTokenError as e:
        logger.error("Startup token exchange failed: %s", e)
        surface.show_error(CATALOG_FAILURE_MESSAGE)
        return _page(request, surface, 503)
    return _page(request, surface)


@app.get("/search", response_class=HTMLResponse)
def search_page(
    request: Request,
    artist_name: str = Query(default="", alias=SEARCH_INPUT),
    token: str = Query(default="", alias=STORED_TOKEN),
) -> HTMLResponse:
    """Search trigger submitted by the page form."""
    surface = PresentationSurface(search_input=artist_name, stored_token=token)
    try:
        session = open_session(surface)
    except ValueError as e:
        logger.error("Mood Ring is not configured: %s", e)
        surface.show_error(str(e))
        return _page(request, surface, 500)

    try:
        session.resume()
        session.search()
    except EmptySearchError:
        surface.show_error(EMPTY_SEARCH_MESSAGE)
        surface.reset_search_input()
        return _page(request, surface, 400)
    except StartupTokenError as e:
        logger.error("Startup token exchange failed: %s", e)
        surface.show_error(CATALOG_FAILURE_MESSAGE)
        return _page(request, surface, 503)
    except EmptyFeatureSetError:
        surface.show_error(NO_FEATURES_MESSAGE)
        surface.refresh_search_enabled()
        return _page(request, surface)
    except CatalogError as e:
        logger.error("Search for %r failed: %s", artist_name, e)
        surface.show_error(CATALOG_FAILURE_MESSAGE)
        surface.refresh_search_enabled()
        return _page(request, surface, 502)
    return _page(request, surface)


@app.get("/health")
def health_check():
    """Health check endpoint."""
    return {"status": "ok"}


@app.post("/api/mood", response_model=MoodResponse)
def summarize_artist_mood(request: MoodRequest):
    """Look up an artist and return their mood ring as JSON."""
    surface = PresentationSurface(stored_token=request.token or "")
    try:
        session = open_session(surface)
        session.resume()
        report = lookup_mood(session, request.artist_name)
    except ArtistNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except EmptySearchError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except EmptyFeatureSetError:
        raise HTTPException(status_code=422, detail=NO_FEATURES_MESSAGE)
    except StartupTokenError as e:
        logger.error("Startup token exchange failed: %s", e)
        raise HTTPException(status_code=503, detail=CATALOG_FAILURE_MESSAGE)
    except CatalogError as e:
        logger.error("Mood lookup for %r failed: %s", request.artist_name, e)
        raise HTTPException(status_code=502, detail=CATALOG_FAILURE_MESSAGE)
    except ValueError as e:
        raise HTTPException(status_code=500, detail=str(e))

    return MoodResponse(
        artist_name=report.artist_name,
        title=surface.results_title,
        rows=[
            ReportRowInfo(region=r.region, label=r.label, percent=r.percent, weight=r.weight, text=r.text)
            for r in surface.report_rows()
        ],
        summary=asdict(report.summary),
        token=surface.read_stored_token(),
    )
