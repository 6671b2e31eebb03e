import logging
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates
import uvicorn

import config
from nasa_client import fetch_feed, fetch_browse_page, TransportError
from normalize import (
    MalformedAsteroidError,
    browse_objects,
    filter_upcoming,
    normalize_asteroids,
    parse_as_of,
)

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
_LOG = logging.getLogger(__name__)

BASE_DIR = Path(__file__).resolve().parent

# Initialize FastAPI app
app = FastAPI(title="Asteroid Explorer")

# ============================================================================
# CONFIGURE CORS
# ============================================================================
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

app.mount("/static", StaticFiles(directory=BASE_DIR / "static", check_dir=False), name="static")
templates = Jinja2Templates(directory=str(BASE_DIR / "templates"))

PAGE_TITLE = "Asteroid Explorer"
PAGE_HEADING = "🌌 Asteroid Explorer"
PAGE_SUBHEADING = "Discover near-Earth asteroids and their incredible stats"
PAGE_ERROR_SUBHEADING = "Error fetching asteroid data"


# ============================================================================
# REQUEST ERRORS
# ============================================================================
class MissingParameterError(Exception):
    def __init__(self, name: str):
        super().__init__(name)
        self.name = name


@app.exception_handler(MissingParameterError)
async def missing_parameter_handler(request: Request, exc: MissingParameterError):
    return JSONResponse(status_code=400, content={"error": f"Missing {exc.name} parameter"})


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


# ============================================================================
# HTML PAGE
# ============================================================================

@app.get("/")
def home(request: Request):
    """
    Home page: one browse page of asteroids that are still on their way.
    Upstream failures render an empty list with an error subheading.
    """
    subheading = PAGE_SUBHEADING
    try:
        payload = fetch_browse_page(config.BROWSE_PAGE, config.BROWSE_PAGE_SIZE)
        asteroids = normalize_asteroids(
            browse_objects(payload),
            parse_as_of(),
            isolate_errors=config.ISOLATE_RECORD_ERRORS,
        )
    except (TransportError, MalformedAsteroidError) as e:
        _LOG.error("Error: %s", e)
        subheading = PAGE_ERROR_SUBHEADING
        asteroids = []

    return templates.TemplateResponse(
        request,
        "index.html",
        {
            "title": PAGE_TITLE,
            "heading": PAGE_HEADING,
            "subheading": subheading,
            "asteroids": asteroids,
        },
    )


# ============================================================================
# JSON API
# ============================================================================

@app.get("/api/asteroids")
def get_asteroids_for_date(date: Optional[str] = None):
    """
    Raw NASA feed for a single day
    Args:
        date: day to look up, e.g. 2024-01-01 (required)
    Returns: the upstream feed payload, unmodified
    """
    if not date:
        raise MissingParameterError("date")

    try:
        return fetch_feed(date)
    except TransportError as e:
        _LOG.error("API Error: %s", e)
        return error_response(500, "Failed to fetch asteroid data for date")


@app.get("/api/browse-asteroids")
def browse_upcoming_asteroids(date: Optional[str] = None):
    """
    Browse page filtered to asteroids with an approach on or after the given date
    Args:
        date: reference day (optional, defaults to today); an unreadable date matches nothing
    Returns: { "near_earth_objects": [raw asteroid, ...] }
    """
    try:
        as_of = parse_as_of(date or None)
    except ValueError:
        _LOG.info("Unreadable date %r, no approach can match", date)
        as_of = None

    try:
        payload = fetch_browse_page(config.BROWSE_PAGE, config.BROWSE_PAGE_SIZE)
        asteroids = browse_objects(payload)
        upcoming = filter_upcoming(asteroids, as_of) if as_of is not None else []
    except (TransportError, MalformedAsteroidError) as e:
        _LOG.error("Browse API Error: %s", e)
        return error_response(500, "Failed to fetch upcoming asteroids")

    return {"near_earth_objects": upcoming}


# ============================================================================
# RUN SERVER
# ============================================================================

if __name__ == "__main__":
    _LOG.info("🚀 Server running on port %s", config.PORT)
    uvicorn.run(
        "main:app",
        host=config.HOST,
        port=config.PORT,
    )
