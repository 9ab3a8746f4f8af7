"""
FastAPI application: the single entry point the frontend talks to.

Run as a script:
    python app/app.py

Or as a module:
    uvicorn app.app:app --reload

Endpoints:
    GET  /courses                    browse: ?q=&category=&level=&price=&trending=
    GET  /courses/trending           ?limit=
    GET  /categories
    GET  /stats
    POST /recommendations            body: {"preferences": {...}, "strategy": "hybrid", "limit": 8}
    POST /courses/{course_id}/enroll
    POST /courses/{course_id}/rate   body: {"rating": 1..5}
    GET  /interactions

One engine per process: the API serves a single user session, so recorded
interactions live in memory until the process exits.

Logs each request and wall-clock response time to stdout and logs/app.log
(rotating, 5 MB max, 3 backups).
"""

import asyncio
import logging
import logging.handlers
import os
import sys
import time
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, Literal

import numpy as np
import uvicorn
from dotenv import load_dotenv
from fastapi import Depends, FastAPI, HTTPException
from pydantic import BaseModel, Field

# Ensure project root is on sys.path when running as a script (python app/app.py)
sys.path.insert(0, str(Path(__file__).parent.parent))

from catalog.loader import load_courses
from recommender.engine import RecommendationEngine
from recommender.filters import browse, catalog_stats, list_categories
from recommender.models import Course, UserInteraction, UserPreference

load_dotenv()

LOG_DIR  = Path(__file__).parent.parent / "logs"
LOG_FILE = LOG_DIR / "app.log"

API_HOST = os.getenv("API_HOST", "0.0.0.0")
API_PORT = int(os.getenv("API_PORT", "8000"))
SEED     = os.getenv("RECOMMENDER_SEED")


def _setup_logging() -> None:
    LOG_DIR.mkdir(exist_ok=True)
    fmt = logging.Formatter("%(asctime)s  %(levelname)s  %(message)s")

    stream = logging.StreamHandler(sys.stdout)
    stream.setFormatter(fmt)

    # Rotate at 5 MB, keep 3 backups
    rotating = logging.handlers.RotatingFileHandler(
        LOG_FILE, maxBytes=5 * 1024 * 1024, backupCount=3, encoding="utf-8"
    )
    rotating.setFormatter(fmt)

    root = logging.getLogger()
    root.setLevel(logging.INFO)
    root.addHandler(stream)
    root.addHandler(rotating)

_setup_logging()
log = logging.getLogger("api")


# ---------------------------------------------------------------------------
# App + lifespan
# ---------------------------------------------------------------------------

_engine: RecommendationEngine | None = None
_server_tasks: set[asyncio.Task] = set()


def build_engine() -> RecommendationEngine:
    courses = load_courses()
    rng = np.random.default_rng(int(SEED)) if SEED else np.random.default_rng()
    if SEED:
        log.info("  Collaborative noise seeded with %s.", SEED)
    return RecommendationEngine(courses, rng=rng)


@asynccontextmanager
async def lifespan(_: FastAPI):
    global _engine

    log.info("Loading course catalog…")
    _engine = build_engine()
    log.info("  %d courses loaded.", len(_engine.courses))

    yield  # server runs here


app = FastAPI(title="Course Catalog Recommender", lifespan=lifespan)


def get_engine() -> RecommendationEngine:
    if _engine is None:
        raise HTTPException(status_code=503, detail="Catalog not loaded.")
    return _engine


# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

class RecommendationRequest(BaseModel):
    preferences: UserPreference
    strategy: Literal["hybrid", "content", "collaborative"] = "hybrid"
    limit: int = 8


class RateRequest(BaseModel):
    rating: int = Field(ge=1, le=5)


class InteractionResponse(BaseModel):
    message: str
    interaction: UserInteraction


class StatsResponse(BaseModel):
    total_courses: int
    total_students: int
    average_rating: float


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _find_course(engine: RecommendationEngine, course_id: str) -> Course:
    for course in engine.courses:
        if course.id == course_id:
            return course
    raise HTTPException(status_code=404, detail=f"Course {course_id!r} not found.")


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@app.get("/courses", response_model=list[Course])
def list_courses(
    q: str = "",
    category: str | None = None,
    level: str | None = None,
    price: str | None = None,
    trending: bool = False,
    engine: RecommendationEngine = Depends(get_engine),
) -> list[Course]:
    t0 = time.perf_counter()
    try:
        results = browse(engine, query=q, trending=trending,
                         category=category, level=level, price=price)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    elapsed = time.perf_counter() - t0
    log.info("browse q=%r  category=%r  level=%r  price=%r  trending=%s  hits=%d  %.3fs",
             q, category, level, price, trending, len(results), elapsed)
    return results


@app.get("/courses/trending", response_model=list[Course])
def trending_courses(
    limit: int = 5, engine: RecommendationEngine = Depends(get_engine)
) -> list[Course]:
    return engine.get_trending_courses(limit)


@app.get("/categories", response_model=list[str])
def categories(engine: RecommendationEngine = Depends(get_engine)) -> list[str]:
    return list_categories(engine.courses)


@app.get("/stats", response_model=StatsResponse)
def stats(engine: RecommendationEngine = Depends(get_engine)) -> dict[str, Any]:
    return catalog_stats(engine.courses)


@app.post("/recommendations", response_model=list[Course])
def recommendations(
    req: RecommendationRequest, engine: RecommendationEngine = Depends(get_engine)
) -> list[Course]:
    t0 = time.perf_counter()

    if req.strategy == "content":
        results = engine.get_content_based_recommendations(req.preferences, req.limit)
    elif req.strategy == "collaborative":
        results = engine.get_collaborative_recommendations(req.limit)
    else:
        results = engine.get_hybrid_recommendations(req.preferences, req.limit)

    elapsed = time.perf_counter() - t0
    log.info("recommend strategy=%s  interests=%r  level=%r  hits=%d  %.3fs",
             req.strategy, req.preferences.interests, req.preferences.skill_level,
             len(results), elapsed)
    return results


@app.post("/courses/{course_id}/enroll", response_model=InteractionResponse)
def enroll(course_id: str, engine: RecommendationEngine = Depends(get_engine)) -> InteractionResponse:
    course = _find_course(engine, course_id)
    interaction = UserInteraction.enrollment(course_id)
    engine.record_interaction(interaction)
    log.info("enroll course=%s", course_id)
    return InteractionResponse(
        message=f'Successfully enrolled in "{course.title}"!',
        interaction=interaction,
    )


@app.post("/courses/{course_id}/rate", response_model=InteractionResponse)
def rate(
    course_id: str, req: RateRequest, engine: RecommendationEngine = Depends(get_engine)
) -> InteractionResponse:
    course = _find_course(engine, course_id)
    interaction = UserInteraction.star_rating(course_id, req.rating)
    engine.record_interaction(interaction)
    log.info("rate course=%s  rating=%d", course_id, req.rating)
    return InteractionResponse(
        message=f'Rated "{course.title}" {req.rating} stars!',
        interaction=interaction,
    )


@app.get("/interactions", response_model=list[UserInteraction])
def interactions(engine: RecommendationEngine = Depends(get_engine)) -> list[UserInteraction]:
    return list(engine.interactions)


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def _launch_server() -> None:
    config = uvicorn.Config(app, host=API_HOST, port=API_PORT, reload=False)
    server = uvicorn.Server(config)

    try:
        asyncio.get_running_loop()
    except RuntimeError:
        uvicorn.run(app, host=API_HOST, port=API_PORT, reload=False)
        return

    log.warning(
        "Detected an existing asyncio event loop; serving with create_task() instead of asyncio.run()."
    )
    task = asyncio.create_task(server.serve())
    # Hold a reference until the server exits so the task is not collected.
    _server_tasks.add(task)
    task.add_done_callback(_server_tasks.discard)


if __name__ == "__main__":
    log.info("=== Course Catalog Recommender — starting up ===")
    _launch_server()
