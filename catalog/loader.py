"""
Catalog loader: reads the static course dataset and validates it.

Input: data/courses.json, a JSON array of course objects (snake_case keys).
Set COURSES_FILE in the environment (or .env) to point at another file.

Validation:
  - every entry must parse as a Course (rating 0-5, price >= 0, students >= 0)
  - ids must be unique across the catalog
"""

import json
import logging
import os
from pathlib import Path

from dotenv import load_dotenv

from recommender.models import Course

load_dotenv()

log = logging.getLogger(__name__)

DATA_DIR     = Path(__file__).parent.parent / "data"
COURSES_FILE = Path(os.getenv("COURSES_FILE", DATA_DIR / "courses.json"))


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def load_raw(path: Path) -> list[dict]:
    """Load a JSON array from disk."""
    if not path.exists():
        raise FileNotFoundError(f"Course catalog not found at {path}. Set COURSES_FILE or add data/courses.json.")
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, list):
        raise ValueError(f"{path} must contain a JSON array of courses, got {type(data).__name__}")
    return data


def check_unique_ids(courses: list[Course]) -> None:
    seen: set[str] = set()
    for course in courses:
        if course.id in seen:
            raise ValueError(f"Duplicate course id {course.id!r} in catalog")
        seen.add(course.id)


# ---------------------------------------------------------------------------
# Entry point (importable, not a CLI)
# ---------------------------------------------------------------------------

def load_courses(path: Path = COURSES_FILE) -> list[Course]:
    """Load, validate and return the catalog in file order."""
    raw = load_raw(path)
    courses = [Course.model_validate(item) for item in raw]
    check_unique_ids(courses)
    log.info("Loaded %d courses from %s", len(courses), path)
    return courses
