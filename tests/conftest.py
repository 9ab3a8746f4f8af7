import pytest

from recommender.engine import RecommendationEngine
from recommender.models import Course, UserPreference


class FixedRandom:
    """Stand-in random source: returns a constant and records each call."""

    def __init__(self, value: float = 0.0):
        self.value = value
        self.calls: list[tuple[float, float]] = []

    def uniform(self, low: float, high: float) -> float:
        self.calls.append((low, high))
        return self.value


def make_course(id: str, **overrides) -> Course:
    fields = {
        "id": id,
        "title": f"Course {id}",
        "description": "",
        "instructor": "",
        "rating": 4.0,
        "duration": "10 hours",
        "students": 0,
        "level": "Beginner",
        "category": "General",
        "tags": [],
        "price": 0,
        "thumbnail": "",
    }
    fields.update(overrides)
    return Course(**fields)


@pytest.fixture
def fixed_rng():
    """Factory for deterministic random sources."""
    return FixedRandom


@pytest.fixture
def course_factory():
    return make_course


@pytest.fixture
def scenario_courses():
    """Two-course catalog with hand-computable scores."""
    return [
        make_course(
            "c1",
            title="Intro to Python",
            rating=4.5,
            students=1000,
            price=0,
            level="Beginner",
            category="Programming",
            tags=["python"],
        ),
        make_course(
            "c2",
            title="Visual Design",
            rating=3.0,
            students=50,
            price=200,
            level="Advanced",
            category="Design",
            tags=[],
        ),
    ]


@pytest.fixture
def scenario_preferences():
    return UserPreference(interests=["Programming"], skill_level="Beginner", budget=100)


@pytest.fixture
def sample_courses():
    """A small catalog for search, filter and API tests."""
    return [
        make_course(
            "1",
            title="Python for Data Science",
            description="Analyse datasets with pandas and NumPy.",
            instructor="Jose Portilla",
            rating=4.4,
            students=21450,
            level="Beginner",
            category="Data Science",
            tags=["Pandas", "NumPy"],
            price=0,
        ),
        make_course(
            "2",
            title="Automating the Boring Stuff",
            description="Scripts for everyday tasks.",
            instructor="Al Sweigart",
            rating=4.7,
            students=9000,
            level="Beginner",
            category="Programming",
            tags=["python", "automation"],
            price=45,
        ),
        make_course(
            "3",
            title="Modern React with Redux",
            description="Single-page applications with hooks.",
            instructor="Stephen Grider",
            rating=4.7,
            students=29840,
            level="Intermediate",
            category="Web Development",
            tags=["React", "JavaScript"],
            price=94.99,
        ),
        make_course(
            "4",
            title="Deep Learning Specialization",
            description="Neural networks with TensorFlow.",
            instructor="Andrew Ng",
            rating=4.9,
            students=52300,
            level="Advanced",
            category="Machine Learning",
            tags=["Deep Learning", "TensorFlow"],
            price=199.99,
        ),
    ]


@pytest.fixture
def engine(sample_courses):
    return RecommendationEngine(sample_courses, rng=FixedRandom(0.1))
