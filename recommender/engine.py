"""
Recommendation engine: content score, collaborative-style score, weighted
hybrid blend, trending score and keyword search over an in-memory catalog.

Content score (preference match, clamped to [0, 1]):
    +0.4  any interest is a substring of the category, title or a tag
    +0.2  course level equals the preferred skill level
    +0.2  price within budget (otherwise -0.1)
    +0.1  * rating / 5
    +0.1  * min(students / 10000, 1)

Collaborative score (popularity stand-in, no real user cohorts):
    (0.5 * rating/5 + 0.3 * min(students/50000, 1) + uniform(0, 0.3)) / 1.8

Hybrid score:
    0.7 * content + 0.3 * collaborative, computed only over the union of the
    top 2*limit content and top 2*limit collaborative candidates.

Trending score:
    rating * ln(students + 1)

Every ranking is a stable descending sort, so ties keep catalog order.
Returned courses are copies; the catalog itself is never modified.

Public API:
    RecommendationEngine(courses, interactions=None, rng=None)
    RecommendationEngine.record_interaction(interaction)
    RecommendationEngine.get_content_based_recommendations(prefs, limit)
    RecommendationEngine.get_collaborative_recommendations(limit)
    RecommendationEngine.get_hybrid_recommendations(prefs, limit)
    RecommendationEngine.get_trending_courses(limit)
    RecommendationEngine.search_courses(query) -> list[Course]
"""

import logging
from collections.abc import Iterable
from typing import Protocol

import numpy as np

from recommender.models import Course, UserInteraction, UserPreference

log = logging.getLogger(__name__)

CONTENT_WEIGHT       = 0.7
COLLABORATIVE_WEIGHT = 0.3
CANDIDATE_FACTOR     = 2     # hybrid pulls limit * 2 from each ranker

SIMILARITY_NOISE = 0.3       # upper bound of the simulated similarity draw
COLLAB_DIVISOR   = 1.8


class RandomSource(Protocol):
    def uniform(self, low: float, high: float) -> float: ...


def _clamp(value: float, lo: float = 0.0, hi: float = 1.0) -> float:
    return max(lo, min(hi, value))


def _rank(courses: list[Course], limit: int) -> list[Course]:
    """Stable descending sort on recommendation_score, truncated to limit."""
    if limit <= 0:
        return []
    ranked = sorted(courses, key=lambda c: c.recommendation_score or 0.0, reverse=True)
    return ranked[:limit]


def _matches_interest(course: Course, interests: Iterable[str]) -> bool:
    category = course.category.lower()
    title    = course.title.lower()
    tags     = [t.lower() for t in course.tags]
    for interest in interests:
        needle = interest.lower()
        if needle in category or needle in title or any(needle in t for t in tags):
            return True
    return False


def _matches_term(course: Course, term: str) -> bool:
    return (
        term in course.title.lower()
        or term in course.description.lower()
        or term in course.category.lower()
        or any(term in t.lower() for t in course.tags)
        or term in course.instructor.lower()
    )


class RecommendationEngine:
    """
    Ranks a fixed catalog against preferences and recorded interactions.

    Single-session object: record_interaction mutates the interaction list in
    place and is not safe to call concurrently with the query methods.
    """

    def __init__(
        self,
        courses: list[Course],
        interactions: list[UserInteraction] | None = None,
        rng: RandomSource | None = None,
    ):
        self.courses      = list(courses)
        self.interactions = list(interactions or [])
        self.rng          = rng if rng is not None else np.random.default_rng()

    # ------------------------------------------------------------------
    # Interactions
    # ------------------------------------------------------------------

    def record_interaction(self, interaction: UserInteraction) -> None:
        """Store an interaction; a later one for the same course replaces it in place."""
        for i, existing in enumerate(self.interactions):
            if existing.course_id == interaction.course_id:
                self.interactions[i] = interaction
                log.debug("Replaced interaction for %s", interaction.course_id)
                return
        self.interactions.append(interaction)
        log.debug("Recorded interaction for %s", interaction.course_id)

    def interacted_ids(self) -> set[str]:
        return {i.course_id for i in self.interactions}

    # ------------------------------------------------------------------
    # Scores
    # ------------------------------------------------------------------

    def content_score(self, course: Course, preferences: UserPreference) -> float:
        score = 0.0

        if _matches_interest(course, preferences.interests):
            score += 0.4

        # An unset skill level never counts as a match.
        if preferences.skill_level and course.level == preferences.skill_level:
            score += 0.2

        if course.price <= preferences.budget:
            score += 0.2
        else:
            score -= 0.1

        score += (course.rating / 5) * 0.1
        score += min(course.students / 10000, 1) * 0.1

        return _clamp(score)

    def collaborative_score(self, course: Course) -> float:
        rating_score     = course.rating / 5
        popularity_score = min(course.students / 50000, 1)
        similarity_score = float(self.rng.uniform(0.0, SIMILARITY_NOISE))
        return (rating_score * 0.5 + popularity_score * 0.3 + similarity_score) / COLLAB_DIVISOR

    # ------------------------------------------------------------------
    # Rankings
    # ------------------------------------------------------------------

    def get_content_based_recommendations(
        self, preferences: UserPreference, limit: int = 10
    ) -> list[Course]:
        scored = [c.with_score(self.content_score(c, preferences)) for c in self.courses]
        return _rank(scored, limit)

    def get_collaborative_recommendations(self, limit: int = 10) -> list[Course]:
        """Rank courses the user has not rated or enrolled in yet."""
        seen = self.interacted_ids()
        scored = [
            c.with_score(self.collaborative_score(c))
            for c in self.courses
            if c.id not in seen
        ]
        return _rank(scored, limit)

    def get_hybrid_recommendations(
        self, preferences: UserPreference, limit: int = 10
    ) -> list[Course]:
        """
        Blend content and collaborative scores over bounded candidate windows.

        Only courses that appear in the top limit*2 of either ranker receive a
        blended score; everything else scores 0 and is dropped.
        """
        if limit <= 0:
            return []

        window  = limit * CANDIDATE_FACTOR
        content = self.get_content_based_recommendations(preferences, window)
        collab  = self.get_collaborative_recommendations(window)

        blended: dict[str, float] = {}
        for c in content:
            blended[c.id] = (c.recommendation_score or 0.0) * CONTENT_WEIGHT
        for c in collab:
            blended[c.id] = blended.get(c.id, 0.0) + (c.recommendation_score or 0.0) * COLLABORATIVE_WEIGHT

        scored = [c.with_score(blended.get(c.id, 0.0)) for c in self.courses]
        return _rank([c for c in scored if (c.recommendation_score or 0.0) > 0], limit)

    def get_trending_courses(self, limit: int = 5) -> list[Course]:
        """Top courses by rating * ln(students + 1); no score is attached."""
        if limit <= 0 or not self.courses:
            return []
        ratings  = np.array([c.rating for c in self.courses], dtype=np.float64)
        students = np.array([c.students for c in self.courses], dtype=np.float64)
        trending = ratings * np.log(students + 1)

        order = np.argsort(-trending, kind="stable")[:limit]
        return [self.courses[i].model_copy(deep=True) for i in order]

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------

    def search_courses(self, query: str) -> list[Course]:
        """
        Courses where at least one whitespace-separated term is a substring
        of the title, description, category, a tag or the instructor.

        A blank query matches the whole catalog. Results keep catalog order.
        """
        terms = query.lower().split()
        if not terms:
            return [c.model_copy(deep=True) for c in self.courses]
        return [
            c.model_copy(deep=True)
            for c in self.courses
            if any(_matches_term(c, term) for term in terms)
        ]
