"""
Catalog records shared by the engine, the API and the frontend.

Course              one catalog entry (read-only from the engine's side)
UserInteraction     a rating or enrollment event tied to a course id
UserPreference      the preference form state used for content scoring
"""

from typing import Literal

from pydantic import BaseModel, Field

Level = Literal["Beginner", "Intermediate", "Advanced"]


class Course(BaseModel):
    id: str
    title: str
    description: str = ""
    instructor: str = ""
    rating: float = Field(ge=0.0, le=5.0)
    duration: str = ""
    students: int = Field(ge=0)
    level: Level
    category: str
    tags: list[str] = Field(default_factory=list)
    price: float = Field(ge=0.0)
    thumbnail: str = ""
    # Set on the copies returned by ranking queries, never on catalog entries.
    recommendation_score: float | None = None

    def with_score(self, score: float) -> "Course":
        return self.model_copy(update={"recommendation_score": score}, deep=True)


class UserInteraction(BaseModel):
    course_id: str
    rating: int = Field(default=0, ge=0, le=5)  # 0 = no rating given
    enrolled: bool = False
    completion_rate: float = Field(default=0.0, ge=0.0, le=1.0)

    @classmethod
    def enrollment(cls, course_id: str) -> "UserInteraction":
        return cls(course_id=course_id, rating=0, enrolled=True)

    @classmethod
    def star_rating(cls, course_id: str, rating: int) -> "UserInteraction":
        return cls(course_id=course_id, rating=rating, enrolled=False)


class UserPreference(BaseModel):
    interests: list[str] = Field(default_factory=list)
    skill_level: str = ""
    learning_style: str = ""
    time_commitment: int = 5
    budget: float = Field(default=100.0, ge=0.0)
    preferred_language: str = "English"
    goals: list[str] = Field(default_factory=list)

    @property
    def is_complete(self) -> bool:
        """True once there is enough to rank against (an interest and a level)."""
        return bool(self.interests) and bool(self.skill_level)
