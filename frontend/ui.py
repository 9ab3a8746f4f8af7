"""
Streamlit frontend for the course catalog.

    streamlit run frontend/ui.py

Talks to the FastAPI backend (CATALOG_API_URL, default http://localhost:8000)
and renders three tabs: Discover (search, filters, trending), Recommendations
and Preferences. Enroll and star-rating clicks are posted back to the API.
"""

import os
import sys
from pathlib import Path

import requests
import streamlit as st
from dotenv import load_dotenv

# Ensure project root is on sys.path when run via `streamlit run frontend/ui.py`
sys.path.insert(0, str(Path(__file__).parent.parent))

from recommender.models import UserPreference

load_dotenv()

API_URL = os.getenv("CATALOG_API_URL", "http://localhost:8000").rstrip("/")
TIMEOUT = 10

INTERESTS = [
    "Programming", "Data Science", "Machine Learning", "Web Development",
    "Mobile Development", "DevOps", "Cybersecurity", "UI/UX Design",
    "Business", "Marketing", "Photography", "Music", "Languages",
]
GOALS = [
    "Career Change", "Skill Enhancement", "Personal Interest",
    "Academic Requirement", "Professional Certification",
]
LEVELS          = ["Beginner", "Intermediate", "Advanced"]
LEARNING_STYLES = ["Visual", "Auditory", "Hands-on", "Reading"]
LANGUAGES       = ["English", "Spanish", "French", "German", "Chinese"]
PRICE_OPTIONS = {
    "All Prices": "all_prices",
    "Free":       "free",
    "Paid":       "paid",
    "Under $50":  "under50",
    "Under $100": "under100",
}


def _api(method: str, path: str, **kwargs):
    """Call the backend; stop the script with an error message on failure."""
    try:
        resp = requests.request(method, f"{API_URL}{path}", timeout=TIMEOUT, **kwargs)
        resp.raise_for_status()
        return resp.json()
    except requests.exceptions.ConnectionError:
        st.error("Cannot reach the API. Start it with: python app/app.py")
        st.stop()
    except requests.exceptions.HTTPError as exc:
        st.error(f"API error: {exc}")
        st.stop()


def _course_card(course: dict, key_prefix: str) -> None:
    with st.container(border=True):
        st.caption(f"{course['category']} · {course['level']}")
        st.markdown(f"**{course['title']}**")
        st.caption(f"by {course['instructor']}")
        st.write(course["description"])
        st.write(
            f"⭐ {course['rating']:.1f}   ⏱ {course['duration']}   "
            f"👥 {course['students']:,}"
        )
        if course["tags"]:
            st.caption(" · ".join(course["tags"][:3]))

        price = "Free" if course["price"] == 0 else f"${course['price']}"
        st.markdown(f"### {price}")
        if course.get("recommendation_score"):
            st.caption(f"{round(course['recommendation_score'] * 100)}% match")

        key = f"{key_prefix}-{course['id']}"
        # st.feedback keeps its value across reruns; post each new rating once.
        stars = st.feedback("stars", key=f"rate-{key}")
        if stars is not None and st.session_state.get(f"posted-{key}") != stars:
            rated = _api("POST", f"/courses/{course['id']}/rate", json={"rating": stars + 1})
            st.session_state[f"posted-{key}"] = stars
            st.toast(rated["message"])
        if st.button("Enroll", key=f"enroll-{key}"):
            enrolled = _api("POST", f"/courses/{course['id']}/enroll")
            st.toast(enrolled["message"])


def _course_grid(courses: list[dict], key_prefix: str, columns: int = 3) -> None:
    cols = st.columns(columns)
    for i, course in enumerate(courses):
        with cols[i % columns]:
            _course_card(course, key_prefix)


# ---------------------------------------------------------------------------
# Page
# ---------------------------------------------------------------------------

st.set_page_config(page_title="CourseAI", layout="wide")

# Preference widgets own their values through these session_state keys.
PREFERENCE_DEFAULTS = {
    "interests": [],
    "skill_level": "",
    "learning_style": "",
    "time_commitment": 5,
    "budget": 100,
    "preferred_language": "English",
    "goals": [],
}
for field, default in PREFERENCE_DEFAULTS.items():
    st.session_state.setdefault(f"pref_{field}", default)


def current_preferences() -> UserPreference:
    return UserPreference.model_validate(
        {field: st.session_state[f"pref_{field}"] for field in PREFERENCE_DEFAULTS}
    )


if "trending" not in st.session_state:
    st.session_state.trending = False

stats = _api("GET", "/stats")
st.title("CourseAI")
st.caption("Intelligent Course Recommendations")
c1, c2, c3 = st.columns(3)
c1.metric("Courses", f"{stats['total_courses']:,}")
c2.metric("Students", f"{stats['total_students']:,}")
c3.metric("Avg Rating", stats["average_rating"])

discover, recommended, preferences_tab = st.tabs(
    ["Discover Courses", "AI Recommendations", "My Preferences"]
)

with discover:
    categories = _api("GET", "/categories")

    query = st.text_input("Search", placeholder="Search courses, instructors, or topics...")
    f1, f2, f3, f4 = st.columns(4)
    category = f1.selectbox("Category", ["All Categories"] + categories)
    level = f2.selectbox("Level", ["All Levels"] + LEVELS)
    price_label = f3.selectbox("Price", list(PRICE_OPTIONS))
    if f4.button("Trending"):
        st.session_state.trending = not st.session_state.trending

    params = {
        "q": query,
        "category": "" if category == "All Categories" else category,
        "level": "" if level == "All Levels" else level,
        "price": PRICE_OPTIONS[price_label],
        "trending": st.session_state.trending and not query.strip(),
    }
    courses = _api("GET", "/courses", params=params)

    heading = "Trending Courses" if params["trending"] else "All Courses"
    st.subheader(f"{heading} ({len(courses)} found)")
    if courses:
        _course_grid(courses, "discover", columns=4)
    else:
        st.info("No courses found. Try adjusting your search or filters.")

prefs = current_preferences()
recommendations: list[dict] = []
if prefs.is_complete:
    recommendations = _api(
        "POST", "/recommendations",
        json={"preferences": prefs.model_dump(), "strategy": "hybrid", "limit": 8},
    )

with recommended:
    if recommendations:
        st.subheader("Personalized Recommendations for You")
        _course_grid(recommendations, "recommended", columns=4)
    else:
        st.info(
            "Set your preferences: tell us about your interests and skill level "
            "in the My Preferences tab to get personalized recommendations."
        )

with preferences_tab:
    st.subheader("Tell us about your learning preferences")
    a, b = st.columns(2)
    a.multiselect("Areas of Interest", INTERESTS, key="pref_interests")
    b.multiselect("Learning Goals", GOALS, key="pref_goals")

    s1, s2, s3 = st.columns(3)
    s1.selectbox(
        "Skill Level", [""] + LEVELS, key="pref_skill_level",
        format_func=lambda v: v or "Select skill level",
    )
    s2.selectbox(
        "Learning Style", [""] + LEARNING_STYLES, key="pref_learning_style",
        format_func=lambda v: v or "Select learning style",
    )
    s3.selectbox("Preferred Language", LANGUAGES, key="pref_preferred_language")

    t1, t2 = st.columns(2)
    t1.slider("Time Commitment (hours/week)", min_value=1, max_value=40, key="pref_time_commitment")
    t2.slider("Budget ($)", min_value=0, max_value=500, step=10, key="pref_budget")
    budget = st.session_state.pref_budget
    st.caption("Free only" if budget == 0 else f"Up to ${budget}")

    if recommendations:
        st.subheader("Preview: Your Personalized Recommendations")
        _course_grid(recommendations[:3], "preview")
        if len(recommendations) > 3:
            st.caption(f"See all {len(recommendations)} recommendations in the AI Recommendations tab.")
