"""
Configuration constants for the film recommender.

This module centralizes all magic numbers and configurable parameters.
Values can be overridden via environment variables.
"""
import os
import logging
from datetime import datetime
from pathlib import Path

logger = logging.getLogger(__name__)


def _get_float_env(key: str, default: float, min_val: float = 0) -> float:
    """
    Safely parse float from environment variable with validation.

    Args:
        key: Environment variable name
        default: Default value if not set or invalid
        min_val: Minimum allowed value

    Returns:
        Validated float value
    """
    try:
        val = float(os.environ.get(key, default))
        if val < min_val:
            logger.warning(f"{key}={val} is below minimum {min_val}, using {min_val}")
            return min_val
        return val
    except ValueError:
        logger.warning(f"Invalid {key}='{os.environ.get(key)}', using default {default}")
        return default


def _get_int_env(key: str, default: int, min_val: int = 1) -> int:
    """
    Safely parse integer from environment variable with validation.

    Args:
        key: Environment variable name
        default: Default value if not set or invalid
        min_val: Minimum allowed value

    Returns:
        Validated integer value
    """
    try:
        val = int(os.environ.get(key, default))
        if val < min_val:
            logger.warning(f"{key}={val} is below minimum {min_val}, using {min_val}")
            return min_val
        return val
    except ValueError:
        logger.warning(f"Invalid {key}='{os.environ.get(key)}', using default {default}")
        return default


# Storage
DB_PATH = Path(os.environ.get("FILM_REC_DB", "data/films.db"))
CATALOGUE_PATH = Path(os.environ.get("FILM_REC_CATALOGUE", "data/films.json"))
EXPORT_INDENT = 2

# Reference year used to compute film age (cultural impact)
REFERENCE_YEAR = _get_int_env("FILM_REC_REFERENCE_YEAR", datetime.now().year, min_val=1888)

# Similar-film ranking
DEFAULT_TOP_N = _get_int_env("FILM_REC_DEFAULT_TOP_N", 5, min_val=1)

# Additive points per shared attribute
SIMILARITY_POINTS = {
    'genre': 30.0,      # per shared genre
    'director': 25.0,   # flat
    'actor': 20.0,      # per shared actor
    'rating': 15.0,     # flat, when ratings are close
    'decade': 10.0,     # flat
    'language': 5.0,    # per shared language
}
RATING_CLOSENESS_THRESHOLD = 0.5

# Weighted nearest-neighbour strategy (sums to 1.0)
WEIGHTED_SIMILARITY_WEIGHTS = {
    'genre': 0.28,
    'director': 0.23,
    'actor': 0.19,
    'rating': 0.15,
    'year': 0.10,
    'language': 0.05,
}
RATING_INTERVAL = 10.0
YEAR_INTERVAL = 100.0

# Film record defaults
DEFAULT_RELEASE_YEAR = 2000
DEFAULT_BUDGET = 1.0
MAX_IMDB_RATING = 10.0

# Award keywords (literal, case-sensitive substrings of award names)
DIRECTOR_AWARD_KEYWORDS = ("Director",)
ACTING_AWARD_KEYWORDS = ("Actor", "Actress")
STORY_AWARD_KEYWORDS = ("Screenplay", "Picture")
VFX_AWARD_KEYWORDS = ("Visual Effects", "Cinematography", "Editing")

# Award boost: 95% from the award, 5% from the underlying value
AWARD_BOOST_BASE = 9.5
AWARD_BOOST_FACTOR = 0.05
STORY_RATING_FACTOR = 0.95

# Visual effects estimation
VFX_GENRES = frozenset({"SciFi", "Fantasy", "Action", "Animation"})
ANIMATION_GENRE = "Animation"
ANIMATION_RATING_TIERS = ((8.0, 9.0), (7.0, 8.0))  # (rating above, score)
ANIMATION_FLOOR_SCORE = 7.0
VFX_BUDGET_TIERS = ((150_000_000, 9.0), (100_000_000, 8.0), (50_000_000, 7.0))  # (budget above, score)
VFX_LOW_BUDGET_SCORE = 6.0
VFX_LOW_BUDGET_CEILING = 50_000_000
VFX_DEFAULT_SCORE = 5.0
BOMB_SCORE = 2.0
BOMB_ROI_THRESHOLD = 1.0
BOMB_RATING_THRESHOLD = 3.5

# Cultural impact
RECENT_MAX_AGE = 10
RECENT_MIN_RATING = 8.5
RECENT_BONUS = 1.0
CLASSIC_MIN_AGE = 30
CLASSIC_MIN_RATING = 8.0
CLASSIC_BONUS = 1.5
AWARD_IMPACT_PER_AWARD = 0.2
AWARD_IMPACT_CAP = 1.5
BOX_OFFICE_HIT_ROI = 5.0
BOX_OFFICE_HIT_BONUS = 0.5
SIGNAL_CEILING = 10.0

# Quality bands (score below threshold -> band)
QUALITY_POOR_BELOW = 40.0
QUALITY_GOOD_BELOW = 70.0

# Fuzzy inference
FUZZY_INPUT_RANGE = (0.0, 10.0)
FUZZY_OUTPUT_RANGE = (0.0, 100.0)
FUZZY_OUTPUT_RESOLUTION = 1001  # sample points on the output universe
FUZZY_DEFAULT_OUTPUT = 0.0  # used when no rule fires
