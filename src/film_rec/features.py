"""
Quality signals derived from a film's facts.

Each signal lives on a 0-10 scale. Award-driven signals are boosted to
9.5 + 5% of the underlying value when the film won a matching award; award
names are matched by literal, case-sensitive substrings.
"""
import logging
from dataclasses import dataclass, asdict

from .config import (
    REFERENCE_YEAR,
    DIRECTOR_AWARD_KEYWORDS,
    ACTING_AWARD_KEYWORDS,
    STORY_AWARD_KEYWORDS,
    VFX_AWARD_KEYWORDS,
    AWARD_BOOST_BASE,
    AWARD_BOOST_FACTOR,
    STORY_RATING_FACTOR,
    VFX_GENRES,
    ANIMATION_GENRE,
    ANIMATION_RATING_TIERS,
    ANIMATION_FLOOR_SCORE,
    VFX_BUDGET_TIERS,
    VFX_LOW_BUDGET_SCORE,
    VFX_LOW_BUDGET_CEILING,
    VFX_DEFAULT_SCORE,
    BOMB_SCORE,
    BOMB_ROI_THRESHOLD,
    BOMB_RATING_THRESHOLD,
    RECENT_MAX_AGE,
    RECENT_MIN_RATING,
    RECENT_BONUS,
    CLASSIC_MIN_AGE,
    CLASSIC_MIN_RATING,
    CLASSIC_BONUS,
    AWARD_IMPACT_PER_AWARD,
    AWARD_IMPACT_CAP,
    BOX_OFFICE_HIT_ROI,
    BOX_OFFICE_HIT_BONUS,
    SIGNAL_CEILING,
)
from .film import FilmRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QualitySignals:
    director_quality: float
    acting_quality: float
    story_quality: float
    visual_effects: float
    cultural_impact: float

    def as_inputs(self) -> dict[str, float]:
        """Named inputs for the inference engine (exactly the five signal keys)."""
        return asdict(self)


SIGNAL_NAMES = tuple(QualitySignals.__dataclass_fields__)


def has_award(film: FilmRecord, keywords: tuple[str, ...]) -> bool:
    return any(keyword in award for award in film.awards for keyword in keywords)


def award_boost(value: float) -> float:
    return AWARD_BOOST_BASE + value * AWARD_BOOST_FACTOR


def return_on_investment(film: FilmRecord) -> float:
    if film.budget_usd <= 0:
        return 0.0
    return film.box_office_usd / film.budget_usd


def is_box_office_bomb(film: FilmRecord) -> bool:
    """Lost money and was badly received."""
    return return_on_investment(film) < BOMB_ROI_THRESHOLD and film.imdb_rating < BOMB_RATING_THRESHOLD


def director_quality(film: FilmRecord) -> float:
    if has_award(film, DIRECTOR_AWARD_KEYWORDS):
        return award_boost(film.imdb_rating)
    return film.imdb_rating


def acting_quality(film: FilmRecord) -> float:
    if has_award(film, ACTING_AWARD_KEYWORDS):
        return award_boost(film.imdb_rating)
    return film.imdb_rating


def story_quality(film: FilmRecord) -> float:
    if has_award(film, STORY_AWARD_KEYWORDS):
        return award_boost(film.imdb_rating)
    return film.imdb_rating * STORY_RATING_FACTOR


def vfx_from_budget(film: FilmRecord) -> float:
    """
    Estimate visual effects quality from genre, budget and reception.

    Only effects-heavy genres are judged: animation by rating, the others by
    budget tier, with bombs forced down to BOMB_SCORE. A budget of exactly
    VFX_LOW_BUDGET_CEILING sits between tiers and gets the default score.
    """
    if not film.genres & VFX_GENRES:
        return VFX_DEFAULT_SCORE

    if ANIMATION_GENRE in film.genres:
        for min_rating, score in ANIMATION_RATING_TIERS:
            if film.imdb_rating > min_rating:
                return score
        return ANIMATION_FLOOR_SCORE

    for min_budget, score in VFX_BUDGET_TIERS:
        if film.budget_usd > min_budget:
            return BOMB_SCORE if is_box_office_bomb(film) else score

    if film.budget_usd < VFX_LOW_BUDGET_CEILING:
        return BOMB_SCORE if is_box_office_bomb(film) else VFX_LOW_BUDGET_SCORE

    return VFX_DEFAULT_SCORE


def visual_effects(film: FilmRecord) -> float:
    base = vfx_from_budget(film)
    if has_award(film, VFX_AWARD_KEYWORDS):
        return award_boost(base)
    return base


def cultural_impact(film: FilmRecord, reference_year: int | None = None) -> float:
    """Rating plus bonuses for masterpieces, awards and box office success, capped at 10."""
    year = REFERENCE_YEAR if reference_year is None else reference_year
    age = year - film.release_year
    impact = film.imdb_rating

    # recent masterpiece
    if age < RECENT_MAX_AGE and film.imdb_rating > RECENT_MIN_RATING:
        impact += RECENT_BONUS

    # classic masterpiece
    if age > CLASSIC_MIN_AGE and film.imdb_rating > CLASSIC_MIN_RATING:
        impact += CLASSIC_BONUS

    if film.awards:
        impact += min(len(film.awards) * AWARD_IMPACT_PER_AWARD, AWARD_IMPACT_CAP)

    if film.budget_usd > 0 and return_on_investment(film) > BOX_OFFICE_HIT_ROI:
        impact += BOX_OFFICE_HIT_BONUS

    return min(impact, SIGNAL_CEILING)


def derive_quality_signals(film: FilmRecord, reference_year: int | None = None) -> QualitySignals:
    signals = QualitySignals(
        director_quality=director_quality(film),
        acting_quality=acting_quality(film),
        story_quality=story_quality(film),
        visual_effects=visual_effects(film),
        cultural_impact=cultural_impact(film, reference_year),
    )
    logger.debug(f"Quality signals for '{film.title}': {signals}")
    return signals
