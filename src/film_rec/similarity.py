"""
Content-based similarity between two films.

The default strategy adds interpretable points per shared attribute; the
contributions are not normalized, so scores only make sense relative to each
other. A weighted nearest-neighbour strategy is available as an alternative.
"""
from typing import Callable

from .config import (
    SIMILARITY_POINTS,
    RATING_CLOSENESS_THRESHOLD,
    WEIGHTED_SIMILARITY_WEIGHTS,
    RATING_INTERVAL,
    YEAR_INTERVAL,
)
from .film import FilmRecord

SimilarityFunc = Callable[[FilmRecord, FilmRecord], float]


def similarity_breakdown(target: FilmRecord, candidate: FilmRecord) -> dict[str, float]:
    """
    Points contributed by each attribute family, omitting families that add nothing.

    Set overlaps are intersection-based, so every family is symmetric in its
    two arguments.
    """
    contributions: dict[str, float] = {}

    shared_genres = target.genres & candidate.genres
    if shared_genres:
        contributions['genre'] = len(shared_genres) * SIMILARITY_POINTS['genre']

    if target.director and target.director == candidate.director:
        contributions['director'] = SIMILARITY_POINTS['director']

    shared_actors = target.actors & candidate.actors
    if shared_actors:
        contributions['actor'] = len(shared_actors) * SIMILARITY_POINTS['actor']

    if abs(target.imdb_rating - candidate.imdb_rating) < RATING_CLOSENESS_THRESHOLD:
        contributions['rating'] = SIMILARITY_POINTS['rating']

    if target.decade == candidate.decade:
        contributions['decade'] = SIMILARITY_POINTS['decade']

    shared_languages = target.languages & candidate.languages
    if shared_languages:
        contributions['language'] = len(shared_languages) * SIMILARITY_POINTS['language']

    return contributions


def similarity(target: FilmRecord, candidate: FilmRecord) -> float:
    """Additive points score; non-negative and unbounded above."""
    return float(sum(similarity_breakdown(target, candidate).values()))


def tiered_set_similarity(target_items: frozenset[str], candidate_items: frozenset[str]) -> float:
    """
    Overlap credit judged from the target's side.

    A single-item target needs its item shared for full credit. Larger targets
    get half credit for one shared item and full credit for two or more.
    """
    if not target_items or not candidate_items:
        return 0.0

    common = len(target_items & candidate_items)
    if len(target_items) == 1:
        return 1.0 if common >= 1 else 0.0
    if common == 0:
        return 0.0
    if common == 1:
        return 0.5
    return 1.0


def interval_similarity(a: float, b: float, interval: float) -> float:
    return max(0.0, 1.0 - abs(a - b) / interval)


def weighted_breakdown(target: FilmRecord, candidate: FilmRecord) -> dict[str, float]:
    """Weighted local similarities (each already multiplied by its weight)."""
    local = {
        'genre': tiered_set_similarity(target.genres, candidate.genres),
        'director': 1.0 if target.director and target.director == candidate.director else 0.0,
        'actor': tiered_set_similarity(target.actors, candidate.actors),
        'rating': interval_similarity(target.imdb_rating, candidate.imdb_rating, RATING_INTERVAL),
        'year': interval_similarity(target.release_year, candidate.release_year, YEAR_INTERVAL),
        'language': tiered_set_similarity(target.languages, candidate.languages),
    }
    return {
        name: value * WEIGHTED_SIMILARITY_WEIGHTS[name]
        for name, value in local.items()
        if value > 0
    }


def weighted_similarity(target: FilmRecord, candidate: FilmRecord) -> float:
    """
    Weighted average of local similarities in [0, 1].

    Unlike the points score this is directional: set overlap is judged
    relative to the target's own set size.
    """
    total_weight = sum(WEIGHTED_SIMILARITY_WEIGHTS.values())
    return sum(weighted_breakdown(target, candidate).values()) / total_weight


STRATEGIES: dict[str, tuple[SimilarityFunc, Callable[[FilmRecord, FilmRecord], dict[str, float]]]] = {
    'points': (similarity, similarity_breakdown),
    'weighted': (weighted_similarity, weighted_breakdown),
}


def get_strategy(name: str) -> tuple[SimilarityFunc, Callable[[FilmRecord, FilmRecord], dict[str, float]]]:
    """Return (score, breakdown) functions for a strategy name."""
    try:
        return STRATEGIES[name]
    except KeyError:
        raise ValueError(f"Unknown similarity strategy '{name}' (expected one of {sorted(STRATEGIES)})") from None
