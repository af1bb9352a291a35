import logging
from dataclasses import dataclass
from enum import Enum

from .catalogue import FactStore
from .film import FilmRecord
from .utils import name_key

logger = logging.getLogger(__name__)


class MatchMode(str, Enum):
    STRICT = "strict"  # every given criterion must match
    RANKED = "ranked"  # any criterion; ordered by how many match


@dataclass(frozen=True)
class SearchCriteria:
    """
    Optional filters for a catalogue search. Unset fields are ignored.

    Names are compared loosely (case, whitespace and punctuation ignored).
    The year bounds are inclusive and together count as one criterion.
    """
    genre: str | None = None
    director: str | None = None
    actor: str | None = None
    language: str | None = None
    year_from: int | None = None
    year_to: int | None = None

    def active(self) -> list[str]:
        names = [
            name for name in ('genre', 'director', 'actor', 'language')
            if (getattr(self, name) or '').strip()
        ]
        if self.year_from is not None or self.year_to is not None:
            names.append('year')
        return names

    def is_empty(self) -> bool:
        return not self.active()


@dataclass(frozen=True)
class SearchMatch:
    film: FilmRecord
    matched: tuple[str, ...] = ()

    @property
    def match_count(self) -> int:
        return len(self.matched)


def _contains(names: frozenset[str], wanted: str) -> bool:
    key = name_key(wanted)
    return any(name_key(name) == key for name in names)


def _matched_criteria(film: FilmRecord, criteria: SearchCriteria, active: list[str]) -> tuple[str, ...]:
    matched = []
    for name in active:
        if name == 'genre':
            ok = _contains(film.genres, criteria.genre)
        elif name == 'director':
            ok = bool(film.director) and name_key(film.director) == name_key(criteria.director)
        elif name == 'actor':
            ok = _contains(film.actors, criteria.actor)
        elif name == 'language':
            ok = _contains(film.languages, criteria.language)
        else:
            ok = ((criteria.year_from is None or film.release_year >= criteria.year_from)
                  and (criteria.year_to is None or film.release_year <= criteria.year_to))
        if ok:
            matched.append(name)
    return tuple(matched)


def recommend(
    store: FactStore,
    criteria: SearchCriteria,
    mode: MatchMode | str = MatchMode.RANKED,
) -> list[SearchMatch]:
    """
    Find films in the store that satisfy the search criteria.

    STRICT keeps films matching every given criterion, ordered by title.
    RANKED keeps films matching at least one, ordered by match count
    descending and then by title. With no criteria at all, every film is
    returned with zero matches in either mode.
    """
    mode = MatchMode(mode)
    active = criteria.active()
    films = store.list_all()

    if not active:
        logger.debug("No search criteria given, returning the whole catalogue")
        return [SearchMatch(film) for film in films]

    results = []
    for film in films:
        matched = _matched_criteria(film, criteria, active)
        if mode is MatchMode.STRICT and len(matched) < len(active):
            continue
        if mode is MatchMode.RANKED and not matched:
            continue
        results.append(SearchMatch(film, matched))

    results.sort(key=lambda m: (-m.match_count, m.film.key, m.film.title))
    logger.debug(f"{len(results)} films matched {active} ({mode.value})")
    return results
