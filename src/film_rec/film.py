from dataclasses import dataclass, field
from typing import Any

from .config import DEFAULT_RELEASE_YEAR, DEFAULT_BUDGET, MAX_IMDB_RATING
from .utils import parse_name_set, parse_year, parse_float, title_key


@dataclass(frozen=True)
class FilmRecord:
    """Immutable snapshot of one film's facts, used as scoring input."""
    title: str
    release_year: int = DEFAULT_RELEASE_YEAR
    imdb_rating: float = 0.0
    director: str = ""
    genres: frozenset[str] = field(default_factory=frozenset)
    actors: frozenset[str] = field(default_factory=frozenset)
    languages: frozenset[str] = field(default_factory=frozenset)
    box_office_usd: float = 0.0
    budget_usd: float = DEFAULT_BUDGET
    awards: frozenset[str] = field(default_factory=frozenset)

    @property
    def key(self) -> str:
        return title_key(self.title)

    @property
    def decade(self) -> int:
        return (self.release_year // 10) * 10

    def same_title(self, title: str) -> bool:
        return self.key == title_key(title)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "FilmRecord":
        """
        Build a record from a raw mapping (catalogue JSON or database row).

        Missing or malformed numeric fields resolve to their defaults so that
        scoring never sees an undefined value. Raises ValueError when the
        mapping has no usable title.
        """
        title = str(data.get('title') or '').strip()
        if not title:
            raise ValueError(f"Film entry has no title: {data!r}")

        rating = data.get('imdb_rating', data.get('rating'))
        box_office = data.get('box_office_usd', data.get('box_office'))
        budget = parse_float(data.get('budget_usd', data.get('budget')), DEFAULT_BUDGET)
        if budget <= 0:
            budget = DEFAULT_BUDGET

        return cls(
            title=title,
            release_year=parse_year(data.get('year', data.get('release_year')), DEFAULT_RELEASE_YEAR),
            imdb_rating=parse_float(rating, 0.0, min_val=0.0, max_val=MAX_IMDB_RATING),
            director=str(data.get('director') or '').strip(),
            genres=parse_name_set(data.get('genres')),
            actors=parse_name_set(data.get('actors')),
            languages=parse_name_set(data.get('languages')),
            box_office_usd=parse_float(box_office, 0.0, min_val=0.0),
            budget_usd=budget,
            awards=parse_name_set(data.get('awards')),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "year": self.release_year,
            "imdb_rating": self.imdb_rating,
            "director": self.director,
            "genres": sorted(self.genres),
            "actors": sorted(self.actors),
            "languages": sorted(self.languages),
            "box_office_usd": self.box_office_usd,
            "budget_usd": self.budget_usd,
            "awards": sorted(self.awards),
        }


@dataclass(frozen=True)
class NotFound:
    """
    Outcome for a title that is not in the fact store.

    Behaves as an empty result (falsy, zero length, empty iteration) while
    remaining distinguishable from "found, but nothing to report".
    """
    title: str

    def __bool__(self) -> bool:
        return False

    def __len__(self) -> int:
        return 0

    def __iter__(self):
        return iter(())
