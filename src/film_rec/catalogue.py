"""
Fact store contract and the in-memory catalogue.

Scoring code only needs lookup by title, the full listing, and a count; any
object providing those three methods can be passed in as the fact store.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Iterable, Protocol

from .config import CATALOGUE_PATH
from .film import FilmRecord
from .utils import title_key

logger = logging.getLogger(__name__)


class CatalogueError(RuntimeError):
    """Raised when a catalogue file cannot be read or parsed."""


class FactStore(Protocol):
    def find_by_title(self, title: str) -> FilmRecord | None: ...

    def list_all(self) -> list[FilmRecord]: ...

    def count(self) -> int: ...


class Catalogue:
    """In-memory fact store keyed by case-insensitive title."""

    def __init__(self, films: Iterable[FilmRecord] = ()):
        self._films: dict[str, FilmRecord] = {}
        for film in films:
            if film.key in self._films:
                logger.warning(f"Duplicate title '{film.title}' in catalogue, keeping the later entry")
            self._films[film.key] = film

    def find_by_title(self, title: str) -> FilmRecord | None:
        return self._films.get(title_key(title))

    def list_all(self) -> list[FilmRecord]:
        return sorted(self._films.values(), key=lambda f: (f.key, f.title))

    def count(self) -> int:
        return len(self._films)

    def __len__(self) -> int:
        return len(self._films)

    def __contains__(self, title: object) -> bool:
        return isinstance(title, str) and title_key(title) in self._films


def parse_catalogue_entries(entries: Iterable[Any]) -> list[FilmRecord]:
    """Convert raw entries into records, skipping the ones that cannot be used."""
    films = []
    for index, entry in enumerate(entries):
        if not isinstance(entry, dict):
            logger.warning(f"Skipping catalogue entry {index}: expected an object, got {type(entry).__name__}")
            continue
        try:
            films.append(FilmRecord.from_dict(entry))
        except ValueError as e:
            logger.warning(f"Skipping catalogue entry {index}: {e}")
    return films


def read_catalogue_file(path: str | Path | None = None) -> list[FilmRecord]:
    """
    Read film records from a JSON file.

    The file holds either a list of film objects or an object with a "films"
    list. Raises CatalogueError if the file is missing, unreadable, or is not
    valid JSON.
    """
    catalogue_path = Path(path) if path else CATALOGUE_PATH
    if not catalogue_path.exists():
        raise CatalogueError(f"Catalogue file not found: {catalogue_path}")

    try:
        text = catalogue_path.read_text(encoding='utf-8')
    except (OSError, UnicodeDecodeError) as e:
        raise CatalogueError(f"Cannot read catalogue {catalogue_path}: {e}") from e

    try:
        payload = json.loads(text)
    except json.JSONDecodeError as e:
        raise CatalogueError(f"Invalid JSON in {catalogue_path}: {e}") from e

    if isinstance(payload, dict):
        payload = payload.get('films')
    if not isinstance(payload, list):
        raise CatalogueError(f"{catalogue_path} must contain a list of films or a 'films' list")

    films = parse_catalogue_entries(payload)
    logger.info(f"Loaded {len(films)} films from {catalogue_path}")
    return films


def load_catalogue(path: str | Path | None = None) -> Catalogue:
    return Catalogue(read_catalogue_file(path))


def catalogue_stats(store: FactStore) -> dict:
    """Counts of distinct attributes across the catalogue."""
    films = store.list_all()
    genres, directors, languages = set(), set(), set()
    for film in films:
        genres.update(film.genres)
        languages.update(film.languages)
        if film.director:
            directors.add(film.director)
    years = [f.release_year for f in films]
    return {
        'films': len(films),
        'genres': len(genres),
        'directors': len(directors),
        'languages': len(languages),
        'year_range': (min(years), max(years)) if years else None,
    }
