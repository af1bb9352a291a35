import importlib
import sys
from pathlib import Path

import pytest

# Ensure the package under test is importable without installation
PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_PATH = PROJECT_ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from film_rec.catalogue import Catalogue  # noqa: E402
from film_rec.film import FilmRecord  # noqa: E402


def make_film(title: str, **overrides) -> FilmRecord:
    data = {"title": title, **overrides}
    return FilmRecord.from_dict(data)


@pytest.fixture
def sample_films():
    return [
        make_film(
            "Inception", year=2010, imdb_rating=8.8, director="Christopher Nolan",
            genres=["SciFi", "Action"], actors=["Leonardo DiCaprio", "Tom Hardy"],
            languages=["English"], box_office_usd=836_800_000, budget_usd=160_000_000,
            awards=["Oscar Best Visual Effects", "Oscar Best Cinematography"],
        ),
        make_film(
            "Interstellar", year=2014, imdb_rating=8.7, director="Christopher Nolan",
            genres=["SciFi", "Drama"], actors=["Matthew McConaughey", "Michael Caine"],
            languages=["English"], box_office_usd=773_800_000, budget_usd=165_000_000,
        ),
        make_film(
            "The Revenant", year=2015, imdb_rating=8.0, director="Alejandro G. Inarritu",
            genres=["Drama", "Western"], actors=["Leonardo DiCaprio", "Tom Hardy"],
            languages=["English", "French"], box_office_usd=533_000_000, budget_usd=135_000_000,
            awards=["Oscar Best Director", "Oscar Best Actor"],
        ),
        make_film(
            "Amelie", year=2001, imdb_rating=8.3, director="Jean-Pierre Jeunet",
            genres=["Comedy", "Romance"], actors=["Audrey Tautou"], languages=["French"],
        ),
    ]


@pytest.fixture
def sample_catalogue(sample_films):
    return Catalogue(sample_films)


@pytest.fixture
def fresh_config(monkeypatch, tmp_path):
    """
    Reload config with a temporary database path to keep tests isolated.
    """
    db_path = tmp_path / "test.db"
    monkeypatch.setenv("FILM_REC_DB", str(db_path))
    import film_rec.config as config

    importlib.reload(config)
    yield config
    monkeypatch.undo()
    importlib.reload(config)


@pytest.fixture
def fresh_db(monkeypatch, tmp_path):
    """
    Reload config/database modules with a temp DB and cleanly close the pool after use.
    """
    db_path = tmp_path / "test.db"
    monkeypatch.setenv("FILM_REC_DB", str(db_path))

    import film_rec.config as config
    import film_rec.database as database

    importlib.reload(config)
    importlib.reload(database)
    database.init_db()

    yield database
    database.close_pool()
