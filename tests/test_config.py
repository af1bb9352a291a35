import importlib
from datetime import datetime

import pytest

from film_rec import config


@pytest.fixture
def reload_config(monkeypatch):
    def _reload():
        return importlib.reload(config)

    yield _reload
    monkeypatch.undo()
    importlib.reload(config)


def test_env_overrides_and_validation(monkeypatch, reload_config):
    monkeypatch.setenv("FILM_REC_REFERENCE_YEAR", "2025")
    monkeypatch.setenv("FILM_REC_DEFAULT_TOP_N", "0")  # should clamp to min

    cfg = reload_config()

    assert cfg.REFERENCE_YEAR == 2025
    assert cfg.DEFAULT_TOP_N == 1


def test_paths_respect_env(monkeypatch, tmp_path, reload_config):
    db_path = tmp_path / "custom.db"
    catalogue_path = tmp_path / "films.json"
    monkeypatch.setenv("FILM_REC_DB", str(db_path))
    monkeypatch.setenv("FILM_REC_CATALOGUE", str(catalogue_path))

    cfg = reload_config()

    assert cfg.DB_PATH == db_path
    assert cfg.CATALOGUE_PATH == catalogue_path


def test_invalid_env_values_fall_back_to_defaults(monkeypatch, reload_config, caplog):
    monkeypatch.setenv("FILM_REC_REFERENCE_YEAR", "next-year")
    monkeypatch.setenv("FILM_REC_DEFAULT_TOP_N", "bad-int")

    cfg = reload_config()

    assert cfg.REFERENCE_YEAR == datetime.now().year
    assert cfg.DEFAULT_TOP_N == 5
    assert "Invalid FILM_REC_REFERENCE_YEAR" in caplog.text


def test_weights_are_consistent():
    assert config.SIMILARITY_POINTS == {
        'genre': 30.0, 'director': 25.0, 'actor': 20.0,
        'rating': 15.0, 'decade': 10.0, 'language': 5.0,
    }
    assert sum(config.WEIGHTED_SIMILARITY_WEIGHTS.values()) == pytest.approx(1.0)
    assert config.QUALITY_POOR_BELOW < config.QUALITY_GOOD_BELOW
