import pytest

from film_rec.catalogue import Catalogue
from film_rec.film import NotFound
from film_rec.ranker import find_similar_films, rank, resolve_top_n

from conftest import make_film


def test_rank_excludes_target_case_insensitively(sample_films):
    target = sample_films[0]
    candidates = sample_films + [make_film("INCEPTION", genres=["SciFi"])]

    results = rank(target, candidates, top_n=10)

    assert all(r.title.lower() != "inception" for r in results)
    assert len(results) == len(sample_films) - 1


def test_rank_sorts_by_score_descending(sample_films):
    results = rank(sample_films[0], sample_films, top_n=3)

    scores = [r.score for r in results]
    assert scores == sorted(scores, reverse=True)
    # Interstellar: SciFi 30 + director 25 + rating 15 + decade 10 + English 5
    assert results[0].title == "Interstellar"
    assert results[0].score == 85.0
    assert results[0].breakdown["director"] == 25.0


def test_rank_truncates_and_never_pads(sample_films):
    assert len(rank(sample_films[0], sample_films, top_n=2)) == 2
    assert len(rank(sample_films[0], sample_films, top_n=50)) == 3
    assert rank(sample_films[0], sample_films, top_n=0) == []


def test_rank_breaks_ties_by_title():
    target = make_film("Target", genres=["Drama"], imdb_rating=1.0, year=1950)
    candidates = [
        make_film("charlie", genres=["Drama"], imdb_rating=9.0, year=2020),
        make_film("Alpha", genres=["Drama"], imdb_rating=9.0, year=2020),
        make_film("bravo", genres=["Drama"], imdb_rating=9.0, year=2020),
    ]

    results = rank(target, candidates, top_n=3)

    assert [r.title for r in results] == ["Alpha", "bravo", "charlie"]


def test_rank_with_weighted_strategy(sample_films):
    results = rank(sample_films[0], sample_films, top_n=3, strategy="weighted")

    assert all(0.0 <= r.score <= 1.0 for r in results)
    assert results[0].title == "Interstellar"


def test_find_similar_films_not_found_is_empty_and_distinguishable(sample_catalogue):
    result = find_similar_films(sample_catalogue, "No Such Film", top_n=3)

    assert isinstance(result, NotFound)
    assert not result
    assert len(result) == 0
    assert list(result) == []
    assert result.title == "No Such Film"


def test_find_similar_films_single_film_catalogue_returns_empty_list():
    store = Catalogue([make_film("Alone")])

    result = find_similar_films(store, "alone", top_n=5)

    assert result == []
    assert not isinstance(result, NotFound)


def test_find_similar_films_resolves_title_case_insensitively(sample_catalogue):
    results = find_similar_films(sample_catalogue, "  the REVENANT ", top_n=1)

    assert [r.title for r in results] == ["Inception"]


def test_resolve_top_n_defaults_and_clamps():
    assert resolve_top_n(None, 20).value == 5
    assert resolve_top_n("", 20).note is None
    assert resolve_top_n("3", 20) == resolve_top_n(3, 20)
    assert resolve_top_n(3, 20).note is None

    invalid = resolve_top_n("many", 20)
    assert invalid.value == 5
    assert "Invalid number format" in invalid.note

    negative = resolve_top_n("-2", 20)
    assert negative.value == 5
    assert "default" in negative.note

    too_high = resolve_top_n(50, 20)
    assert too_high.value == 19
    assert "maximum: 19" in too_high.note


def test_resolve_top_n_small_catalogues():
    assert resolve_top_n(None, 3).value == 2
    assert resolve_top_n(None, 3).note is not None

    empty = resolve_top_n(4, 1)
    assert empty.value == 0
    assert "Not enough films" in empty.note


def test_strategy_defaults_to_points_and_rejects_unknown_names(sample_catalogue):
    default = find_similar_films(sample_catalogue, "Inception", top_n=1)
    explicit = find_similar_films(sample_catalogue, "Inception", top_n=1, strategy="points")

    assert default == explicit
    assert default[0].score == 85.0

    with pytest.raises(ValueError):
        find_similar_films(sample_catalogue, "Inception", top_n=1, strategy="cosine")
