import pytest

from film_rec.catalogue import Catalogue
from film_rec.search import MatchMode, SearchCriteria, recommend

from conftest import make_film


def test_strict_mode_requires_every_criterion(sample_catalogue):
    criteria = SearchCriteria(genre="scifi", director="ChristopherNolan")

    results = recommend(sample_catalogue, criteria, MatchMode.STRICT)

    assert [m.film.title for m in results] == ["Inception", "Interstellar"]
    assert all(m.matched == ("genre", "director") for m in results)

    narrowed = recommend(sample_catalogue, SearchCriteria(genre="SciFi", year_from=2012), "strict")
    assert [m.film.title for m in narrowed] == ["Interstellar"]


def test_ranked_mode_orders_by_match_count_then_title(sample_catalogue):
    criteria = SearchCriteria(actor="Leonardo DiCaprio", language="French")

    results = recommend(sample_catalogue, criteria)

    assert [(m.film.title, m.match_count) for m in results] == [
        ("The Revenant", 2),
        ("Amelie", 1),
        ("Inception", 1),
    ]
    assert results[0].matched == ("actor", "language")


def test_ranked_mode_drops_films_with_no_match(sample_catalogue):
    results = recommend(sample_catalogue, SearchCriteria(genre="Western"), MatchMode.RANKED)

    assert [m.film.title for m in results] == ["The Revenant"]


def test_year_bounds_are_inclusive_and_count_once(sample_catalogue):
    criteria = SearchCriteria(year_from=2010, year_to=2014)

    results = recommend(sample_catalogue, criteria, MatchMode.STRICT)

    assert [m.film.title for m in results] == ["Inception", "Interstellar"]
    assert criteria.active() == ["year"]
    assert results[0].match_count == 1


@pytest.mark.parametrize("mode", ["strict", "ranked"])
def test_empty_criteria_return_whole_catalogue(sample_catalogue, mode):
    criteria = SearchCriteria(genre="  ", director="")

    results = recommend(sample_catalogue, criteria, mode)

    assert criteria.is_empty()
    assert [m.film.title for m in results] == ["Amelie", "Inception", "Interstellar", "The Revenant"]
    assert all(m.match_count == 0 for m in results)


def test_unknown_director_never_matches():
    store = Catalogue([make_film("Anonymous"), make_film("Signed", director="Agnes Varda")])

    results = recommend(store, SearchCriteria(director="agnes varda"), MatchMode.RANKED)

    assert [m.film.title for m in results] == ["Signed"]


def test_unknown_mode_is_rejected(sample_catalogue):
    with pytest.raises(ValueError):
        recommend(sample_catalogue, SearchCriteria(genre="Drama"), "fuzzy")
