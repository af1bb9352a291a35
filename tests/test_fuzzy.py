import logging

import numpy as np
import pytest

from film_rec.features import SIGNAL_NAMES
from film_rec.fuzzy import INPUT_VARIABLES, FilmQualityInference, trapezoid


def _uniform(value):
    return {name: value for name in INPUT_VARIABLES}


def test_input_variables_match_quality_signals():
    assert INPUT_VARIABLES == SIGNAL_NAMES


def test_trapezoid_shapes():
    assert trapezoid(0.0, 0.0, 0.0, 3.0, 5.0) == pytest.approx(1.0)
    assert trapezoid(4.0, 0.0, 0.0, 3.0, 5.0) == pytest.approx(0.5)
    assert trapezoid(5.5, 3.0, 5.5, 5.5, 8.0) == pytest.approx(1.0)
    assert trapezoid(10.0, 6.5, 8.5, 10.0, 10.0) == pytest.approx(1.0)
    values = trapezoid(np.array([0.0, 35.0, 55.0, 75.0]), 35.0, 55.0, 55.0, 75.0)
    assert values.tolist() == pytest.approx([0.0, 0.0, 1.0, 0.0])


def test_strong_signals_score_excellent_range():
    score = FilmQualityInference().evaluate(_uniform(9.5))
    assert 70.0 <= score <= 100.0


def test_weak_signals_score_poor_range():
    score = FilmQualityInference().evaluate(_uniform(1.0))
    assert 0.0 <= score < 40.0


def test_middling_signals_score_good_term_centroid():
    score = FilmQualityInference().evaluate(_uniform(5.5))
    assert score == pytest.approx(55.0, abs=0.5)


def test_better_signals_score_higher():
    engine = FilmQualityInference()
    assert engine.evaluate(_uniform(8.5)) > engine.evaluate(_uniform(4.0))


def test_inputs_are_clipped_to_universe():
    engine = FilmQualityInference()
    assert engine.evaluate(_uniform(12.0)) == pytest.approx(engine.evaluate(_uniform(10.0)))


def test_evaluate_is_deterministic():
    engine = FilmQualityInference()
    inputs = {
        "director_quality": 9.9,
        "acting_quality": 8.0,
        "story_quality": 7.6,
        "visual_effects": 9.95,
        "cultural_impact": 10.0,
    }
    assert engine.evaluate(inputs) == engine.evaluate(dict(inputs))


def test_wrong_keys_raise():
    engine = FilmQualityInference()
    inputs = _uniform(5.0)
    del inputs["cultural_impact"]
    with pytest.raises(ValueError, match="missing"):
        engine.evaluate(inputs)

    with pytest.raises(ValueError, match="unexpected"):
        engine.evaluate({**_uniform(5.0), "budget": 1.0})


def test_nan_input_raises():
    with pytest.raises(ValueError):
        FilmQualityInference().evaluate(_uniform(float("nan")))


def test_no_rule_fired_returns_default(caplog):
    caplog.set_level(logging.WARNING)
    engine = FilmQualityInference(rules=(), default_output=12.0)

    assert engine.evaluate(_uniform(5.0)) == 12.0
    assert "No quality rule fired" in caplog.text
