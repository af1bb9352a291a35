"""
Fuzzy inference for film quality.

Five quality signals on [0, 10] are fuzzified into low/medium/high terms, a
fixed weighted rule base maps them onto poor/good/excellent quality terms on
[0, 100], and the aggregated output set is defuzzified by its centroid.

Implication is min, aggregation is max, AND is min and OR is max.
"""
import logging
import math
from dataclasses import dataclass
from typing import Mapping

import numpy as np

from .config import (
    FUZZY_INPUT_RANGE,
    FUZZY_OUTPUT_RANGE,
    FUZZY_OUTPUT_RESOLUTION,
    FUZZY_DEFAULT_OUTPUT,
)

logger = logging.getLogger(__name__)

INPUT_VARIABLES = (
    'director_quality',
    'acting_quality',
    'story_quality',
    'visual_effects',
    'cultural_impact',
)

# (a, b, c, d) trapezoids; triangles repeat the peak
INPUT_TERMS = {
    'low': (0.0, 0.0, 3.0, 5.0),
    'medium': (3.0, 5.5, 5.5, 8.0),
    'high': (6.5, 8.5, 10.0, 10.0),
}

OUTPUT_TERMS = {
    'poor': (0.0, 0.0, 25.0, 45.0),
    'good': (35.0, 55.0, 55.0, 75.0),
    'excellent': (65.0, 85.0, 100.0, 100.0),
}


def trapezoid(x, a: float, b: float, c: float, d: float) -> np.ndarray:
    """Trapezoidal membership; a == b or c == d gives a shoulder."""
    x = np.asarray(x, dtype=float)
    rising = np.ones_like(x) if b == a else (x - a) / (b - a)
    falling = np.ones_like(x) if d == c else (d - x) / (d - c)
    return np.clip(np.minimum(rising, falling), 0.0, 1.0)


@dataclass(frozen=True)
class Rule:
    antecedents: tuple[tuple[str, str], ...]  # (variable, term)
    consequent: str
    operator: str = 'and'
    weight: float = 1.0

    def strength(self, memberships: dict[str, dict[str, float]]) -> float:
        degrees = [memberships[var][term] for var, term in self.antecedents]
        combined = min(degrees) if self.operator == 'and' else max(degrees)
        return combined * self.weight


QUALITY_RULES = (
    Rule((('director_quality', 'high'), ('acting_quality', 'high'), ('story_quality', 'high')), 'excellent'),
    Rule((('story_quality', 'high'), ('cultural_impact', 'high')), 'excellent'),
    Rule((('director_quality', 'high'), ('story_quality', 'high')), 'excellent', weight=0.9),
    Rule((('acting_quality', 'high'), ('cultural_impact', 'high')), 'excellent', weight=0.7),
    Rule((('visual_effects', 'high'), ('story_quality', 'high')), 'excellent', weight=0.6),
    Rule((('story_quality', 'medium'),), 'good'),
    Rule((('director_quality', 'medium'), ('acting_quality', 'medium')), 'good', operator='or', weight=0.8),
    Rule((('cultural_impact', 'medium'),), 'good', weight=0.6),
    Rule((('story_quality', 'high'), ('director_quality', 'low')), 'good', weight=0.7),
    Rule((('story_quality', 'low'), ('director_quality', 'low')), 'poor'),
    Rule((('acting_quality', 'low'), ('story_quality', 'low')), 'poor', weight=0.9),
    Rule((('story_quality', 'low'),), 'poor', weight=0.8),
    Rule((('cultural_impact', 'low'),), 'poor', weight=0.8),
    Rule((('visual_effects', 'low'), ('story_quality', 'low')), 'poor', weight=0.5),
)


class FilmQualityInference:
    """Maps the five named quality signals to one score on [0, 100]."""

    def __init__(
        self,
        rules: tuple[Rule, ...] = QUALITY_RULES,
        resolution: int = FUZZY_OUTPUT_RESOLUTION,
        default_output: float = FUZZY_DEFAULT_OUTPUT,
    ):
        self.rules = rules
        self.default_output = default_output
        self.universe = np.linspace(FUZZY_OUTPUT_RANGE[0], FUZZY_OUTPUT_RANGE[1], resolution)
        self._output_sets = {
            term: trapezoid(self.universe, *params) for term, params in OUTPUT_TERMS.items()
        }

    def _validate(self, inputs: Mapping[str, float]) -> dict[str, float]:
        missing = set(INPUT_VARIABLES) - set(inputs)
        unexpected = set(inputs) - set(INPUT_VARIABLES)
        if missing or unexpected:
            raise ValueError(
                f"Quality inference expects {list(INPUT_VARIABLES)}; "
                f"missing={sorted(missing)}, unexpected={sorted(unexpected)}"
            )

        low, high = FUZZY_INPUT_RANGE
        values = {}
        for name in INPUT_VARIABLES:
            value = float(inputs[name])
            if math.isnan(value):
                raise ValueError(f"Input '{name}' is NaN")
            values[name] = min(max(value, low), high)
        return values

    def fuzzify(self, inputs: Mapping[str, float]) -> dict[str, dict[str, float]]:
        values = self._validate(inputs)
        return {
            name: {term: float(trapezoid(value, *params)) for term, params in INPUT_TERMS.items()}
            for name, value in values.items()
        }

    def evaluate(self, inputs: Mapping[str, float]) -> float:
        memberships = self.fuzzify(inputs)

        aggregated = np.zeros_like(self.universe)
        for rule in self.rules:
            strength = rule.strength(memberships)
            if strength <= 0:
                continue
            clipped = np.minimum(strength, self._output_sets[rule.consequent])
            aggregated = np.maximum(aggregated, clipped)

        area = aggregated.sum()
        if area <= 0:
            logger.warning(f"No quality rule fired for inputs {dict(inputs)}, using {self.default_output}")
            return self.default_output

        score = float((self.universe * aggregated).sum() / area)
        logger.debug(f"Fuzzy quality {score:.2f} for inputs {dict(inputs)}")
        return score
