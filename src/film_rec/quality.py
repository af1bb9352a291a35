import logging
from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Protocol

from tqdm import tqdm

from .catalogue import FactStore
from .config import QUALITY_POOR_BELOW, QUALITY_GOOD_BELOW
from .features import QualitySignals, derive_quality_signals
from .film import FilmRecord, NotFound
from .fuzzy import FilmQualityInference

logger = logging.getLogger(__name__)


class InferenceEngine(Protocol):
    def evaluate(self, inputs: Mapping[str, float]) -> float: ...


class QualityBand(str, Enum):
    POOR = "POOR"
    GOOD = "GOOD"
    EXCELLENT = "EXCELLENT"


@dataclass(frozen=True)
class QualityVerdict:
    title: str
    score: float
    band: QualityBand
    signals: QualitySignals
    film: FilmRecord


_default_engine: FilmQualityInference | None = None


def _get_default_engine() -> FilmQualityInference:
    global _default_engine
    if _default_engine is None:
        _default_engine = FilmQualityInference()
    return _default_engine


def classify_quality(score: float) -> QualityBand:
    """Band a 0-100 score; each threshold belongs to the higher band."""
    if score < QUALITY_POOR_BELOW:
        return QualityBand.POOR
    if score < QUALITY_GOOD_BELOW:
        return QualityBand.GOOD
    return QualityBand.EXCELLENT


def score_film(
    film: FilmRecord,
    engine: InferenceEngine | None = None,
    reference_year: int | None = None,
) -> QualityVerdict:
    engine = engine or _get_default_engine()
    signals = derive_quality_signals(film, reference_year)
    score = float(engine.evaluate(signals.as_inputs()))
    return QualityVerdict(
        title=film.title,
        score=score,
        band=classify_quality(score),
        signals=signals,
        film=film,
    )


def evaluate_quality(
    store: FactStore,
    title: str,
    engine: InferenceEngine | None = None,
    reference_year: int | None = None,
) -> QualityVerdict | NotFound:
    """
    Assess the quality of the film with the given title.

    Returns NotFound when the title is not in the store.
    """
    film = store.find_by_title(title)
    if film is None:
        logger.debug(f"No film titled '{title}' in the catalogue")
        return NotFound(title)
    return score_film(film, engine, reference_year)


def assess_catalogue(
    store: FactStore,
    engine: InferenceEngine | None = None,
    reference_year: int | None = None,
    progress: bool = False,
) -> list[QualityVerdict]:
    """Assess every film, best first (ties by title)."""
    films = store.list_all()
    verdicts = [
        score_film(film, engine, reference_year)
        for film in tqdm(films, desc="Assessing", disable=not progress)
    ]
    verdicts.sort(key=lambda v: (-v.score, v.film.key, v.title))
    return verdicts
