import logging
from dataclasses import dataclass, field
from typing import Iterable

from .catalogue import FactStore
from .config import DEFAULT_TOP_N
from .film import FilmRecord, NotFound
from .similarity import get_strategy

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScoreResult:
    title: str
    score: float
    film: FilmRecord
    breakdown: dict[str, float] = field(default_factory=dict)


@dataclass(frozen=True)
class TopNChoice:
    """Resolved result count plus a note when the requested value was replaced."""
    value: int
    note: str | None = None


def _sort_key(result: ScoreResult) -> tuple[float, str, str]:
    return (-result.score, result.film.key, result.title)


def rank(
    target: FilmRecord,
    candidates: Iterable[FilmRecord],
    top_n: int,
    strategy: str = 'points',
) -> list[ScoreResult]:
    """
    Score candidates against the target and return the best top_n.

    The target itself is skipped (case-insensitive title match). Results are
    ordered by score descending, then by title ascending. Fewer than top_n
    results are returned when the candidates run out.
    """
    _, breakdown_fn = get_strategy(strategy)
    if top_n < 1:
        return []

    results = []
    for candidate in candidates:
        if candidate.same_title(target.title):
            continue
        breakdown = breakdown_fn(target, candidate)
        results.append(ScoreResult(
            title=candidate.title,
            score=float(sum(breakdown.values())),
            film=candidate,
            breakdown=breakdown,
        ))

    results.sort(key=_sort_key)
    return results[:top_n]


def find_similar_films(
    store: FactStore,
    title: str,
    top_n: int = DEFAULT_TOP_N,
    strategy: str = 'points',
) -> list[ScoreResult] | NotFound:
    """
    Rank the catalogue against the film with the given title.

    Returns NotFound (an empty, falsy result) when the title is not in the
    store, and an empty list when the film exists but nothing else does.
    """
    target = store.find_by_title(title)
    if target is None:
        logger.debug(f"No film titled '{title}' in the catalogue")
        return NotFound(title)

    results = rank(target, store.list_all(), top_n, strategy=strategy)
    logger.debug(f"Ranked {len(results)} films similar to '{target.title}' ({strategy})")
    return results


def resolve_top_n(raw: str | int | None, total_films: int, default: int = DEFAULT_TOP_N) -> TopNChoice:
    """
    Turn a caller-supplied result count into a usable one.

    Missing input uses the default; non-numeric or non-positive input falls
    back to the default and too-large input to the maximum, with a note saying
    which replacement was applied. The result lies in [1, total_films - 1]
    (0 when there is nothing to compare against).
    """
    max_possible = total_films - 1
    if max_possible < 1:
        return TopNChoice(0, "Not enough films in the catalogue for comparison")

    note = None
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        value = default
    else:
        try:
            value = int(str(raw).strip()) if not isinstance(raw, int) else raw
        except ValueError:
            value = default
            note = f"Invalid number format. Using default: {default}"
        else:
            if value < 1:
                value = default
                note = f"Invalid input. Using default: {default}"
            elif value > max_possible:
                value = max_possible
                note = f"Requested number too high. Using maximum: {max_possible}"

    clamped = max(1, min(value, max_possible))
    if clamped != value and note is None:
        note = f"Using {clamped} (catalogue has {total_films} films)"
    return TopNChoice(clamped, note)
