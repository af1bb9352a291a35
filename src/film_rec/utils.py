"""Parsing helpers for raw catalogue values."""

import logging
import math
import re
from typing import Any

logger = logging.getLogger(__name__)


def parse_name_set(value: Any) -> frozenset[str]:
    """
    Normalize a value that may be None, a list, or a comma-separated string
    into a set of trimmed, non-empty names.
    """
    if value is None:
        return frozenset()
    if isinstance(value, str):
        items = value.split(',')
    elif isinstance(value, (list, tuple, set, frozenset)):
        items = value
    else:
        logger.debug(f"Ignoring unsupported name list value: {value!r}")
        return frozenset()
    return frozenset(str(item).strip() for item in items if item is not None and str(item).strip())


def parse_year(value: Any, default: int) -> int:
    """
    Parse a release year from an int or a date-like string ("1999", "1999-07-16").

    Only the first four characters of a string are considered.
    """
    if value is None or value == "":
        return default
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not math.isfinite(value):
            logger.debug(f"Non-finite year {value!r}, using {default}")
            return default
        return int(value)
    try:
        return int(str(value).strip()[:4])
    except ValueError:
        logger.debug(f"Unparsable year {value!r}, using {default}")
        return default


def parse_float(
    value: Any,
    default: float,
    min_val: float | None = None,
    max_val: float | None = None,
) -> float:
    """
    Parse a finite float, falling back to default when missing, invalid, or
    outside [min_val, max_val].
    """
    if value is None or value == "" or isinstance(value, bool):
        return default
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        logger.debug(f"Unparsable number {value!r}, using {default}")
        return default
    if not math.isfinite(parsed):
        return default
    if min_val is not None and parsed < min_val:
        return default
    if max_val is not None and parsed > max_val:
        logger.debug(f"Value {parsed} above {max_val}, using {default}")
        return default
    return parsed


def title_key(title: str) -> str:
    """Case-insensitive identity key for a film title."""
    return title.strip().casefold()


def name_key(name: str) -> str:
    """
    Loose identity key for people, genres and languages.

    Ignores case, whitespace, commas and apostrophes, so "ChristopherNolan"
    and "Christopher Nolan" compare equal.
    """
    return re.sub(r"[\s,'’]", "", name).casefold()
