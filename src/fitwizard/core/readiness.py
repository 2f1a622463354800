"""
Daily readiness scoring and readiness-log helpers.

The score maps four 1-5 ratings onto one 1-5 value where higher means better
prepared to train.  All functions are pure; the log helpers return new lists.
"""

import logging
from datetime import datetime, timedelta
from typing import Sequence

from .config import READINESS_DECIMALS, READINESS_INVERT_BASE
from .models import ReadinessEntry

logger = logging.getLogger(__name__)


def readiness_score(
    sleep_quality: int,
    muscle_soreness: int,
    energy_level: int,
    stress_level: int,
) -> float:
    """
    Combine four ordinal ratings into one readiness score.

    score = mean(sleep, energy, 6 - soreness, 6 - stress), rounded to 2 dp

    Ratings are range-checked by ReadinessEntry, not here.  For inputs in
    1..5 the result is always within [1.0, 5.0].

    Args:
        sleep_quality: 1 (poor) .. 5 (great)
        muscle_soreness: 1 (none) .. 5 (very sore)
        energy_level: 1 (drained) .. 5 (energetic)
        stress_level: 1 (calm) .. 5 (very stressed)

    Returns:
        Overall readiness score
    """
    components = (
        sleep_quality,
        energy_level,
        READINESS_INVERT_BASE - muscle_soreness,
        READINESS_INVERT_BASE - stress_level,
    )
    return round(sum(components) / len(components), READINESS_DECIMALS)


def upsert_readiness(
    entries: Sequence[ReadinessEntry],
    entry: ReadinessEntry,
) -> list[ReadinessEntry]:
    """
    Insert a check-in, replacing any existing entry for the same date.

    Args:
        entries: Existing readiness log (any order)
        entry: New check-in

    Returns:
        New list sorted by date with exactly one entry per date
    """
    by_date: dict[str, ReadinessEntry] = {e.date: e for e in entries}
    if entry.date in by_date:
        logger.debug("Replacing readiness entry for %s", entry.date)
    by_date[entry.date] = entry
    return [by_date[d] for d in sorted(by_date)]


def average_readiness(
    entries: Sequence[ReadinessEntry],
    start: str,
    end: str,
) -> float | None:
    """
    Mean overall_score of entries dated within [start, end].

    Returns None (not 0) when no entry falls inside the range, so that
    "no data" is never mistaken for "bad readiness".
    """
    scores = [e.overall_score for e in entries if start <= e.date <= end]
    if not scores:
        return None
    return round(sum(scores) / len(scores), READINESS_DECIMALS)


def readiness_trend(
    entries: Sequence[ReadinessEntry],
    as_of: str,
    window_days: int,
) -> float | None:
    """
    Average readiness over the ``window_days`` ending at ``as_of`` (inclusive).

    Args:
        entries: Readiness log
        as_of: ISO date the window ends on
        window_days: Window length in days (1 = just ``as_of``)

    Returns:
        Average score or None if the window holds no entries
    """
    end = datetime.strptime(as_of, "%Y-%m-%d")
    start = end - timedelta(days=max(window_days, 1) - 1)
    return average_readiness(entries, start.strftime("%Y-%m-%d"), as_of)
