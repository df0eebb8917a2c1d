"""
Seed selection from the general TV and movie pools.
"""

import logging
import random
from datetime import date
from typing import Iterable, List, Optional, Set, Tuple

from utils.config import DEFAULT_PARTIALLY_WATCHED_PERCENT, HOLIDAY_LABEL, HOLIDAY_MONTH

from .models import CatalogItem

logger = logging.getLogger('nextarr')


def select_from_pool(pool: List[CatalogItem], rng: random.Random) -> Optional[CatalogItem]:
    """
    Draw a random item, preferring unwatched ones.

    Args:
        pool: Candidate items
        rng: Random source

    Returns:
        A random unwatched item, a random item when everything is watched,
        or None for an empty pool
    """
    if not pool:
        return None

    unwatched = [item for item in pool if item.is_unwatched]
    logger.debug(f"Found {len(unwatched)} unwatched items out of {len(pool)} total")

    if not unwatched:
        logger.debug('No unwatched items found, selecting from all items')
        return rng.choice(pool)
    return rng.choice(unwatched)


def select_seed(pool: List[CatalogItem], rng: random.Random,
                max_attempts: Optional[int] = None) -> Optional[CatalogItem]:
    """
    Draw from the whole pool, rejecting fully watched draws.

    Rejection is bounded (one attempt per pool item by default); when every
    attempt lands on a watched item the draw falls back to select_from_pool.

    Args:
        pool: Candidate items
        rng: Random source
        max_attempts: Override for the number of rejected draws allowed

    Returns:
        The seed, or None for an empty pool
    """
    if not pool:
        return None

    attempts = len(pool) if max_attempts is None else max_attempts
    for attempt in range(attempts):
        candidate = rng.choice(pool)
        if not candidate.is_watched:
            logger.debug(f"Selected initial seed: {candidate.title} (attempt {attempt + 1})")
            return candidate
        logger.debug(f"Rejected watched draw: {candidate.title}")

    return select_from_pool(pool, rng)


def keep_if_nonempty(filtered: List[CatalogItem], original: List[CatalogItem], reason: str) -> List[CatalogItem]:
    """Return the filtered list unless the filter removed everything."""
    if filtered:
        return filtered
    if original:
        logger.debug(f"All items were {reason}, proceeding with original list")
    return original


def filter_ignored_collections(items: List[CatalogItem], ignored: Iterable[str],
                               case_sensitive: bool = False) -> List[CatalogItem]:
    """
    Drop items belonging to any ignored collection.

    Args:
        items: Candidate items
        ignored: Collection names to skip
        case_sensitive: Compare names exactly instead of case-insensitively

    Returns:
        Items outside the ignored collections
    """
    if case_sensitive:
        ignored_names = {name for name in ignored if name}
    else:
        ignored_names = {name.lower() for name in ignored if name}
    if not ignored_names:
        return list(items)

    kept = []
    for item in items:
        names = item.collections if case_sensitive else [c.lower() for c in item.collections]
        if any(name in ignored_names for name in names):
            logger.debug(f"Filtering out \"{item.title}\" - in ignored collection(s)")
            continue
        kept.append(item)
    return kept


def filter_custom_order_items(items: List[CatalogItem], custom_order_keys: Set[str]) -> List[CatalogItem]:
    """Drop items already queued in an active custom order."""
    if not custom_order_keys:
        return list(items)
    return [item for item in items if item.rating_key not in custom_order_keys]


def filter_holiday_items(items: List[CatalogItem], today: date, enabled: bool = True) -> List[CatalogItem]:
    """
    Outside December, drop items labelled as Christmas content.

    Args:
        items: Candidate items
        today: Current date
        enabled: Holiday filter switch

    Returns:
        Filtered items
    """
    if not enabled or today.month == HOLIDAY_MONTH:
        return list(items)
    return [
        item for item in items
        if not any(HOLIDAY_LABEL in label.lower() for label in item.labels)
    ]


def analyze_collection_watch_status(movies: List[CatalogItem]) -> Tuple[Set[str], Set[str]]:
    """
    Classify the collections represented in a movie pool.

    Args:
        movies: Movie pool

    Returns:
        (partially watched collections, fully unwatched collections)
    """
    watched_counts = {}
    unwatched_counts = {}
    for movie in movies:
        for name in movie.collections:
            watched_counts.setdefault(name, 0)
            unwatched_counts.setdefault(name, 0)
            if movie.is_unwatched:
                unwatched_counts[name] += 1
            else:
                watched_counts[name] += 1

    partially_watched = set()
    fully_unwatched = set()
    for name in watched_counts:
        if watched_counts[name] and unwatched_counts[name]:
            partially_watched.add(name)
        elif not watched_counts[name]:
            fully_unwatched.add(name)

    return partially_watched, fully_unwatched


def select_movie_seed(movies: List[CatalogItem], rng: random.Random,
                      partially_watched_percent: int = DEFAULT_PARTIALLY_WATCHED_PERCENT,
                      series_collections: Iterable[str] = ()) -> Optional[CatalogItem]:
    """
    Draw the movie seed, favoring collections already in progress.

    Unwatched movies outside any collection that also holds a TV series are
    preferred; when every unwatched movie shares a collection with a series,
    all of them stay in play. With probability partially_watched_percent the
    seed then comes from movies whose collection is partially watched;
    otherwise from the rest.

    Args:
        movies: Movie pool (already filtered)
        rng: Random source
        partially_watched_percent: 0-100 chance of favoring started collections
        series_collections: Collection names known to hold TV series

    Returns:
        The seed, or None for an empty pool
    """
    unwatched = [movie for movie in movies if movie.is_unwatched]
    if not unwatched:
        return select_from_pool(movies, rng)

    series_names = set(series_collections)
    without_series = [m for m in unwatched if not any(c in series_names for c in m.collections)]
    logger.debug(
        f"Movies without TV series in collections: {len(without_series)}, "
        f"with TV series: {len(unwatched) - len(without_series)}"
    )
    considered = without_series or unwatched

    partially_watched, _ = analyze_collection_watch_status(movies)
    in_progress = [m for m in considered if any(c in partially_watched for c in m.collections)]
    remaining = [m for m in considered if m not in in_progress]
    logger.debug(
        f"Movies in partially watched collections: {len(in_progress)}, "
        f"remaining pool: {len(remaining)}"
    )

    if in_progress and rng.random() * 100 < partially_watched_percent:
        return rng.choice(in_progress)
    if remaining:
        return rng.choice(remaining)
    return rng.choice(in_progress)
