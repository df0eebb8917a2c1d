"""
Chronological tie-breaking between a seed and its collection peers.

Movies are ranked by release date, series by the air date of their next
unwatched episode, so a franchise is watched in release order regardless
of which library each entry lives in.
"""

import logging
import re
from dataclasses import dataclass
from datetime import date, datetime
from typing import List, Optional, Tuple

from utils.config import DEFAULT_MAX_COLLECTION_HOPS, SORT_DATE_SENTINEL
from utils.display import log_warning

from .catalog import CatalogError
from .episodes import EpisodeResolver
from .expander import CollectionExpander
from .models import NO_ITEMS_FOUND, ORIGINAL_COLLECTION, CatalogItem, Episode, SelectionResult

logger = logging.getLogger('nextarr')

_YEAR_PATTERN = re.compile(r'^\d{4}$')
_YEAR_MONTH_PATTERN = re.compile(r'^(\d{4})-(\d{2})$')


def coerce_sort_date(value) -> date:
    """
    Turn a release date, air date or bare year into a comparable date.

    Args:
        value: ISO date string, "YYYY-MM", date/datetime, year (int or "YYYY"), or None

    Returns:
        A date; missing or unparsable values map to date.max so they sort last
    """
    if value is None or value == '':
        return date.max
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, int):
        return date(value, 1, 1) if 1 <= value <= 9999 else date.max

    text = str(value).strip()
    if _YEAR_PATTERN.match(text):
        year = int(text)
        return date(year, 1, 1) if year >= 1 else date.max
    year_month = _YEAR_MONTH_PATTERN.match(text)
    if year_month:
        try:
            return date(int(year_month.group(1)), int(year_month.group(2)), 1)
        except ValueError:
            return date.max
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        return date.max


def item_release_value(item: CatalogItem):
    """Series or movie level date: release date, else year, else the sentinel."""
    return item.originally_available_at or item.year or SORT_DATE_SENTINEL


@dataclass
class Candidate:
    item: CatalogItem
    sort_value: object
    episode: Optional[Episode] = None

    @property
    def sort_key(self) -> date:
        return coerce_sort_date(self.sort_value)


class ChronologicalTieBreaker:
    """
    Picks the chronologically earliest unplayed item among a seed and its peers.

    Args:
        expander: Used to re-expand a winner found through another collection
        resolver: Next-episode lookups, shared with the final materialization
        max_collection_hops: Re-expansions allowed per selection; 1 matches a
            single re-fetch of the winner's collections, 0 disables it
    """

    def __init__(self, expander: CollectionExpander, resolver: EpisodeResolver,
                 max_collection_hops: int = DEFAULT_MAX_COLLECTION_HOPS):
        self.expander = expander
        self.resolver = resolver
        self.max_collection_hops = max_collection_hops

    def _next_episode(self, series: CatalogItem) -> Optional[Episode]:
        try:
            return self.resolver.next_unwatched_episode(series.rating_key)
        except CatalogError as e:
            log_warning(f"Could not get episode info for \"{series.title}\": {e}")
            return None

    def sort_date(self, item: CatalogItem) -> Tuple[object, Optional[Episode]]:
        """
        Sort value for one candidate.

        Series prefer their next unwatched episode's air date over the
        series-level date, which is often stale or missing.

        Returns:
            (raw sort value, next episode for series or None)
        """
        if item.is_movie:
            return item_release_value(item), None

        episode = self._next_episode(item)
        if episode and episode.originally_available_at:
            return episode.originally_available_at, episode
        return item_release_value(item), episode

    def rank(self, seed: CatalogItem, peers: List[CatalogItem]) -> List[Candidate]:
        """
        Merge the seed with its peers, keep unwatched items and sort by date.

        Args:
            seed: Seed item (tagged as the original)
            peers: Items from the seed's other collections

        Returns:
            Unwatched candidates, earliest first
        """
        pool = [seed.tagged(ORIGINAL_COLLECTION)]
        pool.extend(peer for peer in peers if peer.rating_key != seed.rating_key)
        logger.debug(f"Found {len(pool)} total items across all collections")

        unplayed = [item for item in pool if item.is_unwatched]
        logger.debug(f"Found {len(unplayed)} unplayed items for selection")

        candidates = []
        for item in unplayed:
            sort_value, episode = self.sort_date(item)
            candidates.append(Candidate(item, sort_value, episode))

        candidates.sort(key=lambda c: c.sort_key)
        return candidates

    def select_earliest_unplayed(self, seed: CatalogItem, peers: List[CatalogItem]) -> SelectionResult:
        """
        Resolve a seed and its peers into one concrete pick.

        Args:
            seed: Unwatched item drawn from the pool
            peers: Output of CollectionExpander.expand_collections(seed)

        Returns:
            Movie or episode result; falls back to the seed when nothing else
            is playable
        """
        original_seed = seed
        visited = {seed.rating_key}
        hops = 0

        while True:
            ranked = self.rank(seed, peers)
            if not ranked:
                logger.debug('No unplayed items found, returning original selection')
                return self.materialize_seed(original_seed)

            winner = ranked[0]
            logger.debug(
                f"Earliest unplayed: \"{winner.item.title}\" ({winner.sort_value}) "
                f"from collection: {winner.item.from_collection}"
            )

            came_from_peer = winner.item.from_collection != ORIGINAL_COLLECTION
            if not came_from_peer or hops >= self.max_collection_hops:
                break
            if winner.item.rating_key in visited:
                break

            # The winner may belong to collections the seed does not
            hops += 1
            visited.add(winner.item.rating_key)
            seed = winner.item.tagged(ORIGINAL_COLLECTION)
            logger.debug(f"Re-expanding collections of \"{seed.title}\" (hop {hops})")
            peers = self.expander.expand_collections(seed)

        return self.materialize(ranked, original_seed)

    def materialize(self, ranked: List[Candidate], fallback: CatalogItem) -> SelectionResult:
        """
        Turn the ranking into a result, dropping series with nothing left to play.
        """
        for candidate in ranked:
            item = candidate.item
            if item.is_movie:
                return SelectionResult.movie(item)

            episode = candidate.episode or self._next_episode(item)
            if episode:
                return SelectionResult.for_episode(item, episode)

            logger.debug(f"No unwatched episodes found for \"{item.title}\", trying next earliest item")

        logger.debug('No more unplayed items available, returning original selection')
        return self.materialize_seed(fallback)

    def materialize_seed(self, seed: CatalogItem) -> SelectionResult:
        if seed.is_movie:
            return SelectionResult.movie(seed)

        episode = self._next_episode(seed)
        if episode:
            return SelectionResult.for_episode(seed, episode)
        logger.debug(f"No unwatched episodes left for \"{seed.title}\"")
        return SelectionResult.empty(NO_ITEMS_FOUND)
