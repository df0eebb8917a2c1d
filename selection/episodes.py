"""
Episode resolution: the earliest unwatched episode of a series.
"""

import logging
from typing import Dict, List, Optional

from .models import Episode, Season

logger = logging.getLogger('nextarr')

SPECIALS_SEASON_INDEX = 0


def next_unwatched_in_seasons(seasons: List[Season]) -> Optional[Episode]:
    """
    Find the first unwatched episode across a series' seasons.

    Seasons are walked in ascending index order and episodes in ascending
    episode index. Season 0 (specials) is skipped unless it is the only
    season of the series.

    Args:
        seasons: Seasons of one series, in any order

    Returns:
        The first episode without a play, or None if everything is watched
    """
    for season in sorted(seasons, key=lambda s: s.index):
        if season.index == SPECIALS_SEASON_INDEX and len(seasons) > 1:
            continue

        for episode in sorted(season.episodes, key=lambda e: e.episode_index):
            if not episode.is_watched:
                return episode

    return None


class EpisodeResolver:
    """
    Next-episode lookups for one selection.

    The tie-breaker asks for a series' next episode to get its air date and
    asks again once the winner is fixed; results are kept per series key
    for the lifetime of the resolver.
    """

    def __init__(self, catalog):
        self.catalog = catalog
        self._cache: Dict[str, Optional[Episode]] = {}

    def next_unwatched_episode(self, series_key: str) -> Optional[Episode]:
        series_key = str(series_key)
        if series_key not in self._cache:
            episode = self.catalog.get_next_unwatched_episode(series_key)
            if episode:
                logger.debug(
                    f"Next unwatched episode for {series_key}: "
                    f"S{episode.season_index}E{episode.episode_index} - {episode.title}"
                )
            else:
                logger.debug(f"No unwatched episodes left for {series_key}")
            self._cache[series_key] = episode
        return self._cache[series_key]
