"""
Plex-specific utilities for Nextarr.
Handles the Plex server connection and exposes the library as a catalog.
"""

import logging
import os
from typing import Any, Dict, List, Optional, Set, Tuple

import plexapi.exceptions
import plexapi.server
import requests
import urllib3
import yaml

from selection.catalog import BaseCatalog, CatalogError
from selection.models import MOVIE, SERIES, CatalogItem, Episode, OrderWeights, Season

from .config import get_config_section, get_selection_config, load_config
from .display import log_error
from .helpers import format_plex_date, parse_rating_key

# Suppress InsecureRequestWarning when users explicitly set verify_ssl=False for local Plex servers
urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)

logger = logging.getLogger('nextarr')

PLEX_ERRORS = (requests.RequestException, plexapi.exceptions.PlexApiException)


def init_plex(config: dict) -> plexapi.server.PlexServer:
    """
    Initialize connection to Plex server.

    Args:
        config: Configuration dictionary with plex.url and plex.token

    Returns:
        PlexServer instance
    """
    try:
        # Create session with SSL verification settings
        session = requests.Session()
        session.verify = config['plex'].get('verify_ssl', True)

        return plexapi.server.PlexServer(
            config['plex']['url'],
            config['plex']['token'],
            session=session
        )
    except PLEX_ERRORS as e:
        log_error(f"Error connecting to Plex server: {e}")
        raise


def _tags(item: Any, attr: str) -> Tuple[str, ...]:
    """Tag strings of a plexapi tag list (collections, labels); tolerant of plain strings."""
    values = getattr(item, attr, None) or []
    tags = []
    for value in values:
        tag = getattr(value, 'tag', value)
        if tag:
            tags.append(str(tag))
    return tuple(tags)


def movie_to_item(movie: Any) -> CatalogItem:
    return CatalogItem(
        rating_key=parse_rating_key(movie.ratingKey),
        title=movie.title,
        kind=MOVIE,
        originally_available_at=format_plex_date(getattr(movie, 'originallyAvailableAt', None)),
        year=getattr(movie, 'year', None),
        view_count=getattr(movie, 'viewCount', 0) or 0,
        collections=_tags(movie, 'collections'),
        labels=_tags(movie, 'labels'),
    )


def show_to_item(show: Any) -> CatalogItem:
    return CatalogItem(
        rating_key=parse_rating_key(show.ratingKey),
        title=show.title,
        kind=SERIES,
        originally_available_at=format_plex_date(getattr(show, 'originallyAvailableAt', None)),
        year=getattr(show, 'year', None),
        leaf_count=getattr(show, 'leafCount', 0) or 0,
        viewed_leaf_count=getattr(show, 'viewedLeafCount', 0) or 0,
        collections=_tags(show, 'collections'),
        labels=_tags(show, 'labels'),
    )


def season_from_plex(series_key: str, season: Any) -> Season:
    plex_episodes = season.episodes()
    episodes = [
        Episode(
            rating_key=parse_rating_key(episode.ratingKey),
            series_key=series_key,
            title=episode.title,
            season_index=season.index,
            episode_index=episode.index,
            view_count=getattr(episode, 'viewCount', 0) or 0,
            originally_available_at=format_plex_date(getattr(episode, 'originallyAvailableAt', None)),
            season_title=season.title,
            total_episodes_in_season=len(plex_episodes),
        )
        for episode in plex_episodes
        if episode.index is not None
    ]
    return Season(index=season.index, title=season.title, episodes=episodes)


class PlexCatalog(BaseCatalog):
    """
    Catalog backed by a live Plex server.

    Movie and show sections are taken from plex.movie_libraries and
    plex.tv_libraries (section titles); empty lists mean every section of
    that type. Stored settings (default collection, order weights) come
    from the selection config section; with a config_path they are re-read
    from disk whenever the file changes.

    Args:
        plex: PlexServer instance
        config: Root configuration dictionary
        config_path: Optional config.yml to re-read settings from
    """

    def __init__(self, plex: Any, config: Dict, config_path: Optional[str] = None):
        self.plex = plex
        self.config = config
        self.config_path = config_path
        self._config_cache: Optional[Tuple[float, Dict]] = None
        plex_config = get_config_section(config, 'plex')
        self.movie_libraries = list(plex_config.get('movie_libraries') or [])
        self.tv_libraries = list(plex_config.get('tv_libraries') or [])

    def _sections(self, section_type: str, titles: List[str]) -> List[Any]:
        try:
            sections = [s for s in self.plex.library.sections() if s.type == section_type]
        except PLEX_ERRORS as e:
            raise CatalogError(f"Error listing Plex library sections: {e}") from e

        if titles:
            sections = [s for s in sections if s.title in titles]
        return sections

    def _movie_sections(self) -> List[Any]:
        return self._sections('movie', self.movie_libraries)

    def _show_sections(self) -> List[Any]:
        return self._sections('show', self.tv_libraries)

    def _list_all(self, sections: List[Any], convert) -> List[CatalogItem]:
        items = []
        for section in sections:
            try:
                items.extend(convert(item) for item in section.all())
            except PLEX_ERRORS as e:
                raise CatalogError(f"Error reading Plex section {section.title}: {e}") from e
        return items

    def _list_by_collection(self, sections: List[Any], name: str, convert) -> List[CatalogItem]:
        items = []
        for section in sections:
            try:
                for collection in section.collections(title=name):
                    # Plex title search is a substring match
                    if collection.title != name:
                        continue
                    items.extend(convert(item) for item in collection.items())
            except PLEX_ERRORS as e:
                raise CatalogError(f"Error searching collection {name} in {section.title}: {e}") from e
        return items

    def _fetch(self, rating_key: str, expected_type: str, convert) -> Optional[CatalogItem]:
        try:
            key = int(rating_key)
        except (ValueError, TypeError):
            logger.debug(f"Invalid rating key: {rating_key}")
            return None

        try:
            item = self.plex.fetchItem(key)
        except plexapi.exceptions.NotFound:
            logger.debug(f"Item {rating_key} not found in Plex")
            return None
        except PLEX_ERRORS as e:
            raise CatalogError(f"Error fetching item {rating_key}: {e}") from e

        if getattr(item, 'type', None) != expected_type:
            return None
        return convert(item)

    def list_all_series(self) -> List[CatalogItem]:
        return self._list_all(self._show_sections(), show_to_item)

    def list_all_movies(self) -> List[CatalogItem]:
        return self._list_all(self._movie_sections(), movie_to_item)

    def list_series_by_collection(self, name: str) -> List[CatalogItem]:
        return self._list_by_collection(self._show_sections(), name, show_to_item)

    def list_movies_by_collection(self, name: str) -> List[CatalogItem]:
        return self._list_by_collection(self._movie_sections(), name, movie_to_item)

    def get_series_by_id(self, rating_key: str) -> Optional[CatalogItem]:
        return self._fetch(rating_key, 'show', show_to_item)

    def get_movie_by_id(self, rating_key: str) -> Optional[CatalogItem]:
        return self._fetch(rating_key, 'movie', movie_to_item)

    def list_seasons(self, series_key: str) -> List[Season]:
        try:
            show = self.plex.fetchItem(int(series_key))
            return [season_from_plex(str(series_key), season) for season in show.seasons()]
        except plexapi.exceptions.NotFound:
            return []
        except PLEX_ERRORS as e:
            raise CatalogError(f"Error fetching seasons for {series_key}: {e}") from e

    def _current_config(self) -> Dict:
        """
        Root config for the stored settings.

        With a config_path the file is parsed again only when its mtime
        changes, so one selection pass reads it once.
        """
        if not self.config_path:
            return self.config

        try:
            mtime = os.path.getmtime(self.config_path)
            if self._config_cache is None or self._config_cache[0] != mtime:
                self._config_cache = (mtime, load_config(self.config_path))
        except (OSError, yaml.YAMLError) as e:
            raise CatalogError(f"Error reading settings from {self.config_path}: {e}") from e
        return self._config_cache[1]

    def get_configured_default_collection(self) -> Optional[str]:
        return get_selection_config(self._current_config())['default_collection']

    def get_order_type_weights(self) -> OrderWeights:
        weights = get_selection_config(self._current_config())['order_weights']
        return OrderWeights(tv=weights['tv'], movies=weights['movies'], custom=weights['custom'])

    def list_custom_order_keys(self) -> Set[str]:
        custom_orders = get_config_section(self._current_config(), 'custom_orders')
        keys = custom_orders.get('active_keys') or []
        return {parse_rating_key(key) for key in keys if parse_rating_key(key)}
