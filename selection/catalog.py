"""
Catalog accessor interface used by the selection engine.

The engine never talks to Plex or a database directly; it goes through a
BaseCatalog. Two implementations ship: SnapshotCatalog (in memory, built
from a JSON snapshot) and utils.plex.PlexCatalog.
"""

from abc import ABC, abstractmethod
from typing import Dict, Iterable, List, Optional, Set

from utils.config import (
    DEFAULT_CUSTOM_ORDER_PERCENT,
    DEFAULT_MOVIES_GENERAL_PERCENT,
    DEFAULT_TV_GENERAL_PERCENT,
)

from .episodes import next_unwatched_in_seasons
from .models import MOVIE, SERIES, CatalogItem, Episode, OrderWeights, Season


class CatalogError(Exception):
    """Raised by catalog implementations when the backing store fails."""


class BaseCatalog(ABC):
    """
    Read-only queries over movies, series, seasons and episodes.

    Collection lookups match names exactly (case-sensitive); name variants
    are the expander's business.
    """

    @abstractmethod
    def list_all_series(self) -> List[CatalogItem]:
        pass

    @abstractmethod
    def list_all_movies(self) -> List[CatalogItem]:
        pass

    @abstractmethod
    def list_series_by_collection(self, name: str) -> List[CatalogItem]:
        pass

    @abstractmethod
    def list_movies_by_collection(self, name: str) -> List[CatalogItem]:
        pass

    @abstractmethod
    def get_series_by_id(self, rating_key: str) -> Optional[CatalogItem]:
        pass

    @abstractmethod
    def get_movie_by_id(self, rating_key: str) -> Optional[CatalogItem]:
        pass

    @abstractmethod
    def list_seasons(self, series_key: str) -> List[Season]:
        pass

    @abstractmethod
    def get_configured_default_collection(self) -> Optional[str]:
        pass

    @abstractmethod
    def get_order_type_weights(self) -> OrderWeights:
        pass

    def get_item_by_id(self, item: CatalogItem) -> Optional[CatalogItem]:
        """Re-fetch an item with the accessor matching its kind."""
        if item.is_movie:
            return self.get_movie_by_id(item.rating_key)
        return self.get_series_by_id(item.rating_key)

    def get_next_unwatched_episode(self, series_key: str) -> Optional[Episode]:
        """Earliest unwatched episode of a series, or None when caught up."""
        return next_unwatched_in_seasons(self.list_seasons(series_key))

    def list_custom_order_keys(self) -> Set[str]:
        """Rating keys already queued in an active custom order."""
        return set()


class SnapshotCatalog(BaseCatalog):
    """
    In-memory catalog backed by plain data.

    Snapshot layout::

        {
            "movies": [{...CatalogItem fields...}],
            "series": [{...CatalogItem fields..., "seasons": [
                {"index": 1, "title": "Season 1", "episodes": [{...}]}
            ]}],
            "settings": {"default_collection": "...",
                         "order_weights": {"tv": 50, "movies": 50, "custom": 0}},
            "custom_order_keys": ["123"]
        }
    """

    def __init__(
        self,
        movies: Iterable[CatalogItem] = (),
        series: Iterable[CatalogItem] = (),
        seasons: Optional[Dict[str, List[Season]]] = None,
        default_collection: Optional[str] = None,
        order_weights: Optional[OrderWeights] = None,
        custom_order_keys: Iterable[str] = (),
    ):
        self.movies = {m.rating_key: m for m in movies}
        self.series = {s.rating_key: s for s in series}
        self.seasons = seasons or {}
        self.default_collection = default_collection
        self.order_weights = order_weights or OrderWeights(
            DEFAULT_TV_GENERAL_PERCENT, DEFAULT_MOVIES_GENERAL_PERCENT, DEFAULT_CUSTOM_ORDER_PERCENT
        )
        self.custom_order_keys = {str(k) for k in custom_order_keys}

    def list_all_series(self) -> List[CatalogItem]:
        return list(self.series.values())

    def list_all_movies(self) -> List[CatalogItem]:
        return list(self.movies.values())

    def list_series_by_collection(self, name: str) -> List[CatalogItem]:
        return [s for s in self.series.values() if name in s.collections]

    def list_movies_by_collection(self, name: str) -> List[CatalogItem]:
        return [m for m in self.movies.values() if name in m.collections]

    def get_series_by_id(self, rating_key: str) -> Optional[CatalogItem]:
        return self.series.get(str(rating_key))

    def get_movie_by_id(self, rating_key: str) -> Optional[CatalogItem]:
        return self.movies.get(str(rating_key))

    def list_seasons(self, series_key: str) -> List[Season]:
        return list(self.seasons.get(str(series_key), []))

    def get_configured_default_collection(self) -> Optional[str]:
        return self.default_collection

    def get_order_type_weights(self) -> OrderWeights:
        return self.order_weights

    def list_custom_order_keys(self) -> Set[str]:
        return set(self.custom_order_keys)

    @classmethod
    def from_snapshot(cls, data: Dict) -> 'SnapshotCatalog':
        """Build a catalog from snapshot data (see class docstring)."""
        movies = []
        for raw in data.get('movies', []):
            movies.append(CatalogItem.from_dict({**raw, 'kind': MOVIE}))

        series = []
        seasons = {}
        for raw in data.get('series', []):
            show = CatalogItem.from_dict({**raw, 'kind': SERIES})
            series.append(show)
            seasons[show.rating_key] = [
                _season_from_dict(show.rating_key, raw_season)
                for raw_season in raw.get('seasons', [])
            ]

        settings = data.get('settings') or {}
        weights = settings.get('order_weights') or {}
        return cls(
            movies=movies,
            series=series,
            seasons=seasons,
            default_collection=settings.get('default_collection'),
            order_weights=OrderWeights(
                tv=int(weights.get('tv', DEFAULT_TV_GENERAL_PERCENT)),
                movies=int(weights.get('movies', DEFAULT_MOVIES_GENERAL_PERCENT)),
                custom=int(weights.get('custom', DEFAULT_CUSTOM_ORDER_PERCENT)),
            ),
            custom_order_keys=data.get('custom_order_keys', []),
        )

    def to_snapshot(self) -> Dict:
        """Inverse of from_snapshot."""
        return snapshot_from_catalog(self)


def _season_from_dict(series_key: str, raw: Dict) -> Season:
    index = int(raw.get('index', 0))
    raw_episodes = raw.get('episodes', [])
    episodes = [
        Episode(
            rating_key=str(ep['rating_key']),
            series_key=series_key,
            title=ep.get('title', ''),
            season_index=index,
            episode_index=int(ep.get('episode_index', ep.get('index', 0))),
            view_count=int(ep.get('view_count') or 0),
            originally_available_at=ep.get('originally_available_at'),
            season_title=raw.get('title'),
            total_episodes_in_season=len(raw_episodes),
        )
        for ep in raw_episodes
    ]
    return Season(index=index, title=raw.get('title'), episodes=episodes)


def snapshot_from_catalog(catalog: BaseCatalog) -> Dict:
    """
    Export any catalog to snapshot data.

    Walks every series' seasons, so against a live Plex server this is a
    full library scan.

    Args:
        catalog: Catalog to export

    Returns:
        Snapshot dict accepted by SnapshotCatalog.from_snapshot
    """
    series = []
    for show in catalog.list_all_series():
        raw = show.to_dict()
        raw['seasons'] = [
            {
                'index': season.index,
                'title': season.title,
                'episodes': [ep.to_dict() for ep in season.episodes],
            }
            for season in catalog.list_seasons(show.rating_key)
        ]
        series.append(raw)

    weights = catalog.get_order_type_weights()
    return {
        'movies': [movie.to_dict() for movie in catalog.list_all_movies()],
        'series': series,
        'settings': {
            'default_collection': catalog.get_configured_default_collection(),
            'order_weights': {'tv': weights.tv, 'movies': weights.movies, 'custom': weights.custom},
        },
        'custom_order_keys': sorted(catalog.list_custom_order_keys()),
    }
