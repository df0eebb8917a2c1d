"""
Read-only views of catalog entities and the selection result type.

The engine only consumes these; catalog implementations build them from
Plex objects or from a JSON snapshot.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, List, Optional, Tuple

MOVIE = 'movie'
SERIES = 'series'

# Tag carried by the seed item through collection expansion
ORIGINAL_COLLECTION = 'original'

# Reason reported when nothing is left to pick
NO_ITEMS_FOUND = 'no items found'


class OrderType(str, Enum):
    """Coarse content pool a selection is drawn from."""

    TV_GENERAL = 'TV_GENERAL'
    MOVIES_GENERAL = 'MOVIES_GENERAL'
    CUSTOM_ORDER = 'CUSTOM_ORDER'


@dataclass(frozen=True)
class OrderWeights:
    """Percentages for each order type, expected (not required) to sum to 100."""

    tv: int = 50
    movies: int = 50
    custom: int = 0

    @property
    def total(self) -> int:
        return self.tv + self.movies + self.custom


@dataclass(frozen=True)
class CatalogItem:
    """A movie or a series as seen by the selection engine."""

    rating_key: str
    title: str
    kind: str
    originally_available_at: Optional[str] = None
    year: Optional[int] = None
    view_count: int = 0
    leaf_count: int = 0
    viewed_leaf_count: int = 0
    collections: Tuple[str, ...] = ()
    labels: Tuple[str, ...] = ()
    from_collection: Optional[str] = None

    @property
    def is_movie(self) -> bool:
        return self.kind == MOVIE

    @property
    def is_series(self) -> bool:
        return self.kind == SERIES

    @property
    def library_type(self) -> str:
        """'movie' or 'tv', the tag peers carry after expansion."""
        return 'movie' if self.is_movie else 'tv'

    @property
    def is_watched(self) -> bool:
        """
        Fully watched check used when rejecting seed draws.

        A series counts as watched only when every leaf has been viewed;
        a movie as soon as it has a play.
        """
        if self.is_movie:
            return bool(self.view_count) and self.view_count > 0
        return (self.viewed_leaf_count or 0) == (self.leaf_count or 0)

    @property
    def is_unwatched(self) -> bool:
        """Candidate filter: something left to watch."""
        if self.is_movie:
            return not self.view_count
        return (self.leaf_count or 0) > (self.viewed_leaf_count or 0)

    def tagged(self, from_collection: Optional[str]) -> 'CatalogItem':
        """Return a copy tagged with the collection it was found through."""
        return replace(self, from_collection=from_collection)

    def to_dict(self) -> Dict:
        return {
            'rating_key': self.rating_key,
            'title': self.title,
            'kind': self.kind,
            'originally_available_at': self.originally_available_at,
            'year': self.year,
            'view_count': self.view_count,
            'leaf_count': self.leaf_count,
            'viewed_leaf_count': self.viewed_leaf_count,
            'collections': list(self.collections),
            'labels': list(self.labels),
        }

    @classmethod
    def from_dict(cls, data: Dict) -> 'CatalogItem':
        year = data.get('year')
        return cls(
            rating_key=str(data['rating_key']),
            title=data.get('title', ''),
            kind=data.get('kind', MOVIE),
            originally_available_at=data.get('originally_available_at'),
            year=int(year) if year not in (None, '') else None,
            view_count=int(data.get('view_count') or 0),
            leaf_count=int(data.get('leaf_count') or 0),
            viewed_leaf_count=int(data.get('viewed_leaf_count') or 0),
            collections=tuple(data.get('collections') or ()),
            labels=tuple(data.get('labels') or ()),
        )


@dataclass(frozen=True)
class Episode:
    """A single episode of a series."""

    rating_key: str
    series_key: str
    title: str
    season_index: int
    episode_index: int
    view_count: int = 0
    originally_available_at: Optional[str] = None
    season_title: Optional[str] = None
    total_episodes_in_season: Optional[int] = None

    @property
    def is_watched(self) -> bool:
        return bool(self.view_count) and self.view_count > 0

    @property
    def ordering_key(self) -> Tuple[int, int]:
        return (self.season_index, self.episode_index)

    def to_dict(self) -> Dict:
        return {
            'rating_key': self.rating_key,
            'title': self.title,
            'episode_index': self.episode_index,
            'view_count': self.view_count,
            'originally_available_at': self.originally_available_at,
        }


@dataclass
class Season:
    index: int
    title: Optional[str] = None
    episodes: List[Episode] = field(default_factory=list)


@dataclass(frozen=True)
class SelectionResult:
    """
    Outcome of one "get next" invocation.

    kind is one of 'movie', 'episode', 'empty' or 'delegated'. Episode
    results carry the parent series in ``item`` and the concrete episode in
    ``episode``. Empty results explain themselves in ``reason`` and, for
    catalog failures, keep the original exception in ``error``.
    """

    kind: str
    order_type: Optional[OrderType] = None
    item: Optional[CatalogItem] = None
    episode: Optional[Episode] = None
    reason: Optional[str] = None
    error: Optional[Exception] = None

    @classmethod
    def movie(cls, item: CatalogItem, order_type: Optional[OrderType] = None) -> 'SelectionResult':
        return cls(kind='movie', order_type=order_type, item=item)

    @classmethod
    def for_episode(cls, series: CatalogItem, episode: Episode,
                    order_type: Optional[OrderType] = None) -> 'SelectionResult':
        return cls(kind='episode', order_type=order_type, item=series, episode=episode)

    @classmethod
    def empty(cls, reason: str = NO_ITEMS_FOUND, order_type: Optional[OrderType] = None,
              error: Optional[Exception] = None) -> 'SelectionResult':
        return cls(kind='empty', order_type=order_type, reason=reason, error=error)

    @classmethod
    def delegated(cls, order_type: OrderType) -> 'SelectionResult':
        return cls(kind='delegated', order_type=order_type,
                   reason=f"{order_type.value} selection is handled by an external collaborator")

    @property
    def is_empty(self) -> bool:
        return self.kind in ('empty', 'delegated')

    def with_order_type(self, order_type: OrderType) -> 'SelectionResult':
        return replace(self, order_type=order_type)
