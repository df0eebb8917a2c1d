"""
Next-up selection engine.

One get_next() call walks:
START -> ORDER_TYPE_CHOSEN -> SEED_SELECTED -> COLLECTIONS_EXPANDED ->
EARLIEST_COMPUTED -> [EPISODE_RESOLVED] -> DONE, or ends in EMPTY when the
pool is empty or the catalog cannot be read.
"""

import logging
import random
from datetime import date
from typing import Callable, List, Optional

from utils.config import ORDER_WEIGHT_TOTAL
from utils.display import log_error, log_warning

from .catalog import BaseCatalog, CatalogError
from .chronology import ChronologicalTieBreaker
from .episodes import EpisodeResolver
from .expander import CollectionExpander
from .models import NO_ITEMS_FOUND, CatalogItem, OrderType, SelectionResult
from .order_type import select_order_type
from .pool import (
    filter_custom_order_items,
    filter_holiday_items,
    filter_ignored_collections,
    keep_if_nonempty,
    select_movie_seed,
    select_seed,
)
from .settings import SelectionSettings, settings_from_catalog

logger = logging.getLogger('nextarr')

CustomOrderSelector = Callable[[SelectionSettings], Optional[SelectionResult]]


class NextUpEngine:
    """
    Decides what to watch next.

    The engine holds no state between calls besides its collaborators: every
    get_next() takes a fresh settings snapshot and a fresh episode cache.

    Args:
        catalog: Catalog accessor
        rng: Random source; defaults to a system-seeded random.Random
        custom_order_selector: Called for CUSTOM_ORDER picks; without one the
            engine returns a 'delegated' result
        today: Date provider for the holiday filter
        base_settings: Static settings (ignored collections, hops, ...);
            stored values are refreshed from the catalog on every call
    """

    def __init__(
        self,
        catalog: BaseCatalog,
        rng: Optional[random.Random] = None,
        custom_order_selector: Optional[CustomOrderSelector] = None,
        today: Optional[Callable[[], date]] = None,
        base_settings: Optional[SelectionSettings] = None,
    ):
        self.catalog = catalog
        self.rng = rng or random.Random()
        self.custom_order_selector = custom_order_selector
        self.today = today or date.today
        self.base_settings = base_settings or SelectionSettings()

    def snapshot_settings(self) -> SelectionSettings:
        return settings_from_catalog(self.catalog, self.base_settings)

    def get_next(self, settings: Optional[SelectionSettings] = None) -> SelectionResult:
        """
        Pick the next thing to watch.

        Args:
            settings: Explicit settings snapshot; read from the catalog when omitted

        Returns:
            SelectionResult; catalog failures come back as an empty result
            carrying the error instead of being raised
        """
        order_type = None
        try:
            if settings is None:
                settings = self.snapshot_settings()

            weights = settings.order_weights
            if weights.total != ORDER_WEIGHT_TOTAL:
                logger.warning(
                    f"Order type percentages add up to {weights.total}, not {ORDER_WEIGHT_TOTAL}; "
                    f"the custom order band absorbs the difference"
                )

            order_type = select_order_type(weights, self.rng)
            logger.debug(f"ORDER_TYPE_CHOSEN: {order_type.value}")

            if order_type == OrderType.TV_GENERAL:
                result = self.get_next_tv(settings)
            elif order_type == OrderType.MOVIES_GENERAL:
                result = self.get_next_movie(settings)
            else:
                result = self.get_next_custom(settings)
        except CatalogError as e:
            log_error(f"Error reading catalog during selection: {e}")
            return SelectionResult.empty(f"catalog unavailable: {e}", order_type=order_type, error=e)

        result = result.with_order_type(order_type)
        if result.is_empty:
            logger.info(f"EMPTY ({order_type.value}): {result.reason}")
        elif result.kind == 'episode':
            logger.info(
                f"Up next: {result.item.title} S{result.episode.season_index}E{result.episode.episode_index} "
                f"- {result.episode.title}"
            )
        else:
            logger.info(f"Up next: {result.item.title}")
        return result

    def _collection_pool(self, default_collection: Optional[str], lookup, label: str) -> List[CatalogItem]:
        """Items filed under the default collection; empty when unset, empty or unreadable."""
        if not default_collection:
            return []
        try:
            items = lookup(default_collection)
        except CatalogError as e:
            log_warning(f"Error reading {label} from collection \"{default_collection}\", using all {label}: {e}")
            return []
        if items:
            logger.debug(f"Total {label} found in collection \"{default_collection}\": {len(items)}")
        else:
            logger.debug(f"No {label} found in collection \"{default_collection}\", falling back to all {label}")
        return items

    def tv_pool(self, settings: SelectionSettings) -> List[CatalogItem]:
        """
        Series to seed from.

        Series in the default collection come first; when there are none, or
        all of them sit in ignored collections, the whole TV library is used.
        Ignored collections are never served from the whole library: if they
        cover every series the pool is empty.
        """
        custom_keys = self.catalog.list_custom_order_keys()

        queued = filter_ignored_collections(
            self._collection_pool(settings.default_collection, self.catalog.list_series_by_collection, 'TV series'),
            settings.ignored_tv_collections,
        )
        if queued:
            return keep_if_nonempty(filter_custom_order_items(queued, custom_keys), queued, 'in custom orders')

        all_series = self.catalog.list_all_series()
        logger.debug(f"Total TV series found: {len(all_series)}")
        pool = filter_ignored_collections(all_series, settings.ignored_tv_collections)
        if all_series and not pool:
            logger.debug('All TV series are in ignored collections')
        return keep_if_nonempty(filter_custom_order_items(pool, custom_keys), pool, 'in custom orders')

    def movie_pool(self, settings: SelectionSettings) -> List[CatalogItem]:
        """
        Movies to seed from: the default collection, else the whole movie library.

        The holiday, ignored collection and custom order filters each fall
        back to their input when they would empty the pool.
        """
        movies = self._collection_pool(settings.default_collection, self.catalog.list_movies_by_collection, 'movies')
        if not movies:
            movies = self.catalog.list_all_movies()
            logger.debug(f"Total movies found: {len(movies)}")
        if not movies:
            return []

        pool = keep_if_nonempty(
            filter_holiday_items(movies, self.today(), settings.holiday_filter),
            movies, 'holiday movies'
        )
        pool = keep_if_nonempty(
            filter_ignored_collections(pool, settings.ignored_movie_collections, case_sensitive=True),
            pool, 'in ignored collections'
        )
        return keep_if_nonempty(
            filter_custom_order_items(pool, self.catalog.list_custom_order_keys()),
            pool, 'in custom orders'
        )

    def get_next_tv(self, settings: SelectionSettings) -> SelectionResult:
        """Select from the TV pool."""
        pool = self.tv_pool(settings)
        if not pool:
            return SelectionResult.empty(NO_ITEMS_FOUND)

        seed = select_seed(pool, self.rng)
        return self._refine(seed, settings, self._expander(settings))

    def get_next_movie(self, settings: SelectionSettings) -> SelectionResult:
        """Select from the movie pool."""
        pool = self.movie_pool(settings)
        if not pool:
            return SelectionResult.empty(NO_ITEMS_FOUND)

        expander = self._expander(settings)
        unwatched = [movie for movie in pool if movie.is_unwatched]
        series_collections = expander.collections_with_series(unwatched)

        seed = select_movie_seed(pool, self.rng, settings.partially_watched_collection_percent,
                                 series_collections)
        return self._refine(seed, settings, expander)

    def get_next_custom(self, settings: SelectionSettings) -> SelectionResult:
        if self.custom_order_selector is None:
            return SelectionResult.delegated(OrderType.CUSTOM_ORDER)

        result = self.custom_order_selector(settings)
        if result is None:
            return SelectionResult.empty('no custom order items found')
        return result

    def _expander(self, settings: SelectionSettings) -> CollectionExpander:
        return CollectionExpander(
            self.catalog,
            default_collection=settings.default_collection,
            suffixes=settings.collection_suffixes,
        )

    def _refine(self, seed: Optional[CatalogItem], settings: SelectionSettings,
                expander: CollectionExpander) -> SelectionResult:
        """Expand the seed through its collections and settle on the earliest item."""
        if seed is None:
            return SelectionResult.empty(NO_ITEMS_FOUND)
        logger.debug(f"SEED_SELECTED: {seed.title}")

        peers = expander.expand_collections(seed)
        logger.debug(f"COLLECTIONS_EXPANDED: {len(peers)} peer(s)")

        tie_breaker = ChronologicalTieBreaker(expander, EpisodeResolver(self.catalog), settings.max_collection_hops)
        result = tie_breaker.select_earliest_unplayed(seed, peers)
        logger.debug(f"EARLIEST_COMPUTED: {result.kind}")
        if result.kind == 'episode':
            logger.debug(f"EPISODE_RESOLVED: S{result.episode.season_index}E{result.episode.episode_index}")
        return result
