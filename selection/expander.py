"""
Collection expansion: find every other catalog item sharing a collection
with the seed.
"""

import logging
from typing import Dict, Iterable, List, Optional, Sequence, Set

from utils.config import COLLECTION_NAME_SUFFIXES
from utils.display import log_warning

from .catalog import BaseCatalog, CatalogError
from .models import CatalogItem

logger = logging.getLogger('nextarr')


def canonical_collection_name(name: str, suffixes: Sequence[str] = COLLECTION_NAME_SUFFIXES) -> str:
    """
    Strip the first known naming suffix from a collection name.

    Args:
        name: Collection name as stored on an item
        suffixes: Suffixes catalogs append inconsistently (" Collection")

    Returns:
        Name without the suffix, or the name unchanged
    """
    for suffix in suffixes:
        if suffix and name.endswith(suffix) and len(name) > len(suffix):
            return name[:-len(suffix)]
    return name


def collection_name_variants(name: str, suffixes: Sequence[str] = COLLECTION_NAME_SUFFIXES) -> List[str]:
    """
    Every spelling under which members of a collection may be stored.

    "Indiana Jones" yields ["Indiana Jones", "Indiana Jones Collection"] and
    "Indiana Jones Collection" yields the same two names in the other order.

    Args:
        name: Collection name as stored on an item
        suffixes: Suffix table driving the variants

    Returns:
        Distinct names, the original first
    """
    canonical = canonical_collection_name(name, suffixes)
    candidates = [name, canonical] + [canonical + suffix for suffix in suffixes if suffix]

    variants = []
    for candidate in candidates:
        if candidate not in variants:
            variants.append(candidate)
    return variants


class CollectionExpander:
    """
    Gathers the peers of a seed item across its non-default collections.

    Args:
        catalog: Catalog accessor
        default_collection: Configured collection that every queued item
            shares; never expanded (case-insensitive)
        suffixes: Collection naming suffix table
    """

    def __init__(
        self,
        catalog: BaseCatalog,
        default_collection: Optional[str] = None,
        suffixes: Sequence[str] = COLLECTION_NAME_SUFFIXES,
    ):
        self.catalog = catalog
        self.default_collection = default_collection
        self.excluded = default_collection.lower() if default_collection else None
        self.suffixes = tuple(suffixes)

    def other_collections(self, seed: CatalogItem) -> List[str]:
        """
        Re-fetch the seed and list its collections minus the default one.

        The listing used to pick the seed may carry a partial membership
        list, so the full item is always fetched again.
        """
        try:
            detail = self.catalog.get_item_by_id(seed)
        except CatalogError as e:
            log_warning(f"Could not fetch collections for \"{seed.title}\": {e}")
            return []

        if detail is None:
            logger.debug(f"\"{seed.title}\" not found in catalog, no collections to expand")
            return []

        names = [name for name in detail.collections if name.lower() != self.excluded]
        if names:
            logger.debug(f"\"{seed.title}\" belongs to other collection(s): {', '.join(names)}")
        else:
            logger.debug(f"No other collections found for \"{seed.title}\"")
        return names

    def expand_collections(self, seed: CatalogItem) -> List[CatalogItem]:
        """
        Find every movie and series sharing a non-default collection with the seed.

        Args:
            seed: Item picked from the pool

        Returns:
            Peers tagged with the collection they were found through, without
            the seed and without duplicates
        """
        peers: Dict[str, CatalogItem] = {}

        for collection_name in self.other_collections(seed):
            found = 0
            for variant in collection_name_variants(collection_name, self.suffixes):
                for lookup in (self.catalog.list_series_by_collection, self.catalog.list_movies_by_collection):
                    try:
                        items = lookup(variant)
                    except CatalogError as e:
                        log_warning(f"Failed to search collection \"{variant}\": {e}")
                        continue

                    for item in items:
                        if item.rating_key == seed.rating_key or item.rating_key in peers:
                            continue
                        peers[item.rating_key] = item.tagged(collection_name)
                        found += 1

            logger.debug(f"Found {found} new item(s) in collection \"{collection_name}\"")

        return list(peers.values())

    def collections_with_series(self, movies: Iterable[CatalogItem]) -> Set[str]:
        """
        Collections of the given movies that also hold a TV series.

        Each distinct non-default name is looked up once, under every name
        variant. A failed lookup counts as no series.

        Args:
            movies: Movies whose listed collections are checked

        Returns:
            Collection names (as listed on the movies) with at least one series
        """
        names = []
        for movie in movies:
            for name in movie.collections:
                if name.lower() != self.excluded and name not in names:
                    names.append(name)

        with_series = set()
        for name in names:
            for variant in collection_name_variants(name, self.suffixes):
                try:
                    series = self.catalog.list_series_by_collection(variant)
                except CatalogError as e:
                    logger.debug(f"Series lookup for \"{variant}\" failed: {e}")
                    continue
                if series:
                    logger.debug(f"Collection \"{name}\" holds {len(series)} TV series")
                    with_series.add(name)
                    break

        return with_series
