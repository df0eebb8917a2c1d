"""
Per-call configuration snapshot for the selection engine.
"""

from dataclasses import dataclass, field, replace
from typing import Dict, Optional, Tuple

from utils.config import (
    COLLECTION_NAME_SUFFIXES,
    DEFAULT_MAX_COLLECTION_HOPS,
    DEFAULT_PARTIALLY_WATCHED_PERCENT,
    get_selection_config,
)

from .models import OrderWeights


@dataclass(frozen=True)
class SelectionSettings:
    """
    Everything the engine reads from configuration for one selection.

    A fresh snapshot is taken on every get_next call so changes to the
    stored settings apply to the next pick without restarting.
    """

    default_collection: Optional[str] = None
    order_weights: OrderWeights = field(default_factory=OrderWeights)
    ignored_tv_collections: Tuple[str, ...] = ()
    ignored_movie_collections: Tuple[str, ...] = ()
    partially_watched_collection_percent: int = DEFAULT_PARTIALLY_WATCHED_PERCENT
    holiday_filter: bool = False
    max_collection_hops: int = DEFAULT_MAX_COLLECTION_HOPS
    collection_suffixes: Tuple[str, ...] = COLLECTION_NAME_SUFFIXES


def settings_from_config(config: Dict) -> SelectionSettings:
    """
    Build settings from the root YAML configuration.

    Args:
        config: Root configuration dictionary

    Returns:
        SelectionSettings with defaults for anything missing
    """
    selection = get_selection_config(config)
    weights = selection['order_weights']
    return SelectionSettings(
        default_collection=selection['default_collection'],
        order_weights=OrderWeights(tv=weights['tv'], movies=weights['movies'], custom=weights['custom']),
        ignored_tv_collections=tuple(selection['ignored_tv_collections']),
        ignored_movie_collections=tuple(selection['ignored_movie_collections']),
        partially_watched_collection_percent=selection['partially_watched_collection_percent'],
        holiday_filter=selection['holiday_filter'],
        max_collection_hops=selection['max_collection_hops'],
        collection_suffixes=tuple(selection['collection_suffixes']),
    )


def settings_from_catalog(catalog, base: Optional[SelectionSettings] = None) -> SelectionSettings:
    """
    Refresh the stored values (default collection, order weights) from the catalog.

    Args:
        catalog: BaseCatalog providing the stored settings
        base: Static settings to start from

    Returns:
        New SelectionSettings snapshot
    """
    base = base or SelectionSettings()
    return replace(
        base,
        default_collection=catalog.get_configured_default_collection(),
        order_weights=catalog.get_order_type_weights(),
    )
