"""
Nextarr - next-up selection engine for movies and TV series.
"""

from .catalog import BaseCatalog, CatalogError, SnapshotCatalog
from .engine import NextUpEngine
from .models import CatalogItem, Episode, OrderType, OrderWeights, Season, SelectionResult
from .settings import SelectionSettings, settings_from_config

__all__ = [
    'BaseCatalog',
    'CatalogError',
    'SnapshotCatalog',
    'NextUpEngine',
    'CatalogItem',
    'Episode',
    'OrderType',
    'OrderWeights',
    'Season',
    'SelectionResult',
    'SelectionSettings',
    'settings_from_config',
]
