"""
Nextarr Utilities Package.

This package contains modular utility functions organized by responsibility.
Plex access (utils.plex) and the command line (utils.cli) build on the
selection package and are imported from their modules directly.
"""

# Config utilities
from .config import (
    __version__,
    SNAPSHOT_VERSION,
    DEFAULT_TV_GENERAL_PERCENT,
    DEFAULT_MOVIES_GENERAL_PERCENT,
    DEFAULT_CUSTOM_ORDER_PERCENT,
    ORDER_WEIGHT_TOTAL,
    DEFAULT_PARTIALLY_WATCHED_PERCENT,
    DEFAULT_MAX_COLLECTION_HOPS,
    SORT_DATE_SENTINEL,
    COLLECTION_NAME_SUFFIXES,
    HOLIDAY_LABEL,
    HOLIDAY_MONTH,
    get_config_section,
    get_order_weights_config,
    get_selection_config,
    load_config,
)

# Display utilities
from .display import (
    RED,
    GREEN,
    YELLOW,
    CYAN,
    RESET,
    ColoredFormatter,
    setup_logging,
    log_warning,
    log_error,
    format_selection_output,
)

# Cache utilities
from .cache import (
    save_json_cache,
    load_json_cache,
    save_catalog_snapshot,
    load_catalog_snapshot,
)

# Helper utilities
from .helpers import (
    get_project_root,
    default_config_path,
    parse_rating_key,
    format_plex_date,
)

# Define __all__ for explicit public API
__all__ = [
    # Config
    '__version__',
    'SNAPSHOT_VERSION',
    'DEFAULT_TV_GENERAL_PERCENT',
    'DEFAULT_MOVIES_GENERAL_PERCENT',
    'DEFAULT_CUSTOM_ORDER_PERCENT',
    'ORDER_WEIGHT_TOTAL',
    'DEFAULT_PARTIALLY_WATCHED_PERCENT',
    'DEFAULT_MAX_COLLECTION_HOPS',
    'SORT_DATE_SENTINEL',
    'COLLECTION_NAME_SUFFIXES',
    'HOLIDAY_LABEL',
    'HOLIDAY_MONTH',
    'get_config_section',
    'get_order_weights_config',
    'get_selection_config',
    'load_config',
    # Display
    'RED',
    'GREEN',
    'YELLOW',
    'CYAN',
    'RESET',
    'ColoredFormatter',
    'setup_logging',
    'log_warning',
    'log_error',
    'format_selection_output',
    # Cache
    'save_json_cache',
    'load_json_cache',
    'save_catalog_snapshot',
    'load_catalog_snapshot',
    # Helpers
    'get_project_root',
    'default_config_path',
    'parse_rating_key',
    'format_plex_date',
]
