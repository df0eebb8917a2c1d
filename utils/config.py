"""
Configuration utilities for Nextarr.
Handles config loading, section access, and the selection defaults.
"""

import os
from typing import Dict, List

import yaml

from .display import log_warning

# Project version - single source of truth
__version__ = "1.0.0"

# Snapshot version - bump this when the catalog snapshot format changes
SNAPSHOT_VERSION = 1

# Order type defaults (used when no settings are stored)
DEFAULT_TV_GENERAL_PERCENT = 50
DEFAULT_MOVIES_GENERAL_PERCENT = 50
DEFAULT_CUSTOM_ORDER_PERCENT = 0
ORDER_WEIGHT_TOTAL = 100

# Chance of drawing a movie seed from a partially watched collection
DEFAULT_PARTIALLY_WATCHED_PERCENT = 75

# Re-expansions of a peer winner's collections per selection (0 disables)
DEFAULT_MAX_COLLECTION_HOPS = 1

# Sort key for items without any usable date
SORT_DATE_SENTINEL = '9999'

# Catalogs name collections inconsistently upstream ("Indiana Jones" vs
# "Indiana Jones Collection"); every suffix listed here is tried both ways.
COLLECTION_NAME_SUFFIXES = (' Collection',)

# Label fragment marking holiday movies for the seasonal filter
HOLIDAY_LABEL = 'christmas'
HOLIDAY_MONTH = 12


def get_config_section(config: Dict, key: str, default: Dict = None) -> Dict:
    """
    Get a config section case-insensitively.

    Args:
        config: The configuration dictionary
        key: The key to look for (will check lowercase and uppercase)
        default: Default value if key not found

    Returns:
        The config section or default value
    """
    if default is None:
        default = {}
    section = config.get(key.lower(), config.get(key.upper(), default))
    return section if section is not None else default


def _as_list(value) -> List[str]:
    """Accept a YAML list or a comma separated string."""
    if not value:
        return []
    if isinstance(value, str):
        return [v.strip() for v in value.split(',') if v.strip()]
    return [str(v) for v in value]


def _as_percent(value, default: int, name: str) -> int:
    try:
        percent = int(value)
    except (TypeError, ValueError):
        log_warning(f"Invalid {name} '{value}', using {default}")
        return default
    if percent < 0:
        log_warning(f"Negative {name} ({percent}) clamped to 0")
        return 0
    return percent


def get_order_weights_config(config: Dict) -> Dict[str, int]:
    """
    Get the order type percentages from the selection section.

    Missing values fall back to 50/50/0. Values are not renormalized when
    they do not add up to 100.

    Args:
        config: The root configuration dictionary

    Returns:
        Dict with 'tv', 'movies' and 'custom' integer percentages
    """
    selection = get_config_section(config, 'selection')
    weights = selection.get('order_weights') or {}
    return {
        'tv': _as_percent(weights.get('tv', DEFAULT_TV_GENERAL_PERCENT),
                          DEFAULT_TV_GENERAL_PERCENT, 'tv weight'),
        'movies': _as_percent(weights.get('movies', DEFAULT_MOVIES_GENERAL_PERCENT),
                              DEFAULT_MOVIES_GENERAL_PERCENT, 'movies weight'),
        'custom': _as_percent(weights.get('custom', DEFAULT_CUSTOM_ORDER_PERCENT),
                              DEFAULT_CUSTOM_ORDER_PERCENT, 'custom weight'),
    }


def get_selection_config(config: Dict) -> Dict:
    """
    Get the selection section with every default filled in.

    Args:
        config: The root configuration dictionary

    Returns:
        Flat dict of selection options
    """
    selection = get_config_section(config, 'selection')

    hops = selection.get('max_collection_hops', DEFAULT_MAX_COLLECTION_HOPS)
    try:
        hops = max(0, int(hops))
    except (TypeError, ValueError):
        log_warning(f"Invalid max_collection_hops '{hops}', using {DEFAULT_MAX_COLLECTION_HOPS}")
        hops = DEFAULT_MAX_COLLECTION_HOPS

    suffixes = selection.get('collection_suffixes')
    if suffixes is None:
        suffixes = list(COLLECTION_NAME_SUFFIXES)

    return {
        'default_collection': selection.get('default_collection') or None,
        'order_weights': get_order_weights_config(config),
        'ignored_tv_collections': _as_list(selection.get('ignored_tv_collections')),
        'ignored_movie_collections': _as_list(selection.get('ignored_movie_collections')),
        'partially_watched_collection_percent': _as_percent(
            selection.get('partially_watched_collection_percent', DEFAULT_PARTIALLY_WATCHED_PERCENT),
            DEFAULT_PARTIALLY_WATCHED_PERCENT, 'partially_watched_collection_percent'),
        'holiday_filter': bool(selection.get('holiday_filter', False)),
        'max_collection_hops': hops,
        'collection_suffixes': [str(s) for s in suffixes],
    }


def load_config(config_path: str) -> dict:
    """
    Load YAML configuration.

    Environment variables take precedence over the file:
        PLEX_URL      -> plex.url
        PLEX_TOKEN    -> plex.token

    Args:
        config_path: Path to config.yml file

    Returns:
        Parsed config dictionary
    """
    try:
        with open(config_path, 'r', encoding='utf-8') as file:
            config = yaml.safe_load(file) or {}
    except (OSError, yaml.YAMLError) as e:
        print(f"\033[91mError loading config from {config_path}: {e}\033[0m")
        raise

    env_overrides = [
        ('PLEX_URL', 'plex', 'url'),
        ('PLEX_TOKEN', 'plex', 'token'),
    ]

    for env_var, section, key in env_overrides:
        value = os.environ.get(env_var)
        if value:
            if not config.get(section):
                config[section] = {}
            config[section][key] = value

    return config
