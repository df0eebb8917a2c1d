"""
Miscellaneous helper utilities for Nextarr.
"""

import os
from functools import lru_cache
from typing import Optional


@lru_cache(maxsize=1)
def get_project_root() -> str:
    """
    Get the project root directory path.

    Returns:
        Absolute path to the project root (parent of utils/).
    """
    return os.path.dirname(os.path.dirname(os.path.abspath(__file__)))


def default_config_path() -> str:
    """Location of config.yml when none is given on the command line."""
    return os.path.join(get_project_root(), 'config', 'config.yml')


def parse_rating_key(value) -> Optional[str]:
    """
    Normalize a Plex rating key to a string.

    Plex hands out integers, snapshots and configs may hold ints or strings.
    """
    if value is None or value == '':
        return None
    return str(value).strip()


def format_plex_date(value) -> Optional[str]:
    """
    Render a Plex date attribute as an ISO date string.

    Args:
        value: datetime/date from plexapi, an ISO string, or None

    Returns:
        'YYYY-MM-DD' or None
    """
    if value is None or value == '':
        return None
    if hasattr(value, 'strftime'):
        return value.strftime('%Y-%m-%d')
    return str(value)[:10]
