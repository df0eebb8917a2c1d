"""
Cache I/O utilities for Nextarr.
Handles loading and saving of catalog snapshot files.
"""

import json
import logging
import os
from datetime import datetime
from typing import Dict, Optional

from .config import SNAPSHOT_VERSION
from .display import log_warning


def save_json_cache(cache_path: str, data: Dict, cache_version: int = None) -> bool:
    """
    Save data to a JSON cache file.

    Args:
        cache_path: Path to the cache file
        data: Dictionary to save
        cache_version: Optional version number to include

    Returns:
        True on success, False on failure
    """
    try:
        if cache_version is not None:
            data['cache_version'] = cache_version
        with open(cache_path, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=4, ensure_ascii=False)
        return True
    except (OSError, TypeError) as e:
        logging.error(f"Error saving cache to {cache_path}: {e}")
        return False


def load_json_cache(cache_path: str) -> Optional[Dict]:
    """
    Load data from a JSON cache file.

    Args:
        cache_path: Path to the cache file

    Returns:
        Dictionary from cache or None on failure
    """
    if not os.path.exists(cache_path):
        return None
    try:
        with open(cache_path, 'r', encoding='utf-8') as f:
            return json.load(f)
    except (OSError, ValueError) as e:
        logging.warning(f"Error loading cache from {cache_path}: {e}")
        return None


def save_catalog_snapshot(snapshot_path: str, snapshot: Dict) -> bool:
    """
    Write a catalog snapshot with version and timestamp.

    Args:
        snapshot_path: Destination file
        snapshot: Snapshot data (movies, series, settings)

    Returns:
        True on success, False on failure
    """
    directory = os.path.dirname(snapshot_path)
    if directory:
        os.makedirs(directory, exist_ok=True)

    data = dict(snapshot)
    data['last_updated'] = datetime.now().isoformat()
    return save_json_cache(snapshot_path, data, cache_version=SNAPSHOT_VERSION)


def load_catalog_snapshot(snapshot_path: str) -> Optional[Dict]:
    """
    Load a catalog snapshot, rejecting missing or incompatible files.

    Args:
        snapshot_path: Snapshot file

    Returns:
        Snapshot data, or None if the file is missing, unreadable or from
        another snapshot version
    """
    data = load_json_cache(snapshot_path)
    if data is None:
        return None

    version = data.get('cache_version', 1)
    if version != SNAPSHOT_VERSION:
        log_warning(f"Catalog snapshot is v{version}, expected v{SNAPSHOT_VERSION}; export it again")
        return None

    data.setdefault('movies', [])
    data.setdefault('series', [])
    return data
