"""
Command line entry point for Nextarr.
Wires config, logging and a catalog into the selection engine.
"""

import argparse
import random
import sys
from typing import List, Optional

import yaml

from selection.catalog import CatalogError, SnapshotCatalog, snapshot_from_catalog
from selection.engine import NextUpEngine
from selection.settings import settings_from_config

from .cache import load_catalog_snapshot, save_catalog_snapshot
from .config import __version__, load_config
from .display import CYAN, GREEN, RESET, format_selection_output, log_error, log_warning, setup_logging
from .helpers import default_config_path
from .plex import PLEX_ERRORS, PlexCatalog, init_plex


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Pick the next movie or episode to watch from your Plex library')
    parser.add_argument('--config', help='Path to config.yml (default: config/config.yml)')
    parser.add_argument('--snapshot', help='Select from a catalog snapshot instead of the Plex server')
    parser.add_argument('--export-snapshot', metavar='PATH',
                        help='Write the Plex catalog to a snapshot file and exit')
    parser.add_argument('--seed', type=int, help='Seed the random source for a reproducible pick')
    parser.add_argument('--debug', action='store_true', help='Enable debug logging')
    return parser


def load_snapshot_catalog(snapshot_path: str) -> Optional[SnapshotCatalog]:
    data = load_catalog_snapshot(snapshot_path)
    if data is None:
        log_error(f"Could not load catalog snapshot from {snapshot_path}")
        return None
    return SnapshotCatalog.from_snapshot(data)


def export_snapshot(catalog, snapshot_path: str) -> bool:
    """
    Export a catalog to disk.

    Args:
        catalog: Catalog to scan
        snapshot_path: Destination file

    Returns:
        True on success
    """
    try:
        snapshot = snapshot_from_catalog(catalog)
    except CatalogError as e:
        log_error(f"Error reading catalog for export: {e}")
        return False

    if not save_catalog_snapshot(snapshot_path, snapshot):
        log_error(f"Could not write snapshot to {snapshot_path}")
        return False

    print(f"{GREEN}Exported {len(snapshot['movies'])} movies and "
          f"{len(snapshot['series'])} series to {snapshot_path}{RESET}")
    return True


def run_next_up_main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the next-up command.

    Args:
        argv: Command line arguments (defaults to sys.argv)

    Returns:
        Process exit code
    """
    args = build_parser().parse_args(argv)

    print(f"{CYAN}Nextarr v{__version__}{RESET}")
    print("-" * 50)

    config_path = args.config or default_config_path()
    config = {}
    try:
        config = load_config(config_path)
    except (OSError, yaml.YAMLError) as e:
        if not args.snapshot:
            log_error(f"Could not load config from {config_path}: {e}")
            return 1
        log_warning(f"No usable config at {config_path}, using selection defaults")

    logger = setup_logging(debug=args.debug, config=config, colored=sys.stdout.isatty())
    logger.debug("Debug logging enabled")

    if args.snapshot:
        catalog = load_snapshot_catalog(args.snapshot)
        if catalog is None:
            return 1
    else:
        try:
            plex = init_plex(config)
        except KeyError as e:
            log_error(f"Missing Plex setting in config: {e}")
            return 1
        except PLEX_ERRORS:
            return 1
        catalog = PlexCatalog(plex, config, config_path=config_path)

    if args.export_snapshot:
        return 0 if export_snapshot(catalog, args.export_snapshot) else 1

    rng = random.Random(args.seed) if args.seed is not None else None
    engine = NextUpEngine(catalog, rng=rng, base_settings=settings_from_config(config))
    result = engine.get_next()

    print(format_selection_output(result))
    return 1 if result.error else 0
