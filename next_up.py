"""
Nextarr - pick the next movie or episode to watch.

Usage:
    python next_up.py [--config PATH] [--snapshot PATH] [--export-snapshot PATH] [--seed N] [--debug]
"""

import sys

from utils.cli import run_next_up_main


def main():
    # Ensure UTF-8 output
    if sys.stdout.encoding and sys.stdout.encoding.lower() != 'utf-8':
        sys.stdout.reconfigure(encoding='utf-8')
    sys.exit(run_next_up_main())


if __name__ == "__main__":
    main()
