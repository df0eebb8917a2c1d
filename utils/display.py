"""
Display and logging utilities for Nextarr.
Handles colored output and formatting of the next-up pick.
"""

import logging

# ANSI color codes
RED = '\033[91m'
GREEN = '\033[92m'
YELLOW = '\033[93m'
CYAN = '\033[96m'
RESET = '\033[0m'

LOGGER_NAME = 'nextarr'


class ColoredFormatter(logging.Formatter):
    """Custom formatter that adds colors to log levels"""

    LEVEL_COLORS = {
        logging.DEBUG: CYAN,
        logging.INFO: GREEN,
        logging.WARNING: YELLOW,
        logging.ERROR: RED,
        logging.CRITICAL: RED,
    }

    def format(self, record):
        color = self.LEVEL_COLORS.get(record.levelno, '')
        record.levelname = f"{color}{record.levelname}{RESET}"
        return super().format(record)


def setup_logging(debug: bool = False, config: dict = None, colored: bool = False) -> logging.Logger:
    """
    Configure logging for the next-up command.

    Args:
        debug: If True, set level to DEBUG. Otherwise use config or default to INFO.
        config: Optional config dict that may contain logging.level setting.
        colored: Color the level names (interactive terminals only).

    Returns:
        Configured logger instance.
    """
    if debug:
        level = logging.DEBUG
    elif config and config.get('logging', {}).get('level'):
        level_str = str(config['logging']['level']).upper()
        level = getattr(logging, level_str, logging.INFO)
    else:
        level = logging.INFO

    handler = logging.StreamHandler()
    handler.setLevel(level)

    formatter_cls = ColoredFormatter if colored else logging.Formatter
    handler.setFormatter(formatter_cls(
        fmt='%(asctime)s [%(levelname)s] %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    ))

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    # Remove existing handlers to avoid duplicates
    root_logger.handlers = []
    root_logger.addHandler(handler)

    # Suppress noisy third-party loggers
    logging.getLogger('urllib3').setLevel(logging.WARNING)
    logging.getLogger('requests').setLevel(logging.WARNING)
    logging.getLogger('plexapi').setLevel(logging.WARNING)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    return logger


def log_warning(message: str):
    """Log warning and print with yellow color"""
    logger = logging.getLogger(LOGGER_NAME)
    logger.warning(message)
    print(f"{YELLOW}{message}{RESET}")


def log_error(message: str):
    """Log error and print with red color"""
    logger = logging.getLogger(LOGGER_NAME)
    logger.error(message)
    print(f"{RED}{message}{RESET}")


def _release_label(item) -> str:
    if item.originally_available_at:
        return str(item.originally_available_at)[:10]
    if item.year:
        return str(item.year)
    return ''


def format_selection_output(result, show_collections: bool = True) -> str:
    """
    Format a SelectionResult for console output.

    Args:
        result: SelectionResult returned by the engine
        show_collections: Whether to list the collections of the pick

    Returns:
        Formatted multi-line string
    """
    order_label = result.order_type.value if result.order_type else 'UNKNOWN'

    if result.is_empty:
        return f"{YELLOW}Nothing up next ({order_label}): {result.reason}{RESET}"

    item = result.item
    lines = []
    title_line = f"{CYAN}{item.title}{RESET}"
    released = _release_label(item)
    if released:
        title_line += f" ({released})"
    lines.append(title_line)

    if result.kind == 'episode' and result.episode:
        episode = result.episode
        lines.append(
            f"  {YELLOW}Next episode:{RESET} "
            f"S{episode.season_index:02d}E{episode.episode_index:02d} - {episode.title}"
        )
        if episode.originally_available_at:
            lines.append(f"  {YELLOW}Aired:{RESET} {str(episode.originally_available_at)[:10]}")
        if item.leaf_count:
            lines.append(f"  {YELLOW}Progress:{RESET} {item.viewed_leaf_count}/{item.leaf_count} episodes")

    if show_collections and item.collections:
        lines.append(f"  {YELLOW}Collections:{RESET} {', '.join(item.collections)}")

    lines.append(f"  {YELLOW}Order type:{RESET} {order_label}")
    return '\n'.join(lines)
