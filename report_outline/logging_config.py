from __future__ import annotations

"""Central logging configuration for the report outline editor.

Import and call :func:`setup_logging` at application start-up.
"""

import copy
import logging
import logging.config
import os

from report_outline.config import ConfigManager

__all__ = ["setup_logging"]

MOVE_LOGGERS = (
    "report_outline.core.moves",
    "report_outline.core.services.outline_editing_service",
)


def setup_logging() -> None:
    """Configure logging for the application using configuration from YAML files."""
    log_dir = os.environ.get("REPORT_OUTLINE_LOG_DIR", "logs")
    os.makedirs(log_dir, exist_ok=True)
    log_file = os.path.join(log_dir, "app.log")

    config_manager = ConfigManager()
    logging_config = copy.deepcopy(config_manager.get_logging_config())

    if logging_config and isinstance(logging_config, dict) and logging_config.get("version"):
        # Update the filename dynamically
        if "handlers" in logging_config and "file" in logging_config["handlers"]:
            logging_config["handlers"]["file"]["filename"] = log_file
        try:
            logging.config.dictConfig(logging_config)
            logging.info("===== Logging initialised from config files =====")
        except (ValueError, TypeError, AttributeError, ImportError) as exc:
            _setup_minimal_logging()
            logging.error("Invalid logging config, using minimal fallback: %s", exc)
    else:
        _setup_minimal_logging()
        logging.warning("No logging config found, using minimal fallback")

    _apply_debug_overrides()


def _setup_minimal_logging() -> None:
    """Set up minimal console-only logging when config is unavailable."""
    minimal_config = {
        'version': 1,
        'disable_existing_loggers': False,
        'formatters': {
            'simple': {
                'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            },
        },
        'handlers': {
            'console': {
                'class': 'logging.StreamHandler',
                'formatter': 'simple',
                'level': 'INFO',
            },
        },
        'root': {
            'level': 'INFO',
            'handlers': ['console'],
        },
        # Provide module logger entries so they can be flipped via env even in minimal mode
        'loggers': {
            name: {'handlers': ['console'], 'level': 'INFO', 'propagate': False}
            for name in MOVE_LOGGERS
        },
    }
    logging.config.dictConfig(minimal_config)


def _apply_debug_overrides() -> None:
    """Apply environment-driven module-specific debug overrides.

    Supports:
    - REPORT_OUTLINE_DEBUG_MOVES=true -> DEBUG for the move engine and editing service
    - REPORT_OUTLINE_DEBUG_MODULES=comma,separated,logger,names -> DEBUG for listed loggers
    """
    debug_moves = os.environ.get('REPORT_OUTLINE_DEBUG_MOVES', '').strip().lower() in {'1', 'true', 'yes', 'on'}
    extra_modules = os.environ.get('REPORT_OUTLINE_DEBUG_MODULES', '').strip()
    targets = []
    if debug_moves:
        targets.extend(MOVE_LOGGERS)
    if extra_modules:
        targets.extend([m.strip() for m in extra_modules.split(',') if m.strip()])
    for name in targets:
        logger = logging.getLogger(name)
        logger.setLevel(logging.DEBUG)
        # Ensure at least one handler emits DEBUG for this logger
        has_debug_handler = any(h.level <= logging.DEBUG for h in logger.handlers)
        if not has_debug_handler:
            h = logging.StreamHandler()
            h.setLevel(logging.DEBUG)
            h.setFormatter(logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s'))
            logger.addHandler(h)
        logger.info("Debug override active for logger '%s'", name)
