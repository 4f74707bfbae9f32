from __future__ import annotations

"""Central logging configuration for svg-inliner.

Import and call :func:`setup_logging` at application start-up (the CLI does).
The library itself never configures logging on import.
"""

import logging
import logging.config
import os

from svg_inliner.config import ConfigManager

__all__ = ["setup_logging"]

_TRUTHY = {"1", "true", "yes", "on"}


def setup_logging(debug: bool = False) -> None:
    """Configure logging from the packaged ``logging.yml``.

    The rotating file handler is only kept when ``SVG_INLINER_LOG_DIR`` is
    set; otherwise output goes to stderr alone.
    """
    log_dir = os.environ.get("SVG_INLINER_LOG_DIR", "").strip()

    try:
        logging_config = ConfigManager().get_logging_config()

        if logging_config and logging_config.get("version"):
            handlers = logging_config.get("handlers", {})
            if log_dir and "file" in handlers:
                os.makedirs(log_dir, exist_ok=True)
                handlers["file"]["filename"] = os.path.join(log_dir, "svg_inliner.log")
                for logger_cfg in logging_config.get("loggers", {}).values():
                    logger_cfg.setdefault("handlers", []).append("file")
            else:
                _drop_handler(logging_config, "file")

            logging.config.dictConfig(logging_config)
            logging.getLogger(__name__).debug("Logging initialised from config files")
        else:
            _setup_minimal_logging()
    except (ValueError, TypeError, AttributeError, ImportError, OSError) as exc:
        # Broken user overrides must not stop the tool
        _setup_minimal_logging()
        logging.getLogger(__name__).error("Error loading logging config: %s", exc)

    if debug or os.environ.get("SVG_INLINER_DEBUG", "").strip().lower() in _TRUTHY:
        logging.getLogger("svg_inliner").setLevel(logging.DEBUG)
        for handler in logging.getLogger("svg_inliner").handlers:
            handler.setLevel(logging.DEBUG)

    _apply_debug_overrides()


def _drop_handler(logging_config: dict, name: str) -> None:
    logging_config.get("handlers", {}).pop(name, None)
    sections = list(logging_config.get("loggers", {}).values())
    if "root" in logging_config:
        sections.append(logging_config["root"])
    for section in sections:
        if name in section.get("handlers", []):
            section["handlers"] = [h for h in section["handlers"] if h != name]


def _setup_minimal_logging() -> None:
    """Set up console-only logging when config is unavailable."""
    minimal_config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "simple": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "simple",
                "level": "WARNING",
            },
        },
        "root": {
            "level": "WARNING",
            "handlers": ["console"],
        },
    }
    logging.config.dictConfig(minimal_config)


def _apply_debug_overrides() -> None:
    """Apply ``SVG_INLINER_DEBUG_MODULES=comma,separated,logger,names``."""
    extra_modules = os.environ.get("SVG_INLINER_DEBUG_MODULES", "").strip()
    targets = [m.strip() for m in extra_modules.split(",") if m.strip()]
    for name in targets:
        logger = logging.getLogger(name)
        logger.setLevel(logging.DEBUG)
        has_debug_handler = any(
            h.level == logging.NOTSET or h.level <= logging.DEBUG for h in logger.handlers
        )
        if not has_debug_handler:
            h = logging.StreamHandler()
            h.setLevel(logging.DEBUG)
            h.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))
            logger.addHandler(h)
        logger.info("Debug override active for logger '%s'", name)
