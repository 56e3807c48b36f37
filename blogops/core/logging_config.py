import logging
import os
import sys

DEFAULT_LOG_LEVEL = logging.INFO
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: int | str | None = None) -> None:
    """
    Install a single stderr handler on the ``blogops`` logger.

    ``level`` may be an int, a level name, or None to read BLOGOPS_LOG_LEVEL.
    Unknown names fall back to INFO with a warning on stderr.
    """
    if level is None:
        level = os.environ.get("BLOGOPS_LOG_LEVEL", "")
        if not level:
            level = DEFAULT_LOG_LEVEL

    if isinstance(level, str):
        name = level.upper()
        if isinstance(getattr(logging, name, None), int):
            log_level = getattr(logging, name)
        else:
            log_level = DEFAULT_LOG_LEVEL
            print(
                f"Warning: Invalid log level '{level}'. Defaulting to {logging.getLevelName(log_level)}.",
                file=sys.stderr,
            )
    else:
        log_level = level

    app_logger = logging.getLogger("blogops")
    app_logger.setLevel(log_level)

    # setup_logging may run more than once (CLI + tests)
    if not app_logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        app_logger.addHandler(handler)
