from __future__ import annotations

import logging

from utils.config import LOG_FORMAT, LOG_LEVEL

_HANDLER_NAME = "shopsense-console"


def configure_logging(level: str | None = None) -> logging.Logger:
    """Attach a single console handler to the root logger.

    Safe to call more than once: an existing ShopSense handler is reused and
    only the level is updated.
    """
    root = logging.getLogger()
    level_name = (level or LOG_LEVEL).upper()
    root.setLevel(getattr(logging, level_name, logging.INFO))

    for handler in root.handlers:
        if handler.get_name() == _HANDLER_NAME:
            return root

    console_handler = logging.StreamHandler()
    console_handler.set_name(_HANDLER_NAME)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(console_handler)
    return root
