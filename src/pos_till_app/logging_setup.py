from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def configure_logging(level: int | str = logging.INFO) -> None:
    """Install the root handler for an application entry point.

    Library modules only create named loggers; handlers are configured here.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            raise ValueError("Unknown log level")
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger("pos_till_app").setLevel(level)
