"""Logging setup for the client and its HTTP stack."""

import logging
from typing import TextIO

_PACKAGE_LOGGER = "gphotos_client"
_HANDLER_NAME = "gphotos_client.console"
_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def resolve_level(level: int | str) -> int:
    """Turn ``"debug"``/``"INFO"``/``10`` into a numeric logging level."""
    if isinstance(level, int):
        return level
    names = logging.getLevelNamesMapping()
    try:
        return names[level.strip().upper()]
    except KeyError as exc:
        raise ValueError(f"Unknown log level: {level!r}") from exc


def configure_logging(
    level: int | str = logging.INFO, stream: TextIO | None = None
) -> logging.Logger:
    """Attach one console handler to the package logger and set its level.

    Calling this again only changes the level. httpx request lines are kept
    at WARNING unless DEBUG is requested, since every RPC call would log one.
    """
    numeric = resolve_level(level)
    logger = logging.getLogger(_PACKAGE_LOGGER)
    logger.setLevel(numeric)
    logging.getLogger("httpx").setLevel(
        logging.DEBUG if numeric <= logging.DEBUG else logging.WARNING
    )

    if not any(handler.get_name() == _HANDLER_NAME for handler in logger.handlers):
        handler = logging.StreamHandler(stream)
        handler.set_name(_HANDLER_NAME)
        handler.setFormatter(logging.Formatter(_FORMAT))
        logger.addHandler(handler)
        logger.propagate = False
    return logger
