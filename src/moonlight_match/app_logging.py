"""Logging configuration helpers."""

import logging

_LOGGER_NAME = "moonlight_match"


def resolve_level(level: str | int) -> int:
    """Turn a level name such as ``"debug"`` into its numeric value."""
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.strip().upper())
    if not isinstance(resolved, int):
        raise ValueError(f"unknown log level: {level!r}")
    return resolved


def configure_logging(level: str | int = logging.INFO) -> None:
    """Send client logs to a single stream handler at the given level.

    Calling it again only adjusts the level.
    """
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(resolve_level(level))
    if logger.handlers:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)s: %(name)s: %(message)s")
    )
    logger.addHandler(handler)
    logger.propagate = False
