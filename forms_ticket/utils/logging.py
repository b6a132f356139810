"""Logging utilities.

This module provides a unified logging interface for the ticket codec so
that every module logs under the ``forms_ticket`` namespace with the same
format.

Notes
-----
Key material, hex tickets and ticket contents must never be passed to
these loggers.
"""

import logging

_LOGGERS: dict = {}


def get_logger(name: str) -> logging.Logger:
    """Get a configured logger for the given module.

    Parameters
    ----------
    name : str
        Module name (typically __name__).

    Returns
    -------
    logging.Logger
        Configured logger instance.

    Notes
    -----
    Always use this function instead of direct logging.getLogger().

    Examples
    --------
    >>> logger = get_logger(__name__)
    >>> logger.info("Codec configured")
    INFO:forms_ticket.codec:Codec configured
    """
    if name not in _LOGGERS:
        qualified = name if name.startswith("forms_ticket") else f"forms_ticket.{name}"
        logger = logging.getLogger(qualified)
        if not logger.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter(
                "%(levelname)s:%(name)s:%(message)s"
            )
            handler.setFormatter(formatter)
            logger.addHandler(handler)
            logger.propagate = False
        _LOGGERS[name] = logger
    return _LOGGERS[name]


def set_log_level(level: str) -> None:
    """Set the logging level for all codec loggers.

    Parameters
    ----------
    level : str
        Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    for logger in _LOGGERS.values():
        logger.setLevel(numeric_level)
