"""Leveled, optionally colored console logging."""

import logging
import sys

import click

LOGGER_NAME = "link_checker"

LEVEL_STYLES = {
    logging.DEBUG: ("DEBU: ", "cyan"),
    logging.INFO: ("INFO: ", "green"),
    logging.WARNING: ("WARN: ", "yellow"),
    logging.ERROR: ("ERRO: ", "red"),
}


def verbosity_to_level(verbosity: int) -> int:
    """Map a ``-v`` count to the minimum level shown."""
    if verbosity <= 0:
        return logging.ERROR
    if verbosity == 1:
        return logging.WARNING
    if verbosity == 2:
        return logging.INFO
    return logging.DEBUG


class StatusFormatter(logging.Formatter):
    """Prefix each message with its level and color it."""

    def __init__(self, color: bool = True):
        super().__init__("%(message)s")
        self.color = color

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        level = min(
            (lvl for lvl in LEVEL_STYLES if lvl >= record.levelno),
            default=logging.ERROR,
        )
        prefix, fg = LEVEL_STYLES[level]
        if self.color:
            return click.style(prefix, fg=fg, bold=True) + click.style(message, fg=fg)
        return prefix + message


def configure_logging(verbosity: int = 0, color: bool = True) -> logging.Logger:
    """Install a single stdout handler on the package logger."""
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(StatusFormatter(color=color))
    logger.addHandler(handler)
    logger.setLevel(verbosity_to_level(verbosity))
    return logger
