"""Shared pytest fixtures."""

import logging
from pathlib import Path

import pytest

from link_checker.reporting.log import LOGGER_NAME


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Undo configure_logging() so handlers never outlive a CliRunner stream."""
    yield
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def write(tmp_path):
    """Write a text file under tmp_path, creating parent directories."""

    def _write(rel: str, content: str) -> Path:
        path = tmp_path / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    return _write
