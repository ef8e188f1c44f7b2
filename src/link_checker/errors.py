"""Exceptions raised by the link checker."""

from pathlib import Path


class LinkCheckError(Exception):
    """Base class for link checker errors."""


class ExtractionError(LinkCheckError):
    """A file could not be read while scanning it for links."""

    def __init__(self, path: Path, cause: Exception):
        self.path = path
        self.cause = cause
        super().__init__(f"failed to scan {path}: {cause}")


class SectionLookupError(LinkCheckError):
    """A file could not be searched for a section heading."""

    def __init__(self, path: Path, cause: Exception):
        self.path = path
        self.cause = cause
        super().__init__(f"{path}: {cause}")


class LinkAlreadyVerifiedError(LinkCheckError):
    """A link's status was assigned more than once."""


class ResultChannelClosed(LinkCheckError):
    """Results were sent after the consumer stopped listening."""
