"""Resolve links that point at files on disk."""

import logging
from pathlib import Path

from ..errors import SectionLookupError
from ..models import Link, LinkStatus
from .sections import SectionResolver, split_section

logger = logging.getLogger(__name__)


class LocalResolver:
    """Check that local links point at existing files and sections."""

    def __init__(self, section_resolver: SectionResolver | None = None):
        self.sections = section_resolver or SectionResolver()

    def resolve(self, link: Link) -> LinkStatus:
        """Resolve a link relative to the directory of the file it was found in."""
        directory = link.location.parent if link.location.parent.parts else Path(".")
        base, section = split_section(link.raw)

        if base is None and section is None:
            return LinkStatus.unreachable()

        if base is not None:
            target = directory / base
            if not target.exists():
                return LinkStatus.unreachable()
            if section is None:
                return LinkStatus.reachable()
        else:
            target = link.location

        return self._resolve_section(target, section)

    def _resolve_section(self, target: Path, section: str) -> LinkStatus:
        try:
            found = self.sections.find(target, section)
        except SectionLookupError as e:
            logger.debug(f"Section lookup failed for {target}: {e.cause}")
            return LinkStatus.questionable(
                f"failed to resolve section #{section} ({e.cause})"
            )
        if found:
            return LinkStatus.reachable()
        return LinkStatus.questionable(f"failed to resolve section #{section}")
