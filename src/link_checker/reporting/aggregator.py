"""Collect verified links, report them, and decide the exit status."""

import logging
from dataclasses import dataclass
from typing import AsyncIterable

from ..models import Link

logger = logging.getLogger(__name__)

DETAIL_INDENT = "\n        ► "


def pluralize(count: int, noun: str) -> str:
    return f"{count} {noun}" if count == 1 else f"{count} {noun}s"


@dataclass
class RunSummary:
    """Tally of verification outcomes for a run."""

    reachable: int = 0
    warnings: int = 0
    errors: int = 0

    @property
    def total(self) -> int:
        return self.reachable + self.warnings + self.errors

    @property
    def exit_code(self) -> int:
        return 1 if self.errors else 0

    def describe(self) -> str:
        if self.total == 0:
            return "no links found"
        found = f"out of {pluralize(self.total, 'link')} found"
        if self.errors:
            return (
                f"{pluralize(self.errors, 'error')}, "
                f"{pluralize(self.warnings, 'warning')} {found}"
            )
        return f"No errors, {pluralize(self.warnings, 'warning')} {found}"


class ResultAggregator:
    """Report each verified link as it arrives and keep counts.

    With ``sort=True`` links are held back and reported in file/line order
    once every result is in.
    """

    def __init__(self, sort: bool = False):
        self.sort = sort
        self.summary = RunSummary()

    async def consume(self, links: AsyncIterable[Link]) -> RunSummary:
        """Read links until the producer side is finished."""
        held: list[Link] = []
        async for link in links:
            if self.sort:
                held.append(link)
            else:
                self.record(link)
        for link in sorted(held):
            self.record(link)
        self.finish()
        return self.summary

    def record(self, link: Link) -> None:
        status = link.status
        if status is None:
            raise ValueError(f"{link} reached the aggregator unverified")

        if status.is_reachable:
            self.summary.reachable += 1
            logger.info(f"✓ {link}")
        elif status.is_questionable:
            self.summary.warnings += 1
            logger.warning(f"✗ {link}{DETAIL_INDENT}{status.reason}")
        else:
            self.summary.errors += 1
            if status.reason:
                logger.error(f"✗ {link}{DETAIL_INDENT}{status.reason}")
            else:
                logger.error(f"✗ {link}")

    def finish(self) -> None:
        """Log the summary line."""
        message = self.summary.describe()
        if self.summary.errors:
            logger.error(message)
        else:
            logger.info(message)
