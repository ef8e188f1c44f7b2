"""Match files to link categories and extract links from them."""

import fnmatch
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Iterator, Sequence

from ..errors import ExtractionError
from ..models import Link


@dataclass(frozen=True)
class FileMatcher:
    """A category of files and the pattern used to find links inside them.

    The link pattern may carry any surrounding context, but the target of
    the link is always taken from capture group ``group``.
    """

    name: str
    globs: tuple[str, ...]
    link_pattern: str
    group: int = 1
    _regex: re.Pattern = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not self.globs:
            raise ValueError(f"file category {self.name!r} needs at least one glob")
        try:
            regex = re.compile(self.link_pattern)
        except re.error as e:
            raise ValueError(f"invalid link pattern for {self.name!r}: {e}") from e
        if not 1 <= self.group <= regex.groups:
            raise ValueError(
                f"link pattern for {self.name!r} has {regex.groups} groups, "
                f"cannot capture group {self.group}"
            )
        object.__setattr__(self, "globs", tuple(self.globs))
        object.__setattr__(self, "_regex", regex)

    @property
    def regex(self) -> re.Pattern:
        return self._regex

    def is_match(self, path: str | Path) -> bool:
        """Check whether a path belongs to this category."""
        path_str = str(path)
        name = Path(path_str).name
        return any(
            fnmatch.fnmatchcase(path_str, g) or fnmatch.fnmatchcase(name, g)
            for g in self.globs
        )

    def iter_links(self, path: Path) -> Iterator[Link]:
        """Yield every link in ``path`` in line order.

        Raises ExtractionError if the file cannot be read; links yielded
        before the failure remain valid.
        """
        location = Path(path)
        try:
            with open(location, encoding="utf-8") as f:
                for lnum, line in enumerate(f, start=1):
                    for match in self._regex.finditer(line):
                        raw = match.group(self.group)
                        if raw is None:
                            continue
                        yield Link(location, lnum, raw)
        except (OSError, UnicodeDecodeError) as e:
            raise ExtractionError(location, e) from e


def match_category(
    matchers: Iterable[FileMatcher], path: str | Path
) -> FileMatcher | None:
    """Return the first matcher that accepts ``path``, if any."""
    for matcher in matchers:
        if matcher.is_match(path):
            return matcher
    return None


SOURCE_COMMENTS = FileMatcher(
    name="source-comments",
    globs=("*.rs",),
    link_pattern=r"^\s*(///|//!).*\[[^\[\]]+\]\(([^\(\)]+)\)",
    group=2,
)

MARKDOWN = FileMatcher(
    name="markdown",
    globs=("*.md",),
    link_pattern=r"\[[^\[\]]+\]\(([^\(\)]+)\)",
    group=1,
)

DEFAULT_MATCHERS: Sequence[FileMatcher] = (SOURCE_COMMENTS, MARKDOWN)
