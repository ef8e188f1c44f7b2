"""Find section headings inside local files."""

import re
from pathlib import Path

from ..errors import SectionLookupError

SECTION_SUFFIX = re.compile(r"^(.*?)#+([A-Za-z0-9_-]+)$")


def split_section(raw: str) -> tuple[str | None, str | None]:
    """Split ``path#section`` into its base and section parts.

    A missing base (``#section``) means the section lives in the referring
    file itself.
    """
    match = SECTION_SUFFIX.match(raw)
    if not match:
        return (raw or None, None)
    base, section = match.group(1), match.group(2)
    return (base or None, section)


class SectionResolver:
    """Search a file for a line mentioning a section name.

    Anchors are slugs, so ``existing-heading`` matches a line containing
    ``Existing Heading`` anywhere, case-insensitively.
    """

    def find(self, path: Path, section: str) -> bool:
        term = re.compile(re.escape(section.replace("-", " ")), re.IGNORECASE)
        try:
            with open(path, encoding="utf-8") as f:
                for line in f:
                    if term.search(line):
                        return True
        except (OSError, UnicodeDecodeError) as e:
            raise SectionLookupError(path, e) from e
        return False
