"""Walk a directory tree for files that may contain links."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

import pathspec

logger = logging.getLogger(__name__)

IGNORE_FILE = ".gitignore"


@dataclass(frozen=True)
class IgnoreFile:
    """Patterns from one ignore file, relative to the directory holding it."""

    base: Path
    spec: pathspec.GitIgnoreSpec

    def matches(self, path: Path, is_dir: bool) -> bool:
        try:
            rel = path.relative_to(self.base).as_posix()
        except ValueError:
            return False
        if is_dir:
            rel += "/"
        return self.spec.match_file(rel)


def load_ignore_file(directory: Path) -> IgnoreFile | None:
    """Read the ignore file in ``directory``, if there is a readable one."""
    ignore_path = directory / IGNORE_FILE
    try:
        if not ignore_path.is_file():
            return None
        lines = ignore_path.read_text(encoding="utf-8").splitlines()
    except (OSError, UnicodeDecodeError) as e:
        logger.warning(f"Could not read {ignore_path}: {e}")
        return None
    return IgnoreFile(directory, pathspec.GitIgnoreSpec.from_lines(lines))


class DirectoryScanner:
    """Scan a directory tree, skipping hidden and ignored entries."""

    def __init__(self, root: Path, max_depth: int | None = None):
        self.root = Path(root)
        self.max_depth = max_depth

    def scan(self) -> Iterator[Path]:
        """
        Lazily yield the regular files under the root.

        Entries are visited in name order within each directory. Children of
        the root are at depth 1; with ``max_depth=0`` nothing is yielded.
        Directories that cannot be listed are logged and skipped.

        Yields:
            Paths of files, prefixed with the root as given
        """
        if self.root.is_file():
            yield self.root
            return
        yield from self._walk(self.root, 1, [])

    def _walk(
        self, directory: Path, depth: int, ignores: list[IgnoreFile]
    ) -> Iterator[Path]:
        if self.max_depth is not None and depth > self.max_depth:
            return

        local = load_ignore_file(directory)
        if local is not None:
            ignores = ignores + [local]

        try:
            entries = sorted(os.scandir(directory), key=lambda e: e.name)
        except OSError as e:
            logger.warning(f"Could not list {directory}: {e}")
            return

        for entry in entries:
            if entry.name.startswith("."):
                continue
            path = directory / entry.name
            try:
                is_dir = entry.is_dir(follow_symlinks=False)
                is_file = not is_dir and entry.is_file()
            except OSError as e:
                logger.warning(f"Could not stat {path}: {e}")
                continue
            if any(ignore.matches(path, is_dir) for ignore in ignores):
                logger.debug(f"Ignoring {path}")
                continue
            if is_dir:
                yield from self._walk(path, depth + 1, ignores)
            elif is_file:
                yield path
