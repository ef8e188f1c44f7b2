"""Data models for discovered links."""

from dataclasses import dataclass, field
from enum import Enum
from functools import total_ordering
from pathlib import Path
from typing import Optional

from .errors import LinkAlreadyVerifiedError


class LinkKind(Enum):
    LOCAL = "local"
    HTTP = "http"


class StatusKind(Enum):
    REACHABLE = "reachable"
    QUESTIONABLE = "questionable"
    UNREACHABLE = "unreachable"


@dataclass(frozen=True)
class LinkStatus:
    """Outcome of verifying a link.

    Questionable outcomes always carry a reason; unreachable ones may.
    """

    kind: StatusKind
    reason: Optional[str] = None

    @classmethod
    def reachable(cls) -> "LinkStatus":
        return cls(StatusKind.REACHABLE)

    @classmethod
    def questionable(cls, reason: str) -> "LinkStatus":
        return cls(StatusKind.QUESTIONABLE, reason)

    @classmethod
    def unreachable(cls, reason: str | None = None) -> "LinkStatus":
        return cls(StatusKind.UNREACHABLE, reason)

    @property
    def is_reachable(self) -> bool:
        return self.kind is StatusKind.REACHABLE

    @property
    def is_questionable(self) -> bool:
        return self.kind is StatusKind.QUESTIONABLE

    @property
    def is_unreachable(self) -> bool:
        return self.kind is StatusKind.UNREACHABLE


@total_ordering
@dataclass(eq=False)
class Link:
    """A reference found in a scanned file.

    ``location`` is shared between every link found in the same file.
    """

    location: Path
    line: int
    raw: str
    _kind: LinkKind = field(init=False, repr=False)
    _status: Optional[LinkStatus] = field(default=None, init=False, repr=False)

    def __post_init__(self) -> None:
        self._kind = LinkKind.HTTP if self.raw.startswith("http") else LinkKind.LOCAL

    @property
    def kind(self) -> LinkKind:
        return self._kind

    @property
    def status(self) -> Optional[LinkStatus]:
        return self._status

    @status.setter
    def status(self, value: LinkStatus) -> None:
        if self._status is not None:
            raise LinkAlreadyVerifiedError(f"{self} was already verified")
        self._status = value

    @property
    def is_verified(self) -> bool:
        return self._status is not None

    def _key(self) -> tuple[Path, int, str]:
        return (self.location, self.line, self.raw)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Link):
            return NotImplemented
        return self._key() == other._key()

    def __lt__(self, other: "Link") -> bool:
        if not isinstance(other, Link):
            return NotImplemented
        return self._key() < other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __str__(self) -> str:
        return f"{self.location} [line {self.line}]: {self.raw}"
