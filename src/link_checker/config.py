"""Configuration management."""

import os
from dataclasses import dataclass, replace
from pathlib import Path

import yaml
from dotenv import load_dotenv

# Load .env file from current working directory
load_dotenv()

DEFAULT_USER_AGENT = "check-links/0.1"

TRUE_STRINGS = {"true", "yes", "on", "1"}
FALSE_STRINGS = {"false", "no", "off", "0"}


def _as_bool(value) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in TRUE_STRINGS:
        return True
    if text in FALSE_STRINGS:
        return False
    raise ValueError(f"expected true or false, got {value!r}")


@dataclass
class Config:
    """Run configuration."""

    root: Path = Path(".")
    concurrency: int = 32
    timeout_seconds: float = 10.0
    verbosity: int = 0
    color: bool = True
    max_depth: int | None = None
    user_agent: str = DEFAULT_USER_AGENT
    sort: bool = False

    @classmethod
    def from_yaml(cls, path: str | Path) -> "Config":
        """Load configuration from YAML file.

        Missing keys fall back to the defaults above.
        """
        with open(path) as f:
            try:
                data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ValueError(f"could not parse {path}: {e}") from e

        if not isinstance(data, dict):
            raise ValueError(f"{path} must contain a mapping of options")

        defaults = cls()
        max_depth = data.get("max_depth", defaults.max_depth)
        try:
            return cls(
                root=Path(data.get("root", defaults.root)).expanduser(),
                concurrency=int(data.get("concurrency", defaults.concurrency)),
                timeout_seconds=float(
                    data.get("timeout_seconds", defaults.timeout_seconds)
                ),
                verbosity=int(data.get("verbosity", defaults.verbosity)),
                color=_as_bool(data.get("color", defaults.color)),
                max_depth=int(max_depth) if max_depth is not None else None,
                user_agent=str(data.get("user_agent", defaults.user_agent)),
                sort=_as_bool(data.get("sort", defaults.sort)),
            )
        except (TypeError, ValueError) as e:
            raise ValueError(f"invalid option in {path}: {e}") from e

    def with_env(self) -> "Config":
        """Apply environment overrides.

        - CHECK_LINKS_CONCURRENCY: Maximum verifications in flight
        - CHECK_LINKS_TIMEOUT: Network timeout in seconds
        """
        cfg = self
        concurrency = os.environ.get("CHECK_LINKS_CONCURRENCY")
        if concurrency:
            cfg = replace(cfg, concurrency=int(concurrency))
        timeout = os.environ.get("CHECK_LINKS_TIMEOUT")
        if timeout:
            cfg = replace(cfg, timeout_seconds=float(timeout))
        return cfg

    def validate(self) -> "Config":
        if self.concurrency < 1:
            raise ValueError("concurrency must be a positive integer")
        if self.timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be greater than zero")
        if self.max_depth is not None and self.max_depth < 0:
            raise ValueError("max_depth cannot be negative")
        return self
