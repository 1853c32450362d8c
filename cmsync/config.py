"""Configuration for cmsync.

Configuration is an explicit object handed to the store and the CLI; nothing
here is read at import time. Values come from a YAML file, from environment
variables, or from CLI options, in increasing order of precedence.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path

import yaml

ENV_PREFIX = "CMSYNC_"


@dataclass
class Config:
    """Where the remote copy lives and how much to log."""

    space_id: str = "default"
    environment: str = "master"
    store_dir: str = ".cmsync"
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls, base: Config | None = None) -> Config:
        """Overlay ``CMSYNC_*`` environment variables on ``base``."""
        config = base or cls()
        overrides = {}
        for f in fields(cls):
            value = os.environ.get(ENV_PREFIX + f.name.upper())
            if value:
                overrides[f.name] = value
        return replace(config, **overrides)

    def with_overrides(self, **overrides: str | None) -> Config:
        """Return a copy with every non-empty override applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v})

    @property
    def level(self) -> int:
        level = logging.getLevelName(self.log_level.upper())
        return level if isinstance(level, int) else logging.WARNING


def load_config(path: str | Path) -> Config:
    """Load a configuration from a YAML file. Unknown keys are rejected."""
    with open(path) as f:
        data = yaml.safe_load(f) or {}

    known = {f.name for f in fields(Config)}
    unknown = set(data) - known
    if unknown:
        raise ValueError(f"Unknown configuration key(s): {', '.join(sorted(unknown))}")

    return Config(**{k: str(v) for k, v in data.items()})
