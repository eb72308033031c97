"""Build configuration helpers."""

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Optional

import yaml

from .constants import (
    DEFAULT_FALLBACK,
    DEFAULT_GITREF,
    DEFAULT_OUTPUT,
    FALLBACK_POLICIES,
    GITREF_ENV,
)
from .errors import ConfigError


@dataclass
class GustConfig:
    """Settings for a build, from .gust/config.yaml in the work tree."""

    gitref: str = DEFAULT_GITREF
    output: str = DEFAULT_OUTPUT
    fallback: str = DEFAULT_FALLBACK  # "now" or "reference"

    def override(
        self,
        gitref: Optional[str] = None,
        output: Optional[str] = None,
        fallback: Optional[str] = None,
    ) -> "GustConfig":
        """Return a copy with explicitly given values replacing configured ones."""
        updated = replace(
            self,
            gitref=gitref or self.gitref,
            output=output or self.output,
            fallback=fallback or self.fallback,
        )
        _validate(updated)
        return updated


def load_config(cfg_path: Path) -> GustConfig:
    """Load configuration, applying the GUST_GITREF environment override.

    Raises:
        ConfigError: If the file exists but cannot be parsed or is invalid
    """
    config = GustConfig()
    if cfg_path.exists():
        try:
            data = yaml.safe_load(cfg_path.read_text()) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Cannot read {cfg_path}: {e}")
        if not isinstance(data, dict):
            raise ConfigError(f"{cfg_path} must contain a mapping")

        unknown = set(data) - {"gitref", "output", "fallback"}
        if unknown:
            raise ConfigError(f"Unknown keys in {cfg_path}: {', '.join(sorted(unknown))}")

        config = GustConfig(
            gitref=str(data.get("gitref", DEFAULT_GITREF)),
            output=str(data.get("output", DEFAULT_OUTPUT)),
            fallback=str(data.get("fallback", DEFAULT_FALLBACK)),
        )

    env_gitref = os.environ.get(GITREF_ENV)
    if env_gitref:
        config.gitref = env_gitref

    _validate(config)
    return config


def _validate(config: GustConfig) -> None:
    if config.fallback not in FALLBACK_POLICIES:
        raise ConfigError(
            f"fallback must be one of {', '.join(FALLBACK_POLICIES)}, got '{config.fallback}'"
        )
    if not config.gitref.strip():
        raise ConfigError("gitref must not be empty")
