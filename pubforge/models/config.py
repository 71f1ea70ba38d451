"""Build configuration models and loader.

A ``BuildConfig`` is constructed once per run and is read-only from then
on. Each publish target invocation gets its own deep copy, so targets can
introspect sibling configuration but a change made by one never reaches
another or the run itself.
"""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from pubforge.config import settings

logger = logging.getLogger(__name__)


class ConfigError(ValueError):
    """Raised when a project's build configuration cannot be loaded."""


class PublisherEntry(BaseModel):
    """A configured publish target with constructor options.

    ``platforms`` restricts the entry to the listed host platforms; ``None``
    means the entry applies everywhere.

    Examples
    --------
    >>> entry = PublisherEntry(name="local_file", config={"path": "dist/manifests"})
    >>> entry.platforms is None
    True
    """

    model_config = ConfigDict(frozen=True)

    name: str
    config: dict[str, Any] = Field(default_factory=dict)
    platforms: list[str] | None = None


class BuildConfig(BaseModel):
    """Project-level configuration for a publish run.

    Loaded from pubforge.toml or pyproject.toml [tool.pubforge].
    """

    model_config = ConfigDict(frozen=True)

    project_name: str = "app"
    out_dir: Path = Path("out")
    publishers: tuple[str | PublisherEntry, ...] = ()
    extra: dict[str, Any] = Field(default_factory=dict)

    def snapshot_root(self, dir: Path, dir_name: str | None = None) -> Path:
        """Where dry-run snapshots live for a project rooted at *dir*."""
        return Path(dir) / self.out_dir / (dir_name or settings.snapshot_dir_name)


def load_build_config(dir: Path | str) -> BuildConfig:
    """Load the build configuration for the project at *dir*.

    Looks for ``pubforge.toml`` first, then a ``[tool.pubforge]`` table in
    ``pyproject.toml``. A project with neither gets the defaults.

    Raises
    ------
    ConfigError
        If a config file exists but is not valid TOML or fails validation.
    """
    root = Path(dir)
    config_path = root / settings.config_filename
    pyproject_path = root / "pyproject.toml"

    if config_path.is_file():
        raw = _read_toml(config_path)
        source = config_path
    elif pyproject_path.is_file():
        raw = _read_toml(pyproject_path).get("tool", {}).get("pubforge", {})
        source = pyproject_path
    else:
        logger.debug("No build config found in %s, using defaults.", root)
        return BuildConfig()

    try:
        config = BuildConfig.model_validate(raw)
    except ValidationError as exc:
        raise ConfigError(f"Invalid build config in '{source}': {exc}") from exc

    logger.debug(
        "Loaded build config from %s (%d publisher(s)).",
        source,
        len(config.publishers),
    )
    return config


def _read_toml(path: Path) -> dict[str, Any]:
    try:
        with path.open("rb") as fh:
            return tomllib.load(fh)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ConfigError(f"Cannot read '{path}': {exc}") from exc
