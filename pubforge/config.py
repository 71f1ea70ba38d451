"""Runtime settings: env-driven.

Centralized settings using pydantic-settings. Reads from a .env file and
PUBFORGE_* environment variables. These govern how the tool itself behaves
(logging, plugin discovery, on-disk names); what gets published is decided
by the per-project ``BuildConfig`` in ``pubforge.models.config``.
"""

from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class PubforgeSettings(BaseSettings):
    """Runtime settings with environment variable overrides.

    Examples
    --------
    Override via environment::

        export PUBFORGE_LOG_LEVEL=DEBUG
        export PUBFORGE_SNAPSHOT_DIR_NAME=publish-checkpoint
        export PUBFORGE_DISCOVER_ENTRY_POINTS=false
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="PUBFORGE_",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: str = "INFO"

    # Name of the snapshot root under the build output directory
    snapshot_dir_name: str = "publish-dry-run"

    # Project config file looked up in the working directory before
    # falling back to [tool.pubforge] in pyproject.toml
    config_filename: str = "pubforge.toml"

    # Look up publish targets in the ``pubforge.targets`` entry-point group
    discover_entry_points: bool = True


# Module-level singleton, import as `from pubforge.config import settings`
settings = PubforgeSettings()
