"""Run options and the context payload handed to publish targets."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from pubforge.models.artifacts import ArtifactSet
from pubforge.models.config import BuildConfig


class PublishMode(str, Enum):
    """Which of the three dispatcher behaviours a run uses."""

    LIVE = "live"
    SNAPSHOT = "snapshot"  # dry run: make, persist, publish nothing
    RESUME = "resume"  # dry-run resume: replay snapshots, never make


class PublishOptions(BaseModel):
    """Options for a single publish run.

    ``publish_targets`` may mix target names and target instances; ``None``
    falls back to the build config's ``publishers``.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    dir: Path
    interactive: bool = False
    publish_targets: list[Any] | None = None
    dry_run: bool = False
    dry_run_resume: bool = False
    make_options: dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _check_exclusive_modes(self) -> PublishOptions:
        if self.dry_run and self.dry_run_resume:
            raise ValueError("dry_run and dry_run_resume are mutually exclusive")
        return self

    @property
    def mode(self) -> PublishMode:
        if self.dry_run:
            return PublishMode.SNAPSHOT
        if self.dry_run_resume:
            return PublishMode.RESUME
        return PublishMode.LIVE


class MakeOptions(BaseModel):
    """What the make collaborator receives."""

    model_config = ConfigDict(frozen=True)

    dir: Path
    interactive: bool = False
    extra: dict[str, Any] = Field(default_factory=dict)


class PublishContext(BaseModel):
    """The payload delivered to a target's ``publish`` call.

    ``make_results`` is exactly one publish group. ``config`` is a copy of
    the run's build configuration. Both are copied per invocation.
    """

    model_config = ConfigDict(frozen=True)

    dir: Path
    make_results: tuple[ArtifactSet, ...]
    config: BuildConfig
