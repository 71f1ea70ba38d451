"""Make-output models: artifact sets and publish groups (immutable)."""

from __future__ import annotations

from typing import Any, Iterable

from pydantic import BaseModel, ConfigDict, Field


class ArtifactSet(BaseModel):
    """One maker's output: artifact paths plus the platform they target.

    ``platform`` and ``arch`` are optional; makes that build for the host
    only may leave them out.

    Paths are kept exactly as the make stage produced them (absolute or
    relative). They are resolved against the working directory of whoever
    consumes them, never re-rooted.

    Examples
    --------
    >>> s = ArtifactSet(artifacts=["out/make/app.zip"], platform="darwin", arch="x64")
    >>> s.package_metadata
    {}
    """

    model_config = ConfigDict(frozen=True)

    artifacts: list[str]
    platform: str | None = None
    arch: str | None = None
    package_metadata: dict[str, Any] = Field(default_factory=dict)


# All artifact sets produced by a single make invocation, in make order.
PublishGroup = list[ArtifactSet]


def coerce_group(raw: Iterable[ArtifactSet | dict[str, Any]]) -> PublishGroup:
    """Validate a make return value into a PublishGroup.

    Accepts ``ArtifactSet`` instances or plain dicts with the same keys.
    """
    return [
        item if isinstance(item, ArtifactSet) else ArtifactSet.model_validate(item)
        for item in raw
    ]


def flatten_artifacts(group: PublishGroup) -> list[str]:
    """Every artifact path in a group, in group order."""
    paths: list[str] = []
    for artifact_set in group:
        paths.extend(artifact_set.artifacts)
    return paths
