"""Shared test fixtures for pubforge."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from pubforge.core.snapshot_store import SnapshotStore
from pubforge.models.artifacts import ArtifactSet
from pubforge.models.config import BuildConfig
from pubforge.models.publish import MakeOptions, PublishContext
from pubforge.plugins.loader import TargetLoader


class RecordingTarget:
    """A target that remembers every context it was handed."""

    def __init__(
        self,
        config: dict[str, Any] | None = None,
        *,
        calls: list[PublishContext] | None = None,
        name: str = "recording",
    ) -> None:
        self.config = config or {}
        self.calls: list[PublishContext] = [] if calls is None else calls
        self.target_name = name

    async def publish(self, context: PublishContext) -> None:
        self.calls.append(context)


class FakeMake:
    """A make collaborator returning a fixed group and counting calls."""

    def __init__(self, group: list[Any] | None = None) -> None:
        self.group: list[Any] = list(group or [])
        self.calls: list[MakeOptions] = []

    def __call__(self, options: MakeOptions) -> list[Any]:
        self.calls.append(options)
        return list(self.group)

    @property
    def call_count(self) -> int:
        return len(self.calls)


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """Provide an empty project directory."""
    path = tmp_path / "project"
    path.mkdir()
    return path


@pytest.fixture
def build_config() -> BuildConfig:
    """Provide a BuildConfig with no configured publishers."""
    return BuildConfig(project_name="dummy_app")


@pytest.fixture
def snapshot_store(tmp_path: Path) -> SnapshotStore:
    """Provide a SnapshotStore rooted in a temp directory."""
    return SnapshotStore(tmp_path / "out" / "publish-dry-run")


@pytest.fixture
def fake_make() -> FakeMake:
    """Provide a make collaborator that returns an empty group."""
    return FakeMake()


@pytest.fixture
def make_artifact_set() -> Callable[..., ArtifactSet]:
    """Factory fixture: build an ArtifactSet with sensible defaults."""

    def _factory(
        artifacts: list[str] | None = None,
        platform: str = "linux",
        arch: str = "x64",
        **overrides: Any,
    ) -> ArtifactSet:
        defaults: dict[str, Any] = {
            "artifacts": artifacts if artifacts is not None else ["out/make/app.tar.gz"],
            "platform": platform,
            "arch": arch,
            "package_metadata": {"name": "dummy_app", "version": "1.0.0"},
        }
        defaults.update(overrides)
        return ArtifactSet(**defaults)

    return _factory


@pytest.fixture
def platform_group() -> Callable[[Path, str], list[ArtifactSet]]:
    """Factory fixture: three artifact sets for one platform, as one make run."""

    def _factory(root: Path, platform: str) -> list[ArtifactSet]:
        metadata = {"state": 1 if platform == "darwin" else 0}
        make_dir = root / "out" / "make"
        return [
            ArtifactSet(
                artifacts=[
                    str(make_dir / f"artifact1-{platform}"),
                    str(make_dir / f"artifact2-{platform}"),
                ],
                platform=platform,
                arch="x64",
                package_metadata=metadata,
            ),
            ArtifactSet(
                artifacts=[str(make_dir / f"artifact3-{platform}")],
                platform=platform,
                arch="x64",
                package_metadata=metadata,
            ),
            ArtifactSet(
                artifacts=[str(make_dir / f"artifact4-{platform}")],
                platform=platform,
                arch="x64",
                package_metadata=metadata,
            ),
        ]

    return _factory


@pytest.fixture
def recording_target() -> Callable[..., RecordingTarget]:
    """Factory fixture: build a RecordingTarget instance."""

    def _factory(
        name: str = "recording", calls: list[PublishContext] | None = None
    ) -> RecordingTarget:
        return RecordingTarget(calls=calls, name=name)

    return _factory


@pytest.fixture
def publish_calls() -> list[PublishContext]:
    """Shared call log for every RecordingTarget built by ``loader``."""
    return []


@pytest.fixture
def loader(publish_calls: list[PublishContext]) -> TargetLoader:
    """Provide a TargetLoader with recording targets named test, void, nowhere.

    ``test`` appends to ``publish_calls``; ``void`` and ``nowhere`` keep
    their own logs, reachable through ``loader.instances``.
    """
    instances: dict[str, list[RecordingTarget]] = {"test": [], "void": [], "nowhere": []}

    def _factory(name: str, calls: list[PublishContext] | None = None):
        def _build(config: dict[str, Any]) -> RecordingTarget:
            target = RecordingTarget(config, calls=calls, name=name)
            instances[name].append(target)
            return target

        return _build

    result = TargetLoader(
        {
            "test": _factory("test", publish_calls),
            "void": _factory("void"),
            "nowhere": _factory("nowhere"),
        },
        discover_entry_points=False,
    )
    result.instances = instances  # type: ignore[attr-defined]
    return result
