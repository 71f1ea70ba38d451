"""PublishDispatcher: hands make output to every resolved publish target.

A run works in one of three modes:

* **live**: run make once, then publish its group to each target.
* **snapshot** (dry run): run make once and persist the group to the
  snapshot store. No target is invoked.
* **resume** (dry-run resume): never run make. Load every persisted group
  and publish each one to each target.

Dispatch is strictly sequential. Each ``publish`` call is awaited to
completion before the next one starts, because targets may share remote
state (a release record, say) and must not interleave. The first failing
target aborts the rest of the run.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
import sys
from collections.abc import Awaitable, Callable, Iterable
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict

from pubforge.core.snapshot_store import SnapshotStore
from pubforge.models.artifacts import ArtifactSet, PublishGroup, coerce_group
from pubforge.models.config import BuildConfig, load_build_config
from pubforge.models.publish import MakeOptions, PublishContext, PublishMode, PublishOptions
from pubforge.plugins.loader import TargetLoader
from pubforge.plugins.resolver import TargetResolver
from pubforge.routing.targets import describe_target

logger = logging.getLogger(__name__)

MakeResult = Iterable[ArtifactSet | dict[str, Any]]
MakeCallable = Callable[[MakeOptions], MakeResult | Awaitable[MakeResult]]


class MakeError(RuntimeError):
    """Raised when the make collaborator is missing or fails."""


class TargetInvocationError(RuntimeError):
    """Raised when a target's ``publish`` call fails.

    The original exception is chained as ``__cause__``.
    """

    def __init__(self, target: str, group_index: int, cause: BaseException) -> None:
        super().__init__(
            f"Publish target {target} failed on group {group_index}: {cause}"
        )
        self.target = target
        self.group_index = group_index


class PublishReport(BaseModel):
    """What a run did."""

    model_config = ConfigDict(frozen=True)

    mode: PublishMode
    targets: list[str]
    groups: int
    invocations: int
    snapshot_record: Path | None = None


class PublishDispatcher:
    """Runs make, snapshot, and publish steps for one build configuration.

    Parameters
    ----------
    config:
        The run's build configuration. Each target invocation receives a
        deep copy of it.
    make:
        The make collaborator. Called with ``MakeOptions``; may be a
        coroutine function. Not needed for resume runs.
    loader:
        Target loader used to resolve target names.
    snapshot_root:
        Overrides the snapshot directory derived from the build config.
    host_platform:
        Platform used to filter configured publishers.

    Usage
    -----
    >>> dispatcher = PublishDispatcher(config, make=make)
    >>> asyncio.run(dispatcher.run(PublishOptions(dir=project_dir)))
    """

    def __init__(
        self,
        config: BuildConfig,
        *,
        make: MakeCallable | None = None,
        loader: TargetLoader | None = None,
        snapshot_root: Path | None = None,
        host_platform: str = sys.platform,
    ) -> None:
        self.config = config
        self._make = make
        self._loader = loader or TargetLoader()
        self._snapshot_root = snapshot_root
        self._host_platform = host_platform

    def snapshot_store(self, options: PublishOptions) -> SnapshotStore:
        """A fresh store for one run; its first persist clears the root."""
        root = self._snapshot_root or self.config.snapshot_root(options.dir)
        return SnapshotStore(root)

    # ------------------------------------------------------------------
    # Run
    # ------------------------------------------------------------------

    async def run(self, options: PublishOptions) -> PublishReport:
        """Execute one publish run in the mode selected by *options*.

        Raises
        ------
        TargetResolutionError
            Before make or any invocation, if a target cannot be resolved.
        MakeError
            If make fails, or a dry run's make produces nothing; nothing
            is persisted or published.
        SnapshotPersistError, SnapshotCorruptionError
            If the snapshot store cannot be written or read.
        TargetInvocationError
            If a target fails; later invocations are not attempted.
        """
        mode = options.mode
        resolver = TargetResolver(
            self._loader, self.config, host_platform=self._host_platform
        )
        targets = resolver.resolve(options.publish_targets)
        labels = [describe_target(t) for t in targets]
        store = self.snapshot_store(options)

        logger.info(
            "Starting %s publish in %s with %d target(s)%s",
            mode.value,
            options.dir,
            len(targets),
            " (interactive)" if options.interactive else "",
        )

        if mode is PublishMode.RESUME:
            groups = await asyncio.to_thread(store.load_all)
            invocations = await self._dispatch(options, targets, groups)
            return PublishReport(
                mode=mode, targets=labels, groups=len(groups), invocations=invocations
            )

        group = await self._run_make(options)

        if mode is PublishMode.SNAPSHOT:
            if not group:
                raise MakeError("Make produced no artifact sets; nothing to snapshot")
            record = await asyncio.to_thread(store.persist, group)
            return PublishReport(
                mode=mode, targets=labels, groups=1, invocations=0, snapshot_record=record
            )

        invocations = await self._dispatch(options, targets, [group])
        return PublishReport(mode=mode, targets=labels, groups=1, invocations=invocations)

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    async def _run_make(self, options: PublishOptions) -> PublishGroup:
        if self._make is None:
            raise MakeError("No make step configured for a live or dry-run publish")

        make_options = MakeOptions(
            dir=options.dir,
            interactive=options.interactive,
            extra=dict(options.make_options),
        )
        try:
            result = self._make(make_options)
            if inspect.isawaitable(result):
                result = await result
            group = coerce_group(result)
        except Exception as exc:
            raise MakeError(f"Make failed: {exc}") from exc

        logger.info("Make produced %d artifact set(s)", len(group))
        return group

    async def _dispatch(
        self,
        options: PublishOptions,
        targets: list[Any],
        groups: list[PublishGroup],
    ) -> int:
        """Publish every group to every target, one call at a time."""
        invocations = 0
        for index, group in enumerate(groups):
            for target in targets:
                label = describe_target(target)
                context = self._context(options, group)
                logger.info(
                    "Publishing group %d/%d (%d artifact set(s)) to %s",
                    index + 1,
                    len(groups),
                    len(group),
                    label,
                )
                try:
                    result = target.publish(context)
                    if inspect.isawaitable(result):
                        await result
                except Exception as exc:
                    logger.error("Target %s failed on group %d: %s", label, index, exc)
                    raise TargetInvocationError(label, index, exc) from exc
                invocations += 1
        return invocations

    def _context(self, options: PublishOptions, group: PublishGroup) -> PublishContext:
        # No target may see edits made by an earlier one.
        return PublishContext(
            dir=options.dir,
            make_results=tuple(s.model_copy(deep=True) for s in group),
            config=self.config.model_copy(deep=True),
        )


async def publish(
    options: PublishOptions,
    *,
    make: MakeCallable | None = None,
    config: BuildConfig | None = None,
    loader: TargetLoader | None = None,
) -> PublishReport:
    """Load the build config for ``options.dir`` (unless given) and run."""
    if config is None:
        config = await asyncio.to_thread(load_build_config, options.dir)
    dispatcher = PublishDispatcher(config, make=make, loader=loader)
    return await dispatcher.run(options)
