"""Target resolver: turns publish target specs into runnable targets.

Resolution happens before any make or publish work, so an unknown target
name aborts the run with nothing built, persisted, or published.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Sequence
from typing import Any

from pubforge.models.config import BuildConfig
from pubforge.models.targets import InstanceTarget, NamedTarget, as_target_spec
from pubforge.plugins.loader import TargetLoader, TargetResolutionError
from pubforge.routing.targets import describe_target

logger = logging.getLogger(__name__)


class TargetResolver:
    """Resolves specs into target instances, preserving input order.

    Parameters
    ----------
    loader:
        Looks up factories for named targets.
    config:
        The run's build configuration; its ``publishers`` tuple is the
        default when no specs are given.
    host_platform:
        Platform compared against a named spec's ``platforms`` filter.
    """

    def __init__(
        self,
        loader: TargetLoader,
        config: BuildConfig,
        *,
        host_platform: str = sys.platform,
    ) -> None:
        self._loader = loader
        self._config = config
        self._host_platform = host_platform

    def resolve(self, specs: Sequence[Any] | None = None) -> list[Any]:
        """Return one runnable target per applicable spec, in spec order.

        Parameters
        ----------
        specs:
            Target names, ``PublisherEntry`` objects, target instances, or
            already-tagged specs, freely mixed. ``None`` means "use the
            configured publishers".

        Raises
        ------
        TargetResolutionError
            If a name cannot be loaded, its factory fails, or the factory
            returns something without a ``publish`` method.
        """
        if specs is None:
            specs = self._config.publishers

        targets: list[Any] = []
        for raw in specs:
            try:
                spec = as_target_spec(raw)
            except (TypeError, ValueError) as exc:
                raise TargetResolutionError(str(exc)) from exc

            match spec:
                case InstanceTarget(target=target):
                    targets.append(target)
                case NamedTarget() if not self._applies_here(spec):
                    logger.info(
                        "Skipping target '%s': not enabled for platform %s",
                        spec.name,
                        self._host_platform,
                    )
                case NamedTarget():
                    targets.append(self._instantiate(spec))

        logger.debug(
            "Resolved %d publish target(s): %s",
            len(targets),
            ", ".join(describe_target(t) for t in targets) or "-",
        )
        return targets

    def _applies_here(self, spec: NamedTarget) -> bool:
        return spec.platforms is None or self._host_platform in spec.platforms

    def _instantiate(self, spec: NamedTarget) -> Any:
        factory = self._loader.load(spec.name)
        try:
            target = factory(config=dict(spec.config))
        except Exception as exc:
            raise TargetResolutionError(
                f"Failed to construct publish target '{spec.name}': {exc}"
            ) from exc

        if not callable(getattr(target, "publish", None)):
            raise TargetResolutionError(
                f"Publish target '{spec.name}' has no publish() method"
            )
        return target
