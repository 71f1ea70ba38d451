"""Target loader: turns a publish target name into something constructible.

Names are looked up in this order:

1. factories injected by the caller (a plain ``name -> factory`` mapping),
2. the built-in targets (``noop``, ``local_file``),
3. installed distributions advertising the name in the
   ``pubforge.targets`` entry-point group,
4. a dotted import path of the form ``package.module:Attribute``.

A factory is any callable that accepts ``config=<dict>`` and returns an
object with a ``publish`` method, usually the target class itself.
"""

from __future__ import annotations

import importlib
import logging
from collections.abc import Callable, Mapping
from importlib.metadata import EntryPoint, entry_points
from typing import Any

from pubforge.config import settings

logger = logging.getLogger(__name__)

ENTRY_POINT_GROUP = "pubforge.targets"

BUILTIN_TARGETS: dict[str, str] = {
    "noop": "pubforge.routing.targets.noop:NoopTarget",
    "local_file": "pubforge.routing.targets.local_file:LocalFileTarget",
}

TargetFactory = Callable[..., Any]


class TargetResolutionError(LookupError):
    """Raised when a publish target name cannot be loaded or instantiated."""


def import_object(path: str) -> Any:
    """Import ``package.module:Attribute`` and return the attribute.

    Raises
    ------
    ValueError
        If *path* is not of the ``module:attribute`` form.
    ImportError, AttributeError
        If the module or attribute does not exist.

    Examples
    --------
    >>> import_object("pathlib:Path").__name__
    'Path'
    """
    module_name, sep, attr_path = path.partition(":")
    if not sep or not module_name or not attr_path:
        raise ValueError(f"Expected 'module:attribute', got {path!r}")
    obj: Any = importlib.import_module(module_name)
    for part in attr_path.split("."):
        obj = getattr(obj, part)
    return obj


class TargetLoader:
    """Looks up publish target factories by name.

    Parameters
    ----------
    factories:
        Extra ``name -> factory`` entries. These win over every other
        source, which keeps tests free of any real module lookups.
    builtins:
        Whether the built-in targets are available.
    discover_entry_points:
        Whether to search the ``pubforge.targets`` entry-point group.
        Defaults to ``settings.discover_entry_points``.

    Examples
    --------
    >>> loader = TargetLoader(discover_entry_points=False)
    >>> loader.load("noop").__name__
    'NoopTarget'
    """

    def __init__(
        self,
        factories: Mapping[str, TargetFactory] | None = None,
        *,
        builtins: bool = True,
        discover_entry_points: bool | None = None,
    ) -> None:
        self._factories: dict[str, TargetFactory] = dict(factories or {})
        self._builtins = builtins
        self._discover = (
            settings.discover_entry_points
            if discover_entry_points is None
            else discover_entry_points
        )

    def register(self, name: str, factory: TargetFactory) -> None:
        """Add or replace an injected factory."""
        self._factories[name] = factory
        logger.debug("Registered target factory '%s'", name)

    def load(self, name: str) -> TargetFactory:
        """Return the factory for *name*.

        Raises
        ------
        TargetResolutionError
            If no source knows *name*, or importing it fails.
        """
        if name in self._factories:
            return self._factories[name]

        try:
            if self._builtins and name in BUILTIN_TARGETS:
                return import_object(BUILTIN_TARGETS[name])

            if self._discover:
                entry_point = self._find_entry_point(name)
                if entry_point is not None:
                    logger.debug("Loading target '%s' from %s", name, entry_point.value)
                    return entry_point.load()

            if ":" in name:
                return import_object(name)
        except (ImportError, AttributeError, ValueError) as exc:
            raise TargetResolutionError(
                f"Failed to load publish target '{name}': {exc}"
            ) from exc

        raise TargetResolutionError(f"Unknown publish target '{name}'")

    def available(self) -> dict[str, str]:
        """Map every known target name to where it comes from."""
        found: dict[str, str] = {}
        if self._discover:
            for entry_point in entry_points(group=ENTRY_POINT_GROUP):
                found[entry_point.name] = entry_point.value
        if self._builtins:
            found.update(BUILTIN_TARGETS)
        for name, factory in self._factories.items():
            found[name] = getattr(factory, "__qualname__", repr(factory))
        return dict(sorted(found.items()))

    def _find_entry_point(self, name: str) -> EntryPoint | None:
        matches = entry_points(group=ENTRY_POINT_GROUP, name=name)
        for entry_point in matches:
            return entry_point
        return None
