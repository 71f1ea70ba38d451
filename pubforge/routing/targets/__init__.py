"""Publish target protocol.

A publish target is anything with a ``publish(context)`` method. The
method may be a coroutine function or a plain function; the dispatcher
awaits whatever it returns when that is awaitable. Targets are built with a
single keyword argument, ``config``, holding the options from their build
config entry.
"""

from __future__ import annotations

from typing import Any, Awaitable, Protocol, runtime_checkable

from pubforge.models.publish import PublishContext


@runtime_checkable
class PublishTarget(Protocol):
    """Protocol every publish target must implement.

    Targets own everything about *how* artifacts are published: protocol,
    credentials, retries. They must treat ``context.config`` as read-only.
    """

    def publish(self, context: PublishContext) -> Awaitable[None] | None:
        """Publish one group of make results.

        Parameters
        ----------
        context:
            The working directory, one publish group, and the shared
            build configuration.
        """
        ...


def describe_target(target: Any) -> str:
    """Return a short label for a target, for log lines."""
    return getattr(target, "target_name", None) or type(target).__name__
