"""No-op target: accepts every publish and does nothing with it."""

from __future__ import annotations

import logging
from typing import Any

from pubforge.models.publish import PublishContext

logger = logging.getLogger(__name__)


class NoopTarget:
    """Publish target for local runs and tests."""

    target_name = "noop"

    def __init__(self, config: dict[str, Any] | None = None) -> None:
        self.config = dict(config or {})

    async def publish(self, context: PublishContext) -> None:
        logger.debug(
            "NoopTarget: ignoring %d artifact set(s)", len(context.make_results)
        )
