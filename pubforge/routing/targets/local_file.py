"""Local file target: writes a JSON manifest for each published group.

Layout: {path}/{group_sha256[:16]}.json

The manifest lists the artifact sets handed to the target, serialized to
canonical JSON. Artifacts themselves are not copied. ``path`` comes from
the target's config entry; relative paths resolve against the run's
working directory.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from pubforge.core.hasher import canonical_json_bytes, group_digest
from pubforge.models.publish import PublishContext

logger = logging.getLogger(__name__)


class LocalFileTarget:
    """Writes one manifest file per publish call.

    Parameters
    ----------
    config:
        Target options. ``path`` sets the manifest directory; it defaults to
        ``<dir>/<out_dir>/publish-manifests``.
    """

    target_name = "local_file"

    def __init__(self, config: dict[str, Any] | None = None) -> None:
        self.config = dict(config or {})

    def manifest_dir(self, context: PublishContext) -> Path:
        configured = self.config.get("path")
        if configured:
            return Path(context.dir) / Path(configured)
        return Path(context.dir) / context.config.out_dir / "publish-manifests"

    def publish(self, context: PublishContext) -> None:
        """Write the manifest for ``context.make_results``."""
        target_dir = self.manifest_dir(context)
        target_dir.mkdir(parents=True, exist_ok=True)

        target_file = target_dir / f"{group_digest(context.make_results)[:16]}.json"
        data = {
            "project_name": context.config.project_name,
            "make_results": [s.model_dump(mode="json") for s in context.make_results],
        }
        target_file.write_bytes(canonical_json_bytes(data))

        logger.debug("LocalFileTarget: wrote %s", target_file)

    def list_manifests(self, context: PublishContext) -> list[Path]:
        """List manifest files written so far."""
        target_dir = self.manifest_dir(context)
        if not target_dir.exists():
            return []
        return sorted(target_dir.glob("*.json"))
