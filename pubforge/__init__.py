"""pubforge: publish orchestration for packaging pipelines.

Hands make output to pluggable publish targets, in order, one at a time.
A dry run checkpoints make output to a content-addressed snapshot
directory; a dry-run resume replays those snapshots through the targets
later, possibly on another machine.
"""

__version__ = "0.1.0"
__description__ = "Publish orchestrator with dry-run snapshots and resume"

from pubforge.routing.dispatcher import PublishDispatcher, publish
from pubforge.cli.app import app as cli

__all__ = ["PublishDispatcher", "publish", "cli", "__version__"]
