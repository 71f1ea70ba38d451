"""Snapshot store: checkpoints make output for a later, decoupled publish.

Storage layout::

    {root}/
        {group_sha256[:32]}-{random8}/     one record per publish group
            0000-{set_sha256[:12]}.json    one file per artifact set,
            0001-{set_sha256[:12]}.json    numbered in make order

Each file holds the canonical JSON of one ``ArtifactSet`` with the keys
``artifacts``, ``platform``, ``arch`` and ``package_metadata``.

Records are written into a hidden staging directory and renamed into place
only once every file is on disk, so ``load_all`` never sees a half-written
record under its final name. The store assumes a single writer: two runs
persisting into the same root at once would clear each other's output.
"""

from __future__ import annotations

import json
import logging
import shutil
import uuid
from pathlib import Path

from pydantic import BaseModel, ConfigDict

from pubforge.core.hasher import artifact_set_digest, canonical_json_bytes, group_digest
from pubforge.models.artifacts import ArtifactSet, PublishGroup

logger = logging.getLogger(__name__)

_STAGING_PREFIX = ".staging-"


class SnapshotPersistError(RuntimeError):
    """Raised when the snapshot root cannot be cleared, created, or written."""


class SnapshotCorruptionError(RuntimeError):
    """Raised when a persisted record cannot be read back."""


class SnapshotRecord(BaseModel):
    """Summary of one record directory on disk."""

    model_config = ConfigDict(frozen=True)

    name: str
    path: Path
    artifact_set_count: int


class SnapshotStore:
    """Persists publish groups under *root* and loads them back.

    The first ``persist`` made through a store instance wipes the root, so
    a dry run never mixes its output with leftovers from an earlier one.
    Collecting several runs for one resume is done by moving record
    directories around between runs.

    Parameters
    ----------
    root:
        The snapshot root directory. Created on first ``persist``.
    """

    def __init__(self, root: Path) -> None:
        self._root = Path(root)
        self._cleared = False

    @property
    def root(self) -> Path:
        return self._root

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    def persist(self, group: PublishGroup) -> Path:
        """Write *group* as a new record and return the record directory.

        Raises
        ------
        ValueError
            If *group* is empty.
        SnapshotPersistError
            If the root cannot be cleared or created, or a file cannot be
            written. No staging directory is left behind.
        """
        if not group:
            raise ValueError("Cannot persist an empty publish group")

        if not self._cleared:
            self.clear()
            self._cleared = True

        try:
            self._root.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise SnapshotPersistError(
                f"Cannot create snapshot root {self._root}: {exc}"
            ) from exc

        name = f"{group_digest(group)[:32]}-{uuid.uuid4().hex[:8]}"
        staging = self._root / f"{_STAGING_PREFIX}{name}"
        final = self._root / name

        try:
            staging.mkdir()
            for index, artifact_set in enumerate(group):
                target = staging / f"{index:04d}-{artifact_set_digest(artifact_set)[:12]}.json"
                target.write_bytes(
                    canonical_json_bytes(artifact_set.model_dump(mode="json"))
                )
            staging.rename(final)
        except OSError as exc:
            shutil.rmtree(staging, ignore_errors=True)
            raise SnapshotPersistError(
                f"Failed to write snapshot record {name}: {exc}"
            ) from exc

        logger.info(
            "Persisted %d artifact set(s) to snapshot record %s", len(group), name
        )
        return final

    def clear(self) -> None:
        """Remove everything under the snapshot root."""
        if not self._root.exists():
            return
        try:
            for entry in self._root.iterdir():
                if entry.is_dir() and not entry.is_symlink():
                    shutil.rmtree(entry)
                else:
                    entry.unlink()
        except OSError as exc:
            raise SnapshotPersistError(
                f"Cannot clear snapshot root {self._root}: {exc}"
            ) from exc
        logger.debug("Cleared snapshot root %s", self._root)

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def load_all(self) -> list[PublishGroup]:
        """Load every record under the root, one publish group per record.

        Records come back in sorted directory-name order; artifact sets
        within a record come back in the order they were written.

        Raises
        ------
        SnapshotCorruptionError
            If any record is empty or holds a file that is unreadable,
            not valid JSON, or not a valid artifact set. Nothing is
            returned in that case.
        """
        groups = [self._load_record(record_dir) for record_dir in self._record_dirs()]
        logger.info("Loaded %d snapshot record(s) from %s", len(groups), self._root)
        return groups

    def list_records(self) -> list[SnapshotRecord]:
        """Describe the records on disk without parsing them."""
        return [
            SnapshotRecord(
                name=record_dir.name,
                path=record_dir,
                artifact_set_count=sum(1 for _ in record_dir.glob("*.json")),
            )
            for record_dir in self._record_dirs()
        ]

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _record_dirs(self) -> list[Path]:
        if not self._root.is_dir():
            return []
        records: list[Path] = []
        for entry in sorted(self._root.iterdir()):
            if entry.name.startswith("."):
                logger.warning("Skipping unfinished snapshot entry %s", entry.name)
                continue
            if not entry.is_dir():
                logger.warning("Skipping stray file in snapshot root: %s", entry.name)
                continue
            records.append(entry)
        return records

    def _load_record(self, record_dir: Path) -> PublishGroup:
        entries = sorted(record_dir.iterdir())
        if not entries:
            raise SnapshotCorruptionError(f"Snapshot record {record_dir.name} is empty")

        group: PublishGroup = []
        for entry in entries:
            if not entry.is_file() or entry.suffix != ".json":
                raise SnapshotCorruptionError(
                    f"Unexpected entry {entry.name} in snapshot record {record_dir.name}"
                )
            try:
                data = json.loads(entry.read_bytes())
                group.append(ArtifactSet.model_validate(data))
            except (OSError, ValueError) as exc:
                raise SnapshotCorruptionError(
                    f"Cannot load {record_dir.name}/{entry.name}: {exc}"
                ) from exc
        return group
