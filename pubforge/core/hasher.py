"""Canonical hashing helpers for snapshot naming and content addressing.

Snapshot record directories and the files inside them are named from the
SHA-256 of the canonical JSON form of what they hold, so two machines that
persist the same make output agree on its digest.
"""

from __future__ import annotations

import hashlib
import json
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from pubforge.models.artifacts import ArtifactSet


def canonical_json_bytes(obj: Any) -> bytes:
    """Produce canonical JSON bytes with stable key order.

    - sorted keys
    - no whitespace separators (",", ":")
    - ensure_ascii=True
    - UTF-8 encoding
    """
    return json.dumps(
        obj, sort_keys=True, separators=(",", ":"), ensure_ascii=True
    ).encode("utf-8")


def sha256_hex(data: bytes) -> str:
    """Return the SHA-256 hex digest of raw bytes."""
    return hashlib.sha256(data).hexdigest()


def artifact_set_digest(artifact_set: ArtifactSet) -> str:
    """SHA-256 of one artifact set's canonical JSON."""
    return sha256_hex(canonical_json_bytes(artifact_set.model_dump(mode="json")))


def group_digest(group: list[ArtifactSet]) -> str:
    """SHA-256 of canonical(ordered list of artifact sets).

    Order matters: the same sets produced in a different order hash
    differently.
    """
    payload = [artifact_set.model_dump(mode="json") for artifact_set in group]
    return sha256_hex(canonical_json_bytes(payload))
