"""pubforge data models: all Pydantic v2, all frozen (immutable)."""

from pubforge.models.artifacts import (
    ArtifactSet,
    PublishGroup,
    coerce_group,
    flatten_artifacts,
)
from pubforge.models.config import (
    BuildConfig,
    ConfigError,
    PublisherEntry,
    load_build_config,
)
from pubforge.models.publish import (
    MakeOptions,
    PublishContext,
    PublishMode,
    PublishOptions,
)
from pubforge.models.targets import (
    InstanceTarget,
    NamedTarget,
    TargetSpec,
    as_target_spec,
)

__all__ = [
    # artifacts
    "ArtifactSet",
    "PublishGroup",
    "coerce_group",
    "flatten_artifacts",
    # config
    "BuildConfig",
    "ConfigError",
    "PublisherEntry",
    "load_build_config",
    # publish
    "MakeOptions",
    "PublishContext",
    "PublishMode",
    "PublishOptions",
    # targets
    "InstanceTarget",
    "NamedTarget",
    "TargetSpec",
    "as_target_spec",
]
